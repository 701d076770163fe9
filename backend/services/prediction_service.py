"""
prediction_service.py
=====================
Persistence rules for prediction records.

Two write paths exist:

  • image predictions   — one new record per classified upload
  • scored predictions  — at most one record per (userId, category,
    character); a later submission replaces the stored score only when it is
    strictly higher

The scored path reads then writes without a transaction. Record ids are
derived from the (userId, category, character) triple, so concurrent first
submissions converge on the same document instead of creating duplicates;
which of two racing scores survives is still last-writer-wins.
"""

from __future__ import annotations

import enum
import logging
import uuid
from dataclasses import dataclass
from typing import List, Optional

from backend.errors import InputError
from backend.schemas.requests import ScoredPredictionRequest
from backend.schemas.response import (
    HistoryItem, PredictionHistory, PredictionRecord, utc_now,
)
from backend.services.classification import Classification
from backend.services.curriculum import category_contains, is_known_category
from backend.services.storage import PREDICTIONS, DocumentStore

logger = logging.getLogger(__name__)

_ATTEMPT_NAMESPACE = uuid.UUID("9b1f3c2e-5d4a-4e8b-a6f0-2c7d1e9b8a53")


class ScoreOutcome(enum.Enum):
    CREATED = "created"
    UPDATED = "updated"
    KEPT    = "kept"


@dataclass
class ScoredResult:
    outcome: ScoreOutcome
    record: PredictionRecord
    stored_score: float
    submitted_score: float


def attempt_id(user_id: str, category: str, character: str) -> str:
    return str(uuid.uuid5(_ATTEMPT_NAMESPACE, f"{user_id}|{category}|{character}"))


def _to_record(doc: dict) -> PredictionRecord:
    return PredictionRecord.model_validate(doc)


def _to_doc(record: PredictionRecord) -> dict:
    return record.model_dump(by_alias=True, exclude_none=True)


# ---------------------------------------------------------------------------
# Image predictions
# ---------------------------------------------------------------------------

def record_image_prediction(
    store: DocumentStore,
    classification: Classification,
    user_id: Optional[str] = None,
) -> PredictionRecord:
    record = PredictionRecord(
        id               = str(uuid.uuid4()),
        user_id          = user_id,
        result           = classification.label,
        suggestion       = classification.explanation,
        confidence_score = classification.confidence_score,
    )
    store.put(PREDICTIONS, record.id, _to_doc(record))
    return record


# ---------------------------------------------------------------------------
# Scored predictions
# ---------------------------------------------------------------------------

def record_scored_prediction(
    store: DocumentStore,
    user_id: str,
    attempt: ScoredPredictionRequest,
) -> ScoredResult:
    if not is_known_category(attempt.category):
        raise InputError(f"Unknown category: {attempt.category}")
    if not category_contains(attempt.category, attempt.character):
        raise InputError(
            f"Character {attempt.character} is not part of category {attempt.category}"
        )

    submitted = attempt.confidence_score
    existing = store.query(PREDICTIONS, {
        "userId":    user_id,
        "category":  attempt.category,
        "character": attempt.character,
    })

    if not existing:
        record = PredictionRecord(
            id               = attempt_id(user_id, attempt.category, attempt.character),
            user_id          = user_id,
            category         = attempt.category,
            character        = attempt.character,
            confidence_score = submitted,
            result           = attempt.result or attempt.character,
            suggestion       = attempt.suggestion,
        )
        record.updated_at = record.created_at
        store.put(PREDICTIONS, record.id, _to_doc(record))
        return ScoredResult(ScoreOutcome.CREATED, record, submitted, submitted)

    if len(existing) > 1:
        logger.warning(
            "%d records for user=%s category=%s character=%s; using highest score",
            len(existing), user_id, attempt.category, attempt.character,
        )
    current = _to_record(max(existing, key=lambda d: d.get("confidenceScore") or 0.0))
    stored = current.confidence_score or 0.0

    if submitted <= stored:
        return ScoredResult(ScoreOutcome.KEPT, current, stored, submitted)

    current.confidence_score = submitted
    if attempt.result is not None:
        current.result = attempt.result
    if attempt.suggestion is not None:
        current.suggestion = attempt.suggestion
    current.updated_at = utc_now()
    store.put(PREDICTIONS, current.id, _to_doc(current))
    return ScoredResult(ScoreOutcome.UPDATED, current, stored, submitted)


# ---------------------------------------------------------------------------
# Histories
# ---------------------------------------------------------------------------

def list_histories(store: DocumentStore, user_id: Optional[str] = None) -> List[HistoryItem]:
    filters = {"userId": user_id} if user_id else None
    docs = sorted(
        store.query(PREDICTIONS, filters),
        key=lambda d: d.get("createdAt", ""),
        reverse=True,
    )
    items: List[HistoryItem] = []
    for doc in docs:
        record = _to_record(doc)
        items.append(HistoryItem(
            id      = record.id,
            history = PredictionHistory(
                id               = record.id,
                result           = record.result,
                suggestion       = record.suggestion,
                created_at       = record.created_at,
                category         = record.category,
                character        = record.character,
                confidence_score = record.confidence_score,
            ),
        ))
    return items
