"""
api/predict.py
==============
POST /predict            (alias /v1/predict) — classify an uploaded image
POST /v2/predict         — record a pre-scored practice attempt
GET  /predict/histories  — list stored prediction records

Image flow:

  1. Reject uploads larger than MAX_IMAGE_BYTES with 413
  2. Classify (decode → resize → inference → label lookup)
  3. Store {id, userId?, result, suggestion, confidenceScore, createdAt}

Any failure in steps 2–3 is reported as a generic 400.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile, status

from backend.deps import get_current_user, get_model, get_optional_user, get_store
from backend.errors import ClientError, InputError, PayloadTooLargeError
from backend.schemas.requests import ScoredPredictionRequest
from backend.schemas.response import ScoreComparison, success
from backend.services.auth_service import TokenClaims
from backend.services.classification import classify
from backend.services.prediction_service import (
    ScoreOutcome, list_histories, record_image_prediction, record_scored_prediction,
)
from backend.services.storage import DocumentStore
from ml_models.predictor import ModelHandle

logger = logging.getLogger(__name__)

router = APIRouter(tags=["predict"])

MAX_IMAGE_BYTES = 1_048_576  # 1 MiB

PREDICTION_FAILED = "An error occurred while making the prediction"


# ---------------------------------------------------------------------------
# Image classification
# ---------------------------------------------------------------------------

@router.post("/predict")
@router.post("/v1/predict")
async def predict_image(
    image: UploadFile = File(..., description="Character image (≤1 MiB)"),
    user: Optional[TokenClaims] = Depends(get_optional_user),
    model: ModelHandle = Depends(get_model),
    store: DocumentStore = Depends(get_store),
):
    """Classify a handwritten character image and store the result."""
    too_large = PayloadTooLargeError(
        f"Payload content length greater than maximum allowed: {MAX_IMAGE_BYTES}"
    )
    if image.size is not None and image.size > MAX_IMAGE_BYTES:
        raise too_large
    # at most one byte past the limit is ever buffered
    content = await image.read(MAX_IMAGE_BYTES + 1)
    if len(content) > MAX_IMAGE_BYTES:
        raise too_large

    try:
        result = await asyncio.to_thread(classify, model, content)
        record = await asyncio.to_thread(
            record_image_prediction, store, result, user.uid if user else None
        )
    except InputError as exc:
        logger.info("Rejected image upload: %s", exc.message)
        raise InputError(PREDICTION_FAILED) from exc
    except Exception as exc:
        logger.error("Image prediction failed: %s", exc, exc_info=True)
        raise InputError(PREDICTION_FAILED) from exc

    return success(record, "Model is predicted successfully", status.HTTP_201_CREATED)


# ---------------------------------------------------------------------------
# Pre-scored attempts
# ---------------------------------------------------------------------------

@router.post("/v2/predict")
async def predict_scored(
    payload: ScoredPredictionRequest,
    user: TokenClaims = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    """Create, raise, or keep the stored score for (user, category, character)."""
    scored = await asyncio.to_thread(record_scored_prediction, store, user.uid, payload)

    if scored.outcome is ScoreOutcome.CREATED:
        return success(scored.record, "Prediction saved successfully", status.HTTP_201_CREATED)

    if scored.outcome is ScoreOutcome.UPDATED:
        return success(
            scored.record,
            f"Confidence score updated from {scored.stored_score:g} to {scored.submitted_score:g}",
        )

    return success(
        ScoreComparison(
            record          = scored.record,
            stored_score    = scored.stored_score,
            submitted_score = scored.submitted_score,
        ),
        f"Stored confidence score {scored.stored_score:g} is not lower than "
        f"submitted score {scored.submitted_score:g}; record unchanged",
    )


# ---------------------------------------------------------------------------
# Histories
# ---------------------------------------------------------------------------

@router.get("/predict/histories")
async def histories(
    user: Optional[TokenClaims] = Depends(get_optional_user),
    store: DocumentStore = Depends(get_store),
):
    """The caller's records when authenticated, every record otherwise."""
    try:
        items = await asyncio.to_thread(list_histories, store, user.uid if user else None)
    except Exception as exc:
        logger.error("Fetching prediction histories failed: %s", exc, exc_info=True)
        raise ClientError("Failed to fetch prediction histories", 500) from exc
    return success(items)
