"""
schemas/response.py
===================
Pydantic v2 models for every JSON payload the API returns, plus the
``{status, message?, data?}`` envelope helpers.

Fields are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, List, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from backend.schemas.base import CamelModel


def utc_now() -> str:
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

class UserProfile(CamelModel):
    uid: str
    email: str
    full_name: str


class LoginResult(UserProfile):
    token: str


class AccountInfo(CamelModel):
    full_name: str


# ---------------------------------------------------------------------------
# Predictions
# ---------------------------------------------------------------------------

class PredictionRecord(CamelModel):
    id: str
    user_id: Optional[str] = None
    category: Optional[str] = None
    character: Optional[str] = None
    confidence_score: Optional[float] = None
    result: Optional[str] = None
    suggestion: Optional[str] = None
    created_at: str = Field(default_factory=utc_now)
    updated_at: Optional[str] = None


class ScoreComparison(CamelModel):
    """Returned when a submitted score does not beat the stored one."""
    record: PredictionRecord
    stored_score: float
    submitted_score: float


class PredictionHistory(CamelModel):
    id: str
    result: Optional[str] = None
    suggestion: Optional[str] = None
    created_at: str
    category: Optional[str] = None
    character: Optional[str] = None
    confidence_score: Optional[float] = None


class HistoryItem(CamelModel):
    id: str
    history: PredictionHistory


# ---------------------------------------------------------------------------
# Progress
# ---------------------------------------------------------------------------

class CategoryProgress(CamelModel):
    category: str
    completed_characters: int
    total_characters: int
    percentage: float
    is_complete: bool


class ProgressReport(CamelModel):
    categories: List[CategoryProgress]
    overall: CategoryProgress


# ---------------------------------------------------------------------------
# Envelope
# ---------------------------------------------------------------------------

def envelope(
    status: str,
    message: Optional[str] = None,
    data: Any = None,
) -> dict:
    body: dict = {"status": status}
    if message is not None:
        body["message"] = message
    if data is not None:
        if isinstance(data, BaseModel):
            data = data.model_dump(by_alias=True, exclude_none=True)
        elif isinstance(data, list):
            data = [
                d.model_dump(by_alias=True, exclude_none=True) if isinstance(d, BaseModel) else d
                for d in data
            ]
        body["data"] = data
    return body


def success(
    data: Any = None,
    message: Optional[str] = None,
    status_code: int = 200,
) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=jsonable_encoder(envelope("success", message, data)))


def fail(message: str, status_code: int = 400) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=envelope("fail", message))
