# backend/schemas/__init__.py
from backend.schemas.requests import (
    LoginRequest,
    RegisterRequest,
    ScoredPredictionRequest,
)
from backend.schemas.response import (
    AccountInfo,
    CategoryProgress,
    HistoryItem,
    LoginResult,
    PredictionHistory,
    PredictionRecord,
    ProgressReport,
    ScoreComparison,
    UserProfile,
    envelope,
    fail,
    success,
)

__all__ = [
    "LoginRequest", "RegisterRequest", "ScoredPredictionRequest",
    "AccountInfo", "CategoryProgress", "HistoryItem", "LoginResult",
    "PredictionHistory", "PredictionRecord", "ProgressReport",
    "ScoreComparison", "UserProfile", "envelope", "fail", "success",
]
