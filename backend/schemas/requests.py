"""
schemas/requests.py
===================
Typed request bodies. Validation failures surface as 400 fail envelopes via
the RequestValidationError handler in main.py.
"""

from __future__ import annotations

from typing import Optional

from pydantic import EmailStr, Field, model_validator

from backend.schemas.base import CamelModel


class RegisterRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    confirm_password: str
    full_name: str = Field(..., min_length=1, max_length=120)

    @model_validator(mode="after")
    def _passwords_match(self) -> "RegisterRequest":
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ScoredPredictionRequest(CamelModel):
    """A practice attempt that has already been scored client-side."""
    category: str = Field(..., min_length=1)
    character: str = Field(..., min_length=1)
    confidence_score: float = Field(..., ge=0, le=100)
    result: Optional[str] = None
    suggestion: Optional[str] = None
