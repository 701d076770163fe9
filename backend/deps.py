"""
deps.py
=======
FastAPI dependencies: shared singletons from app.state and the credential
extraction policy.

Credential precedence:
  1. ``Authorization: Bearer <token>`` header (other schemes are ignored)
  2. ``token`` cookie (base64-JSON encoded JWT)
  3. none → "Missing token" (401) for protected routes, anonymous otherwise

A credential that is present but fails signature / expiry checks is always
rejected with "Invalid token" (401), even on routes that allow anonymous
access.
"""

from __future__ import annotations

from typing import Optional

from fastapi import Request

from backend.config import Settings
from backend.errors import AuthenticationError
from backend.services.auth_service import (
    COOKIE_NAME, INVALID_TOKEN, TokenClaims, decode_cookie_value, verify_token,
)
from backend.services.storage import DocumentStore
from ml_models.predictor import ModelHandle


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> DocumentStore:
    return request.app.state.store


def get_model(request: Request) -> ModelHandle:
    return request.app.state.model


def extract_credential(request: Request) -> Optional[str]:
    header = request.headers.get("authorization")
    if header:
        scheme, _, token = header.partition(" ")
        if scheme.lower() == "bearer":
            if not token.strip():
                raise AuthenticationError(INVALID_TOKEN)
            return token.strip()

    cookie = request.cookies.get(COOKIE_NAME)
    if cookie:
        return decode_cookie_value(cookie)
    return None


def get_optional_user(request: Request) -> Optional[TokenClaims]:
    token = extract_credential(request)
    if token is None:
        return None
    settings = get_settings(request)
    return verify_token(token, settings.jwt_secret_key, settings.jwt_algorithm)


def get_current_user(request: Request) -> TokenClaims:
    claims = get_optional_user(request)
    if claims is None:
        raise AuthenticationError("Missing token")
    return claims
