"""
auth_service.py
===============
User registration, credential checks and stateless session tokens.

  • Passwords are hashed with a per-user random salt (werkzeug.security).
  • Session tokens are HS256 JWTs (PyJWT) carrying uid + email claims and a
    fixed expiry; validity is decided by signature and ``exp`` alone, nothing
    is stored server-side.
  • The ``token`` cookie carries the same JWT, base64-JSON encoded.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Optional, Tuple

import jwt
from jwt import InvalidTokenError
from werkzeug.security import check_password_hash, generate_password_hash

from backend.config import Settings
from backend.errors import AuthenticationError, InputError, InvalidCredentialsError
from backend.schemas.response import UserProfile, utc_now
from backend.services.storage import USERS, DocumentStore, DuplicateRecordError

logger = logging.getLogger(__name__)

COOKIE_NAME = "token"
INVALID_TOKEN = "Invalid token"


@dataclass
class TokenClaims:
    uid: str
    email: str


def _public_profile(record: dict) -> UserProfile:
    return UserProfile(
        uid       = record["uid"],
        email     = record["email"],
        full_name = record.get("fullName", ""),
    )


def find_user_by_email(store: DocumentStore, email: str) -> Optional[dict]:
    matches = store.query(USERS, {"email": email})
    return matches[0] if matches else None


# ---------------------------------------------------------------------------
# Registration / login
# ---------------------------------------------------------------------------

def register(store: DocumentStore, email: str, password: str, full_name: str) -> UserProfile:
    email = email.strip().lower()
    if find_user_by_email(store, email) is not None:
        raise InputError("Email is already registered")

    uid = str(uuid.uuid4())
    record = {
        "uid":          uid,
        "email":        email,
        "fullName":     full_name.strip(),
        "passwordHash": generate_password_hash(password),
        "createdAt":    utc_now(),
    }
    try:
        store.insert(USERS, uid, record, unique=("email",))
    except DuplicateRecordError as exc:
        raise InputError("Email is already registered") from exc
    logger.info("Registered user %s", uid)
    return _public_profile(record)


def login(store: DocumentStore, email: str, password: str, settings: Settings) -> Tuple[UserProfile, str]:
    """Check credentials and return (profile, signed token)."""
    user = find_user_by_email(store, email.strip().lower())
    if user is None or not check_password_hash(user.get("passwordHash", ""), password):
        raise InvalidCredentialsError()

    token = issue_token(
        user["uid"], user["email"],
        secret      = settings.jwt_secret_key,
        ttl_minutes = settings.jwt_expiration_minutes,
        algorithm   = settings.jwt_algorithm,
    )
    return _public_profile(user), token


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------

def issue_token(
    uid: str,
    email: str,
    secret: str,
    ttl_minutes: int = 60,
    algorithm: str = "HS256",
    now: Optional[datetime] = None,
) -> str:
    issued = now or datetime.now(UTC)
    payload = {
        "uid":   uid,
        "email": email,
        "iat":   issued,
        "exp":   issued + timedelta(minutes=ttl_minutes),
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def verify_token(token: str, secret: str, algorithm: str = "HS256") -> TokenClaims:
    try:
        payload = jwt.decode(
            token, secret,
            algorithms=[algorithm],
            options={"require": ["exp", "uid"]},
        )
    except InvalidTokenError as exc:
        logger.info("Token rejected: %s", exc)
        raise AuthenticationError(INVALID_TOKEN) from exc

    return TokenClaims(
        uid   = str(payload["uid"]),
        email = str(payload.get("email", "")),
    )


# ---------------------------------------------------------------------------
# Cookie encoding (URL-safe base64 of the JSON-encoded token string, unpadded)
# ---------------------------------------------------------------------------

def encode_cookie_value(token: str) -> str:
    raw = base64.urlsafe_b64encode(json.dumps(token).encode("utf-8"))
    return raw.decode("ascii").rstrip("=")


def decode_cookie_value(raw: str) -> str:
    try:
        padded = raw + "=" * (-len(raw) % 4)
        value = json.loads(base64.urlsafe_b64decode(padded).decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, ValueError) as exc:
        raise AuthenticationError(INVALID_TOKEN) from exc
    if not isinstance(value, str):
        raise AuthenticationError(INVALID_TOKEN)
    return value
