"""
api/auth.py
===========
POST /register, POST /login, POST /logout, GET /account
"""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, Depends, status

from backend.config import Settings
from backend.deps import get_current_user, get_settings, get_store
from backend.errors import NotFoundError
from backend.schemas.requests import LoginRequest, RegisterRequest
from backend.schemas.response import AccountInfo, LoginResult, success
from backend.services import auth_service
from backend.services.auth_service import COOKIE_NAME, TokenClaims
from backend.services.storage import USERS, DocumentStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/register")
async def register(
    payload: RegisterRequest,
    store: DocumentStore = Depends(get_store),
):
    profile = await asyncio.to_thread(
        auth_service.register, store, payload.email, payload.password, payload.full_name
    )
    return success(profile, "User registered successfully", status.HTTP_201_CREATED)


@router.post("/login")
async def login(
    payload: LoginRequest,
    store: DocumentStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
):
    profile, token = await asyncio.to_thread(
        auth_service.login, store, payload.email, payload.password, settings
    )
    response = success(
        LoginResult(token=token, **profile.model_dump()),
        "Login successful",
    )
    response.set_cookie(
        key      = COOKIE_NAME,
        value    = auth_service.encode_cookie_value(token),
        max_age  = settings.token_ttl_seconds,
        path     = "/",
        httponly = True,
        secure   = settings.is_production,
        samesite = "lax",
    )
    return response


@router.post("/logout")
async def logout():
    response = success(message="Logged out")
    response.delete_cookie(COOKIE_NAME, path="/")
    return response


@router.get("/account")
async def account(
    user: TokenClaims = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    record = await asyncio.to_thread(store.get, USERS, user.uid)
    if record is None:
        raise NotFoundError("User not found")
    return success(AccountInfo(full_name=record.get("fullName", "")))
