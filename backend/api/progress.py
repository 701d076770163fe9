"""
api/progress.py
===============
GET /progress — per-category completion for the authenticated user.
"""

from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends

from backend.deps import get_current_user, get_store
from backend.schemas.response import success
from backend.services.auth_service import TokenClaims
from backend.services.progress import compute_progress
from backend.services.storage import PREDICTIONS, DocumentStore

router = APIRouter(tags=["progress"])


@router.get("/progress")
async def progress(
    user: TokenClaims = Depends(get_current_user),
    store: DocumentStore = Depends(get_store),
):
    records = await asyncio.to_thread(store.query, PREDICTIONS, {"userId": user.uid})
    return success(compute_progress(records))
