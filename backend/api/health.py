"""
api/health.py
=============
GET /api/health — liveness and readiness probe.
"""

import asyncio

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/api/health")
async def health_check(request: Request):
    """Return service status and component readiness flags."""
    model = getattr(request.app.state, "model", None)
    store = getattr(request.app.state, "store", None)
    store_ok = await asyncio.to_thread(store.ping) if store is not None else False

    return {
        "status":          "ok",
        "model_loaded":    model is not None,
        "model_demo_mode": model.demo_mode if model is not None else True,
        "model_source":    model.source if model is not None else None,
        "storage_backend": store.backend if store is not None else None,
        "storage_ready":   store_ok,
        "api_version":     "1.0.0",
    }
