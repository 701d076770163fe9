"""
main.py
=======
FastAPI application entry point for the character practice backend.

Run locally:
  uvicorn backend.main:app --reload --port 8000

The lifespan handler creates the expensive singletons (classifier model,
document-store client) once at startup; handlers receive them through
dependencies in deps.py and never re-create them per request.
"""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from dotenv import load_dotenv  # type: ignore
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from backend.api.auth import router as auth_router
from backend.api.health import router as health_router
from backend.api.predict import router as predict_router
from backend.api.progress import router as progress_router
from backend.config import Settings
from backend.errors import ClientError
from backend.schemas.response import fail
from backend.services.storage import create_store
from ml_models.predictor import load_model

# Load .env from project root (one level above this file's package)
load_dotenv(os.path.join(os.path.dirname(__file__), "..", ".env"))

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Lifespan: startup / shutdown
# ---------------------------------------------------------------------------

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialise singletons before first request."""
    settings: Settings = app.state.settings
    logger.info("Backend starting up (env=%s)…", settings.environment)

    app.state.store = create_store(settings)
    app.state.model = load_model(settings.model_url, settings.model_cache_dir)

    logger.info("All components initialised. Ready.")
    yield

    app.state.store.close()
    logger.info("Backend shutting down.")


# ---------------------------------------------------------------------------
# Error → fail envelope
# ---------------------------------------------------------------------------

def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request payload"
    first = errors[0]
    msg = str(first.get("msg", "Invalid value")).removeprefix("Value error, ")
    field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    return f"{field}: {msg}" if field else msg


async def client_error_handler(request: Request, exc: ClientError):
    return fail(exc.message, exc.status_code)


async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return fail(str(exc.detail), exc.status_code)


async def validation_error_handler(request: Request, exc: RequestValidationError):
    return fail(_validation_message(exc), 400)


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error("Unhandled error on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
    return fail("Internal server error", 500)


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()

    app = FastAPI(
        title       = "Character Practice API",
        description = (
            "Handwritten character classification, practice scores and "
            "progress tracking."
        ),
        version     = "1.0.0",
        docs_url    = "/docs",
        redoc_url   = "/redoc",
        lifespan    = lifespan,
    )
    app.state.settings = settings

    # ── CORS ──────────────────────────────────────────────────────────────
    app.add_middleware(
        CORSMiddleware,
        allow_origins     = settings.cors_origins,
        allow_credentials = True,
        allow_methods     = ["*"],
        allow_headers     = ["*"],
    )

    # ── Errors ────────────────────────────────────────────────────────────
    app.add_exception_handler(ClientError, client_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # ── Routers ───────────────────────────────────────────────────────────
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(predict_router)
    app.include_router(progress_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
