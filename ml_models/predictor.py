"""
predictor.py
============
Loads the pre-trained character classifier and exposes predict() for use by
the classification service.

MODEL_URL may point at a TorchScript export over http(s) (downloaded once
into the cache directory) or at a local file. If no MODEL_URL is configured
(dev / demo mode), an untrained CharacterClassifier is used and predictions
are illustrative only.

The loaded handle is created once by the FastAPI lifespan handler and shared
by every request; nothing here keeps module-level state.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple
from urllib.parse import urlparse

import torch

from ml_models.architecture import CharacterClassifier
from ml_models.labels import CLASS_LABELS

logger = logging.getLogger(__name__)


class ModelLoadError(RuntimeError):
    """Raised when the configured model cannot be fetched or deserialised."""


@dataclass
class ModelHandle:
    model: torch.nn.Module
    demo_mode: bool
    source: str
    device: torch.device = torch.device("cpu")


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def _is_remote(model_url: str) -> bool:
    return urlparse(model_url).scheme in ("http", "https")


def _download(model_url: str, cache_dir: str) -> Path:
    """Fetch *model_url* into *cache_dir* unless it is already cached."""
    cache = Path(cache_dir)
    cache.mkdir(parents=True, exist_ok=True)
    filename = os.path.basename(urlparse(model_url).path) or "model.pt"
    target = cache / filename
    if target.exists():
        logger.info("Using cached model %s", target)
        return target

    logger.info("Downloading model from %s", model_url)
    torch.hub.download_url_to_file(model_url, str(target), progress=False)
    return target


def load_model(model_url: str = "", cache_dir: str = "./model_cache") -> ModelHandle:
    """
    Initialise the classifier. Called once from the FastAPI lifespan handler.
    """
    device = torch.device("cuda" if torch.cuda.is_available() else "cpu")

    if not model_url:
        logger.warning(
            "MODEL_URL not set; classifier running in demo mode (random weights)."
        )
        model = CharacterClassifier().to(device)
        model.eval()
        return ModelHandle(model=model, demo_mode=True, source="demo", device=device)

    try:
        path = _download(model_url, cache_dir) if _is_remote(model_url) else Path(model_url)
        model = torch.jit.load(str(path), map_location=device)
    except Exception as exc:
        raise ModelLoadError(f"Could not load model from {model_url}: {exc}") from exc

    model.eval()
    logger.info("Loaded TorchScript classifier from %s", model_url)
    return ModelHandle(model=model, demo_mode=False, source=model_url, device=device)


# ---------------------------------------------------------------------------
# Prediction
# ---------------------------------------------------------------------------

def predict(handle: ModelHandle, tensor: torch.Tensor) -> Tuple[str, float]:
    """
    Run inference on a (1, 3, H, W) tensor.

    Returns
    -------
    (label, confidence_score)
    confidence_score is the winning class probability expressed as a
    percentage, e.g. ("七", 93.12).
    """
    with torch.no_grad():
        logits = handle.model(tensor.to(handle.device))
        probs = torch.softmax(logits, dim=-1).squeeze(0)

    if probs.numel() != len(CLASS_LABELS):
        raise ValueError(
            f"model produced {probs.numel()} scores, expected {len(CLASS_LABELS)}"
        )

    pred_idx = int(probs.argmax().item())
    confidence = float(probs[pred_idx].item()) * 100
    label = CLASS_LABELS[pred_idx]

    logger.debug(
        "Classification (%s): %s (conf=%.2f)",
        "DEMO" if handle.demo_mode else "LIVE", label, confidence,
    )
    return label, confidence
