"""
classification.py
=================
Image bytes → (label, confidence, explanation) using the shared model handle.
Pure function of the model and the bytes; persistence is the caller's job.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from backend.errors import InputError
from ml_models.image_encoder import ImageDecodeError, encode_image
from ml_models.labels import explain
from ml_models.predictor import ModelHandle, predict

logger = logging.getLogger(__name__)


@dataclass
class Classification:
    label: str
    confidence_score: float
    explanation: str


def classify(handle: ModelHandle, image_bytes: bytes) -> Classification:
    try:
        tensor = encode_image(image_bytes)
    except ImageDecodeError as exc:
        raise InputError(f"Invalid image: {exc}") from exc

    label, confidence = predict(handle, tensor)
    return Classification(
        label            = label,
        confidence_score = round(confidence, 4),
        explanation      = explain(label),
    )
