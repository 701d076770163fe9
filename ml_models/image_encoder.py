"""
image_encoder.py
================
Decode raw upload bytes into the input tensor expected by the character
classifier.

Steps:
  • Pillow decodes the bytes (PNG, JPEG, …) and converts to RGB
  • Nearest-neighbour resize to INPUT_SIZE × INPUT_SIZE
  • ToTensor → float32 in 0..1, then a batch dimension is added

Output tensor shape: (1, 3, 224, 224)
"""

from __future__ import annotations

import io

import torch
import torchvision.transforms as T
from PIL import Image, UnidentifiedImageError

from ml_models.architecture import INPUT_SIZE


class ImageDecodeError(ValueError):
    """Raised when the uploaded bytes are not a decodable image."""


_TRANSFORM = T.Compose([
    T.Resize((INPUT_SIZE, INPUT_SIZE), interpolation=T.InterpolationMode.NEAREST),
    T.ToTensor(),
])


def decode_image(image_bytes: bytes) -> Image.Image:
    if not image_bytes:
        raise ImageDecodeError("empty image payload")
    try:
        img = Image.open(io.BytesIO(image_bytes))
        img.load()
    except (UnidentifiedImageError, OSError) as exc:
        raise ImageDecodeError(str(exc)) from exc
    return img.convert("RGB")


def encode_image(image_bytes: bytes) -> torch.Tensor:
    """
    Decode *image_bytes* and return a (1, 3, INPUT_SIZE, INPUT_SIZE) tensor.

    Raises ImageDecodeError if Pillow cannot read the payload.
    """
    img = decode_image(image_bytes)
    return _TRANSFORM(img).unsqueeze(0)
