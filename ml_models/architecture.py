"""
architecture.py
===============
PyTorch convolutional network for handwritten character classification.

Architecture:

  Input  →  (batch, 3, 224, 224)   [RGB image, values in 0..1]
         ↓
  Conv2D Block × 4                 [stroke / shape features]
    Conv2d(in, out, kernel=3) → BatchNorm2d → ReLU → MaxPool2d(2)
    Channels: 3 → 32 → 64 → 128 → 256
         ↓
  Global Average Pool              [spatial aggregation]
         ↓
  Dense 256 → 128 → len(CLASS_LABELS)
    ReLU → Dropout(0.3) between layers
         ↓
  Raw logits                       [softmax applied in predictor.py]

Production deployments ship a TorchScript export of a trained network via
MODEL_URL; this class is the in-process fallback used in demo mode.
"""

from __future__ import annotations

import torch
import torch.nn as nn
import torch.nn.functional as F

from ml_models.labels import CLASS_LABELS

INPUT_SIZE = 224


class ConvBlock(nn.Module):
    """Conv2d → BatchNorm → ReLU → MaxPool."""

    def __init__(self, in_channels: int, out_channels: int, kernel: int = 3):
        super().__init__()
        pad = (kernel - 1) // 2
        self.conv  = nn.Conv2d(in_channels, out_channels, kernel_size=kernel, padding=pad)
        self.bn    = nn.BatchNorm2d(out_channels)
        self.pool  = nn.MaxPool2d(2)

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        return self.pool(F.relu(self.bn(self.conv(x))))


class CharacterClassifier(nn.Module):
    """
    Small CNN classifier for single handwritten characters.

    Input  : (batch, 3, 224, 224)
    Output : (batch, num_classes) — raw logits over CLASS_LABELS
    """

    def __init__(self, num_classes: int = len(CLASS_LABELS), dropout: float = 0.3):
        super().__init__()

        self.features = nn.Sequential(
            ConvBlock(3,   32),    # (batch, 32,  112, 112)
            ConvBlock(32,  64),    # (batch, 64,  56,  56)
            ConvBlock(64,  128),   # (batch, 128, 28,  28)
            ConvBlock(128, 256),   # (batch, 256, 14,  14)
        )
        self.dropout = nn.Dropout(dropout)
        self.dense1  = nn.Linear(256, 128)
        self.dense2  = nn.Linear(128, num_classes)

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        features = self.features(x)
        pooled = features.mean(dim=(2, 3))    # (batch, 256)
        out = self.dropout(F.relu(self.dense1(pooled)))
        return self.dense2(out)
