"""
Record Image Export.

Writes a single decoded record as a grayscale PNG for visual inspection.
"""

from __future__ import annotations

import math
from pathlib import Path

import numpy as np
from PIL import Image

from ..exceptions import FormatError
from .batcher import Record


def record_to_image(
    record: Record, normalized: bool = True, shape: tuple[int, int] | None = None
) -> Image.Image:
    """
    Converts a record's feature vector back to an 8-bit grayscale image.

    Args:
        record: Record to render.
        normalized: Whether features are in [0, 1] (scaled back by 255).
        shape: ``(rows, columns)``; inferred as a square when omitted.

    Raises:
        FormatError: If the vector cannot be reshaped to ``shape``.
    """
    size = record.features.size
    if shape is None:
        side = math.isqrt(size)
        shape = (side, side)
    if shape[0] * shape[1] != size:
        raise FormatError(f"Cannot reshape {size} features to {shape[0]}x{shape[1]}")

    pixels = record.features * 255.0 if normalized else record.features
    grid = np.clip(np.rint(pixels), 0, 255).astype(np.uint8).reshape(shape)
    return Image.fromarray(grid)


def save_record_image(
    record: Record,
    path: Path,
    normalized: bool = True,
    shape: tuple[int, int] | None = None,
) -> Path:
    """Renders a record and saves it as PNG at ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    record_to_image(record, normalized=normalized, shape=shape).save(path, format="PNG")
    return path
