"""Shared utilities used by multiple modules."""

import math
from typing import Tuple

import numpy as np

from PySide6.QtGui import QColor, QImage


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounded up (like JS ``Math.round``)."""
    return int(math.floor(value + 0.5))


# ── Colours ─────────────────────────────────────────────────────────


def parse_hex(hex_str: str) -> Tuple[int, int, int]:
    """Parse ``#rgb`` / ``#rrggbb`` (leading ``#`` optional) into an RGB tuple."""
    s = hex_str.strip().lstrip("#")
    if len(s) == 3:
        s = "".join(ch * 2 for ch in s)
    if len(s) != 6:
        raise ValueError(f"Invalid hex colour: {hex_str!r}")
    try:
        value = int(s, 16)
    except ValueError:
        raise ValueError(f"Invalid hex colour: {hex_str!r}") from None
    return (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF


def hex_to_color(hex_str: str, opacity_pct: float = 100.0) -> QColor:
    """Convert a hex colour plus an opacity percentage to a ``QColor``."""
    r, g, b = parse_hex(hex_str)
    pct = min(max(opacity_pct, 0.0), 100.0)
    return QColor(r, g, b, round_half_up(pct * 255 / 100))


# ── numpy ↔ QImage ──────────────────────────────────────────────────


def qimage_to_rgba(image: QImage) -> np.ndarray:
    """Copy a ``QImage`` into an ``(h, w, 4)`` uint8 RGBA array (straight alpha)."""
    img = image.convertToFormat(QImage.Format.Format_RGBA8888)
    w, h = img.width(), img.height()
    bpl = img.bytesPerLine()
    arr = np.frombuffer(img.constBits(), dtype=np.uint8).reshape(h, bpl)
    return arr[:, :w * 4].reshape(h, w, 4).copy()


def rgba_to_qimage(arr: np.ndarray) -> QImage:
    """Wrap an ``(h, w, 4)`` uint8 RGBA array as an independent ``QImage``."""
    arr = np.ascontiguousarray(arr, dtype=np.uint8)
    h, w, _ = arr.shape
    return QImage(arr.data, w, h, arr.strides[0], QImage.Format.Format_RGBA8888).copy()
