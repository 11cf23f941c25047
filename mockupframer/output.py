"""Output composition — background, drop shadow and final canvas size.

Takes a finished content layer and an :class:`AppearanceConfig` and
returns a brand-new output surface.  Nothing is kept between calls, so
the same inputs always give the same pixels.
"""

import logging
import math
from typing import Optional, Tuple

import cv2
import numpy as np

from PySide6.QtCore import QPointF, QRectF
from PySide6.QtGui import QColor, QImage, QPainter

from .content import ContentLayer
from .geometry import cover_fit
from .imaging import blank_image
from .models import AppearanceConfig, BackgroundConfig, Bounds
from .utils import hex_to_color, qimage_to_rgba, rgba_to_qimage, round_half_up

logger = logging.getLogger(__name__)


def compute_output_size(content_w: int, content_h: int, padding_px: float,
                        aspect_ratio: Optional[float] = None) -> Tuple[int, int]:
    """Final canvas size for a content layer.

    Padding is added on every side.  With an *aspect_ratio* (W/H) the
    short dimension grows until the ratio holds; the content + padding
    envelope is never cut.
    """
    pad = math.floor(padding_px)
    req_w = max(1, content_w + 2 * pad)
    req_h = max(1, content_h + 2 * pad)
    if not aspect_ratio:
        return req_w, req_h

    final_h = req_h
    final_w = round_half_up(aspect_ratio * final_h)
    if final_w < req_w:
        final_w = req_w
        final_h = max(req_h, round_half_up(final_w / aspect_ratio))
    return final_w, final_h


# ── Background ──────────────────────────────────────────────────────


def paint_background(painter: QPainter, w: float, h: float,
                     background: BackgroundConfig,
                     image: Optional[QImage] = None) -> None:
    """Paint the canvas background — cover-fitted image, flat colour or nothing."""
    if image is not None and not image.isNull():
        dest = cover_fit(image.width(), image.height(), Bounds(0, 0, w, h))
        painter.drawImage(QRectF(dest.x, dest.y, dest.w, dest.h), image)
    elif background.enabled:
        painter.fillRect(QRectF(0, 0, w, h), hex_to_color(background.color_hex))


# ── Shadow ──────────────────────────────────────────────────────────


def render_shadow(image: QImage, color: QColor, blur_px: float) -> Tuple[QImage, int]:
    """Blurred, tinted silhouette of *image*.

    Returns ``(shadow, margin)``; the shadow is larger than *image* by
    *margin* on every side so the blur is not cut off.  Blur follows
    the canvas convention: sigma is half the blur radius.
    """
    sigma = max(blur_px, 0.0) / 2
    margin = int(math.ceil(sigma * 3))
    alpha = qimage_to_rgba(image)[:, :, 3].astype(np.float32)
    alpha = np.pad(alpha, margin)
    if sigma > 0:
        alpha = cv2.GaussianBlur(alpha, (0, 0), sigmaX=sigma, sigmaY=sigma)

    h, w = alpha.shape
    rgba = np.empty((h, w, 4), dtype=np.uint8)
    rgba[:, :, 0] = color.red()
    rgba[:, :, 1] = color.green()
    rgba[:, :, 2] = color.blue()
    rgba[:, :, 3] = np.clip(alpha * (color.alpha() / 255.0) + 0.5, 0, 255).astype(np.uint8)
    return rgba_to_qimage(rgba), margin


# ── Public API ──────────────────────────────────────────────────────


def compose(content: ContentLayer, appearance: AppearanceConfig,
            background_image: Optional[QImage] = None) -> QImage:
    """Place *content* on a fresh output surface.

    Draws:  background  →  drop shadow  →  content (centred).
    *background_image* must already be decoded so the background is
    complete before the content goes on top.
    """
    final_w, final_h = compute_output_size(
        content.width, content.height,
        appearance.padding_px, appearance.aspect_ratio,
    )
    surface = blank_image(final_w, final_h)
    painter = QPainter(surface)
    painter.setRenderHint(QPainter.RenderHint.Antialiasing)
    painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)

    paint_background(painter, final_w, final_h, appearance.background, background_image)

    x = (final_w - content.width) // 2
    y = (final_h - content.height) // 2

    shadow = appearance.shadow
    if shadow.enabled and shadow.strength_px > 0:
        color = hex_to_color(shadow.color_hex, shadow.opacity_pct)
        if color.alpha() > 0:
            shadow_img, margin = render_shadow(content.image, color, shadow.strength_px)
            painter.drawImage(
                QPointF(x - margin, y + shadow.strength_px / 2 - margin), shadow_img)

    painter.drawImage(QPointF(x, y), content.image)
    painter.end()

    logger.debug("Composed %dx%d surface (content %dx%d)",
                 final_w, final_h, content.width, content.height)
    return surface
