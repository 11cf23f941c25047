"""Content layer — the screenshot placed in its device frame.

Two presentations:

* **framed**: the screenshot is cover-fitted into the screen region of
  the frame image (clipped to that region) and the frame is drawn on
  top at native size;
* **frameless**: the screenshot alone, rotated by a right angle and
  clipped to a rounded rectangle.

The result is an intermediate raster that :mod:`.output` then places
on the final canvas.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from PySide6.QtCore import QPointF, QRectF
from PySide6.QtGui import QImage, QPainter

from .clip import apply_clip, select_clip
from .geometry import (
    AlphaMap,
    cover_fit,
    detect_corner_radius,
    is_axis_aligned_rectangle,
    resolve_bounds,
    rotated_size,
)
from .imaging import blank_image
from .models import AppearanceConfig, Bounds, DEFAULT_APPEARANCE, DeviceFrame

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ContentLayer:
    """An intermediate raster; rebuilt, never edited."""
    image: QImage

    @property
    def width(self) -> int:
        return self.image.width()

    @property
    def height(self) -> int:
        return self.image.height()


def _begin(image: QImage) -> QPainter:
    painter = QPainter(image)
    painter.setRenderHint(QPainter.RenderHint.Antialiasing)
    painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
    return painter


def build_framed_content(
    frame: DeviceFrame,
    frame_image: QImage,
    screenshot: Optional[QImage] = None,
    appearance: Optional[AppearanceConfig] = None,
) -> ContentLayer:
    """Composite *screenshot* into the screen of *frame*.

    The layer has the frame image's native size.  Without a screenshot
    the layer is just the frame.
    """
    ap = appearance or DEFAULT_APPEARANCE
    W, H = frame_image.width(), frame_image.height()
    out = blank_image(W, H)
    painter = _begin(out)

    if screenshot is not None and not screenshot.isNull():
        polygon = frame.screen_polygon
        alpha: Optional[AlphaMap] = None
        if not polygon and frame.screen_rect is None:
            alpha = AlphaMap.from_image(frame_image)
        bounds = resolve_bounds(frame, alpha)

        # Rectangular screens get the bezel's own corner radius
        radius = 0
        if not polygon or is_axis_aligned_rectangle(polygon):
            if alpha is None:
                alpha = AlphaMap.from_image(frame_image)
            radius = detect_corner_radius(alpha, bounds)

        clip = select_clip(bounds, polygon, radius)
        dest = cover_fit(
            screenshot.width(), screenshot.height(), bounds,
            zoom=ap.fit_zoom_pct / 100.0,
            offset_x=ap.fit_offset_x, offset_y=ap.fit_offset_y,
        )
        logger.debug("%s: screen %s, clip %s", frame.filename, bounds,
                     type(clip).__name__)

        painter.save()
        apply_clip(painter, clip, W, H)
        painter.drawImage(QRectF(dest.x, dest.y, dest.w, dest.h), screenshot)
        painter.restore()

    # Bezel on top; its opaque pixels hide any overdraw
    painter.drawImage(QPointF(0, 0), frame_image)
    painter.end()
    return ContentLayer(out)


def build_frameless_content(
    screenshot: Optional[QImage],
    rotation_deg: int = 0,
    radius_px: float = 0.0,
) -> ContentLayer:
    """Rotate *screenshot* by a right angle and round its corners."""
    if screenshot is None or screenshot.isNull():
        return ContentLayer(blank_image(1, 1))

    sw, sh = screenshot.width(), screenshot.height()
    out_w, out_h = rotated_size(sw, sh, rotation_deg)
    out = blank_image(out_w, out_h)
    painter = _begin(out)

    painter.save()
    apply_clip(painter, select_clip(Bounds(0, 0, out_w, out_h), radius=radius_px),
               out_w, out_h)
    painter.translate(out_w / 2, out_h / 2)
    painter.rotate(rotation_deg)
    painter.drawImage(QPointF(-sw / 2, -sh / 2), screenshot)
    painter.restore()
    painter.end()
    return ContentLayer(out)


def build_content(
    frame: Optional[DeviceFrame],
    frame_image: Optional[QImage],
    screenshot: Optional[QImage],
    appearance: AppearanceConfig,
) -> ContentLayer:
    """Build the content layer for the current presentation mode."""
    if appearance.frameless:
        return build_frameless_content(
            screenshot,
            appearance.frameless_rotation_deg,
            appearance.rounded_radius_px,
        )
    if frame is None or frame_image is None:
        raise ValueError("Framed mode needs a device frame and its image")
    return build_framed_content(frame, frame_image, screenshot, appearance)
