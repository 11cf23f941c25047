"""Clip masks for the screen region of a device frame.

A clip is one of three shapes: an arbitrary polygon, a rounded
rectangle or a plain rectangle.  :func:`select_clip` picks the shape
for a frame, :func:`apply_clip` installs it on a ``QPainter``.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

from PySide6.QtCore import QPointF, QRectF
from PySide6.QtGui import QPainter, QPainterPath, QPolygonF

from .geometry import is_axis_aligned_rectangle
from .models import Bounds, Point

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PolygonClip:
    points: Tuple[Point, ...]


@dataclass(frozen=True)
class RoundedRectClip:
    bounds: Bounds
    radius: float


@dataclass(frozen=True)
class RectClip:
    bounds: Bounds


Clip = Union[PolygonClip, RoundedRectClip, RectClip]


def select_clip(bounds: Bounds,
                polygon: Optional[Sequence[Point]] = None,
                radius: float = 0.0) -> Clip:
    """Choose the clip shape for a screen region.

    A polygon is only clipped as such when it is not simply the four
    corners of *bounds*; rectangles get rounded corners when *radius*
    is positive.
    """
    if polygon and not is_axis_aligned_rectangle(polygon):
        return PolygonClip(tuple(polygon))
    if radius > 0:
        return RoundedRectClip(bounds, float(radius))
    return RectClip(bounds)


def _clamp(v: float, hi: float) -> float:
    return min(max(v, 0.0), hi)


def clip_path(clip: Clip, width: float, height: float) -> Optional[QPainterPath]:
    """Build the painter path for *clip* inside a ``width × height`` raster.

    Coordinates are clamped to the raster first.  Returns ``None`` for a
    polygon with fewer than three vertices.
    """
    path = QPainterPath()
    if isinstance(clip, PolygonClip):
        if len(clip.points) < 3:
            return None
        poly = QPolygonF([QPointF(_clamp(x, width), _clamp(y, height))
                          for x, y in clip.points])
        path.addPolygon(poly)
        path.closeSubpath()
        return path

    b = clip.bounds.clamped(width, height)
    rect = QRectF(b.x, b.y, b.w, b.h)
    if isinstance(clip, RoundedRectClip):
        r = min(clip.radius, b.w / 2, b.h / 2)
        path.addRoundedRect(rect, r, r)
    else:
        path.addRect(rect)
    return path


def apply_clip(painter: QPainter, clip: Clip, width: float, height: float) -> bool:
    """Install *clip* on *painter*.  Returns ``False`` if nothing was clipped.

    The caller owns ``painter.save()`` / ``painter.restore()`` around the
    masked drawing.
    """
    path = clip_path(clip, width, height)
    if path is None:
        logger.debug("Degenerate clip polygon (%d points), drawing unclipped",
                     len(clip.points))
        return False
    painter.setClipPath(path)
    return True
