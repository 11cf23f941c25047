"""Geometry resolution for device frames.

Works out where the screen of a device frame is: from an explicit
polygon or rectangle when the catalog provides one, otherwise by
scanning the frame image for its transparent cutout.  Also hosts the
pure sizing helpers shared by the composers (cover fit, rotated
bounding box).
"""

import logging
import math
from typing import Optional, Sequence, Tuple

import cv2
import numpy as np

from PySide6.QtGui import QImage

from .models import Bounds, DeviceFrame, Point
from .utils import qimage_to_rgba, round_half_up

logger = logging.getLogger(__name__)

# Alpha below this counts as see-through (the screen cutout)
ALPHA_TRANSPARENT = 10
# Alpha at or above this counts as solid bezel
ALPHA_OPAQUE = 128

SCAN_STRIDE = 2
FALLBACK_FRACTION = 0.6  # centred region used when no cutout is found
MIN_CUTOUT_FRACTION = 0.01  # smaller enclosed holes are not a screen
CORNER_MAX_PCT = 0.12
CORNER_STEP = 2

# Vertex-to-corner tolerance for the axis-aligned rectangle test (px)
_CORNER_TOL = 0.5


# ── Alpha readback ──────────────────────────────────────────────────


class AlphaMap:
    """Alpha channel of a decoded frame image, read back once."""

    def __init__(self, alpha: np.ndarray) -> None:
        self.data = alpha
        self.height, self.width = alpha.shape

    @classmethod
    def from_image(cls, image: QImage) -> "AlphaMap":
        return cls(qimage_to_rgba(image)[:, :, 3].copy())

    def read_alpha(self, x: float, y: float) -> int:
        """Alpha (0-255) of the pixel containing (*x*, *y*); 0 outside the image."""
        ix, iy = int(math.floor(x)), int(math.floor(y))
        if ix < 0 or iy < 0 or ix >= self.width or iy >= self.height:
            return 0
        return int(self.data[iy, ix])


# ── Bounds ──────────────────────────────────────────────────────────


def polygon_bounds(points: Sequence[Point]) -> Bounds:
    """Axis-aligned envelope of *points*."""
    if not points:
        raise ValueError("Polygon has no vertices")
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    x0, y0 = min(xs), min(ys)
    return Bounds(x0, y0, max(xs) - x0, max(ys) - y0)


def fallback_bounds(width: float, height: float) -> Bounds:
    """Centred region covering 60% of each axis."""
    margin = (1.0 - FALLBACK_FRACTION) / 2
    return Bounds(width * margin, height * margin,
                  width * FALLBACK_FRACTION, height * FALLBACK_FRACTION)


def scan_cutout(alpha: AlphaMap,
                threshold: int = ALPHA_TRANSPARENT,
                stride: int = SCAN_STRIDE) -> Bounds:
    """Estimate the screen cutout from transparent pixels of a frame image.

    Samples every *stride*-th pixel on each axis.  Transparent areas
    touching the image border are the empty space around the device
    outline, so the largest enclosed transparent area is taken as the
    screen.  Enclosed areas below :data:`MIN_CUTOUT_FRACTION` of the
    image (camera holes, speaker slots) only win when nothing touches
    the border.  Falls back to :func:`fallback_bounds` when nothing is
    transparent.
    """
    sub = alpha.data[::stride, ::stride]
    mask = sub < threshold
    if not mask.any():
        logger.info("No transparent cutout in %dx%d frame, using centred fallback",
                    alpha.width, alpha.height)
        return fallback_bounds(alpha.width, alpha.height)

    count, labels, stats, _ = cv2.connectedComponentsWithStats(
        mask.astype(np.uint8), connectivity=4)
    border = np.concatenate([labels[0, :], labels[-1, :], labels[:, 0], labels[:, -1]])
    edge = sorted(set(np.unique(border).tolist()) - {0})
    inner = [i for i in range(1, count) if i not in edge]
    if inner:
        best = max(inner, key=lambda i: stats[i, cv2.CC_STAT_AREA])
        if not edge or stats[best, cv2.CC_STAT_AREA] >= MIN_CUTOUT_FRACTION * mask.size:
            mask = labels == best
        else:
            mask = np.isin(labels, edge)

    # a sample stands for the stride×stride cell it starts
    ys, xs = np.nonzero(mask)
    x0 = int(xs.min()) * stride
    y0 = int(ys.min()) * stride
    x1 = min((int(xs.max()) + 1) * stride, alpha.width)
    y1 = min((int(ys.max()) + 1) * stride, alpha.height)
    return Bounds(float(x0), float(y0), float(x1 - x0), float(y1 - y0))


def resolve_bounds(frame: DeviceFrame, alpha: Optional[AlphaMap] = None) -> Bounds:
    """Screen bounds of *frame*: polygon, then rect, then alpha scan."""
    if frame.screen_polygon:
        return polygon_bounds(frame.screen_polygon)
    if frame.screen_rect is not None:
        return frame.screen_rect
    if alpha is None:
        raise ValueError(f"{frame.filename}: no screen geometry and no image to scan")
    return scan_cutout(alpha)


def is_axis_aligned_rectangle(points: Sequence[Point]) -> bool:
    """True if *points* are exactly the four corners of their bounding box."""
    if len(points) != 4:
        return False
    b = polygon_bounds(points)
    if b.w <= 0 or b.h <= 0:
        return False
    hit = set()
    for px, py in points:
        for i, (cx, cy) in enumerate(b.corners()):
            if abs(px - cx) <= _CORNER_TOL and abs(py - cy) <= _CORNER_TOL:
                hit.add(i)
                break
        else:
            return False
    return len(hit) == 4


def detect_corner_radius(alpha: AlphaMap, bounds: Bounds,
                         max_pct: float = CORNER_MAX_PCT) -> int:
    """Approximate the screen corner radius of a frame image.

    Walks candidate radii from ``max_pct * min(w, h)`` down to 2px and
    samples the point ``(r/√2, r/√2)`` inward from each bounds corner.
    The first radius whose four samples all land on opaque bezel wins;
    0 means square corners.
    """
    r_max = int(max_pct * min(bounds.w, bounds.h))
    for r in range(r_max, CORNER_STEP - 1, -CORNER_STEP):
        o = r / math.sqrt(2)
        samples = (
            (bounds.x + o, bounds.y + o),
            (bounds.right - o, bounds.y + o),
            (bounds.right - o, bounds.bottom - o),
            (bounds.x + o, bounds.bottom - o),
        )
        if all(alpha.read_alpha(x, y) >= ALPHA_OPAQUE for x, y in samples):
            return r
    return 0


# ── Sizing helpers ──────────────────────────────────────────────────


def cover_fit(img_w: float, img_h: float, target: Bounds,
              zoom: float = 1.0,
              offset_x: float = 0.0, offset_y: float = 0.0) -> Bounds:
    """Destination rect that scales an image to fully cover *target*.

    The overflowing axis is centred (and later clipped away).  *zoom*
    scales the fit further; the offsets shift it in target pixels.
    """
    if img_w <= 0 or img_h <= 0 or target.w <= 0 or target.h <= 0:
        return target
    img_ar = img_w / img_h
    target_ar = target.w / target.h
    if img_ar > target_ar:
        draw_h = target.h * zoom
        draw_w = draw_h * img_ar
    else:
        draw_w = target.w * zoom
        draw_h = draw_w / img_ar
    return Bounds(
        target.x + (target.w - draw_w) / 2 + offset_x,
        target.y + (target.h - draw_h) / 2 + offset_y,
        draw_w,
        draw_h,
    )


def rotated_size(width: float, height: float, rotation_deg: float) -> Tuple[int, int]:
    """Bounding box ``(w, h)`` of a ``width × height`` image rotated by *rotation_deg*."""
    theta = math.radians(rotation_deg)
    c, s = abs(math.cos(theta)), abs(math.sin(theta))
    return (
        round_half_up(width * c + height * s),
        round_half_up(width * s + height * c),
    )
