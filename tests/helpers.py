"""Synthetic images for the compositor tests."""

import numpy as np

from PySide6.QtGui import QColor, QImage

from mockupframer.imaging import load_image
from mockupframer.models import Bounds
from mockupframer.utils import rgba_to_qimage


BEZEL_RGBA = (20, 20, 24, 255)
SCREEN_HOLE = Bounds(40, 40, 320, 720)  # in a 400×800 frame


def solid_image(w: int, h: int, rgba=(0, 200, 0, 255)) -> QImage:
    img = QImage(w, h, QImage.Format.Format_ARGB32_Premultiplied)
    img.fill(QColor(*rgba))
    return img


def frame_image(w: int, h: int, hole: Bounds, radius: float = 0.0,
                border: int = 0) -> QImage:
    """Opaque bezel with a transparent screen *hole*.

    *border* leaves a transparent margin around the device body, like
    a real frame PNG.  *radius* rounds the hole's corners.
    """
    arr = np.zeros((h, w, 4), dtype=np.uint8)
    arr[border:h - border, border:w - border] = BEZEL_RGBA

    yy, xx = np.mgrid[0:h, 0:w].astype(np.float32) + 0.5
    x0, y0, x1, y1 = hole.x, hole.y, hole.right, hole.bottom
    inside = (xx >= x0) & (xx < x1) & (yy >= y0) & (yy < y1)
    if radius > 0:
        dx = xx - np.clip(xx, x0 + radius, x1 - radius)
        dy = yy - np.clip(yy, y0 + radius, y1 - radius)
        inside &= dx * dx + dy * dy <= radius * radius
    arr[inside] = 0
    return load_image(rgba_to_qimage(arr))


def alpha_at(image: QImage, x: int, y: int) -> int:
    return image.pixelColor(x, y).alpha()


def rgb_at(image: QImage, x: int, y: int) -> tuple:
    c = image.pixelColor(x, y)
    return c.red(), c.green(), c.blue()
