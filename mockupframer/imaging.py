"""Image decoding — turns user / catalog image sources into ``QImage``s.

Every raster the compositor touches goes through :func:`load_image`
so downstream code can rely on a single pixel format
(ARGB32 premultiplied, the format ``QPainter`` renders fastest).
"""

import logging
import os
from typing import Union

from PySide6.QtGui import QImage

logger = logging.getLogger(__name__)

ImageSource = Union[str, "os.PathLike[str]", bytes, QImage]

RENDER_FORMAT = QImage.Format.Format_ARGB32_Premultiplied


class ImageLoadError(ValueError):
    """An image source could not be decoded."""


def load_image(source: ImageSource) -> QImage:
    """Decode *source* (path, encoded bytes or ``QImage``) into a new image.

    Raises :class:`ImageLoadError` when decoding fails or yields an
    empty image.
    """
    if isinstance(source, QImage):
        img = source
        label = "QImage"
    elif isinstance(source, (bytes, bytearray)):
        img = QImage.fromData(bytes(source))
        label = f"<{len(source)} bytes>"
    else:
        path = os.fspath(source)
        if not os.path.isfile(path):
            raise ImageLoadError(f"Image not found: {path}")
        img = QImage(path)
        label = path

    if img.isNull() or img.width() <= 0 or img.height() <= 0:
        raise ImageLoadError(f"Cannot decode image: {label}")

    logger.debug("Loaded %s (%dx%d)", label, img.width(), img.height())
    return img.convertToFormat(RENDER_FORMAT)


def blank_image(width: int, height: int) -> QImage:
    """Return a fully transparent image in the render format."""
    img = QImage(max(width, 1), max(height, 1), RENDER_FORMAT)
    img.fill(0)
    return img
