"""Export the output surface — encode, save to disk or copy to the clipboard.

Quality is fixed: PNG is lossless and JPEG / WebP are always written at
:data:`EXPORT_QUALITY`.
"""

import base64
import logging
import os
from typing import Dict, Optional, Tuple

from PySide6.QtCore import QBuffer, QIODevice, QMimeData
from PySide6.QtGui import QGuiApplication, QImage

from .models import DeviceFrame

logger = logging.getLogger(__name__)

#: format key → (Qt writer name, file extension, MIME type)
EXPORT_FORMATS: Dict[str, Tuple[str, str, str]] = {
    "png":  ("PNG",  "png",  "image/png"),
    "jpeg": ("JPEG", "jpg",  "image/jpeg"),
    "webp": ("WEBP", "webp", "image/webp"),
}

EXPORT_QUALITY = 90


class ExportError(RuntimeError):
    """The surface could not be encoded or written."""


class ClipboardError(ExportError):
    """Neither the image nor the text clipboard write succeeded."""


def _format(fmt: str) -> Tuple[str, str, str]:
    try:
        return EXPORT_FORMATS[fmt.lower()]
    except KeyError:
        raise ExportError(f"Unsupported export format: {fmt}") from None


def rasterize(image: QImage, fmt: str = "png") -> bytes:
    """Encode *image* as *fmt* (``png``, ``jpeg`` or ``webp``)."""
    writer, _, _ = _format(fmt)
    if image.isNull():
        raise ExportError("Nothing to export")

    src = image
    if writer == "JPEG":
        # no alpha in JPEG; flatten onto black like a browser canvas does
        src = image.convertToFormat(QImage.Format.Format_RGB32)

    buf = QBuffer()
    buf.open(QIODevice.OpenModeFlag.WriteOnly)
    quality = -1 if writer == "PNG" else EXPORT_QUALITY
    ok = src.save(buf, writer, quality)
    buf.close()
    if not ok:
        raise ExportError(f"{writer} encoder failed (plugin missing?)")
    return bytes(buf.data())


def export_filename(frame: Optional[DeviceFrame], fmt: str = "png") -> str:
    """``{brand}-{model}-{orientation}.{ext}`` for the selected device."""
    _, ext, _ = _format(fmt)
    brand = frame.brand if frame else "mockup"
    model = frame.model if frame else "device"
    orientation = frame.orientation if frame else "portrait"
    return f"{brand}-{model}-{orientation}.{ext}"


def download(data: bytes, filename: str, directory: str) -> str:
    """Write encoded *data* to *directory*/*filename*.  Returns the path."""
    path = os.path.join(directory, filename)
    try:
        os.makedirs(directory, exist_ok=True)
        with open(path, "wb") as f:
            f.write(data)
    except OSError as exc:
        raise ExportError(f"Cannot write {path}: {exc}") from exc
    logger.info("Exported %s (%d bytes)", path, len(data))
    return path


def to_data_url(data: bytes, fmt: str = "png") -> str:
    _, _, mime = _format(fmt)
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


def copy_to_clipboard(image: QImage, fmt: str = "png", clipboard=None) -> str:
    """Put *image* on the clipboard.

    Tries an image write first and falls back to the base64 data URL as
    plain text.  If *fmt* cannot be encoded the image goes out as a PNG
    data URL, like a canvas asked for an unsupported type.  Returns
    ``"image"`` or ``"text"`` depending on which write succeeded; raises
    :class:`ClipboardError` if nothing could be copied.
    """
    _, _, mime = _format(fmt)
    if clipboard is None and QGuiApplication.instance() is not None:
        clipboard = QGuiApplication.clipboard()

    if clipboard is None:
        raise ClipboardError("No clipboard available")

    try:
        data = rasterize(image, fmt)
    except ExportError as exc:
        logger.warning("Cannot encode %s for the clipboard, copying PNG as text: %s",
                       fmt, exc)
        try:
            data = rasterize(image, "png")
        except ExportError as png_exc:
            raise ClipboardError(f"Copy to clipboard failed: {png_exc}") from png_exc
        return _copy_text(clipboard, data, "png")

    if hasattr(clipboard, "setMimeData"):
        try:
            mime_data = QMimeData()
            mime_data.setData(mime, data)
            mime_data.setImageData(image)
            clipboard.setMimeData(mime_data)
            return "image"
        except Exception as exc:
            logger.warning("Image clipboard write failed, copying as text: %s", exc)
    else:
        logger.warning("Clipboard cannot hold images, copying as text")

    return _copy_text(clipboard, data, fmt)


def _copy_text(clipboard, data: bytes, fmt: str) -> str:
    try:
        clipboard.setText(to_data_url(data, fmt))
    except Exception as exc:
        raise ClipboardError(f"Copy to clipboard failed: {exc}") from exc
    return "text"
