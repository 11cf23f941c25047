"""Preview widget — shows the current output surface scaled to fit."""

from typing import Optional

from PySide6.QtCore import QRectF
from PySide6.QtGui import QColor, QImage, QPainter
from PySide6.QtWidgets import QWidget

from ..pipeline import fit_preview_size


BACKDROP = QColor("#131221")
CHECKER_LIGHT = QColor("#3a3850")
CHECKER_DARK = QColor("#2a283e")
CHECKER_SIZE = 8


class PreviewWidget(QWidget):
    """Central preview canvas for the rendered mockup.

    The surface keeps its true pixel aspect ratio and is never
    upscaled; transparent areas show a checkerboard.
    """

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setObjectName("PreviewWidget")
        self.setMinimumSize(320, 240)
        self._surface: Optional[QImage] = None

    # ── public API ──────────────────────────────────────────────────

    def set_surface(self, surface: QImage) -> None:
        """Show a new output surface (slot for ``MockupRenderer.surface_ready``)."""
        self._surface = surface
        self.update()

    def surface(self) -> Optional[QImage]:
        return self._surface

    def target_rect(self) -> QRectF:
        """Where the surface is drawn inside the widget."""
        if self._surface is None or self._surface.isNull():
            return QRectF()
        w, h = fit_preview_size(self._surface.width(), self._surface.height(),
                                self.width(), self.height())
        return QRectF((self.width() - w) / 2, (self.height() - h) / 2, w, h)

    # ── painting ────────────────────────────────────────────────────

    def paintEvent(self, event) -> None:  # type: ignore[override]
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
        painter.fillRect(QRectF(0, 0, self.width(), self.height()), BACKDROP)

        target = self.target_rect()
        if not target.isEmpty():
            painter.save()
            painter.setClipRect(target)
            self._draw_checker(painter, target)
            painter.restore()
            painter.drawImage(target, self._surface)
        painter.end()

    @staticmethod
    def _draw_checker(painter: QPainter, rect: QRectF) -> None:
        x0, y0 = int(rect.left()), int(rect.top())
        for row, y in enumerate(range(y0, int(rect.bottom()) + 1, CHECKER_SIZE)):
            for col, x in enumerate(range(x0, int(rect.right()) + 1, CHECKER_SIZE)):
                color = CHECKER_LIGHT if (row + col) % 2 else CHECKER_DARK
                painter.fillRect(QRectF(x, y, CHECKER_SIZE, CHECKER_SIZE), color)
