"""Render pipeline — load images, build the content layer, compose the output.

:func:`render_mockup` is one complete, synchronous pass.
:class:`MockupRenderer` runs passes on background threads and makes
sure only the newest request ever reaches the preview.
"""

import logging
import threading
from dataclasses import dataclass
from typing import List, Optional, Tuple

from PySide6.QtCore import QObject, Signal
from PySide6.QtGui import QImage

from .content import build_content
from .imaging import ImageLoadError, ImageSource, load_image
from .models import AppearanceConfig, DEFAULT_APPEARANCE, DeviceFrame
from .output import compose
from .utils import round_half_up

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class RenderRequest:
    """Inputs of one render pass."""
    frame: Optional[DeviceFrame]
    screenshot: Optional[ImageSource] = None
    appearance: AppearanceConfig = DEFAULT_APPEARANCE


def render_mockup(request: RenderRequest) -> QImage:
    """Run one full pass and return the output surface.

    Images are decoded in order — background, frame, screenshot — so
    every raster exists before anything is drawn.  Raises
    :class:`ImageLoadError` if any of them cannot be decoded.
    """
    ap = request.appearance

    background = None
    if ap.background.image_path:
        background = load_image(ap.background.image_path)

    frame_image = None
    if not ap.frameless:
        if request.frame is None:
            raise ValueError("No device frame selected")
        frame_image = load_image(request.frame.image_path)

    screenshot = None
    if request.screenshot is not None:
        screenshot = load_image(request.screenshot)

    content = build_content(request.frame, frame_image, screenshot, ap)
    return compose(content, ap, background)


def fit_preview_size(width: int, height: int,
                     max_w: int, max_h: int) -> Tuple[int, int]:
    """Largest size ≤ (*max_w*, *max_h*) with the aspect of *width* × *height*.

    Never upscales.
    """
    if width <= 0 or height <= 0 or max_w <= 0 or max_h <= 0:
        return 0, 0
    scale = min(max_w / width, max_h / height, 1.0)
    return (max(1, round_half_up(width * scale)),
            max(1, round_half_up(height * scale)))


class MockupRenderer(QObject):
    """Runs render passes off the GUI thread; newest request wins.

    Each request takes the next generation number.  A pass that
    finishes after a newer request was made is dropped, so a slow
    stale pass can never replace a newer result.
    """

    surface_ready = Signal(QImage)
    load_failed = Signal(str)   # an input image could not be decoded
    error = Signal(str)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._lock = threading.RLock()
        self._generation = 0
        self._surface: Optional[QImage] = None
        self._threads: List[threading.Thread] = []

    # ── public API ──────────────────────────────────────────────────

    @property
    def generation(self) -> int:
        return self._generation

    def surface(self) -> Optional[QImage]:
        """Most recent delivered output surface (``None`` before the first)."""
        return self._surface

    def request(self, request: RenderRequest) -> int:
        """Start a render pass in a background thread.  Returns its generation."""
        gen = self._next_generation()
        thread = threading.Thread(target=self._run, args=(gen, request), daemon=True)
        self._threads = [t for t in self._threads if t.is_alive()]
        self._threads.append(thread)
        thread.start()
        return gen

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until every started pass has finished."""
        for thread in list(self._threads):
            thread.join(timeout)

    # ── internal ────────────────────────────────────────────────────

    def _next_generation(self) -> int:
        with self._lock:
            self._generation += 1
            return self._generation

    def _run(self, gen: int, request: RenderRequest) -> None:
        try:
            surface = render_mockup(request)
        except ImageLoadError as exc:
            # previous surface stays on screen
            logger.warning("Render %d skipped: %s", gen, exc)
            with self._lock:
                if gen == self._generation:
                    self.load_failed.emit(str(exc))
            return
        except Exception as exc:
            logger.exception("Render %d failed", gen)
            with self._lock:
                if gen == self._generation:
                    self.error.emit(str(exc))
            return
        self._deliver(gen, surface)

    def _deliver(self, gen: int, surface: QImage) -> bool:
        with self._lock:
            if gen != self._generation:
                logger.debug("Dropping stale render %d (current %d)", gen, self._generation)
                return False
            self._surface = surface
            self.surface_ready.emit(surface)
        return True
