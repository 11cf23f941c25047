"""MockupFramer — place screenshots into device frames."""

from .models import (
    AppearanceConfig,
    BackgroundConfig,
    Bounds,
    DeviceFrame,
    ShadowConfig,
)
from .pipeline import MockupRenderer, RenderRequest, render_mockup

__version__ = "0.1.0"

__all__ = [
    "AppearanceConfig",
    "BackgroundConfig",
    "Bounds",
    "DeviceFrame",
    "ShadowConfig",
    "MockupRenderer",
    "RenderRequest",
    "render_mockup",
    "__version__",
]
