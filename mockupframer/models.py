"""Core data models for MockupFramer.

Defines the device-frame record, derived bounds and the user-controlled
appearance settings.  All models support JSON-friendly serialization via
``to_dict()`` / ``from_dict()``.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple


#: Orientation names a frame image can carry, in display order.
ORIENTATIONS = ("portrait", "landscape", "front", "left", "right")

#: Output aspect presets: key → (W, H) ratio, ``None`` = follow content.
OUTPUT_ASPECTS: Dict[str, Optional[Tuple[int, int]]] = {
    "default": None,
    "1:1": (1, 1),
    "16:9": (16, 9),
    "9:16": (9, 16),
    "3:4": (3, 4),
}

FRAMELESS_ROTATIONS = (0, 90, 180, 270)

FIT_ZOOM_MIN = 25
FIT_ZOOM_MAX = 300

Point = Tuple[float, float]

_HEX_COLOR = re.compile(r"#?(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})")


def _check_hex(value) -> None:
    if not isinstance(value, str) or not _HEX_COLOR.fullmatch(value.strip()):
        raise ValueError(f"Invalid hex colour: {value!r}")


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned rectangle in frame pixel coordinates."""
    x: float
    y: float
    w: float
    h: float

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h

    def corners(self) -> Tuple[Point, Point, Point, Point]:
        """Top-left, top-right, bottom-right, bottom-left."""
        return (
            (self.x, self.y),
            (self.right, self.y),
            (self.right, self.bottom),
            (self.x, self.bottom),
        )

    def clamped(self, width: float, height: float) -> "Bounds":
        """Return the part of this rectangle inside ``[0, width] × [0, height]``."""
        x0 = min(max(self.x, 0.0), width)
        y0 = min(max(self.y, 0.0), height)
        x1 = min(max(self.right, 0.0), width)
        y1 = min(max(self.bottom, 0.0), height)
        return Bounds(x0, y0, x1 - x0, y1 - y0)

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "w": self.w, "h": self.h}

    @staticmethod
    def from_dict(d: dict) -> "Bounds":
        return Bounds(x=float(d["x"]), y=float(d["y"]),
                      w=float(d["w"]), h=float(d["h"]))


@dataclass(frozen=True)
class DeviceFrame:
    """A device-bezel image plus the geometry of its display area.

    ``screen_polygon`` is authoritative when present, then
    ``screen_rect``.  With neither, the display area is estimated from
    the transparent cutout of the frame image.
    """
    filename: str
    image_path: str
    brand: str
    model: str
    orientation: str = "portrait"
    aspect_ratio: Optional[float] = None
    screen_polygon: Optional[Tuple[Point, ...]] = None
    screen_rect: Optional[Bounds] = None

    def __post_init__(self) -> None:
        if self.orientation not in ORIENTATIONS:
            raise ValueError(f"Unknown orientation: {self.orientation!r}")
        if self.screen_polygon is not None:
            # lists from JSON → hashable tuples
            object.__setattr__(
                self, "screen_polygon",
                tuple((float(x), float(y)) for x, y in self.screen_polygon),
            )

    @property
    def key(self) -> str:
        return f"{self.brand}:{self.model}:{self.orientation}".lower()

    def to_dict(self) -> dict:
        return {
            "filename": self.filename,
            "image_path": self.image_path,
            "brand": self.brand,
            "model": self.model,
            "orientation": self.orientation,
            "aspect_ratio": self.aspect_ratio,
            "screen_polygon": (
                [list(p) for p in self.screen_polygon]
                if self.screen_polygon is not None else None
            ),
            "screen_rect": (
                self.screen_rect.to_dict() if self.screen_rect is not None else None
            ),
        }

    @staticmethod
    def from_dict(d: dict) -> "DeviceFrame":
        rect = d.get("screen_rect")
        return DeviceFrame(
            filename=d["filename"],
            image_path=d["image_path"],
            brand=d["brand"],
            model=d["model"],
            orientation=d.get("orientation", "portrait"),
            aspect_ratio=d.get("aspect_ratio"),
            screen_polygon=d.get("screen_polygon"),
            screen_rect=Bounds.from_dict(rect) if rect else None,
        )


@dataclass(frozen=True)
class ShadowConfig:
    """Soft drop shadow under the content layer."""
    enabled: bool = False
    strength_px: float = 20.0   # blur radius; vertical offset is half of it
    color_hex: str = "#000000"
    opacity_pct: float = 35.0

    def __post_init__(self) -> None:
        _check_hex(self.color_hex)
        if self.strength_px < 0:
            raise ValueError("Shadow strength cannot be negative")
        if not 0 <= self.opacity_pct <= 100:
            raise ValueError("Shadow opacity must be within 0-100%")

    def to_dict(self) -> dict:
        return {
            "enabled": self.enabled,
            "strength_px": self.strength_px,
            "color_hex": self.color_hex,
            "opacity_pct": self.opacity_pct,
        }

    @staticmethod
    def from_dict(d: dict) -> "ShadowConfig":
        return ShadowConfig(
            enabled=bool(d.get("enabled", False)),
            strength_px=float(d.get("strength_px", 20.0)),
            color_hex=d.get("color_hex", "#000000"),
            opacity_pct=float(d.get("opacity_pct", 35.0)),
        )


@dataclass(frozen=True)
class BackgroundConfig:
    """Flat colour or image behind the content."""
    enabled: bool = False
    color_hex: str = "#ffffff"
    image_path: Optional[str] = None  # takes priority over the colour

    def __post_init__(self) -> None:
        _check_hex(self.color_hex)

    def to_dict(self) -> dict:
        return {
            "enabled": self.enabled,
            "color_hex": self.color_hex,
            "image_path": self.image_path,
        }

    @staticmethod
    def from_dict(d: dict) -> "BackgroundConfig":
        return BackgroundConfig(
            enabled=bool(d.get("enabled", False)),
            color_hex=d.get("color_hex", "#ffffff"),
            image_path=d.get("image_path"),
        )


@dataclass(frozen=True)
class AppearanceConfig:
    """Everything the user can tweak about a render.

    Passed by value into the compositor on every pass; use
    ``dataclasses.replace`` to derive a modified copy.
    """
    frameless: bool = False
    frameless_rotation_deg: int = 0
    rounded_radius_px: int = 24
    shadow: ShadowConfig = field(default_factory=ShadowConfig)
    background: BackgroundConfig = field(default_factory=BackgroundConfig)
    output_aspect: str = "default"
    padding_px: int = 0  # negative = content overflows the aspect canvas
    # Screenshot placement inside the screen region (framed mode)
    fit_zoom_pct: float = 100.0
    fit_offset_x: float = 0.0
    fit_offset_y: float = 0.0

    def __post_init__(self) -> None:
        if self.frameless_rotation_deg not in FRAMELESS_ROTATIONS:
            raise ValueError(
                f"Rotation must be one of {FRAMELESS_ROTATIONS}, "
                f"got {self.frameless_rotation_deg}"
            )
        if self.rounded_radius_px < 0:
            raise ValueError("Corner radius cannot be negative")
        if self.output_aspect not in OUTPUT_ASPECTS:
            raise ValueError(f"Unknown output aspect: {self.output_aspect!r}")
        if not FIT_ZOOM_MIN <= self.fit_zoom_pct <= FIT_ZOOM_MAX:
            raise ValueError(
                f"Zoom must be within {FIT_ZOOM_MIN}-{FIT_ZOOM_MAX}%"
            )

    @property
    def aspect_ratio(self) -> Optional[float]:
        """Requested W/H ratio, or ``None`` to follow the content."""
        preset = OUTPUT_ASPECTS[self.output_aspect]
        if preset is None:
            return None
        return preset[0] / preset[1]

    def to_dict(self) -> dict:
        return {
            "frameless": self.frameless,
            "frameless_rotation_deg": self.frameless_rotation_deg,
            "rounded_radius_px": self.rounded_radius_px,
            "shadow": self.shadow.to_dict(),
            "background": self.background.to_dict(),
            "output_aspect": self.output_aspect,
            "padding_px": self.padding_px,
            "fit_zoom_pct": self.fit_zoom_pct,
            "fit_offset_x": self.fit_offset_x,
            "fit_offset_y": self.fit_offset_y,
        }

    @staticmethod
    def from_dict(d: dict) -> "AppearanceConfig":
        return AppearanceConfig(
            frameless=bool(d.get("frameless", False)),
            frameless_rotation_deg=int(d.get("frameless_rotation_deg", 0)),
            rounded_radius_px=int(d.get("rounded_radius_px", 24)),
            shadow=ShadowConfig.from_dict(d.get("shadow", {})),
            background=BackgroundConfig.from_dict(d.get("background", {})),
            output_aspect=d.get("output_aspect", "default"),
            padding_px=int(d.get("padding_px", 0)),
            fit_zoom_pct=float(d.get("fit_zoom_pct", 100.0)),
            fit_offset_x=float(d.get("fit_offset_x", 0.0)),
            fit_offset_y=float(d.get("fit_offset_y", 0.0)),
        )


DEFAULT_APPEARANCE = AppearanceConfig()
