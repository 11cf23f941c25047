"""Device catalog — frame images on disk plus their screen geometry.

Frame images follow the ``<brand>-<model tokens>[-<colour>]-<orientation>.png``
naming scheme.  :func:`load_groups` turns a directory of them into
per-device groups; :class:`GeometryDatabase` supplies the display
polygon / rectangle of each frame, matched by filename.
"""

import dataclasses
import json
import logging
import os
import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from .models import ORIENTATIONS, Bounds, DeviceFrame, Point

logger = logging.getLogger(__name__)

FRAME_EXT = ".png"

BRAND_NAMES = {
    "apple": "Apple",
    "samsung": "Samsung",
    "google": "Google",
    "huawei": "Huawei",
    "motorola": "Motorola",
    "microsoft": "Microsoft",
    "dell": "Dell",
    "nokia": "Nokia",
}

# Brands listed first, in this order; everything else follows
BRAND_PRIORITY = ("apple", "google", "samsung")

# Finish / colour words that are not part of a model name
_FINISH_WORDS = re.compile(
    r"\b(black|gold|cloudblue|rose|obsidian|space|grey|gray|aluminum|titanium"
    r"|orange|ocean|band|closed|front)\b",
    re.IGNORECASE,
)
_APPLE_PREFIXES = (("Iphone", "iPhone"), ("Ipad", "iPad"), ("Ipod", "iPod"))


@dataclass
class MockupGroup:
    """All orientations of one device model."""
    key: str
    brand: str
    model: str
    items: List[DeviceFrame] = field(default_factory=list)


# ── Filename parsing ────────────────────────────────────────────────


def _capitalize_first(s: str) -> str:
    return s[:1].upper() + s[1:]


def prettify_brand(raw: str) -> str:
    return BRAND_NAMES.get(raw.lower(), _capitalize_first(raw))


def prettify_model(raw: str) -> str:
    """``"iphone15pro black"`` → ``"iPhone 15 Pro"``."""
    m = _FINISH_WORDS.sub(" ", raw)
    m = re.sub(r"\s+", " ", m).strip()
    if not m:
        return m

    m = re.sub(r"([a-zA-Z]+)(\d+)", r"\1 \2", m)
    m = re.sub(r"(\d+)([a-zA-Z]+)", r"\1 \2", m)
    m = re.sub(r"(galaxy)([a-z0-9]+)", r"Galaxy \2", m, count=1, flags=re.IGNORECASE)
    m = re.sub(r"\b(s\d{1,2})(ultra|plus|max|pro)\b", r"\1 \2", m, flags=re.IGNORECASE)

    m = " ".join(_capitalize_first(w) for w in m.split())
    for wrong, right in _APPLE_PREFIXES:
        m = re.sub(rf"\b{wrong}\b", right, m)
    return m.strip()


def parse_mockup_filename(filename: str, directory: str = "") -> DeviceFrame:
    """Build a geometry-less :class:`DeviceFrame` from a frame filename."""
    name = re.sub(r"\.png$", "", filename, flags=re.IGNORECASE)
    parts = name.split("-")

    orientation = "portrait"
    for key in ORIENTATIONS:
        if name.endswith(key):
            orientation = key
            break

    brand = prettify_brand(parts[0] or "unknown")
    model_tokens: List[str] = []
    for token in parts[1:]:
        if token in ORIENTATIONS:
            break
        model_tokens.append(token)
    model = prettify_model(" ".join(model_tokens))

    return DeviceFrame(
        filename=filename,
        image_path=os.path.join(directory, filename),
        brand=brand,
        model=model or name,
        orientation=orientation,
    )


# ── Grouping ────────────────────────────────────────────────────────


def _brand_rank(brand: str) -> int:
    b = brand.lower()
    for i, prefix in enumerate(BRAND_PRIORITY):
        if b.startswith(prefix):
            return i
    return len(BRAND_PRIORITY)


def group_frames(frames: Iterable[DeviceFrame]) -> List[MockupGroup]:
    """Group frames by brand + model and sort the groups for display."""
    groups: Dict[str, MockupGroup] = {}
    for frame in frames:
        key = f"{frame.brand}:{frame.model}".lower()
        if key not in groups:
            groups[key] = MockupGroup(key=key, brand=frame.brand, model=frame.model)
        groups[key].items.append(frame)
    return sorted(
        groups.values(),
        key=lambda g: (_brand_rank(g.brand), (g.model or "").casefold()),
    )


def load_groups(directory: str) -> List[MockupGroup]:
    """Scan *directory* for frame PNGs and return them grouped by device."""
    files = sorted(f for f in os.listdir(directory) if f.lower().endswith(FRAME_EXT))
    groups = group_frames(parse_mockup_filename(f, directory) for f in files)
    logger.info("Loaded %d frames in %d device groups from %s",
                len(files), len(groups), directory)
    return groups


def available_orientations(group: MockupGroup) -> List[str]:
    present = {f.orientation for f in group.items}
    return [o for o in ORIENTATIONS if o in present]


def select_frame(group: Optional[MockupGroup], orientation: str) -> Optional[DeviceFrame]:
    """Frame of *group* in *orientation*, else its first frame, else ``None``."""
    if group is None or not group.items:
        return None
    for frame in group.items:
        if frame.orientation == orientation:
            return frame
    return group.items[0]


# ── Geometry database ───────────────────────────────────────────────


@dataclass(frozen=True)
class GeometryRecord:
    """Screen geometry of one device orientation."""
    device_id: str
    orientation: str
    image: str
    legacy_image: Optional[str] = None
    aspect_ratio: Optional[float] = None
    screen_polygon: Optional[Tuple[Point, ...]] = None
    screen_rect: Optional[Bounds] = None

    @staticmethod
    def from_dict(device_id: str, d: dict) -> "GeometryRecord":
        polygon = d.get("screen_polygon")
        rect = d.get("screen_rect")
        return GeometryRecord(
            device_id=device_id,
            orientation=d["name"],
            image=d["image"],
            legacy_image=d.get("legacy_image"),
            aspect_ratio=d.get("aspect_ratio"),
            screen_polygon=(tuple((float(x), float(y)) for x, y in polygon)
                            if polygon else None),
            screen_rect=Bounds.from_dict(rect) if rect else None,
        )


class GeometryDatabase:
    """Device screen geometry keyed by ``(device_id, orientation)``.

    Records are also reachable through their image filename and the
    legacy filename the image was published under before.

    JSON layout::

        {"devices": [{"id": "apple-iphone-15",
                      "orientations": [{"name": "portrait",
                                        "image": "apple-iphone-15-black-portrait.png",
                                        "legacy_image": "...",
                                        "aspect_ratio": 0.49,
                                        "screen_polygon": [[x, y], ...],
                                        "screen_rect": {"x": .., "y": .., "w": .., "h": ..}}]}]}
    """

    def __init__(self, records: Iterable[GeometryRecord] = ()) -> None:
        self._by_key: Dict[Tuple[str, str], GeometryRecord] = {}
        self._by_file: Dict[str, GeometryRecord] = {}
        for rec in records:
            self._by_key[(rec.device_id, rec.orientation)] = rec
            self._by_file[rec.image.lower()] = rec
            if rec.legacy_image:
                # the current filename wins over an older alias
                self._by_file.setdefault(rec.legacy_image.lower(), rec)

    def __len__(self) -> int:
        return len(self._by_key)

    @staticmethod
    def from_dict(data: dict) -> "GeometryDatabase":
        records = []
        for device in data.get("devices", []):
            for entry in device.get("orientations", []):
                records.append(GeometryRecord.from_dict(device["id"], entry))
        return GeometryDatabase(records)

    @staticmethod
    def from_json(path: str) -> "GeometryDatabase":
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Geometry database must be a JSON object: {path}")
        return GeometryDatabase.from_dict(data)

    def get(self, device_id: str, orientation: str) -> Optional[GeometryRecord]:
        return self._by_key.get((device_id, orientation))

    def lookup(self, filename: str) -> Optional[GeometryRecord]:
        return self._by_file.get(filename.lower())


def attach_geometry(groups: List[MockupGroup], db: GeometryDatabase) -> List[MockupGroup]:
    """Return copies of *groups* whose frames carry their database geometry."""
    merged: List[MockupGroup] = []
    missing = 0
    for group in groups:
        items = []
        for frame in group.items:
            rec = db.lookup(frame.filename)
            if rec is None:
                missing += 1
                items.append(frame)
                continue
            items.append(dataclasses.replace(
                frame,
                aspect_ratio=rec.aspect_ratio,
                screen_polygon=rec.screen_polygon,
                screen_rect=rec.screen_rect,
            ))
        merged.append(MockupGroup(group.key, group.brand, group.model, items))
    if missing:
        logger.info("%d frames without geometry, screen will be detected from alpha",
                    missing)
    return merged
