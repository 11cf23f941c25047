"""Tests for mockupframer.catalog — filename parsing, grouping, geometry DB."""

import json
import os

import pytest

from mockupframer.catalog import (
    GeometryDatabase,
    GeometryRecord,
    MockupGroup,
    attach_geometry,
    available_orientations,
    group_frames,
    load_groups,
    parse_mockup_filename,
    prettify_brand,
    prettify_model,
    select_frame,
)
from mockupframer.models import Bounds


GEOMETRY = {
    "devices": [
        {
            "id": "apple-iphone-15",
            "orientations": [
                {
                    "name": "portrait",
                    "image": "apple-iphone-15-black-portrait.png",
                    "legacy_image": "iphone15-portrait.png",
                    "aspect_ratio": 0.49,
                    "screen_polygon": [[40, 40], [360, 40], [360, 760], [40, 760]],
                },
                {
                    "name": "landscape",
                    "image": "apple-iphone-15-black-landscape.png",
                    "screen_rect": {"x": 40, "y": 40, "w": 720, "h": 320},
                },
            ],
        },
    ],
}


# ── Filename parsing ────────────────────────────────────────────────


class TestParseFilename:
    @pytest.mark.parametrize("filename,brand,model,orientation", [
        ("apple-iphone-15-pro-black-portrait.png", "Apple", "iPhone 15 Pro", "portrait"),
        ("apple-ipad-air-space-grey-landscape.png", "Apple", "iPad Air", "landscape"),
        ("google-pixel8pro-obsidian-portrait.png", "Google", "Pixel 8 Pro", "portrait"),
        ("samsung-galaxy-s23-ultra-portrait.png", "Samsung", "Galaxy S 23 Ultra", "portrait"),
        ("samsung-galaxys24-front.png", "Samsung", "Galaxy S 24", "front"),
        ("acme-widget-left.png", "Acme", "Widget", "left"),
    ])
    def test_names(self, filename: str, brand: str, model: str,
                   orientation: str) -> None:
        frame = parse_mockup_filename(filename)
        assert (frame.brand, frame.model, frame.orientation) == (brand, model, orientation)

    def test_orientation_defaults_to_portrait(self) -> None:
        frame = parse_mockup_filename("nokia-lumia.png")
        assert frame.orientation == "portrait"
        assert frame.model == "Lumia"

    def test_uppercase_extension(self) -> None:
        assert parse_mockup_filename("dell-xps-13-landscape.PNG").model == "Xps 13"

    def test_model_falls_back_to_name(self) -> None:
        frame = parse_mockup_filename("apple-black-portrait.png")
        assert frame.model == "apple-black-portrait"

    def test_image_path_joins_directory(self) -> None:
        frame = parse_mockup_filename("acme-one-portrait.png", "/frames")
        assert frame.image_path == os.path.join("/frames", "acme-one-portrait.png")
        assert frame.filename == "acme-one-portrait.png"
        assert frame.screen_polygon is None

    def test_prettify(self) -> None:
        assert prettify_brand("motorola") == "Motorola"
        assert prettify_brand("fairphone") == "Fairphone"
        assert prettify_model("ipod touch gold") == "iPod Touch"
        assert prettify_model("black") == ""


# ── Grouping ────────────────────────────────────────────────────────


class TestGrouping:
    def test_orientations_share_a_group(self) -> None:
        groups = group_frames([
            parse_mockup_filename("apple-iphone-15-black-portrait.png"),
            parse_mockup_filename("apple-iphone-15-black-landscape.png"),
        ])
        assert len(groups) == 1
        assert groups[0].key == "apple:iphone 15"
        assert available_orientations(groups[0]) == ["portrait", "landscape"]

    def test_brand_priority_then_model(self) -> None:
        names = [
            "samsung-galaxy-a54-portrait.png",
            "acme-zeta-portrait.png",
            "apple-iphone-15-portrait.png",
            "google-pixel-8-portrait.png",
            "apple-ipad-air-portrait.png",
            "acme-alpha-portrait.png",
        ]
        groups = group_frames(parse_mockup_filename(n) for n in names)
        assert [(g.brand, g.model) for g in groups] == [
            ("Apple", "iPad Air"),
            ("Apple", "iPhone 15"),
            ("Google", "Pixel 8"),
            ("Samsung", "Galaxy A 54"),
            ("Acme", "Alpha"),
            ("Acme", "Zeta"),
        ]

    def test_load_groups_from_directory(self, tmp_path) -> None:
        for name in ["apple-iphone-15-black-portrait.png",
                     "apple-iphone-15-black-landscape.png",
                     "google-pixel-8-portrait.PNG",
                     "notes.txt"]:
            (tmp_path / name).write_bytes(b"")
        groups = load_groups(str(tmp_path))
        assert [g.model for g in groups] == ["iPhone 15", "Pixel 8"]
        assert len(groups[0].items) == 2
        assert groups[1].items[0].image_path == str(tmp_path / "google-pixel-8-portrait.PNG")

    def test_select_frame(self) -> None:
        portrait = parse_mockup_filename("acme-one-portrait.png")
        landscape = parse_mockup_filename("acme-one-landscape.png")
        group = MockupGroup("acme:one", "Acme", "One", [portrait, landscape])
        assert select_frame(group, "landscape") is landscape
        assert select_frame(group, "front") is portrait
        assert select_frame(None, "portrait") is None
        assert select_frame(MockupGroup("x", "X", "Y"), "portrait") is None


# ── Geometry database ───────────────────────────────────────────────


class TestGeometryDatabase:
    def test_from_dict(self) -> None:
        db = GeometryDatabase.from_dict(GEOMETRY)
        assert len(db) == 2
        rec = db.get("apple-iphone-15", "portrait")
        assert rec.aspect_ratio == 0.49
        assert rec.screen_polygon[2] == (360.0, 760.0)
        assert db.get("apple-iphone-15", "landscape").screen_rect == Bounds(40, 40, 720, 320)
        assert db.get("apple-iphone-15", "front") is None

    def test_lookup_by_filename(self) -> None:
        db = GeometryDatabase.from_dict(GEOMETRY)
        assert db.lookup("APPLE-iPhone-15-black-portrait.png").orientation == "portrait"
        assert db.lookup("iphone15-portrait.png").orientation == "portrait"
        assert db.lookup("unknown.png") is None

    def test_current_name_beats_legacy_alias(self) -> None:
        a = GeometryRecord("a", "portrait", "a.png", legacy_image="b.png")
        b = GeometryRecord("b", "portrait", "b.png")
        db = GeometryDatabase([a, b])
        assert db.lookup("b.png") is b

    def test_from_json(self, tmp_path) -> None:
        path = tmp_path / "devices.json"
        path.write_text(json.dumps(GEOMETRY), encoding="utf-8")
        assert len(GeometryDatabase.from_json(str(path))) == 2

    def test_from_json_rejects_non_object(self, tmp_path) -> None:
        path = tmp_path / "devices.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(ValueError):
            GeometryDatabase.from_json(str(path))

    def test_attach_geometry(self) -> None:
        groups = group_frames([
            parse_mockup_filename("apple-iphone-15-black-portrait.png"),
            parse_mockup_filename("apple-iphone-15-black-landscape.png"),
            parse_mockup_filename("acme-one-portrait.png"),
        ])
        merged = attach_geometry(groups, GeometryDatabase.from_dict(GEOMETRY))
        apple = merged[0]
        portrait = select_frame(apple, "portrait")
        assert portrait.screen_polygon[0] == (40.0, 40.0)
        assert portrait.aspect_ratio == 0.49
        assert select_frame(apple, "landscape").screen_rect == Bounds(40, 40, 720, 320)
        assert merged[1].items[0].screen_polygon is None
        # originals untouched
        assert groups[0].items[0].screen_polygon is None
