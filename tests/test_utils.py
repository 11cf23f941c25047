"""Tests for mockupframer.utils and mockupframer.imaging."""

import numpy as np
import pytest

from PySide6.QtGui import QImage

from mockupframer.imaging import RENDER_FORMAT, ImageLoadError, blank_image, load_image
from mockupframer.utils import (
    hex_to_color,
    parse_hex,
    qimage_to_rgba,
    rgba_to_qimage,
    round_half_up,
)

from helpers import solid_image


# ── round_half_up ───────────────────────────────────────────────────


class TestRoundHalfUp:
    def test_halves_go_up(self) -> None:
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3  # round() would give 2

    def test_negative_halves_go_up(self) -> None:
        assert round_half_up(-0.5) == 0
        assert round_half_up(-1.5) == -1

    def test_plain_values(self) -> None:
        assert round_half_up(177.78) == 178
        assert round_half_up(4.0) == 4


# ── colours ─────────────────────────────────────────────────────────


class TestColours:
    def test_long_form(self) -> None:
        assert parse_hex("#3366ff") == (0x33, 0x66, 0xFF)

    def test_short_form(self) -> None:
        assert parse_hex("#fa0") == (0xFF, 0xAA, 0x00)

    def test_no_hash(self) -> None:
        assert parse_hex("000000") == (0, 0, 0)

    @pytest.mark.parametrize("bad", ["", "#ff", "#gggggg", "#1234567"])
    def test_invalid(self, bad: str) -> None:
        with pytest.raises(ValueError):
            parse_hex(bad)

    def test_opacity_to_alpha(self) -> None:
        assert hex_to_color("#000000", 35).alpha() == 89
        assert hex_to_color("#000000", 50).alpha() == 128
        assert hex_to_color("#000000").alpha() == 255
        assert hex_to_color("#000000", 0).alpha() == 0

    def test_opacity_clamped(self) -> None:
        assert hex_to_color("#ffffff", 150).alpha() == 255
        assert hex_to_color("#ffffff", -5).alpha() == 0


# ── numpy ↔ QImage ──────────────────────────────────────────────────


class TestArrays:
    def test_readback_shape_and_values(self) -> None:
        arr = qimage_to_rgba(solid_image(7, 3, (10, 20, 30, 255)))
        assert arr.shape == (3, 7, 4)
        assert tuple(arr[1, 5]) == (10, 20, 30, 255)

    def test_odd_width_has_no_row_padding(self) -> None:
        src = np.zeros((5, 3, 4), dtype=np.uint8)
        src[2, 1] = (1, 2, 3, 255)
        img = rgba_to_qimage(src)
        assert (img.width(), img.height()) == (3, 5)
        assert np.array_equal(qimage_to_rgba(img), src)

    def test_image_owns_its_pixels(self) -> None:
        src = np.full((2, 2, 4), 255, dtype=np.uint8)
        img = rgba_to_qimage(src)
        src[:] = 0
        assert img.pixelColor(0, 0).alpha() == 255


# ── imaging ─────────────────────────────────────────────────────────


class TestLoadImage:
    def test_from_qimage_converts_format(self) -> None:
        src = QImage(4, 4, QImage.Format.Format_RGB888)
        src.fill(0)
        assert load_image(src).format() == RENDER_FORMAT

    def test_from_path(self, tmp_path) -> None:
        path = tmp_path / "a.png"
        assert solid_image(6, 4).save(str(path), "PNG")
        img = load_image(path)
        assert (img.width(), img.height()) == (6, 4)

    def test_from_bytes(self, tmp_path) -> None:
        path = tmp_path / "a.png"
        solid_image(6, 4).save(str(path), "PNG")
        assert load_image(path.read_bytes()).width() == 6

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(ImageLoadError):
            load_image(str(tmp_path / "nope.png"))

    def test_garbage(self, tmp_path) -> None:
        path = tmp_path / "broken.png"
        path.write_bytes(b"\x89PNG but not really")
        with pytest.raises(ImageLoadError):
            load_image(str(path))

    def test_null_qimage(self) -> None:
        with pytest.raises(ImageLoadError):
            load_image(QImage())

    def test_blank_is_transparent(self) -> None:
        img = blank_image(3, 2)
        assert (img.width(), img.height()) == (3, 2)
        assert img.pixelColor(2, 1).alpha() == 0

    def test_blank_minimum_size(self) -> None:
        img = blank_image(0, 0)
        assert (img.width(), img.height()) == (1, 1)
