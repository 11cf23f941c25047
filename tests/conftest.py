"""Shared pytest fixtures for MockupFramer tests."""

import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from PySide6.QtGui import QImage
from PySide6.QtWidgets import QApplication

from mockupframer.models import AppearanceConfig, DeviceFrame

from helpers import SCREEN_HOLE, frame_image, solid_image


@pytest.fixture(scope="session", autouse=True)
def qapp() -> QApplication:
    """One offscreen QApplication for the whole run."""
    app = QApplication.instance() or QApplication([])
    yield app


# ── Frames ──────────────────────────────────────────────────────────


@pytest.fixture
def bezel_image() -> QImage:
    """400×800 frame with a square-cornered hole at (40,40)-(360,760)."""
    return frame_image(400, 800, SCREEN_HOLE)


@pytest.fixture
def rect_polygon_frame() -> DeviceFrame:
    """Frame whose polygon is exactly the screen hole rectangle."""
    return DeviceFrame(
        filename="acme-phone-portrait.png",
        image_path="acme-phone-portrait.png",
        brand="Acme",
        model="Phone",
        orientation="portrait",
        screen_polygon=((40, 40), (360, 40), (360, 760), (40, 760)),
    )


@pytest.fixture
def bare_frame() -> DeviceFrame:
    """Frame without any geometry — the screen is found by alpha scan."""
    return DeviceFrame(
        filename="acme-tab-landscape.png",
        image_path="acme-tab-landscape.png",
        brand="Acme",
        model="Tab",
        orientation="landscape",
    )


# ── Screenshots & appearance ───────────────────────────────────────


@pytest.fixture
def wide_screenshot() -> QImage:
    """2:1 screenshot, solid green."""
    return solid_image(200, 100, (0, 200, 0, 255))


@pytest.fixture
def plain_appearance() -> AppearanceConfig:
    """No background, no shadow, default aspect, no padding."""
    return AppearanceConfig()
