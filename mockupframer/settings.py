"""Persist the last used appearance between sessions via ``QSettings``."""

import json
import logging
from typing import Optional

from PySide6.QtCore import QSettings

from .models import AppearanceConfig, DEFAULT_APPEARANCE

logger = logging.getLogger(__name__)

ORG_NAME = "MockupFramer"
APP_NAME = "MockupFramer"
_APPEARANCE_KEY = "appearance"


def open_settings() -> QSettings:
    return QSettings(ORG_NAME, APP_NAME)


def save_appearance(appearance: AppearanceConfig,
                    settings: Optional[QSettings] = None) -> None:
    s = settings or open_settings()
    s.setValue(_APPEARANCE_KEY, json.dumps(appearance.to_dict()))
    s.sync()


def load_appearance(settings: Optional[QSettings] = None) -> AppearanceConfig:
    """Stored appearance, or the defaults if none / unreadable."""
    s = settings or open_settings()
    raw = s.value(_APPEARANCE_KEY, "")
    if not raw:
        return DEFAULT_APPEARANCE
    try:
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError(f"expected an object, got {type(data).__name__}")
        return AppearanceConfig.from_dict(data)
    except (ValueError, TypeError, KeyError) as exc:
        logger.warning("Ignoring stored appearance: %s", exc)
        return DEFAULT_APPEARANCE
