"""Paths and timings shared by the feeding window and its helpers."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

APP_DIR = Path(__file__).resolve().parent
FOODS_DIR = APP_DIR / "Foods"
ASSET_DIR = APP_DIR / "assets"
USERDATA_PATH = Path("userdata") / "user.dat"

FOOD_DATA_FILENAME = "data.json"
FOOD_IMAGE_FILENAME = "image.png"

FEED_STEP_DELAY_MS = 1000
TOOLTIP_DURATION_MS = 3000

WINDOW_TITLE = "Feed whatever you want"
WINDOW_SIZE = (220, 250)
PICTURE_PX = 100
FOOD_PLACEHOLDER_PX = 64
INFO_ICON_PX = 16

MAX_FEEDABLE_POINTS = 10


@dataclass(frozen=True)
class AppConfig:
    foods_dir: Path = FOODS_DIR
    asset_dir: Path = ASSET_DIR
    userdata_path: Path = USERDATA_PATH
    step_delay_ms: int = FEED_STEP_DELAY_MS
    tooltip_ms: int = TOOLTIP_DURATION_MS
