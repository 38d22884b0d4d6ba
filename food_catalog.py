"""Discover feedable foods from a folder-per-food layout on disk.

Every immediate subdirectory of the foods root is one catalog entry, keyed by
the directory name. An entry is registered only when it carries both a
``data.json`` metadata file and an ``image.png`` picture::

    Foods/
        Apple/
            data.json   {"Flavor level": "8/10", "Drink": false, "Points for eating": 8}
            image.png

Metadata fields are all optional. Missing or malformed values fall back to
their defaults instead of rejecting the entry; only a file that is not a JSON
object at all causes the folder to be skipped.
"""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

from app_logging import get_logger
from feed_config import FOOD_DATA_FILENAME, FOOD_IMAGE_FILENAME, MAX_FEEDABLE_POINTS

logger = get_logger(__name__)

FLAVOR_KEY = "Flavor level"
DRINK_KEY = "Drink"
POINTS_KEY = "Points for eating"

DEFAULT_FLAVOR_LEVEL = "0/10"

PathLike = Union[str, Path]


@dataclass(frozen=True)
class FoodRecord:
    flavor_level: str = DEFAULT_FLAVOR_LEVEL
    is_drink: bool = False
    points: int = 0

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "FoodRecord":
        return cls(
            flavor_level=_coerce_flavor(payload.get(FLAVOR_KEY)),
            is_drink=_coerce_drink(payload.get(DRINK_KEY)),
            points=_coerce_points(payload.get(POINTS_KEY)),
        )


@dataclass(frozen=True)
class SkippedFood:
    name: str
    reason: str


@dataclass
class CatalogScan:
    root: Path
    foods: Dict[str, FoodRecord] = field(default_factory=dict)
    skipped: List[SkippedFood] = field(default_factory=list)
    created: bool = False


def _coerce_flavor(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return DEFAULT_FLAVOR_LEVEL


def _coerce_drink(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "false"):
            return lowered == "true"
    return False


def _coerce_points(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else 0
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return 0
    return 0


def parse_food_metadata(text: str) -> Optional[FoodRecord]:
    """Parse a ``data.json`` payload, returning ``None`` when it is unusable.

    Invalid JSON, JSON nested too deeply to decode and JSON whose top level
    is not an object all yield ``None``; anything else produces a record with
    per-field defaults.
    """

    try:
        payload = json.loads(text)
    except (ValueError, RecursionError):
        return None
    if not isinstance(payload, dict):
        return None
    return FoodRecord.from_mapping(payload)


def food_image_path(root: PathLike, name: str) -> Path:
    return Path(root) / name / FOOD_IMAGE_FILENAME


def scan_catalog(root: PathLike) -> CatalogScan:
    """Scan ``root`` and report both registered and skipped foods.

    A missing root is created empty. Problems confined to one folder are
    recorded in :attr:`CatalogScan.skipped`; failures listing the root itself
    propagate as :class:`OSError`.
    """

    root_path = Path(root)
    scan = CatalogScan(root=root_path)
    if not root_path.exists():
        root_path.mkdir(parents=True, exist_ok=True)
        scan.created = True
        logger.info("Created empty foods directory at %s", root_path)
        return scan

    for folder in root_path.iterdir():
        if not folder.is_dir():
            continue
        name = folder.name
        data_path = folder / FOOD_DATA_FILENAME
        image_path = folder / FOOD_IMAGE_FILENAME
        if not data_path.is_file():
            scan.skipped.append(SkippedFood(name, f"missing {FOOD_DATA_FILENAME}"))
            continue
        if not image_path.is_file():
            scan.skipped.append(SkippedFood(name, f"missing {FOOD_IMAGE_FILENAME}"))
            continue
        try:
            text = data_path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as exc:
            scan.skipped.append(SkippedFood(name, f"unreadable metadata: {exc}"))
            continue
        record = parse_food_metadata(text)
        if record is None:
            scan.skipped.append(SkippedFood(name, "corrupt metadata"))
            continue
        scan.foods[name] = record

    for skipped in scan.skipped:
        logger.debug("Skipped food %r: %s", skipped.name, skipped.reason)
    logger.info(
        "Loaded %d foods from %s (%d skipped)",
        len(scan.foods),
        root_path,
        len(scan.skipped),
    )
    return scan


def load_catalog(root: PathLike) -> Dict[str, FoodRecord]:
    """Return the mapping of food name to record for every complete entry."""

    return scan_catalog(root).foods


def sorted_food_names(foods: Mapping[str, FoodRecord]) -> List[str]:
    return sorted(foods, key=lambda name: (name.casefold(), name))


def can_feed(record: Optional[FoodRecord]) -> bool:
    """Return whether the feed action should be offered for ``record``."""

    return record is not None and record.points <= MAX_FEEDABLE_POINTS


def describe_food(name: str, record: FoodRecord) -> str:
    kind = "Drink" if record.is_drink else "Food"
    return (
        f"Name: {name}\n\n"
        f"Flavor level: {record.flavor_level}\n"
        f"Type: {kind}\n"
        f"Points: {record.points}"
    )
