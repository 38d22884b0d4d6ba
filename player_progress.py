"""Persist the player's running score in a lightly obfuscated file.

The score is stored as ``{"TotalPoints": n}`` JSON, UTF-8 encoded and then
Base64 encoded. Anyone can decode it; the encoding only keeps the number from
being edited by accident in a text editor.
"""
from __future__ import annotations

import base64
import binascii
import json
import os
import tempfile
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Union

from app_logging import get_logger

logger = get_logger(__name__)

TOTAL_POINTS_KEY = "TotalPoints"

PathLike = Union[str, Path]


@dataclass
class PlayerProgress:
    total_points: int = 0

    def add_points(self, points: int) -> int:
        self.total_points += points
        return self.total_points

    def to_json(self) -> str:
        return json.dumps({TOTAL_POINTS_KEY: self.total_points}, separators=(",", ":"))

    @classmethod
    def from_json(cls, text: str) -> "PlayerProgress":
        """Build a record from serialized JSON.

        Raises :class:`ValueError` when the text is not JSON or not a record
        of the expected shape. ``null`` and a missing key both mean zero.
        """

        payload = json.loads(text)
        if payload is None:
            return cls()
        if not isinstance(payload, dict):
            raise ValueError("progress payload must be a JSON object")
        value = payload.get(TOTAL_POINTS_KEY, 0)
        if value is None:
            return cls()
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValueError(f"{TOTAL_POINTS_KEY} must be an integer, got {value!r}")
        return cls(total_points=value)


class ProgressStatus(Enum):
    LOADED = "loaded"
    MISSING = "missing"
    CORRUPT = "corrupt"


@dataclass
class ProgressLoad:
    progress: PlayerProgress = field(default_factory=PlayerProgress)
    status: ProgressStatus = ProgressStatus.MISSING

    @property
    def used_default(self) -> bool:
        return self.status is not ProgressStatus.LOADED


def encode_payload(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode_payload(text: str) -> str:
    """Reverse :func:`encode_payload`.

    Raises :class:`ValueError` for text that is not valid Base64 or does not
    decode to UTF-8.
    """

    try:
        raw = base64.b64decode(text.strip(), validate=True)
    except binascii.Error as exc:
        raise ValueError(f"invalid progress encoding: {exc}") from exc
    return raw.decode("utf-8")


def load_progress(path: PathLike) -> ProgressLoad:
    """Read the saved score from ``path``.

    A missing file and an unreadable payload both produce a zero score, told
    apart by :attr:`ProgressLoad.status`. Other I/O errors propagate.
    """

    file_path = Path(path)
    if not file_path.exists():
        return ProgressLoad(PlayerProgress(), ProgressStatus.MISSING)

    encoded = file_path.read_text(encoding="ascii", errors="replace")
    try:
        progress = PlayerProgress.from_json(decode_payload(encoded))
    except (ValueError, RecursionError) as exc:
        logger.warning("Ignoring unreadable progress file %s: %s", file_path, exc)
        return ProgressLoad(PlayerProgress(), ProgressStatus.CORRUPT)
    return ProgressLoad(progress, ProgressStatus.LOADED)


def save_progress(path: PathLike, progress: PlayerProgress) -> None:
    """Encode ``progress`` and replace the file at ``path`` in one step."""

    file_path = Path(path)
    file_path.parent.mkdir(parents=True, exist_ok=True)
    encoded = encode_payload(progress.to_json())

    handle, temp_name = tempfile.mkstemp(
        dir=str(file_path.parent), prefix=f".{file_path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(handle, "w", encoding="ascii") as stream:
            stream.write(encoded)
        os.replace(temp_name, file_path)
    except BaseException:
        Path(temp_name).unlink(missing_ok=True)
        raise
    logger.debug("Saved %d points to %s", progress.total_points, file_path)
