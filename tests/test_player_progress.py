from __future__ import annotations

import base64
from pathlib import Path

import pytest

from player_progress import (
    PlayerProgress,
    ProgressStatus,
    decode_payload,
    encode_payload,
    load_progress,
    save_progress,
)


def test_missing_file_loads_zero(tmp_path: Path) -> None:
    loaded = load_progress(tmp_path / "userdata" / "user.dat")

    assert loaded.progress.total_points == 0
    assert loaded.status is ProgressStatus.MISSING
    assert loaded.used_default


def test_save_then_load_keeps_score(tmp_path: Path) -> None:
    path = tmp_path / "userdata" / "user.dat"

    save_progress(path, PlayerProgress(total_points=37))
    loaded = load_progress(path)

    assert loaded.status is ProgressStatus.LOADED
    assert loaded.progress.total_points == 37


def test_saved_file_is_base64_json(tmp_path: Path) -> None:
    path = tmp_path / "user.dat"

    save_progress(path, PlayerProgress(total_points=12))

    raw = path.read_text(encoding="ascii")
    assert base64.b64decode(raw).decode("utf-8") == '{"TotalPoints":12}'


def test_save_replaces_previous_file_without_leftovers(tmp_path: Path) -> None:
    path = tmp_path / "userdata" / "user.dat"

    save_progress(path, PlayerProgress(total_points=1))
    save_progress(path, PlayerProgress(total_points=2))

    assert load_progress(path).progress.total_points == 2
    assert [entry.name for entry in path.parent.iterdir()] == ["user.dat"]


@pytest.mark.parametrize(
    "content",
    [
        "%%% not base64 %%%",
        encode_payload("not json"),
        encode_payload("[1, 2]"),
        encode_payload('{"TotalPoints": "many"}'),
        base64.b64encode(b"\xff\xfe").decode("ascii"),
    ],
)
def test_unreadable_content_falls_back_to_zero(tmp_path: Path, content: str) -> None:
    path = tmp_path / "user.dat"
    path.write_text(content, encoding="ascii")

    loaded = load_progress(path)

    assert loaded.progress.total_points == 0
    assert loaded.status is ProgressStatus.CORRUPT


def test_missing_key_and_null_mean_zero(tmp_path: Path) -> None:
    path = tmp_path / "user.dat"
    for payload in ("{}", "null"):
        path.write_text(encode_payload(payload), encoding="ascii")

        loaded = load_progress(path)

        assert loaded.status is ProgressStatus.LOADED
        assert loaded.progress.total_points == 0


def test_directory_in_place_of_file_propagates(tmp_path: Path) -> None:
    path = tmp_path / "user.dat"
    path.mkdir()

    with pytest.raises(OSError):
        load_progress(path)


def test_encoding_is_reversible() -> None:
    text = '{"TotalPoints":-4}'

    assert decode_payload(encode_payload(text)) == text


def test_add_points_returns_new_total() -> None:
    progress = PlayerProgress(total_points=5)

    assert progress.add_points(3) == 8
    assert progress.add_points(-10) == -2


def test_deeply_nested_payload_falls_back_to_zero(tmp_path: Path) -> None:
    path = tmp_path / "user.dat"
    path.write_text(encode_payload("[" * 200000), encoding="ascii")

    loaded = load_progress(path)

    assert loaded.progress.total_points == 0
    assert loaded.status is ProgressStatus.CORRUPT
