from __future__ import annotations

import wave
from pathlib import Path
from unittest.mock import Mock

import pytest

Image = pytest.importorskip("PIL.Image")

import feed_assets
from feed_assets import (
    CHARACTER_CAPTIONS,
    DRINK_SOUND,
    EATING_SOUND,
    IDLE_IMAGE,
    PLACEHOLDER_BG,
    PLACEHOLDER_FG,
    SOUND_TONES,
    SoundBank,
    build_placeholder_image,
    build_tone,
    load_character_art,
    load_food_image,
    load_image,
)
from feed_config import FOOD_PLACEHOLDER_PX, PICTURE_PX


def test_placeholder_has_border_and_grey_fill() -> None:
    image = build_placeholder_image("Niko", 100, 100)

    assert image.size == (100, 100)
    assert image.getpixel((0, 0)) == PLACEHOLDER_FG
    assert image.getpixel((99, 99)) == PLACEHOLDER_FG
    assert image.getpixel((90, 90)) == PLACEHOLDER_BG


def test_load_image_shrinks_to_target(tmp_path: Path) -> None:
    path = tmp_path / "big.png"
    Image.new("RGB", (400, 200), (255, 0, 0)).save(path)

    image = load_image(path, PICTURE_PX)

    assert image is not None
    assert image.mode == "RGBA"
    assert image.size == (100, 50)


def test_load_image_returns_none_for_missing_or_bad_files(tmp_path: Path) -> None:
    bad = tmp_path / "bad.png"
    bad.write_bytes(b"not an image")

    assert load_image(tmp_path / "missing.png") is None
    assert load_image(bad) is None


def test_missing_food_image_becomes_small_placeholder(tmp_path: Path) -> None:
    image = load_food_image(tmp_path / "Apple" / "image.png", "Apple")

    assert image.size == (FOOD_PLACEHOLDER_PX, FOOD_PLACEHOLDER_PX)


def test_character_art_falls_back_to_placeholders(tmp_path: Path) -> None:
    Image.new("RGB", (50, 50), (0, 128, 0)).save(tmp_path / "niko.png")

    art = load_character_art(tmp_path)

    assert set(art.images) == set(CHARACTER_CAPTIONS)
    assert art.get(IDLE_IMAGE).getpixel((25, 25)) == (0, 128, 0, 255)
    assert art.get("eat").size == (PICTURE_PX, PICTURE_PX)
    assert art.info_icon is not None
    assert art.window_icon is None


def test_disabled_sound_bank_is_silent(tmp_path: Path) -> None:
    bank = SoundBank(tmp_path, enabled=False)

    assert bank.sounds == {}
    bank.play(True)
    bank.play(False)


def test_sound_bank_plays_sound_matching_drink_flag(tmp_path: Path) -> None:
    bank = SoundBank(tmp_path, enabled=False)
    drink, eating = Mock(), Mock()
    bank.sounds = {DRINK_SOUND: drink, EATING_SOUND: eating}

    bank.play(True)
    bank.play(False)
    bank.play(False)

    assert drink.play.call_count == 1
    assert eating.play.call_count == 2


def test_playback_errors_are_ignored(tmp_path: Path) -> None:
    bank = SoundBank(tmp_path, enabled=False)
    broken = Mock()
    broken.play.side_effect = feed_assets.pygame.error("device lost")
    bank.sounds = {EATING_SOUND: broken}

    bank.play(False)

    broken.play.assert_called_once_with()


def test_mixer_failure_disables_sound(monkeypatch, tmp_path: Path) -> None:
    def broken_init() -> None:
        raise feed_assets.pygame.error("no audio device")

    monkeypatch.setattr(feed_assets.pygame.mixer, "get_init", lambda: None)
    monkeypatch.setattr(feed_assets.pygame.mixer, "init", broken_init)

    bank = SoundBank(tmp_path)

    assert bank.enabled is False
    assert bank.sounds == {}


@pytest.fixture
def dummy_mixer(monkeypatch):
    monkeypatch.setenv("SDL_AUDIODRIVER", "dummy")
    feed_assets.pygame.mixer.quit()
    try:
        feed_assets.pygame.mixer.init(frequency=22050, size=-16, channels=2)
    except feed_assets.pygame.error as exc:
        pytest.skip(f"pygame mixer unavailable: {exc}")
    assert feed_assets.init_mixer()
    yield feed_assets.pygame.mixer.get_init()
    feed_assets.pygame.mixer.quit()


def write_silent_wav(path: Path, sample_rate: int, channels: int, seconds: float) -> None:
    frames = int(sample_rate * seconds)
    with wave.open(str(path), "wb") as handle:
        handle.setnchannels(channels)
        handle.setsampwidth(2)
        handle.setframerate(sample_rate)
        handle.writeframes(b"\x00\x00" * channels * frames)


def test_build_tone_matches_requested_duration(dummy_mixer) -> None:
    tone = build_tone(440.0, 300, volume=2.0)

    assert isinstance(tone, feed_assets.pygame.mixer.Sound)
    assert tone.get_length() == pytest.approx(0.3, abs=0.01)
    assert tone.get_volume() == pytest.approx(1.0, abs=0.01)


def test_missing_wavs_become_generated_tones(dummy_mixer, tmp_path: Path) -> None:
    bank = SoundBank(tmp_path)

    assert bank.enabled is True
    drink = bank.sounds[DRINK_SOUND]
    assert isinstance(drink, feed_assets.pygame.mixer.Sound)
    _frequency, duration_ms, _volume = SOUND_TONES[DRINK_SOUND]
    assert drink.get_length() == pytest.approx(duration_ms / 1000.0, abs=0.01)


def test_bundled_wav_is_loaded_from_disk(dummy_mixer, tmp_path: Path) -> None:
    sample_rate, _size, channels = dummy_mixer
    write_silent_wav(tmp_path / "drink.wav", sample_rate, channels, 0.75)

    bank = SoundBank(tmp_path)

    assert bank.sounds[DRINK_SOUND].get_length() == pytest.approx(0.75, abs=0.02)
    _frequency, duration_ms, _volume = SOUND_TONES[EATING_SOUND]
    assert bank.sounds[EATING_SOUND].get_length() == pytest.approx(duration_ms / 1000.0, abs=0.01)
    bank.play(True)
