"""Bundled character art and sounds with generated stand-ins.

Images are returned as Pillow images so the window can convert them to Tk
photos once a Tk root exists. Anything missing on disk is replaced by a
placeholder so the window never fails for lack of artwork or audio.
"""
from __future__ import annotations

import math
from array import array
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

import pygame
from PIL import Image, ImageDraw, ImageFont

from app_logging import get_logger
from feed_config import FOOD_PLACEHOLDER_PX, INFO_ICON_PX, PICTURE_PX

logger = get_logger(__name__)

RESAMPLE_LANCZOS = Image.Resampling.LANCZOS

PLACEHOLDER_BG = (211, 211, 211, 255)
PLACEHOLDER_FG = (0, 0, 0, 255)
INFO_ICON_BG = (173, 216, 230, 255)

IDLE_IMAGE = "niko"
GOOD_IMAGE = "eat"
BAD_IMAGE = "eat_bad"
VERY_BAD_IMAGE = "eat_very_bad"
INFO_IMAGE = "info"
ICON_IMAGE = "icon"

CHARACTER_CAPTIONS: Dict[str, str] = {
    IDLE_IMAGE: "Niko",
    GOOD_IMAGE: "Eating",
    BAD_IMAGE: "Eating badly",
    VERY_BAD_IMAGE: "Eating very badly",
}

DRINK_SOUND = "drink"
EATING_SOUND = "eating"

# Fallback tones: (frequency Hz, duration ms, volume)
SOUND_TONES: Dict[str, Tuple[float, int, float]] = {
    DRINK_SOUND: (660.0, 220, 0.35),
    EATING_SOUND: (330.0, 260, 0.4),
}

PathLike = Union[str, Path]


def build_placeholder_image(text: str, width: int, height: int) -> Image.Image:
    """Return a light grey tile with a black border and ``text`` in the corner."""

    image = Image.new("RGBA", (width, height), PLACEHOLDER_BG)
    draw = ImageDraw.Draw(image)
    font = ImageFont.load_default()
    draw.text((10, 10), text, font=font, fill=PLACEHOLDER_FG)
    draw.rectangle([(0, 0), (width - 1, height - 1)], outline=PLACEHOLDER_FG, width=1)
    return image


def build_info_icon(size: int = INFO_ICON_PX) -> Image.Image:
    base = Image.new("RGBA", (size, size), INFO_ICON_BG)
    draw = ImageDraw.Draw(base)
    font = ImageFont.load_default()
    bbox = draw.textbbox((0, 0), "i", font=font)
    text_x = (size - (bbox[2] - bbox[0])) / 2
    text_y = (size - (bbox[3] - bbox[1])) / 2 - bbox[1]
    draw.text((text_x, text_y), "i", font=font, fill=PLACEHOLDER_FG)
    return base


def load_image(path: PathLike, target_px: Optional[int] = None) -> Optional[Image.Image]:
    """Open ``path`` as RGBA, shrunk to fit ``target_px`` when given.

    Returns ``None`` when the file is absent or Pillow cannot read it.
    """

    image_path = Path(path)
    if not image_path.is_file():
        return None
    try:
        with Image.open(image_path) as source_image:
            working = source_image.convert("RGBA")
            if target_px is not None:
                working.thumbnail((target_px, target_px), RESAMPLE_LANCZOS)
            return working.copy()
    except (OSError, ValueError) as exc:
        logger.warning("Could not read image %s: %s", image_path, exc)
        return None


def load_food_image(path: PathLike, name: str) -> Image.Image:
    image = load_image(path, PICTURE_PX)
    if image is None:
        return build_placeholder_image(name, FOOD_PLACEHOLDER_PX, FOOD_PLACEHOLDER_PX)
    return image


@dataclass
class CharacterArt:
    images: Dict[str, Image.Image] = field(default_factory=dict)
    info_icon: Optional[Image.Image] = None
    window_icon: Optional[Image.Image] = None

    def get(self, key: str) -> Image.Image:
        return self.images[key]


def load_character_art(asset_dir: PathLike) -> CharacterArt:
    asset_path = Path(asset_dir)
    art = CharacterArt()
    for key, caption in CHARACTER_CAPTIONS.items():
        image = load_image(asset_path / f"{key}.png", PICTURE_PX)
        if image is None:
            logger.info("Using placeholder for missing asset %s.png", key)
            image = build_placeholder_image(caption, PICTURE_PX, PICTURE_PX)
        art.images[key] = image
    art.info_icon = load_image(asset_path / f"{INFO_IMAGE}.png", INFO_ICON_PX)
    if art.info_icon is None:
        art.info_icon = build_info_icon()
    art.window_icon = load_image(asset_path / f"{ICON_IMAGE}.png")
    return art


def init_mixer() -> bool:
    """Start pygame's mixer, returning ``False`` when no audio is available."""

    try:
        if not pygame.mixer.get_init():
            pygame.mixer.init()
        return pygame.mixer.get_init() is not None
    except pygame.error as exc:
        logger.info("Sound disabled: %s", exc)
        return False


def build_tone(
    frequency: float,
    duration_ms: int,
    *,
    volume: float = 0.5,
) -> Optional[pygame.mixer.Sound]:
    init_info = pygame.mixer.get_init()
    if not init_info:
        return None
    sample_rate, sample_size, channels = init_info
    if sample_size != -16:
        return None

    total_samples = max(1, int(sample_rate * (duration_ms / 1000.0)))
    amplitude = (2**15) - 1
    samples = array("h")
    for index in range(total_samples):
        theta = 2.0 * math.pi * frequency * (index / sample_rate)
        value = int(amplitude * math.sin(theta))
        for _ in range(channels):
            samples.append(value)

    try:
        sound = pygame.mixer.Sound(buffer=samples.tobytes())
    except pygame.error:
        return None
    sound.set_volume(max(0.0, min(volume, 1.0)))
    return sound


class SoundBank:
    """Drink and eating sounds, silent when the mixer is unavailable."""

    def __init__(self, asset_dir: PathLike, *, enabled: Optional[bool] = None) -> None:
        self.asset_dir = Path(asset_dir)
        self.enabled = init_mixer() if enabled is None else enabled
        self.sounds: Dict[str, Optional[pygame.mixer.Sound]] = {}
        if self.enabled:
            for key in SOUND_TONES:
                self.sounds[key] = self._load(key)

    def _load(self, key: str) -> Optional[pygame.mixer.Sound]:
        path = self.asset_dir / f"{key}.wav"
        if path.is_file():
            try:
                return pygame.mixer.Sound(str(path))
            except pygame.error as exc:
                logger.warning("Could not load sound %s: %s", path, exc)
        frequency, duration_ms, volume = SOUND_TONES[key]
        return build_tone(frequency, duration_ms, volume=volume)

    def play(self, is_drink: bool) -> None:
        sound = self.sounds.get(DRINK_SOUND if is_drink else EATING_SOUND)
        if sound is None:
            return
        try:
            sound.play()
        except pygame.error:
            pass
