from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import yaml

from cardpyramid.core.errors import ConfigurationError
from cardpyramid.core.pyramid import MAX_HEIGHT, MIN_HEIGHT

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = Path(__file__).resolve().parent.parent / "data" / "difficulty.yaml"


@dataclass(frozen=True)
class Difficulty:
    key: str
    name: str
    height: int


@dataclass(frozen=True)
class DifficultySettings:
    min_height: int
    max_height: int
    default_height: int
    step_max_height: int
    max_hints: int
    presets: List[Difficulty]

    def validate_height(self, height: int) -> int:
        if not isinstance(height, int) or not self.min_height <= height <= self.max_height:
            raise ConfigurationError(
                f"pyramid height must be between {self.min_height} and {self.max_height}, got {height!r}"
            )
        return height

    def step(self, current: int, delta: int) -> int:
        """Move the custom height counter, staying put when it would leave its range."""
        candidate = current + delta
        if candidate < self.min_height or candidate > self.step_max_height:
            return current
        return candidate

    def preset(self, index: int) -> Difficulty:
        return self.presets[index]

    def preset_for_height(self, height: int) -> Optional[Difficulty]:
        for preset in self.presets:
            if preset.height == height:
                return preset
        return None


class DifficultyRepository:
    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = Path(path) if path is not None else DEFAULT_CONFIG
        self._settings = self._load_settings()

    @property
    def settings(self) -> DifficultySettings:
        return self._settings

    def all(self) -> List[Difficulty]:
        return list(self._settings.presets)

    def get(self, key: str) -> Difficulty:
        for preset in self._settings.presets:
            if preset.key == key:
                return preset
        raise KeyError(key)

    def _load_settings(self) -> DifficultySettings:
        if not self._path.exists():
            raise FileNotFoundError(f"Difficulty file not found: {self._path}")

        name = self._path.name
        try:
            raw = yaml.safe_load(self._path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigurationError(f"{name}: invalid YAML: {e}") from e
        if not raw or not isinstance(raw, dict):
            raise ConfigurationError(f"{name}: expected a mapping with 'presets'")

        def _int(key: str, default: Optional[int] = None) -> int:
            value = raw.get(key, default)
            if not isinstance(value, int) or isinstance(value, bool):
                raise ConfigurationError(f"{name}: missing or invalid '{key}'")
            return value

        min_height = _int("min_height", MIN_HEIGHT)
        max_height = _int("max_height", MAX_HEIGHT)
        if not MIN_HEIGHT <= min_height <= max_height <= MAX_HEIGHT:
            raise ConfigurationError(
                f"{name}: heights must satisfy {MIN_HEIGHT} <= min_height <= max_height <= {MAX_HEIGHT}"
            )
        default_height = _int("default_height", min_height)
        if not min_height <= default_height <= max_height:
            raise ConfigurationError(f"{name}: 'default_height' outside [{min_height}, {max_height}]")
        step_max_height = _int("step_max_height", max_height)
        if not min_height <= step_max_height <= max_height:
            raise ConfigurationError(f"{name}: 'step_max_height' outside [{min_height}, {max_height}]")
        max_hints = _int("max_hints", 3)
        if max_hints < 0:
            raise ConfigurationError(f"{name}: 'max_hints' must not be negative")

        raw_presets = raw.get("presets")
        if not raw_presets or not isinstance(raw_presets, list):
            raise ConfigurationError(f"{name}: 'presets' has no entries")
        presets: List[Difficulty] = []
        for i, item in enumerate(raw_presets):
            if not isinstance(item, dict):
                raise ConfigurationError(f"{name}: preset #{i} is not a mapping")
            key = item.get("key")
            title = item.get("name", key)
            height = item.get("height")
            if not key or not isinstance(key, str):
                raise ConfigurationError(f"{name}: preset #{i} missing or invalid 'key'")
            if not isinstance(title, str):
                raise ConfigurationError(f"{name}: preset '{key}' has an invalid 'name'")
            if not isinstance(height, int) or not min_height <= height <= max_height:
                raise ConfigurationError(f"{name}: preset '{key}' height outside [{min_height}, {max_height}]")
            presets.append(Difficulty(key=key.strip(), name=title.strip(), height=height))

        logger.debug("Loaded %d difficulty presets from %s", len(presets), self._path)
        return DifficultySettings(
            min_height=min_height,
            max_height=max_height,
            default_height=default_height,
            step_max_height=step_max_height,
            max_hints=max_hints,
            presets=presets,
        )
