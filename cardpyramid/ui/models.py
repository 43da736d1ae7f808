"""Data models used by the UI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from cardpyramid.core.difficulty import Difficulty


@dataclass
class DifficultyState:
    """UI state for the difficulty selector: chosen height and matching preset."""

    height: int
    preset: Optional[Difficulty] = None

    @property
    def is_custom(self) -> bool:
        return self.preset is None

    @property
    def label(self) -> str:
        return str(self.height)
