from __future__ import annotations

import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Sequence

from cardpyramid.core.errors import ConfigurationError, OutOfRangeError

MIN_HEIGHT = 2
MAX_HEIGHT = 9
MIN_VALUE = 1
MAX_VALUE = 9


class CellState(Enum):
    """Navigation state of a card."""

    INACTIVE = "inactive"
    ACTIVE = "active"
    CHOSEN = "chosen"


class Overlay(Enum):
    """Presentation-only highlight, never read by the navigation logic."""

    NONE = "none"
    SOLUTION = "solution"


@dataclass
class Cell:
    level: int
    position: int
    _value: int = field(repr=False)
    state: CellState = CellState.INACTIVE
    overlay: Overlay = Overlay.NONE

    @property
    def value(self) -> int:
        return self._value


def check_height(height: int) -> int:
    if not isinstance(height, int) or not MIN_HEIGHT <= height <= MAX_HEIGHT:
        raise ConfigurationError(
            f"pyramid height must be between {MIN_HEIGHT} and {MAX_HEIGHT}, got {height!r}"
        )
    return height


class Pyramid:
    """Triangular array of cards, apex first.

    Level ``i`` holds ``i + 1`` cards. The pyramid owns no game logic beyond
    structural queries; the navigation engine mutates cell states.
    """

    def __init__(self, levels: List[List[Cell]]) -> None:
        self._levels = levels
        self.reset_states()

    @classmethod
    def create(cls, height: int, rng: Optional[random.Random] = None) -> "Pyramid":
        """Build a pyramid of ``height`` levels with uniformly random card values."""
        check_height(height)
        rng = rng or random.Random()
        levels = [
            [Cell(i, j, rng.randint(MIN_VALUE, MAX_VALUE)) for j in range(i + 1)]
            for i in range(height)
        ]
        return cls(levels)

    @classmethod
    def from_values(cls, rows: Sequence[Sequence[int]]) -> "Pyramid":
        """Build a pyramid from explicit values, apex row first."""
        check_height(len(rows))
        levels: List[List[Cell]] = []
        for i, row in enumerate(rows):
            if len(row) != i + 1:
                raise ConfigurationError(f"level {i} must hold {i + 1} values, got {len(row)}")
            cells = []
            for j, value in enumerate(row):
                if not isinstance(value, int) or not MIN_VALUE <= value <= MAX_VALUE:
                    raise ConfigurationError(
                        f"card value at ({i}, {j}) must be between {MIN_VALUE} and {MAX_VALUE}, got {value!r}"
                    )
                cells.append(Cell(i, j, value))
            levels.append(cells)
        return cls(levels)

    @property
    def height(self) -> int:
        return len(self._levels)

    @property
    def levels(self) -> List[List[Cell]]:
        return self._levels

    @property
    def apex(self) -> Cell:
        return self._levels[0][0]

    @property
    def base(self) -> List[Cell]:
        return self._levels[-1]

    def level(self, index: int) -> List[Cell]:
        if not 0 <= index < self.height:
            raise OutOfRangeError(index, 0, self.height)
        return self._levels[index]

    def cell_at(self, level: int, position: int) -> Cell:
        if not 0 <= level < self.height or not 0 <= position <= level:
            raise OutOfRangeError(level, position, self.height)
        return self._levels[level][position]

    def values(self) -> List[List[int]]:
        return [[cell.value for cell in row] for row in self._levels]

    def reset_states(self) -> None:
        """Restore the canonical start: only the apex is selectable, no highlights."""
        for cell in self:
            cell.state = CellState.INACTIVE
            cell.overlay = Overlay.NONE
        self.apex.state = CellState.ACTIVE

    def __iter__(self) -> Iterator[Cell]:
        for row in self._levels:
            yield from row

    def __repr__(self) -> str:
        return f"Pyramid({self.values()!r})"
