from __future__ import annotations


class PyramidError(Exception):
    """Base class for errors surfaced by the card pyramid core."""


class OutOfRangeError(PyramidError, IndexError):
    """A cell coordinate lies outside the triangular pyramid."""

    def __init__(self, level: int, position: int, height: int) -> None:
        super().__init__(f"cell ({level}, {position}) is outside a pyramid of height {height}")
        self.level = level
        self.position = position
        self.height = height


class ConfigurationError(PyramidError, ValueError):
    """Invalid pyramid height or malformed difficulty configuration."""
