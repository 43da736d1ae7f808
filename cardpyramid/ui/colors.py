"""Card palette and render-time composition of display states."""

from enum import Enum

from cardpyramid.core.navigation import CellView
from cardpyramid.core.pyramid import CellState, Overlay


class DisplayState(Enum):
    ACTIVE = "active"
    DISABLED = "disabled"
    CORRECT = "correct"
    SOLUTION = "solution"


class CardColors:
    """Card faces: blue is selectable, gray is locked out, red is chosen, green is the answer."""

    ACTIVE = "#1e88e5"
    DISABLED = "#9e9e9e"
    CORRECT = "#e53935"
    SOLUTION = "#43a047"

    TEXT_LIGHT = "#ffffff"
    TEXT_DARK = "#1a1a1a"


_STATE_DISPLAY = {
    CellState.ACTIVE: DisplayState.ACTIVE,
    CellState.INACTIVE: DisplayState.DISABLED,
    CellState.CHOSEN: DisplayState.CORRECT,
}

_DISPLAY_COLOR = {
    DisplayState.ACTIVE: CardColors.ACTIVE,
    DisplayState.DISABLED: CardColors.DISABLED,
    DisplayState.CORRECT: CardColors.CORRECT,
    DisplayState.SOLUTION: CardColors.SOLUTION,
}


def display_state(cell: CellView) -> DisplayState:
    """Combine navigation state and overlay. The solution highlight wins."""
    if cell.overlay is Overlay.SOLUTION:
        return DisplayState.SOLUTION
    return _STATE_DISPLAY[cell.state]


def card_color(cell: CellView) -> str:
    return _DISPLAY_COLOR[display_state(cell)]


def text_color(cell: CellView) -> str:
    # gray faces are light enough for dark text
    if display_state(cell) is DisplayState.DISABLED:
        return CardColors.TEXT_DARK
    return CardColors.TEXT_LIGHT
