from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Tuple

from cardpyramid.core.pyramid import CellState, Overlay, Pyramid, check_height
from cardpyramid.core.solver import Path, ScoredPath, choose_target, enumerate_scores, group_by_product

logger = logging.getLogger(__name__)

DEFAULT_HEIGHT = 2
DEFAULT_MAX_HINTS = 3
_START = (0, 0)


class Phase(Enum):
    PLAYING = "playing"
    ANSWER_SUBMITTED = "answer_submitted"


class Outcome(Enum):
    WIN = "win"
    LOSE = "lose"

    @property
    def label(self) -> str:
        return "You Win!" if self is Outcome.WIN else "You Lose!"


@dataclass(frozen=True)
class SubmissionResult:
    """Outcome of a submitted answer and the score the player reached."""

    outcome: Outcome
    score: int
    target: int


@dataclass(frozen=True)
class CellView:
    level: int
    position: int
    value: int
    state: CellState
    overlay: Overlay


@dataclass(frozen=True)
class GameSnapshot:
    """Everything a UI shell needs to redraw the board after a transition."""

    cells: Tuple[Tuple[CellView, ...], ...]
    phase: Phase
    target: int
    submit_enabled: bool
    hint_enabled: bool
    hints_remaining: int
    hint_text: str
    reveal_enabled: bool
    outcome: Optional[Outcome] = None
    score: Optional[int] = None

    @property
    def height(self) -> int:
        return len(self.cells)

    def cell(self, level: int, position: int) -> CellView:
        return self.cells[level][position]


class NavigationEngine:
    """Selection/undo state machine for one pyramid game.

    The player starts at the apex and walks down one level per choice. Each
    chosen card multiplies the running product and opens the two cards
    directly below it. Clicking the most recent choice again steps back,
    dividing its value out of the product.

    Transitions whose preconditions do not hold are ignored: they return
    ``False`` (or ``None``) and leave every piece of state untouched. Only bad
    coordinates and bad heights raise.
    """

    def __init__(
        self,
        height: int = DEFAULT_HEIGHT,
        rng: Optional[random.Random] = None,
        pyramid: Optional[Pyramid] = None,
        max_hints: int = DEFAULT_MAX_HINTS,
    ) -> None:
        self._rng = rng or random.Random()
        self._max_hints = max_hints
        self._height = check_height(pyramid.height if pyramid is not None else height)
        self._pyramid = pyramid if pyramid is not None else Pyramid.create(self._height, self._rng)
        self._outcomes: List[ScoredPath] = []
        self._solutions: Dict[int, List[Path]] = {}
        self._target = 0
        self._current_level = 0
        self._running_product = 1
        self._history: List[Tuple[int, int]] = []
        self._phase = Phase.PLAYING
        self._result: Optional[SubmissionResult] = None
        self._hints_used = 0
        self._hint_text = ""
        self._solve()
        self._restart()

    # ------------------------------------------------------------------
    # Read-only state
    # ------------------------------------------------------------------

    @property
    def pyramid(self) -> Pyramid:
        return self._pyramid

    @property
    def height(self) -> int:
        return self._pyramid.height

    @property
    def current_level(self) -> int:
        return self._current_level

    @property
    def running_product(self) -> int:
        return self._running_product

    @property
    def history(self) -> List[Tuple[int, int]]:
        return list(self._history)

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def answer_submitted(self) -> bool:
        return self._phase is Phase.ANSWER_SUBMITTED

    @property
    def target(self) -> int:
        return self._target

    @property
    def outcomes(self) -> List[ScoredPath]:
        return list(self._outcomes)

    @property
    def solution_paths(self) -> Dict[int, List[Path]]:
        return self._solutions

    @property
    def result(self) -> Optional[SubmissionResult]:
        return self._result

    @property
    def hints_used(self) -> int:
        return self._hints_used

    @property
    def hints_remaining(self) -> int:
        return max(0, self._max_hints - self._hints_used)

    @property
    def hint_text(self) -> str:
        return self._hint_text

    @property
    def submit_enabled(self) -> bool:
        """True once a card on the last level has been chosen."""
        if self._current_level != self.height - 1:
            return False
        return self._last_level_resolved()

    @property
    def hint_enabled(self) -> bool:
        return (
            self._phase is Phase.PLAYING
            and not self._last_level_resolved()
            and self._hints_used < self._max_hints
        )

    @property
    def reveal_enabled(self) -> bool:
        return self._phase is Phase.ANSWER_SUBMITTED

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def on_cell_clicked(self, level: int, position: int) -> bool:
        """Dispatch a click to ``advance`` or ``retreat`` based on the card's state."""
        cell = self._pyramid.cell_at(level, position)
        if cell.state is CellState.ACTIVE:
            return self.advance(level, position)
        if cell.state is CellState.CHOSEN:
            return self.retreat(level, position)
        return self._reject("click on inactive card", level, position)

    def advance(self, level: int, position: int) -> bool:
        cell = self._pyramid.cell_at(level, position)
        if self._phase is not Phase.PLAYING:
            return self._reject("advance after submission", level, position)
        if cell.state is not CellState.ACTIVE:
            return self._reject("advance on non-active card", level, position)

        cell.state = CellState.CHOSEN
        self._running_product *= cell.value
        for sibling in self._pyramid.level(level):
            if sibling is not cell:
                sibling.state = CellState.INACTIVE
        if level < self.height - 1:
            self._set_pair(level + 1, (position, position + 1), CellState.ACTIVE)

        if self._current_level == 0:
            self._history = [_START]
        if self._current_level + 1 < self.height:
            self._current_level += 1
            self._history.append((position, position + 1))

        self._hint_text = ""
        logger.debug(
            "Chose card (%d, %d) value %d, product now %d",
            level, position, cell.value, self._running_product,
        )
        return True

    def retreat(self, level: int, position: int) -> bool:
        cell = self._pyramid.cell_at(level, position)
        if self._phase is not Phase.PLAYING:
            return self._reject("retreat after submission", level, position)
        if cell.state is not CellState.CHOSEN:
            return self._reject("retreat on non-chosen card", level, position)

        last = self.height - 1
        if self._current_level == last and level == self._current_level:
            # un-choose the card on the last level, the level itself stays open
            self._running_product //= cell.value
            self._set_pair(self._current_level, self._history[self._current_level], CellState.ACTIVE)
        elif level + 1 == self._current_level and not self._pair_has_choice(self._current_level):
            self._running_product //= cell.value
            self._set_pair(self._current_level, self._history[self._current_level], CellState.INACTIVE)
            del self._history[self._current_level]
            self._current_level = max(0, self._current_level - 1)
            self._set_pair(self._current_level, self._history[self._current_level], CellState.ACTIVE)
        else:
            return self._reject("retreat from a card that is not the latest choice", level, position)

        self._hint_text = ""
        logger.debug(
            "Undid card (%d, %d) value %d, product now %d",
            level, position, cell.value, self._running_product,
        )
        return True

    def submit_answer(self) -> Optional[SubmissionResult]:
        if self._phase is not Phase.PLAYING:
            self._reject("submit after submission")
            return None
        if not self.submit_enabled:
            self._reject("submit before a full path is chosen")
            return None
        outcome = Outcome.WIN if self._running_product == self._target else Outcome.LOSE
        self._result = SubmissionResult(outcome, self._running_product, self._target)
        self._phase = Phase.ANSWER_SUBMITTED
        logger.info(
            "Answer submitted: score %d, target %d, %s",
            self._running_product, self._target, outcome.value,
        )
        return self._result

    def reveal_solution(self) -> List[Path]:
        """Highlight every path that reaches the target and return those paths."""
        if self._phase is not Phase.ANSWER_SUBMITTED:
            self._reject("reveal before submission")
            return []
        paths = self._solutions.get(self._target, [])
        for path in paths:
            for level, position in enumerate(path):
                self._pyramid.cell_at(level, position).overlay = Overlay.SOLUTION
        return list(paths)

    def hint(self) -> Optional[str]:
        """Return the running product as a hint, or None once hints are unavailable."""
        if not self.hint_enabled:
            self._reject("hint unavailable")
            return None
        self._hints_used += 1
        self._hint_text = str(self._running_product)
        return self._hint_text

    def reset(self, new_levels: bool, height: Optional[int] = None) -> None:
        """Start over, either on a freshly generated pyramid or on the same cards."""
        if new_levels:
            new_height = check_height(height if height is not None else self._height)
            self._height = new_height
            self._pyramid = Pyramid.create(new_height, self._rng)
            self._solve()
        self._restart()

    def snapshot(self) -> GameSnapshot:
        cells = tuple(
            tuple(CellView(c.level, c.position, c.value, c.state, c.overlay) for c in row)
            for row in self._pyramid.levels
        )
        result = self._result
        return GameSnapshot(
            cells=cells,
            phase=self._phase,
            target=self._target,
            submit_enabled=self._phase is Phase.PLAYING and self.submit_enabled,
            hint_enabled=self.hint_enabled,
            hints_remaining=self.hints_remaining,
            hint_text=self._hint_text,
            reveal_enabled=self.reveal_enabled,
            outcome=result.outcome if result else None,
            score=result.score if result else None,
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _solve(self) -> None:
        self._outcomes = enumerate_scores(self._pyramid)
        self._solutions = group_by_product(self._outcomes)
        logger.info(
            "New pyramid of height %d: %d paths, %d distinct products",
            self.height, len(self._outcomes), len(self._solutions),
        )

    def _restart(self) -> None:
        self._pyramid.reset_states()
        self._current_level = 0
        self._running_product = 1
        self._history = []
        self._phase = Phase.PLAYING
        self._result = None
        self._hints_used = 0
        self._hint_text = ""
        self._target = choose_target(self._outcomes, self._rng)

    def _set_pair(self, level: int, pair: Tuple[int, int], state: CellState) -> None:
        for position in pair:
            self._pyramid.cell_at(level, position).state = state

    def _pair_has_choice(self, level: int) -> bool:
        return any(
            self._pyramid.cell_at(level, position).state is CellState.CHOSEN
            for position in self._history[level]
        )

    def _last_level_resolved(self) -> bool:
        return any(cell.state is CellState.CHOSEN for cell in self._pyramid.base)

    @staticmethod
    def _reject(reason: str, *coords: int) -> bool:
        logger.debug("Ignored transition (%s) at %s", reason, coords or "-")
        return False
