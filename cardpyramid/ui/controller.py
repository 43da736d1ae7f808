"""Qt-facing controller that a UI shell wires its widgets to."""

from __future__ import annotations

import logging
import random
from typing import Optional

from PySide6.QtCore import QObject, Signal

from cardpyramid.core.difficulty import DifficultySettings
from cardpyramid.core.navigation import GameSnapshot, NavigationEngine, SubmissionResult
from cardpyramid.ui.models import DifficultyState

logger = logging.getLogger(__name__)


class GameController(QObject):
    """Forwards UI events to the navigation engine and emits snapshots back.

    Every event that changes the game emits exactly one ``snapshot_changed``;
    events the engine ignores emit nothing.
    """

    snapshot_changed = Signal(object)
    difficulty_changed = Signal(object)
    sound_toggled = Signal(bool)
    game_finished = Signal(object)

    def __init__(
        self,
        settings: DifficultySettings,
        rng: Optional[random.Random] = None,
        engine: Optional[NavigationEngine] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._settings = settings
        self._engine = engine or NavigationEngine(
            height=settings.default_height,
            rng=rng,
            max_hints=settings.max_hints,
        )
        height = self._engine.height
        self._difficulty = DifficultyState(height=height, preset=settings.preset_for_height(height))
        self._sound_on = True

    @property
    def engine(self) -> NavigationEngine:
        return self._engine

    @property
    def difficulty(self) -> DifficultyState:
        return self._difficulty

    @property
    def sound_on(self) -> bool:
        return self._sound_on

    def snapshot(self) -> GameSnapshot:
        return self._engine.snapshot()

    # Board

    def on_cell_clicked(self, level: int, position: int) -> None:
        if self._engine.on_cell_clicked(level, position):
            self._emit_snapshot()

    def on_hint_requested(self) -> Optional[str]:
        hint = self._engine.hint()
        if hint is not None:
            self._emit_snapshot()
        return hint

    def on_submit_requested(self) -> Optional[SubmissionResult]:
        result = self._engine.submit_answer()
        if result is not None:
            self._emit_snapshot()
            self.game_finished.emit(result)
        return result

    def on_reveal_requested(self) -> None:
        if self._engine.reveal_enabled:
            self._engine.reveal_solution()
            self._emit_snapshot()

    def on_new_game_requested(self) -> None:
        self._engine.reset(new_levels=True, height=self._difficulty.height)
        self._emit_snapshot()

    def on_reset_requested(self) -> None:
        self._engine.reset(new_levels=False)
        self._emit_snapshot()

    # Difficulty

    def on_difficulty_changed(self, new_height: int) -> None:
        """Set the height used by the next new game. Raises ConfigurationError when out of range."""
        height = self._settings.validate_height(new_height)
        self._set_difficulty(DifficultyState(height=height, preset=self._settings.preset_for_height(height)))

    def on_preset_selected(self, index: int) -> None:
        # indices past the preset list select the custom entry, which keeps the counter value
        if 0 <= index < len(self._settings.presets):
            preset = self._settings.preset(index)
            self._set_difficulty(DifficultyState(height=preset.height, preset=preset))

    def on_difficulty_step(self, delta: int) -> None:
        height = self._settings.step(self._difficulty.height, delta)
        if height != self._difficulty.height:
            self._set_difficulty(DifficultyState(height=height))

    # Presentation

    def on_sound_toggled(self) -> None:
        self._sound_on = not self._sound_on
        self.sound_toggled.emit(self._sound_on)

    def _set_difficulty(self, state: DifficultyState) -> None:
        self._difficulty = state
        logger.debug("Difficulty set to height %d", state.height)
        self.difficulty_changed.emit(state)

    def _emit_snapshot(self) -> None:
        self.snapshot_changed.emit(self._engine.snapshot())
