"""Tests for cardpyramid.ui.controller – the signal-emitting game surface."""

from __future__ import annotations

import random

import pytest

from cardpyramid.core.difficulty import DifficultyRepository
from cardpyramid.core.errors import ConfigurationError, OutOfRangeError
from cardpyramid.core.navigation import NavigationEngine, Outcome, Phase
from cardpyramid.core.pyramid import CellState, Overlay, Pyramid
from cardpyramid.ui.controller import GameController


@pytest.fixture()
def settings():
    return DifficultyRepository().settings


@pytest.fixture()
def controller(qapp, settings) -> GameController:
    engine = NavigationEngine(
        rng=random.Random(1),
        pyramid=Pyramid.from_values([[5], [2, 3], [1, 4, 6]]),
    )
    return GameController(settings, engine=engine)


@pytest.fixture()
def snapshots(controller: GameController) -> list:
    received: list = []
    controller.snapshot_changed.connect(received.append)
    return received


# ---------------------------------------------------------------------------
# Board events
# ---------------------------------------------------------------------------

class TestBoardEvents:
    def test_click_emits_snapshot(self, controller, snapshots):
        controller.on_cell_clicked(0, 0)
        assert len(snapshots) == 1
        assert snapshots[0].cell(0, 0).state is CellState.CHOSEN
        assert snapshots[0].cell(1, 1).state is CellState.ACTIVE

    def test_ignored_click_emits_nothing(self, controller, snapshots):
        controller.on_cell_clicked(2, 0)
        assert snapshots == []

    def test_out_of_range_raises(self, controller):
        with pytest.raises(OutOfRangeError):
            controller.on_cell_clicked(5, 0)

    def test_hint(self, controller, snapshots):
        assert controller.on_hint_requested() == "1"
        assert snapshots[-1].hint_text == "1"
        assert snapshots[-1].hints_remaining == 2

    def test_submit_and_reveal(self, controller, snapshots):
        finished: list = []
        controller.game_finished.connect(finished.append)
        for level, position in enumerate((0, 0, 0)):
            controller.on_cell_clicked(level, position)
        assert snapshots[-1].submit_enabled
        result = controller.on_submit_requested()
        assert finished == [result]
        assert snapshots[-1].phase is Phase.ANSWER_SUBMITTED
        assert snapshots[-1].score == 10
        assert snapshots[-1].outcome is (Outcome.WIN if controller.engine.target == 10 else Outcome.LOSE)
        assert snapshots[-1].reveal_enabled
        controller.on_reveal_requested()
        assert any(c.overlay is Overlay.SOLUTION for row in snapshots[-1].cells for c in row)

    def test_submit_rejected_emits_nothing(self, controller, snapshots):
        assert controller.on_submit_requested() is None
        assert snapshots == []

    def test_reveal_rejected_while_playing(self, controller, snapshots):
        controller.on_reveal_requested()
        assert snapshots == []

    def test_reset_keeps_values(self, controller, snapshots):
        controller.on_cell_clicked(0, 0)
        controller.on_reset_requested()
        assert snapshots[-1].cell(0, 0).state is CellState.ACTIVE
        assert [[c.value for c in row] for row in snapshots[-1].cells] == [[5], [2, 3], [1, 4, 6]]


# ---------------------------------------------------------------------------
# Difficulty events
# ---------------------------------------------------------------------------

class TestDifficultyEvents:
    def test_initial_difficulty(self, controller):
        assert controller.difficulty.height == 3
        assert controller.difficulty.is_custom

    def test_preset_selected(self, controller):
        changes: list = []
        controller.difficulty_changed.connect(changes.append)
        controller.on_preset_selected(1)
        assert changes[-1].height == 4
        assert changes[-1].preset.key == "medium"

    def test_custom_entry_keeps_height(self, controller):
        changes: list = []
        controller.difficulty_changed.connect(changes.append)
        controller.on_preset_selected(3)
        assert changes == []
        assert controller.difficulty.height == 3

    def test_step(self, controller):
        controller.on_difficulty_step(1)
        assert controller.difficulty.height == 4
        assert controller.difficulty.is_custom
        controller.on_difficulty_step(1)
        controller.on_difficulty_step(1)
        controller.on_difficulty_step(1)
        assert controller.difficulty.height == 6

    def test_changed_validates(self, controller):
        controller.on_difficulty_changed(9)
        assert controller.difficulty.label == "9"
        with pytest.raises(ConfigurationError):
            controller.on_difficulty_changed(10)
        assert controller.difficulty.height == 9

    def test_new_game_uses_selected_height(self, controller, snapshots):
        controller.on_preset_selected(2)
        controller.on_new_game_requested()
        assert snapshots[-1].height == 6
        assert controller.engine.target in controller.engine.solution_paths


# ---------------------------------------------------------------------------
# Presentation-only events
# ---------------------------------------------------------------------------

class TestSound:
    def test_toggle(self, controller, snapshots):
        toggles: list = []
        controller.sound_toggled.connect(toggles.append)
        assert controller.sound_on
        controller.on_sound_toggled()
        controller.on_sound_toggled()
        assert toggles == [False, True]
        assert snapshots == []


class TestDefaultEngine:
    def test_builds_engine_from_settings(self, qapp, settings):
        c = GameController(settings, rng=random.Random(0))
        assert c.engine.height == settings.default_height
        assert c.difficulty.preset is not None
        assert c.snapshot().hints_remaining == settings.max_hints
