"""Application setup for the card pyramid puzzle."""

import logging
import random
from pathlib import Path
from typing import Optional

from cardpyramid.core.difficulty import DifficultyRepository
from cardpyramid.ui.controller import GameController


def configure_logging(level: int = logging.INFO) -> None:
    """Configure application-wide logging with a standard format."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def create_controller(
    config_path: Optional[Path] = None,
    rng: Optional[random.Random] = None,
) -> GameController:
    """Load the difficulty settings and build a controller with a fresh game."""
    configure_logging()
    repository = DifficultyRepository(config_path)
    controller = GameController(repository.settings, rng=rng)
    logging.info(
        "Started game at height %d, target %d",
        controller.engine.height,
        controller.engine.target,
    )
    return controller
