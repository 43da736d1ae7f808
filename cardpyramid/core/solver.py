"""Exhaustive enumeration of the products reachable in a pyramid."""

from __future__ import annotations

import logging
import random
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from cardpyramid.core.pyramid import Pyramid

logger = logging.getLogger(__name__)

Path = Tuple[int, ...]


@dataclass(frozen=True)
class ScoredPath:
    """One descent from the apex to the last level and the product of its cards.

    ``path[i]`` is the position chosen at level ``i``; consecutive entries
    differ by 0 or 1.
    """

    product: int
    path: Path


def enumerate_scores(pyramid: Pyramid) -> List[ScoredPath]:
    """Return every descent of ``pyramid`` with its product.

    The result holds exactly ``2 ** (height - 1)`` entries in depth-first
    order, left branch first. Equal products reached through different paths
    are all kept.
    """
    levels = pyramid.levels
    height = pyramid.height
    results: List[ScoredPath] = []
    stack: List[Tuple[int, int, Path]] = [(levels[0][0].value, 0, (0,))]
    while stack:
        product, position, path = stack.pop()
        depth = len(path)
        if depth == height:
            results.append(ScoredPath(product, path))
            continue
        below = levels[depth]
        # right pushed first so the left branch is explored first
        for child in (position + 1, position):
            stack.append((product * below[child].value, child, path + (child,)))
    logger.debug("Enumerated %d paths for pyramid of height %d", len(results), height)
    return results


def group_by_product(outcomes: Sequence[ScoredPath]) -> Dict[int, List[Path]]:
    """Map each reachable product to the paths producing it."""
    grouped: Dict[int, List[Path]] = defaultdict(list)
    for outcome in outcomes:
        grouped[outcome.product].append(outcome.path)
    return dict(grouped)


def choose_target(outcomes: Sequence[ScoredPath], rng: random.Random) -> int:
    """Draw a target uniformly from the multiset of products."""
    if not outcomes:
        raise ValueError("cannot choose a target from an empty outcome list")
    return rng.choice(outcomes).product


def path_product(pyramid: Pyramid, path: Sequence[int]) -> int:
    product = 1
    for level, position in enumerate(path):
        product *= pyramid.cell_at(level, position).value
    return product
