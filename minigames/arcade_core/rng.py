"""
RNG - Weighted Category Draw
============================

Seeded random choices for both engines: item lane and category for the
catch game, mine placement for the minesweeper board.
"""

from __future__ import annotations

import random
from typing import List, Optional, Sequence, Set, Tuple

from minigames.arcade_core.item_catalog import ItemCatalog, ItemCategory

# Decimal places kept on cumulative weights
BOUNDARY_DIGITS = 12


def weighted_index(weights: Sequence[float], r: float) -> int:
    """
    Map a uniform draw onto a weight list by cumulative scan.

    Returns the first index whose cumulative weight meets or exceeds ``r``,
    so exact boundaries resolve to the earlier entry. Draws beyond the
    accumulated total fall to the last entry.

    Running totals are rounded to ``BOUNDARY_DIGITS`` decimals so boundaries
    written in decimal (0.6 + 0.3 = 0.9) stay exact.

    Args:
        weights: Ordered weights summing to 1.0.
        r: Uniform draw in [0, 1).

    Returns:
        Selected index.
    """
    cumulative = 0.0
    for index, weight in enumerate(weights):
        cumulative = round(cumulative + weight, BOUNDARY_DIGITS)
        if r <= cumulative:
            return index
    return len(weights) - 1


class SpawnPicker:
    """
    Random lane and category selection for spawned items.

    Lanes are uniform; categories are weight-proportional.
    """

    def __init__(
        self,
        catalog: ItemCatalog,
        num_lanes: int,
        seed: Optional[int] = None
    ):
        """
        Initialize picker.

        Args:
            catalog: Item categories in draw order.
            num_lanes: Number of lanes to choose from.
            seed: Random seed for reproducibility. Random if None.
        """
        self._catalog = catalog
        self._weights = catalog.weights
        self._num_lanes = num_lanes
        self._rng = random.Random(seed)

    def pick_lane(self) -> int:
        """Choose a lane index uniformly."""
        return self._rng.randrange(self._num_lanes)

    def pick_category(self) -> ItemCategory:
        """Choose a category weighted by config weights."""
        return self._catalog[weighted_index(self._weights, self._rng.random())]

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reseed the picker.

        Args:
            seed: New random seed. Keeps current stream if None.
        """
        if seed is not None:
            self._rng = random.Random(seed)


def place_mines(
    rows: int,
    cols: int,
    mine_count: int,
    rng: random.Random
) -> List[Tuple[int, int]]:
    """
    Pick distinct mine positions by rejection sampling.

    A draw that lands on an already mined cell is retried.

    Returns:
        List of (row, col) in placement order.
    """
    if not 0 <= mine_count <= rows * cols:
        raise ValueError(f"Cannot place {mine_count} mines on {rows}x{cols} board")

    placed: List[Tuple[int, int]] = []
    taken: Set[Tuple[int, int]] = set()
    while len(placed) < mine_count:
        position = (rng.randrange(rows), rng.randrange(cols))
        if position in taken:
            continue
        taken.add(position)
        placed.append(position)
    return placed
