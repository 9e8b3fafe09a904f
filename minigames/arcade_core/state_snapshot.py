"""
State Snapshot
==============

Packs engine state into fixed-size numpy arrays for Gymnasium observations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict

import numpy as np

from minigames.arcade_core.minefield import FLAGGED, HIDDEN
from minigames.arcade_core.mines_game import Mode

if TYPE_CHECKING:
    from minigames.arcade_core.catch_game import CatchGame
    from minigames.arcade_core.mines_game import MinesGame


@dataclass
class CatchSnapshot:
    """
    Catch game state.

    Item arrays are fixed-size with a mask for the live entries, ordered as
    the engine holds them (oldest first).
    """
    basket_lane: int
    score: int
    level: int
    time_left: int
    spawn_interval_ms: int
    items_count: int
    is_active: bool
    is_over: bool

    item_lane: np.ndarray             # (MAX_ITEMS,) int8, -1 when empty
    item_y: np.ndarray                # (MAX_ITEMS,) float32
    item_category: np.ndarray         # (MAX_ITEMS,) int8, -1 when empty
    item_speed: np.ndarray            # (MAX_ITEMS,) float32
    item_mask: np.ndarray             # (MAX_ITEMS,) bool

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert to Gymnasium observation dictionary."""
        return {
            "basket_lane": np.int64(self.basket_lane),
            "score": np.array(self.score, dtype=np.int64),
            "level": np.array(self.level, dtype=np.int32),
            "time_left": np.array(self.time_left, dtype=np.int32),
            "spawn_interval_ms": np.array(self.spawn_interval_ms, dtype=np.int32),
            "items_count": np.array(self.items_count, dtype=np.int32),
            "item_lane": self.item_lane,
            "item_y": self.item_y,
            "item_category": self.item_category,
            "item_speed": self.item_speed,
            "item_mask": self.item_mask.astype(np.int8),
        }


@dataclass
class MinesSnapshot:
    """
    Minesweeper state as seen by the player.

    ``board`` uses -1 hidden, -2 flagged, 0-8 revealed counts, 9 revealed mine.
    """
    board: np.ndarray                 # (ROWS, COLS) int8
    mode: int                         # 0 reveal, 1 flag
    game_over: bool
    game_won: bool
    flags_placed: int
    hidden_count: int

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert to Gymnasium observation dictionary."""
        return {
            "board": self.board,
            "mode": np.int64(self.mode),
            "flags_placed": np.array(self.flags_placed, dtype=np.int32),
            "hidden_count": np.array(self.hidden_count, dtype=np.int32),
        }


class SnapshotBuilder:
    """Builds snapshots with pre-sized buffers."""

    def __init__(self, max_items: int = 32):
        """
        Args:
            max_items: Capacity of the catch item arrays. Extra items are
                dropped from the snapshot (oldest kept).
        """
        self._max_items = max_items

    @property
    def max_items(self) -> int:
        return self._max_items

    def build_catch(self, game: "CatchGame") -> CatchSnapshot:
        n = self._max_items
        item_lane = np.full(n, -1, dtype=np.int8)
        item_y = np.zeros(n, dtype=np.float32)
        item_category = np.full(n, -1, dtype=np.int8)
        item_speed = np.zeros(n, dtype=np.float32)
        item_mask = np.zeros(n, dtype=bool)

        items = game.items[:n]
        for i, item in enumerate(items):
            item_lane[i] = int(item.lane)
            item_y[i] = item.y
            item_category[i] = item.category.id
            item_speed[i] = item.speed
            item_mask[i] = True

        return CatchSnapshot(
            basket_lane=int(game.basket.lane),
            score=game.score,
            level=game.level,
            time_left=game.time_left,
            spawn_interval_ms=game.spawn_interval_ms,
            items_count=len(items),
            is_active=game.is_active,
            is_over=game.is_over,
            item_lane=item_lane,
            item_y=item_y,
            item_category=item_category,
            item_speed=item_speed,
            item_mask=item_mask
        )

    def build_mines(self, game: "MinesGame") -> MinesSnapshot:
        board = game.field.to_array()
        return MinesSnapshot(
            board=board,
            mode=0 if game.mode is Mode.REVEAL else 1,
            game_over=game.game_over,
            game_won=game.game_won,
            flags_placed=game.flags_placed,
            hidden_count=int(np.count_nonzero((board == HIDDEN) | (board == FLAGGED)))
        )
