"""
Game Rules
==========

Handles basket placement, spawn cadence, collision band and round
termination for the catch game.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, Optional

from minigames.arcade_core.config_loader import CatchConfig, get_config


class Lane(IntEnum):
    """The three basket / item lanes."""
    LEFT = 0
    CENTER = 1
    RIGHT = 2


@dataclass
class TerminationResult:
    """Result of a round ending."""
    ended: bool
    reason: str

    @staticmethod
    def time_up() -> "TerminationResult":
        return TerminationResult(True, "time_up")

    @staticmethod
    def hazard(category_name: str) -> "TerminationResult":
        return TerminationResult(True, category_name.lower())

    @staticmethod
    def stopped() -> "TerminationResult":
        return TerminationResult(True, "stopped")


class LaneRules:
    """
    Maps position labels to lanes.

    Only labels listed as left or right move the basket sideways; every
    other value, recognised center labels included, lands in the center.
    """

    def __init__(self, config: Optional[CatchConfig] = None):
        if config is None:
            config = get_config().catch

        self._lanes = config.lanes
        self._lookup: Dict[str, Lane] = {}
        for label in config.labels.left:
            self._lookup[label.lower()] = Lane.LEFT
        for label in config.labels.right:
            self._lookup[label.lower()] = Lane.RIGHT

    def label_to_lane(self, label: object) -> Lane:
        """
        Resolve a position label to a lane.

        Args:
            label: Label emitted by the position classifier (any value).

        Returns:
            LEFT or RIGHT for recognised labels, CENTER otherwise.
        """
        if not isinstance(label, str):
            return Lane.CENTER
        return self._lookup.get(label.strip().lower(), Lane.CENTER)

    def lane_x(self, lane: Lane) -> float:
        """X coordinate of a lane."""
        return self._lanes[lane]


class SpawnRules:
    """
    Spawn cadence and fall speed as functions of the level.

    interval_ms = max(min, base - (level - 1) * step)
    speed       = base_speed + level * speed_per_level
    """

    def __init__(self, config: Optional[CatchConfig] = None):
        if config is None:
            config = get_config().catch

        spawn = config.spawn
        self._base_interval_ms = spawn.base_interval_ms
        self._min_interval_ms = spawn.min_interval_ms
        self._interval_step_ms = spawn.interval_step_ms
        self._base_speed = spawn.base_speed
        self._speed_per_level = spawn.speed_per_level

    @property
    def base_interval_ms(self) -> int:
        return self._base_interval_ms

    @property
    def min_interval_ms(self) -> int:
        return self._min_interval_ms

    def interval_ms(self, level: int) -> int:
        """Spawn interval for a level, floored at the minimum."""
        return max(
            self._min_interval_ms,
            self._base_interval_ms - (level - 1) * self._interval_step_ms
        )

    def fall_speed(self, level: int) -> float:
        """Per-frame fall speed of items spawned at a level."""
        return self._base_speed + level * self._speed_per_level


class CollisionRules:
    """Catch band and despawn line."""

    def __init__(self, config: Optional[CatchConfig] = None):
        if config is None:
            config = get_config().catch

        self._band_top = config.basket.band_top
        self._band_bottom = config.basket.band_bottom
        self._despawn_y = config.despawn_y

    @property
    def despawn_y(self) -> float:
        return self._despawn_y

    def in_band(self, y: float) -> bool:
        """True if a fall progress lies inside the inclusive catch band."""
        return self._band_top <= y <= self._band_bottom

    def is_catch(self, item_lane: int, item_y: float, basket_lane: int) -> bool:
        """An item is caught only in the basket's lane and inside the band."""
        return item_lane == basket_lane and self.in_band(item_y)

    def is_gone(self, y: float) -> bool:
        """True once an item has left the visible area."""
        return y > self._despawn_y


class GameRules:
    """
    Combined interface for all catch game rules.
    """

    def __init__(self, config: Optional[CatchConfig] = None):
        """
        Initialize game rules.

        Args:
            config: Catch configuration. Uses default if None.
        """
        if config is None:
            config = get_config().catch

        self.lanes = LaneRules(config)
        self.spawn = SpawnRules(config)
        self.collision = CollisionRules(config)
