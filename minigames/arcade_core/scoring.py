"""
Scoring System
==============

Tracks the catch game's score and level.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from minigames.arcade_core.config_loader import CatchConfig, get_config


@dataclass
class ScoreEvent:
    """Record of a scoring event."""
    points: int
    category_name: str
    score: int
    level: int
    leveled_up: bool = False

    def __repr__(self) -> str:
        suffix = f", level_up={self.level}" if self.leveled_up else ""
        return f"ScoreEvent({self.category_name}={self.points:+d}{suffix})"


class ScoreTracker:
    """
    Tracks score and level for one round.

    The level follows ``score // points_per_level + 1`` whenever that value
    exceeds the current level. It never goes down, even if the score does.
    """

    def __init__(self, config: Optional[CatchConfig] = None):
        """
        Initialize score tracker.

        Args:
            config: Catch configuration. Uses default if None.
        """
        if config is None:
            config = get_config().catch

        self._points_per_level = config.points_per_level
        self._score: int = 0
        self._level: int = 1
        self._catches: int = 0

    @property
    def score(self) -> int:
        """Current total score."""
        return self._score

    @property
    def level(self) -> int:
        """Current level (>= 1)."""
        return self._level

    @property
    def catches(self) -> int:
        """Number of scoring catches this round."""
        return self._catches

    def level_for_score(self, score: int) -> int:
        """Level bracket a score belongs to."""
        return score // self._points_per_level + 1

    def apply_catch(self, points: int, category_name: str = "") -> ScoreEvent:
        """
        Add the points of a caught item and update the level.

        Args:
            points: Signed score delta of the caught item.
            category_name: Name used in the event record.

        Returns:
            ScoreEvent describing the change.
        """
        self._score += points
        self._catches += 1

        leveled_up = False
        bracket = self.level_for_score(self._score)
        if bracket > self._level:
            self._level = bracket
            leveled_up = True

        return ScoreEvent(
            points=points,
            category_name=category_name,
            score=self._score,
            level=self._level,
            leveled_up=leveled_up
        )

    def reset(self) -> None:
        """Reset score and level."""
        self._score = 0
        self._level = 1
        self._catches = 0
