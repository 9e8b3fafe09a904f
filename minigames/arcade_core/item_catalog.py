"""
Item Catalog
============

Provides convenient access to falling item categories loaded from config.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

from minigames.arcade_core.config_loader import (
    CatchConfig,
    CategoryConfig,
    Color,
    get_config
)


@dataclass(frozen=True)
class ItemCategory:
    """
    Runtime representation of an item category.

    Wraps CategoryConfig with convenience properties.
    """
    config: CategoryConfig

    @property
    def id(self) -> int:
        return self.config.id

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def score(self) -> int:
        return self.config.score

    @property
    def weight(self) -> float:
        return self.config.weight

    @property
    def color(self) -> Color:
        return self.config.color

    @property
    def glyph(self) -> str:
        return self.config.glyph

    @property
    def is_hazard(self) -> bool:
        """True if catching this item ends the round (e.g., bomb)."""
        return self.config.is_hazard

    def __repr__(self) -> str:
        return f"ItemCategory({self.id}: {self.name})"


class ItemCatalog:
    """
    Ordered collection of item categories.

    Order matters: the weighted draw scans categories in this order and
    earlier entries win ties at exact cumulative boundaries.
    """

    def __init__(self, config: Optional[CatchConfig] = None):
        """
        Initialize catalog from catch config.

        Args:
            config: CatchConfig instance. If None, loads from default location.
        """
        if config is None:
            config = get_config().catch

        self._categories: Tuple[ItemCategory, ...] = tuple(
            ItemCategory(category) for category in config.categories
        )

    def __len__(self) -> int:
        return len(self._categories)

    def __getitem__(self, category_id: int) -> ItemCategory:
        """Get category by ID."""
        if 0 <= category_id < len(self._categories):
            return self._categories[category_id]
        raise IndexError(
            f"Category ID {category_id} out of range [0, {len(self._categories)})"
        )

    def __iter__(self) -> Iterator[ItemCategory]:
        return iter(self._categories)

    @property
    def categories(self) -> Tuple[ItemCategory, ...]:
        """All categories in draw order."""
        return self._categories

    @property
    def weights(self) -> Tuple[float, ...]:
        """Spawn weights in draw order."""
        return tuple(c.weight for c in self._categories)

    @property
    def hazards(self) -> Tuple[ItemCategory, ...]:
        """Categories that end the round when caught."""
        return tuple(c for c in self._categories if c.is_hazard)

    def get_by_name(self, name: str) -> Optional[ItemCategory]:
        """Get category by name (case-insensitive)."""
        name_lower = name.lower()
        for category in self._categories:
            if category.name.lower() == name_lower:
                return category
        return None
