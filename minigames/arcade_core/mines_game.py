"""
Mines Game
==========

Minesweeper engine for the fixed 9x9 / 9-mine board with point-and-click
input and a reveal/flag mode toggle.
"""

from __future__ import annotations

import logging
import math
import random
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple, Union

from minigames.arcade_core.config_loader import MinesConfig, get_config
from minigames.arcade_core.minefield import Minefield, Position
from minigames.arcade_core.surface import ALIGN_CENTER, BASELINE_MIDDLE, Surface

logger = logging.getLogger(__name__)

AlertCallback = Callable[[str], None]


class Mode(str, Enum):
    """How a click is interpreted."""
    REVEAL = "REVEAL"
    FLAG = "FLAG"


class MinesGame:
    """
    Minesweeper engine.

    State flags ``active``, ``game_over`` and ``game_won`` are read directly
    by the caller. A mine hit additionally raises a terminal alert through
    ``on_alert`` listeners.
    """

    def __init__(self, config: Optional[MinesConfig] = None, seed: Optional[int] = None):
        """
        Initialize engine. The board is created by ``init``.

        Args:
            config: Mines configuration. Uses default if None.
            seed: Random seed for mine placement.
        """
        if config is None:
            config = get_config().mines

        self._config = config
        self._rng = random.Random(seed)
        self._alert_listeners: List[AlertCallback] = []

        self._field: Optional[Minefield] = None
        self._mode = Mode.REVEAL
        self._active = False
        self._game_over = False
        self._game_won = False

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def config(self) -> MinesConfig:
        return self._config

    @property
    def field(self) -> Minefield:
        """Current board. Raises if ``init`` was never called."""
        if self._field is None:
            raise RuntimeError("Board not created yet. Call init() first.")
        return self._field

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def active(self) -> bool:
        return self._active

    @property
    def game_over(self) -> bool:
        return self._game_over

    @property
    def game_won(self) -> bool:
        return self._game_won

    @property
    def cell_size(self) -> float:
        return self._config.cell_size

    @property
    def flags_placed(self) -> int:
        return self._field.flag_count() if self._field is not None else 0

    @property
    def mines_remaining(self) -> int:
        """Mine count minus flags placed (may go negative)."""
        return self._config.mine_count - self.flags_placed

    def on_alert(self, callback: AlertCallback) -> None:
        """Register ``callback(message)`` for the mine-hit alert."""
        self._alert_listeners.append(callback)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def init(
        self,
        seed: Optional[int] = None,
        mine_positions: Optional[Iterable[Position]] = None
    ) -> None:
        """
        Start a fresh board.

        Args:
            seed: Reseed mine placement. Keeps current stream if None.
            mine_positions: Fixed layout instead of random placement. Must
                contain exactly ``mine_count`` distinct cells.

        Raises:
            ValueError: If a fixed layout has the wrong mine count.
        """
        if seed is not None:
            self._rng = random.Random(seed)

        cfg = self._config
        if mine_positions is None:
            self._field = Minefield.random(cfg.rows, cfg.cols, cfg.mine_count, self._rng)
        else:
            positions = list(mine_positions)
            if len(set(positions)) != cfg.mine_count:
                raise ValueError(
                    f"Expected {cfg.mine_count} distinct mines, got {len(set(positions))}"
                )
            self._field = Minefield(cfg.rows, cfg.cols, positions)

        self._mode = Mode.REVEAL
        self._active = True
        self._game_over = False
        self._game_won = False
        logger.info("Mines board ready (%dx%d, %d mines)", cfg.rows, cfg.cols, cfg.mine_count)

    def set_mode(self, mode: Union[Mode, str]) -> None:
        """
        Switch click interpretation.

        Raises:
            ValueError: For anything other than REVEAL or FLAG.
        """
        self._mode = Mode(mode.upper() if isinstance(mode, str) else mode)
        logger.debug("Mode set to %s", self._mode.value)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def pixel_to_cell(self, x: float, y: float) -> Optional[Position]:
        """
        Map pixel coordinates to (row, col).

        Returns:
            The cell, or None if the point falls outside the board.
        """
        col = math.floor(x / self._config.cell_size)
        row = math.floor(y / self._config.cell_size)
        if 0 <= row < self._config.rows and 0 <= col < self._config.cols:
            return row, col
        return None

    def cell_center(self, row: int, col: int) -> Tuple[float, float]:
        """Pixel center of a cell."""
        size = self._config.cell_size
        return (col + 0.5) * size, (row + 0.5) * size

    def handle_click(self, x: float, y: float) -> bool:
        """
        Apply a click in the current mode, then check for a win.

        Ignored unless a round is in progress.

        Returns:
            True if the click landed on a cell and was dispatched.
        """
        if not self._active or self._game_over or self._game_won:
            return False

        position = self.pixel_to_cell(x, y)
        if position is None:
            return False

        row, col = position
        if self._mode is Mode.REVEAL:
            self.reveal(row, col)
        else:
            self.toggle_flag(row, col)
        self.check_win_condition()
        return True

    def toggle_flag(self, row: int, col: int) -> bool:
        """Flip the flag on a hidden cell. No-op on revealed cells."""
        return self.field.toggle_flag(row, col)

    def reveal(self, row: int, col: int) -> List[Position]:
        """
        Uncover a cell; flood through zero-count cells.

        No-op on revealed or flagged cells. Uncovering a mine ends the game,
        shows every mine and raises the terminal alert.

        Returns:
            Newly revealed positions (before mines are shown on a loss).
        """
        field = self.field
        revealed = field.flood_reveal(row, col)
        if not revealed:
            return revealed

        if field[(row, col)].is_mine:
            self._game_over = True
            field.reveal_all_mines()
            logger.info("Mine hit at (%d, %d)", row, col)
            for callback in list(self._alert_listeners):
                callback(self._config.mine_alert)
        elif len(revealed) > 1:
            logger.debug("Flood reveal from (%d, %d): %d cells", row, col, len(revealed))
        return revealed

    def check_win_condition(self) -> bool:
        """
        Mark the game won once every safe cell is revealed.

        Skipped if the game is already over.

        Returns:
            True if the game is won.
        """
        if self._game_over:
            return self._game_won

        if self.field.unrevealed_safe_count() == 0:
            self._game_won = True
            self._game_over = True
            logger.info("Board cleared")
        return self._game_won

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def render(self, surface: Surface) -> None:
        """Draw the board. No-op until ``init``."""
        if not self._active or self._field is None:
            return

        cfg = self._config
        colors = cfg.colors
        size = cfg.cell_size
        half = size / 2

        surface.fill_rect(0, 0, cfg.board_pixels, cfg.board_pixels, colors.background)

        for row, col, cell in self._field:
            x = col * size
            y = row * size

            surface.stroke_rect(x, y, size, size, colors.border)

            if cell.is_revealed:
                if cell.is_mine:
                    surface.fill_rect(x, y, size, size, colors.mine_background)
                    surface.draw_text(
                        cfg.mine_glyph, x + half, y + half, colors.mine_glyph,
                        size=cfg.font_size, align=ALIGN_CENTER, baseline=BASELINE_MIDDLE
                    )
                else:
                    surface.fill_rect(x, y, size, size, colors.revealed)
                    if cell.neighbor_count > 0:
                        surface.draw_text(
                            str(cell.neighbor_count), x + half, y + half,
                            self.number_color(cell.neighbor_count),
                            size=cfg.font_size, align=ALIGN_CENTER, baseline=BASELINE_MIDDLE
                        )
            else:
                surface.fill_rect(x + 1, y + 1, size - 2, size - 2, colors.hidden)
                if cell.is_flagged:
                    surface.draw_text(
                        cfg.flag_glyph, x + half, y + half, colors.flag_glyph,
                        size=cfg.font_size, align=ALIGN_CENTER, baseline=BASELINE_MIDDLE
                    )

    def number_color(self, count: int) -> Tuple[int, ...]:
        """Color for a neighbor count (1-8)."""
        if 1 <= count <= len(self._config.number_colors):
            return self._config.number_colors[count - 1]
        return (0, 0, 0)

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        revealed = self._field.revealed_safe_count() if self._field is not None else 0
        return {
            "mode": self._mode.value,
            "active": self._active,
            "game_over": self._game_over,
            "game_won": self._game_won,
            "revealed_safe": revealed,
            "safe_total": self._config.safe_cell_count,
            "flags_placed": self.flags_placed,
        }
