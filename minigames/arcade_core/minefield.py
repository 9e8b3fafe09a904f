"""
Minefield
=========

Cell grid for the minesweeper engine: mine placement, neighbor counts and
flood reveal.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from minigames.arcade_core.rng import place_mines

Position = Tuple[int, int]

# Observation codes used by to_array()
HIDDEN = -1
FLAGGED = -2
REVEALED_MINE = 9

_NEIGHBOR_OFFSETS = tuple(
    (dr, dc)
    for dr in (-1, 0, 1)
    for dc in (-1, 0, 1)
    if (dr, dc) != (0, 0)
)


@dataclass
class Cell:
    """One board cell. ``neighbor_count`` is meaningless for mines."""
    is_mine: bool = False
    is_revealed: bool = False
    is_flagged: bool = False
    neighbor_count: int = 0


class Minefield:
    """
    Fixed-size grid of cells with mines placed once at construction.

    Coordinates are (row, col) with (0, 0) at the top-left.
    """

    def __init__(self, rows: int, cols: int, mine_positions: Iterable[Position]):
        """
        Build a board from explicit mine positions.

        Args:
            rows: Number of rows.
            cols: Number of columns.
            mine_positions: Distinct (row, col) pairs to mine.

        Raises:
            ValueError: On duplicate or out-of-range positions.
        """
        self._rows = rows
        self._cols = cols
        self._cells: List[List[Cell]] = [
            [Cell() for _ in range(cols)] for _ in range(rows)
        ]

        mines = list(mine_positions)
        if len(set(mines)) != len(mines):
            raise ValueError(f"Duplicate mine positions: {mines}")
        for row, col in mines:
            if not self.in_bounds(row, col):
                raise ValueError(f"Mine position ({row}, {col}) outside {rows}x{cols} board")
            self._cells[row][col].is_mine = True
        self._mine_positions: Tuple[Position, ...] = tuple(sorted(mines))

        self._calculate_neighbors()

    @classmethod
    def random(
        cls,
        rows: int,
        cols: int,
        mine_count: int,
        rng: Optional[random.Random] = None
    ) -> "Minefield":
        """Build a board with ``mine_count`` mines placed by rejection sampling."""
        if rng is None:
            rng = random.Random()
        return cls(rows, cols, place_mines(rows, cols, mine_count, rng))

    def _calculate_neighbors(self) -> None:
        for row in range(self._rows):
            for col in range(self._cols):
                cell = self._cells[row][col]
                if cell.is_mine:
                    continue
                cell.neighbor_count = sum(
                    1 for r, c in self.neighbors(row, col) if self._cells[r][c].is_mine
                )

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def mine_count(self) -> int:
        return len(self._mine_positions)

    @property
    def mine_positions(self) -> Tuple[Position, ...]:
        """Mined cells, sorted."""
        return self._mine_positions

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self._rows and 0 <= col < self._cols

    def cell(self, row: int, col: int) -> Cell:
        if not self.in_bounds(row, col):
            raise IndexError(f"Cell ({row}, {col}) out of range for {self._rows}x{self._cols} board")
        return self._cells[row][col]

    def __getitem__(self, position: Position) -> Cell:
        return self.cell(*position)

    def __iter__(self) -> Iterator[Tuple[int, int, Cell]]:
        """Iterate (row, col, cell) in row-major order."""
        for row in range(self._rows):
            for col in range(self._cols):
                yield row, col, self._cells[row][col]

    def neighbors(self, row: int, col: int) -> Iterator[Position]:
        """In-bounds 8-neighbors of a cell."""
        for dr, dc in _NEIGHBOR_OFFSETS:
            r, c = row + dr, col + dc
            if 0 <= r < self._rows and 0 <= c < self._cols:
                yield r, c

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def toggle_flag(self, row: int, col: int) -> bool:
        """
        Flip the flag on a hidden cell.

        Returns:
            True if the flag changed (False for revealed cells).
        """
        cell = self.cell(row, col)
        if cell.is_revealed:
            return False
        cell.is_flagged = not cell.is_flagged
        return True

    def flood_reveal(self, row: int, col: int) -> List[Position]:
        """
        Reveal a cell and, through zero-count cells, everything connected.

        The starting cell must be hidden and unflagged, otherwise nothing
        happens. Cells reached through a zero-count neighbor are revealed
        even if flagged, and their flag is cleared. Every cell is visited at
        most once.

        Returns:
            Newly revealed positions in reveal order. A mine, if hit, is the
            only entry.
        """
        start = self.cell(row, col)
        if start.is_revealed or start.is_flagged:
            return []

        start.is_revealed = True
        revealed: List[Position] = [(row, col)]
        if start.is_mine or start.neighbor_count > 0:
            return revealed

        stack: List[Position] = [(row, col)]
        while stack:
            r, c = stack.pop()
            for nr, nc in self.neighbors(r, c):
                neighbor = self._cells[nr][nc]
                if neighbor.is_revealed:
                    continue
                neighbor.is_flagged = False
                neighbor.is_revealed = True
                revealed.append((nr, nc))
                if neighbor.neighbor_count == 0 and not neighbor.is_mine:
                    stack.append((nr, nc))
        return revealed

    def reveal_all_mines(self) -> None:
        """Uncover every mine for inspection."""
        for row, col in self._mine_positions:
            self._cells[row][col].is_revealed = True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def unrevealed_safe_count(self) -> int:
        """Number of non-mine cells still hidden."""
        return sum(
            1 for _, _, cell in self if not cell.is_mine and not cell.is_revealed
        )

    def revealed_safe_count(self) -> int:
        return sum(1 for _, _, cell in self if not cell.is_mine and cell.is_revealed)

    def flag_count(self) -> int:
        return sum(1 for _, _, cell in self if cell.is_flagged)

    def zero_region(self, row: int, col: int) -> List[Position]:
        """
        Connected zero-count cells around a zero cell plus their numbered border.

        Read-only; used to predict what a flood reveal uncovers.
        """
        if self.cell(row, col).is_mine or self.cell(row, col).neighbor_count != 0:
            return [(row, col)]

        seen = {(row, col)}
        stack = [(row, col)]
        while stack:
            r, c = stack.pop()
            for position in self.neighbors(r, c):
                if position in seen:
                    continue
                seen.add(position)
                if self[position].neighbor_count == 0:
                    stack.append(position)
        return sorted(seen)

    def to_array(self, reveal_mines: bool = False) -> np.ndarray:
        """
        Encode the visible board as an int8 array.

        Hidden cells are -1, flagged hidden cells -2, revealed safe cells
        their neighbor count and revealed mines 9.

        Args:
            reveal_mines: Encode every mine as 9 regardless of state.
        """
        board = np.full((self._rows, self._cols), HIDDEN, dtype=np.int8)
        for row, col, cell in self:
            if cell.is_mine and (cell.is_revealed or reveal_mines):
                board[row, col] = REVEALED_MINE
            elif cell.is_revealed:
                board[row, col] = cell.neighbor_count
            elif cell.is_flagged:
                board[row, col] = FLAGGED
        return board

    @classmethod
    def from_rows(cls, layout: Sequence[str]) -> "Minefield":
        """
        Build a board from strings, ``*`` marking mines.

        Example::

            Minefield.from_rows([
                "*........",
                ".........",
                ...
            ])
        """
        rows = len(layout)
        cols = len(layout[0]) if rows else 0
        mines = [
            (r, c)
            for r, line in enumerate(layout)
            for c, char in enumerate(line)
            if char == "*"
        ]
        return cls(rows, cols, mines)
