"""Game state: the board, the falling block, rotation and scoring."""

from __future__ import annotations

import random
from enum import Enum
from typing import Iterator, Optional

from termtetris.terminal import randint

ROWS = 20
COLS = 12
N_BLOCK_TYPES = 7

INITIAL_FALL_TIME = 400   # loop cycles before the block falls one row
DAMPENER = 250            # score = ticks // DAMPENER
ROW_BONUS = 50            # score points per cleared row
MAX_ROWS_PER_LOCK = 4

SPEEDUP_INTERVAL = 145    # cycles between fall-time reductions
SPEEDUP_STEP = 1          # reduction per speed-up
MIN_FALL_TIME = 150

Cell = tuple[int, int]


class Direction(Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


_DELTAS: dict[Direction, Cell] = {
    Direction.UP: (-1, 0),
    Direction.DOWN: (1, 0),
    Direction.LEFT: (0, -1),
    Direction.RIGHT: (0, 1),
}


class GameOver(Exception):
    """Raised when a block comes to rest above the top of the board."""


def direction_delta(direction: Direction) -> Cell:
    """Return the (row, column) offset of one step in ``direction``."""
    return _DELTAS[Direction(direction)]


# block type -> (lowest spawn column, highest spawn column, cell offsets from (-1, column))
_SPAWNS: dict[int, tuple[int, int, tuple[Cell, ...]]] = {
    1: (3, COLS - 5, ((0, 0), (0, 1), (1, 0), (1, 1))),
    2: (3, COLS - 4, ((0, 0), (1, 0), (2, 0), (3, 0))),
    3: (4, COLS - 5, ((0, 0), (0, 1), (1, 0), (1, -1))),
    4: (3, COLS - 6, ((0, 0), (0, 1), (1, 1), (1, 2))),
    5: (3, COLS - 5, ((0, 0), (1, 0), (2, 0), (2, 1))),
    6: (4, COLS - 4, ((0, 0), (1, 0), (2, 0), (2, -1))),
    7: (4, COLS - 5, ((0, 0), (0, 1), (0, 2), (1, 1))),
}


def spawn_cells(block_type: int, rng: random.Random) -> list[Cell]:
    """Return the four cells of a fresh block of ``block_type`` at a random column."""
    try:
        low, high, offsets = _SPAWNS[block_type]
    except KeyError:
        raise ValueError(f"unknown block type {block_type!r}") from None
    col = randint(rng, low, high)
    return [(-1 + dr, col + dc) for dr, dc in offsets]


_ROTATIONS: dict[int, tuple[tuple[Cell, ...], ...]] = {
    1: (((0, 0),) * 4,) * 4,
    2: (
        ((1, 1), (0, 0), (-1, -1), (-2, -2)),
        ((1, -1), (0, 0), (-1, 1), (-2, 2)),
        ((-1, -1), (0, 0), (1, 1), (2, 2)),
        ((-1, 1), (0, 0), (1, -1), (2, -2)),
    ),
    3: (
        ((0, 0), (1, -1), (-1, -1), (-2, 0)),
        ((0, 0), (-1, -1), (-1, 1), (0, 2)),
        ((0, 0), (-1, 1), (1, 1), (2, 0)),
        ((0, 0), (1, 1), (1, -1), (0, -2)),
    ),
    4: (
        ((-1, 1), (0, 0), (-1, -1), (0, -2)),
        ((1, 1), (0, 0), (-1, 1), (-2, 0)),
        ((1, -1), (0, 0), (1, 1), (0, 2)),
        ((-1, -1), (0, 0), (1, -1), (2, 0)),
    ),
    5: (
        ((1, 1), (0, 0), (-1, -1), (0, -2)),
        ((1, -1), (0, 0), (-1, 1), (-2, 0)),
        ((-1, -1), (0, 0), (1, 1), (0, 2)),
        ((-1, 1), (0, 0), (1, -1), (2, 0)),
    ),
    6: (
        ((1, 1), (0, 0), (-1, -1), (-2, 0)),
        ((1, -1), (0, 0), (-1, 1), (0, 2)),
        ((-1, -1), (0, 0), (1, 1), (2, 0)),
        ((-1, 1), (0, 0), (1, -1), (0, -2)),
    ),
    7: (
        ((-1, 1), (0, 0), (1, -1), (-1, -1)),
        ((1, 1), (0, 0), (-1, -1), (-1, 1)),
        ((1, -1), (0, 0), (-1, 1), (1, 1)),
        ((-1, -1), (0, 0), (1, 1), (1, -1)),
    ),
}


def rotation_delta(block_type: int, orientation: int) -> tuple[Cell, ...]:
    """Return per-cell offsets that turn a block clockwise from ``orientation``."""
    if block_type not in _ROTATIONS or not 0 <= orientation < 4:
        raise ValueError(f"no rotation for block type {block_type!r}, orientation {orientation!r}")
    return _ROTATIONS[block_type][orientation]


class Board:
    """The grid of settled cells."""

    def __init__(self, rows: int = ROWS, cols: int = COLS) -> None:
        self.rows = rows
        self.cols = cols
        self._cells = [[False] * cols for _ in range(rows)]

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def _check(self, row: int, col: int) -> None:
        if not self.in_bounds(row, col):
            raise IndexError(f"cell ({row}, {col}) is outside the board")

    def is_empty(self, row: int, col: int) -> bool:
        self._check(row, col)
        return not self._cells[row][col]

    def is_occupied(self, row: int, col: int) -> bool:
        return not self.is_empty(row, col)

    def clear(self) -> None:
        for line in self._cells:
            line[:] = [False] * self.cols

    def fill(self, row: int, col: int) -> None:
        self._check(row, col)
        self._cells[row][col] = True

    def occupied_cells(self) -> Iterator[Cell]:
        """Yield every settled cell, top row first."""
        for row, line in enumerate(self._cells):
            for col, filled in enumerate(line):
                if filled:
                    yield row, col

    def remove_full_rows(self, limit: int) -> int:
        """Remove up to ``limit`` full rows from the bottom up and return how many went.

        Rows above a removed row move down by one; the top row keeps its contents.
        """
        removed = 0
        row = self.rows - 1
        while row >= 0 and removed < limit:
            if all(self._cells[row]):
                removed += 1
                for above in range(row - 1, -1, -1):
                    self._cells[above + 1] = list(self._cells[above])
            else:
                row -= 1
        return removed


class Game:
    """The board together with the falling block and the score."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng if rng is not None else random.Random()
        self.board = Board()
        self.cells: list[Cell] = []
        self.block_type = 0
        self.orientation = 0
        self.fall_time = INITIAL_FALL_TIME
        self.ticks = 0
        self._speedup_counter = 0
        self.reset()

    def reset(self) -> None:
        """Start over: empty board, initial speed, zero score and a new block."""
        self.fall_time = INITIAL_FALL_TIME
        self.ticks = 0
        self.board.clear()
        self.new_block()

    def new_block(self) -> None:
        self.block_type = randint(self.rng, 1, N_BLOCK_TYPES)
        self.cells = spawn_cells(self.block_type, self.rng)
        self.orientation = 0

    def contains(self, row: int, col: int) -> bool:
        """Tell whether (row, col) is part of the falling block."""
        return (row, col) in self.cells

    def _fits(self, cells: list[Cell]) -> bool:
        return all(
            self.board.in_bounds(row, col) and self.board.is_empty(row, col)
            for row, col in cells
        )

    def valid_move(self, direction: Direction) -> bool:
        dr, dc = direction_delta(direction)
        return self._fits([(row + dr, col + dc) for row, col in self.cells])

    def move(self, direction: Direction) -> None:
        """Move the block one step; the move must be valid."""
        if not self.valid_move(direction):
            raise ValueError(f"cannot move {Direction(direction).value}")
        dr, dc = direction_delta(direction)
        self.cells = [(row + dr, col + dc) for row, col in self.cells]

    def _landing_row(self, row: int, col: int) -> int:
        return next(
            (r for r in range(max(row, 0), self.board.rows) if self.board.is_occupied(r, col)),
            self.board.rows,
        )

    def steps_to_drop(self) -> int:
        """Number of rows the block can still fall."""
        return min(self._landing_row(row, col) - row - 1 for row, col in self.cells)

    def shadow_cells(self) -> list[Cell]:
        """Cells the block would occupy if dropped now."""
        steps = self.steps_to_drop()
        return [(row + steps, col) for row, col in self.cells]

    def _rotated(self) -> list[Cell]:
        delta = rotation_delta(self.block_type, self.orientation)
        return [(row + dr, col + dc) for (row, col), (dr, dc) in zip(self.cells, delta)]

    def valid_rotation(self) -> bool:
        if self.block_type == 1:
            return False
        return self._fits(self._rotated())

    def rotate(self) -> None:
        """Turn the block clockwise; the square block is left as it is."""
        if self.block_type == 1:
            return
        if not self.valid_rotation():
            raise ValueError("cannot rotate")
        self.cells = self._rotated()
        self.orientation = (self.orientation + 1) % 4

    def lock_block(self) -> int:
        """Settle the block into the board and return the number of rows cleared."""
        for row, col in self.cells:
            if not 0 <= row < self.board.rows:
                raise GameOver(self.score())
            self.board.fill(row, col)
        cleared = self.board.remove_full_rows(MAX_ROWS_PER_LOCK)
        self.ticks += ROW_BONUS * DAMPENER * cleared
        return cleared

    def tick(self) -> Optional[int]:
        """Advance one loop cycle.

        Returns None while the block can still fall; otherwise locks it, spawns
        the next one and returns the number of rows cleared.
        """
        self.ticks += 1
        self._speedup_counter += 1
        if (
            self._speedup_counter >= SPEEDUP_INTERVAL
            and SPEEDUP_INTERVAL >= SPEEDUP_STEP + MIN_FALL_TIME
        ):
            self._speedup_counter -= SPEEDUP_INTERVAL
            self.fall_time -= SPEEDUP_STEP
        if self.valid_move(Direction.DOWN):
            return None
        cleared = self.lock_block()
        self.new_block()
        return cleared

    def score(self) -> int:
        return self.ticks // DAMPENER