"""Drawing the board, the falling block and the game's screens with ANSI sequences."""

from __future__ import annotations

import sys
import time
from typing import IO, Callable, Iterator, Optional

from termtetris.game import COLS, ROWS, Game
from termtetris.terminal import clear_screen, hide_cursor, move_to, put_at, show_cursor

HEIGHT = 20
WIDTH = 24
OFF_X = 4
OFF_Y = 15

TITLE = (
    " _____    _        _",
    "|_   _|__| |_ _ __(_)___",
    "  | |/ _ \\ __| '__| / __|",
    "  | |  __/ |_| |  | \\__ \\",
    "  |_|\\___|\\__|_|  |_|___/",
)

TITLE_CHAR_DELAY = 0.005
LOADING_PAUSE = 2.0
BORDER_ROW_DELAY = 0.031415
BORDER_COL_DELAY = 0.015707
FAREWELL_PAUSE = 1.0


def _side_pieces(row: int) -> str:
    return (
        put_at(OFF_X + row, OFF_Y - 2, "!")
        + put_at(OFF_X + row, OFF_Y - 3, "<")
        + put_at(OFF_X + row, OFF_Y + WIDTH + 1, "!")
        + put_at(OFF_X + row, OFF_Y + WIDTH + 2, ">")
    )


def _bottom_pieces(index: int) -> str:
    slope = "/" if index % 2 == 0 else "\\"
    return put_at(OFF_X + HEIGHT, OFF_Y - 1 + index, "=") + put_at(
        OFF_X + HEIGHT + 1, OFF_Y + WIDTH - index, slope
    )


def _border_sides() -> Iterator[str]:
    return (_side_pieces(row) for row in range(HEIGHT + 1))


def _border_bottom() -> Iterator[str]:
    return (_bottom_pieces(index) for index in range(WIDTH + 2))


class Renderer:
    """Writes the game's picture to a text stream."""

    def __init__(
        self,
        out: Optional[IO[str]] = None,
        delay: Optional[Callable[[float], object]] = None,
    ) -> None:
        self.out = out if out is not None else sys.stdout
        self.delay = delay if delay is not None else time.sleep

    def _write(self, text: str) -> None:
        self.out.write(text)

    def _flush(self) -> None:
        self.out.flush()

    def show_cell_char(self, row: int, col: int, left: str, right: str) -> None:
        """Draw a two-character cell; cells outside the board are skipped."""
        if not (0 <= row < ROWS and 0 <= col < COLS):
            return
        self._write(
            put_at(OFF_X + row, OFF_Y + 2 * col, left)
            + put_at(OFF_X + row, OFF_Y + 2 * col + 1, right)
        )

    def show_cell(self, row: int, col: int) -> None:
        self.show_cell_char(row, col, "[", "]")

    def erase(self, row: int, col: int) -> None:
        self.show_cell_char(row, col, " ", " ")

    def show_block(self, game: Game) -> None:
        for row, col in game.cells:
            self.show_cell(row, col)

    def hide_block(self, game: Game) -> None:
        for row, col in game.cells:
            self.erase(row, col)

    def show_shadow(self, game: Game) -> None:
        for row, col in game.shadow_cells():
            self.show_cell_char(row, col, "(", ")")

    def hide_shadow(self, game: Game) -> None:
        for row, col in game.shadow_cells():
            self.erase(row, col)

    def show_grid(self, game: Game) -> None:
        for row, col in game.board.occupied_cells():
            self.show_cell(row, col)

    def show_borders(self) -> None:
        """Draw the well's walls and floor at once."""
        self._write("".join(_border_sides()) + "".join(_border_bottom()))

    def load_board(self) -> None:
        """Clear the screen and draw the walls and floor piece by piece."""
        self._write(clear_screen())
        for piece in _border_sides():
            self._write(piece)
            self._flush()
            self.delay(BORDER_ROW_DELAY)
        for piece in _border_bottom():
            self._write(piece)
            self._flush()
            self.delay(BORDER_COL_DELAY)

    def refresh_grid(self, game: Game) -> None:
        self._write(clear_screen())
        self.show_borders()
        self.show_grid(game)
        self._flush()

    def show_score(self, game: Game) -> None:
        self._write(move_to(OFF_X + HEIGHT // 2 - 1, OFF_Y + WIDTH + 13))
        self._write(f"SCORE: {game.score()}")
        self._flush()

    def startup(self) -> None:
        """Type out the title and pause on the loading line."""
        self._write(hide_cursor() + clear_screen())
        for line in TITLE:
            for char in line:
                self._write(char)
                self._flush()
                self.delay(TITLE_CHAR_DELAY)
            self._write("\n")
        self._write("\nLoading...\n\n")
        self._flush()
        self.delay(LOADING_PAUSE)

    def paused_screen(self) -> None:
        self._write(clear_screen())
        self.show_borders()
        self._write(move_to(OFF_X + HEIGHT // 2 - 3, OFF_Y + WIDTH // 2 - 4) + "PAUSED")
        self._write(
            move_to(OFF_X + HEIGHT // 2 - 1, OFF_Y + WIDTH // 2 - 9) + "Press P to resume."
        )
        self._write(move_to(OFF_X + HEIGHT // 2, OFF_Y + WIDTH // 2 - 9) + "Press X to exit.")
        self._flush()

    def game_over_screen(self, game: Game) -> None:
        self._write(clear_screen())
        self.show_borders()
        self._write(
            move_to(OFF_X + HEIGHT // 2 - 4, OFF_Y + WIDTH // 2 - 5) + f"SCORE: {game.score()}"
        )
        self._write(move_to(OFF_X + HEIGHT // 2 - 2, OFF_Y + WIDTH // 2 - 5) + "GAME OVER")
        self._write(
            move_to(OFF_X + HEIGHT // 2, OFF_Y + WIDTH // 2 - 11) + "Press P to play again."
        )
        self._write(
            move_to(OFF_X + HEIGHT // 2 + 1, OFF_Y + WIDTH // 2 - 11) + "Press X to exit."
        )
        self._flush()

    def farewell(self) -> None:
        """Say goodbye, clear the screen and bring the cursor back."""
        self._write(clear_screen())
        self._write("\n\n\n\t\t\tThanks for playing! :)\n")
        self._flush()
        self.delay(FAREWELL_PAUSE)
        self._write(clear_screen() + show_cursor())
        self._flush()