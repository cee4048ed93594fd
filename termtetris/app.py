"""The main loop: reading keys, moving the block and drawing the screens."""

from __future__ import annotations

import argparse
import os
import random
import sys
from typing import Callable, Optional

from termtetris.game import Direction, Game, GameOver
from termtetris.screen import Renderer
from termtetris.terminal import key_pressed, lowercase, raw_mode

POLL_INTERVAL = 0.00075   # seconds spent waiting for a key and sleeping per cycle
MENU_POLL = 0.0005        # key wait on the pause and game-over screens

KeySource = Callable[[float], Optional[str]]

_MOVES = {
    "a": Direction.LEFT,
    "h": Direction.LEFT,
    "d": Direction.RIGHT,
    "l": Direction.RIGHT,
    "s": Direction.DOWN,
}


class App:
    """Drives a game with keys from ``keys`` and pictures from ``renderer``.

    ``keys`` is called with a timeout in seconds and returns one character,
    or None if no key arrived in time.
    """

    def __init__(self, game: Game, renderer: Renderer, keys: KeySource) -> None:
        self.game = game
        self.renderer = renderer
        self.keys = keys
        self._fall_clock = 0

    def _shift(self, direction: Direction) -> None:
        r = self.renderer
        r.hide_shadow(self.game)
        r.hide_block(self.game)
        self.game.move(direction)
        r.show_shadow(self.game)
        r.show_block(self.game)
        r.out.flush()

    def _turn(self) -> None:
        r = self.renderer
        r.hide_block(self.game)
        r.hide_shadow(self.game)
        self.game.rotate()
        r.show_shadow(self.game)
        r.show_block(self.game)
        r.out.flush()

    def _drop(self) -> None:
        while self.game.valid_move(Direction.DOWN):
            self._shift(Direction.DOWN)

    def _wait_for(self, choices: str) -> str:
        while True:
            key = self.keys(MENU_POLL)
            if key is None:
                continue
            key = lowercase(key)
            if key in choices:
                return key

    def handle_key(self, key: str) -> bool:
        """Act on one key press; return False when the player asked to quit."""
        key = lowercase(key)
        if key == "p":
            return self.pause()
        if key in _MOVES:
            direction = _MOVES[key]
            if self.game.valid_move(direction):
                self._shift(direction)
        elif key in ("w", "i"):
            if self.game.valid_rotation():
                self._turn()
        elif key == " ":
            self._drop()
        elif key == "r":
            self.restart()
        elif key == "t":
            self.renderer.refresh_grid(self.game)
        elif key == "x":
            return False
        return True

    def step(self) -> bool:
        """Run one cycle of the main loop; return False when the game should end."""
        try:
            cleared = self.game.tick()
        except GameOver:
            if not self.game_over():
                return False
            self.renderer.show_score(self.game)
        else:
            if cleared is not None:
                if cleared:
                    self.renderer.refresh_grid(self.game)
                self.renderer.show_score(self.game)

        key = self.keys(POLL_INTERVAL)
        if key is not None and not self.handle_key(key):
            return False

        if self._fall_clock >= self.game.fall_time:
            self._fall_clock -= self.game.fall_time
            if self.game.valid_move(Direction.DOWN):
                self._shift(Direction.DOWN)

        self.renderer.delay(POLL_INTERVAL)
        self._fall_clock += 1
        return True

    def pause(self) -> bool:
        """Show the pause screen; return True to resume, False to quit."""
        self.renderer.paused_screen()
        if self._wait_for("px") == "x":
            return False
        r = self.renderer
        r.refresh_grid(self.game)
        r.show_shadow(self.game)
        r.show_block(self.game)
        r.show_score(self.game)
        return True

    def game_over(self) -> bool:
        """Show the game-over screen; return True after a restart, False to quit."""
        self.renderer.game_over_screen(self.game)
        if self._wait_for("px") == "x":
            return False
        self.restart()
        return True

    def restart(self) -> None:
        self.game.reset()
        self.renderer.load_board()
        self.renderer.show_score(self.game)

    def run(self) -> None:
        """Play until the player quits or interrupts, then show the farewell."""
        r = self.renderer
        r.startup()
        r.load_board()
        r.show_shadow(self.game)
        r.show_block(self.game)
        r.show_score(self.game)
        try:
            while self.step():
                pass
        except KeyboardInterrupt:
            pass
        r.farewell()


def _stdin_keys(fd: int) -> KeySource:
    def read(timeout: float) -> Optional[str]:
        if not key_pressed(fd, timeout):
            return None
        data = os.read(fd, 1)
        if not data:
            return "x"
        return data.decode("latin-1")

    return read


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="termtetris", description="A falling-block puzzle game for the terminal."
    )
    parser.add_argument("--seed", type=int, default=None, help="seed for the block sequence")
    args = parser.parse_args(argv)

    game = Game(random.Random(args.seed))
    renderer = Renderer(sys.stdout)
    fd = sys.stdin.fileno()
    with raw_mode(fd):
        App(game, renderer, _stdin_keys(fd)).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())