"""Terminal helpers: ANSI escape sequences, keyboard polling and raw input mode."""

from __future__ import annotations

import random
import select
import sys
import termios
from contextlib import contextmanager
from typing import IO, Iterator, Union

StreamLike = Union[int, IO]

_ESC = "\x1b"


def clear_screen() -> str:
    """Return the sequence that clears the screen and homes the cursor."""
    return f"{_ESC}[2J{_ESC}[0;0H"


def move_to(row: int, col: int) -> str:
    """Return the sequence that moves the cursor to ``col`` of ``row``."""
    return f"{_ESC}[{row};{col}H"


def put_at(row: int, col: int, char: str) -> str:
    """Return the sequence that writes ``char`` at (``row``, ``col``)."""
    return move_to(row, col) + char


def hide_cursor() -> str:
    """Return the sequence that hides the cursor."""
    return f"{_ESC}[?25l"


def show_cursor() -> str:
    """Return the sequence that shows the cursor."""
    return f"{_ESC}[?25h"


def _fileno(stream: StreamLike | None) -> int:
    if stream is None:
        stream = sys.stdin
    if isinstance(stream, int):
        return stream
    return stream.fileno()


def key_pressed(stream: StreamLike | None = None, timeout: float = 0.0) -> bool:
    """Tell whether input is waiting on ``stream``, waiting up to ``timeout`` seconds."""
    fd = _fileno(stream)
    ready, _, _ = select.select([fd], [], [], timeout)
    return bool(ready)


@contextmanager
def raw_mode(stream: StreamLike | None = None) -> Iterator[None]:
    """Turn off line buffering and echo on ``stream`` for the duration of the block."""
    fd = _fileno(stream)
    saved = termios.tcgetattr(fd)
    attrs = termios.tcgetattr(fd)
    attrs[3] &= ~(termios.ICANON | termios.ECHO)
    termios.tcsetattr(fd, termios.TCSANOW, attrs)
    try:
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSANOW, saved)


def randint(rng: random.Random, low: int, high: int) -> int:
    """Return a random integer in the closed interval [low, high]."""
    if low > high:
        raise ValueError(f"empty range [{low}, {high}]")
    return rng.randint(low, high)


def lowercase(char: str) -> str:
    """Lower an ASCII capital letter; leave anything else unchanged."""
    if len(char) == 1 and "A" <= char <= "Z":
        return char.lower()
    return char