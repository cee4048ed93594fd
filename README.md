# termtetris

A falling-block puzzle game that runs in a plain terminal using ANSI escape
sequences. It needs nothing beyond the Python standard library, but it does
need a POSIX terminal: keyboard input goes through `termios` and `select`.

## Installing

```
pip install .
```

## Playing

```
termtetris
```

To get a repeatable sequence of blocks, give a seed:

```
termtetris --seed 42
```

After a short title animation the board (20 rows by 12 columns) is drawn and
the first block starts to fall. A shadow, drawn as `()`, shows where the
block will land.

### Keys

| Key          | Action                          |
|--------------|---------------------------------|
| `a` / `h`    | Move left                       |
| `d` / `l`    | Move right                      |
| `s`          | Move down one row               |
| `w` / `i`    | Rotate clockwise                |
| space        | Drop the block to the bottom    |
| `p`          | Pause; `p` again resumes        |
| `r`          | Restart                         |
| `t`          | Redraw the screen               |
| `x`          | Quit                            |

Keys are not case sensitive. Ctrl-C also quits; on the way out a short
farewell is shown and the terminal's echo, line input and cursor are
restored. While paused, `x` quits as well.

### Scoring

The score grows slowly with the time spent in the game (one point per 250
cycles of the main loop), and every full row you clear adds 50 points. Up to
four full rows are cleared each time a block settles. When a block settles
with part of it still above the top of the board the game is over; press `p`
to play again or `x` to quit.

## Using it as a library

The rules live in `termtetris.game` and know nothing of the screen:

```python
import random
from termtetris.game import Game, Direction, GameOver

game = Game(random.Random(1))
if game.valid_move(Direction.LEFT):
    game.move(Direction.LEFT)
if game.valid_rotation():
    game.rotate()
print(game.cells, game.shadow_cells(), game.steps_to_drop(), game.score())

try:
    cleared = game.tick()   # None while the block can still fall
except GameOver:
    game.reset()
```

- `Game.move` and `Game.rotate` raise `ValueError` when the move or rotation
  is not possible; check with `valid_move` / `valid_rotation` first.
- `Game.lock_block` settles the block into `game.board` (a `Board`) and
  returns the number of rows cleared, raising `GameOver` if the block sticks
  out above the board.
- `Board` offers `in_bounds`, `is_empty`, `is_occupied`, `fill`, `clear`,
  `occupied_cells` and `remove_full_rows`.

`termtetris.screen.Renderer` draws a `Game` on any text stream; it takes the
stream and a delay function (default `time.sleep`), so it can write to an
`io.StringIO` without pausing. `termtetris.app.App` ties a game and a
renderer together with a key source: a callable that takes a timeout in
seconds and returns one character or `None`. `termtetris.terminal` holds the
ANSI sequences, `key_pressed` and the `raw_mode` context manager.

## What it does not do

There is no colour, no preview of the next block, no high-score table and no
saved state: the score is shown on screen and is gone when you quit. The
falling speed stays the same for the whole game.

## Running the tests

```
pip install .[test]
pytest
```