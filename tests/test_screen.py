import io
import random

import pytest

from termtetris.game import COLS, DAMPENER, ROWS, Game
from termtetris.screen import (
    BORDER_COL_DELAY,
    BORDER_ROW_DELAY,
    HEIGHT,
    LOADING_PAUSE,
    OFF_X,
    OFF_Y,
    TITLE,
    WIDTH,
    Renderer,
)
from termtetris.terminal import clear_screen, hide_cursor, move_to, put_at, show_cursor


@pytest.fixture
def delays():
    return []


@pytest.fixture
def out():
    return io.StringIO()


@pytest.fixture
def renderer(out, delays):
    return Renderer(out, delays.append)


@pytest.fixture
def game():
    g = Game(random.Random(3))
    g.block_type = 1
    g.cells = [(5, 3), (5, 4), (6, 3), (6, 4)]
    return g


def test_show_cell_at_origin(renderer, out):
    renderer.show_cell(0, 0)
    assert out.getvalue() == put_at(OFF_X, OFF_Y, "[") + put_at(OFF_X, OFF_Y + 1, "]")


@pytest.mark.parametrize("row,col", [(-1, 3), (ROWS, 0), (0, -1), (0, COLS)])
def test_cells_outside_board_are_skipped(renderer, out, row, col):
    renderer.show_cell(row, col)
    renderer.erase(row, col)
    renderer.show_cell(0, 0)
    assert out.getvalue() == put_at(OFF_X, OFF_Y, "[") + put_at(OFF_X, OFF_Y + 1, "]")


def test_erase_writes_spaces(renderer, out):
    renderer.erase(0, 0)
    assert out.getvalue() == put_at(OFF_X, OFF_Y, " ") + put_at(OFF_X, OFF_Y + 1, " ")


def test_show_shadow_draws_landing_cells(renderer, out, game):
    renderer.show_shadow(game)
    text = out.getvalue()
    for row, col in game.shadow_cells():
        assert put_at(OFF_X + row, OFF_Y + 2 * col, "(") in text
    assert text.count(")") == len(game.cells)


def test_hide_shadow_erases_landing_cells(renderer, out, game):
    renderer.hide_shadow(game)
    text = out.getvalue()
    for row, col in game.shadow_cells():
        assert put_at(OFF_X + row, OFF_Y + 2 * col, " ") in text


def test_show_grid_draws_settled_cells(renderer, out, game, delays):
    game.board.fill(ROWS - 1, 0)
    renderer.show_grid(game)
    expected = io.StringIO()
    Renderer(expected, delays.append).show_cell(ROWS - 1, 0)
    assert out.getvalue() == expected.getvalue()


def test_show_borders_piece_counts(renderer, out):
    renderer.show_borders()
    text = out.getvalue()
    assert text.count("!") == 2 * (HEIGHT + 1)
    assert text.count("<") == HEIGHT + 1
    assert text.count(">") == HEIGHT + 1
    assert text.count("=") == WIDTH + 2
    assert put_at(OFF_X, OFF_Y - 2, "!") in text
    assert put_at(OFF_X + HEIGHT, OFF_Y - 3, "<") in text
    assert put_at(OFF_X + HEIGHT + 1, OFF_Y + WIDTH, "/") in text


def test_load_board_matches_borders_and_delays(renderer, out, delays):
    renderer.load_board()
    still = io.StringIO()
    Renderer(still, lambda _: None).show_borders()
    assert out.getvalue() == clear_screen() + still.getvalue()
    assert delays == [BORDER_ROW_DELAY] * (HEIGHT + 1) + [BORDER_COL_DELAY] * (WIDTH + 2)


def test_refresh_grid_starts_with_clear(renderer, out, game):
    game.board.fill(ROWS - 1, 2)
    renderer.refresh_grid(game)
    text = out.getvalue()
    assert text.startswith(clear_screen())
    assert put_at(OFF_X + ROWS - 1, OFF_Y + 4, "[") in text


def test_show_score(renderer, out, game):
    game.ticks = DAMPENER * 7
    renderer.show_score(game)
    assert game.score() == 7
    assert out.getvalue().endswith(f"SCORE: {game.score()}")


def test_startup(renderer, out, delays):
    renderer.startup()
    text = out.getvalue()
    prefix = hide_cursor() + clear_screen()
    assert text[: len(prefix)] == prefix
    assert "Loading..." in text
    for line in TITLE:
        assert line + "\n" in text
    assert delays[-1] == LOADING_PAUSE
    assert len(delays) == sum(len(line) for line in TITLE) + 1


def test_paused_screen(renderer, out):
    renderer.paused_screen()
    text = out.getvalue()
    assert text[: len(clear_screen())] == clear_screen()
    assert move_to(OFF_X + HEIGHT // 2 - 3, OFF_Y + WIDTH // 2 - 4) + "PAUSED" in text
    assert "Press P to resume." in text
    assert "Press X to exit." in text


def test_game_over_screen(renderer, out, game):
    renderer.game_over_screen(game)
    text = out.getvalue()
    assert text[: len(clear_screen())] == clear_screen()
    assert "GAME OVER" in text
    assert f"SCORE: {game.score()}" in text
    assert game.score() == 0
    assert "Press P to play again." in text


def test_farewell(renderer, out, delays):
    renderer.farewell()
    text = out.getvalue()
    suffix = clear_screen() + show_cursor()
    assert "Thanks for playing! :)" in text
    assert text[-len(suffix):] == suffix
    assert len(delays) == 1