import curses

import pytest

from spacewar.menu import main, next_selection
from spacewar.menu_ui import MENU_COUNT, MenuItem


def test_up_from_first_wraps_to_exit():
    assert next_selection(MenuItem.SCOREBOARD, curses.KEY_UP) == MenuItem.EXIT


def test_down_from_exit_wraps_to_first():
    assert next_selection(MenuItem.EXIT, curses.KEY_DOWN) == MenuItem.SCOREBOARD


def test_vi_keys_move_like_arrows():
    assert next_selection(MenuItem.SINGLE, ord("k")) == MenuItem.SCOREBOARD
    assert next_selection(MenuItem.SINGLE, ord("j")) == MenuItem.MULTI_HOST


@pytest.mark.parametrize("item", list(MenuItem))
def test_down_then_up_returns_to_start(item):
    moved = next_selection(item, curses.KEY_DOWN)
    assert next_selection(moved, curses.KEY_UP) == item


@pytest.mark.parametrize("item", list(MenuItem))
def test_other_keys_leave_selection(item):
    assert next_selection(item, ord("x")) == item
    assert next_selection(item, -1) == item


def test_full_cycle_returns_to_start():
    selected = MenuItem.MULTI_JOIN
    for _ in range(MENU_COUNT):
        selected = next_selection(selected, curses.KEY_DOWN)
    assert selected == MenuItem.MULTI_JOIN


def test_selection_stays_in_range():
    seen = set()
    selected = 0
    for _ in range(MENU_COUNT * 2):
        selected = next_selection(selected, curses.KEY_UP)
        seen.add(selected)
    assert seen == {int(item) for item in MenuItem}


def test_main_help_exits_cleanly():
    with pytest.raises(SystemExit) as excinfo:
        main(["--help"])
    assert excinfo.value.code == 0


def test_main_rejects_unknown_argument():
    with pytest.raises(SystemExit) as excinfo:
        main(["--bogus"])
    assert excinfo.value.code == 2