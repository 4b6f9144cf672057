"""Main menu, name and address prompts, and the scoreboard window."""

from __future__ import annotations

import curses
import locale
import os
import sys
from enum import IntEnum

from .models import (
    COLOR_PAIR_ACCENT,
    COLOR_PAIR_BORDER,
    COLOR_PAIR_CREDITS,
    COLOR_PAIR_DECO_BLUE,
    COLOR_PAIR_NORMAL,
    COLOR_PAIR_SELECTED,
    COLOR_PAIR_STAR,
    COLOR_PAIR_STATUS,
    COLOR_PAIR_TITLE,
)
from .score import TOP_SCORES_DISPLAY, format_score_line
from .widgets import (
    _acs,
    _addch,
    _addstr,
    _attrs,
    _color_attr,
    _hline,
    draw_box_with_shadow,
)


class MenuItem(IntEnum):
    """Entries of the main menu, in display order."""

    SCOREBOARD = 0
    SINGLE = 1
    MULTI_HOST = 2
    MULTI_JOIN = 3
    EXIT = 4

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def icon(self) -> str:
        return _ICONS[self]


_LABELS = {
    MenuItem.SCOREBOARD: "SCOREBOARD",
    MenuItem.SINGLE: "1 PLAYER",
    MenuItem.MULTI_HOST: "2P HOST",
    MenuItem.MULTI_JOIN: "2P JOIN",
    MenuItem.EXIT: "EXIT",
}
_ICONS = {
    MenuItem.SCOREBOARD: "[1]",
    MenuItem.SINGLE: "[2]",
    MenuItem.MULTI_HOST: "[3]",
    MenuItem.MULTI_JOIN: "[4]",
    MenuItem.EXIT: "[0]",
}

MENU_COUNT = len(MenuItem)
MENU_HEIGHT = 22
MENU_WIDTH = 54

LOGO = "SPACE WAR"
TAGLINE = "THE GALAXY IS WAITING. JOIN THE FIGHT, PILOT!"
CREDITS = "0204 v1.3"
MENU_HINT = "      -> : MOVE   Enter: SELECT   Q: BACK"
TITLE_LINES = (
    "#  # #### #  # #  #",
    "#### #    ## # #  #",
    "#### #### # ## #  #",
    "#  # #    #  # #  #",
    "#  # #### #  # ####",
)

DEFAULT_NAME = "PLAYER"
DEFAULT_SERVER_IP = "127.0.0.1"
INPUT_MAX_LEN = 32

SCOREBOARD_TITLE = "HALL OF FAME"
SCOREBOARD_HEADER = "RANK  NAME         SCORE    MODE"
SCOREBOARD_EMPTY = "NO RECORDS FOUND."
SCOREBOARD_HINT = "PRESS ANY KEY TO CLOSE"

_COLOR_PAIRS = (
    (COLOR_PAIR_NORMAL, curses.COLOR_WHITE, curses.COLOR_BLACK),
    (COLOR_PAIR_SELECTED, curses.COLOR_YELLOW, curses.COLOR_BLUE),
    (COLOR_PAIR_TITLE, curses.COLOR_MAGENTA, curses.COLOR_BLACK),
    (COLOR_PAIR_BORDER, curses.COLOR_CYAN, curses.COLOR_BLACK),
    (COLOR_PAIR_ACCENT, curses.COLOR_GREEN, curses.COLOR_BLACK),
    (COLOR_PAIR_STATUS, curses.COLOR_BLACK, curses.COLOR_MAGENTA),
    (COLOR_PAIR_DECO_BLUE, curses.COLOR_BLUE, curses.COLOR_BLACK),
    (COLOR_PAIR_STAR, curses.COLOR_WHITE, curses.COLOR_BLACK),
    (COLOR_PAIR_CREDITS, curses.COLOR_YELLOW, curses.COLOR_BLACK),
)


def init_colors() -> None:
    """Define the colour pairs used by the menu screens."""
    for pair, foreground, background in _COLOR_PAIRS:
        curses.init_pair(pair, foreground, background)


def _cursor(visibility: int) -> None:
    try:
        curses.curs_set(visibility)
    except curses.error:
        pass


def _set_echo(on: bool) -> None:
    try:
        if on:
            curses.echo()
        else:
            curses.noecho()
    except curses.error:
        pass


def _restore_blocking_stdin() -> None:
    try:
        os.set_blocking(sys.stdin.fileno(), True)
    except (OSError, ValueError, AttributeError):
        pass


def init_screen(screen) -> None:
    """Put the terminal in menu mode; also restores it after a game has run."""
    _restore_blocking_stdin()
    locale.setlocale(locale.LC_ALL, "")
    screen.clear()
    screen.refresh()
    if curses.has_colors():
        curses.start_color()
        init_colors()
    curses.cbreak()
    curses.noecho()
    _cursor(0)
    screen.keypad(True)
    screen.timeout(100)
    screen.touchwin()
    screen.refresh()


def draw_background(screen, board) -> None:
    """Draw the title bar, the frame and the status bar with the high score."""
    max_y, max_x = screen.getmaxyx()
    screen.bkgd(" ", _color_attr(COLOR_PAIR_NORMAL))
    screen.erase()

    with _attrs(screen, _color_attr(COLOR_PAIR_BORDER) | curses.A_BOLD):
        screen.box()
    with _attrs(screen, _color_attr(COLOR_PAIR_STATUS) | curses.A_BOLD):
        _hline(screen, 1, 1, " ", max_x - 2)
    with _attrs(screen, _color_attr(COLOR_PAIR_TITLE) | curses.A_BOLD | curses.A_BLINK):
        _addstr(screen, 1, (max_x - len(LOGO)) // 2, LOGO)
    with _attrs(screen, _color_attr(COLOR_PAIR_ACCENT) | curses.A_BOLD):
        _addstr(screen, 2, (max_x - len(TAGLINE)) // 2, TAGLINE)

    status_y = max_y - 3
    status_w = max_x - 2
    with _attrs(screen, _color_attr(COLOR_PAIR_DECO_BLUE)):
        _hline(screen, status_y - 1, 1, _acs("ACS_HLINE", "-"), status_w)
    _hline(screen, status_y, 1, " ", status_w)
    with _attrs(screen, _color_attr(COLOR_PAIR_CREDITS) | curses.A_BOLD):
        _addstr(screen, status_y, 3, f"HIGH SCORE: {board.high_score()}")
        _addstr(screen, status_y, max_x - len(CREDITS) - 3, CREDITS)
    with _attrs(screen, _color_attr(COLOR_PAIR_STATUS)):
        _hline(screen, max_y - 2, 1, " ", status_w)
    screen.refresh()


def _divider(win, y: int, width: int) -> None:
    with _attrs(win, _color_attr(COLOR_PAIR_DECO_BLUE)):
        _hline(win, y, 1, _acs("ACS_HLINE", "-"), width - 2)
        _addch(win, y, 0, _acs("ACS_LTEE", "+"))
        _addch(win, y, width - 1, _acs("ACS_RTEE", "+"))


def draw_menu(win, selected: int) -> None:
    """Draw the menu into its window with the selected entry highlighted."""
    height, width = win.getmaxyx()
    win.bkgd(" ", _color_attr(COLOR_PAIR_NORMAL))
    win.erase()

    with _attrs(win, _color_attr(COLOR_PAIR_BORDER) | curses.A_BOLD):
        win.box()
    with _attrs(win, _color_attr(COLOR_PAIR_DECO_BLUE) | curses.A_BOLD):
        win.border()

    title_top = 2
    with _attrs(win, _color_attr(COLOR_PAIR_TITLE) | curses.A_BOLD | curses.A_BLINK):
        for row, line in enumerate(TITLE_LINES, start=title_top):
            _addstr(win, row, (width - len(line)) // 2, line)

    divider_y = title_top + len(TITLE_LINES) + 2
    _divider(win, divider_y, width)

    first_row = divider_y + 2
    x_menu = 6
    for item in MenuItem:
        y = first_row + item * 2
        if item == selected:
            attr = _color_attr(COLOR_PAIR_SELECTED) | curses.A_BOLD | curses.A_BLINK
            with _attrs(win, attr):
                _hline(win, y, 2, " ", width - 4)
                _addstr(win, y, x_menu - 2, f">> {item.icon} {item.label} <<")
        else:
            with _attrs(win, _color_attr(COLOR_PAIR_NORMAL)):
                _addstr(win, y, x_menu, f"{item.icon} {item.label}")

    _divider(win, height - 3, width)
    with _attrs(win, _color_attr(COLOR_PAIR_ACCENT) | curses.A_DIM):
        _addstr(win, height - 2, 3, MENU_HINT)


def create_input_window(screen, height: int, width: int, title: str):
    """Open a centred, titled dialog window with a shadow and return it."""
    max_y, max_x = screen.getmaxyx()
    start_y = (max_y - height) // 2
    start_x = (max_x - width) // 2

    draw_box_with_shadow(screen, start_y, start_x, height, width)
    win = curses.newwin(height, width, start_y, start_x)
    win.bkgd(" ", _color_attr(COLOR_PAIR_NORMAL))
    with _attrs(win, _color_attr(COLOR_PAIR_BORDER) | curses.A_BOLD):
        win.box()
    with _attrs(win, _color_attr(COLOR_PAIR_TITLE) | curses.A_BOLD):
        _addstr(win, 2, (width - len(title)) // 2, title)
    with _attrs(win, _color_attr(COLOR_PAIR_DECO_BLUE)):
        _hline(win, 3, 1, _acs("ACS_HLINE", "-"), width - 2)
    return win


def _read_line(win, y: int, x: int, limit: int) -> str:
    win.refresh()
    _set_echo(True)
    _cursor(1)
    win.nodelay(False)
    try:
        raw = win.getstr(y, x, limit)
    finally:
        _set_echo(False)
        _cursor(0)
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="replace")
    return raw[:limit]


def get_player_name(screen, max_len: int = INPUT_MAX_LEN) -> str:
    """Ask for the player's name; an empty answer gives the default name."""
    win = create_input_window(screen, 12, 50, "ENTER YOUR NAME")
    with _attrs(win, _color_attr(COLOR_PAIR_ACCENT)):
        _addstr(win, 5, 5, "Name: ")
    with _attrs(win, _color_attr(COLOR_PAIR_STATUS) | curses.A_DIM):
        _addstr(win, 8, (50 - 30) // 2, f"(Max {max_len - 1} chars, Enter to confirm)")
    name = _read_line(win, 5, 11, max_len - 1)
    return name or DEFAULT_NAME


def get_server_ip(screen, max_len: int = INPUT_MAX_LEN) -> str:
    """Ask for the server address; an empty answer means this machine."""
    win = create_input_window(screen, 14, 50, "MULTIPLAYER SETUP")
    with _attrs(win, _color_attr(COLOR_PAIR_ACCENT)):
        _addstr(win, 5, 5, "Server IP: ")
    with _attrs(win, _color_attr(COLOR_PAIR_STATUS) | curses.A_DIM):
        _addstr(win, 8, 5, f"Default: {DEFAULT_SERVER_IP} (localhost)")
        _addstr(win, 9, 5, "Press Enter for default")
    address = _read_line(win, 5, 16, max_len - 1)
    return address or DEFAULT_SERVER_IP


def show_scoreboard(screen, board) -> int:
    """Show the best scores and wait for a key; returns the key."""
    max_y, max_x = screen.getmaxyx()
    height, width = MENU_HEIGHT, MENU_WIDTH
    start_y = (max_y - height) // 2
    start_x = (max_x - width) // 2

    draw_box_with_shadow(screen, start_y, start_x, height, width)
    win = curses.newwin(height, width, start_y, start_x)
    win.bkgd(" ", _color_attr(COLOR_PAIR_NORMAL))
    with _attrs(win, _color_attr(COLOR_PAIR_BORDER) | curses.A_BOLD):
        win.box()

    with _attrs(win, _color_attr(COLOR_PAIR_TITLE) | curses.A_BOLD):
        _addstr(win, 1, (width - len(SCOREBOARD_TITLE)) // 2, SCOREBOARD_TITLE)
    with _attrs(win, _color_attr(COLOR_PAIR_DECO_BLUE)):
        _hline(win, 2, 1, _acs("ACS_HLINE", "-"), width - 2)
        _addstr(win, 3, 2, SCOREBOARD_HEADER)
        _hline(win, 4, 1, _acs("ACS_HLINE", "-"), width - 2)

    entries = board.top(TOP_SCORES_DISPLAY)
    list_top = 5
    for rank, entry in enumerate(entries, start=1):
        attr = _color_attr(COLOR_PAIR_SELECTED) | curses.A_BOLD if rank <= 3 else 0
        with _attrs(win, attr):
            _addstr(win, list_top + rank - 1, 2, format_score_line(rank, entry))
    if not entries:
        _addstr(win, 10, (width - 20) // 2, SCOREBOARD_EMPTY)

    with _attrs(win, _color_attr(COLOR_PAIR_STATUS) | curses.A_BLINK):
        _addstr(win, height - 2, (width - len(SCOREBOARD_HINT)) // 2, SCOREBOARD_HINT)

    win.refresh()
    return win.getch()