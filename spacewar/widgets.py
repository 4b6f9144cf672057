"""Drawing helpers shared by the menu and game screens."""

from __future__ import annotations

import curses
from contextlib import contextmanager

from .models import (
    COLOR_PAIR_ACCENT,
    COLOR_PAIR_BORDER,
    COLOR_PAIR_DECO_BLUE,
    COLOR_PAIR_NORMAL,
    COLOR_PAIR_STATUS,
    COLOR_PAIR_TITLE,
)

MESSAGE_HEIGHT = 22
MESSAGE_WIDTH = 54
CONTINUE_HINT = "PRESS ANY KEY TO CONTINUE"


def _color_attr(pair: int) -> int:
    """Attribute bits for a colour pair, usable before colours are started."""
    try:
        return curses.color_pair(pair)
    except curses.error:
        return pair << 8


def _has_colors() -> bool:
    try:
        return bool(curses.has_colors())
    except curses.error:
        return False


def _acs(name: str, fallback: str) -> int:
    """A line-drawing character, or a plain one when the terminal has none."""
    return getattr(curses, name, ord(fallback))


@contextmanager
def _attrs(win, attr: int):
    if attr:
        win.attron(attr)
    try:
        yield
    finally:
        if attr:
            win.attroff(attr)


def _addstr(win, y: int, x: int, text: str) -> None:
    try:
        win.addstr(y, x, text)
    except curses.error:
        pass


def _addch(win, y: int, x: int, ch) -> None:
    try:
        win.addch(y, x, ch)
    except curses.error:
        pass


def _hline(win, y: int, x: int, ch, n: int) -> None:
    try:
        win.hline(y, x, ch, n)
    except curses.error:
        pass


def _vline(win, y: int, x: int, ch, n: int) -> None:
    try:
        win.vline(y, x, ch, n)
    except curses.error:
        pass


def draw_box_with_shadow(screen, y: int, x: int, h: int, w: int) -> None:
    """Draw the drop shadow to the right of and below a box at (y, x)."""
    with _attrs(screen, _color_attr(COLOR_PAIR_NORMAL) | curses.A_DIM):
        for row in range(y + 1, y + h + 1):
            _hline(screen, row, x + w, " ", 2)
        _hline(screen, y + h, x + 2, " ", w)


def show_message(screen, title: str, message: str) -> int:
    """Show a centred message box and wait for a key; returns the key."""
    max_y, max_x = screen.getmaxyx()
    height, width = MESSAGE_HEIGHT, MESSAGE_WIDTH
    start_y = (max_y - height) // 2
    start_x = (max_x - width) // 2

    draw_box_with_shadow(screen, start_y, start_x, height, width)
    win = curses.newwin(height, width, start_y, start_x)
    win.bkgd(" ", _color_attr(COLOR_PAIR_NORMAL))

    with _attrs(win, _color_attr(COLOR_PAIR_BORDER) | curses.A_BOLD):
        win.box()
    with _attrs(win, _color_attr(COLOR_PAIR_TITLE) | curses.A_BOLD):
        _addstr(win, 1, (width - len(title)) // 2, title)
    with _attrs(win, _color_attr(COLOR_PAIR_DECO_BLUE)):
        _hline(win, 2, 1, _acs("ACS_HLINE", "-"), width - 2)
    with _attrs(win, _color_attr(COLOR_PAIR_ACCENT) | curses.A_BOLD):
        _addstr(win, 4, (width - len(message)) // 2, message)
    with _attrs(win, _color_attr(COLOR_PAIR_STATUS) | curses.A_BOLD | curses.A_BLINK):
        _addstr(win, height - 2, (width - len(CONTINUE_HINT)) // 2, f" {CONTINUE_HINT} ")

    win.refresh()
    win.nodelay(False)
    return win.getch()