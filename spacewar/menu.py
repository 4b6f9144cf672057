"""The main menu program: choose a game mode, view scores or quit."""

from __future__ import annotations

import argparse
import curses

from .launcher import Launcher
from .menu_ui import (
    MENU_COUNT,
    MENU_HEIGHT,
    MENU_WIDTH,
    MenuItem,
    draw_background,
    draw_menu,
    init_screen,
    show_scoreboard,
)
from .score import ScoreBoard
from .widgets import _addstr, draw_box_with_shadow

ESCAPE = 27
_UP_KEYS = frozenset({curses.KEY_UP, ord("k")})
_DOWN_KEYS = frozenset({curses.KEY_DOWN, ord("j")})
_SELECT_KEYS = frozenset({ord("\n"), curses.KEY_ENTER})
_QUIT_KEYS = frozenset({ord("q"), ord("Q"), ESCAPE})
TOO_SMALL = "Screen too small! Please resize."


def next_selection(selected: int, key: int) -> int:
    """The selected entry after an up or down key; other keys leave it alone."""
    if key in _UP_KEYS:
        return (selected - 1) % MENU_COUNT
    if key in _DOWN_KEYS:
        return (selected + 1) % MENU_COUNT
    return selected


def _choose(item: MenuItem, screen, board: ScoreBoard, launcher: Launcher) -> bool:
    """Carry out a menu entry; returns False when the menu should close."""
    if item == MenuItem.EXIT:
        return False
    actions = {
        MenuItem.SCOREBOARD: lambda: show_scoreboard(screen, board),
        MenuItem.SINGLE: launcher.single_play,
        MenuItem.MULTI_HOST: launcher.multi_host,
        MenuItem.MULTI_JOIN: launcher.multi_join,
    }
    actions[item]()
    init_screen(screen)
    return True


def run(screen) -> None:
    """Run the menu on a curses screen until the user leaves."""
    init_screen(screen)
    board = ScoreBoard()
    launcher = Launcher(screen, board)

    max_y, max_x = screen.getmaxyx()
    menu_win = curses.newwin(MENU_HEIGHT, MENU_WIDTH,
                             max(0, (max_y - MENU_HEIGHT) // 2),
                             max(0, (max_x - MENU_WIDTH) // 2))
    menu_win.keypad(True)
    selected = 0
    running = True
    try:
        while running:
            max_y, max_x = screen.getmaxyx()
            start_y = (max_y - MENU_HEIGHT) // 2
            start_x = (max_x - MENU_WIDTH) // 2

            if max_y < MENU_HEIGHT + 4 or max_x < MENU_WIDTH + 4:
                screen.erase()
                _addstr(screen, max_y // 2, max_x // 2 - 15, TOO_SMALL)
                screen.refresh()
                if screen.getch() in _QUIT_KEYS:
                    running = False
                continue

            try:
                menu_win.mvwin(start_y, start_x)
            except curses.error:
                pass
            draw_background(screen, board)
            draw_box_with_shadow(screen, start_y, start_x, MENU_HEIGHT, MENU_WIDTH)
            draw_menu(menu_win, selected)
            menu_win.refresh()

            key = menu_win.getch()
            if key in _SELECT_KEYS:
                running = _choose(MenuItem(selected), screen, board, launcher)
            elif key in _QUIT_KEYS:
                running = False
            else:
                selected = next_selection(selected, key)
    finally:
        launcher.clean_server()


def main(argv=None) -> int:
    """Start the game menu in the terminal."""
    parser = argparse.ArgumentParser(prog="spacewar", description="Space War game menu.")
    parser.parse_args(argv)
    curses.wrapper(run)
    print("Game terminated.")
    return 0