"""The single-player game: dodge arrows and red zones for as long as possible."""

from __future__ import annotations

import argparse
import curses
import time

from .game_logic import (
    FRAMES_PER_LEVEL,
    GAME_HEIGHT,
    GAME_WIDTH,
    TimedEvents,
    new_game,
    update_game,
)
from .items import use_item
from .models import GameState
from .view import draw_game, init_view, single_game_over_screen

PLAYER_ID = 0
FRAME_DELAY = 0.05

_MOVES = {
    curses.KEY_LEFT: (-1, 0),
    curses.KEY_RIGHT: (1, 0),
    curses.KEY_UP: (0, -1),
    curses.KEY_DOWN: (0, 1),
}
_ITEM_KEYS = {ord("1"): 1, ord("2"): 2, ord("3"): 3}
_QUIT_KEYS = frozenset({ord("q"), ord("Q")})


def handle_key(state: GameState, key: int) -> None:
    """Apply one key press: move inside the field, use an item, or quit."""
    player = state.players[PLAYER_ID]
    if key in _MOVES:
        dx, dy = _MOVES[key]
        new_x, new_y = player.x + dx, player.y + dy
        if 1 <= new_x <= GAME_WIDTH - 2 and 1 <= new_y <= GAME_HEIGHT - 2:
            player.x, player.y = new_x, new_y
    elif key in _ITEM_KEYS:
        use_item(player, _ITEM_KEYS[key])
    elif key in _QUIT_KEYS:
        player.lives = 0


def run(screen) -> int:
    """Play one game on the given curses screen; returns the final score."""
    init_view(screen)
    state = new_game(False)
    player = state.players[PLAYER_ID]
    events = TimedEvents()
    next_event = time.monotonic() + events.interval

    while player.lives > 0:
        handle_key(state, screen.getch())
        curses.flushinp()

        update_game(state, GAME_WIDTH, GAME_HEIGHT)
        now = time.monotonic()
        if now >= next_event:
            events.fire(state)
            next_event = now + events.interval

        draw_game(screen, state, PLAYER_ID, state.frame)
        screen.refresh()
        time.sleep(FRAME_DELAY)

    level = player.score // FRAMES_PER_LEVEL
    single_game_over_screen(screen, player.score, level)
    return player.score


def main(argv=None) -> int:
    """Start a single-player game in the terminal."""
    parser = argparse.ArgumentParser(prog="spacewar-single",
                                     description="Play a single-player game.")
    parser.parse_args(argv)
    curses.wrapper(run)
    return 0