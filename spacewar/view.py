"""Drawing of the game field and the game-over screens."""

from __future__ import annotations

import curses

from .game_logic import GAME_HEIGHT, GAME_WIDTH
from .models import (
    ARROW_PLAYER_ATTACK,
    ARROW_SPECIAL_WAVE,
    MAX_PLAYERS,
    GameState,
)
from .widgets import (
    _acs,
    _addch,
    _addstr,
    _attrs,
    _color_attr,
    _has_colors,
    _hline,
    _vline,
)

# Colour pairs used on the game screen.
PAIR_DANGER = 1
PAIR_REDZONE = 2
PAIR_SELF = 3
PAIR_ITEMS = 4
PAIR_SLOW = 5
PAIR_OTHER = 6
PAIR_MAGENTA = 7

GAME_OVER_BANNER = (
    "================================================",
    "||                                            ||",
    "||              G A M E   O V E R             ||",
    "||                                            ||",
    "================================================",
)


def init_view(screen) -> None:
    """Put the terminal in raw, non-blocking mode and set up game colours."""
    curses.raw()
    curses.noecho()
    try:
        curses.curs_set(0)
    except curses.error:
        pass
    screen.keypad(True)
    screen.nodelay(True)
    screen.timeout(0)
    curses.start_color()
    curses.use_default_colors()
    if curses.has_colors():
        curses.init_pair(PAIR_DANGER, curses.COLOR_RED, -1)
        curses.init_pair(PAIR_REDZONE, curses.COLOR_RED, curses.COLOR_RED)
        curses.init_pair(PAIR_SELF, curses.COLOR_YELLOW, -1)
        curses.init_pair(PAIR_ITEMS, curses.COLOR_GREEN, -1)
        curses.init_pair(PAIR_SLOW, curses.COLOR_CYAN, -1)
        curses.init_pair(PAIR_OTHER, curses.COLOR_BLUE, -1)
        curses.init_pair(PAIR_MAGENTA, curses.COLOR_MAGENTA, -1)
    curses.intrflush(False)


def _draw_border(screen) -> None:
    hline = _acs("ACS_HLINE", "-")
    vline = _acs("ACS_VLINE", "|")
    _hline(screen, 0, 1, hline, GAME_WIDTH - 2)
    _hline(screen, GAME_HEIGHT - 1, 1, hline, GAME_WIDTH - 2)
    _vline(screen, 1, 0, vline, GAME_HEIGHT - 2)
    _vline(screen, 1, GAME_WIDTH - 1, vline, GAME_HEIGHT - 2)
    _addch(screen, 0, 0, _acs("ACS_ULCORNER", "+"))
    _addch(screen, 0, GAME_WIDTH - 1, _acs("ACS_URCORNER", "+"))
    _addch(screen, GAME_HEIGHT - 1, 0, _acs("ACS_LLCORNER", "+"))
    _addch(screen, GAME_HEIGHT - 1, GAME_WIDTH - 1, _acs("ACS_LRCORNER", "+"))


def _draw_redzones(screen, state: GameState, colors: bool) -> None:
    with _attrs(screen, _color_attr(PAIR_REDZONE) if colors else 0):
        for zone in state.redzones:
            if not zone.active:
                continue
            for py in range(zone.y, zone.y + zone.height):
                for px in range(zone.x, zone.x + zone.width):
                    if 0 < py < GAME_HEIGHT - 1 and 0 < px < GAME_WIDTH - 1:
                        _addch(screen, py, px, "#")


def _draw_players(screen, state: GameState, my_id: int, frame: int, colors: bool) -> None:
    for index, player in enumerate(state.players[:MAX_PLAYERS]):
        if not player.connected:
            continue
        symbol = "@" if index == 0 else "$"
        attr = 0
        if colors:
            attr = _color_attr(PAIR_SELF if index == my_id else PAIR_OTHER)
            protected = player.invincible or player.damage_cooldown > 0
            if index == my_id and protected and frame % 4 < 2:
                attr |= curses.A_BOLD
        with _attrs(screen, attr):
            _addch(screen, player.y, player.x, symbol)


def _draw_arrows(screen, state: GameState, my_id: int, colors: bool) -> None:
    slow = state.players[0].slow or state.players[1].slow
    for arrow in state.arrows:
        if not arrow.active:
            continue
        pair, extra = 0, 0
        if arrow.special == ARROW_PLAYER_ATTACK:
            extra = curses.A_BOLD
            pair = PAIR_SELF if arrow.owner == my_id else PAIR_OTHER
        elif arrow.special == ARROW_SPECIAL_WAVE:
            pair, extra = PAIR_DANGER, curses.A_BOLD
        elif slow:
            pair = PAIR_SLOW
        attr = _color_attr(pair) | extra if colors and pair else 0
        with _attrs(screen, attr):
            _addch(screen, arrow.y, arrow.x, arrow.symbol)


def _draw_status(screen, state: GameState, my_id: int, colors: bool) -> None:
    me = state.players[my_id]
    opponent = state.players[1 if my_id == 0 else 0]
    _addstr(screen, 0, 2, f" P{my_id + 1} Score:{me.score} ")
    _addstr(screen, 0, 45, " Lives:" + "<3" * me.lives)
    if opponent.connected:
        _addstr(screen, 0, 65, " Enemy:" + "<3" * opponent.lives)
    if state.special_wave > 0:
        _addstr(screen, 1, 2, " SPECIAL WAVE! ")
    with _attrs(screen, _color_attr(PAIR_ITEMS) if colors else 0):
        _addstr(screen, GAME_HEIGHT - 1, 2,
                f"[1]Inv:{me.invincible_item} [2]Heal:{me.heal_item} "
                f"[3]Slow:{me.slow_item}")


def draw_game(screen, state: GameState, my_id: int, frame: int) -> None:
    """Draw one frame of the game as seen by player my_id."""
    screen.erase()
    colors = _has_colors()

    flashing = state.special_wave > 0 and frame % 10 < 5
    with _attrs(screen, curses.A_REVERSE | curses.A_BOLD if flashing else 0):
        _draw_border(screen)

    _draw_redzones(screen, state, colors)
    _draw_players(screen, state, my_id, frame, colors)
    _draw_arrows(screen, state, my_id, colors)
    _draw_status(screen, state, my_id, colors)


def game_over_screen(screen, winner_id: int, my_id: int, score: int) -> None:
    """Draw the multiplayer result: win, lose or draw."""
    screen.clear()
    screen.box()
    if winner_id == my_id:
        result = "YOU WIN!"
    elif winner_id == -1:
        result = "DRAW!"
    else:
        result = "YOU LOSE!"
    with _attrs(screen, curses.A_BOLD):
        _addstr(screen, GAME_HEIGHT // 2, (GAME_WIDTH - 10) // 2, result)
    _addstr(screen, GAME_HEIGHT // 2 + 2, (GAME_WIDTH - 30) // 2, f"Final Score: {score}")


def single_game_over_screen(screen, score: int, level: int) -> int:
    """Draw the single-player game-over screen and wait for a key; returns it."""
    screen.clear()
    with _attrs(screen, _color_attr(PAIR_DANGER) | curses.A_BOLD if _has_colors() else 0):
        screen.box()
        top = GAME_HEIGHT // 2 - 4
        for offset, line in enumerate(GAME_OVER_BANNER):
            _addstr(screen, top + offset, (GAME_WIDTH - 50) // 2, line)

    left = (GAME_WIDTH - 30) // 2
    _addstr(screen, GAME_HEIGHT // 2 + 2, left, f"Final Score: {score}")
    _addstr(screen, GAME_HEIGHT // 2 + 3, left, f"Level Reached: {level}")
    _addstr(screen, GAME_HEIGHT // 2 + 5, left, "Press any key to exit...")

    screen.refresh()
    screen.nodelay(False)
    return screen.getch()