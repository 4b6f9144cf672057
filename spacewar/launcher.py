"""Starting the game programs from the menu and recording their results."""

from __future__ import annotations

import curses
import os
import re
import subprocess
import tempfile
import time
from pathlib import Path
from typing import Optional

from .menu_ui import DEFAULT_SERVER_IP, get_player_name, get_server_ip, init_screen
from .models import (
    COLOR_PAIR_ACCENT,
    COLOR_PAIR_BORDER,
    COLOR_PAIR_DECO_BLUE,
    COLOR_PAIR_NORMAL,
    COLOR_PAIR_STATUS,
    COLOR_PAIR_TITLE,
)
from .score import ScoreBoard
from .widgets import _acs, _addstr, _attrs, _color_attr, _hline, draw_box_with_shadow

SCORE_FILE_ENV = "SPACEWAR_SCORE_FILE"
TEMP_PREFIX = "spacewar_score_"
MODE_SINGLE = "SINGLE"
MODE_MULTI = "MULTI"
SERVER_START_DELAY = 1.0

SINGLE_COMMAND = ("spacewar-single",)
SERVER_COMMAND = ("spacewar-server",)
CLIENT_COMMAND = ("spacewar-client",)

RESULT_HEIGHT = 14
RESULT_WIDTH = 50
WAIT_HEIGHT = 10
WAIT_WIDTH = 50

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def read_result_score(path) -> int:
    """The integer at the start of a result file, or 0 if there is none."""
    try:
        text = Path(path).read_text(errors="ignore")
    except OSError:
        return 0
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


def _make_temp_file() -> Optional[str]:
    try:
        fd, path = tempfile.mkstemp(prefix=TEMP_PREFIX)
    except OSError as exc:
        print(f"Failed to create temp file: {exc}")
        return None
    os.close(fd)
    return path


class Launcher:
    """Runs single-player games, hosts or joins two-player games, and saves scores."""

    def __init__(self, screen, board: ScoreBoard):
        self.screen = screen
        self.board = board
        self.server: Optional[subprocess.Popen] = None
        self.single_command = list(SINGLE_COMMAND)
        self.server_command = list(SERVER_COMMAND)
        self.client_command = list(CLIENT_COMMAND)

    def clean_server(self) -> None:
        """Stop the hosted server, if one is running, and wait for it to exit."""
        server, self.server = self.server, None
        if server is None:
            return
        if server.poll() is None:
            server.terminate()
        server.wait()

    def _run_game(self, command, temp_file: str, player_name: str, mode: str) -> int:
        env = dict(os.environ, **{SCORE_FILE_ENV: temp_file})
        try:
            subprocess.run(command, env=env, check=False)
        except OSError as exc:
            print(f"Failed to execute game: {exc}")
        return self.game_result(temp_file, player_name, mode)

    def _restore_screen(self) -> None:
        try:
            init_screen(self.screen)
        except curses.error:
            pass

    def game_result(self, temp_file, player_name: str, mode: str) -> int:
        """Read and remove the result file, save a positive score and show it; returns the score."""
        final_score = read_result_score(temp_file)
        try:
            os.unlink(temp_file)
        except OSError:
            pass

        self._restore_screen()
        if final_score > 0:
            self.board.save(player_name, final_score, mode)
            self._show_result(final_score)
        return final_score

    def _show_result(self, final_score: int) -> None:
        max_y, max_x = self.screen.getmaxyx()
        height, width = RESULT_HEIGHT, RESULT_WIDTH
        start_y = (max_y - height) // 2
        start_x = (max_x - width) // 2

        draw_box_with_shadow(self.screen, start_y, start_x, height, width)
        win = curses.newwin(height, width, start_y, start_x)
        win.bkgd(" ", _color_attr(COLOR_PAIR_NORMAL))
        with _attrs(win, _color_attr(COLOR_PAIR_BORDER) | curses.A_BOLD):
            win.box()
        with _attrs(win, _color_attr(COLOR_PAIR_TITLE) | curses.A_BOLD):
            _addstr(win, 2, (width - 13) // 2, "GAME RESULT")
        with _attrs(win, _color_attr(COLOR_PAIR_DECO_BLUE)):
            _hline(win, 3, 1, _acs("ACS_HLINE", "-"), width - 2)
        with _attrs(win, _color_attr(COLOR_PAIR_ACCENT) | curses.A_BOLD):
            _addstr(win, 5, (width - 30) // 2, f"Final Score: {final_score}")
            _addstr(win, 6, (width - 30) // 2, "Score saved!")
        with _attrs(win, _color_attr(COLOR_PAIR_STATUS) | curses.A_BLINK):
            _addstr(win, 10, (width - 25) // 2, "Press any key to continue")
        win.refresh()
        win.nodelay(False)
        win.getch()

    def single_play(self) -> None:
        """Ask for a name and play a single-player game."""
        player_name = get_player_name(self.screen)
        curses.endwin()
        temp_file = _make_temp_file()
        if temp_file is None:
            return
        self._run_game(self.single_command, temp_file, player_name, MODE_SINGLE)

    def _show_server_wait(self) -> None:
        max_y, max_x = self.screen.getmaxyx()
        height, width = WAIT_HEIGHT, WAIT_WIDTH
        win = curses.newwin(height, width, (max_y - height) // 2, (max_x - width) // 2)
        win.bkgd(" ", _color_attr(COLOR_PAIR_NORMAL))
        win.box()
        with _attrs(win, _color_attr(COLOR_PAIR_TITLE) | curses.A_BOLD):
            _addstr(win, 3, (width - 20) // 2, "Starting Server...")
        with _attrs(win, _color_attr(COLOR_PAIR_ACCENT) | curses.A_BLINK):
            _addstr(win, 5, (width - 15) // 2, "Please wait...")
        win.refresh()

    def multi_host(self) -> None:
        """Ask for a name, start a local server and join it."""
        player_name = get_player_name(self.screen)
        try:
            self.server = subprocess.Popen(
                self.server_command,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError:
            self.server = None
            return

        time.sleep(SERVER_START_DELAY)
        self._show_server_wait()
        curses.endwin()

        try:
            temp_file = _make_temp_file()
            if temp_file is None:
                return
            self._run_game([*self.client_command, DEFAULT_SERVER_IP],
                           temp_file, player_name, MODE_MULTI)
        finally:
            self.clean_server()

    def multi_join(self) -> None:
        """Ask for a name and a server address, then join that server."""
        player_name = get_player_name(self.screen)
        server_ip = get_server_ip(self.screen)
        curses.endwin()
        temp_file = _make_temp_file()
        if temp_file is None:
            return
        self._run_game([*self.client_command, server_ip], temp_file, player_name, MODE_MULTI)