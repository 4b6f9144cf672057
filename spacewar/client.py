"""Network client for the two-player game."""

from __future__ import annotations

import argparse
import curses
import socket
import sys
import threading
import time
from typing import Callable, Optional

from .game_logic import GAME_HEIGHT, GAME_WIDTH
from .models import MAX_PLAYERS, PORT, GameState, Packet, PacketType
from .protocol import PacketStream
from .view import draw_game, game_over_screen, init_view
from .widgets import _addstr

UNASSIGNED = -1
NO_WINNER = -1
FRAME_DELAY = 0.05
COUNTDOWN_SECONDS = 5
RESTART_WAIT = 5
_POLL_DELAY = 0.1

_MOVES = {
    curses.KEY_LEFT: (-1, 0),
    curses.KEY_RIGHT: (1, 0),
    curses.KEY_UP: (0, -1),
    curses.KEY_DOWN: (0, 1),
}
_ITEM_KEYS = {ord("1"): 1, ord("2"): 2, ord("3"): 3}
_QUIT_KEYS = frozenset({ord("q"), ord("Q")})


class GameClient:
    """A connection to the game server and the world as the server last sent it."""

    def __init__(self, host: str = "127.0.0.1", port: int = PORT):
        self.host = host
        self.port = port
        self.state = GameState()
        self.id = UNASSIGNED
        self.game_over = False
        self.winner = NO_WINNER
        self.running = True
        self._cond = threading.Condition()
        self._stream: Optional[PacketStream] = None
        self._thread: Optional[threading.Thread] = None

    def connect(self) -> None:
        """Connect to the server and start receiving its updates."""
        sock = socket.create_connection((self.host, self.port))
        sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        self._stream = PacketStream(sock)
        self._thread = threading.Thread(target=self._receive_loop, daemon=True)
        self._thread.start()

    def _receive_loop(self) -> None:
        while self.running:
            try:
                packet = self._stream.receive()
            except ValueError:
                continue
            except OSError:
                packet = None
            if packet is None:
                with self._cond:
                    self.running = False
                    self._cond.notify_all()
                break
            self.apply_packet(packet)

    def apply_packet(self, packet: Packet) -> None:
        """Update the local world from a packet sent by the server."""
        with self._cond:
            if packet.type == PacketType.INITIAL_STATE:
                self.id = packet.id
                self.state = packet.game_state
            elif packet.type == PacketType.ARROW_UPDATE:
                self.state.arrows = packet.arrows
            elif packet.type == PacketType.REDZONE_UPDATE:
                self.state.redzones = packet.redzones
            elif packet.type == PacketType.PLAYER_STATUS:
                if 0 <= packet.id < MAX_PLAYERS:
                    self.state.players[packet.id] = packet.player
            elif packet.type == PacketType.GAME_OVER:
                self.game_over = True
                self.winner = packet.id
                self.running = False
            self._cond.notify_all()

    def _wait_until(self, predicate: Callable[[], bool]) -> bool:
        """Block until predicate holds or the connection ends; returns whether still running."""
        with self._cond:
            self._cond.wait_for(lambda: not self.running or predicate())
            return self.running

    def _send(self, packet: Packet) -> None:
        if self._stream is None:
            raise RuntimeError("not connected to a server")
        self._stream.send(packet)

    def _require_id(self) -> None:
        if self.id < 0:
            raise RuntimeError("no player id has been assigned yet")

    def move(self, key: int) -> bool:
        """Move one step for an arrow key, inside the walls; returns whether a move was sent."""
        delta = _MOVES.get(key)
        if delta is None:
            return False
        with self._cond:
            self._require_id()
            player = self.state.players[self.id]
            dx, dy = delta
            new_x, new_y = player.x + dx, player.y + dy
            if dx and not 1 <= new_x <= GAME_WIDTH - 2:
                return False
            if dy and not 1 <= new_y <= GAME_HEIGHT - 2:
                return False
            player.x, player.y = new_x, new_y
            self._send(Packet(PacketType.PLAYER_MOVE, id=self.id, x=new_x, y=new_y))
        return True

    def use_item(self, item_type: int) -> None:
        """Ask the server to use the item with the given number."""
        with self._cond:
            self._require_id()
            player_id = self.id
        self._send(Packet(PacketType.ITEM_USE, id=player_id, item_type=item_type))

    def close(self) -> None:
        """Drop the connection and stop the receiving thread."""
        with self._cond:
            self.running = False
            self._cond.notify_all()
        if self._stream is not None:
            self._stream.close()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=2)

    def __enter__(self) -> "GameClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def _show_centered(screen, lines) -> None:
    screen.erase()
    for offset, text in lines:
        _addstr(screen, GAME_HEIGHT // 2 + offset, (GAME_WIDTH - len(text)) // 2, text)
    screen.refresh()


def _wait_for_start(screen, client: GameClient) -> bool:
    _show_centered(screen, [(0, "Connecting to server...")])
    if not client._wait_until(lambda: client.id >= 0):
        return False
    if not client._wait_until(lambda: client.state.players[client.id].connected):
        return False

    opponent = 1 if client.id == 0 else 0
    _show_centered(screen, [(0, f"Connected as Player {client.id + 1}!"),
                            (2, "Waiting for other player...")])
    if not client._wait_until(lambda: client.state.players[opponent].connected):
        return False

    for remaining in range(COUNTDOWN_SECONDS, 0, -1):
        _show_centered(screen, [(0, f"Game starts in {remaining}...")])
        time.sleep(1)
    _show_centered(screen, [(0, "START!")])
    time.sleep(1)
    return True


def _play_game(screen, client: GameClient) -> None:
    frame = 0
    while client.running and not client.game_over:
        move_key = None
        item = None
        while (ch := screen.getch()) != -1:
            if ch in _QUIT_KEYS:
                client.running = False
                break
            if ch in _MOVES:
                move_key = ch
            elif ch in _ITEM_KEYS:
                item = _ITEM_KEYS[ch]
        try:
            if move_key is not None:
                client.move(move_key)
            if item is not None:
                client.use_item(item)
        except OSError:
            client.running = False

        with client._cond:
            draw_game(screen, client.state, client.id, frame)
        screen.refresh()
        frame += 1
        time.sleep(FRAME_DELAY)


def _result_screen(screen, client: GameClient) -> bool:
    """Show the result and wait for a restart; returns True when the user quits."""
    with client._cond:
        score = client.state.players[client.id].score
        winner = client.winner
    game_over_screen(screen, winner, client.id, score)
    hint = "Restarting in 5s... (Q to quit)"
    _addstr(screen, GAME_HEIGHT // 2 + 5, (GAME_WIDTH - len(hint)) // 2, hint)
    screen.refresh()

    screen.nodelay(True)
    deadline = time.monotonic() + RESTART_WAIT
    while time.monotonic() < deadline:
        if screen.getch() in _QUIT_KEYS:
            return True
        time.sleep(_POLL_DELAY)
    return False


def _session(screen, host: str, port: int) -> None:
    init_view(screen)
    while True:
        client = GameClient(host, port)
        client.connect()
        try:
            if not _wait_for_start(screen, client):
                return
            _play_game(screen, client)
            quit_app = _result_screen(screen, client)
        finally:
            client.close()
        if quit_app:
            return


def main(argv=None) -> int:
    """Join a two-player game on the given server."""
    parser = argparse.ArgumentParser(prog="spacewar-client",
                                     description="Join a two-player game.")
    parser.add_argument("host", help="address of the game server")
    parser.add_argument("--port", type=int, default=PORT, help="server port")
    args = parser.parse_args(argv)
    try:
        curses.wrapper(_session, args.host, args.port)
    except OSError as exc:
        print(f"Cannot connect to server: {exc}", file=sys.stderr)
        return 1
    return 0