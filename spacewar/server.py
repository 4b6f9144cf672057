"""Two-player game server: owns the world and streams it to both clients."""

from __future__ import annotations

import argparse
import random
import socket
import sys
import threading
import time
from typing import Optional

from .game_logic import (
    GAME_HEIGHT,
    GAME_WIDTH,
    TimedEvents,
    create_player_attack,
    new_game,
    update_game,
)
from .items import use_item
from .models import MAX_PLAYERS, PORT, Packet, PacketType
from .protocol import PacketStream

FRAME_DELAY = 0.05
COUNTDOWN_SECONDS = 5
RESTART_DELAY = 5
ATTACK_INTERVAL = 100
NO_WINNER = -1
_ACCEPT_POLL = 0.2


class GameServer:
    """Accepts two players, runs the shared world and broadcasts every frame."""

    def __init__(self, host: str = "", port: int = PORT):
        self.state = new_game(True)
        self.rng = random.Random()
        self.clock = time.monotonic
        self.events = TimedEvents()
        self.started = False
        self.running = True
        self._cond = threading.Condition(threading.RLock())
        self._streams: list[Optional[PacketStream]] = [None] * MAX_PLAYERS
        self._connect_wait: Optional[float] = None
        self._next_event: Optional[float] = None
        self._stop = threading.Event()
        self._threads: list[threading.Thread] = []

        self._listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        try:
            self._listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            self._listener.bind((host, port))
            self._listener.listen(5)
            self._listener.settimeout(_ACCEPT_POLL)
        except OSError:
            self._listener.close()
            raise
        self.address = self._listener.getsockname()

    # --- connections -------------------------------------------------

    def _connected_count(self) -> int:
        return sum(1 for player in self.state.players if player.connected)

    def _add_client(self, stream: PacketStream) -> Optional[int]:
        for slot, player in enumerate(self.state.players):
            if not player.connected:
                player.connected = True
                self._streams[slot] = stream
                return slot
        return None

    def _remove_client(self, slot: int, stream: PacketStream) -> None:
        if self._streams[slot] is stream:
            self._streams[slot] = None
            self.state.players[slot].connected = False
        self._cond.notify_all()

    def _broadcast(self, packet: Packet) -> None:
        for stream in self._streams:
            if stream is None:
                continue
            try:
                stream.send(packet)
            except OSError:
                pass

    def _send_connection_status(self) -> None:
        for slot, player in enumerate(self.state.players):
            if player.connected:
                self._broadcast(Packet(PacketType.PLAYER_STATUS, id=slot, player=player))

    def _serve_client(self, conn: socket.socket) -> None:
        stream = PacketStream(conn)
        with self._cond:
            slot = self._add_client(stream)
            self._cond.notify_all()
        if slot is None:
            print("Server full")
            stream.close()
            return

        print(f"Player {slot} connected")
        try:
            with self._cond:
                stream.send(Packet(PacketType.INITIAL_STATE, id=slot,
                                   game_state=self.state))
                self._send_connection_status()
            while self.running:
                packet = stream.receive()
                if packet is None:
                    break
                self.handle_packet(slot, packet)
        except (OSError, ValueError):
            pass
        finally:
            with self._cond:
                self._remove_client(slot, stream)
            print(f"Player {slot} disconnected")
            stream.close()

    # --- game flow ---------------------------------------------------

    def _finished_winner(self) -> Optional[int]:
        connected = [i for i, p in enumerate(self.state.players) if p.connected]
        if len(connected) < 2:
            print("Game over: a player disconnected.")
            return connected[0] if connected else NO_WINNER
        alive = [i for i in connected if self.state.players[i].lives > 0]
        if len(alive) == 1:
            return alive[0]
        return None

    def _start(self) -> None:
        self.started = True
        self.state.frame = 0
        self._next_event = self.clock() + TimedEvents.interval
        print("Game started.")

    def _finish(self, winner: int) -> None:
        if winner >= 0:
            print(f"Game over! Player {winner} wins!")
        self._broadcast(Packet(PacketType.GAME_OVER, id=winner))
        self._next_event = None

    def _reset(self) -> None:
        self.state = new_game(True)
        self.started = False
        self._connect_wait = None

    def _fire_due_events(self) -> None:
        if self._next_event is not None and self.clock() >= self._next_event:
            self.events.fire(self.state, self.rng)
            self._next_event = self.clock() + TimedEvents.interval

    def _broadcast_world(self) -> None:
        self._broadcast(Packet(PacketType.ARROW_UPDATE, arrows=self.state.arrows))
        self._broadcast(Packet(PacketType.REDZONE_UPDATE, redzones=self.state.redzones))
        self._send_connection_status()

    def tick(self) -> Optional[int]:
        """Run one frame, starting the game if needed.

        Returns None while play goes on; once the game has ended, returns the
        winner's id, or NO_WINNER, after telling the clients.
        """
        with self._cond:
            if self.started:
                winner = self._finished_winner()
                if winner is not None:
                    self._finish(winner)
                    return winner
            else:
                self._start()

            update_game(self.state, GAME_WIDTH, GAME_HEIGHT, self.rng)
            frame = self.state.frame
            if frame > 0 and frame % ATTACK_INTERVAL == 0:
                for slot, player in enumerate(self.state.players):
                    if player.alive():
                        create_player_attack(self.state, slot)
            self._fire_due_events()
            self._broadcast_world()
            return None

    def _wait_for_players(self) -> bool:
        """Block until both players are in and the countdown is over."""
        while self._connected_count() < 2 and self.running:
            self._connect_wait = None
            self._send_connection_status()
            self._cond.wait()
        if not self.running:
            return False

        if self._connect_wait is None:
            self._connect_wait = self.clock()
            print(f"Both players connected! Starting in {COUNTDOWN_SECONDS} seconds...")
        while self.running:
            remaining = COUNTDOWN_SECONDS - (self.clock() - self._connect_wait)
            if remaining <= 0:
                break
            self._send_connection_status()
            self._cond.wait(timeout=remaining)
        return self.running

    def _game_loop(self) -> None:
        while self.running:
            with self._cond:
                if not self.started and not self._wait_for_players():
                    break
                winner = self.tick()
            if winner is None:
                self._stop.wait(FRAME_DELAY)
                continue
            if self._stop.wait(RESTART_DELAY):
                break
            with self._cond:
                self._reset()

    def handle_packet(self, player_id: int, packet: Packet) -> None:
        """Apply a move or an item use sent by a player."""
        with self._cond:
            player = self.state.players[player_id]
            if packet.type == PacketType.PLAYER_MOVE:
                player.x = packet.x
                player.y = packet.y
            elif packet.type == PacketType.ITEM_USE:
                use_item(player, packet.item_type)

    # --- lifetime ----------------------------------------------------

    def serve_forever(self) -> None:
        """Accept players and run the game until shutdown() is called."""
        game_thread = threading.Thread(target=self._game_loop, daemon=True)
        game_thread.start()
        print(f"Server listening on port {self.address[1]}")
        try:
            while self.running:
                try:
                    conn, _ = self._listener.accept()
                except socket.timeout:
                    continue
                except OSError as exc:
                    if not self.running:
                        break
                    print(f"Accept failed: {exc}", file=sys.stderr)
                    continue
                conn.settimeout(None)
                with self._cond:
                    has_slot = any(not p.connected for p in self.state.players)
                if not has_slot:
                    print("Server full")
                    conn.close()
                    continue
                handler = threading.Thread(target=self._serve_client, args=(conn,),
                                           daemon=True)
                handler.start()
                self._threads.append(handler)
        finally:
            self.shutdown()
            for handler in self._threads:
                handler.join(timeout=2)
            game_thread.join(timeout=2)

    def shutdown(self) -> None:
        """Stop the game, drop all clients and close the listening socket."""
        with self._cond:
            self.running = False
            self._stop.set()
            self._cond.notify_all()
            streams = [stream for stream in self._streams if stream is not None]
        for stream in streams:
            stream.close()
        self._listener.close()


def main(argv=None) -> int:
    """Run the game server from the command line."""
    parser = argparse.ArgumentParser(prog="spacewar-server",
                                     description="Host a two-player game.")
    parser.add_argument("--host", default="", help="address to listen on")
    parser.add_argument("--port", type=int, default=PORT, help="port to listen on")
    args = parser.parse_args(argv)

    try:
        server = GameServer(args.host, args.port)
    except OSError as exc:
        print(f"Cannot start server: {exc}", file=sys.stderr)
        return 1
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        server.shutdown()
    return 0