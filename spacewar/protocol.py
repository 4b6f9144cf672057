"""Fixed-size binary packets exchanged between the game server and its clients."""

from __future__ import annotations

import socket
import struct
import threading
from typing import Optional

from .models import (
    MAX_ARROWS,
    MAX_PLAYERS,
    MAX_REDZONES,
    Arrow,
    GameState,
    Packet,
    PacketType,
    Player,
    RedZone,
)

_HEADER = struct.Struct("<5i")
_ARROW = struct.Struct("<4ic3i")
_REDZONE = struct.Struct("<6i")
_PLAYER = struct.Struct("<14i")
_STATE_TAIL = struct.Struct("<3i")

_PLAYER_FIELDS = (
    "id", "x", "y", "connected", "score", "lives", "damage_cooldown",
    "invincible_item", "heal_item", "slow_item",
    "invincible", "invincible_frames", "slow", "slow_frames",
)
_PLAYER_FLAGS = frozenset({"connected", "invincible", "slow"})

STATE_SIZE = (
    MAX_ARROWS * _ARROW.size
    + MAX_REDZONES * _REDZONE.size
    + MAX_PLAYERS * _PLAYER.size
    + _STATE_TAIL.size
)
PACKET_SIZE = (
    _HEADER.size
    + MAX_ARROWS * _ARROW.size
    + MAX_REDZONES * _REDZONE.size
    + _PLAYER.size
    + STATE_SIZE
)


def _encode_arrow(arrow: Arrow) -> bytes:
    symbol = arrow.symbol.encode("latin-1")[:1] or b" "
    return _ARROW.pack(arrow.x, arrow.y, arrow.dx, arrow.dy, symbol,
                       int(arrow.active), arrow.special, arrow.owner)


def _encode_redzone(zone: RedZone) -> bytes:
    return _REDZONE.pack(zone.x, zone.y, zone.width, zone.height,
                         int(zone.active), zone.lifetime)


def _encode_player(player: Player) -> bytes:
    return _PLAYER.pack(*(int(getattr(player, name)) for name in _PLAYER_FIELDS))


def _encode_many(items, count: int, encoder, what: str) -> bytes:
    if len(items) != count:
        raise ValueError(f"expected {count} {what}, got {len(items)}")
    return b"".join(encoder(item) for item in items)


def _encode_state(state: GameState) -> bytes:
    return b"".join((
        _encode_many(state.arrows, MAX_ARROWS, _encode_arrow, "arrows"),
        _encode_many(state.redzones, MAX_REDZONES, _encode_redzone, "red zones"),
        _encode_many(state.players, MAX_PLAYERS, _encode_player, "players"),
        _STATE_TAIL.pack(state.frame, state.special_wave, int(state.multiplay)),
    ))


def encode_packet(packet: Packet) -> bytes:
    """Serialise a packet to exactly PACKET_SIZE bytes."""
    return b"".join((
        _HEADER.pack(int(packet.type), packet.id, packet.x, packet.y, packet.item_type),
        _encode_many(packet.arrows, MAX_ARROWS, _encode_arrow, "arrows"),
        _encode_many(packet.redzones, MAX_REDZONES, _encode_redzone, "red zones"),
        _encode_player(packet.player),
        _encode_state(packet.game_state),
    ))


class _Reader:
    def __init__(self, data: bytes):
        self._view = memoryview(data)
        self._offset = 0

    def take(self, layout: struct.Struct) -> tuple:
        fields = layout.unpack_from(self._view, self._offset)
        self._offset += layout.size
        return fields


def _read_arrow(reader: _Reader) -> Arrow:
    x, y, dx, dy, symbol, active, special, owner = reader.take(_ARROW)
    return Arrow(x=x, y=y, dx=dx, dy=dy, symbol=symbol.decode("latin-1"),
                 active=bool(active), special=special, owner=owner)


def _read_redzone(reader: _Reader) -> RedZone:
    x, y, width, height, active, lifetime = reader.take(_REDZONE)
    return RedZone(x=x, y=y, width=width, height=height,
                   active=bool(active), lifetime=lifetime)


def _read_player(reader: _Reader) -> Player:
    values = dict(zip(_PLAYER_FIELDS, reader.take(_PLAYER)))
    for name in _PLAYER_FLAGS:
        values[name] = bool(values[name])
    return Player(**values)


def _read_state(reader: _Reader) -> GameState:
    arrows = [_read_arrow(reader) for _ in range(MAX_ARROWS)]
    redzones = [_read_redzone(reader) for _ in range(MAX_REDZONES)]
    players = [_read_player(reader) for _ in range(MAX_PLAYERS)]
    frame, special_wave, multiplay = reader.take(_STATE_TAIL)
    return GameState(arrows=arrows, redzones=redzones, players=players,
                     frame=frame, special_wave=special_wave, multiplay=bool(multiplay))


def decode_packet(data: bytes) -> Packet:
    """Parse PACKET_SIZE bytes back into a packet."""
    if len(data) != PACKET_SIZE:
        raise ValueError(f"packet must be {PACKET_SIZE} bytes, got {len(data)}")
    reader = _Reader(data)
    kind, packet_id, x, y, item_type = reader.take(_HEADER)
    packet_type = PacketType(kind)
    arrows = [_read_arrow(reader) for _ in range(MAX_ARROWS)]
    redzones = [_read_redzone(reader) for _ in range(MAX_REDZONES)]
    player = _read_player(reader)
    game_state = _read_state(reader)
    return Packet(type=packet_type, id=packet_id, x=x, y=y, item_type=item_type,
                  arrows=arrows, redzones=redzones, player=player,
                  game_state=game_state)


class PacketStream:
    """Sends and receives whole packets over a connected stream socket."""

    def __init__(self, sock: socket.socket):
        self.sock = sock
        self._send_lock = threading.Lock()

    def send(self, packet: Packet) -> None:
        """Send one packet; safe to call from several threads."""
        data = encode_packet(packet)
        with self._send_lock:
            self.sock.sendall(data)

    def receive(self) -> Optional[Packet]:
        """Read the next packet, or None once the peer has closed the connection."""
        buffer = bytearray()
        while len(buffer) < PACKET_SIZE:
            try:
                chunk = self.sock.recv(PACKET_SIZE - len(buffer))
            except (ConnectionResetError, ConnectionAbortedError):
                chunk = b""
            if not chunk:
                if buffer:
                    raise ConnectionError("connection closed in the middle of a packet")
                return None
            buffer += chunk
        return decode_packet(bytes(buffer))

    def close(self) -> None:
        """Shut the connection down, waking any reader blocked on it."""
        try:
            self.sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        self.sock.close()

    def __enter__(self) -> "PacketStream":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()