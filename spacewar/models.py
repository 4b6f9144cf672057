"""Game objects shared by the single-player game, the server and the client."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

MAX_ARROWS = 50
MAX_REDZONES = 10
MAX_PLAYERS = 2

PORT = 8888
SCORE_FILE = "scores.dat"

# Arrow kinds.
ARROW_NORMAL = 0
ARROW_SPECIAL_WAVE = 1
ARROW_PLAYER_ATTACK = 2

# Owner of arrows fired by the environment rather than a player.
ENVIRONMENT_OWNER = -1

# Colour pair numbers used by the menu screens.
COLOR_PAIR_NORMAL = 1
COLOR_PAIR_SELECTED = 2
COLOR_PAIR_TITLE = 3
COLOR_PAIR_BORDER = 4
COLOR_PAIR_ACCENT = 5
COLOR_PAIR_STATUS = 6
COLOR_PAIR_DECO_BLUE = 7
COLOR_PAIR_STAR = 8
COLOR_PAIR_CREDITS = 9


class PacketType(IntEnum):
    """Kind of a network packet."""

    INITIAL_STATE = 0
    PLAYER_MOVE = 1
    PLAYER_STATUS = 2
    ARROW_UPDATE = 3
    REDZONE_UPDATE = 4
    ITEM_USE = 5
    GAME_OVER = 6


@dataclass
class Arrow:
    """A moving projectile."""

    x: int = 0
    y: int = 0
    dx: int = 0
    dy: int = 0
    symbol: str = " "
    active: bool = False
    special: int = ARROW_NORMAL
    owner: int = 0


@dataclass
class RedZone:
    """A rectangular area that hurts players standing in it."""

    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0
    active: bool = False
    lifetime: int = 0


@dataclass
class Player:
    """A player's position, health, items and active effects."""

    id: int = 0
    x: int = 0
    y: int = 0
    connected: bool = False
    score: int = 0
    lives: int = 0
    damage_cooldown: int = 0
    invincible_item: int = 0
    heal_item: int = 0
    slow_item: int = 0
    invincible: bool = False
    invincible_frames: int = 0
    slow: bool = False
    slow_frames: int = 0

    def alive(self) -> bool:
        """True when the player is connected and has lives left."""
        return bool(self.connected) and self.lives > 0


def _arrows() -> list[Arrow]:
    return [Arrow() for _ in range(MAX_ARROWS)]


def _redzones() -> list[RedZone]:
    return [RedZone() for _ in range(MAX_REDZONES)]


def _players() -> list[Player]:
    return [Player() for _ in range(MAX_PLAYERS)]


@dataclass
class GameState:
    """The whole game world."""

    arrows: list[Arrow] = field(default_factory=_arrows)
    redzones: list[RedZone] = field(default_factory=_redzones)
    players: list[Player] = field(default_factory=_players)
    frame: int = 0
    special_wave: int = 0
    multiplay: bool = False

    def any_slow(self) -> bool:
        """True when a connected player has the slow effect active."""
        return any(p.connected and p.slow for p in self.players[:MAX_PLAYERS])


@dataclass
class Packet:
    """A message exchanged between server and client."""

    type: PacketType
    id: int = 0
    x: int = 0
    y: int = 0
    item_type: int = 0
    arrows: list[Arrow] = field(default_factory=_arrows)
    redzones: list[RedZone] = field(default_factory=_redzones)
    player: Player = field(default_factory=Player)
    game_state: GameState = field(default_factory=GameState)