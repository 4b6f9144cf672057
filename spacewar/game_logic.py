"""Rules of the game: movement, spawning, collisions and timed events."""

from __future__ import annotations

import random
from typing import Optional

from .models import (
    ARROW_NORMAL,
    ARROW_PLAYER_ATTACK,
    ARROW_SPECIAL_WAVE,
    ENVIRONMENT_OWNER,
    MAX_PLAYERS,
    Arrow,
    GameState,
    Player,
    RedZone,
)

GAME_WIDTH = 90
GAME_HEIGHT = 26

STARTING_LIVES = 3
DAMAGE_COOLDOWN = 40
REDZONE_LIFETIME = 200
SPECIAL_WAVE_FRAMES = 60
FRAMES_PER_LEVEL = 100
EVENT_INTERVAL = 10

ATTACK_DIRECTIONS = (
    (1, 0), (-1, 0), (0, 1), (0, -1),
    (1, 1), (-1, 1), (1, -1), (-1, -1),
)

_DIRECTION_SYMBOLS = {
    (1, 0): ">",
    (-1, 0): "<",
    (0, 1): "v",
    (0, -1): "^",
    (1, 1): "\\",
    (-1, 1): "/",
    (1, -1): "/",
    (-1, -1): "\\",
}


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def _rng(rng):
    return random if rng is None else rng


def make_arrow(start_x: int, start_y: int, target_x: int, target_y: int,
               special: int, owner: int) -> Arrow:
    """Build an active arrow at the start point heading toward the target."""
    dx = _sign(target_x - start_x)
    dy = _sign(target_y - start_y)
    if special == ARROW_SPECIAL_WAVE:
        symbol = "#"
    else:
        symbol = _DIRECTION_SYMBOLS.get((dx, dy), "*")
    return Arrow(x=start_x, y=start_y, dx=dx, dy=dy, symbol=symbol,
                 active=True, special=special, owner=owner)


def _starting_player(player_id: int, x: int, y: int, connected: bool) -> Player:
    return Player(id=player_id, x=x, y=y, connected=connected, lives=STARTING_LIVES,
                  invincible_item=1, heal_item=1, slow_item=1)


def new_game(multiplay: bool) -> GameState:
    """Return a fresh game world for one or two players."""
    state = GameState(multiplay=multiplay)
    if multiplay:
        state.players[0] = _starting_player(0, 30, 12, connected=False)
        state.players[1] = _starting_player(1, 50, 12, connected=False)
    else:
        state.players[0] = _starting_player(0, GAME_WIDTH // 2, GAME_HEIGHT // 2,
                                             connected=True)
    return state


def update_player(player: Player) -> None:
    """Advance a player's effect timers by one frame and add a point."""
    if player.invincible_frames > 0:
        player.invincible_frames -= 1
        if player.invincible_frames == 0:
            player.invincible = False
    if player.slow_frames > 0:
        player.slow_frames -= 1
        if player.slow_frames == 0:
            player.slow = False
    if player.damage_cooldown > 0:
        player.damage_cooldown -= 1
    player.score += 1


def update_arrows(state: GameState, width: int, height: int) -> None:
    """Move active arrows, at half speed while slowed, and drop those at a wall."""
    move = not state.any_slow() or state.frame % 2 == 0
    for arrow in state.arrows:
        if not arrow.active:
            continue
        if move:
            arrow.x += arrow.dx
            arrow.y += arrow.dy
        if arrow.x <= 0 or arrow.x >= width - 1 or arrow.y <= 0 or arrow.y >= height - 1:
            arrow.active = False


def update_redzones(state: GameState) -> None:
    """Age active red zones and remove expired ones."""
    for zone in state.redzones:
        if zone.active:
            zone.lifetime -= 1
            if zone.lifetime <= 0:
                zone.active = False


def damage(player: Player) -> None:
    """Take one life unless the player is protected."""
    if player.invincible or player.damage_cooldown > 0:
        return
    player.lives -= 1
    player.damage_cooldown = DAMAGE_COOLDOWN


def check_collisions(state: GameState) -> None:
    """Apply hits from arrows and red zones to living players."""
    for player in state.players[:MAX_PLAYERS]:
        if not player.alive():
            continue
        for arrow in state.arrows:
            if (arrow.active and arrow.x == player.x and arrow.y == player.y
                    and arrow.owner != player.id):
                damage(player)
                arrow.active = False
        for zone in state.redzones:
            if (zone.active
                    and zone.x <= player.x < zone.x + zone.width
                    and zone.y <= player.y < zone.y + zone.height):
                damage(player)


def _free_arrow_slot(state: GameState) -> Optional[int]:
    return next((i for i, arrow in enumerate(state.arrows) if not arrow.active), None)


def spawn_arrow(state: GameState, width: int, height: int, special, target_id: int,
                rng=None) -> Optional[Arrow]:
    """Fire an arrow from a random edge at a player; returns it, or None."""
    rng = _rng(rng)
    slot = _free_arrow_slot(state)
    if slot is None:
        return None
    edge = rng.randrange(4)
    if edge == 0:
        start_x, start_y = 1, rng.randrange(height - 2) + 1
    elif edge == 1:
        start_x, start_y = width - 2, rng.randrange(height - 2) + 1
    elif edge == 2:
        start_x, start_y = rng.randrange(width - 2) + 1, 1
    else:
        start_x, start_y = rng.randrange(width - 2) + 1, height - 2
    target = state.players[target_id]
    if not target.alive():
        return None
    arrow = make_arrow(start_x, start_y, target.x, target.y,
                       int(special), ENVIRONMENT_OWNER)
    state.arrows[slot] = arrow
    return arrow


def spawn_redzone(state: GameState, width: int, height: int, rng=None) -> Optional[RedZone]:
    """Place a red zone of random size and position in the first free slot."""
    rng = _rng(rng)
    for slot, zone in enumerate(state.redzones):
        if zone.active:
            continue
        zone_width = 5 + rng.randrange(8)
        zone_height = 3 + rng.randrange(5)
        new_zone = RedZone(
            width=zone_width,
            height=zone_height,
            x=2 + rng.randrange(width - zone_width - 3),
            y=2 + rng.randrange(height - zone_height - 3),
            lifetime=REDZONE_LIFETIME,
            active=True,
        )
        state.redzones[slot] = new_zone
        return new_zone
    return None


def create_player_attack(state: GameState, player_id: int) -> list[Arrow]:
    """Fire a player's attack: all eight ways in multiplayer, upward alone."""
    player = state.players[player_id]
    if not player.alive():
        return []
    directions = ATTACK_DIRECTIONS if state.multiplay else ((0, -1),)
    fired = []
    for dx, dy in directions:
        slot = _free_arrow_slot(state)
        if slot is None:
            continue
        arrow = make_arrow(player.x, player.y, player.x + dx, player.y + dy,
                           ARROW_PLAYER_ATTACK, player_id)
        state.arrows[slot] = arrow
        fired.append(arrow)
    return fired


def update_game(state: GameState, width: int, height: int, rng=None) -> None:
    """Advance the whole world by one frame."""
    rng = _rng(rng)
    for player in state.players[:MAX_PLAYERS]:
        if player.alive():
            update_player(player)

    update_arrows(state, width, height)
    update_redzones(state)
    check_collisions(state)

    level = state.frame // FRAMES_PER_LEVEL
    two_players = state.multiplay

    if state.special_wave > 0:
        state.special_wave -= 1
        if rng.randrange(100) < 30 + level * 4:
            target_id = rng.randrange(2) if two_players else 0
            spawn_arrow(state, width, height, ARROW_SPECIAL_WAVE, target_id, rng)

    if rng.randrange(100) < 10 + level * 2:
        target_id = rng.randrange(2) if two_players else 0
        spawn_arrow(state, width, height, ARROW_NORMAL, target_id, rng)

    state.frame += 1


class TimedEvents:
    """Periodic events: a special wave every firing, a red zone every second one."""

    interval = EVENT_INTERVAL

    def __init__(self):
        self.count = 0

    def fire(self, state: GameState, rng=None) -> None:
        """Handle one period's events."""
        self.count += 1
        state.special_wave = SPECIAL_WAVE_FRAMES
        if self.count % 2 == 0:
            spawn_redzone(state, GAME_WIDTH, GAME_HEIGHT, rng)