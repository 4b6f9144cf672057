import random

import pytest

from spacewar.game_logic import (
    ATTACK_DIRECTIONS,
    DAMAGE_COOLDOWN,
    GAME_HEIGHT,
    GAME_WIDTH,
    REDZONE_LIFETIME,
    SPECIAL_WAVE_FRAMES,
    STARTING_LIVES,
    TimedEvents,
    check_collisions,
    create_player_attack,
    damage,
    make_arrow,
    new_game,
    spawn_arrow,
    spawn_redzone,
    update_arrows,
    update_game,
    update_player,
    update_redzones,
)
from spacewar.models import (
    ARROW_NORMAL,
    ARROW_PLAYER_ATTACK,
    ARROW_SPECIAL_WAVE,
    Arrow,
    Player,
    RedZone,
)


@pytest.mark.parametrize(
    "dx, dy, symbol",
    [
        (1, 0, ">"), (-1, 0, "<"), (0, 1, "v"), (0, -1, "^"),
        (1, 1, "\\"), (-1, 1, "/"), (1, -1, "/"), (-1, -1, "\\"),
    ],
)
def test_make_arrow_direction_symbols(dx, dy, symbol):
    arrow = make_arrow(10, 10, 10 + 5 * dx, 10 + 7 * dy, ARROW_NORMAL, -1)
    assert (arrow.dx, arrow.dy) == (dx, dy)
    assert arrow.symbol == symbol
    assert arrow.active is True
    assert arrow.owner == -1


def test_make_arrow_special_wave_and_no_direction():
    assert make_arrow(3, 3, 9, 9, ARROW_SPECIAL_WAVE, -1).symbol == "#"
    still = make_arrow(4, 4, 4, 4, ARROW_PLAYER_ATTACK, 1)
    assert still.symbol == "*"
    assert (still.dx, still.dy, still.owner) == (0, 0, 1)


def test_new_single_game():
    state = new_game(False)
    player = state.players[0]
    assert (player.x, player.y) == (GAME_WIDTH // 2, GAME_HEIGHT // 2)
    assert player.connected is True
    assert player.lives == STARTING_LIVES
    assert state.players[1].connected is False
    assert state.multiplay is False


def test_new_multi_game():
    state = new_game(True)
    assert state.multiplay is True
    assert [p.id for p in state.players] == [0, 1]
    assert all(not p.connected for p in state.players)
    assert all(p.lives == STARTING_LIVES for p in state.players)
    assert state.players[0].x < state.players[1].x
    assert state.players[0].y == state.players[1].y


def test_update_player_timers():
    player = Player(invincible=True, invincible_frames=1, slow=True, slow_frames=2,
                    damage_cooldown=3, score=7)
    update_player(player)
    assert player.invincible is False
    assert player.invincible_frames == 0
    assert player.slow is True
    assert player.slow_frames == 1
    assert player.damage_cooldown == 2
    assert player.score == 8


def test_update_arrows_moves_and_stops_at_walls():
    state = new_game(False)
    state.arrows[0] = make_arrow(10, 10, 20, 10, ARROW_NORMAL, -1)
    state.arrows[1] = make_arrow(1, 5, 0, 5, ARROW_NORMAL, -1)
    update_arrows(state, GAME_WIDTH, GAME_HEIGHT)
    assert (state.arrows[0].x, state.arrows[0].y) == (11, 10)
    assert state.arrows[0].active is True
    assert state.arrows[1].active is False


def test_update_arrows_half_speed_when_slowed():
    state = new_game(False)
    state.players[0].slow = True
    state.arrows[0] = make_arrow(10, 10, 20, 10, ARROW_NORMAL, -1)
    state.frame = 1
    update_arrows(state, GAME_WIDTH, GAME_HEIGHT)
    assert state.arrows[0].x == 10
    state.frame = 2
    update_arrows(state, GAME_WIDTH, GAME_HEIGHT)
    assert state.arrows[0].x == 11


def test_update_redzones_expire():
    state = new_game(False)
    state.redzones[0] = RedZone(active=True, lifetime=1)
    state.redzones[1] = RedZone(active=True, lifetime=3)
    update_redzones(state)
    assert state.redzones[0].active is False
    assert state.redzones[1].active is True
    assert state.redzones[1].lifetime == 2


def test_damage_and_protection():
    player = Player(lives=STARTING_LIVES)
    damage(player)
    assert player.lives == STARTING_LIVES - 1
    assert player.damage_cooldown == DAMAGE_COOLDOWN
    damage(player)
    assert player.lives == STARTING_LIVES - 1
    shielded = Player(lives=STARTING_LIVES, invincible=True)
    damage(shielded)
    assert shielded.lives == STARTING_LIVES


def test_arrow_hit_damages_and_consumes_arrow():
    state = new_game(False)
    player = state.players[0]
    state.arrows[0] = Arrow(x=player.x, y=player.y, active=True, owner=-1)
    check_collisions(state)
    assert player.lives == STARTING_LIVES - 1
    assert state.arrows[0].active is False


def test_invincible_player_still_consumes_arrow():
    state = new_game(False)
    player = state.players[0]
    player.invincible = True
    state.arrows[0] = Arrow(x=player.x, y=player.y, active=True, owner=-1)
    check_collisions(state)
    assert player.lives == STARTING_LIVES
    assert state.arrows[0].active is False


def test_own_arrow_does_not_hit():
    state = new_game(False)
    player = state.players[0]
    state.arrows[0] = Arrow(x=player.x, y=player.y, active=True, owner=player.id)
    check_collisions(state)
    assert player.lives == STARTING_LIVES
    assert state.arrows[0].active is True


def test_redzone_damages_player_inside():
    state = new_game(False)
    player = state.players[0]
    state.redzones[0] = RedZone(x=player.x, y=player.y, width=1, height=1,
                                active=True, lifetime=5)
    check_collisions(state)
    assert player.lives == STARTING_LIVES - 1
    state.redzones[0] = RedZone(x=player.x + 1, y=player.y, width=3, height=3,
                                active=True, lifetime=5)
    player.damage_cooldown = 0
    check_collisions(state)
    assert player.lives == STARTING_LIVES - 1


@pytest.mark.parametrize("seed", range(20))
def test_spawn_arrow_from_edge_toward_player(seed):
    state = new_game(False)
    player = state.players[0]
    arrow = spawn_arrow(state, GAME_WIDTH, GAME_HEIGHT, False, 0, random.Random(seed))
    assert state.arrows[0] is arrow
    assert arrow.owner == -1
    assert arrow.special == ARROW_NORMAL
    assert 1 <= arrow.x <= GAME_WIDTH - 2
    assert 1 <= arrow.y <= GAME_HEIGHT - 2
    assert arrow.x in (1, GAME_WIDTH - 2) or arrow.y in (1, GAME_HEIGHT - 2)
    assert arrow.dx == (player.x > arrow.x) - (player.x < arrow.x)
    assert arrow.dy == (player.y > arrow.y) - (player.y < arrow.y)


def test_spawn_arrow_special_flag_and_absent_target():
    state = new_game(False)
    arrow = spawn_arrow(state, GAME_WIDTH, GAME_HEIGHT, True, 0, random.Random(1))
    assert arrow.special == ARROW_SPECIAL_WAVE
    assert arrow.symbol == "#"
    assert spawn_arrow(state, GAME_WIDTH, GAME_HEIGHT, False, 1, random.Random(1)) is None
    assert sum(a.active for a in state.arrows) == 1


@pytest.mark.parametrize("seed", range(20))
def test_spawn_redzone_fits_inside_field(seed):
    state = new_game(False)
    zone = spawn_redzone(state, GAME_WIDTH, GAME_HEIGHT, random.Random(seed))
    assert state.redzones[0] is zone
    assert 5 <= zone.width <= 12
    assert 3 <= zone.height <= 7
    assert zone.x >= 2 and zone.x + zone.width <= GAME_WIDTH - 2
    assert zone.y >= 2 and zone.y + zone.height <= GAME_HEIGHT - 2
    assert zone.lifetime == REDZONE_LIFETIME


def test_spawn_redzone_when_full():
    state = new_game(False)
    for zone in state.redzones:
        zone.active = True
    assert spawn_redzone(state, GAME_WIDTH, GAME_HEIGHT, random.Random(0)) is None


def test_multiplayer_attack_fires_all_directions():
    state = new_game(True)
    state.players[0].connected = True
    fired = create_player_attack(state, 0)
    active = [a for a in state.arrows if a.active]
    assert len(active) == len(ATTACK_DIRECTIONS)
    assert {(a.dx, a.dy) for a in active} == set(ATTACK_DIRECTIONS)
    assert all(a.owner == 0 and a.special == ARROW_PLAYER_ATTACK for a in active)
    assert fired == active


def test_single_attack_fires_upward():
    state = new_game(False)
    create_player_attack(state, 0)
    active = [a for a in state.arrows if a.active]
    assert len(active) == 1
    assert (active[0].dx, active[0].dy, active[0].symbol) == (0, -1, "^")


def test_attack_needs_living_player():
    state = new_game(True)
    assert create_player_attack(state, 1) == []
    assert not any(a.active for a in state.arrows)


def test_update_game_advances_frame_and_score():
    state = new_game(False)
    state.special_wave = 5
    update_game(state, GAME_WIDTH, GAME_HEIGHT, random.Random(3))
    assert state.frame == 1
    assert state.special_wave == 4
    assert state.players[0].score == 1
    assert state.players[1].score == 0


def test_timed_events_wave_then_redzone():
    state = new_game(False)
    events = TimedEvents()
    rng = random.Random(5)
    events.fire(state, rng)
    assert state.special_wave == SPECIAL_WAVE_FRAMES
    assert not any(z.active for z in state.redzones)
    events.fire(state, rng)
    assert sum(z.active for z in state.redzones) == 1