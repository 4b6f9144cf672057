"""Effects of the three items a player carries."""

from __future__ import annotations

from .models import Player

MAX_LIVES = 3
INVINCIBLE_FRAMES = 100
SLOW_FRAMES = 200

ITEM_INVINCIBLE = 1
ITEM_HEAL = 2
ITEM_SLOW = 3


def use_invincible(player: Player) -> bool:
    """Spend an invincibility item; returns whether one was used."""
    if player.invincible_item <= 0:
        return False
    player.invincible_item -= 1
    player.invincible = True
    player.invincible_frames = INVINCIBLE_FRAMES
    return True


def use_heal(player: Player) -> bool:
    """Spend a heal item to restore one life, unless lives are full."""
    if player.heal_item <= 0 or player.lives >= MAX_LIVES:
        return False
    player.heal_item -= 1
    player.lives += 1
    return True


def use_slow(player: Player) -> bool:
    """Spend a slow item, halving arrow speed for a while."""
    if player.slow_item <= 0:
        return False
    player.slow_item -= 1
    player.slow = True
    player.slow_frames = SLOW_FRAMES
    return True


_ITEMS = {
    ITEM_INVINCIBLE: use_invincible,
    ITEM_HEAL: use_heal,
    ITEM_SLOW: use_slow,
}


def use_item(player: Player, item_type: int) -> bool:
    """Use the item with the given number (1-3); unknown numbers do nothing."""
    action = _ITEMS.get(item_type)
    if action is None:
        return False
    return action(player)