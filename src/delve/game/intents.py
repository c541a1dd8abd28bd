"""Player intents and their dispatch.

apply_intent() is the single entry point a front end needs: it takes one
intent, applies it to the state and reports whether a game turn elapsed.
Rejected actions never raise; they leave a single explanatory message.
Indices that do not exist in the inventory, ring slots other than 0 and 1,
and directions with a component outside -1..1 are caller bugs and raise.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from ..config import TUNING
from ..dungeon import TileType
from .effects import quaff_potion, read_scroll, throw_item, zap_wand
from .items import Armor, Food, Item, Potion, Ring, Scroll, Wand, Weapon, with_article
from .models import FloorItem, GameState
from .player import RING_SLOTS, recompute_stats
from .state import ascend_stairs, check_direction, cheat_rank_up, descend_stairs, end_turn, move_player

logger = logging.getLogger(__name__)

HANDS = ("left", "right")


@dataclass(frozen=True)
class Move:
    dx: int
    dy: int


WAIT = Move(0, 0)


@dataclass(frozen=True)
class Wield:
    index: int


@dataclass(frozen=True)
class Unwield:
    pass


@dataclass(frozen=True)
class Wear:
    index: int


@dataclass(frozen=True)
class TakeOff:
    pass


@dataclass(frozen=True)
class PutOnRing:
    index: int
    slot: int


@dataclass(frozen=True)
class RemoveRing:
    slot: int


@dataclass(frozen=True)
class Eat:
    index: int


@dataclass(frozen=True)
class Quaff:
    index: int


@dataclass(frozen=True)
class Read:
    index: int


@dataclass(frozen=True)
class Zap:
    index: int
    dx: int
    dy: int


@dataclass(frozen=True)
class Throw:
    index: int
    dx: int
    dy: int


@dataclass(frozen=True)
class Drop:
    index: int


@dataclass(frozen=True)
class Descend:
    pass


@dataclass(frozen=True)
class Ascend:
    pass


@dataclass(frozen=True)
class RankUp:
    pass


Intent = Union[
    Move, Wield, Unwield, Wear, TakeOff, PutOnRing, RemoveRing, Eat, Quaff, Read, Zap, Throw, Drop, Descend, Ascend, RankUp
]


def _item(state: GameState, index: int) -> Item:
    inventory = state.player.inventory
    if not 0 <= index < len(inventory):
        raise IndexError(f"Inventory index {index} out of range (0..{len(inventory) - 1})")
    return inventory[index]


def _check_slot(slot: int) -> None:
    if slot not in range(RING_SLOTS):
        raise ValueError(f"Ring slot must be 0 or 1, got {slot}")


def _reject(state: GameState, message: str) -> bool:
    state.messages = [message]
    return False


def wield_weapon(state: GameState, index: int) -> bool:
    item = _item(state, index)
    player = state.player
    if not isinstance(item, Weapon):
        return _reject(state, "You can't wield that")
    if item is player.equipped_weapon:
        return _reject(state, "You are already wielding that")
    player.equipped_weapon = item
    recompute_stats(player)
    state.messages = [f"You wield {item.name}"]
    return True


def unwield_weapon(state: GameState) -> bool:
    player = state.player
    if player.equipped_weapon is None:
        return _reject(state, "You are not wielding anything")
    name = player.equipped_weapon.name
    player.equipped_weapon = None
    recompute_stats(player)
    state.messages = [f"You put away {name}"]
    return True


def wear_armor(state: GameState, index: int) -> bool:
    item = _item(state, index)
    player = state.player
    if not isinstance(item, Armor):
        return _reject(state, "You can't wear that")
    if item is player.equipped_armor:
        return _reject(state, "You are already wearing that")
    player.equipped_armor = item
    recompute_stats(player)
    state.messages = [f"You are now wearing {item.name}"]
    return True


def remove_armor(state: GameState) -> bool:
    player = state.player
    if player.equipped_armor is None:
        return _reject(state, "You aren't wearing any armor")
    name = player.equipped_armor.name
    player.equipped_armor = None
    recompute_stats(player)
    state.messages = [f"You remove {name}"]
    return True


def put_on_ring(state: GameState, index: int, slot: int) -> bool:
    _check_slot(slot)
    item = _item(state, index)
    player = state.player
    if not isinstance(item, Ring):
        return _reject(state, "You can't put that on")
    if any(item is r for r in player.equipped_rings):
        return _reject(state, "You are already wearing that")
    if player.equipped_rings[slot] is not None:
        return _reject(state, "You are already wearing a ring on that hand")
    player.equipped_rings[slot] = item
    recompute_stats(player)
    state.messages = [f"You put on {item.name} ({HANDS[slot]} hand)"]
    return True


def remove_ring(state: GameState, slot: int) -> bool:
    _check_slot(slot)
    player = state.player
    ring = player.equipped_rings[slot]
    if ring is None:
        return _reject(state, "You aren't wearing a ring on that hand")
    player.equipped_rings[slot] = None
    recompute_stats(player)
    state.messages = [f"You remove {ring.name} ({HANDS[slot]} hand)"]
    return True


def drop_item(state: GameState, index: int) -> bool:
    item = _item(state, index)
    player = state.player
    x, y = player.x, player.y
    tile = state.dungeon.tile_at(x, y)
    occupied = (
        tile in (TileType.STAIRS_UP, TileType.STAIRS_DOWN, TileType.DOOR)
        or any((d.x, d.y) == (x, y) for d in state.dungeon_items)
        or any((g.x, g.y) == (x, y) for g in state.gold_items)
    )
    if occupied:
        return _reject(state, "Can't drop that here")
    if item is player.equipped_weapon:
        return _reject(state, "Unwield it before dropping")
    if item is player.equipped_armor or any(item is r for r in player.equipped_rings):
        return _reject(state, "Remove it before dropping")
    del player.inventory[index]
    state.dungeon_items.append(FloorItem(x, y, item))
    state.messages = [f"You drop {with_article(item.name)}"]
    return True


def _use_turn(state: GameState) -> bool:
    end_turn(state)
    return True


def eat(state: GameState, index: int) -> bool:
    item = _item(state, index)
    if not isinstance(item, Food):
        return _reject(state, "That's inedible")
    player = state.player
    player.remove_item(item)
    state.messages = [f"You eat {with_article(item.name)}"]
    player.food = min(TUNING.food_max, max(0, player.food) + TUNING.ration_value)
    return _use_turn(state)


def quaff(state: GameState, index: int) -> bool:
    item = _item(state, index)
    if not isinstance(item, Potion):
        return _reject(state, "You can't drink that")
    state.messages = []
    quaff_potion(state, item)
    return _use_turn(state)


def read(state: GameState, index: int) -> bool:
    item = _item(state, index)
    if not isinstance(item, Scroll):
        return _reject(state, "There is nothing written on that")
    state.messages = []
    read_scroll(state, item)
    return _use_turn(state)


def zap(state: GameState, index: int, dx: int, dy: int) -> bool:
    check_direction(dx, dy)
    item = _item(state, index)
    if not isinstance(item, Wand):
        return _reject(state, "You can't zap with that")
    if (dx, dy) == (0, 0):
        return _reject(state, "You must zap in a direction")
    state.messages = []
    if not zap_wand(state, item, dx, dy):
        return False
    return _use_turn(state)


def throw(state: GameState, index: int, dx: int, dy: int) -> bool:
    check_direction(dx, dy)
    item = _item(state, index)
    if not isinstance(item, Weapon):
        return _reject(state, "You can't throw that")
    if item is state.player.equipped_weapon:
        return _reject(state, "You can't throw what you are wielding")
    if (dx, dy) == (0, 0):
        return _reject(state, "You must throw in a direction")
    state.messages = []
    throw_item(state, item, dx, dy)
    return _use_turn(state)


def _free_action(state: GameState, intent: Intent) -> None:
    if isinstance(intent, Wield):
        wield_weapon(state, intent.index)
    elif isinstance(intent, Unwield):
        unwield_weapon(state)
    elif isinstance(intent, Wear):
        wear_armor(state, intent.index)
    elif isinstance(intent, TakeOff):
        remove_armor(state)
    elif isinstance(intent, PutOnRing):
        put_on_ring(state, intent.index, intent.slot)
    elif isinstance(intent, RemoveRing):
        remove_ring(state, intent.slot)
    elif isinstance(intent, Drop):
        drop_item(state, intent.index)
    elif isinstance(intent, Descend):
        descend_stairs(state)
    elif isinstance(intent, Ascend):
        ascend_stairs(state)
    elif isinstance(intent, RankUp):
        cheat_rank_up(state)
    else:
        raise TypeError(f"Unknown intent: {intent!r}")


def apply_intent(state: GameState, intent: Intent) -> bool:
    """Apply one player intent. Returns True when a game turn elapsed.

    Terminal states ignore every intent. A paralysed player's turn-using
    intents only let the turn pass. Equipment changes, drops, stairs and the
    rank-up cheat are free and never advance the clock.
    """
    if state.over:
        return False
    logger.debug("Turn %d intent %r", state.turn, intent)

    if isinstance(intent, Move):
        return move_player(state, intent.dx, intent.dy)

    if isinstance(intent, (Eat, Quaff, Read, Zap, Throw)):
        if isinstance(intent, (Zap, Throw)):
            check_direction(intent.dx, intent.dy)
        if state.player.status.paralysis > 0:
            state.messages = []
            return _use_turn(state)
        if isinstance(intent, Eat):
            return eat(state, intent.index)
        if isinstance(intent, Quaff):
            return quaff(state, intent.index)
        if isinstance(intent, Read):
            return read(state, intent.index)
        if isinstance(intent, Zap):
            return zap(state, intent.index, intent.dx, intent.dy)
        return throw(state, intent.index, intent.dx, intent.dy)

    _free_action(state, intent)
    return False
