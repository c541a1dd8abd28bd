from __future__ import annotations

import logging
import math
from typing import Callable, List, Optional, Tuple

from ..config import TUNING
from ..dungeon import Dungeon, Room, TileType, generate, is_walkable
from ..rng import Mulberry32, Rng, derive_seed, new_seed, rand_int, seed_from
from .ai import spawn_monsters, step_monsters
from .combat import resolve_combat
from .items import RingEffect, generate_dungeon_item
from .models import (
    FloorItem,
    GameState,
    GoldPile,
    award_kill,
    handle_death,
    illuminate_room_at,
    living_monster_at,
    purge_dead,
    refresh_fov,
)
from .player import create_player, max_rank, promote_player, regen_rate
from .text import with_article

logger = logging.getLogger(__name__)

GAMEPLAY_SALT = 0xDEADBEEF

PLAYER_HIT_MSGS: Tuple[Callable[[str], str], ...] = (
    lambda name: f"You hit the {name}",
    lambda name: f"You have injured the {name}",
    lambda name: f"You scored an excellent hit on the {name}",
    lambda name: f"You clobbered the {name}",
)

# Nine relative directions, "stay" included, for a confused player.
ALL_DIRECTIONS: Tuple[Tuple[int, int], ...] = tuple((dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1))


def check_direction(dx: int, dy: int) -> None:
    if dx not in (-1, 0, 1) or dy not in (-1, 0, 1):
        raise ValueError(f"Direction components must be -1, 0 or 1, got ({dx}, {dy})")


def _random_spot(room: Room, rng: Rng) -> Tuple[int, int]:
    return room.x + rand_int(rng, room.width), room.y + rand_int(rng, room.height)


def place_gold(rooms: List[Room], rng: Rng, dungeon_level: int, stairs_up: Tuple[int, int]) -> List[GoldPile]:
    """Roll a gold pile per room; amounts run from 2 to min(gold_max, level * gold_per_level)."""
    piles: List[GoldPile] = []
    max_amount = min(TUNING.gold_max, dungeon_level * TUNING.gold_per_level)
    for room in rooms:
        if rng() >= TUNING.gold_chance:
            continue
        x, y = _random_spot(room, rng)
        amount = 2 + math.floor((rng() + rng() + rng()) / 3 * (max_amount - 1))
        if (x, y) == stairs_up:
            continue
        piles.append(GoldPile(x, y, amount))
    return piles


def place_items(rooms: List[Room], rng: Rng, stairs_up: Tuple[int, int]) -> List[FloorItem]:
    items: List[FloorItem] = []
    for room in rooms:
        item = generate_dungeon_item(rng)
        if item is None:
            continue
        x, y = _random_spot(room, rng)
        if (x, y) == stairs_up:
            continue
        items.append(FloorItem(x, y, item))
    return items


def _populate(state: GameState) -> None:
    dungeon = state.dungeon
    state.monsters = spawn_monsters(dungeon, state.rng, state.dungeon_level)
    state.gold_items = place_gold(dungeon.rooms, state.rng, state.dungeon_level, dungeon.stairs_up)
    state.dungeon_items = place_items(dungeon.rooms, state.rng, dungeon.stairs_up)


def create_game(
    seed: Optional[int] = None,
    dungeon_level: int = 1,
    player_name: str = "Adventurer",
    width: int = TUNING.width,
    height: int = TUNING.height,
) -> GameState:
    """Start a new game with the player on the up staircase.

    Without a seed one is drawn and logged so the run can be replayed.
    Generation and gameplay use separate streams derived from the seed.
    """
    if seed is None:
        seed = new_seed()
    dungeon = generate(width=width, height=height, seed=seed, dungeon_level=dungeon_level)
    rng = Mulberry32(derive_seed(seed, GAMEPLAY_SALT))
    sx, sy = dungeon.stairs_up
    state = GameState(
        dungeon=dungeon,
        player=create_player(sx, sy, rng),
        rng=rng,
        player_name=player_name,
        dungeon_level=dungeon_level,
        seed=seed,
        messages=["Welcome to the Dungeons of Doom", f"Good luck {player_name}!"],
    )
    _populate(state)
    refresh_fov(state)
    illuminate_room_at(dungeon, sx, sy)
    logger.info("New game for %s: seed=%d level=%d", player_name, seed, dungeon_level)
    return state


def _change_level(state: GameState, new_level: int, arrival: Callable[[Dungeon], Tuple[int, int]], message: str) -> None:
    seed = seed_from(state.rng)
    dungeon = generate(width=state.dungeon.width, height=state.dungeon.height, seed=seed, dungeon_level=new_level)
    state.dungeon = dungeon
    state.dungeon_level = new_level
    state.player.x, state.player.y = arrival(dungeon)
    _populate(state)
    state.messages = [message]
    refresh_fov(state)
    illuminate_room_at(dungeon, state.player.x, state.player.y)
    logger.info("Entered dungeon level %d (level seed %d)", new_level, seed)


def descend_stairs(state: GameState) -> bool:
    player = state.player
    if state.dungeon.tile_at(player.x, player.y) != TileType.STAIRS_DOWN:
        state.messages = ["You see no down staircase here"]
        return False
    new_level = state.dungeon_level + 1
    _change_level(state, new_level, lambda d: d.stairs_up, f"You descend to dungeon level {new_level}")
    return True


def ascend_stairs(state: GameState) -> bool:
    """Climb up; on level 1 the player escapes and the game ends."""
    player = state.player
    if state.dungeon.tile_at(player.x, player.y) != TileType.STAIRS_UP:
        state.messages = ["You see no up staircase here"]
        return False
    if state.dungeon_level <= 1:
        state.dead = True
        state.escaped = True
        state.cause_of_death = "escaped the dungeon"
        state.messages = ["You escape from the Dungeons of Doom!"]
        logger.info("Player escaped on turn %d with %d gold", state.turn, player.gold)
        return True
    new_level = state.dungeon_level - 1
    _change_level(state, new_level, lambda d: d.stairs_down, f"You ascend to dungeon level {new_level}")
    return True


def cheat_rank_up(state: GameState) -> bool:
    """Debug: promote one rank immediately. No-op at the top rank."""
    player = state.player
    new_level = min(max_rank(), player.xp_level + 1)
    if new_level <= player.xp_level:
        state.messages = ["You are already as mighty as you can get"]
        return False
    player.xp = TUNING.xp_thresholds[new_level]
    promote_player(player, player.xp_level, new_level)
    state.messages = [f"You have cheated your way to {player.rank}"]
    return True


def tick_status(state: GameState) -> None:
    status = state.player.status
    expiry = (
        ("paralysis", "You can move again"),
        ("confusion", "You feel less confused now"),
        ("blindness", "The veil of darkness lifts"),
        ("haste", "You feel yourself slowing down"),
    )
    for name, message in expiry:
        value = getattr(status, name)
        if value > 0:
            setattr(status, name, value - 1)
            if value - 1 == 0:
                state.messages.append(message)


def regen_hp(state: GameState) -> None:
    player = state.player
    if state.dead or player.hp >= player.max_hp:
        return
    if state.turn % regen_rate(player.xp_level) == 0:
        player.hp += 1
    if player.has_ring(RingEffect.REGENERATION):
        player.hp += 1
    player.hp = min(player.hp, player.max_hp)


def hunger_status(food: int) -> str:
    if food <= 0:
        return "Starving"
    if food <= TUNING.faint_at:
        return "Faint"
    if food <= TUNING.weak_at:
        return "Weak"
    if food <= TUNING.hungry_at:
        return "Hungry"
    return ""


def tick_hunger(state: GameState) -> None:
    """Digest one unit of food (every other turn with slow digestion), or starve."""
    if state.dead:
        return
    player = state.player
    if player.food <= 0:
        player.hp -= 1
        if player.hp <= 0 and state.cause_of_death is None:
            state.cause_of_death = "starvation"
        handle_death(state)
        return
    if player.has_ring(RingEffect.SLOW_DIGESTION) and state.turn % 2 == 1:
        return
    player.food -= 1
    if player.food == TUNING.hungry_at:
        state.messages.append("You are starting to get hungry")
    elif player.food == TUNING.weak_at:
        state.messages.append("You are starting to feel weak")
    elif player.food == TUNING.faint_at:
        state.messages.append("You feel faint from lack of food")
    elif player.food == 0:
        state.messages.append("You are starving to death!")


def end_turn(state: GameState) -> None:
    """Everything after the primary effect of a turn-using action, in order:
    purge dead monsters, advance the clock, tick status, recompute FOV, run
    the monsters, record death, regenerate, digest.
    """
    purge_dead(state)
    state.turn += 1
    tick_status(state)
    refresh_fov(state)
    step_monsters(state)
    handle_death(state)
    regen_hp(state)
    tick_hunger(state)


def pickup_gold(state: GameState, x: int, y: int) -> None:
    for i, pile in enumerate(state.gold_items):
        if (pile.x, pile.y) == (x, y):
            state.player.gold += pile.amount
            del state.gold_items[i]
            state.messages.append(f"You pick up {pile.amount} gold pieces")
            return


def pickup_item(state: GameState, x: int, y: int) -> None:
    for i, floor_item in enumerate(state.dungeon_items):
        if (floor_item.x, floor_item.y) == (x, y):
            state.player.inventory.append(floor_item.item)
            del state.dungeon_items[i]
            state.messages.append(f"You pick up {with_article(floor_item.item.name)}")
            return


def attack_monster(state: GameState, target) -> None:
    player = state.player
    target.provoked = True
    result = resolve_combat(player, target, state.rng)
    if not result.hit:
        state.messages.append(f"You miss the {target.name}")
        return
    state.messages.append(PLAYER_HIT_MSGS[result.tier](target.name))
    if target.hp <= 0:
        award_kill(state, target)


def move_player(state: GameState, dx: int, dy: int) -> bool:
    """Move, wait (0, 0) or bump-attack. Returns whether a turn was used.

    A blocked move changes nothing, messages included. A confused player
    stumbles in a random direction and always spends the turn; a paralysed
    one just loses it. Steps longer than one tile raise ValueError.
    """
    check_direction(dx, dy)
    if state.over:
        return False
    player = state.player

    if player.status.paralysis > 0:
        state.messages = []
        end_turn(state)
        return True

    confused = player.status.confusion > 0
    if confused:
        dx, dy = ALL_DIRECTIONS[rand_int(state.rng, len(ALL_DIRECTIONS))]

    nx, ny = player.x + dx, player.y + dy
    if not state.dungeon.in_bounds(nx, ny) or not is_walkable(state.dungeon.tile_at(nx, ny)):
        if not confused:
            return False
        state.messages = []
        end_turn(state)
        return True

    state.messages = []
    target = living_monster_at(state, nx, ny) if (dx, dy) != (0, 0) else None
    if target is not None:
        attack_monster(state, target)
    elif (dx, dy) != (0, 0):
        player.x, player.y = nx, ny
        if state.dungeon.tile_at(nx, ny) == TileType.DOOR:
            illuminate_room_at(state.dungeon, nx + dx, ny + dy)
        pickup_gold(state, nx, ny)
        pickup_item(state, nx, ny)
    end_turn(state)
    return True
