"""Potion, scroll, wand and missile effects.

Every function here consumes or spends the item, mutates the state and
appends its message(s). Validation that the item is usable at all happens in
delve.game.intents before these are called.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from ..config import TUNING
from ..dungeon import TileType, find_room_containing, in_bounds, is_walkable, walkable_tiles
from ..rng import rand_int
from .combat import Strike, resolve_combat
from .items import ITEM_TABLES, Potion, PotionEffect, Scroll, ScrollEffect, Wand, WandEffect, Weapon
from .models import (
    FloorItem,
    GameState,
    award_kill,
    can_enter,
    chebyshev,
    illuminate_room_at,
    living_monster_at,
    reveal_room,
)
from .monsters import Monster, create_monster, monsters_for_level
from .player import max_rank, promote_player, recompute_stats

logger = logging.getLogger(__name__)


def quaff_potion(state: GameState, potion: Potion) -> None:
    player = state.player
    rng = state.rng
    player.remove_item(potion)
    effect = potion.effect
    logger.debug("Quaff %s", effect.value)

    if effect == PotionEffect.HEALING:
        player.hp = min(player.max_hp, player.hp + 8 + rand_int(rng, 8))
        state.messages.append("You feel better")
    elif effect == PotionEffect.EXTRA_HEALING:
        player.hp = player.max_hp
        state.messages.append("You feel much better")
    elif effect == PotionEffect.POISON:
        player.hp -= 1 + rand_int(rng, 8)
        state.messages.append("You feel very sick")
        if player.hp <= 0 and state.cause_of_death is None:
            state.cause_of_death = "poison"
    elif effect == PotionEffect.GAIN_STRENGTH:
        player.attack += 1
        player.max_attack = max(player.max_attack, player.attack)
        state.messages.append("You feel stronger")
    elif effect == PotionEffect.RESTORE_STRENGTH:
        player.attack = max(player.attack, player.max_attack)
        state.messages.append("You feel yourself again")
    elif effect == PotionEffect.RAISE_LEVEL:
        new_level = min(max_rank(), player.xp_level + 1)
        if new_level > player.xp_level:
            player.xp = max(player.xp, TUNING.xp_thresholds[new_level])
            promote_player(player, player.xp_level, new_level)
            state.messages.append("You suddenly feel more skillful")
            state.messages.append(f"You have earned the rank of {player.rank}")
        else:
            state.messages.append("You feel more experienced, but it has no effect")
    elif effect == PotionEffect.CONFUSION:
        player.status.confusion += TUNING.potion_confusion
        state.messages.append("Wait, what's going on here? Huh? What? Who?")
    elif effect == PotionEffect.BLINDNESS:
        player.status.blindness += TUNING.potion_blindness
        state.messages.append("Oh, bummer! Everything is dark! Help!")
    elif effect == PotionEffect.HASTE_SELF:
        player.status.haste += TUNING.potion_haste
        state.messages.append("You feel yourself moving much faster")
    else:
        state.messages.append("Red Bull gives you wings? Nothing happens")


def teleport_player(state: GameState) -> bool:
    """Move the player to a random free floor or corridor tile other than the current one."""
    player = state.player
    dungeon = state.dungeon
    candidates = [
        (x, y)
        for x, y in walkable_tiles(dungeon)
        if dungeon.tile_at(x, y) in (TileType.FLOOR, TileType.CORRIDOR)
        and (x, y) != (player.x, player.y)
        and living_monster_at(state, x, y) is None
    ]
    if not candidates:
        return False
    player.x, player.y = candidates[rand_int(state.rng, len(candidates))]
    illuminate_room_at(state.dungeon, player.x, player.y)
    return True


def light_room(state: GameState) -> bool:
    """Permanently light the room the player stands in. False in a corridor."""
    room = find_room_containing(state.dungeon.rooms, state.player.x, state.player.y)
    if room is None:
        return False
    room.illuminated = True
    reveal_room(state.dungeon, room)
    return True


def create_monster_near(state: GameState) -> Optional[Monster]:
    """Spawn a level-appropriate monster on the nearest free ring (radius 1-3) around the player."""
    player = state.player
    eligible = monsters_for_level(state.dungeon_level)
    template = eligible[rand_int(state.rng, len(eligible))]
    for r in range(1, 4):
        for dy in range(-r, r + 1):
            for dx in range(-r, r + 1):
                if max(abs(dx), abs(dy)) != r:
                    continue
                mx, my = player.x + dx, player.y + dy
                if not in_bounds(state.dungeon.map, mx, my):
                    continue
                if can_enter(state, mx, my):
                    monster = create_monster(template, mx, my)
                    state.monsters.append(monster)
                    return monster
    return None


def _monsters_within(state: GameState, radius: int):
    px, py = state.player.x, state.player.y
    return [m for m in state.monsters if m.hp > 0 and chebyshev(px, py, m.x, m.y) <= radius]


def read_scroll(state: GameState, scroll: Scroll) -> None:
    player = state.player
    dungeon = state.dungeon
    player.remove_item(scroll)
    effect = scroll.effect
    logger.debug("Read %s", effect.value)

    if effect == ScrollEffect.ENCHANT_WEAPON:
        if player.equipped_weapon is None:
            state.messages.append("Nothing happens")
        else:
            player.equipped_weapon.hit_bonus += 1
            player.equipped_weapon.damage_bonus += 1
            recompute_stats(player)
            state.messages.append("Your weapon glows blue")
    elif effect == ScrollEffect.ENCHANT_ARMOR:
        if player.equipped_armor is None:
            state.messages.append("Nothing happens")
        else:
            player.equipped_armor.ac += 1
            recompute_stats(player)
            state.messages.append("Your armor glows blue")
    elif effect == ScrollEffect.MAGIC_MAPPING:
        for row in dungeon.map:
            for cell in row:
                cell.visited = True
        state.messages.append("The dungeon layout flashes before your eyes")
    elif effect == ScrollEffect.TELEPORTATION:
        teleport_player(state)
        player.status.confusion += TUNING.teleport_confusion
        state.messages.append("You feel dizzy and reappear elsewhere")
    elif effect == ScrollEffect.LIGHT:
        if light_room(state):
            state.messages.append("The room floods with light")
        else:
            state.messages.append("The corridor glows and then fades")
    elif effect == ScrollEffect.CREATE_MONSTER:
        if create_monster_near(state) is not None:
            state.messages.append("You hear something stir nearby")
        else:
            state.messages.append("Nothing happens")
    elif effect == ScrollEffect.SCARE_MONSTER:
        for m in _monsters_within(state, TUNING.effect_radius):
            m.status.scared = TUNING.monster_scared
        state.messages.append("The monsters seem frightened")
    elif effect == ScrollEffect.HOLD_MONSTER:
        for m in _monsters_within(state, TUNING.effect_radius):
            m.status.paralysis = TUNING.monster_held
        state.messages.append("The monsters freeze momentarily")
    elif effect == ScrollEffect.AGGRAVATE_MONSTERS:
        for m in state.monsters:
            if m.hp > 0:
                m.provoked = True
        state.messages.append("You hear the monsters stir")
    elif effect == ScrollEffect.SLEEP:
        player.status.paralysis += TUNING.scroll_sleep
        state.messages.append("You fall asleep")
    elif effect == ScrollEffect.IDENTIFY:
        state.messages.append("You feel knowledgeable")
    elif effect == ScrollEffect.REMOVE_CURSE:
        state.messages.append("You feel a sense of relief")
    elif effect == ScrollEffect.PROTECT_ARMOR:
        state.messages.append("Your armor glows briefly")
    else:
        state.messages.append("Nothing happens")


def trace(state: GameState, dx: int, dy: int, max_range: int) -> Tuple[Tuple[int, int], Optional[Monster]]:
    """Follow a straight line from the player.

    Returns the last open tile reached and the first living monster on the
    line, if any. Stops at the first tile that cannot be walked on.
    """
    x, y = state.player.x, state.player.y
    landing = (x, y)
    for _ in range(max_range):
        x += dx
        y += dy
        if not is_walkable(state.dungeon.tile_at(x, y)):
            break
        target = living_monster_at(state, x, y)
        if target is not None:
            return landing, target
        landing = (x, y)
    return landing, None


def zap_wand(state: GameState, wand: Wand, dx: int, dy: int) -> bool:
    """Spend a charge. Returns False (and does nothing else) when the wand is empty."""
    if wand.charges <= 0:
        state.messages.append("Nothing happens")
        return False
    wand.charges -= 1
    effect = wand.effect
    logger.debug("Zap %s toward (%d,%d); %d charges left", effect.value, dx, dy, wand.charges)

    if effect == WandEffect.LIGHT:
        if light_room(state):
            state.messages.append("The room floods with light")
        else:
            state.messages.append("The corridor glows and then fades")
        return True
    if effect == WandEffect.NOTHING:
        state.messages.append("You zap the wand but nothing seems to happen")
        return True

    _, target = trace(state, dx, dy, TUNING.bolt_range)
    if target is None:
        state.messages.append("The bolt hits nothing")
        return True
    target.provoked = True

    if effect == WandEffect.STRIKING:
        strike = Strike(attack=ITEM_TABLES.striking_attack, hit_bonus=ITEM_TABLES.striking_hit_bonus)
        result = resolve_combat(strike, target, state.rng)
        if not result.hit:
            state.messages.append(f"The bolt misses the {target.name}")
        else:
            state.messages.append(f"The bolt hits the {target.name}")
            if target.hp <= 0:
                award_kill(state, target)
    elif effect == WandEffect.SLEEP_MONSTER:
        target.status.paralysis = TUNING.monster_slept
        state.messages.append(f"The {target.name} falls asleep")
    elif effect == WandEffect.TELEPORT_AWAY:
        spots = [
            (x, y)
            for y, row in enumerate(state.dungeon.map)
            for x, cell in enumerate(row)
            if cell.type in (TileType.FLOOR, TileType.CORRIDOR) and can_enter(state, x, y, ignore=target)
        ]
        if spots:
            target.x, target.y = spots[rand_int(state.rng, len(spots))]
        state.messages.append(f"The {target.name} vanishes")
    return True


def missile_strike(state: GameState, missile: Weapon) -> Strike:
    """Attack profile of a thrown weapon; fired from its launcher it uses the player's attack."""
    player = state.player
    launcher = ITEM_TABLES.launcher_for(missile.base_name)
    wielded = player.equipped_weapon
    if launcher is not None and wielded is not None and wielded.base_name == launcher:
        return Strike(
            attack=player.attack,
            hit_bonus=missile.hit_bonus + wielded.hit_bonus + player.ring_hit_bonus,
            damage_bonus=missile.damage_bonus + wielded.damage_bonus + player.ring_damage_bonus,
        )
    return Strike(attack=1, hit_bonus=missile.hit_bonus, damage_bonus=missile.damage_bonus)


def throw_item(state: GameState, missile: Weapon, dx: int, dy: int) -> None:
    """Throw a weapon along (dx, dy). A missile that hits is used up; otherwise it lands."""
    strike = missile_strike(state, missile)
    state.player.remove_item(missile)
    landing, target = trace(state, dx, dy, TUNING.throw_range)
    if target is not None:
        target.provoked = True
        result = resolve_combat(strike, target, state.rng)
        if result.hit:
            state.messages.append(f"The {missile.base_name} hits the {target.name}")
            if target.hp <= 0:
                award_kill(state, target)
            return
        state.messages.append(f"The {missile.base_name} misses the {target.name}")
    else:
        state.messages.append(f"The {missile.base_name} falls to the ground")
    state.dungeon_items.append(FloorItem(landing[0], landing[1], missile))
