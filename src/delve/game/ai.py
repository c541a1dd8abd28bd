"""Monster spawning and the per-turn monster step.

Aggression classes:

- 0 passive: ignores the player until provoked, then behaves like class 1.
- 1 medium: pursues within monster sight. A ring of stealth hides the player
  from unprovoked class-1 monsters.
- 2 roaming: wanders beyond pursuit sight, pursues inside it.
- 3 always active: pursues regardless of distance.

Status effects win over aggression: a paralysed monster loses its turn, a
scared one flees, a confused one may stumble about but never pursues.
"""

from __future__ import annotations

import logging
import math
from typing import List, Optional, Tuple

from ..config import TUNING
from ..dungeon import Dungeon
from ..rng import Rng, rand_int, shuffle
from .combat import miss_probability, resolve_combat
from .items import RingEffect
from .models import GameState, can_enter, chebyshev, purge_dead
from .monsters import Monster, SpecialKind, THIEVES, create_monster, monsters_for_level
from .player import demote_player, recompute_stats
from .text import with_article

logger = logging.getLogger(__name__)

FLEE_DIRECTIONS: Tuple[Tuple[int, int], ...] = (
    (-1, 0), (1, 0), (0, -1), (0, 1), (-1, -1), (-1, 1), (1, -1), (1, 1),
)
WANDER_DIRECTIONS: Tuple[Tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))


def spawn_monsters(dungeon: Dungeon, rng: Rng, dungeon_level: int = 1) -> List[Monster]:
    """One monster per room at its center, skipping the room holding the up stairs."""
    eligible = monsters_for_level(dungeon_level)
    monsters: List[Monster] = []
    for room in dungeon.rooms:
        cx, cy = room.center()
        if (cx, cy) == dungeon.stairs_up:
            continue
        template = eligible[rand_int(rng, len(eligible))]
        monsters.append(create_monster(template, cx, cy))
    return monsters


def _sign(v: int) -> int:
    return (v > 0) - (v < 0)


def _wander(state: GameState, m: Monster, rng: Rng) -> None:
    dirs = shuffle(rng, list(WANDER_DIRECTIONS))
    for dx, dy in dirs:
        tx, ty = m.x + dx, m.y + dy
        if can_enter(state, tx, ty, ignore=m):
            m.x, m.y = tx, ty
            return


def _flee(state: GameState, m: Monster) -> None:
    px, py = state.player.x, state.player.y
    best = chebyshev(px, py, m.x, m.y)
    best_step: Optional[Tuple[int, int]] = None
    for dx, dy in FLEE_DIRECTIONS:
        tx, ty = m.x + dx, m.y + dy
        if not can_enter(state, tx, ty, ignore=m):
            continue
        d = chebyshev(px, py, tx, ty)
        if d > best:
            best = d
            best_step = (tx, ty)
    if best_step is not None:
        m.x, m.y = best_step


def _pursue(state: GameState, m: Monster, rng: Rng) -> None:
    """Step toward the player, horizontal first, or attack when the step lands on them."""
    player = state.player
    dx = _sign(player.x - m.x)
    dy = _sign(player.y - m.y)
    steps = [(sx, sy) for sx, sy in ((dx, 0), (0, dy)) if sx != 0 or sy != 0]
    for sx, sy in steps:
        tx, ty = m.x + sx, m.y + sy
        if (tx, ty) == (player.x, player.y):
            monster_attack(state, m, rng)
            return
        if can_enter(state, tx, ty, ignore=m):
            m.x, m.y = tx, ty
            return


def monster_attack(state: GameState, m: Monster, rng: Rng) -> None:
    """Resolve one monster attack against the player.

    Thieves roll their own miss chance; monsters without a physical attack
    roll the standard miss chance and then only apply their special; everyone
    else goes through resolve_combat first.
    """
    player = state.player
    kind = m.special.kind

    if kind in THIEVES:
        if rng() < TUNING.thief_miss_chance:
            state.messages.append(f"The {m.name} misses")
            return
    elif m.special_only:
        if rng() < miss_probability(0):
            state.messages.append(f"The {m.name} misses")
            return
    else:
        result = resolve_combat(m, player, rng)
        if not result.hit:
            state.messages.append(f"The {m.name} misses")
            return
        state.messages.append(f"The {m.name} hits you")
        if player.hp <= 0 and state.cause_of_death is None:
            state.cause_of_death = with_article(m.name)
            return

    apply_special(state, m, rng)


def apply_special(state: GameState, m: Monster, rng: Rng) -> None:
    """Apply a landed monster's special effect. Covers every SpecialKind."""
    player = state.player
    kind = m.special.kind
    amount = m.special.amount

    if kind == SpecialKind.NONE:
        return
    if kind == SpecialKind.STEAL_GOLD:
        stolen = min(
            math.floor(player.gold * (TUNING.gold_steal_min_fraction + rng() * TUNING.gold_steal_spread)),
            TUNING.gold_steal_cap,
        )
        player.gold -= stolen
        if stolen > 0:
            state.messages.append(f"The {m.name} steals {stolen} gold and vanishes!")
        else:
            state.messages.append(f"The {m.name} finds nothing to steal and vanishes!")
        m.hp = 0
    elif kind == SpecialKind.STEAL_ITEM:
        if player.inventory:
            item = player.inventory[rand_int(rng, len(player.inventory))]
            player.remove_item(item)
            state.messages.append(f"The {m.name} stole {with_article(item.name)} and vanishes!")
        else:
            state.messages.append(f"The {m.name} finds nothing to steal and vanishes!")
        m.hp = 0
    elif kind == SpecialKind.CORRODE_ARMOR:
        armor = player.equipped_armor
        if armor is None or armor.ac <= 0:
            state.messages.append(f"The {m.name} touches you")
        elif player.has_ring(RingEffect.MAINTAIN_ARMOR):
            state.messages.append("The rust vanishes instantly")
        else:
            armor.ac = max(0, armor.ac - amount)
            recompute_stats(player)
            state.messages.append("Your armor appears to be weaker now. Oh my!")
    elif kind == SpecialKind.FREEZE:
        player.status.paralysis = max(player.status.paralysis, amount)
        state.messages.append(f"You are frozen by the {m.name}")
    elif kind == SpecialKind.VENOM:
        if player.has_ring(RingEffect.SUSTAIN_STRENGTH):
            state.messages.append("A bite momentarily weakens you")
        else:
            player.attack = max(1, player.attack - amount)
            state.messages.append("You feel a bite in your leg and now feel weaker")
    elif kind == SpecialKind.DRAIN_LIFE:
        player.max_hp = max(1, player.max_hp - amount)
        player.hp = min(player.hp, player.max_hp)
        state.messages.append("You feel your life force draining away")
    elif kind == SpecialKind.DRAIN_XP:
        if demote_player(player):
            state.messages.append(f"You feel a chill; you are now a mere {player.rank}")
        else:
            state.messages.append("You feel a sudden chill")
    elif kind == SpecialKind.CONFUSE:
        player.status.confusion = max(player.status.confusion, amount)
        state.messages.append(f"The {m.name}'s gaze has confused you")
    else:
        raise ValueError(f"Unhandled special attack kind: {kind!r}")


def step_monsters(state: GameState, rng: Optional[Rng] = None) -> None:
    """Advance every living monster by one action, then drop the dead.

    A monster killed mid-pass stays in the list until the pass ends but no
    longer blocks movement; occupancy checks only consider living monsters.
    """
    if rng is None:
        rng = state.rng
    player = state.player
    if player.status.haste > 0 and state.turn % 2 == 1:
        return

    if player.has_ring(RingEffect.AGGRAVATE_MONSTER):
        for m in state.monsters:
            if m.hp > 0:
                m.provoked = True
    stealth = player.has_ring(RingEffect.STEALTH)

    for m in state.monsters:
        if m.hp <= 0:
            continue
        se = m.status
        if se.paralysis > 0:
            se.paralysis -= 1
            continue
        if se.scared > 0:
            se.scared -= 1
            _flee(state, m)
            continue
        if se.confusion > 0:
            se.confusion -= 1
            if rng() >= 0.5:
                _wander(state, m, rng)
            continue

        if m.aggression == 0 and not m.provoked:
            continue
        if stealth and not m.provoked and m.aggression == 1:
            continue
        dist = chebyshev(player.x, player.y, m.x, m.y)
        if m.aggression != 3 and dist > TUNING.monster_sight:
            continue
        if m.aggression == 2 and dist > TUNING.pursuit_sight:
            _wander(state, m, rng)
        else:
            _pursue(state, m, rng)

    purge_dead(state)
