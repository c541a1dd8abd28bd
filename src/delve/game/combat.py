from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Protocol

from ..config import TUNING
from ..rng import Rng

logger = logging.getLogger(__name__)


class Attacker(Protocol):
    attack: int


class Defender(Protocol):
    hp: int
    defense: int


@dataclass(frozen=True)
class CombatResult:
    """Outcome of one attack roll.

    Attributes:
        hit: Whether the attack connected.
        damage: HP removed from the defender (0 on a miss, otherwise >= 1).
        tier: 0-3 severity bucket for flavour text, taken from the raw roll.
    """

    hit: bool
    damage: int = 0
    tier: int = 0


@dataclass(frozen=True)
class Strike:
    """Ad-hoc attacker for missiles and bolts that are not actors themselves."""

    attack: int
    hit_bonus: int = 0
    damage_bonus: int = 0


MISS = CombatResult(hit=False)


def miss_probability(hit_bonus: int = 0) -> float:
    return max(0.0, TUNING.miss_chance - hit_bonus * TUNING.hit_bonus_step)


def resolve_combat(attacker: Attacker, defender: Defender, rng: Rng) -> CombatResult:
    """Resolve one attack. Mutates defender.hp on a hit, nothing on a miss.

    Draws rng() once for the hit roll and, on a hit, once more for damage:

      raw    = 1 + floor(r * attack * 4)
      damage = max(1, raw - defense + damage_bonus)
      tier   = min(3, floor((raw - 1) / attack))

    hit_bonus and damage_bonus default to 0 for attackers without equipment.
    """
    hit_bonus = getattr(attacker, "hit_bonus", 0)
    damage_bonus = getattr(attacker, "damage_bonus", 0)

    if rng() < miss_probability(hit_bonus):
        return MISS

    attack = attacker.attack
    if attack > 0:
        raw = 1 + math.floor(rng() * attack * 4)
        tier = min(3, (raw - 1) // attack)
    else:
        rng()
        raw = 1
        tier = 0
    damage = max(1, raw - defender.defense + damage_bonus)
    defender.hp -= damage
    logger.debug("Hit for %d (raw %d, tier %d); defender hp now %d", damage, raw, tier, defender.hp)
    return CombatResult(hit=True, damage=damage, tier=tier)
