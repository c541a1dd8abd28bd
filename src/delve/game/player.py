from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from ..config import TUNING
from ..rng import Rng, rand_int
from .items import Armor, Item, Ring, RingEffect, Weapon, create_armor, create_food, create_weapon, item_from_dict

logger = logging.getLogger(__name__)

RING_SLOTS = 2


@dataclass
class StatusEffects:
    """Turn counters; an effect is active while its counter is above zero."""

    paralysis: int = 0
    confusion: int = 0
    blindness: int = 0
    haste: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "paralysis": self.paralysis,
            "confusion": self.confusion,
            "blindness": self.blindness,
            "haste": self.haste,
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "StatusEffects":
        return StatusEffects(
            paralysis=int(data.get("paralysis", 0)),
            confusion=int(data.get("confusion", 0)),
            blindness=int(data.get("blindness", 0)),
            haste=int(data.get("haste", 0)),
        )


@dataclass
class Player:
    """The adventurer.

    hit_bonus, damage_bonus, defense and the ring_* bonuses are derived from
    equipment by recompute_stats() and must never be edited by hand.
    max_attack is the strength that restore strength returns to.
    """

    x: int
    y: int
    hp: int
    max_hp: int
    attack: int
    max_attack: int
    base_defense: int
    defense: int = 0
    gold: int = 0
    xp: int = 0
    xp_level: int = 0
    rank: str = ""
    food: int = 0
    inventory: List[Item] = field(default_factory=list)
    equipped_weapon: Optional[Weapon] = None
    equipped_armor: Optional[Armor] = None
    equipped_rings: List[Optional[Ring]] = field(default_factory=lambda: [None] * RING_SLOTS)
    hit_bonus: int = 0
    damage_bonus: int = 0
    ring_defense_bonus: int = 0
    ring_hit_bonus: int = 0
    ring_damage_bonus: int = 0
    status: StatusEffects = field(default_factory=StatusEffects)

    @property
    def pos(self):
        return (self.x, self.y)

    def has_ring(self, effect: RingEffect) -> bool:
        return any(r is not None and r.effect == effect for r in self.equipped_rings)

    def is_equipped(self, item: Item) -> bool:
        return (
            item is self.equipped_weapon
            or item is self.equipped_armor
            or any(item is r for r in self.equipped_rings)
        )

    def index_of(self, item: Item) -> int:
        for i, it in enumerate(self.inventory):
            if it is item:
                return i
        return -1

    def remove_item(self, item: Item) -> None:
        """Take an item out of the inventory, unequipping it first if needed."""
        if item is self.equipped_weapon:
            self.equipped_weapon = None
        if item is self.equipped_armor:
            self.equipped_armor = None
        self.equipped_rings = [None if r is item else r for r in self.equipped_rings]
        idx = self.index_of(item)
        if idx >= 0:
            del self.inventory[idx]
        recompute_stats(self)

    def to_dict(self) -> Dict[str, Any]:
        def slot(item: Optional[Item]) -> Optional[int]:
            return None if item is None else self.index_of(item)

        return {
            "x": self.x,
            "y": self.y,
            "hp": self.hp,
            "max_hp": self.max_hp,
            "attack": self.attack,
            "max_attack": self.max_attack,
            "base_defense": self.base_defense,
            "defense": self.defense,
            "gold": self.gold,
            "xp": self.xp,
            "xp_level": self.xp_level,
            "rank": self.rank,
            "food": self.food,
            "inventory": [it.to_dict() for it in self.inventory],
            "equipped_weapon": slot(self.equipped_weapon),
            "equipped_armor": slot(self.equipped_armor),
            "equipped_rings": [slot(r) for r in self.equipped_rings],
            "hit_bonus": self.hit_bonus,
            "damage_bonus": self.damage_bonus,
            "ring_defense_bonus": self.ring_defense_bonus,
            "ring_hit_bonus": self.ring_hit_bonus,
            "ring_damage_bonus": self.ring_damage_bonus,
            "status": self.status.to_dict(),
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "Player":
        inventory = [item_from_dict(d) for d in data.get("inventory", [])]

        def equipped(idx: Optional[int]) -> Any:
            return None if idx is None else inventory[int(idx)]

        player = Player(
            x=int(data["x"]),
            y=int(data["y"]),
            hp=int(data["hp"]),
            max_hp=int(data["max_hp"]),
            attack=int(data["attack"]),
            max_attack=int(data.get("max_attack", data["attack"])),
            base_defense=int(data["base_defense"]),
            gold=int(data.get("gold", 0)),
            xp=int(data.get("xp", 0)),
            xp_level=int(data.get("xp_level", 0)),
            rank=str(data.get("rank", "")),
            food=int(data.get("food", 0)),
            inventory=inventory,
            equipped_weapon=equipped(data.get("equipped_weapon")),
            equipped_armor=equipped(data.get("equipped_armor")),
            equipped_rings=[equipped(i) for i in data.get("equipped_rings", [None] * RING_SLOTS)],
            status=StatusEffects.from_dict(data.get("status", {})),
        )
        recompute_stats(player)
        return player


def recompute_stats(player: Player) -> None:
    """Derive ring bonuses, defense, hit_bonus and damage_bonus from equipment."""
    ring_def = ring_hit = ring_dmg = 0
    for ring in player.equipped_rings:
        if ring is None:
            continue
        if ring.effect == RingEffect.PROTECTION:
            ring_def += 1
        elif ring.effect == RingEffect.INCREASE_DAMAGE:
            ring_dmg += 1
        elif ring.effect == RingEffect.DEXTERITY:
            ring_hit += 1
    player.ring_defense_bonus = ring_def
    player.ring_hit_bonus = ring_hit
    player.ring_damage_bonus = ring_dmg

    armor_ac = player.equipped_armor.ac if player.equipped_armor is not None else 0
    player.defense = player.base_defense + armor_ac + ring_def

    weapon = player.equipped_weapon
    player.hit_bonus = (weapon.hit_bonus if weapon is not None else 0) + ring_hit
    player.damage_bonus = (weapon.damage_bonus if weapon is not None else 0) + ring_dmg


def xp_to_level(xp: int) -> int:
    """Index of the highest rank whose xp threshold has been met."""
    level = 0
    for i, threshold in enumerate(TUNING.xp_thresholds):
        if xp >= threshold:
            level = i
    return level


def max_rank() -> int:
    return len(TUNING.ranks) - 1


def regen_rate(xp_level: int) -> int:
    return TUNING.regen_rates[min(xp_level, max_rank())]


def promote_player(player: Player, prev_level: int, new_level: int) -> None:
    """Raise rank, adding every skipped rank's max-HP gain and keeping the HP ratio."""
    ratio = player.hp / player.max_hp if player.max_hp > 0 else 1.0
    for lv in range(prev_level + 1, new_level + 1):
        player.max_hp += TUNING.hp_per_rank[lv]
    player.hp = max(1, round(ratio * player.max_hp))
    player.xp_level = new_level
    player.rank = TUNING.rank_titles[new_level]
    logger.info("Player promoted %d -> %d (%s)", prev_level, new_level, player.rank)


def demote_player(player: Player) -> bool:
    """Drop one rank, losing its max-HP gain. Returns False at the lowest rank."""
    if player.xp_level <= 0:
        player.xp = 0
        return False
    lost = TUNING.hp_per_rank[player.xp_level]
    player.xp_level -= 1
    player.xp = TUNING.xp_thresholds[player.xp_level]
    player.rank = TUNING.rank_titles[player.xp_level]
    player.max_hp = max(1, player.max_hp - lost)
    player.hp = min(player.hp, player.max_hp)
    return True


def starting_kit(rng: Rng) -> List[Item]:
    """+1/+1 sword, leather armor, +1/+1 short bow, 15-25 arrows, a food ration."""
    arrows = TUNING.arrows_min + rand_int(rng, TUNING.arrows_max - TUNING.arrows_min + 1)
    kit: List[Item] = [
        create_weapon("sword", 1, 1),
        create_armor("leather armor", 3),
        create_weapon("short bow", 1, 1),
    ]
    kit.extend(create_weapon("arrow") for _ in range(arrows))
    kit.append(create_food())
    return kit


def create_player(x: int, y: int, rng: Rng) -> Player:
    """New player at (x, y) wielding the sword and wearing the leather armor."""
    inventory = starting_kit(rng)
    player = Player(
        x=x,
        y=y,
        hp=TUNING.start_hp,
        max_hp=TUNING.start_hp,
        attack=TUNING.start_attack,
        max_attack=TUNING.start_attack,
        base_defense=TUNING.base_defense,
        rank=TUNING.rank_titles[0],
        food=TUNING.food_start,
        inventory=inventory,
        equipped_weapon=inventory[0],  # type: ignore[arg-type]
        equipped_armor=inventory[1],  # type: ignore[arg-type]
    )
    recompute_stats(player)
    return player
