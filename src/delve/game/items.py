from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple, Type, TypeVar, Union

from ..config import TUNING, read_data_file
from ..errors import DataValidationError
from ..rng import Rng, choice, rand_int, weighted_choice
from .text import with_article

logger = logging.getLogger(__name__)


class ItemKind(str, Enum):
    WEAPON = "weapon"
    ARMOR = "armor"
    FOOD = "food"
    POTION = "potion"
    SCROLL = "scroll"
    RING = "ring"
    WAND = "wand"


# Effect values double as the display suffix: "potion of <value>".


class PotionEffect(str, Enum):
    HEALING = "healing"
    EXTRA_HEALING = "extra healing"
    POISON = "poison"
    GAIN_STRENGTH = "gain strength"
    RESTORE_STRENGTH = "restore strength"
    RAISE_LEVEL = "raise level"
    CONFUSION = "confusion"
    BLINDNESS = "blindness"
    HASTE_SELF = "haste self"
    SEE_INVISIBLE = "see invisible"


class ScrollEffect(str, Enum):
    ENCHANT_WEAPON = "enchant weapon"
    ENCHANT_ARMOR = "enchant armor"
    MAGIC_MAPPING = "magic mapping"
    TELEPORTATION = "teleportation"
    LIGHT = "light"
    CREATE_MONSTER = "create monster"
    IDENTIFY = "identify"
    SCARE_MONSTER = "scare monster"
    HOLD_MONSTER = "hold monster"
    AGGRAVATE_MONSTERS = "aggravate monsters"
    REMOVE_CURSE = "remove curse"
    PROTECT_ARMOR = "protect armor"
    SLEEP = "sleep"


class RingEffect(str, Enum):
    PROTECTION = "protection"
    INCREASE_DAMAGE = "increase damage"
    DEXTERITY = "dexterity"
    REGENERATION = "regeneration"
    SLOW_DIGESTION = "slow digestion"
    STEALTH = "stealth"
    AGGRAVATE_MONSTER = "aggravate monster"
    MAINTAIN_ARMOR = "maintain armor"
    SUSTAIN_STRENGTH = "sustain strength"
    SEARCHING = "searching"
    ADORNMENT = "adornment"


class WandEffect(str, Enum):
    STRIKING = "striking"
    SLEEP_MONSTER = "sleep monster"
    TELEPORT_AWAY = "teleport away"
    LIGHT = "light"
    NOTHING = "nothing"


@dataclass(eq=False)
class Weapon:
    """Melee weapon or missile. Enchantment raises both bonuses in place."""

    base_name: str
    hit_bonus: int = 0
    damage_bonus: int = 0
    kind: ClassVar[ItemKind] = ItemKind.WEAPON

    @property
    def name(self) -> str:
        if self.hit_bonus == 0 and self.damage_bonus == 0:
            return self.base_name
        return f"{self.hit_bonus:+d}/{self.damage_bonus:+d} {self.base_name}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "base_name": self.base_name,
            "hit_bonus": self.hit_bonus,
            "damage_bonus": self.damage_bonus,
        }


@dataclass(eq=False)
class Armor:
    base_name: str
    ac: int
    kind: ClassVar[ItemKind] = ItemKind.ARMOR

    @property
    def name(self) -> str:
        return self.base_name

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "base_name": self.base_name, "ac": self.ac}


@dataclass(eq=False)
class Food:
    base_name: str = "food ration"
    kind: ClassVar[ItemKind] = ItemKind.FOOD

    @property
    def name(self) -> str:
        return self.base_name

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "base_name": self.base_name}


@dataclass(eq=False)
class Potion:
    effect: PotionEffect
    kind: ClassVar[ItemKind] = ItemKind.POTION

    @property
    def name(self) -> str:
        return f"potion of {self.effect.value}"

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "effect": self.effect.value}


@dataclass(eq=False)
class Scroll:
    effect: ScrollEffect
    kind: ClassVar[ItemKind] = ItemKind.SCROLL

    @property
    def name(self) -> str:
        return f"scroll of {self.effect.value}"

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "effect": self.effect.value}


@dataclass(eq=False)
class Ring:
    effect: RingEffect
    kind: ClassVar[ItemKind] = ItemKind.RING

    @property
    def name(self) -> str:
        return f"ring of {self.effect.value}"

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "effect": self.effect.value}


@dataclass(eq=False)
class Wand:
    effect: WandEffect
    charges: int = 0
    kind: ClassVar[ItemKind] = ItemKind.WAND

    @property
    def name(self) -> str:
        return f"wand of {self.effect.value}"

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "effect": self.effect.value, "charges": self.charges}


Item = Union[Weapon, Armor, Food, Potion, Scroll, Ring, Wand]

E = TypeVar("E", bound=Enum)


def item_from_dict(data: Mapping[str, Any]) -> Item:
    kind = ItemKind(data["kind"])
    if kind == ItemKind.WEAPON:
        return Weapon(str(data["base_name"]), int(data.get("hit_bonus", 0)), int(data.get("damage_bonus", 0)))
    if kind == ItemKind.ARMOR:
        return Armor(str(data["base_name"]), int(data["ac"]))
    if kind == ItemKind.FOOD:
        return Food(str(data.get("base_name", "food ration")))
    if kind == ItemKind.POTION:
        return Potion(PotionEffect(data["effect"]))
    if kind == ItemKind.SCROLL:
        return Scroll(ScrollEffect(data["effect"]))
    if kind == ItemKind.RING:
        return Ring(RingEffect(data["effect"]))
    return Wand(WandEffect(data["effect"]), int(data.get("charges", 0)))


def create_weapon(base_name: str, hit_bonus: int = 0, damage_bonus: int = 0) -> Weapon:
    return Weapon(base_name, hit_bonus, damage_bonus)


def create_armor(base_name: str, ac: Optional[int] = None) -> Armor:
    """Armor by name; ac defaults to the table value for that name."""
    if ac is None:
        ac = ITEM_TABLES.armor[base_name]
    return Armor(base_name, ac)


def create_food(base_name: str = "food ration") -> Food:
    return Food(base_name)


@dataclass(frozen=True)
class ItemTables:
    kind_weights: Tuple[Tuple[ItemKind, float], ...]
    weapons: Tuple[str, ...]
    ammunition: Dict[str, str]
    armor: Dict[str, int]
    potions: Tuple[PotionEffect, ...]
    scrolls: Tuple[ScrollEffect, ...]
    rings: Tuple[RingEffect, ...]
    wands: Tuple[WandEffect, ...]
    wand_charges: Tuple[int, int]
    striking_attack: int
    striking_hit_bonus: int

    def launcher_for(self, missile: str) -> Optional[str]:
        return self.ammunition.get(missile)


def _effects(raw: Any, enum_cls: Type[E], section: str) -> Tuple[E, ...]:
    if not isinstance(raw, list) or not raw:
        raise DataValidationError(f"items.{section} must be a non-empty list")
    try:
        return tuple(enum_cls(v) for v in raw)
    except ValueError as exc:
        raise DataValidationError(f"items.{section}: {exc}") from exc


def load_item_tables(data: Optional[Mapping[str, Any]] = None) -> ItemTables:
    """Parse and validate item tables (packaged items.yaml by default)."""
    if data is None:
        data = read_data_file("items.yaml") or {}
    try:
        weights = tuple((ItemKind(k), float(w)) for k, w in dict(data["kind_weights"]).items())
        armor = {str(k): int(v) for k, v in dict(data["armor"]).items()}
        low, high = (int(v) for v in data["wand_charges"])
        striking = dict(data["striking"])
        tables = ItemTables(
            kind_weights=weights,
            weapons=tuple(str(w) for w in data["weapons"]),
            ammunition={str(k): str(v) for k, v in dict(data.get("ammunition") or {}).items()},
            armor=armor,
            potions=_effects(data["potions"], PotionEffect, "potions"),
            scrolls=_effects(data["scrolls"], ScrollEffect, "scrolls"),
            rings=_effects(data["rings"], RingEffect, "rings"),
            wands=_effects(data["wands"], WandEffect, "wands"),
            wand_charges=(low, high),
            striking_attack=int(striking["attack"]),
            striking_hit_bonus=int(striking.get("hit_bonus", 0)),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise DataValidationError(f"Malformed item tables: {exc}") from exc
    if any(w < 0 for _, w in tables.kind_weights) or not any(w > 0 for _, w in tables.kind_weights):
        raise DataValidationError("items.kind_weights must be non-negative with at least one positive")
    if not tables.weapons or not tables.armor:
        raise DataValidationError("items.weapons and items.armor must not be empty")
    if low < 1 or high < low:
        raise DataValidationError("items.wand_charges must be [low, high] with 1 <= low <= high")
    return tables


ITEM_TABLES = load_item_tables()


def generate_item_of_kind(kind: ItemKind, rng: Rng, tables: ItemTables = ITEM_TABLES) -> Item:
    if kind == ItemKind.FOOD:
        return Food()
    if kind == ItemKind.WEAPON:
        return Weapon(choice(rng, tables.weapons))
    if kind == ItemKind.ARMOR:
        names: List[str] = sorted(tables.armor)
        name = choice(rng, names)
        return Armor(name, tables.armor[name])
    if kind == ItemKind.POTION:
        return Potion(choice(rng, tables.potions))
    if kind == ItemKind.SCROLL:
        return Scroll(choice(rng, tables.scrolls))
    if kind == ItemKind.RING:
        return Ring(choice(rng, tables.rings))
    low, high = tables.wand_charges
    effect = choice(rng, tables.wands)
    return Wand(effect, low + rand_int(rng, high - low + 1))


def generate_dungeon_item(rng: Rng, chance: Optional[float] = None, tables: ItemTables = ITEM_TABLES) -> Optional[Item]:
    """Roll for a floor item. Returns None when the room gets nothing."""
    if chance is None:
        chance = TUNING.item_chance
    if rng() >= chance:
        return None
    kind = weighted_choice(rng, tables.kind_weights)
    return generate_item_of_kind(kind, rng, tables)


__all__ = [
    "Armor",
    "Food",
    "ITEM_TABLES",
    "Item",
    "ItemKind",
    "ItemTables",
    "Potion",
    "PotionEffect",
    "Ring",
    "RingEffect",
    "Scroll",
    "ScrollEffect",
    "Wand",
    "WandEffect",
    "Weapon",
    "create_armor",
    "create_food",
    "create_weapon",
    "generate_dungeon_item",
    "generate_item_of_kind",
    "item_from_dict",
    "load_item_tables",
    "with_article",
]
