from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..config import read_data_file
from ..errors import DataValidationError
from .text import with_article

logger = logging.getLogger(__name__)

MAX_TIER = 5


class SpecialKind(str, Enum):
    NONE = "none"
    STEAL_GOLD = "steal_gold"
    CORRODE_ARMOR = "corrode_armor"
    FREEZE = "freeze"
    STEAL_ITEM = "steal_item"
    VENOM = "venom"
    DRAIN_LIFE = "drain_life"
    DRAIN_XP = "drain_xp"
    CONFUSE = "confuse"


THIEVES = frozenset({SpecialKind.STEAL_GOLD, SpecialKind.STEAL_ITEM})


@dataclass(frozen=True)
class SpecialAttack:
    """Side effect a monster applies when its attack lands.

    amount is kind-specific: armor points, turns of freeze or confusion,
    attack or max-HP points, ranks. Thieves ignore it.
    """

    kind: SpecialKind = SpecialKind.NONE
    amount: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "amount": self.amount}

    @staticmethod
    def from_dict(data: Optional[Mapping[str, Any]]) -> "SpecialAttack":
        if not data:
            return NO_SPECIAL
        return SpecialAttack(kind=SpecialKind(data["kind"]), amount=int(data.get("amount", 0)))


NO_SPECIAL = SpecialAttack()


@dataclass(frozen=True)
class MonsterTemplate:
    name: str
    glyph: str
    level: int
    hp: int
    attack: int
    defense: int
    xp: int
    aggression: int
    special: SpecialAttack = NO_SPECIAL

    @property
    def special_only(self) -> bool:
        """Monsters with no physical attack only ever apply their special."""
        return self.attack == 0


@dataclass
class MonsterStatus:
    paralysis: int = 0
    confusion: int = 0
    scared: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {"paralysis": self.paralysis, "confusion": self.confusion, "scared": self.scared}

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "MonsterStatus":
        return MonsterStatus(
            paralysis=int(data.get("paralysis", 0)),
            confusion=int(data.get("confusion", 0)),
            scared=int(data.get("scared", 0)),
        )


@dataclass(eq=False)
class Monster:
    """A live monster on the current level, cloned from a template."""

    name: str
    glyph: str
    x: int
    y: int
    hp: int
    max_hp: int
    attack: int
    defense: int
    xp: int
    aggression: int
    special: SpecialAttack = NO_SPECIAL
    provoked: bool = False
    status: MonsterStatus = field(default_factory=MonsterStatus)

    @property
    def alive(self) -> bool:
        return self.hp > 0

    @property
    def special_only(self) -> bool:
        return self.attack == 0

    @property
    def pos(self) -> Tuple[int, int]:
        return (self.x, self.y)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "glyph": self.glyph,
            "x": self.x,
            "y": self.y,
            "hp": self.hp,
            "max_hp": self.max_hp,
            "attack": self.attack,
            "defense": self.defense,
            "xp": self.xp,
            "aggression": self.aggression,
            "special": self.special.to_dict(),
            "provoked": self.provoked,
            "status": self.status.to_dict(),
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "Monster":
        return Monster(
            name=str(data["name"]),
            glyph=str(data["glyph"]),
            x=int(data["x"]),
            y=int(data["y"]),
            hp=int(data["hp"]),
            max_hp=int(data["max_hp"]),
            attack=int(data["attack"]),
            defense=int(data["defense"]),
            xp=int(data["xp"]),
            aggression=int(data["aggression"]),
            special=SpecialAttack.from_dict(data.get("special")),
            provoked=bool(data.get("provoked", False)),
            status=MonsterStatus.from_dict(data.get("status", {})),
        )


_REQUIRED = ("name", "glyph", "level", "hp", "attack", "defense", "xp", "aggression")


def _parse_template(raw: Mapping[str, Any]) -> MonsterTemplate:
    missing = [k for k in _REQUIRED if k not in raw]
    if missing:
        raise DataValidationError(f"Monster entry {raw!r} is missing {missing}")
    try:
        special = SpecialAttack.from_dict(raw.get("special"))
        template = MonsterTemplate(
            name=str(raw["name"]),
            glyph=str(raw["glyph"]),
            level=int(raw["level"]),
            hp=int(raw["hp"]),
            attack=int(raw["attack"]),
            defense=int(raw["defense"]),
            xp=int(raw["xp"]),
            aggression=int(raw["aggression"]),
            special=special,
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise DataValidationError(f"Malformed monster entry {raw!r}: {exc}") from exc
    if not 1 <= template.level <= MAX_TIER:
        raise DataValidationError(f"{template.name}: level must be 1..{MAX_TIER}")
    if template.aggression not in (0, 1, 2, 3):
        raise DataValidationError(f"{template.name}: aggression must be 0..3")
    if template.hp <= 0 or template.attack < 0 or template.defense < 0:
        raise DataValidationError(f"{template.name}: hp must be positive, attack/defense non-negative")
    if template.special_only and template.special.kind == SpecialKind.NONE:
        raise DataValidationError(f"{template.name}: a monster without attack needs a special")
    return template


def load_monster_table(data: Optional[Mapping[str, Any]] = None) -> Tuple[MonsterTemplate, ...]:
    """Parse and validate the monster table (packaged monsters.yaml by default)."""
    if data is None:
        data = read_data_file("monsters.yaml") or {}
    entries = data.get("monsters")
    if not isinstance(entries, list) or not entries:
        raise DataValidationError("Monster data must contain a non-empty 'monsters' list")
    table = tuple(_parse_template(e) for e in entries)
    names = [t.name for t in table]
    if len(set(names)) != len(names):
        raise DataValidationError("Monster names must be unique")
    logger.debug("Loaded %d monster templates", len(table))
    return table


MONSTER_TABLE: Tuple[MonsterTemplate, ...] = load_monster_table()


def get_template(name: str) -> MonsterTemplate:
    """Case-insensitive lookup by name."""
    for t in MONSTER_TABLE:
        if t.name.lower() == name.lower():
            return t
    raise KeyError(name)


def monsters_for_level(dungeon_level: int) -> List[MonsterTemplate]:
    """Templates eligible at a depth: tiers [max(1, t - 1), t] with t = clamp(level, 1, 5).

    DL1 gives tier 1 only; DL5 and deeper give tiers 4-5.
    """
    tier = min(MAX_TIER, max(1, dungeon_level))
    low = max(1, tier - 1)
    return [t for t in MONSTER_TABLE if low <= t.level <= tier]


def create_monster(template: MonsterTemplate, x: int, y: int) -> Monster:
    return Monster(
        name=template.name.lower(),
        glyph=template.glyph,
        x=x,
        y=y,
        hp=template.hp,
        max_hp=template.hp,
        attack=template.attack,
        defense=template.defense,
        xp=template.xp,
        aggression=template.aggression,
        special=template.special,
    )


__all__ = [
    "MONSTER_TABLE",
    "Monster",
    "MonsterStatus",
    "MonsterTemplate",
    "NO_SPECIAL",
    "SpecialAttack",
    "SpecialKind",
    "THIEVES",
    "create_monster",
    "get_template",
    "load_monster_table",
    "monsters_for_level",
    "with_article",
]
