from .combat import CombatResult, Strike, resolve_combat
from .monsters import MONSTER_TABLE, Monster, MonsterTemplate, SpecialAttack, SpecialKind, create_monster, monsters_for_level
from .items import Armor, Food, Potion, PotionEffect, Ring, RingEffect, Scroll, ScrollEffect, Wand, WandEffect, Weapon
from .player import Player, StatusEffects, create_player, promote_player, recompute_stats, xp_to_level
from .models import FloorItem, GameState, GoldPile
from .ai import spawn_monsters, step_monsters
from .state import ascend_stairs, create_game, descend_stairs, end_turn, move_player
from .intents import (
    Ascend,
    Descend,
    Drop,
    Eat,
    Move,
    PutOnRing,
    Quaff,
    RankUp,
    Read,
    RemoveRing,
    TakeOff,
    Throw,
    Unwield,
    WAIT,
    Wear,
    Wield,
    Zap,
    apply_intent,
)
from .text import with_article

__all__ = [
    "CombatResult",
    "Strike",
    "resolve_combat",
    "MONSTER_TABLE",
    "Monster",
    "MonsterTemplate",
    "SpecialAttack",
    "SpecialKind",
    "create_monster",
    "monsters_for_level",
    "Armor",
    "Food",
    "Potion",
    "PotionEffect",
    "Ring",
    "RingEffect",
    "Scroll",
    "ScrollEffect",
    "Wand",
    "WandEffect",
    "Weapon",
    "Player",
    "StatusEffects",
    "create_player",
    "promote_player",
    "recompute_stats",
    "xp_to_level",
    "FloorItem",
    "GameState",
    "GoldPile",
    "spawn_monsters",
    "step_monsters",
    "ascend_stairs",
    "create_game",
    "descend_stairs",
    "end_turn",
    "move_player",
    "Ascend",
    "Descend",
    "Drop",
    "Eat",
    "Move",
    "PutOnRing",
    "Quaff",
    "RankUp",
    "Read",
    "RemoveRing",
    "TakeOff",
    "Throw",
    "Unwield",
    "WAIT",
    "Wear",
    "Wield",
    "Zap",
    "apply_intent",
    "with_article",
]
