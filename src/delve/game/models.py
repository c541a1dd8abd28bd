from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional

from ..config import TUNING
from ..dungeon import Dungeon, Room, find_room_containing, in_bounds, is_walkable
from ..fov import compute_fov, effective_radius
from ..rng import Mulberry32, Rng, create_rng
from .items import Item, item_from_dict
from .monsters import Monster
from .player import Player, promote_player, xp_to_level

logger = logging.getLogger(__name__)


@dataclass
class GoldPile:
    x: int
    y: int
    amount: int

    def to_dict(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y, "amount": self.amount}

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "GoldPile":
        return GoldPile(int(data["x"]), int(data["y"]), int(data["amount"]))


@dataclass(eq=False)
class FloorItem:
    x: int
    y: int
    item: Item

    def to_dict(self) -> Dict[str, Any]:
        return {"x": self.x, "y": self.y, "item": self.item.to_dict()}

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "FloorItem":
        return FloorItem(int(data["x"]), int(data["y"]), item_from_dict(data["item"]))


@dataclass
class GameState:
    """Everything a running game owns; the unit of save/restore.

    messages holds the log of the most recent turn only. dead is also set on
    escape so that every terminal state can be detected with one flag;
    escaped tells the two apart.
    """

    dungeon: Dungeon
    player: Player
    rng: Rng
    player_name: str = "Adventurer"
    monsters: List[Monster] = field(default_factory=list)
    gold_items: List[GoldPile] = field(default_factory=list)
    dungeon_items: List[FloorItem] = field(default_factory=list)
    turn: int = 0
    dungeon_level: int = 1
    messages: List[str] = field(default_factory=list)
    dead: bool = False
    cause_of_death: Optional[str] = None
    escaped: bool = False
    seed: Optional[int] = None

    @property
    def over(self) -> bool:
        return self.dead or self.escaped

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dungeon": self.dungeon.to_dict(),
            "player": self.player.to_dict(),
            "player_name": self.player_name,
            "monsters": [m.to_dict() for m in self.monsters],
            "gold_items": [g.to_dict() for g in self.gold_items],
            "dungeon_items": [d.to_dict() for d in self.dungeon_items],
            "turn": self.turn,
            "dungeon_level": self.dungeon_level,
            "messages": list(self.messages),
            "dead": self.dead,
            "cause_of_death": self.cause_of_death,
            "escaped": self.escaped,
            "seed": self.seed,
            "rng_state": getattr(self.rng, "state", None),
        }

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "GameState":
        rng_state = data.get("rng_state")
        rng: Rng = Mulberry32(int(rng_state)) if rng_state is not None else create_rng(None)
        seed = data.get("seed")
        return GameState(
            dungeon=Dungeon.from_dict(data["dungeon"]),
            player=Player.from_dict(data["player"]),
            rng=rng,
            player_name=str(data.get("player_name", "Adventurer")),
            monsters=[Monster.from_dict(m) for m in data.get("monsters", [])],
            gold_items=[GoldPile.from_dict(g) for g in data.get("gold_items", [])],
            dungeon_items=[FloorItem.from_dict(d) for d in data.get("dungeon_items", [])],
            turn=int(data.get("turn", 0)),
            dungeon_level=int(data.get("dungeon_level", 1)),
            messages=[str(m) for m in data.get("messages", [])],
            dead=bool(data.get("dead", False)),
            cause_of_death=data.get("cause_of_death"),
            escaped=bool(data.get("escaped", False)),
            seed=None if seed is None else int(seed),
        )


def chebyshev(ax: int, ay: int, bx: int, by: int) -> int:
    return max(abs(ax - bx), abs(ay - by))


def living_monster_at(state: GameState, x: int, y: int, ignore: Optional[Monster] = None) -> Optional[Monster]:
    for m in state.monsters:
        if m is not ignore and m.hp > 0 and m.x == x and m.y == y:
            return m
    return None


def can_enter(state: GameState, x: int, y: int, ignore: Optional[Monster] = None) -> bool:
    """Walkable, not the player's tile and not held by another living monster."""
    if not is_walkable(state.dungeon.tile_at(x, y)):
        return False
    if (x, y) == (state.player.x, state.player.y):
        return False
    return living_monster_at(state, x, y, ignore) is None


def reveal_room(dungeon: Dungeon, room: Room) -> None:
    """Permanently light a room's interior and walls."""
    for dy in range(-1, room.height + 1):
        for dx in range(-1, room.width + 1):
            cx = room.x + dx
            cy = room.y + dy
            if not in_bounds(dungeon.map, cx, cy):
                continue
            cell = dungeon.map[cy][cx]
            cell.visible = True
            cell.visited = True
            cell.always_visible = True


def illuminate_room_at(dungeon: Dungeon, x: int, y: int) -> None:
    """Reveal the room containing (x, y) if it is an illuminated room."""
    room = find_room_containing(dungeon.rooms, x, y)
    if room is not None and room.illuminated:
        reveal_room(dungeon, room)


def refresh_fov(state: GameState) -> None:
    player = state.player
    compute_fov(state.dungeon.map, (player.x, player.y), effective_radius(player, TUNING.sight_radius))


def handle_death(state: GameState, cause: Optional[str] = None) -> None:
    """Record player death once; later calls are no-ops."""
    if state.player.hp > 0 or state.dead:
        return
    state.dead = True
    if state.cause_of_death is None:
        state.cause_of_death = cause
    state.messages.append("You have died")
    logger.info("Player died on level %d, turn %d: %s", state.dungeon_level, state.turn, state.cause_of_death)


def award_kill(state: GameState, monster: Monster) -> None:
    """Grant xp for a slain monster and promote if a new rank was reached."""
    player = state.player
    player.xp += monster.xp
    state.messages.append(f"You have defeated the {monster.name}")
    prev_level = player.xp_level
    new_level = xp_to_level(player.xp)
    if new_level > prev_level:
        promote_player(player, prev_level, new_level)
        state.messages.append(f"You have earned the rank of {player.rank}")


def purge_dead(state: GameState) -> None:
    state.monsters = [m for m in state.monsters if m.hp > 0]
