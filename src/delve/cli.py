from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import List, Optional

from .config import TUNING
from .dungeon import generate
from .game import GameState, Move, apply_intent, create_game
from .game.state import ALL_DIRECTIONS, hunger_status
from .logging_config import configure_logging
from .persistence import SaveStorage
from .rng import Mulberry32, derive_seed, rand_int

logger = logging.getLogger(__name__)

# Salt for the simulated player's own choices, kept apart from the game's stream.
DRIVER_SALT = 0x5EED


def _cmd_map(args: argparse.Namespace) -> int:
    dungeon = generate(width=args.width, height=args.height, seed=args.seed, dungeon_level=args.level)
    if args.json:
        print(json.dumps(dungeon.to_dict(), indent=2))
    else:
        print("\n".join(dungeon.render_ascii()))
    return 0


def status_line(state: GameState) -> str:
    player = state.player
    parts = [
        f"Level: {state.dungeon_level}",
        f"Gold: {player.gold}",
        f"Hp: {player.hp}({player.max_hp})",
        f"Str: {player.attack}({player.max_attack})",
        f"Arm: {player.defense}",
        f"Exp: {player.xp_level + 1}/{player.xp}",
        f"Turn: {state.turn}",
    ]
    hunger = hunger_status(player.food)
    if hunger:
        parts.append(hunger)
    return "  ".join(parts)


def _cmd_simulate(args: argparse.Namespace) -> int:
    state = create_game(seed=args.seed, player_name=args.name)
    for line in state.messages:
        print(line)
    driver = Mulberry32(derive_seed(state.seed or 0, DRIVER_SALT))
    for _ in range(args.turns):
        if state.over:
            break
        dx, dy = ALL_DIRECTIONS[rand_int(driver, len(ALL_DIRECTIONS))]
        if apply_intent(state, Move(dx, dy)):
            for line in state.messages:
                print(f"[{state.turn}] {line}")

    print(status_line(state))
    if state.escaped:
        print(f"{state.player_name} escaped the dungeon with {state.player.gold} gold")
    elif state.dead:
        print(f"{state.player_name} was killed by {state.cause_of_death} on level {state.dungeon_level}")

    if args.save:
        storage = SaveStorage(args.save_dir)
        path = storage.save(args.save, state)
        print(f"Saved to {path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="delve", description="Delve dungeon-crawl engine tools")
    p.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v, -vv)")
    sub = p.add_subparsers(dest="cmd", required=True)

    m = sub.add_parser("map", help="Generate a dungeon level and print it")
    m.add_argument("--seed", type=int, default=None, help="Generation seed (random when omitted)")
    m.add_argument("--level", type=int, default=1, help="Dungeon level, controls room lighting")
    m.add_argument("--width", type=int, default=TUNING.width)
    m.add_argument("--height", type=int, default=TUNING.height)
    m.add_argument("--json", action="store_true", help="Print the level as JSON instead of ASCII")
    m.set_defaults(func=_cmd_map)

    s = sub.add_parser("simulate", help="Play a game headlessly with random moves")
    s.add_argument("--seed", type=int, default=None, help="Game seed (random when omitted)")
    s.add_argument("--turns", type=int, default=200, help="Maximum number of intents to issue")
    s.add_argument("--name", default="Adventurer", help="Player name")
    s.add_argument("--save", default=None, metavar="SLOT", help="Save the final state under this slot name")
    s.add_argument("--save-dir", type=Path, default=None, help="Directory for save slots")
    s.set_defaults(func=_cmd_simulate)

    return p


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose >= 2:
        level = logging.DEBUG
    elif args.verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    configure_logging(default_level=level)
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
