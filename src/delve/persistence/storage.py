from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import List, Optional

from platformdirs import user_data_dir

from ..errors import SaveValidationError
from ..game.models import GameState
from .codec import decode_state, encode_state

logger = logging.getLogger(__name__)

APP_DIR_NAME = "delve"
ENV_SAVE_DIR = "DELVE_SAVE_DIR"

_SLOT_RE = re.compile(r"^[A-Za-z0-9_\-]+$")


def default_save_root() -> Path:
    """Platform data directory for saves; DELVE_SAVE_DIR overrides it."""
    override = os.getenv(ENV_SAVE_DIR)
    if override:
        return Path(override)
    return Path(user_data_dir(APP_DIR_NAME, appauthor=False))


def ensure_dir(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


class SaveStorage:
    """Named save slots stored as JSON files under one directory."""

    def __init__(self, root_dir: Optional[Path] = None) -> None:
        self.root_dir = ensure_dir(Path(root_dir) if root_dir is not None else default_save_root())

    def path_for(self, slot: str) -> Path:
        if not _SLOT_RE.match(slot):
            raise ValueError(f"Invalid save slot name: {slot!r}")
        return self.root_dir / f"{slot}.json"

    def save(self, slot: str, state: GameState) -> Path:
        path = self.path_for(slot)
        self._atomic_write(path, encode_state(state))
        logger.info("Saved game to %s (turn %d, level %d)", path, state.turn, state.dungeon_level)
        return path

    def load(self, slot: str) -> GameState:
        path = self.path_for(slot)
        try:
            with path.open("r", encoding="utf-8") as f:
                text = f.read()
        except FileNotFoundError as e:
            raise SaveValidationError(f"Save file not found: {path}") from e
        state = decode_state(text)
        logger.info("Loaded game from %s", path)
        return state

    def exists(self, slot: str) -> bool:
        return self.path_for(slot).exists()

    def delete(self, slot: str) -> bool:
        path = self.path_for(slot)
        if not path.exists():
            return False
        path.unlink()
        return True

    def slots(self) -> List[str]:
        return sorted(p.stem for p in self.root_dir.glob("*.json"))

    def _atomic_write(self, path: Path, text: str) -> None:
        """Write to path.tmp, fsync, then replace path in one rename."""
        tmp = path.with_suffix(path.suffix + ".tmp")
        ensure_dir(path.parent)
        with tmp.open("w", encoding="utf-8") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
