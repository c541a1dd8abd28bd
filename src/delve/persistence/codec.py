from __future__ import annotations

import json
from typing import Any, Dict

from ..errors import SaveValidationError
from ..game.models import GameState

SCHEMA_VERSION = 1


def encode_state(state: GameState) -> str:
    """Encode a GameState to a pretty-printed JSON string."""
    data = state.to_dict()
    data["schema_version"] = SCHEMA_VERSION
    return json.dumps(data, ensure_ascii=False, sort_keys=True, indent=2)


def decode_state(text: str) -> GameState:
    """Decode JSON text into a GameState with version validation and migration hooks."""
    try:
        data: Dict[str, Any] = json.loads(text)
    except json.JSONDecodeError as e:
        raise SaveValidationError(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise SaveValidationError("Save data must be a JSON object")

    version = int(data.get("schema_version", SCHEMA_VERSION))
    if version != SCHEMA_VERSION:
        data = migrate_data(data, from_version=version, to_version=SCHEMA_VERSION)

    try:
        return GameState.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise SaveValidationError(f"Malformed save data: {e}") from e


def migrate_data(data: Dict[str, Any], from_version: int, to_version: int) -> Dict[str, Any]:
    """Migrate data between schema versions.

    Only version 1 exists so far; older data is stamped forward unchanged.
    """
    if from_version == to_version:
        return data

    if from_version > to_version:
        raise SaveValidationError(
            f"Save schema version {from_version} is newer than supported {to_version}."
        )

    data["schema_version"] = to_version
    return data
