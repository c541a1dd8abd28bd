"""Save and restore of running games.

- Encoding/decoding of GameState to a versioned JSON document
- Named save slots with atomic writes under the platform data directory
"""

from .codec import SCHEMA_VERSION, decode_state, encode_state, migrate_data
from .storage import SaveStorage, default_save_root

__all__ = [
    "SCHEMA_VERSION",
    "decode_state",
    "encode_state",
    "migrate_data",
    "SaveStorage",
    "default_save_root",
]
