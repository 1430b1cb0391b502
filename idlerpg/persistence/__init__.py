"""Save-game persistence: stores, schema and migration."""

from idlerpg.persistence.schema import CURRENT_VERSION, SaveFile, migrate_blob, state_from_blob, state_to_blob
from idlerpg.persistence.store import JsonFileStore, MemoryStore, StateStore

__all__ = [
    "CURRENT_VERSION",
    "JsonFileStore",
    "MemoryStore",
    "SaveFile",
    "StateStore",
    "migrate_blob",
    "state_from_blob",
    "state_to_blob",
]
