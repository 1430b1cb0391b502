"""Where save blobs live: a JSON file on disk, or memory for tests."""

from __future__ import annotations

import copy
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class StateStore(Protocol):
    def load(self) -> dict[str, Any] | None: ...

    def save(self, blob: dict[str, Any]) -> None: ...

    def clear(self) -> None: ...


class JsonFileStore:
    """One JSON document on disk, replaced atomically on every save."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)

    def load(self) -> dict[str, Any] | None:
        """Return the saved blob, or None when nothing has been saved yet.

        Raises ``ValueError`` for a file that is not a JSON object.
        """
        if not self.path.exists():
            return None
        with self.path.open("r", encoding="utf-8") as fh:
            data = json.load(fh)
        if not isinstance(data, dict):
            raise ValueError(f"{self.path} does not contain a JSON object")
        return data

    def save(self, blob: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=f".{self.path.name}.", suffix=".tmp", dir=self.path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(blob, fh, indent=2)
            os.replace(tmp, self.path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
        logger.info("Deleted save file %s", self.path)


class MemoryStore:
    """Keeps a deep copy of the last saved blob."""

    def __init__(self, blob: dict[str, Any] | None = None) -> None:
        self._blob = copy.deepcopy(blob)
        self.saves = 0

    def load(self) -> dict[str, Any] | None:
        return copy.deepcopy(self._blob)

    def save(self, blob: dict[str, Any]) -> None:
        self._blob = copy.deepcopy(blob)
        self.saves += 1

    def clear(self) -> None:
        self._blob = None
