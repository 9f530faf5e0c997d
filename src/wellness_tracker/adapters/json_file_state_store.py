"""JSON file state store, one file per key."""

import os
import re
import tempfile
from dataclasses import dataclass
from pathlib import Path

from wellness_tracker.domain.errors import PersistenceError
from wellness_tracker.services.state import StateStore

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


@dataclass
class JsonFileStateStore(StateStore):
    """Stores each key as ``<directory>/<key>.json``."""

    directory: Path

    @classmethod
    def create(cls, directory: str | Path) -> "JsonFileStateStore":
        """Create a store rooted at directory."""
        return cls(directory=Path(directory))

    def get(self, key: str) -> str | None:
        """Return the file content for key, if the file exists."""
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        """Atomically replace the file for key."""
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(
            prefix=".tmp_state_", dir=str(path.parent), text=True
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp, path)
        except OSError:
            Path(tmp).unlink(missing_ok=True)
            raise

    def clear(self, key: str) -> None:
        """Delete the file for key if present."""
        self._path(key).unlink(missing_ok=True)

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise PersistenceError(f"Invalid state key: {key!r}")
        return self.directory / f"{key}.json"
