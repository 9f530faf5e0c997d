"""Fail-soft persistence of tracker entities."""

import logging
from dataclasses import dataclass
from typing import Any, Protocol, TypeVar

from pydantic import TypeAdapter

PROFILE_KEY = "user-profile"
WEEKLY_LOG_KEY = "weekly-log"
METRICS_KEY = "user-metrics"
VIEW_KEY = "app-view"
TAB_KEY = "active-tab"

T = TypeVar("T")

_logger = logging.getLogger(__name__)


class StateStore(Protocol):
    """Durable key-value store of JSON strings."""

    def get(self, key: str) -> str | None:
        """Return the raw value stored under key, if present."""

    def set(self, key: str, value: str) -> None:
        """Store a raw value under key."""

    def clear(self, key: str) -> None:
        """Remove the value stored under key."""


@dataclass
class PersistentState:
    """Typed load/save over a state store that never raises to callers."""

    store: StateStore

    def load(self, key: str, type_: Any, default: T) -> T:
        """Return the stored value for key, or ``default`` if absent or unreadable."""
        try:
            raw = self.store.get(key)
        except Exception:
            _logger.exception("Error reading state key %s", key)
            return default
        if raw is None:
            return default
        try:
            return _adapter(type_).validate_json(raw)
        except ValueError:
            _logger.warning("Discarding unreadable state for key %s", key)
            return default

    def save(self, key: str, type_: Any, value: object) -> None:
        """Persist value under key; failures are logged and dropped."""
        try:
            payload = _adapter(type_).dump_json(value, by_alias=True)
            self.store.set(key, payload.decode("utf-8"))
        except Exception:
            _logger.exception("Error writing state key %s", key)

    def clear(self, key: str) -> None:
        """Remove key; failures are logged and dropped."""
        try:
            self.store.clear(key)
        except Exception:
            _logger.exception("Error clearing state key %s", key)


_ADAPTERS: dict[Any, TypeAdapter] = {}


def _adapter(type_: Any) -> TypeAdapter:
    adapter = _ADAPTERS.get(type_)
    if adapter is None:
        adapter = TypeAdapter(type_)
        _ADAPTERS[type_] = adapter
    return adapter
