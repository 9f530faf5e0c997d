"""Supabase key-value state store."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from wellness_tracker.services.state import StateStore


@dataclass
class SupabaseStateStore(StateStore):
    """Supabase implementation backed by a ``key``/``value`` table."""

    client: Client
    table: str = "app_state"

    def get(self, key: str) -> str | None:
        """Return the stored value for key."""
        response = (
            self.client.table(self.table)
            .select("value")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0].get("value")

    def set(self, key: str, value: str) -> None:
        """Insert or replace the value for key."""
        self.client.table(self.table).upsert(
            {
                "key": key,
                "value": value,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="key",
        ).execute()

    def clear(self, key: str) -> None:
        """Delete the row for key."""
        self.client.table(self.table).delete().eq("key", key).execute()
