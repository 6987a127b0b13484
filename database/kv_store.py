import sqlite3
from typing import Optional, Protocol

from database.db_manager import DatabaseManager
from utils.errors import StoreError


class KeyValueStore(Protocol):
    """Durable local slot store: string values under fixed namespace keys."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryKeyValueStore:
    def __init__(self, initial: dict[str, str] | None = None):
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class SettingsKeyValueStore:
    """Key-value slots kept in the app_settings table of the local DB."""

    def __init__(self, db: DatabaseManager):
        self._db = db

    def get(self, key: str) -> Optional[str]:
        try:
            value = self._db.get_setting(key, default=None)
        except sqlite3.Error as exc:
            raise StoreError(f"Could not read setting {key!r}: {exc}") from exc
        return value

    def set(self, key: str, value: str) -> None:
        try:
            self._db.set_setting(key, value)
        except sqlite3.Error as exc:
            raise StoreError(f"Could not write setting {key!r}: {exc}") from exc
