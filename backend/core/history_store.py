# backend/core/history_store.py

import json
import logging
from typing import List, Optional

from pydantic import TypeAdapter, ValidationError

from core.config import AppConfig
from core.storage import StoragePort
from models.session_models import HistoryEntry

logger = logging.getLogger(__name__)

_HISTORY_ADAPTER = TypeAdapter(List[HistoryEntry])


def serialize_history(entries: List[HistoryEntry]) -> str:
    return _HISTORY_ADAPTER.dump_json(entries).decode("utf-8")


def deserialize_history(raw: str) -> List[HistoryEntry]:
    return _HISTORY_ADAPTER.validate_json(raw)


class HistoryStore:
    """
    Newest-first log of generation sessions. It is the only writer of the
    history key; every mutation is written straight through to storage.
    """

    def __init__(self, storage: StoragePort, key: str = AppConfig.HISTORY_KEY):
        self.storage = storage
        self.key = key
        self._entries: List[HistoryEntry] = self._load()

    def _load(self) -> List[HistoryEntry]:
        raw = self.storage.get(self.key)
        if not raw:
            return []
        try:
            return deserialize_history(raw)
        except (ValidationError, json.JSONDecodeError, ValueError) as e:
            logger.error(f"Failed to parse stored history, starting empty: {e}")
            return []

    def _persist(self) -> None:
        try:
            self.storage.set(self.key, serialize_history(self._entries))
        except OSError as e:
            logger.error(f"Failed to persist history: {e}")

    def entries(self) -> List[HistoryEntry]:
        return list(self._entries)

    def get(self, entry_id: str) -> Optional[HistoryEntry]:
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def add(self, entry: HistoryEntry) -> HistoryEntry:
        self._entries.insert(0, entry)
        self._persist()
        return entry

    def update_final_result(self, entry_id: str, final_result: str) -> bool:
        """Returns False (and changes nothing) when the entry no longer exists."""
        for index, entry in enumerate(self._entries):
            if entry.id == entry_id:
                self._entries[index] = entry.model_copy(update={"final_result": final_result})
                self._persist()
                return True
        return False

    def delete(self, entry_id: str) -> bool:
        remaining = [e for e in self._entries if e.id != entry_id]
        if len(remaining) == len(self._entries):
            return False
        self._entries = remaining
        self._persist()
        return True


class CredentialStore:
    """Raw API key string kept under its own storage key."""

    def __init__(self, storage: StoragePort, key: str = AppConfig.API_KEY_KEY):
        self.storage = storage
        self.key = key

    def load(self) -> str:
        return self.storage.get(self.key) or ""

    def save(self, api_key: str) -> None:
        try:
            if api_key:
                self.storage.set(self.key, api_key)
            else:
                self.storage.remove(self.key)
        except OSError as e:
            logger.error(f"Failed to persist API key: {e}")
