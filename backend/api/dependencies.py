# backend/api/dependencies.py

import logging
from typing import Optional

from core.config import AppConfig
from core.history_store import HistoryStore, CredentialStore
from core.session_machine import SessionMachine
from core.storage import JsonFileStorage, StoragePort
from services.gemini_client import GeminiClient

logger = logging.getLogger(__name__)

# One local editing context per process
_machine: Optional[SessionMachine] = None


def build_session_machine(storage: Optional[StoragePort] = None, client=None) -> SessionMachine:
    storage = storage if storage is not None else JsonFileStorage(AppConfig.STORAGE_PATH)
    machine = SessionMachine(
        client=client or GeminiClient(),
        history=HistoryStore(storage),
        credentials=CredentialStore(storage),
    )
    if not machine.api_key and AppConfig.DEFAULT_API_KEY:
        logger.info("Using GEMINI_API_KEY from the environment until a key is saved")
        machine.api_key = AppConfig.DEFAULT_API_KEY
    return machine


def get_session_machine() -> SessionMachine:
    global _machine
    if _machine is None:
        _machine = build_session_machine()
    return _machine
