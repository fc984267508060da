import asyncio

import pytest

from core.history_store import HistoryStore, CredentialStore
from core.session_machine import SessionMachine
from core.storage import InMemoryStorage
from services.gemini_client import GenerationServiceError

SUPER_PROMPT = (
    "[PERSONA]\nSenior sales coach.\n\n"
    "[CONTEXT]\nSmall business software.\n\n"
    "[TASKS]\n1. Open. 2. Qualify. 3. Close.\n\n"
    "[CONSTRAINTS]\nUnder 300 words.\n\n"
    "[OUTPUT FORMAT]\nMarkdown script."
)


class FakeClient:
    """Stands in for GeminiClient. Records calls and can be paused or made to fail."""

    def __init__(self, prompt_text=SUPER_PROMPT, result_text="Hello, this is Sam from Acme...", fail=False):
        self.prompt_text = prompt_text
        self.result_text = result_text
        self.fail = fail
        self.gate = None
        self.generate_calls = []
        self.execute_calls = []

    async def generate_super_prompt(self, api_key, idea, style, creativity, attachments):
        self.generate_calls.append(
            {"api_key": api_key, "idea": idea, "style": style, "creativity": creativity, "attachments": attachments}
        )
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise GenerationServiceError("Gemini returned 403: PERMISSION_DENIED")
        return self.prompt_text

    async def execute_prompt(self, api_key, super_prompt):
        self.execute_calls.append({"api_key": api_key, "super_prompt": super_prompt})
        if self.gate is not None:
            await self.gate.wait()
        if self.fail:
            raise GenerationServiceError("Gemini returned 429: RESOURCE_EXHAUSTED")
        return self.result_text


class FakeUpload:
    """Quacks like fastapi.UploadFile, with an optional read delay."""

    def __init__(self, filename, content_type, data=b"\x89PNG fake", delay=0.0):
        self.filename = filename
        self.content_type = content_type
        self.data = data
        self.delay = delay
        self.read_count = 0

    async def read(self):
        self.read_count += 1
        await asyncio.sleep(self.delay)
        return self.data


class ReadOnlyStorage(InMemoryStorage):
    """Every write fails, like a read-only disk."""

    def set(self, key, value):
        raise OSError("read-only file system")

    def remove(self, key):
        raise OSError("read-only file system")


@pytest.fixture
def storage():
    return InMemoryStorage()


@pytest.fixture
def fake_client():
    return FakeClient()


@pytest.fixture
def machine(storage, fake_client):
    machine = SessionMachine(
        client=fake_client,
        history=HistoryStore(storage),
        credentials=CredentialStore(storage),
    )
    machine.set_api_key("test-key")
    return machine
