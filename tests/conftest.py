"""
Shared test fixtures and fakes.
"""

import asyncio
from typing import Optional

import pytest

from perspectivex.controller import ConversationController
from perspectivex.errors import GenerationError
from perspectivex.models import Message, Session
from perspectivex.persistence.archive import JsonArchivePersistence
from perspectivex.persistence.kv_store import InMemoryKeyValueStore
from perspectivex.prompts import DefaultPromptRouter
from perspectivex.session_store import SessionStore


def make_session(session_id: int, *texts: str) -> Session:
    """Alternate user/bot messages starting with the user."""
    messages = [
        Message.user(t) if i % 2 == 0 else Message.bot(t) for i, t in enumerate(texts)
    ]
    return Session(id=session_id, messages=messages)


class RecordingPersistence(JsonArchivePersistence):
    """Real JSON persistence over memory that remembers every save."""

    def __init__(self, initial: Optional[str] = None):
        kv = InMemoryKeyValueStore({"chatHistory": initial} if initial else None)
        super().__init__(kv)
        self.saves: list[list[Session]] = []

    def save(self, sessions):
        self.saves.append([s.copy() for s in sessions])
        super().save(sessions)


class FakeGenerationClient:
    """Returns a canned reply (or raises) and records every instruction."""

    def __init__(self, reply: str = "Hi!", error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.calls: list[str] = []

    async def generate(self, instruction: str) -> str:
        self.calls.append(instruction)
        if self.error is not None:
            raise self.error
        return self.reply


class BlockingGenerationClient(FakeGenerationClient):
    """Holds every call open until release() is called."""

    def __init__(self, reply: str = "Hi!"):
        super().__init__(reply=reply)
        self.started = asyncio.Event()
        self._release = asyncio.Event()

    def release(self) -> None:
        self._release.set()

    async def generate(self, instruction: str) -> str:
        self.calls.append(instruction)
        self.started.set()
        await self._release.wait()
        return self.reply


@pytest.fixture
def persistence():
    return RecordingPersistence()


@pytest.fixture
def store(persistence):
    return SessionStore(persistence=persistence)


@pytest.fixture
def router():
    return DefaultPromptRouter()


@pytest.fixture
def llm():
    return FakeGenerationClient()


@pytest.fixture
def failing_llm():
    return FakeGenerationClient(error=GenerationError("quota exceeded"))


@pytest.fixture
def controller(store, router, llm):
    return ConversationController(store, router, llm)
