"""
Abstractions for pluggable services. Inversion of control: the engine depends
on interfaces, not concrete services. Enables fakes in tests and future swaps.

Common protocols:
- GenerationClient.generate(instruction) -> text
- PromptRouter.route(raw_utterance) -> instruction
- KeyValueStore.get(key) / set(key, value)
- PersistenceAdapter.load() / save(sessions)
- AuthProvider / Navigator: the only two facts the engine consumes from the
  identity and navigation layers.

Testing: Use simple fake implementations to test the controller without network calls.
"""

from __future__ import annotations
from typing import Optional, Protocol, Sequence
from .models import Session


class GenerationClient(Protocol):
    async def generate(self, instruction: str) -> str: ...


class PromptRouter(Protocol):
    def route(self, raw_utterance: str) -> str: ...


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class PersistenceAdapter(Protocol):
    def load(self) -> list[Session]: ...

    def save(self, sessions: Sequence[Session]) -> None: ...


class AuthProvider(Protocol):
    def is_authenticated(self) -> bool: ...

    def sign_out(self) -> None: ...


class Navigator(Protocol):
    def leave_conversation(self) -> None: ...
