"""
Canonical data shapes, shared truth for typing between layers.

Typical contents:
- Role / Message (one conversation turn).
- Session (ordered transcript, tagged with a store-assigned id).
- ViewState (which session is on screen).
- GenerationSettings (model, temperature, max_tokens).

Testing: Trivial; mostly types.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional
from enum import Enum


class Role(str, Enum):
    USER = "user"
    BOT = "bot"


class ViewKind(str, Enum):
    NONE = "none"
    ACTIVE = "active"
    ARCHIVED = "archived"


class SubmitState(str, Enum):
    IDLE = "Idle"
    SUBMITTING = "Submitting"


class ArchiveOrder(str, Enum):
    NEWEST_FIRST = "newest_first"
    CHRONOLOGICAL = "chronological"


class RoutingPolicy(str, Enum):
    RULE_GATED = "rule_gated"
    ALWAYS_PERSPECTIVES = "always_perspectives"


@dataclass(frozen=True)
class Message:
    role: Role
    text: str

    @staticmethod
    def user(text: str) -> "Message":
        return Message(role=Role.USER, text=text)

    @staticmethod
    def bot(text: str) -> "Message":
        return Message(role=Role.BOT, text=text)


@dataclass
class Session:
    id: int
    messages: list[Message] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.messages)

    def is_empty(self) -> bool:
        return not self.messages

    def copy(self) -> "Session":
        return Session(id=self.id, messages=self.messages[:])


@dataclass(frozen=True)
class ViewState:
    kind: ViewKind = ViewKind.NONE
    index: Optional[int] = None

    @staticmethod
    def none() -> "ViewState":
        return ViewState()

    @staticmethod
    def active() -> "ViewState":
        return ViewState(kind=ViewKind.ACTIVE)

    @staticmethod
    def archived(index: int) -> "ViewState":
        return ViewState(kind=ViewKind.ARCHIVED, index=index)


@dataclass
class GenerationSettings:
    model: str
    temperature: float = 0.7
    max_tokens: int = 1024
