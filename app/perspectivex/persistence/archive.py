"""
Purpose: Durable load/save of the session archive.
Format: a single key holding a JSON array of sessions; each session is an
array of {"role": "user" | "bot", "text": str}. Session ids are not stored;
decoded sessions are numbered from 1 and the owning store re-stamps them.

Best effort by contract: load() returns [] on anything it cannot decode and
save() logs write failures instead of raising.
"""

from __future__ import annotations
import json
import logging
from typing import Any, Sequence

from ..errors import PersistenceError
from ..interfaces import KeyValueStore
from ..models import Message, Role, Session

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "chatHistory"


def encode_archive(sessions: Sequence[Session]) -> str:
    return json.dumps(
        [
            [{"role": m.role.value, "text": m.text} for m in s.messages]
            for s in sessions
            if not s.is_empty()
        ],
    )


def decode_archive(raw: str) -> list[Session]:
    """Strict decode: raises PersistenceError on bad JSON or wrong shape."""
    try:
        data: Any = json.loads(raw)
    except (TypeError, ValueError, RecursionError) as e:
        raise PersistenceError(f"Archive is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise PersistenceError("Archive must be a JSON array of sessions.")

    sessions: list[Session] = []
    for i, item in enumerate(data):
        if not isinstance(item, list):
            raise PersistenceError(f"Session {i} is not an array.")
        messages = []
        for j, entry in enumerate(item):
            if not isinstance(entry, dict):
                raise PersistenceError(f"Message {i}.{j} is not an object.")
            role, text = entry.get("role"), entry.get("text")
            if role not in (Role.USER.value, Role.BOT.value) or not isinstance(
                text, str
            ):
                raise PersistenceError(f"Message {i}.{j} has an invalid shape.")
            messages.append(Message(role=Role(role), text=text))
        if messages:
            sessions.append(Session(id=len(sessions) + 1, messages=messages))
    return sessions


class JsonArchivePersistence:
    def __init__(self, kv: KeyValueStore, key: str = DEFAULT_STORAGE_KEY) -> None:
        self.kv = kv
        self.key = key

    def load(self) -> list[Session]:
        try:
            raw = self.kv.get(self.key)
        except PersistenceError as e:
            logger.warning("Could not read archive %r: %s", self.key, e)
            return []
        except Exception:
            logger.exception("Unexpected error reading archive %r", self.key)
            return []
        if raw is None:
            return []
        try:
            sessions = decode_archive(raw)
        except PersistenceError as e:
            logger.warning("Discarding malformed archive %r: %s", self.key, e)
            return []
        except Exception:
            logger.exception("Unexpected error decoding archive %r", self.key)
            return []
        logger.debug("Loaded %d archived sessions", len(sessions))
        return sessions

    def save(self, sessions: Sequence[Session]) -> None:
        try:
            self.kv.set(self.key, encode_archive(sessions))
        except PersistenceError as e:
            logger.error("Could not save archive %r: %s", self.key, e)
            return
        except Exception:
            logger.exception("Unexpected error saving archive %r", self.key)
            return
        logger.debug("Saved %d archived sessions", len(sessions))
