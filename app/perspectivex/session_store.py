"""
Purpose: Owner of the active session, the archive of past sessions, and the
pointer to what is currently on screen.

Key rules:
- Archived sessions are never edited; they are only added (archiving) or
  removed (promoted back to active).
- Archiving an empty active session does nothing.
- No view transition drops or duplicates a message.
- Every change to the archive is synced to the injected persistence adapter;
  changes to the active session are not.

Testing: Pure unit tests with an in-memory persistence fake.
"""

from __future__ import annotations
import logging
from itertools import count
from typing import Optional

from .interfaces import PersistenceAdapter
from .models import ArchiveOrder, Message, Session, ViewKind, ViewState

logger = logging.getLogger(__name__)

TITLE_MAX_CHARS = 30


class SessionStore:
    def __init__(
        self,
        *,
        persistence: Optional[PersistenceAdapter] = None,
        order: ArchiveOrder = ArchiveOrder.NEWEST_FIRST,
        archive: Optional[list[Session]] = None,
    ) -> None:
        self.persistence = persistence
        self.order = order
        self._ids = count(1)
        self.archive: list[Session] = [
            Session(id=self._new_id(), messages=s.messages[:])
            for s in (archive or [])
            if not s.is_empty()
        ]
        self.active: Session = Session(id=self._new_id())
        self.view_state: ViewState = ViewState.none()

    @classmethod
    def restore(
        cls,
        persistence: PersistenceAdapter,
        order: ArchiveOrder = ArchiveOrder.NEWEST_FIRST,
    ) -> "SessionStore":
        """Build a store whose archive is whatever the adapter can load."""
        return cls(persistence=persistence, order=order, archive=persistence.load())

    def _new_id(self) -> int:
        return next(self._ids)

    def _sync(self) -> None:
        if self.persistence is not None:
            self.persistence.save(list(self.archive))

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self.archive):
            raise IndexError(
                f"Archive index {index} out of range (archive has {len(self.archive)})"
            )

    def _index_of(self, session: Session) -> int:
        return next(i for i, s in enumerate(self.archive) if s is session)

    # ACTIVE SESSION
    def append_message(self, msg: Message) -> None:
        self.active.messages.append(msg)

    def append_to(self, session_id: int, msg: Message) -> bool:
        """
        Append to the session with this id if it is still the active one.
        Returns False (and appends nothing) when it has since been archived
        or replaced.
        """
        if self.active.id != session_id:
            return False
        self.active.messages.append(msg)
        return True

    # ARCHIVE TRANSITIONS
    def archive_current(self) -> bool:
        """Park a copy of the active session in the archive. Caller resets active."""
        if self.active.is_empty():
            return False
        parked = self.active.copy()
        if self.order == ArchiveOrder.NEWEST_FIRST:
            self.archive.insert(0, parked)
        else:
            self.archive.append(parked)
        logger.debug(
            "Archived session %d (%d messages)", parked.id, len(parked.messages)
        )
        return True

    def start_new_session(self) -> None:
        parked = self.archive_current()
        self.active = Session(id=self._new_id())
        self.view_state = ViewState.none()
        if parked:
            self._sync()

    def select_archived(self, index: int) -> None:
        """Promote archive[index] to active, parking the current active first."""
        self._check_index(index)
        target = self.archive[index]
        self.archive_current()
        del self.archive[self._index_of(target)]
        self.active = target
        self.view_state = ViewState.active()
        self._sync()

    def view_archived(self, index: int) -> None:
        """Show archive[index] read-only, parking a non-empty active first."""
        self._check_index(index)
        target = self.archive[index]
        parked = self.archive_current()
        if parked:
            self.active = Session(id=self._new_id())
        self.view_state = ViewState.archived(self._index_of(target))
        if parked:
            self._sync()

    def view_active(self) -> None:
        self.view_state = ViewState.active()

    # READ MODELS
    def visible_messages(self) -> list[Message]:
        if self.view_state.kind == ViewKind.ACTIVE:
            return self.active.messages[:]
        if self.view_state.kind == ViewKind.ARCHIVED:
            return self.archive[self.view_state.index].messages[:]
        return []

    def session_titles(self) -> list[str]:
        titles = []
        for s in self.archive:
            text = s.messages[0].text
            if len(text) > TITLE_MAX_CHARS:
                text = f"{text[:TITLE_MAX_CHARS]}..."
            titles.append(text)
        return titles

    def message_count(self) -> int:
        return len(self.active) + sum(len(s) for s in self.archive)
