"""
Purpose: Minimal identity and navigation collaborators backed by a mutable
mapping (st.session_state in the app, a plain dict in tests).
The engine only asks "is someone signed in" and "leave the conversation";
a real identity provider can replace these behind the same protocols.
"""

from __future__ import annotations
from typing import MutableMapping, Any

AUTH_KEY = "authenticated"
PAGE_KEY = "page"
LANDING_PAGE = "landing"
CHAT_PAGE = "chat"


class SessionStateAuth:
    def __init__(self, state: MutableMapping[str, Any]):
        self.state = state
        self.state.setdefault(AUTH_KEY, False)

    def sign_in(self) -> None:
        self.state[AUTH_KEY] = True

    def is_authenticated(self) -> bool:
        return bool(self.state.get(AUTH_KEY))

    def sign_out(self) -> None:
        self.state[AUTH_KEY] = False


class SessionStateNavigator:
    def __init__(self, state: MutableMapping[str, Any]):
        self.state = state
        self.state.setdefault(PAGE_KEY, LANDING_PAGE)

    def enter_conversation(self) -> None:
        self.state[PAGE_KEY] = CHAT_PAGE

    def leave_conversation(self) -> None:
        self.state[PAGE_KEY] = LANDING_PAGE
