"""
Purpose: The single orchestration point for a conversation turn. Owns the
submit state machine (Idle / Submitting) and the draft input buffer.
Keeps the UI from knowing how routing, generation or persistence work.

Key responsibilities:
- Validate input (security guard) and reject overlapping submits.
- Append the user message optimistically, tagged with the target session id.
- Route the utterance (prompts) and call the generation client.
- Append the reply, or a fixed fallback on failure, to the same session id.
- Expose view transitions (new chat, open/view archived) and sign-out.

Testing: Pure unit tests with fakes: fake GenerationClient, real router and
SessionStore over in-memory persistence. No rendering imports.
"""

from __future__ import annotations
import logging
from typing import Optional

from .errors import GenerationError, ValidationError
from .interfaces import AuthProvider, GenerationClient, Navigator, PromptRouter
from .models import Message, SubmitState
from .services.security import DefaultSecurity
from .session_store import SessionStore

logger = logging.getLogger(__name__)

MAX_ORPHANED_REPLIES = 20

FALLBACK_REPLY = (
    "Sorry, I couldn't come up with a response right now. Please try again."
)


class ConversationController:
    def __init__(
        self,
        store: SessionStore,
        router: PromptRouter,
        llm: GenerationClient,
        *,
        auth: Optional[AuthProvider] = None,
        navigator: Optional[Navigator] = None,
    ):
        self.store = store
        self.router = router
        self.llm = llm
        self.security = DefaultSecurity()
        self.auth = auth
        self.navigator = navigator

        self.state: SubmitState = SubmitState.IDLE
        self.draft: str = ""
        self.orphaned_replies: list[tuple[int, Message]] = []

    def is_busy(self) -> bool:
        """True while a generation call is in flight."""
        return self.state == SubmitState.SUBMITTING

    def set_draft(self, text: str) -> None:
        self.draft = text

    async def submit(self, raw_text: Optional[str] = None) -> bool:
        """
        Run one turn. Uses the draft buffer when raw_text is None.
        Returns False when the submit was rejected (empty input or a call
        already in flight); nothing is appended in that case.
        """
        text = self.draft if raw_text is None else raw_text
        if self.is_busy():
            logger.debug("Submit ignored: a request is already in flight")
            return False
        try:
            self.security.validate_user_input(text)
        except ValidationError:
            return False

        session_id = self.store.active.id
        self.store.append_message(Message.user(text))
        self.store.view_active()
        self.state = SubmitState.SUBMITTING
        self.draft = ""

        try:
            try:
                instruction = self.router.route(text)
                reply = await self.llm.generate(instruction)
            except GenerationError as e:
                logger.warning("Generation failed for session %d: %s", session_id, e)
                reply = FALLBACK_REPLY
            except Exception:
                logger.exception("Unexpected error while answering session %d", session_id)
                reply = FALLBACK_REPLY
            self._deliver(session_id, Message.bot(reply))
        finally:
            self.state = SubmitState.IDLE
        return True

    def _deliver(self, session_id: int, msg: Message) -> None:
        if self.store.append_to(session_id, msg):
            return
        self.orphaned_replies.append((session_id, msg))
        del self.orphaned_replies[:-MAX_ORPHANED_REPLIES]
        logger.warning(
            "Session %d is no longer active; reply side-filed (%d orphaned)",
            session_id,
            len(self.orphaned_replies),
        )

    def take_orphaned_replies(self) -> list[tuple[int, Message]]:
        """Hand over side-filed replies (oldest first) and clear the list."""
        replies, self.orphaned_replies = self.orphaned_replies, []
        return replies

    # VIEW TRANSITIONS
    def new_chat(self) -> None:
        self.store.start_new_session()

    def open_archived(self, index: int) -> None:
        """Promote an archived session back to active so it can be continued."""
        self.store.select_archived(index)

    def view_archived(self, index: int) -> None:
        self.store.view_archived(index)

    def view_active(self) -> None:
        self.store.view_active()

    def visible_messages(self) -> list[Message]:
        return self.store.visible_messages()

    # IDENTITY
    def is_authenticated(self) -> bool:
        return bool(self.auth and self.auth.is_authenticated())

    def sign_out(self) -> bool:
        """Sign out and leave the conversation view. Returns False if sign-out failed."""
        if self.auth is None:
            return False
        try:
            self.auth.sign_out()
        except Exception:
            logger.exception("Error signing out")
            return False
        if self.navigator is not None:
            self.navigator.leave_conversation()
        return True
