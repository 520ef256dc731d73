"""
UI layer
Purpose: Streamlit-only glue. Renders the landing gate, the chat history sidebar
and the transcript, collects user input, and delegates all work to the
controller. Keeps UI concerns separate from the conversation engine so the
engine can be unit tested without Streamlit.
"""

import asyncio

import streamlit as st

from perspectivex.auth import CHAT_PAGE, SessionStateAuth, SessionStateNavigator
from perspectivex.config import get_settings
from perspectivex.controller import MAX_ORPHANED_REPLIES, ConversationController
from perspectivex.logging_config import setup_logging
from perspectivex.models import Role, ViewKind
from perspectivex.persistence.archive import JsonArchivePersistence
from perspectivex.persistence.kv_store import FileKeyValueStore
from perspectivex.prompts import DefaultPromptRouter
from perspectivex.services.llm_openai import OpenAIGenerationClient
from perspectivex.session_store import SessionStore


# ---------------------------
# Page config
# ---------------------------
st.set_page_config(
    page_title="PerspectiveX",
    page_icon="🌍",
    layout="wide",
    initial_sidebar_state="expanded",
)

settings = get_settings()

# ---------------------------
# Session state init
# ---------------------------
st_session = st.session_state
st_session.setdefault("controller", None)
st_session.setdefault("logging_ready", False)
st_session.setdefault("loop", None)
st_session.setdefault("late_replies", [])

if not st_session.logging_ready:
    setup_logging(settings)
    st_session.logging_ready = True

auth = SessionStateAuth(st_session)
navigator = SessionStateNavigator(st_session)


# ---------------------------
# Helpers
# ---------------------------
def build_controller(api_key: str) -> ConversationController:
    """Wire store, router and generation client from settings."""
    persistence = JsonArchivePersistence(
        FileKeyValueStore(settings.data_dir), key=settings.storage_key
    )
    store = SessionStore.restore(persistence, order=settings.archive_order)
    router = DefaultPromptRouter(
        policy=settings.routing_policy,
        perspectives=settings.perspectives,
        assistant_name=settings.assistant_name,
        attribution=settings.attribution,
    )
    llm = OpenAIGenerationClient(
        api_key=api_key,
        settings=settings.generation_settings(),
        base_url=settings.base_url,
    )
    return ConversationController(
        store, router, llm, auth=auth, navigator=navigator
    )


def get_controller():
    """Return the controller object."""
    return st_session.get("controller")


def get_loop() -> asyncio.AbstractEventLoop:
    """One event loop per browser session; the async SDK client is bound to it."""
    if st_session.loop is None or st_session.loop.is_closed():
        st_session.loop = asyncio.new_event_loop()
    return st_session.loop


def on_new_chat():
    controller = get_controller()
    if controller:
        controller.new_chat()


def on_view_active():
    controller = get_controller()
    if controller:
        controller.view_active()


def on_view_archived(index: int):
    controller = get_controller()
    if controller:
        controller.view_archived(index)


def on_continue_archived(index: int):
    controller = get_controller()
    if controller:
        controller.open_archived(index)


def on_logout():
    controller = get_controller()
    if controller and not controller.sign_out():
        st.toast("Could not sign out. Please try again.", icon="⚠️")


def on_dismiss_late():
    st_session.late_replies = []


def on_sign_in():
    auth.sign_in()
    navigator.enter_conversation()


def render_welcome():
    st.markdown(
        "<div style='text-align:center; padding-top:4rem'>"
        "<h1>Welcome to PerspectiveX</h1>"
        "<p>Every opinion matters. What's on your mind today?</p>"
        "</div>",
        unsafe_allow_html=True,
    )


# ---------------------------
# LANDING: identity gate
# ---------------------------
if not auth.is_authenticated() or st_session.page != CHAT_PAGE:
    st.title("🌍 PerspectiveX")
    st.subheader("See every story through the eyes of five nations.")
    st.button("Continue", type="primary", on_click=on_sign_in)
    st.stop()


# ---------------------------
# SIDEBAR: chat history
# ---------------------------
with st.sidebar:
    if get_controller() is None:
        api_key = settings.openai_api_key
        if not api_key:
            api_key = st.text_input(
                "Enter your API key",
                type="password",
                help="We do not store your key. It stays in your session only.",
            )
        if not api_key:
            st.warning("Please enter your API key in the sidebar to continue.")
            st.stop()
        try:
            st_session.controller = build_controller(api_key)
        except Exception as e:
            st.error(f"Client init failed: {e}")
            st.stop()

    controller = get_controller()
    store = controller.store
    view = store.view_state

    st.markdown("## Chat History")
    if not store.active.is_empty():
        st.button(
            "💬 Active Chat",
            key="view_active",
            type="primary" if view.kind == ViewKind.ACTIVE else "secondary",
            use_container_width=True,
            on_click=on_view_active,
        )

    titles = store.session_titles()
    if not titles and store.active.is_empty():
        st.caption("No past chats")
    for i, title in enumerate(titles):
        selected = view.kind == ViewKind.ARCHIVED and view.index == i
        st.button(
            title,
            key=f"archived_{i}",
            type="primary" if selected else "secondary",
            use_container_width=True,
            on_click=on_view_archived,
            args=(i,),
        )

    st_session.late_replies.extend(controller.take_orphaned_replies())
    del st_session.late_replies[:-MAX_ORPHANED_REPLIES]
    if st_session.late_replies:
        with st.expander(f"Late replies ({len(st_session.late_replies)})"):
            st.caption("These answers arrived after you left their chat.")
            for _session_id, reply in st_session.late_replies:
                st.markdown(reply.text)
                st.divider()
            st.button("Dismiss", key="dismiss_late", on_click=on_dismiss_late)

    st.divider()
    st.button("➕ New Chat", use_container_width=True, on_click=on_new_chat)
    st.button("Log out", use_container_width=True, on_click=on_logout)


# ---------------------------
# MAIN: transcript & input
# ---------------------------
st.title("🌍 PerspectiveX")

messages = controller.visible_messages()
if not messages:
    render_welcome()
for msg in messages:
    with st.chat_message("user" if msg.role == Role.USER else "assistant"):
        st.markdown(msg.text)

if view.kind == ViewKind.ARCHIVED:
    st.button(
        "Continue this chat",
        on_click=on_continue_archived,
        args=(view.index,),
    )

raw = st.chat_input("Ask PerspectiveX anything...", disabled=controller.is_busy())
if raw is not None:
    controller.set_draft(raw)
    with st.spinner("Gathering perspectives…"):
        accepted = get_loop().run_until_complete(controller.submit())
    if accepted:
        st.rerun()
