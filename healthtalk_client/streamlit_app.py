"""Streamlit chat page for the HealthTalk relay.

Features
--------
* Chat interface powered by the `st.chat_message` elements.
* Sidebar with the relay **API base URL**, a backend health check, trusted
  sources and a **Reset** button.
* Quick SRHR topics that send a pre-canned prompt exactly like typed input.
* A composer bound to the store's input buffer, with **Send**, **Clear** and
  an **Add transcript** hook for text dictated through the browser.
* Conversation kept in `st.session_state` through a `ConversationStore`, so
  it survives reruns for the lifetime of the browser session.

Run with:
    $ streamlit run healthtalk_client/streamlit_app.py

Make sure the relay is up (default assumes http://localhost:5000) or change
the "API Base URL" in the sidebar.
"""

from __future__ import annotations

import asyncio

import streamlit as st

from healthtalk_client.conversation_store import ConversationStore
from healthtalk_client.prompts import QUICK_TOPICS, TRUSTED_SOURCES
from healthtalk_client.transport import DEFAULT_API_BASE, RelayTransport

###############################################################################
# Page setup
###############################################################################

st.set_page_config(page_title="HealthTalk", page_icon="💗", layout="wide")
st.title("💗 HealthTalk")
st.caption("Your SRHR AI assistant")

###############################################################################
# Sidebar ­– configuration & static content
###############################################################################

st.sidebar.header("Server configuration")
API_BASE_URL: str = st.sidebar.text_input(
    "API Base URL", value=DEFAULT_API_BASE, help="Where the HealthTalk relay lives"
)

###############################################################################
# Session‑state helpers
###############################################################################

if "store" not in st.session_state:
    st.session_state.store = ConversationStore(RelayTransport(API_BASE_URL))

store: ConversationStore = st.session_state.store
store.transport.api_base = API_BASE_URL.rstrip("/")

if st.sidebar.button("Check backend"):
    if store.transport.check_health():
        st.sidebar.success("Relay is running")
    else:
        st.sidebar.error("Relay is not reachable")

if st.sidebar.button("↺ Reset conversation"):
    store.reset()
    st.session_state.composer = store.input_buffer
    st.rerun()

st.sidebar.markdown("---")
st.sidebar.header("Trusted sources")
for title, url in TRUSTED_SOURCES:
    st.sidebar.markdown(f"- [{title}]({url})")

st.sidebar.markdown("---")
st.sidebar.header("Emergency help")
st.sidebar.write("If someone is in danger, call local emergency services immediately.")
st.sidebar.write("**Kenya:** 999 / 112")

###############################################################################
# Quick topics
###############################################################################

quick_prompt: str | None = None
cols = st.columns(len(QUICK_TOPICS))
for col, (key, title, text) in zip(cols, QUICK_TOPICS):
    if col.button(title, key=f"topic-{key}"):
        quick_prompt = text

###############################################################################
# Display chat history
###############################################################################

for turn in store.turns:
    with st.chat_message(turn.role, avatar="🧑" if turn.role == "user" else "🤖"):
        st.markdown(turn.content)

###############################################################################
# Composer: editable input buffer, Clear, and voice transcripts
###############################################################################

def _sync_composer() -> None:
    store.set_input(st.session_state.composer)


def _clear_composer() -> None:
    store.clear_input()
    st.session_state.composer = store.input_buffer


def _add_transcript() -> None:
    # Speech recognition runs in the browser; its transcript is pasted here
    store.append_dictation(st.session_state.transcript)
    st.session_state.transcript = ""
    st.session_state.composer = store.input_buffer


def _send_composer() -> None:
    asyncio.run(store.submit())
    st.session_state.composer = store.input_buffer


if "composer" not in st.session_state:
    st.session_state.composer = store.input_buffer

with st.expander("Compose a longer message or add dictated text"):
    st.text_area("Message", key="composer", on_change=_sync_composer, height=100)
    st.text_input("Voice transcript", key="transcript")
    add_col, send_col, clear_col = st.columns(3)
    add_col.button("🎤 Add transcript", key="add-transcript", on_click=_add_transcript)
    send_col.button("Send", key="send-composer", on_click=_send_composer, type="primary")
    clear_col.button("Clear", key="clear-composer", on_click=_clear_composer)

###############################################################################
# Chat input
###############################################################################

user_prompt = st.chat_input("Ask anything about SRHR…")
pending = (quick_prompt or user_prompt or "").strip()
if pending:
    # 1) Show the user turn right away
    with st.chat_message("user", avatar="🧑"):
        st.markdown(pending)

    # 2) Call the relay; the store turns any failure into an assistant turn
    with st.spinner("HealthTalk is typing…"):
        if quick_prompt:
            asyncio.run(store.inject_quick_prompt(quick_prompt))
        else:
            asyncio.run(store.submit(user_prompt))

    # 3) Re-render from the store
    st.rerun()
