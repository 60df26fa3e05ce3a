from __future__ import annotations

import logging
import os
import sys

# --- Add project root to sys.path ---
current_dir = os.path.dirname(os.path.abspath(__file__))
parent_dir = os.path.dirname(current_dir)
if parent_dir not in sys.path:
    sys.path.insert(0, parent_dir)

import streamlit as st

# IMPORTS
from pure360 import auth, routing, views
from pure360.admin_dashboard import render_admin_dashboard
from pure360.chat_logic import (
    ChatUnavailable,
    WELCOME_MESSAGE,
    store_message,
    stream_reply,
)
from pure360.config import AppConfig, load_config
from pure360.db.database import DataAccessError
from pure360.forms import flush_toasts
from pure360.tools import whatsapp_link

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

# --- CONSTANTS FOR UX ---
USER_AVATAR = "👤"
BOT_AVATAR = "🧽"


def _init_app_state():
    if "current_path" not in st.session_state:
        st.session_state.current_path = routing.HOME
    if "chat_messages" not in st.session_state:
        st.session_state.chat_messages = []


# --- CSS STYLING ---
def inject_custom_css():
    st.markdown("""
    <style>
        /* --- Hide Header/Footer for clean look --- */
        header {visibility: hidden;}
        footer {visibility: hidden;}
    </style>
    """, unsafe_allow_html=True)


def _nav_items(state: routing.AuthState):
    items = [routing.HOME, "/services", "/cleaning", "/removals", "/care", "/chat"]
    if not state.is_authenticated:
        return items + ["/work-with-us", routing.AUTH]
    items.append(routing.home_for_role(state.role))
    if state.role != "admin":
        items += [routing.BOOKINGS, "/profile"]
    return items


def render_sidebar(cfg: AppConfig, state: routing.AuthState):
    with st.sidebar:
        st.title("Pure360")
        for path in dict.fromkeys(_nav_items(state)):
            route = routing.find_route(path)
            if st.button(route.title, key=f"nav-{path}", use_container_width=True):
                views.navigate(path)
        st.divider()
        if state.is_authenticated:
            st.caption(f"Signed in as {state.user.get('email') or 'member'}")
            if st.button("Sign out", key="sidebar-sign-out"):
                auth.sign_out()
                views.navigate(routing.HOME)
        st.link_button(
            "💬 WhatsApp us", whatsapp_link(cfg.contact.whatsapp_number), use_container_width=True
        )


PAGES = {
    routing.HOME: views.render_home,
    routing.AUTH: views.render_auth,
    "/services": views.render_services,
    "/work-with-us": views.render_work_with_us,
    "/cleaning": views.render_cleaning_wizard,
    "/removals": views.render_removals,
    "/care": views.render_care,
    routing.BOOKINGS: views.render_bookings,
    "/profile": views.render_profile,
    routing.CLIENT_DASHBOARD: views.render_client_dashboard,
    routing.WORKER_DASHBOARD: views.render_worker_dashboard,
    routing.COMPLETE_PROFILE: views.render_complete_profile,
    routing.PENDING_APPROVAL: views.render_pending_approval,
    routing.ADMIN: lambda cfg: render_admin_dashboard(),
    "/chat": lambda cfg: run_chat_assistant(cfg),
}


def main():
    st.set_page_config(
        page_title="Pure360 | Cleaning, Removals & Care",
        page_icon="🧽",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    inject_custom_css()
    cfg = load_config()
    _init_app_state()
    flush_toasts()

    with st.spinner("Loading..."):
        try:
            state = auth.load_auth_state()
        except DataAccessError as e:
            logger.error("Could not load account details: %s", e)
            st.error("We couldn't load your account. Please refresh to try again.")
            state = routing.AuthState()

    render_sidebar(cfg, state)

    requested = st.session_state.current_path
    route, decision = routing.resolve(requested, state)
    if decision.action == "loading":
        st.write("Loading...")
        return
    if route.path != requested:
        # Redirects replace the requested path
        st.session_state.current_path = route.path

    PAGES.get(route.path, views.render_not_found)(cfg)


def run_chat_assistant(cfg: AppConfig):
    st.title("💬 Pure360 Assistant")
    st.caption("Ask about our cleaning, removals and care services.")

    chat_container = st.container(height=500)

    with chat_container:
        if not st.session_state.chat_messages:
            st.info(WELCOME_MESSAGE)

        for msg in st.session_state.chat_messages:
            with st.chat_message(msg["role"], avatar=BOT_AVATAR if msg["role"] == "assistant" else USER_AVATAR):
                st.write(msg["content"])

    user_input = st.chat_input("Type your message...")
    if not user_input:
        return

    with chat_container:
        with st.chat_message("user", avatar=USER_AVATAR):
            st.write(user_input)

    store_message(st.session_state.chat_messages, "user", user_input)

    with chat_container:
        with st.chat_message("assistant", avatar=BOT_AVATAR):
            try:
                reply = st.write_stream(
                    stream_reply(cfg.llm, st.session_state.chat_messages, auth.access_token())
                )
            except ChatUnavailable as e:
                reply = str(e)
                st.write(reply)
                st.link_button("💬 Chat on WhatsApp", whatsapp_link(cfg.contact.whatsapp_number))

    store_message(st.session_state.chat_messages, "assistant", reply if isinstance(reply, str) else "".join(reply))


if __name__ == "__main__":
    main()
