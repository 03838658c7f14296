# =============================================================================
# greenmaster_core/ui/app_state.py
# Per-session access to the application context
# =============================================================================
"""
One started AppContext per process (``st.cache_resource``) owns the durable
storage, the Document Store Adapter, the refresher thread and the shared
snapshots. Each browser session gets ``shared.for_session(key)`` in
``st.session_state``: its own session user, audit identity and drafts.

The browser key travels in the ``sid`` query parameter, so reloading the page
restores that browser's login and nobody else's.
"""

from __future__ import annotations

import logging
import re
import uuid

import streamlit as st

from greenmaster_core.config import load_settings
from greenmaster_core.context import AppContext, build_app_context
from greenmaster_core.logging import setup_logging

logger = logging.getLogger(__name__)

CONTEXT_KEY = "_gm_context"
BROWSER_KEY = "_gm_browser_key"
BROWSER_KEY_PARAM = "sid"
_BROWSER_KEY_RE = re.compile(r"^[0-9a-f]{32}$")


@st.cache_resource
def _shared_context() -> AppContext:
    settings = load_settings()
    setup_logging(settings.log_level)
    return build_app_context(settings=settings).start()


def browser_key() -> str:
    """This browser's key: kept for the session and mirrored into the URL."""
    key = st.session_state.get(BROWSER_KEY)
    if key is None:
        key = st.query_params.get(BROWSER_KEY_PARAM)
        if not key or not _BROWSER_KEY_RE.match(key):
            key = uuid.uuid4().hex
        st.session_state[BROWSER_KEY] = key
    if st.query_params.get(BROWSER_KEY_PARAM) != key:
        st.query_params[BROWSER_KEY_PARAM] = key
    return key


def get_app_context() -> AppContext:
    """This session's AppContext (built and started on first use)."""
    key = browser_key()
    ctx = st.session_state.get(CONTEXT_KEY)
    if ctx is None:
        ctx = _shared_context().for_session(key).start()
        st.session_state[CONTEXT_KEY] = ctx
        logger.info("Session context ready (mock mode)" if ctx.mock_mode else "Session context ready")
    return ctx


def require_login() -> AppContext:
    """Stop the page unless someone is logged in."""
    ctx = get_app_context()
    if not ctx.session.is_authenticated:
        st.warning("로그인이 필요합니다. Welcome 페이지에서 로그인해주세요.")
        st.page_link("Welcome.py", label="로그인 페이지로 이동", icon="🔐")
        st.stop()
    return ctx


def render_sidebar(ctx: AppContext) -> None:
    """Current user, mode badge and logout button."""
    with st.sidebar:
        user = ctx.user
        if user is not None:
            st.markdown(f"**{user.name}**  \n{user.department.value} · {user.role.value}")
        if ctx.mock_mode:
            st.caption("🧪 Mock mode (local storage)")
        if user is not None and st.button("로그아웃", use_container_width=True):
            ctx.session.logout()
            st.rerun()
