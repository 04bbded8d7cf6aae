"""
Session wiring for the Streamlit pages.

One DaycareStore and one RealtimeChannel are created per server process
(``st.cache_resource``) and shared by every session. Pages call
``require_login()`` first and then ``get_store()``.

Sessions never subscribe to the event bus themselves: a single
ChangeCounter is bumped by data events and the sidebar fragment
``watch_for_changes`` reruns the page when it moves.
"""

import streamlit as st

from daycare_core.config import AppConfig
from daycare_core.logging import setup_logging, get_logger
from daycare_core.offline import ChangeCounter, DaycareStore, EventBus, RealtimeChannel
from daycare_core.services import AuthService

logger = get_logger(__name__)

# Seconds between checks for changes made elsewhere
REFRESH_SECONDS = 5


@st.cache_resource
def get_config() -> AppConfig:
    config = AppConfig.from_env()
    setup_logging(level=config.log_level, log_to_file=config.log_to_file)
    return config


@st.cache_resource
def get_store() -> DaycareStore:
    config = get_config()
    store = DaycareStore.from_config(config, bus=EventBus())
    if store.is_cloud_enabled():
        store.sync_local_to_cloud()
        store.sync_settings_from_cloud()
    logger.info("DaycareStore ready")
    return store


@st.cache_resource
def get_realtime() -> RealtimeChannel:
    config = get_config()
    channel = RealtimeChannel(get_store(), check_interval=config.realtime_check_interval)
    channel.start()
    return channel


@st.cache_resource
def get_change_counter() -> ChangeCounter:
    """One data-version counter per process, fed by the shared bus."""
    return ChangeCounter(get_store().bus)


def init_session() -> DaycareStore:
    """Store + realtime channel; records the data version this run renders."""
    store = get_store()
    get_realtime()
    st.session_state["data_version"] = get_change_counter().value
    return store


@st.fragment(run_every=REFRESH_SECONDS)
def watch_for_changes() -> None:
    """Rerun the page when another device or thread changed the data."""
    current = get_change_counter().value
    if current != st.session_state.get("data_version", current):
        st.session_state["data_version"] = current
        st.rerun()


def require_login() -> DaycareStore:
    """Stop the page unless the device is logged in."""
    store = init_session()
    if not AuthService(store).is_authenticated():
        st.warning("Please log in on the Welcome page first.")
        st.page_link("Welcome.py", label="Go to login", icon="🔐")
        st.stop()
    return store


def render_sidebar(store: DaycareStore) -> None:
    """Cloud status and logout button."""
    with st.sidebar:
        st.markdown(f"## 🐝 {store.get_settings().daycare_name}")
        status = get_realtime().get_status_display()
        if store.is_cloud_enabled():
            icon = "🟢" if status["connected"] else "🟠"
            st.caption(f"{icon} Cloud sync: {status['status']}")
        else:
            st.caption("⚪ Local only (cloud not configured)")
        watch_for_changes()
        if st.button("Log out", use_container_width=True):
            AuthService(store).logout()
            st.switch_page("Welcome.py")
