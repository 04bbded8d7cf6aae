from __future__ import annotations
import streamlit as st

from daycare_core.ui.theme import apply_css, page_header
from daycare_core.ui.session import init_session
from daycare_core.services import AuthService

# ============================================================================
# PAGE CONFIGURATION
# ============================================================================
st.set_page_config(
    page_title="Honeybees Daycare - Login",
    page_icon="🐝",
    layout="centered",
    initial_sidebar_state="collapsed",
)

apply_css()

store = init_session()
auth = AuthService(store)
settings = store.get_settings()

# ============================================================================
# ALREADY LOGGED IN
# ============================================================================
if auth.is_authenticated():
    page_header(f"🐝 {settings.daycare_name}", "Welcome back!")
    col1, col2 = st.columns(2)
    with col1:
        if st.button("Go to Dashboard", use_container_width=True):
            st.switch_page("pages/01_Dashboard.py")
    with col2:
        if st.button("Log out", use_container_width=True):
            auth.logout()
            st.rerun()
    st.stop()

# ============================================================================
# LOGIN FORM
# ============================================================================
page_header(f"🐝 {settings.daycare_name}", "Staff login")

with st.form("login_form"):
    username = st.text_input("Username", value="admin")
    password = st.text_input("Password", type="password")
    submitted = st.form_submit_button("Log in", use_container_width=True)

if submitted:
    result = auth.login(username, password)
    if result.success:
        st.success("Logged in")
        st.switch_page("pages/01_Dashboard.py")
    else:
        st.error(result.error)

st.caption("Data is saved on this device first and synced to the cloud when configured.")
