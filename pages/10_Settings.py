# =============================================================================
# 10_Settings.py - Daycare, email relay and cloud settings
# =============================================================================
from __future__ import annotations
import streamlit as st

from daycare_core.errors import ErrorContext
from daycare_core.offline.cloud_mirror import validate_cloud_config
from daycare_core.ui.theme import apply_css, page_header
from daycare_core.ui.session import require_login, render_sidebar, get_realtime

st.set_page_config(page_title="Settings - Honeybees", page_icon="⚙️", layout="wide")

store = require_login()
apply_css()
render_sidebar(store)
page_header("Settings")

settings = store.get_settings()

with st.form("settings_form"):
    st.subheader("🏠 Daycare")
    daycare_name = st.text_input("Daycare name", value=settings.daycare_name)
    c1, c2 = st.columns(2)
    from_email = c1.text_input("From email", value=settings.from_email)
    test_email = c2.text_input("Test email", value=settings.test_email)
    signature = st.text_area("Email signature", value=settings.email_signature)
    c3, c4 = st.columns(2)
    auto_send_time = c3.text_input("Report time (HH:MM)", value=settings.auto_send_time)
    copy_default = c4.checkbox("Send a copy to myself by default", value=settings.send_copy_to_self_default)

    st.subheader("✉️ Email relay (EmailJS)")
    st.caption("Leave blank to send through your mail app instead.")
    r1, r2, r3 = st.columns(3)
    service_id = r1.text_input("Service ID", value=settings.emailjs_service_id)
    template_id = r2.text_input("Template ID", value=settings.emailjs_template_id)
    public_key = r3.text_input("Public key", value=settings.emailjs_public_key, type="password")

    st.subheader("☁️ Cloud sync (this device only)")
    cloud_url = st.text_input("Supabase URL", value=settings.cloud_url)
    cloud_key = st.text_input("Supabase anon key", value=settings.cloud_key, type="password")

    st.subheader("🔐 Admin")
    new_password = st.text_input("New admin password", type="password",
                                 help="Leave blank to keep the current password")

    submitted = st.form_submit_button("Save settings")

if submitted:
    cloud_changed = (cloud_url.strip(), cloud_key.strip()) != (settings.cloud_url, settings.cloud_key)
    with ErrorContext("Saving settings", show_success=True, success_message="Settings saved"):
        settings.daycare_name = daycare_name.strip()
        settings.from_email = from_email.strip()
        settings.test_email = test_email.strip()
        settings.email_signature = signature
        settings.auto_send_time = auto_send_time.strip()
        settings.send_copy_to_self_default = copy_default
        settings.emailjs_service_id = service_id.strip()
        settings.emailjs_template_id = template_id.strip()
        settings.emailjs_public_key = public_key.strip()
        settings.cloud_url = cloud_url.strip()
        settings.cloud_key = cloud_key.strip()
        if new_password:
            settings.admin_password = new_password
        store.save_settings(settings)
        if cloud_changed:
            get_realtime().reconnect()

# ============================================================================
# CLOUD STATUS
# ============================================================================
st.divider()
st.subheader("Cloud status")

reason = validate_cloud_config(settings.cloud_url, settings.cloud_key)
status = get_realtime().get_status_display()
if reason:
    st.info(f"Local only: {reason}")
elif not store.is_cloud_enabled():
    st.error(f"Cloud unavailable: {store.cloud_status_reason}")
else:
    s1, s2, s3 = st.columns(3)
    s1.metric("Realtime", status["status"])
    s2.metric("Failed attempts", status["failures"])
    s3.metric("Last change", status["last_change"] or "—")

    b1, b2 = st.columns(2)
    with b1:
        if st.button("Reconnect realtime", use_container_width=True):
            connected = get_realtime().reconnect()
            (st.success if connected else st.warning)(
                "Realtime connected" if connected else "Realtime not connected, will retry"
            )
    with b2:
        if st.button("Upload local data to empty cloud", use_container_width=True):
            with ErrorContext("Cloud seed"):
                seeded = store.sync_local_to_cloud()
                store.flush(timeout=30)
                st.success("Cloud seeded from this device" if seeded
                           else "Cloud already has data; settings pushed")
