# =============================================================================
# 03_Report_Preview.py - Compose, preview and send the daily report
# =============================================================================
from __future__ import annotations
import streamlit as st
import streamlit.components.v1 as components

from daycare_core.services import ReportService, SummaryService
from daycare_core.ui.theme import apply_css, page_header, status_pill
from daycare_core.ui.session import require_login, render_sidebar, get_config
from daycare_core.utils.dates import today_str, DATE_FORMAT, parse_date

st.set_page_config(page_title="Report - Honeybees", page_icon="✉️", layout="wide")

store = require_login()
apply_css()
render_sidebar(store)

children = [c for c in store.get_children() if c.active]
if not children:
    st.info("No children yet.")
    st.stop()

ids = [c.id for c in children]
default_id = st.session_state.get("selected_child_id")
c1, c2 = st.columns([3, 1])
child = c1.selectbox("Child", children, index=ids.index(default_id) if default_id in ids else 0,
                     format_func=lambda c: c.display_name)
date = c2.date_input(
    "Date", value=parse_date(st.session_state.get("selected_date", today_str()))
).strftime(DATE_FORMAT)

log = store.find_daily_log(child.id, date)
if log is None:
    st.info("Nothing has been logged for this day yet.")
    st.stop()

settings = store.get_settings()
report_service = ReportService(store)
summary_service = SummaryService(api_key=get_config().openai_api_key)
parents = store.get_parents_for(child)
opted_in = [p for p in parents if p.receives_email and p.email]

page_header(f"Report for {child.first_name}", date)
st.markdown(status_pill(log.status), unsafe_allow_html=True)

# ============================================================================
# NARRATIVE
# ============================================================================
summary_key = f"summary_{log.id}"
if summary_key not in st.session_state:
    st.session_state[summary_key] = log.teacher_notes or "A wonderful day of learning and play!"

if summary_service.available and st.button("✨ Write summary with AI"):
    with st.spinner("Writing summary..."):
        st.session_state[summary_key] = summary_service.summarize(
            log, child, parents[0] if parents else None
        )
summary = st.text_area("Special moments", key=summary_key, height=140)

# ============================================================================
# RECIPIENTS
# ============================================================================
st.subheader("Recipients")
if not parents:
    st.warning("No parents linked to this child. Link them on the Children page.")
for parent in parents:
    flag = "✅" if parent.receives_email and parent.email else "🚫"
    st.write(f"{flag} {parent.full_name} ({parent.relationship}) · {parent.email or 'no email'}")
copy_to_self = st.checkbox(f"Send a copy to {settings.from_email}", value=settings.send_copy_to_self_default)

# ============================================================================
# PREVIEW
# ============================================================================
report = report_service.compose(log, child, summary, settings)
st.markdown(f"**Subject:** {report.subject}")
tab_html, tab_text = st.tabs(["Email preview", "Plain text"])
with tab_html:
    components.html(report.html, height=900, scrolling=True)
with tab_text:
    st.code(report.text, language=None)

# ============================================================================
# SEND
# ============================================================================
if not settings.relay_configured:
    st.info("Email relay not configured: sending opens your mail app instead.")

s1, s2 = st.columns(2)
with s1:
    send = st.button("📨 Send to parents", use_container_width=True, disabled=not opted_in and not copy_to_self)
with s2:
    test = st.button("🧪 Send test", use_container_width=True)

if send or test:
    with st.spinner("Sending..."):
        result = report_service.send_report(log, child, summary=summary, is_test=test,
                                            copy_to_self=copy_to_self)
    if result.success:
        outcome = result.data
        if outcome.method == "mailto":
            if outcome.relay_error and settings.relay_configured:
                st.warning(f"Automated send failed ({outcome.relay_error}). Opened your email app instead.")
            st.link_button("Open email draft", outcome.mailto_url)
        st.success(("Test report" if test else "Report") + f" sent to {', '.join(outcome.recipients)}")
    else:
        st.error(result.error)

history = [s for s in store.get_send_logs() if s.daily_log_id == log.id]
if history:
    st.subheader("Send history")
    for entry in sorted(history, key=lambda s: s.sent_at, reverse=True):
        line = f"{entry.sent_at[:16].replace('T', ' ')} · {entry.status} via {entry.method} → {', '.join(entry.sent_to)}"
        if entry.error_message:
            line += f" ({entry.error_message})"
        st.caption(line)
