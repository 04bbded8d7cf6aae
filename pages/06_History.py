# =============================================================================
# 06_History.py - Past daily logs
# =============================================================================
from __future__ import annotations
import pandas as pd
import streamlit as st

from daycare_core.errors import safe_execute
from daycare_core.ui.theme import apply_css, page_header
from daycare_core.ui.session import require_login, render_sidebar
from daycare_core.utils.dates import format_12h

st.set_page_config(page_title="History - Honeybees", page_icon="📚", layout="wide")

store = require_login()
apply_css()
render_sidebar(store)
page_header("Log History")

children = {c.id: c for c in store.get_children()}
logs = sorted(store.get_daily_logs(), key=lambda log: (log.date, log.child_id), reverse=True)

c1, c2 = st.columns(2)
child_filter = c1.selectbox(
    "Child", [None] + list(children),
    format_func=lambda cid: "All children" if cid is None else children[cid].display_name,
)
status_filter = c2.multiselect("Status", ["In Progress", "Completed", "Sent"])

if child_filter:
    logs = [log for log in logs if log.child_id == child_filter]
if status_filter:
    logs = [log for log in logs if log.status in status_filter]

if not logs:
    st.info("No logs match.")
    st.stop()

table = pd.DataFrame([
    {
        "Date": log.date,
        "Child": children[log.child_id].display_name if log.child_id in children else log.child_id,
        "Present": "✅" if log.is_present else "—",
        "Arrived": format_12h(log.arrival_time) if log.is_present else "",
        "Departed": format_12h(log.departure_time) if log.status != "In Progress" else "",
        "Mood": log.overall_mood,
        "Status": log.status,
        "Meals": len(log.meals),
        "Naps": len(log.naps),
    }
    for log in logs
])
st.dataframe(table, use_container_width=True, hide_index=True)

st.subheader("Open or delete a log")
selected = st.selectbox(
    "Log", logs,
    format_func=lambda log: f"{log.date} · "
    + (children[log.child_id].first_name if log.child_id in children else log.child_id),
)
o1, o2 = st.columns(2)
with o1:
    if st.button("Open in Log Entry", use_container_width=True):
        st.session_state["selected_child_id"] = selected.child_id
        st.session_state["selected_date"] = selected.date
        st.switch_page("pages/02_Log_Entry.py")
with o2:
    with st.expander("Delete log"):
        confirm = st.checkbox("Permanently delete this log", key="confirm_delete_log")
        if st.button("Delete", disabled=not confirm):
            if safe_execute(store.delete_daily_log, selected.id, confirm=True, error_message="Could not delete log") is not None:
                st.rerun()
