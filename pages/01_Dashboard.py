# =============================================================================
# 01_Dashboard.py - Today's roster with check-in / check-out
# =============================================================================
from __future__ import annotations
import streamlit as st

from daycare_core.errors import safe_execute
from daycare_core.ui.theme import apply_css, page_header, status_pill
from daycare_core.ui.session import require_login, render_sidebar
from daycare_core.utils.dates import today_str, format_12h

st.set_page_config(page_title="Dashboard - Honeybees", page_icon="🐝", layout="wide")

store = require_login()
apply_css()
render_sidebar(store)

today = today_str()
page_header("Today's Roster", today)

children = [c for c in store.get_children() if c.active]
logs = store.get_logs_for_date(today)

present = sum(1 for log in logs.values() if log.is_present)
completed = sum(1 for log in logs.values() if log.status in ("Completed", "Sent"))
sent = sum(1 for log in logs.values() if log.status == "Sent")

c1, c2, c3, c4 = st.columns(4)
c1.metric("Enrolled", len(children))
c2.metric("Checked in", present)
c3.metric("Checked out", completed)
c4.metric("Reports sent", sent)

if not children:
    st.info("No children yet. Add them on the Children page.")
    st.stop()


def open_log(child_id: str) -> None:
    st.session_state["selected_child_id"] = child_id
    st.session_state["selected_date"] = today


for child in children:
    log = logs.get(child.id)
    status = log.status if log else "In Progress"
    is_present = bool(log and log.is_present)

    with st.container(border=True):
        left, mid, right = st.columns([3, 2, 3])
        with left:
            st.markdown(f"**{child.display_name}**  \n{child.classroom or ''}")
            if child.allergies and child.allergies.lower() != "none":
                st.caption(f"⚠️ Allergies: {child.allergies}")
        with mid:
            if is_present:
                st.markdown(status_pill(status), unsafe_allow_html=True)
                st.caption(f"In {format_12h(log.arrival_time)}"
                           + (f" · Out {format_12h(log.departure_time)}" if status != "In Progress" else ""))
            else:
                st.caption("Not checked in")
        with right:
            b1, b2 = st.columns(2)
            if not is_present:
                if b1.button("Check in", key=f"in_{child.id}", use_container_width=True):
                    if safe_execute(store.check_in, child.id, today, error_message="Could not check in") is not None:
                        st.rerun()
            elif status == "In Progress":
                if b1.button("Check out", key=f"out_{child.id}", use_container_width=True):
                    if safe_execute(store.check_out, child.id, today, error_message="Could not check out") is not None:
                        st.rerun()
            elif status == "Completed":
                if b1.button("Undo out", key=f"undo_{child.id}", use_container_width=True):
                    if safe_execute(store.undo_check_out, child.id, today, error_message="Could not undo") is not None:
                        st.rerun()
            if b2.button("Open log", key=f"log_{child.id}", use_container_width=True):
                open_log(child.id)
                st.switch_page("pages/02_Log_Entry.py")
