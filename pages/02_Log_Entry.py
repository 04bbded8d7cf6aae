# =============================================================================
# 02_Log_Entry.py - Record meals, bottles, naps, diapers and more for one day
# =============================================================================
from __future__ import annotations
import streamlit as st

from daycare_core.errors import ErrorContext, safe_execute
from daycare_core.offline.models import (
    BOTTLE_TYPES,
    DIAPER_TYPES,
    INCIDENT_TYPES,
    MEAL_AMOUNTS,
    MEAL_TYPES,
    NAP_QUALITIES,
    Mood,
)
from daycare_core.services.daily_log_lifecycle import suggested_departure
from daycare_core.ui.theme import apply_css, page_header, status_pill
from daycare_core.ui.session import require_login, render_sidebar
from daycare_core.utils.dates import today_str, current_time_str, format_12h, DATE_FORMAT, parse_date

st.set_page_config(page_title="Log Entry - Honeybees", page_icon="📝", layout="wide")

store = require_login()
apply_css()
render_sidebar(store)

children = [c for c in store.get_children() if c.active]
if not children:
    st.info("No children yet. Add them on the Children page.")
    st.stop()

# ============================================================================
# CHILD + DATE SELECTION
# ============================================================================
ids = [c.id for c in children]
default_id = st.session_state.get("selected_child_id")
col_child, col_date = st.columns([3, 1])
with col_child:
    child = st.selectbox(
        "Child",
        children,
        index=ids.index(default_id) if default_id in ids else 0,
        format_func=lambda c: c.display_name,
    )
with col_date:
    picked = st.date_input("Date", value=parse_date(st.session_state.get("selected_date", today_str())))
date = picked.strftime(DATE_FORMAT)
st.session_state["selected_child_id"] = child.id
st.session_state["selected_date"] = date

log = store.get_or_create_daily_log(child.id, date)

page_header(f"{child.first_name}'s Day", date)
st.markdown(status_pill(log.status), unsafe_allow_html=True)

# ============================================================================
# ATTENDANCE
# ============================================================================
a1, a2, a3 = st.columns(3)
with a1:
    arrival = st.text_input("Arrival (HH:MM)", value=log.arrival_time if log.is_present else current_time_str())
    if not log.is_present and st.button("Check in", use_container_width=True):
        if safe_execute(store.check_in, child.id, date, arrival, error_message="Could not check in") is not None:
            st.rerun()
with a2:
    departure = st.text_input(
        "Departure (HH:MM)",
        value=suggested_departure(log),
    )
    if log.is_present and log.status == "In Progress" and st.button("Check out", use_container_width=True):
        if safe_execute(store.check_out, child.id, date, departure, error_message="Could not check out") is not None:
            st.rerun()
    if log.status == "Completed" and st.button("Undo check-out", use_container_width=True):
        if safe_execute(store.undo_check_out, child.id, date, error_message="Could not undo check-out") is not None:
            st.rerun()
with a3:
    st.caption(f"Arrived {format_12h(log.arrival_time) if log.is_present else '--:--'}")
    if log.status != "In Progress":
        st.caption(f"Departed {format_12h(log.departure_time)}")

# ============================================================================
# ENTRIES
# ============================================================================
tabs = st.tabs(["🍎 Meals", "🍼 Bottles", "😴 Naps", "🧷 Diapers", "🎨 Activities",
                "💊 Medications", "🩹 Incidents"])


def entry_list(kind: str, describe) -> None:
    for entry in getattr(log, kind):
        c1, c2 = st.columns([6, 1])
        c1.write(describe(entry))
        if c2.button("✕", key=f"rm_{kind}_{entry['id']}"):
            if safe_execute(store.remove_entry, child.id, date, kind, entry["id"],
                            error_message="Could not remove entry") is not None:
                st.rerun()


def add_entry(kind: str, **fields) -> None:
    entry = safe_execute(store.add_entry, child.id, date, kind, error_message="Could not add entry", **fields)
    if entry is not None:
        st.rerun()


with tabs[0]:
    entry_list("meals", lambda m: f"[{m['time']}] {m['type']}: {m['items']} ({m['amount']} eaten)")
    with st.form("meal_form", clear_on_submit=True):
        c1, c2, c3, c4 = st.columns(4)
        time = c1.text_input("Time", value=current_time_str())
        kind = c2.selectbox("Meal", MEAL_TYPES)
        items = c3.text_input("Items")
        amount = c4.selectbox("Amount eaten", MEAL_AMOUNTS)
        if st.form_submit_button("Add meal"):
            add_entry("meals", time=time, type=kind, items=items, amount=amount)

with tabs[1]:
    entry_list("bottles", lambda b: f"[{b['time']}] {b['type']} ({b['amount']})")
    with st.form("bottle_form", clear_on_submit=True):
        c1, c2, c3 = st.columns(3)
        time = c1.text_input("Time", value=current_time_str())
        kind = c2.selectbox("Type", BOTTLE_TYPES)
        amount = c3.text_input("Amount", placeholder="6oz")
        if st.form_submit_button("Add bottle"):
            add_entry("bottles", time=time, type=kind, amount=amount)

with tabs[2]:
    entry_list("naps", lambda n: f"{n['start_time']} - {n['end_time'] or '…'} ({n['quality']})")
    with st.form("nap_form", clear_on_submit=True):
        c1, c2, c3 = st.columns(3)
        start = c1.text_input("Start", value=current_time_str())
        end = c2.text_input("End")
        quality = c3.selectbox("Quality", NAP_QUALITIES)
        if st.form_submit_button("Add nap"):
            add_entry("naps", start_time=start, end_time=end, quality=quality)

with tabs[3]:
    entry_list("diapers", lambda d: f"[{d['time']}] {d['type']}")
    with st.form("diaper_form", clear_on_submit=True):
        c1, c2 = st.columns(2)
        time = c1.text_input("Time", value=current_time_str())
        kind = c2.selectbox("Type", DIAPER_TYPES)
        if st.form_submit_button("Add diaper / potty"):
            add_entry("diapers", time=time, type=kind)

with tabs[4]:
    entry_list("activities", lambda a: f"[{a['time']}] {a['category']}: {a['description']}")
    with st.form("activity_form", clear_on_submit=True):
        c1, c2, c3 = st.columns([1, 1, 2])
        time = c1.text_input("Time", value=current_time_str())
        category = c2.text_input("Category", placeholder="Art")
        description = c3.text_input("Description")
        if st.form_submit_button("Add activity"):
            add_entry("activities", time=time, category=category, description=description)

with tabs[5]:
    if child.daily_medications:
        st.caption("Scheduled: " + ", ".join(child.daily_medications))
    entry_list("medications", lambda m: f"[{m['time']}] {m['name']} {m['dosage']}")
    with st.form("med_form", clear_on_submit=True):
        c1, c2, c3 = st.columns(3)
        time = c1.text_input("Time", value=current_time_str())
        name = c2.text_input("Medication")
        dosage = c3.text_input("Dosage")
        if st.form_submit_button("Add medication"):
            add_entry("medications", time=time, name=name, dosage=dosage)

with tabs[6]:
    entry_list("incidents", lambda i: f"[{i['time']}] {i['type']}: {i['description']}"
               + (" · parent notified" if i.get("parent_notified") else ""))
    with st.form("incident_form", clear_on_submit=True):
        c1, c2 = st.columns(2)
        time = c1.text_input("Time", value=current_time_str())
        kind = c2.selectbox("Type", INCIDENT_TYPES)
        description = st.text_input("What happened")
        action = st.text_input("Action taken")
        notified = st.checkbox("Parent notified")
        if st.form_submit_button("Add incident"):
            add_entry("incidents", time=time, type=kind, description=description,
                      action_taken=action, parent_notified=notified)

# ============================================================================
# MOOD & NOTES
# ============================================================================
st.subheader("Mood & notes")
with st.form("notes_form"):
    moods = [m.value for m in Mood]
    mood = st.radio("Overall mood", moods, index=moods.index(log.overall_mood)
                    if log.overall_mood in moods else 0, horizontal=True)
    teacher_notes = st.text_area("Teacher notes", value=log.teacher_notes)
    activity_notes = st.text_area("Activity notes", value=log.activity_notes)
    supplies = st.text_input("Supplies needed", value=log.supplies_needed)
    include_trends = st.checkbox("Include 7-day trends in report", value=log.include_trends)
    if st.form_submit_button("Save notes"):
        with ErrorContext("Saving notes", show_success=True, success_message="Notes saved"):
            store.update_daily_log(
                child.id, date,
                overall_mood=mood,
                teacher_notes=teacher_notes,
                activity_notes=activity_notes,
                supplies_needed=supplies,
                include_trends=include_trends,
            )

c1, c2 = st.columns(2)
with c1:
    if st.button("Preview report →", use_container_width=True):
        st.switch_page("pages/03_Report_Preview.py")
with c2:
    with st.expander("Reset this day"):
        st.warning("This clears every entry for the day and cannot be undone.")
        confirm = st.checkbox("I understand", key="confirm_reset")
        if st.button("Reset day", disabled=not confirm):
            if safe_execute(store.reset_daily_log, child.id, date, confirm=True,
                            error_message="Could not reset the day") is not None:
                st.rerun()
