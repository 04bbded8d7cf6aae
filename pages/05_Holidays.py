# =============================================================================
# 05_Holidays.py - Closures, half days and breaks
# =============================================================================
from __future__ import annotations
import streamlit as st

from daycare_core.errors import ErrorContext, safe_execute
from daycare_core.offline.models import Holiday, HolidayType
from daycare_core.ui.theme import apply_css, page_header
from daycare_core.ui.session import require_login, render_sidebar
from daycare_core.utils.dates import today_str, DATE_FORMAT

st.set_page_config(page_title="Holidays - Honeybees", page_icon="📅", layout="wide")

store = require_login()
apply_css()
render_sidebar(store)
page_header("Holidays & Closures", "Upcoming entries within 30 days appear in daily reports")

with st.form("holiday_form", clear_on_submit=True):
    c1, c2, c3 = st.columns([2, 1, 1])
    name = c1.text_input("Name")
    when = c2.date_input("Date")
    kind = c3.selectbox("Type", [t.value for t in HolidayType])
    notes = st.text_input("Notes")
    if st.form_submit_button("Add holiday"):
        with ErrorContext("Saving holiday", show_success=True, success_message="Holiday saved"):
            store.save_holiday(Holiday(name=name.strip(), date=when.strftime(DATE_FORMAT),
                                       type=kind, notes=notes.strip()))

today = today_str()
holidays = store.get_holidays()
upcoming = [h for h in holidays if h.date >= today]
past = [h for h in holidays if h.date < today]

st.subheader("Upcoming")
if not upcoming:
    st.caption("Nothing scheduled.")
for holiday in upcoming:
    c1, c2 = st.columns([6, 1])
    c1.write(f"**{holiday.date}** · {holiday.name} ({holiday.type})"
             + (f" · {holiday.notes}" if holiday.notes else ""))
    if c2.button("Delete", key=f"del_{holiday.id}"):
        if safe_execute(store.delete_holiday, holiday.id, confirm=True, error_message="Could not delete holiday") is not None:
            st.rerun()

if past:
    with st.expander(f"Past ({len(past)})"):
        for holiday in reversed(past):
            st.caption(f"{holiday.date} · {holiday.name} ({holiday.type})")
