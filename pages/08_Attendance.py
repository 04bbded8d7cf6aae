# =============================================================================
# 08_Attendance.py - Monthly attendance
# =============================================================================
from __future__ import annotations
import plotly.express as px
import streamlit as st

from daycare_core.reports.trends import monthly_attendance, attendance_calendar
from daycare_core.ui.theme import apply_css, page_header, PRIMARY_COLOR
from daycare_core.ui.session import require_login, render_sidebar
from daycare_core.utils.dates import today_str

st.set_page_config(page_title="Attendance - Honeybees", page_icon="🗓️", layout="wide")

store = require_login()
apply_css()
render_sidebar(store)

month = st.text_input("Month (YYYY-MM)", value=today_str()[:7])
page_header("Attendance", month)

children = [c for c in store.get_children() if c.active]
logs = store.get_daily_logs()
counts = monthly_attendance(logs, month)

rows = [
    {"Child": c.display_name, "Days present": int(counts.get(c.id, 0))}
    for c in children
]
if not rows:
    st.info("No children yet.")
    st.stop()

fig = px.bar(rows, x="Child", y="Days present", color_discrete_sequence=[PRIMARY_COLOR])
fig.update_layout(height=320, plot_bgcolor="white", margin=dict(t=20, b=20))
st.plotly_chart(fig, use_container_width=True)

child = st.selectbox("Details for", children, format_func=lambda c: c.display_name)
calendar = attendance_calendar(logs, child.id, month)
if calendar.empty:
    st.caption("No logs this month.")
else:
    st.dataframe(calendar, use_container_width=True, hide_index=True)
    st.download_button(
        "Download CSV",
        calendar.to_csv(index=False),
        file_name=f"attendance_{child.first_name}_{month}.csv",
        mime="text/csv",
    )
