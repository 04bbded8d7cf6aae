# =============================================================================
# 07_Trends.py - 7-day feeding and sleep trends
# =============================================================================
from __future__ import annotations
import plotly.graph_objects as go
from plotly.subplots import make_subplots
import streamlit as st

from daycare_core.reports.trends import weekly_trends
from daycare_core.ui.theme import apply_css, page_header, PRIMARY_COLOR, ACCENT_DARK, SUBTLE_TEXT
from daycare_core.ui.session import require_login, render_sidebar
from daycare_core.utils.dates import today_str

st.set_page_config(page_title="Trends - Honeybees", page_icon="📈", layout="wide")

store = require_login()
apply_css()
render_sidebar(store)
page_header("Trends", "Last 7 days")

children = [c for c in store.get_children() if c.active]
if not children:
    st.info("No children yet.")
    st.stop()

child = st.selectbox("Child", children, format_func=lambda c: c.display_name)
trends = weekly_trends(store.get_daily_logs(), child.id, today_str())

m1, m2, m3 = st.columns(3)
m1.metric("Avg milk / day", f"{trends.avg_milk_oz:.1f} oz")
hours, minutes = divmod(int(round(trends.avg_nap_minutes)), 60)
m2.metric("Avg nap / day", f"{hours}h {minutes:02d}m")
m3.metric("Days logged", f"{trends.days_with_data} / 7")

if not trends.has_data:
    st.info("No logs in the last 7 days.")
    st.stop()

frame = trends.frame.copy()
frame["label"] = frame["date"].str[5:].str.replace("-", "/")

fig = make_subplots(rows=1, cols=2, subplot_titles=("Milk (oz)", "Nap (minutes)"))
fig.add_trace(go.Bar(x=frame["label"], y=frame["milk_oz"], marker_color=PRIMARY_COLOR, name="Milk"),
              row=1, col=1)
fig.add_trace(go.Bar(x=frame["label"], y=frame["nap_minutes"], marker_color=ACCENT_DARK, name="Nap"),
              row=1, col=2)
fig.add_hline(y=trends.avg_milk_oz, line_dash="dot", line_color=SUBTLE_TEXT, row=1, col=1)
fig.add_hline(y=trends.avg_nap_minutes, line_dash="dot", line_color=SUBTLE_TEXT, row=1, col=2)
fig.update_layout(height=380, showlegend=False, plot_bgcolor="white", margin=dict(t=40, b=20))
st.plotly_chart(fig, use_container_width=True)

st.caption("Averages only count days with a log.")
