# =============================================================================
# 09_Emergency.py - Allergies, medications and emergency contacts at a glance
# =============================================================================
from __future__ import annotations
import streamlit as st

from daycare_core.ui.theme import apply_css, page_header
from daycare_core.ui.session import require_login, render_sidebar

st.set_page_config(page_title="Emergency - Honeybees", page_icon="🚨", layout="wide")

store = require_login()
apply_css()
render_sidebar(store)
page_header("🚨 Emergency Info")

children = [c for c in store.get_children() if c.active]
store.get_parents()  # refresh local copy before get_parents_for

query = st.text_input("Search", placeholder="Name or classroom")
if query:
    q = query.lower()
    children = [c for c in children if q in c.display_name.lower() or q in c.classroom.lower()]

for child in children:
    with st.container(border=True):
        st.markdown(f"### {child.display_name}")
        c1, c2 = st.columns(2)
        with c1:
            st.markdown(f"**Allergies:** {child.allergies or 'None recorded'}")
            st.markdown(f"**Dietary:** {child.dietary_notes or '—'}")
            if child.daily_medications:
                st.markdown("**Daily medications:** " + ", ".join(child.daily_medications))
            if child.emergency_notes:
                st.error(child.emergency_notes)
        with c2:
            for parent in store.get_parents_for(child):
                st.markdown(f"**{parent.full_name}** ({parent.relationship})  \n"
                            f"📞 {parent.phone or '—'} · ✉️ {parent.email or '—'}")
