# =============================================================================
# 04_Children.py - Children and parent contacts
# =============================================================================
from __future__ import annotations
import streamlit as st

from daycare_core.errors import ErrorContext, safe_execute
from daycare_core.offline.models import Child, Parent, Relationship, Language
from daycare_core.ui.theme import apply_css, page_header
from daycare_core.ui.session import require_login, render_sidebar

st.set_page_config(page_title="Children - Honeybees", page_icon="👶", layout="wide")

store = require_login()
apply_css()
render_sidebar(store)
page_header("Children & Families")

children = store.get_children()
parents = store.get_parents()
parent_by_id = {p.id: p for p in parents}

tab_children, tab_parents = st.tabs(["Children", "Parents"])

# ============================================================================
# CHILDREN
# ============================================================================
with tab_children:
    options = [None] + children
    editing = st.selectbox(
        "Edit child", options,
        format_func=lambda c: "➕ New child" if c is None else c.display_name,
    )
    child = editing or Child()

    with st.form("child_form"):
        c1, c2, c3 = st.columns(3)
        first_name = c1.text_input("First name", value=child.first_name)
        last_name = c2.text_input("Last name", value=child.last_name)
        nickname = c3.text_input("Nickname", value=child.nickname)
        c4, c5 = st.columns(2)
        dob = c4.text_input("Date of birth (YYYY-MM-DD)", value=child.dob)
        classroom = c5.text_input("Classroom", value=child.classroom)
        allergies = st.text_input("Allergies", value=child.allergies)
        dietary = st.text_input("Dietary notes", value=child.dietary_notes)
        nap_notes = st.text_input("Nap notes", value=child.nap_notes)
        emergency = st.text_area("Emergency notes", value=child.emergency_notes)
        meds = st.text_input("Daily medications (comma separated)", value=", ".join(child.daily_medications))
        linked = st.multiselect(
            "Parents", [p.id for p in parents],
            default=[pid for pid in child.parent_ids if pid in parent_by_id],
            format_func=lambda pid: parent_by_id[pid].full_name,
        )
        active = st.checkbox("Active", value=child.active)
        if st.form_submit_button("Save child"):
            with ErrorContext("Saving child", show_success=True, success_message="Child saved"):
                store.save_child(Child(
                    id=child.id,
                    first_name=first_name.strip(),
                    last_name=last_name.strip(),
                    nickname=nickname.strip(),
                    dob=dob.strip(),
                    classroom=classroom.strip(),
                    allergies=allergies.strip(),
                    dietary_notes=dietary.strip(),
                    nap_notes=nap_notes.strip(),
                    emergency_notes=emergency.strip(),
                    daily_medications=[m.strip() for m in meds.split(",") if m.strip()],
                    parent_ids=linked,
                    active=active,
                ))

    if editing is not None:
        with st.expander("Delete this child"):
            st.warning("Deletes the child from this device and the cloud. Daily logs are kept.")
            confirm = st.checkbox("I understand", key="confirm_delete_child")
            if st.button("Delete child", disabled=not confirm):
                if safe_execute(store.delete_child, editing.id, confirm=True,
                                error_message="Could not delete child") is not None:
                    st.rerun()

# ============================================================================
# PARENTS
# ============================================================================
with tab_parents:
    editing_parent = st.selectbox(
        "Edit parent", [None] + parents,
        format_func=lambda p: "➕ New parent" if p is None else p.full_name,
    )
    parent = editing_parent or Parent()
    relationships = [r.value for r in Relationship]
    languages = [lang.value for lang in Language]

    with st.form("parent_form"):
        c1, c2 = st.columns(2)
        full_name = c1.text_input("Full name", value=parent.full_name)
        email = c2.text_input("Email", value=parent.email)
        c3, c4, c5 = st.columns(3)
        phone = c3.text_input("Phone", value=parent.phone)
        relationship = c4.selectbox(
            "Relationship", relationships,
            index=relationships.index(parent.relationship) if parent.relationship in relationships else 0,
        )
        language = c5.selectbox(
            "Preferred language", languages,
            index=languages.index(parent.preferred_language) if parent.preferred_language in languages else 0,
        )
        receives = st.checkbox("Receives daily report emails", value=parent.receives_email)
        if st.form_submit_button("Save parent"):
            if email and "@" not in email:
                st.error("Please enter a valid email address")
            else:
                with ErrorContext("Saving parent", show_success=True, success_message="Parent saved"):
                    store.save_parent(Parent(
                        id=parent.id,
                        full_name=full_name.strip(),
                        email=email.strip(),
                        phone=phone.strip(),
                        relationship=relationship,
                        preferred_language=language,
                        receives_email=receives,
                    ))

    if editing_parent is not None:
        with st.expander("Delete this parent"):
            confirm = st.checkbox("I understand", key="confirm_delete_parent")
            if st.button("Delete parent", disabled=not confirm):
                if safe_execute(store.delete_parent, editing_parent.id, confirm=True,
                                error_message="Could not delete parent") is not None:
                    st.rerun()
