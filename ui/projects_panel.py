# ui/projects_panel.py

import streamlit as st

import db
from db import Session
from utils.progress import compute_project_progress
from utils.queries import projects_for_user
from utils.unread import unread_message_count

__all__ = ["render_projects", "render_new_project"]


def render_projects(session: Session):
    """Searchable list of the user's projects; returns the selected project or None."""
    st.subheader("Projects")
    uid = session.user_id
    search = st.text_input("Search projects", key="project_search")
    projects = db.search_projects(projects_for_user(session.store.projects, uid), search)

    if not projects:
        st.info("No projects yet. Create your first one below." if not search else "No matches.")
        return None

    for p in projects:
        unread = len(p.unread_tasks_for(uid))
        badge = f" 🔴 {unread}" if unread else ""
        chat = unread_message_count(p, uid)
        badge += f" · 💬 {chat}" if chat else ""
        c1, c2 = st.columns([4, 1])
        c1.markdown(f"**{p.name}**{badge}  \n{p.last_activity_preview or ''}")
        c1.progress(int(compute_project_progress(p)))
        if c2.button("Open", key=f"open_{p.id}"):
            st.session_state["selected_project_id"] = p.id

    selected = st.session_state.get("selected_project_id")
    return session.store.get_project(selected) if selected else None


def render_new_project(session: Session):
    st.subheader("New Project")
    others = [u for u in session.store.users if u.id != session.user_id]

    with st.form("new_project", clear_on_submit=True):
        p_name = st.text_input("Project name", placeholder="Kitchen Renovation")
        p_desc = st.text_area("Description", placeholder="Short project description…")
        picked = st.multiselect("Crew", others, format_func=lambda u: u.name)
        submitted = st.form_submit_button("Create project")

    if submitted and p_name.strip():
        project = db.create_project(session, p_name, p_desc, [u.id for u in picked])
        st.session_state["selected_project_id"] = project.id
        st.success(f"Created {project.name}")
