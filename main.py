# main.py

#============================================================#
#                           DONEO                            #
#------------------------------------------------------------#
# Purpose     : Task and chat board for small trade crews:   #
#               projects, tasks, subtasks, messages, files   #
#               and an activity dashboard (in-memory store)  #
#============================================================#

import streamlit as st

import db
from config import configure_logging, settings
from mock_data import ALL_USERS, load_mock_store
from ui.activity_panel import render_activity_panel
from ui.gantt_panel import render_gantt_panel
from ui.members_panel import render_members_panel
from ui.projects_panel import render_new_project, render_projects
from ui.tasks_panel import render_tasks_panel

st.set_page_config(page_title="DONEO", page_icon="✅", layout="wide")


@st.cache_resource
def _configure_once():
    configure_logging()
    return True


_configure_once()


@st.cache_resource
def _shared_store() -> db.MemoryStore:
    # one store per process, shared by every browser session
    return load_mock_store() if settings.load_mock_data else db.MemoryStore(users=ALL_USERS)


def _get_session() -> db.Session:
    if "session" not in st.session_state:
        st.session_state["session"] = db.get_session(_shared_store())
    return st.session_state["session"]


session = _get_session()

# ======================  PERSONA SWITCHER  ======================
with st.sidebar:
    st.markdown("### Acting as")
    users = session.store.users
    current = next(i for i, u in enumerate(users) if u.id == session.user_id)
    picked = st.selectbox("User", users, index=current, format_func=lambda u: u.name)
    if picked.id != session.user_id:
        session.switch_user(picked.id)
        st.session_state["selected_project_id"] = None
        st.rerun()

tab_activity, tab_projects = st.tabs(["Activity", "Projects"])

with tab_activity:
    render_activity_panel(session)

with tab_projects:
    project = render_projects(session)
    if project is not None and project.is_member(session.user_id):
        st.markdown(f"## {project.name}")
        if project.description:
            st.caption(project.description)
        t_tasks, t_members, t_due = st.tabs(["Tasks", "Members", "Due dates"])
        with t_tasks:
            render_tasks_panel(session, project)
        with t_members:
            render_members_panel(project)
        with t_due:
            render_gantt_panel(project)
    st.markdown("---")
    render_new_project(session)
