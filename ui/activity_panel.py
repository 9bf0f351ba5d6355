# ui/activity_panel.py
import streamlit as st

from db import Session
from utils.due_dates import due_label
from utils.queries import activity_feed, build_dashboard


def _task_rows(title, items):
    if not items:
        return
    st.markdown(f"**{title}** ({len(items)})")
    for item in items:
        due = f" · {due_label(item.task.due_date)}" if item.task.due_date else ""
        progress = item.subtask_progress
        sub = f" · {progress[0]}/{progress[1]}" if progress else ""
        st.write(f"{item.task.title} — _{item.project.name}_{due}{sub}")


def render_activity_panel(session: Session):
    store = session.store
    board = build_dashboard(store.projects, session.user_id)

    st.subheader(f"Hi, {session.current_user.first_name}")
    c1, c2, c3 = st.columns(3)
    c1.metric("Pending", board.total_pending)
    c2.metric("Overdue", board.overdue_count)
    c3.metric("New", board.new_count)

    if board.total_pending == 0 and not board.new_tasks:
        st.info("All caught up 🎉")
    _task_rows("New tasks", board.new_tasks)
    _task_rows("Overdue", board.overdue)
    _task_rows("Today", board.today)
    _task_rows("This week", board.this_week)
    _task_rows("Later", board.later)
    _task_rows("Done recently", board.recently_done)

    st.markdown("---")
    st.markdown("**Activity**")
    for a in activity_feed(store.activities, session.user_id):
        st.markdown(f"{a.icon} :{a.icon_color}[{a.description}] · _{a.project_name}_ · {a.timestamp:%b %d %H:%M}")
