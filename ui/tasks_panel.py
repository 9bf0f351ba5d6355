# ui/tasks_panel.py
import streamlit as st
from datetime import date, datetime, time

import db
from db import Session
from errors import PreconditionFailed
from models.attachment import AttachmentCategory, AttachmentType
from models.message import QUICK_EMOJIS
from models.project import Project
from models.task import Task
from utils.due_dates import due_label
from utils.queries import new_tasks_for, pending_by_activity
from utils.unread import assignment_messages, latest_message, messages_for_task, unread_count


def _due_text(task: Task) -> str:
    if task.due_date is None:
        return ""
    marker = "🔴" if task.is_overdue() else ("🟠" if task.is_due_today() else "📅")
    return f"{marker} {due_label(task.due_date)}"


def render_new_tasks_inbox(session: Session, project: Project):
    inbox = new_tasks_for(project, session.user_id)
    if not inbox:
        return
    st.markdown(f"**🔔 New tasks ({len(inbox)})**")
    for t in inbox:
        creator = project.member(t.created_by) if t.created_by else None
        with st.expander(f"🆕 {t.title} {_due_text(t)}"):
            if creator:
                st.caption(f"from {creator.first_name}")
            if t.notes:
                st.text(t.notes)
            for m in assignment_messages(project, t):
                st.caption(f"{m.sender.first_name}: {m.content}")
            comment = st.text_input("Comment (optional)", key=f"accept_c_{t.id}")
            if st.button("Accept", key=f"accept_{t.id}"):
                db.accept_task(session, project, t, comment or None)
                st.rerun()


def render_add_task(session: Session, project: Project):
    with st.form(f"new_task_{project.id}", clear_on_submit=True):
        t_title = st.text_input("Task title")
        t_assignees = st.multiselect("Assign to", project.members, format_func=lambda u: u.name)
        has_due = st.checkbox("Has due date", value=False)
        t_due = st.date_input("Due", value=date.today())
        t_location = st.text_input("Site / area")
        t_address = st.text_input("Address")
        t_notes = st.text_area("Notes")
        submit_task = st.form_submit_button("Add task")
    if submit_task and t_title.strip():
        db.create_task(
            session, project, t_title,
            assignee_ids=[u.id for u in t_assignees],
            due_date=datetime.combine(t_due, time(17, 0)) if has_due else None,
            notes=db.compose_task_notes(t_location, t_address, t_notes),
        )
        st.success("Task added")


def render_task_detail(session: Session, project: Project, task: Task):
    uid = session.user_id
    c1, c2 = st.columns([3, 1])
    label = "Reopen" if task.is_done else "Mark done"
    if c2.button(label, key=f"status_{task.id}"):
        db.toggle_task_status(session, project, task)
        st.rerun()
    if task.notes:
        c1.text(task.notes)

    done, total = task.subtask_progress
    if total:
        st.markdown(f"**Subtasks** {done}/{total}")
    for sub in task.sorted_subtasks():
        allowed = task.can_toggle_subtask(sub, uid)
        late = " ⚠️" if sub.is_overdue() else ""
        checked = st.checkbox(f"{sub.title}{late}", value=sub.is_done, key=f"sub_{sub.id}", disabled=not allowed)
        if allowed and checked != sub.is_done:
            db.toggle_subtask(session, project, task, sub)
            st.rerun()
    new_sub = st.text_input("Add subtask", key=f"new_sub_{task.id}")
    if st.button("Add", key=f"add_sub_{task.id}") and new_sub.strip():
        db.add_subtask(session, project, task, new_sub)
        st.rerun()

    for category, heading in ((AttachmentCategory.REFERENCE, "Instructions"), (AttachmentCategory.WORK, "Work")):
        files = task.attachments_in(category)
        if files:
            st.markdown(f"**{heading}**")
            for a in files:
                st.write(f"📎 {a.file_name} · {a.size_label}")

    st.markdown("**Conversation**")
    for m in messages_for_task(project, task):
        ref = f" ↳ _{m.referenced_subtask.subtask_title}_" if m.referenced_subtask else ""
        quote = f"> {m.quoted_message.sender_name}: {m.quoted_message.content}\n\n" if m.quoted_message else ""
        st.markdown(f"{quote}**{m.sender.first_name}**{ref}: {m.content}")
        reactions = " ".join(f"{e} {len(users)}" for e, users in m.grouped_reactions.items())
        cols = st.columns(len(QUICK_EMOJIS) + 1)
        cols[0].caption(reactions)
        for i, emoji in enumerate(QUICK_EMOJIS):
            if cols[i + 1].button(emoji, key=f"react_{m.id}_{i}"):
                db.toggle_reaction(session, project, m, emoji)
                st.rerun()
    if unread_count(project, task, uid) and st.button("Mark as read", key=f"read_{task.id}"):
        db.mark_messages_read(session, project, task)
        st.rerun()

    # only the creator and assignees may attach files
    can_upload = task.category_for_uploader(uid) is not None
    if not can_upload:
        st.caption("Only the task creator and assignees can attach files.")

    with st.form(f"msg_{task.id}", clear_on_submit=True):
        text = st.text_input("Message")
        sub_choice = st.selectbox("About subtask", [None] + task.subtasks,
                                  format_func=lambda s: "—" if s is None else s.title)
        upload = st.file_uploader("Attach file", key=f"up_{task.id}") if can_upload else None
        sent = st.form_submit_button("Send")
    if sent and (text.strip() or upload is not None):
        if upload is not None:
            kind = AttachmentType.IMAGE if (upload.type or "").startswith("image/") else AttachmentType.DOCUMENT
            try:
                db.add_task_attachment(session, project, task, kind, upload.name, upload.size)
            except PreconditionFailed as e:
                st.warning(str(e))
                return
        if text.strip():
            db.send_message(session, project, text, task=task, subtask=sub_choice)
        st.rerun()


def render_tasks_panel(session: Session, project: Project):
    st.subheader("Tasks")
    uid = session.user_id
    render_new_tasks_inbox(session, project)

    for t in pending_by_activity(project):
        unread = unread_count(project, t, uid)
        done, total = t.subtask_progress
        progress = f" · {done}/{total}" if total else ""
        badge = f" · 🔵 {unread}" if unread else ""
        with st.expander(f"⭕ {t.title}{progress}{badge} {_due_text(t)}"):
            latest = latest_message(project, t)
            if latest:
                st.caption(f"{latest.sender.first_name}: {latest.content}")
            render_task_detail(session, project, t)

    if project.completed_tasks:
        st.markdown("**Completed**")
        for t in project.completed_tasks:
            with st.expander(f"✅ {t.title}"):
                render_task_detail(session, project, t)

    render_add_task(session, project)
