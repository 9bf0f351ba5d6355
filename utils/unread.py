# utils/unread.py
"""Message relevance and unread tracking.

A message is relevant to a task when it references the task itself or one
of the task's current subtasks. Every function here rescans the project's
message list.
"""
from datetime import datetime
from typing import List, Optional, Set
from uuid import UUID

from models.message import Message
from models.project import Project
from models.task import Task


def is_relevant(message: Message, task: Task) -> bool:
    return message.references_any(task.id, task.subtask_ids)


def relevant_task_ids(project: Project, message: Message) -> Set[UUID]:
    return {t.id for t in project.tasks if is_relevant(message, t)}


def messages_for_task(project: Project, task: Task) -> List[Message]:
    """The task's whole thread, task- and subtask-level, oldest first."""
    subtask_ids = task.subtask_ids
    msgs = [m for m in project.messages if m.references_any(task.id, subtask_ids)]
    return sorted(msgs, key=lambda m: m.timestamp)


def assignment_messages(project: Project, task: Task) -> List[Message]:
    return [
        m for m in project.messages
        if m.referenced_task is not None and m.referenced_task.task_id == task.id
    ]


def unread_count(project: Project, task: Task, user_id: UUID) -> int:
    subtask_ids = task.subtask_ids
    return sum(
        1 for m in project.messages
        if m.references_any(task.id, subtask_ids) and not m.is_read(user_id)
    )


def has_unread(project: Project, task: Task, user_id: UUID) -> bool:
    return unread_count(project, task, user_id) > 0


def unread_message_count(project: Project, user_id: UUID) -> int:
    return sum(1 for m in project.messages if not m.is_read(user_id))


def latest_message(project: Project, task: Task) -> Optional[Message]:
    thread = messages_for_task(project, task)
    return thread[-1] if thread else None


def last_activity_date(project: Project, task: Task) -> datetime:
    latest = latest_message(project, task)
    if latest is None:
        return task.updated_at
    return max(latest.timestamp, task.updated_at)


def recompute_unread_task_ids(project: Project, user_id: UUID) -> Set[UUID]:
    """Rebuild the user's task badges from message-level read state.

    Drops the user's key entirely when nothing is unread.
    """
    unread = {t.id for t in project.tasks if has_unread(project, t, user_id)}
    if unread:
        project.unread_task_ids[user_id] = unread
    else:
        project.unread_task_ids.pop(user_id, None)
    return unread
