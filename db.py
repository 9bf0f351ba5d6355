# db.py
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
from uuid import UUID

from errors import NotFoundError, PreconditionFailed
from models.activity import Activity, ActivityType
from models.attachment import Attachment, AttachmentType, LinkedTo, ProjectAttachment, Unlinked
from models.message import Message, QuotedMessage, SubtaskReference, TaskReference
from models.project import Project
from models.subtask import Subtask
from models.task import Task, TaskStatus, TaskTombstone
from models.user import User
from utils.unread import recompute_unread_task_ids, relevant_task_ids

logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 80


# ---- Store / Session ----
class MemoryStore:
    """Process-lifetime store for users, projects and the activity log.

    Mutations on one project are serialized through a per-project lock;
    readers never lock.
    """

    def __init__(self, users: Iterable[User] = (), projects: Iterable[Project] = (),
                 activities: Iterable[Activity] = ()):
        self.users: List[User] = list(users)
        self.projects: List[Project] = list(projects)
        self.activities: List[Activity] = list(activities)
        self._locks: Dict[UUID, threading.RLock] = {}
        self._locks_guard = threading.Lock()

    def lock(self, project_id: UUID) -> threading.RLock:
        with self._locks_guard:
            return self._locks.setdefault(project_id, threading.RLock())

    def get_user(self, user_id: UUID) -> Optional[User]:
        return next((u for u in self.users if u.id == user_id), None)

    def get_project(self, project_id: UUID) -> Optional[Project]:
        return next((p for p in self.projects if p.id == project_id), None)

    def add_activity(self, activity: Activity) -> None:
        self.activities.insert(0, activity)


@dataclass
class Session:
    """Who is acting, against which store. Passed to every mutation."""
    store: MemoryStore
    current_user: User

    @property
    def user_id(self) -> UUID:
        return self.current_user.id

    def switch_user(self, user_id: UUID) -> User:
        user = self.store.get_user(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        logger.info("Switching current user to %s", user.name)
        self.current_user = user
        return user


def get_session(store: MemoryStore, user_id: Optional[UUID] = None) -> Session:
    if user_id is None:
        if not store.users:
            raise NotFoundError("Store has no users")
        return Session(store=store, current_user=store.users[0])
    user = store.get_user(user_id)
    if user is None:
        raise NotFoundError(f"User {user_id} not found")
    return Session(store=store, current_user=user)


# ---- helpers ----
def _now(now: Optional[datetime]) -> datetime:
    return now or datetime.now()


def _preview(text: str) -> str:
    text = " ".join(text.split())
    return text if len(text) <= PREVIEW_LENGTH else text[:PREVIEW_LENGTH - 1] + "…"


def _require_task(project: Project, task: Task) -> None:
    if not project.owns(task):
        logger.warning("Task %s is not part of project %s", task.id, project.name)
        raise PreconditionFailed(f"Task '{task.title}' does not belong to project '{project.name}'")


def _require_subtask(task: Task, subtask: Subtask) -> None:
    if not any(s is subtask for s in task.subtasks):
        raise PreconditionFailed(f"Subtask '{subtask.title}' does not belong to task '{task.title}'")


def _owning_task(project: Project, subtask: Subtask) -> Task:
    owner = next((t for t in project.tasks if any(s is subtask for s in t.subtasks)), None)
    if owner is None:
        logger.warning("Subtask %s is not part of project %s", subtask.id, project.name)
        raise NotFoundError(f"Subtask '{subtask.title}' is not in project '{project.name}'")
    return owner


def _require_title(title: str) -> str:
    title = (title or "").strip()
    if not title:
        raise PreconditionFailed("Title must not be empty")
    return title


def _record(session: Session, type_: ActivityType, project: Project, task: Optional[Task] = None,
            message_preview: Optional[str] = None, now: Optional[datetime] = None) -> Activity:
    activity = Activity(
        type=type_,
        timestamp=_now(now),
        actor_id=session.current_user.id,
        actor_name=session.current_user.name,
        project_id=project.id,
        project_name=project.name,
        task_id=task.id if task else None,
        task_title=task.title if task else None,
        message_preview=message_preview,
    )
    session.store.add_activity(activity)
    return activity


def compose_task_notes(location: Optional[str] = None, address: Optional[str] = None,
                       notes: Optional[str] = None) -> Optional[str]:
    """Joins the optional site context, address and free text into one notes block."""
    parts = []
    if location and location.strip():
        parts.append(f"🏢 {location.strip()}")
    if address and address.strip():
        parts.append(f"📍 {address.strip()}")
    if notes and notes.strip():
        parts.append(notes.strip())
    return "\n\n".join(parts) if parts else None


# ---- projects ----
def create_project(session: Session, name: str, description: Optional[str] = None,
                   member_ids: Sequence[UUID] = (), now: Optional[datetime] = None) -> Project:
    name = _require_title(name)
    members = [session.current_user]
    for uid in member_ids:
        user = session.store.get_user(uid)
        if user is None:
            raise NotFoundError(f"User {uid} not found")
        if all(m.id != user.id for m in members):
            members.append(user)
    stamp = _now(now)
    project = Project(name=name, description=(description or "").strip() or None,
                      members=members, created_at=stamp)
    project.touch(preview="Project created", now=stamp)
    session.store.projects.append(project)
    logger.info("Created project %s with %d members", project.name, len(members))
    return project


def add_member(session: Session, project: Project, user_id: UUID) -> User:
    user = session.store.get_user(user_id)
    if user is None:
        raise NotFoundError(f"User {user_id} not found")
    with session.store.lock(project.id):
        if not project.is_member(user.id):
            project.members.append(user)
            # older task threads are unread for the newcomer
            recompute_unread_task_ids(project, user.id)
    return user


def search_projects(projects: Iterable[Project], text: str = "") -> List[Project]:
    """Case-insensitive name/description match, most recently active first."""
    needle = (text or "").strip().lower()
    hits = [
        p for p in projects
        if not needle or needle in p.name.lower() or needle in (p.description or "").lower()
    ]
    return sorted(hits, key=lambda p: p.sort_key, reverse=True)


# ---- tasks ----
def create_task(session: Session, project: Project, title: str, assignee_ids: Iterable[UUID] = (),
                due_date: Optional[datetime] = None, notes: Optional[str] = None,
                subtasks: Iterable[Subtask] = (), attachments: Iterable[Tuple[AttachmentType, str, int]] = (),
                now: Optional[datetime] = None) -> Task:
    title = _require_title(title)
    stamp = _now(now)
    uid = session.user_id
    task = Task(
        title=title,
        assignees=set(assignee_ids),
        created_by=uid,
        created_at=stamp,
        last_activity=stamp,
        due_date=due_date,
        notes=notes,
        subtasks=list(subtasks),
        attachments=[
            Attachment(type=kind, file_name=file_name, file_size=size, uploaded_by=uid, created_at=stamp)
            for kind, file_name, size in attachments
        ],
    )
    with session.store.lock(project.id):
        project.tasks.append(task)
        project.touch(preview=f"New task: {task.title}", now=stamp)
    _record(session, ActivityType.TASK_CREATED, project, task, now=stamp)
    if task.assignees:
        _record(session, ActivityType.TASK_ASSIGNED, project, task, now=stamp)
    logger.info("Task %s created in %s (%d assignees)", task.title, project.name, len(task.assignees))
    return task


def rename_task(session: Session, project: Project, task: Task, title: str,
                now: Optional[datetime] = None) -> Task:
    """Message references keep the title they were created with."""
    _require_task(project, task)
    with session.store.lock(project.id):
        task.title = _require_title(title)
        task.touch(now)
    return task


def toggle_task_status(session: Session, project: Project, task: Task,
                       now: Optional[datetime] = None) -> TaskStatus:
    _require_task(project, task)
    stamp = _now(now)
    with session.store.lock(project.id):
        status = task.toggle_status(stamp)
        if status == TaskStatus.DONE:
            project.touch(preview=f"Completed: {task.title}", now=stamp)
        else:
            project.touch(now=stamp)
    kind = ActivityType.TASK_COMPLETED if status == TaskStatus.DONE else ActivityType.TASK_REOPENED
    _record(session, kind, project, task, now=stamp)
    logger.info("Task %s is now %s", task.title, status.value)
    return status


def accept_task(session: Session, project: Project, task: Task, comment: Optional[str] = None,
                now: Optional[datetime] = None) -> Optional[Message]:
    """Acknowledge the task for the current user; a non-blank comment is posted to its thread."""
    _require_task(project, task)
    stamp = _now(now)
    with session.store.lock(project.id):
        task.acknowledge(session.user_id, stamp)
    logger.info("%s accepted task %s", session.current_user.name, task.title)
    if comment and comment.strip():
        return send_message(session, project, comment, task=task, now=stamp)
    return None


def delete_task(session: Session, project: Project, task: Task,
                now: Optional[datetime] = None) -> TaskTombstone:
    """Removes the task but keeps a tombstone so message references still resolve."""
    _require_task(project, task)
    tombstone = TaskTombstone(id=task.id, title=task.title, deleted_at=_now(now))
    with session.store.lock(project.id):
        project.tasks.remove(task)
        project.tombstones[task.id] = tombstone
        for user_id in list(project.unread_task_ids):
            ids = project.unread_task_ids[user_id]
            ids.discard(task.id)
            if not ids:
                del project.unread_task_ids[user_id]
    logger.info("Task %s tombstoned in %s", task.title, project.name)
    return tombstone


# ---- subtasks ----
def add_subtask(session: Session, project: Project, task: Task, title: str,
                description: Optional[str] = None, assignee_ids: Iterable[UUID] = (),
                due_date: Optional[datetime] = None, now: Optional[datetime] = None) -> Subtask:
    _require_task(project, task)
    subtask = Subtask(
        title=_require_title(title),
        description=description,
        assignees=set(assignee_ids),
        created_by=session.user_id,
        due_date=due_date,
    )
    with session.store.lock(project.id):
        task.subtasks.append(subtask)
        task.touch(now)
    return subtask


def toggle_subtask(session: Session, project: Project, task: Task, subtask: Subtask,
                   now: Optional[datetime] = None) -> bool:
    _require_task(project, task)
    _require_subtask(task, subtask)
    if not task.can_toggle_subtask(subtask, session.user_id):
        logger.warning("%s may not toggle subtask %s", session.current_user.name, subtask.title)
        raise PreconditionFailed(f"{session.current_user.name} cannot toggle '{subtask.title}'")
    with session.store.lock(project.id):
        subtask.is_done = not subtask.is_done
        task.touch(now)
    return subtask.is_done


# ---- messages ----
def send_message(session: Session, project: Project, content: str, task: Optional[Task] = None,
                 subtask: Optional[Subtask] = None, quote: Optional[Message] = None,
                 attachments: Iterable[Attachment] = (), now: Optional[datetime] = None) -> Message:
    content = (content or "").strip()
    attachments = list(attachments)
    if not content and not attachments:
        raise PreconditionFailed("Message must have content or attachments")
    if task is not None:
        _require_task(project, task)
    if subtask is not None:
        if task is None:
            task = _owning_task(project, subtask)
        else:
            _require_subtask(task, subtask)

    stamp = _now(now)
    sender = session.current_user
    message = Message(
        content=content,
        sender=sender,
        timestamp=stamp,
        referenced_task=TaskReference.of(task) if task is not None else None,
        referenced_subtask=SubtaskReference.of(subtask) if subtask is not None else None,
        quoted_message=QuotedMessage.of(quote) if quote is not None else None,
        attachments=attachments,
        read_by={sender.id},
    )
    with session.store.lock(project.id):
        project.messages.append(message)
        touched = relevant_task_ids(project, message)
        for t in project.tasks:
            if t.id in touched:
                t.touch(stamp)
        if touched:
            for member in project.members:
                if member.id != sender.id:
                    project.unread_task_ids.setdefault(member.id, set()).update(touched)
        project.touch(preview=f"{sender.first_name}: {_preview(content or 'Attachment')}", now=stamp)
    _record(session, ActivityType.MESSAGE_SENT, project, task, message_preview=_preview(content), now=stamp)
    logger.debug("Message %s sent to %s", message.id, project.name)
    return message


def mark_messages_read(session: Session, project: Project, task: Optional[Task] = None) -> int:
    """Marks the task's thread (or the whole project) read and recomputes the user's badges.

    Returns how many messages changed state.
    """
    if task is not None:
        _require_task(project, task)
    uid = session.user_id
    with session.store.lock(project.id):
        if task is None:
            targets = project.messages
        else:
            subtask_ids = task.subtask_ids
            targets = [m for m in project.messages if m.references_any(task.id, subtask_ids)]
        changed = sum(1 for m in targets if m.mark_read(uid))
        recompute_unread_task_ids(project, uid)
    return changed


def toggle_reaction(session: Session, project: Project, message: Message, emoji: str) -> bool:
    if project.get_message(message.id) is not message:
        raise PreconditionFailed("Message does not belong to this project")
    with session.store.lock(project.id):
        return message.toggle_reaction(emoji, session.user_id)


# ---- attachments ----
def add_task_attachment(session: Session, project: Project, task: Task, type_: AttachmentType,
                        file_name: str, file_size: int = 0, caption: Optional[str] = None,
                        subtask: Optional[Subtask] = None, now: Optional[datetime] = None) -> Attachment:
    """Creator uploads become reference material, assignee uploads become work."""
    _require_task(project, task)
    category = task.category_for_uploader(session.user_id)
    if category is None:
        logger.warning("%s is neither creator nor assignee of %s", session.current_user.name, task.title)
        raise PreconditionFailed(f"{session.current_user.name} cannot attach files to '{task.title}'")
    attachment = Attachment(type=type_, category=category, file_name=file_name, file_size=file_size,
                            uploaded_by=session.user_id, caption=caption, created_at=_now(now))
    with session.store.lock(project.id):
        if subtask is not None:
            _require_subtask(task, subtask)
            subtask.attachments.append(attachment)
        else:
            task.attachments.append(attachment)
        task.touch(now)
    return attachment


def add_project_attachments(session: Session, project: Project,
                            items: Iterable[Tuple[AttachmentType, str, int]],
                            task: Optional[Task] = None, subtask: Optional[Subtask] = None,
                            caption: Optional[str] = None,
                            now: Optional[datetime] = None) -> List[ProjectAttachment]:
    if task is not None:
        _require_task(project, task)
        if subtask is not None:
            _require_subtask(task, subtask)
        link = LinkedTo(task_id=task.id, subtask_id=subtask.id if subtask else None)
    else:
        link = Unlinked()
    stamp = _now(now)
    created = [
        ProjectAttachment(type=kind, file_name=file_name, file_size=size, uploaded_by=session.user_id,
                          caption=caption, link=link, created_at=stamp)
        for kind, file_name, size in items
    ]
    with session.store.lock(project.id):
        project.attachments.extend(created)
        if task is not None:
            task.touch(stamp)
        project.touch(now=stamp)
    return created
