# utils/queries.py
"""Read-side views for the dashboard and the project screens.

Everything is recomputed from the projects on each call; nothing is cached.
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple
from uuid import UUID

from config import settings
from models.activity import Activity
from models.attachment import AttachmentType, LinkedTo, ProjectAttachment
from models.project import Project
from models.task import Task, TaskStatus, TaskTombstone
from utils.due_dates import DueBucket, classify, due_sort_key
from utils.unread import last_activity_date


@dataclass
class TaskItem:
    task: Task
    project: Project

    @property
    def id(self) -> UUID:
        return self.task.id

    @property
    def subtask_progress(self) -> Optional[Tuple[int, int]]:
        done, total = self.task.subtask_progress
        return (done, total) if total else None


@dataclass
class Dashboard:
    overdue: List[TaskItem] = field(default_factory=list)
    today: List[TaskItem] = field(default_factory=list)
    this_week: List[TaskItem] = field(default_factory=list)
    later: List[TaskItem] = field(default_factory=list)
    recently_done: List[TaskItem] = field(default_factory=list)
    new_tasks: List[TaskItem] = field(default_factory=list)

    @property
    def pending(self) -> List[TaskItem]:
        return self.overdue + self.today + self.this_week + self.later

    @property
    def total_pending(self) -> int:
        return len(self.pending)

    @property
    def overdue_count(self) -> int:
        return len(self.overdue)

    @property
    def new_count(self) -> int:
        return len(self.new_tasks)


# ---- dashboard ----
def my_pending_tasks(projects: Iterable[Project], user_id: UUID,
                     now: Optional[datetime] = None) -> List[TaskItem]:
    """Pending, acknowledged tasks assigned to the user; overdue first, then by due date."""
    now = now or datetime.now()
    items = [
        TaskItem(task=t, project=p)
        for p in projects
        for t in p.tasks
        if t.status == TaskStatus.PENDING and t.is_assigned_to(user_id) and t.is_acknowledged_by(user_id)
    ]
    return sorted(items, key=lambda i: (not i.task.is_overdue(now), due_sort_key(i.task)))


def recently_completed(projects: Iterable[Project], user_id: UUID, now: Optional[datetime] = None,
                       days: Optional[int] = None) -> List[TaskItem]:
    now = now or datetime.now()
    since = now - timedelta(days=days if days is not None else settings.recent_done_days)
    items = [
        TaskItem(task=t, project=p)
        for p in projects
        for t in p.tasks
        if t.status == TaskStatus.DONE and t.is_assigned_to(user_id) and t.updated_at >= since
    ]
    return sorted(items, key=lambda i: i.task.updated_at, reverse=True)


def new_tasks_for(project: Project, user_id: UUID) -> List[Task]:
    return [t for t in project.tasks if t.is_new_for(user_id)]


def new_task_items(projects: Iterable[Project], user_id: UUID) -> List[TaskItem]:
    items = [TaskItem(task=t, project=p) for p in projects for t in new_tasks_for(p, user_id)]
    return sorted(items, key=lambda i: i.task.created_at, reverse=True)


def build_dashboard(projects: Iterable[Project], user_id: UUID,
                    now: Optional[datetime] = None) -> Dashboard:
    now = now or datetime.now()
    projects = list(projects)
    board = Dashboard(
        recently_done=recently_completed(projects, user_id, now),
        new_tasks=new_task_items(projects, user_id),
    )
    for item in my_pending_tasks(projects, user_id, now):
        bucket = classify(item.task, now)
        if bucket == DueBucket.OVERDUE:
            board.overdue.append(item)
        elif bucket == DueBucket.TODAY:
            board.today.append(item)
        elif bucket == DueBucket.THIS_WEEK:
            board.this_week.append(item)
        else:
            board.later.append(item)
    return board


def activity_feed(activities: Iterable[Activity], viewer_id: UUID) -> List[Activity]:
    """Everyone else's events, newest first."""
    feed = [a for a in activities if a.actor_id != viewer_id]
    return sorted(feed, key=lambda a: a.timestamp, reverse=True)


# ---- per project ----
def projects_for_user(projects: Iterable[Project], user_id: UUID) -> List[Project]:
    return [p for p in projects if p.is_member(user_id)]


def pending_by_activity(project: Project) -> List[Task]:
    return sorted(project.pending_tasks, key=lambda t: last_activity_date(project, t), reverse=True)


def group_attachments(project: Project,
                      attachments: Optional[Iterable[ProjectAttachment]] = None) -> List[Tuple[str, List[ProjectAttachment]]]:
    """Groups media by linked task. Unlinked files go under "General"; deleted tasks keep their last title."""
    groups: Dict[Optional[UUID], List[ProjectAttachment]] = {}
    for a in project.attachments if attachments is None else attachments:
        key = a.link.task_id if isinstance(a.link, LinkedTo) else None
        groups.setdefault(key, []).append(a)

    out: List[Tuple[str, List[ProjectAttachment]]] = []
    if None in groups:
        out.append(("General", groups.pop(None)))
    for task_id, items in groups.items():
        resolved = project.resolve_task(task_id)
        if isinstance(resolved, TaskTombstone):
            label = f"{resolved.title} (deleted)"
        elif resolved is not None:
            label = resolved.title
        else:
            label = "Unknown task"
        out.append((label, items))
    return out


def attachment_counts(project: Project) -> Dict[AttachmentType, int]:
    counts = {kind: 0 for kind in AttachmentType}
    for a in project.attachments:
        counts[a.type] += 1
    return counts
