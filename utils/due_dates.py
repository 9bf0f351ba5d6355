# utils/due_dates.py
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple

from config import settings
from models.task import Task


class DueBucket(str, Enum):
    OVERDUE = "overdue"
    TODAY = "today"
    THIS_WEEK = "this_week"
    LATER = "later"


BUCKET_LABELS = {
    DueBucket.OVERDUE: "Overdue",
    DueBucket.TODAY: "Today",
    DueBucket.THIS_WEEK: "This week",
    DueBucket.LATER: "Later",
}


def classify(task: Task, now: Optional[datetime] = None, week_days: Optional[int] = None) -> DueBucket:
    now = now or datetime.now()
    if task.is_overdue(now):
        return DueBucket.OVERDUE
    if task.is_due_today(now):
        return DueBucket.TODAY
    if task.due_date is None:
        return DueBucket.LATER
    today = now.date()
    horizon = today + timedelta(days=week_days if week_days is not None else settings.week_window_days)
    if today < task.due_date.date() <= horizon:
        return DueBucket.THIS_WEEK
    return DueBucket.LATER


def due_sort_key(task: Task) -> Tuple[bool, Optional[datetime]]:
    # no due date sorts last
    return task.due_date is None, task.due_date


def bucket_tasks(tasks: Iterable[Task], now: Optional[datetime] = None) -> Dict[DueBucket, List[Task]]:
    buckets: Dict[DueBucket, List[Task]] = {b: [] for b in DueBucket}
    for t in sorted(tasks, key=due_sort_key):
        buckets[classify(t, now)].append(t)
    return buckets


def due_label(due: datetime, now: Optional[datetime] = None) -> str:
    today = (now or datetime.now()).date()
    delta = (due.date() - today).days
    if delta == 0:
        return "Today"
    if delta == 1:
        return "Tomorrow"
    if delta == -1:
        return "Yesterday"
    return due.strftime("%b %d")
