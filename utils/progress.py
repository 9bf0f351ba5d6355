# utils/progress.py
from typing import Iterable

from models.project import Project
from models.task import Task


def compute_task_progress(task: Task) -> float:
    done, total = task.subtask_progress
    if total:
        return float(done / total * 100)
    return 100.0 if task.is_done else 0.0


def compute_project_progress(project: Project) -> float:
    return average_progress(project.tasks)


def average_progress(tasks: Iterable[Task]) -> float:
    vals = [compute_task_progress(t) for t in tasks]
    if not vals:
        return 0.0
    return float(sum(vals) / len(vals))
