# tests/test_utils.py
from models.project import Project
from models.subtask import Subtask
from models.task import Task, TaskStatus
from utils.progress import compute_project_progress, compute_task_progress


def test_compute_task_progress():
    task = Task(title="Tile", subtasks=[Subtask(title="a", is_done=True), Subtask(title="b"),
                                        Subtask(title="c", is_done=True), Subtask(title="d")])
    assert compute_task_progress(task) == 50.0


def test_compute_task_progress_without_subtasks_follows_status():
    assert compute_task_progress(Task(title="Paint")) == 0.0
    assert compute_task_progress(Task(title="Paint", status=TaskStatus.DONE)) == 100.0


def test_compute_project_progress():
    project = Project(name="P", tasks=[Task(title="a", status=TaskStatus.DONE), Task(title="b")])
    assert compute_project_progress(project) == 50.0
    assert compute_project_progress(Project(name="empty")) == 0.0
