# tests/test_task_model.py
from datetime import timedelta
from uuid import uuid4

import pytest

from models.subtask import Subtask
from models.task import Task, TaskStatus
from models.user import User


def test_no_due_date_is_never_overdue_or_due_today(now):
    task = Task(title="Order tile")
    assert not task.is_overdue(now)
    assert not task.is_due_today(now)


def test_yesterday_pending_is_overdue_not_due_today(now):
    task = Task(title="Send invoice", due_date=now - timedelta(days=1))
    assert task.is_overdue(now)
    assert not task.is_due_today(now)


def test_overdue_uses_calendar_days(now):
    earlier_today = now.replace(hour=6)
    task = Task(title="Call inspector", due_date=earlier_today)
    assert not task.is_overdue(now)
    assert task.is_due_today(now)


def test_done_task_is_not_overdue(now):
    task = Task(title="Fix door", status=TaskStatus.DONE, due_date=now - timedelta(days=3))
    assert not task.is_overdue(now)


def test_toggle_status_flips_and_touches(now):
    task = Task(title="Paint")
    assert task.toggle_status(now) == TaskStatus.DONE
    assert task.last_activity == now
    assert task.toggle_status(now) == TaskStatus.PENDING


@pytest.mark.parametrize("acknowledged", [set(), {uuid4()}])
def test_non_assignee_always_acknowledged(acknowledged):
    outsider = uuid4()
    task = Task(title="Paint", assignees={uuid4()}, acknowledged_by=acknowledged)
    assert task.is_acknowledged_by(outsider)
    assert not task.is_new_for(outsider)


def test_task_without_assignees_is_never_new():
    task = Task(title="Sweep")
    assert not task.is_new_for(uuid4())


def test_acknowledge_clears_new(now):
    user = uuid4()
    task = Task(title="Paint", assignees={user})
    assert task.is_new_for(user)
    task.acknowledge(user, now)
    assert not task.is_new_for(user)
    assert task.is_acknowledged_by(user)


def test_subtask_progress_round_trip():
    subs = [Subtask(title=f"step {i}") for i in range(4)]
    task = Task(title="Kitchen", subtasks=subs)
    assert task.subtask_progress == (0, 4)
    for s in subs:
        s.is_done = True
    assert task.subtask_progress == (4, 4)


def test_sorted_subtasks_pending_first():
    done = Subtask(title="done", is_done=True)
    open_ = Subtask(title="open")
    task = Task(title="t", subtasks=[done, open_])
    assert task.sorted_subtasks() == [open_, done]


def test_can_toggle_subtask_rules():
    creator, assignee, helper, outsider = uuid4(), uuid4(), uuid4(), uuid4()
    assigned = Subtask(title="a", assignees={helper})
    unassigned = Subtask(title="b")
    task = Task(title="t", created_by=creator, assignees={assignee}, subtasks=[assigned, unassigned])

    assert task.can_toggle_subtask(assigned, creator)
    assert task.can_toggle_subtask(assigned, helper)
    assert not task.can_toggle_subtask(assigned, assignee)
    assert task.can_toggle_subtask(unassigned, assignee)
    assert not task.can_toggle_subtask(unassigned, outsider)


def test_user_is_immutable():
    user = User(name="Maria Garcia")
    assert user.first_name == "Maria"
    assert user.initials == "MG"
    with pytest.raises(Exception):
        user.name = "Someone Else"
