# tests/test_queries.py
from datetime import timedelta

import db
from models.attachment import AttachmentType
from models.subtask import Subtask
from utils.queries import (
    activity_feed, attachment_counts, build_dashboard, group_attachments, my_pending_tasks,
    new_task_items, new_tasks_for, pending_by_activity, projects_for_user, recently_completed,
)


def test_new_tasks_scenario(project, as_user, crew, now):
    alex = crew["alex"]
    task = db.create_task(as_user("maria"), project, "Paint", [alex.id], now=now)
    assert new_tasks_for(project, alex.id) == [task]

    db.accept_task(as_user("alex"), project, task, now=now)

    assert new_tasks_for(project, alex.id) == []
    assert new_task_items([project], alex.id) == []


def test_dashboard_buckets_only_acknowledged_pending(project, as_user, crew, now):
    maria, alex = as_user("maria"), as_user("alex")
    uid = crew["alex"].id
    overdue = db.create_task(maria, project, "Invoice", [uid], due_date=now - timedelta(days=1), now=now)
    today = db.create_task(maria, project, "Inspect", [uid], due_date=now.replace(hour=17), now=now)
    week = db.create_task(maria, project, "Paint", [uid], due_date=now + timedelta(days=3), now=now)
    later = db.create_task(maria, project, "Roof", [uid], now=now)
    unaccepted = db.create_task(maria, project, "New one", [uid], due_date=now, now=now)
    for t in (overdue, today, week, later):
        db.accept_task(alex, project, t, now=now)

    board = build_dashboard([project], uid, now)

    assert [i.task for i in board.overdue] == [overdue]
    assert [i.task for i in board.today] == [today]
    assert [i.task for i in board.this_week] == [week]
    assert [i.task for i in board.later] == [later]
    assert [i.task for i in board.new_tasks] == [unaccepted]
    assert board.total_pending == 4
    assert board.overdue_count == 1
    assert overdue not in [i.task for i in board.today]


def test_my_pending_tasks_overdue_first_then_due(project, as_user, crew, now):
    maria = as_user("maria")
    uid = crew["alex"].id
    undated = db.create_task(maria, project, "Undated", [uid], now=now)
    soon = db.create_task(maria, project, "Soon", [uid], due_date=now + timedelta(days=1), now=now)
    late = db.create_task(maria, project, "Late", [uid], due_date=now - timedelta(days=2), now=now)
    for t in (undated, soon, late):
        t.acknowledged_by.add(uid)
    assert [i.task.title for i in my_pending_tasks([project], uid, now)] == ["Late", "Soon", "Undated"]


def test_recently_completed_window(project, as_user, crew, now):
    maria = as_user("maria")
    uid = crew["alex"].id
    fresh = db.create_task(maria, project, "Fresh", [uid], now=now)
    stale = db.create_task(maria, project, "Stale", [uid], now=now)
    db.toggle_task_status(maria, project, fresh, now=now - timedelta(days=2))
    db.toggle_task_status(maria, project, stale, now=now - timedelta(days=9))

    titles = [i.task.title for i in recently_completed([project], uid, now, days=7)]
    assert titles == ["Fresh"]


def test_activity_feed_excludes_viewer_and_sorts_newest_first(store, project, as_user, crew, now):
    maria, alex = as_user("maria"), as_user("alex")
    db.send_message(maria, project, "first", now=now - timedelta(hours=3))
    db.send_message(alex, project, "mine", now=now - timedelta(hours=2))
    task = db.create_task(maria, project, "Paint", now=now - timedelta(hours=4))
    db.toggle_task_status(as_user("diego"), project, task, now=now - timedelta(hours=1))

    feed = activity_feed(store.activities, crew["alex"].id)

    assert all(a.actor_id != crew["alex"].id for a in feed)
    stamps = [a.timestamp for a in feed]
    assert stamps == sorted(stamps, reverse=True)
    assert feed[0].description == "Diego completed: Paint"


def test_pending_by_activity_uses_latest_message(project, as_user, now):
    maria = as_user("maria")
    quiet = db.create_task(maria, project, "Quiet", now=now - timedelta(days=1))
    busy = db.create_task(maria, project, "Busy", now=now - timedelta(days=2))
    step = Subtask(title="step")
    busy.subtasks.append(step)
    db.send_message(maria, project, "news", subtask=step, now=now)
    assert [t.title for t in pending_by_activity(project)] == ["Busy", "Quiet"]


def test_group_attachments_general_and_tombstoned(project, as_user, now):
    maria = as_user("maria")
    kept = db.create_task(maria, project, "Kitchen", now=now)
    gone = db.create_task(maria, project, "Bathroom", now=now)
    db.add_project_attachments(maria, project, [(AttachmentType.IMAGE, "site.jpg", 1)])
    db.add_project_attachments(maria, project, [(AttachmentType.DOCUMENT, "k.pdf", 1)], task=kept)
    db.add_project_attachments(maria, project, [(AttachmentType.VIDEO, "b.mov", 1)], task=gone)
    db.delete_task(maria, project, gone, now=now)

    groups = dict(group_attachments(project))

    assert [a.file_name for a in groups["General"]] == ["site.jpg"]
    assert [a.file_name for a in groups["Kitchen"]] == ["k.pdf"]
    assert [a.file_name for a in groups["Bathroom (deleted)"]] == ["b.mov"]
    counts = attachment_counts(project)
    assert counts[AttachmentType.IMAGE] == 1 and counts[AttachmentType.CONTACT] == 0


def test_projects_for_user(store, project, crew):
    assert projects_for_user(store.projects, crew["alex"].id) == [project]
    assert projects_for_user(store.projects, crew["sara"].id) == []
