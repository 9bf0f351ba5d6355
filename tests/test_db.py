# tests/test_db.py
from datetime import timedelta

import pytest

import db
from errors import NotFoundError, PreconditionFailed
from models.activity import ActivityType
from models.attachment import AttachmentCategory, AttachmentType, LinkedTo, Unlinked
from models.project import Project
from models.task import Task, TaskStatus, TaskTombstone


def test_get_session_defaults_to_first_user_and_switches(store, crew):
    session = db.get_session(store)
    assert session.current_user == crew["alex"]
    session.switch_user(crew["sara"].id)
    assert session.user_id == crew["sara"].id


def test_get_session_unknown_user(store):
    from uuid import uuid4
    with pytest.raises(NotFoundError):
        db.get_session(store, uuid4())


def test_create_project_always_includes_creator(project, crew):
    assert [u.name for u in project.members] == ["Maria Garcia", "Alex Martin", "Diego Lopez"]
    assert project.last_activity_preview == "Project created"


def test_create_project_requires_name(as_user):
    with pytest.raises(PreconditionFailed):
        db.create_project(as_user("maria"), "   ")


def test_search_projects(store, as_user, now):
    maria = as_user("maria")
    older = db.create_project(maria, "Bathroom remodel", now=now - timedelta(days=2))
    newer = db.create_project(maria, "Roof repair", "bathroom vent too", now=now)
    assert db.search_projects(store.projects, "BATHROOM") == [newer, older]
    assert db.search_projects(store.projects, "roof") == [newer]


def test_create_task_records_activities(store, project, as_user, crew, now):
    task = db.create_task(as_user("maria"), project, "Order tile", [crew["alex"].id], now=now)
    kinds = [a.type for a in store.activities if a.task_id == task.id]
    assert ActivityType.TASK_CREATED in kinds
    assert ActivityType.TASK_ASSIGNED in kinds
    assert project.last_activity_preview == "New task: Order tile"
    assert task.is_new_for(crew["alex"].id)


def test_toggle_task_status_records_completion_and_reopen(store, project, as_user, now):
    maria = as_user("maria")
    task = db.create_task(maria, project, "Order tile", now=now - timedelta(days=1))

    assert db.toggle_task_status(maria, project, task, now=now) == TaskStatus.DONE
    assert task.last_activity == now
    assert store.activities[0].type == ActivityType.TASK_COMPLETED
    assert project.last_activity_preview == "Completed: Order tile"

    assert db.toggle_task_status(maria, project, task, now=now) == TaskStatus.PENDING
    assert store.activities[0].type == ActivityType.TASK_REOPENED


def test_toggle_task_from_another_project_is_rejected(project, as_user):
    stray = Task(title="Not mine")
    with pytest.raises(PreconditionFailed):
        db.toggle_task_status(as_user("maria"), project, stray)
    mine = db.create_task(as_user("maria"), project, "Mine")
    with pytest.raises(PreconditionFailed):
        db.toggle_task_status(as_user("maria"), Project(name="Other"), mine)
    assert mine.status == TaskStatus.PENDING


def test_accept_task_without_comment(project, as_user, crew, now):
    task = db.create_task(as_user("maria"), project, "Paint walls", [crew["alex"].id], now=now)
    assert db.accept_task(as_user("alex"), project, task, now=now) is None
    assert crew["alex"].id in task.acknowledged_by
    assert project.messages == []


def test_accept_task_with_comment_posts_to_thread(project, as_user, crew, now):
    task = db.create_task(as_user("maria"), project, "Paint walls", [crew["alex"].id], now=now)
    msg = db.accept_task(as_user("alex"), project, task, "On it tomorrow", now=now)
    assert msg.referenced_task.task_id == task.id
    assert msg.content == "On it tomorrow"
    assert not task.is_new_for(crew["alex"].id)


def test_message_reference_is_a_snapshot(project, as_user, now):
    maria = as_user("maria")
    task = db.create_task(maria, project, "Order tile", now=now)
    msg = db.send_message(maria, project, "Which color?", task=task, now=now)

    db.rename_task(maria, project, task, "Order beige tile")

    assert task.title == "Order beige tile"
    assert msg.referenced_task.task_title == "Order tile"


def test_send_message_quotes_and_previews(project, as_user, now):
    maria, diego = as_user("maria"), as_user("diego")
    first = db.send_message(maria, project, "Can you check the measurements?", now=now)
    reply = db.send_message(diego, project, "Done, 3.2m", quote=first, now=now)
    assert reply.quoted_message.sender_name == "Maria Garcia"
    assert reply.quoted_message.content == "Can you check the measurements?"
    assert reply.read_by == {diego.user_id}
    assert project.last_activity_preview == "Diego: Done, 3.2m"


def test_send_empty_message_is_rejected(project, as_user):
    with pytest.raises(PreconditionFailed):
        db.send_message(as_user("maria"), project, "   ")


def test_toggle_reaction(project, as_user):
    maria, alex = as_user("maria"), as_user("alex")
    msg = db.send_message(maria, project, "Tile arrived")
    assert db.toggle_reaction(alex, project, msg, "👍") is True
    assert db.toggle_reaction(maria, project, msg, "👍") is True
    assert db.toggle_reaction(maria, project, msg, "🙏") is True
    assert msg.grouped_reactions == {"👍": [alex.user_id, maria.user_id], "🙏": [maria.user_id]}
    assert db.toggle_reaction(alex, project, msg, "👍") is False
    assert msg.grouped_reactions["👍"] == [maria.user_id]


def test_subtask_toggle_permission(project, as_user, crew, now):
    maria = as_user("maria")
    task = db.create_task(maria, project, "Kitchen", [crew["alex"].id], now=now)
    sub = db.add_subtask(maria, project, task, "Measure", assignee_ids=[crew["diego"].id], now=now)

    with pytest.raises(PreconditionFailed):
        db.toggle_subtask(as_user("alex"), project, task, sub)
    assert db.toggle_subtask(as_user("diego"), project, task, sub, now=now) is True
    assert task.subtask_progress == (1, 1)


def test_task_attachment_category_follows_uploader(project, as_user, crew, now):
    task = db.create_task(as_user("maria"), project, "Kitchen", [crew["alex"].id], now=now)
    ref = db.add_task_attachment(as_user("maria"), project, task, AttachmentType.DOCUMENT, "Plan.pdf", 2048)
    work = db.add_task_attachment(as_user("alex"), project, task, AttachmentType.IMAGE, "Done.jpg", 3_500_000)

    assert ref.category == AttachmentCategory.REFERENCE
    assert work.category == AttachmentCategory.WORK
    assert ref.size_label == "2 KB"
    assert work.size_label == "3.3 MB"
    with pytest.raises(PreconditionFailed):
        db.add_task_attachment(as_user("diego"), project, task, AttachmentType.IMAGE, "x.jpg")


def test_project_attachments_link_variants(project, as_user, now):
    maria = as_user("maria")
    task = db.create_task(maria, project, "Kitchen", now=now)
    general = db.add_project_attachments(maria, project, [(AttachmentType.IMAGE, "site.jpg", 10)])
    linked = db.add_project_attachments(maria, project, [(AttachmentType.DOCUMENT, "a.pdf", 1),
                                                          (AttachmentType.DOCUMENT, "b.pdf", 2)],
                                        task=task, caption="Invoices")
    assert isinstance(general[0].link, Unlinked)
    assert all(isinstance(a.link, LinkedTo) and a.link.task_id == task.id for a in linked)
    assert {a.caption for a in linked} == {"Invoices"}
    assert linked[0].linked_task_id == task.id


def test_delete_task_tombstones(project, as_user, crew, now):
    maria = as_user("maria")
    task = db.create_task(maria, project, "Kitchen", [crew["alex"].id], now=now)
    msg = db.send_message(maria, project, "ping", task=task, now=now)

    tomb = db.delete_task(maria, project, task, now=now)

    assert project.get_task(task.id) is None
    assert isinstance(project.resolve_task(task.id), TaskTombstone)
    assert tomb.title == "Kitchen"
    assert msg.referenced_task.task_id == task.id
    assert crew["alex"].id not in project.unread_task_ids


def test_compose_task_notes():
    assert db.compose_task_notes(" Unit 4 ", "742 Maple St", "Bring ladder") == \
        "🏢 Unit 4\n\n📍 742 Maple St\n\nBring ladder"
    assert db.compose_task_notes("", None, "  ") is None


def test_add_member_is_idempotent(project, as_user, crew):
    maria = as_user("maria")
    db.add_member(maria, project, crew["sara"].id)
    db.add_member(maria, project, crew["sara"].id)
    assert [u.id for u in project.members].count(crew["sara"].id) == 1
    assert project.member(crew["sara"].id).first_name == "Sara"


def test_add_member_sees_existing_task_threads_as_unread(project, as_user, crew, now):
    maria = as_user("maria")
    task = db.create_task(maria, project, "Kitchen", [crew["alex"].id], now=now)
    db.send_message(maria, project, "Tiles arrive Friday", task=task, now=now)

    db.add_member(maria, project, crew["sara"].id)

    assert project.unread_task_ids[crew["sara"].id] == {task.id}


def test_subtask_message_infers_its_task(project, as_user, now):
    maria = as_user("maria")
    task = db.create_task(maria, project, "Kitchen", now=now)
    sub = db.add_subtask(maria, project, task, "Grout", now=now)

    msg = db.send_message(maria, project, "Grey grout", subtask=sub, now=now)

    assert msg.referenced_task.task_id == task.id
    assert msg.referenced_subtask.subtask_id == sub.id


def test_subtask_from_another_project_is_rejected(project, as_user, now):
    maria = as_user("maria")
    other = db.create_project(maria, "Other job", now=now)
    foreign_task = db.create_task(maria, other, "Deck", now=now)
    foreign_sub = db.add_subtask(maria, other, foreign_task, "Stain", now=now)

    with pytest.raises(NotFoundError):
        db.send_message(maria, project, "wrong place", subtask=foreign_sub, now=now)
    assert project.messages == []
