# mock_data.py
"""Fixture crew, projects and activity used for local multi-persona testing."""
from datetime import datetime, timedelta
from typing import List, Optional

from db import MemoryStore
from models.activity import Activity, ActivityType
from models.attachment import Attachment, AttachmentCategory, AttachmentType, LinkedTo, ProjectAttachment
from models.message import Message, SubtaskReference, TaskReference
from models.project import Project
from models.subtask import Subtask
from models.task import Task, TaskStatus
from models.user import User

ALL_USERS: List[User] = [
    User(name="Alex Martin", phone_number="+1 612-345-6789"),
    User(name="Maria Garcia", phone_number="+1 623-456-7890"),
    User(name="Diego Lopez", phone_number="+1 634-567-8901"),
    User(name="Sara Chen", phone_number="+1 645-678-9012"),
    User(name="Mike Torres", phone_number="+1 656-789-0123"),
]


def _msg(content, sender, at, task=None, subtask=None, read_by=None):
    return Message(
        content=content,
        sender=sender,
        timestamp=at,
        referenced_task=TaskReference.of(task) if task else None,
        referenced_subtask=SubtaskReference.of(subtask) if subtask else None,
        read_by=set(read_by) if read_by is not None else {sender.id},
    )


def create_mock_projects(now: Optional[datetime] = None) -> List[Project]:
    now = now or datetime.now()
    alex, maria, diego, sara, mike = ALL_USERS
    yesterday = now - timedelta(days=1)
    tomorrow = now + timedelta(days=1)
    next_week = now + timedelta(days=5)

    # ---- Kitchen renovation ----
    quotes = Subtask(
        title="Get quotes from 3 suppliers", is_done=True, assignees={maria.id}, created_by=diego.id,
        attachments=[
            Attachment(type=AttachmentType.DOCUMENT, file_name="Supplier_List.pdf", file_size=125_000,
                       uploaded_by=diego.id),
            Attachment(type=AttachmentType.DOCUMENT, file_name="Quote_Guide.xlsx", file_size=89_000,
                       uploaded_by=diego.id),
        ],
    )
    compare = Subtask(title="Compare price and quality", is_done=True,
                      assignees={maria.id, diego.id}, created_by=diego.id)
    order = Subtask(title="Place order with chosen supplier", assignees={maria.id}, created_by=diego.id)
    delivery = Subtask(title="Confirm delivery date", created_by=diego.id)
    materials = Task(
        title="Order kitchen materials",
        assignees={maria.id},
        created_by=diego.id,
        created_at=now - timedelta(days=3),
        due_date=now,
        subtasks=[quotes, compare, order, delivery],
        attachments=[
            Attachment(type=AttachmentType.DOCUMENT, category=AttachmentCategory.REFERENCE,
                       file_name="Kitchen_Materials.pdf", file_size=245_000, uploaded_by=diego.id),
            Attachment(type=AttachmentType.IMAGE, category=AttachmentCategory.REFERENCE,
                       file_name="Kitchen_Plan.jpg", file_size=1_200_000, uploaded_by=diego.id),
        ],
        notes="Contact: HomeDepot Pro Desk\nAccount: PRO-2847593\n\n"
              "- 24 sq ft ceramic tile (Tuscan Beige)\n- 3 bags thinset\n- Grout (Sand)",
    )
    inspection = Task(
        title="Schedule electrical inspection",
        assignees={alex.id},
        created_by=maria.id,
        created_at=now - timedelta(days=2),
        due_date=tomorrow,
        subtasks=[
            Subtask(title="Call the inspector's office", is_done=True, assignees={alex.id}, created_by=maria.id),
            Subtask(title="Prepare paperwork", assignees={diego.id, alex.id}, created_by=maria.id),
            Subtask(title="Clear access to the panel", created_by=maria.id),
        ],
        notes="Permit #EL-2024-0847. Inspector prefers mornings (8-10am).",
        acknowledged_by={alex.id},
    )
    tiling = Task(title="Finish bathroom tiling", assignees={diego.id}, status=TaskStatus.DONE,
                  created_by=alex.id, created_at=now - timedelta(days=6),
                  last_activity=now - timedelta(hours=2))
    painting = Task(title="Paint living room walls", assignees={alex.id, diego.id}, created_by=maria.id,
                    created_at=now - timedelta(hours=6), due_date=next_week)

    kitchen = Project(
        name="Kitchen Renovation",
        description="Full remodel for the Maple Street client",
        members=[alex, maria, diego],
        tasks=[materials, inspection, tiling, painting],
        messages=[
            _msg("Let's start ordering kitchen materials this week", alex, now - timedelta(hours=5)),
            _msg("I'll get supplier quotes today", maria, now - timedelta(hours=4), read_by={maria.id, alex.id}),
            _msg("Can you double-check the measurements?", maria, now - timedelta(minutes=30)),
            _msg("Quotes are in the shared folder", maria, now - timedelta(hours=3), task=materials),
            _msg("Is the beige tile in stock?", diego, now - timedelta(hours=2), task=materials),
            _msg("Do we need primer first?", diego, now - timedelta(hours=1), task=painting),
            _msg("Supplier B is cheapest", maria, now - timedelta(minutes=50), task=materials, subtask=quotes),
            _msg("Quality looks equal", diego, now - timedelta(minutes=40), task=materials, subtask=compare),
        ],
        attachments=[
            ProjectAttachment(type=AttachmentType.IMAGE, file_name="Site_Before.jpg", file_size=980_000,
                              uploaded_by=alex.id),
            ProjectAttachment(type=AttachmentType.DOCUMENT, file_name="Tile_Invoice.pdf", file_size=64_000,
                              uploaded_by=maria.id, link=LinkedTo(task_id=materials.id)),
        ],
        unread_task_ids={alex.id: {materials.id, painting.id}},
        created_at=now - timedelta(days=10),
        last_activity=now,
        last_activity_preview="Maria: Can you double-check the measurements?",
    )

    # ---- Final inspection ----
    garage = Task(title="Fix garage door", assignees={alex.id}, status=TaskStatus.DONE, created_by=sara.id,
                  created_at=now - timedelta(days=4), last_activity=now - timedelta(hours=2),
                  acknowledged_by={alex.id})
    checklist = Task(title="Prepare inspection checklist", assignees={sara.id}, created_by=alex.id,
                     created_at=now - timedelta(days=1), due_date=tomorrow, acknowledged_by={sara.id})
    walkthrough = Project(
        name="Final Walkthrough - Oak Ave",
        members=[alex, sara],
        tasks=[garage, checklist],
        messages=[
            _msg("Final inspection scheduled for tomorrow", alex, now - timedelta(hours=3)),
            _msg("I'll prepare the checklist", sara, now - timedelta(hours=2), read_by={sara.id, alex.id}),
        ],
        created_at=now - timedelta(days=14),
        last_activity=now - timedelta(hours=2),
        last_activity_preview="Completed: Fix garage door",
    )

    # ---- HVAC ----
    plumbing = Task(title="Install temporary plumbing", assignees={alex.id, mike.id}, created_by=mike.id,
                    created_at=now - timedelta(minutes=30), due_date=next_week, acknowledged_by={mike.id})
    hvac_units = Task(title="Order HVAC units", assignees={alex.id}, created_by=maria.id,
                      created_at=now - timedelta(days=2), due_date=yesterday, acknowledged_by={alex.id})
    hvac = Project(
        name="Office HVAC Install",
        description="Two rooftop units plus ductwork",
        members=[alex, maria, mike],
        tasks=[plumbing, hvac_units],
        messages=[
            _msg("HVAC units must be ordered before Friday", mike, now - timedelta(days=1)),
            _msg("Got it, I'll coordinate with the vendor", alex, now - timedelta(hours=6)),
            _msg("Plumbing starts Monday", mike, now - timedelta(minutes=20), task=plumbing),
        ],
        unread_task_ids={alex.id: {plumbing.id}},
        created_at=now - timedelta(days=20),
        last_activity=now - timedelta(minutes=30),
        last_activity_preview="New task: Install temporary plumbing",
    )

    # ---- Invoicing ----
    invoice = Task(title="Send invoice", assignees={alex.id}, created_by=sara.id,
                   created_at=now - timedelta(days=3), due_date=yesterday, acknowledged_by={alex.id})
    billing = Project(
        name="Client Billing",
        members=[alex, sara],
        tasks=[invoice],
        messages=[
            _msg("The client is happy with the project", alex, now - timedelta(days=1)),
            _msg("The invoice is ready for review", sara, now - timedelta(hours=5), task=invoice),
        ],
        unread_task_ids={alex.id: {invoice.id}},
        created_at=now - timedelta(days=30),
        last_activity=now - timedelta(hours=5),
        last_activity_preview="Sara: The invoice is ready for review",
    )
    return [kitchen, walkthrough, hvac, billing]


def create_mock_activities(projects: List[Project], now: Optional[datetime] = None) -> List[Activity]:
    now = now or datetime.now()
    _, maria, diego, sara, _ = ALL_USERS
    kitchen, walkthrough = projects[0], projects[1]
    done = next((t for t in kitchen.tasks if t.status == TaskStatus.DONE), None)
    first = kitchen.tasks[0]

    def event(type_, at, actor, project, task=None, preview=None):
        return Activity(type=type_, timestamp=at, actor_id=actor.id, actor_name=actor.name,
                        project_id=project.id, project_name=project.name,
                        task_id=task.id if task else None, task_title=task.title if task else None,
                        message_preview=preview)

    return [
        event(ActivityType.MESSAGE_SENT, now - timedelta(minutes=5), maria, kitchen,
              preview="Can you double-check the measurements?"),
        event(ActivityType.TASK_COMPLETED, now - timedelta(minutes=30), diego, kitchen, done),
        event(ActivityType.TASK_ASSIGNED, now - timedelta(hours=1), sara, walkthrough, walkthrough.tasks[0]),
        event(ActivityType.TASK_CREATED, now - timedelta(hours=2), maria, kitchen, first),
        event(ActivityType.MESSAGE_SENT, now - timedelta(days=1), diego, kitchen,
              preview="I'll finish the tile tomorrow"),
    ]


def load_mock_store(now: Optional[datetime] = None) -> MemoryStore:
    projects = create_mock_projects(now)
    return MemoryStore(users=ALL_USERS, projects=projects, activities=create_mock_activities(projects, now))
