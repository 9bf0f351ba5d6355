# models/project.py
from datetime import datetime
from typing import Dict, List, Optional, Set, Union
from uuid import UUID, uuid4

from sqlmodel import SQLModel, Field

from models.attachment import ProjectAttachment
from models.message import Message
from models.task import Task, TaskStatus, TaskTombstone
from models.user import User


class Project(SQLModel):
    id: UUID = Field(default_factory=uuid4)
    name: str
    description: Optional[str] = None
    members: List[User] = Field(default_factory=list)
    tasks: List[Task] = Field(default_factory=list)
    messages: List[Message] = Field(default_factory=list)
    attachments: List[ProjectAttachment] = Field(default_factory=list)
    # user id -> task ids with an unread badge; a missing key means nothing unread
    unread_task_ids: Dict[UUID, Set[UUID]] = Field(default_factory=dict)
    tombstones: Dict[UUID, TaskTombstone] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=datetime.now)
    last_activity: Optional[datetime] = None
    last_activity_preview: Optional[str] = None

    def member(self, user_id: UUID) -> Optional[User]:
        return next((u for u in self.members if u.id == user_id), None)

    def is_member(self, user_id: UUID) -> bool:
        return self.member(user_id) is not None

    def get_task(self, task_id: UUID) -> Optional[Task]:
        return next((t for t in self.tasks if t.id == task_id), None)

    def owns(self, task: Task) -> bool:
        return any(t is task for t in self.tasks)

    def resolve_task(self, task_id: UUID) -> Union[Task, TaskTombstone, None]:
        task = self.get_task(task_id)
        if task is not None:
            return task
        return self.tombstones.get(task_id)

    def get_message(self, message_id: UUID) -> Optional[Message]:
        return next((m for m in self.messages if m.id == message_id), None)

    @property
    def pending_tasks(self) -> List[Task]:
        return [t for t in self.tasks if t.status == TaskStatus.PENDING]

    @property
    def completed_tasks(self) -> List[Task]:
        return [t for t in self.tasks if t.status == TaskStatus.DONE]

    def unread_tasks_for(self, user_id: UUID) -> Set[UUID]:
        return set(self.unread_task_ids.get(user_id, set()))

    def touch(self, preview: Optional[str] = None, now: Optional[datetime] = None) -> None:
        """Update the denormalized last-activity fields; callers decide the preview text."""
        self.last_activity = now or datetime.now()
        if preview is not None:
            self.last_activity_preview = preview

    @property
    def sort_key(self) -> datetime:
        return self.last_activity or self.created_at
