# models/task.py
from datetime import datetime
from enum import Enum
from typing import List, Optional, Set, Tuple
from uuid import UUID, uuid4

from sqlmodel import SQLModel, Field

from models.attachment import Attachment, AttachmentCategory
from models.subtask import Subtask


class TaskStatus(str, Enum):
    PENDING = "pending"
    DONE = "done"


class Task(SQLModel):
    id: UUID = Field(default_factory=uuid4)
    title: str
    status: TaskStatus = TaskStatus.PENDING
    assignees: Set[UUID] = Field(default_factory=set)
    created_by: Optional[UUID] = None
    created_at: datetime = Field(default_factory=datetime.now)
    # bumped by every mutation; drives "recently done" and activity ordering
    last_activity: Optional[datetime] = None
    due_date: Optional[datetime] = None
    subtasks: List[Subtask] = Field(default_factory=list)
    attachments: List[Attachment] = Field(default_factory=list)
    notes: Optional[str] = None
    acknowledged_by: Set[UUID] = Field(default_factory=set)

    @property
    def is_done(self) -> bool:
        return self.status == TaskStatus.DONE

    @property
    def updated_at(self) -> datetime:
        return self.last_activity or self.created_at

    def touch(self, now: Optional[datetime] = None) -> None:
        self.last_activity = now or datetime.now()

    def toggle_status(self, now: Optional[datetime] = None) -> TaskStatus:
        self.status = TaskStatus.PENDING if self.is_done else TaskStatus.DONE
        self.touch(now)
        return self.status

    # ---- due dates (calendar-day granularity) ----
    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        if self.due_date is None or self.status != TaskStatus.PENDING:
            return False
        return self.due_date.date() < (now or datetime.now()).date()

    def is_due_today(self, now: Optional[datetime] = None) -> bool:
        if self.due_date is None:
            return False
        return self.due_date.date() == (now or datetime.now()).date()

    # ---- acknowledgment ----
    def is_assigned_to(self, user_id: UUID) -> bool:
        return user_id in self.assignees

    def is_acknowledged_by(self, user_id: UUID) -> bool:
        return user_id not in self.assignees or user_id in self.acknowledged_by

    def is_new_for(self, user_id: UUID) -> bool:
        return not self.is_acknowledged_by(user_id)

    def acknowledge(self, user_id: UUID, now: Optional[datetime] = None) -> None:
        self.acknowledged_by.add(user_id)
        self.touch(now)

    # ---- subtasks ----
    def get_subtask(self, subtask_id: UUID) -> Optional[Subtask]:
        return next((s for s in self.subtasks if s.id == subtask_id), None)

    @property
    def subtask_ids(self) -> Set[UUID]:
        return {s.id for s in self.subtasks}

    @property
    def subtask_progress(self) -> Tuple[int, int]:
        return sum(1 for s in self.subtasks if s.is_done), len(self.subtasks)

    def sorted_subtasks(self) -> List[Subtask]:
        return sorted(self.subtasks, key=lambda s: s.is_done)

    def can_toggle_subtask(self, subtask: Subtask, user_id: UUID) -> bool:
        if user_id == self.created_by or subtask.is_assigned_to(user_id):
            return True
        return not subtask.assignees and self.is_assigned_to(user_id)

    # ---- attachments ----
    def attachments_in(self, category: AttachmentCategory) -> List[Attachment]:
        return [a for a in self.attachments if a.category == category]

    def category_for_uploader(self, user_id: UUID) -> Optional[AttachmentCategory]:
        if user_id == self.created_by:
            return AttachmentCategory.REFERENCE
        if user_id in self.assignees:
            return AttachmentCategory.WORK
        return None


class TaskTombstone(SQLModel):
    """Placeholder kept after a task is deleted so references still resolve."""
    model_config = {"frozen": True}

    id: UUID
    title: str
    deleted_at: datetime = Field(default_factory=datetime.now)
