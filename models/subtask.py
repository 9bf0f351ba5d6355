# models/subtask.py
from datetime import datetime
from typing import List, Optional, Set
from uuid import UUID, uuid4

from sqlmodel import SQLModel, Field

from models.attachment import Attachment


class Subtask(SQLModel):
    id: UUID = Field(default_factory=uuid4)
    title: str
    description: Optional[str] = None
    is_done: bool = False
    assignees: Set[UUID] = Field(default_factory=set)
    created_by: Optional[UUID] = None
    due_date: Optional[datetime] = None
    attachments: List[Attachment] = Field(default_factory=list)

    def is_overdue(self, now: Optional[datetime] = None) -> bool:
        if self.due_date is None or self.is_done:
            return False
        today = (now or datetime.now()).date()
        return self.due_date.date() < today

    def is_assigned_to(self, user_id: UUID) -> bool:
        return user_id in self.assignees
