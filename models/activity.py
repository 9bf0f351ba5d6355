# models/activity.py
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from sqlmodel import SQLModel, Field


class ActivityType(str, Enum):
    TASK_ASSIGNED = "assigned"
    TASK_COMPLETED = "completed"
    TASK_REOPENED = "reopened"
    TASK_CREATED = "created"
    MESSAGE_SENT = "message"


ACTIVITY_ICONS = {
    ActivityType.TASK_ASSIGNED: ("👤", "blue"),
    ActivityType.TASK_COMPLETED: ("✅", "green"),
    ActivityType.TASK_REOPENED: ("↩️", "orange"),
    ActivityType.TASK_CREATED: ("➕", "violet"),
    ActivityType.MESSAGE_SENT: ("💬", "blue"),
}


class Activity(SQLModel):
    """A discrete event in the cross-project feed. Names are copied at creation time."""
    model_config = {"frozen": True}

    id: UUID = Field(default_factory=uuid4)
    type: ActivityType
    timestamp: datetime = Field(default_factory=datetime.now)
    actor_id: UUID
    actor_name: str
    project_id: UUID
    project_name: str
    task_id: Optional[UUID] = None
    task_title: Optional[str] = None
    message_preview: Optional[str] = None

    @property
    def description(self) -> str:
        first = self.actor_name.split(" ")[0] if self.actor_name else self.actor_name
        title = self.task_title or "a task"
        if self.type == ActivityType.TASK_ASSIGNED:
            return f"{first} assigned you: {title}"
        if self.type == ActivityType.TASK_COMPLETED:
            return f"{first} completed: {title}"
        if self.type == ActivityType.TASK_REOPENED:
            return f"{first} reopened: {title}"
        if self.type == ActivityType.TASK_CREATED:
            return f"{first} created: {title}"
        return f"{first}: {self.message_preview or 'sent a message'}"

    @property
    def icon(self) -> str:
        return ACTIVITY_ICONS[self.type][0]

    @property
    def icon_color(self) -> str:
        return ACTIVITY_ICONS[self.type][1]
