# models/attachment.py
from datetime import datetime
from enum import Enum
from typing import Literal, Optional, Union
from uuid import UUID, uuid4

from sqlmodel import SQLModel, Field


class AttachmentType(str, Enum):
    IMAGE = "image"
    DOCUMENT = "document"
    VIDEO = "video"
    CONTACT = "contact"


class AttachmentCategory(str, Enum):
    REFERENCE = "reference"  # instructions from the task creator
    WORK = "work"            # deliverables from an assignee


def format_file_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.0f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


class Attachment(SQLModel):
    """A file attached to a task, subtask or message. Never mutated after upload."""
    model_config = {"frozen": True}

    id: UUID = Field(default_factory=uuid4)
    type: AttachmentType
    category: AttachmentCategory = AttachmentCategory.REFERENCE
    file_name: str
    file_size: int = 0
    uploaded_by: UUID
    caption: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def size_label(self) -> str:
        return format_file_size(self.file_size)


class Unlinked(SQLModel):
    model_config = {"frozen": True}

    kind: Literal["unlinked"] = "unlinked"


class LinkedTo(SQLModel):
    model_config = {"frozen": True}

    kind: Literal["linked"] = "linked"
    task_id: UUID
    subtask_id: Optional[UUID] = None


AttachmentLink = Union[Unlinked, LinkedTo]


class ProjectAttachment(SQLModel):
    """Project-level media, optionally linked to one of the project's tasks."""
    model_config = {"frozen": True}

    id: UUID = Field(default_factory=uuid4)
    type: AttachmentType
    file_name: str
    file_size: int = 0
    uploaded_by: UUID
    caption: Optional[str] = None
    link: AttachmentLink = Field(default_factory=Unlinked)
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def linked_task_id(self) -> Optional[UUID]:
        return self.link.task_id if isinstance(self.link, LinkedTo) else None

    @property
    def size_label(self) -> str:
        return format_file_size(self.file_size)
