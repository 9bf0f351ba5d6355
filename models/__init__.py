# models/__init__.py
from .user import User
from .attachment import (
    Attachment, AttachmentCategory, AttachmentLink, AttachmentType,
    LinkedTo, ProjectAttachment, Unlinked,
)
from .message import Message, QuotedMessage, Reaction, SubtaskReference, TaskReference, QUICK_EMOJIS
from .subtask import Subtask
from .task import Task, TaskStatus, TaskTombstone
from .project import Project
from .activity import Activity, ActivityType
