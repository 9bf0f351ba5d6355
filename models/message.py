# models/message.py
from datetime import datetime
from typing import Dict, List, Optional, Set, TYPE_CHECKING
from uuid import UUID, uuid4

from sqlmodel import SQLModel, Field

from models.attachment import Attachment
from models.user import User

if TYPE_CHECKING:
    from models.task import Task
    from models.subtask import Subtask

QUICK_EMOJIS = ["👍", "❤️", "😂", "😮", "😢", "🙏"]


class TaskReference(SQLModel):
    """Snapshot of a task's id and title at the time it was referenced.

    The title is copied, not joined: renaming the task later leaves
    existing references showing the old title.
    """
    model_config = {"frozen": True}

    task_id: UUID
    task_title: str

    @classmethod
    def of(cls, task: "Task") -> "TaskReference":
        return cls(task_id=task.id, task_title=task.title)


class SubtaskReference(SQLModel):
    model_config = {"frozen": True}

    subtask_id: UUID
    subtask_title: str

    @classmethod
    def of(cls, subtask: "Subtask") -> "SubtaskReference":
        return cls(subtask_id=subtask.id, subtask_title=subtask.title)


class QuotedMessage(SQLModel):
    model_config = {"frozen": True}

    sender_name: str
    content: str

    @classmethod
    def of(cls, message: "Message") -> "QuotedMessage":
        return cls(sender_name=message.sender.name, content=message.content)


class Reaction(SQLModel):
    model_config = {"frozen": True}

    emoji: str
    user_id: UUID


class Message(SQLModel):
    id: UUID = Field(default_factory=uuid4)
    content: str
    sender: User
    timestamp: datetime = Field(default_factory=datetime.now)
    referenced_task: Optional[TaskReference] = None
    referenced_subtask: Optional[SubtaskReference] = None
    quoted_message: Optional[QuotedMessage] = None
    attachments: List[Attachment] = Field(default_factory=list)
    read_by: Set[UUID] = Field(default_factory=set)
    reactions: List[Reaction] = Field(default_factory=list)

    def is_read(self, user_id: UUID) -> bool:
        return user_id in self.read_by

    def mark_read(self, user_id: UUID) -> bool:
        """Returns True when the read state actually changed."""
        if user_id in self.read_by:
            return False
        self.read_by.add(user_id)
        return True

    def toggle_reaction(self, emoji: str, user_id: UUID) -> bool:
        """Adds the reaction, or removes it if this user already left it. Returns True if added."""
        for r in self.reactions:
            if r.emoji == emoji and r.user_id == user_id:
                self.reactions.remove(r)
                return False
        self.reactions.append(Reaction(emoji=emoji, user_id=user_id))
        return True

    @property
    def grouped_reactions(self) -> Dict[str, List[UUID]]:
        groups: Dict[str, List[UUID]] = {}
        for r in self.reactions:
            groups.setdefault(r.emoji, []).append(r.user_id)
        return {emoji: groups[emoji] for emoji in sorted(groups)}

    def references_any(self, task_id: UUID, subtask_ids: Set[UUID]) -> bool:
        if self.referenced_task is not None and self.referenced_task.task_id == task_id:
            return True
        return self.referenced_subtask is not None and self.referenced_subtask.subtask_id in subtask_ids
