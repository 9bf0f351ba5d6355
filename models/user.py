# models/user.py
from sqlmodel import SQLModel, Field
from uuid import UUID, uuid4


class User(SQLModel):
    model_config = {"frozen": True}

    id: UUID = Field(default_factory=uuid4)
    name: str
    phone_number: str = ""

    @property
    def first_name(self) -> str:
        parts = self.name.split()
        return parts[0] if parts else self.name

    @property
    def initials(self) -> str:
        return "".join(p[0] for p in self.name.split()[:2]).upper()
