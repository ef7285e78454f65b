from datetime import datetime
from uuid import uuid4

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

DEFAULT_TARGET_MINUTES = 600000


class Skill(SQLModel, table=True):
    __tablename__ = "skills"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    user_id: str = Field(index=True)
    name: str = Field(max_length=200)
    total_minutes: int = Field(default=0)
    target_minutes: int = Field(default=DEFAULT_TARGET_MINUTES)
    created_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime)
