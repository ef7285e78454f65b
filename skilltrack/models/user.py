from datetime import datetime
from typing import Optional
from uuid import uuid4

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    email: str = Field(unique=True, index=True, max_length=320)
    password_hash: str
    created_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime)
    refresh_token: Optional[str] = Field(default=None, unique=True, index=True)
    refresh_token_expires_at: Optional[datetime] = Field(default=None, sa_type=DateTime)
