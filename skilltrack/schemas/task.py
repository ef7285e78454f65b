from datetime import datetime
from typing import Optional

from pydantic import Field

from .base import CamelModel


class TaskCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=500)
    description: Optional[str] = Field(None, max_length=2000)
    status: Optional[str] = None
    priority: Optional[int] = None
    learning_minutes: Optional[int] = None
    # Parsed by the domain service so bad values surface as a 400
    due_date: Optional[str] = None
    skill_id: Optional[str] = None


class TaskUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=500)
    description: Optional[str] = Field(None, max_length=2000)
    status: Optional[str] = None
    priority: Optional[int] = None
    learning_minutes: Optional[int] = None
    due_date: Optional[str] = None
    skill_id: Optional[str] = None


class TaskOut(CamelModel):
    id: str
    user_id: str
    title: str
    description: Optional[str]
    status: str
    priority: int
    learning_minutes: int
    due_date: Optional[datetime]
    skill_id: Optional[str]
    created_at: datetime
    updated_at: datetime
