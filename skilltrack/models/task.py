from datetime import datetime
from typing import Optional
from enum import Enum
from uuid import uuid4

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


class TaskStatus(str, Enum):
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"
    OVERDUE = "overdue"


class Task(SQLModel, table=True):
    """A unit of work owned by one user.

    Timestamps and due dates are naive local time, stored in plain
    DATETIME columns.

    Attributes:
        id: Unique identifier for the task
        user_id: Owner of the task
        title: Task title (required)
        description: Optional detailed description
        status: One of the TaskStatus values
        priority: Dense 1-based rank within the owner's task list
        learning_minutes: Minutes this task contributes to its skill
        due_date: Optional due date and time
        skill_id: Optional skill the minutes are tracked against
        created_at: Timestamp when task was created
        updated_at: Timestamp when task was last updated
    """
    __tablename__ = "tasks"

    id: str = Field(default_factory=lambda: str(uuid4()), primary_key=True)
    user_id: str = Field(index=True)
    title: str = Field(max_length=500)
    description: Optional[str] = Field(default=None, max_length=2000)
    status: str = Field(default=TaskStatus.TODO.value, max_length=20)
    priority: int = Field(default=0, index=True)
    learning_minutes: int = Field(default=0)
    due_date: Optional[datetime] = Field(default=None, sa_type=DateTime)
    skill_id: Optional[str] = Field(default=None, foreign_key="skills.id", index=True)
    created_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime)
    updated_at: datetime = Field(default_factory=datetime.now, sa_type=DateTime)
