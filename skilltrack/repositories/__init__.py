"""Data access for users, tasks and skills.

Each repository exists in two flavours sharing one contract: an in-memory
variant for local development and tests, and a SQLModel variant for
production.
"""
from .base import UserRepository, TaskRepository, SkillRepository
from .memory import InMemoryUserRepository, InMemoryTaskRepository, InMemorySkillRepository
from .sql import SqlUserRepository, SqlTaskRepository, SqlSkillRepository

__all__ = [
    "UserRepository",
    "TaskRepository",
    "SkillRepository",
    "InMemoryUserRepository",
    "InMemoryTaskRepository",
    "InMemorySkillRepository",
    "SqlUserRepository",
    "SqlTaskRepository",
    "SqlSkillRepository",
]
