"""Models package."""
from .user import User
from .task import Task, TaskStatus
from .skill import Skill, DEFAULT_TARGET_MINUTES

__all__ = ["User", "Task", "TaskStatus", "Skill", "DEFAULT_TARGET_MINUTES"]
