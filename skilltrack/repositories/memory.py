"""In-memory repositories for local development and tests.

Not safe for concurrent writers; nothing here takes a lock.
"""

from datetime import datetime
from typing import Dict, List, Optional

from ..errors import NotFoundError
from ..models import User, Task, Skill


def target_position(requested: Optional[int], size: int) -> int:
    """Clamp a requested 1-based position into a list of ``size`` slots.

    Anything missing or below 1 lands at the end.
    """
    if requested is None or requested < 1:
        return size
    return min(requested, size)


def _task_order(task: Task):
    return (task.priority, task.created_at, task.id)


class InMemoryUserRepository:
    def __init__(self):
        self._users: Dict[str, User] = {}

    def find_by_email(self, email: str) -> Optional[User]:
        return next((u for u in self._users.values() if u.email == email), None)

    def find_by_id(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    def find_by_refresh_token(self, token: str) -> Optional[User]:
        if not token:
            return None
        return next((u for u in self._users.values() if u.refresh_token == token), None)

    def create(self, user: User) -> User:
        self._users[user.id] = user
        return user

    def update(self, user: User) -> User:
        if user.id not in self._users:
            raise NotFoundError("User not found")
        self._users[user.id] = user
        return user


class InMemoryTaskRepository:
    def __init__(self):
        self._tasks: Dict[str, Task] = {}

    def find_all_by_user(self, user_id: str) -> List[Task]:
        return sorted((t for t in self._tasks.values() if t.user_id == user_id), key=_task_order)

    def find_by_id(self, task_id: str, user_id: str) -> Optional[Task]:
        task = self._tasks.get(task_id)
        if task is None or task.user_id != user_id:
            return None
        return task

    def create(self, task: Task) -> Task:
        ordered = self.find_all_by_user(task.user_id)
        position = target_position(task.priority, len(ordered) + 1)
        ordered.insert(position - 1, task)
        self._tasks[task.id] = task
        self._renumber(ordered)
        return task

    def update(self, task: Task) -> Task:
        if self.find_by_id(task.id, task.user_id) is None:
            raise NotFoundError("Task not found")
        others = [t for t in self.find_all_by_user(task.user_id) if t.id != task.id]
        position = target_position(task.priority, len(others) + 1)
        others.insert(position - 1, task)
        self._tasks[task.id] = task
        self._renumber(others)
        return task

    def delete(self, task_id: str, user_id: str) -> None:
        task = self.find_by_id(task_id, user_id)
        if task is None:
            raise NotFoundError("Task not found")
        del self._tasks[task_id]
        self._renumber(self.find_all_by_user(user_id))

    def unlink_skill(self, skill_id: str, user_id: str) -> int:
        count = 0
        for task in self._tasks.values():
            if task.user_id == user_id and task.skill_id == skill_id:
                task.skill_id = None
                count += 1
        return count

    @staticmethod
    def _renumber(ordered: List[Task]) -> None:
        for rank, task in enumerate(ordered, start=1):
            task.priority = rank


class InMemorySkillRepository:
    def __init__(self):
        self._skills: Dict[str, Skill] = {}

    def find_all_by_user(self, user_id: str) -> List[Skill]:
        return sorted(
            (s for s in self._skills.values() if s.user_id == user_id),
            key=lambda s: s.name.lower(),
        )

    def find_by_id(self, skill_id: str, user_id: str) -> Optional[Skill]:
        skill = self._skills.get(skill_id)
        if skill is None or skill.user_id != user_id:
            return None
        return skill

    def find_by_name(self, name: str, user_id: str) -> Optional[Skill]:
        lowered = name.lower()
        return next(
            (s for s in self._skills.values() if s.user_id == user_id and s.name.lower() == lowered),
            None,
        )

    def create(self, skill: Skill) -> Skill:
        self._skills[skill.id] = skill
        return skill

    def update(self, skill: Skill) -> Skill:
        if self.find_by_id(skill.id, skill.user_id) is None:
            raise NotFoundError("Skill not found")
        self._skills[skill.id] = skill
        return skill

    def delete(self, skill_id: str, user_id: str) -> None:
        if self.find_by_id(skill_id, user_id) is None:
            raise NotFoundError("Skill not found")
        del self._skills[skill_id]

    def increment_total_minutes(self, skill_id: str, user_id: str, delta: int) -> None:
        if delta == 0:
            return
        skill = self.find_by_id(skill_id, user_id)
        if skill is None:
            raise NotFoundError("Skill not found")
        skill.total_minutes = max(0, (skill.total_minutes or 0) + delta)
        skill.updated_at = datetime.now()
