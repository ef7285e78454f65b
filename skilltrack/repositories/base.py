from typing import List, Optional, Protocol

from ..models import User, Task, Skill


class UserRepository(Protocol):
    def find_by_email(self, email: str) -> Optional[User]: ...

    def find_by_id(self, user_id: str) -> Optional[User]: ...

    def find_by_refresh_token(self, token: str) -> Optional[User]: ...

    def create(self, user: User) -> User: ...

    def update(self, user: User) -> User: ...


class TaskRepository(Protocol):
    """Task persistence scoped by owner.

    Implementations keep each owner's priorities dense (1..N). ``create`` and
    ``update`` treat ``task.priority`` as the requested position; a value
    below 1 on create means "append".
    """

    def find_all_by_user(self, user_id: str) -> List[Task]: ...

    def find_by_id(self, task_id: str, user_id: str) -> Optional[Task]: ...

    def create(self, task: Task) -> Task: ...

    def update(self, task: Task) -> Task: ...

    def delete(self, task_id: str, user_id: str) -> None: ...

    def unlink_skill(self, skill_id: str, user_id: str) -> int: ...


class SkillRepository(Protocol):
    def find_all_by_user(self, user_id: str) -> List[Skill]: ...

    def find_by_id(self, skill_id: str, user_id: str) -> Optional[Skill]: ...

    def find_by_name(self, name: str, user_id: str) -> Optional[Skill]: ...

    def create(self, skill: Skill) -> Skill: ...

    def update(self, skill: Skill) -> Skill: ...

    def delete(self, skill_id: str, user_id: str) -> None: ...

    def increment_total_minutes(self, skill_id: str, user_id: str, delta: int) -> None: ...
