"""Task use cases.

Task writes and the skill-minute adjustments they imply are separate
repository calls. When an adjustment fails, the adjustments already applied
are reverted and the task write is undone before the error is re-raised.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from ..errors import DomainError, InvalidInputError, NotFoundError
from ..models import Task, TaskStatus
from ..repositories import SkillRepository, TaskRepository
from .task_domain import TaskDomainService, UPDATABLE_FIELDS

logger = logging.getLogger(__name__)

SkillDelta = Tuple[str, int]


def _restore(task: Task, previous: Dict[str, Any]) -> Task:
    for field, value in previous.items():
        setattr(task, field, value)
    return task


def apply_skill_deltas(skills: SkillRepository, user_id: str, deltas: List[SkillDelta]) -> None:
    """Apply ``(skill_id, delta)`` pairs in order, all or nothing."""
    applied: List[SkillDelta] = []
    try:
        for skill_id, delta in deltas:
            if delta == 0:
                continue
            skills.increment_total_minutes(skill_id, user_id, delta)
            applied.append((skill_id, delta))
    except Exception:
        for skill_id, delta in reversed(applied):
            skills.increment_total_minutes(skill_id, user_id, -delta)
        raise
    for skill_id, delta in applied:
        logger.info(f"Skill {skill_id} minutes adjusted by {delta}")


class CreateTask:
    def __init__(
        self,
        tasks: TaskRepository,
        domain: TaskDomainService,
        skills: Optional[SkillRepository] = None,
    ):
        self.tasks = tasks
        self.domain = domain
        self.skills = skills

    def execute(self, user_id: str, data: Dict[str, Any]) -> Task:
        """Create a task for ``user_id``.

        Args:
            user_id: Owner of the new task
            data: Task fields (title, description, status, priority,
                learning_minutes, due_date, skill_id)

        Returns:
            The stored task with its final priority

        Raises:
            InvalidInputError: Missing due date, bad status or negative minutes
            NotFoundError: The skill does not belong to the caller
        """
        title = self.domain.ensure_title(data.get("title"))
        if not data.get("due_date"):
            raise InvalidInputError("dueDate is required")
        due_date = self.domain.ensure_due_date(data["due_date"])
        status = self.domain.ensure_valid_status(data.get("status") or TaskStatus.TODO.value)
        learning_minutes = self.domain.ensure_learning_minutes(data.get("learning_minutes") or 0)

        skill_id = data.get("skill_id") or None
        if skill_id and self.skills is not None:
            if self.skills.find_by_id(skill_id, user_id) is None:
                raise NotFoundError("Skill not found for this user")

        task = Task(
            user_id=user_id,
            title=title,
            description=data.get("description"),
            status=status,
            priority=data.get("priority") or 0,
            learning_minutes=learning_minutes,
            due_date=due_date,
            skill_id=skill_id,
        )
        self.domain.enforce_status_for_due_date(task)
        created = self.tasks.create(task)

        if skill_id and learning_minutes > 0 and self.skills is not None:
            try:
                apply_skill_deltas(self.skills, user_id, [(skill_id, learning_minutes)])
            except Exception:
                self.tasks.delete(created.id, user_id)
                raise
        logger.info(f"Task {created.id} created for user {user_id}")
        return created


class UpdateTask:
    def __init__(
        self,
        tasks: TaskRepository,
        domain: TaskDomainService,
        skills: Optional[SkillRepository] = None,
    ):
        self.tasks = tasks
        self.domain = domain
        self.skills = skills

    def execute(self, user_id: str, task_id: str, changes: Dict[str, Any]) -> Task:
        task = self.tasks.find_by_id(task_id, user_id)
        if task is None:
            raise NotFoundError("Task not found")

        previous = {field: getattr(task, field) for field in UPDATABLE_FIELDS}
        previous["updated_at"] = task.updated_at
        previous_skill_id = task.skill_id
        previous_minutes = task.learning_minutes or 0

        next_skill_id = changes["skill_id"] if "skill_id" in changes else previous_skill_id
        if next_skill_id and self.skills is not None:
            if self.skills.find_by_id(next_skill_id, user_id) is None:
                raise NotFoundError("Skill not found for this user")

        try:
            self.domain.update_task(task, changes)
        except DomainError:
            _restore(task, previous)
            raise
        updated = self.tasks.update(task)

        if self.skills is not None:
            new_skill_id = updated.skill_id
            new_minutes = updated.learning_minutes or 0
            if new_skill_id == previous_skill_id:
                deltas = [(new_skill_id, new_minutes - previous_minutes)] if new_skill_id else []
            else:
                deltas = []
                if previous_skill_id:
                    deltas.append((previous_skill_id, -previous_minutes))
                if new_skill_id:
                    deltas.append((new_skill_id, new_minutes))
            try:
                apply_skill_deltas(self.skills, user_id, deltas)
            except Exception:
                self.tasks.update(_restore(updated, previous))
                raise
        logger.info(f"Task {task_id} updated for user {user_id}")
        return updated


class DeleteTask:
    def __init__(self, tasks: TaskRepository, skills: Optional[SkillRepository] = None):
        self.tasks = tasks
        self.skills = skills

    def execute(self, user_id: str, task_id: str) -> None:
        task = self.tasks.find_by_id(task_id, user_id)
        if task is None:
            raise NotFoundError("Task not found")
        skill_id = task.skill_id
        minutes = task.learning_minutes or 0
        snapshot = task.model_dump()
        self.tasks.delete(task_id, user_id)

        if skill_id and minutes > 0 and self.skills is not None:
            try:
                self.skills.increment_total_minutes(skill_id, user_id, -minutes)
            except NotFoundError:
                logger.warning(f"Skill {skill_id} vanished before task {task_id} minutes were rolled back")
            except Exception:
                # Put the task back at its old position
                self.tasks.create(Task(**snapshot))
                raise
        logger.info(f"Task {task_id} deleted for user {user_id}")


class ListTasks:
    def __init__(self, tasks: TaskRepository):
        self.tasks = tasks

    def execute(self, user_id: str) -> List[Task]:
        return self.tasks.find_all_by_user(user_id)
