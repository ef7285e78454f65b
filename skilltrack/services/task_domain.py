"""Rules for task status, due dates and field updates."""

from datetime import date, datetime, time
from typing import Any, Dict

from ..errors import InvalidInputError
from ..models import Task, TaskStatus

ALLOWED_STATUSES = tuple(s.value for s in TaskStatus)

UPDATABLE_FIELDS = (
    "title",
    "description",
    "status",
    "due_date",
    "priority",
    "learning_minutes",
    "skill_id",
)


class TaskDomainService:
    def ensure_valid_status(self, status: Any) -> str:
        value = status.value if isinstance(status, TaskStatus) else status
        if value not in ALLOWED_STATUSES:
            raise InvalidInputError(f"Invalid status: {value}")
        return value

    def ensure_due_date(self, value: Any) -> datetime:
        """Coerce a datetime, date or ISO-8601 string into a naive local datetime.

        Raises:
            InvalidInputError: If the value cannot be read as a date
        """
        if isinstance(value, datetime):
            parsed = value
        elif isinstance(value, date):
            parsed = datetime.combine(value, time.min)
        elif isinstance(value, str):
            try:
                parsed = datetime.fromisoformat(value.strip())
            except ValueError:
                raise InvalidInputError("Invalid due date")
        else:
            raise InvalidInputError("Invalid due date")
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone().replace(tzinfo=None)
        return parsed

    def ensure_learning_minutes(self, value: Any) -> int:
        if isinstance(value, bool):
            raise InvalidInputError("learningMinutes must be a number")
        try:
            minutes = int(value)
        except (TypeError, ValueError):
            raise InvalidInputError("learningMinutes must be a number")
        if minutes < 0:
            raise InvalidInputError("learningMinutes cannot be negative")
        return minutes

    def ensure_title(self, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise InvalidInputError("Task title is required")
        return value.strip()

    def enforce_status_for_due_date(self, task: Task) -> Task:
        if task.status == TaskStatus.DONE.value or task.due_date is None:
            return task
        if task.due_date < datetime.now():
            task.status = TaskStatus.OVERDUE.value
        elif task.status == TaskStatus.OVERDUE.value:
            task.status = TaskStatus.TODO.value
        return task

    def update_task(self, task: Task, changes: Dict[str, Any]) -> Task:
        """Apply the provided fields to ``task`` in place.

        Only keys present in ``changes`` are touched. The task's status is
        re-derived from its due date afterwards.

        Returns:
            The same, mutated task
        """
        if "title" in changes:
            task.title = self.ensure_title(changes["title"])
        if "description" in changes:
            task.description = changes["description"]
        if "status" in changes and changes["status"] is not None:
            task.status = self.ensure_valid_status(changes["status"])
        if "due_date" in changes and changes["due_date"] is not None:
            task.due_date = self.ensure_due_date(changes["due_date"])
        if "priority" in changes and changes["priority"] is not None:
            task.priority = int(changes["priority"])
        if "learning_minutes" in changes and changes["learning_minutes"] is not None:
            task.learning_minutes = self.ensure_learning_minutes(changes["learning_minutes"])
        if "skill_id" in changes:
            task.skill_id = changes["skill_id"] or None
        self.enforce_status_for_due_date(task)
        task.updated_at = datetime.now()
        return task
