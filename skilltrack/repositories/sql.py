"""SQLModel-backed repositories.

Every write opens its own session and commits once, so a row change and the
priority renumbering that follows it share one transaction.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import case, func, update
from sqlmodel import Session, select

from ..errors import NotFoundError
from ..models import User, Task, Skill
from .memory import target_position

_TASK_FIELDS = (
    "title",
    "description",
    "status",
    "learning_minutes",
    "due_date",
    "skill_id",
    "updated_at",
)


class _SqlRepository:
    def __init__(self, engine):
        self.engine = engine

    def _session(self) -> Session:
        return Session(self.engine, expire_on_commit=False)


class SqlUserRepository(_SqlRepository):
    def find_by_email(self, email: str) -> Optional[User]:
        with self._session() as session:
            return session.exec(select(User).where(User.email == email)).first()

    def find_by_id(self, user_id: str) -> Optional[User]:
        with self._session() as session:
            return session.get(User, user_id)

    def find_by_refresh_token(self, token: str) -> Optional[User]:
        if not token:
            return None
        with self._session() as session:
            return session.exec(select(User).where(User.refresh_token == token)).first()

    def create(self, user: User) -> User:
        with self._session() as session:
            session.add(user)
            session.commit()
            session.refresh(user)
            return user

    def update(self, user: User) -> User:
        with self._session() as session:
            current = session.get(User, user.id)
            if current is None:
                raise NotFoundError("User not found")
            current.email = user.email
            current.password_hash = user.password_hash
            current.refresh_token = user.refresh_token
            current.refresh_token_expires_at = user.refresh_token_expires_at
            session.add(current)
            session.commit()
            session.refresh(current)
            return current


class SqlTaskRepository(_SqlRepository):
    def find_all_by_user(self, user_id: str) -> List[Task]:
        with self._session() as session:
            statement = (
                select(Task)
                .where(Task.user_id == user_id)
                .order_by(Task.priority, Task.created_at, Task.id)
            )
            return list(session.exec(statement).all())

    def find_by_id(self, task_id: str, user_id: str) -> Optional[Task]:
        with self._session() as session:
            return self._get_scoped(session, task_id, user_id)

    def create(self, task: Task) -> Task:
        with self._session() as session:
            position = target_position(task.priority, self._count(session, task.user_id) + 1)
            self._shift(session, task.user_id, lower=position, upper=None, step=1)
            task.priority = position
            session.add(task)
            session.flush()
            self._renumber(session, task.user_id)
            session.commit()
            session.refresh(task)
            return task

    def update(self, task: Task) -> Task:
        with self._session() as session:
            current = self._get_scoped(session, task.id, task.user_id)
            if current is None:
                raise NotFoundError("Task not found")
            old = current.priority
            new = target_position(task.priority, self._count(session, task.user_id))
            if new < old:
                self._shift(session, task.user_id, lower=new, upper=old - 1, step=1, exclude_id=task.id)
            elif new > old:
                self._shift(session, task.user_id, lower=old + 1, upper=new, step=-1, exclude_id=task.id)
            for field in _TASK_FIELDS:
                setattr(current, field, getattr(task, field))
            current.priority = new
            session.add(current)
            session.flush()
            self._renumber(session, task.user_id)
            session.commit()
            session.refresh(current)
            return current

    def delete(self, task_id: str, user_id: str) -> None:
        with self._session() as session:
            current = self._get_scoped(session, task_id, user_id)
            if current is None:
                raise NotFoundError("Task not found")
            session.delete(current)
            session.flush()
            self._renumber(session, user_id)
            session.commit()

    def unlink_skill(self, skill_id: str, user_id: str) -> int:
        with self._session() as session:
            statement = (
                update(Task)
                .where(Task.user_id == user_id, Task.skill_id == skill_id)
                .values(skill_id=None, updated_at=datetime.now())
                .execution_options(synchronize_session=False)
            )
            result = session.exec(statement)
            session.commit()
            return result.rowcount

    @staticmethod
    def _get_scoped(session: Session, task_id: str, user_id: str) -> Optional[Task]:
        return session.exec(select(Task).where(Task.id == task_id, Task.user_id == user_id)).first()

    @staticmethod
    def _count(session: Session, user_id: str) -> int:
        return session.exec(select(func.count()).select_from(Task).where(Task.user_id == user_id)).one()

    @staticmethod
    def _shift(session: Session, user_id: str, lower: int, upper: Optional[int], step: int, exclude_id: Optional[str] = None) -> None:
        statement = update(Task).where(Task.user_id == user_id, Task.priority >= lower)
        if upper is not None:
            statement = statement.where(Task.priority <= upper)
        if exclude_id is not None:
            statement = statement.where(Task.id != exclude_id)
        session.exec(
            statement.values(priority=Task.priority + step).execution_options(synchronize_session=False)
        )

    @staticmethod
    def _renumber(session: Session, user_id: str) -> None:
        """Reassign dense 1..N priorities for one user in a single statement."""
        ranked = (
            select(
                Task.id.label("task_id"),
                func.row_number()
                .over(order_by=[Task.priority, Task.created_at, Task.id])
                .label("new_priority"),
            )
            .where(Task.user_id == user_id)
            .subquery()
        )
        session.exec(
            update(Task)
            .where(Task.id == ranked.c.task_id)
            .values(priority=ranked.c.new_priority)
            .execution_options(synchronize_session=False)
        )


class SqlSkillRepository(_SqlRepository):
    def find_all_by_user(self, user_id: str) -> List[Skill]:
        with self._session() as session:
            statement = select(Skill).where(Skill.user_id == user_id).order_by(func.lower(Skill.name))
            return list(session.exec(statement).all())

    def find_by_id(self, skill_id: str, user_id: str) -> Optional[Skill]:
        with self._session() as session:
            return self._get_scoped(session, skill_id, user_id)

    def find_by_name(self, name: str, user_id: str) -> Optional[Skill]:
        with self._session() as session:
            statement = select(Skill).where(
                Skill.user_id == user_id, func.lower(Skill.name) == name.lower()
            )
            return session.exec(statement).first()

    def create(self, skill: Skill) -> Skill:
        with self._session() as session:
            session.add(skill)
            session.commit()
            session.refresh(skill)
            return skill

    def update(self, skill: Skill) -> Skill:
        with self._session() as session:
            current = self._get_scoped(session, skill.id, skill.user_id)
            if current is None:
                raise NotFoundError("Skill not found")
            current.name = skill.name
            current.target_minutes = skill.target_minutes
            current.updated_at = skill.updated_at
            session.add(current)
            session.commit()
            session.refresh(current)
            return current

    def delete(self, skill_id: str, user_id: str) -> None:
        with self._session() as session:
            current = self._get_scoped(session, skill_id, user_id)
            if current is None:
                raise NotFoundError("Skill not found")
            session.delete(current)
            session.commit()

    def increment_total_minutes(self, skill_id: str, user_id: str, delta: int) -> None:
        if delta == 0:
            return
        new_total = Skill.total_minutes + delta
        statement = (
            update(Skill)
            .where(Skill.id == skill_id, Skill.user_id == user_id)
            .values(total_minutes=case((new_total < 0, 0), else_=new_total), updated_at=datetime.now())
            .execution_options(synchronize_session=False)
        )
        with self._session() as session:
            result = session.exec(statement)
            if not result.rowcount:
                raise NotFoundError("Skill not found")
            session.commit()

    @staticmethod
    def _get_scoped(session: Session, skill_id: str, user_id: str) -> Optional[Skill]:
        return session.exec(select(Skill).where(Skill.id == skill_id, Skill.user_id == user_id)).first()
