"""Skill use cases."""

import logging
import math
from datetime import datetime
from typing import Any, List, Optional

from ..errors import ConflictError, InvalidInputError, NotFoundError
from ..models import Skill, DEFAULT_TARGET_MINUTES
from ..repositories import SkillRepository, TaskRepository

logger = logging.getLogger(__name__)


def _clean_name(name: Any) -> str:
    if not isinstance(name, str) or not name.strip():
        raise InvalidInputError("Skill name is required")
    return name.strip()


def _parse_target(value: Any) -> int:
    """Whole minutes from a positive number; fractions are truncated first."""
    if isinstance(value, bool):
        raise InvalidInputError("targetMinutes must be a positive number")
    try:
        target = float(value)
    except (TypeError, ValueError):
        raise InvalidInputError("targetMinutes must be a positive number")
    if not math.isfinite(target) or int(target) < 1:
        raise InvalidInputError("targetMinutes must be a positive number")
    return int(target)


class CreateSkill:
    def __init__(self, skills: SkillRepository):
        self.skills = skills

    def execute(self, user_id: str, name: Any, target_minutes: Optional[Any] = None) -> Skill:
        clean = _clean_name(name)
        target = DEFAULT_TARGET_MINUTES if target_minutes is None else _parse_target(target_minutes)
        if self.skills.find_by_name(clean, user_id) is not None:
            raise ConflictError(f"Skill {clean} already exists")
        skill = self.skills.create(
            Skill(user_id=user_id, name=clean, total_minutes=0, target_minutes=target)
        )
        logger.info(f"Skill {skill.id} created for user {user_id}")
        return skill


class UpdateSkill:
    def __init__(self, skills: SkillRepository):
        self.skills = skills

    def execute(
        self,
        user_id: str,
        skill_id: str,
        name: Optional[Any] = None,
        target_minutes: Optional[Any] = None,
    ) -> Skill:
        skill = self.skills.find_by_id(skill_id, user_id)
        if skill is None:
            raise NotFoundError("Skill not found")
        if name is not None:
            clean = _clean_name(name)
            existing = self.skills.find_by_name(clean, user_id)
            if existing is not None and existing.id != skill.id:
                raise ConflictError(f"Skill {clean} already exists")
        if target_minutes is not None:
            target = _parse_target(target_minutes)
        # Validate everything before mutating
        if name is not None:
            skill.name = clean
        if target_minutes is not None:
            skill.target_minutes = target
        skill.updated_at = datetime.now()
        return self.skills.update(skill)


class DeleteSkill:
    """Remove a skill and detach the tasks that tracked minutes against it."""

    def __init__(self, skills: SkillRepository, tasks: Optional[TaskRepository] = None):
        self.skills = skills
        self.tasks = tasks

    def execute(self, user_id: str, skill_id: str) -> None:
        if self.skills.find_by_id(skill_id, user_id) is None:
            raise NotFoundError("Skill not found")
        if self.tasks is not None:
            unlinked = self.tasks.unlink_skill(skill_id, user_id)
            if unlinked:
                logger.info(f"Unlinked {unlinked} task(s) from skill {skill_id}")
        self.skills.delete(skill_id, user_id)


class ListSkills:
    def __init__(self, skills: SkillRepository):
        self.skills = skills

    def execute(self, user_id: str) -> List[Skill]:
        return self.skills.find_all_by_user(user_id)
