from typing import List

from fastapi import APIRouter, Depends, Response, status

from ..container import TaskContainer
from ..dependencies.auth import get_caller_id, get_task_container
from ..schemas.skill import SkillCreate, SkillOut, SkillUpdate

router = APIRouter()


@router.get("", response_model=List[SkillOut])
def list_skills(
    user_id: str = Depends(get_caller_id),
    container: TaskContainer = Depends(get_task_container),
):
    """List the caller's skills alphabetically."""
    return container.list_skills.execute(user_id)


@router.post("", response_model=SkillOut, status_code=status.HTTP_201_CREATED)
def create_skill(
    skill: SkillCreate,
    user_id: str = Depends(get_caller_id),
    container: TaskContainer = Depends(get_task_container),
):
    return container.create_skill.execute(user_id, skill.name, skill.target_minutes)


@router.put("/{skill_id}", response_model=SkillOut)
def update_skill(
    skill_id: str,
    skill_update: SkillUpdate,
    user_id: str = Depends(get_caller_id),
    container: TaskContainer = Depends(get_task_container),
):
    return container.update_skill.execute(
        user_id,
        skill_id,
        name=skill_update.name,
        target_minutes=skill_update.target_minutes,
    )


@router.delete("/{skill_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_skill(
    skill_id: str,
    user_id: str = Depends(get_caller_id),
    container: TaskContainer = Depends(get_task_container),
):
    container.delete_skill.execute(user_id, skill_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
