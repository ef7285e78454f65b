from typing import List

from fastapi import APIRouter, Depends, Response, status

from ..container import TaskContainer
from ..dependencies.auth import get_caller_id, get_task_container
from ..schemas.task import TaskCreate, TaskOut, TaskUpdate

router = APIRouter()


@router.get("", response_model=List[TaskOut])
def list_tasks(
    user_id: str = Depends(get_caller_id),
    container: TaskContainer = Depends(get_task_container),
):
    """List the caller's tasks ordered by priority."""
    return container.list_tasks.execute(user_id)


@router.post("", response_model=TaskOut, status_code=status.HTTP_201_CREATED)
def create_task(
    task: TaskCreate,
    user_id: str = Depends(get_caller_id),
    container: TaskContainer = Depends(get_task_container),
):
    return container.create_task.execute(user_id, task.model_dump(exclude_unset=True))


@router.put("/{task_id}", response_model=TaskOut)
def update_task(
    task_id: str,
    task_update: TaskUpdate,
    user_id: str = Depends(get_caller_id),
    container: TaskContainer = Depends(get_task_container),
):
    """Apply a partial update. Only fields present in the body change."""
    return container.update_task.execute(
        user_id,
        task_id,
        task_update.model_dump(exclude_unset=True),
    )


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(
    task_id: str,
    user_id: str = Depends(get_caller_id),
    container: TaskContainer = Depends(get_task_container),
):
    container.delete_task.execute(user_id, task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
