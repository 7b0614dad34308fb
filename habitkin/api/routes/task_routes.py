"""Task API routes -- create, list, edit, complete, archive, restore, delete."""
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from habitkin.application.tasks import (
    archive_task,
    complete_task,
    create_task,
    delete_task,
    edit_task,
    restore_task,
)
from habitkin.infrastructure.audit import log_event
from habitkin.infrastructure.auth.dependencies import get_current_user_id
from habitkin.infrastructure.repositories.errors import TaskStoreError

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


class CreateTaskRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=120)
    type: str = Field("habit", pattern="^(habit|single)$")
    freq_times: Optional[int] = Field(None, ge=1, le=365)
    freq_per: Optional[str] = Field(None, pattern="^(day|week|month|year)$")
    scheduled_days: Optional[List[int]] = None


class UpdateTaskRequest(BaseModel):
    """Only the fields present in the body are changed."""
    title: Optional[str] = Field(None, min_length=1, max_length=120)
    type: Optional[str] = Field(None, pattern="^(habit|single)$")
    freq_times: Optional[int] = Field(None, ge=1, le=365)
    freq_per: Optional[str] = Field(None, pattern="^(day|week|month|year)$")
    scheduled_days: Optional[List[int]] = None


class CompleteTaskRequest(BaseModel):
    proof_type: str = Field(..., pattern="^(photo|override)$")
    proof_note: Optional[str] = Field(None, max_length=500)
    photo_path: Optional[str] = Field(None, max_length=500)


_task_repo = None


def init_task_routes(task_repo):
    global _task_repo
    _task_repo = task_repo


def _get_owned_task(task_id: str, user_id: str):
    task = _task_repo.get_task(task_id)
    if not task:
        raise HTTPException(status_code=404, detail="Task not found")
    if task.user_id != user_id:
        raise HTTPException(status_code=403, detail="Access denied.")
    return task


def _store(write, *args) -> None:
    try:
        write(*args)
    except TaskStoreError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.post("")
def api_create_task(req: CreateTaskRequest, user_id: str = Depends(get_current_user_id)):
    try:
        task = create_task(
            user_id=user_id,
            title=req.title,
            task_type=req.type,
            freq_times=req.freq_times,
            freq_per=req.freq_per,
            scheduled_days=req.scheduled_days,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    _store(_task_repo.save_task, task)
    log_event("task_created", user_id, {"task_id": task.id, "title": task.title})
    return task.to_dict()


@router.get("")
def api_list_tasks(
    archived: bool = Query(False),
    user_id: str = Depends(get_current_user_id),
):
    """The current user's active tasks (or archived ones), newest first."""
    tasks = _task_repo.list_archived(user_id) if archived else _task_repo.list_active(user_id)
    return [t.to_dict() for t in tasks]


@router.patch("/{task_id}")
def api_edit_task(task_id: str, req: UpdateTaskRequest,
                  user_id: str = Depends(get_current_user_id)):
    task = _get_owned_task(task_id, user_id)
    changes = req.model_dump(exclude_unset=True)
    if "type" in changes:
        changes["task_type"] = changes.pop("type")
    if changes.get("title", "") is None or changes.get("task_type", "") is None:
        raise HTTPException(status_code=400, detail="title and type cannot be cleared")
    try:
        edited = edit_task(task, user_id, **changes)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    _store(_task_repo.save_task, edited)
    log_event("task_edited", user_id, {"task_id": task.id, "fields": sorted(changes)})
    return edited.to_dict()


@router.delete("/{task_id}")
def api_delete_task(task_id: str, user_id: str = Depends(get_current_user_id)):
    """Removes the task and its completion history. Cannot be undone."""
    task = _get_owned_task(task_id, user_id)
    delete_task(task, user_id)
    _store(_task_repo.delete_task, task.id)
    log_event("task_deleted", user_id, {"task_id": task.id, "title": task.title})
    return {"deleted": task.id}


@router.post("/{task_id}/complete")
def api_complete_task(task_id: str, req: CompleteTaskRequest,
                      user_id: str = Depends(get_current_user_id)):
    task = _get_owned_task(task_id, user_id)
    try:
        completion = complete_task(
            task,
            user_id,
            proof_type=req.proof_type,
            proof_note=req.proof_note,
            photo_path=req.photo_path,
        )
    except PermissionError as e:
        raise HTTPException(status_code=403, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    _store(_task_repo.add_completion, completion)
    log_event("task_completed", user_id, {"task_id": task.id, "proof_type": req.proof_type})
    return completion.to_dict()


@router.post("/{task_id}/archive")
def api_archive_task(task_id: str, user_id: str = Depends(get_current_user_id)):
    task = _get_owned_task(task_id, user_id)
    archive_task(task, user_id)
    _store(_task_repo.save_task, task)
    log_event("task_archived", user_id, {"task_id": task.id})
    return task.to_dict()


@router.post("/{task_id}/unarchive")
def api_restore_task(task_id: str, user_id: str = Depends(get_current_user_id)):
    task = _get_owned_task(task_id, user_id)
    restore_task(task, user_id)
    _store(_task_repo.save_task, task)
    log_event("task_restored", user_id, {"task_id": task.id})
    return task.to_dict()
