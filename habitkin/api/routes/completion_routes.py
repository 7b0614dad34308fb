"""Completion history API -- the user's completions grouped by local day."""
from fastapi import APIRouter, Depends, Query

from habitkin.application.stats_service import completions_by_day, local_now
from habitkin.infrastructure.auth.dependencies import get_current_user_id

router = APIRouter(prefix="/api/completions", tags=["completions"])

_task_repo = None


def init_completion_routes(task_repo):
    global _task_repo
    _task_repo = task_repo


@router.get("")
def api_completion_history(
    limit: int = Query(500, ge=1, le=500),
    user_id: str = Depends(get_current_user_id),
):
    """Most recent completions, grouped by day in the app timezone, newest first.

    Completions of archived tasks keep their title; a deleted task's
    completions are gone with it.
    """
    tz = local_now().tzinfo
    rows = _task_repo.recent_completions(user_id, limit)
    titles = {t.id: t.title for t in _task_repo.list_active(user_id)}
    titles.update({t.id: t.title for t in _task_repo.list_archived(user_id)})

    days = []
    for day, completions in completions_by_day(rows, tz):
        items = []
        for completion in completions:
            item = completion.to_dict()
            item["task_title"] = titles.get(completion.task_id)
            items.append(item)
        days.append({"date": day.isoformat(), "count": len(items), "completions": items})
    return {"days": days}
