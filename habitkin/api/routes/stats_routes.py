"""Statistics API routes -- period progress, history, streaks, condition."""
from datetime import timedelta

from fastapi import APIRouter, Depends, Query

from habitkin.application.condition_service import condition_score, condition_window_start
from habitkin.application.stats_service import (
    STREAK_LOOKBACK_DAYS,
    current_streak,
    history_buckets,
    history_window_start,
    local_now,
    period_start,
    summary,
    task_progress,
)
from habitkin.infrastructure.auth.dependencies import get_current_user_id

router = APIRouter(prefix="/api/stats", tags=["stats"])

_task_repo = None


def init_stats_routes(task_repo):
    global _task_repo
    _task_repo = task_repo


@router.get("")
def api_stats(
    mode: str = Query("day", pattern="^(day|week|month|year)$"),
    user_id: str = Depends(get_current_user_id),
):
    now = local_now()
    since = min(
        history_window_start(mode, now),
        period_start(mode, now),
        period_start("day", now) - timedelta(days=STREAK_LOOKBACK_DAYS),
    )
    tasks = _task_repo.list_active(user_id)
    completions = _task_repo.completions_since(user_id, since)

    progress = task_progress(tasks, completions, mode, now)
    return {
        "mode": mode,
        "now": now.isoformat(),
        "progress": progress,
        "summary": summary(progress),
        "history": history_buckets(completions, mode, now),
        "streaks": {t.id: current_streak(t, completions, now) for t in tasks},
    }


@router.get("/condition")
def api_condition(user_id: str = Depends(get_current_user_id)):
    now = local_now()
    tasks = _task_repo.list_active(user_id)
    completions = _task_repo.completions_since(user_id, condition_window_start(now))
    return condition_score(tasks, completions, now)
