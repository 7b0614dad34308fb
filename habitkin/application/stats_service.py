"""Progress statistics over tasks and completions.

Pure functions over rows the caller already fetched. All calendar math is
done in the local timezone of `now`, so `now` must be timezone-aware.
Weeks start on Monday; weekdays in task schedules use 0=Sun..6=Sat.
"""
import os
from collections import Counter
from datetime import datetime, date, time, timedelta
from zoneinfo import ZoneInfo

from habitkin.domain.enums import TaskType, FrequencyUnit
from habitkin.domain.invariant import clamp

APP_TIMEZONE = os.environ.get("APP_TIMEZONE", "UTC")

# How many buckets each history chart shows.
HISTORY_LENGTH = {
    FrequencyUnit.DAY: 7,
    FrequencyUnit.WEEK: 8,
    FrequencyUnit.MONTH: 12,
    FrequencyUnit.YEAR: 5,
}

STREAK_LOOKBACK_DAYS = 60


def local_now(tz_name: str | None = None) -> datetime:
    return datetime.now(ZoneInfo(tz_name or APP_TIMEZONE))


def schedule_weekday(day: date) -> int:
    """Python's Monday=0 weekday converted to the 0=Sun schedule convention."""
    return (day.weekday() + 1) % 7


def _start_of(day: date, tz) -> datetime:
    return datetime.combine(day, time.min, tzinfo=tz)


def _add_months(day: date, months: int) -> date:
    index = day.year * 12 + (day.month - 1) + months
    return date(index // 12, index % 12 + 1, 1)


def _period_date(mode: FrequencyUnit, today: date) -> date:
    if mode == FrequencyUnit.DAY:
        return today
    if mode == FrequencyUnit.WEEK:
        return today - timedelta(days=today.weekday())
    if mode == FrequencyUnit.MONTH:
        return today.replace(day=1)
    return today.replace(month=1, day=1)


def _step(mode: FrequencyUnit, day: date, count: int) -> date:
    """Move a period start by `count` periods."""
    if mode == FrequencyUnit.DAY:
        return day + timedelta(days=count)
    if mode == FrequencyUnit.WEEK:
        return day + timedelta(weeks=count)
    if mode == FrequencyUnit.MONTH:
        return _add_months(day, count)
    return day.replace(year=day.year + count)


def period_start(mode, now: datetime) -> datetime:
    mode = FrequencyUnit(mode)
    return _start_of(_period_date(mode, now.date()), now.tzinfo)


def required_in_mode(task, mode) -> int:
    """How many completions the task needs in the current period of `mode`.

    Single tasks only count toward the year view. Habits count only in the
    view matching their own frequency unit.
    """
    mode = FrequencyUnit(mode)
    if task.task_type == TaskType.SINGLE:
        return 1 if mode == FrequencyUnit.YEAR else 0
    per = task.freq_per or FrequencyUnit.WEEK
    if per != mode:
        return 0
    return max(1, task.freq_times or 1)


def task_progress(tasks, completions, mode, now: datetime) -> list:
    mode = FrequencyUnit(mode)
    start = period_start(mode, now)
    done_counts = Counter(c.task_id for c in completions if c.completed_at >= start)
    today = schedule_weekday(now.date())

    items = []
    for task in tasks:
        if task.archived:
            continue
        required = required_in_mode(task, mode)
        if required <= 0:
            continue
        if mode == FrequencyUnit.DAY and not task.is_scheduled_on(today):
            continue
        done = min(done_counts[task.id], required)
        items.append({
            "task_id": task.id,
            "title": task.title,
            "required": required,
            "done": done,
            "pct": round(clamp(done / required * 100, 0, 100), 1),
        })

    # Incomplete first, then least progress.
    items.sort(key=lambda item: (item["done"] >= item["required"], item["pct"]))
    return items


def summary(progress: list) -> dict:
    due = len(progress)
    completed = sum(1 for item in progress if item["done"] >= item["required"])
    return {
        "due": due,
        "completed": completed,
        "remaining": max(0, due - completed),
        "pct": round(completed / due * 100) if due else 0,
    }


def _bucket_label(mode: FrequencyUnit, start: date) -> str:
    if mode == FrequencyUnit.DAY:
        return start.strftime("%a")
    if mode == FrequencyUnit.WEEK:
        return f"{start.strftime('%b')} {start.day}"
    if mode == FrequencyUnit.MONTH:
        return start.strftime("%b")
    return str(start.year)


def history_window_start(mode, now: datetime) -> datetime:
    """Earliest timestamp the history chart for `mode` needs."""
    mode = FrequencyUnit(mode)
    current = _period_date(mode, now.date())
    return _start_of(_step(mode, current, -(HISTORY_LENGTH[mode] - 1)), now.tzinfo)


def history_buckets(completions, mode, now: datetime) -> dict:
    """Completion counts for the recent periods of `mode`, oldest first."""
    mode = FrequencyUnit(mode)
    tz = now.tzinfo
    current = _period_date(mode, now.date())
    length = HISTORY_LENGTH[mode]

    buckets = []
    for offset in range(length - 1, -1, -1):
        start_day = _step(mode, current, -offset)
        buckets.append({
            "label": _bucket_label(mode, start_day),
            "start": _start_of(start_day, tz),
            "end": _start_of(_step(mode, start_day, 1), tz),
            "count": 0,
        })

    for completion in completions:
        for bucket in buckets:
            if bucket["start"] <= completion.completed_at < bucket["end"]:
                bucket["count"] += 1
                break

    peak = max([1] + [bucket["count"] for bucket in buckets])
    for bucket in buckets:
        bucket["start"] = bucket["start"].isoformat()
        bucket["end"] = bucket["end"].isoformat()
    return {"buckets": buckets, "max": peak}


def daily_done_counts(completions, tz) -> Counter:
    """Completions per (task_id, local date)."""
    return Counter((c.task_id, c.completed_at.astimezone(tz).date()) for c in completions)


def completions_by_day(completions, tz) -> list:
    """[(local date, completions)] newest day first, newest completion first within a day."""
    days = {}
    for completion in completions:
        days.setdefault(completion.completed_at.astimezone(tz).date(), []).append(completion)
    return [
        (day, sorted(days[day], key=lambda c: c.completed_at, reverse=True))
        for day in sorted(days, reverse=True)
    ]


def current_streak(task, completions, now: datetime, lookback_days: int = STREAK_LOOKBACK_DAYS) -> int:
    """Consecutive scheduled days on which a daily habit met its requirement.

    The streak ends today, or yesterday while today is still open. Days the
    habit is not scheduled on neither extend nor break it. Weekly, monthly
    and yearly habits and single tasks have no daily streak.
    """
    if task.task_type != TaskType.HABIT or task.freq_per != FrequencyUnit.DAY:
        return 0

    tz = now.tzinfo
    required = max(1, task.freq_times or 1)
    counts = daily_done_counts([c for c in completions if c.task_id == task.id], tz)
    today = now.date()
    first_day = max(today - timedelta(days=lookback_days), task.created_at.astimezone(tz).date())

    day = today
    if task.is_scheduled_on(schedule_weekday(today)) and counts[(task.id, today)] < required:
        day = today - timedelta(days=1)

    streak = 0
    while day >= first_day:
        if task.is_scheduled_on(schedule_weekday(day)):
            if counts[(task.id, day)] < required:
                break
            streak += 1
        day -= timedelta(days=1)
    return streak
