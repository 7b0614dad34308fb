"""Condition score: how well daily habits have been kept lately.

Each of the last WINDOW_DAYS days gets a completion rate over the daily
habits scheduled that day (a day with nothing due counts as perfect). The
rates are smoothed with an exponential moving average whose half-life grows
with the number of tracked days, so a long history moves more slowly.
"""
from datetime import timedelta

from habitkin.application.stats_service import daily_done_counts, schedule_weekday
from habitkin.domain.enums import TaskType, FrequencyUnit, ConditionTier
from habitkin.domain.invariant import clamp

WINDOW_DAYS = 14
MIN_HALF_LIFE = 3
MAX_HALF_LIFE = 21


def required_on_day(task, day) -> int:
    """Only daily habits count, and only on their scheduled weekdays."""
    if task.archived or task.task_type != TaskType.HABIT:
        return 0
    if (task.freq_per or FrequencyUnit.WEEK) != FrequencyUnit.DAY:
        return 0
    if not task.is_scheduled_on(schedule_weekday(day)):
        return 0
    return max(1, task.freq_times or 1)


def half_life(tracked_days: int) -> int:
    return int(clamp(MIN_HALF_LIFE + tracked_days // 7, MIN_HALF_LIFE, MAX_HALF_LIFE))


def smooth(rates: list, tracked_days: int) -> float:
    """EMA over rates (oldest first) scaled to 0..100."""
    alpha = 1 - 0.5 ** (1 / half_life(tracked_days))
    ema = rates[0] if rates else 0.5
    for rate in rates[1:]:
        ema = alpha * rate + (1 - alpha) * ema
    return clamp(ema * 100, 0, 100)


def condition_score(tasks, completions, now) -> dict:
    tz = now.tzinfo
    counts = daily_done_counts(completions, tz)
    today = now.date()
    days = [today - timedelta(days=offset) for offset in range(WINDOW_DAYS - 1, -1, -1)]

    rates = []
    tracked = 0
    for day in days:
        required = 0
        done = 0
        for task in tasks:
            need = required_on_day(task, day)
            if need <= 0:
                continue
            required += need
            done += min(need, counts[(task.id, day)])
        if required > 0:
            tracked += 1
        rates.append(clamp(done / required, 0.0, 1.0) if required else 1.0)

    score = smooth(rates, tracked)
    return {
        "score": round(score, 1),
        "tier": ConditionTier.from_score(score).value,
        "tracked_days": tracked,
        "half_life": half_life(tracked),
        "rates": [round(rate, 3) for rate in rates],
    }


def condition_window_start(now):
    """Earliest timestamp condition_score needs completions from."""
    first = now.date() - timedelta(days=WINDOW_DAYS - 1)
    return now.replace(year=first.year, month=first.month, day=first.day,
                       hour=0, minute=0, second=0, microsecond=0)
