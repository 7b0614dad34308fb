"""Validation guards shared by domain entities."""
import math


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def require_number(value, name: str) -> float:
    """Coerce value to a finite float or raise ValueError."""
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(number):
        raise ValueError(f"{name} must be finite, got {value!r}")
    return number


def validate_owner(owner_id: str, user_id: str) -> None:
    """Raises if the user does not own the resource."""
    if owner_id != user_id:
        raise PermissionError("Access denied.")


def validate_not_archived(archived: bool) -> None:
    """Raises if the task has been archived."""
    if archived:
        raise ValueError("Task is archived and cannot be completed.")


def validate_weekdays(days) -> list | None:
    """Normalize a weekday selection (0=Sun..6=Sat). Empty means every day."""
    if days is None:
        return None
    normalized = set()
    for day in days:
        if isinstance(day, bool) or not isinstance(day, int) or not 0 <= day <= 6:
            raise ValueError(f"scheduled_days must contain weekdays 0-6, got {day!r}")
        normalized.add(day)
    return sorted(normalized) or None
