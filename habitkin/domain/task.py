"""Task entities -- recurring habits, one-off tasks and their completions."""
from datetime import datetime, timezone
from uuid import uuid4

from habitkin.domain.enums import TaskType, FrequencyUnit, ProofType
from habitkin.domain.invariant import validate_weekdays

MAX_TITLE_LENGTH = 120
MAX_FREQ_TIMES = 365


def _to_datetime(value) -> datetime:
    """Accept a datetime or ISO string; naive values are taken as UTC."""
    if value is None:
        return datetime.now(timezone.utc)
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


class Task:
    """A habit (recurring N times per period) or a single to-do."""

    def __init__(
        self,
        user_id: str,
        title: str,
        task_type: TaskType = TaskType.HABIT,
        freq_times: int | None = None,
        freq_per: FrequencyUnit | None = None,
        scheduled_days: list | None = None,
        archived: bool = False,
        task_id: str | None = None,
        created_at=None,
    ):
        if not title or not title.strip():
            raise ValueError("Task title cannot be empty")
        if len(title.strip()) > MAX_TITLE_LENGTH:
            raise ValueError(f"Task title must be at most {MAX_TITLE_LENGTH} characters")

        task_type = TaskType(task_type)
        if task_type == TaskType.HABIT:
            freq_times = 1 if freq_times is None else freq_times
            if isinstance(freq_times, bool) or not isinstance(freq_times, int) \
                    or not 1 <= freq_times <= MAX_FREQ_TIMES:
                raise ValueError(f"freq_times must be between 1 and {MAX_FREQ_TIMES}")
            freq_per = FrequencyUnit(freq_per) if freq_per is not None else FrequencyUnit.WEEK
        else:
            freq_times = None
            freq_per = None

        self._id = task_id or str(uuid4())
        self._user_id = user_id
        self._title = title.strip()
        self._type = task_type
        self._freq_times = freq_times
        self._freq_per = freq_per
        self._scheduled_days = validate_weekdays(scheduled_days)
        self._archived = archived
        self._created_at = _to_datetime(created_at)

    @property
    def id(self) -> str:
        return self._id

    @property
    def user_id(self) -> str:
        return self._user_id

    @property
    def title(self) -> str:
        return self._title

    @property
    def task_type(self) -> TaskType:
        return self._type

    @property
    def freq_times(self) -> int | None:
        return self._freq_times

    @property
    def freq_per(self) -> FrequencyUnit | None:
        return self._freq_per

    @property
    def scheduled_days(self) -> list | None:
        return list(self._scheduled_days) if self._scheduled_days else None

    @property
    def archived(self) -> bool:
        return self._archived

    @property
    def created_at(self) -> datetime:
        return self._created_at

    def is_scheduled_on(self, weekday: int) -> bool:
        """weekday uses 0=Sun..6=Sat. No schedule means every day."""
        if not self._scheduled_days:
            return True
        return weekday in self._scheduled_days

    def archive(self) -> None:
        self._archived = True

    def restore(self) -> None:
        self._archived = False

    def edited(self, **changes) -> "Task":
        """A copy with the given fields replaced, validated like a new task.

        Accepts title, task_type, freq_times, freq_per and scheduled_days.
        Identity, owner, archive state and creation time are kept. Switching
        to a single task drops the frequency; switching to a habit without
        one falls back to the habit defaults.
        """
        editable = ("title", "task_type", "freq_times", "freq_per", "scheduled_days")
        unknown = set(changes) - set(editable)
        if unknown:
            raise ValueError(f"Cannot edit {', '.join(sorted(unknown))}")
        fields = {
            "title": self._title,
            "task_type": self._type,
            "freq_times": self._freq_times,
            "freq_per": self._freq_per,
            "scheduled_days": self.scheduled_days,
        }
        fields.update(changes)
        return Task(
            user_id=self._user_id,
            archived=self._archived,
            task_id=self._id,
            created_at=self._created_at,
            **fields,
        )

    def to_dict(self) -> dict:
        return {
            "id": self._id,
            "user_id": self._user_id,
            "title": self._title,
            "type": self._type.value,
            "freq_times": self._freq_times,
            "freq_per": self._freq_per.value if self._freq_per else None,
            "scheduled_days": self.scheduled_days,
            "archived": self._archived,
            "created_at": self._created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        return cls(
            user_id=data["user_id"],
            title=data["title"],
            task_type=data.get("type", TaskType.HABIT.value),
            freq_times=data.get("freq_times"),
            freq_per=data.get("freq_per"),
            scheduled_days=data.get("scheduled_days"),
            archived=bool(data.get("archived", False)),
            task_id=data["id"],
            created_at=data.get("created_at"),
        )


class Completion:
    """Proof that a task was done at a point in time. Immutable."""

    def __init__(
        self,
        user_id: str,
        task_id: str,
        proof_type: ProofType,
        proof_note: str | None = None,
        photo_path: str | None = None,
        completed_at=None,
        completion_id: str | None = None,
    ):
        proof_type = ProofType(proof_type)
        proof_note = proof_note.strip() if proof_note else None
        if proof_type == ProofType.PHOTO and not photo_path:
            raise ValueError("Photo proof requires a photo_path")
        if proof_type == ProofType.OVERRIDE and not proof_note:
            raise ValueError("Override proof requires a note")

        self._id = completion_id or str(uuid4())
        self._user_id = user_id
        self._task_id = task_id
        self._proof_type = proof_type
        self._proof_note = proof_note
        self._photo_path = photo_path
        self._completed_at = _to_datetime(completed_at)

    @property
    def id(self) -> str:
        return self._id

    @property
    def user_id(self) -> str:
        return self._user_id

    @property
    def task_id(self) -> str:
        return self._task_id

    @property
    def proof_type(self) -> ProofType:
        return self._proof_type

    @property
    def completed_at(self) -> datetime:
        return self._completed_at

    def to_dict(self) -> dict:
        return {
            "id": self._id,
            "user_id": self._user_id,
            "task_id": self._task_id,
            "proof_type": self._proof_type.value,
            "proof_note": self._proof_note,
            "photo_path": self._photo_path,
            "completed_at": self._completed_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Completion":
        return cls(
            user_id=data["user_id"],
            task_id=data["task_id"],
            proof_type=data["proof_type"],
            proof_note=data.get("proof_note"),
            photo_path=data.get("photo_path"),
            completed_at=data.get("completed_at"),
            completion_id=data["id"],
        )
