"""Unit tests for Task and Completion entities."""
from datetime import datetime, timezone

import pytest

from habitkin.domain.enums import TaskType, FrequencyUnit, ProofType
from habitkin.domain.task import Task, Completion
from tests.conftest import make_task, USER_ID


class TestTaskCreation:
    def test_habit_defaults(self):
        t = Task(user_id=USER_ID, title="Read")
        assert t.task_type == TaskType.HABIT
        assert t.freq_times == 1
        assert t.freq_per == FrequencyUnit.WEEK
        assert t.archived is False

    def test_title_is_stripped(self):
        assert Task(user_id=USER_ID, title="  Run  ").title == "Run"

    def test_empty_title_rejected(self):
        with pytest.raises(ValueError):
            Task(user_id=USER_ID, title="   ")

    def test_long_title_rejected(self):
        with pytest.raises(ValueError):
            Task(user_id=USER_ID, title="x" * 121)

    def test_freq_times_bounds(self):
        with pytest.raises(ValueError):
            Task(user_id=USER_ID, title="Run", freq_times=0)
        with pytest.raises(ValueError):
            Task(user_id=USER_ID, title="Run", freq_times=366)

    def test_single_task_has_no_frequency(self):
        t = Task(user_id=USER_ID, title="File taxes", task_type="single", freq_times=3, freq_per="day")
        assert t.freq_times is None
        assert t.freq_per is None

    def test_unknown_frequency_rejected(self):
        with pytest.raises(ValueError):
            Task(user_id=USER_ID, title="Run", freq_per="fortnight")


class TestSchedule:
    def test_days_sorted_and_deduplicated(self):
        t = make_task(scheduled_days=[5, 1, 5, 3])
        assert t.scheduled_days == [1, 3, 5]

    def test_empty_schedule_means_every_day(self):
        t = make_task(scheduled_days=[])
        assert t.scheduled_days is None
        assert all(t.is_scheduled_on(d) for d in range(7))

    def test_is_scheduled_on(self):
        t = make_task(scheduled_days=[0, 6])
        assert t.is_scheduled_on(0)
        assert not t.is_scheduled_on(3)

    def test_invalid_weekday_rejected(self):
        with pytest.raises(ValueError):
            make_task(scheduled_days=[7])


class TestSerialization:
    def test_round_trip(self):
        t = make_task(title="Stretch", freq_times=2, scheduled_days=[1, 2])
        restored = Task.from_dict(t.to_dict())
        assert restored.to_dict() == t.to_dict()

    def test_archive(self):
        t = make_task()
        t.archive()
        assert t.to_dict()["archived"] is True

    def test_restore(self):
        t = make_task()
        t.archive()
        t.restore()
        assert t.archived is False


class TestEdited:
    def test_keeps_identity(self):
        t = make_task(freq_times=3, scheduled_days=[2])
        t.archive()
        e = t.edited(title="  Drink tea ")
        assert e.title == "Drink tea"
        assert (e.id, e.user_id, e.created_at, e.archived) == (t.id, t.user_id, t.created_at, True)
        assert e.freq_times == 3
        assert e.scheduled_days == [2]

    def test_original_untouched(self):
        t = make_task(title="Run")
        t.edited(title="Walk")
        assert t.title == "Run"

    def test_to_single_drops_frequency(self):
        e = make_task().edited(task_type=TaskType.SINGLE)
        assert e.freq_times is None
        assert e.freq_per is None

    def test_to_habit_gets_defaults(self):
        single = make_task(task_type=TaskType.SINGLE)
        e = single.edited(task_type=TaskType.HABIT)
        assert e.freq_times == 1
        assert e.freq_per == FrequencyUnit.WEEK

    def test_validated_like_new_task(self):
        with pytest.raises(ValueError):
            make_task().edited(title="   ")
        with pytest.raises(ValueError):
            make_task().edited(freq_times=0)
        with pytest.raises(ValueError):
            make_task().edited(scheduled_days=[7])

    def test_unknown_field_rejected(self):
        with pytest.raises(ValueError, match="user_id"):
            make_task().edited(user_id="someone")


class TestCompletion:
    def test_photo_requires_path(self):
        with pytest.raises(ValueError):
            Completion(user_id=USER_ID, task_id="t1", proof_type="photo")

    def test_override_requires_note(self):
        with pytest.raises(ValueError):
            Completion(user_id=USER_ID, task_id="t1", proof_type="override", proof_note="  ")

    def test_naive_timestamp_taken_as_utc(self):
        c = Completion(user_id=USER_ID, task_id="t1", proof_type=ProofType.PHOTO,
                       photo_path="p.jpg", completed_at="2025-03-01T10:00:00")
        assert c.completed_at == datetime(2025, 3, 1, 10, tzinfo=timezone.utc)

    def test_z_suffix_parsed(self):
        c = Completion(user_id=USER_ID, task_id="t1", proof_type="override",
                       proof_note="gym closed", completed_at="2025-03-01T10:00:00Z")
        assert c.completed_at.tzinfo is not None

    def test_round_trip(self):
        c = Completion(user_id=USER_ID, task_id="t1", proof_type="override", proof_note="ok")
        assert Completion.from_dict(c.to_dict()).to_dict() == c.to_dict()
