"""Tests for the task use cases."""
import pytest

from habitkin.application.tasks import (
    archive_task,
    complete_task,
    create_task,
    delete_task,
    edit_task,
    restore_task,
)
from habitkin.domain.enums import TaskType, FrequencyUnit, ProofType
from tests.conftest import make_task, USER_ID, OTHER_USER_ID


class TestCreateTask:
    def test_creates_habit(self):
        task = create_task(USER_ID, "Meditate", "habit", freq_times=2, freq_per="day")
        assert task.task_type == TaskType.HABIT
        assert task.freq_per == FrequencyUnit.DAY
        assert task.user_id == USER_ID

    def test_invalid_type_rejected(self):
        with pytest.raises(ValueError):
            create_task(USER_ID, "Meditate", "chore")


class TestCompleteTask:
    def test_owner_completes(self):
        task = make_task()
        c = complete_task(task, USER_ID, "override", proof_note="did it")
        assert c.task_id == task.id
        assert c.proof_type == ProofType.OVERRIDE

    def test_other_user_denied(self):
        with pytest.raises(PermissionError):
            complete_task(make_task(), OTHER_USER_ID, "override", proof_note="x")

    def test_archived_task_rejected(self):
        task = make_task()
        task.archive()
        with pytest.raises(ValueError):
            complete_task(task, USER_ID, "override", proof_note="x")

    def test_photo_needs_path(self):
        with pytest.raises(ValueError):
            complete_task(make_task(), USER_ID, "photo")


class TestArchiveTask:
    def test_archives(self):
        assert archive_task(make_task(), USER_ID).archived is True

    def test_other_user_denied(self):
        with pytest.raises(PermissionError):
            archive_task(make_task(), OTHER_USER_ID)


class TestRestoreTask:
    def test_restores(self):
        task = archive_task(make_task(), USER_ID)
        assert restore_task(task, USER_ID).archived is False

    def test_other_user_denied(self):
        task = archive_task(make_task(), USER_ID)
        with pytest.raises(PermissionError):
            restore_task(task, OTHER_USER_ID)
        assert task.archived is True


class TestEditTask:
    def test_coerces_strings(self):
        edited = edit_task(make_task(), USER_ID, task_type="habit", freq_times=4, freq_per="month")
        assert edited.task_type == TaskType.HABIT
        assert edited.freq_per == FrequencyUnit.MONTH
        assert edited.freq_times == 4

    def test_invalid_type_rejected(self):
        with pytest.raises(ValueError):
            edit_task(make_task(), USER_ID, task_type="chore")

    def test_other_user_denied(self):
        with pytest.raises(PermissionError):
            edit_task(make_task(), OTHER_USER_ID, title="Mine")


class TestDeleteTask:
    def test_owner_allowed(self):
        assert delete_task(make_task(), USER_ID) is None

    def test_other_user_denied(self):
        with pytest.raises(PermissionError):
            delete_task(make_task(), OTHER_USER_ID)
