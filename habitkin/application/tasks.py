"""Use cases: create, edit, complete, archive, restore and delete habit tasks."""
import logging

from habitkin.domain.enums import TaskType, FrequencyUnit, ProofType
from habitkin.domain.invariant import validate_owner, validate_not_archived
from habitkin.domain.task import Task, Completion

logger = logging.getLogger("habitkin.tasks")


def create_task(
    user_id: str,
    title: str,
    task_type: str = TaskType.HABIT.value,
    freq_times: int | None = None,
    freq_per: str | None = None,
    scheduled_days: list | None = None,
) -> Task:
    """
    Creates a new task with validated inputs.
    Returns the Task; persisting it is the caller's job.
    """
    task = Task(
        user_id=user_id,
        title=title,
        task_type=TaskType(task_type),
        freq_times=freq_times,
        freq_per=FrequencyUnit(freq_per) if freq_per else None,
        scheduled_days=scheduled_days,
    )
    logger.info("Task %s created for %s", task.id, user_id)
    return task


def complete_task(
    task: Task,
    user_id: str,
    proof_type: str,
    proof_note: str | None = None,
    photo_path: str | None = None,
    completed_at=None,
) -> Completion:
    """Record a completion for a task the user owns and has not archived."""
    validate_owner(task.user_id, user_id)
    validate_not_archived(task.archived)

    return Completion(
        user_id=user_id,
        task_id=task.id,
        proof_type=ProofType(proof_type),
        proof_note=proof_note,
        photo_path=photo_path,
        completed_at=completed_at,
    )


def archive_task(task: Task, user_id: str) -> Task:
    validate_owner(task.user_id, user_id)
    task.archive()
    logger.info("Task %s archived", task.id)
    return task


def restore_task(task: Task, user_id: str) -> Task:
    """Bring an archived task back to the active list."""
    validate_owner(task.user_id, user_id)
    task.restore()
    logger.info("Task %s restored", task.id)
    return task


def edit_task(task: Task, user_id: str, **changes) -> Task:
    """
    Apply edits (title, task_type, freq_times, freq_per, scheduled_days).
    Returns the edited Task; the original is left untouched.
    """
    validate_owner(task.user_id, user_id)
    if "task_type" in changes:
        changes["task_type"] = TaskType(changes["task_type"])
    if changes.get("freq_per") is not None:
        changes["freq_per"] = FrequencyUnit(changes["freq_per"])
    edited = task.edited(**changes)
    logger.info("Task %s edited (%s)", task.id, ", ".join(sorted(changes)) or "no fields")
    return edited


def delete_task(task: Task, user_id: str) -> None:
    """Ownership check before the caller removes the task and its completions."""
    validate_owner(task.user_id, user_id)
    logger.info("Task %s deleted by %s", task.id, user_id)
