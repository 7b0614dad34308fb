"""PostgreSQL-backed task and completion repository."""
import logging
from contextlib import contextmanager
from datetime import datetime
from typing import Optional, List

from sqlalchemy.exc import SQLAlchemyError

from habitkin.domain.task import Task, Completion
from habitkin.infrastructure.database.models import TaskModel, CompletionModel
from habitkin.infrastructure.repositories.errors import TaskStoreError

logger = logging.getLogger("habitkin.tasks")


class PgTaskRepository:
    """Tasks and completions via PostgreSQL."""

    def __init__(self, session_factory):
        self._sf = session_factory

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @contextmanager
    def _write(self):
        """Session for one write; database failures surface as TaskStoreError."""
        try:
            with self._sf() as session:
                yield session
                session.commit()
        except SQLAlchemyError as exc:
            logger.error("Task write failed: %s", exc)
            raise TaskStoreError("Could not save your tasks. Please try again.") from exc

    def save_task(self, task: Task) -> None:
        """Insert or update a task row."""
        with self._write() as session:
            row = session.get(TaskModel, task.id)
            if row:
                row.title = task.title
                row.type = task.task_type.value
                row.freq_times = task.freq_times
                row.freq_per = task.freq_per.value if task.freq_per else None
                row.scheduled_days = task.scheduled_days
                row.archived = task.archived
            else:
                session.add(TaskModel(
                    id=task.id,
                    user_id=task.user_id,
                    title=task.title,
                    type=task.task_type.value,
                    freq_times=task.freq_times,
                    freq_per=task.freq_per.value if task.freq_per else None,
                    scheduled_days=task.scheduled_days,
                    archived=task.archived,
                    created_at=task.created_at,
                ))

    def delete_task(self, task_id: str) -> None:
        """Completions reference the task, so they go first."""
        with self._write() as session:
            (
                session.query(CompletionModel)
                .filter(CompletionModel.task_id == task_id)
                .delete(synchronize_session=False)
            )
            row = session.get(TaskModel, task_id)
            if row:
                session.delete(row)

    def add_completion(self, completion: Completion) -> None:
        """Completions are append-only."""
        data = completion.to_dict()
        with self._write() as session:
            session.add(CompletionModel(
                id=data["id"],
                user_id=data["user_id"],
                task_id=data["task_id"],
                proof_type=data["proof_type"],
                proof_note=data["proof_note"],
                photo_path=data["photo_path"],
                completed_at=completion.completed_at,
            ))

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_task(self, task_id: str) -> Optional[Task]:
        with self._sf() as session:
            row = session.get(TaskModel, task_id)
            if not row:
                return None
            return self._task_to_domain(row)

    def _list(self, user_id: str, archived: bool) -> List[Task]:
        with self._sf() as session:
            rows = (
                session.query(TaskModel)
                .filter(TaskModel.user_id == user_id, TaskModel.archived.is_(archived))
                .order_by(TaskModel.created_at.desc())
                .all()
            )
            return [self._task_to_domain(r) for r in rows]

    def list_active(self, user_id: str) -> List[Task]:
        return self._list(user_id, archived=False)

    def list_archived(self, user_id: str) -> List[Task]:
        return self._list(user_id, archived=True)

    def completions_since(self, user_id: str, since: datetime) -> List[Completion]:
        with self._sf() as session:
            rows = (
                session.query(CompletionModel)
                .filter(
                    CompletionModel.user_id == user_id,
                    CompletionModel.completed_at >= since,
                )
                .order_by(CompletionModel.completed_at.asc())
                .all()
            )
            return [self._completion_to_domain(r) for r in rows]

    def recent_completions(self, user_id: str, limit: int = 500) -> List[Completion]:
        with self._sf() as session:
            rows = (
                session.query(CompletionModel)
                .filter(CompletionModel.user_id == user_id)
                .order_by(CompletionModel.completed_at.desc())
                .limit(limit)
                .all()
            )
            return [self._completion_to_domain(r) for r in rows]

    # ------------------------------------------------------------------
    # Mapping
    # ------------------------------------------------------------------

    @staticmethod
    def _task_to_domain(row: TaskModel) -> Task:
        return Task(
            user_id=str(row.user_id),
            title=row.title,
            task_type=row.type,
            freq_times=row.freq_times,
            freq_per=row.freq_per,
            scheduled_days=list(row.scheduled_days) if row.scheduled_days else None,
            archived=bool(row.archived),
            task_id=str(row.id),
            created_at=row.created_at,
        )

    @staticmethod
    def _completion_to_domain(row: CompletionModel) -> Completion:
        return Completion(
            user_id=str(row.user_id),
            task_id=str(row.task_id),
            proof_type=row.proof_type,
            proof_note=row.proof_note,
            photo_path=row.photo_path,
            completed_at=row.completed_at,
            completion_id=str(row.id),
        )
