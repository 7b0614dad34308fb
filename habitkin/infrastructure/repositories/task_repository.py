"""Task and completion persistence (JSON file + in-memory cache)."""
import json
import logging
import os
import threading
from contextlib import contextmanager
from datetime import datetime
from typing import Dict, List

from habitkin.domain.task import Task, Completion
from habitkin.infrastructure.repositories.errors import TaskStoreError

logger = logging.getLogger("habitkin.tasks")


class TaskRepository:
    """JSON-backed task storage.

    Tasks are cached as plain dicts, so callers mutating a Task they fetched
    never touch the cache until they save it.
    """

    def __init__(self, data_path: str = "data/tasks.json"):
        self._data_path = data_path
        self._tasks: Dict[str, dict] = {}
        self._completions: List[Completion] = []
        self._lock = threading.Lock()
        self._load()

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @contextmanager
    def _write(self):
        """Apply a change to the cache and flush it; on a failed write the cache is restored."""
        with self._lock:
            tasks, completions = dict(self._tasks), list(self._completions)
            yield
            try:
                self._persist()
            except OSError as exc:
                self._tasks, self._completions = tasks, completions
                logger.error("Could not write %s: %s", self._data_path, exc)
                raise TaskStoreError("Could not save your tasks. Please try again.") from exc

    def save_task(self, task: Task) -> None:
        with self._write():
            self._tasks[task.id] = task.to_dict()

    def delete_task(self, task_id: str) -> None:
        """Remove a task together with its completions."""
        with self._write():
            self._tasks.pop(task_id, None)
            self._completions = [c for c in self._completions if c.task_id != task_id]

    def add_completion(self, completion: Completion) -> None:
        with self._write():
            self._completions.append(completion)

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_task(self, task_id: str) -> Task | None:
        data = self._tasks.get(task_id)
        return Task.from_dict(data) if data else None

    def _list(self, user_id: str, archived: bool) -> list:
        tasks = [
            Task.from_dict(d) for d in self._tasks.values()
            if d["user_id"] == user_id and bool(d.get("archived")) == archived
        ]
        return sorted(tasks, key=lambda t: t.created_at, reverse=True)

    def list_active(self, user_id: str) -> list:
        """Non-archived tasks of a user, newest first."""
        return self._list(user_id, archived=False)

    def list_archived(self, user_id: str) -> list:
        return self._list(user_id, archived=True)

    def completions_since(self, user_id: str, since: datetime) -> list:
        """A user's completions at or after `since`, oldest first."""
        rows = [
            c for c in self._completions
            if c.user_id == user_id and c.completed_at >= since
        ]
        return sorted(rows, key=lambda c: c.completed_at)

    def recent_completions(self, user_id: str, limit: int = 500) -> list:
        """A user's latest completions, newest first."""
        rows = [c for c in self._completions if c.user_id == user_id]
        return sorted(rows, key=lambda c: c.completed_at, reverse=True)[:limit]

    # ------------------------------------------------------------------
    # File
    # ------------------------------------------------------------------

    def _persist(self) -> None:
        directory = os.path.dirname(self._data_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        data = {
            "tasks": self._tasks,
            "completions": [c.to_dict() for c in self._completions],
        }
        # Write atomically: write to tempfile then replace
        tmp_path = f"{self._data_path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, self._data_path)

    def _load(self) -> None:
        if not os.path.exists(self._data_path):
            return
        try:
            with open(self._data_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Ignoring unreadable task file %s: %s", self._data_path, exc)
            return
        for tid, tdata in data.get("tasks", {}).items():
            self._tasks[tid] = Task.from_dict(tdata).to_dict()
        self._completions = [Completion.from_dict(c) for c in data.get("completions", [])]
