"""Avatar profile persistence (JSON file + in-memory cache)."""
import json
import logging
import os
import threading
from typing import Dict

from habitkin.infrastructure.repositories.errors import ProfileStoreError

logger = logging.getLogger("habitkin.profiles")


class ProfileRepository:
    """JSON-backed avatar blob storage, keyed by user id."""

    def __init__(self, data_path: str = "data/profiles.json"):
        self._data_path = data_path
        self._profiles: Dict[str, dict] = {}
        self._lock = threading.Lock()
        self._load()

    def load(self, user_id: str) -> dict | None:
        """Stored avatar blob, or None when the user never saved one."""
        blob = self._profiles.get(user_id)
        return dict(blob) if blob is not None else None

    def save(self, user_id: str, blob: dict) -> None:
        if not isinstance(blob, dict):
            raise ProfileStoreError("Avatar must be a JSON object.")
        with self._lock:
            previous = self._profiles.get(user_id)
            self._profiles[user_id] = dict(blob)
            try:
                self._persist()
            except OSError as exc:
                # Keep memory consistent with disk.
                if previous is None:
                    self._profiles.pop(user_id, None)
                else:
                    self._profiles[user_id] = previous
                logger.error("Could not write %s: %s", self._data_path, exc)
                raise ProfileStoreError("Could not save your avatar.") from exc

    def _persist(self) -> None:
        """Write all profiles to the JSON file atomically."""
        directory = os.path.dirname(self._data_path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        tmp_path = f"{self._data_path}.tmp"
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(self._profiles, f, indent=2, ensure_ascii=False)
        os.replace(tmp_path, self._data_path)

    def _load(self) -> None:
        if not os.path.exists(self._data_path):
            return
        try:
            with open(self._data_path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, IOError) as exc:
            logger.warning("Ignoring unreadable profile file %s: %s", self._data_path, exc)
            return
        if isinstance(data, dict):
            self._profiles = data
