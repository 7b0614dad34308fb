"""Avatar profiles stored through the hosted backend's REST table endpoint.

The endpoint speaks the PostgREST dialect:
  GET  {base}/profiles?select=avatar&user_id=eq.<id>
  POST {base}/profiles  with  Prefer: resolution=merge-duplicates  (upsert)
"""
import logging
import os

import requests

from habitkin.infrastructure.repositories.errors import ProfileStoreError

logger = logging.getLogger("habitkin.profiles")

PROFILE_STORE_URL = os.environ.get("PROFILE_STORE_URL", "")
PROFILE_STORE_KEY = os.environ.get("PROFILE_STORE_KEY", "")
PROFILE_STORE_TIMEOUT = float(os.environ.get("PROFILE_STORE_TIMEOUT", "10"))


class RestProfileRepository:
    """Profile store over HTTP. Every failure surfaces as ProfileStoreError."""

    def __init__(
        self,
        base_url: str = PROFILE_STORE_URL,
        api_key: str = PROFILE_STORE_KEY,
        timeout: float = PROFILE_STORE_TIMEOUT,
        table: str = "profiles",
        http=None,
    ):
        if not base_url:
            raise ValueError("PROFILE_STORE_URL is not configured")
        self._endpoint = f"{base_url.rstrip('/')}/{table}"
        self._timeout = timeout
        self._http = http or requests.Session()
        self._headers = {"Content-Type": "application/json"}
        if api_key:
            self._headers["apikey"] = api_key
            self._headers["Authorization"] = f"Bearer {api_key}"

    def load(self, user_id: str) -> dict | None:
        try:
            response = self._http.get(
                self._endpoint,
                params={"select": "avatar", "user_id": f"eq.{user_id}"},
                headers=self._headers,
                timeout=self._timeout,
            )
            response.raise_for_status()
            rows = response.json()
        except (requests.RequestException, ValueError) as exc:
            logger.error("Profile load failed for %s: %s", user_id, exc)
            raise ProfileStoreError("Could not load your avatar.") from exc
        if not isinstance(rows, list):
            logger.error("Profile load for %s returned %s, expected a list", user_id, type(rows).__name__)
            raise ProfileStoreError("Could not load your avatar.")
        if not rows:
            return None
        row = rows[0]
        if not isinstance(row, dict):
            logger.error("Profile row for %s is %s, expected an object", user_id, type(row).__name__)
            raise ProfileStoreError("Could not load your avatar.")
        return row.get("avatar")

    def save(self, user_id: str, blob: dict) -> None:
        headers = {**self._headers, "Prefer": "resolution=merge-duplicates,return=minimal"}
        try:
            response = self._http.post(
                self._endpoint,
                params={"on_conflict": "user_id"},
                json={"user_id": user_id, "avatar": blob},
                headers=headers,
                timeout=self._timeout,
            )
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.error("Profile save failed for %s: %s", user_id, exc)
            raise ProfileStoreError(_error_message(exc)) from exc


def _error_message(exc: requests.RequestException) -> str:
    """User-facing text for a failed save; prefers the backend's own message."""
    response = getattr(exc, "response", None)
    if response is not None:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return f"Could not save your avatar (HTTP {response.status_code})."
    if isinstance(exc, requests.Timeout):
        return "Could not save your avatar: the profile service timed out."
    return "Could not save your avatar."
