"""Unit tests for the REST profile store (HTTP mocked)."""
from unittest.mock import MagicMock

import pytest
import requests

from habitkin.infrastructure.repositories.errors import ProfileStoreError
from habitkin.infrastructure.repositories.rest_profile_repository import RestProfileRepository
from tests.conftest import USER_ID

BASE = "https://backend.example/rest/v1"


def _response(status=200, body=None):
    resp = MagicMock()
    resp.status_code = status
    resp.json.return_value = body
    if status >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status} error", response=resp)
    return resp


@pytest.fixture
def http():
    return MagicMock()


@pytest.fixture
def repo(http):
    return RestProfileRepository(base_url=BASE, api_key="anon-key", timeout=3, http=http)


class TestLoad:
    def test_queries_by_user(self, repo, http):
        http.get.return_value = _response(body=[{"avatar": {"skin": "s2"}}])
        assert repo.load(USER_ID) == {"skin": "s2"}
        args, kwargs = http.get.call_args
        assert args[0] == f"{BASE}/profiles"
        assert kwargs["params"] == {"select": "avatar", "user_id": f"eq.{USER_ID}"}
        assert kwargs["headers"]["apikey"] == "anon-key"
        assert kwargs["timeout"] == 3

    def test_no_row(self, repo, http):
        http.get.return_value = _response(body=[])
        assert repo.load(USER_ID) is None

    def test_network_error(self, repo, http):
        http.get.side_effect = requests.ConnectionError("down")
        with pytest.raises(ProfileStoreError):
            repo.load(USER_ID)

    @pytest.mark.parametrize("body", [
        {"avatar": {"skin": "s2"}},
        {},
        "not a table",
        None,
        ["s2"],
        [None],
        [[{"avatar": {}}]],
    ])
    def test_unexpected_body(self, repo, http, body):
        http.get.return_value = _response(body=body)
        with pytest.raises(ProfileStoreError, match="Could not load"):
            repo.load(USER_ID)


class TestSave:
    def test_upserts(self, repo, http):
        http.post.return_value = _response(status=201)
        repo.save(USER_ID, {"skin": "s4"})
        _, kwargs = http.post.call_args
        assert kwargs["json"] == {"user_id": USER_ID, "avatar": {"skin": "s4"}}
        assert "resolution=merge-duplicates" in kwargs["headers"]["Prefer"]

    def test_backend_message_surfaces(self, repo, http):
        http.post.return_value = _response(status=403, body={"message": "permission denied for table profiles"})
        with pytest.raises(ProfileStoreError, match="permission denied"):
            repo.save(USER_ID, {"skin": "s4"})

    def test_timeout(self, repo, http):
        http.post.side_effect = requests.Timeout("slow")
        with pytest.raises(ProfileStoreError, match="timed out"):
            repo.save(USER_ID, {"skin": "s4"})


class TestConfiguration:
    def test_requires_base_url(self):
        with pytest.raises(ValueError):
            RestProfileRepository(base_url="")
