"""
Shared pytest fixtures for the habitkin test suite.

Strategy:
- Domain and render tests: pure in-memory, zero I/O.
- API/integration tests: FastAPI TestClient with JSON stores in a tmp directory.
  DATABASE_URL and PROFILE_STORE_URL are cleared so no real backend is touched.
"""
import os
import shutil
import tempfile
from datetime import datetime, timezone

import pytest

# ---------------------------------------------------------------------------
# Environment: no real backends, deterministic clock zone, throwaway audit log
# ---------------------------------------------------------------------------
os.environ.pop("DATABASE_URL", None)
os.environ.pop("PROFILE_STORE_URL", None)
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key-not-for-production-123456")
os.environ["APP_TIMEZONE"] = "UTC"
os.environ.setdefault("AUDIT_LOG_DIR", tempfile.mkdtemp(prefix="habitkin_audit_"))


# ---------------------------------------------------------------------------
# Domain helpers (reusable across many test modules)
# ---------------------------------------------------------------------------
from habitkin.domain.avatar import AvatarRecipe
from habitkin.domain.enums import TaskType, FrequencyUnit, ProofType
from habitkin.domain.task import Task, Completion
from habitkin.infrastructure.repositories.errors import ProfileStoreError

USER_ID = "00000000-0000-4000-8000-000000000001"
OTHER_USER_ID = "00000000-0000-4000-8000-000000000002"


def make_recipe(**kwargs) -> AvatarRecipe:
    return AvatarRecipe.default().replace(**kwargs)


def make_task(
    title="Drink water",
    task_type=TaskType.HABIT,
    freq_times=1,
    freq_per=FrequencyUnit.DAY,
    user_id=USER_ID,
    created_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
    **kwargs,
) -> Task:
    return Task(
        user_id=user_id,
        title=title,
        task_type=task_type,
        freq_times=freq_times,
        freq_per=freq_per,
        created_at=created_at,
        **kwargs,
    )


def make_completion(task: Task, completed_at, proof_note="done") -> Completion:
    return Completion(
        user_id=task.user_id,
        task_id=task.id,
        proof_type=ProofType.OVERRIDE,
        proof_note=proof_note,
        completed_at=completed_at,
    )


class FakeProfileStore:
    """In-memory profile store honoring the load/save contract."""

    def __init__(self, blobs=None, fail_load=False, fail_save=False):
        self.blobs = dict(blobs or {})
        self.fail_load = fail_load
        self.fail_save = fail_save
        self.save_calls = 0

    def load(self, user_id):
        if self.fail_load:
            raise ProfileStoreError("Profile service unavailable.")
        return self.blobs.get(user_id)

    def save(self, user_id, blob):
        self.save_calls += 1
        if self.fail_save:
            raise ProfileStoreError("Profile service unavailable.")
        self.blobs[user_id] = dict(blob)


# ---------------------------------------------------------------------------
# pytest fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def recipe():
    return AvatarRecipe.default()


@pytest.fixture
def profile_store():
    return FakeProfileStore()


# ---------------------------------------------------------------------------
# FastAPI TestClient with JSON-file stores in a temp directory
# ---------------------------------------------------------------------------

@pytest.fixture(scope="session")
def tmp_data_dir():
    """Temporary data directory shared across the entire session."""
    d = tempfile.mkdtemp(prefix="habitkin_test_")
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture(scope="session")
def test_app(tmp_data_dir):
    """FastAPI app wired with JSON stores in the tmp directory."""
    from habitkin.infrastructure.repositories.profile_repository import ProfileRepository
    from habitkin.infrastructure.repositories.task_repository import TaskRepository
    from habitkin.api.routes.avatar_routes import router as avatar_router, init_avatar_routes
    from habitkin.api.routes.task_routes import router as task_router, init_task_routes
    from habitkin.api.routes.stats_routes import router as stats_router, init_stats_routes
    from habitkin.api.routes.completion_routes import router as completion_router, init_completion_routes
    from fastapi import FastAPI
    from fastapi.middleware.cors import CORSMiddleware

    profile_repo = ProfileRepository(os.path.join(tmp_data_dir, "profiles.json"))
    task_repo = TaskRepository(os.path.join(tmp_data_dir, "tasks.json"))

    app = FastAPI()
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

    init_avatar_routes(profile_repo)
    init_task_routes(task_repo)
    init_stats_routes(task_repo)
    init_completion_routes(task_repo)

    app.include_router(avatar_router)
    app.include_router(task_router)
    app.include_router(stats_router)
    app.include_router(completion_router)
    return app


@pytest.fixture(scope="session")
def client(test_app):
    from fastapi.testclient import TestClient
    return TestClient(test_app)


def bearer(user_id: str) -> dict:
    from habitkin.infrastructure.auth.jwt_handler import create_access_token
    return {"Authorization": f"Bearer {create_access_token(user_id)}"}


@pytest.fixture(scope="session")
def auth_headers():
    return bearer(USER_ID)


@pytest.fixture(scope="session")
def other_headers():
    return bearer(OTHER_USER_ID)
