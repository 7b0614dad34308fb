"""habitkin API entry point.

Store selection:
  - profiles: PROFILE_STORE_URL -> hosted REST table endpoint,
              else DATABASE_URL -> PostgreSQL, else JSON file (dev)
  - tasks:    DATABASE_URL -> PostgreSQL, else JSON file (dev)
"""
import logging
import os

from dotenv import load_dotenv

PROJECT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
load_dotenv(os.path.join(PROJECT_DIR, ".env"))

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from habitkin.api.routes.avatar_routes import router as avatar_router, init_avatar_routes
from habitkin.api.routes.task_routes import router as task_router, init_task_routes
from habitkin.api.routes.stats_routes import router as stats_router, init_stats_routes
from habitkin.api.routes.completion_routes import router as completion_router, init_completion_routes

logger = logging.getLogger("habitkin.startup")

VERSION = "1.0.0"
DATA_DIR = os.environ.get("HABITKIN_DATA_DIR") or os.path.join(PROJECT_DIR, "data")
DATABASE_URL = os.environ.get("DATABASE_URL", "")
PROFILE_STORE_URL = os.environ.get("PROFILE_STORE_URL", "")


def _cors_origins() -> list:
    """ALLOWED_ORIGINS as a list; unset means any origin (local development)."""
    raw = os.environ.get("ALLOWED_ORIGINS", "")
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or ["*"]


def _build_task_store():
    if DATABASE_URL:
        from habitkin.infrastructure.database.connection import (
            init_engine, create_tables, dynamic_session_factory,
        )
        from habitkin.infrastructure.repositories.pg_task_repository import PgTaskRepository

        init_engine()
        try:
            create_tables()
        except Exception as exc:
            logger.error("Table creation failed: %s: %s", type(exc).__name__, exc)
            print(f"[HABITKIN][WARN] Could not verify tables ({type(exc).__name__}). Continuing.")
        return PgTaskRepository(dynamic_session_factory), "postgresql"

    from habitkin.infrastructure.repositories.task_repository import TaskRepository
    return TaskRepository(data_path=os.path.join(DATA_DIR, "tasks.json")), "json"


def _build_profile_store():
    if PROFILE_STORE_URL:
        from habitkin.infrastructure.repositories.rest_profile_repository import RestProfileRepository
        return RestProfileRepository(base_url=PROFILE_STORE_URL), "rest"

    if DATABASE_URL:
        from habitkin.infrastructure.database.connection import dynamic_session_factory
        from habitkin.infrastructure.repositories.pg_profile_repository import PgProfileRepository
        return PgProfileRepository(dynamic_session_factory), "postgresql"

    from habitkin.infrastructure.repositories.profile_repository import ProfileRepository
    return ProfileRepository(data_path=os.path.join(DATA_DIR, "profiles.json")), "json"


app = FastAPI(
    title="habitkin",
    description="Habit tracker with a customizable layered SVG avatar.",
    version=VERSION,
)

# SVG documents compress well.
app.add_middleware(GZipMiddleware, minimum_size=1024)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

task_repo, _task_backend = _build_task_store()
profile_store, _profile_backend = _build_profile_store()
print(f"[HABITKIN] Stores: tasks={_task_backend}, profiles={_profile_backend}")

init_avatar_routes(profile_store)
init_task_routes(task_repo)
init_stats_routes(task_repo)
init_completion_routes(task_repo)

app.include_router(avatar_router)
app.include_router(task_router)
app.include_router(stats_router)
app.include_router(completion_router)


@app.get("/")
def root():
    return {"message": "habitkin API is running.", "docs": "/docs"}


@app.get("/health")
def health():
    body = {
        "status": "online",
        "version": VERSION,
        "tasks": _task_backend,
        "profiles": _profile_backend,
    }
    if DATABASE_URL:
        from habitkin.infrastructure.database.connection import get_db_status
        body["db"] = get_db_status()
    return body


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("habitkin.main:app", host="0.0.0.0", port=8000, reload=True,
                reload_excludes=["data/*", "*.json"])
