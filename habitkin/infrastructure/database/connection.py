"""SQLAlchemy engine for the PostgreSQL profile and task stores.

Built from DATABASE_URL. With no URL the app runs on the JSON-file stores
and this module stays uninitialised.
"""
import os
import re
from contextlib import contextmanager

from sqlalchemy import create_engine, text
from sqlalchemy.orm import sessionmaker

ENGINE_OPTIONS = {
    "pool_size": int(os.environ.get("DB_POOL_SIZE", "3")),
    "max_overflow": int(os.environ.get("DB_MAX_OVERFLOW", "5")),
    "pool_timeout": 15,
    "pool_recycle": 1800,
    "pool_pre_ping": True,
}

_engine = None
_SessionLocal = None

# First postgres(ql):// token in a pasted string, e.g. a whole psql command.
_URL_TOKEN = re.compile(r"postgres(?:ql)?://[^\s'\"]+")


def _unquote(value: str) -> str:
    value = value.strip()
    while len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
        value = value[1:-1].strip()
    return value


def resolve_database_url(raw: str | None = None) -> str:
    """Normalise DATABASE_URL (or `raw`) into a URL SQLAlchemy accepts.

    Handles stray quotes and whitespace, a full ``psql '...'`` command in
    place of the URL, and the legacy ``postgres://`` scheme.
    """
    value = _unquote(os.environ.get("DATABASE_URL", "") if raw is None else raw)
    found = _URL_TOKEN.search(value)
    if found:
        value = found.group(0)
    scheme, sep, rest = value.partition("://")
    if sep and scheme == "postgres":
        value = f"postgresql://{rest}"
    return value


def _masked_host(url: str) -> str:
    """host:port/db without credentials, for logs."""
    _, at, tail = url.rpartition("@")
    return tail.split("?", 1)[0] if at else "<no-host>"


def init_engine(url: str | None = None) -> bool:
    """Create the engine and sessionmaker. False when no URL is configured."""
    global _engine, _SessionLocal

    url = resolve_database_url(url)
    if not url:
        print("[HABITKIN] DATABASE_URL is empty -- PostgreSQL stores disabled.")
        return False

    print(f"[HABITKIN] PostgreSQL engine -> {_masked_host(url)}")
    _engine = create_engine(url, **ENGINE_OPTIONS)
    _SessionLocal = sessionmaker(bind=_engine, expire_on_commit=False)
    return True


def _require_engine() -> None:
    if _engine is None or _SessionLocal is None:
        raise RuntimeError("Database not initialised. Call init_engine() first.")


def get_session_factory():
    _require_engine()
    return _SessionLocal


def create_tables() -> None:
    """Create the profiles, tasks and completions tables if missing."""
    from habitkin.infrastructure.database.models import Base

    _require_engine()
    Base.metadata.create_all(bind=_engine)
    print("[HABITKIN] Tables verified.")


def _check_engine_health(engine) -> bool:
    if engine is None:
        return False
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception:
        return False
    return True


def check_health() -> bool:
    return _check_engine_health(_engine)


def get_db_status() -> dict:
    if _engine is None:
        return {"configured": False, "healthy": False, "host": None}
    return {
        "configured": True,
        "healthy": _check_engine_health(_engine),
        "host": _masked_host(_engine.url.render_as_string(hide_password=True)),
    }


class DynamicSessionFactory:
    """Session factory handed to the PG repositories.

    Looks up the sessionmaker on every call, so repositories can be built
    before init_engine() runs. The session is rolled back on error and
    always closed:

        with session_factory() as session:
            ...
    """

    def __call__(self):
        return self._scoped()

    @contextmanager
    def _scoped(self):
        session = get_session_factory()()
        try:
            yield session
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


dynamic_session_factory = DynamicSessionFactory()
