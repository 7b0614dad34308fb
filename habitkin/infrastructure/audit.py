"""Append-only audit trail of user actions (avatar saves, task changes).

One JSON object per line in `AUDIT_LOG_DIR/audit.log` (default: `logs/` next
to the package). Writes are serialised by a module lock; a failed write is
logged and swallowed so the request still succeeds.
"""
import json
import logging
import os
import threading
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger("habitkin.audit")

_PROJECT_ROOT = Path(__file__).resolve().parents[2]
LOG_DIR = Path(os.environ.get("AUDIT_LOG_DIR") or _PROJECT_ROOT / "logs")
LOG_FILE = LOG_DIR / "audit.log"

_write_lock = threading.Lock()


def _line(action: str, user_id, payload) -> str:
    return json.dumps({
        "ts": datetime.now(timezone.utc).isoformat(),
        "action": action,
        "user_id": user_id,
        "payload": payload or {},
    }, ensure_ascii=False)


def log_event(action: str, user_id: str | None, payload: dict | None = None) -> None:
    line = _line(action, user_id, payload)
    try:
        with _write_lock:
            LOG_DIR.mkdir(parents=True, exist_ok=True)
            with open(LOG_FILE, "a", encoding="utf-8") as fh:
                fh.write(line + "\n")
    except OSError as exc:
        logger.warning("Audit write failed for %s: %s", action, exc)
