"""PostgreSQL-backed avatar profile repository."""
import logging

from sqlalchemy.exc import SQLAlchemyError

from habitkin.infrastructure.database.models import ProfileModel
from habitkin.infrastructure.repositories.errors import ProfileStoreError

logger = logging.getLogger("habitkin.profiles")


class PgProfileRepository:
    """Avatar blobs in the `profiles` table (JSONB column)."""

    def __init__(self, session_factory):
        self._sf = session_factory

    def load(self, user_id: str) -> dict | None:
        try:
            with self._sf() as session:
                row = session.get(ProfileModel, user_id)
                if not row:
                    return None
                return row.avatar
        except SQLAlchemyError as exc:
            logger.error("Profile load failed for %s: %s", user_id, exc)
            raise ProfileStoreError("Could not load your avatar.") from exc

    def save(self, user_id: str, blob: dict) -> None:
        """Upsert the avatar blob for a user."""
        try:
            with self._sf() as session:
                row = session.get(ProfileModel, user_id)
                if row:
                    row.avatar = dict(blob)
                else:
                    session.add(ProfileModel(user_id=user_id, avatar=dict(blob)))
                session.commit()
        except SQLAlchemyError as exc:
            logger.error("Profile save failed for %s: %s", user_id, exc)
            raise ProfileStoreError("Could not save your avatar.") from exc
