"""Keyed profile store: lookup by user id and a create that reports races as a result, not an error."""
import logging
from typing import Callable, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from mealprep.app.errors import StoreLookupError
from mealprep.app.schemas import CreateResult, Profile
from mealprep.store.database import ProfileRow, SessionLocal

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION_SQLSTATE = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    """True when the driver reports a UNIQUE/primary-key clash rather than e.g. a NOT NULL failure."""
    orig = exc.orig
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code:
        return code == UNIQUE_VIOLATION_SQLSTATE
    text = str(orig).lower()
    return "unique" in text or "duplicate" in text


class ProfileStore:
    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self._session_factory = session_factory

    def find_unique(self, user_id: str) -> Optional[Profile]:
        try:
            with self._session_factory() as session:
                row = session.execute(
                    select(ProfileRow).where(ProfileRow.user_id == user_id)
                ).scalar_one_or_none()
                return Profile.model_validate(row) if row is not None else None
        except SQLAlchemyError as exc:
            raise StoreLookupError("Profile lookup failed.", details=str(exc)) from exc

    def create(self, profile: Profile) -> CreateResult:
        row = ProfileRow(
            user_id=profile.user_id,
            email=profile.email,
            subscription_active=profile.subscription_active,
        )
        try:
            with self._session_factory() as session, session.begin():
                session.add(row)
        except IntegrityError as exc:
            if is_unique_violation(exc):
                logger.info("Profile insert for %s hit the unique constraint", profile.user_id)
                return CreateResult.already_exists()
            logger.error("Profile insert failed integrity check: %s", exc.orig)
            return CreateResult.other_failure(str(exc.orig))
        except SQLAlchemyError as exc:
            logger.error("Profile insert failed: %s", exc)
            return CreateResult.other_failure(str(exc))
        return CreateResult.created()
