"""Find-or-create of the Profile record for a newly signed-in user."""
import logging
from enum import Enum
from typing import Callable, Optional

from mealprep.app.errors import (
    EmptyIdentityAfterSanitizationError,
    MissingIdentityError,
    StoreLookupError,
    StoreWriteError,
)
from mealprep.app.schemas import CreateStatus, Profile, SessionUser
from mealprep.app.settings import settings
from mealprep.services.sanitize import sanitize_identity
from mealprep.store.profile_store import ProfileStore

logger = logging.getLogger(__name__)

SessionAccessor = Callable[[], Optional[SessionUser]]


class ProvisionStatus(str, Enum):
    CREATED = "created"
    ALREADY_EXISTS = "already_exists"


class ProfileProvisioner:
    def __init__(self, store: ProfileStore, placeholder_email: str = settings.placeholder_email):
        self.store = store
        self.placeholder_email = placeholder_email

    def _resolve_identity(
        self,
        user_id: Optional[str],
        email: Optional[str],
        session_user: Optional[SessionAccessor],
    ) -> tuple[str, str]:
        if user_id:
            return user_id, email or ""
        if session_user is None:
            return "", ""
        try:
            user = session_user()
        except Exception as exc:  # noqa: BLE001
            logger.error("Session lookup failed: %s", exc)
            return "", ""
        if user is None:
            logger.warning("No signed-in user in session")
            return "", ""
        return user.id or "", user.primary_email

    def provision(
        self,
        user_id: Optional[str] = None,
        email: Optional[str] = None,
        session_user: Optional[SessionAccessor] = None,
    ) -> ProvisionStatus:
        """
        Make sure exactly one Profile exists for the caller.

        The body's user id wins; the session is only consulted when it is missing.
        Concurrent calls for the same id are settled by the store's unique
        constraint: the losing insert is reported as ALREADY_EXISTS.

        Raises:
            MissingIdentityError: no user id from the body or the session.
            EmptyIdentityAfterSanitizationError: the id was nothing but control characters.
            StoreWriteError: the insert failed for a reason other than a duplicate.
        """
        raw_user_id, raw_email = self._resolve_identity(user_id, email, session_user)
        if not raw_user_id:
            logger.error("No user ID available from any source")
            raise MissingIdentityError()

        clean_user_id = sanitize_identity(raw_user_id)
        clean_email = sanitize_identity(raw_email)
        logger.info(
            "Sanitized identity: user_id %d->%d chars, email %d->%d chars",
            len(raw_user_id),
            len(clean_user_id),
            len(raw_email),
            len(clean_email),
        )
        if not clean_user_id:
            raise EmptyIdentityAfterSanitizationError()

        try:
            if self.store.find_unique(clean_user_id) is not None:
                logger.info("Profile already exists for user: %s", clean_user_id)
                return ProvisionStatus.ALREADY_EXISTS
        except StoreLookupError as exc:
            # the unique constraint still guards the insert below
            logger.warning("Profile lookup failed, attempting create anyway: %s", exc.details)

        result = self.store.create(
            Profile(
                user_id=clean_user_id,
                email=clean_email or self.placeholder_email,
                subscription_active=False,
            )
        )
        if result.status is CreateStatus.CREATED:
            logger.info("Profile created for user: %s", clean_user_id)
            return ProvisionStatus.CREATED
        if result.status is CreateStatus.ALREADY_EXISTS:
            logger.info("Profile for %s was created concurrently", clean_user_id)
            return ProvisionStatus.ALREADY_EXISTS
        raise StoreWriteError("Failed to create profile.", details=result.reason)
