"""Session management module.

This module holds the single active identity of the running application and
keeps it in local storage so a restart resumes the same session.
"""

import logging
from typing import Any, Optional

from complaint_desk.config import (
    ADMIN_PASSWORD,
    ADMIN_USERNAME,
    SESSION_STORAGE_KEY,
)
from complaint_desk.core.exceptions import StorageError, ValidationError
from complaint_desk.schemas.notification import NotificationSeverity
from complaint_desk.schemas.user import EDITABLE_PROFILE_FIELDS, User, UserRole
from complaint_desk.utils import user_directory
from complaint_desk.utils.attachments import resize_profile_picture
from complaint_desk.utils.converters import dump_user, load_user
from complaint_desk.utils.notification_center import NotificationChannel
from complaint_desk.utils.storage import LocalStorage

logger = logging.getLogger(__name__)


class SessionStore:
    """Owns the currently authenticated identity."""

    def __init__(
        self,
        storage: LocalStorage,
        notifications: Optional[NotificationChannel] = None,
    ):
        """Initialize SessionStore and restore any persisted session.

        Args:
            storage: Local storage holding the session record.
            notifications: Channel used to report persistence failures.
        """
        self.storage = storage
        self.notifications = notifications
        self._user: Optional[User] = self._restore()

    @property
    def user(self) -> Optional[User]:
        return self._user

    def _restore(self) -> Optional[User]:
        try:
            raw = self.storage.get_item(SESSION_STORAGE_KEY)
        except StorageError as e:
            logger.error("Failed to read session from storage: %s", e)
            return None
        if not raw:
            return None
        try:
            user = load_user(raw)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.error("Failed to parse user from storage: %s", e)
            return None
        logger.info("Restored session for %s", user.id)
        return user

    def _set_user(self, user: Optional[User]) -> None:
        self._user = user
        try:
            if user:
                self.storage.set_item(SESSION_STORAGE_KEY, dump_user(user))
            else:
                self.storage.remove_item(SESSION_STORAGE_KEY)
        except StorageError as e:
            logger.error("Failed to persist session: %s", e)
            if self.notifications:
                self.notifications.show(
                    "Could not save your session on this device.",
                    NotificationSeverity.ERROR,
                )

    def login(
        self,
        role: UserRole,
        user_id: str,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ) -> bool:
        """Activate a session.

        Args:
            role: Role the user is logging in as.
            user_id: Student id, or the admin id for admins.
            username: Admin username; ignored for students.
            password: Admin password; ignored for students.

        Returns:
            True if a session was activated, False otherwise.
        """
        user: Optional[User] = None
        role = UserRole(role)
        if role == UserRole.STUDENT:
            user = user_directory.resolve_student(user_id)
        elif role == UserRole.ADMIN:
            if (
                username == ADMIN_USERNAME
                and password == ADMIN_PASSWORD
                and user_id == user_directory.ADMIN_USER.id
            ):
                user = user_directory.resolve_any(user_id)

        if user is None:
            logger.info("Rejected %s login for '%s'", role.value, user_id)
            return False

        self._set_user(user)
        logger.info("Logged in %s as %s", user.id, role.value)
        return True

    def logout(self) -> None:
        if self._user:
            logger.info("Logged out %s", self._user.id)
        self._set_user(None)

    def update_profile(self, **fields: Any) -> Optional[User]:
        """Merge edited profile fields into the active identity.

        ``id`` and ``role`` cannot be changed and are ignored.

        Returns:
            The updated user, or None if nobody is logged in.

        Raises:
            ValidationError: If the name is set to an empty value.
        """
        if self._user is None:
            return None

        changes = {}
        for key, value in fields.items():
            if key not in EDITABLE_PROFILE_FIELDS:
                logger.warning("Ignoring immutable or unknown profile field '%s'", key)
                continue
            changes[key] = value

        if "name" in changes:
            name = (changes["name"] or "").strip()
            if not name:
                raise ValidationError("Name cannot be empty.")
            changes["name"] = name

        updated = self._user.model_copy(update=changes)
        self._set_user(updated)
        logger.info("Updated profile of %s: %s", updated.id, sorted(changes))
        return updated

    def set_profile_picture(self, content: bytes, content_type: str) -> Optional[User]:
        """Resize an uploaded image and store it as the profile picture.

        Raises:
            ValidationError: If the upload is not a usable image.
        """
        if self._user is None:
            return None
        data_url = resize_profile_picture(content, content_type)
        return self.update_profile(profile_picture_url=data_url)
