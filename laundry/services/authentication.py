from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from laundry.domain.entities import Repository
from laundry.domain.errors import UsernameTakenError
from laundry.domain.models import User, ROLE_ADMIN, ROLE_CUSTOMER
from laundry.domain.utils import timestamp_id, utc_now
from laundry.storage.record_store import CURRENT_USER

logger = logging.getLogger(__name__)


class SessionManager:
    """
    Holds the currently logged-in user.

    The user is kept in memory and mirrored under the ``currentUser`` key so
    that a later process can restore the session. There is exactly one
    session at a time. Passwords are compared in plain text.
    """

    def __init__(self, repo: Repository, clock: Callable[[], datetime] = utc_now):
        self.repo = repo
        self._clock = clock
        self._user: Optional[User] = None

    @property
    def current_user(self) -> Optional[User]:
        return self._user

    @property
    def is_admin(self) -> bool:
        return self._user is not None and self._user.role == ROLE_ADMIN

    def _set_user(self, user: Optional[User]) -> None:
        self._user = user
        if user is None:
            self.repo.records.remove_value(CURRENT_USER)
        else:
            self.repo.records.write_value(CURRENT_USER, user.to_storage())

    def restore(self) -> Optional[User]:
        """
        Reload the persisted session. A session whose user no longer
        exists is discarded.
        """
        stored = self.repo.records.read_value(CURRENT_USER)
        if not stored:
            self._user = None
            return None

        user = self.repo.get_user_by_id(stored.get("id", ""))
        if user is None:
            logger.info("Discarding session for a user that no longer exists")
            self._set_user(None)
            return None

        self._user = user
        return user

    def register(self, name: str, email: str, phone: str, username: str, password: str) -> User:
        """
        Create a customer account and log it in.

        Raises UsernameTakenError if the username is already in use; nothing
        is written in that case.
        """
        if self.repo.get_user_by_username(username) is not None:
            logger.info(f"Registration rejected, username '{username}' exists")
            raise UsernameTakenError(username)

        now = self._clock()
        user = User(
            id=timestamp_id(now),
            name=name,
            email=email,
            phone=phone,
            username=username,
            password=password,
            role=ROLE_CUSTOMER,
            join_date=now,
        )
        self.repo.add_user(user)
        self._set_user(user)
        logger.info(f"Registered customer '{username}'")
        return user

    def login(self, username: str, password: str) -> Optional[User]:
        """
        Return the matching user and start a session, or None on any
        username/password mismatch.
        """
        user = self.repo.get_user_by_username(username)
        if user is None or user.password != password:
            return None
        self._set_user(user)
        return user

    def logout(self) -> None:
        self._set_user(None)

    def refresh_user(self) -> Optional[User]:
        """
        Re-read the current user from the repository so profile edits show up.
        """
        if self._user is None:
            return None
        updated = self.repo.get_user_by_id(self._user.id)
        if updated is not None:
            self._set_user(updated)
        return self._user
