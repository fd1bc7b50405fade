from __future__ import annotations

import logging
import uuid
from typing import Callable, Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.datetime_utils import now_local
from ..common.validators import require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ValidationError
from .model import Identity, UserProfile
from .repository import UserRepository

logger = logging.getLogger(__name__)

AuthListener = Callable[[Optional[Identity]], None]


def _new_uid() -> str:
    return uuid.uuid4().hex


class IdentityGateway:
    """Email/password identity provider backed by the users table.

    Every session transition (sign-up, sign-in, sign-out) is broadcast to the
    listeners registered with :meth:`on_auth_change`.
    """

    def __init__(
        self,
        users: UserRepository,
        *,
        uid_factory: Callable[[], str] = _new_uid,
        clock=now_local,
    ):
        self._users = users
        self._uid_factory = uid_factory
        self._clock = clock
        self._listeners: list[AuthListener] = []

    def on_auth_change(self, callback: AuthListener) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _notify(self, identity: Optional[Identity]) -> None:
        for listener in list(self._listeners):
            listener(identity)

    def sign_up(self, email: str, password: str, profile: Optional[dict] = None, *, notify: bool = True) -> Identity:
        email = require_non_empty(email, "Email").lower()
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        if self._users.get_by_email(email):
            raise ValidationError("Email is already registered")

        profile = profile or {}
        role_value = profile.get("role") or Role.EMPLOYEE.value
        try:
            role = Role(role_value)
        except ValueError:
            raise ValidationError(f"Unknown role: {role_value!r}")

        uid = self._uid_factory()
        self._users.create(
            UserProfile(
                uid=uid,
                email=email,
                name=(profile.get("name") or "").strip(),
                employee_id=(profile.get("employee_id") or "").strip(),
                department=(profile.get("department") or "").strip(),
                position=(profile.get("position") or "").strip(),
                role=role,
                created_at=self._clock(),
            ),
            password_hash=generate_password_hash(password),
        )
        logger.info("Signed up uid=%s email=%s role=%s", uid, email, role.value)

        identity = Identity(uid=uid, email=email)
        if notify:
            self._notify(identity)
        return identity

    def sign_in(self, email: str, password: str) -> tuple[Identity, Optional[UserProfile]]:
        creds = self._users.get_credentials((email or "").strip().lower())
        try:
            ok = bool(creds) and check_password_hash(creds.password_hash, password or "")
        except ValueError:
            # e.g. placeholder or corrupted hashes
            ok = False
        if not ok:
            raise AuthenticationError("Invalid email or password")

        identity = Identity(uid=creds.uid, email=creds.email)
        logger.info("Signed in uid=%s", identity.uid)
        self._notify(identity)
        return identity, self._users.get_by_uid(identity.uid)

    def sign_out(self) -> None:
        logger.info("Signed out")
        self._notify(None)
