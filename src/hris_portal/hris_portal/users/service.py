from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from .identity import IdentityGateway
from .model import Actor, Identity, UserProfile
from .repository import UserRepository

logger = logging.getLogger(__name__)

ActorListener = Callable[[Optional[Actor]], None]


def require_actor(actor: Optional[Actor]) -> Actor:
    if actor is None:
        raise AuthenticationError("Please sign in to continue")
    return actor


def require_admin(actor: Optional[Actor]) -> Actor:
    actor = require_actor(actor)
    if not actor.is_admin:
        raise AuthorizationError("Administrator access required")
    return actor


class SessionResolver:
    """Builds actors from identities and profiles.

    Request handlers call :meth:`resolve` with the uid from their own session.
    Gateway transitions are forwarded, merged with the profile, to the
    callbacks registered with :meth:`on_actor_change`; no actor is stored here.
    """

    def __init__(self, users: UserRepository, gateway: Optional[IdentityGateway] = None):
        self._users = users
        self._listeners: list[ActorListener] = []
        if gateway is not None:
            gateway.on_auth_change(self._on_auth_change)

    def on_actor_change(self, callback: ActorListener) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _on_auth_change(self, identity: Optional[Identity]) -> None:
        if not self._listeners:
            return
        actor = self.merge(identity, self._users.get_by_uid(identity.uid)) if identity else None
        for listener in list(self._listeners):
            listener(actor)

    def resolve(self, uid: Optional[str]) -> Optional[Actor]:
        """Build the actor for a uid taken from the session cookie."""
        if not uid:
            return None
        profile = self._users.get_by_uid(uid)
        if profile is None:
            return None
        return self.merge(Identity(uid=profile.uid, email=profile.email), profile)

    @staticmethod
    def merge(identity: Identity, profile: Optional[UserProfile]) -> Actor:
        if profile is None:
            return Actor(
                uid=identity.uid,
                email=identity.email,
                name=identity.email,
                employee_id="",
                department="",
                position="",
                role=Role.EMPLOYEE,
            )
        return Actor(
            uid=identity.uid,
            email=identity.email,
            name=profile.name or identity.email,
            employee_id=profile.employee_id,
            department=profile.department,
            position=profile.position,
            role=profile.role,
        )


class UserService:
    """Use case: employee directory (admin)."""

    _EDITABLE = ("name", "employee_id", "department", "position", "role")

    def __init__(self, users: UserRepository, gateway: IdentityGateway, *, clock=now_local):
        self._users = users
        self._gateway = gateway
        self._clock = clock

    def list_employees(self) -> Sequence[UserProfile]:
        return self._users.list_all()

    def get_employee(self, uid: str) -> UserProfile:
        profile = self._users.get_by_uid(uid)
        if not profile:
            raise NotFoundError("Employee not found")
        return profile

    def search_employees(self, term: str) -> list[UserProfile]:
        needle = (term or "").strip().lower()
        return [
            p
            for p in self._users.list_all()
            if needle in p.name.lower() or needle in p.employee_id.lower() or needle in p.email.lower()
        ]

    def add_employee(
        self,
        admin: Optional[Actor],
        *,
        email: str,
        password: str,
        name: str,
        employee_id: str,
        department: str = "",
        position: str = "",
        role: str = Role.EMPLOYEE.value,
    ) -> UserProfile:
        require_admin(admin)
        name = require_non_empty(name, "Name")
        employee_id = require_non_empty(employee_id, "Employee ID")

        # The admin keeps their own session, so listeners are not notified.
        identity = self._gateway.sign_up(
            email,
            password,
            {
                "name": name,
                "employee_id": employee_id,
                "department": department,
                "position": position,
                "role": role,
            },
            notify=False,
        )
        logger.info("Admin uid=%s added employee uid=%s", admin.uid, identity.uid)
        return self.get_employee(identity.uid)

    def update_employee(self, admin: Optional[Actor], uid: str, fields: Mapping[str, Any]) -> UserProfile:
        require_admin(admin)
        fields = dict(fields or {})
        unknown = set(fields) - set(self._EDITABLE)
        if unknown:
            raise ValidationError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")
        if "role" in fields:
            try:
                fields["role"] = Role(fields["role"])
            except ValueError:
                raise ValidationError(f"Unknown role: {fields['role']!r}")

        fields["updated_at"] = self._clock()
        if not self._users.update_fields(uid, fields):
            raise NotFoundError("Employee not found")
        logger.info("Admin uid=%s updated employee uid=%s fields=%s", admin.uid, uid, sorted(fields))
        return self.get_employee(uid)

    def delete_employee(self, admin: Optional[Actor], uid: str) -> None:
        require_admin(admin)
        if admin.uid == uid:
            raise ValidationError("You cannot delete your own account")
        if not self._users.delete(uid):
            raise NotFoundError("Employee not found")
        logger.info("Admin uid=%s deleted employee uid=%s", admin.uid, uid)
