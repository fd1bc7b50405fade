from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Credentials, UserProfile


class UserRepository(Protocol):
    """Repository interface for user profiles and their credentials.

    Services depend on this interface, never on a concrete database.
    """

    def get_by_uid(self, uid: str) -> Optional[UserProfile]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[UserProfile]:
        raise NotImplementedError

    def get_credentials(self, email: str) -> Optional[Credentials]:
        raise NotImplementedError

    def create(self, profile: UserProfile, *, password_hash: str) -> None:
        raise NotImplementedError

    def update_fields(self, uid: str, fields: dict) -> bool:
        """Merge the named profile fields; returns False when uid is unknown."""

        raise NotImplementedError

    def delete(self, uid: str) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[UserProfile]:
        """All profiles, newest first."""

        raise NotImplementedError
