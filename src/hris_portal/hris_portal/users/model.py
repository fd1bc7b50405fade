from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.constants import UNKNOWN_EMPLOYEE_ID, UNKNOWN_NAME
from ..core.enums import Role


@dataclass(frozen=True)
class UserProfile:
    """Profile record stored for every identity.

    Note: Requests and time logs copy ``name``/``employee_id`` at write time, so
    later edits here never rewrite history.
    """

    uid: str
    email: str
    name: str = ""
    employee_id: str = ""
    department: str = ""
    position: str = ""
    role: Role = Role.EMPLOYEE
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class Credentials:
    uid: str
    email: str
    password_hash: str


@dataclass(frozen=True)
class Identity:
    """What the identity gateway knows about a signed-in principal."""

    uid: str
    email: str


@dataclass(frozen=True)
class Actor:
    """The signed-in user performing an action (identity merged with profile)."""

    uid: str
    email: str
    name: str
    employee_id: str
    department: str
    position: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def display_name(self) -> str:
        return self.name or self.email or UNKNOWN_NAME

    @property
    def display_employee_id(self) -> str:
        return self.employee_id or UNKNOWN_EMPLOYEE_ID
