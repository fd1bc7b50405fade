from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Credentials, UserProfile
from .repository import UserRepository

_PROFILE_COLUMNS = "uid, email, name, employee_id, department, position, role, created_at, updated_at"
_UPDATABLE = {"email", "name", "employee_id", "department", "position", "role", "updated_at"}


def _to_profile(row: dict) -> UserProfile:
    return UserProfile(
        uid=row["uid"],
        email=row["email"],
        name=row.get("name") or "",
        employee_id=row.get("employee_id") or "",
        department=row.get("department") or "",
        position=row.get("position") or "",
        role=Role(row.get("role") or Role.EMPLOYEE.value),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_uid(self, uid: str) -> Optional[UserProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PROFILE_COLUMNS} FROM users WHERE uid=%s", (uid,))
            row = fetchone(cur)
            return _to_profile(row) if row else None

    def get_by_email(self, email: str) -> Optional[UserProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PROFILE_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _to_profile(row) if row else None

    def get_credentials(self, email: str) -> Optional[Credentials]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT uid, email, password_hash FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            if not row:
                return None
            return Credentials(uid=row["uid"], email=row["email"], password_hash=row["password_hash"])

    def create(self, profile: UserProfile, *, password_hash: str) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(uid, email, password_hash, name, employee_id, department, position, role, created_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    profile.uid,
                    profile.email,
                    password_hash,
                    profile.name,
                    profile.employee_id,
                    profile.department,
                    profile.position,
                    profile.role.value,
                    profile.created_at,
                ),
            )

    def update_fields(self, uid: str, fields: dict) -> bool:
        unknown = set(fields) - _UPDATABLE
        if unknown:
            raise ValueError(f"Unsupported user fields: {sorted(unknown)}")
        if not fields:
            return self.get_by_uid(uid) is not None

        assignments = ", ".join(f"{col}=%s" for col in fields)
        params = [v.value if isinstance(v, Role) else v for v in fields.values()]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE users SET {assignments} WHERE uid=%s", (*params, uid))
            return cur.rowcount > 0

    def delete(self, uid: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE uid=%s", (uid,))
            return cur.rowcount > 0

    def list_all(self) -> Sequence[UserProfile]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PROFILE_COLUMNS} FROM users ORDER BY created_at DESC")
            return [_to_profile(r) for r in fetchall(cur)]
