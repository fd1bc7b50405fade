from __future__ import annotations

import logging
import re
import uuid
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from ..common.datetime_utils import now_local
from .connection import DBConfig, DatabaseConnection

logger = logging.getLogger(__name__)

# (email, password, name, employee_id, department, position, role)
DEMO_USERS = (
    ("admin@hris.local", "admin123", "Admin Demo", "ADM-001", "Human Resources", "HR Manager", "admin"),
    ("employee@hris.local", "employee123", "Juan Dela Cruz", "EMP-001", "Operations", "Staff", "employee"),
)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return re.sub(r"(?m)^\s*--.*$", "", sql)


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _connection(db_config: dict) -> DatabaseConnection:
    return DatabaseConnection(DBConfig.from_dict(db_config))


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    conn = _connection(db_config).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    sql = _strip_comments(_strip_create_db_and_use(Path(schema_path).read_text(encoding="utf-8")))

    conn = _connection(db_config).connect()
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()
    logger.info("Applied %s to %s", Path(schema_path).name, DBConfig.from_dict(db_config).describe())


def ensure_demo_users(db_config: dict) -> list[str]:
    """Create (or reset the password of) the demo accounts; returns their emails."""

    conn = _connection(db_config).connect()
    try:
        cur = conn.cursor(dictionary=True)
        now = now_local()
        for email, password, name, employee_id, department, position, role in DEMO_USERS:
            password_hash = generate_password_hash(password)
            cur.execute("SELECT uid FROM users WHERE email=%s", (email,))
            if cur.fetchone():
                cur.execute(
                    """
                    UPDATE users
                    SET password_hash=%s, name=%s, employee_id=%s, department=%s, position=%s, role=%s, updated_at=%s
                    WHERE email=%s
                    """,
                    (password_hash, name, employee_id, department, position, role, now, email),
                )
            else:
                cur.execute(
                    """
                    INSERT INTO users(uid, email, password_hash, name, employee_id, department, position, role, created_at)
                    VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (uuid.uuid4().hex, email, password_hash, name, employee_id, department, position, role, now),
                )
        conn.commit()
    finally:
        conn.close()
    return [u[0] for u in DEMO_USERS]


def list_tables(db_config: dict) -> list[str]:
    conn = _connection(db_config).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
