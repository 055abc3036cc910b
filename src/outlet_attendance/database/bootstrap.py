"""Schema bootstrap for the attendance tables.

``apply_schema`` is what ``create_app`` runs when ``AUTO_INIT_DB`` is on and what
``scripts/init_db.py`` runs by hand. Every statement in schema.sql is
``CREATE TABLE IF NOT EXISTS``, so applying it twice is harmless.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterator, List, Optional, Union

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent / "schema.sql"

# CREATE DATABASE / USE lines are dropped: the target database comes from DB_CONFIG.
_IGNORED_LINES = re.compile(r"(?im)^\s*(?:--.*|CREATE\s+DATABASE\b.*?;|USE\b.*?;)\s*$")
_QUOTES = "'\"`"


def prepare_schema_sql(sql: str) -> str:
    return _IGNORED_LINES.sub("", sql)


def iter_sql_statements(sql: str) -> Iterator[str]:
    """Split a script on ``;`` outside quoted strings and identifiers."""
    buf: List[str] = []
    quote: Optional[str] = None
    escaped = False

    for ch in sql:
        if escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif quote:
            if ch == quote:
                quote = None
        elif ch in _QUOTES:
            quote = ch
        elif ch == ";":
            stmt = "".join(buf).strip()
            buf = []
            if stmt:
                yield stmt
            continue
        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def load_schema_statements(schema_path: Optional[Union[str, Path]] = None) -> List[str]:
    path = Path(schema_path) if schema_path else SCHEMA_PATH
    return list(iter_sql_statements(prepare_schema_sql(path.read_text(encoding="utf-8"))))


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_mapping(db_config)
    conn = DatabaseConnection(target).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: dict, *, schema_path: Optional[Union[str, Path]] = None) -> int:
    """Create the database if needed and run every schema statement. Returns the statement count."""
    ensure_database_exists(db_config)
    statements = load_schema_statements(schema_path)

    conn = DatabaseConnection(DBConfig.from_mapping(db_config)).connect()
    try:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()
    finally:
        conn.close()

    logger.info("Applied attendance schema (%d statements)", len(statements))
    return len(statements)


def list_tables(db_config: dict) -> List[str]:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config)).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return sorted(row[0] for row in cur.fetchall())
    finally:
        conn.close()
