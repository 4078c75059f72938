"""Schema bootstrap for the timetrack database.

``database/schema.sql`` only uses ``CREATE ... IF NOT EXISTS`` so applying it
on every start is safe.
"""

from __future__ import annotations

import logging
import re
from contextlib import closing
from pathlib import Path
from typing import List

from .connection import DBConfig, DatabaseConnection

logger = logging.getLogger(__name__)

# The target database comes from DB_CONFIG, not from the script
_DATABASE_DIRECTIVES = re.compile(r"(?im)^\s*(CREATE\s+DATABASE|USE)\b[^;]*;")
_LINE_COMMENT = re.compile(r"(?m)^\s*--.*$")
# Semicolons inside quoted literals do not end a statement
_STATEMENT = re.compile(r"""(?:'(?:\\.|[^'\\])*'|"(?:\\.|[^"\\])*"|[^;'"])+""")


def split_statements(sql: str) -> List[str]:
    sql = _LINE_COMMENT.sub("", _DATABASE_DIRECTIVES.sub("", sql))
    return [m.group(0).strip() for m in _STATEMENT.finditer(sql) if m.group(0).strip()]


def ensure_database_exists(db_config: dict) -> None:
    target = DBConfig.from_dict(db_config)
    with closing(DatabaseConnection(target).connect(with_database=False)) as conn:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{target.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> int:
    """Create the database if needed and run every statement of ``schema_path``.

    Returns the number of statements executed.
    """
    target = DBConfig.from_dict(db_config)
    ensure_database_exists(db_config)
    statements = split_statements(Path(schema_path).read_text(encoding="utf-8"))

    with closing(DatabaseConnection(target).connect()) as conn:
        cur = conn.cursor()
        for statement in statements:
            cur.execute(statement)
        conn.commit()

    logger.info("Applied %d schema statements to %s", len(statements), target.describe())
    return len(statements)


def list_tables(db_config: dict) -> List[str]:
    with closing(DatabaseConnection(DBConfig.from_dict(db_config)).connect()) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return sorted(row[0] for row in cur.fetchall())
