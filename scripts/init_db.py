"""Create the timetrack database and apply database/schema.sql.

    APP_ENV=production python scripts/init_db.py
"""
from __future__ import annotations

import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
for path in (REPO_ROOT, REPO_ROOT / "src" / "timetrack"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from dotenv import load_dotenv

from config import get_settings_module

from timetrack.database.bootstrap import apply_schema, list_tables
from timetrack.database.connection import DBConfig

logger = logging.getLogger("timetrack.init_db")


def main() -> int:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    db_config = dict(settings.DB_CONFIG)

    executed = apply_schema(db_config, schema_path=REPO_ROOT / "database" / "schema.sql")
    tables = list_tables(db_config)
    logger.info(
        "Schema applied to %s: %d statements, tables: %s",
        DBConfig.from_dict(db_config).describe(),
        executed,
        ", ".join(tables),
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
