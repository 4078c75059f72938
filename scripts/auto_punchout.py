"""Run one automatic punch-out pass.

Meant for cron, e.g. every five minutes:

    */5 * * * * cd /srv/timetrack && python scripts/auto_punchout.py
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

from timetrack.container import build_container
from timetrack.core.constants import DEFAULT_UTC_OFFSET_MINUTES

logger = logging.getLogger("timetrack.auto_punchout")


def main() -> int:
    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        default_utc_offset_minutes=int(getattr(settings, "DEFAULT_UTC_OFFSET_MINUTES", DEFAULT_UTC_OFFSET_MINUTES)),
    )
    created = container.auto_punchout_service.run()
    for item in created:
        logger.info(
            "company=%s employee=%s punch_out_at=%s reason=%s",
            item.company_id,
            item.employee_id,
            item.punch_out_at.isoformat(),
            item.reason,
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
