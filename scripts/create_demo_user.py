"""
Ensure the demo identity exists, optionally seeding its workspace.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from freelanceos.config import get_settings
from freelanceos.db import PostgresDbClient
from freelanceos.seed import SEED_CATALOG, catalog_counts, validate_catalog

logger = logging.getLogger(__name__)


def main() -> int:
    parser = argparse.ArgumentParser(description="Create the demo user")
    parser.add_argument(
        "--email",
        type=str,
        default=None,
        help="Override DEMO_USER_EMAIL",
    )
    parser.add_argument(
        "--seed",
        action="store_true",
        help="Replace the demo user's workspace with the seed catalog",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(name)s %(levelname)s %(asctime)s %(message)s",
        datefmt="%m/%d/%Y %I:%M:%S %p",
    )

    settings = get_settings()
    if not settings.database_url:
        logger.error("DATABASE_URL is required")
        return 1

    db = PostgresDbClient(settings.database_url)
    user = db.ensure_user(args.email or settings.demo_user_email)
    logger.info("Demo user ready: %s (%s)", user.email, user.user_id)

    if args.seed:
        validate_catalog(SEED_CATALOG)
        logger.info("Seeding catalog: %s", catalog_counts())
        counts = db.replace_user_data(user.user_id, SEED_CATALOG)
        logger.info("Seeded workspace: %s", counts.inserted())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
