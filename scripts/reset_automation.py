"""
Trigger a demo reset from cron jobs, CI pipelines or monitoring systems.

Runs the same orchestration as the HTTP entry points, in-process, tagged
with the ``api`` actor. Exits non-zero when the reset fails.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

import requests

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from freelanceos.config import get_settings
from freelanceos.dependencies import build_reset_client
from freelanceos.orchestrator import AuthStrategy, ResetTrigger, run_trigger
from freelanceos.types import ResetActor

logger = logging.getLogger(__name__)

WEBHOOK_TIMEOUT_SECONDS = 10


def send_webhook_notification(webhook_url: str, result: dict) -> None:
    payload = {
        "event": "database_reset",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "success": result.get("success"),
        "duration": result.get("duration"),
        "recordsAffected": result.get("recordsAffected"),
        "triggeredBy": ResetActor.API.value,
    }
    try:
        response = requests.post(
            webhook_url, json=payload, timeout=WEBHOOK_TIMEOUT_SECONDS
        )
        response.raise_for_status()
        logger.info("Webhook notification sent")
    except requests.RequestException as exc:
        logger.warning("Failed to send webhook notification: %s", exc)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Demo database reset automation")
    parser.add_argument(
        "--force",
        action="store_true",
        help="Reset even if the reset system is disabled",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show the request that would be sent without sending it",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(name)s %(levelname)s %(asctime)s %(message)s",
        datefmt="%m/%d/%Y %I:%M:%S %p",
    )

    settings = get_settings()
    missing = [
        name
        for name, value in (
            ("SUPABASE_URL", settings.supabase_url),
            ("SUPABASE_SERVICE_ROLE_KEY", settings.supabase_service_role_key),
        )
        if not value
    ]
    if missing:
        for name in missing:
            logger.error("%s environment variable is required", name)
        return 1

    trigger = ResetTrigger(
        actor=ResetActor.API,
        auth=AuthStrategy.NONE,
        force=args.force,
        dry_run=args.dry_run,
    )
    status_code, result = run_trigger(trigger, settings, build_reset_client(settings))
    print(json.dumps(result, indent=2))

    if status_code != 200 or not result.get("success"):
        logger.error("Database reset failed (%d): %s", status_code, result.get("error"))
        return 1

    if settings.reset_webhook_url and not result.get("skipped") and not args.dry_run:
        send_webhook_notification(settings.reset_webhook_url, result)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
