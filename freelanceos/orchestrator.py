"""
Reset orchestration shared by the manual, cron and scripted entry points.

Each entry point builds a ``ResetTrigger`` describing who is calling and
how they must authenticate; ``run_trigger`` does the rest and always
returns ``(status_code, body)`` instead of raising.
"""

from __future__ import annotations

import hmac
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from freelanceos.config import Settings
from freelanceos.reset_client import ResetFunctionClient
from freelanceos.types import ResetActor

logger = logging.getLogger(__name__)


class ResetConfigurationError(RuntimeError):
    """A setting required for a mutating reset is missing."""


class ResetFunctionError(RuntimeError):
    """The reset procedure was reached but did not report success."""


class AuthStrategy(str, Enum):
    ADMIN_KEY = "admin_key"
    CRON_SECRET = "cron_secret"
    NONE = "none"


def credentials_match(supplied: Optional[str], expected: str) -> bool:
    return hmac.compare_digest((supplied or "").encode(), expected.encode())


@dataclass(frozen=True)
class ResetTrigger:
    actor: ResetActor
    auth: AuthStrategy
    credential: Optional[str] = None
    force: bool = False
    dry_run: bool = False

    def authorize(self, settings: Settings) -> Optional[str]:
        """Return an error message when the caller is not allowed in."""
        if self.auth == AuthStrategy.ADMIN_KEY:
            if settings.admin_api_key and not credentials_match(
                self.credential, settings.admin_api_key
            ):
                return "Invalid admin key"
        elif self.auth == AuthStrategy.CRON_SECRET:
            # Without a configured secret the scheduler is trusted implicitly.
            if settings.cron_secret and not credentials_match(
                self.credential, f"Bearer {settings.cron_secret}"
            ):
                return "Invalid cron secret"
        return None

    def payload(self) -> dict:
        return {"triggeredBy": self.actor.value, "force": self.force}


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


def _require_configuration(settings: Settings) -> str:
    if not settings.supabase_url:
        raise ResetConfigurationError("SUPABASE_URL environment variable is required")
    if not settings.supabase_service_role_key:
        raise ResetConfigurationError(
            "SUPABASE_SERVICE_ROLE_KEY environment variable is required"
        )
    return settings.reset_endpoint


def run_trigger(
    trigger: ResetTrigger,
    settings: Settings,
    client: Optional[ResetFunctionClient],
) -> tuple[int, dict]:
    start = time.monotonic()

    auth_error = trigger.authorize(settings)
    if auth_error:
        logger.warning(
            "Rejected %s reset request: %s", trigger.actor.value, auth_error
        )
        return 401, {
            "success": False,
            "error": "Unauthorized",
            "message": auth_error,
            "timestamp": _now_iso(),
        }

    logger.info(
        "Reset triggered - actor: %s, force: %s, dry run: %s",
        trigger.actor.value,
        trigger.force,
        trigger.dry_run,
    )

    try:
        endpoint = _require_configuration(settings)

        if not settings.reset_enabled and not trigger.force:
            logger.info("Database reset is disabled, skipping")
            return 200, {
                "success": True,
                "message": "Database reset is disabled. Use force=true to override.",
                "skipped": True,
                "timestamp": _now_iso(),
                "duration": _elapsed_ms(start),
                "triggeredBy": trigger.actor.value,
            }

        if trigger.dry_run:
            logger.info("Dry run - no reset request will be sent")
            return 200, {
                "success": True,
                "message": "Dry run completed - no actual reset performed",
                "dryRun": True,
                "timestamp": _now_iso(),
                "duration": _elapsed_ms(start),
                "triggeredBy": trigger.actor.value,
                "wouldReset": {"endpoint": endpoint, "payload": trigger.payload()},
            }

        if client is None:
            raise ResetConfigurationError("Reset procedure client is not configured")

        logger.info("Calling reset endpoint: %s", endpoint)
        response = client.invoke(trigger.payload())
        body = response.body
        if not response.ok:
            raise ResetFunctionError(
                f"Reset API returned {response.status_code}: "
                f"{body.get('error') or 'Unknown error'}"
            )
        if not body.get("success"):
            raise ResetFunctionError(body.get("error") or "Reset operation failed")

        duration = _elapsed_ms(start)
        logger.info(
            "Database reset completed - actor: %s, duration: %dms, records: %s",
            trigger.actor.value,
            duration,
            body.get("recordsAffected"),
        )
        result = {
            "success": True,
            "message": "Database reset completed successfully",
            "timestamp": _now_iso(),
            "duration": duration,
            "resetDuration": body.get("duration"),
            "recordsAffected": body.get("recordsAffected"),
            "triggeredBy": trigger.actor.value,
            "force": trigger.force,
        }
        if body.get("recordsDeleted") is not None:
            result["recordsDeleted"] = body["recordsDeleted"]
        return 200, result

    except (ResetConfigurationError, ResetFunctionError) as exc:
        duration = _elapsed_ms(start)
        logger.error(
            "Database reset failed - actor: %s, force: %s, duration: %dms: %s",
            trigger.actor.value,
            trigger.force,
            duration,
            exc,
        )
        return 500, _failure_body(trigger, exc, duration)
    except Exception as exc:
        duration = _elapsed_ms(start)
        logger.exception(
            "Unexpected reset failure - actor: %s, force: %s, duration: %dms",
            trigger.actor.value,
            trigger.force,
            duration,
        )
        return 500, _failure_body(trigger, exc, duration)


def _failure_body(trigger: ResetTrigger, exc: Exception, duration: int) -> dict:
    return {
        "success": False,
        "error": str(exc),
        "message": f"Database reset failed: {exc}",
        "timestamp": _now_iso(),
        "duration": duration,
        "triggeredBy": trigger.actor.value,
    }
