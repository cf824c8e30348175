"""
Health and schedule report for the reset system.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from freelanceos.config import Settings
from freelanceos.reset_client import ResetFunctionClient
from freelanceos.schedule import cron_expression, next_reset_time, parse_interval

logger = logging.getLogger(__name__)

ACCESSIBLE_STATUS_CODES = {200, 400, 403}


def probe_reset_function(client: ResetFunctionClient) -> dict:
    try:
        response = client.probe()
    except Exception as exc:
        logger.warning("Reset function probe failed: %s", exc)
        return {"available": False, "accessible": False, "error": str(exc)}
    return {
        "available": response.status_code != 404,
        "statusCode": response.status_code,
        "accessible": response.status_code in ACCESSIBLE_STATUS_CODES,
    }


def build_status(
    settings: Settings,
    client: Optional[ResetFunctionClient],
    now: Optional[datetime] = None,
) -> dict:
    now = now or datetime.now(timezone.utc)
    interval = parse_interval(settings.reset_interval)
    status = {
        "timestamp": now.isoformat(),
        "configuration": {
            "enabled": settings.reset_enabled,
            "interval": settings.reset_interval,
            "notifyUsers": settings.reset_notify_users,
            "supabaseConfigured": bool(settings.supabase_url),
            "serviceKeyConfigured": bool(settings.supabase_service_role_key),
        },
        "system": {
            "platform": "fastapi",
            "environment": settings.environment,
            "cronSecretConfigured": bool(settings.cron_secret),
        },
    }

    config = status["configuration"]
    if config["supabaseConfigured"] and config["serviceKeyConfigured"] and client:
        status["resetFunction"] = probe_reset_function(client)

    if settings.reset_enabled and interval is not None:
        next_reset = next_reset_time(interval, now)
        status["schedule"] = {
            "nextReset": next_reset.isoformat(),
            "timeUntilNext": int((next_reset - now).total_seconds() * 1000),
            "cronExpression": cron_expression(interval),
        }

    issues = []
    if not config["supabaseConfigured"]:
        issues.append("Supabase URL not configured")
    if not config["serviceKeyConfigured"]:
        issues.append("Service role key not configured")
    reset_function = status.get("resetFunction")
    if reset_function is not None and not reset_function["available"]:
        issues.append("Reset function not deployed")
    elif reset_function is not None and not reset_function["accessible"]:
        issues.append("Reset function not accessible")
    if not settings.reset_enabled:
        issues.append("Reset system is disabled")
    if interval is None:
        issues.append(f"Unknown reset interval: {settings.reset_interval}")

    healthy = (
        settings.reset_enabled
        and config["supabaseConfigured"]
        and config["serviceKeyConfigured"]
        and bool(reset_function and reset_function["accessible"])
        and interval is not None
    )
    status["health"] = {
        "overall": "healthy" if healthy else "degraded",
        "issues": issues,
    }
    return status
