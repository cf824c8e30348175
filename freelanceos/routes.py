"""
HTTP routes for the demo reset admin and cron entry points.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Header
from fastapi.responses import JSONResponse

from freelanceos.config import Settings, get_settings
from freelanceos.dependencies import get_reset_client
from freelanceos.orchestrator import AuthStrategy, ResetTrigger, run_trigger
from freelanceos.reset_client import ResetFunctionClient
from freelanceos.schemas import CronResetRequest, TriggerResetRequest
from freelanceos.status import build_status
from freelanceos.types import ResetActor

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/admin/reset-status")
def reset_status(
    settings: Settings = Depends(get_settings),
    client: Optional[ResetFunctionClient] = Depends(get_reset_client),
):
    try:
        return JSONResponse(status_code=200, content=build_status(settings, client))
    except Exception as exc:
        logger.exception("Status check failed")
        return JSONResponse(
            status_code=500,
            content={
                "error": str(exc),
                "message": "Failed to get reset system status",
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "health": {"overall": "error", "issues": ["Status check failed"]},
            },
        )


@router.post("/admin/trigger-reset")
def trigger_reset(
    payload: Optional[TriggerResetRequest] = None,
    settings: Settings = Depends(get_settings),
    client: Optional[ResetFunctionClient] = Depends(get_reset_client),
):
    """
    Manually reset the demo workspace. Accepts ``force`` and ``dryRun``.
    """
    payload = payload or TriggerResetRequest()
    trigger = ResetTrigger(
        actor=ResetActor.MANUAL,
        auth=AuthStrategy.ADMIN_KEY,
        credential=payload.adminKey,
        force=payload.force,
        dry_run=payload.dryRun,
    )
    status_code, body = run_trigger(trigger, settings, client)
    return JSONResponse(status_code=status_code, content=body)


@router.post("/cron/database-reset")
def cron_database_reset(
    payload: Optional[CronResetRequest] = None,
    authorization: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
    client: Optional[ResetFunctionClient] = Depends(get_reset_client),
):
    payload = payload or CronResetRequest()
    trigger = ResetTrigger(
        actor=ResetActor.SCHEDULED,
        auth=AuthStrategy.CRON_SECRET,
        credential=authorization,
        force=payload.force,
    )
    status_code, body = run_trigger(trigger, settings, client)
    return JSONResponse(status_code=status_code, content=body)
