"""
HTTP contract of the hosted reset procedure.

Mounted outside the API prefix so deployments can expose it at the same
path the hosted store would (``/functions/v1/database-reset``).
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from freelanceos.config import Settings, get_settings
from freelanceos.db import DbClient
from freelanceos.dependencies import get_db_client, get_reset_lock
from freelanceos.lock import ResetLock
from freelanceos.orchestrator import credentials_match
from freelanceos.reset_procedure import run_reset
from freelanceos.schemas import ResetFunctionRequest

logger = logging.getLogger(__name__)

router = APIRouter()


def _error(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "duration": 0,
            "error": error,
            "message": message,
        },
    )


def _authorized(settings: Settings, authorization: Optional[str]) -> bool:
    if not settings.supabase_service_role_key:
        return False
    expected = f"Bearer {settings.supabase_service_role_key}"
    return credentials_match(authorization, expected)


async def _read_request(request: Request) -> ResetFunctionRequest:
    raw = await request.body()
    try:
        data = json.loads(raw) if raw else {}
    except ValueError:
        data = {}
    if not isinstance(data, dict):
        data = {}
    return ResetFunctionRequest.model_validate(data)


@router.post("/database-reset")
async def database_reset(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
    db: DbClient = Depends(get_db_client),
    lock: ResetLock = Depends(get_reset_lock),
):
    if not _authorized(settings, authorization):
        return _error(401, "Unauthorized", "Invalid service credential")

    try:
        payload = await _read_request(request)
    except ValidationError as exc:
        return _error(400, "Invalid request", str(exc))

    try:
        outcome = await run_in_threadpool(
            run_reset,
            db,
            lock,
            settings,
            triggered_by=payload.triggeredBy,
            force=payload.force,
            dry_run=payload.dryRun,
        )
    except Exception as exc:
        logger.exception("Unexpected error in database reset function")
        return _error(
            500,
            str(exc) or "Unexpected error occurred",
            "An unexpected error occurred during database reset",
        )
    return JSONResponse(status_code=outcome.status_code, content=outcome.as_dict())


@router.get("/database-reset/stats")
def database_reset_stats(
    authorization: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),
    db: DbClient = Depends(get_db_client),
):
    if not _authorized(settings, authorization):
        return _error(401, "Unauthorized", "Invalid service credential")
    last = db.get_last_reset()
    return {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "lastReset": last.as_dict() if last else None,
        "stats": db.get_reset_stats(),
    }
