"""
The demo reset procedure.

Wipes every project, note and bill owned by the demo identity and
re-inserts the seed catalog. Only one reset runs at a time; callers that
lose the race get an immediate "already in progress" outcome.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Sequence

from freelanceos.config import Settings
from freelanceos.db import DbClient, ResetLogRecord
from freelanceos.lock import ResetLock
from freelanceos.seed import SEED_CATALOG, SeedProject
from freelanceos.types import ResetActor

logger = logging.getLogger(__name__)

ERROR_DISABLED = "Database reset is disabled"
ERROR_DEMO_USER_MISSING = "Demo user not found"
ERROR_IN_PROGRESS = "Reset already in progress"


@dataclass
class ResetOutcome:
    status_code: int
    success: bool
    message: str
    duration_ms: int = 0
    records_affected: Optional[dict] = None
    records_deleted: Optional[dict] = None
    error: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def as_dict(self) -> dict:
        payload = {
            "success": self.success,
            "timestamp": self.timestamp.isoformat(),
            "duration": self.duration_ms,
            "message": self.message,
        }
        if self.records_affected is not None:
            payload["recordsAffected"] = self.records_affected
        if self.records_deleted is not None:
            payload["recordsDeleted"] = self.records_deleted
        if self.error:
            payload["error"] = self.error
        return payload


def _empty_counts() -> dict:
    return {"projects": 0, "notes": 0, "bills": 0}


def _record(db: DbClient, entry: ResetLogRecord) -> None:
    # The reseed outcome stands even when the log write fails.
    try:
        db.append_reset_log(entry)
    except Exception:
        logger.exception("Could not write reset log entry")


def run_reset(
    db: DbClient,
    lock: ResetLock,
    settings: Settings,
    *,
    triggered_by: ResetActor = ResetActor.API,
    force: bool = False,
    dry_run: bool = False,
    catalog: Sequence[SeedProject] = SEED_CATALOG,
    now: Optional[datetime] = None,
) -> ResetOutcome:
    logger.info(
        "Database reset requested - triggered by: %s, force: %s, dry run: %s",
        triggered_by.value,
        force,
        dry_run,
    )

    if not force and not settings.reset_enabled:
        return ResetOutcome(
            status_code=403,
            success=False,
            message="Reset functionality is currently disabled",
            error=ERROR_DISABLED,
        )

    demo_user = db.get_user_by_email(settings.demo_user_email)
    if not demo_user:
        logger.error("Demo user verification failed: %s", settings.demo_user_email)
        return ResetOutcome(
            status_code=400,
            success=False,
            message=(
                f"Demo user ({settings.demo_user_email}) does not exist in the system"
            ),
            error=ERROR_DEMO_USER_MISSING,
        )

    if dry_run:
        return ResetOutcome(
            status_code=200,
            success=True,
            message="Dry run completed - no data was changed",
            records_affected=_empty_counts(),
            records_deleted=_empty_counts(),
        )

    if not lock.acquire():
        logger.warning("Reset rejected, another reset is still running")
        return ResetOutcome(
            status_code=409,
            success=False,
            message="Another database reset is currently running",
            error=ERROR_IN_PROGRESS,
        )

    start = time.monotonic()
    try:
        try:
            counts = db.replace_user_data(demo_user.user_id, catalog, now=now)
        except Exception as exc:
            duration_ms = int((time.monotonic() - start) * 1000)
            logger.exception("Database reset failed after %dms", duration_ms)
            _record(
                db,
                ResetLogRecord(
                    success=False,
                    duration_ms=duration_ms,
                    triggered_by=triggered_by.value,
                    records_affected=_empty_counts(),
                    error_message=str(exc),
                ),
            )
            return ResetOutcome(
                status_code=500,
                success=False,
                message="Database reset operation failed",
                duration_ms=duration_ms,
                records_affected=_empty_counts(),
                error=str(exc),
            )

        duration_ms = int((time.monotonic() - start) * 1000)
        _record(
            db,
            ResetLogRecord(
                success=True,
                duration_ms=duration_ms,
                triggered_by=triggered_by.value,
                records_affected={**counts.inserted(), "deleted": counts.deleted()},
            ),
        )
    finally:
        lock.release()

    logger.info(
        "Database reset completed in %dms: inserted %s, deleted %s",
        duration_ms,
        counts.inserted(),
        counts.deleted(),
    )
    return ResetOutcome(
        status_code=200,
        success=True,
        message="Database reset completed successfully",
        duration_ms=duration_ms,
        records_affected=counts.inserted(),
        records_deleted=counts.deleted(),
    )
