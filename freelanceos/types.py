"""
Shared enumerations for workspace records and reset bookkeeping.
"""

from __future__ import annotations

from enum import Enum


class ProjectStatus(str, Enum):
    ACTIVE = "active"
    COMPLETED = "completed"
    ON_HOLD = "on_hold"


class BillStatus(str, Enum):
    PAID = "paid"
    PENDING = "pending"


class ResetActor(str, Enum):
    """What caused a reset to run."""

    SCHEDULED = "scheduled"
    MANUAL = "manual"
    API = "api"
