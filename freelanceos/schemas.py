"""
Pydantic schemas for the FreelanceOS API.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field

from freelanceos.types import BillStatus, ProjectStatus, ResetActor


class TriggerResetRequest(BaseModel):
    force: bool = False
    adminKey: Optional[str] = None
    dryRun: bool = False


class CronResetRequest(BaseModel):
    force: bool = False


class ResetFunctionRequest(BaseModel):
    triggeredBy: ResetActor = ResetActor.API
    force: bool = False
    dryRun: bool = False


class ProjectCreateRequest(BaseModel):
    user_id: str
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    status: ProjectStatus = ProjectStatus.ACTIVE


class ProjectUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    status: Optional[ProjectStatus] = None


class ProjectResponse(BaseModel):
    id: str
    user_id: str
    name: str
    description: Optional[str] = None
    status: ProjectStatus
    created_at: str
    updated_at: str


class ListProjectsResponse(BaseModel):
    projects: list[ProjectResponse]


class NoteCreateRequest(BaseModel):
    content: str = Field(..., min_length=1)


class NoteResponse(BaseModel):
    id: str
    project_id: str
    content: str
    created_at: str
    updated_at: str


class ListNotesResponse(BaseModel):
    notes: list[NoteResponse]


class BillCreateRequest(BaseModel):
    amount: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    description: str = Field(..., min_length=1)
    due_date: Optional[date] = None
    status: BillStatus = BillStatus.PENDING


class BillStatusRequest(BaseModel):
    status: BillStatus


class BillResponse(BaseModel):
    id: str
    project_id: str
    invoice_number: str
    amount: str
    description: str
    status: BillStatus
    due_date: Optional[str] = None
    created_at: str
    updated_at: str


class ListBillsResponse(BaseModel):
    bills: list[BillResponse]


class DeleteResponse(BaseModel):
    status: Literal["deleted"]
