"""
HTTP routes for projects, notes and bills.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from freelanceos.db import DbClient, InvoiceNumberConflictError
from freelanceos.dependencies import get_db_client
from freelanceos.schemas import (
    BillCreateRequest,
    BillResponse,
    BillStatusRequest,
    DeleteResponse,
    ListBillsResponse,
    ListNotesResponse,
    ListProjectsResponse,
    NoteCreateRequest,
    NoteResponse,
    ProjectCreateRequest,
    ProjectResponse,
    ProjectUpdateRequest,
)

router = APIRouter()


def _project_or_404(db: DbClient, project_id: str):
    project = db.get_project(project_id)
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project


@router.get("/projects", response_model=ListProjectsResponse)
def list_projects(
    user_id: str = Query(..., min_length=1),
    db: DbClient = Depends(get_db_client),
):
    return ListProjectsResponse(
        projects=[p.as_dict() for p in db.list_projects(user_id)]
    )


@router.post("/projects", response_model=ProjectResponse, status_code=201)
def create_project(
    payload: ProjectCreateRequest, db: DbClient = Depends(get_db_client)
):
    project = db.create_project(
        payload.user_id,
        payload.name,
        description=payload.description,
        status=payload.status,
    )
    return ProjectResponse(**project.as_dict())


@router.get("/projects/{project_id}", response_model=ProjectResponse)
def get_project(project_id: str, db: DbClient = Depends(get_db_client)):
    return ProjectResponse(**_project_or_404(db, project_id).as_dict())


@router.patch("/projects/{project_id}", response_model=ProjectResponse)
def update_project(
    project_id: str,
    payload: ProjectUpdateRequest,
    db: DbClient = Depends(get_db_client),
):
    project = db.update_project(
        project_id,
        name=payload.name,
        description=payload.description,
        status=payload.status,
    )
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return ProjectResponse(**project.as_dict())


@router.delete("/projects/{project_id}", response_model=DeleteResponse)
def delete_project(project_id: str, db: DbClient = Depends(get_db_client)):
    if not db.delete_project(project_id):
        raise HTTPException(status_code=404, detail="Project not found")
    return DeleteResponse(status="deleted")


@router.get("/projects/{project_id}/notes", response_model=ListNotesResponse)
def list_notes(project_id: str, db: DbClient = Depends(get_db_client)):
    _project_or_404(db, project_id)
    return ListNotesResponse(notes=[n.as_dict() for n in db.list_notes(project_id)])


@router.post(
    "/projects/{project_id}/notes", response_model=NoteResponse, status_code=201
)
def create_note(
    project_id: str,
    payload: NoteCreateRequest,
    db: DbClient = Depends(get_db_client),
):
    note = db.create_note(project_id, payload.content)
    if not note:
        # The project may have been deleted between page load and submit.
        raise HTTPException(status_code=404, detail="Project not found")
    return NoteResponse(**note.as_dict())


@router.delete("/notes/{note_id}", response_model=DeleteResponse)
def delete_note(note_id: str, db: DbClient = Depends(get_db_client)):
    if not db.delete_note(note_id):
        raise HTTPException(status_code=404, detail="Note not found")
    return DeleteResponse(status="deleted")


@router.get("/projects/{project_id}/bills", response_model=ListBillsResponse)
def list_project_bills(project_id: str, db: DbClient = Depends(get_db_client)):
    _project_or_404(db, project_id)
    return ListBillsResponse(bills=[b.as_dict() for b in db.list_bills(project_id)])


@router.post(
    "/projects/{project_id}/bills", response_model=BillResponse, status_code=201
)
def create_bill(
    project_id: str,
    payload: BillCreateRequest,
    db: DbClient = Depends(get_db_client),
):
    try:
        bill = db.create_bill(
            project_id,
            payload.amount,
            payload.description,
            due_date=payload.due_date,
            status=payload.status,
        )
    except InvoiceNumberConflictError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    if not bill:
        raise HTTPException(status_code=404, detail="Project not found")
    return BillResponse(**bill.as_dict())


@router.get("/bills", response_model=ListBillsResponse)
def list_bills(
    user_id: str = Query(..., min_length=1),
    db: DbClient = Depends(get_db_client),
):
    return ListBillsResponse(
        bills=[b.as_dict() for b in db.list_bills_for_user(user_id)]
    )


@router.patch("/bills/{bill_id}/status", response_model=BillResponse)
def update_bill_status(
    bill_id: str,
    payload: BillStatusRequest,
    db: DbClient = Depends(get_db_client),
):
    bill = db.update_bill_status(bill_id, payload.status)
    if not bill:
        raise HTTPException(status_code=404, detail="Bill not found")
    return BillResponse(**bill.as_dict())


@router.delete("/bills/{bill_id}", response_model=DeleteResponse)
def delete_bill(bill_id: str, db: DbClient = Depends(get_db_client)):
    if not db.delete_bill(bill_id):
        raise HTTPException(status_code=404, detail="Bill not found")
    return DeleteResponse(status="deleted")
