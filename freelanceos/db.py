"""
Database abstraction for Postgres and an in-memory test implementation.
"""

from __future__ import annotations

import logging
import re
import threading
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Dict, Optional, Protocol, Sequence

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    Text,
    create_engine,
    delete,
    func,
    select,
)
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from freelanceos.seed import SeedProject
from freelanceos.types import BillStatus, ProjectStatus

logger = logging.getLogger(__name__)

INVOICE_PATTERN = re.compile(r"^INV-(\d{4})-(\d{4,})$")
INVOICE_NUMBER_ATTEMPTS = 5


class InvoiceNumberConflictError(RuntimeError):
    """Every attempt to allocate an invoice number collided with another writer."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _iso(value: Optional[datetime | date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _next_invoice_number(existing: Sequence[str], now: datetime) -> str:
    max_seq = 0
    for invoice_number in existing:
        match = INVOICE_PATTERN.match(invoice_number)
        if match and int(match.group(1)) == now.year:
            max_seq = max(max_seq, int(match.group(2)))
    return f"INV-{now.year}-{max_seq + 1:04d}"


class DbClient(Protocol):
    """Interface for database access."""

    def ensure_user(self, email: str) -> "UserRecord":
        ...

    def get_user_by_email(self, email: str) -> Optional["UserRecord"]:
        ...

    def create_project(
        self,
        user_id: str,
        name: str,
        description: Optional[str] = None,
        status: ProjectStatus = ProjectStatus.ACTIVE,
    ) -> "ProjectRecord":
        ...

    def get_project(self, project_id: str) -> Optional["ProjectRecord"]:
        ...

    def list_projects(self, user_id: str) -> list["ProjectRecord"]:
        ...

    def update_project(
        self,
        project_id: str,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        status: Optional[ProjectStatus] = None,
    ) -> Optional["ProjectRecord"]:
        ...

    def delete_project(self, project_id: str) -> bool:
        ...

    def create_note(self, project_id: str, content: str) -> Optional["NoteRecord"]:
        ...

    def list_notes(self, project_id: str) -> list["NoteRecord"]:
        ...

    def delete_note(self, note_id: str) -> bool:
        ...

    def create_bill(
        self,
        project_id: str,
        amount: Decimal,
        description: str,
        due_date: Optional[date] = None,
        status: BillStatus = BillStatus.PENDING,
    ) -> Optional["BillRecord"]:
        ...

    def list_bills(self, project_id: str) -> list["BillRecord"]:
        ...

    def list_bills_for_user(self, user_id: str) -> list["BillRecord"]:
        ...

    def update_bill_status(
        self, bill_id: str, status: BillStatus
    ) -> Optional["BillRecord"]:
        ...

    def delete_bill(self, bill_id: str) -> bool:
        ...

    def replace_user_data(
        self,
        user_id: str,
        catalog: Sequence[SeedProject],
        now: Optional[datetime] = None,
    ) -> "ResetCounts":
        ...

    def append_reset_log(self, record: "ResetLogRecord") -> None:
        ...

    def get_last_reset(self) -> Optional["ResetLogRecord"]:
        ...

    def get_reset_stats(self) -> dict:
        ...


@dataclass
class UserRecord:
    user_id: str
    email: str
    created_at: datetime = field(default_factory=_utcnow)

    def as_dict(self) -> dict:
        return {
            "id": self.user_id,
            "email": self.email,
            "created_at": _iso(self.created_at),
        }


@dataclass
class ProjectRecord:
    project_id: str
    user_id: str
    name: str
    description: Optional[str] = None
    status: ProjectStatus = ProjectStatus.ACTIVE
    seed_key: Optional[str] = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def as_dict(self) -> dict:
        return {
            "id": self.project_id,
            "user_id": self.user_id,
            "name": self.name,
            "description": self.description,
            "status": self.status.value,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


@dataclass
class NoteRecord:
    note_id: str
    project_id: str
    content: str
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def as_dict(self) -> dict:
        return {
            "id": self.note_id,
            "project_id": self.project_id,
            "content": self.content,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


@dataclass
class BillRecord:
    bill_id: str
    project_id: str
    invoice_number: str
    amount: Decimal
    description: str
    status: BillStatus = BillStatus.PENDING
    due_date: Optional[date] = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    def as_dict(self) -> dict:
        return {
            "id": self.bill_id,
            "project_id": self.project_id,
            "invoice_number": self.invoice_number,
            "amount": str(self.amount),
            "description": self.description,
            "status": self.status.value,
            "due_date": _iso(self.due_date),
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


@dataclass
class ResetCounts:
    projects_deleted: int = 0
    notes_deleted: int = 0
    bills_deleted: int = 0
    projects_inserted: int = 0
    notes_inserted: int = 0
    bills_inserted: int = 0

    def inserted(self) -> dict:
        return {
            "projects": self.projects_inserted,
            "notes": self.notes_inserted,
            "bills": self.bills_inserted,
        }

    def deleted(self) -> dict:
        return {
            "projects": self.projects_deleted,
            "notes": self.notes_deleted,
            "bills": self.bills_deleted,
        }


@dataclass
class ResetLogRecord:
    success: bool
    duration_ms: int
    triggered_by: str
    records_affected: dict = field(default_factory=dict)
    error_message: Optional[str] = None
    timestamp: datetime = field(default_factory=_utcnow)
    log_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def as_dict(self) -> dict:
        return {
            "id": self.log_id,
            "timestamp": _iso(self.timestamp),
            "success": self.success,
            "durationMs": self.duration_ms,
            "recordsAffected": self.records_affected,
            "triggeredBy": self.triggered_by,
            "error": self.error_message,
        }


def _summarize_logs(logs: Sequence[ResetLogRecord]) -> dict:
    successful = [log for log in logs if log.success]
    average = (
        round(sum(log.duration_ms for log in successful) / len(successful))
        if successful
        else None
    )
    return {
        "total": len(logs),
        "successful": len(successful),
        "failed": len(logs) - len(successful),
        "averageDurationMs": average,
    }
class InMemoryDbClient:
    """
    Simple in-memory database for development and tests.

    Every method holds one reentrant lock, so a reset never interleaves
    with workspace writes coming from other threadpool workers.
    """

    def __init__(self):
        self._lock = threading.RLock()
        self.users: Dict[str, UserRecord] = {}
        self.projects: Dict[str, ProjectRecord] = {}
        self.notes: Dict[str, NoteRecord] = {}
        self.bills: Dict[str, BillRecord] = {}
        self.reset_logs: list[ResetLogRecord] = []

    def reset(self) -> None:
        """Clear all stored data (useful in tests)."""
        with self._lock:
            self.users.clear()
            self.projects.clear()
            self.notes.clear()
            self.bills.clear()
            self.reset_logs.clear()

    def ensure_user(self, email: str) -> UserRecord:
        with self._lock:
            existing = self.get_user_by_email(email)
            if existing:
                return existing
            record = UserRecord(user_id=uuid.uuid4().hex, email=email)
            self.users[record.user_id] = record
            return record

    def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        with self._lock:
            for user in self.users.values():
                if user.email == email:
                    return user
            return None

    def create_project(
        self,
        user_id: str,
        name: str,
        description: Optional[str] = None,
        status: ProjectStatus = ProjectStatus.ACTIVE,
    ) -> ProjectRecord:
        record = ProjectRecord(
            project_id=uuid.uuid4().hex,
            user_id=user_id,
            name=name,
            description=description,
            status=ProjectStatus(status),
        )
        with self._lock:
            self.projects[record.project_id] = record
        return record

    def get_project(self, project_id: str) -> Optional[ProjectRecord]:
        with self._lock:
            return self.projects.get(project_id)

    def list_projects(self, user_id: str) -> list[ProjectRecord]:
        with self._lock:
            items = [p for p in self.projects.values() if p.user_id == user_id]
        return sorted(items, key=lambda p: p.created_at, reverse=True)

    def update_project(
        self,
        project_id: str,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        status: Optional[ProjectStatus] = None,
    ) -> Optional[ProjectRecord]:
        with self._lock:
            project = self.projects.get(project_id)
            if not project:
                return None
            if name:
                project.name = name
            if description is not None:
                project.description = description
            if status:
                project.status = ProjectStatus(status)
            project.updated_at = _utcnow()
            return project

    def delete_project(self, project_id: str) -> bool:
        with self._lock:
            if project_id not in self.projects:
                return False
            self._drop_projects({project_id})
            return True

    def _drop_projects(self, project_ids: set) -> tuple[int, int]:
        """Remove projects with their notes and bills; caller holds the lock."""
        note_ids = [k for k, n in self.notes.items() if n.project_id in project_ids]
        bill_ids = [k for k, b in self.bills.items() if b.project_id in project_ids]
        for note_id in note_ids:
            del self.notes[note_id]
        for bill_id in bill_ids:
            del self.bills[bill_id]
        for project_id in project_ids:
            del self.projects[project_id]
        return len(note_ids), len(bill_ids)

    def create_note(self, project_id: str, content: str) -> Optional[NoteRecord]:
        with self._lock:
            if project_id not in self.projects:
                return None
            record = NoteRecord(
                note_id=uuid.uuid4().hex, project_id=project_id, content=content
            )
            self.notes[record.note_id] = record
            return record

    def list_notes(self, project_id: str) -> list[NoteRecord]:
        with self._lock:
            items = [n for n in self.notes.values() if n.project_id == project_id]
        return sorted(items, key=lambda n: n.created_at, reverse=True)

    def delete_note(self, note_id: str) -> bool:
        with self._lock:
            return self.notes.pop(note_id, None) is not None

    def create_bill(
        self,
        project_id: str,
        amount: Decimal,
        description: str,
        due_date: Optional[date] = None,
        status: BillStatus = BillStatus.PENDING,
    ) -> Optional[BillRecord]:
        if amount < 0:
            raise ValueError("Bill amount must be non-negative")
        with self._lock:
            if project_id not in self.projects:
                return None
            invoice_number = _next_invoice_number(
                [b.invoice_number for b in self.bills.values()], _utcnow()
            )
            record = BillRecord(
                bill_id=uuid.uuid4().hex,
                project_id=project_id,
                invoice_number=invoice_number,
                amount=Decimal(amount),
                description=description,
                status=BillStatus(status),
                due_date=due_date,
            )
            self.bills[record.bill_id] = record
            return record

    def list_bills(self, project_id: str) -> list[BillRecord]:
        with self._lock:
            items = [b for b in self.bills.values() if b.project_id == project_id]
        return sorted(items, key=lambda b: b.created_at, reverse=True)

    def list_bills_for_user(self, user_id: str) -> list[BillRecord]:
        with self._lock:
            project_ids = {
                p.project_id for p in self.projects.values() if p.user_id == user_id
            }
            items = [b for b in self.bills.values() if b.project_id in project_ids]
        return sorted(items, key=lambda b: b.created_at, reverse=True)

    def update_bill_status(
        self, bill_id: str, status: BillStatus
    ) -> Optional[BillRecord]:
        with self._lock:
            bill = self.bills.get(bill_id)
            if not bill:
                return None
            bill.status = BillStatus(status)
            bill.updated_at = _utcnow()
            return bill

    def delete_bill(self, bill_id: str) -> bool:
        with self._lock:
            return self.bills.pop(bill_id, None) is not None

    def replace_user_data(
        self,
        user_id: str,
        catalog: Sequence[SeedProject],
        now: Optional[datetime] = None,
    ) -> ResetCounts:
        # New rows are built aside and only applied once every check has
        # passed; a failure leaves the store untouched.
        now = now or _utcnow()
        counts = ResetCounts()
        with self._lock:
            projects: Dict[str, ProjectRecord] = {}
            notes: Dict[str, NoteRecord] = {}
            bills: Dict[str, BillRecord] = {}
            for template in catalog:
                created = template.created_at(now)
                project = ProjectRecord(
                    project_id=uuid.uuid4().hex,
                    user_id=user_id,
                    name=template.name,
                    description=template.description,
                    status=ProjectStatus(template.status),
                    seed_key=template.key,
                    created_at=created,
                    updated_at=created,
                )
                projects[project.project_id] = project
                for seed_note in template.notes:
                    created = seed_note.created_at(now)
                    note = NoteRecord(
                        note_id=uuid.uuid4().hex,
                        project_id=project.project_id,
                        content=seed_note.content,
                        created_at=created,
                        updated_at=created,
                    )
                    notes[note.note_id] = note
                for seed_bill in template.bills:
                    created = seed_bill.created_at(now)
                    bill = BillRecord(
                        bill_id=uuid.uuid4().hex,
                        project_id=project.project_id,
                        invoice_number=seed_bill.invoice_number,
                        amount=seed_bill.amount,
                        description=seed_bill.description,
                        status=BillStatus(seed_bill.status),
                        due_date=seed_bill.due_date(now),
                        created_at=created,
                        updated_at=created,
                    )
                    bills[bill.bill_id] = bill

            doomed = {
                p.project_id for p in self.projects.values() if p.user_id == user_id
            }
            taken = {
                b.invoice_number
                for b in self.bills.values()
                if b.project_id not in doomed
            }
            for bill in bills.values():
                if bill.invoice_number in taken:
                    raise ValueError(
                        f"Invoice number {bill.invoice_number} already exists"
                    )
                taken.add(bill.invoice_number)

            counts.projects_deleted = len(doomed)
            counts.notes_deleted, counts.bills_deleted = self._drop_projects(doomed)
            self.projects.update(projects)
            self.notes.update(notes)
            self.bills.update(bills)
            counts.projects_inserted = len(projects)
            counts.notes_inserted = len(notes)
            counts.bills_inserted = len(bills)
        return counts

    def append_reset_log(self, record: ResetLogRecord) -> None:
        with self._lock:
            self.reset_logs.append(record)

    def get_last_reset(self) -> Optional[ResetLogRecord]:
        with self._lock:
            if not self.reset_logs:
                return None
            return max(self.reset_logs, key=lambda log: log.timestamp)

    def get_reset_stats(self) -> dict:
        with self._lock:
            return _summarize_logs(list(self.reset_logs))


class PostgresDbClient:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str):
        if not database_url:
            raise ValueError("DATABASE_URL is required for PostgresDbClient")
        self.engine = create_engine(
            database_url,
            future=True,
            pool_pre_ping=True,
            pool_recycle=1800,
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )
        Base.metadata.create_all(self.engine)

    def _to_project_record(self, row: "ProjectRow") -> ProjectRecord:
        return ProjectRecord(
            project_id=row.id,
            user_id=row.user_id,
            name=row.name,
            description=row.description,
            status=ProjectStatus(row.status),
            seed_key=row.seed_key,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def _to_note_record(self, row: "NoteRow") -> NoteRecord:
        return NoteRecord(
            note_id=row.id,
            project_id=row.project_id,
            content=row.content,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def _to_bill_record(self, row: "BillRow") -> BillRecord:
        return BillRecord(
            bill_id=row.id,
            project_id=row.project_id,
            invoice_number=row.invoice_number,
            amount=Decimal(row.amount),
            description=row.description,
            status=BillStatus(row.status),
            due_date=row.due_date,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )

    def ensure_user(self, email: str) -> UserRecord:
        with self.Session() as session:
            row = session.execute(
                select(UserRow).where(UserRow.email == email)
            ).scalar_one_or_none()
            if not row:
                row = UserRow(id=uuid.uuid4().hex, email=email, created_at=_utcnow())
                session.add(row)
                session.commit()
            return UserRecord(user_id=row.id, email=row.email, created_at=row.created_at)

    def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        with self.Session() as session:
            row = session.execute(
                select(UserRow).where(UserRow.email == email)
            ).scalar_one_or_none()
            if not row:
                return None
            return UserRecord(user_id=row.id, email=row.email, created_at=row.created_at)

    def create_project(
        self,
        user_id: str,
        name: str,
        description: Optional[str] = None,
        status: ProjectStatus = ProjectStatus.ACTIVE,
    ) -> ProjectRecord:
        now = _utcnow()
        with self.Session() as session:
            row = ProjectRow(
                id=uuid.uuid4().hex,
                user_id=user_id,
                name=name,
                description=description,
                status=ProjectStatus(status).value,
                created_at=now,
                updated_at=now,
            )
            session.add(row)
            session.commit()
            session.refresh(row)
            return self._to_project_record(row)

    def get_project(self, project_id: str) -> Optional[ProjectRecord]:
        with self.Session() as session:
            row = session.get(ProjectRow, project_id)
            if not row:
                return None
            return self._to_project_record(row)

    def list_projects(self, user_id: str) -> list[ProjectRecord]:
        with self.Session() as session:
            rows = session.execute(
                select(ProjectRow)
                .where(ProjectRow.user_id == user_id)
                .order_by(ProjectRow.created_at.desc())
            ).scalars()
            return [self._to_project_record(row) for row in rows]

    def update_project(
        self,
        project_id: str,
        *,
        name: Optional[str] = None,
        description: Optional[str] = None,
        status: Optional[ProjectStatus] = None,
    ) -> Optional[ProjectRecord]:
        with self.Session() as session:
            row = session.get(ProjectRow, project_id)
            if not row:
                return None
            if name:
                row.name = name
            if description is not None:
                row.description = description
            if status:
                row.status = ProjectStatus(status).value
            row.updated_at = _utcnow()
            session.commit()
            session.refresh(row)
            return self._to_project_record(row)

    def delete_project(self, project_id: str) -> bool:
        with self.Session() as session:
            row = session.get(ProjectRow, project_id)
            if not row:
                return False
            session.execute(delete(BillRow).where(BillRow.project_id == project_id))
            session.execute(delete(NoteRow).where(NoteRow.project_id == project_id))
            session.delete(row)
            session.commit()
            return True

    def create_note(self, project_id: str, content: str) -> Optional[NoteRecord]:
        now = _utcnow()
        with self.Session() as session:
            if not session.get(ProjectRow, project_id):
                return None
            row = NoteRow(
                id=uuid.uuid4().hex,
                project_id=project_id,
                content=content,
                created_at=now,
                updated_at=now,
            )
            session.add(row)
            session.commit()
            session.refresh(row)
            return self._to_note_record(row)

    def list_notes(self, project_id: str) -> list[NoteRecord]:
        with self.Session() as session:
            rows = session.execute(
                select(NoteRow)
                .where(NoteRow.project_id == project_id)
                .order_by(NoteRow.created_at.desc())
            ).scalars()
            return [self._to_note_record(row) for row in rows]

    def delete_note(self, note_id: str) -> bool:
        with self.Session() as session:
            result = session.execute(delete(NoteRow).where(NoteRow.id == note_id))
            session.commit()
            return bool(result.rowcount)

    def create_bill(
        self,
        project_id: str,
        amount: Decimal,
        description: str,
        due_date: Optional[date] = None,
        status: BillStatus = BillStatus.PENDING,
    ) -> Optional[BillRecord]:
        if amount < 0:
            raise ValueError("Bill amount must be non-negative")
        now = _utcnow()
        # Another writer may commit the same number between our read and
        # insert; the unique constraint rejects it and we recompute.
        for attempt in range(1, INVOICE_NUMBER_ATTEMPTS + 1):
            with self.Session() as session:
                if not session.get(ProjectRow, project_id):
                    return None
                existing = list(
                    session.execute(
                        select(BillRow.invoice_number).where(
                            BillRow.invoice_number.like(f"INV-{now.year}-%")
                        )
                    ).scalars()
                )
                row = BillRow(
                    id=uuid.uuid4().hex,
                    project_id=project_id,
                    invoice_number=_next_invoice_number(existing, now),
                    amount=Decimal(amount),
                    description=description,
                    status=BillStatus(status).value,
                    due_date=due_date,
                    created_at=now,
                    updated_at=now,
                )
                session.add(row)
                try:
                    session.commit()
                except IntegrityError:
                    session.rollback()
                    logger.warning(
                        "Invoice number %s already taken (attempt %d/%d)",
                        row.invoice_number,
                        attempt,
                        INVOICE_NUMBER_ATTEMPTS,
                    )
                    continue
                session.refresh(row)
                return self._to_bill_record(row)
        raise InvoiceNumberConflictError(
            f"Could not allocate an invoice number after {INVOICE_NUMBER_ATTEMPTS} attempts"
        )

    def list_bills(self, project_id: str) -> list[BillRecord]:
        with self.Session() as session:
            rows = session.execute(
                select(BillRow)
                .where(BillRow.project_id == project_id)
                .order_by(BillRow.created_at.desc())
            ).scalars()
            return [self._to_bill_record(row) for row in rows]

    def list_bills_for_user(self, user_id: str) -> list[BillRecord]:
        with self.Session() as session:
            rows = session.execute(
                select(BillRow)
                .join(ProjectRow, ProjectRow.id == BillRow.project_id)
                .where(ProjectRow.user_id == user_id)
                .order_by(BillRow.created_at.desc())
            ).scalars()
            return [self._to_bill_record(row) for row in rows]

    def update_bill_status(
        self, bill_id: str, status: BillStatus
    ) -> Optional[BillRecord]:
        with self.Session() as session:
            row = session.get(BillRow, bill_id)
            if not row:
                return None
            row.status = BillStatus(status).value
            row.updated_at = _utcnow()
            session.commit()
            session.refresh(row)
            return self._to_bill_record(row)

    def delete_bill(self, bill_id: str) -> bool:
        with self.Session() as session:
            result = session.execute(delete(BillRow).where(BillRow.id == bill_id))
            session.commit()
            return bool(result.rowcount)

    def replace_user_data(
        self,
        user_id: str,
        catalog: Sequence[SeedProject],
        now: Optional[datetime] = None,
    ) -> ResetCounts:
        now = now or _utcnow()
        counts = ResetCounts()
        # One transaction: commits on success, rolls back on any error.
        with self.Session.begin() as session:
            project_ids = list(
                session.execute(
                    select(ProjectRow.id).where(ProjectRow.user_id == user_id)
                ).scalars()
            )
            if project_ids:
                counts.bills_deleted = session.execute(
                    delete(BillRow).where(BillRow.project_id.in_(project_ids))
                ).rowcount
                counts.notes_deleted = session.execute(
                    delete(NoteRow).where(NoteRow.project_id.in_(project_ids))
                ).rowcount
            counts.projects_deleted = session.execute(
                delete(ProjectRow).where(ProjectRow.user_id == user_id)
            ).rowcount

            project_rows = []
            for template in catalog:
                created = template.created_at(now)
                project_rows.append(
                    ProjectRow(
                        id=uuid.uuid4().hex,
                        user_id=user_id,
                        name=template.name,
                        description=template.description,
                        status=ProjectStatus(template.status).value,
                        seed_key=template.key,
                        created_at=created,
                        updated_at=created,
                    )
                )
            session.add_all(project_rows)
            session.flush()
            ids_by_key = {row.seed_key: row.id for row in project_rows}
            counts.projects_inserted = len(project_rows)

            for template in catalog:
                project_id = ids_by_key[template.key]
                for seed_note in template.notes:
                    created = seed_note.created_at(now)
                    session.add(
                        NoteRow(
                            id=uuid.uuid4().hex,
                            project_id=project_id,
                            content=seed_note.content,
                            created_at=created,
                            updated_at=created,
                        )
                    )
                    counts.notes_inserted += 1
                for seed_bill in template.bills:
                    created = seed_bill.created_at(now)
                    session.add(
                        BillRow(
                            id=uuid.uuid4().hex,
                            project_id=project_id,
                            invoice_number=seed_bill.invoice_number,
                            amount=seed_bill.amount,
                            description=seed_bill.description,
                            status=BillStatus(seed_bill.status).value,
                            due_date=seed_bill.due_date(now),
                            created_at=created,
                            updated_at=created,
                        )
                    )
                    counts.bills_inserted += 1
        return counts

    def append_reset_log(self, record: ResetLogRecord) -> None:
        with self.Session() as session:
            session.add(
                ResetLogRow(
                    id=record.log_id,
                    timestamp=record.timestamp,
                    success=record.success,
                    duration_ms=record.duration_ms,
                    records_affected=record.records_affected,
                    triggered_by=record.triggered_by,
                    error_message=record.error_message,
                )
            )
            session.commit()

    def _load_reset_logs(self, session: Session, limit: Optional[int] = None):
        stmt = select(ResetLogRow).order_by(ResetLogRow.timestamp.desc())
        if limit:
            stmt = stmt.limit(limit)
        return [
            ResetLogRecord(
                log_id=row.id,
                timestamp=row.timestamp,
                success=row.success,
                duration_ms=row.duration_ms,
                records_affected=row.records_affected or {},
                triggered_by=row.triggered_by,
                error_message=row.error_message,
            )
            for row in session.execute(stmt).scalars()
        ]

    def get_last_reset(self) -> Optional[ResetLogRecord]:
        with self.Session() as session:
            logs = self._load_reset_logs(session, limit=1)
            return logs[0] if logs else None

    def get_reset_stats(self) -> dict:
        with self.Session() as session:
            total = session.execute(select(func.count(ResetLogRow.id))).scalar_one()
            if not total:
                return _summarize_logs([])
            return _summarize_logs(self._load_reset_logs(session))


Base = declarative_base()


class UserRow(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True)
    email = Column(String, nullable=False, unique=True, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)


class ProjectRow(Base):
    __tablename__ = "projects"

    id = Column(String, primary_key=True)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String, nullable=False, default=ProjectStatus.ACTIVE.value)
    seed_key = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)


class NoteRow(Base):
    __tablename__ = "notes"

    id = Column(String, primary_key=True)
    project_id = Column(
        String, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    content = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)


class BillRow(Base):
    __tablename__ = "bills"

    id = Column(String, primary_key=True)
    project_id = Column(
        String, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True
    )
    invoice_number = Column(String, nullable=False, unique=True)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(Text, nullable=False)
    status = Column(String, nullable=False, default=BillStatus.PENDING.value)
    due_date = Column(Date, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)


class ResetLogRow(Base):
    __tablename__ = "reset_logs"

    id = Column(String, primary_key=True)
    timestamp = Column(DateTime(timezone=True), nullable=False, index=True)
    success = Column(Boolean, nullable=False)
    duration_ms = Column(Integer, nullable=False)
    records_affected = Column(JSON, nullable=True)
    triggered_by = Column(String, nullable=False)
    error_message = Column(Text, nullable=True)
