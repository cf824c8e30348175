import os
import tempfile
import unittest
from datetime import date
from decimal import Decimal
from unittest.mock import patch

from sqlalchemy.exc import IntegrityError

from freelanceos import db as db_module
from freelanceos.db import InvoiceNumberConflictError, PostgresDbClient, ResetLogRecord
from freelanceos.seed import SEED_CATALOG, SeedBill, SeedProject
from freelanceos.types import BillStatus, ProjectStatus


class PostgresDbClientTests(unittest.TestCase):
    """
    Uses SQLite via SQLAlchemy URL for fast/local testing of the Postgres client logic.
    """

    def setUp(self):
        self.db = PostgresDbClient("sqlite+pysqlite:///:memory:")
        self.user = self.db.ensure_user("user@demo.com")

    def test_ensure_user_is_idempotent(self):
        again = self.db.ensure_user("user@demo.com")
        self.assertEqual(again.user_id, self.user.user_id)
        self.assertIsNone(self.db.get_user_by_email("nobody@demo.com"))

    def test_project_note_bill_roundtrip(self):
        project = self.db.create_project(self.user.user_id, "Website", "Redesign")
        self.assertEqual(project.status, ProjectStatus.ACTIVE)

        note = self.db.create_note(project.project_id, "Kickoff done")
        self.assertIsNotNone(note)
        bill = self.db.create_bill(
            project.project_id, Decimal("120.50"), "Phase 1", due_date=date(2026, 11, 1)
        )
        self.assertEqual(bill.amount, Decimal("120.50"))
        self.assertEqual(bill.due_date, date(2026, 11, 1))
        self.assertTrue(bill.invoice_number.startswith("INV-"))

        updated = self.db.update_bill_status(bill.bill_id, BillStatus.PAID)
        self.assertEqual(updated.status, BillStatus.PAID)

        self.assertTrue(self.db.delete_project(project.project_id))
        self.assertEqual(self.db.list_notes(project.project_id), [])
        self.assertEqual(self.db.list_bills(project.project_id), [])

    def test_children_require_existing_project(self):
        self.assertIsNone(self.db.create_note("missing", "orphan"))
        self.assertIsNone(self.db.create_bill("missing", Decimal("1"), "orphan"))

    def test_invoice_numbers_are_sequential(self):
        project = self.db.create_project(self.user.user_id, "Website")
        first = self.db.create_bill(project.project_id, Decimal("1"), "a")
        second = self.db.create_bill(project.project_id, Decimal("2"), "b")
        self.assertEqual(int(first.invoice_number[-4:]) + 1, int(second.invoice_number[-4:]))

    def test_invoice_collision_with_concurrent_writer_is_retried(self):
        # A file database gives the competing writer its own connection.
        tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(tmpdir.cleanup)
        db = PostgresDbClient(
            f"sqlite+pysqlite:///{os.path.join(tmpdir.name, 'bills.db')}"
        )
        self.addCleanup(db.engine.dispose)
        user = db.ensure_user("user@demo.com")
        project = db.create_project(user.user_id, "Website")

        real_next = db_module._next_invoice_number
        raced = []

        def racing_next(existing, now):
            number = real_next(existing, now)
            if not raced:
                raced.append(number)
                # Commits the same number before the outer insert lands.
                db.create_bill(project.project_id, Decimal("5"), "competing")
            return number

        with patch("freelanceos.db._next_invoice_number", side_effect=racing_next):
            bill = db.create_bill(project.project_id, Decimal("7"), "mine")

        numbers = sorted(b.invoice_number for b in db.list_bills(project.project_id))
        self.assertEqual(len(numbers), 2)
        self.assertEqual(len(set(numbers)), 2)
        self.assertEqual(bill.invoice_number, numbers[1])
        self.assertEqual(raced, [numbers[0]])

    def test_invoice_allocation_gives_up_after_repeated_collisions(self):
        project = self.db.create_project(self.user.user_id, "Website")
        first = self.db.create_bill(project.project_id, Decimal("1"), "a")
        with patch(
            "freelanceos.db._next_invoice_number",
            return_value=first.invoice_number,
        ) as next_number:
            with self.assertRaises(InvoiceNumberConflictError):
                self.db.create_bill(project.project_id, Decimal("2"), "b")
        self.assertEqual(next_number.call_count, db_module.INVOICE_NUMBER_ATTEMPTS)
        self.assertEqual(len(self.db.list_bills(project.project_id)), 1)

    def test_negative_amount_rejected(self):
        project = self.db.create_project(self.user.user_id, "Website")
        with self.assertRaises(ValueError):
            self.db.create_bill(project.project_id, Decimal("-1"), "refund")

    def test_replace_user_data_twice(self):
        self.db.create_project(self.user.user_id, "Scratch")
        first = self.db.replace_user_data(self.user.user_id, SEED_CATALOG)
        self.assertEqual(first.deleted()["projects"], 1)
        self.assertEqual(first.inserted(), {"projects": 6, "notes": 15, "bills": 9})

        second = self.db.replace_user_data(self.user.user_id, SEED_CATALOG)
        self.assertEqual(second.deleted(), first.inserted())
        self.assertEqual(len(self.db.list_projects(self.user.user_id)), 6)
        self.assertEqual(len(self.db.list_bills_for_user(self.user.user_id)), 9)

    def test_failed_replace_rolls_back(self):
        existing = self.db.create_project(self.user.user_id, "Survivor")
        bill = SeedBill("DUP-0001", Decimal("1.00"), "dup", "paid", 0, 1)
        catalog = (
            SeedProject("a", "A", "a", "active", 1, bills=(bill,)),
            SeedProject("b", "B", "b", "active", 1, bills=(bill,)),
        )
        with self.assertRaises(IntegrityError):
            self.db.replace_user_data(self.user.user_id, catalog)
        projects = self.db.list_projects(self.user.user_id)
        self.assertEqual([p.project_id for p in projects], [existing.project_id])

    def test_reset_log_stats(self):
        self.assertIsNone(self.db.get_last_reset())
        self.db.append_reset_log(
            ResetLogRecord(success=True, duration_ms=100, triggered_by="manual")
        )
        self.db.append_reset_log(
            ResetLogRecord(
                success=False,
                duration_ms=5,
                triggered_by="scheduled",
                error_message="boom",
            )
        )
        stats = self.db.get_reset_stats()
        self.assertEqual(stats["total"], 2)
        self.assertEqual(stats["successful"], 1)
        self.assertEqual(stats["failed"], 1)
        self.assertEqual(stats["averageDurationMs"], 100)
        self.assertIsNotNone(self.db.get_last_reset())


if __name__ == "__main__":
    unittest.main()
