"""
Fixed seed catalog restored for the demo identity on every reset.

Each project template carries a unique ``key``; stores use it to attach
the inserted notes and bills to the project rows they just created.
Timestamps are expressed relative to the moment of the reset so the
seeded workspace always looks like it has a recent history.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from decimal import Decimal


@dataclass(frozen=True)
class SeedNote:
    content: str
    days_ago: int

    def created_at(self, now: datetime) -> datetime:
        return now - timedelta(days=self.days_ago)


@dataclass(frozen=True)
class SeedBill:
    invoice_number: str
    amount: Decimal
    description: str
    status: str
    due_in_days: int
    days_ago: int

    def due_date(self, now: datetime) -> date:
        return (now + timedelta(days=self.due_in_days)).date()

    def created_at(self, now: datetime) -> datetime:
        return now - timedelta(days=self.days_ago)


@dataclass(frozen=True)
class SeedProject:
    key: str
    name: str
    description: str
    status: str
    days_ago: int
    notes: tuple[SeedNote, ...] = field(default_factory=tuple)
    bills: tuple[SeedBill, ...] = field(default_factory=tuple)

    def created_at(self, now: datetime) -> datetime:
        return now - timedelta(days=self.days_ago)


SEED_CATALOG: tuple[SeedProject, ...] = (
    SeedProject(
        key="ecommerce-redesign",
        name="E-commerce Website Redesign",
        description=(
            "Complete redesign and development of a modern e-commerce platform "
            "for a fashion retailer. Includes responsive design, payment "
            "integration, inventory management, and customer portal."
        ),
        status="active",
        days_ago=15,
        notes=(
            SeedNote(
                "Initial client meeting completed. Discussed requirements for the "
                "new e-commerce platform. Client wants modern design with focus "
                "on mobile experience.",
                14,
            ),
            SeedNote(
                "Wireframes and mockups approved by client. Moving forward with "
                "development phase. Using React.js for frontend and Node.js for "
                "backend.",
                10,
            ),
            SeedNote(
                "Payment gateway integration completed. Stripe and PayPal both "
                "working correctly. Testing phase begins next week.",
                5,
            ),
        ),
        bills=(
            SeedBill(
                "DEM-2023-0001",
                Decimal("3500.00"),
                "E-commerce Website Redesign - Phase 1: Design and Wireframing",
                "paid",
                -10,
                12,
            ),
            SeedBill(
                "DEM-2023-0002",
                Decimal("4200.00"),
                "E-commerce Website Redesign - Phase 2: Frontend Development",
                "pending",
                15,
                5,
            ),
        ),
    ),
    SeedProject(
        key="mobile-banking",
        name="Mobile Banking App",
        description=(
            "Development of a secure mobile banking application with features "
            "like account management, money transfers, bill payments, and "
            "investment tracking. Built with React Native."
        ),
        status="active",
        days_ago=30,
        notes=(
            SeedNote(
                "Security audit completed. All encryption protocols meet banking "
                "standards. Ready for beta testing with select users.",
                25,
            ),
            SeedNote(
                "Beta testing feedback received. Users love the intuitive "
                "interface. Minor UI adjustments needed for accessibility "
                "compliance.",
                15,
            ),
            SeedNote(
                "App store submission prepared. All documentation and compliance "
                "requirements met. Expecting approval within 2 weeks.",
                7,
            ),
        ),
        bills=(
            SeedBill(
                "DEM-2023-0003",
                Decimal("8500.00"),
                "Mobile Banking App Development - Complete app development",
                "paid",
                -20,
                25,
            ),
            SeedBill(
                "DEM-2023-0004",
                Decimal("2800.00"),
                "Mobile Banking App - Security Audit and Testing",
                "paid",
                -5,
                10,
            ),
        ),
    ),
    SeedProject(
        key="brand-identity",
        name="Corporate Brand Identity",
        description=(
            "Complete brand identity design for a tech startup including logo "
            "design, color palette, typography, business cards, letterheads, "
            "and brand guidelines."
        ),
        status="completed",
        days_ago=45,
        notes=(
            SeedNote(
                "Brand discovery session completed. Client vision: modern, "
                "trustworthy, innovative. Target audience: tech-savvy "
                "professionals aged 25-45.",
                40,
            ),
            SeedNote(
                "Logo concepts presented. Client selected option 2 with minor "
                "modifications. Color palette finalized: deep blue, silver, "
                "white.",
                35,
            ),
            SeedNote(
                "All brand materials delivered. Client extremely satisfied with "
                "the final result. Brand guidelines document completed and "
                "approved.",
                30,
            ),
        ),
        bills=(
            SeedBill(
                "DEM-2023-0005",
                Decimal("2200.00"),
                "Corporate Brand Identity Package - Complete branding",
                "paid",
                -35,
                40,
            ),
        ),
    ),
    SeedProject(
        key="restaurant-system",
        name="Restaurant Management System",
        description=(
            "Custom restaurant management system with POS integration, "
            "inventory tracking, staff scheduling, and customer loyalty "
            "program. Web-based dashboard with mobile app."
        ),
        status="on_hold",
        days_ago=60,
        notes=(
            SeedNote(
                "Project on hold due to client budget constraints. Will resume "
                "in Q2. 60% of development completed.",
                45,
            ),
            SeedNote(
                "Client requested to pause project temporarily. All work backed "
                "up and documented for future continuation.",
                30,
            ),
        ),
        bills=(
            SeedBill(
                "DEM-2023-0006",
                Decimal("4500.00"),
                "Restaurant Management System - Phase 1 Development",
                "pending",
                30,
                50,
            ),
        ),
    ),
    SeedProject(
        key="real-estate",
        name="Real Estate Platform",
        description=(
            "Modern real estate listing platform with advanced search filters, "
            "virtual tours, agent profiles, and lead management system. "
            "Includes both web and mobile versions."
        ),
        status="active",
        days_ago=10,
        notes=(
            SeedNote(
                "Project kickoff meeting scheduled. Requirements gathering phase "
                "begins. Client wants integration with MLS database.",
                9,
            ),
            SeedNote(
                "Database schema designed. Property listing structure finalized. "
                "Starting with search functionality implementation.",
                5,
            ),
            SeedNote(
                "Advanced search filters implemented. Map integration working "
                "perfectly. Client very happy with progress so far.",
                2,
            ),
        ),
        bills=(
            SeedBill(
                "DEM-2023-0007",
                Decimal("3200.00"),
                "Real Estate Platform - Initial Development Phase",
                "pending",
                20,
                8,
            ),
        ),
    ),
    SeedProject(
        key="healthcare-dashboard",
        name="Healthcare Dashboard",
        description=(
            "Patient management dashboard for healthcare providers with "
            "appointment scheduling, medical records, billing integration, "
            "and telemedicine features."
        ),
        status="completed",
        days_ago=90,
        notes=(
            SeedNote(
                "HIPAA compliance review completed. All security measures "
                "implemented correctly. Dashboard ready for production "
                "deployment.",
                85,
            ),
        ),
        bills=(
            SeedBill(
                "DEM-2023-0008",
                Decimal("6800.00"),
                "Healthcare Dashboard Development - Complete system",
                "paid",
                -85,
                90,
            ),
            SeedBill(
                "DEM-2023-0009",
                Decimal("1500.00"),
                "Healthcare Dashboard - Maintenance and Support Package",
                "paid",
                -75,
                80,
            ),
        ),
    ),
)


def catalog_counts(catalog: tuple[SeedProject, ...] = SEED_CATALOG) -> dict:
    return {
        "projects": len(catalog),
        "notes": sum(len(p.notes) for p in catalog),
        "bills": sum(len(p.bills) for p in catalog),
    }


def validate_catalog(catalog: tuple[SeedProject, ...]) -> None:
    """Raise ValueError when seed keys or invoice numbers collide."""
    keys = [p.key for p in catalog]
    if len(keys) != len(set(keys)):
        raise ValueError("Seed project keys must be unique")
    invoices = [b.invoice_number for p in catalog for b in p.bills]
    if len(invoices) != len(set(invoices)):
        raise ValueError("Seed invoice numbers must be unique")
