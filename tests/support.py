"""
Shared fixtures for the service and repository tests: an isolated in-memory
database per test case and builders for loan rows and payloads.
"""
import unittest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import models  # noqa: F401  (registers tables)
from database import Base
from models import Loan, LoanStatus, LoanType
from schemas import LoanCreate

BASE_TIME = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def create_payload(**overrides) -> LoanCreate:
    data = {
        "applicantName": "John Doe",
        "applicantEmail": "john.doe@example.com",
        "applicantPhone": "+1-555-0101",
        "loanAmount": 50000,
        "loanTermMonths": 60,
        "interestRate": 7.5,
        "loanType": "Personal",
        "purpose": "Home renovation and improvement project",
    }
    data.update(overrides)
    return LoanCreate.model_validate(data)


def make_loan(seq: int = 1, *, year: int = 2026, days_ago: int = 0, **overrides) -> Loan:
    """A persisted-shape loan row for inserting directly through the session."""
    filed = BASE_TIME - timedelta(days=days_ago)
    data = {
        "loan_number": f"LN-{year}-{seq:06d}",
        "applicant_name": f"Applicant {seq}",
        "applicant_email": f"applicant{seq}@example.com",
        "applicant_phone": "+1-555-0199",
        "loan_amount": Decimal("10000.00"),
        "loan_term_months": 12,
        "interest_rate": Decimal("5.00"),
        "loan_type": LoanType.PERSONAL,
        "status": LoanStatus.PENDING,
        "purpose": "General purpose borrowing",
        "application_date": filed,
        "created_at": filed,
        "created_by": "System",
    }
    data.update(overrides)
    return Loan(**data)


class DatabaseTestCase(unittest.IsolatedAsyncioTestCase):
    """Fresh in-memory SQLite schema and an open ``self.session`` for every test."""

    async def asyncSetUp(self):
        self.engine = create_async_engine(
            "sqlite+aiosqlite:///:memory:",
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        self.sessionmaker = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
        self.session = self.sessionmaker()

    async def asyncTearDown(self):
        await self.session.close()
        await self.engine.dispose()

    async def insert(self, *loans: Loan) -> None:
        self.session.add_all(loans)
        await self.session.flush()
