"""
Demo loans for local development: one approved personal loan, one home loan
under review and one pending auto loan.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from logger import logger
from models import Loan, LoanStatus, LoanType
from services.loan_number import format_loan_number
from services.payment_calculator import calculate_monthly_payment

SEED_ACTOR = "System"

DEMO_LOANS = [
    {
        "applicant_name": "John Doe",
        "applicant_email": "john.doe@example.com",
        "applicant_phone": "+1-555-0101",
        "loan_amount": Decimal("50000.00"),
        "loan_term_months": 60,
        "interest_rate": Decimal("7.50"),
        "loan_type": LoanType.PERSONAL,
        "status": LoanStatus.APPROVED,
        "purpose": "Home renovation and improvement project",
        "days_ago": 30,
        "approved_days_ago": 15,
    },
    {
        "applicant_name": "Jane Smith",
        "applicant_email": "jane.smith@example.com",
        "applicant_phone": "+1-555-0102",
        "loan_amount": Decimal("250000.00"),
        "loan_term_months": 240,
        "interest_rate": Decimal("6.25"),
        "loan_type": LoanType.HOME,
        "status": LoanStatus.UNDER_REVIEW,
        "purpose": "Purchase of primary residence",
        "days_ago": 7,
    },
    {
        "applicant_name": "Bob Johnson",
        "applicant_email": "bob.johnson@example.com",
        "applicant_phone": "+1-555-0103",
        "loan_amount": Decimal("35000.00"),
        "loan_term_months": 72,
        "interest_rate": Decimal("5.99"),
        "loan_type": LoanType.AUTO,
        "status": LoanStatus.PENDING,
        "purpose": "Purchase of new vehicle",
        "days_ago": 2,
    },
]


def build_demo_loans(now: Optional[datetime] = None) -> list[Loan]:
    now = now or datetime.now(timezone.utc)
    loans = []
    for seq, data in enumerate(DEMO_LOANS, start=1):
        data = dict(data)
        filed = now - timedelta(days=data.pop("days_ago"))
        approved_days_ago = data.pop("approved_days_ago", None)
        loans.append(
            Loan(
                loan_number=format_loan_number(now.year, seq),
                monthly_payment=calculate_monthly_payment(
                    data["loan_amount"], data["interest_rate"], data["loan_term_months"]
                ),
                application_date=filed,
                approval_date=now - timedelta(days=approved_days_ago) if approved_days_ago is not None else None,
                created_at=filed,
                created_by=SEED_ACTOR,
                **data,
            )
        )
    return loans


async def seed_demo_loans(session: AsyncSession) -> int:
    """Insert the demo loans if the table is empty. Returns the number inserted."""
    existing = await session.scalar(select(func.count(Loan.id)))
    if existing:
        logger.info("[Seed] %s loans already present, skipping demo data", existing)
        return 0
    loans = build_demo_loans()
    session.add_all(loans)
    await session.flush()
    logger.info("[Seed] Inserted %s demo loans", len(loans))
    return len(loans)
