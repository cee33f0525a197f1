"""
Sequential, human-readable loan numbers: ``LN-<year>-<sequence>``.

The sequence restarts at 1 every calendar year (UTC) and is zero-padded to six
digits. The next number is derived from the store on every call.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from repositories import LoanRepository

LOAN_NUMBER_PREFIX = "LN"
SEQUENCE_WIDTH = 6


def loan_number_prefix(year: int) -> str:
    return f"{LOAN_NUMBER_PREFIX}-{year}-"


def format_loan_number(year: int, sequence: int) -> str:
    return f"{loan_number_prefix(year)}{sequence:0{SEQUENCE_WIDTH}d}"


def parse_sequence(loan_number: str) -> Optional[int]:
    """Trailing sequence of ``LN-YYYY-NNNNNN``, or None if the number is malformed."""
    parts = loan_number.split("-")
    if len(parts) != 3 or not parts[2].isdigit():
        return None
    return int(parts[2])


def next_loan_number(last_loan_number: Optional[str], year: int) -> str:
    sequence = 1
    if last_loan_number:
        current = parse_sequence(last_loan_number)
        if current is not None:
            sequence = current + 1
    return format_loan_number(year, sequence)


async def generate_loan_number(
    session: AsyncSession,
    repository: LoanRepository,
    now: Optional[datetime] = None,
) -> str:
    year = (now or datetime.now(timezone.utc)).year
    last = await repository.last_loan_number(loan_number_prefix(year), session)
    return next_loan_number(last, year)
