from decimal import Decimal
from typing import Optional

from sqlalchemy import Select, case, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.elements import ColumnElement

from models import Loan, LoanStatus, LoanType
from .base_repository import BaseRepository

WhereExpr = ColumnElement[bool]


def _newest_first(stmt: Select) -> Select:
    # id breaks ties between loans filed in the same instant
    return stmt.order_by(Loan.application_date.desc(), Loan.id.desc())


class LoanRepository(BaseRepository[Loan]):
    def __init__(self) -> None:
        super().__init__(Loan)

    async def get_by_loan_number(self, loan_number: str, session: AsyncSession) -> Optional[Loan]:
        res = await session.execute(select(Loan).where(Loan.loan_number == loan_number))
        return res.scalars().first()

    @staticmethod
    def build_filters(
        status: Optional[LoanStatus] = None,
        loan_type: Optional[LoanType] = None,
    ) -> list[WhereExpr]:
        filters: list[WhereExpr] = []
        if status is not None:
            filters.append(Loan.status == status)
        if loan_type is not None:
            filters.append(Loan.loan_type == loan_type)
        return filters

    @staticmethod
    def search_filter(term: str) -> WhereExpr:
        """Case-insensitive substring match on applicant name, e-mail and loan number."""
        needle = term.lower()
        return or_(
            func.lower(Loan.applicant_name).contains(needle, autoescape=True),
            func.lower(Loan.applicant_email).contains(needle, autoescape=True),
            func.lower(Loan.loan_number).contains(needle, autoescape=True),
        )

    async def list_page(
        self,
        session: AsyncSession,
        offset: int,
        limit: int,
        *,
        status: Optional[LoanStatus] = None,
        loan_type: Optional[LoanType] = None,
    ) -> tuple[list[Loan], int]:
        filters = self.build_filters(status, loan_type)

        total = int(await session.scalar(select(func.count(Loan.id)).where(*filters)) or 0)
        page_q = _newest_first(select(Loan).where(*filters)).offset(offset).limit(limit)
        items = list((await session.execute(page_q)).scalars().all())
        return items, total

    async def search(self, session: AsyncSession, term: str, limit: int) -> list[Loan]:
        stmt = _newest_first(select(Loan).where(self.search_filter(term))).limit(limit)
        return list((await session.execute(stmt)).scalars().all())

    async def last_loan_number(self, prefix: str, session: AsyncSession) -> Optional[str]:
        """
        Greatest loan number starting with ``prefix``.

        Longer numbers sort first so a sequence that outgrows its zero padding
        still ranks above the padded ones.
        """
        stmt = (
            select(Loan.loan_number)
            .where(Loan.loan_number.startswith(prefix, autoescape=True))
            .order_by(func.length(Loan.loan_number).desc(), Loan.loan_number.desc())
            .limit(1)
        )
        return await session.scalar(stmt)

    async def count_by_status(self, session: AsyncSession) -> dict[LoanStatus, int]:
        rows = await session.execute(select(Loan.status, func.count(Loan.id)).group_by(Loan.status))
        return {status: int(count) for status, count in rows.all()}

    async def count_by_type(self, session: AsyncSession) -> dict[LoanType, int]:
        rows = await session.execute(select(Loan.loan_type, func.count(Loan.id)).group_by(Loan.loan_type))
        return {loan_type: int(count) for loan_type, count in rows.all()}

    async def amount_totals(self, session: AsyncSession) -> tuple[int, Decimal, Decimal]:
        """Return (loan count, sum of all amounts, sum of disbursed amounts)."""
        disbursed = case((Loan.status == LoanStatus.DISBURSED, Loan.loan_amount), else_=0)
        row = (
            await session.execute(
                select(
                    func.count(Loan.id),
                    func.coalesce(func.sum(Loan.loan_amount), 0),
                    func.coalesce(func.sum(disbursed), 0),
                )
            )
        ).one()
        count, total, total_disbursed = row
        return int(count or 0), Decimal(str(total or 0)), Decimal(str(total_disbursed or 0))
