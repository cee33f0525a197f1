from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from config import settings
from exceptions import LoanNotFoundError, LoanPersistenceError, LoanValidationError
from logger import logger
from models import Loan, LoanStatus, LoanType
from repositories import LoanRepository
from schemas import LoanCreate, LoanStatistics, LoanStatusUpdate, LoanUpdate, Page, clamp_paging
from services.loan_number import generate_loan_number
from services.payment_calculator import calculate_monthly_payment, round_currency

# No identity layer yet; every write through the API is attributed to it
API_ACTOR = "API"

NOTES_MAX_LENGTH = 1000
AUDIT_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _has_text(value: Optional[str]) -> bool:
    return value is not None and bool(value.strip())


def append_status_note(
    notes: Optional[str],
    previous: LoanStatus,
    new: LoanStatus,
    remarks: str,
    at: datetime,
) -> str:
    """Audit trail for a status change: the first remark becomes the notes, later ones are appended."""
    if not _has_text(notes):
        return remarks
    stamp = at.strftime(AUDIT_TIMESTAMP_FORMAT)
    return f"{notes}\n[{stamp}] Status changed from {previous.value} to {new.value}: {remarks}"


class LoanService:
    def __init__(self, loan_repository: Optional[LoanRepository] = None) -> None:
        self.loan_repository = loan_repository or LoanRepository()

    async def _require(self, loan_id: int, db: AsyncSession) -> Loan:
        loan = await self.loan_repository.get_by_id(loan_id, db)
        if loan is None:
            raise LoanNotFoundError.for_id(loan_id)
        return loan

    async def list_loans(
        self,
        db: AsyncSession,
        page_number: int = 1,
        page_size: Optional[int] = None,
        status: Optional[LoanStatus] = None,
        loan_type: Optional[LoanType] = None,
    ) -> Page[Loan]:
        """
        One page of loans, newest application first.

        Out-of-range paging input is clamped rather than rejected.
        """
        page_number, page_size = clamp_paging(
            page_number,
            settings.default_page_size if page_size is None else page_size,
            settings.default_page_size,
            settings.max_page_size,
        )
        logger.debug(
            "[LoanService] List page=%s size=%s status=%s type=%s",
            page_number,
            page_size,
            status,
            loan_type,
        )
        items, total = await self.loan_repository.list_page(
            db,
            offset=(page_number - 1) * page_size,
            limit=page_size,
            status=status,
            loan_type=loan_type,
        )
        return Page.build(items, total, page_number, page_size)

    async def get_loan(self, loan_id: int, db: AsyncSession) -> Loan:
        logger.debug("[LoanService] Get loan ID=%s", loan_id)
        return await self._require(loan_id, db)

    async def get_loan_by_number(self, loan_number: str, db: AsyncSession) -> Loan:
        logger.debug("[LoanService] Get loan number=%s", loan_number)
        loan = await self.loan_repository.get_by_loan_number(loan_number, db)
        if loan is None:
            raise LoanNotFoundError.for_number(loan_number)
        return loan

    async def create_loan(self, payload: LoanCreate, db: AsyncSession) -> Loan:
        """
        File a new application.

        The loan number is generated from the store, status starts at Pending and
        the monthly payment is derived from amount, rate and term. Amount and
        rate are rounded to cents first so the payment matches what is stored.
        """
        now = _utcnow()
        amount = round_currency(payload.loan_amount)
        rate = round_currency(payload.interest_rate)
        try:
            loan_number = await generate_loan_number(db, self.loan_repository, now)
            loan = Loan(
                loan_number=loan_number,
                applicant_name=payload.applicant_name,
                applicant_email=payload.applicant_email,
                applicant_phone=payload.applicant_phone,
                loan_amount=amount,
                loan_term_months=payload.loan_term_months,
                interest_rate=rate,
                loan_type=payload.loan_type,
                status=LoanStatus.PENDING,
                purpose=payload.purpose,
                notes=payload.notes,
                monthly_payment=calculate_monthly_payment(
                    amount,
                    rate,
                    payload.loan_term_months,
                ),
                application_date=now,
                created_at=now,
                created_by=API_ACTOR,
            )
            await self.loan_repository.add(loan, db)
        except SQLAlchemyError as e:
            logger.error("[LoanService] Create failed: %s", e, exc_info=True)
            raise LoanPersistenceError("Failed to create loan", e) from e

        logger.info("[LoanService] Created loan %s ID=%s", loan.loan_number, loan.id)
        return loan

    async def update_loan(self, loan_id: int, payload: LoanUpdate, db: AsyncSession) -> Loan:
        """
        Apply a partial update.

        Blank strings leave name, e-mail, phone and purpose untouched; ``notes``
        is replaced by any non-null value. Amount and rate are rounded to cents.
        Touching amount, rate or term recomputes the monthly payment.
        """
        loan = await self._require(loan_id, db)

        if _has_text(payload.applicant_name):
            loan.applicant_name = payload.applicant_name
        if _has_text(payload.applicant_email):
            loan.applicant_email = payload.applicant_email
        if _has_text(payload.applicant_phone):
            loan.applicant_phone = payload.applicant_phone
        if payload.loan_amount is not None:
            loan.loan_amount = round_currency(payload.loan_amount)
        if payload.loan_term_months is not None:
            loan.loan_term_months = payload.loan_term_months
        if payload.interest_rate is not None:
            loan.interest_rate = round_currency(payload.interest_rate)
        if payload.loan_type is not None:
            loan.loan_type = payload.loan_type
        if payload.status is not None:
            loan.status = payload.status
        if _has_text(payload.purpose):
            loan.purpose = payload.purpose
        if payload.notes is not None:
            loan.notes = payload.notes

        if payload.touches_payment_terms:
            loan.monthly_payment = calculate_monthly_payment(
                loan.loan_amount,
                loan.interest_rate,
                loan.loan_term_months,
            )

        loan.updated_at = _utcnow()
        loan.updated_by = API_ACTOR

        try:
            await self.loan_repository.update(loan, db)
        except SQLAlchemyError as e:
            logger.error("[LoanService] Update failed ID=%s: %s", loan_id, e, exc_info=True)
            raise LoanPersistenceError("Failed to update loan", e) from e

        logger.info("[LoanService] Updated loan %s", loan.loan_number)
        return loan

    async def update_status(self, loan_id: int, payload: LoanStatusUpdate, db: AsyncSession) -> Loan:
        """
        Move a loan to ``payload.status``.

        Any status may follow any other. The approval and disbursement dates are
        stamped on the first move into Approved / Disbursed and kept afterwards.
        """
        loan = await self._require(loan_id, db)
        previous = loan.status
        now = _utcnow()

        notes = loan.notes
        if _has_text(payload.remarks):
            notes = append_status_note(loan.notes, previous, payload.status, payload.remarks, now)
            if len(notes) > NOTES_MAX_LENGTH:
                raise LoanValidationError(
                    "Validation failed",
                    [f"Notes would exceed {NOTES_MAX_LENGTH} characters; shorten the remarks or clear the notes"],
                )

        loan.status = payload.status
        loan.notes = notes
        loan.updated_at = now
        loan.updated_by = API_ACTOR

        if payload.status == LoanStatus.APPROVED and loan.approval_date is None:
            loan.approval_date = now
        elif payload.status == LoanStatus.DISBURSED and loan.disbursement_date is None:
            loan.disbursement_date = now

        try:
            await self.loan_repository.update(loan, db)
        except SQLAlchemyError as e:
            logger.error("[LoanService] Status update failed ID=%s: %s", loan_id, e, exc_info=True)
            raise LoanPersistenceError("Failed to update loan status", e) from e

        logger.info(
            "[LoanService] Loan %s status %s -> %s",
            loan.loan_number,
            previous.value,
            payload.status.value,
        )
        return loan

    async def delete_loan(self, loan_id: int, db: AsyncSession) -> None:
        logger.warning("[LoanService] Delete loan ID=%s", loan_id)
        loan = await self._require(loan_id, db)
        try:
            await self.loan_repository.delete(loan, db)
        except SQLAlchemyError as e:
            logger.error("[LoanService] Delete failed ID=%s: %s", loan_id, e, exc_info=True)
            raise LoanPersistenceError("Failed to delete loan", e) from e
        logger.info("[LoanService] Deleted loan %s", loan.loan_number)

    async def search_loans(self, search_term: Optional[str], db: AsyncSession) -> list[Loan]:
        """
        Case-insensitive substring match on number, name and e-mail.

        Surrounding whitespace is stripped before the minimum-length check, and
        the stripped term is what gets matched, so ``"  a "`` is rejected.
        """
        term = (search_term or "").strip()
        if len(term) < settings.min_search_length:
            raise LoanValidationError(
                f"Search term must be at least {settings.min_search_length} characters"
            )
        logger.debug("[LoanService] Search term=%r", term)
        return await self.loan_repository.search(db, term, settings.search_result_limit)

    async def get_statistics(self, db: AsyncSession) -> LoanStatistics:
        count, total_amount, disbursed_amount = await self.loan_repository.amount_totals(db)
        by_status = await self.loan_repository.count_by_status(db)
        by_type = await self.loan_repository.count_by_type(db)

        average = round_currency(total_amount / count) if count else Decimal("0")

        return LoanStatistics(
            total_loans=count,
            pending_loans=by_status.get(LoanStatus.PENDING, 0),
            approved_loans=by_status.get(LoanStatus.APPROVED, 0),
            rejected_loans=by_status.get(LoanStatus.REJECTED, 0),
            disbursed_loans=by_status.get(LoanStatus.DISBURSED, 0),
            total_loan_amount=round_currency(total_amount),
            total_disbursed_amount=round_currency(disbursed_amount),
            average_loan_amount=average,
            loans_by_type={t.value: n for t, n in by_type.items()},
            loans_by_status={s.value: n for s, n in by_status.items()},
        )


loan_service = LoanService()
