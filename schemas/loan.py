from __future__ import annotations

from decimal import Decimal
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from models import LoanStatus, LoanType
from schemas.common import CamelModel, JsonDecimal, UtcDateTime

PHONE_PATTERN = r"^\+?[\d\s().-]{7,20}$"

NAME_FIELD = dict(min_length=2, max_length=100)
PURPOSE_FIELD = dict(min_length=10, max_length=500)
PHONE_FIELD = dict(max_length=20, pattern=PHONE_PATTERN)
AMOUNT_FIELD = dict(ge=Decimal("1000"), le=Decimal("10000000"))
TERM_FIELD = dict(ge=1, le=360)
RATE_FIELD = dict(ge=Decimal("0.01"), le=Decimal("30.00"))
NOTES_FIELD = dict(max_length=1000)

EMAIL_MAX_LENGTH = 100


def _check_email_length(v: Optional[str]) -> Optional[str]:
    if v is not None and len(v) > EMAIL_MAX_LENGTH:
        raise ValueError(f"Email must be at most {EMAIL_MAX_LENGTH} characters")
    return v


class LoanCreate(CamelModel):
    """New application. Status is always Pending and cannot be supplied."""

    applicant_name: str = Field(..., **NAME_FIELD)
    applicant_email: EmailStr
    applicant_phone: str = Field(..., **PHONE_FIELD)
    loan_amount: Decimal = Field(..., **AMOUNT_FIELD)
    loan_term_months: int = Field(..., **TERM_FIELD)
    interest_rate: Decimal = Field(..., **RATE_FIELD)
    loan_type: LoanType
    purpose: str = Field(..., **PURPOSE_FIELD)
    notes: Optional[str] = Field(None, **NOTES_FIELD)

    @field_validator("applicant_email")
    @classmethod
    def check_email_length(cls, v):
        return _check_email_length(v)


class LoanUpdate(CamelModel):
    """
    Partial update.

    Blank name, e-mail, phone or purpose means "leave unchanged" and is not
    validated. ``notes`` replaces the stored value whenever it is not null,
    so ``""`` clears it.
    """

    applicant_name: Optional[str] = Field(None, **NAME_FIELD)
    applicant_email: Optional[EmailStr] = None
    applicant_phone: Optional[str] = Field(None, **PHONE_FIELD)
    loan_amount: Optional[Decimal] = Field(None, **AMOUNT_FIELD)
    loan_term_months: Optional[int] = Field(None, **TERM_FIELD)
    interest_rate: Optional[Decimal] = Field(None, **RATE_FIELD)
    loan_type: Optional[LoanType] = None
    status: Optional[LoanStatus] = None
    purpose: Optional[str] = Field(None, **PURPOSE_FIELD)
    notes: Optional[str] = Field(None, **NOTES_FIELD)

    @field_validator("applicant_name", "applicant_email", "applicant_phone", "purpose", mode="before")
    @classmethod
    def blank_is_unset(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("applicant_email")
    @classmethod
    def check_email_length(cls, v):
        return _check_email_length(v)

    @property
    def touches_payment_terms(self) -> bool:
        return any(v is not None for v in (self.loan_amount, self.interest_rate, self.loan_term_months))


class LoanStatusUpdate(CamelModel):
    status: LoanStatus
    remarks: Optional[str] = Field(None, max_length=500)


class LoanResponse(CamelModel):
    id: int
    loan_number: str
    applicant_name: str
    applicant_email: str
    applicant_phone: str
    loan_amount: JsonDecimal
    loan_term_months: int
    interest_rate: JsonDecimal
    loan_type: LoanType
    status: LoanStatus
    purpose: str
    monthly_payment: Optional[JsonDecimal] = None
    notes: Optional[str] = None
    application_date: UtcDateTime
    approval_date: Optional[UtcDateTime] = None
    disbursement_date: Optional[UtcDateTime] = None
    created_at: UtcDateTime
    updated_at: Optional[UtcDateTime] = None


class LoanPageResponse(CamelModel):
    items: list[LoanResponse]
    total_count: int
    page_number: int
    page_size: int
    total_pages: int
    has_previous_page: bool
    has_next_page: bool


class LoanStatistics(CamelModel):
    total_loans: int = 0
    pending_loans: int = 0
    approved_loans: int = 0
    rejected_loans: int = 0
    disbursed_loans: int = 0
    total_loan_amount: JsonDecimal = Decimal("0")
    total_disbursed_amount: JsonDecimal = Decimal("0")
    average_loan_amount: JsonDecimal = Decimal("0")
    loans_by_type: dict[str, int] = Field(default_factory=dict)
    loans_by_status: dict[str, int] = Field(default_factory=dict)
