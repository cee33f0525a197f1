import enum

from sqlalchemy import Column, DateTime, Enum, Integer, Numeric, String

from database import Base


class _NamedEnum(str, enum.Enum):
    """String enum whose values are the wire names; lookup ignores case."""

    @classmethod
    def _missing_(cls, value):
        if isinstance(value, str):
            wanted = value.strip().lower()
            for member in cls:
                if member.value.lower() == wanted:
                    return member
        return None


class LoanType(_NamedEnum):
    PERSONAL = "Personal"
    HOME = "Home"
    AUTO = "Auto"
    BUSINESS = "Business"
    EDUCATION = "Education"
    MEDICAL = "Medical"


class LoanStatus(_NamedEnum):
    PENDING = "Pending"
    UNDER_REVIEW = "UnderReview"
    APPROVED = "Approved"
    REJECTED = "Rejected"
    DISBURSED = "Disbursed"
    CLOSED = "Closed"
    DEFAULTED = "Defaulted"


def _enum_column(enum_cls):
    return Enum(
        enum_cls,
        native_enum=False,
        length=32,
        values_callable=lambda members: [m.value for m in members],
    )


class Loan(Base):
    __tablename__ = "loans"

    id = Column(Integer, primary_key=True, autoincrement=True)
    loan_number = Column(String(50), unique=True, nullable=False, index=True)
    applicant_name = Column(String(100), nullable=False)
    applicant_email = Column(String(100), nullable=False, index=True)
    applicant_phone = Column(String(20), nullable=False)
    loan_amount = Column(Numeric(18, 2), nullable=False)
    loan_term_months = Column(Integer, nullable=False)
    interest_rate = Column(Numeric(5, 2), nullable=False)
    loan_type = Column(_enum_column(LoanType), nullable=False)
    status = Column(_enum_column(LoanStatus), nullable=False, default=LoanStatus.PENDING, index=True)
    purpose = Column(String(500), nullable=False)
    monthly_payment = Column(Numeric(18, 2), nullable=True)
    # Free text; status changes with remarks append audit lines here
    notes = Column(String(1000), nullable=True)
    application_date = Column(DateTime(timezone=True), nullable=False, index=True)
    approval_date = Column(DateTime(timezone=True), nullable=True)
    disbursement_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=True)
    created_by = Column(String(100), nullable=True)
    updated_by = Column(String(100), nullable=True)
