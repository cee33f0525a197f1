from models.loan import Loan, LoanStatus, LoanType

__all__ = [
    "Loan",
    "LoanStatus",
    "LoanType",
]
