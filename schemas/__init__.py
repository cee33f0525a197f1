from schemas.common import ApiResponse, CamelModel
from schemas.loan import (
    LoanCreate,
    LoanPageResponse,
    LoanResponse,
    LoanStatistics,
    LoanStatusUpdate,
    LoanUpdate,
)
from schemas.page import Page, clamp_paging

__all__ = [
    "ApiResponse",
    "CamelModel",
    "LoanCreate",
    "LoanPageResponse",
    "LoanResponse",
    "LoanStatistics",
    "LoanStatusUpdate",
    "LoanUpdate",
    "Page",
    "clamp_paging",
]
