from typing import Any, Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from database import get_db
from models import Loan, LoanStatus, LoanType
from schemas import (
    ApiResponse,
    LoanCreate,
    LoanPageResponse,
    LoanResponse,
    LoanStatusUpdate,
    LoanUpdate,
    Page,
)
from services.loan_service import loan_service

router = APIRouter(prefix="/api/loans", tags=["loans"])

MSG_LOAN_RETRIEVED = "Loan retrieved successfully"


def _loan_to_response(loan: Loan) -> dict[str, Any]:
    """Serialize a loan row to its camelCase JSON shape."""
    return LoanResponse.model_validate(loan).to_json_dict()


def _page_to_response(page: Page[Loan]) -> dict[str, Any]:
    return LoanPageResponse(
        items=[LoanResponse.model_validate(l) for l in page.items],
        total_count=page.total_count,
        page_number=page.page_number,
        page_size=page.page_size,
        total_pages=page.total_pages,
        has_previous_page=page.has_previous_page,
        has_next_page=page.has_next_page,
    ).to_json_dict()


@router.get("")
async def list_loans(
    page_number: int = Query(1, alias="pageNumber"),
    page_size: int = Query(10, alias="pageSize", description="Max 100"),
    status: Optional[LoanStatus] = Query(None),
    loan_type: Optional[LoanType] = Query(None, alias="type"),
    db: AsyncSession = Depends(get_db),
):
    page = await loan_service.list_loans(
        db,
        page_number=page_number,
        page_size=page_size,
        status=status,
        loan_type=loan_type,
    )
    return ApiResponse.ok(_page_to_response(page), "Loans retrieved successfully")


@router.get("/search")
async def search_loans(
    search_term: Optional[str] = Query(None, alias="searchTerm"),
    db: AsyncSession = Depends(get_db),
):
    loans = await loan_service.search_loans(search_term, db)
    return ApiResponse.ok([_loan_to_response(l) for l in loans], f"Found {len(loans)} loan(s)")


@router.get("/statistics")
async def get_statistics(db: AsyncSession = Depends(get_db)):
    stats = await loan_service.get_statistics(db)
    return ApiResponse.ok(stats.to_json_dict(), "Statistics retrieved successfully")


@router.get("/number/{loan_number}")
async def get_loan_by_number(loan_number: str, db: AsyncSession = Depends(get_db)):
    loan = await loan_service.get_loan_by_number(loan_number, db)
    return ApiResponse.ok(_loan_to_response(loan), MSG_LOAN_RETRIEVED)


@router.get("/{loan_id}", name="get_loan")
async def get_loan(loan_id: int, db: AsyncSession = Depends(get_db)):
    loan = await loan_service.get_loan(loan_id, db)
    return ApiResponse.ok(_loan_to_response(loan), MSG_LOAN_RETRIEVED)


@router.post("", status_code=201)
async def create_loan(
    body: LoanCreate,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_db),
):
    loan = await loan_service.create_loan(body, db)
    response.headers["Location"] = str(request.url_for("get_loan", loan_id=loan.id))
    return ApiResponse.ok(_loan_to_response(loan), "Loan created successfully")


@router.put("/{loan_id}")
async def update_loan(loan_id: int, body: LoanUpdate, db: AsyncSession = Depends(get_db)):
    loan = await loan_service.update_loan(loan_id, body, db)
    return ApiResponse.ok(_loan_to_response(loan), "Loan updated successfully")


@router.patch("/{loan_id}/status")
async def update_loan_status(loan_id: int, body: LoanStatusUpdate, db: AsyncSession = Depends(get_db)):
    loan = await loan_service.update_status(loan_id, body, db)
    return ApiResponse.ok(_loan_to_response(loan), "Loan status updated successfully")


@router.delete("/{loan_id}")
async def delete_loan(loan_id: int, db: AsyncSession = Depends(get_db)):
    await loan_service.delete_loan(loan_id, db)
    return ApiResponse.ok({"id": loan_id}, "Loan deleted successfully")
