# src/modules/monthly_closings/monthly_closings_controller.py
"""Monthly closings controller with API routes."""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.common.database.database import get_db_session
from src.common.schemas import ApiResponse, PaginatedResponse
from src.common.utils.global_messages import GlobalMessages

from . import monthly_closings_service as service
from .schemas import FinancialSummaryResponse, MonthlyClosingCreateRequest, MonthlyClosingResponse

router = APIRouter(prefix="/monthly-closings", tags=["Monthly Closings"])


@router.get("/summary/financial", response_model=ApiResponse[FinancialSummaryResponse])
async def get_financial_summary(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: AsyncSession = Depends(get_db_session)
):
    """Income, expenses and net profit for a date range, without saving anything."""
    return ApiResponse(data=await service.get_financial_summary(db, start_date, end_date))


@router.get("", response_model=PaginatedResponse[MonthlyClosingResponse])
async def get_closings(
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    db: AsyncSession = Depends(get_db_session)
):
    """Get monthly closings, latest year first."""
    return await service.list_closings(db, page, limit)


@router.get("/{closing_id}", response_model=ApiResponse[MonthlyClosingResponse])
async def get_closing(closing_id: int, db: AsyncSession = Depends(get_db_session)):
    return ApiResponse(data=await service.get_closing(db, closing_id))


@router.post("", response_model=ApiResponse[MonthlyClosingResponse], status_code=201)
async def create_closing(request: MonthlyClosingCreateRequest, db: AsyncSession = Depends(get_db_session)):
    """Close a month and store its financial summary."""
    closing = await service.create_closing(db, request)
    return ApiResponse(message=GlobalMessages.CLOSING_CREATED, data=closing)
