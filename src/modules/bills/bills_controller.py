# src/modules/bills/bills_controller.py
"""Bills controller with API routes."""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.common.database.database import get_db_session
from src.common.schemas import ApiResponse, PaginatedResponse
from src.common.utils.global_messages import GlobalMessages
from src.models.models import BillCategory

from . import bills_service as service
from .schemas import BillCreateRequest, BillResponse, BillType, BillUpdateRequest, ExpenseStatsResponse

router = APIRouter(prefix="/bills", tags=["Bills"])


@router.get("/recurrent/all", response_model=ApiResponse[List[BillResponse]])
async def get_recurrent_bills(db: AsyncSession = Depends(get_db_session)):
    """Get every recurrent (fixed) bill."""
    return ApiResponse(data=await service.get_recurrent_bills(db))


@router.get("/stats/expenses", response_model=ApiResponse[ExpenseStatsResponse])
async def get_expense_stats(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: AsyncSession = Depends(get_db_session)
):
    """Expense totals for a date range."""
    return ApiResponse(data=await service.get_expense_stats(db, start_date, end_date))


@router.get("", response_model=PaginatedResponse[BillResponse])
async def get_bills(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    category: Optional[BillCategory] = Query(None),
    bill_type: Optional[BillType] = Query(None, alias="type"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: AsyncSession = Depends(get_db_session)
):
    """Get bills with optional category, type and date filters."""
    return await service.list_bills(db, page, limit, category, bill_type, start_date, end_date)


@router.get("/{bill_id}", response_model=ApiResponse[BillResponse])
async def get_bill(bill_id: int, db: AsyncSession = Depends(get_db_session)):
    return ApiResponse(data=await service.get_bill(db, bill_id))


@router.post("", response_model=ApiResponse[BillResponse], status_code=201)
async def create_bill(request: BillCreateRequest, db: AsyncSession = Depends(get_db_session)):
    bill = await service.create_bill(db, request)
    return ApiResponse(message=GlobalMessages.BILL_CREATED, data=bill)


@router.put("/{bill_id}", response_model=ApiResponse[BillResponse])
async def update_bill(bill_id: int, request: BillUpdateRequest, db: AsyncSession = Depends(get_db_session)):
    bill = await service.update_bill(db, bill_id, request)
    return ApiResponse(message=GlobalMessages.BILL_UPDATED, data=bill)


@router.delete("/{bill_id}", response_model=ApiResponse[BillResponse])
async def delete_bill(bill_id: int, db: AsyncSession = Depends(get_db_session)):
    bill = await service.delete_bill(db, bill_id)
    return ApiResponse(message=GlobalMessages.BILL_DELETED, data=bill)
