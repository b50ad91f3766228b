# src/modules/procedures/procedures_controller.py
"""Procedures controller with API routes."""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.common.database.database import get_db_session
from src.common.schemas import ApiResponse, CountResponse, PaginatedResponse
from src.common.utils.global_messages import GlobalMessages
from src.models.models import PaymentMethod

from . import procedures_service as service
from .schemas import (
    IncomeStatsResponse, ProcedureCreateRequest, ProcedureResponse, ProcedureUpdateRequest
)

router = APIRouter(prefix="/procedures", tags=["Procedures"])


# ============================================================================
# FIXED PATHS (must come before /{procedure_id} routes)
# ============================================================================

@router.get("/normal", response_model=PaginatedResponse[ProcedureResponse])
async def get_normal_procedures(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    patient_id: Optional[int] = Query(None, alias="patientId"),
    db: AsyncSession = Depends(get_db_session)
):
    """List general (non orthodontic) procedures."""
    return await service.list_procedures(
        db, page, limit, start_date, end_date, patient_id, is_orthodontics=False
    )


@router.get("/orthodontics", response_model=PaginatedResponse[ProcedureResponse])
async def get_orthodontic_procedures(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    patient_id: Optional[int] = Query(None, alias="patientId"),
    db: AsyncSession = Depends(get_db_session)
):
    """List orthodontic treatments with the clinic/doctor split."""
    return await service.list_procedures(
        db, page, limit, start_date, end_date, patient_id, is_orthodontics=True
    )


@router.get("/count", response_model=CountResponse)
async def count_procedures(db: AsyncSession = Depends(get_db_session)):
    """Total number of procedures."""
    return CountResponse(count=await service.count_procedures(db))


@router.get("/stats/income", response_model=ApiResponse[IncomeStatsResponse])
async def get_income_stats(
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: AsyncSession = Depends(get_db_session)
):
    """Income totals for a date range."""
    return ApiResponse(data=await service.get_income_stats(db, start_date, end_date))


@router.get("/patient/{patient_id}", response_model=ApiResponse[List[ProcedureResponse]])
async def get_patient_procedures(patient_id: int, db: AsyncSession = Depends(get_db_session)):
    """Every procedure of one patient."""
    return ApiResponse(data=await service.get_patient_procedures(db, patient_id))


# ============================================================================
# MAIN PROCEDURES ENDPOINTS
# ============================================================================

@router.get("", response_model=PaginatedResponse[ProcedureResponse])
async def get_procedures(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    patient_id: Optional[int] = Query(None, alias="patientId"),
    is_orthodontics: Optional[bool] = Query(None, alias="isOrthodontics"),
    payment_method: Optional[PaymentMethod] = Query(None, alias="paymentMethod"),
    db: AsyncSession = Depends(get_db_session)
):
    """List all procedures with optional filters."""
    return await service.list_procedures(
        db, page, limit, start_date, end_date, patient_id, is_orthodontics, payment_method
    )


@router.get("/{procedure_id}", response_model=ApiResponse[ProcedureResponse])
async def get_procedure(procedure_id: int, db: AsyncSession = Depends(get_db_session)):
    """Get a single procedure by ID."""
    return ApiResponse(data=await service.get_procedure(db, procedure_id))


@router.post("", response_model=ApiResponse[ProcedureResponse], status_code=201)
async def create_procedure(request: ProcedureCreateRequest, db: AsyncSession = Depends(get_db_session)):
    """Register a procedure without going through an appointment."""
    procedure = await service.create_procedure(db, request)
    return ApiResponse(message=GlobalMessages.PROCEDURE_CREATED, data=procedure)


@router.put("/{procedure_id}", response_model=ApiResponse[ProcedureResponse])
async def update_procedure(
    procedure_id: int,
    request: ProcedureUpdateRequest,
    db: AsyncSession = Depends(get_db_session)
):
    """Update procedure details."""
    procedure = await service.update_procedure(db, procedure_id, request)
    return ApiResponse(message=GlobalMessages.PROCEDURE_UPDATED, data=procedure)


@router.delete("/{procedure_id}", response_model=ApiResponse[ProcedureResponse])
async def delete_procedure(procedure_id: int, db: AsyncSession = Depends(get_db_session)):
    """Delete a procedure."""
    procedure = await service.delete_procedure(db, procedure_id)
    return ApiResponse(message=GlobalMessages.PROCEDURE_DELETED, data=procedure)
