# src/modules/patients/patients_controller.py
"""Patients controller with API routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.common.database.database import get_db_session
from src.common.schemas import ApiResponse, PaginatedResponse
from src.common.utils.global_messages import GlobalMessages

from . import patients_service as service
from .schemas import PatientCreateRequest, PatientResponse, PatientUpdateRequest

router = APIRouter(prefix="/patients", tags=["Patients"])


@router.get("", response_model=PaginatedResponse[PatientResponse])
async def get_patients(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None, description="Name or identification fragment"),
    db: AsyncSession = Depends(get_db_session)
):
    """List patients with optional text search."""
    return await service.list_patients(db, page, limit, search)


@router.get("/{patient_id}", response_model=ApiResponse[PatientResponse])
async def get_patient(patient_id: int, db: AsyncSession = Depends(get_db_session)):
    """Get a single patient by ID."""
    return ApiResponse(data=await service.get_patient(db, patient_id))


@router.post("", response_model=ApiResponse[PatientResponse], status_code=201)
async def create_patient(request: PatientCreateRequest, db: AsyncSession = Depends(get_db_session)):
    """Register a new patient."""
    patient = await service.create_patient(db, request)
    return ApiResponse(message=GlobalMessages.PATIENT_CREATED, data=patient)


@router.put("/{patient_id}", response_model=ApiResponse[PatientResponse])
async def update_patient(
    patient_id: int,
    request: PatientUpdateRequest,
    db: AsyncSession = Depends(get_db_session)
):
    """Update patient details."""
    patient = await service.update_patient(db, patient_id, request)
    return ApiResponse(message=GlobalMessages.PATIENT_UPDATED, data=patient)


@router.delete("/{patient_id}", response_model=ApiResponse[PatientResponse])
async def delete_patient(patient_id: int, db: AsyncSession = Depends(get_db_session)):
    """Delete a patient without appointments."""
    patient = await service.delete_patient(db, patient_id)
    return ApiResponse(message=GlobalMessages.PATIENT_DELETED, data=patient)
