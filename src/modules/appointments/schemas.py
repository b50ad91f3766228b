# src/modules/appointments/schemas.py
"""Appointments module Pydantic schemas."""

from typing import Optional
from datetime import datetime, timezone
from pydantic import BaseModel, Field, field_validator, model_validator

from src.common.utils.global_functions import blank_to_none
from src.models.models import AppointmentState
from src.modules.procedures.schemas import ProcedureResponse


def _naive(value: Optional[datetime]) -> Optional[datetime]:
    # Appointment times are stored without zone; aware inputs are taken as UTC
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# ============================================================================
# REQUEST SCHEMAS
# ============================================================================

class AppointmentCreateRequest(BaseModel):
    """Request to schedule a new appointment. New appointments always start as scheduled."""
    patient_id: int
    appointment_date: datetime
    query_type: str = Field(default="Consulta general", min_length=1, max_length=200)
    is_orthodontics: bool = False
    observations: Optional[str] = None

    @field_validator("observations", mode="before")
    @classmethod
    def empty_strings_are_missing(cls, value):
        return blank_to_none(value)

    @field_validator("query_type", mode="before")
    @classmethod
    def default_query_type(cls, value):
        value = blank_to_none(value)
        return value if value is not None else "Consulta general"

    @field_validator("appointment_date")
    @classmethod
    def drop_timezone(cls, value):
        return _naive(value)


class AppointmentUpdateRequest(BaseModel):
    """Request to update appointment details or move it through its states."""
    patient_id: Optional[int] = None
    appointment_date: Optional[datetime] = None
    query_type: Optional[str] = Field(None, min_length=1, max_length=200)
    is_orthodontics: Optional[bool] = None
    observations: Optional[str] = None
    state: Optional[AppointmentState] = None

    @field_validator("appointment_date")
    @classmethod
    def drop_timezone(cls, value):
        return _naive(value)

    @model_validator(mode="after")
    def required_fields_not_cleared(self):
        required = ("patient_id", "appointment_date", "query_type", "is_orthodontics", "state")
        cleared = [f for f in required if f in self.model_fields_set and getattr(self, f) is None]
        if cleared:
            raise ValueError(f"No se pueden vaciar los campos: {', '.join(cleared)}")
        return self


# ============================================================================
# RESPONSE SCHEMAS
# ============================================================================

class AppointmentResponse(BaseModel):
    """Appointment with the flattened patient details."""
    id: int
    patient_id: int
    appointment_date: datetime
    query_type: str
    is_orthodontics: bool
    observations: Optional[str] = None
    state: AppointmentState
    patient_name: Optional[str] = None
    patient_identification: Optional[str] = None
    patient_phone: Optional[str] = None
    patient_email: Optional[str] = None


class ConversionResponse(BaseModel):
    """Result of turning a completed appointment into a procedure."""
    appointment: AppointmentResponse
    procedure: ProcedureResponse
