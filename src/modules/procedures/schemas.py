# src/modules/procedures/schemas.py
"""Procedures module Pydantic schemas."""

from typing import Optional
from datetime import date, datetime
from pydantic import BaseModel, Field, field_validator, model_validator

from src.common.utils.global_functions import blank_to_none
from src.models.models import MAX_MONEY, PaymentMethod


# ============================================================================
# REQUEST SCHEMAS
# ============================================================================

class ProcedureCreateRequest(BaseModel):
    """Request to register a procedure directly, without converting an appointment."""
    patient_id: int
    appointment_id: Optional[int] = None
    procedure_date: Optional[date] = None
    procedure_description: str = Field(..., min_length=1)
    total_cost: float = Field(..., gt=0, lt=MAX_MONEY, allow_inf_nan=False)
    payment_method: PaymentMethod
    is_orthodontics: bool = False
    observations: Optional[str] = None

    @field_validator("appointment_id", "procedure_date", "observations", mode="before")
    @classmethod
    def empty_strings_are_missing(cls, value):
        return blank_to_none(value)


class ProcedureUpdateRequest(BaseModel):
    """Partial update of a procedure."""
    procedure_date: Optional[date] = None
    procedure_description: Optional[str] = Field(None, min_length=1)
    total_cost: Optional[float] = Field(None, gt=0, lt=MAX_MONEY, allow_inf_nan=False)
    payment_method: Optional[PaymentMethod] = None
    is_orthodontics: Optional[bool] = None
    observations: Optional[str] = None

    @model_validator(mode="after")
    def required_fields_not_cleared(self):
        required = ("procedure_date", "procedure_description", "total_cost", "payment_method", "is_orthodontics")
        cleared = [f for f in required if f in self.model_fields_set and getattr(self, f) is None]
        if cleared:
            raise ValueError(f"No se pueden vaciar los campos: {', '.join(cleared)}")
        return self


class ConvertToProcedureRequest(BaseModel):
    """Payload of the appointment conversion.

    Presence of the required fields is checked by the service, after the
    appointment state, so every missing field is reported together.
    """
    procedure_description: Optional[str] = None
    total_cost: Optional[float] = None
    payment_method: Optional[PaymentMethod] = None
    observations: Optional[str] = None

    @field_validator("*", mode="before")
    @classmethod
    def empty_strings_are_missing(cls, value):
        return blank_to_none(value)


# ============================================================================
# RESPONSE SCHEMAS
# ============================================================================

class ProcedureResponse(BaseModel):
    """Procedure with patient details and the derived income split."""
    id: int
    appointment_id: Optional[int] = None
    patient_id: int
    procedure_date: date
    procedure_description: str
    total_cost: float
    payment_method: PaymentMethod
    is_orthodontics: bool
    observations: Optional[str] = None
    creation_date: datetime
    clinic_income: float
    doctor_income: float
    patient_name: Optional[str] = None
    patient_identification: Optional[str] = None
    patient_phone: Optional[str] = None
    patient_email: Optional[str] = None
    original_query_type: Optional[str] = None
    original_appointment_date: Optional[datetime] = None


class IncomeStatsResponse(BaseModel):
    """Income aggregated over a date range."""
    total_income: float
    general_income: float
    orthodontics_income: float
    clinic_income: float
    doctor_income: float
    total_procedures: int
    orthodontics_count: int
    general_count: int
