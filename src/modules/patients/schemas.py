# src/modules/patients/schemas.py
"""Patients module Pydantic schemas."""

from typing import Optional
from datetime import date, datetime
from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from src.common.utils.global_functions import blank_to_none

REQUIRED_FIELDS = ("first_name", "first_last_name", "identification")


# ============================================================================
# REQUEST SCHEMAS
# ============================================================================

class PatientFields(BaseModel):
    middle_name: Optional[str] = Field(None, max_length=100)
    second_last_name: Optional[str] = Field(None, max_length=100)
    number_phone: Optional[str] = Field(None, pattern=r"^\d{4,20}$")
    email: Optional[EmailStr] = None
    profession: Optional[str] = Field(None, max_length=150)
    address: Optional[str] = None
    birthdate: Optional[date] = None

    @field_validator("*", mode="before")
    @classmethod
    def empty_strings_are_missing(cls, value):
        return blank_to_none(value)

    @field_validator("number_phone", mode="before")
    @classmethod
    def phone_as_text(cls, value):
        if isinstance(value, int):
            return str(value)
        return value


class PatientCreateRequest(PatientFields):
    """Request to register a new patient."""
    first_name: str = Field(..., min_length=1, max_length=100)
    first_last_name: str = Field(..., min_length=1, max_length=100)
    identification: str = Field(..., min_length=1, max_length=50)


class PatientUpdateRequest(PatientFields):
    """Partial update; only the fields sent are written."""
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    first_last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    identification: Optional[str] = Field(None, min_length=1, max_length=50)

    @model_validator(mode="after")
    def required_fields_not_cleared(self):
        cleared = [f for f in REQUIRED_FIELDS if f in self.model_fields_set and getattr(self, f) is None]
        if cleared:
            raise ValueError(f"No se pueden vaciar los campos: {', '.join(cleared)}")
        return self


# ============================================================================
# RESPONSE SCHEMAS
# ============================================================================

class PatientResponse(BaseModel):
    """Full patient record."""
    id: int
    first_name: str
    middle_name: Optional[str] = None
    first_last_name: str
    second_last_name: Optional[str] = None
    identification: str
    number_phone: Optional[str] = None
    email: Optional[str] = None
    profession: Optional[str] = None
    address: Optional[str] = None
    birthdate: Optional[date] = None
    creation_date: datetime

    class Config:
        from_attributes = True
