# src/modules/monthly_closings/schemas.py
"""Monthly closings module Pydantic schemas."""

from typing import Optional
from datetime import date, datetime
from pydantic import BaseModel, Field, field_validator

from src.common.utils.global_functions import blank_to_none
from src.models.models import Month


class MonthlyClosingCreateRequest(BaseModel):
    """Close a month. The period covers the whole calendar month unless overridden."""
    month: Month
    year: int = Field(..., ge=2000, le=2100)
    comment: Optional[str] = None
    start_date: Optional[date] = Field(None, alias="startDate")
    end_date: Optional[date] = Field(None, alias="endDate")

    class Config:
        populate_by_name = True

    @field_validator("month", mode="before")
    @classmethod
    def month_upper(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("comment", "start_date", "end_date", mode="before")
    @classmethod
    def empty_strings_are_missing(cls, value):
        return blank_to_none(value)


class FinancialSummaryResponse(BaseModel):
    """Income and expenses of a period, with the clinic's net profit."""
    total_general_income: float
    total_clinical_orthodontic_income: float
    total_orthodontic_doctor_income: float
    total_fixed_expenses: float
    total_variable_expenses: float
    net_profit: float


class MonthlyClosingResponse(FinancialSummaryResponse):
    id: int
    month: Month
    year: int
    comment: Optional[str] = None
    closing_date: datetime

    class Config:
        from_attributes = True
