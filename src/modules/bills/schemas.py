# src/modules/bills/schemas.py
"""Bills module Pydantic schemas."""

import enum
from typing import Optional
from datetime import date
from pydantic import BaseModel, Field, field_validator, model_validator

from src.common.utils.global_functions import blank_to_none
from src.models.models import MAX_MONEY, BillCategory


class BillType(str, enum.Enum):
    """List filter: fixed bills are the recurrent ones."""
    FIJO = "FIJO"
    VARIABLE = "VARIABLE"


# ============================================================================
# REQUEST SCHEMAS
# ============================================================================

class BillCreateRequest(BaseModel):
    """Request to register an expense."""
    description: str = Field(..., min_length=1, max_length=255)
    amount: float = Field(..., gt=0, lt=MAX_MONEY, allow_inf_nan=False)
    category: BillCategory = BillCategory.OTHER
    is_recurrent: bool = False
    bill_date: date

    @field_validator("category", mode="before")
    @classmethod
    def default_category(cls, value):
        value = blank_to_none(value)
        return value if value is not None else BillCategory.OTHER


class BillUpdateRequest(BaseModel):
    description: Optional[str] = Field(None, min_length=1, max_length=255)
    amount: Optional[float] = Field(None, gt=0, lt=MAX_MONEY, allow_inf_nan=False)
    category: Optional[BillCategory] = None
    is_recurrent: Optional[bool] = None
    bill_date: Optional[date] = None

    @model_validator(mode="after")
    def required_fields_not_cleared(self):
        cleared = [f for f in self.model_fields_set if getattr(self, f) is None]
        if cleared:
            raise ValueError(f"No se pueden vaciar los campos: {', '.join(sorted(cleared))}")
        return self


# ============================================================================
# RESPONSE SCHEMAS
# ============================================================================

class BillResponse(BaseModel):
    id: int
    description: str
    amount: float
    category: BillCategory
    is_recurrent: bool
    bill_date: date

    class Config:
        from_attributes = True


class ExpenseStatsResponse(BaseModel):
    """Expenses aggregated over a date range."""
    total_expenses: float
    fixed_expenses: float
    variable_expenses: float
    total_bills: int
    fixed_count: int
    variable_count: int
