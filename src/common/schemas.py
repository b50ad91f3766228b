# src/common/schemas.py
"""Response envelope shared by every endpoint."""

from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel

from src.common.database.gateway import PageResult

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: Optional[str] = None
    data: Optional[T] = None


class PaginatedResponse(BaseModel, Generic[T]):
    success: bool = True
    data: List[T]
    total: int
    page: int
    limit: int
    totalPages: int

    @classmethod
    def from_page(cls, page: PageResult, items: List[T]) -> "PaginatedResponse[T]":
        return cls(
            data=items,
            total=page.total,
            page=page.page,
            limit=page.limit,
            totalPages=page.total_pages,
        )


class CountResponse(BaseModel):
    success: bool = True
    count: int


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    details: Optional[List[Dict[str, Any]]] = None
