from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


def _utcnow() -> datetime:
    return datetime.now(UTC)


class BaseResponse(BaseModel):
    """Base response schema with common fields."""

    success: bool = Field(..., description="Whether the operation was successful")
    timestamp: datetime = Field(default_factory=_utcnow, description="Response timestamp")


class SuccessResponse(BaseResponse, Generic[T]):
    """Generic success response with typed data."""

    data: T = Field(..., description="Response data")
    message: str | None = Field(None, description="Optional success message")

    @classmethod
    def ok(cls, data: T, message: str | None = None) -> "SuccessResponse[T]":
        return cls.model_validate({"success": True, "data": data, "message": message})


class ErrorResponse(BaseResponse):
    """Error response schema."""

    error: dict[str, Any] = Field(..., description="Error details, including rule violations")
    message: str = Field(..., description="Error message")


class PaginationMeta(BaseModel):
    """Pagination metadata schema."""

    page: int = Field(..., ge=1, description="Current page number")
    limit: int = Field(..., ge=1, le=100, description="Items per page")
    total: int = Field(..., ge=0, description="Total number of items")
    total_pages: int = Field(..., ge=1, description="Total number of pages")
    has_next: bool = Field(..., description="Whether there is a next page")
    has_prev: bool = Field(..., description="Whether there is a previous page")


class PaginatedResponse(BaseResponse, Generic[T]):
    """Generic paginated response."""

    data: list[T] = Field(..., description="List of items")
    pagination: PaginationMeta = Field(..., description="Pagination metadata")
    message: str | None = Field(None, description="Optional message")

    @classmethod
    def ok(
        cls,
        items: list[T],
        pagination: PaginationMeta,
        message: str | None = None,
    ) -> "PaginatedResponse[T]":
        return cls.model_validate(
            {
                "success": True,
                "data": items,
                "pagination": pagination,
                "message": message,
            }
        )
