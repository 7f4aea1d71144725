from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from fastapi import HTTPException, status

if TYPE_CHECKING:  # pragma: no cover
    from services.post_validation import ValidationResult


@dataclass(eq=False)
class CmsException(Exception):
    message: str
    code: str = "error"
    details: dict | None = None

    def __str__(self) -> str:
        return self.message


@dataclass(eq=False)
class ValidationError(CmsException):
    code: str = "validation_error"


@dataclass(eq=False)
class ValidationFailure(ValidationError):
    """A model failed one or more validation rules; nothing was persisted."""

    code: str = "validation_failed"

    @classmethod
    def from_result(cls, result: ValidationResult) -> ValidationFailure:
        fields = ", ".join(sorted({v.field for v in result.violations}))
        return cls(
            message=f"Validation failed for: {fields}",
            details={"violations": [v.model_dump() for v in result.violations]},
        )

    @property
    def violations(self) -> list[dict[str, Any]]:
        return list((self.details or {}).get("violations", []))


@dataclass(eq=False)
class NotFoundError(CmsException):
    code: str = "not_found"


@dataclass(eq=False)
class ConflictError(CmsException):
    code: str = "conflict"


@dataclass(eq=False)
class DatabaseError(CmsException):
    code: str = "database_error"


EXC_TO_STATUS: dict[type[CmsException], int] = {
    ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ConflictError: status.HTTP_409_CONFLICT,
    DatabaseError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def map_exception_to_http(exc: CmsException) -> HTTPException:
    status_code = status.HTTP_400_BAD_REQUEST
    for typ, st in EXC_TO_STATUS.items():
        if isinstance(exc, typ):
            status_code = st
            break

    return HTTPException(status_code=status_code, detail=exc.message)
