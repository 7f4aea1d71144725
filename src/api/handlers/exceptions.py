from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from fastapi.responses import JSONResponse

from core.exceptions import CmsException, ValidationFailure, map_exception_to_http

if TYPE_CHECKING:  # pragma: no cover
    from fastapi import FastAPI, Request


def register_exception_handlers(app: FastAPI) -> None:
    """Register application-wide exception handlers."""

    @app.exception_handler(CmsException)
    async def cms_exception_handler(request: Request, exc: CmsException) -> JSONResponse:  # noqa: D401
        http_exc = map_exception_to_http(exc)
        error: dict[str, Any] = {"type": exc.__class__.__name__, "code": exc.code}
        if isinstance(exc, ValidationFailure):
            error["violations"] = exc.violations
        return JSONResponse(
            status_code=http_exc.status_code,
            content={
                "success": False,
                "message": http_exc.detail,
                "timestamp": datetime.now(UTC).isoformat(),
                "error": error,
            },
        )
