"""
Exception handlers that render every failure in the uniform envelope::

    {"success": false, "error": "...", "details": [...], "message": "..."}

Routes raise ``HTTPException`` with a human-readable ``detail``; request
body validation errors are turned into a per-field issue list.
"""

import logging
from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


def _issue_path(loc: tuple[Any, ...]) -> list[Any]:
    # Drop the "body"/"query"/"path" segment FastAPI prepends
    if loc and loc[0] in ("body", "query", "path", "header"):
        return list(loc[1:])
    return list(loc)


def format_validation_issues(errors: list[dict]) -> list[dict[str, Any]]:
    issues = []
    for err in errors:
        issues.append({
            "path": _issue_path(tuple(err.get("loc", ()))),
            "message": err.get("msg", "Invalid value"),
            "code": err.get("type"),
        })
    return issues


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "error": "Validation error",
            "details": format_validation_issues(exc.errors()),
        },
    )


def internal_error_response(request: Request, headers: Optional[dict[str, str]] = None) -> JSONResponse:
    """Log the exception being handled and render the generic 500 envelope.

    Call from inside an ``except`` block. The middlewares use this so their
    own headers survive an unhandled error in the layers below them.
    """
    request_id = getattr(request.state, "request_id", None)
    logger.exception("[%s] Unhandled error on %s %s", request_id, request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": "Internal server error"},
        headers=headers,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    return internal_error_response(request)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
