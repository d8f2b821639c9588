"""Error taxonomy and request-boundary handlers.

Validation, not-found and signature failures are raised as ``HTTPException`` at the
call site. Failures of the external collaborators (LINE, Gemini) are raised as
``UpstreamError`` subclasses and turned into a generic 500 here.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Internal server error"


class UpstreamError(Exception):
    """An external collaborator call failed or returned a non-success response."""


class MessagingError(UpstreamError):
    def __init__(self, status_code: int | None, body: str = ""):
        self.status_code = status_code
        self.body = body
        super().__init__(f"LINE API call failed (status={status_code}): {body[:200]}")


class AdviceGenerationError(UpstreamError):
    pass


async def _upstream_error_handler(request: Request, exc: UpstreamError) -> JSONResponse:
    logger.error("Upstream failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": GENERIC_ERROR})


async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": GENERIC_ERROR})


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = sorted(
        {".".join(str(p) for p in err["loc"] if p not in ("body", "query", "header")) for err in exc.errors()}
    )
    return JSONResponse(
        status_code=400,
        content={"detail": f"Invalid request fields: {', '.join(f for f in fields if f) or 'body'}"},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(UpstreamError, _upstream_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
