"""FastAPI application factory.

Routers
-------
Both endpoint groups are mounted under ``/api``:

    /api/audit    — run a live audit against one URL
    /api/explain  — conversational explanation of an audit report

Errors
------
Any :class:`~site_auditor.errors.AuditorError` escaping a route is rendered
as ``{"error": "...", "details": ...}`` with the error's status code.
Request bodies that fail validation are answered with 400 in the same shape.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse

from site_auditor import __version__
from site_auditor.config import settings
from site_auditor.errors import AuditorError, InvalidTargetError

from site_auditor.api.routers import audit as audit_router
from site_auditor.api.routers import explain as explain_router

log = logging.getLogger(__name__)


async def _auditor_error_handler(request: Request, exc: AuditorError) -> JSONResponse:
    if exc.status_code >= 500:
        log.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def _validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    # Malformed bodies get the same {"error": ...} shape as every other 4xx.
    if request.url.path.endswith("/audit"):
        content = InvalidTargetError("Invalid URL").to_dict()
    else:
        content = {"error": "Invalid request body", "details": jsonable_encoder(exc.errors())}
    return JSONResponse(status_code=400, content=content)


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    logging.basicConfig(level=settings.log_level)

    app = FastAPI(
        title="Local Site Auditor API",
        description=(
            "Runs DNS, TLS, HTTP, header, SEO and accessibility checks against "
            "a URL and explains the resulting report through Gemini."
        ),
        version=__version__,
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AuditorError, _auditor_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)

    app.include_router(audit_router.router, prefix="/api", tags=["audit"])
    app.include_router(explain_router.router, prefix="/api", tags=["explain"])

    @app.get("/", response_class=PlainTextResponse)
    def index() -> str:
        return "Local Site Auditor server running. POST /api/audit with {\"url\": \"...\"}."

    return app


# Module-level instance used by uvicorn:
#   uvicorn site_auditor.api.app:app --reload
app = create_app()
