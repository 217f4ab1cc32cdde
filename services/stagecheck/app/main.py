"""FastAPI application entrypoint."""
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .api import plans
from .config import get_settings
from .domain.errors import InvalidPlanInput
from .observability.logs import configure_logging
from .observability.otel import configure_telemetry

_INVALID_INPUT_REMEDIATION = "Send stages with an integer id, a name, a dependsOn list and a completionCriteria list"


def _invalid_input(message: str, location: str | None) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            "error": InvalidPlanInput.kind,
            "message": message,
            "location": location,
            "remediation": _INVALID_INPUT_REMEDIATION,
        },
    )


def _format_location(loc) -> str | None:
    """Render a request-validation loc the way ingestion does: ``stages[0].name``."""
    location = ""
    for part in loc:
        if part == "body":
            continue
        if isinstance(part, int):
            location += f"[{part}]"
        else:
            location += f".{part}" if location else str(part)
    return location or None


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="Stagecheck",
        version="0.1.0",
        docs_url="/docs",
        redoc_url=None,
    )

    configure_logging(settings)
    configure_telemetry(settings)

    @app.exception_handler(InvalidPlanInput)
    async def _invalid_plan_handler(request: Request, exc: InvalidPlanInput):
        return _invalid_input(exc.message, exc.location)

    @app.exception_handler(RequestValidationError)
    async def _request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        location = _format_location(first.get("loc", ()))
        return _invalid_input(first.get("msg", "request body could not be read"), location)

    @app.exception_handler(Exception)
    async def _generic_exception_handler(request: Request, exc: Exception):  # pragma: no cover - fallback
        return JSONResponse(
            status_code=500,
            content={
                "error": "InternalServerError",
                "message": str(exc),
                "remediation": "Retry the request; report the plan that triggered the failure if it persists",
            },
        )

    app.include_router(plans.router)

    @app.get("/healthz")
    async def healthcheck():
        return {"status": "ok", "environment": settings.environment}

    return app


app = create_app()


__all__ = ["app", "create_app"]
