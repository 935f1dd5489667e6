"""Global exception handlers for pipeline errors."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from creatorkit.core.llm.invoker import GENERATION_FAILED_MESSAGE
from creatorkit.core.pipeline.exceptions import (
    GenerationUnavailable,
    UnknownTool,
    ValidationError,
)

GENERATION_RETRY_AFTER_SECONDS = "5"


def install_exception_handlers(app: FastAPI) -> None:
    """Register pipeline exception handlers on ``app``."""

    @app.exception_handler(ValidationError)
    async def handle_validation_error(
        request: Request, exc: ValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc), "code": "VALIDATION_ERROR", "field": exc.field},
        )

    @app.exception_handler(GenerationUnavailable)
    async def handle_generation_unavailable(
        request: Request, exc: GenerationUnavailable
    ) -> JSONResponse:
        return JSONResponse(
            status_code=503,
            content={
                "detail": GENERATION_FAILED_MESSAGE,
                "code": "GENERATION_UNAVAILABLE",
            },
            headers={"Retry-After": GENERATION_RETRY_AFTER_SECONDS},
        )

    @app.exception_handler(UnknownTool)
    async def handle_unknown_tool(request: Request, exc: UnknownTool) -> JSONResponse:
        return JSONResponse(
            status_code=404,
            content={"detail": str(exc), "code": "UNKNOWN_TOOL"},
        )
