"""FastAPI application entry point."""

import logging
from typing import Annotated

from fastapi import Depends, FastAPI

from creatorkit.api.exceptions import install_exception_handlers
from creatorkit.api.tools import router as tools_router
from creatorkit.configs.config import get_app_config
from creatorkit.core.service.deps import build_tool_registry
from creatorkit.core.service.metrics import install_metrics
from creatorkit.infra.lifespan import inject
from creatorkit.infra.logging import setup_logging
from creatorkit.infra.telemetry import build_telemetry, init_telemetry

logger = logging.getLogger(__name__)


@inject
async def lifespan(
    app: FastAPI,
    _telemetry: Annotated[None, Depends(build_telemetry)],
    _tools: Annotated[None, Depends(build_tool_registry)],
):
    """Application lifespan; setup and teardown live in the dependencies."""
    logger.info("Starting creatorkit application...")
    yield
    logger.info("Shutting down creatorkit application...")


def get_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    config = get_app_config()
    setup_logging(config.logging)

    app = FastAPI(
        title="creatorkit",
        description="Form-driven content tools for creators, backed by a generative model",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Middleware and handlers must be in place before the first request.
    init_telemetry(app, config.tracing)
    install_metrics(app, config.tracing)
    install_exception_handlers(app)

    app.include_router(tools_router, prefix=config.api.prefix)

    @app.get("/healthz", include_in_schema=False)
    async def healthz() -> dict[str, str]:
        return {"status": "ok"}

    return app
