"""Digital maturity results service entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from madurez_digital import __version__
from madurez_digital.adapters.narrative_client import HttpNarrativeClient
from madurez_digital.adapters.pdf_renderer import PdfReportRenderer
from madurez_digital.adapters.repositories import InMemorySurveyRepository
from madurez_digital.api.router import router
from madurez_digital.observability import configure_logging, get_logger
from madurez_digital.settings import Settings

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application startup and shutdown lifecycle.

    Opens the shared HTTP client for the narrative service on startup and
    closes it on shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        None
    """
    settings: Settings = app.state.settings
    configure_logging(settings)

    http_client = HttpNarrativeClient.build_http_client(settings)
    app.state.narrative_client = HttpNarrativeClient(
        http_client=http_client,
        endpoint_path=settings.report_endpoint_path,
    )
    logger.info(
        "Service started",
        service_name=settings.service_name,
        report_service_url=settings.report_service_url,
    )
    try:
        yield
    finally:
        await http_client.aclose()
        logger.info("Service stopped", service_name=settings.service_name)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Optional settings; read from the environment when omitted.

    Returns:
        Configured FastAPI application.
    """
    settings = settings or Settings()
    application = FastAPI(
        title=settings.service_name,
        version=__version__,
        lifespan=lifespan,
    )
    application.state.settings = settings
    application.state.repository = InMemorySurveyRepository()
    application.state.renderer = PdfReportRenderer()

    @application.get("/health", tags=["health"])
    async def health() -> dict[str, str]:
        return {"status": "ok", "service": settings.service_name}

    application.include_router(router, prefix="/api/v1")
    return application


app: FastAPI = create_app()
