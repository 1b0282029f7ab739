"""alertsink - FastAPI application storing Alertmanager webhooks in Elasticsearch."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import httpx
import uvicorn
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST

from alertsink.config import get_settings
from alertsink.dispatcher import RemediationDispatcher, load_remediation_config
from alertsink.ingest import WebhookIngestionService
from alertsink.metrics import IngestMetrics
from alertsink.store import ElasticsearchStore

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler for startup/shutdown."""
    settings = get_settings()

    # Configure logging level
    logging.getLogger().setLevel(settings.log_level.upper())

    remediation_config = load_remediation_config(settings.remediation_config_path)
    logger.info(f"Loaded remediation config from {settings.remediation_config}")

    # Startup fails here if Elasticsearch stays unreachable
    store = await ElasticsearchStore.connect(settings)

    http_client = httpx.AsyncClient(timeout=settings.remediation_timeout)
    dispatcher = RemediationDispatcher(remediation_config, http_client)
    app.state.ingestion = WebhookIngestionService(store, dispatcher, IngestMetrics())
    app.state.dispatcher = dispatcher

    logger.info("alertsink started")

    try:
        yield
    finally:
        await http_client.aclose()
        await store.close()
        logger.info("alertsink stopped")


def _ingestion(request: Request) -> WebhookIngestionService:
    service = getattr(request.app.state, "ingestion", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Ingestion service not initialized",
        )
    return service


def create_app(with_lifespan: bool = True) -> FastAPI:
    app = FastAPI(
        title="alertsink",
        description="Stores Alertmanager webhooks in Elasticsearch and triggers remediation",
        version="0.1.0",
        lifespan=lifespan if with_lifespan else None,
    )

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    @app.get("/metrics")
    async def metrics(request: Request) -> Response:
        """Prometheus scrape endpoint."""
        return Response(
            content=_ingestion(request).metrics.render(),
            media_type=CONTENT_TYPE_LATEST,
        )

    @app.get("/routes")
    async def list_routes(request: Request) -> dict[str, list[dict[str, str]]]:
        """List configured remediation routes."""
        dispatcher = getattr(request.app.state, "dispatcher", None)
        if not dispatcher:
            return {"routes": []}
        return {"routes": dispatcher.routes()}

    @app.post("/")
    @app.post("/webhook")
    async def alertmanager_webhook(request: Request) -> JSONResponse:
        """Receive Alertmanager webhook."""
        return await _ingestion(request).handle(request)

    return app


app = create_app()


def run() -> None:
    """Run the application using uvicorn."""
    settings = get_settings()
    uvicorn.run(
        "alertsink.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=False,
    )


if __name__ == "__main__":
    run()
