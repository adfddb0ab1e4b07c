"""HTTP endpoint exposing the metric registry for Prometheus scrapes."""

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST
import logging

from ..const import HINT_RESPONSE
from ..runtime.state import ExporterState

logger = logging.getLogger(__name__)

ANY_METHOD = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


class MetricsAPI:
    """Scrape endpoint. Only ever reads the registry."""

    def __init__(self, state: ExporterState):
        """Initialize the API.

        Args:
            state: Shared exporter state
        """
        self.state = state
        self.app = FastAPI(
            title="zigmetrics",
            description="Prometheus exporter for Zigbee sensors behind a deCONZ gateway",
            version="0.1.0",
        )

        self._setup_routes()

    def _setup_routes(self) -> None:
        """Setup all routes."""

        @self.app.get("/metrics")
        def metrics():
            """Current metric snapshot in the text exposition format."""
            return Response(content=self.state.registry.snapshot(), media_type=CONTENT_TYPE_LATEST)

        @self.app.api_route("/{path:path}", methods=ANY_METHOD)
        def hint(path: str):
            """Point everything else at the metrics endpoint."""
            logger.debug(f"Unexpected request for /{path}")
            return PlainTextResponse(HINT_RESPONSE)

    def get_app(self) -> FastAPI:
        """Get the FastAPI application."""
        return self.app
