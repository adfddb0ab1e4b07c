"""Main exporter coordinator that ties all components together."""

from typing import Any, Dict, Optional
import logging

from .api import GatewayClient, MetricsAPI
from .model.config import ExporterConfig
from .runtime import EventProcessor, EventStream, ExporterState, MetricRegistry, SensorProjector
from .runtime.supervisor import StreamSupervisor

logger = logging.getLogger(__name__)


class ZigbeeExporter:
    """Wires the gateway stream, projection state and scrape endpoint."""

    def __init__(
        self,
        config: ExporterConfig,
        processor: Optional[EventProcessor] = None,
    ):
        """Initialize the exporter.

        Args:
            config: Exporter configuration
            processor: Event processor, defaults to the sensor projector

        Raises:
            RegistrationConflictError: If the default metrics cannot be registered
        """
        self.config = config

        # Shared state, read by the scrape endpoint and written by the stream
        self.registry = MetricRegistry(namespace=config.namespace)
        self.registry.register_defaults()
        self.state = ExporterState(registry=self.registry)

        self.processor = processor or SensorProjector(
            emit_timestamps=config.emit_timestamps,
            evict_on_delete=config.evict_on_delete,
        )
        self.stream = EventStream(self.state, self.processor)

        self.client = GatewayClient(
            config.url,
            config.username,
            heartbeat=config.heartbeat,
        )
        self.supervisor = StreamSupervisor(
            self.client,
            self.stream,
            reconnect_delay=config.reconnect_delay,
        )

        self.rest_api = MetricsAPI(self.state)

        logger.info("Exporter initialized")

    def start(self) -> None:
        """Start streaming gateway events."""
        logger.info("🚀 Starting exporter")
        self.supervisor.start()

    def stop(self) -> None:
        """Stop streaming gateway events."""
        self.supervisor.stop()
        logger.info("Exporter stopped")

    def is_running(self) -> bool:
        """Check if the event stream is running."""
        return self.supervisor.is_running()

    def get_api_app(self):
        """Get the FastAPI app for the scrape endpoint."""
        return self.rest_api.get_app()

    def get_stats(self) -> Dict[str, Any]:
        """Get exporter statistics.

        Returns:
            Dictionary of statistics
        """
        return {
            "running": self.supervisor.is_running(),
            "connected": self.supervisor.connected,
            "reconnects": self.supervisor.reconnects,
            "sensors": len(self.state.cache),
            "metrics": self.registry.names(),
            "frames_received": self.stream.frames_received,
            "frames_failed": self.stream.frames_failed,
        }
