"""Gateway client and scrape endpoint."""

from .gateway import GatewayClient, websocket_url_for
from .rest import MetricsAPI

__all__ = [
    "GatewayClient",
    "MetricsAPI",
    "websocket_url_for",
]
