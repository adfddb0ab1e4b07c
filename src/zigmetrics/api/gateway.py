"""Client for the deCONZ gateway REST config and websocket event stream."""

from typing import AsyncIterator, Optional, Tuple
import asyncio
import json
import logging

import aiohttp
from pydantic import ValidationError
from yarl import URL

from ..const import ENDPOINT_CONFIG
from ..exceptions import (
    GatewayAuthenticationError,
    GatewayConnectionError,
    GatewayDataError,
    TransportError,
)
from ..model.gateway import GatewayConfig

logger = logging.getLogger(__name__)


def websocket_url_for(base_url: URL, port: int) -> URL:
    """Build the event stream endpoint from the REST base URL and discovered port.

    Args:
        base_url: Gateway REST API URL
        port: Websocket port announced in the gateway config

    Returns:
        ws:// (or wss:// for https gateways) URL on the same host
    """
    scheme = "wss" if base_url.scheme == "https" else "ws"
    return base_url.with_scheme(scheme).with_port(port).with_path("/")


class GatewayClient:
    """Discovers the gateway and reads its websocket event stream."""

    def __init__(
        self,
        url: str,
        username: str,
        websession: Optional[aiohttp.ClientSession] = None,
        heartbeat: Optional[float] = 30.0,
    ) -> None:
        """Initialize the gateway client.

        Args:
            url: Gateway REST API URL, e.g. http://gateway:4501
            username: API key registered on the gateway
            websession: Optional aiohttp ClientSession. If not provided, one will be created.
            heartbeat: Websocket ping interval in seconds, None to disable
        """
        if not url.startswith("http"):
            url = f"http://{url}"
        self.base_url = URL(url)
        self._username = username
        self._websession = websession
        self._own_session = websession is None
        self._heartbeat = heartbeat

    async def _ensure_session(self) -> None:
        """Ensure a websession exists."""
        if self._websession is None:
            self._websession = aiohttp.ClientSession()
            self._own_session = True

    async def close_connection(self) -> None:
        """Close the connection and clean up resources."""
        if self._own_session and self._websession:
            await self._websession.close()
            self._websession = None

    async def __aenter__(self) -> "GatewayClient":
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close_connection()

    async def fetch_config(self) -> GatewayConfig:
        """Read the gateway config from the REST API.

        Raises:
            GatewayAuthenticationError: If the username is not authorized
            GatewayConnectionError: If the gateway cannot be reached
            GatewayDataError: If the answer is not a gateway config
        """
        await self._ensure_session()
        assert self._websession is not None
        url = self.base_url.with_path(ENDPOINT_CONFIG.format(username=self._username))
        logger.info(f"Connecting to API gateway at {self.base_url}")
        try:
            async with self._websession.get(url) as response:
                if response.status in (401, 403):
                    raise GatewayAuthenticationError("Authentication failed")
                response.raise_for_status()
                data = await response.json(content_type=None)
        except GatewayAuthenticationError:
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as err:
            raise GatewayConnectionError(f"Failed to connect to gateway: {err}") from err
        except json.JSONDecodeError as err:
            raise GatewayDataError(f"Failed to parse gateway config: {err}") from err

        logger.debug(f"Gateway config: {data}")

        # Unknown usernames get a list of errors rather than an HTTP error status
        if isinstance(data, list) and any(isinstance(item, dict) and "error" in item for item in data):
            raise GatewayAuthenticationError(f"Gateway rejected username: {data}")

        try:
            return GatewayConfig.model_validate(data)
        except ValidationError as err:
            raise GatewayDataError(f"Failed to parse gateway config: {err}") from err

    async def discover(self) -> Tuple[GatewayConfig, URL]:
        """Fetch the gateway config and derive the websocket endpoint from it."""
        gateway = await self.fetch_config()
        url = websocket_url_for(self.base_url, gateway.websocketport)
        logger.info(f"Discovered websocket port at {url}")
        return gateway, url

    async def frames(self, url: URL) -> AsyncIterator[str]:
        """Yield websocket frames until the connection fails.

        Raises:
            TransportError: When the connection cannot be opened, fails, or is
                closed by the gateway. The stream never ends without it.
        """
        await self._ensure_session()
        assert self._websession is not None
        logger.info(f"🔌 Start listening for websocket events at {url}")
        try:
            async with self._websession.ws_connect(url, heartbeat=self._heartbeat) as ws:
                async for msg in ws:
                    if msg.type == aiohttp.WSMsgType.TEXT:
                        yield msg.data
                    elif msg.type == aiohttp.WSMsgType.BINARY:
                        yield msg.data.decode("utf-8", errors="replace")
                    elif msg.type == aiohttp.WSMsgType.ERROR:
                        raise TransportError(f"Websocket error at {url}: {ws.exception()}")
        except (aiohttp.ClientError, asyncio.TimeoutError) as err:
            raise TransportError(f"Websocket connection to {url} failed: {err}") from err
        raise TransportError(f"Websocket at {url} was closed")
