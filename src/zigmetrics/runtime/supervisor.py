"""Supervisor keeping the gateway event stream alive.

Runs discovery and the websocket stream in a background thread with its
own asyncio loop, and rediscovers the gateway whenever the stream fails
since the websocket port can change across gateway restarts.
"""
from threading import Event, Thread
from typing import Optional
import asyncio
import logging

from ..api.gateway import GatewayClient
from ..const import METRIC_GATEWAY_INFO
from ..exceptions import (
    GatewayAuthenticationError,
    GatewayConnectionError,
    GatewayDataError,
    TransportError,
)
from .stream import EventStream

logger = logging.getLogger(__name__)


class StreamSupervisor:
    """Runs the event stream until stopped, reconnecting on transport failures."""

    def __init__(
        self,
        client: GatewayClient,
        stream: EventStream,
        reconnect_delay: float = 5.0,
    ):
        """Initialize the supervisor.

        Args:
            client: Gateway client used for discovery and the websocket
            stream: Frame pipeline fed by the websocket
            reconnect_delay: Seconds to wait before rediscovering after a failure
        """
        self.client = client
        self.stream = stream
        self.reconnect_delay = reconnect_delay
        self.connected = False
        self.reconnects = 0
        self._running = False
        self._stop_event = Event()
        self._thread: Optional[Thread] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._task: Optional[asyncio.Task] = None

    def start(self) -> None:
        """Start the supervisor in a background thread."""
        if self._running:
            logger.warning("Stream supervisor already running")
            return

        self._running = True
        self._stop_event.clear()
        self._thread = Thread(target=self._run, name="event-stream", daemon=True)
        self._thread.start()
        logger.info("Stream supervisor started")

    def stop(self, timeout: float = 5.0) -> None:
        """Stop the supervisor.

        Args:
            timeout: Maximum time to wait for clean shutdown
        """
        if not self._running:
            return

        logger.info("Stopping stream supervisor")
        self._running = False
        self._stop_event.set()

        loop, task = self._loop, self._task
        if loop and task and not loop.is_closed():
            loop.call_soon_threadsafe(task.cancel)

        if self._thread:
            self._thread.join(timeout=timeout)
            self._thread = None

        logger.info("Stream supervisor stopped")

    def is_running(self) -> bool:
        """Check if the supervisor is running."""
        return self._running

    def _run(self) -> None:
        """Thread entry point."""
        try:
            asyncio.run(self.supervise())
        except asyncio.CancelledError:
            pass
        except Exception:
            logger.exception("Stream supervisor crashed")
        finally:
            self._running = False

    async def supervise(self) -> None:
        """Discover and stream until stopped or the gateway rejects the username."""
        self._loop = asyncio.get_running_loop()
        self._task = asyncio.current_task()
        try:
            while not self._stop_event.is_set():
                try:
                    await self.run_once()
                except GatewayAuthenticationError as e:
                    logger.error(f"Gateway refused access, giving up: {e}")
                    return
                except (GatewayConnectionError, GatewayDataError, TransportError) as e:
                    logger.error(f"Event stream failed, reconnecting in {self.reconnect_delay}s: {e}")

                self.reconnects += 1
                await asyncio.sleep(self.reconnect_delay)
        finally:
            self._loop = None
            self._task = None
            await self.client.close_connection()

    async def run_once(self) -> None:
        """Run discovery, then stream frames until the transport fails."""
        gateway, url = await self.client.discover()
        self.stream.state.registry.observe(
            METRIC_GATEWAY_INFO,
            {"name": gateway.name, "apiversion": gateway.apiversion},
            1,
        )

        self.connected = True
        try:
            await self.stream.consume_async(self.client.frames(url))
        finally:
            self.connected = False
