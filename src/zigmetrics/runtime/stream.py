"""Per-frame decode and projection pipeline."""

from typing import AsyncIterable, Iterable, Union
import logging

from ..exceptions import DecodeError
from ..model.events import decode_event
from .projector import EventProcessor
from .state import ExporterState

logger = logging.getLogger(__name__)

Frame = Union[str, bytes]


class EventStream:
    """Runs every frame through the decoder and an event processor.

    Failing to handle a single frame is alright and the stream just
    continues. Only errors raised by the frame source itself escape, so
    that the whole stream can be reestablished.
    """

    def __init__(self, state: ExporterState, processor: EventProcessor):
        """Initialize the stream.

        Args:
            state: Shared identity cache and metric registry
            processor: Handler for decoded events
        """
        self.state = state
        self.processor = processor
        self.frames_received = 0
        self.frames_failed = 0

    def handle_frame(self, frame: Frame) -> bool:
        """Decode and process one frame.

        Args:
            frame: Raw websocket payload

        Returns:
            True if the event was processed, False if it was dropped
        """
        self.frames_received += 1
        try:
            event = decode_event(frame)
        except DecodeError as e:
            self.frames_failed += 1
            logger.warning(f"Failed to decode, ignoring message: {e}")
            return False

        try:
            self.processor.process(event, self.state)
        except Exception as e:
            self.frames_failed += 1
            logger.warning(f"Failed to handle event {event!r}: {e}")
            return False
        return True

    def consume(self, frames: Iterable[Frame]) -> int:
        """Handle frames from a blocking source until it is exhausted.

        Returns:
            Number of frames processed successfully
        """
        return sum(1 for frame in frames if self.handle_frame(frame))

    async def consume_async(self, frames: AsyncIterable[Frame]) -> int:
        """Handle frames from an async source until it is exhausted.

        Returns:
            Number of frames processed successfully
        """
        handled = 0
        async for frame in frames:
            if self.handle_frame(frame):
                handled += 1
        return handled
