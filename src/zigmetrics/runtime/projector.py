"""Projection of decoded gateway events onto gauges."""

from abc import ABC, abstractmethod
from typing import Any, List, Optional
import logging
import re

from ..const import (
    DEFAULT_METRICS,
    LABELS_READING,
    MESSAGE_EVENT,
    METRIC_BATTERY,
    METRIC_LAST_SEEN,
    METRIC_LAST_UPDATED,
    RESOURCE_SENSORS,
    SCALED_STATE_KEYS,
    STATE_LAST_UPDATED,
    STATE_METRICS,
)
from ..core.normalize import normalize
from ..core.timestamps import to_epoch_ms
from ..exceptions import RegistrationConflictError, UnknownSensorError
from ..model.events import Action, Event
from .registry import MetricRegistry, MetricSample
from .state import ExporterState

logger = logging.getLogger(__name__)

_INVALID_NAME_CHARS = re.compile(r"[^a-zA-Z0-9_]")


class EventProcessor(ABC):
    """Consumes decoded events and updates the shared state."""

    @abstractmethod
    def process(self, event: Event, state: ExporterState) -> List[MetricSample]:
        """Handle one event.

        Args:
            event: The decoded event
            state: Shared identity cache and metric registry

        Returns:
            The samples written to the registry, possibly none

        Raises:
            Any exception marks the event as failed. The stream logs it and
            moves on to the next frame.
        """
        pass


def metric_name_for(key: str) -> str:
    """Turn a state attribute into a valid metric name."""
    name = _INVALID_NAME_CHARS.sub("_", key)
    if not name or name[0].isdigit():
        name = f"_{name}"
    return name


def _numeric(raw: Any) -> Optional[float]:
    if isinstance(raw, bool):
        return float(raw)
    if isinstance(raw, (int, float)):
        return float(raw)
    return None


class SensorProjector(EventProcessor):
    """Turns sensor events into gauge observations.

    Events with `attr` carry human friendly names and labels. They are stored
    for lookup when state and config updates arrive without them. Exactly one
    of identity, state or config is handled per event, in that order.
    """

    def __init__(self, emit_timestamps: bool = True, evict_on_delete: bool = False):
        """Initialize the projector.

        Args:
            emit_timestamps: Export lastseen/lastupdated as epoch millisecond gauges
            evict_on_delete: Drop the cached identity when a sensor is deleted
        """
        self.emit_timestamps = emit_timestamps
        self.evict_on_delete = evict_on_delete

    def process(self, event: Event, state: ExporterState) -> List[MetricSample]:
        logger.debug(f"Received event for {event.id}")

        # Lights, groups and scenes share the id space with sensors
        if event.resource != RESOURCE_SENSORS:
            logger.debug(f"Ignoring {event.resource} event {event.action} for {event.id}")
            return []

        if event.attr is not None and event.is_change():
            samples = self._update_identity(event, state)
        elif event.state and event.is_change():
            samples = self._observe_state(event, state)
        elif event.config is not None and event.is_change():
            samples = self._observe_config(event, state)
        elif (
            self.evict_on_delete
            and event.kind == MESSAGE_EVENT
            and event.action == Action.DELETED.value
        ):
            if state.cache.remove(event.id):
                logger.info(f"Sensor {event.id} deleted, dropped its identity")
            samples = []
        else:
            logger.debug(f"Ignoring unknown event {event!r}")
            samples = []

        for sample in samples:
            state.registry.apply(sample)
        return samples

    def _update_identity(self, event: Event, state: ExporterState) -> List[MetricSample]:
        logger.debug(f"Updating attrs for {event.id}")
        state.cache.put(event.id, event.attr)

        if not self.emit_timestamps:
            return []
        last_seen = to_epoch_ms(event.attr.lastseen)
        if last_seen is None:
            return []
        return [MetricSample(METRIC_LAST_SEEN, last_seen, event.attr.labels(with_type=False))]

    def _observe_state(self, event: Event, state: ExporterState) -> List[MetricSample]:
        try:
            sensor = state.cache.require(event.id)
        except UnknownSensorError as err:
            logger.warning(f"Ignoring state update {event.state}: {err}")
            return []

        samples = []
        for key, raw in event.state.items():
            if key == STATE_LAST_UPDATED:
                last_updated = to_epoch_ms(raw) if self.emit_timestamps else None
                if last_updated is not None:
                    samples.append(
                        MetricSample(METRIC_LAST_UPDATED, last_updated, sensor.labels(with_type=False))
                    )
                continue

            value = _numeric(raw)
            if value is None:
                logger.debug(f"Ignoring metric ID:{event.id}, {key}:{raw}")
                continue

            name = STATE_METRICS.get(key) or self._generic_metric(key, state.registry)
            if name is None:
                continue

            # Xiaomi Aqara sensors report 2134 instead of 21.34°C. Same for humidity.
            if key in SCALED_STATE_KEYS:
                value = normalize(value)

            logger.debug(f"Updating metric ID:{event.id}, {key}:{value}")
            samples.append(MetricSample(name, value, sensor.labels(with_type=True)))

        return samples

    def _generic_metric(self, key: str, registry: MetricRegistry) -> Optional[str]:
        name = metric_name_for(key)
        if name in DEFAULT_METRICS:
            logger.warning(f"Ignoring state attribute {key}: {name} is a built-in metric")
            return None
        try:
            registry.register(name, f"Sensor state attribute {key}", LABELS_READING)
        except RegistrationConflictError as err:
            logger.warning(f"Ignoring state attribute {key}: {err}")
            return None
        return name

    def _observe_config(self, event: Event, state: ExporterState) -> List[MetricSample]:
        try:
            sensor = state.cache.require(event.id)
        except UnknownSensorError as err:
            logger.warning(f"Ignoring config change {event.config}: {err}")
            return []

        battery = event.config.battery
        if battery is None:
            logger.debug(f"Config change without battery for {event.id}")
            return []

        logger.debug(f"Updating metric ID:{event.id}, battery:{battery}")
        return [MetricSample(METRIC_BATTERY, battery, sensor.labels(with_type=False))]
