"""Runtime components of the exporter."""

from .registry import MetricRegistry, MetricSample
from .state import ExporterState, SensorCache
from .projector import EventProcessor, SensorProjector
from .stream import EventStream

__all__ = [
    "EventProcessor",
    "EventStream",
    "ExporterState",
    "MetricRegistry",
    "MetricSample",
    "SensorCache",
    "SensorProjector",
]
