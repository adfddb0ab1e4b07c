"""Metric registry for the exporter.

Wraps a prometheus_client CollectorRegistry with a runtime keyed table of
gauges, so metrics can be created lazily for state keys the gateway sends.
"""
from dataclasses import dataclass, field
from threading import RLock
from typing import Dict, List, Optional, Sequence, Tuple
import logging

from prometheus_client import CollectorRegistry, Gauge, generate_latest

from ..const import DEFAULT_METRICS
from ..exceptions import RegistrationConflictError, UnknownMetricError

logger = logging.getLogger(__name__)


@dataclass
class MetricSample:
    """A single gauge observation produced by the projector."""
    name: str
    value: float
    labels: Dict[str, str] = field(default_factory=dict)


class MetricRegistry:
    """Thread-safe table of named, labeled gauges."""

    def __init__(self, namespace: str = ""):
        """Initialize the registry.

        Args:
            namespace: Prefix prepended to every exposed metric name
        """
        self.namespace = namespace
        self._registry = CollectorRegistry()
        self._gauges: Dict[str, Gauge] = {}
        self._labelnames: Dict[str, Tuple[str, ...]] = {}
        self._lock = RLock()

    def register(self, name: str, documentation: str, labelnames: Sequence[str]) -> Gauge:
        """Register a gauge, or return the existing one with the same shape.

        Args:
            name: Metric name without namespace
            documentation: Help text
            labelnames: Label names of the gauge

        Returns:
            The gauge handle

        Raises:
            RegistrationConflictError: If the name is taken with other label names
        """
        labelnames = tuple(labelnames)
        with self._lock:
            existing = self._gauges.get(name)
            if existing is not None:
                if self._labelnames[name] != labelnames:
                    raise RegistrationConflictError(
                        f"Metric {name} already registered with labels "
                        f"{self._labelnames[name]}, not {labelnames}"
                    )
                return existing

            try:
                gauge = Gauge(
                    name,
                    documentation,
                    labelnames,
                    namespace=self.namespace,
                    registry=self._registry,
                )
            except ValueError as err:
                # Name clashes with a series of another metric, or is not a valid metric name
                raise RegistrationConflictError(f"Cannot register metric {name}: {err}") from err

            self._gauges[name] = gauge
            self._labelnames[name] = labelnames
            logger.debug(f"Registered metric {name} with labels {labelnames}")
            return gauge

    def register_defaults(self) -> None:
        """Register the gateway and sensor gauges known up front."""
        logger.info("Registering metrics")
        for name, (documentation, labelnames) in DEFAULT_METRICS.items():
            self.register(name, documentation, labelnames)

    def observe(self, name: str, labels: Dict[str, str], value: float) -> None:
        """Set the latest value of a gauge for one label combination.

        Args:
            name: Metric name without namespace
            labels: Label values, keyed by label name
            value: The new value, replacing any previous one
        """
        with self._lock:
            gauge = self._gauges.get(name)
        if gauge is None:
            raise UnknownMetricError(f"Metric {name} is not registered")
        gauge.labels(**labels).set(value)

    def apply(self, sample: MetricSample) -> None:
        """Observe a projected sample."""
        self.observe(sample.name, sample.labels, sample.value)

    def is_registered(self, name: str) -> bool:
        with self._lock:
            return name in self._gauges

    def names(self) -> List[str]:
        """Get all registered metric names, without namespace."""
        with self._lock:
            return sorted(self._gauges)

    def full_name(self, name: str) -> str:
        """Get the exposed name of a metric."""
        return f"{self.namespace}_{name}" if self.namespace else name

    def value(self, name: str, labels: Dict[str, str]) -> Optional[float]:
        """Get the current value of one series, or None if it was never set."""
        return self._registry.get_sample_value(self.full_name(name), labels)

    def snapshot(self) -> str:
        """Render all metrics in the Prometheus text exposition format."""
        return generate_latest(self._registry).decode("utf-8")
