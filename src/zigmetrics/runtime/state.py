"""Process-wide state shared by the event stream and the scrape endpoint.

Provides thread-safe storage of the last known identity of each sensor.
"""
from dataclasses import dataclass, field
from threading import RLock
from typing import Dict, List, Optional

from ..exceptions import UnknownSensorError
from ..model.events import SensorAttributes
from .registry import MetricRegistry


class SensorCache:
    """Thread-safe map from sensor id to its last known identity."""

    def __init__(self):
        self._sensors: Dict[str, SensorAttributes] = {}
        self._lock = RLock()

    def put(self, sensor_id: str, identity: SensorAttributes) -> None:
        """Store an identity, replacing whatever was cached for the id.

        Args:
            sensor_id: The gateway resource id
            identity: The identity snapshot
        """
        with self._lock:
            self._sensors[sensor_id] = identity

    def get(self, sensor_id: str) -> Optional[SensorAttributes]:
        """Get the cached identity of a sensor.

        Args:
            sensor_id: The gateway resource id

        Returns:
            SensorAttributes or None if not seen yet
        """
        with self._lock:
            return self._sensors.get(sensor_id)

    def require(self, sensor_id: str) -> SensorAttributes:
        """Like get, but raise UnknownSensorError for unseen sensors."""
        identity = self.get(sensor_id)
        if identity is None:
            raise UnknownSensorError(sensor_id)
        return identity

    def remove(self, sensor_id: str) -> bool:
        """Remove a sensor's identity.

        Returns:
            True if removed, False if not found
        """
        with self._lock:
            return self._sensors.pop(sensor_id, None) is not None

    def ids(self) -> List[str]:
        with self._lock:
            return sorted(self._sensors)

    def __contains__(self, sensor_id: object) -> bool:
        with self._lock:
            return sensor_id in self._sensors

    def __len__(self) -> int:
        with self._lock:
            return len(self._sensors)


@dataclass
class ExporterState:
    """Identity cache and metric registry, constructed once at startup."""
    registry: MetricRegistry
    cache: SensorCache = field(default_factory=SensorCache)
