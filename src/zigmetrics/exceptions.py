"""Exceptions raised by the exporter."""


class ZigmetricsError(Exception):
    """Base exception for the exporter."""


class DecodeError(ZigmetricsError):
    """A websocket frame could not be decoded into an event."""


class UnknownSensorError(ZigmetricsError):
    """An event refers to a sensor with no cached identity."""

    def __init__(self, sensor_id: str):
        super().__init__(f"No identity cached for sensor {sensor_id}")
        self.sensor_id = sensor_id


class RegistrationConflictError(ZigmetricsError):
    """A metric name was registered twice with different label names."""


class UnknownMetricError(ZigmetricsError):
    """A sample was observed for a metric that was never registered."""


class GatewayError(ZigmetricsError):
    """Base exception for gateway communication failures."""


class GatewayConnectionError(GatewayError):
    """The gateway REST API could not be reached."""


class GatewayAuthenticationError(GatewayError):
    """The gateway rejected the API username."""


class GatewayDataError(GatewayError):
    """The gateway answered with data that could not be parsed."""


class TransportError(GatewayError):
    """The websocket event stream failed or was closed."""
