"""Constants for the Zigbee metrics exporter."""

# Gateway REST endpoint, formatted with the API username
ENDPOINT_CONFIG = "/api/{username}/config"

# Event envelope values
MESSAGE_EVENT = "event"
RESOURCE_SENSORS = "sensors"

# Metric names (exposed with the registry namespace as prefix)
METRIC_GATEWAY_INFO = "gateway_info"
METRIC_BATTERY = "battery"
METRIC_TEMPERATURE = "temperature_celsius"
METRIC_PRESSURE = "pressure_hpa"
METRIC_HUMIDITY = "humidity_ratio"
METRIC_LAST_SEEN = "lastseen_milliseconds"
METRIC_LAST_UPDATED = "lastupdated_milliseconds"

# Label names
LABELS_GATEWAY = ("name", "apiversion")
LABELS_SENSOR = ("manufacturername", "modelid", "name", "swversion")
LABELS_READING = LABELS_SENSOR + ("type",)

# name -> (documentation, label names)
DEFAULT_METRICS = {
    METRIC_GATEWAY_INFO: ("Gateway static info", LABELS_GATEWAY),
    METRIC_BATTERY: ("Battery level in percentage", LABELS_SENSOR),
    METRIC_TEMPERATURE: ("Temperature in degree Celsius", LABELS_READING),
    METRIC_PRESSURE: ("Pressure in hPa", LABELS_READING),
    METRIC_HUMIDITY: ("Relative humidity in percentage", LABELS_READING),
    METRIC_LAST_SEEN: ("Time the sensor was last seen, in epoch milliseconds", LABELS_SENSOR),
    METRIC_LAST_UPDATED: ("Time of the last state update, in epoch milliseconds", LABELS_SENSOR),
}

# State key carrying the payload timestamp rather than a reading
STATE_LAST_UPDATED = "lastupdated"

# State keys with a canonical metric name
STATE_METRICS = {
    "temperature": METRIC_TEMPERATURE,
    "pressure": METRIC_PRESSURE,
    "humidity": METRIC_HUMIDITY,
}

# State keys affected by the hundredths scaling defect (Xiaomi Aqara)
SCALED_STATE_KEYS = frozenset({"temperature", "humidity"})

# Raw readings above this magnitude are reported in hundredths
SCALE_THRESHOLD = 100.0
SCALE_DIVISOR = 100.0

HINT_RESPONSE = "Did you mean GET /metrics?\n"
