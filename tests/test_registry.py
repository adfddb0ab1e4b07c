import pytest

from zigmetrics.const import LABELS_READING, LABELS_SENSOR
from zigmetrics.exceptions import RegistrationConflictError, UnknownMetricError
from zigmetrics.runtime.registry import MetricRegistry, MetricSample

from helpers import LIVING_ROOM


def test_register_is_idempotent():
  registry = MetricRegistry(namespace="deconz")
  first = registry.register("presence", "Presence", LABELS_READING)
  second = registry.register("presence", "Presence again", LABELS_READING)
  assert first is second
  assert registry.names() == ["presence"]


def test_register_conflicting_labels():
  registry = MetricRegistry(namespace="deconz")
  registry.register("battery", "Battery", LABELS_SENSOR)
  with pytest.raises(RegistrationConflictError):
    registry.register("battery", "Battery", LABELS_READING)


def test_defaults_twice():
  registry = MetricRegistry(namespace="deconz")
  registry.register_defaults()
  registry.register_defaults()
  assert "temperature_celsius" in registry.names()
  assert registry.is_registered("gateway_info")


def test_observe_overwrites():
  registry = MetricRegistry(namespace="deconz")
  registry.register_defaults()
  registry.observe("battery", LIVING_ROOM, 100)
  registry.apply(MetricSample("battery", 87, dict(LIVING_ROOM)))
  assert registry.value("battery", LIVING_ROOM) == 87


def test_observe_unregistered():
  registry = MetricRegistry()
  with pytest.raises(UnknownMetricError):
    registry.observe("battery", LIVING_ROOM, 100)


def test_value_of_unset_series():
  registry = MetricRegistry(namespace="deconz")
  registry.register_defaults()
  assert registry.value("battery", LIVING_ROOM) is None


def test_snapshot_exposition():
  registry = MetricRegistry(namespace="deconz")
  registry.register_defaults()
  registry.observe("gateway_info", {"name": "Phoscon-GW", "apiversion": "1.16.0"}, 1)
  text = registry.snapshot()
  assert "# HELP deconz_gateway_info Gateway static info" in text
  assert "# TYPE deconz_gateway_info gauge" in text
  assert "\ndeconz_gateway_info{" in text
  assert 'name="Phoscon-GW"' in text
  assert registry.value("gateway_info", {"name": "Phoscon-GW", "apiversion": "1.16.0"}) == 1


def test_without_namespace():
  registry = MetricRegistry()
  registry.register_defaults()
  registry.observe("battery", LIVING_ROOM, 55)
  assert registry.full_name("battery") == "battery"
  assert registry.value("battery", LIVING_ROOM) == 55
  assert "\nbattery{" in registry.snapshot()
