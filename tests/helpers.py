import json
from pathlib import Path

from zigmetrics.runtime.registry import MetricRegistry
from zigmetrics.runtime.state import ExporterState

FIXTURES = Path(__file__).parent / "fixtures"

LIVING_ROOM = {
  "manufacturername": "LUMI",
  "modelid": "lumi.weather",
  "name": "Living room",
  "swversion": "20191205",
}


def make_state(namespace="deconz"):
  registry = MetricRegistry(namespace=namespace)
  registry.register_defaults()
  return ExporterState(registry=registry)


def identity_frame(sensor_id="2", type_="ZHATemperature", lastseen="2021-11-26T19:33Z", **attrs):
  attr = {**LIVING_ROOM, "id": sensor_id, "lastseen": lastseen, "type": type_}
  attr.update(attrs)
  return json.dumps({"attr": attr, "e": "changed", "id": sensor_id, "r": "sensors", "t": "event"})


def state_frame(sensor_id="2", **state):
  return json.dumps({"e": "changed", "id": sensor_id, "r": "sensors", "state": state, "t": "event"})


def config_frame(sensor_id="2", **config):
  return json.dumps({"config": config, "e": "changed", "id": sensor_id, "r": "sensors", "t": "event"})


def fixture_frames():
  lines = (FIXTURES / "events.jsonl").read_text(encoding="utf-8").splitlines()
  return [line for line in lines if line.strip()]
