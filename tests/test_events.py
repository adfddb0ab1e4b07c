import json

import pytest

from zigmetrics.exceptions import DecodeError
from zigmetrics.model.events import Action, decode_event

from helpers import config_frame, identity_frame, state_frame


def test_identity_event():
  e = decode_event(identity_frame("2", type_="ZHATemperature"))
  assert e.kind == "event"
  assert e.action == Action.CHANGED.value
  assert e.resource == "sensors"
  assert e.id == "2"
  assert e.attr.name == "Living room"
  assert e.attr.type == "ZHATemperature"
  assert e.is_change()
  assert e.state == {}
  assert e.config is None


def test_labels_with_and_without_type():
  attr = decode_event(identity_frame("2")).attr
  assert attr.labels(with_type=True)["type"] == "ZHATemperature"
  assert "type" not in attr.labels(with_type=False)
  assert attr.labels(with_type=False)["swversion"] == "20191205"


def test_missing_swversion_is_empty_label():
  raw = json.loads(identity_frame("2"))
  del raw["attr"]["swversion"]
  attr = decode_event(json.dumps(raw)).attr
  assert attr.swversion is None
  assert attr.labels()["swversion"] == ""


def test_unknown_fields_are_ignored():
  raw = json.loads(state_frame("2", temperature=2090))
  raw["brand_new_field"] = {"nested": [1, 2, 3]}
  e = decode_event(json.dumps(raw))
  assert e.state == {"temperature": 2090}


def test_partial_config():
  e = decode_event(config_frame("2", on=True))
  assert e.config.on is True
  assert e.config.battery is None


def test_null_sections_are_absent():
  raw = {"e": "changed", "id": "2", "r": "sensors", "t": "event", "state": None, "attr": {}, "config": None}
  e = decode_event(json.dumps(raw))
  assert e.state == {}
  assert e.attr is None
  assert e.config is None


def test_bytes_frame():
  e = decode_event(state_frame("4", pressure=1003).encode("utf-8"))
  assert e.state["pressure"] == 1003


@pytest.mark.parametrize("raw", [
  "",
  "not json",
  "{\"t\": \"event\"",
  "[]",
  "42",
  json.dumps({"e": "changed", "r": "sensors", "t": "event"}),
  json.dumps({"id": "2", "r": "sensors", "t": "event"}),
  json.dumps({"e": "changed", "id": 2, "r": "sensors", "t": "event"}),
  json.dumps({"e": "changed", "id": "2", "r": "sensors", "t": "event", "state": [1, 2]}),
  json.dumps({"e": "changed", "id": "2", "r": "sensors", "t": "event", "attr": {"name": "No model"}}),
])
def test_malformed_frames_raise_decode_error(raw):
  with pytest.raises(DecodeError):
    decode_event(raw)
