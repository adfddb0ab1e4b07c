"""Websocket event envelope sent by the gateway.

https://dresden-elektronik.github.io/deconz-rest-doc/endpoints/websocket/#message-fields
"""
from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from ..const import MESSAGE_EVENT
from ..exceptions import DecodeError


class Action(str, Enum):
    """Event actions (the `e` field)."""
    ADDED = "added"
    CHANGED = "changed"
    DELETED = "deleted"
    SCENE_CALLED = "scene-called"


class SensorConfig(BaseModel):
    """Sensor config section.

    Present for ZHA{Humidity, Pressure, Switch, Temperature} sensors. Changed
    events may carry only the attributes that changed, so all are optional.
    """
    model_config = ConfigDict(extra="ignore")

    battery: Optional[float] = None
    offset: Optional[float] = None
    on: Optional[bool] = None
    reachable: Optional[bool] = None


class SensorAttributes(BaseModel):
    """Human readable identity of a sensor, carried in the `attr` section."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    manufacturername: str
    modelid: str
    name: str
    swversion: Optional[str] = None
    type: str
    uniqueid: Optional[str] = None
    lastseen: Optional[str] = None
    lastannounced: Optional[str] = None

    def labels(self, with_type: bool = True) -> Dict[str, str]:
        """Convert the identity into metric labels.

        Args:
            with_type: Include the device type label. Battery and timestamp
                gauges are not reading specific and leave it out.

        Returns:
            Label name to value mapping
        """
        labels = {
            "manufacturername": self.manufacturername,
            "modelid": self.modelid,
            "name": self.name,
            "swversion": self.swversion or "",
        }
        if with_type:
            labels["type"] = self.type
        return labels


class Event(BaseModel):
    """A single websocket notification."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    # "event" - the message holds an event
    kind: str = Field(alias="t")
    # One of added | changed | deleted | scene-called
    action: str = Field(alias="e")
    # One of groups | lights | scenes | sensors
    resource: str = Field(alias="r")
    id: str
    uniqueid: Optional[str] = None
    gid: Optional[str] = None
    scid: Optional[str] = None
    # New name of the resource, changed events only
    name: Optional[str] = None
    # Undocumented, but present in API responses
    attr: Optional[SensorAttributes] = None
    # All or only the changed config attributes, depending on websocketnotifyall
    config: Optional[SensorConfig] = None
    # All or only the changed state attributes, depending on websocketnotifyall
    state: Dict[str, Any] = Field(default_factory=dict)
    # Full resources, added events only
    group: Dict[str, Any] = Field(default_factory=dict)
    light: Dict[str, Any] = Field(default_factory=dict)
    sensor: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("attr", mode="before")
    @classmethod
    def _empty_attr_is_absent(cls, value: Any) -> Any:
        if isinstance(value, dict) and not value:
            return None
        return value

    @field_validator("state", "group", "light", "sensor", mode="before")
    @classmethod
    def _null_is_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    def is_change(self) -> bool:
        """Check whether this is a `changed` event notification."""
        return self.kind == MESSAGE_EVENT and self.action == Action.CHANGED.value


def decode_event(raw: Union[str, bytes]) -> Event:
    """Decode one websocket text frame.

    Args:
        raw: The frame payload, a single JSON object

    Returns:
        The decoded Event

    Raises:
        DecodeError: If the frame is not valid JSON, not an object, or is
            missing one of the t/e/r/id fields
    """
    try:
        return Event.model_validate_json(raw)
    except ValidationError as err:
        raise DecodeError(f"Invalid event frame: {err}") from err
