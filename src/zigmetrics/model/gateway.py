from typing import Optional

from pydantic import BaseModel, ConfigDict


class GatewayConfig(BaseModel):
  """Subset of the gateway config returned by GET /api/<username>/config."""
  model_config = ConfigDict(extra="ignore")

  apiversion: str
  bridgeid: str
  name: str
  websocketport: int
  devicename: Optional[str] = None
  modelid: Optional[str] = None
  swversion: Optional[str] = None
  ipaddress: Optional[str] = None
  mac: Optional[str] = None
  zigbeechannel: Optional[int] = None
