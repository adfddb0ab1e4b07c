from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, field_validator

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ExporterConfig(BaseModel):
  url: str
  username: str
  host: str = "0.0.0.0"
  port: int = 8000
  namespace: str = "deconz"
  reconnect_delay: float = 5.0
  heartbeat: Optional[float] = 30.0
  emit_timestamps: bool = True
  evict_on_delete: bool = False
  log_level: str = "INFO"

  @field_validator("log_level", mode="before")
  @classmethod
  def _known_log_level(cls, value: Any) -> Any:
    if isinstance(value, str):
      value = value.upper()
      if value not in LOG_LEVELS:
        raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
    return value


def load_config(path: Optional[str] = None, **overrides: Any) -> ExporterConfig:
  """
  Build the exporter config from an optional YAML file. Keyword overrides
  (CLI options) win over file values; None overrides are ignored.
  """
  data: Dict[str, Any] = {}
  if path:
    data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
  data.update({k: v for k, v in overrides.items() if v is not None})
  return ExporterConfig(**data)
