from datetime import datetime, timezone
from typing import Optional


def to_epoch_ms(value: Optional[str]) -> Optional[int]:
  """
  Convert a gateway timestamp ("2021-11-26T19:33Z", "2021-11-26T19:33:31.106")
  to epoch milliseconds. Timestamps without an offset are UTC.
  Returns None for missing or unparseable values such as "none".
  """
  if not value or not isinstance(value, str):
    return None
  try:
    dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
  except ValueError:
    return None
  if dt.tzinfo is None:
    dt = dt.replace(tzinfo=timezone.utc)
  return round(dt.timestamp() * 1000)
