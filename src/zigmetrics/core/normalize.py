from ..const import SCALE_DIVISOR, SCALE_THRESHOLD


def normalize(raw: float) -> float:
  """
  Undo the hundredths scaling some vendors apply, e.g. 2134 meaning 21.34.
  Values within +/-100 are already in the right unit and pass through.
  """
  if abs(raw) > SCALE_THRESHOLD:
    return raw / SCALE_DIVISOR
  return raw
