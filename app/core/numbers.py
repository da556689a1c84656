import math
import re

# Plain decimal or scientific literal, optional sign and surrounding whitespace
_NUMERIC_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?$")


def coerce_number(value) -> float | int | None:
    """
    Best-effort numeric reading of respondent input or stored bounds.
    Returns None for anything that is not a finite number (bools included).
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        s = value.strip()
        if not _NUMERIC_RE.match(s):
            return None
        x = float(s)
        return x if math.isfinite(x) else None
    return None


def format_number(x: float | int) -> str:
    # 100.0 -> "100", 2.5 -> "2.5"
    if isinstance(x, float) and x.is_integer():
        return str(int(x))
    return str(x)


def round_half_up(x: float, ndigits: int = 0) -> float:
    """Rounds .5 away from zero for positives, like Math.round in browsers."""
    factor = 10 ** ndigits
    return math.floor(x * factor + 0.5) / factor
