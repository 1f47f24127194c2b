"""Codec for the rate strings game clients report, e.g. ``"$2.2M/s"``.

``format_value(parse_value(s))`` is lossy: magnitudes render with a single
fractional digit, so ``"$2.25M/s"`` comes back as ``"$2.2M/s"`` (or
``"$2.3M/s"``, depending on float rounding). Clients rely on this exact
rendering, so keep it.
"""

import math
import re
from decimal import Decimal

CURRENCY_SYMBOL = "$"
RATE_SUFFIX = "/s"

_VALUE_PATTERN = re.compile(r"^([\d.]+)([KMB])?$", re.IGNORECASE)

_MULTIPLIERS = {
    "": 1,
    "K": 1_000,
    "M": 1_000_000,
    "B": 1_000_000_000,
}

# Largest first; the first threshold the value reaches wins.
_SUFFIXES = (
    ("B", 1_000_000_000),
    ("M", 1_000_000),
    ("K", 1_000),
)


def parse_value(text: object) -> int:
    """Parse ``"$2.2M/s"`` style strings into an integer magnitude.

    Returns 0 for anything that does not look like a value; never raises.
    """
    if not isinstance(text, str) or not text:
        return 0

    cleaned = text
    if cleaned.startswith(CURRENCY_SYMBOL):
        cleaned = cleaned[len(CURRENCY_SYMBOL) :]
    if cleaned.endswith(RATE_SUFFIX):
        cleaned = cleaned[: -len(RATE_SUFFIX)]
    cleaned = cleaned.strip()

    match = _VALUE_PATTERN.match(cleaned)
    if not match:
        return 0

    try:
        number = float(match.group(1))
    except ValueError:
        # "1.2.3" and "." pass the pattern but are not numbers
        return 0

    suffix = (match.group(2) or "").upper()
    magnitude = number * _MULTIPLIERS[suffix]
    if not math.isfinite(magnitude):
        # Digit strings past the float range parse as inf
        return 0
    return math.floor(magnitude)


def format_value(value: object) -> str:
    """Render a magnitude back into ``"$2.5K/s"`` form."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return f"{CURRENCY_SYMBOL}0{RATE_SUFFIX}"
    if isinstance(value, float):
        if not math.isfinite(value):
            return f"{CURRENCY_SYMBOL}0{RATE_SUFFIX}"
        if value.is_integer():
            value = int(value)

    for suffix, threshold in _SUFFIXES:
        if value >= threshold:
            try:
                scaled = value / threshold
            except OverflowError:
                # int too large for a float; Decimal keeps every digit
                scaled = Decimal(value) / threshold
            return f"{CURRENCY_SYMBOL}{scaled:.1f}{suffix}{RATE_SUFFIX}"
    return f"{CURRENCY_SYMBOL}{value}{RATE_SUFFIX}"


def format_uptime(ms: int | float) -> str:
    """Render a duration in milliseconds as ``"2d 3h 4m"``, ``"5m 6s"`` etc."""
    seconds = int(ms // 1000)
    minutes = seconds // 60
    hours = minutes // 60
    days = hours // 24

    if days > 0:
        return f"{days}d {hours % 24}h {minutes % 60}m"
    if hours > 0:
        return f"{hours}h {minutes % 60}m {seconds % 60}s"
    if minutes > 0:
        return f"{minutes}m {seconds % 60}s"
    return f"{seconds}s"
