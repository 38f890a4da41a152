"""Human-readable formatting of flow rates and volumes.

Every formatter walks an ordered unit ladder: while the magnitude is at
least the ladder's base and a larger unit remains, divide and step up.
The smallest unit renders with no decimals, larger units with two.
"""

import math
from decimal import ROUND_HALF_UP, Context, Decimal
from typing import Any, Final

BPS_UNITS: Final[tuple[str, ...]] = ("bps", "Kbps", "Mbps", "Gbps", "Tbps", "Pbps")
PPS_UNITS: Final[tuple[str, ...]] = ("pps", "Kpps", "Mpps", "Gpps")
BYTE_UNITS: Final[tuple[str, ...]] = ("B", "KB", "MB", "GB", "TB", "PB")
PACKET_UNITS: Final[tuple[str, ...]] = ("pkts", "Kpkts", "Mpkts", "Gpkts")

SI_BASE: Final[int] = 1000
BINARY_BASE: Final[int] = 1024

MISSING_VALUE: Final[str] = "-"

# Integral floats at or above this magnitude render in exponent form
PLAIN_EXPONENT_THRESHOLD: Final[float] = 1e21

_FIXED_CONTEXT = Context(prec=400)


def to_fixed(value: float, digits: int) -> str:
    """Render a number with a fixed number of decimals.

    Ties round away from zero on the exact binary value, so 0.5 renders
    as "1" rather than the banker's "0".
    """
    if not math.isfinite(value):
        return str(value)
    quantum = Decimal(1).scaleb(-digits)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP, context=_FIXED_CONTEXT))


def scale_units(value: float, units: tuple[str, ...], base: int) -> str:
    """Scale a value through a unit ladder and render it.

    Args:
        value: Magnitude in the ladder's smallest unit.
        units: Ordered unit suffixes, smallest first.
        base: Step between consecutive units (1000 or 1024).

    Returns:
        Text such as "1.00 Kbps".
    """
    index = 0
    while value >= base and index < len(units) - 1:
        value /= base
        index += 1
    return f"{to_fixed(value, 0 if index == 0 else 2)} {units[index]}"


def fmt_bps(value: float | None) -> str:
    """Format a bit rate, e.g. 1500 -> "1.50 Kbps"."""
    if value is None:
        return MISSING_VALUE
    return scale_units(value, BPS_UNITS, SI_BASE)


def fmt_pps(value: float | None) -> str:
    """Format a packet rate, e.g. 2000000 -> "2.00 Mpps"."""
    if value is None:
        return MISSING_VALUE
    return scale_units(value, PPS_UNITS, SI_BASE)


def fmt_bytes(value: float | None) -> str:
    """Format a byte volume using binary multiples, e.g. 1024 -> "1.00 KB"."""
    if value is None:
        return MISSING_VALUE
    return scale_units(value, BYTE_UNITS, BINARY_BASE)


def fmt_packets(value: float | None) -> str:
    """Format a packet count, e.g. 12000 -> "12.00 Kpkts"."""
    if value is None:
        return MISSING_VALUE
    return scale_units(value, PACKET_UNITS, SI_BASE)


def _is_finite(value: Any) -> bool:
    if not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # int too large to convert to float
        return False


def format_plain(value: float) -> str:
    """Render a bare number, dropping the fraction of integral floats.

    Magnitudes from 1e21 up keep exponent notation, e.g. "1e+21".
    """
    if isinstance(value, float) and value.is_integer() and abs(value) < PLAIN_EXPONENT_THRESHOLD:
        return str(int(value))
    return str(value)


def format_value(value: float, units: str | None = None) -> str:
    """Default edge label formatter for DOT emission.

    Args:
        value: Aggregated link value. Non-finite values render as 0.
        units: Query units, case-insensitive ("l3bps", "bps", "pps",
            "bytes"). Anything else renders the plain number.

    Returns:
        Label text.
    """
    if not _is_finite(value):
        value = 0

    unit = (units or "").lower()
    if unit in ("l3bps", "bps"):
        return scale_units(value, BPS_UNITS, SI_BASE)
    if unit == "pps":
        return scale_units(value, PPS_UNITS, SI_BASE)
    if unit == "bytes":
        return scale_units(value, BYTE_UNITS, BINARY_BASE)

    return format_plain(value)
