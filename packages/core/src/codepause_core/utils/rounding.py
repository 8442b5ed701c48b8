import math


def round_half_up(value: float) -> int:
    """Round .5 away from zero for non-negative values (2.5 -> 3), unlike round()."""
    return math.floor(value + 0.5)


def known(value: float | None, default: float = 0) -> float:
    """Return ``value`` when it is a finite number, else ``default``.

    NaN and infinities count as unknown, the same as a missing value.
    """
    if value is None or isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return value if math.isfinite(value) else default
