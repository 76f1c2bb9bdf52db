"""Coverage Bounded Context - Domain Services.

Pure functions for free-space RF geometry. No I/O.
"""

from __future__ import annotations

import math
from numbers import Real

from domain.coverage.errors import InvalidFrequencyError
from shared.constants import HZ_PER_GHZ, SPEED_OF_LIGHT_M_S


# ---------------------------------------------------------------------------
# Frequency Validation
# ---------------------------------------------------------------------------
def validate_frequency_ghz(value: float) -> float:
    """Return value as float if it is a positive finite frequency in GHz.

    Raises:
        InvalidFrequencyError: If value is not a real number, non-finite or <= 0
    """
    # bool is an int subclass; True GHz is never meant
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidFrequencyError(value, "must be a number")
    frequency = float(value)
    if not math.isfinite(frequency):
        raise InvalidFrequencyError(value, "must be finite")
    if frequency <= 0:
        raise InvalidFrequencyError(value, "must be positive")
    return frequency


def parse_frequency_input(raw: str | float | None) -> float:
    """Parse a user-entered frequency (e.g. " 5.8 ") into GHz.

    Empty, non-numeric, non-finite and non-positive entries are rejected.

    Raises:
        InvalidFrequencyError: If the entry cannot be used as a frequency
    """
    if raw is None:
        raise InvalidFrequencyError(raw, "no value entered")
    if isinstance(raw, str):
        text = raw.strip()
        if not text:
            raise InvalidFrequencyError(raw, "no value entered")
        try:
            value = float(text)
        except ValueError as e:
            raise InvalidFrequencyError(raw, "not a number") from e
        return validate_frequency_ghz(value)
    return validate_frequency_ghz(raw)


# ---------------------------------------------------------------------------
# Wavelength
# ---------------------------------------------------------------------------
def wavelength_m(frequency_ghz: float) -> float:
    """Free-space wavelength in meters: c / f."""
    frequency = validate_frequency_ghz(frequency_ghz)
    return SPEED_OF_LIGHT_M_S / (frequency * HZ_PER_GHZ)


# ---------------------------------------------------------------------------
# First Fresnel Zone
# ---------------------------------------------------------------------------
def fresnel_radius(frequency_ghz: float, total_distance_m: float) -> float:
    """First Fresnel-zone radius at the path midpoint.

    With d1 = d2 = total / 2:

        r = sqrt(lambda * d1 * d2 / (d1 + d2))

    Args:
        frequency_ghz: Operating frequency in GHz (positive, finite)
        total_distance_m: Path length in meters (non-negative, finite)

    Returns:
        Radius in meters. A zero-length path has radius 0.0 (limit of the
        formula; evaluating it directly would divide by zero).

    Raises:
        InvalidFrequencyError: If frequency is non-positive or non-finite
        ValueError: If total_distance_m is negative or non-finite

    Example:
        >>> round(fresnel_radius(5, 1000.0), 3)
        3.873
    """
    wavelength = wavelength_m(frequency_ghz)

    if not math.isfinite(total_distance_m) or total_distance_m < 0:
        raise ValueError(
            f"total_distance_m must be a non-negative finite number, got {total_distance_m}"
        )
    if total_distance_m == 0:
        return 0.0

    d1 = total_distance_m / 2
    d2 = total_distance_m / 2
    return float(math.sqrt(wavelength * d1 * d2 / (d1 + d2)))
