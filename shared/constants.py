"""Physical constants for link geometry and RF calculations.

Single source of truth for values used by both the domain services and the
tests that cross-check them. Values follow the spherical-earth, free-space
approximation used throughout the planner.
"""

from __future__ import annotations

# Mean Earth radius for the haversine great-circle formula (spherical model)
EARTH_RADIUS_M: float = 6_371_000.0

# Propagation speed used for wavelength (free space, rounded)
SPEED_OF_LIGHT_M_S: float = 3.0e8

# GHz -> Hz
HZ_PER_GHZ: float = 1.0e9
