"""Terrain Bounded Context - Domain Services.

Pure domain logic for link geometry on a spherical Earth.
NO I/O operations - elevation lookups are implemented by infrastructure
adapters under `src/infrastructure/terrain/` via domain ports.
"""

from __future__ import annotations

import math

from domain.terrain.value_objects import GeoPoint
from shared.constants import EARTH_RADIUS_M


# ---------------------------------------------------------------------------
# Great-Circle Distance
# ---------------------------------------------------------------------------
def great_circle_distance(start: GeoPoint, end: GeoPoint) -> float:
    """Calculate great-circle distance between two points in meters.

    Haversine formula over a sphere of radius EARTH_RADIUS_M. The haversine
    term is clamped to [0, 1] so floating-point overshoot near antipodal or
    coincident points never reaches sqrt/atan2 with an invalid argument.

    Args:
        start: First geographic point
        end: Second geographic point

    Returns:
        Distance in meters (0.0 for identical points, symmetric in its arguments)
    """
    if start == end:
        return 0.0

    phi1 = math.radians(start.latitude)
    phi2 = math.radians(end.latitude)
    d_phi = math.radians(end.latitude - start.latitude)
    d_lambda = math.radians(end.longitude - start.longitude)

    a = (
        math.sin(d_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    )
    a = min(1.0, max(0.0, a))

    return float(2 * EARTH_RADIUS_M * math.atan2(math.sqrt(a), math.sqrt(1 - a)))


# ---------------------------------------------------------------------------
# Midpoint
# ---------------------------------------------------------------------------
def midpoint(start: GeoPoint, end: GeoPoint) -> GeoPoint:
    """Arithmetic midpoint of two coordinates (mean latitude, mean longitude).

    Not the geodesic midpoint; adequate for the short links the planner handles.
    """
    return GeoPoint(
        latitude=(start.latitude + end.latitude) / 2,
        longitude=(start.longitude + end.longitude) / 2,
    )
