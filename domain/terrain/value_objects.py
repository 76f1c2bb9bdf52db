"""Terrain Bounded Context - Value Objects.

Immutable data structures representing geographic concepts.
All validation occurs at construction time via Pydantic.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class GeoPoint(BaseModel):
    """Geographic coordinate in WGS84 (Value Object).

    Represents a single point on the Earth's surface using latitude and longitude
    in decimal degrees.

    Invariants:
        GP-1: latitude in [-90, 90]
        GP-2: longitude in [-180, 180]

    Note on __eq__ and __hash__: Pydantic frozen models compare by value automatically.
    """

    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)

    model_config = ConfigDict(frozen=True)
