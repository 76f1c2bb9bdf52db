"""Siting Bounded Context - Entities and Value Objects.

Records are immutable (Pydantic frozen); the NetworkStateManager replaces them
rather than mutating in place. Links reference towers by id only.
"""

from __future__ import annotations

import math
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from domain.terrain.value_objects import GeoPoint


def short_id(entity_id: int) -> str:
    """Last four digits of an id, as shown on tower/link labels."""
    return str(entity_id)[-4:]


# ---------------------------------------------------------------------------
# Tower (Entity)
# ---------------------------------------------------------------------------
class Tower(BaseModel):
    """Radio tower at a fixed position operating on one frequency.

    Identity is `id`; only `frequency_ghz` changes over the tower's lifetime
    (via NetworkStateManager.edit_frequency, which stores a copy).
    """

    id: int = Field(ge=0)
    position: GeoPoint
    frequency_ghz: float = Field(gt=0, allow_inf_nan=False)

    model_config = ConfigDict(frozen=True)

    @property
    def label(self) -> str:
        return f"Tower #{short_id(self.id)}"


# ---------------------------------------------------------------------------
# Link (Entity)
# ---------------------------------------------------------------------------
class Link(BaseModel):
    """Point-to-point link between two distinct towers.

    Invariants:
        LK-1: from_tower_id != to_tower_id
        LK-2: frequency_ghz > 0 (snapshot of the shared endpoint frequency)

    The "both endpoints live and on equal frequencies" invariant spans the
    whole network and is enforced by NetworkStateManager, not here.
    """

    id: int = Field(ge=0)
    from_tower_id: int
    to_tower_id: int
    frequency_ghz: float = Field(gt=0, allow_inf_nan=False)

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_endpoints(self) -> "Link":
        if self.from_tower_id == self.to_tower_id:
            raise ValueError(
                f"Link endpoints must be distinct towers, got {self.from_tower_id} twice"
            )
        return self

    @property
    def tower_ids(self) -> tuple[int, int]:
        return (self.from_tower_id, self.to_tower_id)

    def touches(self, tower_id: int) -> bool:
        """True if tower_id is either endpoint."""
        return tower_id in self.tower_ids

    @property
    def label(self) -> str:
        return f"Link #{short_id(self.id)}"


# ---------------------------------------------------------------------------
# FresnelZone (Value Object)
# ---------------------------------------------------------------------------
class FresnelZone(BaseModel):
    """First Fresnel-zone record for one link, ready for display.

    Invariants:
        FZ-1: radius_m >= 0
        FZ-2: distance_m >= 0
        FZ-3: elevation_m is None or finite
    """

    link_id: int
    midpoint: GeoPoint
    radius_m: float = Field(ge=0)
    distance_m: float = Field(ge=0)
    elevation_m: float | None = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_elevation(self) -> "FresnelZone":
        if self.elevation_m is not None and not math.isfinite(self.elevation_m):
            raise ValueError("elevation_m must be finite or None")
        return self

    @property
    def has_elevation(self) -> bool:
        return self.elevation_m is not None


# ---------------------------------------------------------------------------
# Selection state machine results
# ---------------------------------------------------------------------------
class SelectionOutcome(str, Enum):
    """Terminal result of one select_or_link_tower call."""

    SELECTED = "selected"
    DESELECTED = "deselected"
    LINKED = "linked"


class SelectionResult(BaseModel):
    """What happened when a tower was clicked.

    `link` is set only for LINKED. A frequency mismatch is reported by raising
    FrequencyMismatchError instead of returning a result.
    """

    outcome: SelectionOutcome
    tower_id: int
    link: Link | None = None

    model_config = ConfigDict(frozen=True)
