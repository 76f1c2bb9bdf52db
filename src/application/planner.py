"""Planner session facade.

Boundary between the map/UI and the domain. The UI hands over raw events
(clicked coordinates, typed frequency text, entity ids) and reads back flat
summaries to draw; all state lives in one NetworkStateManager per session.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, ConfigDict

from domain.coverage.services import parse_frequency_input
from domain.siting.entities import FresnelZone, Link, SelectionResult, Tower
from domain.siting.network import NetworkStateManager
from domain.siting.zones import (
    DEFAULT_ELEVATION_DEADLINE_S,
    ZoneResolutionService,
    link_distance_m,
)
from domain.terrain.repositories import AsyncElevationRepository, ElevationRepository
from domain.terrain.value_objects import GeoPoint
from infrastructure.config import ElevationSettings
from infrastructure.terrain import build_elevation_source

logger = logging.getLogger(__name__)


class TowerSummary(BaseModel):
    """Tower as listed in the sidebar and drawn as a marker."""

    id: int
    label: str
    latitude: float
    longitude: float
    frequency_ghz: float
    selected: bool

    model_config = ConfigDict(frozen=True)


class LinkSummary(BaseModel):
    """Link as listed in the sidebar and drawn as a polyline."""

    id: int
    label: str
    from_tower_id: int
    to_tower_id: int
    frequency_ghz: float
    distance_m: float
    highlighted: bool

    model_config = ConfigDict(frozen=True)

    @property
    def distance_km(self) -> float:
        return self.distance_m / 1000

    @property
    def caption(self) -> str:
        """Tooltip text, e.g. 'Link #0042 | 5 GHz | 1.41 km'."""
        return f"{self.label} | {self.frequency_ghz:g} GHz | {self.distance_km:.2f} km"


class PlannerSession:
    """One planning session: network state plus zone resolution.

    Example:
        >>> session = PlannerSession()
        >>> a = session.add_tower(39.30, -76.60, "5")
        >>> b = session.add_tower(39.31, -76.59, "5")
        >>> session.select_or_link(a.id).outcome.value
        'selected'
        >>> session.select_or_link(b.id).outcome.value
        'linked'
    """

    def __init__(
        self,
        elevation: ElevationRepository | None = None,
        async_elevation: AsyncElevationRepository | None = None,
        deadline_s: float = DEFAULT_ELEVATION_DEADLINE_S,
    ) -> None:
        self.network = NetworkStateManager()
        self.zones = ZoneResolutionService(
            self.network,
            elevation=elevation,
            async_elevation=async_elevation,
            deadline_s=deadline_s,
        )

    @classmethod
    def from_settings(cls, settings: ElevationSettings) -> "PlannerSession":
        """Session wired to the configured elevation provider.

        The async deadline is the adapter's worst case: one timeout per
        attempt plus the backoff sleeps between attempts.
        """
        source = build_elevation_source(settings)
        async_source = source if hasattr(source, "get_elevation_async") else None
        attempts = settings.retries + 1
        backoff_total = settings.backoff_s * (2**settings.retries - 1)
        return cls(
            elevation=source,
            async_elevation=async_source,
            deadline_s=settings.timeout_s * attempts + backoff_total,
        )

    # -----------------------------------------------------------------------
    # Events from the UI
    # -----------------------------------------------------------------------
    def add_tower(
        self, latitude: float, longitude: float, raw_frequency: str | float | None
    ) -> Tower:
        """Map click with a frequency entry.

        Raises:
            InvalidFrequencyError: Empty, non-numeric or non-positive entry
        """
        frequency = parse_frequency_input(raw_frequency)
        position = GeoPoint(latitude=latitude, longitude=longitude)
        return self.network.add_tower(position, frequency)

    def select_or_link(self, tower_id: int) -> SelectionResult:
        """Tower click.

        Raises:
            FrequencyMismatchError: Shown to the user as a notice
        """
        return self.network.select_or_link_tower(tower_id)

    def edit_frequency(
        self, tower_id: int, raw_frequency: str | float | None
    ) -> list[Link]:
        """Frequency field change on a tower card; returns the links dropped."""
        frequency = parse_frequency_input(raw_frequency)
        return self.network.edit_frequency(tower_id, frequency)

    def remove_tower(self, tower_id: int) -> list[Link]:
        return self.network.remove_tower(tower_id)

    def remove_link(self, link_id: int) -> Link:
        return self.network.remove_link(link_id)

    def activate_link(self, link_id: int) -> FresnelZone | None:
        """Link click: compute and store its Fresnel zone."""
        return self.zones.activate_link(link_id)

    async def activate_link_async(self, link_id: int) -> FresnelZone | None:
        return await self.zones.activate_link_async(link_id)

    # -----------------------------------------------------------------------
    # Views for rendering
    # -----------------------------------------------------------------------
    @property
    def pending_tower_id(self) -> int | None:
        return self.network.pending_tower_id

    @property
    def highlighted_link_id(self) -> int | None:
        return self.network.highlighted_link_id

    def tower_views(self) -> list[TowerSummary]:
        pending = self.network.pending_tower_id
        return [
            TowerSummary(
                id=tower.id,
                label=tower.label,
                latitude=tower.position.latitude,
                longitude=tower.position.longitude,
                frequency_ghz=tower.frequency_ghz,
                selected=tower.id == pending,
            )
            for tower in self.network.towers
        ]

    def link_views(self) -> list[LinkSummary]:
        highlighted = self.network.highlighted_link_id
        return [
            LinkSummary(
                id=link.id,
                label=link.label,
                from_tower_id=link.from_tower_id,
                to_tower_id=link.to_tower_id,
                frequency_ghz=link.frequency_ghz,
                distance_m=link_distance_m(self.network, link),
                highlighted=link.id == highlighted,
            )
            for link in self.network.links
        ]

    def zone_views(self) -> list[FresnelZone]:
        return list(self.network.zones)
