"""Siting Bounded Context - Zone Resolution Service.

Turns a link activation into a FresnelZone:

1) Resolve the link's two live tower positions
2) Drop any zone already shown for the link and highlight it
3) Great-circle distance, first Fresnel radius, arithmetic midpoint
4) Ask the elevation port for the midpoint elevation (soft failure -> None)
5) Commit the zone only if the link still exists

Tower and link collections are never mutated here. The elevation lookup is the
only step that may suspend; step 5 guards against the link having been removed
while it was pending.
"""

from __future__ import annotations

import asyncio
import logging
import math

from domain.coverage.services import fresnel_radius
from domain.siting.entities import FresnelZone, Link
from domain.siting.network import NetworkStateManager
from domain.terrain.repositories import AsyncElevationRepository, ElevationRepository
from domain.terrain.services import great_circle_distance, midpoint
from domain.terrain.value_objects import GeoPoint

logger = logging.getLogger(__name__)

DEFAULT_ELEVATION_DEADLINE_S = 10.0


def link_distance_m(network: NetworkStateManager, link: Link) -> float:
    """Great-circle length of a link from its endpoints' current positions."""
    first, second = network.endpoints(link)
    return great_circle_distance(first.position, second.position)


def _usable_elevation(value: float | None, point: GeoPoint) -> float | None:
    if value is None:
        return None
    try:
        elevation = float(value)
    except (TypeError, ValueError):
        logger.warning(
            "Ignoring non-numeric elevation %r at (%.6f, %.6f)",
            value,
            point.latitude,
            point.longitude,
        )
        return None
    if not math.isfinite(elevation):
        logger.warning(
            "Ignoring non-finite elevation at (%.6f, %.6f)",
            point.latitude,
            point.longitude,
        )
        return None
    return elevation


class ZoneResolutionService:
    """Computes and commits Fresnel zones for links of one network.

    Parameters
    ----------
    network: NetworkStateManager
        The session's state owner; zones are committed through it.
    elevation: ElevationRepository | None
        Synchronous elevation port used by activate_link. None means no
        elevation source is configured (zones carry no elevation).
    async_elevation: AsyncElevationRepository | None
        Awaitable port used by activate_link_async. Falls back to running the
        synchronous port in a worker thread when not given.
    deadline_s: float
        Upper bound on an async elevation lookup; exceeding it counts as
        elevation unavailable.
    """

    def __init__(
        self,
        network: NetworkStateManager,
        elevation: ElevationRepository | None = None,
        async_elevation: AsyncElevationRepository | None = None,
        deadline_s: float = DEFAULT_ELEVATION_DEADLINE_S,
    ) -> None:
        if deadline_s <= 0:
            raise ValueError("deadline_s must be positive")
        self.network = network
        self.elevation = elevation
        self.async_elevation = async_elevation
        self.deadline_s = deadline_s

    # -----------------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------------
    def activate_link(self, link_id: int) -> FresnelZone | None:
        """Resolve and store the Fresnel zone of a link.

        Returns:
            The committed zone (elevation_m is None if the lookup failed), or
            None if the link vanished before the zone could be committed

        Raises:
            UnknownLinkError: If link_id is not a live link at activation time
        """
        link, distance, radius, center = self._prepare(link_id)
        elevation = self._lookup(center)
        return self._commit(link, distance, radius, center, elevation)

    async def activate_link_async(self, link_id: int) -> FresnelZone | None:
        """Awaitable activate_link; other mutations may run while it waits.

        Raises:
            UnknownLinkError: If link_id is not a live link at activation time
        """
        link, distance, radius, center = self._prepare(link_id)
        elevation = await self._lookup_async(center)
        return self._commit(link, distance, radius, center, elevation)

    # -----------------------------------------------------------------------
    # Steps
    # -----------------------------------------------------------------------
    def _prepare(self, link_id: int) -> tuple[Link, float, float, GeoPoint]:
        link = self.network.get_link(link_id)
        first, second = self.network.endpoints(link)

        self.network.discard_zone(link_id)
        self.network.highlight_link(link_id)

        distance = great_circle_distance(first.position, second.position)
        radius = fresnel_radius(link.frequency_ghz, distance)
        center = midpoint(first.position, second.position)

        logger.debug(
            "Link %d: distance %.1f m, Fresnel radius %.2f m at (%.6f, %.6f)",
            link_id,
            distance,
            radius,
            center.latitude,
            center.longitude,
        )
        return link, distance, radius, center

    def _lookup(self, point: GeoPoint) -> float | None:
        if self.elevation is None:
            return None
        try:
            value = self.elevation.get_elevation(point.latitude, point.longitude)
        except Exception as e:
            logger.warning(
                "Elevation lookup at (%.6f, %.6f) failed: %s",
                point.latitude,
                point.longitude,
                e,
            )
            return None
        return _usable_elevation(value, point)

    async def _lookup_async(self, point: GeoPoint) -> float | None:
        if self.async_elevation is not None:
            request = self.async_elevation.get_elevation_async(
                point.latitude, point.longitude
            )
        elif self.elevation is not None:
            request = asyncio.to_thread(
                self.elevation.get_elevation, point.latitude, point.longitude
            )
        else:
            return None

        try:
            value = await asyncio.wait_for(request, timeout=self.deadline_s)
        except asyncio.TimeoutError:
            logger.warning(
                "Elevation lookup at (%.6f, %.6f) exceeded %.1f s",
                point.latitude,
                point.longitude,
                self.deadline_s,
            )
            return None
        except Exception as e:
            logger.warning(
                "Elevation lookup at (%.6f, %.6f) failed: %s",
                point.latitude,
                point.longitude,
                e,
            )
            return None
        return _usable_elevation(value, point)

    def _commit(
        self,
        link: Link,
        distance: float,
        radius: float,
        center: GeoPoint,
        elevation: float | None,
    ) -> FresnelZone | None:
        zone = FresnelZone(
            link_id=link.id,
            midpoint=center,
            radius_m=radius,
            distance_m=distance,
            elevation_m=elevation,
        )
        if not self.network.commit_zone(zone):
            return None
        return zone
