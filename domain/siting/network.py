"""Siting Bounded Context - Network State Manager.

Single owner of the towers, links, pending selection and Fresnel zones of one
planning session. Construct one instance per session; there is no global state.

Every public operation validates its input before touching any collection, so
a failing call leaves the network exactly as it was (apart from the selection
transitions documented on select_or_link_tower). Cascading removals
(tower -> links -> zones) complete inside the call that triggers them.

Network invariants (checked by check_invariants):
    NW-1: Every link's endpoints resolve to live towers
    NW-2: Every link's endpoints have equal current frequency_ghz
    NW-3: Every zone belongs to a live link
    NW-4: The pending tower, if any, is live
    NW-5: The highlighted link, if any, is live
"""

from __future__ import annotations

import itertools
import logging

from domain.coverage.services import validate_frequency_ghz
from domain.siting.entities import (
    FresnelZone,
    Link,
    SelectionOutcome,
    SelectionResult,
    Tower,
)
from domain.siting.errors import (
    FrequencyMismatchError,
    UnknownLinkError,
    UnknownTowerError,
)
from domain.terrain.value_objects import GeoPoint

logger = logging.getLogger(__name__)


class NetworkStateManager:
    """Authoritative tower/link graph with the selection state machine.

    Ids for towers and links come from one counter, start at `first_id` and
    are never reused within the manager's lifetime.
    """

    def __init__(self, first_id: int = 1) -> None:
        self._ids = itertools.count(first_id)
        # dicts preserve insertion order, which is the display order
        self._towers: dict[int, Tower] = {}
        self._links: dict[int, Link] = {}
        self._zones: dict[int, FresnelZone] = {}
        self._pending_tower_id: int | None = None
        self._highlighted_link_id: int | None = None

    # -----------------------------------------------------------------------
    # Read access
    # -----------------------------------------------------------------------
    @property
    def towers(self) -> tuple[Tower, ...]:
        return tuple(self._towers.values())

    @property
    def links(self) -> tuple[Link, ...]:
        return tuple(self._links.values())

    @property
    def zones(self) -> tuple[FresnelZone, ...]:
        return tuple(self._zones.values())

    @property
    def pending_tower_id(self) -> int | None:
        return self._pending_tower_id

    @property
    def highlighted_link_id(self) -> int | None:
        return self._highlighted_link_id

    def get_tower(self, tower_id: int) -> Tower:
        try:
            return self._towers[tower_id]
        except KeyError:
            raise UnknownTowerError(tower_id) from None

    def get_link(self, link_id: int) -> Link:
        try:
            return self._links[link_id]
        except KeyError:
            raise UnknownLinkError(link_id) from None

    def get_zone(self, link_id: int) -> FresnelZone | None:
        return self._zones.get(link_id)

    def links_for_tower(self, tower_id: int) -> tuple[Link, ...]:
        """Links with tower_id as either endpoint."""
        return tuple(link for link in self._links.values() if link.touches(tower_id))

    def endpoints(self, link: Link) -> tuple[Tower, Tower]:
        """Current (from, to) tower records of a link."""
        return (self.get_tower(link.from_tower_id), self.get_tower(link.to_tower_id))

    # -----------------------------------------------------------------------
    # Towers
    # -----------------------------------------------------------------------
    def add_tower(self, position: GeoPoint, frequency_ghz: float) -> Tower:
        """Create a tower and reset selection and all displayed zones.

        Raises:
            InvalidFrequencyError: If frequency_ghz is non-positive or non-finite
        """
        frequency = validate_frequency_ghz(frequency_ghz)
        tower = Tower(id=next(self._ids), position=position, frequency_ghz=frequency)

        self._towers[tower.id] = tower
        self._pending_tower_id = None
        self._clear_zones()

        logger.debug(
            "Added tower %d at (%.6f, %.6f) on %g GHz",
            tower.id,
            position.latitude,
            position.longitude,
            frequency,
        )
        return tower

    def remove_tower(self, tower_id: int) -> list[Link]:
        """Remove a tower and every link touching it.

        Zones are cleared globally, matching the reset applied on add_tower.

        Returns:
            The links removed by the cascade

        Raises:
            UnknownTowerError: If no live tower has tower_id
        """
        self.get_tower(tower_id)

        removed = [self._drop_link(link.id) for link in self.links_for_tower(tower_id)]
        del self._towers[tower_id]
        if self._pending_tower_id == tower_id:
            self._pending_tower_id = None
        self._clear_zones()

        logger.info(
            "Removed tower %d (cascade removed %d link(s))", tower_id, len(removed)
        )
        return removed

    def edit_frequency(self, tower_id: int, new_frequency_ghz: float) -> list[Link]:
        """Change a tower's frequency and drop links whose endpoints now differ.

        Reconciliation reads live tower frequencies, not the link's stored
        snapshot. Links elsewhere in the network are untouched.

        Returns:
            The links removed because their endpoints no longer match

        Raises:
            InvalidFrequencyError: If new_frequency_ghz is non-positive or non-finite
            UnknownTowerError: If no live tower has tower_id
        """
        frequency = validate_frequency_ghz(new_frequency_ghz)
        tower = self.get_tower(tower_id)

        self._towers[tower_id] = tower.model_copy(update={"frequency_ghz": frequency})

        removed: list[Link] = []
        for link in self.links_for_tower(tower_id):
            first, second = self.endpoints(link)
            if first.frequency_ghz != second.frequency_ghz:
                removed.append(self._drop_link(link.id))

        logger.debug(
            "Tower %d frequency %g -> %g GHz", tower_id, tower.frequency_ghz, frequency
        )
        if removed:
            logger.info(
                "Frequency edit on tower %d removed link(s) %s",
                tower_id,
                [link.id for link in removed],
            )
        return removed

    # -----------------------------------------------------------------------
    # Selection state machine: Idle <-> OneSelected
    # -----------------------------------------------------------------------
    def select_or_link_tower(self, tower_id: int) -> SelectionResult:
        """Advance the two-state selection machine with a tower click.

        Idle -> OneSelected (SELECTED). From OneSelected every transition
        returns to Idle: same tower (DESELECTED), equal frequencies (LINKED,
        new link created), different frequencies (FrequencyMismatchError).

        Raises:
            UnknownTowerError: If no live tower has tower_id (selection unchanged)
            FrequencyMismatchError: If the pending tower's live frequency differs
        """
        tower = self.get_tower(tower_id)
        pending_id = self._pending_tower_id

        if pending_id is None:
            self._pending_tower_id = tower_id
            logger.debug("Tower %d selected", tower_id)
            return SelectionResult(outcome=SelectionOutcome.SELECTED, tower_id=tower_id)

        self._pending_tower_id = None

        if pending_id == tower_id:
            logger.debug("Tower %d deselected", tower_id)
            return SelectionResult(
                outcome=SelectionOutcome.DESELECTED, tower_id=tower_id
            )

        pending = self.get_tower(pending_id)
        if pending.frequency_ghz != tower.frequency_ghz:
            raise FrequencyMismatchError(
                pending.id, tower.id, pending.frequency_ghz, tower.frequency_ghz
            )

        link = Link(
            id=next(self._ids),
            from_tower_id=pending.id,
            to_tower_id=tower.id,
            frequency_ghz=tower.frequency_ghz,
        )
        self._links[link.id] = link
        logger.info(
            "Linked tower %d -> %d as link %d (%g GHz)",
            pending.id,
            tower.id,
            link.id,
            link.frequency_ghz,
        )
        return SelectionResult(
            outcome=SelectionOutcome.LINKED, tower_id=tower_id, link=link
        )

    # -----------------------------------------------------------------------
    # Links
    # -----------------------------------------------------------------------
    def remove_link(self, link_id: int) -> Link:
        """Remove a link and its zone.

        Raises:
            UnknownLinkError: If no live link has link_id
        """
        self.get_link(link_id)
        link = self._drop_link(link_id)
        logger.info("Removed link %d", link_id)
        return link

    # -----------------------------------------------------------------------
    # Zones (visualization state)
    # -----------------------------------------------------------------------
    def highlight_link(self, link_id: int) -> None:
        """Mark a live link as the one being inspected."""
        self.get_link(link_id)
        self._highlighted_link_id = link_id

    def commit_zone(self, zone: FresnelZone) -> bool:
        """Store a zone, replacing any previous one for the same link.

        Returns:
            False (and stores nothing) if the link no longer exists
        """
        if zone.link_id not in self._links:
            logger.warning(
                "Discarding Fresnel zone for removed link %d", zone.link_id
            )
            return False
        self._zones[zone.link_id] = zone
        return True

    def discard_zone(self, link_id: int) -> FresnelZone | None:
        """Remove and return the zone of a link, if any."""
        return self._zones.pop(link_id, None)

    # -----------------------------------------------------------------------
    # Invariants
    # -----------------------------------------------------------------------
    def check_invariants(self) -> None:
        """Raise AssertionError if any network invariant is violated.

        Raised explicitly, so the check also runs under `python -O`.
        """
        for link in self._links.values():
            if link.from_tower_id not in self._towers:
                raise AssertionError(f"link {link.id}: dangling from")
            if link.to_tower_id not in self._towers:
                raise AssertionError(f"link {link.id}: dangling to")
            first, second = self.endpoints(link)
            if first.frequency_ghz != second.frequency_ghz:
                raise AssertionError(f"link {link.id}: endpoint frequencies differ")
        for link_id in self._zones:
            if link_id not in self._links:
                raise AssertionError(f"zone for missing link {link_id}")
        if (
            self._pending_tower_id is not None
            and self._pending_tower_id not in self._towers
        ):
            raise AssertionError("pending tower missing")
        if (
            self._highlighted_link_id is not None
            and self._highlighted_link_id not in self._links
        ):
            raise AssertionError("highlighted link missing")

    # -----------------------------------------------------------------------
    # Internal helpers
    # -----------------------------------------------------------------------
    def _drop_link(self, link_id: int) -> Link:
        link = self._links.pop(link_id)
        self._zones.pop(link_id, None)
        if self._highlighted_link_id == link_id:
            self._highlighted_link_id = None
        return link

    def _clear_zones(self) -> None:
        if self._zones:
            logger.debug("Clearing %d Fresnel zone(s)", len(self._zones))
        self._zones.clear()
