"""Siting Bounded Context - Error Hierarchy.

All siting errors are recoverable: the operation that raises them leaves the
network state unchanged apart from documented selection transitions.
"""

from __future__ import annotations


class SitingError(Exception):
    """Base error for network state operations."""


class UnknownTowerError(SitingError, KeyError):
    """No live tower has the requested id."""

    def __init__(self, tower_id: int) -> None:
        self.tower_id = tower_id
        super().__init__(f"Unknown tower id {tower_id}")

    def __str__(self) -> str:
        return self.args[0]


class UnknownLinkError(SitingError, KeyError):
    """No live link has the requested id."""

    def __init__(self, link_id: int) -> None:
        self.link_id = link_id
        super().__init__(f"Unknown link id {link_id}")

    def __str__(self) -> str:
        return self.args[0]


class FrequencyMismatchError(SitingError):
    """Two towers with different frequencies cannot be linked.

    Attributes:
        first_tower_id: The tower that was pending selection
        second_tower_id: The tower clicked second
        first_frequency_ghz: Live frequency of the first tower
        second_frequency_ghz: Live frequency of the second tower
    """

    def __init__(
        self,
        first_tower_id: int,
        second_tower_id: int,
        first_frequency_ghz: float,
        second_frequency_ghz: float,
    ) -> None:
        self.first_tower_id = first_tower_id
        self.second_tower_id = second_tower_id
        self.first_frequency_ghz = first_frequency_ghz
        self.second_frequency_ghz = second_frequency_ghz
        super().__init__(
            f"Frequencies must match to connect towers: tower {first_tower_id} "
            f"is {first_frequency_ghz:g} GHz, tower {second_tower_id} is "
            f"{second_frequency_ghz:g} GHz"
        )
