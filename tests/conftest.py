"""Root pytest configuration for all tests.

Domain tests build towers and links directly through NetworkStateManager;
elevation collaborators are replaced by the in-memory fakes below so no test
touches the network.
"""

from __future__ import annotations

import pytest

from domain.siting.network import NetworkStateManager
from domain.terrain.errors import ElevationUnavailableError
from domain.terrain.value_objects import GeoPoint

# Scenario coordinates (Baltimore), ~1.4 km apart
BALTIMORE_A = GeoPoint(latitude=39.30, longitude=-76.60)
BALTIMORE_B = GeoPoint(latitude=39.31, longitude=-76.59)
BALTIMORE_C = GeoPoint(latitude=39.32, longitude=-76.61)


class FixedElevation:
    """ElevationRepository returning one value and recording every lookup."""

    def __init__(self, value: float | None) -> None:
        self.value = value
        self.calls: list[tuple[float, float]] = []

    def get_elevation(self, latitude: float, longitude: float) -> float | None:
        self.calls.append((latitude, longitude))
        return self.value


class FailingElevation:
    """ElevationRepository whose service is always down."""

    def get_elevation(self, latitude: float, longitude: float) -> float | None:
        raise ElevationUnavailableError(latitude, longitude, "service down")


@pytest.fixture
def network() -> NetworkStateManager:
    return NetworkStateManager()


@pytest.fixture
def linked_network(network: NetworkStateManager) -> NetworkStateManager:
    """Towers A, B (5 GHz, linked) and C (5 GHz, unlinked)."""
    a = network.add_tower(BALTIMORE_A, 5.0)
    b = network.add_tower(BALTIMORE_B, 5.0)
    network.add_tower(BALTIMORE_C, 5.0)
    network.select_or_link_tower(a.id)
    network.select_or_link_tower(b.id)
    return network
