"""End-to-end tests of the PlannerSession facade (UI boundary)."""

from __future__ import annotations

import asyncio

import pytest
from conftest import FailingElevation, FixedElevation

from application import PlannerSession
from domain.coverage.errors import InvalidFrequencyError
from domain.siting.entities import SelectionOutcome
from domain.siting.errors import FrequencyMismatchError


@pytest.fixture
def session() -> PlannerSession:
    return PlannerSession(elevation=FixedElevation(20.0))


def _baltimore_link(session: PlannerSession):
    a = session.add_tower(39.30, -76.60, "5")
    b = session.add_tower(39.31, -76.59, "5")
    session.select_or_link(a.id)
    return a, b, session.select_or_link(b.id).link


def test_baltimore_scenario(session):
    a, b, link = _baltimore_link(session)

    zone = session.activate_link(link.id)

    assert zone.distance_m == pytest.approx(1406.0, abs=10.0)
    assert zone.radius_m == pytest.approx(4.59, abs=0.02)
    assert zone.elevation_m == 20.0
    assert session.zone_views() == [zone]


def test_elevation_failure_scenario():
    session = PlannerSession(elevation=FailingElevation())
    _, _, link = _baltimore_link(session)
    zone = session.activate_link(link.id)
    assert zone is not None
    assert zone.elevation_m is None


@pytest.mark.parametrize("raw", ["", None, "abc", "-5", "0"])
def test_add_tower_rejects_bad_entry(session, raw):
    with pytest.raises(InvalidFrequencyError):
        session.add_tower(39.30, -76.60, raw)
    assert session.tower_views() == []


def test_tower_views_reflect_selection(session):
    a = session.add_tower(39.30, -76.60, "5.8")
    b = session.add_tower(39.31, -76.59, 5.8)
    session.select_or_link(a.id)

    views = session.tower_views()

    assert [v.id for v in views] == [a.id, b.id]
    assert views[0].selected and not views[1].selected
    assert views[0].frequency_ghz == 5.8
    assert views[0].label == f"Tower #{str(a.id)[-4:]}"
    assert session.pending_tower_id == a.id


def test_link_views_carry_distance_and_caption(session):
    _, _, link = _baltimore_link(session)
    session.activate_link(link.id)

    (view,) = session.link_views()

    assert view.id == link.id
    assert view.highlighted
    assert view.distance_km == pytest.approx(1.406, abs=0.01)
    assert view.caption == f"Link #{str(link.id)[-4:]} | 5 GHz | 1.41 km"


def test_edit_frequency_from_raw_text(session):
    a, _, link = _baltimore_link(session)
    session.activate_link(link.id)

    removed = session.edit_frequency(a.id, " 2.4 ")

    assert [r.id for r in removed] == [link.id]
    assert session.link_views() == []
    assert session.zone_views() == []
    assert session.highlighted_link_id is None


def test_edit_frequency_bad_text_keeps_state(session):
    a, _, link = _baltimore_link(session)
    with pytest.raises(InvalidFrequencyError):
        session.edit_frequency(a.id, "fast")
    assert [v.id for v in session.link_views()] == [link.id]


def test_mismatch_then_retry(session):
    a = session.add_tower(39.30, -76.60, "5")
    b = session.add_tower(39.31, -76.59, "2.4")
    session.select_or_link(a.id)
    with pytest.raises(FrequencyMismatchError):
        session.select_or_link(b.id)
    assert session.pending_tower_id is None
    assert session.select_or_link(b.id).outcome is SelectionOutcome.SELECTED


def test_new_tower_resets_zones(session):
    _, _, link = _baltimore_link(session)
    session.activate_link(link.id)
    session.add_tower(39.32, -76.61, "5")
    assert session.zone_views() == []
    assert len(session.link_views()) == 1


def test_remove_tower_and_link(session):
    a, b, link = _baltimore_link(session)
    c = session.add_tower(39.32, -76.61, "5")
    session.select_or_link(b.id)
    bc = session.select_or_link(c.id).link

    assert [r.id for r in session.remove_tower(a.id)] == [link.id]
    assert session.remove_link(bc.id) == bc
    assert session.link_views() == []
    assert [v.id for v in session.tower_views()] == [b.id, c.id]
    session.network.check_invariants()


def test_async_activation(session):
    _, _, link = _baltimore_link(session)
    zone = asyncio.run(session.activate_link_async(link.id))
    assert zone.elevation_m == 20.0


def test_from_settings_uses_configured_provider():
    from infrastructure.config import load_settings
    from infrastructure.terrain import OpenElevationClient

    session = PlannerSession.from_settings(
        load_settings(
            {
                "TOWER_PLANNER_ELEVATION_TIMEOUT_S": "2",
                "TOWER_PLANNER_ELEVATION_RETRIES": "1",
            }
        )
    )
    assert isinstance(session.zones.elevation, OpenElevationClient)
    assert session.zones.async_elevation is session.zones.elevation
    # two 2 s attempts plus one 0.5 s backoff sleep
    assert session.zones.deadline_s == pytest.approx(4.5)


def test_from_settings_without_provider():
    from infrastructure.config import load_settings

    settings = load_settings({"TOWER_PLANNER_ELEVATION_PROVIDER": "none"})
    session = PlannerSession.from_settings(settings)
    assert session.zones.elevation is None
    assert session.zones.async_elevation is None


def test_from_settings_deadline_includes_backoff_sleeps():
    from infrastructure.config import load_settings

    session = PlannerSession.from_settings(
        load_settings(
            {
                "TOWER_PLANNER_ELEVATION_TIMEOUT_S": "1",
                "TOWER_PLANNER_ELEVATION_RETRIES": "3",
                "TOWER_PLANNER_ELEVATION_BACKOFF_S": "0.25",
            }
        )
    )
    # 4 attempts of 1 s, sleeps of 0.25 + 0.5 + 1.0 s
    assert session.zones.deadline_s == pytest.approx(5.75)
