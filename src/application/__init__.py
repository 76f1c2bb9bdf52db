"""Application services for a link-planning session."""

from .planner import LinkSummary, PlannerSession, TowerSummary

__all__ = ["LinkSummary", "PlannerSession", "TowerSummary"]
