"""Tower Planner Domain Layer.

This package contains the core business logic organized by bounded contexts:
- terrain: Geographic points, great-circle distance, elevation port
- coverage: RF propagation, wavelength, first Fresnel-zone radius
- siting: Towers, links, selection state machine, Fresnel zone resolution
"""

# Imports alphabetized per project style (isort)
from domain import coverage, siting, terrain

__all__ = ["coverage", "siting", "terrain"]
