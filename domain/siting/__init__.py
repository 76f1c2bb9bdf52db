"""Siting Bounded Context.

Responsible for the tower/link network of a planning session:
- Entities: Tower, Link
- Value Objects: FresnelZone, SelectionResult
- Services: NetworkStateManager (state + invariants), ZoneResolutionService
"""
