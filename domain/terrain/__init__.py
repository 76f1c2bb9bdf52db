"""Terrain Bounded Context.

Responsible for physical geography and spatial calculations:
- Value Objects: GeoPoint
- Services: great_circle_distance (haversine), midpoint
- Ports: ElevationRepository, AsyncElevationRepository
"""
