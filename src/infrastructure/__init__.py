"""Infrastructure Layer.

Adapters that implement domain ports against external systems (HTTP elevation
services, GeoTIFF rasters) and environment-driven configuration.
"""
