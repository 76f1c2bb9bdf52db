"""Shared constants used by the domain, application and test packages.

This package provides a dependency-free location for constants that need to be
shared across packages without creating circular imports.
"""

from __future__ import annotations
