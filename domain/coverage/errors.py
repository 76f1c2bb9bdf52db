"""Coverage Bounded Context - Error Hierarchy."""

from __future__ import annotations

from typing import Any


class CoverageError(Exception):
    """Base error for RF coverage operations."""


class InvalidFrequencyError(CoverageError):
    """Frequency is non-positive, non-finite or could not be parsed.

    Attributes:
        value: The rejected input (raw string or number)
    """

    def __init__(self, value: Any, reason: str = "must be a positive finite number") -> None:
        self.value = value
        super().__init__(f"Invalid frequency {value!r}: {reason}")
