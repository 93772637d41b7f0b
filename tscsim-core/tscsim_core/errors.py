"""
Canonical exception types for tscsim-core.

Every error derives from TscSimError and from the closest built-in exception,
so callers can catch either tscsim_core.errors.FixedPointOverflowError or a
plain OverflowError. Errors are raised where they are detected (ratio, scale,
timeline) and the simulator re-raises them as SimulationError tagged with the
offending segment and time.
"""

from __future__ import annotations

from typing import Optional


class TscSimError(Exception):
    """Base class for all tscsim-core errors."""


class InvalidParameterError(TscSimError, ValueError):
    """Bit width out of range, or a counter/frequency outside the unsigned 64-bit range."""


class DivisionByZeroError(TscSimError, ZeroDivisionError):
    """Zero host frequency used as a divisor."""


class FixedPointOverflowError(TscSimError, OverflowError):
    """Ratio or scaled product does not fit in the declared width."""


class InvalidTimelineError(TscSimError, ValueError):
    """Non-monotonic migration times or a zero host frequency in a segment."""


class ImplementationMismatchError(TscSimError, AssertionError):
    """Two multiply/shift implementations disagreed on the same input."""


class SimulationError(TscSimError):
    """A core error surfaced during a simulation run."""

    def __init__(self, message: str, segment: int, time: int, cause: Optional[BaseException] = None):
        super().__init__(f"segment {segment} at t={time}: {message}")
        self.segment = segment
        self.time = time
        self.cause = cause


__all__ = [
    "TscSimError",
    "InvalidParameterError",
    "DivisionByZeroError",
    "FixedPointOverflowError",
    "InvalidTimelineError",
    "ImplementationMismatchError",
    "SimulationError",
]
