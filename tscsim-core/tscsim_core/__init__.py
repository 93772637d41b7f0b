from __future__ import annotations
from .errors import (TscSimError, InvalidParameterError, DivisionByZeroError, FixedPointOverflowError,
                     InvalidTimelineError, ImplementationMismatchError, SimulationError)
from .fixed import AMD, INTEL, FixedPointFormat, FixedPointRatio, compute_ratio, scale
from .timeline import HostSegment, Migration, MigrationTimeline, build_timeline
from .runtime import GuestClockState, SampleRow, Simulator, calculate_guest_tsc, run_simulation, tsc_offset

__version__ = "0.1.0"

__all__ = ["TscSimError", "InvalidParameterError", "DivisionByZeroError", "FixedPointOverflowError",
           "InvalidTimelineError", "ImplementationMismatchError", "SimulationError",
           "AMD", "INTEL", "FixedPointFormat", "FixedPointRatio", "compute_ratio", "scale",
           "HostSegment", "Migration", "MigrationTimeline", "build_timeline",
           "GuestClockState", "SampleRow", "Simulator", "calculate_guest_tsc", "run_simulation", "tsc_offset"]
