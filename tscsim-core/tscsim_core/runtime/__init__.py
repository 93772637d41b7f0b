from .calc import calculate_guest_tsc, tsc_offset
from .simulator import GuestClockState, Phase, SampleRow, Simulator, run_simulation
__all__ = ["GuestClockState", "Phase", "SampleRow", "Simulator", "calculate_guest_tsc", "run_simulation", "tsc_offset"]
