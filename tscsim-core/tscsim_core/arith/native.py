from __future__ import annotations

from ..errors import FixedPointOverflowError
from ..util.units import U64_MAX
from .api import ArithImpl


class NativeArith(ArithImpl):
    """Python integer arithmetic with explicit 64-bit result checks."""
    id = "native"

    def multiplier(self, guest_hz: int, host_hz: int, fractional_bits: int) -> int:
        q = (guest_hz * (1 << fractional_bits)) // host_hz
        if q > U64_MAX:
            raise FixedPointOverflowError(
                f"frequency ratio too large: guest_hz={guest_hz}, host_hz={host_hz}, "
                f"{fractional_bits} fractional bits"
            )
        return q

    def mul_shift(self, ticks: int, raw: int, fractional_bits: int) -> int:
        out = (ticks * raw) >> fractional_bits
        if out > U64_MAX:
            raise FixedPointOverflowError(
                f"cannot scale ticks={ticks} by multiplier={raw} ({raw:#x}), "
                f"{fractional_bits} fractional bits"
            )
        return out
