from __future__ import annotations

from typing import Optional, Union

from ..arith import ArithImpl, select
from ..errors import FixedPointOverflowError, InvalidParameterError
from ..fixed.format import DEFAULT_FORMAT
from ..fixed.ratio import compute_ratio
from ..fixed.scale import scale
from ..util.units import I64_MAX, U64_MAX, check_u64


def calculate_guest_tsc(
    host_initial_tsc: int,
    host_current_tsc: int,
    host_frequency_hz: int,
    guest_initial_tsc: int,
    guest_frequency_hz: int,
    fractional_bits: int = DEFAULT_FORMAT.fractional_bits,
    integer_bits: Optional[int] = None,
    impl: Union[str, ArithImpl, None] = None,
) -> int:
    """
    Guest TSC once the host counter has moved from `host_initial_tsc` (boot or
    migration) to `host_current_tsc`:

        guest_initial_tsc + scale(host_current_tsc - host_initial_tsc, ratio(guest_hz, host_hz))
    """
    check_u64(host_initial_tsc, "host_initial_tsc")
    check_u64(host_current_tsc, "host_current_tsc")
    check_u64(guest_initial_tsc, "guest_initial_tsc")
    if host_current_tsc < host_initial_tsc:
        raise InvalidParameterError(
            f"host_current_tsc={host_current_tsc} is before host_initial_tsc={host_initial_tsc}"
        )
    arith = select(impl)
    ratio = compute_ratio(guest_frequency_hz, host_frequency_hz, fractional_bits, integer_bits, arith)
    guest = guest_initial_tsc + scale(host_current_tsc - host_initial_tsc, ratio, arith)
    if guest > U64_MAX:
        raise FixedPointOverflowError(
            f"guest tsc overflows 64 bits: guest_initial_tsc={guest_initial_tsc}, "
            f"scaled delta={guest - guest_initial_tsc}"
        )
    return guest


def tsc_offset(
    initial_host_tsc: int,
    initial_guest_tsc: int,
    guest_frequency_hz: int,
    host_frequency_hz: int,
    fractional_bits: int = DEFAULT_FORMAT.fractional_bits,
    integer_bits: Optional[int] = None,
    impl: Union[str, ArithImpl, None] = None,
) -> int:
    """
    Signed TSC offset a hypervisor programs so that the guest reads
    `initial_guest_tsc` when the host counter reads `initial_host_tsc`:

        offset = initial_guest_tsc - scale(initial_host_tsc, ratio)

    Raises FixedPointOverflowError when the offset cannot be held in a
    signed 64-bit register.
    """
    check_u64(initial_guest_tsc, "initial_guest_tsc")
    arith = select(impl)
    ratio = compute_ratio(guest_frequency_hz, host_frequency_hz, fractional_bits, integer_bits, arith)
    host_scaled = scale(initial_host_tsc, ratio, arith)
    offset = initial_guest_tsc - host_scaled
    if abs(offset) > I64_MAX:
        raise FixedPointOverflowError(
            f"offset between host_tsc_scaled={host_scaled} and initial_guest_tsc={initial_guest_tsc} "
            f"does not fit in a signed 64-bit value"
        )
    return offset
