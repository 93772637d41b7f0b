from __future__ import annotations

import logging
from dataclasses import dataclass
from fractions import Fraction
from typing import Optional, Union

from ..arith import ArithImpl, select
from ..errors import DivisionByZeroError, FixedPointOverflowError, InvalidParameterError
from ..util.units import check_u64
from .format import DEFAULT_FORMAT, FixedPointFormat, resolve_format, validate_bits

_log = logging.getLogger("tscsim.core.fixed")

MAX_RATIO_FRAC_BITS = 63


@dataclass(frozen=True)
class FixedPointRatio:
    """
    guest_hz / host_hz scaled by 2**fractional_bits and truncated toward zero.

    `raw_value` occupies at most `integer_bits + fractional_bits` bits.
    """
    integer_bits: int
    fractional_bits: int
    raw_value: int

    def __post_init__(self) -> None:
        validate_bits(self.integer_bits, self.fractional_bits)
        check_u64(self.raw_value, "raw_value")
        if self.raw_value >> self.width:
            raise FixedPointOverflowError(
                f"raw_value={self.raw_value:#x} does not fit in {self.integer_bits}.{self.fractional_bits} format"
            )

    @property
    def width(self) -> int:
        return self.integer_bits + self.fractional_bits

    @property
    def format(self) -> FixedPointFormat:
        return FixedPointFormat(self.integer_bits, self.fractional_bits)

    def as_fraction(self) -> Fraction:
        return Fraction(self.raw_value, 1 << self.fractional_bits)

    def __float__(self) -> float:
        return float(self.as_fraction())


def compute_ratio(
    guest_hz: int,
    host_hz: int,
    fractional_bits: int = DEFAULT_FORMAT.fractional_bits,
    integer_bits: Optional[int] = None,
    impl: Union[str, ArithImpl, None] = None,
) -> FixedPointRatio:
    """
    Fixed-point multiplier for a guest running at `guest_hz` on a host
    running at `host_hz`, with the binary point at the last
    `fractional_bits` bits.

    Raises:
        InvalidParameterError: fractional_bits outside [0, 63], a bad
            integer/fractional split, or a frequency outside 64 bits.
        DivisionByZeroError: host_hz == 0.
        FixedPointOverflowError: the ratio does not fit in the format.
    """
    check_u64(guest_hz, "guest_hz")
    check_u64(host_hz, "host_hz")
    if isinstance(fractional_bits, int) and fractional_bits > MAX_RATIO_FRAC_BITS:
        raise InvalidParameterError(
            f"fractional_bits={fractional_bits} must be <= {MAX_RATIO_FRAC_BITS} to compute a ratio"
        )
    fmt = resolve_format(fractional_bits, integer_bits)
    if host_hz == 0:
        raise DivisionByZeroError("host_hz must be > 0")
    if guest_hz == 0:
        raise InvalidParameterError("guest_hz must be > 0")

    raw = select(impl).multiplier(guest_hz, host_hz, fmt.fractional_bits)
    if raw >> fmt.width:
        raise FixedPointOverflowError(
            f"frequency ratio too large: guest_hz={guest_hz}, host_hz={host_hz}, {fmt} format"
        )
    _log.debug(f"ratio {guest_hz}/{host_hz} in {fmt} format -> {raw:#x}")
    return FixedPointRatio(fmt.integer_bits, fmt.fractional_bits, raw)


def ratio_for_format(guest_hz: int, host_hz: int, fmt: FixedPointFormat = DEFAULT_FORMAT,
                     impl: Union[str, ArithImpl, None] = None) -> FixedPointRatio:
    return compute_ratio(guest_hz, host_hz, fmt.fractional_bits, fmt.integer_bits, impl)
