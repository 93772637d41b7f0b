from __future__ import annotations

from typing import Union

from ..arith import ArithImpl, select
from ..util.units import check_u64
from .ratio import FixedPointRatio


def scale(ticks: int, ratio: FixedPointRatio, impl: Union[str, ArithImpl, None] = None) -> int:
    """
    Convert a host tick delta into a guest tick delta:
    floor(ticks * ratio.raw_value / 2**ratio.fractional_bits).

    The product is truncated, never rounded; a ratio that is not exactly
    representable loses a fraction of a tick on every call and the loss is
    part of the result. Raises FixedPointOverflowError when the scaled
    value does not fit in 64 bits.
    """
    check_u64(ticks, "ticks")
    return select(impl).mul_shift(ticks, ratio.raw_value, ratio.fractional_bits)
