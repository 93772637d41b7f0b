"""
Bit-manipulation rendition of the multiply/shift primitive.

Every intermediate is held in a 64-bit lane and masked after each operation,
following the x86-64 sequence the hypervisor scaling code uses:

    multiplier:  rax = 1 << frac; rdx:rax = rax * guest_hz (mulq); divq host_hz
    mul_shift:   rdx:rax = tsc * multiplier (mulq)
                 rax >>= frac; rdx <<= 64 - frac; rax |= rdx

The 64x64 multiply is done on 32-bit limbs and the divide is a restoring
long division, so no intermediate ever needs more than 64 bits (plus a carry).
"""
from __future__ import annotations

from typing import Tuple

from ..errors import FixedPointOverflowError
from .api import ArithImpl

MASK32 = 0xFFFF_FFFF
MASK64 = 0xFFFF_FFFF_FFFF_FFFF


def mul64(a: int, b: int) -> Tuple[int, int]:
    """64x64 -> 128 multiply; returns (high, low) lanes."""
    a_lo, a_hi = a & MASK32, (a >> 32) & MASK32
    b_lo, b_hi = b & MASK32, (b >> 32) & MASK32
    p0 = a_lo * b_lo
    p1 = a_lo * b_hi
    p2 = a_hi * b_lo
    p3 = a_hi * b_hi
    # carries out of the middle column, at most 3 * 2**32
    mid = (p0 >> 32) + (p1 & MASK32) + (p2 & MASK32)
    lo = ((mid & MASK32) << 32) | (p0 & MASK32)
    hi = (p3 + (p1 >> 32) + (p2 >> 32) + (mid >> 32)) & MASK64
    return hi, lo


def shrd(hi: int, lo: int, n: int) -> int:
    """Low 64 bits of (hi:lo) >> n for n in [1, 63]."""
    return ((lo >> n) | ((hi << (64 - n)) & MASK64)) & MASK64


def div128(hi: int, lo: int, d: int) -> Tuple[int, int]:
    """(hi:lo) / d -> (quotient, remainder). Requires hi < d, like divq."""
    rem = hi
    q = 0
    for i in range(63, -1, -1):
        carry = rem >> 63
        rem = ((rem << 1) | ((lo >> i) & 1)) & MASK64
        q = (q << 1) & MASK64
        if carry or rem >= d:
            rem = (rem - d) & MASK64
            q |= 1
    return q, rem


class LaneArith(ArithImpl):
    id = "lanes"

    def multiplier(self, guest_hz: int, host_hz: int, fractional_bits: int) -> int:
        scaling_factor = (1 << fractional_bits) & MASK64
        hi, lo = mul64(scaling_factor, guest_hz)
        # divq raises #DE when the quotient would not fit in rax
        if hi >= host_hz:
            raise FixedPointOverflowError(
                f"frequency ratio too large: guest_hz={guest_hz}, host_hz={host_hz}, "
                f"{fractional_bits} fractional bits"
            )
        q, _ = div128(hi, lo, host_hz)
        return q

    def mul_shift(self, ticks: int, raw: int, fractional_bits: int) -> int:
        hi, lo = mul64(ticks, raw)
        if fractional_bits == 64:
            return hi
        if hi >> fractional_bits:
            raise FixedPointOverflowError(
                f"cannot scale ticks={ticks} by multiplier={raw} ({raw:#x}), "
                f"{fractional_bits} fractional bits"
            )
        if fractional_bits == 0:
            return lo
        return shrd(hi, lo, fractional_bits)
