from __future__ import annotations


class ArithImpl:
    """
    Interface for the 128-bit multiply/shift primitive and the 128/64 divide.

    Implementations receive operands already validated as unsigned 64-bit
    values and bit widths already range-checked by the caller
    (tscsim_core.fixed). They must agree bit-for-bit on every input,
    including which inputs overflow.
    """
    id: str

    def multiplier(self, guest_hz: int, host_hz: int, fractional_bits: int) -> int:
        """
        floor((guest_hz << fractional_bits) / host_hz) computed through a
        128-bit intermediate. `fractional_bits` is in [0, 63] and `host_hz` > 0.
        Raises FixedPointOverflowError if the quotient does not fit in 64 bits.
        """
        raise NotImplementedError("ArithImpl must implement 'multiplier'.")

    def mul_shift(self, ticks: int, raw: int, fractional_bits: int) -> int:
        """
        floor(ticks * raw / 2**fractional_bits), truncating. `fractional_bits`
        is in [0, 64]. Raises FixedPointOverflowError if the shifted product
        does not fit in 64 bits.
        """
        raise NotImplementedError("ArithImpl must implement 'mul_shift'.")

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r}>"
