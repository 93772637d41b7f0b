from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional

from ..errors import InvalidParameterError

MAX_WIDTH = 64


@dataclass(frozen=True)
class FixedPointFormat:
    """An unsigned fixed-point layout: `integer_bits`.`fractional_bits`, at most 64 bits wide."""
    integer_bits: int
    fractional_bits: int

    def __post_init__(self) -> None:
        validate_bits(self.integer_bits, self.fractional_bits)

    @property
    def width(self) -> int:
        return self.integer_bits + self.fractional_bits

    def __str__(self) -> str:
        return f"{self.integer_bits}.{self.fractional_bits}"


def validate_bits(integer_bits: int, fractional_bits: int) -> None:
    for name, v in (("integer_bits", integer_bits), ("fractional_bits", fractional_bits)):
        if isinstance(v, bool) or not isinstance(v, int):
            raise InvalidParameterError(f"{name} must be an integer, got {type(v).__name__}")
        if v < 0:
            raise InvalidParameterError(f"{name}={v} must be >= 0")
    if integer_bits + fractional_bits > MAX_WIDTH:
        raise InvalidParameterError(
            f"{integer_bits}.{fractional_bits} format is {integer_bits + fractional_bits} bits wide "
            f"(max {MAX_WIDTH})"
        )


def resolve_format(fractional_bits: int, integer_bits: Optional[int] = None) -> FixedPointFormat:
    """Build a format, giving the integer part whatever the fractional part leaves of 64 bits."""
    if integer_bits is None:
        if isinstance(fractional_bits, int) and 0 <= fractional_bits <= MAX_WIDTH:
            integer_bits = MAX_WIDTH - fractional_bits
        else:
            integer_bits = 0
    return FixedPointFormat(integer_bits, fractional_bits)


# Hardware multiplier layouts
AMD = FixedPointFormat(8, 32)
INTEL = FixedPointFormat(16, 48)
DEFAULT_FORMAT = AMD

ARCH_FORMATS: Dict[str, FixedPointFormat] = {"amd": AMD, "intel": INTEL}
