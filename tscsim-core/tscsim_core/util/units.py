from __future__ import annotations

from ..errors import DivisionByZeroError, FixedPointOverflowError, InvalidParameterError

U64_MAX = (1 << 64) - 1
I64_MAX = (1 << 63) - 1
NS_PER_SEC = 1_000_000_000


def check_u64(value: int, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidParameterError(f"{name} must be an integer, got {type(value).__name__}")
    if value < 0 or value > U64_MAX:
        raise InvalidParameterError(f"{name}={value} is outside the unsigned 64-bit range")
    return value


def parse_u64(s: str) -> int:
    """Parse a decimal or 0x-prefixed hexadecimal unsigned 64-bit literal."""
    s = s.strip().lower().replace("_", "")
    try:
        v = int(s, 16) if s.startswith("0x") else int(s, 10)
    except ValueError:
        raise InvalidParameterError(f"Bad integer literal: {s!r}") from None
    return check_u64(v, "value")


def tsc_incr(tsc: int, freq_hz: int) -> int:
    """Counter value one second after `tsc` for a counter running at `freq_hz`."""
    out = check_u64(tsc, "tsc") + check_u64(freq_hz, "freq_hz")
    if out > U64_MAX:
        raise FixedPointOverflowError(f"tsc={tsc} + freq_hz={freq_hz} exceeds 64 bits")
    return out


def hrtime(tsc: int, freq_hz: int) -> int:
    """Whole seconds elapsed for `tsc` ticks at `freq_hz`, expressed in nanoseconds."""
    check_u64(tsc, "tsc")
    if check_u64(freq_hz, "freq_hz") == 0:
        raise DivisionByZeroError("freq_hz must be > 0")
    out = (tsc // freq_hz) * NS_PER_SEC
    if out > U64_MAX:
        raise FixedPointOverflowError(f"hrtime for tsc={tsc} at {freq_hz} Hz exceeds 64 bits")
    return out


def tsc_from_hrtime(hrtime_ns: int, freq_hz: int) -> int:
    """Counter value after the whole seconds contained in `hrtime_ns`."""
    check_u64(hrtime_ns, "hrtime")
    check_u64(freq_hz, "freq_hz")
    out = (hrtime_ns // NS_PER_SEC) * freq_hz
    if out > U64_MAX:
        raise FixedPointOverflowError(f"tsc for hrtime={hrtime_ns} at {freq_hz} Hz exceeds 64 bits")
    return out
