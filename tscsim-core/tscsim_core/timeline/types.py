from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple, Union

from ..errors import InvalidParameterError
from ..util.units import parse_u64


@dataclass(frozen=True)
class HostSegment:
    start_time: int
    start_host_tsc: int
    host_frequency_hz: int


@dataclass(frozen=True)
class Migration:
    """The guest moves to a host whose counter reads `host_tsc` at `time`."""
    time: int
    host_tsc: int
    host_frequency_hz: int

    @classmethod
    def parse(cls, s: str) -> "Migration":
        """Parse "<t> <host_tsc> <host_hz>"; counters and frequency accept 0x-prefixed hex."""
        parts = s.replace(",", " ").split()
        if len(parts) != 3:
            raise InvalidParameterError(f"migration must be '<t> <host_tsc> <host_hz>', got {s!r}")
        return cls(parse_u64(parts[0]), parse_u64(parts[1]), parse_u64(parts[2]))


MigrationLike = Union[Migration, Tuple[int, int, int], Sequence[int]]


def as_migration(m: MigrationLike) -> Migration:
    if isinstance(m, Migration):
        return m
    if isinstance(m, str):
        return Migration.parse(m)
    t, tsc, hz = m
    return Migration(t, tsc, hz)
