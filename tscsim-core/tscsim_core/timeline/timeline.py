from __future__ import annotations

import bisect
from typing import Iterable, Iterator, List, Optional, Tuple

from ..errors import InvalidParameterError, InvalidTimelineError
from ..util.units import check_u64
from .types import HostSegment, MigrationLike, as_migration


class MigrationTimeline:
    """
    Immutable, pre-validated sequence of host segments.

    Segment `i` is active for segment[i].start_time <= t < segment[i+1].start_time,
    and the last segment stays active forever. Segment 0 starts at time 0.
    """
    __slots__ = ("_segments", "_starts")

    def __init__(self, segments: Iterable[HostSegment]) -> None:
        segs = tuple(segments)
        _validate(segs)
        self._segments: Tuple[HostSegment, ...] = segs
        self._starts: List[int] = [s.start_time for s in segs]

    @classmethod
    def build(cls, initial_host: HostSegment, migrations: Iterable[MigrationLike] = ()) -> "MigrationTimeline":
        segs = [initial_host]
        for m in migrations:
            m = as_migration(m)
            segs.append(HostSegment(m.time, m.host_tsc, m.host_frequency_hz))
        return cls(segs)

    def __len__(self) -> int:
        return len(self._segments)

    def __getitem__(self, i: int) -> HostSegment:
        return self._segments[i]

    def __iter__(self) -> Iterator[HostSegment]:
        return iter(self._segments)

    def __repr__(self) -> str:
        return f"MigrationTimeline({list(self._segments)!r})"

    @property
    def segments(self) -> Tuple[HostSegment, ...]:
        return self._segments

    def active_segment(self, t: int) -> int:
        """Index of the last segment starting at or before `t`; at a migration instant the new one wins."""
        if t < 0:
            raise InvalidParameterError(f"t={t} must be >= 0")
        return bisect.bisect_right(self._starts, t) - 1

    def segment_end(self, i: int) -> Optional[int]:
        """Start time of segment i+1, or None for the last segment."""
        return self._starts[i + 1] if i + 1 < len(self._starts) else None

    def migration_times(self) -> List[int]:
        return self._starts[1:]


def build_timeline(guest_boot_host_tsc: int, initial_host_frequency_hz: int,
                   migrations: Iterable[MigrationLike] = (), guest_boot_time: int = 0) -> MigrationTimeline:
    """Timeline for a guest that boots at time 0 on a host whose counter reads `guest_boot_host_tsc`."""
    if guest_boot_time != 0:
        raise InvalidTimelineError(f"guest must boot at time 0, got {guest_boot_time}")
    return MigrationTimeline.build(HostSegment(0, guest_boot_host_tsc, initial_host_frequency_hz), migrations)


def _validate(segs: Tuple[HostSegment, ...]) -> None:
    if not segs:
        raise InvalidTimelineError("timeline needs at least one host segment")
    if segs[0].start_time != 0:
        raise InvalidTimelineError(f"first segment must start at time 0, got {segs[0].start_time}")
    prev: Optional[HostSegment] = None
    for i, s in enumerate(segs):
        try:
            check_u64(s.start_time, f"segment {i} start_time")
            check_u64(s.start_host_tsc, f"segment {i} start_host_tsc")
            check_u64(s.host_frequency_hz, f"segment {i} host_frequency_hz")
        except InvalidParameterError as e:
            raise InvalidTimelineError(str(e)) from e
        if s.host_frequency_hz == 0:
            raise InvalidTimelineError(f"segment {i} has zero host frequency")
        if prev is not None and s.start_time <= prev.start_time:
            raise InvalidTimelineError(
                f"migration {i} at t={s.start_time} is not after the previous segment start t={prev.start_time}"
            )
        prev = s
