from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, NamedTuple, Optional, Sequence, Tuple, Union

from ..arith import ArithImpl, select
from ..errors import FixedPointOverflowError, InvalidParameterError, SimulationError, TscSimError
from ..fixed.format import DEFAULT_FORMAT, FixedPointFormat, resolve_format
from ..fixed.ratio import FixedPointRatio, ratio_for_format
from ..fixed.scale import scale
from ..timeline.timeline import MigrationTimeline
from ..timeline.types import HostSegment, MigrationLike
from ..util.units import U64_MAX, check_u64

_log = logging.getLogger("tscsim.core.simulator")


class SampleRow(NamedTuple):
    simulated_time: int
    guest_tsc: int
    host_tsc: int


@dataclass
class GuestClockState:
    guest_frequency_hz: int
    guest_tsc_at_segment_start: Dict[int, int] = field(default_factory=dict)


class Phase(enum.Enum):
    BOOTED = "booted"
    MIGRATED = "migrated"


class Simulator:
    """
    Walks a guest through the host segments of a MigrationTimeline.

    Each sample is computed from its segment's start, never from the previous
    sample:

        elapsed   = host_hz * (t - start_time)
        host_tsc  = start_host_tsc + elapsed
        guest_tsc = guest_tsc_at_segment_start[s] + scale(elapsed, ratio(s))

    On entering segment s the guest counter is frozen at the migration
    instant using segment s-1's ratio, and the ratio is recomputed for the
    new host frequency.
    """

    def __init__(
        self,
        timeline: MigrationTimeline,
        guest_frequency_hz: int,
        fmt: FixedPointFormat = DEFAULT_FORMAT,
        impl: Union[str, ArithImpl, None] = None,
        initial_guest_tsc: int = 0,
    ) -> None:
        if check_u64(guest_frequency_hz, "guest_frequency_hz") == 0:
            raise InvalidParameterError("guest_frequency_hz must be > 0")
        self.timeline = timeline
        self.fmt = fmt
        self.impl = select(impl)
        self.initial_guest_tsc = check_u64(initial_guest_tsc, "initial_guest_tsc")
        self.clock = GuestClockState(guest_frequency_hz)
        self._ratios: Dict[int, FixedPointRatio] = {}
        self.reset()

    def reset(self) -> None:
        self.clock.guest_tsc_at_segment_start = {0: self.initial_guest_tsc}
        self.current = 0
        self.phase = Phase.BOOTED

    def ratio(self, i: int) -> FixedPointRatio:
        r = self._ratios.get(i)
        if r is None:
            r = ratio_for_format(self.clock.guest_frequency_hz, self.timeline[i].host_frequency_hz,
                                 self.fmt, self.impl)
            self._ratios[i] = r
        return r

    def sample(self, i: int, t: int) -> SampleRow:
        """Row for time `t` as seen from segment `i`; segment `i` must already be entered."""
        frozen = self.clock.guest_tsc_at_segment_start.get(i)
        if frozen is None:
            raise InvalidParameterError(f"segment {i} has not been entered")
        seg = self.timeline[i]
        if t < seg.start_time:
            raise InvalidParameterError(f"t={t} is before segment {i} start t={seg.start_time}")
        elapsed = seg.host_frequency_hz * (t - seg.start_time)
        host_tsc = seg.start_host_tsc + elapsed
        if host_tsc > U64_MAX:
            raise FixedPointOverflowError(f"host tsc overflows 64 bits: {seg.start_host_tsc} + {elapsed}")
        guest_tsc = frozen + scale(elapsed, self.ratio(i), self.impl)
        if guest_tsc > U64_MAX:
            raise FixedPointOverflowError(f"guest tsc overflows 64 bits at t={t}")
        return SampleRow(t, guest_tsc, host_tsc)

    def _enter(self, i: int) -> SampleRow:
        """Migrate into segment i; returns the outgoing segment's row at the migration instant."""
        t = self.timeline[i].start_time
        outgoing = self.sample(i - 1, t)
        self.clock.guest_tsc_at_segment_start[i] = outgoing.guest_tsc
        self.ratio(i)
        self.current = i
        self.phase = Phase.MIGRATED
        _log.debug(f"migration {i} at t={t}: guest tsc frozen at {outgoing.guest_tsc}, "
                   f"host {self.timeline[i].host_frequency_hz} Hz")
        return outgoing

    def run(self, duration: int) -> Iterator[SampleRow]:
        """
        Yield one row per whole time unit in [0, duration], plus the outgoing
        segment's row just before the new segment's row at every migration
        instant inside the window.
        """
        for _, row in self.trace(duration):
            yield row

    def trace(self, duration: int) -> Iterator[Tuple[int, SampleRow]]:
        """Same rows as run(), each paired with the index of the segment that produced it."""
        check_u64(duration, "duration")
        self.reset()
        _log.debug(f"simulating {duration} units over {len(self.timeline)} segment(s), {self.fmt} format, "
                   f"{self.impl.id} arithmetic")
        for t in range(duration + 1):
            seg = self.current
            try:
                active = self.timeline.active_segment(t)
                while self.current < active:
                    seg = self.current + 1
                    outgoing = self._enter(seg)
                    if self.timeline[seg].start_time == t:
                        yield seg - 1, outgoing
                seg = active
                yield active, self.sample(active, t)
            except TscSimError as e:
                _log.debug(f"simulation halted in segment {seg} at t={t}: {e}")
                raise SimulationError(str(e), seg, t, e) from e


def run_simulation(
    duration: int,
    guest_frequency_hz: int,
    initial_host_segment: Union[HostSegment, Sequence[int]],
    migrations: Iterable[MigrationLike] = (),
    fractional_bits: int = DEFAULT_FORMAT.fractional_bits,
    integer_bits: Optional[int] = None,
    impl: Union[str, ArithImpl, None] = None,
    initial_guest_tsc: int = 0,
) -> List[SampleRow]:
    """
    Build a timeline from the boot host and its migrations and return every
    sampled row. Timeline, format and guest frequency errors are raised
    before the run. Ratios are computed as each segment is entered, so a ratio
    that cannot be represented (fractional_bits=64, or too few integer bits)
    surfaces as SimulationError tagged with that segment, like any other
    error during the run.
    """
    if not isinstance(initial_host_segment, HostSegment):
        initial_host_segment = HostSegment(*initial_host_segment)
    timeline = MigrationTimeline.build(initial_host_segment, migrations)
    fmt = resolve_format(fractional_bits, integer_bits)
    sim = Simulator(timeline, guest_frequency_hz, fmt, impl, initial_guest_tsc)
    return list(sim.run(duration))
