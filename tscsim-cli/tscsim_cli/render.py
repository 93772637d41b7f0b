"""Human-readable tables for simulation runs."""
from __future__ import annotations

from typing import List, Sequence, Tuple

from tscsim_core.runtime.simulator import SampleRow
from tscsim_core.timeline.timeline import MigrationTimeline


def describe_run(duration: int, guest_hz: int, timeline: MigrationTimeline) -> List[str]:
    out = [f" {'DURATION':<15} {duration} seconds", f" {'GUEST FREQUENCY':>15} {guest_hz} Hz", ""]
    for i, h in enumerate(timeline):
        out.append(f" {f'HOST {i}':<15}")
        out.append(f" {'START TIME':>15} {h.start_time} seconds")
        out.append(f" {'TSC':>15} {h.start_host_tsc}")
        out.append(f" {'FREQUENCY':>15} {h.host_frequency_hz} Hz")
        out.append("")
    return out


def segment_banner(i: int) -> str:
    desc = "GUEST_BOOT " if i == 0 else f"MIGRATION {i} "
    return f"=== {desc:=<77}"


def format_row(row: SampleRow, hex_values: bool = False) -> str:
    if hex_values:
        return f"{row.simulated_time:<10} {row.guest_tsc:#16x} {row.host_tsc:#16x}"
    return f"{row.simulated_time:<10} {row.guest_tsc:>16} {row.host_tsc:>16}"


def table(traced: Sequence[Tuple[int, SampleRow]], hex_values: bool = False) -> List[str]:
    """
    (segment, row) pairs from Simulator.trace, grouped under one banner per
    segment. The outgoing segment's row at a migration instant stays under the
    old banner, so the discontinuity shows as two lines with the same time.
    """
    out = [f"{'TIME':<10} {'GUEST_TSC':>16} {'HOST_TSC':>16}"]
    shown = -1
    for seg, row in traced:
        if seg != shown:
            out.append(segment_banner(seg))
            shown = seg
        out.append(format_row(row, hex_values))
    return out
