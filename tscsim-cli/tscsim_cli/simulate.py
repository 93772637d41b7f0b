from __future__ import annotations
import json
import logging

from tscsim_core.conformance import is_monotonic
from tscsim_core.fixed.format import ARCH_FORMATS
from tscsim_core.runtime.simulator import Simulator
from tscsim_core.timeline import HostSegment, Migration, MigrationTimeline

from . import render

_log = logging.getLogger("tscsim.cli")


def handle(ns) -> int:
    timeline = MigrationTimeline.build(
        HostSegment(0, ns.initial_host_tsc, ns.initial_host_hz),
        [Migration.parse(h) for h in ns.hosts],
    )
    fmt = ARCH_FORMATS[ns.arch]
    sim = Simulator(timeline, ns.guest_hz, fmt, ns.math_impl)
    traced = list(sim.trace(ns.duration))
    rows = [row for _, row in traced]
    if not is_monotonic(rows):
        _log.warning("guest TSC went backwards during the run")

    if ns.json:
        print(json.dumps({
            "duration": ns.duration,
            "guest_hz": ns.guest_hz,
            "format": str(fmt),
            "impl": sim.impl.id,
            "hosts": [[h.start_time, h.start_host_tsc, h.host_frequency_hz] for h in timeline],
            "rows": [[r.simulated_time, r.guest_tsc, r.host_tsc, seg] for seg, r in traced],
        }, indent=2))
        return 0

    for line in render.describe_run(ns.duration, ns.guest_hz, timeline):
        print(line)
    print("")
    for line in render.table(traced, ns.hex):
        print(line)
    return 0
