from __future__ import annotations
import json

from tscsim_core.fixed.ratio import compute_ratio
from tscsim_core.runtime.calc import calculate_guest_tsc, tsc_offset
from tscsim_core.util.units import hrtime, tsc_from_hrtime


def _emit(ns, key: str, value: int, **extra) -> int:
    if ns.json:
        print(json.dumps({key: value, **extra}))
    else:
        print(value)
    return 0


def handle(ns) -> int:
    c = ns.calc_cmd
    if c == "hrtime":
        return _emit(ns, "hrtime", hrtime(ns.tsc, ns.freq_hz))
    if c == "tsc":
        return _emit(ns, "tsc", tsc_from_hrtime(ns.hrtime, ns.freq_hz))
    if c == "guest-tsc":
        v = calculate_guest_tsc(ns.initial_host_tsc, ns.host_tsc, ns.host_hz, ns.initial_guest_tsc,
                                ns.guest_hz, ns.frac_size, ns.int_size, ns.math_impl)
        return _emit(ns, "guest_tsc", v)
    if c == "offset":
        v = tsc_offset(ns.initial_host_tsc, ns.initial_guest_tsc, ns.guest_hz, ns.host_hz,
                       ns.frac_size, ns.int_size, ns.math_impl)
        return _emit(ns, "offset", v)
    if c == "freq":
        r = compute_ratio(ns.guest_hz, ns.host_hz, ns.frac_size, ns.int_size, ns.math_impl)
        if ns.json:
            print(json.dumps({"multiplier": r.raw_value, "format": str(r.format), "ratio": float(r)}))
        else:
            print(f"{r.raw_value} ({r.raw_value:#x}) ~ {float(r):.12f} in {r.format} format")
        return 0
    raise ValueError(f"unknown calc command {c!r}")
