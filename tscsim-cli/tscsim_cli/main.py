from __future__ import annotations
import argparse
import logging
import sys

from tscsim_core.util.units import parse_u64

_log = logging.getLogger("tscsim.cli")

IMPL_CHOICES = ["native", "lanes", "all", "rust", "asm"]


def u64(s: str) -> int:
    """argparse type for decimal or 0x-prefixed unsigned 64-bit values."""
    try:
        return parse_u64(s)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _add_impl(p: argparse.ArgumentParser) -> None:
    p.add_argument("-m", "--math-impl", choices=IMPL_CHOICES, default=None,
                   help="Multiply/shift implementation (default: $TSCSIM_MATH or native)")


def _add_format(p: argparse.ArgumentParser) -> None:
    # AMD defaults
    p.add_argument("--int-size", type=int, default=8, help="Number of int bits in multiplier")
    p.add_argument("--frac-size", type=int, default=32, help="Number of frac bits in multiplier")


def make_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="tscsim", description="TSC Simulator")
    p.add_argument("--json", action="store_true", help="Emit JSON instead of tables")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    # calc
    pc = sub.add_parser("calc", help="Calculate a specific value")
    csub = pc.add_subparsers(dest="calc_cmd", required=True)

    ph = csub.add_parser("hrtime", help="Given a TSC value and a frequency, compute hrtime (nanoseconds)")
    ph.add_argument("-t", "--tsc", type=u64, required=True, help="TSC value")
    ph.add_argument("-f", "--freq-hz", type=u64, default=1_000_000_000, help="Frequency (Hz)")

    pt = csub.add_parser("tsc", help="Given an hrtime and a frequency, compute TSC value")
    pt.add_argument("-t", "--hrtime", type=u64, required=True, help="hrtime (nanoseconds)")
    pt.add_argument("-f", "--freq-hz", type=u64, default=1_000_000_000, help="Frequency (Hz)")

    pg = csub.add_parser("guest-tsc", help="Compute a guest's TSC value")
    pg.add_argument("-i", "--initial-host-tsc", type=u64, required=True,
                    help="Initial Host TSC value (at boot or time of migration)")
    pg.add_argument("-t", "--initial-guest-tsc", type=u64, default=0, help="Initial Guest TSC value")
    pg.add_argument("host_tsc", type=u64, help="Current Host TSC value")
    pg.add_argument("-f", "--host-hz", type=u64, default=1_000_000_000, help="Host Frequency (Hz)")
    pg.add_argument("-g", "--guest-hz", type=u64, default=1_000_000_000, help="Guest Frequency (Hz)")
    _add_impl(pg)
    _add_format(pg)

    po = csub.add_parser("offset", help="Compute a guest's TSC offset")
    po.add_argument("initial_host_tsc", type=u64, help="Initial Host TSC value")
    po.add_argument("-t", "--initial-guest-tsc", type=u64, default=0, help="Initial Guest TSC value")
    po.add_argument("-g", "--guest-hz", type=u64, default=1_000_000_000, help="Guest Frequency (Hz)")
    po.add_argument("-f", "--host-hz", type=u64, default=1_000_000_000, help="Host Frequency (Hz)")
    _add_impl(po)
    _add_format(po)

    pf = csub.add_parser("freq", help="Compute the frequency multiplier for a guest and a host")
    pf.add_argument("-f", "--host-hz", type=u64, required=True, help="Host Frequency (Hz)")
    pf.add_argument("-g", "--guest-hz", type=u64, required=True, help="Guest Frequency (Hz)")
    _add_format(pf)
    _add_impl(pf)

    # simulate
    ps = sub.add_parser("simulate", help="Simulate what TSC values a host and guest have over time")
    ps.add_argument("-d", "--duration", type=int, default=20, help="Duration (seconds)")
    ps.add_argument("-i", "--initial-host-tsc", type=u64, default=1_000_000_000, help="Initial Host TSC value")
    ps.add_argument("-f", "--initial-host-hz", type=u64, default=1_000_000_000, help="Initial Host Frequency (Hz)")
    ps.add_argument("-g", "--guest-hz", type=u64, default=1_000_000_000, help="Guest Frequency (Hz)")
    ps.add_argument("--migrate", dest="hosts", action="append", default=[], metavar="'<t> <host_tsc> <host_hz>'",
                    help="Migrate to host at t seconds (repeatable)")
    ps.add_argument("--arch", choices=["amd", "intel"], default="amd", help="Architecture of hosts")
    _add_impl(ps)
    ps.add_argument("--hex", action="store_true", help="Print TSC values as hexadecimal")

    return p


def _configure_logging(verbose: bool) -> None:
    root = logging.getLogger("tscsim")
    if not root.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("[%(levelname)s] %(name)s: %(message)s"))
        root.addHandler(h)
    root.setLevel(logging.DEBUG if verbose else logging.INFO)


def main(argv=None) -> int:
    # lazy import subcommands so --help stays cheap
    from tscsim_core.errors import TscSimError
    from . import calc, simulate
    ns = make_parser().parse_args(argv)
    _configure_logging(ns.verbose)
    try:
        if ns.cmd == "calc":     return calc.handle(ns)
        if ns.cmd == "simulate": return simulate.handle(ns)
    except TscSimError as e:
        _log.debug(f"{ns.cmd} failed: {e!r}")
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 2


if __name__ == "__main__":
    sys.exit(main())
