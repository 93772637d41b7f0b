from .units import NS_PER_SEC, U64_MAX, check_u64, hrtime, parse_u64, tsc_from_hrtime, tsc_incr
__all__ = ["NS_PER_SEC", "U64_MAX", "check_u64", "hrtime", "parse_u64", "tsc_from_hrtime", "tsc_incr"]
