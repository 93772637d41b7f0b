from .format import AMD, ARCH_FORMATS, DEFAULT_FORMAT, INTEL, FixedPointFormat, resolve_format
from .ratio import FixedPointRatio, compute_ratio, ratio_for_format
from .scale import scale
__all__ = ["AMD", "ARCH_FORMATS", "DEFAULT_FORMAT", "INTEL", "FixedPointFormat", "FixedPointRatio",
           "compute_ratio", "ratio_for_format", "resolve_format", "scale"]
