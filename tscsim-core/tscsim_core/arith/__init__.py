"""
Multiply/shift implementation registry for tscsim-core.

- get_impl(name): look up a registered implementation
- select(impl=None): resolve an explicit choice, else the environment toggle

Environment toggle:
  TSCSIM_MATH=native -> Python integer arithmetic (default)
  TSCSIM_MATH=lanes  -> 64-bit lane bit manipulation
  TSCSIM_MATH=all    -> run both and fail on any disagreement
  unknown value      -> warn and use the default
"""
from __future__ import annotations

import logging
import os
import warnings
from typing import Dict, Optional, Union

from .api import ArithImpl
from .crosscheck import CrossCheckArith
from .lanes import LaneArith
from .native import NativeArith

_log = logging.getLogger("tscsim.core.arith")

_ENV_VAR = "TSCSIM_MATH"
DEFAULT_IMPL = "native"

_native = NativeArith()
_lanes = LaneArith()

_REG: Dict[str, ArithImpl] = {
    "native": _native,
    "lanes": _lanes,
    "all": CrossCheckArith([_native, _lanes]),
}
# legacy command-line names
_ALIASES = {"rust": "native", "asm": "lanes", "bitwise": "lanes"}


def _env_toggle() -> Optional[str]:
    """
    Parse TSCSIM_MATH.

    Returns:
        a registered implementation id, or None when unset or unrecognized
    """
    val = os.getenv(_ENV_VAR)
    if val is None:
        return None
    v = val.strip().lower()
    v = _ALIASES.get(v, v)
    if v in _REG:
        return v
    warnings.warn(
        f"{_ENV_VAR}={val!r} is not a known implementation ({', '.join(_REG)}); "
        f"using {DEFAULT_IMPL!r}.",
        RuntimeWarning,
        stacklevel=3,
    )
    return None


def available() -> list:
    return list(_REG)


def get_impl(name: str) -> ArithImpl:
    key = _ALIASES.get(name, name)
    if key not in _REG:
        raise KeyError(f"Unknown arithmetic implementation {name!r}. Known: {list(_REG)}")
    return _REG[key]


def select(impl: Union[str, ArithImpl, None] = None) -> ArithImpl:
    """Resolve an implementation: explicit object or id, then TSCSIM_MATH, then the default."""
    if isinstance(impl, ArithImpl):
        return impl
    if impl is not None:
        return get_impl(impl)
    chosen = _env_toggle() or DEFAULT_IMPL
    _log.debug(f"using arithmetic implementation {chosen!r}")
    return _REG[chosen]


__all__ = ["ArithImpl", "CrossCheckArith", "LaneArith", "NativeArith", "available", "get_impl", "select"]
