from __future__ import annotations

import logging
from typing import Callable, List, Sequence, Tuple, Union

from ..errors import ImplementationMismatchError, TscSimError
from .api import ArithImpl

_log = logging.getLogger("tscsim.core.arith")

Outcome = Union[int, TscSimError]


class CrossCheckArith(ArithImpl):
    """
    Runs every wrapped implementation on the same operands and returns the
    common answer. Any disagreement, including one implementation
    overflowing where another does not, raises ImplementationMismatchError.
    """
    id = "all"

    def __init__(self, impls: Sequence[ArithImpl]) -> None:
        if not impls:
            raise ValueError("CrossCheckArith needs at least one implementation")
        self.impls = list(impls)

    def _run(self, op: str, call: Callable[[ArithImpl], int], args: Tuple[int, ...]) -> int:
        outcomes: List[Tuple[str, Outcome]] = []
        for impl in self.impls:
            try:
                outcomes.append((impl.id, call(impl)))
            except TscSimError as e:
                outcomes.append((impl.id, e))

        first_id, first = outcomes[0]
        for other_id, other in outcomes[1:]:
            same = (type(first) is type(other)) if isinstance(first, Exception) else (first == other)
            if not same:
                _log.warning(f"{op}{args}: {first_id}={first!r} but {other_id}={other!r}")
                raise ImplementationMismatchError(
                    f"{op}{args}: {first_id} returned {first!r}, {other_id} returned {other!r}"
                )
        if isinstance(first, Exception):
            raise first
        return first

    def multiplier(self, guest_hz: int, host_hz: int, fractional_bits: int) -> int:
        return self._run("multiplier", lambda i: i.multiplier(guest_hz, host_hz, fractional_bits),
                         (guest_hz, host_hz, fractional_bits))

    def mul_shift(self, ticks: int, raw: int, fractional_bits: int) -> int:
        return self._run("mul_shift", lambda i: i.mul_shift(ticks, raw, fractional_bits),
                         (ticks, raw, fractional_bits))
