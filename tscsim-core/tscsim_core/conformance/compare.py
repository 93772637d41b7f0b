from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np

Row = Tuple[int, int, int]


def trace_array(rows: Sequence[Sequence[int]]) -> np.ndarray:
    """(time, guest_tsc, host_tsc) rows as an (n, 3) uint64 array."""
    if not rows:
        return np.empty((0, 3), dtype=np.uint64)
    return np.asarray([tuple(r[:3]) for r in rows], dtype=np.uint64)


def is_monotonic(rows: Sequence[Sequence[int]]) -> bool:
    """True when the guest counter never decreases from one row to the next."""
    guest = trace_array(rows)[:, 1]
    # compare rather than diff: uint64 subtraction wraps
    return bool(np.all(guest[1:] >= guest[:-1]))


def compare_traces(a: Sequence[Sequence[int]], b: Sequence[Sequence[int]]) -> Optional[Tuple[int, Row, Row]]:
    """
    First (index, row_a, row_b) where two traces disagree, or None when they
    are identical. A length difference reports the first missing row as ().
    """
    arr_a, arr_b = trace_array(a), trace_array(b)
    n = min(len(arr_a), len(arr_b))
    diff = np.nonzero(np.any(arr_a[:n] != arr_b[:n], axis=1))[0]
    if diff.size:
        i = int(diff[0])
        return i, tuple(int(v) for v in arr_a[i]), tuple(int(v) for v in arr_b[i])
    if len(arr_a) != len(arr_b):
        row_a = tuple(int(v) for v in arr_a[n]) if n < len(arr_a) else ()
        row_b = tuple(int(v) for v in arr_b[n]) if n < len(arr_b) else ()
        return n, row_a, row_b
    return None


def traces_equivalent(a: Sequence[Sequence[int]], b: Sequence[Sequence[int]]) -> bool:
    return compare_traces(a, b) is None
