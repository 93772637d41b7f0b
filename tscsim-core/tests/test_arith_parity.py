from __future__ import annotations

import numpy as np
import pytest

from tscsim_core import arith
from tscsim_core.arith import CrossCheckArith, LaneArith, NativeArith, get_impl, select
from tscsim_core.arith.lanes import div128, mul64, shrd
from tscsim_core.errors import FixedPointOverflowError, ImplementationMismatchError

U64_MAX = 2**64 - 1
EDGE_VALUES = [0, 1, 2, 3, (1 << 32) - 1, 1 << 32, (1 << 63) - 1, 1 << 63, U64_MAX - 1, U64_MAX]

native = NativeArith()
lanes = LaneArith()


def outcome(fn, *args):
    try:
        return fn(*args)
    except FixedPointOverflowError:
        return "overflow"


def random_u64(rng, n):
    # spread magnitudes so that both small and full-width operands appear
    vals = rng.integers(0, U64_MAX, size=n, endpoint=True, dtype=np.uint64)
    shifts = rng.integers(0, 64, size=n)
    return [int(v) >> int(s) for v, s in zip(vals, shifts)]


def test_mul64_matches_python_product():
    rng = np.random.default_rng(12345)
    for a, b in zip(random_u64(rng, 5000) + EDGE_VALUES, random_u64(rng, 5000) + EDGE_VALUES[::-1]):
        hi, lo = mul64(a, b)
        assert (hi << 64) | lo == a * b


def test_div128_matches_divmod():
    rng = np.random.default_rng(54321)
    for hi, lo, d in zip(random_u64(rng, 3000), random_u64(rng, 3000), random_u64(rng, 3000)):
        if d == 0:
            continue
        hi %= d  # divq precondition
        q, rem = div128(hi, lo, d)
        assert (q, rem) == divmod((hi << 64) | lo, d)


def test_shrd_edges():
    assert shrd(0, U64_MAX, 1) == U64_MAX >> 1
    assert shrd(1, 0, 1) == 1 << 63
    assert shrd(U64_MAX, U64_MAX, 63) == U64_MAX


@pytest.mark.parametrize("frac", [0, 1, 8, 32, 48, 63, 64])
def test_mul_shift_parity_edges(frac):
    for ticks in EDGE_VALUES:
        for raw in EDGE_VALUES:
            assert outcome(native.mul_shift, ticks, raw, frac) == outcome(lanes.mul_shift, ticks, raw, frac)


def test_mul_shift_parity_randomized():
    rng = np.random.default_rng(20240929)
    n = 20000
    ticks = random_u64(rng, n)
    raws = random_u64(rng, n)
    fracs = rng.integers(0, 64, size=n, endpoint=True)
    for t, r, f in zip(ticks, raws, fracs):
        assert outcome(native.mul_shift, t, r, int(f)) == outcome(lanes.mul_shift, t, r, int(f))


def test_multiplier_parity_randomized():
    rng = np.random.default_rng(4242)
    n = 5000
    guests = random_u64(rng, n) + EDGE_VALUES
    hosts = random_u64(rng, n) + EDGE_VALUES[::-1]
    fracs = list(rng.integers(0, 63, size=n, endpoint=True)) + [0, 63] * (len(EDGE_VALUES) // 2)
    for g, h, f in zip(guests, hosts, fracs):
        if h == 0:
            continue
        assert outcome(native.multiplier, g, h, int(f)) == outcome(lanes.multiplier, g, h, int(f))


def test_crosscheck_returns_common_answer():
    both = CrossCheckArith([native, lanes])
    assert both.mul_shift(3_000_000_000, 3 << 31, 32) == 4_500_000_000
    with pytest.raises(FixedPointOverflowError):
        both.mul_shift(U64_MAX, 2, 0)


class _OffByOne(NativeArith):
    id = "off-by-one"

    def mul_shift(self, ticks, raw, fractional_bits):
        return super().mul_shift(ticks, raw, fractional_bits) + 1


class _NeverOverflows(NativeArith):
    id = "wrapping"

    def mul_shift(self, ticks, raw, fractional_bits):
        return ((ticks * raw) >> fractional_bits) & U64_MAX


def test_crosscheck_detects_disagreement():
    with pytest.raises(ImplementationMismatchError):
        CrossCheckArith([native, _OffByOne()]).mul_shift(10, 1 << 32, 32)
    # an implementation that silently wraps disagrees with one that reports overflow
    with pytest.raises(ImplementationMismatchError):
        CrossCheckArith([native, _NeverOverflows()]).mul_shift(U64_MAX, 4, 1)


def test_registry_lookup():
    assert get_impl("native").id == "native"
    assert get_impl("lanes").id == "lanes"
    assert get_impl("all").id == "all"
    # legacy command-line names
    assert get_impl("rust") is get_impl("native")
    assert get_impl("asm") is get_impl("lanes")
    with pytest.raises(KeyError):
        get_impl("nope")
    assert set(arith.available()) == {"native", "lanes", "all"}


def test_env_toggle(monkeypatch):
    monkeypatch.delenv("TSCSIM_MATH", raising=False)
    assert select().id == "native"
    monkeypatch.setenv("TSCSIM_MATH", "lanes")
    assert select().id == "lanes"
    monkeypatch.setenv("TSCSIM_MATH", " ALL ")
    assert select().id == "all"
    # explicit choice wins over the environment
    assert select("native").id == "native"
    assert select(lanes) is lanes


def test_env_toggle_unknown_value_warns(monkeypatch):
    monkeypatch.setenv("TSCSIM_MATH", "quantum")
    with pytest.warns(RuntimeWarning):
        assert select().id == "native"
