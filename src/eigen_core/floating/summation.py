"""
Summation Algorithms
====================

Naive recursive summation has the error bound |s - ŝ| ≤ γ_{n-1} Σ|x_i|,
which is useless when Σ|x_i| ≫ |Σ x_i| (catastrophic cancellation).

    sum_naive        - left to right, error O(n u) Σ|x_i|
    sum_pairwise     - recursive halving, error O(log n u) Σ|x_i|
    sum_kahan        - compensated (Kahan), error O(u) Σ|x_i|
    sum_kbn          - Kahan-Babuška-Neumaier, also handles |x_i| > |s|
    sum_doubleword   - accumulate in DoubleWord (≈ 106 bit)

generate_unit_sum builds the stress test: large terms ±x_i of wildly
different magnitudes plus a single 1, so the exact sum is 1.
"""

import numpy as np

from .eft import two_sum, DoubleWord
from ..spec.constants import DEFAULT_SEED

PAIRWISE_BLOCK = 8


def _values(x) -> np.ndarray:
    x = np.asarray(x)
    if not np.issubdtype(x.dtype, np.floating):
        x = x.astype(np.float64)
    return x


def sum_naive(x):
    x = _values(x)
    accu = x.dtype.type(0)
    for xi in x:
        accu += xi
    return accu


def sum_pairwise(x):
    """Sum halves recursively, blocks of PAIRWISE_BLOCK summed naively."""
    x = _values(x)
    if len(x) <= PAIRWISE_BLOCK:
        return sum_naive(x)
    mid = len(x) // 2
    return sum_pairwise(x[:mid]) + sum_pairwise(x[mid:])


def sum_kahan(x):
    x = _values(x)
    accu = x.dtype.type(0)
    error = x.dtype.type(0)
    for xi in x:
        temp = accu
        y = xi + error
        accu = temp + y
        error = (temp - accu) + y
    return accu


def sum_kbn(x):
    """Kahan-Babuška-Neumaier: twoSum of every partial sum, errors added at the end."""
    x = _values(x)
    accu = x.dtype.type(0)
    correction = x.dtype.type(0)
    for xi in x:
        accu, t = two_sum(accu, xi)
        correction += t
    return accu + correction


def sum_doubleword(x) -> float:
    """Accumulate float64 values as DoubleWord, round once at the end."""
    x = _values(x).astype(np.float64)
    total = DoubleWord.zero()
    for xi in x:
        total = total + DoubleWord(xi)
    return float(total)


def generate_unit_sum(n: int, seed: int = DEFAULT_SEED) -> np.ndarray:
    """
    Shuffled vector [x; -x; 1] with x_i = randn·exp(10·randn), summing exactly to 1.

    Returns:
        (2n + 1,) float64 array
    """
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}")
    rng = np.random.default_rng(seed)
    x = rng.standard_normal(n) * np.exp(10 * rng.standard_normal(n))
    values = np.concatenate([x, -x, [1.0]])
    return values[rng.permutation(len(values))]
