"""
Demo Matrices
=============

Small dense test problems with controlled spectra.

    build_perturbed_diagonal  - 5×5 symmetric, diag(1..5) plus couplings
    build_power_test_matrix   - diag(1, 30-δ, 30+δ): power method rate |λ₂/λ₁|
    build_shift_invert_example - 3×3 nonsymmetric matrix for shift-and-invert
    build_spread_diagonal     - diag(|randn(n)|^p): ill-conditioned diagonal
    build_block_test_matrix   - [A 0; 0 B] with m targeted low eigenvalues

All builders return dense float64 arrays.
"""

import numpy as np
from typing import Sequence

from ..spec.constants import (
    DEFAULT_SEED,
    SHOWCASE_M12,
    SHOWCASE_M13,
    SHOWCASE_M14,
    SHOWCASE_M23,
)


def build_perturbed_diagonal(m12: float = SHOWCASE_M12,
                             m13: float = SHOWCASE_M13,
                             m14: float = SHOWCASE_M14,
                             m23: float = SHOWCASE_M23) -> np.ndarray:
    """
    Build the 5×5 perturbed diagonal matrix of the error-bounds showcase.

    The diagonal 1, 2, 3, 4, 5 are the "computed" eigenvalues, the unit
    vectors the "computed" eigenvectors. The couplings move the exact
    eigenvalues away from the diagonal.

    Args:
        m12, m13, m14, m23: symmetric off-diagonal couplings

    Returns:
        M: (5, 5) real symmetric matrix
    """
    return np.array([
        [1.0,  m12,  m13,  m14,   0.0],
        [m12,  2.0,  m23,  0.0,  -0.10],
        [m13,  m23,  3.0,  0.1,   0.05],
        [m14,  0.0,  0.1,  4.0,   0.0],
        [0.0, -0.1,  0.05, 0.0,   5.0],
    ])


def build_power_test_matrix(log_delta: float = 1.0) -> np.ndarray:
    """
    diag(1, 30 - 10^logδ, 30 + 10^logδ).

    The power method converges at rate |λ₂/λ₁| = (30-δ)/(30+δ), so
    log_delta → -1 gives a nearly stagnating iteration.
    """
    delta = 10.0 ** log_delta
    if delta >= 30.0:
        raise ValueError(f"10**log_delta must be < 30, got {delta:.4g}")
    return np.diag([1.0, 30.0 - delta, 30.0 + delta])


def build_shift_invert_example() -> np.ndarray:
    """3×3 nonsymmetric matrix with a well separated middle eigenvalue near 0.4."""
    return np.array([
        [0.4, -0.6, 0.2],
        [-0.3, 0.7, -0.4],
        [-0.1, -0.4, 0.5],
    ])


def build_spread_diagonal(n: int, exponent: float = 1.0,
                          seed: int = DEFAULT_SEED) -> np.ndarray:
    """
    Diagonal matrix diag(|randn(n)|^exponent).

    exponent=1 gives a spread spectrum where plain gradient descent
    stalls, exponent=0.1 compresses it towards 1 (LOPCG showcase).
    """
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}")
    rng = np.random.default_rng(seed)
    return np.diag(np.abs(rng.standard_normal(n)) ** exponent)


def build_block_test_matrix(n: int, log_gaps: Sequence[float] = (-1.0,),
                            seed: int = DEFAULT_SEED) -> np.ndarray:
    """
    Block diagonal test problem M = [A 0; 0 B].

    A = diag(1, 1 + 10^g₁, 1 + 10^g₁ + 10^g₂, ...) holds the m = len(log_gaps)+1
    lowest eigenvalues with controllable gaps. B is a diagonal of n - m values
    scattered around A[-1] + 10, far above.

    Args:
        n: total dimension
        log_gaps: log10 of consecutive gaps inside A
        seed: random seed for B

    Returns:
        M: (n, n) diagonal matrix
    """
    leading = [1.0]
    for g in log_gaps:
        leading.append(leading[-1] + 10.0 ** g)
    m = len(leading)
    if n <= m:
        raise ValueError(f"n must exceed the {m} leading eigenvalues, got n={n}")

    rng = np.random.default_rng(seed)
    tail = leading[-1] + 10.0 + rng.standard_normal(n - m)
    return np.diag(np.concatenate([leading, tail]))
