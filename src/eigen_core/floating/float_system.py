"""
Toy Floating-Point Systems
==========================

F(β, t, emin, emax) = {0} ∪ {±m β^(e-t) : β^(t-1) ≤ m < β^t, emin ≤ e ≤ emax}

Numbers are equispaced between consecutive powers of β and the spacing
doubles (for β = 2) at each power. Subnormal numbers m β^(emin-t),
0 < m < β^(t-1), fill the hole between 0 and the smallest normal number.

Only the non-negative half is generated.
"""

import numpy as np


def _check_system(beta: int, t: int):
    if beta < 2:
        raise ValueError(f"Base must be >= 2, got {beta}")
    if t < 1:
        raise ValueError(f"Precision must be >= 1, got {t}")


def float_system(beta: int = 2, t: int = 3, emin: int = -1, emax: int = 3) -> np.ndarray:
    """Sorted non-negative normalised numbers of F(β, t, emin, emax), including 0."""
    _check_system(beta, t)
    if emin > emax:
        raise ValueError(f"emin must be <= emax, got emin={emin}, emax={emax}")
    numbers = [0.0]
    numbers.extend(
        m * float(beta) ** (e - t)
        for m in range(beta ** (t - 1), beta ** t)
        for e in range(emin, emax + 1)
    )
    return np.sort(np.array(numbers))


def subnormal_numbers(beta: int = 2, t: int = 3, emin: int = -1) -> np.ndarray:
    """Positive subnormal numbers m β^(emin-t), 0 < m < β^(t-1)."""
    _check_system(beta, t)
    return np.array([m * float(beta) ** (emin - t) for m in range(1, beta ** (t - 1))])
