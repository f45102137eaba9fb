"""
Precision Experiments
=====================

Demonstrations of what finite precision does to simple computations.

    compute_e          (1 + 1/n)^n → e, until 1/n drops below u
    kahan_rational     Kahan's r(x), badly conditioned around x ≈ 1.606
    precision_demo     x + 10⁻⁸ sin(2²⁴ x), x = 1/7, at variable precision
    interval_eval      rigorous range enclosure with mpmath.iv

ARBITRARY PRECISION:
    mpmath's mp context plays the role of a variable-precision float.
    eval_with_precision sets the working precision (in bits) for the
    duration of a single evaluation.

INTERVAL ARITHMETIC:
    Every operation on [a, b] rounds outward, so the result of a
    composition of operations is a guaranteed enclosure of the exact range.
    Kahan's f(x) = log|3(1-x)+1|/80 + x² + 1 dives to -∞ at x = 4/3,
    between two neighbouring floats: point evaluation never sees it, an
    interval around 4/3 does.
"""

import mpmath
import numpy as np
from fractions import Fraction
from typing import Callable, Iterable


REFERENCE_BITS = 256
KAHAN_SAMPLE_START = 1.606


# =============================================================================
# LIMITS AND RATIONAL FUNCTIONS
# =============================================================================

def compute_e(n, dtype=np.float64):
    """(1 + 1/n)^n evaluated entirely in `dtype`."""
    n = np.asarray(n, dtype=dtype)
    one = n.dtype.type(1)
    return (one + one / n) ** n


def kahan_rational(x):
    """
    r(x) = (622 - x(751 - x(324 - x(59 - 4x)))) / (112 - x(151 - x(72 - x(14 - x))))

    Works on floats, numpy arrays, Fractions and mpmath numbers alike.
    """
    numerator = 622 - x * (751 - x * (324 - x * (59 - 4 * x)))
    denominator = 112 - x * (151 - x * (72 - x * (14 - x)))
    return numerator / denominator


def kahan_rational_exact(x) -> float:
    """r(x) in exact rational arithmetic, rounded once to float64."""
    if np.ndim(x) > 0:
        return np.array([kahan_rational_exact(xi) for xi in np.ravel(x)]).reshape(np.shape(x))
    return float(kahan_rational(Fraction(float(x))))


def kahan_samples(n_samples: int = 361, start: float = KAHAN_SAMPLE_START) -> np.ndarray:
    """start + k·2⁻⁵², k = 0..n_samples-1: consecutive floats near `start`."""
    return start + np.arange(n_samples) * 2.0 ** -52


# =============================================================================
# VARIABLE PRECISION (mpmath)
# =============================================================================

def eval_with_precision(f: Callable[[], "mpmath.mpf"], bits: int):
    """Evaluate the nullary function f with `bits` of mpmath working precision."""
    if bits < 2:
        raise ValueError(f"Precision must be >= 2 bits, got {bits}")
    with mpmath.workprec(bits):
        return f()


def _sin_perturbed():
    x = 1 / mpmath.mpf(7)
    a = mpmath.mpf(10) ** -8
    b = mpmath.mpf(2) ** 24
    return x + a * mpmath.sin(b * x)


def precision_demo(bits: int):
    """1/7 + 10⁻⁸ sin(2²⁴/7) at the given precision."""
    return eval_with_precision(_sin_perturbed, bits)


def precision_errors(bits_range: Iterable[int],
                     reference_bits: int = REFERENCE_BITS) -> np.ndarray:
    """|precision_demo(bits) - reference| for each precision."""
    with mpmath.workprec(reference_bits):
        reference = precision_demo(reference_bits)
        return np.array([float(abs(precision_demo(b) - reference)) for b in bits_range])


# =============================================================================
# INTERVAL ARITHMETIC (mpmath.iv)
# =============================================================================

def kahan_log_function(x):
    """f(x) = log|3(1-x)+1|/80 + x² + 1 in float64."""
    x = np.asarray(x, dtype=float)
    with np.errstate(divide='ignore'):
        return (1 / 80) * np.log(np.abs(3 * (1 - x) + 1)) + x ** 2 + 1


def kahan_log_function_interval(X):
    """Interval extension of kahan_log_function (X an mpmath.iv interval)."""
    iv = mpmath.iv
    return iv.mpf(1) / 80 * iv.log(abs(3 * (1 - X) + 1)) + X ** 2 + 1


def interval_eval(f: Callable, lo: float, hi: float, prec: int = 53):
    """
    Enclosure of f over [lo, hi].

    f must be composed of interval-aware operations (mpmath.iv functions).
    Returns an mpmath interval with endpoints .a, .b.
    """
    if lo > hi:
        raise ValueError(f"Empty interval [{lo}, {hi}]")
    iv = mpmath.iv
    saved = iv.prec
    iv.prec = prec
    try:
        return f(iv.mpf([lo, hi]))
    finally:
        iv.prec = saved


def interval_sum(values, prec: int = 53):
    """Naive left-to-right sum in interval arithmetic; encloses the exact sum."""
    iv = mpmath.iv
    saved = iv.prec
    iv.prec = prec
    try:
        total = iv.mpf(0)
        for v in np.asarray(values, dtype=float):
            total = total + iv.mpf(float(v))
        return total
    finally:
        iv.prec = saved
