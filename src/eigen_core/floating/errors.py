"""
Floating-Point Error Measures
=============================

    e_abs(ŷ) = |ŷ - y|,   e_rel(ŷ) = |ŷ - y| / |y|

    spacing(x) = max(x - prevfloat(x), nextfloat(x) - x)
    ε_mach     = spacing(1)            machine epsilon
    u          = ε_mach / 2            unit roundoff, fl(x) = x(1 + δ), |δ| ≤ u

    κ_f(x) = |x f'(x) / f(x)|          relative condition number

    dtype      bits   ε_mach
    float16    16     2⁻¹⁰
    bfloat16   16     2⁻⁷
    float32    32     2⁻²³
    float64    64     2⁻⁵²
"""

import numpy as np
from typing import Callable, Optional

# numpy has no bfloat16 dtype: 8 bit exponent, 7+1 bit mantissa
BFLOAT16_EPS = 2.0 ** -7


def absolute_error(approx, exact):
    return np.abs(np.asarray(approx) - np.asarray(exact))


def relative_error(approx, exact):
    exact = np.asarray(exact)
    if np.any(exact == 0):
        raise ValueError("Relative error undefined for exact value 0")
    return np.abs(np.asarray(approx) - exact) / np.abs(exact)


def spacing(x):
    """Largest gap between x and its floating-point neighbours (same dtype as x)."""
    x = np.asarray(x)
    if not np.issubdtype(x.dtype, np.floating):
        x = x.astype(np.float64)
    up = np.nextafter(x, np.array(np.inf, dtype=x.dtype))
    down = np.nextafter(x, np.array(-np.inf, dtype=x.dtype))
    result = np.maximum(x - down, up - x)
    return result[()] if result.ndim == 0 else result


def machine_epsilon(dtype=np.float64) -> float:
    """spacing(1) of a floating-point type; also accepts "bfloat16"."""
    if isinstance(dtype, str) and dtype.lower() == "bfloat16":
        return BFLOAT16_EPS
    dtype = np.dtype(dtype)
    if not np.issubdtype(dtype, np.floating):
        raise ValueError(f"Not a floating-point type: {dtype}")
    return float(np.finfo(dtype).eps)


def unit_roundoff(dtype=np.float64) -> float:
    return machine_epsilon(dtype) / 2


def condition_number(f: Callable, x: float, df: Optional[Callable] = None) -> float:
    """
    Relative condition number κ_f(x) = |x f'(x) / f(x)|.

    If df is not given f' is approximated by central differences with
    step ε^(1/3)·max(1, |x|).
    """
    fx = f(x)
    if fx == 0:
        raise ValueError(f"Relative condition number undefined: f({x}) = 0")
    if df is None:
        h = np.cbrt(np.finfo(float).eps) * max(1.0, abs(x))
        dfx = (f(x + h) - f(x - h)) / (2 * h)
    else:
        dfx = df(x)
    return float(abs(x * dfx / fx))


def matrix_condition_number(A, ord=2) -> float:
    """κ(A) = ‖A‖‖A⁻¹‖, the condition number of solving Ay = x."""
    A = np.asarray(A)
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise ValueError(f"Expected a square matrix, got shape {A.shape}")
    return float(np.linalg.cond(A, ord))
