"""
Error-Free Transformations
==========================

For a, b ∈ F and round-to-nearest, the rounding errors of a + b and a·b
are themselves floating-point numbers. Error-free transformations return
them alongside the rounded result:

    two_sum(a, b)       → (s, t),  s = fl(a + b),  s + t = a + b exactly
    fast_two_sum(a, b)  → same, but requires |a| ≥ |b| (3 instead of 6 flops)
    two_prod(a, b)      → (p, e),  p = fl(a·b),    p + e = a·b exactly

two_prod uses Veltkamp splitting (no fma needed), valid without
overflow/underflow. All functions keep the floating-point type of their
inputs (Python float, np.float32, np.float64).

DOUBLE-WORD ARITHMETIC:
    DoubleWord(high, low) represents the unevaluated sum high + low with
    high = RN(high + low): roughly twice the working precision using only
    hardware floats.
"""

import numpy as np
from fractions import Fraction
from typing import Tuple


# =============================================================================
# SUM AND PRODUCT
# =============================================================================

def fast_two_sum(a, b) -> Tuple[float, float]:
    """Dekker's fastTwoSum. Exact only if exponent(a) ≥ exponent(b)."""
    s = a + b
    t = b - (s - a)
    return s, t


def two_sum(a, b) -> Tuple[float, float]:
    """Knuth's twoSum, exact for any ordering of a and b."""
    s = a + b
    v = s - a
    t = (a - (s - v)) + (b - v)
    return s, t


def _split_factor(x):
    nmant = np.finfo(type(x)).nmant
    return type(x)(2 ** ((nmant + 2) // 2) + 1)


def split(a) -> Tuple[float, float]:
    """Veltkamp split a = hi + lo, each half fitting in half the mantissa."""
    c = _split_factor(a) * a
    hi = c - (c - a)
    lo = a - hi
    return hi, lo


def two_prod(a, b) -> Tuple[float, float]:
    """Dekker's product: p = fl(a·b), e = a·b - p exactly."""
    p = a * b
    a_hi, a_lo = split(a)
    b_hi, b_lo = split(b)
    e = ((a_hi * b_hi - p) + a_hi * b_lo + a_lo * b_hi) + a_lo * b_lo
    return p, e


# =============================================================================
# DOUBLE-WORD NUMBERS
# =============================================================================

class DoubleWord:
    """Unevaluated sum high + low of two float64 numbers (addition only)."""

    __slots__ = ("high", "low")

    def __init__(self, high: float, low: float = 0.0):
        self.high = float(high)
        self.low = float(low)

    @classmethod
    def zero(cls) -> "DoubleWord":
        return cls(0.0, 0.0)

    def __add__(self, other):
        if not isinstance(other, DoubleWord):
            other = DoubleWord(other)
        sh, sl = two_sum(self.high, other.high)
        th, tl = two_sum(self.low, other.low)
        c = sl + th
        vh, vl = fast_two_sum(sh, c)
        w = tl + vl
        zh, zl = fast_two_sum(vh, w)
        return DoubleWord(zh, zl)

    __radd__ = __add__

    def __float__(self) -> float:
        return self.high

    def __repr__(self) -> str:
        return f"DoubleWord({self.high!r}, {self.low!r})"

    def as_fraction(self) -> Fraction:
        """Exact value high + low."""
        return Fraction(self.high) + Fraction(self.low)


# =============================================================================
# 2x2 DETERMINANTS
# =============================================================================

def build_determinant_matrix(eps: float = 1e-8, dtype=np.float64) -> np.ndarray:
    """Nearly singular [[π, e], [355/113, 23225/8544 + ε]]."""
    return np.array([[np.pi, np.e],
                     [355 / 113, 23225 / 8544 + eps]], dtype=dtype)


def determinant_2x2(M):
    """Naive ad - bc, suffers cancellation for nearly singular M."""
    return (M[0, 0] * M[1, 1]) - (M[0, 1] * M[1, 0])


def determinant_2x2_kahan(M):
    """
    Kahan's determinant: ad - bc with the rounding error of bc compensated.

        w = fl(bc),  e = w - bc (exact),  f = fl(ad - w),  det ≈ f + e

    The fused multiply-adds of the usual formulation are replaced by two_prod.
    """
    w, err_bc = two_prod(M[0, 1], M[1, 0])     # bc = w + err_bc
    p, err_ad = two_prod(M[0, 0], M[1, 1])     # ad = p + err_ad
    s, t = two_sum(p, -w)
    f = s + (t + err_ad)
    return f - err_bc


def determinant_2x2_exact(M) -> Fraction:
    """Exact determinant of the floating-point entries."""
    a, b, c, d = (Fraction(float(M[i, j])) for i, j in ((0, 0), (0, 1), (1, 0), (1, 1)))
    return a * d - b * c
