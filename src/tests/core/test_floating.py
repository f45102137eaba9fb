"""
Floating-Point Tests
====================

Machine constants, toy float systems, error-free transformations verified
in exact rational arithmetic, compensated summation and the mpmath based
variable precision and interval experiments.

Run: python -m pytest tests/core/test_floating.py -v
"""

import math
from fractions import Fraction

import mpmath
import numpy as np
import pytest

from eigen_core.floating import (
    absolute_error,
    relative_error,
    spacing,
    machine_epsilon,
    unit_roundoff,
    condition_number,
    matrix_condition_number,
    float_system,
    subnormal_numbers,
    two_sum,
    fast_two_sum,
    split,
    two_prod,
    DoubleWord,
    build_determinant_matrix,
    determinant_2x2,
    determinant_2x2_kahan,
    determinant_2x2_exact,
    sum_naive,
    sum_pairwise,
    sum_kahan,
    sum_kbn,
    sum_doubleword,
    generate_unit_sum,
    compute_e,
    kahan_rational,
    kahan_rational_exact,
    kahan_samples,
    eval_with_precision,
    precision_demo,
    precision_errors,
    kahan_log_function,
    kahan_log_function_interval,
    interval_eval,
    interval_sum,
)


@pytest.fixture(scope='module')
def random_pairs():
    rng = np.random.default_rng(5)
    a = rng.standard_normal(50) * np.exp(5 * rng.standard_normal(50))
    b = rng.standard_normal(50) * np.exp(5 * rng.standard_normal(50))
    return [(float(x), float(y)) for x, y in zip(a, b)]


@pytest.fixture(scope='module')
def unit_sum():
    return generate_unit_sum(1000)


# =============================================================================
# F1: ERRORS AND MACHINE CONSTANTS
# =============================================================================

def test_spacing_and_epsilon():
    """F1.1: spacing(1) = ε_mach for each float type."""
    assert spacing(1.0) == 2.0 ** -52
    assert spacing(np.float32(1.0)) == np.float32(2.0 ** -23)
    assert spacing(np.float32(1.0)).dtype == np.float32
    assert machine_epsilon(np.float16) == 2.0 ** -10
    assert machine_epsilon(np.float32) == 2.0 ** -23
    assert machine_epsilon() == 2.0 ** -52
    assert machine_epsilon("bfloat16") == 2.0 ** -7
    assert unit_roundoff() == 2.0 ** -53


def test_spacing_doubles_at_powers_of_two():
    """F1.2: Spacing grows with the exponent."""
    np.testing.assert_array_equal(spacing(np.array([1.0, 2.0, 1024.0])),
                                  [2.0 ** -52, 2.0 ** -51, 2.0 ** -42])


def test_epsilon_rejects_integers():
    """F1.3: Integer types have no machine epsilon."""
    with pytest.raises(ValueError, match="floating-point"):
        machine_epsilon(np.int32)


def test_errors():
    """F1.4: Absolute and relative errors."""
    assert absolute_error(3.0, 3.5) == 0.5
    assert relative_error(3.0, 4.0) == 0.25
    with pytest.raises(ValueError, match="exact value 0"):
        relative_error(1e-3, 0.0)


def test_condition_numbers():
    """F1.5: κ_exp(x) = |x|, κ_sqrt = 1/2, κ(diag) = max/min."""
    assert abs(condition_number(np.exp, 2.0) - 2.0) < 1e-8
    assert abs(condition_number(np.sqrt, 3.0, df=lambda x: 0.5 / np.sqrt(x)) - 0.5) < 1e-14
    assert abs(matrix_condition_number(np.diag([1e-3, 1.0, 10.0])) - 1e4) < 1e-6
    with pytest.raises(ValueError, match="undefined"):
        condition_number(np.log, 1.0)


# =============================================================================
# F2: TOY FLOAT SYSTEM
# =============================================================================

def test_float_system_default():
    """F2.1: F(2, 3, -1, 3) has 20 positive numbers from 1/4 to 7."""
    F = float_system()
    assert len(F) == 21
    assert F[0] == 0.0 and F[1] == 0.25 and F[-1] == 7.0
    spacings = np.diff(F[(F >= 1.0) & (F < 2.0)])
    np.testing.assert_allclose(spacings, 0.25)


def test_subnormals_fill_the_gap():
    """F2.2: Subnormals lie between 0 and the smallest normal number."""
    np.testing.assert_allclose(subnormal_numbers(), [0.0625, 0.125, 0.1875])
    assert subnormal_numbers().max() < float_system()[1]


def test_float_system_guards():
    """F2.3: Invalid parameters raise."""
    with pytest.raises(ValueError, match="Base"):
        float_system(beta=1)
    with pytest.raises(ValueError, match="emin"):
        float_system(emin=2, emax=1)


# =============================================================================
# F3: ERROR-FREE TRANSFORMATIONS
# =============================================================================

def test_two_sum_exact(random_pairs):
    """F3.1: s + t = a + b exactly."""
    for a, b in random_pairs:
        s, t = two_sum(a, b)
        assert s == a + b
        assert Fraction(s) + Fraction(t) == Fraction(a) + Fraction(b)


def test_fast_two_sum_ordered(random_pairs):
    """F3.2: fastTwoSum is exact once |a| ≥ |b|."""
    for a, b in random_pairs:
        if abs(a) < abs(b):
            a, b = b, a
        s, t = fast_two_sum(a, b)
        assert Fraction(s) + Fraction(t) == Fraction(a) + Fraction(b)


def test_split_halves():
    """F3.3: hi + lo = a, hi has at most 26 significant bits."""
    a = math.pi
    hi, lo = split(a)
    assert hi + lo == a
    mantissa = Fraction(hi) / Fraction(2) ** math.frexp(hi)[1]
    assert (mantissa * 2 ** 26).denominator == 1


def test_two_prod_exact(random_pairs):
    """F3.4: p + e = a·b exactly."""
    for a, b in random_pairs:
        p, e = two_prod(a, b)
        assert p == a * b
        assert Fraction(p) + Fraction(e) == Fraction(a) * Fraction(b)


def test_two_prod_float32():
    """F3.5: Type is preserved and the product stays exact in float32."""
    a, b = np.float32(1.1), np.float32(3.3)
    p, e = two_prod(a, b)
    assert isinstance(p, np.float32) and isinstance(e, np.float32)
    assert Fraction(float(p)) + Fraction(float(e)) == Fraction(float(a)) * Fraction(float(b))


def test_doubleword_keeps_small_terms():
    """F3.6: 1 + 10⁻²⁰ - 1 = 10⁻²⁰ in double-word arithmetic."""
    total = DoubleWord.zero() + 1.0 + 1e-20 + (-1.0)
    assert float(total) == 1e-20
    assert (0.5 + DoubleWord(1.0)).high == 1.5


def test_doubleword_fraction():
    """F3.7: as_fraction is the exact unevaluated sum."""
    dw = DoubleWord(1.0) + DoubleWord(2.0 ** -60)
    assert dw.high == 1.0
    assert dw.as_fraction() == 1 + Fraction(1, 2 ** 60)


# =============================================================================
# F4: DETERMINANTS
# =============================================================================

@pytest.mark.parametrize("dtype,eps,tol", [
    (np.float64, 1e-8, 1e-14),
    (np.float32, 1e-3, 1e-6),
])
def test_kahan_determinant(dtype, eps, tol):
    """F4.1: Kahan's determinant is accurate to a few ulps."""
    M = build_determinant_matrix(eps, dtype)
    exact = determinant_2x2_exact(M)
    kahan = determinant_2x2_kahan(M)
    assert kahan.dtype == dtype
    assert abs(float((Fraction(float(kahan)) - exact) / exact)) < tol


def test_naive_determinant_cancels():
    """F4.2: The naive formula loses digits to cancellation."""
    M = build_determinant_matrix(1e-8)
    exact = float(determinant_2x2_exact(M))
    naive_err = abs(determinant_2x2(M) - exact) / abs(exact)
    kahan_err = abs(determinant_2x2_kahan(M) - exact) / abs(exact)
    assert kahan_err <= naive_err
    assert naive_err < 1e-6


# =============================================================================
# F5: SUMMATION
# =============================================================================

def test_unit_sum_is_exactly_one(unit_sum):
    """F5.1: The stress vector sums to exactly 1."""
    assert len(unit_sum) == 2001
    assert math.fsum(unit_sum) == 1.0


def test_compensated_sums(unit_sum):
    """F5.2: KBN and double-word recover 1, naive summation does not."""
    assert abs(sum_kbn(unit_sum) - 1.0) < 1e-8
    assert abs(sum_doubleword(unit_sum) - 1.0) < 1e-10
    assert abs(sum_naive(unit_sum) - 1.0) > 1e-8


def test_float32_accumulation():
    """F5.3: Summing 0.1 2¹⁶ times in float32."""
    x = np.full(2 ** 16, 0.1, dtype=np.float32)
    exact = 2 ** 16 * float(np.float32(0.1))
    naive = sum_naive(x)
    assert naive.dtype == np.float32
    err = {name: abs(float(f(x)) - exact) / exact
           for name, f in [('naive', sum_naive), ('pairwise', sum_pairwise),
                           ('kahan', sum_kahan), ('kbn', sum_kbn)]}
    assert err['pairwise'] < err['naive']
    assert err['pairwise'] < 1e-5
    assert err['kahan'] < 1e-6
    assert err['kbn'] < 1e-6


def test_small_sums_agree():
    """F5.4: All algorithms are exact on integers."""
    x = np.arange(1.0, 101.0)
    for f in (sum_naive, sum_pairwise, sum_kahan, sum_kbn, sum_doubleword):
        assert f(x) == 5050.0


def test_unit_sum_guard():
    """F5.5: At least one pair is needed."""
    with pytest.raises(ValueError, match="n must be"):
        generate_unit_sum(0)


# =============================================================================
# F6: PRECISION EXPERIMENTS
# =============================================================================

def test_compute_e():
    """F6.1: (1 + 1/n)^n converges, then collapses to 1 once 1/n < u."""
    assert abs(compute_e(1e6) - np.e) < 1e-5
    assert compute_e(1e17) == 1.0
    assert compute_e(1e8, np.float32) == np.float32(1.0)


def test_kahan_rational():
    """F6.2: r(2) = 4, and the rational evaluation matches mpmath at 200 bits."""
    assert kahan_rational(2.0) == 4.0
    assert kahan_rational_exact(2.0) == 4.0
    x = kahan_samples(5)
    exact = kahan_rational_exact(x)
    assert exact.shape == (5,)
    reference = float(eval_with_precision(lambda: kahan_rational(mpmath.mpf(x[3])), 200))
    assert abs(exact[3] - reference) <= 1e-15 * abs(reference)
    np.testing.assert_allclose(kahan_rational(x), exact, rtol=1e-6)


def test_kahan_samples_are_consecutive():
    """F6.3: Samples step through neighbouring floats."""
    x = kahan_samples(10)
    assert x[0] == 1.606
    np.testing.assert_array_equal(np.diff(x), 2.0 ** -52)


def test_precision_errors_decrease():
    """F6.4: More bits, smaller error."""
    errors = precision_errors([24, 53, 100])
    assert errors[0] > errors[1] > errors[2]
    assert errors[2] < 1e-25
    assert mpmath.mp.prec == 53


def test_eval_with_precision_restores():
    """F6.5: Working precision is only changed for the evaluation."""
    value = precision_demo(80)
    assert mpmath.mp.prec == 53
    assert abs(value - precision_demo(256)) < 1e-20
    with pytest.raises(ValueError, match="bits"):
        eval_with_precision(lambda: mpmath.mpf(1), 1)


def test_interval_finds_singularity():
    """F6.6: Point samples miss the log singularity at 4/3, an interval does not."""
    x = np.linspace(1.3, 1.4, 1001)
    assert np.all(np.isfinite(kahan_log_function(x)))
    enclosure = interval_eval(kahan_log_function_interval, 1.3, 1.4)
    assert enclosure.a < -100
    assert mpmath.iv.prec == 53


def test_interval_sum_encloses(unit_sum):
    """F6.7: The interval sum contains the exact value 1."""
    total = interval_sum(unit_sum)
    assert total.a <= 1 <= total.b


def test_interval_eval_guard():
    """F6.8: lo > hi is an empty interval."""
    with pytest.raises(ValueError, match="Empty interval"):
        interval_eval(kahan_log_function_interval, 2.0, 1.0)
