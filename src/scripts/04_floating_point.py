"""
Floating-Point Arithmetic Demos
===============================

  1. Toy system F(2, 3, -1, 3) and its subnormals
  2. ε_mach and u for float16, bfloat16, float32, float64
  3. (1 + 1/n)^n → e breaking down near n ≈ 1/u
  4. Kahan's rational r(x) near 1.606: float64 vs exact
  5. x + 10⁻⁸ sin(2²⁴x) at increasing mpmath precision
  6. Nearly singular 2x2 determinant: naive vs Kahan
  7. Summation of a vector summing exactly to 1
  8. Interval arithmetic: sum enclosure, Kahan's log function at 4/3

Oct 2026
"""

import sys
from pathlib import Path

def _find_src():
    """Find src/ by looking for eigen_core/ subdirectory."""
    current = Path(__file__).resolve().parent
    for _ in range(10):
        if (current / 'eigen_core').is_dir():
            return current
        candidate = current / 'src'
        if (candidate / 'eigen_core').is_dir():
            return candidate
        current = current.parent
    raise RuntimeError("Cannot find src/eigen_core directory")

sys.path.insert(0, str(_find_src()))

import numpy as np

from eigen_core.floating import (
    float_system,
    subnormal_numbers,
    machine_epsilon,
    unit_roundoff,
    compute_e,
    kahan_rational,
    kahan_rational_exact,
    kahan_samples,
    precision_errors,
    build_determinant_matrix,
    determinant_2x2,
    determinant_2x2_kahan,
    determinant_2x2_exact,
    relative_error,
    generate_unit_sum,
    sum_naive,
    sum_pairwise,
    sum_kahan,
    sum_kbn,
    sum_doubleword,
    interval_sum,
    interval_eval,
    kahan_log_function,
    kahan_log_function_interval,
)


def section(title: str):
    print()
    print("-" * 70)
    print(title)
    print("-" * 70)


def run_all(n_sum: int = 100, log_eps: int = -8):
    print("=" * 70)
    print("FLOATING-POINT ARITHMETIC")
    print("=" * 70)

    section("1. F(β=2, t=3, emin=-1, emax=3)")
    print("  normalised:", float_system())
    print("  subnormals:", subnormal_numbers())

    section("2. Machine epsilon and unit roundoff")
    for dtype in ("float16", "bfloat16", "float32", "float64"):
        print(f"  {dtype:<9} ε = {machine_epsilon(dtype):.3e}   u = {unit_roundoff(dtype):.3e}")

    section("3. |(1 + 1/n)^n - e|")
    ns = 10.0 ** np.arange(1, 18, 2)
    print(f"{'n':>10} | {'float32':>10} | {'float64':>10}")
    for n, e32, e64 in zip(ns, np.abs(compute_e(ns, np.float32) - np.e),
                           np.abs(compute_e(ns, np.float64) - np.e)):
        print(f"{n:>10.0e} | {e32:>10.3e} | {e64:>10.3e}")

    section("4. Kahan's rational function near 1.606")
    xs = kahan_samples(9)
    for x, approx, exact in zip(xs, kahan_rational(xs), kahan_rational_exact(xs)):
        print(f"  x = {x:.16f}   float64 = {approx:.15f}   exact = {exact:.15f}")

    section("5. 1/7 + 1e-8 sin(2^24/7) vs precision (bits)")
    bits = list(range(10, 41, 5))
    for b, err in zip(bits, precision_errors(bits)):
        print(f"  {b:>3} bits: error {err:.3e}")

    section(f"6. det [[π, e], [355/113, 23225/8544 + 1e{log_eps}]]")
    for dtype in (np.float32, np.float64):
        M = build_determinant_matrix(10.0 ** log_eps, dtype)
        exact = float(determinant_2x2_exact(M))
        print(f"  {np.dtype(dtype).name:<8} naive rel. error {relative_error(float(determinant_2x2(M)), exact):.3e}"
              f"   Kahan rel. error {relative_error(float(determinant_2x2_kahan(M)), exact):.3e}")

    section(f"7. Sum of generate_unit_sum({n_sum}) (exact: 1)")
    v = generate_unit_sum(n_sum)
    for name, fn in (("naive", sum_naive), ("pairwise", sum_pairwise), ("Kahan", sum_kahan),
                     ("KBN", sum_kbn), ("DoubleWord", sum_doubleword)):
        print(f"  {name:<11} {float(fn(v)):.17g}")

    section("8. Interval arithmetic")
    enclosure = interval_sum(v)
    print(f"  naive sum in intervals: {enclosure}")
    enclosure32 = interval_sum(v.astype(np.float32), prec=24)
    print(f"  same in 24 bit:         {enclosure32}")
    x_minus = 4 / 3
    x_plus = np.nextafter(x_minus, 2.0)
    print(f"  f(4/3⁻) = {kahan_log_function(x_minus):.6f},  f(4/3⁺) = {kahan_log_function(x_plus):.6f}")
    fx = interval_eval(kahan_log_function_interval, x_minus, x_plus)
    print(f"  f([4/3⁻, 4/3⁺]) ⊂ {fx}")
    print()


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Floating-point arithmetic demos")
    parser.add_argument("--n", type=int, default=100, help="half-size of the summation test vector")
    parser.add_argument("--log-eps", type=int, default=-8, help="log10 ε of the determinant matrix")
    args = parser.parse_args()

    run_all(args.n, args.log_eps)
