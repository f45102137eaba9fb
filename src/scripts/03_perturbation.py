"""
Matrix Perturbation Theory
==========================

QUESTION: For A(t) = A₀ + tΔA, how far does a Taylor expansion of an
eigenvalue reach, and what does the resolvent say about it?

OUTPUTS
-------

  - First and second order predictions vs exact eigenvalues:
    errors scale as t² and t³
  - A priori bounds |λ'| ≤ ‖ΔA‖, ‖x'‖ ≤ ‖ΔA‖/δ
  - Analyticity radius of the Riesz projector on a circle Γ around λ̃
  - Weighted trace λ̂(t) = tr(A(t)P(t)) for |t| inside that radius

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

from eigen_core.builders import build_perturbed_diagonal
from eigen_core.perturbation import (
    perturbation_series,
    first_order_bounds,
    contour_analyticity_radius,
    weighted_trace,
    count_enclosed,
)


def run_perturbation(index: int = 2, radius: float = 0.5):
    A0 = np.diag(np.arange(1.0, 6.0))
    dA = build_perturbed_diagonal() - A0
    lam0 = np.linalg.eigvalsh(A0)[index]

    print("=" * 70)
    print("PERTURBATION OF THE EIGENVALUE λ̃ = %g OF diag(1, ..., 5)" % lam0)
    print("=" * 70)
    print()

    ts = np.logspace(-3, 0, 7)
    series = perturbation_series(A0, dA, index, ts)
    print(f"{'t':>8} | {'exact':>10} | {'1st order err':>13} | {'2nd order err':>13}")
    print("-" * 54)
    for t, e, e1, e2 in zip(ts, series.exact, series.first_order_error, series.second_order_error):
        print(f"{t:>8.3g} | {e:>10.6f} | {e1:>13.3e} | {e2:>13.3e}")
    print()

    b = first_order_bounds(A0, dA, index)
    print("A PRIORI BOUNDS:")
    print(f"  |λ'| = {b['dlam']:.4f} ≤ ‖ΔA‖ = {b['dlam_bound']:.4f}")
    print(f"  ‖x'‖ = {b['dx']:.4f} ≤ ‖ΔA‖/δ = {b['dx_bound']:.4f}  (δ = {b['gap']:.2f})")
    print()

    r_t = contour_analyticity_radius(A0, dA, lam0, radius)
    print(f"Γ = circle({lam0}, {radius}): P(t) analytic for |t| < {r_t:.4f}")
    print(f"{'t':>8} | {'# enclosed':>10} | {'λ̂(t)':>10} | {'exact':>10}")
    print("-" * 48)
    for t in np.linspace(0, 0.95 * r_t, 5):
        At = A0 + t * dA
        exact = np.linalg.eigvalsh(At)
        inside = exact[np.abs(exact - lam0) < radius]
        print(f"{t:>8.4f} | {count_enclosed(At, lam0, radius):>10d} | "
              f"{weighted_trace(A0, dA, t, lam0, radius):>10.6f} | {np.mean(inside):>10.6f}")
    print()


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Eigenvalue perturbation theory demo")
    parser.add_argument("--index", type=int, default=2, help="eigenvalue index (ascending)")
    parser.add_argument("--radius", type=float, default=0.5, help="contour radius")
    args = parser.parse_args()

    run_perturbation(args.index, args.radius)
