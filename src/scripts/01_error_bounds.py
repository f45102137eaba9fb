"""
Error Bounds Showcase
=====================

QUESTION: How much do we know about the spectrum of a nearly diagonal
matrix without diagonalising it?

INPUTS
------

  - 5x5 symmetric matrix: diag(1, 2, 3, 4, 5) + small couplings
  - Approximate eigenpairs: diagonal entries and unit vectors

OUTPUTS
-------

  - Gerschgorin discs and their connected components
  - Bauer-Fike radii ‖r_i‖
  - Guaranteed gap lower bounds and Kato-Temple radii ‖r_i‖²/δ_i
  - Check of every bound against numpy.linalg.eigvalsh

EXPECTED OUTPUT
---------------

  One table row per approximate eigenpair, followed by

    VALIDATION:
      gerschgorin  PASS
      bauer_fike   PASS
      kato_temple  PASS

  Kato-Temple radii are inf wherever the guaranteed gap clips to 0.

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
from eigen_core.bounds import (
    compute_error_bounds,
    check_bounds,
    gerschgorin_clusters,
)
from eigen_core.spec import SHOWCASE_M12, SHOWCASE_M13, SHOWCASE_M14, SHOWCASE_M23


def run_error_bounds(m12: float = SHOWCASE_M12, m13: float = SHOWCASE_M13,
                     m14: float = SHOWCASE_M14, m23: float = SHOWCASE_M23):
    """Print all bounds for the showcase matrix and check them."""
    A = build_perturbed_diagonal(m12, m13, m14, m23)
    exact = np.linalg.eigvalsh(A)
    bounds = compute_error_bounds(A)

    print("=" * 78)
    print("A POSTERIORI ERROR BOUNDS FOR A NEARLY DIAGONAL MATRIX")
    print("=" * 78)
    print(f"  m12={m12}, m13={m13}, m14={m14}, m23={m23}")
    print()

    clusters = gerschgorin_clusters(bounds.gerschgorin_centres, bounds.gerschgorin_radii)
    print("Gerschgorin components (each holds as many eigenvalues as discs):")
    for c in clusters:
        print(f"  discs {c}")
    print()

    # Match each λ̃_i with the nearest exact eigenvalue for display only
    nearest = np.array([exact[np.argmin(np.abs(exact - l))] for l in bounds.eigenvalues])

    print("-" * 78)
    print(f"{'i':>3} | {'λ̃_i':>8} | {'exact':>8} | {'Gersch. r':>9} | "
          f"{'‖r_i‖':>8} | {'δ_i':>8} | {'Kato-Temple':>11} | {'sin θ':>6}")
    print("-" * 78)
    for i in range(len(bounds.eigenvalues)):
        print(f"{i:>3} | {bounds.eigenvalues[i]:>8.4f} | {nearest[i]:>8.4f} | "
              f"{bounds.gerschgorin_radii[i]:>9.4f} | {bounds.residual_norms[i]:>8.4f} | "
              f"{bounds.gaps[i]:>8.4f} | {bounds.kato_temple[i]:>11.4g} | {bounds.angle[i]:>6.3f}")
    print("-" * 78)
    print()

    checks = check_bounds(bounds, exact)
    print("VALIDATION:")
    for name, ok in checks.items():
        print(f"  {name:<12} {'PASS' if np.all(ok) else 'FAIL'}")
    print()
    return bounds, exact


def plot_discs(bounds, exact, save_path: str = None):
    """Gerschgorin discs, exact eigenvalues and Bauer-Fike intervals."""
    import matplotlib.pyplot as plt
    from matplotlib.patches import Circle

    fig, ax = plt.subplots(figsize=(8, 4))
    for c, r in zip(bounds.gerschgorin_centres, bounds.gerschgorin_radii):
        ax.add_patch(Circle((np.real(c), 0.0), r, fill=True, alpha=0.2, color='C0'))
    ax.plot(np.real(exact), np.zeros(len(exact)), 'kx', ms=8, label='exact λ_i')
    ax.errorbar(bounds.eigenvalues, np.zeros(len(bounds.eigenvalues)),
                xerr=bounds.bauer_fike, fmt='o', color='C3', capsize=4, label='λ̃_i ± ‖r_i‖')
    ax.set_aspect('equal')
    ax.autoscale_view()
    ax.set_xlabel('Re λ')
    ax.set_ylabel('Im λ')
    ax.legend(loc='upper left')
    ax.grid(True, alpha=0.3)
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight')
    return fig


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Gerschgorin, Bauer-Fike and Kato-Temple bounds")
    parser.add_argument("--m12", type=float, default=SHOWCASE_M12)
    parser.add_argument("--m13", type=float, default=SHOWCASE_M13)
    parser.add_argument("--m14", type=float, default=SHOWCASE_M14)
    parser.add_argument("--m23", type=float, default=SHOWCASE_M23)
    parser.add_argument("--plot", nargs="?", const="error_bounds.png", default=None,
                        help="Save a disc plot (optional file name)")
    args = parser.parse_args()

    bounds, exact = run_error_bounds(args.m12, args.m13, args.m14, args.m23)
    if args.plot:
        plot_discs(bounds, exact, args.plot)
        print(f"Saved {args.plot}")
