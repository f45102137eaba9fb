"""
Iterative Eigensolver Convergence
=================================

QUESTION: How do convergence rates of the classic iterative eigensolvers
compare, and what do shift-invert and preconditioning buy?

EXPERIMENTS
-----------

  1. Single vector on diag(1, 30-δ, 30+δ):
       power method (rate |λ₂/λ₁|), inverse iteration around σ,
       Rayleigh quotient iteration (cubic)
  2. Block methods on diag(|randn|^p) (n = 100):
       subspace iteration vs projected subspace iteration
  3. Smallest eigenvalues of a spread spectrum (n = 200):
       PGD, LOPCG, LOBPCG with and without the diagonal preconditioner
       P⁻¹ = diag(A)⁻¹, and scipy's lobpcg for reference

Printed: number of iterations and final residual per method.

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
from typing import Dict

from eigen_core.builders import (
    build_power_test_matrix,
    build_spread_diagonal,
    build_block_test_matrix,
)
from eigen_core.solvers import (
    EigenResult,
    power_method,
    inverse_power_method,
    rayleigh_quotient_iteration,
    subspace_iteration,
    projected_subspace_iteration,
    preconditioned_gradient_descent,
    lopcg,
    lobpcg,
    reference_lobpcg,
)


def _print_table(title: str, results: Dict[str, EigenResult]):
    print("-" * 70)
    print(title)
    print("-" * 70)
    print(f"{'method':<28} | {'iters':>5} | {'conv':>5} | {'final ‖r‖':>10} | eigenvalue(s)")
    for name, res in results.items():
        lam = np.atleast_1d(res.eigenvalues)
        lam_str = ", ".join(f"{float(np.real(l)):.6g}" for l in lam)
        print(f"{name:<28} | {res.n_iter:>5} | {str(res.converged):>5} | "
              f"{float(np.max(res.final_residual)):>10.3e} | {lam_str}")
    print()


def run_single_vector(log_delta: float = 1.0, tol: float = 1e-8):
    A = build_power_test_matrix(log_delta)
    x0 = np.ones(3)
    results = {
        'power method': power_method(A, x0, tol=tol, maxiter=500),
        'inverse iteration σ=29': inverse_power_method(A, sigma=29.0, x=x0, tol=tol, maxiter=500),
        'Rayleigh quotient iter.': rayleigh_quotient_iteration(A, x0, tol=tol),
    }
    _print_table(f"1. diag(1, 30-δ, 30+δ), δ = 10^{log_delta}", results)
    return results


def run_block(n: int = 100, tol: float = 1e-6):
    A = build_spread_diagonal(n, exponent=2.0)
    results = {
        'subspace iteration': subspace_iteration(A, block_size=3, tol=tol, maxiter=1000),
        'projected subspace iter.': projected_subspace_iteration(A, block_size=3, tol=tol, maxiter=1000),
    }
    _print_table(f"2. diag(|randn|²), n = {n}, 3 largest", results)
    return results


def run_preconditioned(n: int = 200, tol: float = 1e-6):
    A = build_block_test_matrix(n, log_gaps=(-1.0, -0.5))
    Pinv = 1.0 / np.diag(A)
    x0 = np.random.default_rng(1).standard_normal(n)
    X0 = np.random.default_rng(1).standard_normal((n, 3))
    results = {
        'PGD (α=0.1, no prec.)': preconditioned_gradient_descent(A, x0, alpha=0.1, tol=tol, maxiter=500),
        'PGD (α=1, diag prec.)': preconditioned_gradient_descent(A, x0, Pinv=Pinv, tol=tol, maxiter=500),
        'LOPCG (diag prec.)': lopcg(A, x0, Pinv=Pinv, tol=tol, maxiter=200),
        'LOBPCG m=3 (diag prec.)': lobpcg(A, X0, Pinv=Pinv, tol=tol, maxiter=200),
        'scipy lobpcg m=3': reference_lobpcg(A, X0, Pinv=Pinv, tol=tol, maxiter=200),
    }
    _print_table(f"3. block test matrix, n = {n}, smallest", results)
    return results


def plot_histories(results: Dict[str, EigenResult], save_path: str = None):
    """Residual norm vs iteration (max over the block for block methods)."""
    import matplotlib.pyplot as plt

    fig, ax = plt.subplots(figsize=(7, 4))
    for name, res in results.items():
        norms = res.residual_norms
        if norms.ndim > 1:
            norms = norms.max(axis=1)
        ax.semilogy(np.arange(1, len(norms) + 1), norms, 'x-', label=name)
    ax.set_xlabel('iteration')
    ax.set_ylabel('‖r‖')
    ax.legend(fontsize=8)
    ax.grid(True, alpha=0.3)
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight')
    return fig


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Convergence of iterative eigensolvers")
    parser.add_argument("--log-delta", type=float, default=1.0, help="log10 of the gap δ")
    parser.add_argument("--plot", nargs="?", const="solver_convergence.png", default=None)
    args = parser.parse_args()

    print("=" * 70)
    print("ITERATIVE EIGENSOLVERS")
    print("=" * 70)
    print()
    single = run_single_vector(args.log_delta)
    run_block()
    prec = run_preconditioned()

    if args.plot:
        plot_histories({**single, **prec}, args.plot)
        print(f"Saved {args.plot}")
