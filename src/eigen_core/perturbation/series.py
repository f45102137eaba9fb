"""
Rayleigh-Schrödinger Perturbation Series
========================================

Non-degenerate perturbation theory for a Hermitian family A(t) = A₀ + tΔA
around an isolated eigenpair (λ̃, x̃) of A₀ with eigen-decomposition
A₀ = Σ_j μ_j u_j u_jᴴ:

    λ'(0)   = ⟨x̃, ΔA x̃⟩
    x'(0)   = -Σ_{j≠i} u_j (μ_j - λ̃)⁻¹ u_jᴴ ΔA x̃
    λ''(0)/2 = Σ_{j≠i} |u_jᴴ ΔA x̃|² / (λ̃ - μ_j)

BOUNDS:
    |λ'(0)| ≤ ‖ΔA‖,   ‖x'(0)‖ ≤ ‖ΔA‖/δ,   δ = min_{j≠i} |μ_j - λ̃|

Oct 2026
"""

import numpy as np
from dataclasses import dataclass
from typing import Dict, Tuple

from ..bounds.gerschgorin import _as_square
from ..spec.constants import DEGENERACY_TOL


def _isolated_eigenpair(A0, dA, index: int):
    A0 = _as_square(A0)
    dA = _as_square(dA)
    if dA.shape != A0.shape:
        raise ValueError(f"Shape mismatch: A0 {A0.shape} vs dA {dA.shape}")
    n = A0.shape[0]
    if not (-n <= index < n):
        raise ValueError(f"Eigenvalue index {index} out of range for n={n}")

    mu, U = np.linalg.eigh(A0)
    index = index % n
    others = np.delete(np.arange(n), index)
    gaps = np.abs(mu[others] - mu[index])
    if len(gaps) and np.min(gaps) < DEGENERACY_TOL:
        raise ValueError(
            f"Eigenvalue {mu[index]:.6g} (index {index}) is degenerate: "
            f"non-degenerate perturbation theory does not apply"
        )
    return A0, dA, mu, U, index, others


def first_order_correction(A0, dA, index: int) -> Tuple[float, np.ndarray]:
    """
    First-order derivatives (λ'(0), x'(0)) of eigenpair `index` of A₀ + tΔA.

    index follows the ascending order of numpy.linalg.eigh. x'(0) is
    orthogonal to x̃ (intermediate normalisation).
    """
    A0, dA, mu, U, index, others = _isolated_eigenpair(A0, dA, index)
    x = U[:, index]
    dA_x = dA @ x
    dlam = float(np.real(np.vdot(x, dA_x)))

    Uo = U[:, others]
    coeffs = (Uo.conj().T @ dA_x) / (mu[others] - mu[index])
    dx = -Uo @ coeffs
    return dlam, dx


def second_order_correction(A0, dA, index: int) -> float:
    """Second-order coefficient λ''(0)/2 of eigenvalue `index`."""
    A0, dA, mu, U, index, others = _isolated_eigenpair(A0, dA, index)
    x = U[:, index]
    c = U[:, others].conj().T @ (dA @ x)
    return float(np.sum(np.abs(c) ** 2 / (mu[index] - mu[others])))


@dataclass
class PerturbationSeries:
    """Exact eigenvalue of A₀ + tΔA against its truncated Taylor expansions."""
    ts: np.ndarray
    exact: np.ndarray
    first_order: np.ndarray     # λ̃ + tλ'
    second_order: np.ndarray    # λ̃ + tλ' + t²λ''/2

    @property
    def first_order_error(self) -> np.ndarray:
        return np.abs(self.exact - self.first_order)

    @property
    def second_order_error(self) -> np.ndarray:
        return np.abs(self.exact - self.second_order)


def perturbation_series(A0, dA, index: int, ts) -> PerturbationSeries:
    """
    Compare the exact eigenvalue `index` of A₀ + tΔA with first and second order predictions.

    Errors should scale like t² and t³ for small t.
    """
    A0, dA, mu, _, index, _ = _isolated_eigenpair(A0, dA, index)
    ts = np.atleast_1d(np.asarray(ts, dtype=float))
    dlam, _ = first_order_correction(A0, dA, index)
    d2lam = second_order_correction(A0, dA, index)

    exact = np.array([np.linalg.eigvalsh(A0 + t * dA)[index] for t in ts])
    first = mu[index] + ts * dlam
    second = first + ts ** 2 * d2lam
    return PerturbationSeries(ts=ts, exact=exact, first_order=first, second_order=second)


def first_order_bounds(A0, dA, index: int) -> Dict[str, float]:
    """
    First-order derivatives against their a priori bounds.

    Returns:
        dict with keys:
            'dlam'        - |λ'(0)|
            'dlam_bound'  - ‖ΔA‖₂
            'dx'          - ‖x'(0)‖
            'dx_bound'    - ‖ΔA‖₂/δ
            'gap'         - δ = min_{j≠i} |μ_j - λ̃|
    """
    A0, dA, mu, _, index, others = _isolated_eigenpair(A0, dA, index)
    dlam, dx = first_order_correction(A0, dA, index)
    norm_dA = float(np.linalg.norm(dA, 2))
    gap = float(np.min(np.abs(mu[others] - mu[index]))) if len(others) else np.inf
    return {
        'dlam': abs(dlam),
        'dlam_bound': norm_dA,
        'dx': float(np.linalg.norm(dx)),
        'dx_bound': norm_dA / gap,
        'gap': gap,
    }
