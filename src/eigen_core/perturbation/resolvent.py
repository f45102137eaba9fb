"""
Resolvent and Spectral Projectors
=================================

Resolvent-based tools for the analytic perturbation theory of A(t) = A₀ + tΔA.

CONVENTIONS:
    R_z(A) = (A - z)⁻¹                      resolvent, z ∉ σ(A)
    P = -1/(2πi) ∮_Γ R_z(A) dz              Riesz projector onto the
                                            eigenvalues enclosed by Γ
    Γ = circle(centre, radius), positively oriented, trapezoidal rule.

    The trapezoidal rule on a circle converges exponentially for analytic
    integrands, so 64 nodes are plenty unless an eigenvalue sits close to Γ.

NEUMANN SERIES:
    R_t(A) = Σ_k (t - z)^k R_z(A)^{k+1}   for |t - z| < 1/‖R_z(A)‖
    For Hermitian A, 1/‖R_z(A)‖₂ = dist(z, σ(A)).

ANALYTICITY:
    A(t) - z = (A₀ - z)(1 + t R_z(A₀)ΔA) stays invertible on Γ as long as
    |t| < 1/ρ(R_z(A₀)ΔA). The infimum over Γ gives a disc of t in which the
    projector P(t), and hence the weighted trace λ̂(t) = tr(A(t)P(t))/m, is
    analytic.

Oct 2026
"""

import numpy as np
from typing import Sequence, Tuple, Union

from ..bounds.gerschgorin import _as_square
from ..spec.constants import EPS_CLOSE, DEFAULT_CONTOUR_POINTS


# =============================================================================
# RESOLVENT
# =============================================================================

def _shifted(A: np.ndarray, z: complex) -> np.ndarray:
    """A - zI, raising if z is (numerically) an eigenvalue."""
    n = A.shape[0]
    shifted = A - z * np.eye(n, dtype=np.result_type(A.dtype, np.asarray(z).dtype))
    s = np.linalg.svd(shifted, compute_uv=False)
    if s[-1] <= EPS_CLOSE * max(1.0, s[0]):
        raise ValueError(f"z = {z} lies in the spectrum of A (σ_min = {s[-1]:.3e})")
    return shifted


def resolvent(A, z: complex) -> np.ndarray:
    """R_z(A) = (A - z)⁻¹."""
    A = _as_square(A)
    shifted = _shifted(A, z)
    return np.linalg.solve(shifted, np.eye(A.shape[0], dtype=shifted.dtype))


def resolvent_norm(A, z: complex) -> float:
    """‖R_z(A)‖₂ = 1/σ_min(A - z)."""
    A = _as_square(A)
    s = np.linalg.svd(_shifted(A, z), compute_uv=False)
    return float(1.0 / s[-1])


def neumann_radius(A, z: complex) -> float:
    """
    Radius 1/‖R_z(A)‖₂ of the disc around z where the Neumann series of R_t converges.
    """
    return 1.0 / resolvent_norm(A, z)


def resolvent_series(A, z: complex, t: complex, n_terms: int) -> np.ndarray:
    """
    Truncated Neumann expansion of R_t(A) around z.

        R_t ≈ Σ_{k=0}^{n_terms-1} (t - z)^k R_z^{k+1}
    """
    if n_terms < 1:
        raise ValueError(f"n_terms must be >= 1, got {n_terms}")
    Rz = resolvent(A, z)
    term = Rz.copy()
    total = Rz.copy()
    for _ in range(1, n_terms):
        term = (t - z) * (Rz @ term)
        total = total + term
    return total


# =============================================================================
# CONTOUR INTEGRALS
# =============================================================================

def circle_contour(centre: complex, radius: float,
                   n_points: int = DEFAULT_CONTOUR_POINTS) -> Tuple[np.ndarray, np.ndarray]:
    """
    Nodes and trapezoidal weights for ∮ f(z) dz on a positively oriented circle.

        z_k = c + r e^{iθ_k},  w_k = i r e^{iθ_k} · 2π/N

    Returns:
        (nodes, weights), each (n_points,) complex
    """
    if radius <= 0:
        raise ValueError(f"Contour radius must be positive, got {radius}")
    if n_points < 3:
        raise ValueError(f"Need at least 3 contour points, got {n_points}")
    theta = 2 * np.pi * np.arange(n_points) / n_points
    phase = np.exp(1j * theta)
    nodes = centre + radius * phase
    weights = 1j * radius * phase * (2 * np.pi / n_points)
    return nodes, weights


def spectral_projector(A, centre: complex, radius: float,
                       n_points: int = DEFAULT_CONTOUR_POINTS) -> np.ndarray:
    """
    Riesz projector P = -1/(2πi) ∮ R_z(A) dz onto the eigenvalues inside the circle.

    Raises ValueError if a contour node hits the spectrum.
    """
    A = _as_square(A)
    nodes, weights = circle_contour(centre, radius, n_points)
    P = np.zeros(A.shape, dtype=complex)
    for z, w in zip(nodes, weights):
        P += w * resolvent(A, z)
    return -P / (2j * np.pi)


def eigenprojector(A, index: Union[int, Sequence[int]]) -> np.ndarray:
    """
    Exact orthogonal projector onto eigenvector(s) of Hermitian A.

    index refers to the ascending eigenvalue order of numpy.linalg.eigh.
    """
    A = _as_square(A)
    _, U = np.linalg.eigh(A)
    U = U[:, np.atleast_1d(index)]
    return U @ U.conj().T


def count_enclosed(A, centre: complex, radius: float,
                   n_points: int = DEFAULT_CONTOUR_POINTS) -> int:
    """Number of eigenvalues inside the circle: round(Re tr P)."""
    P = spectral_projector(A, centre, radius, n_points)
    return int(round(np.real(np.trace(P))))


# =============================================================================
# ANALYTIC PERTURBATION THEORY
# =============================================================================

def analyticity_radius(A0, dA, z: complex) -> float:
    """
    1/ρ(R_z(A₀)ΔA): A₀ + tΔA - z is invertible for all |t| below this radius.

    Returns inf when R_z(A₀)ΔA is nilpotent (e.g. ΔA = 0).
    """
    A0 = _as_square(A0)
    dA = _as_square(dA)
    if dA.shape != A0.shape:
        raise ValueError(f"Shape mismatch: A0 {A0.shape} vs dA {dA.shape}")
    rho = np.max(np.abs(np.linalg.eigvals(resolvent(A0, z) @ dA)))
    if rho <= 0:
        return np.inf
    return float(1.0 / rho)


def contour_analyticity_radius(A0, dA, centre: complex, radius: float,
                               n_points: int = DEFAULT_CONTOUR_POINTS) -> float:
    """inf over z ∈ Γ of analyticity_radius(A₀, ΔA, z)."""
    nodes, _ = circle_contour(centre, radius, n_points)
    return min(analyticity_radius(A0, dA, z) for z in nodes)


def weighted_trace(A0, dA, t: float, centre: complex, radius: float,
                   n_points: int = DEFAULT_CONTOUR_POINTS) -> float:
    """
    Weighted trace λ̂(t) = tr(A(t)P(t))/m of the enclosed eigenvalue group.

    Equals the mean of the m eigenvalues of A(t) = A₀ + tΔA inside Γ; unlike
    the individual eigenvalues it is analytic in t even through crossings.
    """
    A0 = _as_square(A0)
    At = A0 + t * np.asarray(dA)
    P = spectral_projector(At, centre, radius, n_points)
    m = int(round(np.real(np.trace(P))))
    if m == 0:
        raise ValueError(f"No eigenvalues of A({t}) enclosed by circle({centre}, {radius})")
    value = np.trace(At @ P) / m
    return float(np.real(value)) if abs(np.imag(value)) < EPS_CLOSE * max(1.0, abs(value)) else complex(value)
