"""
Galerkin Discretisation in a Dirichlet Box
==========================================

H = -½Δ + V on (0, π) with Dirichlet boundary conditions, discretised in
the orthonormal sine basis

    e_n(x) = sqrt(2/π) sin(nx),   -½Δ e_n = n²/2 e_n

so that

    H_ij = δ_ij j²/2 + ∫₀^π e_i(x) V(x) e_j(x) dx

The basis is nested (span{e_1..e_n} ⊂ span{e_1..e_{n+1}}), hence by the
Courant-Fischer min-max principle each Galerkin eigenvalue λ_k(n) is an
upper bound to the exact λ_k and decreases monotonically in n.

Oct 2026
"""

import numpy as np
from scipy.integrate import quad
from typing import Callable, Iterable

from .constants import (
    GAUSSIAN_WELL_DEPTH,
    GAUSSIAN_WELL_WIDTH,
    GAUSSIAN_WELL_CENTRE,
    BOX_LENGTH,
    QUAD_ATOL,
    QUAD_LIMIT,
)


def gaussian_well(x, depth: float = GAUSSIAN_WELL_DEPTH,
                  sigma: float = GAUSSIAN_WELL_WIDTH):
    """V(x) = depth · exp(-((x - π/2)/σ)²)."""
    return depth * np.exp(-((x - GAUSSIAN_WELL_CENTRE) / sigma) ** 2)


def basis(x, n: int):
    """e_n(x) = sqrt(2/π) sin(nx)."""
    return np.sqrt(2 / np.pi) * np.sin(n * x)


def matrix_element(i: int, j: int, V: Callable = gaussian_well) -> float:
    """
    ⟨e_i, H e_j⟩ for the 1-based basis indices i, j.

    The kinetic part is exact, the potential part uses adaptive quadrature.
    """
    if i < 1 or j < 1:
        raise ValueError(f"Basis indices start at 1, got ({i}, {j})")
    potential, _ = quad(lambda x: basis(x, i) * V(x) * basis(x, j),
                        0, BOX_LENGTH, epsabs=QUAD_ATOL, limit=QUAD_LIMIT)
    kinetic = j ** 2 / 2 if i == j else 0.0
    return kinetic + potential


def build_galerkin_matrix(n: int, V: Callable = gaussian_well) -> np.ndarray:
    """
    (n, n) Galerkin matrix of -½Δ + V in span{e_1, ..., e_n}.

    Only the upper triangle is integrated; the result is symmetric.
    """
    if n < 1:
        raise ValueError(f"Basis size must be >= 1, got {n}")
    H = np.zeros((n, n))
    for i in range(1, n + 1):
        for j in range(i, n + 1):
            H[i - 1, j - 1] = matrix_element(i, j, V)
            H[j - 1, i - 1] = H[i - 1, j - 1]
    return H


def eigenvalues_vs_basis_size(n_range: Iterable[int], V: Callable = gaussian_well) -> np.ndarray:
    """
    Galerkin eigenvalues for each basis size in n_range.

    Since the basis is nested, the matrix for the largest size is built
    once and its leading principal blocks are diagonalised.

    Returns:
        (max(n_range), len(n_range)) array; column c holds the n_range[c]
        ascending eigenvalues, padded with NaN
    """
    n_range = list(n_range)
    if not n_range:
        raise ValueError("n_range must not be empty")
    n_max = max(n_range)
    H = build_galerkin_matrix(n_max, V)

    table = np.full((n_max, len(n_range)), np.nan)
    for c, n in enumerate(n_range):
        table[:n, c] = np.linalg.eigvalsh(H[:n, :n])
    return table
