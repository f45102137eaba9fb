"""
Gerschgorin Circles
===================

Every eigenvalue of A ∈ ℂⁿˣⁿ lies in the union of the discs

    D_i = { z : |z - a_ii| ≤ Σ_{j≠i} |a_ij| }

and every connected component made of k discs contains exactly k
eigenvalues (counted with multiplicity). Since σ(A) = σ(Aᵀ), the column
sums give an equally valid set of discs.

No eigenvector information is needed, which makes these the crudest
but cheapest a posteriori bounds: for a nearly diagonal matrix the
diagonal IS the approximate spectrum and the radii are the error.
"""

import numpy as np
from collections import deque
from typing import List, Tuple


def _as_square(A) -> np.ndarray:
    A = np.asarray(A)
    if A.ndim != 2 or A.shape[0] != A.shape[1]:
        raise ValueError(f"Expected a square matrix, got shape {A.shape}")
    return A


def gerschgorin_discs(A, axis: str = "rows") -> Tuple[np.ndarray, np.ndarray]:
    """
    Centres and radii of the Gerschgorin discs.

    Args:
        A: (n, n) matrix
        axis: "rows" (sum over each row) or "columns"

    Returns:
        centres: (n,) diagonal of A
        radii: (n,) off-diagonal absolute sums
    """
    A = _as_square(A)
    if axis not in ("rows", "columns"):
        raise ValueError(f"axis must be 'rows' or 'columns', got {axis!r}")

    absA = np.abs(A)
    sum_axis = 1 if axis == "rows" else 0
    radii = absA.sum(axis=sum_axis) - np.diag(absA)
    return np.diag(A).copy(), radii


def gerschgorin_clusters(centres: np.ndarray, radii: np.ndarray) -> List[List[int]]:
    """
    Group discs into connected components of their union (BFS).

    Two discs touch when |c_i - c_j| ≤ r_i + r_j. Components are returned
    sorted by the real part of their left-most centre; each holds exactly
    len(component) eigenvalues.
    """
    centres = np.asarray(centres)
    radii = np.asarray(radii, dtype=float)
    n = len(centres)

    # Adjacency list of touching discs
    adj = [[] for _ in range(n)]
    for i in range(n):
        for j in range(i + 1, n):
            if abs(centres[i] - centres[j]) <= radii[i] + radii[j]:
                adj[i].append(j)
                adj[j].append(i)

    visited = [False] * n
    clusters = []
    for start in range(n):
        if visited[start]:
            continue
        queue = deque([start])
        visited[start] = True
        component = []
        while queue:
            i = queue.popleft()
            component.append(i)
            for neighbor in adj[i]:
                if not visited[neighbor]:
                    visited[neighbor] = True
                    queue.append(neighbor)
        clusters.append(sorted(component))

    clusters.sort(key=lambda g: min(np.real(centres[i]) for i in g))
    return clusters


def in_gerschgorin_union(A, z: complex, axis: str = "rows") -> bool:
    """True if z lies in at least one Gerschgorin disc of A."""
    centres, radii = gerschgorin_discs(A, axis=axis)
    return bool(np.any(np.abs(z - centres) <= radii))


def gerschgorin_intervals(A) -> np.ndarray:
    """
    Real intervals [c_i - r_i, c_i + r_i] for a Hermitian matrix.

    For Hermitian A the spectrum is real, so each disc reduces to an interval.

    Returns:
        intervals: (n, 2) array of [lower, upper]
    """
    A = _as_square(A)
    if not np.allclose(A, A.conj().T):
        raise ValueError("gerschgorin_intervals requires a Hermitian matrix")
    centres, radii = gerschgorin_discs(A)
    centres = np.real(centres)
    return np.column_stack([centres - radii, centres + radii])
