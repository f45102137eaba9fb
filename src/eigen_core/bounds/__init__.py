"""
A posteriori eigenvalue bounds.

Layering:
    gerschgorin - discs from matrix entries only
    residual    - bounds from approximate eigenpairs (Bauer-Fike, Kato-Temple)
"""

from .gerschgorin import (
    gerschgorin_discs,
    gerschgorin_clusters,
    gerschgorin_intervals,
    in_gerschgorin_union,
)

from .residual import (
    rayleigh_quotient,
    residual,
    residual_norm,
    bauer_fike_bound,
    kato_temple_interval,
    kato_temple_bound,
    eigenvector_angle_bound,
    naive_gap_estimates,
    gap_lower_bounds,
    ErrorBounds,
    compute_error_bounds,
    check_bounds,
)
