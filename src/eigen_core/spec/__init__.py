"""Constants and tolerances for eigen_core."""

from .constants import (
    EPS_ZERO,
    EPS_CLOSE,
    DEGENERACY_TOL,
    DEFAULT_TOL,
    DEFAULT_MAXITER,
    DEFAULT_BLOCK_SIZE,
    DEFAULT_SEED,
    PROGRESS_FORMAT,
    DEFAULT_CONTOUR_POINTS,
    SHOWCASE_M12,
    SHOWCASE_M13,
    SHOWCASE_M14,
    SHOWCASE_M23,
)
