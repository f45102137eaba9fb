"""
Global constants for eigen_core
===============================

All tolerances and default parameters in ONE place.
"""

# Numerical tolerances
EPS_ZERO = 1e-12       # For "is this zero?"
EPS_CLOSE = 1e-10      # For "are these equal?" (eigenvalue degeneracy, symmetry checks)

# Degeneracy threshold for non-degenerate perturbation theory.
# Two eigenvalues closer than this are treated as one eigenspace.
DEGENERACY_TOL = 1e-8

# =============================================================================
# ITERATIVE SOLVER DEFAULTS
# =============================================================================

DEFAULT_TOL = 1e-6       # Residual norm ‖Ax - λx‖ at which a solver stops
DEFAULT_MAXITER = 100    # Iteration cap for all solvers
DEFAULT_BLOCK_SIZE = 2   # Columns in the default starting block (subspace, LOBPCG)

# Default random seed (for reproducible starting vectors)
DEFAULT_SEED = 42

# Progress line printed per iteration when verbose=True:
#   iteration, current eigenvalue estimate, residual norm
PROGRESS_FORMAT = "%3i %8.4g %8.4g"

# =============================================================================
# CONTOUR QUADRATURE
# =============================================================================

# Trapezoidal nodes on a circle converge geometrically for analytic
# integrands, 64 nodes reach machine precision for well separated spectra.
DEFAULT_CONTOUR_POINTS = 64

# =============================================================================
# SHOWCASE MATRIX (perturbed 5x5 diagonal)
# =============================================================================
#
#   M = [ 1    m12  m13  m14  0    ]
#       [ m12  2    m23  0   -0.10 ]
#       [ m13  m23  3    0.1  0.05 ]
#       [ m14  0    0.1  4    0    ]
#       [ 0   -0.1  0.05 0    5    ]
#
# Couplings m12..m23 are the knobs of the error-bounds showcase.

SHOWCASE_M12 = 0.001
SHOWCASE_M13 = 0.1
SHOWCASE_M14 = 0.1
SHOWCASE_M23 = -0.05
