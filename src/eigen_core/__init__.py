"""
EIGEN_CORE - A posteriori error control for matrix eigenproblems
=================================================================

NO plotting. NO discretisation of continuous operators (see periodic/).

Structure:
    builders/      - Demo matrices (perturbed diagonal, block test problems)
    bounds/        - Gerschgorin discs, Bauer-Fike, Kato-Temple, gap estimates
    solvers/       - Iterative diagonalisation (power method ... LOBPCG)
    perturbation/  - Resolvent, spectral projectors, perturbation series
    floating/      - Floating-point error analysis, compensated arithmetic
    spec/          - Constants and tolerances

Requirements:
    Python >= 3.9
    numpy >= 1.22
    scipy >= 1.11
"""

import sys

if sys.version_info < (3, 9):
    raise ImportError(f"eigen_core requires Python >= 3.9, got {sys.version}")

import numpy as np
_numpy_version = tuple(int(p) for p in np.__version__.split('.')[:2] if p.isdigit())
if _numpy_version < (1, 22):
    raise ImportError(f"eigen_core requires numpy >= 1.22, got {np.__version__}")

# scipy >= 1.11 for the maxiter/retResidualNormsHistory behaviour of lobpcg
import scipy
_scipy_version = tuple(int(p) for p in scipy.__version__.split('.')[:2] if p.isdigit())
if _scipy_version < (1, 11):
    raise ImportError(f"eigen_core requires scipy >= 1.11, got {scipy.__version__}")

from . import spec
from . import builders
from . import bounds
from . import solvers
from . import perturbation
from . import floating
