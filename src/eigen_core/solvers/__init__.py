"""Iterative diagonalisation algorithms and their shared result type."""

from .result import EigenResult

from .iterative import (
    ortho_qr,
    power_method,
    shift_invert_operator,
    inverse_power_method,
    rayleigh_quotient_iteration,
    preconditioned_gradient_descent,
    lopcg,
    subspace_iteration,
    projected_subspace_iteration,
    lobpcg,
    reference_lobpcg,
)
