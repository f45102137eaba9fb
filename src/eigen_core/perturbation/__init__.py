"""Resolvents, Riesz projectors and analytic perturbation theory."""

from .resolvent import (
    resolvent,
    resolvent_norm,
    neumann_radius,
    resolvent_series,
    circle_contour,
    spectral_projector,
    eigenprojector,
    count_enclosed,
    analyticity_radius,
    contour_analyticity_radius,
    weighted_trace,
)

from .series import (
    first_order_correction,
    second_order_correction,
    PerturbationSeries,
    perturbation_series,
    first_order_bounds,
)
