"""Special functions backing the distribution implementations."""

from __future__ import annotations

from .beta import log_beta, regularized_beta
from .continued_fraction import DEFAULT_EPSILON, DEFAULT_MAX_ITERATIONS, ContinuedFraction
from .gamma import LANCZOS_G, lanczos, log_gamma, regularized_gamma_p, regularized_gamma_q

__all__ = [
    "ContinuedFraction",
    "DEFAULT_EPSILON",
    "DEFAULT_MAX_ITERATIONS",
    "LANCZOS_G",
    "lanczos",
    "log_beta",
    "log_gamma",
    "regularized_beta",
    "regularized_gamma_p",
    "regularized_gamma_q",
]
