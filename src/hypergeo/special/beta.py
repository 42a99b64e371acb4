"""Beta function primitives: log-beta and the regularized incomplete beta."""

from __future__ import annotations

import math

from .continued_fraction import DEFAULT_EPSILON, DEFAULT_MAX_ITERATIONS, ContinuedFraction
from .gamma import log_gamma


def log_beta(a: float, b: float) -> float:
    """Natural logarithm of the complete beta function, NaN for invalid input."""
    if math.isnan(a) or math.isnan(b) or a <= 0.0 or b <= 0.0:
        return math.nan
    return log_gamma(a) + log_gamma(b) - log_gamma(a + b)


class _BetaFraction(ContinuedFraction):
    def __init__(self, a: float, b: float) -> None:
        self.a = a
        self.b = b

    def get_a(self, n: int, x: float) -> float:
        return 1.0

    def get_b(self, n: int, x: float) -> float:
        a, b = self.a, self.b
        if n % 2 == 0:
            m = n / 2.0
            return (m * (b - m) * x) / ((a + (2 * m) - 1) * (a + (2 * m)))
        m = (n - 1.0) / 2.0
        return -((a + m) * (a + b + m) * x) / ((a + (2 * m)) * (a + (2 * m) + 1.0))


def regularized_beta(
    x: float,
    a: float,
    b: float,
    epsilon: float = DEFAULT_EPSILON,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
) -> float:
    r"""Regularized incomplete beta function :math:`I_x(a, b)`.

    Evaluated with a continued fraction; when ``x`` lies past the mean of the
    corresponding beta distribution the symmetry
    :math:`I_x(a, b) = 1 - I_{1-x}(b, a)` is used instead.

    Returns NaN when ``x`` is outside ``[0, 1]`` or ``a``/``b`` are not
    positive. Raises :class:`~hypergeo.core.ConvergenceError` when the
    continued fraction fails.
    """
    if (
        math.isnan(x)
        or math.isnan(a)
        or math.isnan(b)
        or x < 0.0
        or x > 1.0
        or a <= 0.0
        or b <= 0.0
    ):
        return math.nan
    if x == 0.0:
        return 0.0
    if x == 1.0:
        return 1.0
    if x > (a + 1.0) / (2.0 + b + a) and 1.0 - x <= (b + 1.0) / (2.0 + b + a):
        return 1.0 - regularized_beta(1.0 - x, b, a, epsilon, max_iterations)

    fraction = _BetaFraction(a, b)
    prefix = math.exp(
        (a * math.log(x)) + (b * math.log1p(-x)) - math.log(a) - log_beta(a, b)
    )
    return prefix * 1.0 / fraction.evaluate(x, epsilon, max_iterations)


__all__ = ["log_beta", "regularized_beta"]
