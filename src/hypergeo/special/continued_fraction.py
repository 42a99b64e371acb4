"""Continued fraction evaluation via the modified Lentz algorithm."""

from __future__ import annotations

import logging
import math
from abc import ABC, abstractmethod

from ..core import ConvergenceError

logger = logging.getLogger(__name__)

DEFAULT_EPSILON = 1e-14
DEFAULT_MAX_ITERATIONS = 1_000_000

TINY = 1e-50


class ContinuedFraction(ABC):
    r"""Evaluate a generalized continued fraction.

    .. math::
        a_0 + \cfrac{b_1}{a_1 + \cfrac{b_2}{a_2 + \cdots}}

    Subclasses supply the coefficients through :meth:`get_a` and
    :meth:`get_b`.
    """

    @abstractmethod
    def get_a(self, n: int, x: float) -> float:
        """Return the n-th ``a`` coefficient."""

    @abstractmethod
    def get_b(self, n: int, x: float) -> float:
        """Return the n-th ``b`` coefficient."""

    def evaluate(
        self,
        x: float,
        epsilon: float = DEFAULT_EPSILON,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
    ) -> float:
        """Evaluate the fraction at ``x`` to relative accuracy ``epsilon``.

        Raises
        ------
        ConvergenceError
            If the partial value diverges to infinity or NaN, or if
            ``max_iterations`` terms do not reach ``epsilon``.
        """
        h_prev = self.get_a(0, x)
        if abs(h_prev) < TINY:
            h_prev = TINY

        d_prev = 0.0
        c_prev = h_prev
        h_n = h_prev
        n = 1
        while n < max_iterations:
            a = self.get_a(n, x)
            b = self.get_b(n, x)

            d_n = a + b * d_prev
            if abs(d_n) < TINY:
                d_n = TINY
            c_n = a + b / c_prev
            if abs(c_n) < TINY:
                c_n = TINY

            d_n = 1.0 / d_n
            delta_n = c_n * d_n
            h_n = h_prev * delta_n

            if math.isinf(h_n):
                logger.debug("Continued fraction diverged to infinity at x=%s (n=%d)", x, n)
                raise ConvergenceError(
                    f"Continued fraction diverged to infinity for value {x}.", iterations=n
                )
            if math.isnan(h_n):
                logger.debug("Continued fraction diverged to NaN at x=%s (n=%d)", x, n)
                raise ConvergenceError(
                    f"Continued fraction diverged to NaN for value {x}.", iterations=n
                )

            if abs(delta_n - 1.0) < epsilon:
                break

            d_prev = d_n
            c_prev = c_n
            h_prev = h_n
            n += 1

        if n >= max_iterations:
            raise ConvergenceError(
                f"Continued fraction failed to converge in {max_iterations} iterations "
                f"for value {x}.",
                iterations=n,
            )
        return h_n


__all__ = ["ContinuedFraction", "DEFAULT_EPSILON", "DEFAULT_MAX_ITERATIONS"]
