"""Pascal (negative binomial) distribution."""

from __future__ import annotations

import math
import sys

import numpy as np

from ..core import InvalidParameterError, Validated
from ..rng import RandomSource, poisson_variate
from ..special import log_gamma, regularized_beta
from .abstract import IntegerDistribution, require_positive, require_probability
from .gamma import LOG_MAX_VALUE, GammaDistribution

LOG_MIN_VALUE = math.log(sys.float_info.min)


def _is_count(x: float) -> bool:
    return math.isfinite(x) and x == math.floor(x)


class PascalDistribution(IntegerDistribution):
    r"""Number of failures before the ``successes``-th success.

    .. math::
        P(X = x) = \binom{x + r - 1}{r - 1} p^r (1 - p)^x, \quad x = 0, 1, 2, \ldots

    ``successes`` may be any positive real, in which case the binomial
    coefficient is read through the gamma function.

    Parameters
    ----------
    successes
        Number of successes :math:`r > 0`.
    probability
        Probability of success :math:`p \in [0, 1]`.
    random_source
        Source of draws used by :meth:`sample`.
    """

    name = "pascal"

    def __init__(
        self,
        successes: float,
        probability: float,
        *,
        random_source: RandomSource | np.random.Generator | int | None = None,
    ) -> None:
        self._successes = require_positive("successes", successes)
        self._probability = require_probability("probability", probability)
        super().__init__(random_source)
        self._log_p = math.log(self._probability) if self._probability > 0 else -math.inf
        self._log1m_p = math.log1p(-self._probability) if self._probability < 1 else -math.inf

        self._mixing: GammaDistribution | None = None
        if 0.0 < self._probability < 1.0:
            mixing_scale = (1.0 - self._probability) / self._probability
            if math.isfinite(mixing_scale):
                self._mixing = GammaDistribution(
                    self._successes, mixing_scale, random_source=self._random_source
                )

    @classmethod
    def validate(
        cls,
        successes: float,
        probability: float,
        *,
        random_source: RandomSource | np.random.Generator | int | None = None,
    ) -> Validated[PascalDistribution]:
        """Build a distribution, returning the validation error instead of raising."""
        try:
            return Validated(value=cls(successes, probability, random_source=random_source))
        except InvalidParameterError as exc:
            return Validated(error=exc)

    @property
    def number_of_successes(self) -> float:
        return self._successes

    @property
    def probability_of_success(self) -> float:
        return self._probability

    @property
    def parameters(self) -> dict[str, float]:
        return {"successes": self._successes, "probability": self._probability}

    def _log_binomial(self, x: float) -> float:
        if x == 0:
            return 0.0
        r = self._successes
        return log_gamma(x + r) - log_gamma(r) - log_gamma(x + 1.0)

    def probability(self, x: float) -> float:
        if x < 0 or not _is_count(x):
            return 0.0
        p = self._probability
        if p == 0.0:
            return 0.0
        if p == 1.0:
            return 1.0 if x == 0 else 0.0

        log_coefficient = self._log_binomial(x)
        log_success = self._successes * self._log_p
        log_failure = x * self._log1m_p
        if (
            log_coefficient < LOG_MAX_VALUE
            and log_success > LOG_MIN_VALUE
            and log_failure > LOG_MIN_VALUE
        ):
            return (
                math.exp(log_coefficient)
                * math.pow(p, self._successes)
                * math.pow(1.0 - p, x)
            )
        return math.exp(log_coefficient + log_success + log_failure)

    def log_probability(self, x: float) -> float:
        if x < 0 or not _is_count(x):
            return -math.inf
        if self._probability == 1.0:
            return 0.0 if x == 0 else -math.inf
        if self._probability == 0.0:
            return -math.inf
        return self._log_binomial(x) + self._successes * self._log_p + x * self._log1m_p

    def cumulative_probability(self, x: float) -> float:
        if x < 0:
            return 0.0
        if math.isinf(x):
            return 1.0
        return regularized_beta(self._probability, self._successes, math.floor(x) + 1.0)

    def sample(self) -> float:
        """Draw a variate as a gamma-Poisson mixture.

        The Poisson rate is drawn from ``Gamma(r, (1 - p) / p)`` with the same
        random source. When ``p`` is 0, or so small that the rate scale
        overflows, no finite outcome exists and the upper support bound is
        returned.
        """
        if self._probability == 1.0:
            return 0
        if self._mixing is None:
            return math.inf
        rate = self._mixing.sample()
        return poisson_variate(self._random_source, rate)

    @property
    def numerical_mean(self) -> float:
        p = self._probability
        if p == 0.0:
            return math.inf
        return (self._successes * (1.0 - p)) / p

    @property
    def numerical_variance(self) -> float:
        p = self._probability
        if p == 0.0:
            return math.inf
        return self._successes * (1.0 - p) / (p * p)

    @property
    def support_lower_bound(self) -> float:
        return 0

    @property
    def support_upper_bound(self) -> float:
        return math.inf


__all__ = ["PascalDistribution"]
