"""Gamma distribution with shape/scale parameterisation."""

from __future__ import annotations

import math
import sys

import numpy as np

from ..core import InvalidParameterError, Validated
from ..rng import RandomSource
from ..special import LANCZOS_G, lanczos, regularized_gamma_p
from .abstract import RealDistribution, require_positive

DEFAULT_INVERSE_ABSOLUTE_ACCURACY = 1e-9

LOG_MAX_VALUE = math.log(sys.float_info.max)


def _exp_or_inf(value: float) -> float:
    return math.inf if value >= LOG_MAX_VALUE else math.exp(value)


class GammaDistribution(RealDistribution):
    r"""Gamma distribution with shape :math:`k` and scale :math:`\theta`.

    .. math::
        f(x; k, \theta) = \frac{x^{k-1} e^{-x/\theta}}{\theta^k \Gamma(k)}, \quad x \geq 0

    The density is evaluated through the Lanczos representation of
    :math:`\Gamma(k)`. Constants guarding the overflow-prone region of the
    direct formula are computed once here; outside the safe window the density
    is evaluated in log space.

    Parameters
    ----------
    shape
        Shape parameter :math:`k > 0`.
    scale
        Scale parameter :math:`\theta > 0`.
    random_source
        Source of uniform/normal draws used by :meth:`sample`. ``None`` creates
        a fresh generator; an int is used as a seed.
    accuracy
        Absolute accuracy for inverse cumulative probability solvers.
    """

    name = "gamma"

    def __init__(
        self,
        shape: float,
        scale: float,
        *,
        random_source: RandomSource | np.random.Generator | int | None = None,
        accuracy: float = DEFAULT_INVERSE_ABSOLUTE_ACCURACY,
    ) -> None:
        self._shape = require_positive("shape", shape)
        self._scale = require_positive("scale", scale)
        self._solver_absolute_accuracy = require_positive("accuracy", accuracy)
        super().__init__(random_source)

        k = self._shape
        self._shifted_shape = k + LANCZOS_G + 0.5
        aux = math.e / (2.0 * math.pi * self._shifted_shape)
        self._density_prefactor2 = k * math.sqrt(aux) / lanczos(k)
        self._log_density_prefactor1 = (
            math.log(self._density_prefactor2)
            - math.log(self._scale)
            - k * math.log(self._shifted_shape)
            + k
            + LANCZOS_G
        )
        self._density_prefactor1 = _exp_or_inf(self._log_density_prefactor1)
        self._min_y = k + LANCZOS_G - LOG_MAX_VALUE
        self._max_log_y = math.inf if k == 1.0 else LOG_MAX_VALUE / (k - 1.0)

    @classmethod
    def validate(
        cls,
        shape: float,
        scale: float,
        *,
        random_source: RandomSource | np.random.Generator | int | None = None,
        accuracy: float = DEFAULT_INVERSE_ABSOLUTE_ACCURACY,
    ) -> Validated[GammaDistribution]:
        """Build a distribution, returning the validation error instead of raising."""
        try:
            return Validated(
                value=cls(shape, scale, random_source=random_source, accuracy=accuracy)
            )
        except InvalidParameterError as exc:
            return Validated(error=exc)

    @property
    def shape(self) -> float:
        return self._shape

    @property
    def scale(self) -> float:
        return self._scale

    @property
    def solver_absolute_accuracy(self) -> float:
        return self._solver_absolute_accuracy

    @property
    def parameters(self) -> dict[str, float]:
        return {"shape": self._shape, "scale": self._scale}

    @property
    def shifted_shape(self) -> float:
        """``shape + LANCZOS_G + 0.5``."""
        return self._shifted_shape

    @property
    def density_prefactor1(self) -> float:
        """Prefactor of the direct density formula, ``inf``/``0`` when out of range."""
        return self._density_prefactor1

    @property
    def density_prefactor2(self) -> float:
        """Prefactor of the log-space density formula."""
        return self._density_prefactor2

    @property
    def min_y(self) -> float:
        return self._min_y

    @property
    def max_log_y(self) -> float:
        return self._max_log_y

    def _log_space_exponent(self, y: float) -> float:
        # density is prefactor2 / x * exp(result) where the direct form would overflow
        s = self._shifted_shape
        aux1 = (y - s) / s
        log1p_aux1 = math.log1p(aux1) if aux1 > -1.0 else math.log(y) - math.log(s)
        aux2 = self._shape * (log1p_aux1 - aux1)
        return -y * (LANCZOS_G + 0.5) / s + LANCZOS_G + aux2

    def density(self, x: float) -> float:
        if x < 0 or math.isinf(x):
            return 0.0
        y = x / self._scale
        if math.isinf(y):
            return 0.0
        if y == 0:
            if self._shape < 1.0:
                return math.inf
            return self._density_prefactor1 if self._shape == 1.0 else 0.0
        if y <= self._min_y or math.log(y) >= self._max_log_y:
            return self._density_prefactor2 / x * math.exp(self._log_space_exponent(y))
        if self._density_prefactor1 == 0.0 or math.isinf(self._density_prefactor1):
            # prefactor out of float range, the product itself may still be representable
            return _exp_or_inf(self.log_density(x))
        return self._density_prefactor1 * math.exp(-y) * math.pow(y, self._shape - 1.0)

    def log_density(self, x: float) -> float:
        if x < 0 or math.isinf(x):
            return -math.inf
        y = x / self._scale
        if math.isinf(y):
            return -math.inf
        if y == 0:
            if self._shape < 1.0:
                return math.inf
            return self._log_density_prefactor1 if self._shape == 1.0 else -math.inf
        if y <= self._min_y or math.log(y) >= self._max_log_y:
            return (
                math.log(self._density_prefactor2) - math.log(x) + self._log_space_exponent(y)
            )
        return self._log_density_prefactor1 - y + math.log(y) * (self._shape - 1.0)

    def cumulative_probability(self, x: float) -> float:
        if x <= 0:
            return 0.0
        if math.isinf(x):
            return 1.0
        return regularized_gamma_p(self._shape, x / self._scale)

    def sample(self) -> float:
        """Draw a gamma variate.

        Uses Ahrens and Dieter's GS algorithm for ``shape < 1`` and Marsaglia
        and Tsang's squeeze method otherwise. Both loops run until acceptance.
        """
        source = self._random_source
        shape = self._shape

        if shape < 1.0:
            b_gs = 1.0 + shape / math.e
            while True:
                u = source.next_uniform()
                p = b_gs * u
                if p <= 1.0:
                    x = math.pow(p, 1.0 / shape)
                    u2 = source.next_uniform()
                    if u2 > math.exp(-x):
                        continue
                    return self._scale * x
                x = -math.log((b_gs - p) / shape)
                u2 = source.next_uniform()
                if u2 > math.pow(x, shape - 1.0):
                    continue
                return self._scale * x

        d = shape - 1.0 / 3.0
        c = 1.0 / (3.0 * math.sqrt(d))
        while True:
            x = source.next_gaussian()
            v = (1.0 + c * x) ** 3
            if v <= 0:
                continue
            x2 = x * x
            u = source.next_uniform()

            # squeeze
            if u < 1.0 - 0.0331 * x2 * x2:
                return self._scale * d * v
            # log(0) is -inf, which always accepts
            if u == 0.0 or math.log(u) < 0.5 * x2 + d * (1.0 - v + math.log(v)):
                return self._scale * d * v

    @property
    def numerical_mean(self) -> float:
        return self._shape * self._scale

    @property
    def numerical_variance(self) -> float:
        return self._shape * self._scale * self._scale

    @property
    def support_lower_bound(self) -> float:
        return 0.0

    @property
    def support_upper_bound(self) -> float:
        return math.inf

    @property
    def is_support_lower_bound_inclusive(self) -> bool:
        return True

    @property
    def is_support_upper_bound_inclusive(self) -> bool:
        return False


__all__ = ["DEFAULT_INVERSE_ABSOLUTE_ACCURACY", "GammaDistribution"]
