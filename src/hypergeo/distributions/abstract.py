"""Abstract contracts shared by continuous and discrete distributions."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Any

import numpy as np

from ..core import DistributionSummary, InvalidParameterError
from ..rng import RandomSource, as_random_source


def _require(condition: bool, parameter: str, value: Any, requirement: str) -> None:
    if not condition:
        raise InvalidParameterError(parameter, value, requirement)


def require_positive(parameter: str, value: float) -> float:
    """Validate a strictly positive finite parameter and return it as float."""
    _require(
        isinstance(value, int | float | np.number) and math.isfinite(value) and value > 0,
        parameter,
        value,
        "strictly positive",
    )
    return float(value)


def require_probability(parameter: str, value: float) -> float:
    """Validate a probability in ``[0, 1]`` and return it as float."""
    _require(
        isinstance(value, int | float | np.number) and 0.0 <= value <= 1.0,
        parameter,
        value,
        "within [0, 1]",
    )
    return float(value)


class AbstractDistribution(ABC):
    """Operations every distribution provides.

    Parameters are fixed at construction; the only mutable state reachable
    from an instance is its random source, which :meth:`sample` advances.
    """

    name: str = "distribution"

    def __init__(
        self, random_source: RandomSource | np.random.Generator | int | None = None
    ) -> None:
        self._random_source = as_random_source(random_source)

    @property
    def random_source(self) -> RandomSource:
        return self._random_source

    @property
    @abstractmethod
    def parameters(self) -> dict[str, float]:
        """Named parameter values of this instance."""

    @abstractmethod
    def cumulative_probability(self, x: float) -> float:
        """Return :math:`P(X \\leq x)`."""

    @abstractmethod
    def sample(self) -> float:
        """Draw one value, advancing the random source."""

    def samples(self, size: int) -> np.ndarray:
        """Draw ``size`` independent values."""
        if size < 0:
            raise ValueError("Sample size must be non-negative.")
        return np.array([self.sample() for _ in range(size)], dtype=float)

    @property
    @abstractmethod
    def numerical_mean(self) -> float: ...

    @property
    @abstractmethod
    def numerical_variance(self) -> float: ...

    @property
    @abstractmethod
    def support_lower_bound(self) -> float: ...

    @property
    @abstractmethod
    def support_upper_bound(self) -> float: ...

    @property
    @abstractmethod
    def is_support_lower_bound_inclusive(self) -> bool: ...

    @property
    @abstractmethod
    def is_support_upper_bound_inclusive(self) -> bool: ...

    @property
    def is_support_connected(self) -> bool:
        return True

    def summary(self) -> DistributionSummary:
        """Collect moments and support into a :class:`DistributionSummary`."""
        return DistributionSummary(
            distribution=self.name,
            parameters=self.parameters,
            mean=self.numerical_mean,
            variance=self.numerical_variance,
            support=(self.support_lower_bound, self.support_upper_bound),
            inclusive=(
                self.is_support_lower_bound_inclusive,
                self.is_support_upper_bound_inclusive,
            ),
            connected=self.is_support_connected,
        )

    def __repr__(self) -> str:
        params = ", ".join(f"{key}={value!r}" for key, value in self.parameters.items())
        return f"{type(self).__name__}({params})"


class RealDistribution(AbstractDistribution):
    """Continuous distribution over the reals."""

    @abstractmethod
    def density(self, x: float) -> float:
        """Probability density at ``x``."""

    def log_density(self, x: float) -> float:
        value = self.density(x)
        return math.log(value) if value > 0 else -math.inf

    def probability(self, x0: float, x1: float) -> float:
        """Return :math:`P(x_0 < X \\leq x_1)`."""
        if x0 > x1:
            raise ValueError(f"Lower bound {x0} exceeds upper bound {x1}.")
        return self.cumulative_probability(x1) - self.cumulative_probability(x0)


class IntegerDistribution(AbstractDistribution):
    """Discrete distribution over the integers."""

    @abstractmethod
    def probability(self, x: float) -> float:
        """Probability mass at ``x``."""

    def log_probability(self, x: float) -> float:
        value = self.probability(x)
        return math.log(value) if value > 0 else -math.inf

    def interval_probability(self, x0: float, x1: float) -> float:
        """Return :math:`P(x_0 < X \\leq x_1)`."""
        if x0 > x1:
            raise ValueError(f"Lower bound {x0} exceeds upper bound {x1}.")
        return self.cumulative_probability(x1) - self.cumulative_probability(x0)

    @property
    def is_support_upper_bound_inclusive(self) -> bool:
        return True

    @property
    def is_support_lower_bound_inclusive(self) -> bool:
        return True


__all__ = [
    "AbstractDistribution",
    "RealDistribution",
    "IntegerDistribution",
    "require_positive",
    "require_probability",
]
