"""Core dataclasses, errors and shared type aliases for hypergeo modules."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeAlias, TypeVar

import numpy as np
import pandas as pd

ArrayLike: TypeAlias = np.ndarray | Sequence[float]

T = TypeVar("T")


class InvalidParameterError(ValueError):
    """Raised when a distribution is constructed outside its parameter domain."""

    def __init__(self, parameter: str, value: Any, requirement: str) -> None:
        self.parameter = parameter
        self.value = value
        self.requirement = requirement
        super().__init__(f"Parameter '{parameter}' must be {requirement} (got {value!r}).")


class ConvergenceError(ArithmeticError):
    """Raised when a series or continued fraction fails to converge."""

    def __init__(self, message: str, *, iterations: int | None = None) -> None:
        self.iterations = iterations
        super().__init__(message)


@dataclass(slots=True, frozen=True)
class Validated(Generic[T]):
    """Outcome of a validating constructor: either a value or the error."""

    value: T | None = None
    error: InvalidParameterError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value or raise the stored error."""
        if self.error is not None:
            raise self.error
        if self.value is None:
            raise ValueError("Validated result holds neither a value nor an error.")
        return self.value


@dataclass(slots=True)
class DistributionSummary:
    """Moments and support description of a distribution instance."""

    distribution: str
    parameters: dict[str, float]
    mean: float
    variance: float
    support: tuple[float, float]
    inclusive: tuple[bool, bool]
    connected: bool = True
    notes: dict[str, Any] = field(default_factory=dict)

    def to_frame(self) -> pd.DataFrame:
        """Return a one-row data frame of the summary."""
        record: dict[str, Any] = {"distribution": self.distribution}
        record.update(self.parameters)
        record.update(
            {
                "mean": self.mean,
                "variance": self.variance,
                "lower": self.support[0],
                "upper": self.support[1],
                "lower_inclusive": self.inclusive[0],
                "upper_inclusive": self.inclusive[1],
                "connected": self.connected,
            }
        )
        return pd.DataFrame.from_records([record])


__all__ = [
    "ArrayLike",
    "InvalidParameterError",
    "ConvergenceError",
    "Validated",
    "DistributionSummary",
]
