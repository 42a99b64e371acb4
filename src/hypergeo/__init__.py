"""Top-level package exports for hypergeo."""

from __future__ import annotations

from importlib import metadata

__version__ = "0.1.0"

try:
    __version__ = metadata.version("hypergeo")
except metadata.PackageNotFoundError:  # pragma: no cover - local dev fallback
    pass

from . import core as core  # noqa: F401
from . import distributions as distributions  # noqa: F401
from . import special as special  # noqa: F401
from .core import (  # noqa: F401
    ConvergenceError,
    DistributionSummary,
    InvalidParameterError,
    Validated,
)
from .distributions import GammaDistribution, PascalDistribution  # noqa: F401
from .rng import NumpyRandomSource, RandomSource, UniformRandomSource  # noqa: F401

__all__ = [
    "__version__",
    "core",
    "distributions",
    "special",
    "ConvergenceError",
    "DistributionSummary",
    "InvalidParameterError",
    "Validated",
    "GammaDistribution",
    "PascalDistribution",
    "NumpyRandomSource",
    "RandomSource",
    "UniformRandomSource",
]
