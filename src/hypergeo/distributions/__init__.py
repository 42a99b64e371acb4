"""Distribution contracts, registry and canonical implementations."""

from __future__ import annotations

import os

from .abstract import AbstractDistribution, IntegerDistribution, RealDistribution
from .base import (
    DistributionFamily,
    Factory,
    clear_registry,
    get_distribution,
    list_distributions,
    load_entry_points,
    load_yaml_config,
    register_distribution,
)
from .gamma import DEFAULT_INVERSE_ABSOLUTE_ACCURACY, GammaDistribution
from .pascal import PascalDistribution

__all__ = [
    "AbstractDistribution",
    "RealDistribution",
    "IntegerDistribution",
    "GammaDistribution",
    "PascalDistribution",
    "DEFAULT_INVERSE_ABSOLUTE_ACCURACY",
    "DistributionFamily",
    "Factory",
    "get_distribution",
    "list_distributions",
    "register_distribution",
    "clear_registry",
    "STANDARD_DISTRIBUTIONS",
]

CONFIG_ENV_VAR = "HYPERGEO_DISTRIBUTIONS"

STANDARD_DISTRIBUTIONS = [
    DistributionFamily(
        name="gamma",
        kind="continuous",
        parameters=("shape", "scale"),
        factory=GammaDistribution,
        bounds={"shape": (0.0, None), "scale": (0.0, None)},
        notes="Gamma distribution with shape/scale parameterisation.",
    ),
    DistributionFamily(
        name="pascal",
        kind="discrete",
        parameters=("successes", "probability"),
        factory=PascalDistribution,
        bounds={"successes": (0.0, None), "probability": (0.0, 1.0)},
        notes="Pascal (negative binomial): failures before the r-th success.",
    ),
]


def _register_builtin() -> None:
    for family in STANDARD_DISTRIBUTIONS:
        register_distribution(family, overwrite=True)


def _load_config_files() -> None:
    env_paths = os.environ.get(CONFIG_ENV_VAR)
    if env_paths:
        for item in env_paths.split(os.pathsep):
            load_yaml_config(item)


_register_builtin()
load_entry_points()
_load_config_files()
