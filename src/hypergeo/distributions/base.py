"""Core distribution registry infrastructure."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from importlib import import_module, metadata
from pathlib import Path
from typing import Any, Literal

import numpy as np
import yaml

from ..rng import RandomSource
from .abstract import AbstractDistribution, IntegerDistribution, RealDistribution

Factory = Callable[..., AbstractDistribution]

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "hypergeo.distributions"


@dataclass(slots=True)
class DistributionFamily:
    """Describe a parameterised distribution family with metadata."""

    name: str
    kind: Literal["continuous", "discrete"]
    parameters: tuple[str, ...]
    factory: Factory
    bounds: dict[str, tuple[float | None, float | None]] | None = None
    notes: str | None = None

    def build(
        self,
        params: Mapping[str, float],
        *,
        random_source: RandomSource | np.random.Generator | int | None = None,
    ) -> AbstractDistribution:
        """Instantiate the family with named parameters."""
        missing = [name for name in self.parameters if name not in params]
        if missing:
            raise KeyError(f"Missing parameters for '{self.name}': {', '.join(missing)}.")
        kwargs = {name: params[name] for name in self.parameters}
        return self.factory(**kwargs, random_source=random_source)

    def pdf(self, x: np.ndarray, params: Mapping[str, float]) -> np.ndarray:
        """Vectorised density (continuous) or mass (discrete) function."""
        dist = self.build(params)
        arr = np.asarray(x, dtype=float)
        if isinstance(dist, RealDistribution):
            func = dist.density
        elif isinstance(dist, IntegerDistribution):
            func = dist.probability
        else:  # pragma: no cover - custom contract
            raise TypeError(f"Distribution '{self.name}' has no density or mass function.")
        return np.vectorize(func, otypes=[float])(arr)

    def cdf(self, x: np.ndarray, params: Mapping[str, float]) -> np.ndarray:
        """Vectorised cumulative distribution function."""
        dist = self.build(params)
        arr = np.asarray(x, dtype=float)
        return np.vectorize(dist.cumulative_probability, otypes=[float])(arr)


_REGISTRY: dict[str, DistributionFamily] = {}


def list_distributions() -> Iterable[str]:
    """Return registered distribution names."""
    return sorted(_REGISTRY.keys())


def get_distribution(name: str) -> DistributionFamily:
    """Retrieve a distribution family by name."""
    key = name.lower()
    if key not in _REGISTRY:
        raise KeyError(f"Unknown distribution '{name}'.")
    return _REGISTRY[key]


def register_distribution(family: DistributionFamily, *, overwrite: bool = False) -> None:
    """Register a distribution family in the global registry."""
    key = family.name.lower()
    if key in _REGISTRY and not overwrite:
        raise ValueError(f"Distribution '{family.name}' already registered.")
    _REGISTRY[key] = family
    logger.debug("Registered distribution family %s", family.name)


def clear_registry() -> None:
    """Reset the registry (primarily for testing)."""
    _REGISTRY.clear()


def _iter_distributions(candidate: Any) -> Iterable[DistributionFamily]:
    if isinstance(candidate, DistributionFamily):
        yield candidate
    elif isinstance(candidate, Mapping) and "name" in candidate and "factory" in candidate:
        factory = _load_object(candidate["factory"])
        raw_parameters = candidate.get("parameters", [])
        parameters = tuple(str(param) for param in raw_parameters)
        kind = str(candidate.get("kind", "continuous"))
        if kind not in ("continuous", "discrete"):
            raise ValueError(f"Unknown distribution kind '{kind}'.")
        yield DistributionFamily(
            name=str(candidate["name"]),
            kind=kind,  # type: ignore[arg-type]
            parameters=parameters,
            factory=factory,
            bounds=candidate.get("bounds"),
            notes=candidate.get("notes"),
        )
    elif isinstance(candidate, Iterable) and not isinstance(candidate, str | bytes):
        for item in candidate:
            yield from _iter_distributions(item)
    elif callable(candidate):
        result = candidate()
        yield from _iter_distributions(result)
    else:
        raise TypeError(
            "Unsupported distribution specification. Expected DistributionFamily, iterable of "
            "DistributionFamily instances, a callable returning them, or a mapping with "
            "name/factory keys."
        )


def _load_object(path: str) -> Any:
    module_name, _, attribute = path.partition(":")
    if not attribute:
        module_name, _, attribute = path.rpartition(".")
    if not module_name or not attribute:
        raise ValueError(f"Invalid import path '{path}'. Expected 'module:callable'.")
    module = import_module(module_name)
    try:
        return getattr(module, attribute)
    except AttributeError as exc:
        raise AttributeError(f"Module '{module_name}' has no attribute '{attribute}'.") from exc


def load_entry_points(group: str = ENTRY_POINT_GROUP) -> list[str]:
    """Discover third-party distribution families via entry points."""
    loaded: list[str] = []
    try:
        candidates: Iterable[Any] = metadata.entry_points().select(group=group)
    except Exception as exc:  # pragma: no cover - discovery failure
        logger.debug("Entry point discovery failed: %s", exc)
        return loaded

    for ep in candidates:
        try:
            obj = ep.load()
            for family in _iter_distributions(obj):
                register_distribution(family, overwrite=True)
                loaded.append(family.name)
        except Exception as exc:  # pragma: no cover - plugin failure
            logger.warning("Failed to load distribution entry point '%s': %s", ep.name, exc)
    return loaded


def load_yaml_config(path: str | os.PathLike[str]) -> list[str]:
    """Load additional distribution families from a YAML configuration file.

    The file holds a ``distributions`` list. Each item is either a mapping
    with ``name``, ``factory`` (an import path), ``kind`` and ``parameters``,
    or a ``callable`` import path (with optional ``args``/``kwargs``) that
    returns families.
    """
    path = Path(path)
    if not path.exists():
        logger.debug("Skipping distribution config %s (file not found)", path)
        return []

    try:
        data = yaml.safe_load(path.read_text()) or {}
    except Exception as exc:  # pragma: no cover - parse failure
        logger.warning("Failed to parse distribution config %s: %s", path, exc)
        return []

    registered: list[str] = []
    for item in data.get("distributions", []):
        try:
            if "callable" in item:
                factory = _load_object(item["callable"])
                args = item.get("args", [])
                kwargs = item.get("kwargs", {})
                for family in _iter_distributions(factory(*args, **kwargs)):
                    register_distribution(family, overwrite=item.get("overwrite", True))
                    registered.append(family.name)
            else:
                for family in _iter_distributions(item):
                    register_distribution(family, overwrite=item.get("overwrite", True))
                    registered.append(family.name)
        except Exception as exc:
            logger.warning(
                "Failed to register distribution from %s (entry=%s): %s",
                path,
                item,
                exc,
            )
    return registered


__all__ = [
    "DistributionFamily",
    "ENTRY_POINT_GROUP",
    "Factory",
    "list_distributions",
    "get_distribution",
    "register_distribution",
    "clear_registry",
    "load_entry_points",
    "load_yaml_config",
]
