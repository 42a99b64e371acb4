"""Injectable uniform random sources for distribution sampling."""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from typing import Any, Protocol, runtime_checkable

import numpy as np

from .special import log_gamma


@runtime_checkable
class RandomSource(Protocol):
    """Stateful generator of independent draws.

    Sources are shared by reference and are not thread-safe; callers sharing
    one source across threads must serialise access.
    """

    def next_uniform(self) -> float:
        """Return a uniform draw in ``[0, 1)``."""
        ...

    def next_gaussian(self) -> float:
        """Return a standard normal draw."""
        ...


class UniformRandomSource(ABC):
    """Base class for sources that only produce uniforms.

    :meth:`next_gaussian` is derived from :meth:`next_uniform` with the
    Marsaglia polar method; the spare variate of each accepted pair is cached.
    """

    def __init__(self) -> None:
        self._spare: float | None = None

    @abstractmethod
    def next_uniform(self) -> float:
        """Return a uniform draw in ``[0, 1)``."""

    def next_gaussian(self) -> float:
        if self._spare is not None:
            value, self._spare = self._spare, None
            return value
        while True:
            u = 2.0 * self.next_uniform() - 1.0
            v = 2.0 * self.next_uniform() - 1.0
            s = u * u + v * v
            if 0.0 < s < 1.0:
                break
        factor = math.sqrt(-2.0 * math.log(s) / s)
        self._spare = v * factor
        return u * factor


class _UniformOnlySource(UniformRandomSource):
    """Wrap an object that only supplies ``next_uniform``."""

    def __init__(self, source: Any) -> None:
        super().__init__()
        self.source = source

    def next_uniform(self) -> float:
        return float(self.source.next_uniform())


class NumpyRandomSource:
    """Adapter exposing a :class:`numpy.random.Generator` as a random source."""

    __slots__ = ("generator",)

    def __init__(self, generator: np.random.Generator | None = None) -> None:
        self.generator = generator if generator is not None else np.random.default_rng()

    def next_uniform(self) -> float:
        return float(self.generator.random())

    def next_gaussian(self) -> float:
        return float(self.generator.standard_normal())

    def __repr__(self) -> str:
        return f"NumpyRandomSource({self.generator!r})"


def poisson_variate(source: RandomSource, mean: float) -> int:
    """Draw a Poisson variate with the given mean from ``source``.

    Small means use the multiplication method; means of 10 or more use
    Hoermann's transformed rejection with squeeze (PTRS).
    """
    if mean < 0 or math.isnan(mean):
        raise ValueError("Poisson mean must be non-negative.")
    if mean == 0:
        return 0
    if mean < 10:
        limit = math.exp(-mean)
        count = 0
        product = source.next_uniform()
        while product > limit:
            count += 1
            product *= source.next_uniform()
        return count

    slam = math.sqrt(mean)
    loglam = math.log(mean)
    b = 0.931 + 2.53 * slam
    a = -0.059 + 0.02483 * b
    invalpha = 1.1239 + 1.1328 / (b - 3.4)
    vr = 0.9277 - 3.6224 / (b - 2)
    while True:
        u = source.next_uniform() - 0.5
        v = source.next_uniform()
        us = 0.5 - abs(u)
        if us == 0.0:
            continue
        k = math.floor((2 * a / us + b) * u + mean + 0.43)
        if us >= 0.07 and v <= vr:
            return int(k)
        if k < 0 or (us < 0.013 and v > us):
            continue
        if v == 0.0 or (
            math.log(v) + math.log(invalpha) - math.log(a / (us * us) + b)
            <= -mean + k * loglam - log_gamma(k + 1.0)
        ):
            return int(k)


def as_random_source(
    source: RandomSource | np.random.Generator | int | None = None,
) -> RandomSource:
    """Coerce ``source`` into a :class:`RandomSource`.

    ``None`` creates a fresh, independently seeded generator for the caller;
    an int is used as a seed. Objects exposing only ``next_uniform`` get
    normal draws derived with the polar method.
    """
    if source is None or isinstance(source, int | np.integer):
        return NumpyRandomSource(np.random.default_rng(source))
    if isinstance(source, np.random.Generator):
        return NumpyRandomSource(source)
    if isinstance(source, RandomSource):
        return source
    if callable(getattr(source, "next_uniform", None)):
        return _UniformOnlySource(source)
    raise TypeError(
        "Unsupported random source. Expected an object with next_uniform(), a numpy Generator, "
        "an int seed, or None."
    )


__all__ = [
    "RandomSource",
    "UniformRandomSource",
    "NumpyRandomSource",
    "as_random_source",
    "poisson_variate",
]
