import importlib
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import numpy as np
import pytest

import hypergeo.distributions as dist_module
from hypergeo.core import InvalidParameterError
from hypergeo.distributions import (
    STANDARD_DISTRIBUTIONS,
    DistributionFamily,
    GammaDistribution,
    PascalDistribution,
    clear_registry,
    get_distribution,
    list_distributions,
    register_distribution,
)
from hypergeo.distributions import base as base_registry


def _exponential(rate: float, *, random_source: Any = None) -> GammaDistribution:
    return GammaDistribution(1.0, 1.0 / rate, random_source=random_source)


def _exponential_families() -> list[DistributionFamily]:
    return [
        DistributionFamily(
            name="exponential_demo",
            kind="continuous",
            parameters=("rate",),
            factory=_exponential,
        )
    ]


def _reload_registry() -> None:
    """Reset the registry to the built-ins after tests."""
    clear_registry()
    importlib.reload(dist_module)


class _DummyEntryPoint:
    def __init__(self, name: str, obj: Any) -> None:
        self.name = name
        self._obj = obj

    def load(self) -> Any:
        return self._obj


def _make_entry_points(result: Iterable[_DummyEntryPoint]) -> Any:
    class _EntryPoints(list):
        def __init__(self, values: Iterable[_DummyEntryPoint]) -> None:
            super().__init__(values)

        def select(self, *, group: str) -> list[_DummyEntryPoint]:
            return list(self) if group == base_registry.ENTRY_POINT_GROUP else []

    return _EntryPoints(result)


def test_default_registry_contains_core_distributions() -> None:
    names = list(list_distributions())
    assert names == sorted(names)
    assert {"gamma", "pascal"} <= set(names)
    gamma = get_distribution("Gamma")
    assert gamma.parameters == ("shape", "scale")
    assert gamma.kind == "continuous"
    pascal = get_distribution("pascal")
    assert pascal.parameters == ("successes", "probability")
    assert pascal.kind == "discrete"


def test_standard_families_build_instances() -> None:
    for family in STANDARD_DISTRIBUTIONS:
        assert family.bounds is not None
        assert set(family.bounds) == set(family.parameters)
    gamma = get_distribution("gamma").build({"shape": 2.0, "scale": 3.0}, random_source=1)
    assert isinstance(gamma, GammaDistribution)
    assert gamma.scale == 3.0
    pascal = get_distribution("pascal").build({"successes": 3, "probability": 0.5})
    assert isinstance(pascal, PascalDistribution)


def test_build_reports_missing_and_invalid_parameters() -> None:
    family = get_distribution("gamma")
    with pytest.raises(KeyError, match="scale"):
        family.build({"shape": 2.0})
    with pytest.raises(InvalidParameterError):
        family.build({"shape": 2.0, "scale": -1.0})


def test_unknown_distribution_raises() -> None:
    with pytest.raises(KeyError, match="not-a-dist"):
        get_distribution("not-a-dist")


def test_vectorised_pdf_and_cdf() -> None:
    gamma = get_distribution("gamma")
    x = np.array([0.5, 1.0, 2.0])
    params = {"shape": 2.0, "scale": 1.0}
    assert np.allclose(gamma.pdf(x, params), x * np.exp(-x))
    assert np.allclose(gamma.cdf(x, params), 1.0 - np.exp(-x) * (1.0 + x))

    pascal = get_distribution("pascal")
    masses = pascal.pdf(np.array([0.0, 1.0, 2.0]), {"successes": 3, "probability": 0.5})
    assert np.allclose(masses, [0.125, 0.1875, 0.1875])


def test_duplicate_registration_rejected() -> None:
    family = get_distribution("gamma")
    with pytest.raises(ValueError):
        register_distribution(family)
    register_distribution(family, overwrite=True)


def test_entry_point_registration(monkeypatch: pytest.MonkeyPatch) -> None:
    clear_registry()

    monkeypatch.setattr(
        base_registry.metadata,
        "entry_points",
        lambda: _make_entry_points([_DummyEntryPoint("demo", _exponential_families)]),
    )

    loaded = base_registry.load_entry_points()
    assert loaded == ["exponential_demo"]
    assert "exponential_demo" in list_distributions()
    dist = get_distribution("exponential_demo")
    result = dist.pdf(np.array([0.0, 1.0]), {"rate": 2.0})
    assert np.allclose(result, [2.0, 2.0 * np.exp(-2.0)])

    monkeypatch.undo()
    _reload_registry()


def test_yaml_registration(tmp_path: Path) -> None:
    clear_registry()

    config_path = tmp_path / "custom.yaml"
    config_path.write_text(
        """
metadata:
  title: demo
distributions:
  - name: yaml_gamma
    kind: continuous
    parameters: ["shape", "scale"]
    factory: hypergeo.distributions.gamma:GammaDistribution
    notes: "YAML supplied distribution."
  - callable: tests.test_registry:_exponential_families
""",
        encoding="utf-8",
    )

    registered = base_registry.load_yaml_config(config_path)
    assert registered == ["yaml_gamma", "exponential_demo"]
    dist = get_distribution("yaml_gamma")
    assert dist.notes == "YAML supplied distribution."
    assert np.allclose(dist.cdf(np.array([0.0]), {"shape": 2.0, "scale": 1.0}), 0.0)

    _reload_registry()


def test_yaml_missing_file_is_skipped(tmp_path: Path) -> None:
    assert base_registry.load_yaml_config(tmp_path / "absent.yaml") == []


def test_yaml_invalid_kind_is_not_registered(tmp_path: Path) -> None:
    config_path = tmp_path / "bad.yaml"
    config_path.write_text(
        """
distributions:
  - name: broken
    kind: mixed
    parameters: ["shape"]
    factory: hypergeo.distributions.gamma:GammaDistribution
""",
        encoding="utf-8",
    )
    assert base_registry.load_yaml_config(config_path) == []
    assert "broken" not in list_distributions()


def test_environment_config_paths(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    config_path = tmp_path / "env.yaml"
    config_path.write_text(
        """
distributions:
  - callable: tests.test_registry:_exponential_families
""",
        encoding="utf-8",
    )
    monkeypatch.setenv(dist_module.CONFIG_ENV_VAR, str(config_path))
    dist_module._load_config_files()
    assert "exponential_demo" in list_distributions()

    monkeypatch.delenv(dist_module.CONFIG_ENV_VAR)
    _reload_registry()
    assert "exponential_demo" not in list_distributions()
