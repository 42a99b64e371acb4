"""Typer-based CLI entry point."""

from __future__ import annotations

import logging
import math
import numbers
from typing import Any

import numpy as np
import typer
from rich.console import Console
from rich.table import Table

from . import __version__
from .core import ConvergenceError, InvalidParameterError
from .distributions import AbstractDistribution, get_distribution, list_distributions
from .sampling import sample_summary, tabulate

app = typer.Typer(help="Hypergeo probability distribution CLI.")
console = Console()

NAME_ARGUMENT = typer.Argument(..., help="Registered distribution name (see `registry`).")
PARAM_OPTION = typer.Option(
    None,
    "--param",
    "-p",
    help="Distribution parameter as name=value (repeat for multiples).",
    show_default=False,
)
POINTS_ARGUMENT = typer.Argument(..., help="Points at which to evaluate the distribution.")
SIZE_OPTION = typer.Option(1000, "--size", "-n", help="Number of draws.", show_default=True)
SEED_OPTION = typer.Option(None, "--seed", help="Seed for the random source.", show_default=False)

VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Enable verbose output.")
VERSION_OPTION = typer.Option(False, "--version", help="Show version and exit.")


def _format_metric(value: Any) -> str:
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, numbers.Real):
        value = float(value)
        if math.isnan(value):
            return "-"
        if math.isinf(value):
            return "inf" if value > 0 else "-inf"
        return f"{value:.6g}"
    return str(value) if value is not None else "-"


def _parse_params(raw: list[str] | None) -> dict[str, float]:
    params: dict[str, float] = {}
    for item in raw or []:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected name=value, got '{item}'.")
        try:
            params[key.strip()] = float(value)
        except ValueError as exc:
            raise typer.BadParameter(f"Parameter '{key}' is not a number: '{value}'.") from exc
    return params


def _build(
    name: str, raw_params: list[str] | None, seed: int | None = None
) -> AbstractDistribution:
    params = _parse_params(raw_params)
    try:
        return get_distribution(name).build(params, random_source=seed)
    except (KeyError, InvalidParameterError) as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc


@app.callback(invoke_without_command=True)
def cli_callback(  # noqa: B008
    ctx: typer.Context,
    verbose: bool = VERBOSE_OPTION,
    version: bool = VERSION_OPTION,
) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG)
    if verbose or version:
        console.print(f"[bold green]hypergeo {__version__}[/bold green]")
    if ctx.invoked_subcommand is None and not ctx.resilient_parsing:
        raise typer.Exit()


@app.command()
def registry() -> None:
    """List registered distributions."""
    table = Table(title="Registered Distributions")
    table.add_column("Name")
    table.add_column("Kind")
    table.add_column("Parameters")
    table.add_column("Description", overflow="fold")
    for name in list_distributions():
        family = get_distribution(name)
        params = ", ".join(family.parameters)
        notes = family.notes or ""
        table.add_row(family.name, family.kind, params, notes)
    console.print(table)


@app.command()
def describe(  # noqa: B008
    name: str = NAME_ARGUMENT,
    params: list[str] | None = PARAM_OPTION,
) -> None:
    """Show moments and support of a distribution."""
    dist = _build(name, params)
    summary = dist.summary()
    table = Table(title=f"{summary.distribution} summary")
    table.add_column("Property", no_wrap=True)
    table.add_column("Value", justify="right", no_wrap=True)
    for key, value in summary.parameters.items():
        table.add_row(key, _format_metric(value))
    table.add_row("Mean", _format_metric(summary.mean))
    table.add_row("Variance", _format_metric(summary.variance))
    lower_bracket = "[" if summary.inclusive[0] else "("
    upper_bracket = "]" if summary.inclusive[1] else ")"
    table.add_row(
        "Support",
        f"{lower_bracket}{_format_metric(summary.support[0])}, "
        f"{_format_metric(summary.support[1])}{upper_bracket}",
    )
    table.add_row("Connected", _format_metric(summary.connected))
    console.print(table)


@app.command()
def evaluate(  # noqa: B008
    name: str = NAME_ARGUMENT,
    points: list[float] = POINTS_ARGUMENT,
    params: list[str] | None = PARAM_OPTION,
) -> None:
    """Evaluate density (or mass) and CDF at the given points."""
    dist = _build(name, params)
    try:
        frame = tabulate(dist, np.asarray(points, dtype=float))
    except ConvergenceError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc
    table = Table(title=f"{dist.name} evaluation", expand=True)
    for column in frame.columns:
        table.add_column(str(column), justify="right", no_wrap=True)
    for row in frame.itertuples(index=False):
        table.add_row(*(_format_metric(value) for value in row))
    console.print(table)


@app.command()
def sample(  # noqa: B008
    name: str = NAME_ARGUMENT,
    params: list[str] | None = PARAM_OPTION,
    size: int = SIZE_OPTION,
    seed: int | None = SEED_OPTION,
) -> None:
    """Draw samples and compare empirical moments with the exact ones."""
    if size < 1:
        console.print("[red]--size must be at least 1.[/red]")
        raise typer.Exit(code=1)
    dist = _build(name, params, seed)
    draws = dist.samples(size)
    frame = sample_summary(draws, dist)
    table = Table(title=f"{dist.name} sample (n={size})", expand=True)
    table.add_column("Statistic", no_wrap=True)
    table.add_column("Empirical", justify="right", no_wrap=True)
    table.add_column("Expected", justify="right", no_wrap=True)
    for row in frame.itertuples(index=False):
        table.add_row(row.statistic, _format_metric(row.empirical), _format_metric(row.expected))
    console.print(table)


def main_entry() -> None:
    app()
