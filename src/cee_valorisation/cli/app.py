# Copyright (c) 2025 Keshav
# Licensed under the GNU Affero General Public License v3.0
# See LICENSE file for details.
"""Main CLI application for cee-valorisation."""

from __future__ import annotations

import logging

import click
from pydantic import BaseModel, ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from cee_valorisation import __version__
from cee_valorisation.config import EngineConfig, load_config
from cee_valorisation.data.loader import Portfolio, load_portfolio
from cee_valorisation.data.models import ProjectPrimeResult
from cee_valorisation.engine.energy import aggregate_energy_by_category
from cee_valorisation.engine.prime import PrimeEngine
from cee_valorisation.reporting.terminal import TerminalRenderer


def _load_inputs(
    portfolio_path: str, config_path: str, console: Console
) -> tuple[Portfolio, EngineConfig]:
    """Load both input files, exiting with status 1 on any load error."""
    try:
        config = load_config(config_path)
        portfolio = load_portfolio(portfolio_path)
    except (FileNotFoundError, ValueError, ValidationError) as exc:
        console.print(f"[red]{escape(str(exc))}[/]")
        raise SystemExit(1)
    return portfolio, config


def _export_json(payload: BaseModel, path: str, console: Console) -> None:
    """Export to JSON."""
    with open(path, "w", encoding="utf-8") as f:
        f.write(payload.model_dump_json(indent=2))
    console.print(f"  [green]JSON report exported to:[/green] {path}")


class PrimeReport(BaseModel):
    projects: list[ProjectPrimeResult]


@click.group()
@click.version_option(version=__version__)
@click.option("--no-color", is_flag=True, help="Disable colored output")
@click.option("--verbose", "-v", is_flag=True, help="Log skipped lines and loader details")
@click.pass_context
def cli(ctx: click.Context, no_color: bool, verbose: bool) -> None:
    """cee-valorisation: CEE prime and energy savings calculator

    \b
    Reads a portfolio (catalog, projects, delegate) and an engine
    configuration, then computes:
      prime:  prime CEE per project and per product line
      energy: certified MWh cumac grouped by product category
    """
    ctx.ensure_object(dict)
    console = Console(no_color=no_color)
    ctx.obj["console"] = console
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
            force=True,
        )


@cli.command()
@click.argument("portfolio", type=click.Path())
@click.option(
    "--config", "-c", "config_path", type=click.Path(), required=True,
    help="Engine configuration YAML file",
)
@click.option("--project", "-p", "project_ids", multiple=True, help="Only these project ids")
@click.option("--show-skipped/--hide-skipped", default=True, help="List lines that were dropped")
@click.option(
    "--export-json", type=click.Path(), default=None,
    help="Export raw results as JSON at this path",
)
@click.pass_context
def prime(
    ctx: click.Context,
    portfolio: str,
    config_path: str,
    project_ids: tuple[str, ...],
    show_skipped: bool,
    export_json: str | None,
) -> None:
    """Compute the prime CEE of each project."""
    console: Console = ctx.obj["console"]
    data, config = _load_inputs(portfolio, config_path, console)

    projects = data.projects
    if project_ids:
        projects = [p for p in projects if p.id in project_ids]
        missing = sorted(set(project_ids) - {p.id for p in projects})
        if missing:
            console.print(f"[red]Unknown project id(s): {', '.join(missing)}[/]")
            raise SystemExit(1)

    engine = PrimeEngine(config, catalog=data.catalog())
    results = engine.compute_all(projects, data.delegate)

    renderer = TerminalRenderer(console)
    renderer.render_primes(results, data.delegate, show_skipped=show_skipped)

    if export_json:
        _export_json(PrimeReport(projects=results), export_json, console)


@cli.command()
@click.argument("portfolio", type=click.Path())
@click.option(
    "--config", "-c", "config_path", type=click.Path(), required=True,
    help="Engine configuration YAML file",
)
@click.option(
    "--status", "-s", "statuses", multiple=True,
    help="Only include projects with this status (repeatable)",
)
@click.option(
    "--export-json", type=click.Path(), default=None,
    help="Export raw results as JSON at this path",
)
@click.pass_context
def energy(
    ctx: click.Context,
    portfolio: str,
    config_path: str,
    statuses: tuple[str, ...],
    export_json: str | None,
) -> None:
    """Aggregate certified energy savings by product category."""
    console: Console = ctx.obj["console"]
    data, config = _load_inputs(portfolio, config_path, console)

    predicate = None
    if statuses:
        wanted = set(statuses)
        predicate = lambda project: project.status in wanted  # noqa: E731

    result = aggregate_energy_by_category(
        data.projects,
        config=config,
        should_include_project=predicate,
        catalog=data.catalog(),
    )

    renderer = TerminalRenderer(console)
    renderer.render_energy(result)

    if export_json:
        _export_json(result, export_json, console)
