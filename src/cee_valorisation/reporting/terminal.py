"""Rich terminal report renderer.

Composes Rich tables and panels into the user-facing output of the
``prime`` and ``energy`` commands.
"""

from __future__ import annotations

from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from cee_valorisation.data.models import (
    Delegate,
    EnergyAggregationResult,
    ProjectPrimeResult,
)


def format_eur(value: float) -> str:
    return f"{value:,.2f} €".replace(",", " ")


def format_mwh(value: float) -> str:
    return f"{value:,.2f} MWh".replace(",", " ")


class TerminalRenderer:
    """Renders valorisation results to the terminal using Rich."""

    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render_primes(
        self,
        results: list[ProjectPrimeResult],
        delegate: Delegate | None,
        show_skipped: bool = True,
    ) -> None:
        """Render one section per project, then the portfolio total."""
        self._render_header("PRIME CEE", delegate)
        for result in results:
            self._render_project(result, show_skipped)

        total = sum(r.total_prime for r in results if r.total_prime is not None)
        applicable = sum(1 for r in results if r.is_applicable)
        self.console.print()
        self.console.print(Rule(style="dim"))
        self.console.print(
            f"  [bold]TOTAL PRIME[/bold]: [green]{format_eur(total)}[/green] "
            f"[dim]({applicable}/{len(results)} projects valorised)[/dim]"
        )
        self.console.print()

    def render_energy(self, result: EnergyAggregationResult) -> None:
        """Render the MWh breakdown by category."""
        self._render_header("ENERGY SAVINGS", None)

        table = Table(show_header=True, header_style="bold", padding=(0, 1))
        table.add_column("Category", style="bold", min_width=20)
        table.add_column("MWh cumac", justify="right", min_width=12)
        table.add_column("Share", justify="right", width=7)

        for entry in result.breakdown:
            share = entry.mwh / result.total_mwh if result.total_mwh > 0 else 0.0
            table.add_row(entry.category, format_mwh(entry.mwh), f"{share:.0%}")

        self.console.print()
        self.console.print(table)
        self.console.print(
            f"\n  [bold]TOTAL ENERGY[/bold]: [green]{format_mwh(result.total_mwh)}[/green]"
        )
        self.console.print()

    # ------------------------------------------------------------------
    # Private rendering methods
    # ------------------------------------------------------------------

    def _render_header(self, title: str, delegate: Delegate | None) -> None:
        header_text = Text()
        header_text.append("CEE VALORISATION", style="bold cyan")
        header_text.append(" | ", style="dim")
        header_text.append(title, style="bold")
        if delegate is not None:
            header_text.append(" | ", style="dim")
            header_text.append(delegate.name or "Delegate")
            price = delegate.price_eur_per_mwh
            if price is not None:
                header_text.append(f" ({price:g} €/MWh)", style="dim")

        self.console.print()
        self.console.print(Panel(header_text))

    def _render_project(self, result: ProjectPrimeResult, show_skipped: bool) -> None:
        self.console.print()
        if result.total_prime is None:
            self.console.print(Rule(
                f"[bold]PROJECT {result.project_id}[/bold] - not applicable",
                style="yellow",
            ))
        else:
            self.console.print(Rule(
                f"[bold]PROJECT {result.project_id}[/bold] - {format_eur(result.total_prime)}",
                style="green",
            ))

        if result.products:
            table = Table(show_header=True, header_style="bold", padding=(0, 1))
            table.add_column("Code", style="bold", min_width=10)
            table.add_column("Product", min_width=20)
            table.add_column("Multiplier", justify="right", min_width=18)
            table.add_column("€ / unit", justify="right", min_width=10)
            table.add_column("Prime", justify="right", min_width=12)

            for line in result.products:
                unit = f" {line.multiplier_unit}" if line.multiplier_unit else ""
                table.add_row(
                    line.product_code or "-",
                    line.product_name or "-",
                    f"{line.multiplier_label}: {line.multiplier_value:g}{unit}",
                    format_eur(line.valorisation_base),
                    format_eur(line.total),
                )
            self.console.print(table)

        if show_skipped and result.skipped:
            self.console.print("  [bold]Skipped:[/bold]")
            for line in result.skipped:
                name = line.product_code or line.product_id or "?"
                self.console.print(f"    [dim]•[/dim] {name}: [yellow]{line.status.label}[/yellow]")
