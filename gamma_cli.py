"""
Gamma Seed CLI Harness

Click-based driver for the gamma simulator. Subcommands:
  - run:   Initialize a system, run N cycles, print stage and dimension readout
  - grow:  Run N cycles, then apply the growth transform to a complex input
  - model: Print recurrence constants, stage thresholds and link table

Exit codes:
  - 0: success
  - 2: fatal error (invariant violation, bad input)
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from receipts import StopRule, dumps_json, write_receipt_jsonl
from gamma_sim import (
    GammaConfig,
    HISTORY_LIMIT,
    MAX_STAGE,
    apply_growth,
    export_model_details,
    export_to_json,
    run_simulation,
    start_gamma_system,
)
from gamma_sim.measurement import measure_dimensions

console = Console()


def print_success(message: str) -> None:
    """Print a success message with green checkmark."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message with red X."""
    console.print(f"[red]✗[/red] {message}")


def _format_complex(value: complex) -> str:
    return f"{value.real:+.6e} {value.imag:+.6e}j"


def _make_stage_bar(stage: int, width: int = MAX_STAGE) -> str:
    """Create a visual stage progress bar."""
    return "█" * stage + "░" * (width - stage)


# --- Click CLI Group ---

@click.group()
def cli():
    """Gamma seed simulator: seed recurrence, stage machine, dimension graph."""
    pass


# --- run ---

@cli.command("run")
@click.option("--cycles", "-n", default=100, show_default=True, type=click.IntRange(min=0),
              help="Evolution cycles to run")
@click.option("--receipts", "-r", "receipts_path", type=click.Path(), help="Write receipts as JSONL")
@click.option("--history", default=HISTORY_LIMIT, show_default=True, type=click.IntRange(min=0),
              help="Receipts and trace entries to retain (0 keeps all)")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich")
def run_cmd(cycles: int, receipts_path: Optional[str], history: int, output: str) -> None:
    """Run the simulator and print the per-dimension readout."""
    config = GammaConfig(n_cycles=cycles, scenario_name="CLI", history_limit=history or None)

    try:
        result = run_simulation(config)
    except StopRule as e:
        if output == "json":
            click.echo(json.dumps({"error": str(e)}))
        else:
            print_error(f"Simulation stopped: {e}")
        sys.exit(2)

    system = result.final_system

    if receipts_path:
        path = Path(receipts_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w") as fh:
            for receipt in system.receipt_ledger:
                write_receipt_jsonl(receipt, fh)

    if output == "json":
        click.echo(export_to_json(result))
        return

    stats = result.statistics
    content = (
        f"stage:            {stats['final_stage']}/{MAX_STAGE} {_make_stage_bar(stats['final_stage'])}\n"
        f"accumulated_time: {stats['accumulated_time']:.6f}\n"
        f"coherence:        {stats['coherence']:.6f}\n"
        f"transitions:      {stats['stage_transitions']}\n"
        f"non_finite:       {stats['non_finite_cycles']}"
    )
    console.print(Panel(content, title=f"[bold]Gamma system after {cycles} cycles[/bold]",
                        border_style="green"))

    table = Table(title="Dimensions")
    table.add_column("Index", justify="right")
    table.add_column("Field value")
    table.add_column("|psi|", justify="right")
    table.add_column("Links")
    for row in measure_dimensions(system):
        table.add_row(
            str(row["index"]),
            _format_complex(row["field_value"]),
            f"{row['magnitude']:.6e}",
            ",".join(str(link) for link in row["links"]) or "-",
        )
    console.print(table)

    if receipts_path:
        print_success(f"Receipts: {receipts_path} ({len(system.receipt_ledger)} lines)")


# --- grow ---

@cli.command("grow")
@click.option("--real", "real_part", default=1.0, show_default=True, type=float)
@click.option("--imag", "imag_part", default=0.0, show_default=True, type=float)
@click.option("--cycles", "-n", default=100, show_default=True, type=click.IntRange(min=0))
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich")
def grow_cmd(real_part: float, imag_part: float, cycles: int, output: str) -> None:
    """Apply the growth transform after N cycles."""
    system = start_gamma_system(cycles, history_limit=0)
    value = complex(real_part, imag_part)
    grown = apply_growth(system.seed, value)

    if output == "json":
        click.echo(dumps_json({
            "cycles": cycles,
            "input": value,
            "output": grown,
            "stage": system.seed.stage,
            "accumulated_time": system.seed.accumulated_time
        }))
        return

    console.print(f"input:  {_format_complex(value)}")
    console.print(f"output: {_format_complex(grown)}")
    console.print(f"[dim]stage {system.seed.stage}, t={system.seed.accumulated_time:.6f}[/dim]")


# --- model ---

@cli.command("model")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich")
def model_cmd(output: str) -> None:
    """Print recurrence constants, stage thresholds and link table."""
    details = export_model_details()

    if output == "json":
        click.echo(json.dumps(details, indent=2))
        return

    table = Table(title="Stage thresholds")
    table.add_column("From stage", justify="right")
    table.add_column("phi^k", justify="right")
    table.add_column("Threshold", justify="right")
    for stage, row in details["stages"].items():
        table.add_row(stage, str(row["exponent"]), f"{row['threshold']:.6f}")
    console.print(table)

    links = ", ".join(f"{k}->{v}" for k, v in details["links"].items())
    console.print(f"links: {links}")
    console.print(f"[dim]{details['dual_hash']}[/dim]")


# --- CLI entry point ---

def main() -> int:
    """Entry point for the gamma CLI."""
    try:
        cli(standalone_mode=False)
        return 0
    except click.ClickException as e:
        e.show()
        return 2
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 0


if __name__ == "__main__":
    sys.exit(main())
