"""CLI entrypoint for the claim velocity engine.

Commands:
  generate-data Generate a synthetic claim collection
  snapshot      Compute the velocity snapshot for a claim collection
  timeline      Show one claim's stage timeline
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from claim_velocity.config import PipelineConfig

app = typer.Typer(
    name="claim-velocity",
    help="Claim pipeline velocity, carrier benchmarks, bottlenecks, and trends.",
    add_completion=False,
)
console = Console()


def _get_config(
    seed: int,
    num_claims: int,
    output_dir: Path,
    config_file: Path | None = None,
) -> PipelineConfig:
    """Build pipeline config from CLI args and optional config file."""
    if config_file and config_file.exists():
        return _load_config(config_file)
    return PipelineConfig(seed=seed, num_claims=num_claims, output_dir=output_dir)


def _load_config(config_file: Path | None) -> PipelineConfig:
    if config_file and config_file.exists():
        raw = json.loads(config_file.read_text())
        return PipelineConfig(**raw)
    return PipelineConfig()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _load_or_exit(input_file: Path):
    from claim_velocity.ingest import load_claims

    try:
        return load_claims(input_file)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]✗ {e}[/]")
        raise typer.Exit(code=1) from e


@app.command()
def generate_data(
    seed: int = typer.Option(42, help="Random seed for reproducible generation"),
    num_claims: int = typer.Option(500, help="Number of claims to generate"),
    output_dir: Path = typer.Option(Path("output"), help="Output directory"),
    config_file: Path | None = typer.Option(None, "--config", help="JSON config file"),
) -> None:
    """Generate a synthetic claim collection."""
    from claim_velocity.generate_data import generate_claims
    from claim_velocity.ingest import save_claims

    config = _get_config(seed, num_claims, output_dir, config_file)
    console.print(f"[bold blue]Generating {config.num_claims:,} synthetic claims (seed={config.seed})...[/]")

    claims = generate_claims(config)
    out_path = save_claims(claims, config.output_dir / "claims.json")

    console.print(f"[green]✓ Generated {len(claims):,} claims → {out_path}[/]")


@app.command()
def snapshot(
    input_file: Path = typer.Option(..., "--input", help="Claims JSON file"),
    period_days: int | None = typer.Option(None, help="Lookback window in days"),
    now: datetime | None = typer.Option(None, help="Reference time (defaults to now)"),
    output: Path | None = typer.Option(None, help="Write the snapshot JSON here"),
    config_file: Path | None = typer.Option(None, "--config", help="JSON config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Compute the velocity snapshot for a claim collection."""
    from claim_velocity.ingest import save_snapshot
    from claim_velocity.velocity import calculate_velocity_snapshot

    _setup_logging(verbose)
    config = _load_config(config_file)
    days = period_days if period_days is not None else config.period_days

    claims = _load_or_exit(input_file)
    console.print(f"[bold blue]Computing velocity over {len(claims):,} claims ({days}-day window)...[/]")

    try:
        result = calculate_velocity_snapshot(claims, days, now=now, config=config.velocity)
    except Exception as e:
        console.print(f"[red]Snapshot error: {e}[/]")
        raise typer.Exit(code=2) from e

    headline = Table(title="Velocity")
    headline.add_column("Metric")
    headline.add_column("Value", justify="right")
    headline.add_row("Avg days to close", f"{result.avg_claim_velocity_days:.1f}")
    headline.add_row("Median days to close", f"{result.median_claim_velocity_days:.1f}")
    headline.add_row("Avg supplement response (days)", f"{result.avg_supplement_response_days:.1f}")
    headline.add_row("Revenue per day", f"${result.revenue_per_day:,}")
    headline.add_row(
        "Trend",
        f"{result.trend.direction} ({result.trend.change_percent:+.1f}%)",
    )
    console.print(headline)

    carriers = Table(title="Carrier Benchmarks")
    for col in ("Carrier", "Closed", "Avg Close", "Avg Supp. Resp.", "Approval %"):
        carriers.add_column(col, justify="left" if col == "Carrier" else "right")
    for b in result.carrier_benchmarks:
        carriers.add_row(
            b.carrier,
            str(b.claim_count),
            f"{b.avg_days_to_close:.1f}",
            f"{b.avg_supplement_response_days:.1f}",
            f"{b.approval_rate}%",
        )
    console.print(carriers)

    stages = Table(title="Bottlenecks")
    for col in ("Stage", "Avg Days", "% of Total", "Suggestion"):
        stages.add_column(col)
    for s in result.bottlenecks:
        stages.add_row(s.stage, f"{s.avg_days:.1f}", f"{s.percent_of_total}%", s.suggestion)
    console.print(stages)

    if output is not None:
        save_snapshot(result, output)
        console.print(f"[green]✓ Snapshot written → {output}[/]")


@app.command()
def timeline(
    input_file: Path = typer.Option(..., "--input", help="Claims JSON file"),
    claim_id: str = typer.Option(..., help="Claim id or claim number"),
    now: datetime | None = typer.Option(None, help="Reference time (defaults to now)"),
) -> None:
    """Show one claim's stage timeline."""
    from claim_velocity.timeline import build_claim_timeline

    claims = _load_or_exit(input_file)
    match = next((c for c in claims if claim_id in (c.id, c.claim_number)), None)
    if match is None:
        console.print(f"[red]✗ Claim not found: {claim_id}[/]")
        raise typer.Exit(code=1)

    result = build_claim_timeline(match, now)

    table = Table(title=f"{result.claim_number} ({result.carrier or 'no carrier'}, {result.status})")
    for col in ("Stage", "Entered", "Exited", "Days"):
        table.add_column(col)
    for s in result.stages:
        table.add_row(
            s.stage,
            s.entered_at.strftime("%Y-%m-%d %H:%M"),
            s.exited_at.strftime("%Y-%m-%d %H:%M") if s.exited_at else "—",
            f"{s.duration_days:.1f}",
        )
    console.print(table)
    console.print(f"Total: {result.total_days:.1f} days")


if __name__ == "__main__":
    app()
