"""Command-line interface for MemoryCore."""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import click
import structlog
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from memorycore import __version__
from memorycore.config.config import Config, settings
from memorycore.curation.curator import sanitize_insights, sanitize_profile_facts
from memorycore.dedup.near_duplicate import check_near_duplicate
from memorycore.observability import configure_logging, export_prometheus, start_metrics_server
from memorycore.protocols import Insight, MemoryKind, ProfileFact
from memorycore.relevance.classifier import is_relevant_for_kind, rejection_reason
from memorycore.text.normalize import normalize_memory_text
from memorycore.text.signature import is_name_signature, memory_signature

console = Console()
logger = structlog.get_logger(__name__)

KIND_CHOICES = [kind.value for kind in MemoryKind]


def _load_config(config_path: Optional[Path]) -> Config:
    if config_path:
        return Config.from_yaml(config_path)
    # Per-invocation overrides must not touch the global settings
    return settings.model_copy(deep=True)


@click.group()
@click.version_option(version=__version__)
@click.option("--config", "-c", type=click.Path(exists=True), help="Configuration file path")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    help="Logging level (overrides the configuration file)",
)
def cli(config: Optional[str], log_level: Optional[str]) -> None:
    """MemoryCore - decide which memories are worth keeping."""
    loaded = _load_config(Path(config) if config else None)
    if log_level:
        loaded.monitoring.log_level = log_level

    configure_logging(loaded.monitoring)
    start_metrics_server(loaded.monitoring)


@cli.command()
@click.argument("text")
def normalize(text: str) -> None:
    """Print the normalized form of TEXT."""
    click.echo(normalize_memory_text(text))


@cli.command()
@click.argument("text")
def signature(text: str) -> None:
    """Print the comparison signature of TEXT."""
    result = memory_signature(text)
    if not result:
        console.print("[yellow]Empty signature: text cannot be used for deduplication[/yellow]")
        return
    click.echo(result)
    if is_name_signature(result):
        console.print("[cyan]Name declaration[/cyan]")


@cli.command()
@click.argument("text")
@click.option("--kind", default=MemoryKind.GENERIC.value, type=click.Choice(KIND_CHOICES), help="Memory kind")
@click.option("--importance", default=5, type=int, help="Importance claimed for an insight (1-10)")
def check(text: str, kind: str, importance: int) -> None:
    """Check whether TEXT is worth remembering. Exits 1 when it is not."""
    memory_kind = MemoryKind(kind)
    if is_relevant_for_kind(text, memory_kind, importance):
        console.print(f"[green]✅ Relevant {memory_kind.value}[/green]")
        return

    reason = rejection_reason(text) or f"{memory_kind.value} rules"
    console.print(f"[red]❌ Not relevant ({escape(reason)})[/red]")
    sys.exit(1)


@cli.command()
@click.argument("candidate")
@click.argument("existing")
@click.option(
    "--format",
    "output_format",
    default="table",
    type=click.Choice(["table", "json"]),
    help="Output format",
)
def compare(candidate: str, existing: str, output_format: str) -> None:
    """Compare CANDIDATE against EXISTING for near duplication."""
    result = check_near_duplicate(candidate, existing)
    report: Dict[str, Any] = {
        "is_duplicate": result.is_duplicate,
        "reason": result.reason.value,
        "similarity": round(result.similarity, 4),
        "candidate_signature": memory_signature(candidate),
        "existing_signature": memory_signature(existing),
    }

    if output_format == "json":
        click.echo(json.dumps(report, indent=2))
        return

    table = Table(title="Duplicate Check")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="magenta")
    for key, value in report.items():
        table.add_row(key, escape(str(value)))
    console.print(table)


@cli.command()
@click.argument("records", type=click.File("r"))
@click.option(
    "--kind",
    required=True,
    type=click.Choice([MemoryKind.PROFILE_FACT.value, MemoryKind.INSIGHT.value]),
    help="Kind of the records in the file",
)
@click.option("--metrics-out", type=click.Path(), help="Write Prometheus metrics to this file afterwards")
def curate(records: Any, kind: str, metrics_out: Optional[str]) -> None:
    """Drop vague and repeated memories from a JSON list of RECORDS."""
    try:
        rows: List[Dict[str, Any]] = json.load(records)
        if not isinstance(rows, list):
            raise ValueError("expected a JSON list of records")
        if kind == MemoryKind.PROFILE_FACT.value:
            result = sanitize_profile_facts([ProfileFact.from_dict(row) for row in rows])
        else:
            result = sanitize_insights([Insight.from_dict(row) for row in rows])
    except (ValueError, TypeError, AttributeError) as e:
        console.print(f"[red]Invalid records: {escape(str(e))}[/red]")
        sys.exit(2)

    logger.debug("Curated records", kind=kind, kept=len(result.kept), dropped=len(result.dropped_ids))
    output = {
        "kept": [record.to_dict() for record in result.kept],
        "dropped_ids": result.dropped_ids,
    }
    click.echo(json.dumps(output, indent=2))

    if metrics_out:
        Path(metrics_out).write_text(export_prometheus(), encoding="utf-8")


def main() -> None:
    """Main CLI entry point."""
    cli()


if __name__ == "__main__":
    main()
