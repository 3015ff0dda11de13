"""Command-line interface for the amenity translation pipeline."""

import logging
from pathlib import Path
from typing import List, Optional

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskProgressColumn, TextColumn
from rich.table import Table

from . import __version__
from .config import Config
from .cost_estimator import estimate_cost
from .errors import ConfigurationError, DataSourceError, PersistenceError
from .models.amenity import AmenityRecord, LanguageSpec
from .models.quality_report import RunSummary
from .pipeline.orchestrator import RunOrchestrator
from .storage.amenity_source import AmenitySource
from .storage.amenity_writer import AmenityWriter
from .storage.report_writer import ReportWriter
from .translation.clients.openai_client import OpenAIClient
from .translation.translator import BatchTranslator
from .validation.quality_validator import QualityValidator
from .validation.retranslation import RetranslationController

console = Console()

SNAPSHOT_NAME = "translated_amenities.json"
CSV_NAME = "translated_amenities.csv"
REPORT_NAME = "validation_report.json"

STATUS_STYLES = {
    "ACCEPTABLE": "green",
    "IMPROVED": "cyan",
    "FAILED_KEPT_ORIGINAL": "red",
    "BELOW_THRESHOLD": "yellow",
    "SKIPPED": "dim",
    "TRANSLATED": "blue",
    "error": "bold red",
}


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
def cli(verbose: bool):
    """Hotel Amenities Translator CLI."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )
    # The HTTP client logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def _load_records(config: Config, input_path: Optional[str]) -> List[AmenityRecord]:
    source = AmenitySource(config)
    try:
        if input_path:
            console.print(f"[blue]Reading:[/blue] {input_path}")
            return source.load(input_path)
        console.print(f"[blue]Fetching:[/blue] {source.url}")
        return source.fetch()
    except DataSourceError as e:
        console.print(f"[red]Failed to load data:[/red] {e}")
        raise click.Abort()


def _resolve_languages(config: Config, languages: Optional[str]) -> List[LanguageSpec]:
    if not languages:
        return config.languages()
    return config.languages([code.strip() for code in languages.split(",") if code.strip()])


def _require_config(config: Config) -> None:
    errors = config.validate()
    if errors:
        console.print("[red]Configuration errors:[/red]")
        for error in errors:
            console.print(f"  - {error}")
        raise click.Abort()


def _build_orchestrator(config: Config) -> RunOrchestrator:
    try:
        translation_client = OpenAIClient(config)
        validation_client = OpenAIClient(config, model=config.validation_model)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise click.Abort()

    translator = BatchTranslator(translation_client, config)
    validator = QualityValidator(validation_client, config)
    controller = RetranslationController(translator, validator, config)
    return RunOrchestrator(translator, validator, controller, config)


@cli.command()
@click.option(
    "--output", "-o",
    "output_path",
    default="data/amenities.json",
    type=click.Path(),
    help="Where to save the fetched amenities"
)
def fetch(output_path: str):
    """Fetch room amenities from the amenities API."""
    config = Config()
    records = _load_records(config, None)
    try:
        AmenityWriter().write_json(records, output_path)
    except PersistenceError as e:
        console.print(f"[red]{e}[/red]")
        raise click.Abort()
    console.print(f"[green]Saved {len(records)} amenities to {output_path}[/green]")


@cli.command()
@click.option(
    "--input", "-i",
    "input_path",
    type=click.Path(exists=True),
    help="JSON or CSV file with amenities (fetches from the API if omitted)"
)
@click.option(
    "--output-dir", "-o",
    type=click.Path(),
    default=None,
    help="Directory for the snapshot, CSV export and report"
)
@click.option(
    "--languages", "-l",
    default=None,
    help="Comma-separated list of target language codes (default: all)"
)
@click.option(
    "--quality-threshold", "-q",
    type=float,
    default=None,
    help="Average score (0-10) below which a language is retranslated"
)
@click.option("--sample-size", type=int, default=None, help="Translations validated per language")
@click.option("--batch-size", type=int, default=None, help="Phrases per translation call")
@click.option("--skip-validation", is_flag=True, help="Translate only, no quality loop")
@click.option("--dry-run", is_flag=True, help="Run without saving any output")
@click.option("--limit", type=int, default=None, help="Limit number of amenities (for testing)")
def translate(
    input_path: Optional[str],
    output_dir: Optional[str],
    languages: Optional[str],
    quality_threshold: Optional[float],
    sample_size: Optional[int],
    batch_size: Optional[int],
    skip_validation: bool,
    dry_run: bool,
    limit: Optional[int],
):
    """Translate missing amenities and run the quality loop."""
    config = Config()
    if quality_threshold is not None:
        config.quality_threshold = quality_threshold
    if sample_size is not None:
        config.sample_size = sample_size
    if batch_size is not None:
        config.batch_size = batch_size
    if output_dir:
        config.output_dir = output_dir
    _require_config(config)

    records = _load_records(config, input_path)
    console.print(f"[green]Found:[/green] {len(records)} amenities")

    if limit:
        records = records[:limit]
        console.print(f"[yellow]Limited to:[/yellow] {len(records)} amenities")

    specs = _resolve_languages(config, languages)
    console.print(f"[blue]Target languages:[/blue] {', '.join(s.code for s in specs)}")

    orchestrator = _build_orchestrator(config)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Translating", total=len(specs))

        def update_progress(current, total, code, status):
            progress.update(task, completed=current, description=f"[{code}] {status}")

        summary = orchestrator.run(
            records,
            specs,
            validate=not skip_validation,
            progress_callback=update_progress,
        )

    _print_run_summary(summary)
    if not skip_validation:
        _print_quality_summary(summary, config.quality_threshold)

    if dry_run:
        console.print("\n[yellow]Dry run - no changes saved[/yellow]")
        return

    _save_outputs(records, summary, config, [s.code for s in specs], skip_validation)
    console.print("[green]Done![/green]")


@cli.command()
@click.option(
    "--input", "-i",
    "input_path",
    default=f"output/{SNAPSHOT_NAME}",
    type=click.Path(exists=True),
    help="JSON or CSV file with translated amenities"
)
@click.option("--languages", "-l", default=None, help="Comma-separated language codes")
@click.option("--sample-size", type=int, default=None, help="Translations validated per language")
@click.option(
    "--report", "-r",
    "report_path",
    default="output/enhanced_validation_report.json",
    type=click.Path(),
    help="Where to write the validation report"
)
def validate(input_path: str, languages: Optional[str], sample_size: Optional[int], report_path: str):
    """Score existing translations without changing them."""
    config = Config()
    _require_config(config)

    records = _load_records(config, input_path)
    specs = _resolve_languages(config, languages)
    orchestrator = _build_orchestrator(config)

    summary = orchestrator.validate_only(records, specs, sample_size)
    _print_quality_summary(summary, config.quality_threshold)

    try:
        ReportWriter().write(summary, report_path)
    except PersistenceError as e:
        console.print(f"[red]{e}[/red]")
        raise click.Abort()
    console.print(f"\n[blue]Detailed report saved to:[/blue] {report_path}")


@cli.command()
@click.option(
    "--input", "-i",
    "input_path",
    required=True,
    type=click.Path(exists=True),
    help="JSON or CSV file with amenities"
)
def stats(input_path: str):
    """Show translation coverage per language."""
    config = Config()
    records = _load_records(config, input_path)

    table = Table(title=f"Statistics for {Path(input_path).name}")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")

    total = len(records)
    table.add_row("Total amenities", str(total))

    for spec in config.languages():
        translated = sum(1 for record in records if record.has_translation(spec.code))
        coverage = (translated / total) * 100 if total else 0
        table.add_row(f"  {spec.code} ({spec.display_name})", f"{translated}/{total} ({coverage:.1f}%)")

    console.print(table)


@cli.command()
@click.option(
    "--input", "-i",
    "input_path",
    required=True,
    type=click.Path(exists=True),
    help="JSON or CSV file with amenities"
)
@click.option(
    "--language", "-l",
    required=True,
    help="Language code to show missing translations for"
)
@click.option("--limit", type=int, default=20, help="Limit number of amenities to show")
def missing(input_path: str, language: str, limit: int):
    """Show amenities missing a translation for one language."""
    config = Config()
    records = _load_records(config, input_path)
    missing_records = [r for r in records if not r.has_translation(language)]

    console.print(f"[cyan]Missing translations for {language}:[/cyan] {len(missing_records)} total")

    if not missing_records:
        console.print("[green]All amenities are translated![/green]")
        return

    table = Table(show_header=True)
    table.add_column("ID", style="dim", max_width=12)
    table.add_column("English", max_width=60)

    for record in missing_records[:limit]:
        table.add_row(str(record.id), record.english_text[:60])

    console.print(table)

    if len(missing_records) > limit:
        console.print(f"\n[dim]... and {len(missing_records) - limit} more[/dim]")


@cli.command()
@click.option(
    "--input", "-i",
    "input_path",
    required=True,
    type=click.Path(exists=True),
    help="JSON or CSV file with amenities"
)
@click.option("--languages", "-l", default=None, help="Comma-separated language codes")
def estimate(input_path: str, languages: Optional[str]):
    """Estimate the API cost of translating everything missing."""
    config = Config()
    records = _load_records(config, input_path)
    specs = _resolve_languages(config, languages)

    result = estimate_cost(records, specs, batch_size=config.batch_size)
    if not result.total_missing:
        console.print("[green]All translations are complete! No cost analysis needed.[/green]")
        return

    table = Table(title="Missing Translations")
    table.add_column("Language", style="cyan")
    table.add_column("Missing", justify="right")
    for code, count in result.missing_by_language.items():
        table.add_row(f"{code} ({config.language_name(code)})", str(count))
    console.print(table)

    lines = [
        f"[bold]Total missing:[/bold] {result.total_missing}",
        f"[bold]API calls:[/bold] {result.total_batches}",
        f"[bold]Estimated tokens:[/bold] {result.total_tokens:,}",
        "",
    ]
    for model, cost in result.cost_by_model.items():
        lines.append(
            f"[cyan]{model}:[/cyan] ${cost:.4f} "
            f"([dim]${result.cost_per_translation(model):.6f} per translation[/dim])"
        )
    console.print(Panel("\n".join(lines), title="Cost Estimate"))


@cli.command()
def check():
    """Send one short completion to verify the API key and model."""
    config = Config()
    _require_config(config)
    try:
        client = OpenAIClient(config)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        raise click.Abort()

    console.print(f"[blue]Testing:[/blue] {config.model} at {config.base_url}")
    result = client.complete("Say 'Hello World'", temperature=0.0, max_tokens=10)

    if not result.succeeded:
        console.print(f"[red]API test failed ({result.error_kind}):[/red] {result.error_message}")
        raise click.Abort()

    console.print("[green]API test successful![/green]")
    console.print(f"Response: {result.text}")


def _save_outputs(
    records: List[AmenityRecord],
    summary: RunSummary,
    config: Config,
    codes: List[str],
    skip_validation: bool,
) -> None:
    output_dir = Path(config.output_dir)
    writer = AmenityWriter()
    try:
        writer.write_json(records, str(output_dir / SNAPSHOT_NAME))
        writer.write_csv(records, str(output_dir / CSV_NAME), codes)
        if not skip_validation:
            ReportWriter().write(summary, str(output_dir / REPORT_NAME))
    except PersistenceError as e:
        console.print(f"[red]Failed to save results:[/red] {e}")
        raise click.Abort()
    console.print(f"\n[blue]Output written to:[/blue] {output_dir}")


def _print_run_summary(summary: RunSummary):
    """Print translation statistics per language."""
    table = Table(title="Translation Summary")
    table.add_column("Language", style="cyan")
    table.add_column("Translated", justify="right")
    table.add_column("Missing", justify="right")
    table.add_column("Rate", justify="right")
    table.add_column("Status")

    for result in summary.results:
        style = STATUS_STYLES.get(result.status, "white")
        status = f"[{style}]{result.status}[/{style}]"
        if result.translation is None:
            table.add_row(result.language_code, "-", "-", "-", status)
            continue
        t = result.translation
        rate = "complete" if t.already_complete else f"{t.success_rate:.1f}%"
        table.add_row(result.language_code, str(t.translated_count), str(t.missing_count), rate, status)

    console.print(table)
    console.print(
        f"Total items translated: {summary.total_translated} / {summary.total_processed} "
        f"({summary.success_rate:.1f}%)"
    )

    errors = [r for r in summary.results if r.error]
    for result in errors:
        console.print(f"[red]{result.language_code}: {result.error}[/red]")


def _print_quality_summary(summary: RunSummary, threshold: float):
    """Print per-language quality and the overall distribution."""
    table = Table(title="Quality Report")
    table.add_column("Language", style="cyan")
    table.add_column("Sample", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Final", justify="right")
    table.add_column("Level")
    table.add_column("Status")

    for result in summary.results:
        outcome = result.retranslation
        if outcome is None:
            continue
        report = outcome.report
        score_color = "green" if outcome.original_score >= threshold else "yellow"
        final = f"{outcome.final_report.average_score:.2f}" if outcome.final_report else "-"
        style = STATUS_STYLES.get(result.status, "white")
        table.add_row(
            f"{result.language_code} ({result.language_name})",
            f"{report.sample_size}/{report.total_translated}",
            f"[{score_color}]{outcome.original_score:.2f}[/{score_color}]",
            final,
            report.quality_level.value,
            f"[{style}]{result.status}[/{style}]",
        )

    console.print(table)

    dist = summary.quality_distribution
    panel_content = (
        f"[bold]Total validations:[/bold] {summary.total_validations}\n"
        f"[bold]Overall average score:[/bold] {summary.overall_score:.2f}/10\n"
        f"\n"
        f"[green]Excellent (>=9.0):[/green] {dist['excellent']} languages\n"
        f"[cyan]Good (>=7.5):[/cyan] {dist['good']} languages\n"
        f"[yellow]Acceptable (>=6.0):[/yellow] {dist['acceptable']} languages\n"
        f"[red]Needs improvement (<6.0):[/red] {dist['needsImprovement']} languages"
    )
    console.print(Panel(panel_content, title="Validation Summary"))


if __name__ == "__main__":
    cli()
