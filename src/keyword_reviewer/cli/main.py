"""Command line interface for reviewing search terms."""

import logging
from pathlib import Path

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from keyword_reviewer import __version__
from keyword_reviewer.core.config import Settings, setup_logging
from keyword_reviewer.core.exceptions import ConfigurationError, DataError
from keyword_reviewer.exporters.negative_keywords import (
    MatchType,
    format_negative_keyword,
)
from keyword_reviewer.filtering.record_filter import FilterReport
from keyword_reviewer.models.search_term import CandidateRecord
from keyword_reviewer.review.session import (
    ReviewSession,
    ReviewWorkflow,
    build_thresholds,
)

logger = logging.getLogger(__name__)
console = Console()

MATCH_TYPE_CHOICES = [match_type.value for match_type in MatchType]


def read_key() -> str:
    """Read a single key press from the terminal."""
    try:
        key = click.getchar()
    except (KeyboardInterrupt, EOFError):
        raise click.Abort()
    if not key:
        # End of input
        raise click.Abort()
    return key


def render_candidate(session: ReviewSession) -> None:
    """Show the candidate under review, or nothing once the review is done."""
    engine = session.engine
    if engine.is_complete:
        return

    candidate = engine.current_candidate()
    progress = engine.progress()

    body = (
        f"[bold]Keyword:[/bold] {escape(candidate.term)}\n"
        f"[bold]Spend:[/bold] ${candidate.spend:,.2f}\n"
        f"[bold]Impressions:[/bold] {candidate.impressions:,}\n"
        f"[bold]Clicks:[/bold] {candidate.clicks:,}\n"
        f"[bold]Cost Per Conversion:[/bold] {candidate.cost_per_conversion}"
    )
    if candidate.campaign_name:
        body += f"\n[bold]Campaign:[/bold] {escape(candidate.campaign_name)}"

    console.print(
        Panel(
            body,
            title=f"Review Keyword {progress.cursor + 1} of {progress.total}",
            subtitle="Press 'Y' to add as negative, 'N' to skip",
            border_style="blue",
        )
    )


def render_summary(session: ReviewSession, match_type: MatchType) -> None:
    """Show the accepted negatives after the last decision."""
    accepted = session.engine.accepted
    if accepted:
        body = "\n".join(
            escape(format_negative_keyword(record.term, match_type))
            for record in accepted
        )
    else:
        body = "[dim]No keywords were added.[/dim]"

    console.print(
        Panel(
            body,
            title="Review Complete",
            subtitle=f"{len(accepted)} negative keywords",
            border_style="green",
        )
    )


def render_filter_summary(report: FilterReport) -> None:
    console.print(
        f"[green]{len(report.candidates)}[/green] of {report.total_rows} rows "
        f"match the thresholds "
        f"({report.summary_rows} summary, {report.excluded_rows} already excluded, "
        f"{report.malformed_rows} malformed, "
        f"{report.below_threshold_rows} below thresholds)"
    )


def candidates_table(candidates: list[CandidateRecord], limit: int | None) -> Table:
    shown = candidates[:limit] if limit else candidates
    table = Table(title=f"Candidates ({len(candidates)})")
    table.add_column("#", justify="right")
    table.add_column("Search term")
    table.add_column("Spend", justify="right")
    table.add_column("Impr.", justify="right")
    table.add_column("Clicks", justify="right")
    table.add_column("Cost / conv.", justify="right")

    for i, candidate in enumerate(shown, 1):
        table.add_row(
            str(i),
            escape(candidate.term),
            f"${candidate.spend:,.2f}",
            f"{candidate.impressions:,}",
            f"{candidate.clicks:,}",
            str(candidate.cost_per_conversion),
        )
    return table


def _threshold_default(settings: Settings, value: float) -> float | None:
    # A zero default would only be rejected when positive thresholds are required
    if settings.require_positive_thresholds and value <= 0:
        return None
    return value


def _prompt_missing(
    settings: Settings,
    file_path: Path | None,
    spend_threshold: float | None,
    cpc_threshold: float | None,
) -> tuple[Path, float, float]:
    """Ask for whatever the command line did not provide."""
    if file_path is None:
        file_path = click.prompt(
            "Search terms report (CSV)", type=click.Path(path_type=Path)
        )
    if spend_threshold is None:
        spend_threshold = click.prompt(
            "Spend threshold ($)",
            type=float,
            default=_threshold_default(settings, settings.thresholds.spend_threshold),
        )
    if cpc_threshold is None:
        cpc_threshold = click.prompt(
            "Cost per conversion threshold ($)",
            type=float,
            default=_threshold_default(settings, settings.thresholds.cpc_threshold),
        )
    return file_path, spend_threshold, cpc_threshold


def _show_error(message: str) -> None:
    console.print(f"[red]Error:[/red] {escape(message)}")


def _fail(ctx: click.Context, message: str, exit_code: int) -> None:
    _show_error(message)
    ctx.exit(exit_code)


@click.group()
@click.version_option(version=__version__, prog_name="Keyword Reviewer")
@click.option(
    "--env-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Read settings from this .env file",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default=None,
    help="Override the configured log level",
)
@click.pass_context
def cli(ctx: click.Context, env_file: Path | None, log_level: str | None) -> None:
    """Keyword Reviewer - build negative keyword lists from search terms reports."""
    try:
        settings = Settings.from_env(env_file)
    except ValidationError as e:
        raise click.UsageError(f"Invalid configuration: {e}")

    if log_level:
        settings.logging.level = log_level.upper()

    setup_logging(settings)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


@cli.command()
@click.option(
    "--file",
    "-f",
    "file_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Search terms report CSV",
)
@click.option("--spend-threshold", "-s", type=float, default=None, help="Minimum spend")
@click.option(
    "--cpc-threshold", "-c", type=float, default=None, help="Minimum cost per conversion"
)
@click.option(
    "--match-type",
    "-m",
    type=click.Choice(MATCH_TYPE_CHOICES, case_sensitive=False),
    default=None,
    help="Keyword syntax of the exported negatives",
)
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=Path("."),
    show_default=True,
    help="Directory for the exported list",
)
@click.pass_context
def review(
    ctx: click.Context,
    file_path: Path | None,
    spend_threshold: float | None,
    cpc_threshold: float | None,
    match_type: str | None,
    output_dir: Path,
) -> None:
    """Review search terms one by one and export the negatives."""
    settings: Settings = ctx.obj["settings"]
    export_match_type = MatchType(
        match_type.lower() if match_type else settings.export.match_type
    )
    workflow = ReviewWorkflow(settings)

    while True:
        prompted_file = file_path is None
        prompted_thresholds = spend_threshold is None or cpc_threshold is None
        file_path, spend_threshold, cpc_threshold = _prompt_missing(
            settings, file_path, spend_threshold, cpc_threshold
        )

        # Errors in typed-in values send the user back to the prompts;
        # errors in command line values end the command.
        try:
            thresholds = build_thresholds(spend_threshold, cpc_threshold)
            session = workflow.start(file_path, thresholds)
        except ConfigurationError as e:
            if not prompted_thresholds:
                _fail(ctx, str(e), 2)
                return
            _show_error(str(e))
            spend_threshold = cpc_threshold = None
            continue
        except DataError as e:
            if not prompted_file:
                _fail(ctx, str(e), 1)
                return
            _show_error(str(e))
            file_path = None
            continue

        render_filter_summary(session.filter_report)
        session.run(read_key, on_change=render_candidate)
        render_summary(session, export_match_type)

        path = session.write_export(output_dir, match_type=export_match_type)
        console.print(f"Saved negative keywords to [bold]{escape(str(path))}[/bold]")

        if not click.confirm("Start over with another report?", default=False):
            break

        workflow.restart()
        file_path = spend_threshold = cpc_threshold = None


@cli.command(name="filter")
@click.option(
    "--file",
    "-f",
    "file_path",
    type=click.Path(path_type=Path),
    required=True,
    help="Search terms report CSV",
)
@click.option("--spend-threshold", "-s", type=float, required=True, help="Minimum spend")
@click.option(
    "--cpc-threshold", "-c", type=float, required=True, help="Minimum cost per conversion"
)
@click.option("--limit", type=int, default=None, help="Show at most this many rows")
@click.pass_context
def filter_command(
    ctx: click.Context,
    file_path: Path,
    spend_threshold: float,
    cpc_threshold: float,
    limit: int | None,
) -> None:
    """Show which search terms would be up for review."""
    settings: Settings = ctx.obj["settings"]
    workflow = ReviewWorkflow(settings)

    try:
        thresholds = build_thresholds(spend_threshold, cpc_threshold)
        session = workflow.start(file_path, thresholds)
    except ConfigurationError as e:
        _fail(ctx, str(e), 2)
        return
    except DataError as e:
        _fail(ctx, str(e), 1)
        return

    report = session.filter_report
    render_filter_summary(report)
    if report.candidates:
        console.print(candidates_table(report.candidates, limit))
    workflow.restart()


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
