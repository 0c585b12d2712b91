"""CLI interface for gitqa."""

import asyncio
import logging
import sys
from datetime import datetime, timezone

import click
from rich.console import Console
from rich.table import Table

from gitqa import __version__
from gitqa.analysis.pipeline import analyze_merges, analyze_repository
from gitqa.config import DEFAULT_BRANCH, DEFAULT_OUTPUT_DIR, DEFAULT_TOP_FILES_LIMIT, ENV_KEYWORDS
from gitqa.git.repository import GitRepository, GitRepositoryError
from gitqa.logging_config import setup_logging
from gitqa.models import (
    AggregationResult,
    AnalysisConfig,
    MatchMode,
    MergeAnalysisResult,
    MergeCategory,
    MessageField,
)
from gitqa.visualization.charts import ChartGenerator
from gitqa.visualization.report import ReportGenerator


console = Console()
logger = logging.getLogger(__name__)


def parse_date(date_str: str | None) -> datetime | None:
    """Parse a date string into a datetime object.

    Args:
        date_str: Date string in YYYY-MM-DD format, or None

    Returns:
        datetime object or None
    """
    if not date_str:
        return None

    try:
        # Try ISO format first (YYYY-MM-DD)
        dt = datetime.strptime(date_str, "%Y-%m-%d")
        return dt.replace(tzinfo=timezone.utc)
    except ValueError:
        pass

    try:
        # Try with time component
        dt = datetime.strptime(date_str, "%Y-%m-%dT%H:%M:%S")
        return dt.replace(tzinfo=timezone.utc)
    except ValueError:
        raise click.BadParameter(f"Invalid date format: {date_str}. Use YYYY-MM-DD.")


def summary_table(result: AggregationResult, title: str) -> Table:
    """Build the headline metrics table."""
    table = Table(title=title)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Total Commits", f"{result.total_commits:,}")
    table.add_row("Fix Commits", f"{result.matched_count:,}")
    table.add_row("Defect-Fix Rate", f"{result.defect_fix_rate:.1%}")
    table.add_row("Code Stability", f"{result.code_stability:.1%}")
    table.add_row("Hotfix Share", f"{result.hotfix_share:.1%}")
    table.add_row("Files Touched by Fixes", f"{result.total_fix_files:,}")
    table.add_row("Hotspot Concentration", f"{result.hotspot_concentration:.1%}")
    table.add_row("Commit Consistency", f"{result.commit_consistency:.1%}")

    return table


def keyword_table(result: AggregationResult) -> Table:
    table = Table(title="Keyword Counts")
    table.add_column("Keyword", style="cyan")
    table.add_column("Commits", style="green")

    for keyword, count in result.keyword_counts.items():
        table.add_row(keyword, str(count))

    return table


def files_table(result: AggregationResult, title: str) -> Table:
    table = Table(title=title)
    table.add_column("#", style="dim")
    table.add_column("File", style="cyan")
    table.add_column("Touches", style="green")

    for rank, entry in enumerate(result.top_files, start=1):
        table.add_row(str(rank), entry.file, str(entry.count))

    return table


def print_matched_commits(result: AggregationResult, limit: int = 20) -> None:
    """Print the first matching commits, one line each."""
    if not result.matched_commits:
        return

    console.print(f"\n[yellow]Fix commits ({result.matched_count}):[/yellow]")
    for commit in result.matched_commits[:limit]:
        short_sha = commit.sha[:8]
        first_line = commit.message.split("\n")[0][:60]
        keywords = ", ".join(commit.matched_keywords)
        console.print(f"  {short_sha}: {first_line} [dim]({keywords})[/dim]")
    if result.matched_count > limit:
        console.print(f"  ... and {result.matched_count - limit} more")


def write_outputs(report: ReportGenerator, output: str, formats: list[str]) -> None:
    written = report.write_report(output, formats)
    for fmt, path in written.items():
        console.print(f"[green]{fmt.upper()} written to {path}[/green]")


@click.group()
@click.version_option(version=__version__)
def cli():
    """gitqa - Defect-fix and hotspot mining for git history."""
    pass


@cli.command()
@click.argument("repo_path", type=click.Path(exists=True))
@click.option(
    "--keywords",
    default=ENV_KEYWORDS,
    help="Comma-separated fix keywords (default: fix,hotfix,bugfix,resolve,patch)",
)
@click.option("--top", type=int, default=DEFAULT_TOP_FILES_LIMIT, help="Number of hotspot files")
@click.option(
    "--match-mode",
    type=click.Choice([mode.value for mode in MatchMode]),
    default=MatchMode.WORD_BOUNDARY.value,
    help="Match keywords as whole words or anywhere in the text",
)
@click.option(
    "--message-field",
    type=click.Choice([field.value for field in MessageField]),
    default=MessageField.AUTO.value,
    help="Classify the subject line, the full message, or the subject when present",
)
@click.option("--since", help="Only commits after this date (YYYY-MM-DD)")
@click.option("--until", help="Only commits before this date (YYYY-MM-DD)")
@click.option("--author", help="Filter by author")
@click.option("--branch", help="Branch or revision to analyze (default: current branch)")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["console", "json", "csv", "html", "png"]),
    default="console",
)
@click.option("-o", "--output", type=click.Path(), default=DEFAULT_OUTPUT_DIR, help="Output directory")
@click.option("--trace", is_flag=True, help="Log every classification decision")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
def analyze(
    repo_path,
    keywords,
    top,
    match_mode,
    message_field,
    since,
    until,
    author,
    branch,
    output_format,
    output,
    trace,
    verbose,
):
    """Find fix commits and the files they touch."""
    setup_logging(verbose or trace)

    # Parse date filters
    since_dt = parse_date(since)
    until_dt = parse_date(until)

    try:
        config = AnalysisConfig(
            keywords=keywords,
            top_files_limit=top,
            message_field=MessageField(message_field),
            match_mode=MatchMode(match_mode),
            trace=trace,
        )

        # Open repository
        logger.info("Opening repository: %s", repo_path)
        repo = GitRepository(repo_path)

        result = asyncio.run(
            analyze_repository(
                repo, config, since=since_dt, until=until_dt, author=author, branch=branch
            )
        )

        if result.total_commits == 0:
            console.print("[yellow]No commits found matching criteria.[/yellow]")
            return

        if output_format == "console":
            console.print(summary_table(result, f"Defect-Fix Analysis: {repo.name}"))
            console.print(keyword_table(result))
            console.print(files_table(result, "Top Fix Files"))
            if verbose:
                print_matched_commits(result)
            return

        charts = ChartGenerator(result)
        report = ReportGenerator(
            figures=charts.all_charts(),
            result=result,
            title=f"Defect-Fix Analysis: {repo.name}",
            repo_path=str(repo_path),
        )
        write_outputs(report, output, [output_format])

    except GitRepositoryError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        logger.debug("Unhandled error", exc_info=True)
        sys.exit(1)


def merge_table(merge_result: MergeAnalysisResult) -> Table:
    table = Table(title=f"Merges on {merge_result.branch}")
    table.add_column("Category", style="cyan")
    table.add_column("Merges", style="green")
    table.add_column("Percentage", style="yellow")

    for category in MergeCategory:
        count = merge_result.category_counts[category]
        pct = count / merge_result.total_merges * 100 if merge_result.total_merges else 0.0
        table.add_row(category.value, str(count), f"{pct:.1f}%")

    table.add_row("total", str(merge_result.total_merges), "")
    return table


@cli.command()
@click.argument("repo_path", type=click.Path(exists=True))
@click.option("--branch", default=DEFAULT_BRANCH, help="Branch whose merges are analyzed")
@click.option("--top", type=int, default=DEFAULT_TOP_FILES_LIMIT, help="Number of hotspot files")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["console", "json", "html"]),
    default="console",
)
@click.option("-o", "--output", type=click.Path(), default=DEFAULT_OUTPUT_DIR, help="Output directory")
@click.option("--trace", is_flag=True, help="Log every classification decision")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
def hotfiles(repo_path, branch, top, output_format, output, trace, verbose):
    """Rank the files touched by fix and hotfix merges."""
    setup_logging(verbose or trace)

    try:
        config = AnalysisConfig(top_files_limit=top, trace=trace)
        repo = GitRepository(repo_path)

        merge_result = asyncio.run(analyze_merges(repo, branch, config))

        if merge_result.total_merges == 0:
            console.print(f"[yellow]No merges found on {branch}.[/yellow]")
            return

        if output_format == "console":
            console.print(merge_table(merge_result))
            console.print(
                summary_table(merge_result.combined, f"Fix Merges: {repo.name}")
            )
            console.print(files_table(merge_result.fixes, "Top Fix Merge Files"))
            console.print(files_table(merge_result.hotfixes, "Top Hotfix Files"))
            if verbose:
                print_matched_commits(merge_result.combined)
            return

        charts = ChartGenerator(merge_result.combined, merge_result)
        report = ReportGenerator(
            figures=charts.all_charts(),
            result=merge_result.combined,
            title=f"Hotfix Analysis: {repo.name}",
            merge_result=merge_result,
            repo_path=str(repo_path),
        )
        write_outputs(report, output, [output_format])

    except GitRepositoryError as e:
        console.print(f"[red]Error: {e}[/red]")
        sys.exit(1)
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        logger.debug("Unhandled error", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
