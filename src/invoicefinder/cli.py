"""Command line interface for InvoiceFinder."""

from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from invoicefinder.config import AppConfig
from invoicefinder.errors import TokenSourceError
from invoicefinder.index.matcher import MatchPolicy
from invoicefinder.index.scanner import Scanner
from invoicefinder.output.sink import TokenCase, copy_matches, write_unmatched
from invoicefinder.tokens import load_tokens, read_tokens_csv


console = Console()
app = typer.Typer(help="InvoiceFinder - find, copy and report PDFs matching invoice numbers")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level, format="[%(levelname)s] %(message)s")


@app.command()
def run(
    csv_file: Path = typer.Argument(..., help="CSV file holding the search column."),
    root_dir: Path = typer.Argument(
        ..., help="Directory to scan recursively.", exists=True, file_okay=False, resolve_path=True
    ),
    target_dir: Path = typer.Argument(..., help="Directory receiving copies of matched files."),
    output_file: Path = typer.Argument(..., help="Report file for tokens without matches."),
    workers: int = typer.Argument(..., min=1, help="Number of parallel workers."),
    column: str = typer.Option(AppConfig().search_column, help="CSV column holding the tokens"),
    extension: str = typer.Option(AppConfig().extension, help="File extension to scan"),
    match_mode: MatchPolicy = typer.Option(
        AppConfig().match_policy, "--match-mode", help="Content matching: whole word or substring"
    ),
    token_case: TokenCase = typer.Option(
        AppConfig().token_case, "--token-case", help="Casing of the token prefix in copied names"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Search PDFs for the tokens in CSV_FILE, copy matches and report the rest."""
    _setup_logging(verbose)
    config = AppConfig(
        search_column=column,
        extension=extension,
        match_policy=match_mode,
        token_case=token_case,
    )

    try:
        tokens = load_tokens(read_tokens_csv(csv_file, config.search_column))
    except TokenSourceError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    if not tokens:
        console.print("[yellow]No usable tokens found in the CSV file.[/yellow]")

    console.print(f"Scanning [bold]{root_dir}[/bold] for {len(tokens)} token(s) with {workers} worker(s)...")
    scanner = Scanner(
        tokens,
        workers=workers,
        extension=config.extension,
        policy=config.match_policy,
    )
    result = scanner.scan(root_dir)

    try:
        copy_stats = copy_matches(result.matches, target_dir, config.token_case)
        unmatched = write_unmatched(tokens, result.matches, output_file)
    except OSError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    stats = result.stats
    console.print(f"Files: {stats.dispatched}, failed: {stats.failed}")
    console.print(f"Matched tokens: {len(tokens) - len(unmatched)}, unmatched: {len(unmatched)}")
    console.print(
        f"Copied: {copy_stats.copied}, skipped: {copy_stats.skipped}, failed: {copy_stats.failed}"
    )
