"""
godot-llms CLI - Godot documentation to llms.md converter

A command-line tool that turns the Godot RST documentation into a single
Markdown file for language-model consumption by:
1. Cloning or updating the godot-docs repository
2. Converting every reference page to Markdown (pandoc)
3. Filtering code tabs, cleaning markup and rebuilding API tables
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel

from godot_llms import __version__
from godot_llms.config import ConverterConfig, load_config
from godot_llms.converter import PandocConverter
from godot_llms.formatters import build_header, write_llms_file
from godot_llms.pipeline import DocumentConversionPipeline
from godot_llms.repository import RepositoryManager
from godot_llms.schemas import ConversionSummary, LanguageFilter
from godot_llms.utils import FileScanner

app = typer.Typer(
    name="godot-llms",
    help="Convert the Godot documentation into a single llms.md file",
    add_completion=False,
)

console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _show_compatibility_warning() -> None:
    console.print(Panel.fit(
        "[bold yellow]⚠️  COMPATIBILITY WARNING[/bold yellow]\n\n"
        "This parser is designed for the Godot docs master branch as of May 30, 2025.\n"
        "Using different branches or older commits may result in parsing issues.\n"
        "For best results, use the default master branch.",
        border_style="yellow"
    ))


def _resolve_config(config_path: Optional[Path], overrides: dict) -> ConverterConfig:
    try:
        return load_config(config_path, overrides)
    except (ValueError, ValidationError) as e:
        console.print(f"[red]❌ Invalid configuration: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def convert(
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="JSON config file (default: ./converter.config.json if present)",
    ),
    docs_path: Optional[Path] = typer.Option(None, "--docs-path", "-d", help="Godot docs checkout (default: ./godot-docs)"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Output file (default: ./llms.md)"),
    language: Optional[LanguageFilter] = typer.Option(
        None,
        "--language",
        "-l",
        case_sensitive=False,
        help="Keep code tabs for one language only (default: both)",
    ),
    concurrency: Optional[int] = typer.Option(
        None,
        "--concurrency",
        "-w",
        help="Number of documents converted at once (default: 5)",
    ),
    no_git: bool = typer.Option(False, "--no-git", help="Skip cloning/updating the docs repository"),
    no_update: bool = typer.Option(False, "--no-update", help="Use an existing checkout as-is"),
    branch: Optional[str] = typer.Option(None, "--branch", "-b", help="Docs branch to clone or update"),
    repository: Optional[str] = typer.Option(None, "--repository", "-r", help="Docs repository URL"),
    pandoc: Optional[str] = typer.Option(None, "--pandoc", help="pandoc executable (default: pandoc)"),
    header: bool = typer.Option(False, "--header", help="Prepend a provenance header to the output"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
):
    """
    Convert the Godot documentation into llms.md.

    Every .rst page outside the excluded top-level directories is converted
    to Markdown, filtered to the chosen code language, cleaned of leftover
    markup and given Properties/Methods tables. Pages that fail to convert
    are reported and skipped.

    Example:
        godot-llms convert --language gdscript --concurrency 8 -o llms.md
    """
    _setup_logging(verbose)

    git_overrides = {}
    if no_git:
        git_overrides["enabled"] = False
    if no_update:
        git_overrides["auto_update"] = False
    if branch:
        git_overrides["branch"] = branch
    if repository:
        git_overrides["repository"] = repository

    config = _resolve_config(config_path, {
        "godot_docs_path": docs_path,
        "output_file": output,
        "language": language,
        "concurrency": concurrency,
        "pandoc_path": pandoc,
        "include_header": True if header else None,
        "git": git_overrides or None,
    })

    console.print(Panel.fit(
        "[bold cyan]Godot Docs → llms.md[/bold cyan]\n\n"
        f"Docs Path: [yellow]{config.godot_docs_path}[/yellow]\n"
        f"Output: [yellow]{config.output_file}[/yellow]\n"
        f"Excluding: [yellow]{', '.join(config.excluded_directories) or 'nothing'}[/yellow]\n"
        f"Language: [yellow]{config.language.value}[/yellow]\n"
        f"Concurrency: [yellow]{config.concurrency}[/yellow]",
        border_style="cyan"
    ))
    _show_compatibility_warning()

    try:
        summary = _run_conversion(config)
    except KeyboardInterrupt:
        console.print("\n[yellow]⚠️  Conversion interrupted by user[/yellow]")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"\n[red]❌ Error: {e}[/red]")
        raise typer.Exit(1)

    _print_summary(summary, config.output_file)


def _run_conversion(config: ConverterConfig) -> ConversionSummary:
    """Repository setup, discovery, conversion and output writing."""
    if config.git.enabled:
        RepositoryManager(config.godot_docs_path, config.git).ensure_repository()

    scanner = FileScanner(config.godot_docs_path, config.excluded_directories)
    doc_files = scanner.scan()
    console.print(f"[bold]📁 Found {len(doc_files)} RST files to convert[/bold]")

    converter = PandocConverter(config.pandoc_path)
    if not converter.check_available():
        raise RuntimeError(f"pandoc executable not found: {config.pandoc_path}")

    pipeline = DocumentConversionPipeline(config, converter, docs_root=config.godot_docs_path)
    summary = asyncio.run(pipeline.run(doc_files))

    header = None
    if config.include_header:
        header = build_header(
            document_count=summary.successful,
            excluded_directories=config.excluded_directories,
            language=config.language,
            concurrency=config.concurrency,
        )
    write_llms_file(config.output_file, summary.documents, header)
    return summary


def _print_summary(summary: ConversionSummary, output_file: Path) -> None:
    console.print("\n")
    console.print(Panel.fit(
        "[bold green]✨ Conversion Complete![/bold green]",
        border_style="green"
    ))

    console.print(f"\n[bold]📊 Results[/bold]")
    console.print(f"   Duration: [cyan]{summary.duration_seconds:.1f}s[/cyan]")
    console.print(f"   Concurrency: [cyan]{summary.concurrency}[/cyan]")
    console.print(
        f"   Documents: [cyan]{summary.attempted}[/cyan] attempted, "
        f"[green]{summary.successful}[/green] included, [red]{summary.failed}[/red] failed"
    )

    if summary.failures:
        console.print(f"\n[bold yellow]⚠️  Skipped documents[/bold yellow]")
        for failure in summary.failures:
            console.print(f"   • {failure.label}")

    console.print(f"\n[bold]📁 Output written to:[/bold] [cyan]{output_file}[/cyan]")


@app.command("show-config")
def show_config(
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="JSON config file"),
):
    """Print the effective configuration as JSON."""
    config = _resolve_config(config_path, {})
    console.print_json(config.model_dump_json(by_alias=True, indent=2))


@app.command()
def version():
    """Show version information."""
    console.print(f"[bold cyan]godot-llms[/bold cyan] version [yellow]{__version__}[/yellow]")


def main():
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
