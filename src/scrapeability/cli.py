"""Command-line interface for Scrapeability."""

import asyncio
import logging
from enum import Enum
from typing import List, Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .config import get_settings
from .core import (
    BrowserInstaller,
    BrowserManager,
    InstallError,
    InvalidUrlError,
    check_page_scrapeability,
    format_error_for_user,
    manual_install_instructions,
    resolve_check_url,
)
from .models.schemas import CheckOptions, CheckResult, DetectionToggles
from .reporting import render_check_result, summarize_result
from .utils.url import extract_url_from_text

# Configure rich console for better output
console = Console()
app = typer.Typer(
    name="scrapeability",
    help="Scrapeability - check whether a web page can be reliably scraped",
    no_args_is_help=True,
)

# Configure logging
logging.basicConfig(
    level=logging.WARNING,  # Only show warnings and errors by default
    format='%(levelname)s: %(message)s'
)


class Detector(str, Enum):
    """Detectors that can be skipped from the command line."""
    ANTI_BOT = "anti-bot"
    RATE_LIMIT = "rate-limit"
    ROBOTS_TXT = "robots-txt"
    AUTHENTICATION = "authentication"


@app.command()
def check(
    url: str = typer.Argument(..., help="URL to check (https:// is added if missing)"),
    timeout: Optional[int] = typer.Option(
        None,
        "--timeout",
        "-t",
        help="Navigation timeout in milliseconds"
    ),
    no_screenshot: bool = typer.Option(
        False,
        "--no-screenshot",
        help="Do not capture a screenshot"
    ),
    screenshot_dir: Optional[str] = typer.Option(
        None,
        "--screenshot-dir",
        "-o",
        help="Directory for screenshots"
    ),
    no_console_errors: bool = typer.Option(
        False,
        "--no-console-errors",
        help="Do not capture browser console errors"
    ),
    skip: Optional[List[Detector]] = typer.Option(
        None,
        "--skip",
        "-s",
        help="Detector to skip (repeatable)"
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the result as JSON"
    ),
    install: bool = typer.Option(
        False,
        "--install",
        help="Install Chromium first if it is missing"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    ),
):
    """
    Check whether a URL can be loaded and scraped.

    Examples:
        scrapeability check https://quotes.toscrape.com/
        scrapeability check example.com --skip robots-txt --json
    """
    _configure_logging(verbose)

    try:
        normalized = resolve_check_url(url)
    except InvalidUrlError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    _check_and_report(
        normalized,
        _build_options(timeout, no_screenshot, screenshot_dir, no_console_errors, skip or []),
        as_json=as_json,
        install=install,
        verbose=verbose,
    )


@app.command("check-text")
def check_text(
    text: str = typer.Argument(..., help="Text containing a URL, e.g. a copied log line"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
):
    """
    Find the first URL in a piece of text and check it.

    Examples:
        scrapeability check-text "see https://example.com/docs for details"
    """
    _configure_logging(verbose)

    url = extract_url_from_text(text)
    if url is None:
        console.print("[red]Error: No valid URL found in text[/red]")
        raise typer.Exit(1)

    if not as_json:
        console.print(f"Found URL: {url}")
    _check_and_report(url, get_settings().get_check_options(), as_json=as_json, verbose=verbose)


@app.command()
def install():
    """Install the Chromium browser used for checks."""
    installer = BrowserInstaller()
    try:
        with console.status("Downloading Chromium browser..."):
            installer.install_browser()
    except InstallError as e:
        console.print(f"[red]{e}[/red]")
        console.print(manual_install_instructions())
        raise typer.Exit(1)

    console.print("[green]Chromium installed successfully[/green]")


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Bind port"),
):
    """Run the HTTP API server."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "scrapeability.api.main:app",
        host=host or settings.host,
        port=port or settings.port,
        log_level=settings.log_level.lower(),
    )


@app.command()
def config():
    """Show the effective configuration."""
    settings = get_settings()

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Setting")
    table.add_column("Value")
    for name, value in settings.model_dump(mode="json").items():
        table.add_row(name, str(value))

    console.print(table)


@app.command()
def version():
    """Show version information."""
    from . import __version__
    console.print(f"Scrapeability version {__version__}")


def _configure_logging(verbose: bool) -> None:
    if verbose:
        logging.getLogger().setLevel(logging.INFO)
        logging.getLogger("scrapeability").setLevel(logging.DEBUG)


def _build_options(
    timeout: Optional[int],
    no_screenshot: bool,
    screenshot_dir: Optional[str],
    no_console_errors: bool,
    skip: List[Detector],
) -> CheckOptions:
    """Merge command-line flags over the configured check options."""
    settings = get_settings()
    toggles = DetectionToggles(
        anti_bot=settings.detect_anti_bot and Detector.ANTI_BOT not in skip,
        rate_limit=settings.detect_rate_limit and Detector.RATE_LIMIT not in skip,
        robots_txt=settings.detect_robots_txt and Detector.ROBOTS_TXT not in skip,
        authentication=settings.detect_authentication and Detector.AUTHENTICATION not in skip,
    )

    try:
        return settings.get_check_options(
            timeout=timeout,
            screenshot_enabled=False if no_screenshot else None,
            screenshot_path=screenshot_dir,
            check_console_errors=False if no_console_errors else None,
            detections=toggles,
        )
    except ValueError as e:
        console.print(f"[red]Invalid options: {e}[/red]")
        raise typer.Exit(1)


def _check_and_report(
    url: str,
    options: CheckOptions,
    as_json: bool = False,
    install: bool = False,
    verbose: bool = False,
) -> None:
    """Run one check and print its result, exiting non-zero on failure."""
    try:
        result = asyncio.run(_run_check(url, options, install=install, show_progress=not as_json))
    except KeyboardInterrupt:
        console.print("\n[yellow]Check cancelled by user[/yellow]")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"[red]{format_error_for_user(e)}[/red]")
        if verbose:
            console.print_exception()
        raise typer.Exit(1)

    if result is None:
        console.print("[yellow]Chromium browser is required to run checks.[/yellow]")
        console.print(manual_install_instructions())
        raise typer.Exit(1)

    if as_json:
        console.print_json(result.model_dump_json(exclude_none=True))
    else:
        render_check_result(result, console)
        colour = "green" if result.success and not result.console_errors else (
            "yellow" if result.success else "red"
        )
        console.print(f"[{colour}]{summarize_result(result)}[/{colour}]")

    if not result.success:
        raise typer.Exit(1)


async def _run_check(
    url: str,
    options: CheckOptions,
    install: bool = False,
    show_progress: bool = True,
) -> Optional[CheckResult]:
    """Ensure a browser is available, then check the URL."""
    installer = BrowserInstaller()
    if not await installer.ensure_browser_installed(auto_install=install):
        return None

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
        disable=not show_progress,
    ) as progress:
        task = progress.add_task("Launching browser...", total=None)

        async with BrowserManager() as browser:
            progress.update(task, description=f"Checking {url}...")
            return await check_page_scrapeability(browser, url, options)


def main() -> None:
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
