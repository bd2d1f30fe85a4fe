from __future__ import annotations

import asyncio
import logging
import re
from pathlib import Path

import requests
import typer
from playwright.async_api import Error as PlaywrightError
from rich.console import Console
from rich.logging import RichHandler

from .. import __version__
from ..config import AppConfig, dump_config, load_config
from ..core import ExportService
from ..errors import ConversionError

console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger(__name__)

app = typer.Typer(help="Save a shared ChatGPT conversation as Markdown (and HTML)")

LATEST_RELEASE_URL = (
    "https://api.github.com/repos/Dicklesworthstone/"
    "chatgpt_shared_conversation_to_markdown_file/releases/latest"
)
HTTP_URL_RE = re.compile(r"^https?://", re.IGNORECASE)


def _load_config(path: Path | None) -> AppConfig:
    return load_config(path)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )


class StepPrinter:
    def __init__(self, total: int, quiet: bool) -> None:
        self.total = total
        self.quiet = quiet
        self.index = 0

    def __call__(self, message: str) -> None:
        self.index += 1
        if self.quiet:
            return
        console.print(f"[grey50][{self.index}/{self.total}][/grey50] [cyan]{message}[/cyan]")


def _fail(message: str, quiet: bool) -> None:
    if quiet:
        err_console.print(message, markup=False, highlight=False)
    else:
        err_console.print(f"[red]✖ {message}[/red]")


def check_for_updates() -> str | None:
    try:
        response = requests.get(
            LATEST_RELEASE_URL,
            headers={"Accept": "application/vnd.github+json"},
            timeout=10,
        )
        if not response.ok:
            return None
        tag = response.json().get("tag_name")
    except (requests.RequestException, ValueError) as exc:
        logger.debug("Update check failed: %s", exc)
        return None
    return str(tag) if tag else None


@app.command()
def export(
    url: str = typer.Argument(..., help="Public ChatGPT share link"),
    timeout_ms: int | None = typer.Option(None, "--timeout-ms", help="Per-step browser timeout in ms"),
    outfile: Path | None = typer.Option(None, "--outfile", help="Markdown output path"),
    quiet: bool = typer.Option(False, "--quiet", help="Only print errors"),
    check_updates: bool = typer.Option(False, "--check-updates", help="Report the latest release"),
    no_html: bool = typer.Option(False, "--no-html", help="Skip the HTML twin"),
    verbose: bool = typer.Option(False, "--verbose", help="Show info logging"),
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
) -> None:
    _configure_logging(verbose)
    if not HTTP_URL_RE.match(url):
        _fail("Please pass a valid http(s) URL (public ChatGPT share link).", quiet)
        raise typer.Exit(1)

    cfg = _load_config(config)
    generate_html = cfg.runtime.generate_html and not no_html
    if timeout_ms is not None and timeout_ms <= 0:
        timeout_ms = None

    total = 6 + int(generate_html) + int(check_updates)
    step = StepPrinter(total, quiet)
    service = ExportService(cfg)
    try:
        result = asyncio.run(
            service.export(
                url,
                outfile,
                timeout_ms=timeout_ms,
                generate_html=generate_html,
                progress=step,
            )
        )
    except (ConversionError, OSError, PlaywrightError) as exc:
        _fail(str(exc), quiet)
        raise typer.Exit(1) from exc

    if not quiet:
        console.print(f"[green]✔ Saved {result.markdown_path.name}[/green]")
    step("Location")
    if not quiet:
        console.print(f"   [green]{result.markdown_path}[/green]")
        if result.html_path is not None:
            console.print(f"   [green]{result.html_path}[/green]")

    if check_updates:
        step("Checking for updates")
        tag = check_for_updates()
        if tag and not quiet:
            console.print(f"[grey50]Latest release: {tag}[/grey50]")

    step("All done. Enjoy!")


@app.command()
def version() -> None:
    console.print(f"csctm v{__version__}", markup=False, highlight=False)


@app.command()
def show_config(
    config: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
) -> None:
    console.print_json(dump_config(_load_config(config)))


if __name__ == "__main__":
    app()
