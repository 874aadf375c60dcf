"""articlex CLI — the user interface.

Commands:
    articlex extract    — Extract one article (clean html + metadata)
    articlex prewarm    — Warm the cache for a batch of URLs
    articlex normalize  — Print the canonical cache key for a URL
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from articlex.utils import setup_logging

# Initialize logging on import
setup_logging()

app = typer.Typer(
    name="articlex",
    help="📰 articlex — clean article html from news pages",
    no_args_is_help=True,
    rich_markup_mode="rich",
)
console = Console()


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log pipeline events at debug level"),
):
    """📰 articlex — clean article html from news pages."""
    if verbose:
        setup_logging(level="debug")


# ── articlex extract ──────────────────────────────────────────


@app.command()
def extract(
    url: str = typer.Argument(..., help="Article URL"),
    rss_file: Path = typer.Option(
        None, "--rss-file", help="File holding the feed's content:encoded body for this URL",
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
    no_cache: bool = typer.Option(False, "--no-cache", help="Bypass the extraction cache"),
):
    """🔎 Extract the article body from URL."""
    rss_content = rss_file.read_text(encoding="utf-8") if rss_file else None
    code = asyncio.run(_extract(url, rss_content, as_json, no_cache))
    raise typer.Exit(code)


async def _extract(url: str, rss_content: str | None, as_json: bool, no_cache: bool) -> int:
    from articlex.errors import ExtractionError, PaywallError
    from articlex.extraction.extractor import ArticleExtractor

    async with ArticleExtractor() as extractor:
        try:
            if no_cache:
                result = await extractor.extract_article(url, rss_content=rss_content)
            else:
                result = await extractor.extract_article_cached(url, rss_content=rss_content)
        except PaywallError:
            console.print(f"[yellow]🔒 Paywalled — read it on the source site:[/] {escape(url)}")
            return 1
        except ExtractionError as exc:
            console.print(f"[red]✗ {type(exc).__name__}: {escape(str(exc))}[/]")
            return 1

    if as_json:
        console.print_json(json.dumps(result.model_dump(mode="json")))
        return 0

    meta = Table(show_header=False, box=None, padding=(0, 2))
    meta.add_column("Field", style="cyan")
    meta.add_column("Value", style="white")
    meta.add_row("Strategy", f"[green]{result.metadata.strategy.value}[/]")
    meta.add_row("Text length", f"{result.metadata.text_length:,} chars")
    meta.add_row("Source", result.metadata.source_url)
    console.print(Panel(meta, title="[bold cyan]📰 Extraction[/]", border_style="cyan"))
    console.print(result.html, markup=False, highlight=False)
    return 0


# ── articlex prewarm ──────────────────────────────────────────


@app.command()
def prewarm(
    urls: list[str] = typer.Argument(..., help="Article URLs to warm"),
    concurrency: int = typer.Option(3, "--concurrency", "-c", help="Max in-flight extractions"),
):
    """🔥 Warm the extraction cache for URLS."""
    asyncio.run(_prewarm(urls, concurrency))


async def _prewarm(urls: list[str], concurrency: int) -> None:
    from articlex.extraction.extractor import ArticleExtractor
    from articlex.extraction.prewarm import prewarm as run_prewarm

    async with ArticleExtractor() as extractor:
        report = await run_prewarm(extractor, urls, concurrency=concurrency)

        table = Table(show_header=True, header_style="bold")
        table.add_column("URL", style="white", overflow="fold")
        table.add_column("Result")
        for url in report.succeeded:
            entry = extractor.get_cached_extraction(url)
            detail = f"{entry.metadata.strategy.value} · {entry.metadata.text_length:,} chars" if entry else ""
            table.add_row(url, f"[green]✓[/] {detail}")
        for url, error in report.failed.items():
            table.add_row(url, f"[red]✗ {error}[/]")
        for url in report.skipped:
            table.add_row(url or "[dim](empty)[/]", "[dim]skipped[/]")

    console.print(table)
    console.print(
        f"\n[dim]{len(report.succeeded)} warmed · {len(report.failed)} failed · "
        f"{len(report.skipped)} skipped[/]"
    )


# ── articlex normalize ────────────────────────────────────────


@app.command()
def normalize(url: str = typer.Argument(..., help="URL to canonicalize")):
    """🔗 Print the normalized cache key for URL."""
    from articlex.extraction.urls import normalize_url

    console.print(normalize_url(url), markup=False, highlight=False)


if __name__ == "__main__":
    app()
