"""Crawl command for converting a documentation site to markdown."""

from __future__ import annotations

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.tree import Tree

from docmark.core.config import Settings
from docmark.core.errors import CrawlJobError, DocmarkError, ValidationError
from docmark.core.logger import setup_logging
from docmark.services.crawl import CrawlService
from docmark.services.models import CrawlReport, NodeStatus, ResultNode


def crawl_command(
    url: str = typer.Argument(..., help="Seed URL of the documentation site"),
    depth: int | None = typer.Option(
        None,
        "-d",
        "--depth",
        help="Maximum link depth (0=seed only, default from settings)",
    ),
    force: bool = typer.Option(False, "--force", help="Delete existing files and re-render"),
    output: Path | None = typer.Option(None, "-o", "--output", help="Output directory"),
    scope: str | None = typer.Option(None, "--scope", help="Path prefix to follow"),
    concurrency: int | None = typer.Option(
        None, "-c", "--concurrency", help="Pages rendered concurrently"
    ),
    allow_private: bool = typer.Option(
        False, "--allow-private", help="Allow localhost and private addresses"
    ),
) -> None:
    """Crawl a documentation site and write one markdown file per page."""
    overrides: dict[str, object] = {}
    if output is not None:
        overrides["output_dir"] = output
    if scope is not None:
        overrides["scope_prefix"] = scope
    if concurrency is not None:
        overrides["max_concurrency"] = concurrency
    settings = Settings(**overrides)
    setup_logging(settings)

    service = CrawlService(settings=settings, allow_private=allow_private)
    console = Console()

    try:
        report = asyncio.run(_run_crawl(service, url, depth, force, console))
    except ValidationError as exc:
        console.print(f"[red]Invalid request:[/red] {escape(str(exc))}")
        raise typer.Exit(code=2) from exc
    except CrawlJobError as exc:
        console.print(f"[red]Crawl failed:[/red] {escape(exc.url)} {escape(str(exc))}")
        raise typer.Exit(code=1) from exc
    except DocmarkError as exc:
        console.print(f"[red]Crawl could not start:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc

    console.print(_build_tree(report.result))
    console.print(_summary_panel(report))


async def _run_crawl(
    service: CrawlService,
    url: str,
    depth: int | None,
    force: bool,
    console: Console,
) -> CrawlReport:
    with console.status(f"Crawling {url}"):
        return await service.submit(url, max_depth=depth, force=force)


def _status_style(status: NodeStatus) -> str:
    return {
        NodeStatus.EXISTING: "yellow",
        NodeStatus.SUCCESS: "green",
        NodeStatus.ERROR: "red",
    }[status]


def _label(node: ResultNode) -> str:
    color = _status_style(node.status)
    label = (
        f"[{color}]{node.status.value}[/{color}] {escape(node.url)} -> {node.filename}"
    )
    if node.error:
        label += f" [dim]({escape(node.error)})[/dim]"
    return label


def _build_tree(root: ResultNode) -> Tree:
    tree = Tree(_label(root))
    stack = [(root, tree)]
    while stack:
        node, branch = stack.pop()
        for child in node.children:
            stack.append((child, branch.add(_label(child))))
    return tree


def _summary_panel(report: CrawlReport) -> Panel:
    nodes = report.result.walk()
    counts = {status: 0 for status in NodeStatus}
    for node in nodes:
        counts[node.status] += 1
    return Panel(
        f"Pages: {len(nodes)}\n"
        f"Rendered: {counts[NodeStatus.SUCCESS]}\n"
        f"Existing: {counts[NodeStatus.EXISTING]}\n"
        f"Failed: {counts[NodeStatus.ERROR]}\n"
        f"Files in store: {report.files_processed}\n"
        f"Time: {report.time_elapsed:.2f}s",
        title="Crawl Summary",
    )
