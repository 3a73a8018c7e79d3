"""Typer application entry point for docmark CLI."""

import typer

from docmark.cli.commands import crawl as crawl_command
from docmark.cli.commands import status as status_command

app = typer.Typer(no_args_is_help=True, name="docmark")

app.add_typer(status_command.app, name="status")

# Register crawl as a direct command (not a sub-typer) to avoid argument
# parsing issues
app.command(name="crawl", help="Crawl a documentation site into markdown files")(
    crawl_command.crawl_command
)


if __name__ == "__main__":
    app()
