"""Main CLI application."""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.logging import RichHandler

from .config import load_config
from .errors import TsdocError
from .output import (
    lookup_to_dict,
    print_description,
    print_error,
    print_json,
    print_listing,
    print_not_found,
)
from .output.console import err_console
from .queries import LookupQuery

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="tsdoc",
    help="Show documentation for TypeScript symbols from built-in types, Node.js APIs, and imported packages.",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "--help"]},
)

EPILOG = """Examples:

  tsdoc Array.map

  tsdoc Promise.all

  tsdoc fs.readFile

  tsdoc express.Request
"""


def setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_time=False, show_path=False)],
        force=True,
    )


@app.command(epilog=EPILOG)
def lookup(
    ctx: typer.Context,
    symbol: Optional[str] = typer.Argument(None, help="Dotted symbol path, e.g. Array.map"),
    json_output: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
    config_path: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to tsdoc JSON config"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log discovery and resolution details"),
):
    """Show documentation for a TypeScript symbol."""
    if not symbol:
        typer.echo(ctx.get_help())
        raise typer.Exit(0)

    setup_logging(verbose)

    try:
        config = load_config(config_path)
        result = LookupQuery(config).execute(symbol)
    except Exception as e:
        if not isinstance(e, TsdocError):
            logger.debug("Lookup failed", exc_info=True)
        print_error(str(e) or type(e).__name__)
        raise typer.Exit(1)

    if not result.found:
        if result.reason:
            logger.info("%s", result.reason)
        print_not_found(symbol)
        raise typer.Exit(1)

    if json_output:
        print_json(lookup_to_dict(result))
    elif result.listing is not None:
        print_listing(result.listing)
    else:
        print_description(result.description)


def main():
    """Entry point."""
    app()


if __name__ == "__main__":
    main()
