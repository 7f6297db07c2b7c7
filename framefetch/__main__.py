"""
Entry point for ``python -m framefetch`` and the ``framefetch`` script.

Errors from the client are shown as a panel with suggestions; anything else is
reported as unexpected, with the traceback kept for ``-vv``.
"""

import logging
import sys

import typer
from rich.console import Console

from framefetch.cli.app import app
from framefetch.cli.formatters import format_error_with_suggestions
from framefetch.exceptions import FrameFetchError

log = logging.getLogger("framefetch")


def main() -> None:
    console = Console()
    try:
        app()
    except (typer.Exit, typer.Abort):
        pass
    except KeyboardInterrupt:
        console.print("\n[yellow]⚠️  Interrupted.[/yellow]")
        sys.exit(130)
    except FrameFetchError as e:
        console.print(f"\n{format_error_with_suggestions(e)}")
        sys.exit(1)
    except Exception as e:
        console.print(f"\n{format_error_with_suggestions(e, {'type': 'Unexpected'})}")
        log.debug("Full traceback:", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
