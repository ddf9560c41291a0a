"""docsearch CLI — Typer entrypoint with global options."""

from __future__ import annotations

import logging
import os
from typing import Annotated, Optional

import typer

app = typer.Typer(
    name="docsearch",
    help="Search a folder of Word documents by words and phrases.",
    no_args_is_help=True,
)

# Global state shared across subcommands
_state: dict = {"json": False}


def is_json() -> bool:
    """Check if --json output mode is active."""
    return _state["json"]


def setup_logging() -> None:
    """Configure root logging from the ``logging`` settings section."""
    from docsearch.config import get_settings

    cfg = get_settings().logging
    logging.basicConfig(level=cfg.level.upper(), format=cfg.format)


@app.callback()
def main(
    json_output: Annotated[
        bool, typer.Option("--json", help="Output as JSON (agent-friendly)")
    ] = False,
    root: Annotated[
        Optional[str], typer.Option("--root", help="Override project root directory")
    ] = None,
    docs: Annotated[
        Optional[str], typer.Option("--docs", "-d", help="Override the documents folder")
    ] = None,
):
    """Global options applied before any subcommand."""
    _state["json"] = json_output
    if root:
        os.environ["DOCSEARCH_ROOT"] = root
    if docs:
        os.environ["DOCSEARCH_DOCUMENTS__ROOT_PATH"] = docs
    if root or docs:
        from docsearch.config import reset_settings

        reset_settings()


# Register subcommands -------------------------------------------------------

from docsearch.cli.reindex_cmd import reindex_cmd  # noqa: E402
from docsearch.cli.search_cmd import search_cmd  # noqa: E402
from docsearch.cli.shell_cmd import shell_cmd  # noqa: E402

app.command(name="search", help="Search the documents folder.")(search_cmd)
app.command(name="reindex", help="Rebuild the index and show its status.")(reindex_cmd)
app.command(name="shell", help="Interactive search session over one index.")(shell_cmd)
