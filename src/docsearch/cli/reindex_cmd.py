"""docsearch reindex — rebuild the index and report its status."""

from __future__ import annotations

import asyncio
import json

import typer
from rich.console import Console


def reindex_cmd():
    """Rebuild the index and show its status."""
    from docsearch.cli.app import is_json, setup_logging
    from docsearch.cli.render import render_status
    from docsearch.search.service import create_service

    setup_logging()

    service = create_service()
    asyncio.run(service.reload())
    status = service.get_status()

    if is_json():
        print(json.dumps(status.model_dump(mode="json"), indent=2, ensure_ascii=False))
    else:
        Console().print(render_status(status))

    if status.last_error:
        raise typer.Exit(code=1)
