"""docsearch search — run one query against the documents folder."""

from __future__ import annotations

import asyncio
import json
from typing import Annotated

import typer
from rich.console import Console


def search_cmd(
    query: Annotated[str, typer.Argument(help="Words or phrase to look for")],
    max_results: Annotated[
        int | None,
        typer.Option("--max-results", "-n", min=1, help="Maximum number of files to show"),
    ] = None,
):
    """Search the documents folder."""
    from docsearch.cli.app import is_json, setup_logging
    from docsearch.cli.render import render_result
    from docsearch.config import SearchConfig, get_settings
    from docsearch.models import SearchStatus
    from docsearch.search.service import create_service

    setup_logging()

    cfg = get_settings().search
    if max_results is not None:
        cfg = SearchConfig.model_validate({**cfg.model_dump(), "max_results": max_results})

    service = create_service(config=cfg)
    result = asyncio.run(service.search(query))

    if is_json():
        print(json.dumps(result.model_dump(mode="json"), indent=2, ensure_ascii=False))
    else:
        Console().print(render_result(result, min_query_length=cfg.min_query_length))

    if result.status == SearchStatus.ERROR:
        raise typer.Exit(code=1)
