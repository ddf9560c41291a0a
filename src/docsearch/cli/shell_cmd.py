"""docsearch shell — keep one index in memory and answer queries interactively."""

from __future__ import annotations

import asyncio

from rich.console import Console

COMMANDS = {
    "/reindex": "rebuild the index",
    "/status": "show index status",
    "/quit": "leave the shell",
}


def shell_cmd():
    """Interactive search session over one index."""
    from docsearch.cli.app import setup_logging
    from docsearch.cli.render import render_result, render_status
    from docsearch.search.service import create_service

    setup_logging()

    console = Console()
    service = create_service()
    min_query_length = service.config.min_query_length

    console.print(f"[bold]docsearch[/bold] over {service.repository.root_path}")
    console.print(", ".join(f"{cmd} ({desc})" for cmd, desc in COMMANDS.items()))

    async def _run():
        while True:
            try:
                line = await asyncio.to_thread(console.input, "[bold cyan]?[/bold cyan] ")
            except (EOFError, KeyboardInterrupt):
                break

            line = line.strip()
            if not line:
                continue
            if line == "/quit":
                break
            if line == "/reindex":
                with console.status("Reindexing..."):
                    await service.reload()
                console.print(render_status(service.get_status()))
                continue
            if line == "/status":
                console.print(render_status(service.get_status()))
                continue

            result = await service.search(line)
            console.print(render_result(result, min_query_length=min_query_length))

    asyncio.run(_run())
