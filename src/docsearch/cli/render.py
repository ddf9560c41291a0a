"""Rich rendering of search results and index status."""

from __future__ import annotations

from rich.console import RenderableType
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from docsearch.models import IndexStatus, SearchResult, SearchStatus


class _Folder:
    """Folder node used to group hits by path segment."""

    def __init__(self, name: str):
        self.name = name
        self.folders: dict[str, _Folder] = {}
        self.files: dict[str, list[str]] = {}

    def folder(self, name: str) -> _Folder:
        key = name.casefold()
        if key not in self.folders:
            self.folders[key] = _Folder(name)
        return self.folders[key]


def build_folder_tree(result: SearchResult) -> _Folder:
    """Group hits into a folder hierarchy keyed by relative path segments."""
    root = _Folder("")
    for hit in result.hits:
        parts = [p.strip() for p in hit.relative_path.replace("\\", "/").split("/") if p.strip()]
        if not parts:
            continue
        node = root
        for part in parts[:-1]:
            node = node.folder(part)
        node.files[parts[-1]] = hit.contexts
    return root


def _add_nodes(branch: Tree, folder: _Folder) -> None:
    for sub in sorted(folder.folders.values(), key=lambda f: f.name.casefold()):
        _add_nodes(branch.add(Text(sub.name, style="bold blue")), sub)
    for name in sorted(folder.files, key=str.casefold):
        leaf = branch.add(Text(name, style="bold"))
        for context in folder.files[name]:
            if context.strip():
                leaf.add(Text(context, style="dim"))


def render_result(result: SearchResult, *, min_query_length: int) -> RenderableType:
    """Render a SearchResult the way a person wants to read it."""
    if result.status == SearchStatus.QUERY_TOO_SHORT:
        return Text(
            f"Query is too short. Enter at least {min_query_length} character(s).",
            style="yellow",
        )
    if result.status == SearchStatus.INDEX_EMPTY:
        return Text(
            f'No documents found. Put .docx files into "{result.root_path}" and reindex.',
            style="yellow",
        )
    if result.status == SearchStatus.ERROR:
        message = "Search failed."
        if result.error_message:
            message = f"Search failed: {result.error_message}"
        return Text(message, style="red")
    if result.total_found == 0:
        return Text("Nothing found. Try a more specific query.", style="yellow")

    header = f"Found {result.total_found} file(s)"
    if result.is_truncated:
        header += f" (showing first {len(result.hits)})"

    tree = Tree(Text(header, style="bold green"), guide_style="dim")
    _add_nodes(tree, build_folder_tree(result))
    return tree


def render_status(status: IndexStatus) -> Table:
    table = Table(title="Document index", show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")

    built = status.last_built_at.isoformat(timespec="seconds") if status.last_built_at else "never"
    table.add_row("Root", Text(status.root_path))
    table.add_row("Ready", "[green]yes[/green]" if status.is_ready else "[yellow]no[/yellow]")
    table.add_row("Documents", str(status.document_count))
    table.add_row("Failed", str(status.failed_document_count))
    table.add_row("Built at", built)
    table.add_row("Last error", Text(status.last_error, style="red") if status.last_error else "-")
    return table
