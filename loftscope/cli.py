"""CLI entry point for loftscope."""

import json
from pathlib import Path
from typing import Annotated, Any, NoReturn

import typer
from rich.console import Console

from loftscope.core.exceptions import LoftscopeError, SymbolNotFoundError
from loftscope.core.graph.models import TreeNode
from loftscope.core.graph.traversal import get_subclass_tree
from loftscope.core.logging import configure_logging
from loftscope.core.models import Member, SymbolEntity
from loftscope.features.models import Severity
from loftscope.session import AnalysisSession

app = typer.Typer(
    name="loftscope",
    help="Semantic model and editor features for Polyloft (.pf) sources.",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)

_SEVERITY_STYLES = {
    Severity.ERROR: "red",
    Severity.WARNING: "yellow",
    Severity.INFO: "blue",
    Severity.HINT: "dim",
}

RootOption = Annotated[
    Path | None, typer.Option("--root", "-r", help="Project root (default: current directory)")
]
JsonOption = Annotated[bool, typer.Option("--json", "-j", help="Output as JSON")]
VerboseOption = Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging on stderr")]
FileArgument = Annotated[Path, typer.Argument(help="Polyloft source file")]
LineArgument = Annotated[int, typer.Argument(help="Line (1-based)")]
ColumnArgument = Annotated[int, typer.Argument(help="Column (1-based)")]


def get_session(root: Path | None, verbose: bool = False) -> AnalysisSession:
    """Create a session for the given root and set up logging from its config."""
    try:
        session = AnalysisSession((root or Path(".")).resolve())
    except LoftscopeError as e:
        fail(e)
    if verbose:
        configure_logging(level="DEBUG")
    else:
        configure_logging(session.config.logging)
    return session


def fail(error: Exception) -> NoReturn:
    err_console.print(f"[red]Error:[/red] {error}")
    raise typer.Exit(1)


def member_to_dict(member: Member) -> dict[str, Any]:
    return {
        "name": member.name,
        "kind": member.kind.value,
        "owner": member.owner,
        "visibility": member.visibility.value,
        "static": member.is_static,
        "final": member.is_final,
        "signature": member.signature,
        "line": member.line,
    }


def entity_to_dict(entity: SymbolEntity) -> dict[str, Any]:
    return {
        "name": entity.name,
        "kind": entity.kind.value,
        "visibility": entity.visibility.value,
        "parent": entity.parent,
        "interfaces": list(entity.interfaces),
        "enclosing": entity.enclosing,
        "file": str(entity.file) if entity.file else None,
        "line": entity.span.line,
        "end_line": entity.span.end_line,
        "signature": entity.signature,
        "members": [member_to_dict(m) for m in entity.members],
    }


def tree_to_dict(node: TreeNode) -> dict[str, Any]:
    return {
        "name": node.name,
        "kind": node.entity.kind.value,
        "depth": node.depth,
        "children": [tree_to_dict(c) for c in node.children],
    }


@app.command()
def symbols(
    file: FileArgument,
    root: RootOption = None,
    output_json: JsonOption = False,
    verbose: VerboseOption = False,
) -> None:
    """List the entities declared in a file, with their members."""
    session = get_session(root, verbose)
    try:
        entities = session.symbols(file)
    except LoftscopeError as e:
        fail(e)

    if output_json:
        print(json.dumps([entity_to_dict(e) for e in entities]))
        return

    if not entities:
        console.print(f"No entities in [cyan]{file}[/cyan]")
        return
    for entity in entities:
        console.print(f"[bold cyan]{entity.signature}[/] [dim](line {entity.span.line})[/]")
        for member in entity.members:
            if member.synthetic:
                continue
            console.print(f"  {member.signature} [dim](line {member.line})[/]")


@app.command()
def lint(
    file: FileArgument,
    root: RootOption = None,
    output_json: JsonOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Report diagnostics for a file. Exits with 1 if any error is found."""
    session = get_session(root, verbose)
    try:
        diagnostics = session.lint(file)
    except LoftscopeError as e:
        fail(e)

    if output_json:
        print(json.dumps([d.to_dict() for d in diagnostics]))
    else:
        for d in diagnostics:
            style = _SEVERITY_STYLES[d.severity]
            console.print(
                f"{file}:{d.range.start_line}:{d.range.start_column}: "
                f"[{style}]{d.severity.value}[/] {d.message} [dim]\\[{d.code}][/]"
            )
        if not diagnostics:
            console.print("[green]No problems found[/green]")

    if any(d.severity is Severity.ERROR for d in diagnostics):
        raise typer.Exit(1)


@app.command()
def complete(
    file: FileArgument,
    line: LineArgument,
    column: ColumnArgument,
    root: RootOption = None,
    output_json: JsonOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Completion candidates at a position."""
    session = get_session(root, verbose)
    try:
        items = session.complete(file, line, column)
    except LoftscopeError as e:
        fail(e)

    if output_json:
        print(json.dumps([item.to_dict() for item in items]))
        return
    for item in items:
        detail = f" [dim]{item.detail}[/]" if item.detail else ""
        console.print(f"[cyan]{item.name}[/] ({item.kind.value}){detail}")


@app.command()
def hover(
    file: FileArgument,
    line: LineArgument,
    column: ColumnArgument,
    root: RootOption = None,
    output_json: JsonOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Describe the symbol at a position."""
    session = get_session(root, verbose)
    try:
        info = session.hover(file, line, column)
    except LoftscopeError as e:
        fail(e)

    if output_json:
        print(json.dumps(info.to_dict() if info else None))
        return
    if info is None:
        console.print("[dim]Nothing to show[/]")
        return
    console.print(f"[bold]{info.signature}[/] [dim]({info.kind})[/]")
    if info.documentation:
        console.print(info.documentation)


@app.command()
def definition(
    file: FileArgument,
    line: LineArgument,
    column: ColumnArgument,
    root: RootOption = None,
    output_json: JsonOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Find where the symbol at a position is declared."""
    session = get_session(root, verbose)
    try:
        location = session.definition(file, line, column)
    except LoftscopeError as e:
        fail(e)

    if output_json:
        print(json.dumps(location.to_dict() if location else None))
        return
    if location is None:
        console.print("[dim]No definition found[/]")
        return
    console.print(f"{location.file_path}:{location.line}:{location.column}")


@app.command()
def hierarchy(
    file: FileArgument,
    name: Annotated[str, typer.Argument(help="Entity name")],
    root: RootOption = None,
    output_json: JsonOption = False,
    verbose: VerboseOption = False,
) -> None:
    """Show an entity's parent chain, inherited members and subclasses."""
    session = get_session(root, verbose)
    try:
        graph = session.hierarchy(file)
        if name not in graph:
            raise SymbolNotFoundError(f"No entity named '{name}' in {file} or its imports")
    except LoftscopeError as e:
        fail(e)

    ancestors = graph.ancestors(name)
    members = graph.inherited_members(name)
    tree = get_subclass_tree(graph, name)

    if output_json:
        result = {
            "name": name,
            "ancestors": ancestors,
            "members": [member_to_dict(m) for m in members],
            "subclasses": tree_to_dict(tree) if tree else None,
        }
        print(json.dumps(result))
        return

    console.print(f"[bold cyan]{' < '.join([name, *ancestors])}[/]")
    console.print("  [green]Members:[/]")
    for member in members:
        console.print(f"    {member.signature} [dim]({member.owner})[/]")

    if tree is not None and tree.children:
        console.print("  [green]Subclasses:[/]")
        for node in tree:
            if node.depth:
                console.print(f"    {'  ' * (node.depth - 1)}└─ [blue]{node.name}[/]")


if __name__ == "__main__":
    app()
