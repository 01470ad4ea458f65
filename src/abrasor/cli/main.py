import logging
from typing import List, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.tree import Tree

from ..config import (
    KNOWN_KEYS,
    get_config_file,
    get_config_value,
    get_strict_tokens,
    set_config_value,
)
from ..domain.errors import AbrasorError
from ..formula.evaluator import evaluate
from ..formula.nodes import ExpressionNode, LiteralNode, VariableNode, BinaryOpNode
from ..formula.parser import parse_formula
from ..formula.serializer import dump_formula, render
from .calculator_commands import app as calculator_app, parse_bindings

app = typer.Typer()
console = Console()

app.add_typer(calculator_app, name="calculator", help="Manage calculator definitions")


def build_tree(node: ExpressionNode, tree: Optional[Tree] = None) -> Tree:
    """rich tree view of a formula."""
    if isinstance(node, BinaryOpNode):
        label = f"[bold magenta]{node.operator}[/bold magenta]"
    elif isinstance(node, VariableNode):
        label = f"[green]{node.name}[/green]"
        if node.label:
            label += f" [dim]({node.label})[/dim]"
    elif isinstance(node, LiteralNode):
        label = f"[cyan]{node.value}[/cyan]"
    else:
        raise TypeError(f"Invalid expression node: {type(node).__name__}")

    branch = Tree(label) if tree is None else tree.add(label)
    if isinstance(node, BinaryOpNode):
        build_tree(node.left, branch)
        build_tree(node.right, branch)
    return branch


def compile_or_exit(formula: str, strict: Optional[bool]) -> ExpressionNode:
    if strict is None:
        strict = get_strict_tokens()
    try:
        tree = parse_formula(formula, strict=strict)
    except AbrasorError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    if tree is None:
        console.print("[yellow]No formula entered.[/yellow]")
        raise typer.Exit(code=1)
    return tree


@app.callback()
def main_callback(verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging")):
    """grinding calculator formulas."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=console, show_path=False)],
        )


@app.command()
def tree(
    formula: str,
    as_json: bool = typer.Option(False, "--json", help="Print the stored document form"),
    strict: Optional[bool] = typer.Option(None, "--strict/--lenient", help="Reject unknown characters"),
):
    """show how a formula is parsed."""
    node = compile_or_exit(formula, strict)
    if as_json:
        console.print_json(dump_formula(node))
    else:
        console.print(build_tree(node))


@app.command(name="render")
def render_command(
    formula: str,
    strict: Optional[bool] = typer.Option(None, "--strict/--lenient", help="Reject unknown characters"),
):
    """print a formula in canonical form."""
    node = compile_or_exit(formula, strict)
    console.print(render(node), highlight=False)


@app.command(name="eval")
def eval_command(
    formula: str,
    assignments: List[str] = typer.Option([], "--set", "-s", help="Variable binding, e.g. vw=30"),
    strict: Optional[bool] = typer.Option(None, "--strict/--lenient", help="Reject unknown characters"),
):
    """evaluate a formula with the given variable values."""
    node = compile_or_exit(formula, strict)
    bindings = parse_bindings(assignments)
    try:
        result = evaluate(node, bindings)
    except AbrasorError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)

    console.print(Panel.fit(
        f"[bold]{render(node)}[/bold]\n"
        f"= [bold green]{result:g}[/bold green]",
        border_style="green"
    ))


@app.command()
def config(
    action: str = typer.Argument(..., help="Action to perform: 'show' or 'set'"),
    key: str = typer.Argument(None, help="Config key (for set)"),
    value: str = typer.Argument(None, help="Config value (for set)"),
):
    """
    show or change settings.

    keys:
      ABRASOR_UNIT_SYSTEM   - metric (default) or imperial
      ABRASOR_STRICT_TOKENS - true to reject unknown characters in formulas
    """
    if action == "show":
        console.print(f"[dim]{get_config_file()}[/dim]")
        for k in KNOWN_KEYS:
            console.print(f"  {k}={get_config_value(k, '')}")

    elif action == "set":
        if not key or value is None:
            console.print("[red]Usage: abrasor config set KEY VALUE[/red]")
            raise typer.Exit(code=1)
        if key not in KNOWN_KEYS:
            console.print(f"[red]Unknown key '{key}'. Use one of: {', '.join(KNOWN_KEYS)}[/red]")
            raise typer.Exit(code=1)
        try:
            set_config_value(key, value)
        except RuntimeError as e:
            console.print(f"[red]Error:[/red] {e}")
            raise typer.Exit(code=1)
        console.print(f"[green]✓ {key} set to {value}[/green]")

    else:
        console.print(f"[red]Invalid action '{action}'. Use 'show' or 'set'.[/red]")
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
