from typing import Dict, List, Optional

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..config import get_config_dir, get_strict_tokens, get_unit_system
from ..domain.errors import AbrasorError, CalculatorValidationError, InvalidDocumentError
from ..domain.models import CalculatorInput
from ..formula.serializer import from_document, render
from ..registry.store import CalculatorStore
from ..services.calculator import CalculatorService
from ..utils.hash import hash_formula

app = typer.Typer()
console = Console()


def get_calculator_service() -> CalculatorService:
    """get calculator service instance."""
    return CalculatorService(CalculatorStore(get_config_dir() / "calculators.json"))


def parse_bindings(assignments: List[str]) -> Dict[str, float]:
    """turn ["vw=30", "ae=0.2"] into {"vw": 30.0, "ae": 0.2}."""
    bindings = {}
    for assignment in assignments:
        if "=" not in assignment:
            raise typer.BadParameter(f"expected name=value, got '{assignment}'")
        name, value = assignment.split("=", 1)
        try:
            bindings[name.strip()] = float(value)
        except ValueError:
            raise typer.BadParameter(f"'{value}' is not a number (for '{name.strip()}')")
    return bindings


def parse_input_spec(spec: str) -> CalculatorInput:
    """parse name[:label[:unit]] into an input definition."""
    parts = spec.split(":", 2)
    name = parts[0].strip()
    if not name:
        raise typer.BadParameter(f"input '{spec}' has no name")
    label = parts[1].strip() if len(parts) > 1 and parts[1].strip() else name
    unit = parts[2].strip() if len(parts) > 2 else ""
    return CalculatorInput(name=name, label=label, unit=unit)


def report(e: AbrasorError):
    if isinstance(e, CalculatorValidationError):
        console.print("[red]Calculator is not valid:[/red]")
        for problem in e.problems:
            console.print(f"  • {problem}")
    else:
        console.print(f"[red]Error:[/red] {e}")


@app.command("list")
def list_calculators():
    """list all calculators."""
    service = get_calculator_service()
    calculators = service.list_calculators()

    if not calculators:
        console.print("[yellow]No calculators defined.[/yellow]")
        console.print("\nCreate one with: [cyan]abrasor calculator add <name> <formula> --input vw[/cyan]")
        return

    table = Table(title="Calculators")
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="white")
    table.add_column("Formula", style="green")
    table.add_column("Uses", justify="right")
    table.add_column("Hash", style="dim")
    table.add_column("Status")

    for calc in calculators:
        try:
            formula = render(from_document(calc.formula)) if calc.formula else ""
        except InvalidDocumentError:
            formula = "[red]invalid[/red]"
        fingerprint = hash_formula(calc.formula) if calc.formula else ""
        status = "[green]enabled[/green]" if calc.enabled else "[dim]disabled[/dim]"
        table.add_row(calc.id, calc.name, formula, str(calc.usage_count), fingerprint, status)

    console.print(table)


@app.command("show")
def show_calculator(calculator_id: str):
    """show a calculator's definition."""
    service = get_calculator_service()
    unit_system = get_unit_system()

    try:
        calc = service.get(calculator_id)
        tree = service.formula_tree(calc)
    except AbrasorError as e:
        report(e)
        raise typer.Exit(1)

    grid = Table.grid(expand=True)
    grid.add_column(style="bold cyan", justify="right")
    grid.add_column(style="white")

    grid.add_row("Name:", calc.name)
    if calc.description:
        grid.add_row("Description:", calc.description)
    grid.add_row("Categories:", ", ".join(calc.categories) or "None")
    grid.add_row("Formula:", render(tree) if tree else "None")
    for i in calc.inputs:
        unit = i.unit_for(unit_system)
        grid.add_row(f"{i.name}:", f"{i.label} [dim]{unit}[/dim]" if unit else i.label)
    unit = calc.result_unit_for(unit_system)
    if unit:
        grid.add_row("Result unit:", unit)
    grid.add_row("Uses:", str(calc.usage_count))
    grid.add_row("Status:", "enabled" if calc.enabled else "disabled")

    console.print(Panel(grid, title=f"🧮 {calc.short_name or calc.name}", border_style="cyan"))


@app.command("add")
def add_calculator(
    name: str,
    formula: str,
    inputs: List[str] = typer.Option([], "--input", "-i", help="Input as name[:label[:unit]]"),
    categories: List[str] = typer.Option([], "--category", "-c", help="Category (repeatable)"),
    description: str = typer.Option("", "--description", "-d"),
    short_name: Optional[str] = typer.Option(None, "--short-name"),
    result_unit: str = typer.Option("", "--result-unit", "-u"),
    calculator_id: Optional[str] = typer.Option(None, "--id", help="Replace the calculator with this id"),
):
    """create or replace a calculator."""
    service = get_calculator_service()

    try:
        calc = service.save(
            name=name,
            formula=formula,
            inputs=[parse_input_spec(spec) for spec in inputs],
            categories=categories,
            calculator_id=calculator_id,
            description=description,
            short_name=short_name,
            result_unit=result_unit,
            strict=get_strict_tokens(),
        )
    except AbrasorError as e:
        report(e)
        raise typer.Exit(1)

    console.print(Panel.fit(
        f"[bold green]Calculator Saved[/bold green]\n"
        f"ID: {calc.id}\n"
        f"Name: {calc.name}\n"
        f"Formula: {render(from_document(calc.formula))}",
        border_style="green"
    ))


@app.command("run")
def run_calculator(
    calculator_id: str,
    assignments: List[str] = typer.Option([], "--set", "-s", help="Input value, e.g. vw=30"),
):
    """run a calculator with the given input values."""
    service = get_calculator_service()
    unit_system = get_unit_system()

    try:
        result = service.run(calculator_id, parse_bindings(assignments), unit_system)
    except AbrasorError as e:
        report(e)
        raise typer.Exit(1)

    console.print(f"[bold]{result.label}[/bold] = [bold green]{result.value:g}[/bold green] {result.unit}".rstrip())


@app.command("enable")
def enable_calculator(calculator_id: str):
    """make a calculator available again."""
    service = get_calculator_service()
    try:
        calc = service.set_enabled(calculator_id, True)
    except AbrasorError as e:
        report(e)
        raise typer.Exit(1)
    console.print(f"[green]✓ {calc.name} enabled[/green]")


@app.command("disable")
def disable_calculator(calculator_id: str):
    """hide a calculator without deleting it."""
    service = get_calculator_service()
    try:
        calc = service.set_enabled(calculator_id, False)
    except AbrasorError as e:
        report(e)
        raise typer.Exit(1)
    console.print(f"[yellow]{calc.name} disabled[/yellow]")


@app.command("remove")
def remove_calculator(
    calculator_id: str,
    force: bool = typer.Option(False, "--force", "-f", help="Skip confirmation"),
):
    """delete a calculator."""
    from rich.prompt import Confirm

    service = get_calculator_service()
    if not force and not Confirm.ask(f"[yellow]Delete calculator '{calculator_id}'?[/yellow]"):
        console.print("[dim]Cancelled.[/dim]")
        return

    try:
        service.remove(calculator_id)
    except AbrasorError as e:
        report(e)
        raise typer.Exit(1)
    console.print(f"[green]✓ Calculator {calculator_id} removed[/green]")


if __name__ == "__main__":
    app()
