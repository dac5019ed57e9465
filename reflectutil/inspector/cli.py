"""Command-line interface for inspecting classes."""

from __future__ import annotations

import importlib
import sys

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from reflectutil.inspector.report import TypeReport, build_report
from reflectutil.reflection import FieldNotFoundError, resolve_field
from reflectutil.reflection.util import qualified_name


def _load_class(ctx: click.Context, param: click.Parameter, value: str) -> type:
    """Import the class named by ``package.module:Qualified.Name``."""
    module_name, _, qualname = value.partition(":")
    if not module_name or not qualname:
        raise click.BadParameter("expected 'package.module:Qualified.Name'")

    try:
        obj: object = importlib.import_module(module_name)
    except ImportError as e:
        raise click.BadParameter(f"cannot import {module_name}: {e}") from e

    for part in qualname.split("."):
        try:
            obj = getattr(obj, part)
        except AttributeError as e:
            raise click.BadParameter(f"{module_name} has no attribute {qualname}") from e

    if not isinstance(obj, type):
        raise click.BadParameter(f"{value} is not a class")
    return obj


@click.group()
def cli() -> None:
    """Inspect fields, constructors and categories of Python classes."""


@cli.command()
@click.argument("target", callback=_load_class)
@click.option("--json", "output_json", is_flag=True, help="Output as JSON")
def describe(target: type, output_json: bool) -> None:
    """Describe a class and every field of its ancestor chain."""
    report = build_report(target)

    if output_json:
        print(report.to_json(indent=2))
    else:
        _output_plain(report)


@cli.command()
@click.argument("target", callback=_load_class)
@click.argument("field_name")
def resolve(target: type, field_name: str) -> None:
    """Show which class declares the field found for FIELD_NAME."""
    try:
        field = resolve_field(target, field_name)
    except FieldNotFoundError as e:
        print(e)
        sys.exit(1)

    print(f"{field.name} is declared on {qualified_name(field.owner)}: {field}")


def _join(values: list[str]) -> str:
    return escape(", ".join(values)) if values else "-"


def _output_plain(report: TypeReport) -> None:
    """Output a class report using rich text formatting."""
    console = Console()

    console.print(f"[bold cyan]{escape(report.name)}[/bold cyan]")
    summary = Table(show_header=False, box=None, padding=(0, 2, 0, 2))
    summary.add_column("Label", style="dim")
    summary.add_column("Value", style="white")
    summary.add_row("Modifiers", _join(report.modifiers))
    summary.add_row("Categories", _join(report.categories))
    summary.add_row("Ancestors", _join(report.ancestors))
    console.print(summary)
    console.print()

    console.print("[bold cyan]Fields[/bold cyan]")
    field_table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    field_table.add_column("Name", style="white")
    field_table.add_column("Type", style="yellow")
    field_table.add_column("Owner", style="dim")
    field_table.add_column("Modifiers", style="green")
    field_table.add_column("Categories", style="green")

    for field in report.fields:
        field_table.add_row(
            escape(field.name),
            escape(field.type),
            escape(field.owner),
            _join(field.modifiers),
            _join(field.categories),
        )

    console.print(field_table)
    console.print()

    console.print("[bold cyan]Constructors[/bold cyan]")
    ctor_table = Table(show_header=True, box=None, padding=(0, 2, 0, 0))
    ctor_table.add_column("Arity", style="yellow", justify="right")
    ctor_table.add_column("Parameters", style="white")

    for constructor in report.constructors:
        params = [f"{p.name}: {p.type}" for p in constructor.parameters]
        ctor_table.add_row(str(constructor.arity), _join(params))

    console.print(ctor_table)


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
