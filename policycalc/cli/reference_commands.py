"""Reference data CLI commands for Policy Calc.

Inspects the year-specific reference tables (reference_data/YYYY.yaml) and
lists the data sources behind them.
"""

import json

import click
import yaml
from rich import box
from rich.console import Console
from rich.table import Table

from policycalc.sdk import get_available_years, get_reference_dir

from .options import format_option, load_reference_or_fail, resolve_output_format


@click.group()
def reference():
    """Inspect reference tables (brackets, premiums, state data)."""
    pass


@reference.command("years")
def reference_years():
    """List available reference years."""
    reference_dir = get_reference_dir()
    years = get_available_years()

    click.echo(f"Reference directory: {reference_dir}")
    if not years:
        click.echo("No reference data files found.")
        return

    for year in years:
        click.echo(f"  {year}")


@reference.command("show")
@click.option("--year", type=int, help="Reference year (default: settings, else latest)")
@click.option("--section", help="Show one top-level section (e.g. federal_tax_brackets, states)")
def reference_show(year, section):
    """Show the loaded reference tables as YAML.

    \b
    Examples:
      policy-calc reference show --section federal_tax_brackets
      policy-calc reference show --year 2024 --section scenarios
    """
    data = load_reference_or_fail(year).model_dump(mode="json")

    if section:
        if section not in data:
            raise click.ClickException(
                f"Unknown section '{section}'. Available: {', '.join(data.keys())}"
            )
        data = {section: data[section]}

    click.echo(yaml.dump(data, default_flow_style=False, sort_keys=False))


@click.command("sources")
@click.option("--year", type=int, help="Reference year (default: settings, else latest)")
@format_option
def sources(year, output_format):
    """List data sources and methodology notes."""
    reference = load_reference_or_fail(year)

    if resolve_output_format(output_format) == "json":
        payload = {
            "year": reference.year,
            "sources": [s.model_dump() for s in reference.data_sources],
            "methodology": dict(reference.methodology_notes),
        }
        click.echo(json.dumps(payload, indent=2))
        return

    console = Console()
    table = Table(title=f"Data Sources ({reference.year})", box=box.ROUNDED)
    table.add_column("Source", style="bold")
    table.add_column("Type")
    table.add_column("Updated")
    table.add_column("URL", style="dim")
    for source in reference.data_sources:
        table.add_row(source.name, source.credibility, source.last_updated, source.url)
    console.print(table)

    for topic, note in reference.methodology_notes.items():
        console.print(f"[bold]{topic.replace('_', ' ').title()}[/bold]")
        console.print(f"  {note}")
