"""Policy Calc CLI - Command-line interface for policy impact estimates."""

import json

import click
from rich.console import Console

from policycalc import __version__
from policycalc.sdk import (
    FamilyStatus,
    IncomeRange,
    ProfileNotFoundError,
    calculate_federal_taxes,
    load_profile,
)
from policycalc.sdk.impact import PolicyCalculator, resolve_income

from .options import (
    build_form_data,
    emit_results,
    form_options,
    format_option,
    load_reference_or_fail,
    pop_form_fields,
    read_form_file,
    resolve_output_format,
)
from .profile_commands import profile as profile_group
from .reference_commands import reference as reference_group
from .reference_commands import sources
from .renderers import render_federal_taxes
from .settings_commands import settings as settings_group
from .wizard_commands import wizard


@click.group()
@click.version_option(version=__version__, prog_name="policy-calc")
def cli():
    """Policy Calc - Personal impact of Current Law vs the Big Bill.

    Estimates federal tax, healthcare, energy and community effects for a
    household profile from static reference tables.

    Configuration is loaded from (in order):

    \b
    1. POLICY_CALC_CONFIG_PATH environment variable
    2. ~/.config/policy-calc/ (XDG default)

    Run 'policy-calc wizard' for a guided calculation.
    """
    pass


# Add subcommand groups
cli.add_command(profile_group)
cli.add_command(settings_group)
cli.add_command(reference_group)
cli.add_command(sources)
cli.add_command(wizard)


@cli.command("calculate")
@form_options
@click.option("--input", "input_file", type=click.Path(exists=True, dir_okay=False),
              help="JSON file with form data (camelCase or snake_case keys)")
@click.option("--profile", "use_profile", is_flag=True, help="Start from the saved profile")
@click.option("--year", type=int, help="Reference year (default: settings, else latest)")
@format_option
def calculate(input_file, use_profile, year, output_format, **kwargs):
    """Calculate policy impact for a household.

    Form values are layered: saved profile (with --profile), then the
    --input file, then command-line options. Unset fields use defaults.

    \b
    Examples:
      policy-calc calculate --state CA --income-range 45k-95k
      policy-calc calculate --profile --children 2 --format json
      policy-calc calculate --input form.json --no-big-bill
    """
    option_fields = pop_form_fields(kwargs)

    profile_fields = None
    if use_profile:
        try:
            profile_fields = load_profile(require_exists=True)
        except ProfileNotFoundError as e:
            raise click.ClickException(str(e))

    file_fields = read_form_file(input_file) if input_file else None
    form_data = build_form_data(profile_fields, file_fields, option_fields)

    reference = load_reference_or_fail(year)
    results = PolicyCalculator(reference).calculate(form_data)
    emit_results(results.to_json_dict(), output_format)


@cli.command("tax")
@click.option("--income", type=float, help="Annual income in dollars")
@click.option("--income-range", "income_range", type=click.Choice([r.value for r in IncomeRange]),
              help="Use the range's median income instead of --income")
@click.option("--family-status", "family_status", type=click.Choice([s.value for s in FamilyStatus]),
              default=FamilyStatus.SINGLE.value, show_default=True)
@click.option("--children", type=click.IntRange(0, 10), default=0, help="Qualifying children")
@click.option("--other-dependents", "other_dependents", type=click.IntRange(0, 10), default=0)
@click.option("--year", type=int, help="Reference year (default: settings, else latest)")
@format_option
def tax(income, income_range, family_status, children, other_dependents, year, output_format):
    """Compare federal income tax under each policy.

    \b
    Examples:
      policy-calc tax --income 70000 --family-status married-joint --children 2
      policy-calc tax --income-range 95k-200k --format json
    """
    if income is not None and income_range:
        raise click.UsageError("Use either --income or --income-range, not both.")
    if income is not None and income < 0:
        raise click.BadParameter("Income must not be negative.", param_hint="--income")

    reference = load_reference_or_fail(year)
    if income is None:
        income = resolve_income(reference, IncomeRange(income_range) if income_range else None)

    taxes = calculate_federal_taxes(reference, income, FamilyStatus(family_status), children, other_dependents)
    data = {
        "year": reference.year,
        "income": income,
        "familyStatus": family_status,
        "qualifyingChildren": children,
        "otherDependents": other_dependents,
        "current": round(taxes.current, 2),
        "proposed": round(taxes.proposed, 2),
        "bigBill": round(taxes.big_bill, 2),
    }

    if resolve_output_format(output_format) == "json":
        click.echo(json.dumps(data, indent=2))
        return
    render_federal_taxes(Console(), data)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
