"""Shared click options and helpers for commands that take form data."""

import json
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError
from rich.console import Console

from policycalc.sdk import (
    AgeRange,
    EmploymentStatus,
    FamilyStatus,
    FormData,
    IncomeRange,
    InsuranceType,
    OUTPUT_FORMATS,
    ReferenceDataError,
    ReferenceDataNotFoundError,
    get_setting,
    load_reference_data,
)

from .renderers import render_policy_results


def _choices(enum_type) -> click.Choice:
    return click.Choice([member.value for member in enum_type])


def form_options(func):
    """Add one option per FormData field.

    Options left unset are omitted from the collected form so they do not
    override values from a profile or input file.
    """
    options = [
        click.option("--state", help="State code or full name (e.g. CA, California)"),
        click.option("--zip-code", "zip_code", help="ZIP code, used to infer the state when --state is not given"),
        click.option("--age-range", "age_range", type=_choices(AgeRange)),
        click.option("--family-status", "family_status", type=_choices(FamilyStatus), help="IRS filing status"),
        click.option("--children", "number_of_qualifying_children", type=click.IntRange(0, 10),
                     help="Qualifying children under 17"),
        click.option("--other-dependents", "number_of_other_dependents", type=click.IntRange(0, 10)),
        click.option("--employment-status", "employment_status", type=_choices(EmploymentStatus)),
        click.option("--industry"),
        click.option("--insurance-type", "insurance_type", type=_choices(InsuranceType)),
        click.option("--hsa/--no-hsa", "has_hsa", default=None, help="Enrolled in an HSA-eligible plan"),
        click.option("--income-range", "income_range", type=_choices(IncomeRange)),
        click.option("--priority", "priorities", multiple=True, help="Policy priority (repeatable)"),
        click.option("--big-bill/--no-big-bill", "include_big_bill", default=None,
                     help="Include the Big Bill scenario (default: include)"),
    ]

    for option in reversed(options):
        func = option(func)
    return func


FORM_FIELDS = (
    "state",
    "zip_code",
    "age_range",
    "family_status",
    "number_of_qualifying_children",
    "number_of_other_dependents",
    "employment_status",
    "industry",
    "insurance_type",
    "has_hsa",
    "income_range",
    "priorities",
    "include_big_bill",
)


def pop_form_fields(kwargs: dict) -> dict:
    """Remove form option values from a command's kwargs, dropping unset ones."""
    fields = {}
    for name in FORM_FIELDS:
        value = kwargs.pop(name, None)
        if value is None or value == ():
            continue
        fields[name] = list(value) if name == "priorities" else value
    return fields


def build_form_data(*layers: Optional[dict]) -> FormData:
    """Validate and merge form layers; later layers win field by field.

    Raises:
        click.ClickException: If any layer is structurally invalid
    """
    form_data = FormData()
    for layer in layers:
        if not layer:
            continue
        try:
            form_data = form_data.merged(FormData.model_validate(layer))
        except ValidationError as e:
            raise click.ClickException(f"Invalid form data:\n{e}")
    return form_data


def read_form_file(path: str) -> dict:
    """Read a JSON form data file (camelCase or snake_case keys)."""
    try:
        with open(Path(path), "r") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise click.ClickException(f"Invalid JSON in {path}: {e}")

    if not isinstance(data, dict):
        raise click.ClickException(f"Form data must be a JSON object, got {type(data).__name__}")
    return data


def load_reference_or_fail(year: Optional[int] = None):
    """Load reference tables, converting load errors to ClickException."""
    try:
        return load_reference_data(year)
    except (ReferenceDataNotFoundError, ReferenceDataError) as e:
        raise click.ClickException(str(e))


def format_option(func):
    return click.option(
        "--format", "output_format", type=click.Choice(OUTPUT_FORMATS), default=None,
        help="Output format (default: settings output_format, else table)",
    )(func)


def resolve_output_format(output_format: Optional[str]) -> str:
    return output_format or get_setting("output_format") or "table"


def emit_results(payload: dict, output_format: Optional[str]) -> None:
    """Print a results payload as JSON or rich tables."""
    if resolve_output_format(output_format) == "json":
        click.echo(json.dumps(payload, indent=2))
        return
    render_policy_results(Console(), payload)
