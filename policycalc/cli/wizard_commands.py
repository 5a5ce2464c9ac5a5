"""Interactive wizard for Policy Calc.

Walks the six form steps (location, demographics, employment, healthcare,
income, priorities), saving each step's answers to an in-memory session
before calculating. The session ends with the command.
"""

import click

from policycalc.sdk import (
    AgeRange,
    EmploymentStatus,
    FamilyStatus,
    IncomeRange,
    InsuranceType,
    MemorySessionStore,
    save_profile,
)
from policycalc.sdk.impact import PolicyCalculator

from .options import emit_results, format_option, load_reference_or_fail

HSA_INSURANCE_TYPES = (InsuranceType.EMPLOYER.value, InsuranceType.MARKETPLACE.value)


def _choice(prompt: str, enum_type, default) -> str:
    values = [member.value for member in enum_type]
    return click.prompt(prompt, type=click.Choice(values), default=default.value, show_choices=True)


def _location_step() -> dict:
    state = click.prompt("State (code or name, blank to skip)", default="", show_default=False)
    answers = {"state": state}
    if not state.strip():
        answers["zipCode"] = click.prompt("ZIP code (blank to skip)", default="", show_default=False)
    return answers


def _demographics_step() -> dict:
    return {
        "ageRange": _choice("Age range", AgeRange, AgeRange.AGE_30_44),
        "familyStatus": _choice("Filing status", FamilyStatus, FamilyStatus.SINGLE),
        "numberOfQualifyingChildren": click.prompt(
            "Qualifying children under 17", type=click.IntRange(0, 10), default=0
        ),
        "numberOfOtherDependents": click.prompt("Other dependents", type=click.IntRange(0, 10), default=0),
    }


def _employment_step() -> dict:
    return {
        "employmentStatus": _choice("Employment status", EmploymentStatus, EmploymentStatus.FULL_TIME),
        "industry": click.prompt("Industry (optional)", default="", show_default=False) or None,
    }


def _healthcare_step() -> dict:
    insurance_type = _choice("Health insurance", InsuranceType, InsuranceType.EMPLOYER)
    answers = {"insuranceType": insurance_type, "hasHSA": False}
    if insurance_type in HSA_INSURANCE_TYPES:
        answers["hasHSA"] = click.confirm("Enrolled in an HSA-eligible plan?", default=False)
    return answers


def _income_step() -> dict:
    return {"incomeRange": _choice("Household income", IncomeRange, IncomeRange.FROM_45K_TO_95K)}


def _priorities_step() -> dict:
    raw = click.prompt("Priorities (comma-separated, optional)", default="", show_default=False)
    return {
        "priorities": [p.strip() for p in raw.split(",") if p.strip()],
        "includeBigBill": click.confirm("Compare against the Big Bill?", default=True),
    }


WIZARD_STEPS = (
    ("Location", _location_step),
    ("Demographics", _demographics_step),
    ("Employment", _employment_step),
    ("Healthcare", _healthcare_step),
    ("Income", _income_step),
    ("Priorities", _priorities_step),
)


@click.command("wizard")
@click.option("--year", type=int, help="Reference year (default: settings, else latest)")
@click.option("--save-profile", "save_to_profile", is_flag=True, help="Save the answers as the profile")
@format_option
def wizard(year, save_to_profile, output_format):
    """Answer the form step by step and calculate the impact."""
    reference = load_reference_or_fail(year)
    store = MemorySessionStore()
    session = store.create_session()

    total = len(WIZARD_STEPS)
    for number, (title, ask) in enumerate(WIZARD_STEPS, start=1):
        click.echo(click.style(f"\nStep {number} of {total}: {title}", bold=True))
        store.update_form_data(session.session_id, ask())

    results = store.calculate(session.session_id, PolicyCalculator(reference))
    emit_results(results.to_json_dict(), output_format)

    if save_to_profile:
        path = save_profile(session.form_data.to_json_dict())
        click.echo(f"Saved profile: {path}")

    store.delete_session(session.session_id)
