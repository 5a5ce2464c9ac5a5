"""Resolve raw form answers into the household the calculators work on.

Every FormData field is optional. This module applies the documented
defaults once so downstream calculators never see a missing value:

- income: midpoint of the income range (default_income when absent)
- family status: single
- age range: 30-44
- employment status: full-time
- insurance type: employer
- state: code or full name; inferred from the ZIP prefix when absent
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..reference import ReferenceData
from ..schemas import (
    AgeRange,
    EmploymentStatus,
    FamilyStatus,
    FormData,
    InsuranceType,
    IncomeRange,
)

logger = logging.getLogger(__name__)

DEFAULT_FAMILY_STATUS = FamilyStatus.SINGLE
DEFAULT_AGE_RANGE = AgeRange.AGE_30_44
DEFAULT_EMPLOYMENT_STATUS = EmploymentStatus.FULL_TIME
DEFAULT_INSURANCE_TYPE = InsuranceType.EMPLOYER


@dataclass(frozen=True)
class Household:
    """Fully-defaulted inputs for one calculation."""

    income: float
    family_status: FamilyStatus
    qualifying_children: int
    other_dependents: int
    age_range: AgeRange
    employment_status: EmploymentStatus
    insurance_type: InsuranceType
    has_hsa: bool
    state: Optional[str]
    include_big_bill: bool = True
    family_coverage: bool = False

    @property
    def total_dependents(self) -> int:
        return self.qualifying_children + self.other_dependents

    @property
    def has_dependents(self) -> bool:
        return self.total_dependents > 0

    @property
    def is_family_coverage(self) -> bool:
        return self.family_coverage


def resolve_income(reference: ReferenceData, income_range: Optional[IncomeRange]) -> float:
    """Representative annual income for a range (its median)."""
    if income_range is None:
        return reference.default_income
    return reference.income_midpoints.get(income_range.value, reference.default_income)


def state_from_zip(reference: ReferenceData, zip_code: Optional[str]) -> Optional[str]:
    """Infer a state code from the first three digits of a ZIP code."""
    if not zip_code:
        return None
    digits = zip_code.strip()[:3]
    if len(digits) != 3 or not digits.isdigit():
        logger.debug(f"Cannot infer state from ZIP {zip_code!r}")
        return None

    prefix = int(digits)
    for code, state in reference.states.items():
        if state.covers_zip_prefix(prefix):
            return code
    return None


def resolve_state(
    reference: ReferenceData,
    state: Optional[str],
    zip_code: Optional[str] = None,
) -> Optional[str]:
    """Resolve a state code or full state name to a known state code.

    The ZIP code is consulted only when no state was given. Returns None for
    states missing from the reference table; callers treat that as "no state
    data" rather than an error.
    """
    if not state:
        return state_from_zip(reference, zip_code)

    candidate = state.strip()
    if candidate.upper() in reference.states:
        return candidate.upper()

    for code, data in reference.states.items():
        if data.name.lower() == candidate.lower():
            return code

    logger.debug(f"No reference data for state {state!r}")
    return None


def resolve_household(reference: ReferenceData, form_data: FormData) -> Household:
    """Apply defaults to a form and resolve income and state."""
    family_status = form_data.family_status or DEFAULT_FAMILY_STATUS
    return Household(
        income=resolve_income(reference, form_data.income_range),
        family_status=family_status,
        qualifying_children=form_data.number_of_qualifying_children or 0,
        other_dependents=form_data.number_of_other_dependents or 0,
        age_range=form_data.age_range or DEFAULT_AGE_RANGE,
        employment_status=form_data.employment_status or DEFAULT_EMPLOYMENT_STATUS,
        insurance_type=form_data.insurance_type or DEFAULT_INSURANCE_TYPE,
        has_hsa=bool(form_data.has_hsa),
        state=resolve_state(reference, form_data.state, form_data.zip_code),
        include_big_bill=form_data.include_big_bill is not False,
        family_coverage=family_status.value in reference.healthcare.family_coverage_statuses,
    )
