"""Household-level adjustments added to the net annual impact.

- State: state income tax plus a cost-of-living correction
- Energy: per-state linear cost scaled by income relative to the median
- Employment: tax-complexity burden (or benefit) by employment status
"""

from typing import Optional

from ..reference import ReferenceData
from .rounding import clamp, round_to_dollar


def calculate_state_adjustment(reference: ReferenceData, income: float, state_code: Optional[str]) -> float:
    """State income tax plus cost-of-living adjustment. Zero for unknown states."""
    state = reference.state(state_code)
    if state is None:
        return 0.0

    rules = reference.state_adjustment
    state_income_tax = income * state.income_tax_rate
    cost_adjustment = (
        (state.cost_of_living_index - rules.cost_of_living_baseline)
        * (income / rules.income_unit)
        * rules.dollars_per_index_point
    )
    return state_income_tax + cost_adjustment


def calculate_energy_cost(reference: ReferenceData, income: float, state_code: Optional[str]) -> float:
    """Unscaled annual energy cost change.

    States with their own regulation profile use their own formula, other
    known states use the default one. Without state data a whole-dollar
    national baseline applies.
    """
    rules = reference.energy
    if reference.state(state_code) is None:
        return float(round_to_dollar(rules.unknown_state.at(income)))

    formula = rules.named_states.get(state_code, rules.default)
    return formula.at(income)


def income_scalar(reference: ReferenceData, income: float) -> float:
    """Income relative to the median, clamped to the configured range."""
    rules = reference.energy
    return clamp(income / rules.median_income, rules.income_scalar_min, rules.income_scalar_max)


def calculate_scaled_energy_cost(reference: ReferenceData, income: float, state_code: Optional[str]) -> float:
    return calculate_energy_cost(reference, income, state_code) * income_scalar(reference, income)


def calculate_employment_adjustment(reference: ReferenceData, income: float, employment_status: str) -> float:
    """Tax-complexity burden by employment status (negative = benefit).

    Statuses absent from the table contribute nothing.
    """
    adjustment = reference.employment_adjustments.get(employment_status)
    if adjustment is None:
        return 0.0

    amount = income * adjustment.rate * adjustment.share
    if adjustment.cap_rate is not None:
        amount = min(amount, income * adjustment.cap_rate)
    return amount
