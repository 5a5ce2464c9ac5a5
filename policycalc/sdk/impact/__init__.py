"""impact - Personal policy impact calculation.

Scope:
- Federal income tax under current law, the proposed enhancement and the Big Bill
- Healthcare cost by insurance type, age, state, income/FPL and HSA status
- State cost-of-living, energy and employment-status adjustments
- Scenario aggregation: timeline, community, deficit, recession, purchasing power

Constraints:
- Pure calculation - no config or session access, reference tables are injected
- Total over its inputs: missing or unknown choices fall back to defaults
- All reported amounts are whole dollars, rounded half up

Modules:
- household: FormData defaults, income midpoint and state resolution
- tax: Bracket walk, child tax credit phase-out, Big Bill reductions
- healthcare: Per-insurance-type current and proposed cost models
- adjustments: State, energy and employment adjustments
- aggregation: Timeline, community, deficit, recession, breakdown, purchasing power
- calculator: PolicyCalculator and the scenario pipeline

Usage:
    from policycalc.sdk.impact import PolicyCalculator
    from policycalc.sdk.reference import load_reference_data

    calculator = PolicyCalculator(load_reference_data(2024))
    results = calculator.calculate({"incomeRange": "45k-95k", "state": "CA"})
"""

from .calculator import (
    HouseholdFigures,
    PolicyCalculator,
    calculate_policy_impact,
    coerce_form_data,
)
from .healthcare import HealthcareEstimate, calculate_healthcare_costs
from .household import Household, resolve_household, resolve_income, resolve_state
from .rounding import round_to_dollar
from .tax import (
    FederalTaxes,
    calculate_big_bill_tax,
    calculate_current_tax,
    calculate_federal_income_tax,
    calculate_federal_taxes,
    calculate_proposed_tax,
)

__all__ = [
    "HouseholdFigures",
    "PolicyCalculator",
    "calculate_policy_impact",
    "coerce_form_data",
    "HealthcareEstimate",
    "calculate_healthcare_costs",
    "Household",
    "resolve_household",
    "resolve_income",
    "resolve_state",
    "round_to_dollar",
    "FederalTaxes",
    "calculate_big_bill_tax",
    "calculate_current_tax",
    "calculate_federal_income_tax",
    "calculate_federal_taxes",
    "calculate_proposed_tax",
]
