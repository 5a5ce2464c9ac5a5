"""Policy impact calculation: form data in, PolicyResults out.

The household-level figures (taxes, healthcare costs, state, energy and
employment adjustments, community baseline) are computed once per
calculation. One scenario pipeline then turns them into a PolicyResults
record per ScenarioParameters set: Current Law at the top level and, unless
the form opts out, the Big Bill in bigBillScenario.

Sign convention: negative = the household saves money.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from ..reference import ReferenceData, ScenarioParameters, load_reference_data
from ..schemas import CommunityImpact, FormData, HealthcareCosts, PolicyResults
from .adjustments import (
    calculate_employment_adjustment,
    calculate_scaled_energy_cost,
    calculate_state_adjustment,
)
from .aggregation import (
    apply_scenario_community_bonuses,
    build_breakdown,
    calculate_deficit_impact,
    calculate_recession_probability,
    estimate_community_impact,
    project_purchasing_power,
    project_timeline,
)
from .healthcare import HealthcareEstimate, calculate_healthcare_costs
from .household import Household, resolve_household
from .rounding import round_to_dollar
from .tax import FederalTaxes, calculate_federal_taxes

# Configure logging based on LOG_LEVEL environment variable
_log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, _log_level, logging.INFO),
    format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
    datefmt="%H:%M:%S"
)
logger = logging.getLogger(__name__)

FormInput = Union[FormData, Mapping[str, Any], None]


@dataclass(frozen=True)
class HouseholdFigures:
    """Scenario-independent figures for one household."""

    household: Household
    taxes: FederalTaxes
    healthcare: HealthcareEstimate
    state_adjustment: float
    energy_cost: float
    employment_adjustment: float
    community: CommunityImpact


def coerce_form_data(form_data: FormInput) -> FormData:
    """Accept a FormData, a camelCase/snake_case mapping, or None.

    Raises:
        pydantic.ValidationError: If a mapping is structurally invalid
    """
    if form_data is None:
        return FormData()
    if isinstance(form_data, FormData):
        return form_data
    return FormData.model_validate(dict(form_data))


class PolicyCalculator:
    """Stateless calculator bound to one set of reference tables.

    Holds only immutable reference data, so one instance can serve any
    number of calculations.

    Usage:
        calculator = PolicyCalculator(load_reference_data(2024))
        results = calculator.calculate({"incomeRange": "45k-95k", "state": "CA"})
        payload = results.to_json_dict()
    """

    def __init__(self, reference: ReferenceData):
        self.reference = reference

    def household_figures(self, form_data: FormInput) -> HouseholdFigures:
        reference = self.reference
        household = resolve_household(reference, coerce_form_data(form_data))
        income = household.income

        figures = HouseholdFigures(
            household=household,
            taxes=calculate_federal_taxes(
                reference,
                income,
                household.family_status,
                household.qualifying_children,
                household.other_dependents,
            ),
            healthcare=calculate_healthcare_costs(reference, household),
            state_adjustment=calculate_state_adjustment(reference, income, household.state),
            energy_cost=calculate_scaled_energy_cost(reference, income, household.state),
            employment_adjustment=calculate_employment_adjustment(reference, income, household.employment_status),
            community=estimate_community_impact(reference, income, household.state),
        )

        logger.debug(
            f"Household: income={income}, state={household.state}, "
            f"family={household.family_status.value}, employment={household.employment_status.value}, "
            f"insurance={household.insurance_type.value}, age={household.age_range.value}"
        )
        logger.debug(
            f"Adjustments: state={figures.state_adjustment:.2f}, energy={figures.energy_cost:.2f}, "
            f"employment={figures.employment_adjustment:.2f}"
        )
        return figures

    def run_scenario(self, figures: HouseholdFigures, scenario: ScenarioParameters) -> PolicyResults:
        """Compute one scenario's results from shared household figures."""
        reference = self.reference
        taxes = figures.taxes
        healthcare = figures.healthcare
        income = figures.household.income

        if scenario.tax_method == "brackets":
            scenario_tax = taxes.proposed
        else:
            scenario_tax = taxes.big_bill
        tax_impact = scenario_tax - taxes.current

        healthcare_impact = healthcare.impact * scenario.healthcare_impact_multiplier
        scenario_healthcare_cost = healthcare.proposed * scenario.proposed_cost_multiplier

        net_annual_impact = round_to_dollar(
            tax_impact
            + healthcare_impact
            + figures.state_adjustment
            + figures.energy_cost
            + figures.employment_adjustment
        )
        logger.debug(
            f"Scenario {scenario.tax_method}: tax={tax_impact:.2f}, healthcare={healthcare_impact:.2f}, "
            f"net={net_annual_impact}"
        )

        return PolicyResults(
            annual_tax_impact=round_to_dollar(tax_impact),
            healthcare_cost_impact=round_to_dollar(healthcare_impact),
            energy_cost_impact=round_to_dollar(figures.energy_cost),
            net_annual_impact=net_annual_impact,
            deficit_impact=calculate_deficit_impact(reference, income, scenario),
            recession_probability=calculate_recession_probability(scenario),
            healthcare_costs=HealthcareCosts(
                current=healthcare.current,
                proposed=round_to_dollar(scenario_healthcare_cost),
            ),
            community_impact=apply_scenario_community_bonuses(figures.community, scenario),
            timeline=project_timeline(reference, net_annual_impact),
            breakdown=build_breakdown(reference, scenario, tax_impact, healthcare_impact),
            purchasing_power=project_purchasing_power(
                reference,
                current_disposable_income=income - taxes.current - healthcare.current,
                scenario_disposable_income=income - scenario_tax - scenario_healthcare_cost,
            ),
        )

    def calculate(self, form_data: FormInput = None) -> PolicyResults:
        """Calculate Current Law results, with the Big Bill scenario attached.

        Args:
            form_data: FormData, a mapping of form fields, or None (all defaults)

        Returns:
            PolicyResults; bigBillScenario is omitted when the form sets
            includeBigBill to false

        Raises:
            pydantic.ValidationError: If form_data is a malformed mapping
        """
        figures = self.household_figures(form_data)
        scenarios = self.reference.scenarios

        results = self.run_scenario(figures, scenarios.current_law)
        if figures.household.include_big_bill:
            big_bill = self.run_scenario(figures, scenarios.big_bill)
            results = results.model_copy(update={"big_bill_scenario": big_bill})

        logger.debug(f"Net annual impact: current law={results.net_annual_impact}")
        return results


def calculate_policy_impact(
    form_data: FormInput = None,
    reference: Optional[ReferenceData] = None,
) -> PolicyResults:
    """Calculate policy impact for a form.

    Loads the configured reference year when no reference data is given.
    """
    if reference is None:
        reference = load_reference_data()
    return PolicyCalculator(reference).calculate(form_data)
