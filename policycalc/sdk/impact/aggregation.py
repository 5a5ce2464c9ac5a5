"""Scenario-level aggregates derived from the per-household figures.

Timeline projections, community impact, deficit share, recession
probability, the itemized breakdown and the purchasing-power projection.
Each takes the ScenarioParameters of the run so the same code produces the
Current Law and the Big Bill figures.
"""

from typing import Optional

from ..reference import ReferenceData, ScenarioParameters
from ..schemas import (
    BreakdownDetail,
    BreakdownItem,
    CommunityImpact,
    PurchasingPower,
    PurchasingPowerPoint,
    Timeline,
)
from .rounding import clamp, round_to_dollar


def project_timeline(reference: ReferenceData, net_annual_impact: int) -> Timeline:
    """Cumulative impact over 5, 10 and 20 years with inflation factors."""
    rules = reference.timeline

    def cumulative(horizon) -> int:
        return round_to_dollar(net_annual_impact * horizon.years * horizon.factor)

    return Timeline(
        five_year=cumulative(rules.five_year),
        ten_year=cumulative(rules.ten_year),
        twenty_year=cumulative(rules.twenty_year),
    )


def _bounded_community(reference: ReferenceData, school: float, infrastructure: float, jobs: float) -> CommunityImpact:
    bounds = reference.community.bounds
    return CommunityImpact(
        school_funding=round_to_dollar(clamp(school, *bounds["school_funding"])),
        infrastructure=round_to_dollar(clamp(infrastructure, *bounds["infrastructure"])),
        job_opportunities=round_to_dollar(clamp(jobs, *bounds["job_opportunities"])),
    )


def estimate_community_impact(reference: ReferenceData, income: float, state_code: Optional[str]) -> CommunityImpact:
    """Local community effects before any scenario bonuses.

    Uses the state's property-tax base, cost of living and tax revenue when
    the state is known, clamped to the configured bounds. Without state data
    the income-only national defaults are returned unclamped.
    """
    rules = reference.community
    state = reference.state(state_code)

    if state is None:
        school = round_to_dollar(rules.default_school_base + (income / rules.median_income) * rules.default_school_per_median)
        infrastructure = round_to_dollar(
            rules.default_infrastructure_base + (income / 100000) * rules.default_infrastructure_per_100k
        )
        jobs = round_to_dollar(rules.default_jobs_base + (income / 1000) * rules.default_jobs_per_1k)
        return CommunityImpact(school_funding=school, infrastructure=infrastructure, job_opportunities=jobs)

    property_tax_factor = state.property_tax_avg / rules.property_tax_norm
    income_factor = income / rules.median_income
    school = round_to_dollar(rules.school_base + (property_tax_factor * income_factor * rules.school_scale))

    state_size_factor = state.cost_of_living_index / 100
    tax_revenue_factor = (state.income_tax_rate + state.sales_tax_rate) * 10
    infrastructure = round_to_dollar(
        rules.infrastructure_base + (state_size_factor * tax_revenue_factor * income * rules.infrastructure_income_scale)
    )

    economic_activity = state.cost_of_living_index * state.property_tax_avg / rules.jobs_activity_divisor
    jobs = round_to_dollar(
        rules.jobs_base + (economic_activity * income / 1000) + (tax_revenue_factor * rules.jobs_tax_revenue_scale)
    )

    bonus = rules.state_bonuses.get(state_code)
    if bonus is not None:
        school += bonus.school
        infrastructure *= bonus.infrastructure
        jobs += bonus.jobs

    return _bounded_community(reference, school, infrastructure, jobs)


def apply_scenario_community_bonuses(community: CommunityImpact, scenario: ScenarioParameters) -> CommunityImpact:
    """Add the scenario's community bonuses on top of the base figures.

    The bounds are not re-applied, so a bonus still shows when the base
    figure already sits at its bound.
    """
    return CommunityImpact(
        school_funding=round_to_dollar(community.school_funding + scenario.school_bonus),
        infrastructure=round_to_dollar(community.infrastructure * scenario.infrastructure_multiplier),
        job_opportunities=round_to_dollar(community.job_opportunities + scenario.jobs_bonus),
    )


def calculate_deficit_impact(reference: ReferenceData, income: float, scenario: ScenarioParameters) -> int:
    """Household share of the scenario's federal deficit change."""
    return round_to_dollar(scenario.deficit_share * (income / reference.community.median_income))


def calculate_recession_probability(scenario: ScenarioParameters) -> int:
    """Recession probability in percent; reductions never go below the floor."""
    if scenario.recession_reduction == 0:
        return round_to_dollar(scenario.recession_baseline)
    return round_to_dollar(max(scenario.recession_floor, scenario.recession_baseline - scenario.recession_reduction))


def build_breakdown(
    reference: ReferenceData,
    scenario: ScenarioParameters,
    tax_impact: float,
    healthcare_impact: float,
) -> list[BreakdownItem]:
    """Itemized tax and healthcare impact, split by the configured detail shares."""
    rules = reference.breakdown

    def details(impact: float, shares) -> list[BreakdownDetail]:
        return [BreakdownDetail(item=s.item, amount=round_to_dollar(impact * s.share)) for s in shares]

    return [
        BreakdownItem(
            category="tax",
            title=scenario.tax_title,
            description=scenario.tax_description,
            impact=round_to_dollar(tax_impact),
            details=details(tax_impact, rules.tax_details),
        ),
        BreakdownItem(
            category="healthcare",
            title=scenario.healthcare_title,
            description=scenario.healthcare_description,
            impact=round_to_dollar(healthcare_impact),
            details=details(healthcare_impact, rules.healthcare_details),
        ),
    ]


def project_purchasing_power(
    reference: ReferenceData,
    current_disposable_income: float,
    scenario_disposable_income: float,
) -> PurchasingPower:
    """Inflation-adjusted disposable income under current law and the scenario.

    Index 100 = base-year dollars. Each horizon deflates by compound
    inflation at the configured annual rate.
    """
    rules = reference.purchasing_power

    def series(disposable_income: float) -> list[PurchasingPowerPoint]:
        points = []
        for years in rules.horizons:
            factor = (1 + rules.annual_inflation) ** years
            points.append(
                PurchasingPowerPoint(
                    year=rules.base_year + years,
                    purchasing_power_index=round_to_dollar(100 / factor),
                    projected_disposable_income=round_to_dollar(disposable_income / factor),
                )
            )
        return points

    return PurchasingPower(
        current_scenario=series(current_disposable_income),
        proposed_scenario=series(scenario_disposable_income),
        data_source=rules.data_source,
        last_updated=rules.last_updated,
    )
