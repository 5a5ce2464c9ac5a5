"""Pydantic schemas for reference data validation.

These schemas validate the reference_data/*.yaml files and provide typed
access to tax brackets, healthcare baselines, state tables and the policy
scenario constants. Every model is frozen so a loaded table can be shared
between calculations without copying.
"""

import math
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class _Reference(BaseModel):
    """Base for reference tables: unknown keys are typos, tables are read-only."""
    model_config = ConfigDict(extra="forbid", frozen=True)


class TaxBracket(_Reference):
    """Single federal tax bracket."""

    min: float = Field(..., ge=0, description="First dollar of the bracket")
    max: float = Field(default=math.inf, description="Last dollar of the bracket (unbounded if omitted)")
    rate: float = Field(..., ge=0, le=1, description="Marginal rate as decimal")


class ChildTaxCreditRules(_Reference):
    per_qualifying_child: float = Field(..., ge=0)
    per_other_dependent: float = Field(..., ge=0)
    phase_out_thresholds: dict[str, float]
    default_phase_out_threshold: float = Field(..., ge=0)
    phase_out_step: float = Field(..., gt=0, description="Income step ($1,000)")
    phase_out_per_step: float = Field(..., ge=0, description="Credit lost per step ($50)")


class ProposedPolicyRules(_Reference):
    """Modest current-law enhancement used by the Current Law scenario."""

    standard_deduction_increase: float = Field(..., ge=0)
    top_bracket_rate_delta: float
    per_qualifying_child: float = Field(..., ge=0)


class BigBillTaxRules(_Reference):
    """Flat heuristic reductions applied on top of current-law tax."""

    standard_deduction_bonus: float = Field(..., ge=0)
    assumed_marginal_rate: float = Field(..., ge=0, le=1)
    middle_class_floor: float = Field(..., ge=0)
    middle_class_ceiling: float = Field(..., ge=0)
    middle_class_span_cap: float = Field(..., ge=0)
    middle_class_rate_reduction: float = Field(..., ge=0, le=1)
    per_dependent_bonus: float = Field(..., ge=0)


class Coverage(_Reference):
    """An amount that differs between individual and family coverage."""

    individual: float
    family: float

    def pick(self, is_family: bool) -> float:
        return self.family if is_family else self.individual


class EmploymentTier(_Reference):
    contribution: float = Field(..., ge=0, le=1)
    cost_sharing_factor: float = Field(..., ge=0)


class IncomeTier(EmploymentTier):
    above: Optional[float] = None
    below: Optional[float] = None

    def matches(self, income: float) -> bool:
        if self.above is not None:
            return income > self.above
        if self.below is not None:
            return income < self.below
        return False


class EmployerRules(_Reference):
    default_contribution: float = Field(..., ge=0, le=1)
    cost_sharing: Coverage
    employment_tiers: dict[str, EmploymentTier]
    income_tiers: list[IncomeTier]
    hsa_premium_factor: float
    hsa_cost_sharing: Coverage
    hsa_proposed_premium_growth: float
    small_business_income_limit: float
    small_business_credit_rate: float
    out_of_pocket_cap: Coverage
    hsa_out_of_pocket_cap: Coverage


class HSARules(_Reference):
    contribution_limit: Coverage
    proposed_limit_increase: Coverage
    tax_savings_rate: float = Field(..., ge=0, le=1)


class SubsidyTier(_Reference):
    max_fpl_ratio: float = Field(..., gt=0)
    subsidy: float = Field(..., ge=0, le=1)


class MarketplaceRules(_Reference):
    deductible_share: float
    cost_sharing: Coverage
    hsa_premium_factor: float
    hsa_cost_sharing: Coverage
    hsa_proposed_premium_growth: float
    subsidy_tiers: list[SubsidyTier]
    expanded_subsidy_tiers: list[SubsidyTier]
    public_option_premium_reduction: float = Field(..., ge=0, le=1)


class IrmaaTier(_Reference):
    above: float
    surcharge: float = Field(..., ge=0)


class MedicareRules(_Reference):
    part_b: float
    part_d: float
    medigap: float
    irmaa_tiers: list[IrmaaTier]
    drug_cost_factor: float
    option_supplement: float


class HealthcareRules(_Reference):
    """Premium baselines (KFF) and the per-insurance-type cost constants."""

    average_premium_individual: float = Field(..., gt=0)
    average_premium_family: float = Field(..., gt=0)
    average_deductible: float = Field(..., ge=0)
    prescription_drug_avg: float = Field(..., ge=0)
    age_multipliers: dict[str, float]
    default_age_multiplier: float
    federal_poverty_level: Coverage
    employer: EmployerRules
    hsa: HSARules
    marketplace: MarketplaceRules
    medicare: MedicareRules
    medicaid_out_of_pocket: Coverage
    military_cost: float
    uninsured_services: Coverage
    prescription_savings_rate: float = Field(..., ge=0, le=1)
    medicaid_expansion_fpl_ratio: float
    # Filing statuses priced with family premiums, FPL and cost sharing
    family_coverage_statuses: tuple[str, ...] = ()

    def base_premium(self, is_family: bool) -> float:
        return self.average_premium_family if is_family else self.average_premium_individual


class StateData(_Reference):
    """Tax Foundation / Census sample for one state."""

    name: str
    income_tax_rate: float = Field(..., ge=0, le=1)
    sales_tax_rate: float = Field(..., ge=0, le=1)
    property_tax_avg: float = Field(..., ge=0)
    cost_of_living_index: float = Field(..., gt=0)
    zip_prefixes: list[tuple[int, int]] = Field(default_factory=list)

    def covers_zip_prefix(self, prefix: int) -> bool:
        return any(low <= prefix <= high for low, high in self.zip_prefixes)


class StateAdjustmentRules(_Reference):
    cost_of_living_baseline: float
    income_unit: float = Field(..., gt=0)
    dollars_per_index_point: float


class LinearCost(_Reference):
    """cost = base + income / income_divisor"""

    base: float
    income_divisor: float = Field(..., gt=0)

    def at(self, income: float) -> float:
        return self.base + (income / self.income_divisor)


class EnergyRules(_Reference):
    named_states: dict[str, LinearCost]
    default: LinearCost
    unknown_state: LinearCost
    median_income: float = Field(..., gt=0)
    income_scalar_min: float
    income_scalar_max: float


class EmploymentAdjustment(_Reference):
    rate: float
    share: float = 1.0
    cap_rate: Optional[float] = None


class Horizon(_Reference):
    years: int = Field(..., gt=0)
    factor: float = Field(..., gt=0)


class TimelineRules(_Reference):
    five_year: Horizon
    ten_year: Horizon
    twenty_year: Horizon


class StateBonus(_Reference):
    school: float
    infrastructure: float
    jobs: float


class CommunityRules(_Reference):
    median_income: float = Field(..., gt=0)
    default_school_base: float
    default_school_per_median: float
    default_infrastructure_base: float
    default_infrastructure_per_100k: float
    default_jobs_base: float
    default_jobs_per_1k: float
    property_tax_norm: float = Field(..., gt=0)
    school_base: float
    school_scale: float
    infrastructure_base: float
    infrastructure_income_scale: float
    jobs_base: float
    jobs_activity_divisor: float = Field(..., gt=0)
    jobs_tax_revenue_scale: float
    state_bonuses: dict[str, StateBonus]
    bounds: dict[Literal["school_funding", "infrastructure", "job_opportunities"], tuple[float, float]]


class ScenarioParameters(_Reference):
    """Policy parameter set for one scenario run of the shared pipeline."""

    tax_method: Literal["brackets", "flat_reduction"]
    healthcare_impact_multiplier: float
    proposed_cost_multiplier: float
    deficit_share: float
    recession_baseline: float
    recession_reduction: float
    recession_floor: float
    school_bonus: float
    infrastructure_multiplier: float
    jobs_bonus: float
    tax_title: str
    tax_description: str
    healthcare_title: str
    healthcare_description: str


class ScenarioSet(_Reference):
    current_law: ScenarioParameters
    big_bill: ScenarioParameters


class DetailShare(_Reference):
    item: str
    share: float


class BreakdownRules(_Reference):
    tax_details: list[DetailShare]
    healthcare_details: list[DetailShare]


class PurchasingPowerRules(_Reference):
    base_year: int
    annual_inflation: float = Field(..., ge=0)
    horizons: list[int]
    data_source: str
    last_updated: str


class DataSource(_Reference):
    name: str
    url: str
    last_updated: str
    credibility: Literal["government", "nonpartisan", "academic"]


class ReferenceData(_Reference):
    """Complete reference tables for a year."""

    year: int
    federal_tax_brackets: list[TaxBracket] = Field(..., min_length=1)
    standard_deductions: dict[str, float]
    default_standard_deduction: float = Field(..., ge=0)
    child_tax_credit: ChildTaxCreditRules
    proposed_policy: ProposedPolicyRules
    big_bill_tax: BigBillTaxRules
    income_midpoints: dict[str, float]
    default_income: float = Field(..., ge=0)
    healthcare: HealthcareRules
    states: dict[str, StateData]
    state_adjustment: StateAdjustmentRules
    energy: EnergyRules
    employment_adjustments: dict[str, EmploymentAdjustment]
    timeline: TimelineRules
    community: CommunityRules
    scenarios: ScenarioSet
    breakdown: BreakdownRules
    purchasing_power: PurchasingPowerRules
    data_sources: list[DataSource] = Field(default_factory=list)
    methodology_notes: dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="after")
    def check_brackets(self) -> "ReferenceData":
        """Brackets must ascend and only the last one may be unbounded."""
        previous_max = -1.0
        for i, bracket in enumerate(self.federal_tax_brackets):
            if bracket.min <= previous_max:
                raise ValueError(f"federal_tax_brackets[{i}] overlaps the previous bracket")
            if bracket.max < bracket.min:
                raise ValueError(f"federal_tax_brackets[{i}] has max below min")
            if math.isinf(bracket.max) and i != len(self.federal_tax_brackets) - 1:
                raise ValueError(f"federal_tax_brackets[{i}] is unbounded but not the top bracket")
            previous_max = bracket.max
        return self

    def state(self, code: Optional[str]) -> Optional[StateData]:
        """State table entry for a code, or None when unknown."""
        if not code:
            return None
        return self.states.get(code)
