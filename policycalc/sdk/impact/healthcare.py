"""Annual healthcare cost under current law and under the proposed policy.

The current-law cost starts from the KFF average premium (individual or
family), scaled by the ACA age rating and the state's cost-of-living index,
then each insurance type replaces or adjusts it with its own cost model.
The proposed cost starts from the current cost and applies type-specific
relief, followed by three cross-cutting provisions:

1. Medicare option for ages 45-64 (not already on Medicare or Medicaid)
2. Prescription drug savings
3. Medicaid expansion for the uninsured at or below 150% FPL

Both results are rounded to whole dollars.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from ..reference import ReferenceData
from ..reference.schemas import SubsidyTier
from ..schemas import AgeRange, InsuranceType
from .household import Household
from .rounding import round_to_dollar

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HealthcareEstimate:
    current: int
    proposed: int

    @property
    def impact(self) -> int:
        return self.proposed - self.current


@dataclass(frozen=True)
class _CostContext:
    """Quantities shared by every insurance-type cost model."""

    reference: ReferenceData
    household: Household
    base_premium: float
    age_multiplier: float
    cost_of_living: Optional[float]  # state index / 100, None when no state data
    fpl_ratio: float

    @property
    def is_family(self) -> bool:
        return self.household.is_family_coverage

    def rated_premium(self) -> float:
        """Base premium with age and geographic rating applied."""
        premium = self.base_premium * self.age_multiplier
        if self.cost_of_living is not None:
            premium *= self.cost_of_living
        return premium


def subsidy_for(fpl_ratio: float, tiers: list[SubsidyTier]) -> Optional[float]:
    """Premium subsidy share for an income/FPL ratio, None if ineligible."""
    for tier in tiers:
        if fpl_ratio <= tier.max_fpl_ratio:
            return tier.subsidy
    return None


# =============================================================================
# Current-law cost per insurance type
# =============================================================================


def _employer_current(ctx: _CostContext) -> float:
    rules = ctx.reference.healthcare.employer
    household = ctx.household

    cost = ctx.rated_premium()
    contribution = rules.default_contribution
    cost_sharing = rules.cost_sharing.pick(ctx.is_family)

    if household.has_hsa:
        cost *= rules.hsa_premium_factor
        cost_sharing = rules.hsa_cost_sharing.pick(ctx.is_family)
        cost_sharing -= _hsa_tax_savings(ctx)

    tier = rules.employment_tiers.get(household.employment_status.value)
    if tier is None:
        tier = next((t for t in rules.income_tiers if t.matches(household.income)), None)
    if tier is not None:
        contribution = tier.contribution
        cost_sharing *= tier.cost_sharing_factor

    cost *= (1 - contribution)
    return cost + cost_sharing


def _marketplace_current(ctx: _CostContext) -> float:
    healthcare = ctx.reference.healthcare
    rules = healthcare.marketplace

    cost = ctx.rated_premium()
    subsidy = subsidy_for(ctx.fpl_ratio, rules.subsidy_tiers)
    if subsidy is not None:
        cost *= (1 - subsidy)
    cost += healthcare.average_deductible * rules.deductible_share

    cost_sharing = rules.cost_sharing.pick(ctx.is_family)
    if ctx.household.has_hsa:
        cost *= rules.hsa_premium_factor
        cost_sharing = rules.hsa_cost_sharing.pick(ctx.is_family)
        cost_sharing -= _hsa_tax_savings(ctx)

    return cost + cost_sharing * rules.deductible_share


def _medicare_current(ctx: _CostContext) -> float:
    rules = ctx.reference.healthcare.medicare
    cost = rules.part_b + rules.part_d + rules.medigap
    # Tiers are ordered from the highest threshold down.
    for tier in rules.irmaa_tiers:
        if ctx.household.income > tier.above:
            cost += tier.surcharge
            break
    return cost


def _medicaid_current(ctx: _CostContext) -> float:
    return ctx.reference.healthcare.medicaid_out_of_pocket.pick(ctx.is_family)


def _military_current(ctx: _CostContext) -> float:
    return ctx.reference.healthcare.military_cost


def _uninsured_current(ctx: _CostContext) -> float:
    healthcare = ctx.reference.healthcare
    return healthcare.prescription_drug_avg + healthcare.uninsured_services.pick(ctx.is_family)


CURRENT_COST_MODELS: dict[InsuranceType, Callable[[_CostContext], float]] = {
    InsuranceType.EMPLOYER: _employer_current,
    InsuranceType.MARKETPLACE: _marketplace_current,
    InsuranceType.MEDICARE: _medicare_current,
    InsuranceType.MEDICAID: _medicaid_current,
    InsuranceType.MILITARY: _military_current,
    InsuranceType.UNINSURED: _uninsured_current,
}


# =============================================================================
# Proposed-policy relief per insurance type
# =============================================================================


def _hsa_tax_savings(ctx: _CostContext) -> float:
    hsa = ctx.reference.healthcare.hsa
    return hsa.contribution_limit.pick(ctx.is_family) * hsa.tax_savings_rate


def _hsa_enhancement_savings(ctx: _CostContext) -> float:
    hsa = ctx.reference.healthcare.hsa
    return hsa.proposed_limit_increase.pick(ctx.is_family) * hsa.tax_savings_rate


def _employer_proposed(ctx: _CostContext, current: float) -> float:
    rules = ctx.reference.healthcare.employer
    household = ctx.household

    proposed = current
    if household.income < rules.small_business_income_limit:
        proposed = current - current * rules.small_business_credit_rate

    if household.has_hsa:
        proposed -= _hsa_enhancement_savings(ctx)
        proposed *= rules.hsa_proposed_premium_growth
        out_of_pocket = rules.hsa_cost_sharing.pick(ctx.is_family)
        cap = rules.hsa_out_of_pocket_cap.pick(ctx.is_family)
    else:
        out_of_pocket = rules.cost_sharing.pick(ctx.is_family)
        cap = rules.out_of_pocket_cap.pick(ctx.is_family)

    if out_of_pocket > cap:
        proposed -= (out_of_pocket - cap)
    return proposed


def _marketplace_proposed(ctx: _CostContext, current: float) -> float:
    rules = ctx.reference.healthcare.marketplace

    proposed = current
    subsidy = subsidy_for(ctx.fpl_ratio, rules.expanded_subsidy_tiers)
    if subsidy is not None:
        proposed = ctx.base_premium * ctx.age_multiplier * (1 - subsidy)
        if ctx.cost_of_living is not None:
            proposed *= ctx.cost_of_living

    if ctx.household.has_hsa:
        proposed -= _hsa_enhancement_savings(ctx)
        proposed *= rules.hsa_proposed_premium_growth

    public_option = ctx.base_premium * ctx.age_multiplier * (1 - rules.public_option_premium_reduction)
    if ctx.cost_of_living is not None:
        public_option *= ctx.cost_of_living
    return min(proposed, public_option)


def _unchanged(ctx: _CostContext, current: float) -> float:
    return current


PROPOSED_COST_MODELS: dict[InsuranceType, Callable[[_CostContext, float], float]] = {
    InsuranceType.EMPLOYER: _employer_proposed,
    InsuranceType.MARKETPLACE: _marketplace_proposed,
    InsuranceType.MEDICARE: _unchanged,
    InsuranceType.MEDICAID: _unchanged,
    InsuranceType.MILITARY: _unchanged,
    InsuranceType.UNINSURED: _unchanged,
}


def _apply_common_provisions(ctx: _CostContext, proposed: float) -> float:
    healthcare = ctx.reference.healthcare
    insurance_type = ctx.household.insurance_type

    if ctx.household.age_range == AgeRange.AGE_45_64 and insurance_type not in (
        InsuranceType.MEDICARE,
        InsuranceType.MEDICAID,
    ):
        medicare = healthcare.medicare
        medicare_option = medicare.part_b + medicare.part_d + medicare.option_supplement
        proposed = min(proposed, medicare_option)

    drug_costs = healthcare.prescription_drug_avg
    if insurance_type == InsuranceType.MEDICARE:
        drug_costs *= healthcare.medicare.drug_cost_factor
    proposed = max(0.0, proposed - drug_costs * healthcare.prescription_savings_rate)

    if insurance_type == InsuranceType.UNINSURED and ctx.fpl_ratio <= healthcare.medicaid_expansion_fpl_ratio:
        proposed = 0.0

    return proposed


def calculate_healthcare_costs(reference: ReferenceData, household: Household) -> HealthcareEstimate:
    """Current-law and proposed annual healthcare cost for a household.

    Returns:
        HealthcareEstimate with both costs rounded to whole dollars and
        never negative
    """
    healthcare = reference.healthcare
    state = reference.state(household.state)
    is_family = household.is_family_coverage

    ctx = _CostContext(
        reference=reference,
        household=household,
        base_premium=healthcare.base_premium(is_family),
        age_multiplier=healthcare.age_multipliers.get(
            household.age_range.value, healthcare.default_age_multiplier
        ),
        cost_of_living=state.cost_of_living_index / 100 if state else None,
        fpl_ratio=household.income / healthcare.federal_poverty_level.pick(is_family),
    )

    current = CURRENT_COST_MODELS[household.insurance_type](ctx)
    proposed = PROPOSED_COST_MODELS[household.insurance_type](ctx, current)
    proposed = _apply_common_provisions(ctx, proposed)

    estimate = HealthcareEstimate(
        current=max(0, round_to_dollar(current)),
        proposed=max(0, round_to_dollar(proposed)),
    )
    logger.debug(
        f"Healthcare ({household.insurance_type.value}, {household.age_range.value}): "
        f"current={estimate.current}, proposed={estimate.proposed}"
    )
    return estimate
