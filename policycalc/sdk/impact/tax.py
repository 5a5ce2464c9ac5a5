"""Federal income tax under current law and the two policy variants.

All three functions return annual tax in dollars (never negative) for a
household at `income`, before any rounding:

- calculate_current_tax: IRS 2024 brackets, standard deduction and the
  child tax credit with its high-income phase-out
- calculate_proposed_tax: the modest enhancement scored by the Current Law
  scenario (larger deduction, larger per-child credit, higher top rate)
- calculate_big_bill_tax: current-law tax less the Big Bill's flat
  heuristic reductions
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from ..reference import ReferenceData, TaxBracket

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FederalTaxes:
    """Federal tax for one household under each tax regime."""

    current: float
    proposed: float
    big_bill: float


def calculate_federal_income_tax(taxable_income: float, tax_brackets: Sequence[TaxBracket]) -> float:
    """Calculate federal income tax based on taxable income and tax brackets."""
    tax_owed = 0.0
    previous_bracket_max = 0.0

    for bracket in tax_brackets:
        if taxable_income <= previous_bracket_max:
            break
        income_in_this_bracket = min(taxable_income, bracket.max) - max(previous_bracket_max, bracket.min)
        if income_in_this_bracket > 0:
            tax_owed += income_in_this_bracket * bracket.rate
        previous_bracket_max = bracket.max

    return tax_owed


def standard_deduction(reference: ReferenceData, family_status: str) -> float:
    return reference.standard_deductions.get(family_status, reference.default_standard_deduction)


def child_tax_credit(
    reference: ReferenceData,
    income: float,
    family_status: str,
    qualifying_children: int = 0,
    other_dependents: int = 0,
    per_qualifying_child: Optional[float] = None,
) -> float:
    """Child tax credit plus credit for other dependents.

    Only the per-child portion phases out: $50 per full $1,000 of income over
    the filing-status threshold. The other-dependent credit is never reduced.
    """
    rules = reference.child_tax_credit
    if per_qualifying_child is None:
        per_qualifying_child = rules.per_qualifying_child

    child_credit = qualifying_children * per_qualifying_child
    other_credit = other_dependents * rules.per_other_dependent

    threshold = rules.phase_out_thresholds.get(family_status, rules.default_phase_out_threshold)
    reduction = 0.0
    if income > threshold:
        steps = (income - threshold) // rules.phase_out_step
        reduction = steps * rules.phase_out_per_step

    return max(0.0, child_credit - reduction) + other_credit


def _bracket_tax_less_credits(
    income: float,
    deduction: float,
    brackets: Sequence[TaxBracket],
    credits: float,
) -> float:
    taxable_income = max(0.0, income - deduction)
    tax = calculate_federal_income_tax(taxable_income, brackets)
    return max(0.0, tax - credits)


def calculate_current_tax(
    reference: ReferenceData,
    income: float,
    family_status: str,
    qualifying_children: int = 0,
    other_dependents: int = 0,
) -> float:
    """Federal income tax under current law."""
    credits = child_tax_credit(reference, income, family_status, qualifying_children, other_dependents)
    return _bracket_tax_less_credits(
        income,
        standard_deduction(reference, family_status),
        reference.federal_tax_brackets,
        credits,
    )


def calculate_proposed_tax(
    reference: ReferenceData,
    income: float,
    family_status: str,
    qualifying_children: int = 0,
    other_dependents: int = 0,
) -> float:
    """Federal income tax under the proposed current-law enhancement."""
    policy = reference.proposed_policy

    brackets = list(reference.federal_tax_brackets)
    top = brackets[-1]
    brackets[-1] = top.model_copy(update={"rate": top.rate + policy.top_bracket_rate_delta})

    credits = child_tax_credit(
        reference,
        income,
        family_status,
        qualifying_children,
        other_dependents,
        per_qualifying_child=policy.per_qualifying_child,
    )
    deduction = standard_deduction(reference, family_status) + policy.standard_deduction_increase
    return _bracket_tax_less_credits(income, deduction, brackets, credits)


def middle_class_cut(reference: ReferenceData, income: float) -> float:
    """Big Bill rate reduction on income inside the middle-class band."""
    rules = reference.big_bill_tax
    if not rules.middle_class_floor < income < rules.middle_class_ceiling:
        return 0.0
    return min(income - rules.middle_class_floor, rules.middle_class_span_cap) * rules.middle_class_rate_reduction


def calculate_big_bill_tax(
    reference: ReferenceData,
    income: float,
    family_status: str,
    qualifying_children: int = 0,
    other_dependents: int = 0,
) -> float:
    """Current-law tax less the Big Bill's flat reductions.

    reduction = deduction bonus x assumed marginal rate
              + middle-class cut
              + per-dependent bonus x (children + other dependents)
    """
    rules = reference.big_bill_tax
    current_tax = calculate_current_tax(reference, income, family_status, qualifying_children, other_dependents)

    reduction = (
        rules.standard_deduction_bonus * rules.assumed_marginal_rate
        + middle_class_cut(reference, income)
        + rules.per_dependent_bonus * (qualifying_children + other_dependents)
    )
    return max(0.0, current_tax - reduction)


def calculate_federal_taxes(
    reference: ReferenceData,
    income: float,
    family_status: str,
    qualifying_children: int = 0,
    other_dependents: int = 0,
) -> FederalTaxes:
    """Federal tax under every regime for one household."""
    args = (reference, income, family_status, qualifying_children, other_dependents)
    taxes = FederalTaxes(
        current=calculate_current_tax(*args),
        proposed=calculate_proposed_tax(*args),
        big_bill=calculate_big_bill_tax(*args),
    )
    logger.debug(
        f"Federal tax at income={income}, status={family_status}: "
        f"current={taxes.current:.2f}, proposed={taxes.proposed:.2f}, big_bill={taxes.big_bill:.2f}"
    )
    return taxes
