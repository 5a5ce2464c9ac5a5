"""Tests for the end-to-end policy impact calculation."""

import json

import pytest
from pydantic import ValidationError

from policycalc.sdk.impact import PolicyCalculator, calculate_policy_impact
from policycalc.sdk.impact.rounding import round_to_dollar
from policycalc.sdk.schemas import FormData, PolicyResults

MEDIAN_SINGLE = {
    "ageRange": "30-44",
    "familyStatus": "single",
    "employmentStatus": "full-time",
    "insuranceType": "employer",
    "incomeRange": "45k-95k",
}

TOP_LEVEL_KEYS = {
    "annualTaxImpact",
    "healthcareCostImpact",
    "energyCostImpact",
    "netAnnualImpact",
    "deficitImpact",
    "recessionProbability",
    "healthcareCosts",
    "communityImpact",
    "timeline",
    "breakdown",
    "purchasingPower",
}


@pytest.fixture
def calculator(reference):
    return PolicyCalculator(reference)


class TestMedianSingleOracle:
    """Hand-computed figures for a single full-time employee at $70,000, no state."""

    def test_current_law(self, calculator):
        results = calculator.calculate(MEDIAN_SINGLE)
        assert results.annual_tax_impact == -440
        assert results.healthcare_cost_impact == -1412
        assert results.energy_cost_impact == 81
        assert results.net_annual_impact == -2471
        assert results.timeline.ten_year == -31629
        assert results.deficit_impact == 0
        assert results.recession_probability == 28
        assert (results.healthcare_costs.current, results.healthcare_costs.proposed) == (3367, 1955)
        assert results.community_impact.school_funding == 14
        assert results.community_impact.infrastructure == 1_920_000
        assert results.community_impact.job_opportunities == 340

    def test_big_bill(self, calculator):
        big_bill = calculator.calculate(MEDIAN_SINGLE).big_bill_scenario
        assert big_bill is not None
        assert big_bill.annual_tax_impact == -2450
        assert big_bill.healthcare_cost_impact == -1977
        assert big_bill.net_annual_impact == -5046
        assert big_bill.deficit_impact == 2240
        assert big_bill.recession_probability == 22
        assert (big_bill.healthcare_costs.current, big_bill.healthcare_costs.proposed) == (3367, 1564)
        assert big_bill.community_impact.school_funding == 17
        assert big_bill.community_impact.infrastructure == 2_688_000
        assert big_bill.community_impact.job_opportunities == 460
        assert big_bill.big_bill_scenario is None

    def test_purchasing_power_disposable_income(self, calculator):
        results = calculator.calculate(MEDIAN_SINGLE)
        base = results.purchasing_power.current_scenario[0]
        assert base.projected_disposable_income == round_to_dollar(70000 - 7495.16 - 3367)
        assert results.purchasing_power.proposed_scenario[0].projected_disposable_income == round_to_dollar(
            70000 - 7055.16 - 1955
        )
        big_bill_base = results.big_bill_scenario.purchasing_power.proposed_scenario[0]
        assert big_bill_base.projected_disposable_income == round_to_dollar(70000 - 5045.16 - 1955 * 0.8)


class TestInvariants:
    @pytest.mark.parametrize("form", [
        {},
        MEDIAN_SINGLE,
        {"state": "CA", "incomeRange": "over-400k", "familyStatus": "married-joint", "numberOfQualifyingChildren": 3},
        {"state": "TX", "incomeRange": "under-15k", "insuranceType": "uninsured", "employmentStatus": "unemployed"},
        {"zipCode": "10001", "incomeRange": "95k-200k", "insuranceType": "marketplace", "hasHSA": True},
        {"state": "Florida", "ageRange": "65+", "insuranceType": "medicare", "employmentStatus": "retired"},
    ])
    def test_ten_year_matches_net_for_both_scenarios(self, calculator, form):
        results = calculator.calculate(form)
        for scenario in (results, results.big_bill_scenario):
            assert scenario.timeline.ten_year == round_to_dollar(scenario.net_annual_impact * 10 * 1.28)
            assert scenario.timeline.five_year == round_to_dollar(scenario.net_annual_impact * 5 * 1.025)
            assert scenario.timeline.twenty_year == round_to_dollar(scenario.net_annual_impact * 20 * 1.64)

    def test_idempotent(self, calculator):
        form = {"state": "NY", "incomeRange": "95k-200k", "familyStatus": "head-of-household",
                "numberOfQualifyingChildren": 2, "insuranceType": "marketplace"}
        first = json.dumps(calculator.calculate(form).to_json_dict(), sort_keys=True)
        second = json.dumps(calculator.calculate(form).to_json_dict(), sort_keys=True)
        assert first == second

    def test_big_bill_has_same_shape(self, calculator):
        payload = calculator.calculate(MEDIAN_SINGLE).to_json_dict()
        big_bill = payload["bigBillScenario"]
        assert set(payload) == TOP_LEVEL_KEYS | {"bigBillScenario"}
        assert set(big_bill) == TOP_LEVEL_KEYS
        for key in ("healthcareCosts", "communityImpact", "timeline", "purchasingPower"):
            assert set(big_bill[key]) == set(payload[key])

    def test_include_big_bill_false_omits_scenario(self, calculator):
        payload = calculator.calculate({**MEDIAN_SINGLE, "includeBigBill": False}).to_json_dict()
        assert "bigBillScenario" not in payload

    def test_empty_form_uses_defaults(self, calculator):
        results = calculator.calculate(None)
        assert results == calculator.calculate({})
        # Default income 62,500 with no state
        assert results.deficit_impact == 0
        assert results.big_bill_scenario.deficit_impact == round_to_dollar(2400 * 62500 / 75000)


class TestInputHandling:
    def test_unknown_enum_value_falls_back_to_default(self, calculator):
        defaulted = calculator.calculate({**MEDIAN_SINGLE, "insuranceType": "employer"})
        unknown = calculator.calculate({**MEDIAN_SINGLE, "insuranceType": "space-program"})
        assert unknown == defaulted

    def test_malformed_input_rejected(self, calculator):
        with pytest.raises(ValidationError):
            calculator.calculate({"numberOfQualifyingChildren": 11})
        with pytest.raises(ValidationError):
            calculator.calculate({"incomeRange": 70000})

    def test_accepts_form_data_instance(self, calculator):
        form = FormData.model_validate(MEDIAN_SINGLE)
        assert calculator.calculate(form) == calculator.calculate(MEDIAN_SINGLE)

    def test_full_state_name_matches_code(self, calculator):
        by_name = calculator.calculate({**MEDIAN_SINGLE, "state": "california"})
        by_code = calculator.calculate({**MEDIAN_SINGLE, "state": "CA"})
        assert by_name == by_code

    def test_state_adjustment_flows_into_net(self, calculator):
        no_state = calculator.calculate(MEDIAN_SINGLE)
        california = calculator.calculate({**MEDIAN_SINGLE, "state": "CA"})
        assert california.net_annual_impact > no_state.net_annual_impact
        assert california.energy_cost_impact == 299

    def test_high_income_without_state_keeps_income_defaults(self, calculator):
        results = calculator.calculate({"incomeRange": "over-400k"})
        community = results.community_impact
        assert (community.school_funding, community.job_opportunities) == (48, 1200)
        big_bill = results.big_bill_scenario.community_impact
        assert (big_bill.school_funding, big_bill.job_opportunities) == (51, 1320)

    def test_married_joint_uninsured_priced_as_individual(self, calculator):
        results = calculator.calculate(
            {"familyStatus": "married-joint", "insuranceType": "uninsured", "incomeRange": "15k-45k"}
        )
        # 1,480 drugs + 1,800 services; 30,000 is 199% of the individual FPL
        assert (results.healthcare_costs.current, results.healthcare_costs.proposed) == (3280, 2910)
        assert results.healthcare_cost_impact == -370


def test_calculate_policy_impact_loads_bundled_reference():
    results = calculate_policy_impact(MEDIAN_SINGLE)
    assert isinstance(results, PolicyResults)
    assert results.net_annual_impact == -2471
