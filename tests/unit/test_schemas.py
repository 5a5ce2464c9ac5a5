"""Tests for FormData validation and PolicyResults serialisation."""

import logging

import pytest
from pydantic import ValidationError

from policycalc.sdk.schemas import (
    AgeRange,
    FormData,
    IncomeRange,
    InsuranceType,
)


class TestFormData:
    def test_all_fields_optional(self):
        form = FormData()
        assert form.state is None
        assert form.include_big_bill is None

    def test_camel_case_and_snake_case_input(self):
        camel = FormData.model_validate({"incomeRange": "45k-95k", "hasHSA": True, "zipCode": "94103"})
        snake = FormData.model_validate({"income_range": "45k-95k", "has_hsa": True, "zip_code": "94103"})
        assert camel == snake
        assert camel.income_range == IncomeRange.FROM_45K_TO_95K
        assert camel.has_hsa is True

    def test_unknown_choice_is_dropped_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING):
            form = FormData.model_validate({"insuranceType": "space-program", "ageRange": "30-44"})
        assert form.insurance_type is None
        assert form.age_range == AgeRange.AGE_30_44
        assert "space-program" in caplog.text

    def test_blank_strings_become_none(self):
        form = FormData.model_validate({"state": "  ", "zipCode": "", "familyStatus": ""})
        assert form.state is None
        assert form.zip_code is None
        assert form.family_status is None

    @pytest.mark.parametrize("field,value", [
        ("numberOfQualifyingChildren", 11),
        ("numberOfOtherDependents", -1),
        ("numberOfQualifyingChildren", "many"),
        ("insuranceType", 3),
        ("priorities", "jobs"),
    ])
    def test_structurally_invalid_values_rejected(self, field, value):
        with pytest.raises(ValidationError):
            FormData.model_validate({field: value})

    def test_unknown_fields_ignored(self):
        form = FormData.model_validate({"state": "CA", "favoriteColor": "blue"})
        assert form.state == "CA"

    def test_merged_applies_only_set_fields(self):
        base = FormData.model_validate({"state": "CA", "incomeRange": "45k-95k"})
        update = FormData.model_validate({"incomeRange": "95k-200k", "insuranceType": "marketplace"})
        merged = base.merged(update)
        assert merged.state == "CA"
        assert merged.income_range == IncomeRange.FROM_95K_TO_200K
        assert merged.insurance_type == InsuranceType.MARKETPLACE

    def test_to_json_dict_uses_wire_names(self):
        form = FormData.model_validate({"has_hsa": True, "number_of_qualifying_children": 2})
        assert form.to_json_dict() == {"hasHSA": True, "numberOfQualifyingChildren": 2}


class TestPolicyResultsWireFormat:
    def test_camel_case_keys(self, reference):
        from policycalc.sdk.impact import PolicyCalculator

        payload = PolicyCalculator(reference).calculate({}).to_json_dict()
        assert set(payload["communityImpact"]) == {"schoolFunding", "infrastructure", "jobOpportunities"}
        assert set(payload["timeline"]) == {"fiveYear", "tenYear", "twentyYear"}
        assert set(payload["healthcareCosts"]) == {"current", "proposed"}
        assert set(payload["purchasingPower"]) == {"currentScenario", "proposedScenario", "dataSource", "lastUpdated"}
        assert set(payload["purchasingPower"]["currentScenario"][0]) == {
            "year", "purchasingPowerIndex", "projectedDisposableIncome",
        }
        assert set(payload["breakdown"][0]) == {"category", "title", "description", "impact", "details"}
        assert set(payload["breakdown"][0]["details"][0]) == {"item", "amount"}

    def test_all_amounts_are_integers(self, reference):
        from policycalc.sdk.impact import PolicyCalculator

        payload = PolicyCalculator(reference).calculate({"state": "NJ", "incomeRange": "200k-400k"}).to_json_dict()
        for key in ("annualTaxImpact", "healthcareCostImpact", "energyCostImpact", "netAnnualImpact",
                    "deficitImpact", "recessionProbability"):
            assert isinstance(payload[key], int)
        assert all(isinstance(v, int) for v in payload["timeline"].values())
        assert all(isinstance(v, int) for v in payload["communityImpact"].values())
