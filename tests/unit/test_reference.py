"""Tests for reference data loading and validation."""

import copy
import json

import pytest
import yaml

from policycalc.sdk.reference import (
    ReferenceDataError,
    ReferenceDataNotFoundError,
    get_available_years,
    get_reference_dir,
    load_reference_data,
    parse_reference_data,
    resolve_year,
)
from policycalc.sdk.schemas import AgeRange, FamilyStatus


@pytest.fixture
def custom_reference_dir(tmp_path, monkeypatch, raw_reference):
    """Reference directory with a 2023 copy of the bundled tables."""
    reference_dir = tmp_path / "reference"
    reference_dir.mkdir()
    data = copy.deepcopy(raw_reference)
    data["year"] = 2023
    data["default_income"] = 60000
    (reference_dir / "2023.yaml").write_text(yaml.dump(data))
    monkeypatch.setenv("POLICY_CALC_REFERENCE_PATH", str(reference_dir))
    return reference_dir


class TestBundledTables:
    def test_loads_latest_by_default(self):
        reference = load_reference_data()
        assert reference.year == 2024

    def test_bundled_years(self):
        assert 2024 in get_available_years()

    def test_tables_cover_choice_sets(self, reference):
        assert set(reference.standard_deductions) == {s.value for s in FamilyStatus}
        assert set(reference.healthcare.age_multipliers) == {a.value for a in AgeRange}

    def test_top_bracket_unbounded(self, reference):
        assert reference.federal_tax_brackets[-1].max == float("inf")

    def test_models_are_frozen(self, reference):
        with pytest.raises(Exception):
            reference.default_income = 0

    def test_state_lookup(self, reference):
        assert reference.state("CA").name == "California"
        assert reference.state("ZZ") is None
        assert reference.state(None) is None


class TestValidation:
    def test_unknown_key_rejected(self, raw_reference):
        data = copy.deepcopy(raw_reference)
        data["energy"]["typo_field"] = 1
        with pytest.raises(ReferenceDataError):
            parse_reference_data(data)

    def test_overlapping_brackets_rejected(self, raw_reference):
        data = copy.deepcopy(raw_reference)
        data["federal_tax_brackets"][1]["min"] = 5000
        with pytest.raises(ReferenceDataError, match="overlaps"):
            parse_reference_data(data)

    def test_unbounded_bracket_must_be_last(self, raw_reference):
        data = copy.deepcopy(raw_reference)
        del data["federal_tax_brackets"][2]["max"]
        with pytest.raises(ReferenceDataError):
            parse_reference_data(data)

    def test_missing_section_rejected(self, raw_reference):
        data = copy.deepcopy(raw_reference)
        del data["scenarios"]
        with pytest.raises(ReferenceDataError):
            parse_reference_data(data)


class TestDirectoryResolution:
    def test_env_override(self, custom_reference_dir):
        assert get_reference_dir() == custom_reference_dir
        assert get_available_years() == [2023]
        reference = load_reference_data()
        assert reference.year == 2023
        assert reference.default_income == 60000

    def test_settings_reference_dir(self, tmp_path, isolated_config, raw_reference):
        reference_dir = tmp_path / "tables"
        reference_dir.mkdir()
        (reference_dir / "2024.yaml").write_text(yaml.dump(raw_reference))
        (isolated_config / "settings.json").write_text(json.dumps({"reference_dir": str(reference_dir)}))
        assert get_reference_dir() == reference_dir

    def test_missing_year(self, custom_reference_dir):
        with pytest.raises(ReferenceDataNotFoundError):
            load_reference_data(1999)

    def test_missing_year_is_file_not_found(self, custom_reference_dir):
        with pytest.raises(FileNotFoundError):
            load_reference_data(1999)

    def test_empty_directory(self, tmp_path, monkeypatch):
        monkeypatch.setenv("POLICY_CALC_REFERENCE_PATH", str(tmp_path))
        with pytest.raises(ReferenceDataNotFoundError):
            resolve_year()

    def test_empty_file(self, custom_reference_dir):
        (custom_reference_dir / "2022.yaml").write_text("")
        with pytest.raises(ReferenceDataError):
            load_reference_data(2022)

    def test_year_from_settings(self, isolated_config):
        (isolated_config / "settings.json").write_text(json.dumps({"reference_year": 2030}))
        assert resolve_year() == 2030
        assert resolve_year(2024) == 2024
