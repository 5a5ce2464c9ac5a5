"""Tests for settings.json and profile.yaml handling."""

import json

import pytest
import yaml

from policycalc.sdk.config import (
    ProfileNotFoundError,
    clear_profile,
    get_config_dir,
    get_profile_path,
    get_setting,
    load_profile,
    load_settings,
    save_profile,
    set_setting,
    unset_setting,
)


class TestConfigDir:
    def test_env_override(self, isolated_config):
        assert get_config_dir() == isolated_config

    def test_xdg_fallback(self, tmp_path, monkeypatch):
        monkeypatch.delenv("POLICY_CALC_CONFIG_PATH")
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert get_config_dir() == tmp_path / "policy-calc"


class TestSettings:
    def test_empty_when_missing(self):
        assert load_settings() == {}
        assert get_setting("output_format", "table") == "table"

    def test_set_and_unset(self, isolated_config):
        set_setting("output_format", "json")
        assert json.loads((isolated_config / "settings.json").read_text()) == {"output_format": "json"}
        assert get_setting("output_format") == "json"
        assert unset_setting("output_format") is True
        assert unset_setting("output_format") is False

    def test_reference_year_stored_as_int(self):
        set_setting("reference_year", "2024")
        assert get_setting("reference_year") == 2024

    @pytest.mark.parametrize("key,value", [
        ("unknown_key", "x"),
        ("output_format", "xml"),
        ("reference_year", "24"),
        ("reference_year", "next"),
    ])
    def test_invalid_values_rejected(self, key, value):
        with pytest.raises(ValueError):
            set_setting(key, value)


class TestProfile:
    def test_missing_profile(self):
        with pytest.raises(ProfileNotFoundError):
            load_profile(require_exists=True)
        assert load_profile(require_exists=False) == {}

    def test_save_load_clear(self, isolated_config):
        path = save_profile({"state": "CA", "incomeRange": "45k-95k"})
        assert path == isolated_config / "profile.yaml"
        assert yaml.safe_load(path.read_text()) == {"state": "CA", "incomeRange": "45k-95k"}
        assert load_profile() == {"state": "CA", "incomeRange": "45k-95k"}
        assert clear_profile() is True
        assert clear_profile() is False

    def test_custom_profile_location(self, tmp_path):
        custom = tmp_path / "elsewhere" / "household.yaml"
        set_setting("profile", str(custom))
        assert get_profile_path() == custom
        save_profile({"state": "TX"})
        assert custom.exists()
