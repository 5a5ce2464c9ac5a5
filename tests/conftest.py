"""Shared fixtures for policycalc tests."""

from pathlib import Path

import pytest
import yaml

import policycalc
from policycalc.sdk.reference import parse_reference_data

BUNDLED_REFERENCE_DIR = Path(policycalc.__file__).parent / "reference_data"


@pytest.fixture(scope="session")
def raw_reference():
    """Bundled 2024 reference tables as a plain dict."""
    with open(BUNDLED_REFERENCE_DIR / "2024.yaml", "r") as f:
        return yaml.safe_load(f)


@pytest.fixture(scope="session")
def reference(raw_reference):
    """Validated 2024 reference tables."""
    return parse_reference_data(raw_reference, source="2024.yaml")


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the config directory at a temp dir so user settings never leak in."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("POLICY_CALC_CONFIG_PATH", str(config_dir))
    monkeypatch.delenv("POLICY_CALC_REFERENCE_PATH", raising=False)
    return config_dir
