"""Configuration management for Policy Calc.

Configuration is split into two files:

1. settings.json - Machine-specific settings
   - reference_year: reference table year to load by default
   - reference_dir: directory holding custom reference YAML files
   - output_format: "table" or "json" for CLI output
   - profile: path to profile.yaml (optional, if not colocated)

2. profile.yaml - The user's saved household profile
   - Form answers (state, age range, income range, ...) reused by
     'policy-calc calculate --profile' so they need not be re-entered

Config directory resolution:
1. POLICY_CALC_CONFIG_PATH environment variable (if set)
2. ~/.config/policy-calc/ (XDG_CONFIG_HOME fallback)
"""

import json
import os
from pathlib import Path
from typing import Any, Optional

import yaml


APP_NAME = "policy-calc"
SETTINGS_FILENAME = "settings.json"
PROFILE_FILENAME = "profile.yaml"

KNOWN_SETTINGS = ("reference_year", "reference_dir", "output_format", "profile")
OUTPUT_FORMATS = ("table", "json")


class ProfileNotFoundError(Exception):
    """Raised when no saved profile is found."""
    pass


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Resolution order:
    1. POLICY_CALC_CONFIG_PATH environment variable
    2. ~/.config/policy-calc/ (XDG_CONFIG_HOME)
    """
    env_path = os.environ.get("POLICY_CALC_CONFIG_PATH")
    if env_path:
        return Path(env_path)

    xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
    return Path(xdg_config_home) / APP_NAME


def get_settings_path() -> Path:
    """Get the path to settings.json (may not exist yet)."""
    return get_config_dir() / SETTINGS_FILENAME


def load_settings() -> dict:
    """Load machine-specific settings from settings.json.

    Returns:
        Settings dictionary (empty dict if file doesn't exist)
    """
    settings_file = get_settings_path()

    if not settings_file.exists():
        return {}

    with open(settings_file, "r") as f:
        return json.load(f)


def save_settings(settings: dict) -> Path:
    """Save machine-specific settings to settings.json.

    Returns:
        Path to the saved settings file
    """
    config_dir = get_config_dir()
    config_dir.mkdir(parents=True, exist_ok=True)

    settings_file = config_dir / SETTINGS_FILENAME

    with open(settings_file, "w") as f:
        json.dump(settings, f, indent=2)

    return settings_file


def get_setting(key: str, default: Any = None) -> Any:
    """Get a setting value from settings.json."""
    settings = load_settings()
    return settings.get(key, default)


def set_setting(key: str, value: Any) -> Path:
    """Set a setting value in settings.json.

    Raises:
        ValueError: If the key is unknown or the value is invalid for it
    """
    if key not in KNOWN_SETTINGS:
        raise ValueError(f"Unknown setting '{key}'. Known settings: {', '.join(KNOWN_SETTINGS)}")
    if key == "output_format" and value not in OUTPUT_FORMATS:
        raise ValueError(f"output_format must be one of: {', '.join(OUTPUT_FORMATS)}")
    if key == "reference_year":
        if not str(value).isdigit() or len(str(value)) != 4:
            raise ValueError(f"Invalid reference_year '{value}'. Must be 4 digits.")
        value = int(value)

    settings = load_settings()
    settings[key] = value
    return save_settings(settings)


def unset_setting(key: str) -> bool:
    """Remove a setting. Returns True if it was set."""
    settings = load_settings()
    if key not in settings:
        return False
    del settings[key]
    save_settings(settings)
    return True


def get_profile_path(require_exists: bool = False) -> Path:
    """Get the path to the profile.yaml file.

    Resolution order:
    1. settings.json "profile" key (if set)
    2. profile.yaml in config directory

    Raises:
        ProfileNotFoundError: If require_exists=True and no profile found
    """
    custom_profile = get_setting("profile")
    if custom_profile:
        profile_path = Path(custom_profile).expanduser()
    else:
        profile_path = get_config_dir() / PROFILE_FILENAME

    if require_exists and not profile_path.exists():
        raise ProfileNotFoundError(
            f"No profile found at {profile_path}\n\n"
            f"Save one with: policy-calc profile save --state CA --income-range 45k-95k ...\n"
            f"Or answer the wizard with: policy-calc wizard --save-profile"
        )

    return profile_path


def load_profile(require_exists: bool = True) -> dict:
    """Load the saved household profile (camelCase form-data keys).

    Returns:
        Profile dictionary (empty dict if not required and not found)

    Raises:
        ProfileNotFoundError: If require_exists=True and no profile found
    """
    profile_path = get_profile_path(require_exists=require_exists)

    if not profile_path.exists():
        return {}

    with open(profile_path, "r") as f:
        return yaml.safe_load(f) or {}


def save_profile(profile: dict, path: Optional[Path] = None) -> Path:
    """Save the household profile to profile.yaml.

    Returns:
        Path to the saved profile file
    """
    if path is None:
        path = get_profile_path(require_exists=False)

    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w") as f:
        yaml.dump(profile, f, default_flow_style=False, sort_keys=False)

    return path


def clear_profile() -> bool:
    """Delete the saved profile. Returns True if a file was removed."""
    path = get_profile_path(require_exists=False)
    if not path.exists():
        return False
    path.unlink()
    return True
