"""Reference data loading from reference_data/YYYY.yaml."""

import logging
import os
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import ValidationError

from ..config import get_setting
from .schemas import ReferenceData

logger = logging.getLogger(__name__)

REFERENCE_PATH_ENV = "POLICY_CALC_REFERENCE_PATH"


class ReferenceDataNotFoundError(FileNotFoundError):
    """Raised when no reference file exists for the requested year."""
    pass


class ReferenceDataError(Exception):
    """Raised when a reference file does not match the expected schema."""
    pass


def get_reference_dir() -> Path:
    """Get the reference data directory.

    Resolution order:
    1. POLICY_CALC_REFERENCE_PATH environment variable
    2. settings.json "reference_dir" key
    3. reference_data/ bundled with the package
    """
    env_path = os.environ.get(REFERENCE_PATH_ENV)
    if env_path:
        return Path(env_path)

    custom_dir = get_setting("reference_dir")
    if custom_dir:
        return Path(custom_dir).expanduser()

    package_root = Path(__file__).parent.parent.parent  # reference -> sdk -> policycalc
    return package_root / "reference_data"


def get_available_years() -> list[int]:
    """Get sorted list of available reference years (descending)."""
    reference_dir = get_reference_dir()
    years = [int(p.stem) for p in reference_dir.glob("*.yaml") if p.stem.isdigit()]
    return sorted(years, reverse=True)


def resolve_year(year: Optional[Union[int, str]] = None) -> int:
    """Pick the reference year: explicit argument, then settings, then latest."""
    if year is None:
        year = get_setting("reference_year")
    if year is not None:
        return int(year)

    available = get_available_years()
    if not available:
        raise ReferenceDataNotFoundError(f"No reference data files found in {get_reference_dir()}")
    return available[0]


def parse_reference_data(raw: dict, source: str = "<dict>") -> ReferenceData:
    """Validate a raw reference mapping.

    Raises:
        ReferenceDataError: If the mapping does not match the schema
    """
    try:
        return ReferenceData.model_validate(raw)
    except ValidationError as e:
        raise ReferenceDataError(f"Invalid reference data in {source}:\n{e}") from e


def load_reference_data(year: Optional[Union[int, str]] = None) -> ReferenceData:
    """Load and validate reference tables for a year.

    Args:
        year: Reference year (e.g., 2024). Defaults to the configured or
            latest available year.

    Returns:
        Frozen ReferenceData model

    Raises:
        ReferenceDataNotFoundError: If no file exists for the year
        ReferenceDataError: If the file is malformed
    """
    target_year = resolve_year(year)
    reference_file = get_reference_dir() / f"{target_year}.yaml"
    if not reference_file.exists():
        raise ReferenceDataNotFoundError(f"Reference data not found for year {target_year}: {reference_file}")

    with open(reference_file, "r") as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        raise ReferenceDataError(f"Reference file is empty or not a mapping: {reference_file}")

    logger.debug(f"Loaded reference data {target_year} from {reference_file}")
    return parse_reference_data(raw, source=str(reference_file))
