"""reference - Static reference tables consumed by the impact calculators.

Scope:
- Federal brackets, deductions and credit rules
- Healthcare baselines (KFF/CMS) and per-insurance-type constants
- State tax / cost-of-living table and ZIP-prefix ranges
- Scenario parameter sets for Current Law and the Big Bill

Constraints:
- Read-only configuration: loaded once, passed into calculators
- Year-specific tables live in reference_data/{year}.yaml

Usage:
    from policycalc.sdk.reference import load_reference_data

    reference = load_reference_data(2024)
"""

from .schemas import ReferenceData, ScenarioParameters, StateData, TaxBracket
from .loader import (
    ReferenceDataError,
    ReferenceDataNotFoundError,
    get_available_years,
    get_reference_dir,
    load_reference_data,
    parse_reference_data,
    resolve_year,
)

__all__ = [
    "ReferenceData",
    "ScenarioParameters",
    "StateData",
    "TaxBracket",
    "ReferenceDataError",
    "ReferenceDataNotFoundError",
    "get_available_years",
    "get_reference_dir",
    "load_reference_data",
    "parse_reference_data",
    "resolve_year",
]
