"""Policy Calc SDK - Core functionality for policy impact estimates."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    unset_setting,
    get_profile_path,
    load_profile,
    save_profile,
    clear_profile,
    ProfileNotFoundError,
    KNOWN_SETTINGS,
    OUTPUT_FORMATS,
)

from .schemas import (
    AgeRange,
    EmploymentStatus,
    FamilyStatus,
    FormData,
    IncomeRange,
    InsuranceType,
    PolicyResults,
)

from .reference import (
    ReferenceData,
    ReferenceDataError,
    ReferenceDataNotFoundError,
    get_available_years,
    get_reference_dir,
    load_reference_data,
)

from .impact import (
    PolicyCalculator,
    calculate_policy_impact,
    calculate_federal_taxes,
)

from .sessions import (
    MemorySessionStore,
    Session,
    SessionNotFoundError,
    FormDataNotFoundError,
    generate_session_id,
)
