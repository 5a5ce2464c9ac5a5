"""Pydantic schemas for the calculator's input and output records.

FormData and PolicyResults serialise with camelCase field names. Those names
are the contract with the results consumer and must not drift; use
to_json_dict() rather than model_dump() when producing wire output.
"""

import logging
from enum import Enum
from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)


# =============================================================================
# Closed choice sets
# =============================================================================


class AgeRange(str, Enum):
    AGE_18_29 = "18-29"
    AGE_30_44 = "30-44"
    AGE_45_64 = "45-64"
    AGE_65_PLUS = "65+"


class FamilyStatus(str, Enum):
    """IRS filing status."""
    SINGLE = "single"
    MARRIED_JOINT = "married-joint"
    MARRIED_SEPARATE = "married-separate"
    HEAD_OF_HOUSEHOLD = "head-of-household"


class EmploymentStatus(str, Enum):
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    SELF_EMPLOYED = "self-employed"
    CONTRACT = "contract"
    UNEMPLOYED = "unemployed"
    RETIRED = "retired"
    STUDENT = "student"
    UNABLE = "unable"


class InsuranceType(str, Enum):
    EMPLOYER = "employer"
    MARKETPLACE = "marketplace"
    MEDICARE = "medicare"
    MEDICAID = "medicaid"
    MILITARY = "military"
    UNINSURED = "uninsured"


class IncomeRange(str, Enum):
    UNDER_15K = "under-15k"
    FROM_15K_TO_45K = "15k-45k"
    FROM_45K_TO_95K = "45k-95k"
    FROM_95K_TO_200K = "95k-200k"
    FROM_200K_TO_400K = "200k-400k"
    OVER_400K = "over-400k"


_CHOICE_FIELDS = {
    "age_range": AgeRange,
    "family_status": FamilyStatus,
    "employment_status": EmploymentStatus,
    "insurance_type": InsuranceType,
    "income_range": IncomeRange,
}


class _Wire(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    def to_json_dict(self) -> dict[str, Any]:
        """Serialise with wire (camelCase) names, omitting unset optionals."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# Input
# =============================================================================


class FormData(_Wire):
    """Household profile collected by the wizard. Every field is optional.

    Unknown choice values (e.g. an insurance type this version does not know)
    are logged and dropped so the calculator falls back to its default.
    Structurally invalid values (wrong types, counts outside 0-10) still fail
    validation.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    # Step 1: Location
    state: Optional[str] = Field(default=None, description="State code or full state name")
    zip_code: Optional[str] = Field(default=None, description="Used only to infer state")

    # Step 2: Demographics
    age_range: Optional[AgeRange] = None
    family_status: Optional[FamilyStatus] = None
    number_of_qualifying_children: Optional[int] = Field(default=None, ge=0, le=10)
    number_of_other_dependents: Optional[int] = Field(default=None, ge=0, le=10)

    # Step 3: Employment
    employment_status: Optional[EmploymentStatus] = None
    industry: Optional[str] = None

    # Step 4: Healthcare
    insurance_type: Optional[InsuranceType] = None
    has_hsa: Optional[bool] = Field(default=None, alias="hasHSA")

    # Step 5: Income
    income_range: Optional[IncomeRange] = None

    # Step 6: Priorities
    priorities: Optional[List[str]] = None
    include_big_bill: Optional[bool] = None

    @field_validator("state", "zip_code", mode="before")
    @classmethod
    def blank_to_none(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @field_validator(*_CHOICE_FIELDS, mode="before")
    @classmethod
    def drop_unknown_choice(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None or value == "":
            return None
        if not isinstance(value, str):
            return value
        enum_type = _CHOICE_FIELDS[info.field_name]
        try:
            return enum_type(value)
        except ValueError:
            logger.warning(f"Ignoring unknown {info.field_name} value: {value!r}")
            return None

    def merged(self, update: "FormData") -> "FormData":
        """Return a copy with the fields explicitly set on `update` applied."""
        changes = update.model_dump(exclude_unset=True)
        return self.model_copy(update=changes)


# =============================================================================
# Output
# =============================================================================


class HealthcareCosts(_Wire):
    current: int = Field(..., ge=0, description="Annual cost under current law")
    proposed: int = Field(..., ge=0, description="Annual cost under the scenario")


class CommunityImpact(_Wire):
    school_funding: int = Field(..., description="School funding change, percent")
    infrastructure: int = Field(..., description="Infrastructure investment, dollars")
    job_opportunities: int = Field(..., description="Local jobs created")


class Timeline(_Wire):
    five_year: int
    ten_year: int
    twenty_year: int


class BreakdownDetail(_Wire):
    item: str
    amount: int


class BreakdownItem(_Wire):
    category: Literal["tax", "healthcare"]
    title: str
    description: str
    impact: int
    details: List[BreakdownDetail]


class PurchasingPowerPoint(_Wire):
    year: int
    purchasing_power_index: int
    projected_disposable_income: int


class PurchasingPower(_Wire):
    current_scenario: List[PurchasingPowerPoint]
    proposed_scenario: List[PurchasingPowerPoint]
    data_source: str
    last_updated: str


class PolicyResults(_Wire):
    """Estimated personal impact of one scenario vs current law.

    Signs: negative = the household saves money, positive = it pays more.
    The top-level record is the Current Law scenario; bigBillScenario carries
    the same shape computed under the Big Bill assumptions.
    """

    annual_tax_impact: int
    healthcare_cost_impact: int
    energy_cost_impact: int
    net_annual_impact: int
    deficit_impact: int
    recession_probability: int
    healthcare_costs: HealthcareCosts
    community_impact: CommunityImpact
    timeline: Timeline
    breakdown: List[BreakdownItem]
    purchasing_power: PurchasingPower
    big_bill_scenario: Optional["PolicyResults"] = None
