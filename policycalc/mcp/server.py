"""Policy Calc MCP Server - FastMCP implementation for policy impact tools.

The server process owns the wizard session store; sessions vanish when it
exits.
"""

import json
import logging
from functools import lru_cache
from typing import Any, Optional

from mcp.server.fastmcp import FastMCP
from pydantic import Field, ValidationError

from policycalc.sdk import (
    FamilyStatus,
    FormDataNotFoundError,
    MemorySessionStore,
    SessionNotFoundError,
    calculate_federal_taxes,
    load_reference_data,
)
from policycalc.sdk.impact import PolicyCalculator, resolve_income
from policycalc.sdk.reference import resolve_year
from policycalc.sdk.schemas import IncomeRange

logger = logging.getLogger(__name__)

# Initialize FastMCP server
mcp = FastMCP("policy-calc")

store = MemorySessionStore()


@lru_cache(maxsize=None)
def _calculator_for_year(year: int) -> PolicyCalculator:
    return PolicyCalculator(load_reference_data(year))


def get_calculator(year: Optional[int] = None) -> PolicyCalculator:
    """Calculator for a reference year, loading each year's tables once."""
    return _calculator_for_year(resolve_year(year))


def _validation_error(e: ValidationError) -> dict[str, Any]:
    return {
        "error": "validation failed",
        "details": [
            {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
            for err in e.errors()
        ],
    }


# --- Tools ---

@mcp.tool()
async def start_session() -> dict[str, Any]:
    """Start a wizard session. Returns the session_id to pass to the other session tools."""
    session = store.create_session()
    return {"session_id": session.session_id, "created_at": session.created_at.isoformat()}


@mcp.tool()
async def update_form_data(
    session_id: str = Field(description="Session ID from start_session"),
    form_data: dict[str, Any] = Field(
        description=(
            "Form fields to save (camelCase), e.g. {\"state\": \"CA\", \"incomeRange\": \"45k-95k\"}. "
            "Fields: state, zipCode, ageRange, familyStatus, numberOfQualifyingChildren, "
            "numberOfOtherDependents, employmentStatus, industry, insuranceType, hasHSA, "
            "incomeRange, priorities, includeBigBill"
        )
    ),
    merge: bool = Field(default=True, description="Merge into saved answers (false replaces them)"),
) -> dict[str, Any]:
    """Save one wizard step's answers to a session."""
    try:
        session = store.update_form_data(session_id, form_data, merge=merge)
        return {"session_id": session_id, "form_data": session.form_data.to_json_dict()}
    except SessionNotFoundError as e:
        return {"error": str(e)}
    except ValidationError as e:
        logger.warning(f"Invalid form data for session {session_id}: {e}")
        return _validation_error(e)


@mcp.tool()
async def calculate_session(
    session_id: str = Field(description="Session ID from start_session"),
    year: int | None = Field(default=None, description="Reference year (default: configured or latest)"),
) -> dict[str, Any]:
    """Calculate policy impact for a session's saved answers and store the results."""
    try:
        results = store.calculate(session_id, get_calculator(year))
        return {"session_id": session_id, "results": results.to_json_dict()}
    except (SessionNotFoundError, FormDataNotFoundError) as e:
        return {"error": str(e)}
    except Exception as e:
        logger.error(f"Error calculating session {session_id}: {e}")
        return {"error": str(e)}


@mcp.tool()
async def get_results(
    session_id: str = Field(description="Session ID from start_session"),
) -> dict[str, Any]:
    """Get a session's saved answers and its latest results (null until calculated)."""
    try:
        return store.get_session(session_id).to_dict()
    except SessionNotFoundError as e:
        return {"error": str(e)}


@mcp.tool()
async def end_session(
    session_id: str = Field(description="Session ID from start_session"),
) -> dict[str, Any]:
    """End a session and discard its answers and results."""
    if not store.delete_session(session_id):
        return {"error": str(SessionNotFoundError(session_id))}
    return {"session_id": session_id, "ended": True}


@mcp.tool()
async def calculate_policy_impact(
    form_data: dict[str, Any] = Field(
        default_factory=dict,
        description="Complete form (camelCase fields, all optional), e.g. {\"state\": \"TX\", \"familyStatus\": \"married-joint\"}",
    ),
    year: int | None = Field(default=None, description="Reference year (default: configured or latest)"),
) -> dict[str, Any]:
    """Calculate policy impact in one call without a session. Negative amounts are savings."""
    try:
        return get_calculator(year).calculate(form_data).to_json_dict()
    except ValidationError as e:
        logger.warning(f"Invalid form data: {e}")
        return _validation_error(e)
    except Exception as e:
        logger.error(f"Error calculating policy impact: {e}")
        return {"error": str(e)}


@mcp.tool()
async def get_federal_tax(
    income: float | None = Field(default=None, description="Annual income in dollars"),
    income_range: str | None = Field(default=None, description="Income range (e.g. '45k-95k'), used when income is omitted"),
    family_status: str = Field(default="single", description="single, married-joint, married-separate, head-of-household"),
    qualifying_children: int = Field(default=0, ge=0, le=10, description="Qualifying children"),
    other_dependents: int = Field(default=0, ge=0, le=10, description="Other dependents"),
    year: int | None = Field(default=None, description="Reference year (default: configured or latest)"),
) -> dict[str, Any]:
    """Federal income tax under current law, the proposed enhancement, and the Big Bill."""
    try:
        status = FamilyStatus(family_status)
        calculator = get_calculator(year)
        reference = calculator.reference
        if income is None:
            income = resolve_income(reference, IncomeRange(income_range) if income_range else None)

        taxes = calculate_federal_taxes(reference, income, status, qualifying_children, other_dependents)
        return {
            "year": reference.year,
            "income": income,
            "family_status": status.value,
            "current": round(taxes.current, 2),
            "proposed": round(taxes.proposed, 2),
            "big_bill": round(taxes.big_bill, 2),
        }
    except ValueError as e:
        return {"error": str(e)}
    except Exception as e:
        logger.error(f"Error calculating federal tax: {e}")
        return {"error": str(e)}


# --- Resources ---

@mcp.resource("policycalc://reference/sources")
async def sources_resource() -> str:
    """Data sources and methodology notes behind the reference tables."""
    try:
        reference = get_calculator().reference
        return json.dumps({
            "year": reference.year,
            "sources": [s.model_dump() for s in reference.data_sources],
            "methodology": dict(reference.methodology_notes),
        }, indent=2)
    except Exception as e:
        return json.dumps({"error": str(e)})


# --- Server Entry Point ---

def run_server():
    """Run the MCP server in stdio mode."""
    mcp.run(transport="stdio")


if __name__ == "__main__":
    run_server()
