"""Tests for the MCP server tools.

Tools are called directly as coroutines; every argument is passed because
the parameter defaults are pydantic Field descriptors.
"""

import asyncio

import pytest

pytest.importorskip("mcp")

from policycalc.mcp import server  # noqa: E402
from policycalc.sdk.sessions import MemorySessionStore  # noqa: E402


@pytest.fixture(autouse=True)
def fresh_store(monkeypatch):
    store = MemorySessionStore()
    monkeypatch.setattr(server, "store", store)
    return store


def run(coro):
    return asyncio.run(coro)


class TestSessionTools:
    def test_full_session_flow(self, fresh_store):
        session_id = run(server.start_session())["session_id"]
        assert session_id in fresh_store

        run(server.update_form_data(session_id, {"ageRange": "30-44", "familyStatus": "single"}, True))
        run(server.update_form_data(session_id, {"employmentStatus": "full-time", "insuranceType": "employer"}, True))
        saved = run(server.update_form_data(session_id, {"incomeRange": "45k-95k"}, True))
        assert saved["form_data"]["familyStatus"] == "single"
        assert saved["form_data"]["incomeRange"] == "45k-95k"

        before = run(server.get_results(session_id))
        assert before["results"] is None

        calculated = run(server.calculate_session(session_id, None))
        assert calculated["results"]["netAnnualImpact"] == -2471

        after = run(server.get_results(session_id))
        assert after["results"] == calculated["results"]

        assert run(server.end_session(session_id)) == {"session_id": session_id, "ended": True}
        assert "error" in run(server.get_results(session_id))

    def test_calculate_without_form_data(self):
        session_id = run(server.start_session())["session_id"]
        result = run(server.calculate_session(session_id, None))
        assert "No form data" in result["error"]

    def test_unknown_session(self):
        assert run(server.update_form_data("missing", {"state": "CA"}, True)) == {
            "error": "Session not found: missing"
        }
        assert "error" in run(server.calculate_session("missing", None))
        assert "error" in run(server.end_session("missing"))

    def test_validation_errors_are_reported(self):
        session_id = run(server.start_session())["session_id"]
        result = run(server.update_form_data(session_id, {"numberOfQualifyingChildren": 99}, True))
        assert result["error"] == "validation failed"
        assert result["details"][0]["field"] == "numberOfQualifyingChildren"

    def test_replace_form_data(self):
        session_id = run(server.start_session())["session_id"]
        run(server.update_form_data(session_id, {"state": "CA"}, True))
        replaced = run(server.update_form_data(session_id, {"incomeRange": "over-400k"}, False))
        assert replaced["form_data"] == {"incomeRange": "over-400k"}


class TestStatelessTools:
    def test_calculate_policy_impact(self):
        result = run(server.calculate_policy_impact({"incomeRange": "45k-95k"}, None))
        assert result["netAnnualImpact"] == -2471
        assert "bigBillScenario" in result

    def test_calculate_policy_impact_invalid(self):
        result = run(server.calculate_policy_impact({"numberOfOtherDependents": -3}, None))
        assert result["error"] == "validation failed"

    def test_unknown_year(self):
        result = run(server.calculate_policy_impact({}, 1999))
        assert "1999" in result["error"]

    def test_get_federal_tax(self):
        result = run(server.get_federal_tax(70000, None, "single", 0, 0, None))
        assert result["current"] == pytest.approx(7495.16)
        assert result["big_bill"] == pytest.approx(5045.16)

    def test_get_federal_tax_from_range(self):
        result = run(server.get_federal_tax(None, "95k-200k", "married-joint", 2, 0, None))
        assert result["income"] == 147500
        assert result["proposed"] < result["current"]

    def test_get_federal_tax_bad_status(self):
        result = run(server.get_federal_tax(70000, None, "widowed", 0, 0, None))
        assert "error" in result

    def test_sources_resource(self):
        import json

        data = json.loads(run(server.sources_resource()))
        assert data["year"] == 2024
        assert data["sources"]
