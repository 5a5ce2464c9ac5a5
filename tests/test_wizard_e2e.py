"""End-to-end test of the wizard session workflow.

Answers arrive one step at a time, as they do from the CLI wizard or an
MCP client, against the bundled reference tables:

- each step merges into the session
- a later change discards stale results
- recalculation reflects the change
- the session is gone once ended
"""

import pytest

from policycalc.sdk import (
    MemorySessionStore,
    SessionNotFoundError,
    load_reference_data,
)
from policycalc.sdk.impact import PolicyCalculator

STEPS = [
    {"state": "", "zipCode": "94103"},
    {"ageRange": "30-44", "familyStatus": "married-joint", "numberOfQualifyingChildren": 2,
     "numberOfOtherDependents": 0},
    {"employmentStatus": "full-time", "industry": "education"},
    {"insuranceType": "employer", "hasHSA": False},
    {"incomeRange": "95k-200k"},
    {"priorities": ["education", "healthcare"], "includeBigBill": True},
]


@pytest.fixture
def calculator():
    return PolicyCalculator(load_reference_data())


def test_wizard_session_round_trip(calculator):
    store = MemorySessionStore()
    session_id = store.create_session().session_id

    for step in STEPS:
        store.update_form_data(session_id, step)

    form = store.get_session(session_id).form_data
    assert form.zip_code == "94103"
    assert form.state is None
    assert form.priorities == ["education", "healthcare"]

    first = store.calculate(session_id, calculator)
    # ZIP 94103 resolves to California
    assert first == calculator.calculate({**form.to_json_dict(), "state": "CA"})
    assert first.big_bill_scenario is not None

    store.update_form_data(session_id, {"includeBigBill": False})
    assert store.get_session(session_id).results is None

    second = store.calculate(session_id, calculator)
    assert second.big_bill_scenario is None
    assert second.net_annual_impact == first.net_annual_impact

    assert store.delete_session(session_id)
    with pytest.raises(SessionNotFoundError):
        store.get_session(session_id)
