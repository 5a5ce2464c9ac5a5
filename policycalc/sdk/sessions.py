"""In-memory wizard sessions.

A session holds the form answers collected so far and the latest results.
Sessions live only as long as the process that owns the store (the CLI
wizard or the MCP server); nothing is persisted.

Writes to the same session are last-write-wins.
"""

import logging
import secrets
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional, Union

from .impact import PolicyCalculator
from .schemas import FormData, PolicyResults

logger = logging.getLogger(__name__)

SESSION_ID_BYTES = 16


class SessionNotFoundError(KeyError):
    """Raised when a session id is unknown (or already ended)."""

    def __init__(self, session_id: str):
        super().__init__(session_id)
        self.session_id = session_id

    def __str__(self) -> str:
        return f"Session not found: {self.session_id}"


class FormDataNotFoundError(Exception):
    """Raised when results are requested before any form data was saved."""
    pass


def generate_session_id() -> str:
    """Random URL-safe session id."""
    return secrets.token_urlsafe(SESSION_ID_BYTES)


@dataclass
class Session:
    session_id: str
    form_data: Optional[FormData] = None
    results: Optional[PolicyResults] = None
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        """JSON-friendly view (camelCase form data and results)."""
        return {
            "session_id": self.session_id,
            "form_data": self.form_data.to_json_dict() if self.form_data else None,
            "results": self.results.to_json_dict() if self.results else None,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


class MemorySessionStore:
    """Session map owned by a single process."""

    def __init__(self):
        self._sessions: dict[str, Session] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def create_session(self) -> Session:
        session_id = generate_session_id()
        while session_id in self._sessions:
            session_id = generate_session_id()
        session = Session(session_id=session_id)
        self._sessions[session_id] = session
        logger.debug(f"Created session {session_id}")
        return session

    def get_session(self, session_id: str) -> Session:
        """Look up a session.

        Raises:
            SessionNotFoundError: If the id is unknown
        """
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def update_form_data(
        self,
        session_id: str,
        form_data: Union[FormData, Mapping[str, Any]],
        merge: bool = True,
    ) -> Session:
        """Save form answers to a session.

        With merge=True only the fields present in `form_data` overwrite the
        stored answers, so each wizard step can submit just its own fields.
        Saved results are discarded since they no longer match the form.

        Raises:
            SessionNotFoundError: If the id is unknown
            pydantic.ValidationError: If a mapping is structurally invalid
        """
        session = self.get_session(session_id)
        if not isinstance(form_data, FormData):
            form_data = FormData.model_validate(dict(form_data))

        if merge and session.form_data is not None:
            session.form_data = session.form_data.merged(form_data)
        else:
            session.form_data = form_data

        session.results = None
        session.updated_at = datetime.now()
        return session

    def update_results(self, session_id: str, results: PolicyResults) -> Session:
        session = self.get_session(session_id)
        session.results = results
        session.updated_at = datetime.now()
        return session

    def delete_session(self, session_id: str) -> bool:
        """Drop a session. Returns True if it existed."""
        removed = self._sessions.pop(session_id, None)
        if removed is not None:
            logger.debug(f"Deleted session {session_id}")
        return removed is not None

    def calculate(self, session_id: str, calculator: PolicyCalculator) -> PolicyResults:
        """Calculate and store results for a session's form data.

        Raises:
            SessionNotFoundError: If the id is unknown
            FormDataNotFoundError: If no form data has been saved yet
        """
        session = self.get_session(session_id)
        if session.form_data is None:
            raise FormDataNotFoundError(f"No form data saved for session {session_id}")

        results = calculator.calculate(session.form_data)
        self.update_results(session_id, results)
        return results
