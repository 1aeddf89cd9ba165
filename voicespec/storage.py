"""Session and agent persistence interfaces with in-memory implementations."""

import uuid
from datetime import datetime, timezone
from typing import Optional, Protocol

from voicespec.config import BuilderStatus
from voicespec.schemas import AgentRecord, AgentSpec, BuilderSession

MAX_AGENT_NAME_LEN = 255


class SessionStore(Protocol):
    """Protocol for builder session persistence (one record per session)."""

    def get(self, session_id: str) -> Optional[BuilderSession]:
        """Load a session by id, or None if unknown."""
        ...

    def get_active_for_user(self, user_id: str) -> Optional[BuilderSession]:
        """Most recently updated active session for a user, or None."""
        ...

    def save(self, session: BuilderSession) -> BuilderSession:
        """Insert or replace a session and return the stored copy."""
        ...


class AgentStore(Protocol):
    """Protocol for persisting agents built from completed specs.

    create() runs after the completed session has been saved, at most once
    per session.
    """

    def create(self, spec: AgentSpec) -> AgentRecord:
        """Persist a new agent for spec and return its record."""
        ...

    def get(self, agent_id: str) -> Optional[AgentRecord]:
        """Load an agent by id, or None if unknown."""
        ...


def agent_name(spec: AgentSpec) -> str:
    """Display name for an agent: "{business_type} - {agent_role}", capped at 255 chars."""
    return f"{spec.business_type} - {spec.agent_role}"[:MAX_AGENT_NAME_LEN]


class InMemorySessionStore:
    """Dict-backed SessionStore. Stores deep copies so callers cannot mutate stored rows."""

    def __init__(self):
        self._sessions: dict[str, BuilderSession] = {}

    def get(self, session_id: str) -> Optional[BuilderSession]:
        session = self._sessions.get(session_id)
        return session.model_copy(deep=True) if session else None

    def get_active_for_user(self, user_id: str) -> Optional[BuilderSession]:
        candidates = [
            s
            for s in self._sessions.values()
            if s.user_id == user_id and s.state.status == BuilderStatus.ACTIVE
        ]
        if not candidates:
            return None
        latest = max(candidates, key=lambda s: s.updated_at)
        return latest.model_copy(deep=True)

    def save(self, session: BuilderSession) -> BuilderSession:
        stored = session.model_copy(
            deep=True,
            update={"updated_at": datetime.now(timezone.utc)},
        )
        self._sessions[stored.id] = stored
        return stored.model_copy(deep=True)


class InMemoryAgentStore:
    """Dict-backed AgentStore."""

    def __init__(self):
        self._agents: dict[str, AgentRecord] = {}

    def create(self, spec: AgentSpec) -> AgentRecord:
        record = AgentRecord(
            id=str(uuid.uuid4()),
            name=agent_name(spec),
            description=spec.objective or None,
            spec=spec.model_copy(deep=True),
            version=1,
        )
        self._agents[record.id] = record
        return record.model_copy(deep=True)

    def get(self, agent_id: str) -> Optional[AgentRecord]:
        record = self._agents.get(agent_id)
        return record.model_copy(deep=True) if record else None
