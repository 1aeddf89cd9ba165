"""Agent builder public adapter."""

import asyncio
import logging
import uuid
from typing import Optional

from voicespec.builder.call_flow import generate_call_flow
from voicespec.builder.prompts import BUILD_COMPLETE_MESSAGE
from voicespec.builder.state import (
    BuilderError,
    apply_answer,
    get_effective_step,
    get_next_builder_question,
)
from voicespec.config import BuilderConfig, BuilderStatus, BuilderStep
from voicespec.llm.client import ChatClient
from voicespec.schemas import AgentSpec, BuilderReply, BuilderSession, BuilderState
from voicespec.storage import AgentStore, SessionStore

logger = logging.getLogger(__name__)


class SessionNotFoundError(BuilderError):
    """No builder session with the requested id."""

    pass


def _reply(session: BuilderSession, agent_id: Optional[str] = None) -> BuilderReply:
    return BuilderReply(
        session_id=session.id,
        state=session.state,
        question=get_next_builder_question(session.state),
        agent_id=agent_id,
    )


class AgentBuilder:
    """Interview that fills an AgentSpec one answer at a time.

    The step is always recomputed from the collected data. Once every field
    is answered the call flow is expanded with a single LLM call and the
    finished spec is persisted as an agent.

    Usage:
        from voicespec import AgentBuilder, BuilderConfig
        from voicespec.storage import InMemoryAgentStore, InMemorySessionStore

        builder = AgentBuilder(
            config=BuilderConfig(openai_api_key="sk-..."),
            sessions=InMemorySessionStore(),
            agents=InMemoryAgentStore(),
        )
        reply = builder.start()
        reply = await builder.submit(reply.session_id, "banking")
    """

    def __init__(
        self,
        config: BuilderConfig,
        sessions: SessionStore,
        agents: AgentStore,
        client: Optional[ChatClient] = None,
    ):
        """Initialize the builder.

        Args:
            config: BuilderConfig with API key and model settings
            sessions: Store for builder sessions
            agents: Store for completed agents
            client: Chat client for call-flow expansion; built from config if None
        """
        self._config = config
        self._sessions = sessions
        self._agents = agents
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> ChatClient:
        if self._client is None:
            self._config.require_api_key()
            self._client = ChatClient(self._config)
        return self._client

    def _load(self, session_id: str) -> BuilderSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(f"Builder session not found: {session_id}")
        return session

    def start(self, user_id: Optional[str] = None) -> BuilderReply:
        """Create a fresh session at the first step."""
        session = self._sessions.save(
            BuilderSession(
                id=str(uuid.uuid4()),
                user_id=user_id,
                state=BuilderState(),
            )
        )
        return _reply(session)

    def get(self, session_id: str) -> BuilderReply:
        """Current state and next question for a session."""
        return _reply(self._load(session_id))

    def get_active(self, user_id: str) -> Optional[BuilderReply]:
        """Current state of the user's active session, if any."""
        session = self._sessions.get_active_for_user(user_id)
        return _reply(session) if session else None

    async def submit(self, session_id: str, message: str) -> BuilderReply:
        """Apply an answer and advance the interview.

        Nothing is saved if call-flow generation fails, so the step and data
        stay put and resubmitting retries the same transition.

        Args:
            session_id: Builder session id
            message: User's answer to the current question

        Returns:
            BuilderReply; agent_id is set once the agent has been created

        Raises:
            SessionNotFoundError: If the session does not exist
            BuilderConfigError: If call-flow generation needs an API key that is not set
            CallFlowGenerationError: If the call-flow LLM call or parsing fails
        """
        session = self._load(session_id)
        state = session.state

        if state.status == BuilderStatus.COMPLETED:
            return BuilderReply(
                session_id=session.id,
                state=state,
                question=BUILD_COMPLETE_MESSAGE,
            )

        step = get_effective_step(state.collected_data)
        if step != state.current_step:
            logger.warning(
                "Session %s step pointer %s out of sync with data; using %s",
                session.id,
                state.current_step.value,
                step.value,
            )

        collected = apply_answer(state.collected_data, step, message or "")
        next_step = get_effective_step(collected)

        if next_step == BuilderStep.GENERATE_CALL_FLOW:
            call_flow = await generate_call_flow(collected, self._get_client())
            collected["call_flow"] = call_flow.model_dump()
            next_step = get_effective_step(collected)
            if next_step != BuilderStep.COMPLETE:
                logger.warning(
                    "Session %s call flow incomplete; generation will rerun on next submit",
                    session.id,
                )

        status = (
            BuilderStatus.COMPLETED
            if next_step == BuilderStep.COMPLETE
            else BuilderStatus.ACTIVE
        )

        # Saved before the agent exists; completed sessions never create another.
        session = self._sessions.save(
            session.model_copy(
                update={
                    "state": BuilderState(
                        current_step=next_step,
                        collected_data=collected,
                        status=status,
                    )
                }
            )
        )

        agent_id: Optional[str] = None
        if status == BuilderStatus.COMPLETED:
            agent = self._agents.create(AgentSpec.model_validate(collected))
            agent_id = agent.id
            logger.info("Session %s completed agent %s", session.id, agent_id)

        return _reply(session, agent_id)

    def submit_sync(self, session_id: str, message: str) -> BuilderReply:
        """Synchronous wrapper for submit().

        A client the builder created itself is closed before the event loop
        ends so the next call can open a fresh one. An injected client is
        left to its owner.
        """

        async def _submit() -> BuilderReply:
            try:
                return await self.submit(session_id, message)
            finally:
                if self._owns_client and self._client is not None:
                    await self._client.aclose()

        return asyncio.run(_submit())
