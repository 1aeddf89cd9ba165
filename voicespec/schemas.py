"""Data structures for voicespec."""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from voicespec.config import (
    BuilderStatus,
    BuilderStep,
    CaptureMode,
    FailureKind,
    NoiseTolerance,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CallFlow(BaseModel):
    """Scripted five-part conversation structure."""

    introduction: str
    verification: str
    purpose: str
    information_gathering: list[str] = Field(default_factory=list)
    closing: str


class AgentSpec(BaseModel):
    """Structured description of a voice agent."""

    business_type: str
    agent_role: str
    objective: str
    tone: str
    constraints: list[str] = Field(
        default_factory=list,
        description="Hard rules; an empty list means no constraints",
    )
    call_flow: CallFlow


class MemoryContext(BaseModel):
    """Prior-conversation context injected into a compiled prompt.

    Only ``summary`` is rendered; extra keys are carried along untouched.
    """

    model_config = ConfigDict(extra="allow")

    summary: Optional[str] = None


class BuilderState(BaseModel):
    """Interview state driving the agent builder."""

    current_step: BuilderStep = BuilderStep.COLLECT_BUSINESS_TYPE
    collected_data: dict[str, Any] = Field(
        default_factory=dict,
        description="JSON-shaped partial AgentSpec accumulated from answers",
    )
    status: BuilderStatus = BuilderStatus.ACTIVE


class BuilderSession(BaseModel):
    """Persisted builder session (one row per session)."""

    id: str
    user_id: Optional[str] = None
    state: BuilderState = Field(default_factory=BuilderState)
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class AgentRecord(BaseModel):
    """Persisted agent created from a completed AgentSpec."""

    id: str
    name: str = Field(max_length=255)
    description: Optional[str] = None
    spec: AgentSpec
    version: int = 1
    created_at: datetime = Field(default_factory=_utcnow)


class BuilderReply(BaseModel):
    """Response of the builder entry point."""

    session_id: str
    state: BuilderState
    question: str
    agent_id: Optional[str] = None


class Capabilities(BaseModel):
    """Capabilities a use case demands of the voice agent."""

    capture_mode: CaptureMode = CaptureMode.SEMANTIC
    noise_tolerance: NoiseTolerance = NoiseTolerance.LOW
    execution_dependency: bool = False
    confirmation_required: bool = False
    pronunciation_required: bool = False
    memory_required: bool = False


class Failures(BaseModel):
    """Failure modes implied by a set of capabilities."""

    asr_drift: bool = False
    semantic_normalization: bool = False
    hallucinated_completion: bool = False
    tool_schema_mismatch: bool = False
    phonetic_ambiguity: bool = False


class Layers(BaseModel):
    """Triggered failure kinds, bucketed by voice pipeline layer."""

    asr: list[FailureKind] = Field(default_factory=list)
    llm: list[FailureKind] = Field(default_factory=list)
    router: list[FailureKind] = Field(default_factory=list)
    tts: list[FailureKind] = Field(default_factory=list)


class PromptTrace(BaseModel):
    """Decision trace returned alongside a harness-compiled prompt."""

    capabilities: Capabilities
    failures: Failures
    layers: Layers
    topology_blocks_count: int = Field(ge=0)


class HarnessResult(BaseModel):
    """Result of running a use case through the prompt harness."""

    system_prompt: str
    trace: PromptTrace


class BrainTurn(BaseModel):
    """One model reply to a caller, with the system prompt that produced it."""

    reply: str
    system_prompt: str
