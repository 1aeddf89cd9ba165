"""Builder configuration and enums."""

import os
from enum import Enum
from types import MappingProxyType
from typing import Optional

from pydantic import BaseModel, Field, model_validator

OPENAI_CHAT_COMPLETIONS_URL = "https://api.openai.com/v1/chat/completions"


class BuilderStep(str, Enum):
    """Agent builder interview steps, in order."""

    COLLECT_BUSINESS_TYPE = "collect_business_type"
    COLLECT_AGENT_ROLE = "collect_agent_role"
    COLLECT_OBJECTIVE = "collect_objective"
    COLLECT_TONE = "collect_tone"
    COLLECT_CONSTRAINTS = "collect_constraints"
    GENERATE_CALL_FLOW = "generate_call_flow"
    COMPLETE = "complete"


class BuilderStatus(str, Enum):
    """Lifecycle status of a builder session."""

    ACTIVE = "active"
    COMPLETED = "completed"


class AgentSpecField(str, Enum):
    """AgentSpec fields collected by the interview, in collection order."""

    BUSINESS_TYPE = "business_type"
    AGENT_ROLE = "agent_role"
    OBJECTIVE = "objective"
    TONE = "tone"
    CONSTRAINTS = "constraints"


# Step -> field it collects. Steps not listed collect nothing from the user.
STEP_FIELDS: MappingProxyType = MappingProxyType(
    {
        BuilderStep.COLLECT_BUSINESS_TYPE: AgentSpecField.BUSINESS_TYPE,
        BuilderStep.COLLECT_AGENT_ROLE: AgentSpecField.AGENT_ROLE,
        BuilderStep.COLLECT_OBJECTIVE: AgentSpecField.OBJECTIVE,
        BuilderStep.COLLECT_TONE: AgentSpecField.TONE,
        BuilderStep.COLLECT_CONSTRAINTS: AgentSpecField.CONSTRAINTS,
    }
)


class CaptureMode(str, Enum):
    """How the agent must capture what the caller says."""

    SEMANTIC = "semantic"
    SYMBOLIC = "symbolic"


class NoiseTolerance(str, Enum):
    """Expected acoustic noise on the call."""

    LOW = "low"
    HIGH = "high"


class FailureKind(str, Enum):
    """Voice pipeline failure modes a prompt topology must defend against."""

    ASR_DRIFT = "asr_drift"
    SEMANTIC_NORMALIZATION = "semantic_normalization"
    HALLUCINATED_COMPLETION = "hallucinated_completion"
    TOOL_SCHEMA_MISMATCH = "tool_schema_mismatch"
    PHONETIC_AMBIGUITY = "phonetic_ambiguity"


class TopologyBlockId(str, Enum):
    """Identifiers of the fixed instruction blocks."""

    SYMBOL_CAPTURE = "SYMBOL_CAPTURE"
    PHONETIC_RULE = "PHONETIC_RULE"
    EXECUTION_GATE = "EXECUTION_GATE"
    NOISE_RECOVERY = "NOISE_RECOVERY"
    READBACK = "READBACK"
    TOOL_ALIGNMENT = "TOOL_ALIGNMENT"


class BuilderConfigError(Exception):
    """Builder configuration is missing something an operation needs."""

    pass


class BuilderConfig(BaseModel):
    """Configuration for the agent builder's call-flow expansion."""

    openai_api_key: Optional[str] = None
    api_url: str = OPENAI_CHAT_COMPLETIONS_URL
    call_flow_model: str = "gpt-4o-mini"
    temperature: float = Field(default=0.3, ge=0.0, le=2.0)
    request_timeout: float = Field(
        default=60.0,
        gt=0,
        description="Per-request timeout in seconds for the chat completion call",
    )
    max_retries: int = Field(
        default=3,
        ge=1,
        description="Attempts made on rate limits, server errors and connection failures",
    )

    @model_validator(mode="after")
    def resolve_api_key(self) -> "BuilderConfig":
        """Resolve API key from explicit value or OPENAI_API_KEY environment variable.

        A missing key is allowed here; only call-flow generation needs it.
        """
        if self.openai_api_key and self.openai_api_key.strip():
            return self
        env_key = os.environ.get("OPENAI_API_KEY")
        if env_key and env_key.strip():
            object.__setattr__(self, "openai_api_key", env_key)
        else:
            object.__setattr__(self, "openai_api_key", None)
        return self

    def require_api_key(self) -> str:
        """Return the API key or raise BuilderConfigError."""
        if not self.openai_api_key:
            raise BuilderConfigError(
                "openai_api_key must be provided or OPENAI_API_KEY environment variable must be set"
            )
        return self.openai_api_key
