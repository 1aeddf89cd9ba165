"""Agent builder: deterministic interview that fills an AgentSpec."""

from voicespec.builder.call_flow import (
    CallFlowGenerationError,
    CallFlowParseError,
    generate_call_flow,
    parse_call_flow_response,
)
from voicespec.builder.service import AgentBuilder, SessionNotFoundError
from voicespec.builder.state import (
    BuilderError,
    apply_answer,
    get_effective_step,
    get_next_builder_question,
    is_spec_complete,
    parse_constraints_input,
)

__all__ = [
    "AgentBuilder",
    "BuilderError",
    "SessionNotFoundError",
    "CallFlowGenerationError",
    "CallFlowParseError",
    "apply_answer",
    "generate_call_flow",
    "get_effective_step",
    "get_next_builder_question",
    "is_spec_complete",
    "parse_call_flow_response",
    "parse_constraints_input",
]
