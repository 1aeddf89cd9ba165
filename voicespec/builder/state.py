"""Deterministic builder state machine.

The next step is always derived from the collected data, never from an LLM
and never from the stored step pointer alone. If data is edited out of band
the effective step resynchronises to the first missing field.
"""

from collections.abc import Mapping
from typing import Any, Optional

from voicespec.builder.prompts import BUILD_COMPLETE_MESSAGE, STEP_QUESTIONS
from voicespec.config import AgentSpecField, BuilderStatus, BuilderStep, STEP_FIELDS
from voicespec.schemas import BuilderState

NO_CONSTRAINTS_ANSWERS = frozenset({"none", "no", "n/a"})

CALL_FLOW_TEXT_FIELDS = ("introduction", "verification", "purpose", "closing")

SCALAR_FIELDS = (
    AgentSpecField.BUSINESS_TYPE,
    AgentSpecField.AGENT_ROLE,
    AgentSpecField.OBJECTIVE,
    AgentSpecField.TONE,
)

_FIELD_STEPS = {field: step for step, field in STEP_FIELDS.items()}


class BuilderError(Exception):
    """Error during agent building."""

    pass


def _is_filled(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _call_flow_defined(call_flow: Any) -> bool:
    """All five sub-fields present; strings may be empty."""
    if not isinstance(call_flow, Mapping):
        return False
    return all(
        isinstance(call_flow.get(key), str) for key in CALL_FLOW_TEXT_FIELDS
    ) and isinstance(call_flow.get("information_gathering"), list)


def _call_flow_populated(call_flow: Any) -> bool:
    """All five sub-fields present and every text sub-field non-blank."""
    return _call_flow_defined(call_flow) and all(
        _is_filled(call_flow[key]) for key in CALL_FLOW_TEXT_FIELDS
    )


def _first_missing_step(data: Mapping[str, Any]) -> Optional[BuilderStep]:
    for field in SCALAR_FIELDS:
        if not _is_filled(data.get(field.value)):
            return _FIELD_STEPS[field]
    # An empty list is an answer ("no constraints"); absence is not
    if not isinstance(data.get(AgentSpecField.CONSTRAINTS.value), list):
        return BuilderStep.COLLECT_CONSTRAINTS
    return None


def get_effective_step(collected_data: Optional[Mapping[str, Any]]) -> BuilderStep:
    """Derive the current step from collected data.

    Returns the collect step of the first missing field; once all fields
    are answered, COMPLETE if the call flow is populated, otherwise
    GENERATE_CALL_FLOW.
    """
    data = collected_data or {}
    missing = _first_missing_step(data)
    if missing is not None:
        return missing
    if _call_flow_populated(data.get("call_flow")):
        return BuilderStep.COMPLETE
    return BuilderStep.GENERATE_CALL_FLOW


def is_spec_complete(collected_data: Optional[Mapping[str, Any]]) -> bool:
    """Check whether collected data forms a complete AgentSpec.

    Scalar fields must be non-blank, constraints a list, and the call flow
    must define all five sub-fields (text may be empty).
    """
    data = collected_data or {}
    return _first_missing_step(data) is None and _call_flow_defined(
        data.get("call_flow")
    )


def get_next_builder_question(state: BuilderState) -> str:
    """Return the question for the first incomplete field.

    Rechecks the collected data instead of trusting state.current_step.
    """
    if (
        state.status == BuilderStatus.COMPLETED
        or state.current_step == BuilderStep.COMPLETE
    ):
        return BUILD_COMPLETE_MESSAGE

    step = get_effective_step(state.collected_data)
    if step == BuilderStep.COMPLETE:
        return BUILD_COMPLETE_MESSAGE
    return STEP_QUESTIONS[step]


def parse_constraints_input(text: str) -> list[str]:
    """Parse a constraints answer: one rule per line, or an explicit 'none'.

    Examples:
        "none" -> []
        "- Be polite\\n* Stay concise" -> ["Be polite", "Stay concise"]
    """
    if text.strip().lower() in NO_CONSTRAINTS_ANSWERS:
        return []

    constraints = []
    for line in text.replace("\r", "\n").split("\n"):
        line = line.strip()
        if line[:1] in ("-", "*"):
            line = line[1:].strip()
        if line:
            constraints.append(line)
    return constraints


def apply_answer(
    collected_data: Mapping[str, Any],
    step: BuilderStep,
    message: str,
) -> dict[str, Any]:
    """Store an answer in the field collected by step.

    Returns a new dict; the input mapping is not modified. Blank messages
    and steps that collect nothing leave the data as it was.
    """
    updated = dict(collected_data)
    field = STEP_FIELDS.get(step)
    if field is None or not message.strip():
        return updated

    if field == AgentSpecField.CONSTRAINTS:
        updated[field.value] = parse_constraints_input(message)
    else:
        updated[field.value] = message.strip()
    return updated
