"""Call-flow expansion via a chat completion model."""

import json
import logging
import re
from collections.abc import Mapping
from typing import Any

from voicespec.builder.prompts import CALL_FLOW_PROMPT_TEMPLATE
from voicespec.builder.state import CALL_FLOW_TEXT_FIELDS, BuilderError
from voicespec.llm.client import ChatClient, ChatClientError
from voicespec.schemas import CallFlow

logger = logging.getLogger(__name__)

_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)


class CallFlowGenerationError(BuilderError):
    """Call-flow generation failed."""

    pass


class CallFlowParseError(CallFlowGenerationError):
    """Model output could not be parsed as a call-flow JSON object."""

    pass


def _as_text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def parse_call_flow_response(response: str) -> CallFlow:
    """Parse a CallFlow from raw model output.

    Tolerates prose around the JSON by taking the outermost ``{...}`` span.
    Missing or mistyped sub-fields are coerced (text -> "", list -> []),
    so partial output yields a structurally valid but incomplete CallFlow.

    Args:
        response: Raw LLM response text

    Returns:
        Sanitized CallFlow

    Raises:
        CallFlowParseError: If no JSON object can be parsed
    """
    text = (response or "").strip()
    match = _JSON_OBJECT.search(text)
    json_text = match.group(0) if match else text

    try:
        parsed = json.loads(json_text)
    except json.JSONDecodeError as e:
        raise CallFlowParseError(f"Failed to parse call flow response as JSON: {e}") from e

    if not isinstance(parsed, Mapping):
        raise CallFlowParseError(
            f"Call flow response must be a JSON object, got {type(parsed).__name__}"
        )

    questions = parsed.get("information_gathering")
    return CallFlow(
        introduction=_as_text(parsed.get("introduction")),
        verification=_as_text(parsed.get("verification")),
        purpose=_as_text(parsed.get("purpose")),
        information_gathering=(
            [str(q) for q in questions] if isinstance(questions, list) else []
        ),
        closing=_as_text(parsed.get("closing")),
    )


def build_call_flow_prompt(spec_fields: Mapping[str, Any]) -> str:
    """Render the call-flow generation prompt from the collected fields."""
    constraints = spec_fields.get("constraints") or []
    return CALL_FLOW_PROMPT_TEMPLATE.format(
        business_type=spec_fields.get("business_type", ""),
        agent_role=spec_fields.get("agent_role", ""),
        objective=spec_fields.get("objective", ""),
        tone=spec_fields.get("tone", ""),
        constraints="; ".join(constraints),
    )


async def generate_call_flow(
    spec_fields: Mapping[str, Any],
    client: ChatClient,
) -> CallFlow:
    """Expand the collected AgentSpec fields into a call flow.

    This is the builder's only non-deterministic step. The caller decides
    what to persist; nothing is written here.

    Args:
        spec_fields: business_type, agent_role, objective, tone, constraints
        client: Chat completion client

    Returns:
        Sanitized CallFlow

    Raises:
        CallFlowGenerationError: If the LLM call fails
        CallFlowParseError: If the response is not a JSON object
    """
    messages = [{"role": "user", "content": build_call_flow_prompt(spec_fields)}]

    try:
        llm_response = await client.call(messages)
    except ChatClientError as e:
        raise CallFlowGenerationError(f"Call flow LLM call failed: {e}") from e

    call_flow = parse_call_flow_response(llm_response.content)

    blank = [
        name
        for name in CALL_FLOW_TEXT_FIELDS
        if not getattr(call_flow, name).strip()
    ]
    if blank:
        logger.warning("Call flow generated with blank sections: %s", ", ".join(blank))

    return call_flow
