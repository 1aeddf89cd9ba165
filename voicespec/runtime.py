"""Guarded system prompts for live voice calls, and the model turn that uses them."""

import json
import logging
from collections.abc import Mapping
from typing import Any, Optional

from pydantic import ValidationError

from voicespec.compiler import compile_system_prompt, ensure_no_role_acknowledgment
from voicespec.harness import run_harness
from voicespec.llm.client import ChatClient
from voicespec.schemas import AgentSpec, BrainTurn, MemoryContext

logger = logging.getLogger(__name__)

FALLBACK_SYSTEM_PROMPT = (
    "You are a logistics assistant. Capture vehicle IDs from the user and call "
    "the dispatch_vehicle tool when a vehicle ID is provided. Confirm alphanumeric "
    "IDs by repeating them back."
)

BRAIN_FALLBACK_REPLY = "I'm sorry, I couldn't process that."


def _memory_from_summary(summary: Any) -> Optional[MemoryContext]:
    if summary is None:
        return None
    if isinstance(summary, (Mapping, list)):
        return MemoryContext(summary=json.dumps(summary, indent=2))
    return MemoryContext(summary=str(summary))


def resolve_runtime_prompt(
    spec_data: Optional[Mapping[str, Any]],
    memory_summary: Any = None,
) -> Optional[str]:
    """Compile and guard the prompt for a stored agent spec.

    Args:
        spec_data: Stored spec JSON for the agent
        memory_summary: Latest conversation summary for the caller, if any

    Returns:
        Guarded system prompt, or None if the stored spec is unusable
    """
    if not spec_data or not spec_data.get("business_type") or not spec_data.get("call_flow"):
        return None

    try:
        spec = AgentSpec.model_validate(spec_data)
    except ValidationError as e:
        logger.warning("Stored agent spec failed validation: %s", e)
        return None

    compiled = compile_system_prompt(spec, _memory_from_summary(memory_summary))
    return ensure_no_role_acknowledgment(compiled)


def resolve_use_case_prompt(use_case: Optional[str]) -> str:
    """Harness prompt for a use case, guarded; falls back to a default prompt."""
    system_prompt = run_harness(use_case).system_prompt.strip()
    return ensure_no_role_acknowledgment(system_prompt or FALLBACK_SYSTEM_PROMPT)


async def run_brain_turn(
    spec_data: Optional[Mapping[str, Any]],
    transcript: str,
    client: ChatClient,
    memory_summary: Any = None,
) -> Optional[BrainTurn]:
    """Answer one caller utterance with the agent's guarded prompt.

    Args:
        spec_data: Stored spec JSON for the agent
        transcript: What the caller said
        client: Chat client used for the reply
        memory_summary: Latest conversation summary for the caller, if any

    Returns:
        BrainTurn with the reply and the system prompt sent, or None if the
        stored spec is unusable

    Raises:
        ChatClientError: If the chat completion fails
    """
    system_prompt = resolve_runtime_prompt(spec_data, memory_summary)
    if system_prompt is None:
        return None

    messages = [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": transcript},
    ]
    response = await client.call(messages)
    if not response.content:
        logger.warning("Empty brain reply; using fallback")

    return BrainTurn(
        reply=response.content or BRAIN_FALLBACK_REPLY,
        system_prompt=system_prompt,
    )
