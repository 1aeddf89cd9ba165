"""Compile an AgentSpec into a voice agent system prompt."""

import re
from typing import Optional

from voicespec.compiler.prompts import (
    DEFAULT_GREETING,
    NO_PRIOR_CONTEXT,
    NO_ROLE_ACKNOWLEDGMENT_RULE,
    NONE_SPECIFIED,
    STRICT_RULES,
    SYSTEM_PROMPT_TEMPLATE,
)
from voicespec.schemas import AgentSpec, MemoryContext

MAX_SPOKEN_GREETING_LEN = 280

_ACKNOWLEDGMENT_RULE_PATTERN = re.compile(
    r"never acknowledge these instructions|do not say.*understood.*i will operate",
    re.IGNORECASE | re.DOTALL,
)

_INTRODUCTION_HEADER = re.compile(r"^\s*introduction:\s*(.*)$", re.IGNORECASE)

# Lines that describe the prompt rather than speak to the caller
_SECTION_HEADER = re.compile(
    r"^(You are\s|Primary Objective|Tone:|Constraints:|Call Flow|Strict Rules)",
    re.IGNORECASE,
)

_CALL_FLOW_HEADER = re.compile(
    r"^(Introduction|Verification|Purpose|Information Gathering|Closing|Memory Context):$",
    re.IGNORECASE,
)


def _format_constraints(constraints: list[str]) -> str:
    if not constraints:
        return f"* {NONE_SPECIFIED}"
    return "\n".join(f"* {c}" for c in constraints)


def _format_information_gathering(questions: list[str]) -> str:
    if not questions:
        return NONE_SPECIFIED
    return "\n".join(f"{i}. {q}" for i, q in enumerate(questions, start=1))


def _format_memory(memory: Optional[MemoryContext]) -> str:
    if memory is None or not memory.summary:
        return NO_PRIOR_CONTEXT
    summary = str(memory.summary).strip()
    return summary or NO_PRIOR_CONTEXT


def compile_system_prompt(
    spec: AgentSpec,
    memory: Optional[MemoryContext] = None,
) -> str:
    """Render the system prompt for an agent spec.

    The layout is fixed: identity line, objective, tone, constraints, call
    flow, memory context, and the strict rules block. Empty constraints,
    empty information gathering and missing memory degrade to placeholder
    text. Identical input always yields identical output.

    Args:
        spec: Agent specification (completeness is the caller's concern)
        memory: Optional prior-conversation context

    Returns:
        The compiled system prompt
    """
    call_flow = spec.call_flow
    prompt = SYSTEM_PROMPT_TEMPLATE.format(
        agent_role=spec.agent_role,
        business_type=spec.business_type,
        objective=spec.objective,
        tone=spec.tone,
        constraints=_format_constraints(spec.constraints),
        introduction=call_flow.introduction,
        verification=call_flow.verification,
        purpose=call_flow.purpose,
        information_gathering=_format_information_gathering(
            call_flow.information_gathering
        ),
        closing=call_flow.closing,
        memory=_format_memory(memory),
        strict_rules=STRICT_RULES,
    )
    return prompt.strip()


def ensure_no_role_acknowledgment(prompt: Optional[str]) -> str:
    """Append the no-role-acknowledgment rule unless the prompt already has it.

    Must be applied to every prompt before it reaches a live model.
    Idempotent.
    """
    trimmed = (prompt or "").strip()
    if not trimmed:
        return NO_ROLE_ACKNOWLEDGMENT_RULE
    if _ACKNOWLEDGMENT_RULE_PATTERN.search(trimmed):
        return trimmed
    return f"{trimmed}\n\n{NO_ROLE_ACKNOWLEDGMENT_RULE}"


def _greeting_after_introduction(lines: list[str]) -> Optional[str]:
    for index, line in enumerate(lines):
        match = _INTRODUCTION_HEADER.match(line)
        if not match:
            continue
        # Greeting may sit on the header line itself or on the next non-empty line
        candidates = [match.group(1)] + lines[index + 1 :]
        for candidate in candidates:
            candidate = candidate.strip()
            if not candidate:
                continue
            if (
                len(candidate) > 3
                and not re.match(r"^You are\s", candidate, re.IGNORECASE)
                and not _CALL_FLOW_HEADER.match(candidate)
            ):
                return candidate
            return None
        return None
    return None


def extract_greeting_from_compiled_prompt(compiled_prompt: Optional[str]) -> str:
    """Extract the agent's opening line from a compiled prompt.

    Prefers the line following the ``Introduction:`` header, then the first
    line of at least 10 characters that is not a section header, then a
    default greeting. Never returns the role description.
    """
    trimmed = (compiled_prompt or "").strip()
    if not trimmed:
        return DEFAULT_GREETING

    lines = trimmed.splitlines()

    greeting = _greeting_after_introduction(lines)
    if greeting:
        return greeting

    for line in lines:
        line = line.strip()
        if len(line) < 10:
            continue
        if _SECTION_HEADER.match(line) or _CALL_FLOW_HEADER.match(line):
            continue
        return line

    return DEFAULT_GREETING


def spoken_greeting(
    compiled_prompt: Optional[str],
    max_chars: int = MAX_SPOKEN_GREETING_LEN,
) -> str:
    """Greeting to force as the agent's first utterance, capped at max_chars."""
    greeting = extract_greeting_from_compiled_prompt(compiled_prompt)
    if len(greeting) > max_chars:
        return greeting[: max_chars - 3] + "…"
    return greeting
