"""Agent builder questions and call-flow generation prompt (frozen)."""

from types import MappingProxyType

from voicespec.config import BuilderStep

BUILD_COMPLETE_MESSAGE = "Agent build is complete."

STEP_QUESTIONS: MappingProxyType = MappingProxyType(
    {
        BuilderStep.COLLECT_BUSINESS_TYPE: (
            "What is the business type or industry for this agent? "
            "(e.g. banking, travel, healthcare)"
        ),
        BuilderStep.COLLECT_AGENT_ROLE: (
            "What is the agent's role or job title? "
            "(e.g. loan advisor, travel consultant)"
        ),
        BuilderStep.COLLECT_OBJECTIVE: (
            "What is the primary objective of this agent in one sentence?"
        ),
        BuilderStep.COLLECT_TONE: (
            "What tone should the agent use? "
            "(e.g. professional and warm, concise and factual)"
        ),
        BuilderStep.COLLECT_CONSTRAINTS: (
            "List any strict constraints, one per line, or say 'none' to skip."
        ),
        BuilderStep.GENERATE_CALL_FLOW: "Generating call flow from your inputs...",
    }
)

CALL_FLOW_PROMPT_TEMPLATE = """Generate a structured call flow for:
Business type: {business_type}
Agent role: {agent_role}
Objective: {objective}
Tone: {tone}
Constraints: {constraints}

Return strict JSON only, no markdown, matching this shape:
{{
  "introduction": "string",
  "verification": "string",
  "purpose": "string",
  "information_gathering": ["string", "string", ...],
  "closing": "string"
}}"""
