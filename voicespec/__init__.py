"""voicespec: deterministic system-prompt compilation for voice agents.

Public exports:
- compile_system_prompt / ensure_no_role_acknowledgment: AgentSpec -> guarded prompt
- run_harness: use case -> defensive topology prompt + trace
- AgentBuilder: interview that produces a complete AgentSpec
- run_brain_turn: one guarded model reply for a live call
- BuilderConfig: configuration for call-flow expansion
"""

from voicespec.builder import AgentBuilder
from voicespec.compiler import (
    compile_system_prompt,
    ensure_no_role_acknowledgment,
    extract_greeting_from_compiled_prompt,
)
from voicespec.config import BuilderConfig
from voicespec.harness import run_harness
from voicespec.runtime import run_brain_turn
from voicespec.schemas import AgentSpec, CallFlow, HarnessResult, MemoryContext

__all__ = [
    "AgentBuilder",
    "AgentSpec",
    "BuilderConfig",
    "CallFlow",
    "HarnessResult",
    "MemoryContext",
    "compile_system_prompt",
    "ensure_no_role_acknowledgment",
    "extract_greeting_from_compiled_prompt",
    "run_brain_turn",
    "run_harness",
]
