"""AgentSpec prompt compiler module."""

from voicespec.compiler.spec_compiler import (
    compile_system_prompt,
    ensure_no_role_acknowledgment,
    extract_greeting_from_compiled_prompt,
    spoken_greeting,
)

__all__ = [
    "compile_system_prompt",
    "ensure_no_role_acknowledgment",
    "extract_greeting_from_compiled_prompt",
    "spoken_greeting",
]
