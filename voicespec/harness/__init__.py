"""Prompt harness: use case -> capabilities -> failures -> layers -> topology -> system prompt."""

from voicespec.harness.blocks import TOPOLOGY_BLOCKS
from voicespec.harness.capabilities import extract_capabilities
from voicespec.harness.failures import map_failures, map_layers
from voicespec.harness.pipeline import run_harness
from voicespec.harness.topology import build_prompt, compile_prompt, select_blocks

__all__ = [
    "extract_capabilities",
    "map_failures",
    "map_layers",
    "select_blocks",
    "build_prompt",
    "compile_prompt",
    "run_harness",
    "TOPOLOGY_BLOCKS",
]
