"""Topology block selection and prompt compilation."""

from voicespec.config import CaptureMode, NoiseTolerance, TopologyBlockId
from voicespec.harness.blocks import PROMPT_PREFIX, PROMPT_SUFFIX, TOPOLOGY_BLOCKS
from voicespec.schemas import Capabilities, Failures


def select_blocks(
    capabilities: Capabilities,
    failures: Failures,
) -> list[TopologyBlockId]:
    """Select topology block ids in priority order, each at most once.

    Order:
    1. SYMBOL_CAPTURE, PHONETIC_RULE (symbolic capture)
    2. EXECUTION_GATE (semantic normalization failure)
    3. NOISE_RECOVERY (high noise)
    4. TOOL_ALIGNMENT (execution dependency)
    5. READBACK (confirmation required)
    """
    selected: list[TopologyBlockId] = []

    def add(block_id: TopologyBlockId) -> None:
        if block_id not in selected:
            selected.append(block_id)

    if capabilities.capture_mode == CaptureMode.SYMBOLIC:
        add(TopologyBlockId.SYMBOL_CAPTURE)
        add(TopologyBlockId.PHONETIC_RULE)

    if failures.semantic_normalization:
        add(TopologyBlockId.EXECUTION_GATE)

    if capabilities.noise_tolerance == NoiseTolerance.HIGH:
        add(TopologyBlockId.NOISE_RECOVERY)

    if capabilities.execution_dependency:
        add(TopologyBlockId.TOOL_ALIGNMENT)

    if capabilities.confirmation_required:
        add(TopologyBlockId.READBACK)

    return selected


def build_prompt(capabilities: Capabilities, failures: Failures) -> list[str]:
    """Return the trimmed text of each selected block, in selection order."""
    return [
        TOPOLOGY_BLOCKS[block_id].strip()
        for block_id in select_blocks(capabilities, failures)
    ]


def compile_prompt(selected_blocks: list[str]) -> str:
    """Join prefix, non-blank blocks and suffix with blank lines."""
    parts = [PROMPT_PREFIX]
    for block in selected_blocks:
        if block.strip():
            parts.append(block.strip())
    parts.append(PROMPT_SUFFIX)
    return "\n\n".join(parts).strip()
