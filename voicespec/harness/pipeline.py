"""Prompt harness pipeline: use case -> capabilities -> failures -> layers -> prompt."""

import logging
from typing import Optional

from voicespec.harness.capabilities import extract_capabilities
from voicespec.harness.failures import map_failures, map_layers
from voicespec.harness.topology import build_prompt, compile_prompt
from voicespec.schemas import HarnessResult, PromptTrace

logger = logging.getLogger(__name__)


def run_harness(use_case: Optional[str]) -> HarnessResult:
    """Compile a defensive voice-agent prompt from a use case description.

    Total over its input: an empty or unrecognised use case still yields
    the minimal prefix/suffix prompt.

    Args:
        use_case: Free-text description of what the agent must do

    Returns:
        HarnessResult with the system prompt and the decision trace
    """
    capabilities = extract_capabilities(use_case)
    failures = map_failures(capabilities)
    layers = map_layers(failures)
    blocks = build_prompt(capabilities, failures)

    logger.debug(
        "Harness capabilities=%s failures=%s blocks=%d",
        capabilities.model_dump(mode="json"),
        failures.model_dump(mode="json"),
        len(blocks),
    )

    return HarnessResult(
        system_prompt=compile_prompt(blocks),
        trace=PromptTrace(
            capabilities=capabilities,
            failures=failures,
            layers=layers,
            topology_blocks_count=len(blocks),
        ),
    )
