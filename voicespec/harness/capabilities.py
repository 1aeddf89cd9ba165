"""Capability extraction: free-text use case -> Capabilities."""

from typing import Iterable, Optional

from voicespec.config import CaptureMode, NoiseTolerance
from voicespec.harness.keywords import (
    CONFIRMATION_KEYWORDS,
    EXECUTION_KEYWORDS,
    MEMORY_KEYWORDS,
    NOISY_KEYWORDS,
    PRONUNCIATION_KEYWORDS,
    SYMBOLIC_KEYWORDS,
)
from voicespec.schemas import Capabilities


def contains_any(text: str, keywords: Iterable[str]) -> bool:
    """Check whether any keyword occurs as a substring of text."""
    return any(keyword in text for keyword in keywords)


def extract_capabilities(use_case: Optional[str]) -> Capabilities:
    """Classify a use case description into capabilities.

    Plain substring membership over the lower-cased text; every flag is
    derived independently. Empty input yields the defaults (semantic
    capture, low noise, all flags off).

    Args:
        use_case: Natural language description of the agent's job

    Returns:
        Capabilities for the use case
    """
    normalized = (use_case or "").strip().lower()

    capture_mode = (
        CaptureMode.SYMBOLIC
        if contains_any(normalized, SYMBOLIC_KEYWORDS)
        else CaptureMode.SEMANTIC
    )
    noise_tolerance = (
        NoiseTolerance.HIGH
        if contains_any(normalized, NOISY_KEYWORDS)
        else NoiseTolerance.LOW
    )

    return Capabilities(
        capture_mode=capture_mode,
        noise_tolerance=noise_tolerance,
        execution_dependency=contains_any(normalized, EXECUTION_KEYWORDS),
        confirmation_required=contains_any(normalized, CONFIRMATION_KEYWORDS),
        pronunciation_required=(
            capture_mode == CaptureMode.SYMBOLIC
            or contains_any(normalized, PRONUNCIATION_KEYWORDS)
        ),
        memory_required=contains_any(normalized, MEMORY_KEYWORDS),
    )
