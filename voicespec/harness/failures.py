"""Failure and layer mapping for extracted capabilities."""

from types import MappingProxyType

from voicespec.config import CaptureMode, FailureKind, NoiseTolerance
from voicespec.schemas import Capabilities, Failures, Layers

# Failure kind -> pipeline layers it affects
FAILURE_LAYERS: MappingProxyType = MappingProxyType(
    {
        FailureKind.ASR_DRIFT: ("asr",),
        FailureKind.SEMANTIC_NORMALIZATION: ("llm",),
        FailureKind.HALLUCINATED_COMPLETION: ("llm",),
        FailureKind.TOOL_SCHEMA_MISMATCH: ("router",),
        FailureKind.PHONETIC_AMBIGUITY: ("asr", "tts"),
    }
)


def map_failures(capabilities: Capabilities) -> Failures:
    """Derive the failure modes a prompt must defend against."""
    symbolic = capabilities.capture_mode == CaptureMode.SYMBOLIC
    execution = capabilities.execution_dependency

    return Failures(
        asr_drift=capabilities.noise_tolerance == NoiseTolerance.HIGH,
        semantic_normalization=not symbolic or execution,
        hallucinated_completion=execution,
        tool_schema_mismatch=execution,
        phonetic_ambiguity=symbolic,
    )


def map_layers(failures: Failures) -> Layers:
    """Bucket triggered failures by the voice pipeline layer they affect.

    Phonetic ambiguity lands in both asr and tts.
    """
    buckets: dict[str, list[FailureKind]] = {
        "asr": [],
        "llm": [],
        "router": [],
        "tts": [],
    }
    for kind, layers in FAILURE_LAYERS.items():
        if not getattr(failures, kind.value):
            continue
        for layer in layers:
            buckets[layer].append(kind)

    return Layers(**buckets)
