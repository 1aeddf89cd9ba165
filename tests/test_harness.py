"""Tests for the prompt harness pipeline."""

import pytest

from voicespec.config import CaptureMode, FailureKind, NoiseTolerance, TopologyBlockId
from voicespec.harness import (
    TOPOLOGY_BLOCKS,
    build_prompt,
    compile_prompt,
    extract_capabilities,
    map_failures,
    map_layers,
    run_harness,
    select_blocks,
)
from voicespec.harness.blocks import PROMPT_PREFIX, PROMPT_SUFFIX, TOPOLOGY_BLOCKS
from voicespec.harness.failures import FAILURE_LAYERS
from voicespec.schemas import Capabilities, Failures


class TestExtractCapabilities:
    """Tests for capability extraction."""

    def test_dispatch_example(self):
        """Test the dispatch use case with confirmation and noise."""
        caps = extract_capabilities(
            "Dispatch a vehicle using its ID, confirm before acting, noisy environment"
        )
        assert caps.model_dump(mode="json") == {
            "capture_mode": "symbolic",
            "noise_tolerance": "high",
            "execution_dependency": True,
            "confirmation_required": True,
            "pronunciation_required": True,
            "memory_required": False,
        }

    def test_empty_input_defaults(self):
        """Test empty and whitespace input yield defaults."""
        expected = {
            "capture_mode": "semantic",
            "noise_tolerance": "low",
            "execution_dependency": False,
            "confirmation_required": False,
            "pronunciation_required": False,
            "memory_required": False,
        }
        assert extract_capabilities("").model_dump(mode="json") == expected
        assert extract_capabilities("   \n ").model_dump(mode="json") == expected
        assert extract_capabilities(None).model_dump(mode="json") == expected

    def test_case_insensitive(self):
        """Test keywords match regardless of case."""
        caps = extract_capabilities("READ THE PLATE")
        assert caps.capture_mode == CaptureMode.SYMBOLIC

    def test_pronunciation_without_symbols(self):
        """Test pronunciation keywords set the flag in semantic mode."""
        caps = extract_capabilities("Spell out the customer's surname")
        assert caps.capture_mode == CaptureMode.SEMANTIC
        assert caps.pronunciation_required is True

    def test_memory_keywords(self):
        """Test memory keywords set memory_required."""
        caps = extract_capabilities("Remember the customer's order history")
        assert caps.memory_required is True
        assert caps.noise_tolerance == NoiseTolerance.LOW

    def test_outdoor_is_noisy(self):
        """Test outdoor settings raise noise tolerance."""
        caps = extract_capabilities("Outdoor crew coordination")
        assert caps.noise_tolerance == NoiseTolerance.HIGH


class TestMapFailures:
    """Tests for failure mapping."""

    def test_semantic_without_execution(self):
        """Test semantic capture alone triggers only semantic normalization."""
        failures = map_failures(Capabilities())
        assert failures == Failures(semantic_normalization=True)

    def test_symbolic_execution_noisy(self):
        """Test symbolic capture with execution in noise triggers everything."""
        failures = map_failures(
            Capabilities(
                capture_mode=CaptureMode.SYMBOLIC,
                noise_tolerance=NoiseTolerance.HIGH,
                execution_dependency=True,
            )
        )
        assert failures == Failures(
            asr_drift=True,
            semantic_normalization=True,
            hallucinated_completion=True,
            tool_schema_mismatch=True,
            phonetic_ambiguity=True,
        )

    def test_symbolic_without_execution(self):
        """Test symbolic capture alone does not need semantic normalization."""
        failures = map_failures(Capabilities(capture_mode=CaptureMode.SYMBOLIC))
        assert failures.semantic_normalization is False
        assert failures.phonetic_ambiguity is True


class TestMapLayers:
    """Tests for layer mapping."""

    def test_tables_are_read_only(self):
        """Test the layer and block tables cannot be modified."""
        with pytest.raises(TypeError):
            FAILURE_LAYERS[FailureKind.ASR_DRIFT] = ("llm",)
        with pytest.raises(TypeError):
            TOPOLOGY_BLOCKS[TopologyBlockId.READBACK] = ""

    def test_no_failures(self):
        """Test no failures yields empty layers."""
        layers = map_layers(Failures())
        assert layers.asr == layers.llm == layers.router == layers.tts == []

    def test_phonetic_ambiguity_in_asr_and_tts(self):
        """Test phonetic ambiguity lands in both asr and tts."""
        layers = map_layers(Failures(phonetic_ambiguity=True))
        assert layers.asr == [FailureKind.PHONETIC_AMBIGUITY]
        assert layers.tts == [FailureKind.PHONETIC_AMBIGUITY]
        assert layers.llm == []
        assert layers.router == []

    def test_all_failures(self):
        """Test the full static table."""
        layers = map_layers(
            Failures(
                asr_drift=True,
                semantic_normalization=True,
                hallucinated_completion=True,
                tool_schema_mismatch=True,
                phonetic_ambiguity=True,
            )
        )
        assert layers.asr == [FailureKind.ASR_DRIFT, FailureKind.PHONETIC_AMBIGUITY]
        assert layers.llm == [
            FailureKind.SEMANTIC_NORMALIZATION,
            FailureKind.HALLUCINATED_COMPLETION,
        ]
        assert layers.router == [FailureKind.TOOL_SCHEMA_MISMATCH]
        assert layers.tts == [FailureKind.PHONETIC_AMBIGUITY]


class TestBlockSelection:
    """Tests for block selection and compilation."""

    def test_every_trigger_no_duplicates(self):
        """Test overlapping triggers never add a block twice."""
        caps = Capabilities(
            capture_mode=CaptureMode.SYMBOLIC,
            noise_tolerance=NoiseTolerance.HIGH,
            execution_dependency=True,
            confirmation_required=True,
            pronunciation_required=True,
            memory_required=True,
        )
        selected = select_blocks(caps, map_failures(caps))
        assert len(selected) == len(set(selected)) == 6
        assert selected == [
            TopologyBlockId.SYMBOL_CAPTURE,
            TopologyBlockId.PHONETIC_RULE,
            TopologyBlockId.EXECUTION_GATE,
            TopologyBlockId.NOISE_RECOVERY,
            TopologyBlockId.TOOL_ALIGNMENT,
            TopologyBlockId.READBACK,
        ]

    def test_build_prompt_trims_blocks(self):
        """Test block text is trimmed."""
        caps = Capabilities(confirmation_required=True)
        blocks = build_prompt(caps, Failures())
        assert blocks == [TOPOLOGY_BLOCKS[TopologyBlockId.READBACK].strip()]

    def test_compile_zero_blocks(self):
        """Test zero blocks yields prefix, blank line, suffix."""
        assert compile_prompt([]) == f"{PROMPT_PREFIX}\n\n{PROMPT_SUFFIX}"

    def test_compile_skips_blank_blocks(self):
        """Test blank blocks are dropped."""
        assert compile_prompt(["  ", "Block A\n"]) == (
            f"{PROMPT_PREFIX}\n\nBlock A\n\n{PROMPT_SUFFIX}"
        )


class TestRunHarness:
    """End-to-end harness tests."""

    def test_dispatch_radio_scenario(self):
        """Test the noisy radio dispatch scenario selects five blocks in order."""
        result = run_harness(
            "Dispatch agent that captures vehicle IDs over noisy radio calls"
        )
        caps = result.trace.capabilities
        assert caps.capture_mode == CaptureMode.SYMBOLIC
        assert caps.noise_tolerance == NoiseTolerance.HIGH
        assert caps.execution_dependency is True
        assert caps.confirmation_required is False

        expected_ids = [
            TopologyBlockId.SYMBOL_CAPTURE,
            TopologyBlockId.PHONETIC_RULE,
            TopologyBlockId.EXECUTION_GATE,
            TopologyBlockId.NOISE_RECOVERY,
            TopologyBlockId.TOOL_ALIGNMENT,
        ]
        parts = result.system_prompt.split("\n\n")
        assert parts[0] == PROMPT_PREFIX
        assert parts[-1] == PROMPT_SUFFIX
        assert parts[1:-1] == [TOPOLOGY_BLOCKS[i].strip() for i in expected_ids]
        assert result.trace.topology_blocks_count == 5

    def test_trace_layers(self):
        """Test the trace carries the layer mapping."""
        result = run_harness("Read back the plate number")
        assert FailureKind.PHONETIC_AMBIGUITY in result.trace.layers.tts

    def test_empty_use_case_still_produces_prompt(self):
        """Test the harness stays total on empty input."""
        result = run_harness("")
        assert result.system_prompt.startswith(PROMPT_PREFIX)
        assert result.system_prompt.endswith(PROMPT_SUFFIX)
        assert result.trace.topology_blocks_count == 1
