"""Topology block library (frozen)."""

from types import MappingProxyType

from voicespec.config import TopologyBlockId

SYMBOL_CAPTURE = """
You must capture exact symbols: alphanumeric codes, IDs, plate numbers, and reference numbers.
Do not paraphrase or substitute; repeat back character-for-character when confirming.
"""

PHONETIC_RULE = """
Use phonetic clarification for ambiguous characters (e.g. "B as in Bravo", "5 as in Five").
Request spell-back for codes and IDs when the environment is noisy or the user is unsure.
"""

EXECUTION_GATE = """
Before executing any dispatch, route, or external action, normalize the user's intent into a single unambiguous instruction.
Do not execute on partial or ambiguous input; ask one clarifying question if needed, then proceed.
"""

NOISE_RECOVERY = """
In noisy or field environments, ask the user to repeat critical values (IDs, codes, numbers) once before confirming.
If you are unsure after one repetition, confirm the full value using readback before proceeding.
"""

READBACK = """
After capturing key information, read it back to the user for confirmation before taking action.
Use the exact wording: "I have [X]. Is that correct?" and wait for explicit yes/no or correction.
"""

TOOL_ALIGNMENT = """
When calling tools or dispatching actions, use only the parameters defined in the tool schema.
Do not invent or assume parameters; if a required field is missing, ask the user for it once.
"""

TOPOLOGY_BLOCKS: MappingProxyType = MappingProxyType(
    {
        TopologyBlockId.SYMBOL_CAPTURE: SYMBOL_CAPTURE,
        TopologyBlockId.PHONETIC_RULE: PHONETIC_RULE,
        TopologyBlockId.EXECUTION_GATE: EXECUTION_GATE,
        TopologyBlockId.NOISE_RECOVERY: NOISE_RECOVERY,
        TopologyBlockId.READBACK: READBACK,
        TopologyBlockId.TOOL_ALIGNMENT: TOOL_ALIGNMENT,
    }
)

PROMPT_PREFIX = "You are a voice logistics dispatch agent."

PROMPT_SUFFIX = "Maintain deterministic capture before execution."
