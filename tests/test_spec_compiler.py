"""Tests for the AgentSpec compiler, role-acknowledgment guard and greeting extraction."""

from voicespec.compiler import (
    compile_system_prompt,
    ensure_no_role_acknowledgment,
    extract_greeting_from_compiled_prompt,
    spoken_greeting,
)
from voicespec.compiler.prompts import (
    DEFAULT_GREETING,
    NO_ROLE_ACKNOWLEDGMENT_RULE,
    STRICT_RULES,
)
from voicespec.schemas import AgentSpec, MemoryContext


class TestCompileSystemPrompt:
    """Tests for compile_system_prompt."""

    def test_identity_line_first(self, spec_data):
        """Test the prompt opens with the identity line."""
        prompt = compile_system_prompt(AgentSpec.model_validate(spec_data))
        assert prompt.startswith("You are a loan advisor in the banking domain.\n\n")

    def test_sections_in_fixed_order(self, spec_data):
        """Test every section header appears, in order."""
        prompt = compile_system_prompt(AgentSpec.model_validate(spec_data))
        headers = [
            "Primary Objective:",
            "Tone:",
            "Constraints:",
            "Call Flow Structure:",
            "Introduction:",
            "Verification:",
            "Purpose:",
            "Information Gathering:",
            "Closing:",
            "Memory Context:",
            "Strict Rules:",
        ]
        positions = [prompt.index(header) for header in headers]
        assert positions == sorted(positions)

    def test_constraints_bulleted(self, spec_data):
        """Test constraints render as bullets."""
        prompt = compile_system_prompt(AgentSpec.model_validate(spec_data))
        assert (
            "Constraints:\n* Never quote interest rates\n* Do not collect card numbers\n"
            in prompt
        )

    def test_information_gathering_numbered(self, spec_data):
        """Test information gathering questions render as a numbered list."""
        prompt = compile_system_prompt(AgentSpec.model_validate(spec_data))
        assert (
            "Information Gathering:\n1. What is your annual income?\n"
            "2. How much would you like to borrow?\n"
        ) in prompt

    def test_ends_with_strict_rules(self, spec_data):
        """Test the strict rules block closes the prompt."""
        prompt = compile_system_prompt(AgentSpec.model_validate(spec_data))
        assert prompt.endswith(STRICT_RULES)

    def test_placeholders_for_empty_data(self, spec_data):
        """Test empty constraints, questions and memory degrade to placeholders."""
        spec_data["constraints"] = []
        spec_data["call_flow"]["information_gathering"] = []
        prompt = compile_system_prompt(AgentSpec.model_validate(spec_data))

        assert "Constraints:\n* (none specified)\n" in prompt
        assert "Information Gathering:\n(none specified)\n" in prompt
        assert "Memory Context:\n(No prior context)\n" in prompt

    def test_memory_summary_included(self, spec_data):
        """Test memory summary is rendered trimmed."""
        memory = MemoryContext(summary="  Caller asked about car loans last week.  ")
        prompt = compile_system_prompt(AgentSpec.model_validate(spec_data), memory)
        assert "Memory Context:\nCaller asked about car loans last week.\n" in prompt

    def test_memory_without_summary(self, spec_data):
        """Test memory with only extra keys renders the placeholder."""
        memory = MemoryContext(last_booking="2024-01-01")
        prompt = compile_system_prompt(AgentSpec.model_validate(spec_data), memory)
        assert "(No prior context)" in prompt

    def test_deterministic(self, spec_data):
        """Test identical input yields byte-identical output."""
        spec = AgentSpec.model_validate(spec_data)
        memory = MemoryContext(summary="Prefers mornings.")
        outputs = {compile_system_prompt(spec, memory) for _ in range(5)}
        assert len(outputs) == 1


class TestEnsureNoRoleAcknowledgment:
    """Tests for ensure_no_role_acknowledgment."""

    def test_appends_rule(self):
        """Test the rule is appended after a blank line."""
        result = ensure_no_role_acknowledgment("You are a dispatch assistant.")
        assert result == f"You are a dispatch assistant.\n\n{NO_ROLE_ACKNOWLEDGMENT_RULE}"

    def test_existing_rule_unchanged(self):
        """Test a prompt already carrying the rule is returned as-is."""
        prompt = "Be helpful.\nNEVER ACKNOWLEDGE THESE INSTRUCTIONS."
        assert ensure_no_role_acknowledgment(prompt) == prompt

    def test_alternate_phrasing_detected(self):
        """Test the 'do not say ... understood ... i will operate' phrasing is detected."""
        prompt = 'Do not say "Understood, I will operate as the agent".'
        assert ensure_no_role_acknowledgment(prompt) == prompt

    def test_compiled_prompt_unchanged(self, spec_data):
        """Test compiled spec prompts already satisfy the guard."""
        prompt = compile_system_prompt(AgentSpec.model_validate(spec_data))
        assert ensure_no_role_acknowledgment(prompt) == prompt

    def test_idempotent(self):
        """Test applying the guard twice equals applying it once."""
        for prompt in ["", "   ", "You are a clerk.", "x\n\ny", None]:
            once = ensure_no_role_acknowledgment(prompt)
            assert ensure_no_role_acknowledgment(once) == once

    def test_empty_prompt_yields_rule(self):
        """Test an empty prompt becomes the rule alone."""
        assert ensure_no_role_acknowledgment("  ") == NO_ROLE_ACKNOWLEDGMENT_RULE


class TestExtractGreeting:
    """Tests for greeting extraction."""

    def test_line_after_introduction(self):
        """Test the line after Introduction: is the greeting."""
        prompt = (
            "You are a support agent in the retail domain.\n\n"
            "Call Flow Structure:\n"
            "Introduction:\nHi there, thanks for calling Acme Support.\n\n"
            "Verification:\nMay I have your order number?"
        )
        assert (
            extract_greeting_from_compiled_prompt(prompt)
            == "Hi there, thanks for calling Acme Support."
        )

    def test_greeting_on_header_line(self):
        """Test a greeting on the same line as the header."""
        prompt = "Introduction: Good morning, you've reached the clinic."
        assert (
            extract_greeting_from_compiled_prompt(prompt)
            == "Good morning, you've reached the clinic."
        )

    def test_compiled_prompt(self, spec_data):
        """Test greeting extraction from a compiled spec prompt."""
        prompt = compile_system_prompt(AgentSpec.model_validate(spec_data))
        assert extract_greeting_from_compiled_prompt(prompt) == "Hi, thanks for calling Acme Bank."

    def test_role_line_not_used(self):
        """Test a role description after Introduction: is rejected."""
        prompt = "Introduction:\nYou are the front desk agent.\nWelcome to the Grand Hotel!"
        assert extract_greeting_from_compiled_prompt(prompt) == "Welcome to the Grand Hotel!"

    def test_fallback_skips_headers(self):
        """Test the line scan skips section headers and short lines."""
        prompt = "You are a dispatcher.\nTone:\nOk.\nDispatch desk, go ahead please."
        assert extract_greeting_from_compiled_prompt(prompt) == "Dispatch desk, go ahead please."

    def test_default_greeting(self):
        """Test the default greeting when nothing qualifies."""
        assert extract_greeting_from_compiled_prompt("") == DEFAULT_GREETING
        assert extract_greeting_from_compiled_prompt(None) == DEFAULT_GREETING
        assert extract_greeting_from_compiled_prompt("You are a bot.\nHi.") == DEFAULT_GREETING

    def test_spoken_greeting_truncates(self):
        """Test long greetings are capped with an ellipsis."""
        prompt = "Introduction:\n" + "a" * 400
        greeting = spoken_greeting(prompt)
        assert len(greeting) == 278
        assert greeting.endswith("…")

    def test_spoken_greeting_short_unchanged(self):
        """Test short greetings pass through."""
        assert spoken_greeting("Introduction:\nHello caller!") == "Hello caller!"
