"""Command-line interface for voicespec.

Commands:
- harness: compile a topology prompt from a use case description
- compile: compile a stored AgentSpec JSON file into a guarded prompt
- build: run the agent builder interview interactively
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from voicespec.builder import AgentBuilder, BuilderError
from voicespec.compiler import (
    compile_system_prompt,
    ensure_no_role_acknowledgment,
    spoken_greeting,
)
from voicespec.config import BuilderConfig, BuilderConfigError, BuilderStep
from voicespec.harness import run_harness
from voicespec.schemas import AgentSpec, HarnessResult, MemoryContext
from voicespec.storage import InMemoryAgentStore, InMemorySessionStore

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def _print_rule(title: str) -> None:
    print("=" * 60)
    print(title)
    print("=" * 60)


def _print_trace(result: HarnessResult) -> None:
    """Print the harness decision trace."""
    trace = result.trace
    caps = trace.capabilities

    _print_rule("HARNESS TRACE")
    print(f"Capture mode:     {caps.capture_mode.value.upper()}")
    print(f"Noise tolerance:  {caps.noise_tolerance.value.upper()}")
    print(f"Execution:        {'yes' if caps.execution_dependency else 'no'}")
    print(f"Confirmation:     {'yes' if caps.confirmation_required else 'no'}")
    print(f"Pronunciation:    {'yes' if caps.pronunciation_required else 'no'}")
    print(f"Memory:           {'yes' if caps.memory_required else 'no'}")
    print()
    print("Failures:")
    for name, triggered in trace.failures.model_dump().items():
        if triggered:
            print(f"  - {name}")
    print()
    print("Layers:")
    for layer, kinds in trace.layers.model_dump(mode="json").items():
        if kinds:
            print(f"  {layer}: {', '.join(kinds)}")
    print()
    print(f"Topology blocks: {trace.topology_blocks_count}")
    print()


def _run_harness(args: argparse.Namespace) -> int:
    result = run_harness(args.use_case)

    if args.trace:
        _print_trace(result)

    if args.json:
        print(result.model_dump_json(indent=2))
    else:
        _print_rule("SYSTEM PROMPT")
        print(result.system_prompt)
    return 0


def _run_compile(args: argparse.Namespace) -> int:
    try:
        spec_data = json.loads(Path(args.spec).read_text(encoding="utf-8"))
        spec = AgentSpec.model_validate(spec_data)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        print(f"Error: could not load agent spec from {args.spec}: {e}")
        return 1

    memory = MemoryContext(summary=args.memory) if args.memory else None
    prompt = ensure_no_role_acknowledgment(compile_system_prompt(spec, memory))

    _print_rule("SYSTEM PROMPT")
    print(prompt)
    if args.greeting:
        print()
        _print_rule("GREETING")
        print(spoken_greeting(prompt))
    return 0


def _read_answer(step: BuilderStep) -> str:
    """Read one answer; constraints are read line by line until a blank line."""
    if step != BuilderStep.COLLECT_CONSTRAINTS:
        return input("> ").strip()

    lines = []
    while True:
        line = input("> ").strip()
        if not line:
            break
        lines.append(line)
        if line.lower() in ("none", "no", "n/a"):
            break
    return "\n".join(lines)


def _run_build(args: argparse.Namespace) -> int:
    config = BuilderConfig()
    try:
        config.require_api_key()
    except BuilderConfigError as e:
        print(f"Error: {e}")
        print("Set it with: export OPENAI_API_KEY=your-api-key")
        return 1

    agents = InMemoryAgentStore()
    builder = AgentBuilder(
        config=config,
        sessions=InMemorySessionStore(),
        agents=agents,
    )

    print("voicespec agent builder")
    print("Type 'exit' to quit")
    print()

    reply = builder.start(user_id=args.user_id)
    while reply.agent_id is None:
        print(reply.question)
        try:
            answer = _read_answer(reply.state.current_step)
        except (EOFError, KeyboardInterrupt):
            print()
            return 0

        if answer.lower() == "exit":
            return 0
        if not answer:
            continue

        try:
            reply = builder.submit_sync(reply.session_id, answer)
        except BuilderError as e:
            print(f"Error: {e}")
            print("Submit again to retry.")
            print()
            continue

    agent = agents.get(reply.agent_id)
    print()
    _print_rule(f"AGENT CREATED: {agent.name}")
    print(f"Agent id: {agent.id}")
    print()
    print(ensure_no_role_acknowledgment(compile_system_prompt(agent.spec)))
    return 0


def _parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        description="voicespec - deterministic voice agent prompt compiler",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        default="WARNING",
        help="Logging level (default: WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    harness = subparsers.add_parser(
        "harness", help="Compile a topology prompt from a use case"
    )
    harness.add_argument("use_case", help="Free-text use case description")
    harness.add_argument(
        "--trace", action="store_true", help="Print the decision trace"
    )
    harness.add_argument(
        "--json", action="store_true", help="Print prompt and trace as JSON"
    )
    harness.set_defaults(handler=_run_harness)

    compile_cmd = subparsers.add_parser(
        "compile", help="Compile an AgentSpec JSON file"
    )
    compile_cmd.add_argument("spec", help="Path to AgentSpec JSON")
    compile_cmd.add_argument("--memory", default=None, help="Memory summary text")
    compile_cmd.add_argument(
        "--greeting", action="store_true", help="Also print the spoken greeting"
    )
    compile_cmd.set_defaults(handler=_run_compile)

    build = subparsers.add_parser("build", help="Run the agent builder interview")
    build.add_argument("--user-id", default=None, help="Owner of the session")
    build.set_defaults(handler=_run_build)

    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    """Run the voicespec CLI."""
    args = _parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return args.handler(args)


if __name__ == "__main__":
    sys.exit(main())
