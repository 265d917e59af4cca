"""Terminal front end for the workflow optimizer.

Runs a refinement conversation against a running optimizer server:

    agentflow --prompt "Optimize my email triage process" --prompt "Add a memory step"

Without ``--prompt`` it reads prompts interactively until EOF or an
empty line.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable, Iterable, TextIO

from agentflow.client import DEFAULT_SERVER_URL, WorkflowClient
from agentflow.conversation import ConversationSession
from agentflow.diagram import TYPE_LABELS, render_text
from agentflow.export import workflow_json, write_description
from agentflow.models.workflow import WorkflowGraph


def format_workflow(workflow: WorkflowGraph) -> str:
    """Format a workflow for human-readable output."""
    lines = []
    lines.append("=" * 60)
    lines.append("OPTIMIZED WORKFLOW")
    lines.append("=" * 60)
    lines.append("")
    lines.append(workflow.description.strip())
    lines.append("")
    lines.append("-" * 60)
    lines.append("DIAGRAM")
    lines.append("-" * 60)
    lines.append(render_text(workflow))
    lines.append("")
    lines.append("-" * 60)
    lines.append("STEP DETAILS")
    lines.append("-" * 60)
    for node in workflow.nodes:
        detail = workflow.step_details.get(node.id)
        if not detail:
            continue
        lines.append(f"[{TYPE_LABELS[node.type]}] {node.label}")
        lines.append(f"  {detail}")
    return "\n".join(lines)


def _interactive_prompts(stdin: TextIO, stdout: TextIO) -> Iterable[str]:
    first = True
    while True:
        stdout.write("Describe your workflow: " if first else "Refine or adjust: ")
        stdout.flush()
        line = stdin.readline()
        if not line or not line.strip():
            return
        first = False
        yield line.strip()


def run_session(
    session: ConversationSession,
    prompts: Iterable[str],
    emit: Callable[[WorkflowGraph], str] = format_workflow,
    out: TextIO | None = None,
    err: TextIO | None = None,
) -> bool:
    """Submit each prompt in turn. Returns True if the last one succeeded."""
    out = out or sys.stdout
    err = err or sys.stderr
    succeeded = False
    for prompt in prompts:
        workflow = session.submit(prompt)
        if workflow is None:
            print(f"Error: {session.error}", file=err)
            succeeded = False
            continue
        print(emit(workflow), file=out)
        succeeded = True
    return succeeded


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Redesign a workflow as an agentic AI pipeline."
    )
    parser.add_argument(
        "--server",
        default=DEFAULT_SERVER_URL,
        help=f"optimizer server URL (default: {DEFAULT_SERVER_URL})",
    )
    parser.add_argument(
        "--prompt",
        action="append",
        default=[],
        help="prompt to submit; repeat to refine the previous answer",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="print each workflow as JSON instead of human-readable format",
    )
    parser.add_argument(
        "--export-description",
        type=Path,
        help="write the final workflow description as Markdown to this path",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="HTTP timeout in seconds (default: wait for the model)",
    )

    args = parser.parse_args(argv)

    client = WorkflowClient(base_url=args.server, timeout=args.timeout)
    session = ConversationSession(client.optimize)

    prompts = args.prompt or _interactive_prompts(sys.stdin, sys.stdout)
    emit = workflow_json if args.json else format_workflow
    succeeded = run_session(session, prompts, emit=emit)

    if args.export_description:
        if session.current_workflow is None:
            print("Error: no workflow to export", file=sys.stderr)
            return 1
        try:
            path = write_description(session.current_workflow, args.export_description, include_steps=True)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        print(f"Description written to {path}", file=sys.stderr)

    return 0 if succeeded else 1


if __name__ == "__main__":
    sys.exit(main())
