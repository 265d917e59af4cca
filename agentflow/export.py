"""Export helpers for a generated workflow."""

from __future__ import annotations

import json
from pathlib import Path

from agentflow.diagram import TYPE_LABELS
from agentflow.models.workflow import WorkflowGraph

DEFAULT_DESCRIPTION_FILE = "workflow.md"


def description_markdown(graph: WorkflowGraph, include_steps: bool = False) -> str:
    """Markdown for the workflow description.

    With ``include_steps`` a "Steps" section lists every node with its
    explanation, in graph order.
    """
    if not graph.description:
        raise ValueError("Workflow has no description to export")

    text = graph.description.rstrip() + "\n"
    if include_steps and graph.nodes:
        parts = [text, "\n## Steps\n"]
        for node in graph.nodes:
            parts.append(f"\n### {node.label} ({TYPE_LABELS[node.type]})\n")
            detail = graph.step_details.get(node.id)
            if detail:
                parts.append(f"\n{detail.rstrip()}\n")
        text = "".join(parts)
    return text


def write_description(
    graph: WorkflowGraph,
    path: Path | str = DEFAULT_DESCRIPTION_FILE,
    include_steps: bool = False,
) -> Path:
    """Write the description Markdown to ``path`` and return the path."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(description_markdown(graph, include_steps=include_steps), encoding="utf-8")
    return path


def workflow_json(graph: WorkflowGraph) -> str:
    """Pretty JSON in the wire shape."""
    return json.dumps(graph.to_payload(), indent=2, ensure_ascii=False)
