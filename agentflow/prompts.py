"""Prompt construction for workflow optimization.

The system prompt is fixed; the user turn carries either the workflow to
optimize or, for a refinement, the previous workflow plus the adjustment.
"""

import json
from typing import Any

from agentflow.errors import InvalidInputError
from agentflow.models.workflow import WorkflowGraph

SYSTEM_PROMPT = """You are an expert AI systems architect. Your job is to analyze workflows and redesign them as modern agentic AI pipelines.

Given a workflow description, produce a structured workflow with:
- A 2-4 paragraph description of the optimized agentic workflow
- Nodes representing each step (use types: trigger, agent, tool, decision, output)
- Edges showing the flow between steps. Each edge MUST include a "label" field: use a short descriptive string (e.g. "sends results") or null if no label is needed. Never omit the label field.
- stepDetails: for each node ID, a detailed explanation of what it does, what AI agent or tool powers it, and its inputs and outputs

Position nodes in a top-to-bottom DAG layout with y increments of 120px per level. Multiple nodes at the same level share the same y value, spaced 200px apart on the x axis.

If the legacy workflow should be fully replaced with a better agentic approach, say so clearly in the description and propose the new workflow."""


def clean_prompt(prompt: Any) -> str:
    """Trim the prompt, rejecting anything that is not non-blank text."""
    if not isinstance(prompt, str) or not prompt.strip():
        raise InvalidInputError()
    return prompt.strip()


def serialize_workflow(workflow: Any) -> str:
    """Pretty JSON for a previous workflow (graph model or raw JSON)."""
    if isinstance(workflow, WorkflowGraph):
        workflow = workflow.to_payload()
    return json.dumps(workflow, indent=2, ensure_ascii=False)


def has_previous_workflow(value: Any) -> bool:
    """Whether ``value`` counts as refinement context.

    Only null, false, zero, NaN and the empty string mean "no previous
    workflow"; empty objects and lists are still sent to the model.
    """
    if value is None or isinstance(value, bool):
        return bool(value)
    if isinstance(value, (int, float)):
        return value == value and value != 0
    if isinstance(value, str):
        return value != ""
    return True


def build_user_content(prompt: str, previous_workflow: Any = None) -> str:
    """Build the user-turn message for an already cleaned prompt."""
    if has_previous_workflow(previous_workflow):
        return (
            f"Previous workflow:\n{serialize_workflow(previous_workflow)}"
            f"\n\nUser adjustment request:\n{prompt}"
        )
    return f"Workflow to optimize:\n{prompt}"


def build_messages(prompt: str, previous_workflow: Any = None) -> list[dict[str, str]]:
    """Chat messages for one optimization request."""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": build_user_content(prompt, previous_workflow)},
    ]
