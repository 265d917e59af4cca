"""Boundary validation for workflow graphs.

``validate_workflow`` is the structural check applied to anything that
crosses a process boundary (request bodies, model output, server
responses). ``check_integrity`` covers the referential rules the schema
cannot express: unique node ids, edges pointing at real nodes and step
details keyed by real nodes. Integrity problems are reported, not raised.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from agentflow.models.workflow import WorkflowDraft, WorkflowGraph


@dataclass(frozen=True)
class ValidationIssue:
    """One failed field: dotted path plus the reason it failed."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path or '<root>'}: {self.message}"


class WorkflowValidationError(ValueError):
    """Raised when data does not match the workflow schema."""

    def __init__(self, issues: list[ValidationIssue]) -> None:
        self.issues = issues
        summary = "; ".join(str(issue) for issue in issues)
        super().__init__(f"Invalid workflow: {summary}")


def _issues_from(exc: ValidationError) -> list[ValidationIssue]:
    return [
        ValidationIssue(
            path=".".join(str(part) for part in error["loc"]),
            message=error["msg"],
        )
        for error in exc.errors()
    ]


def validate_workflow(data: Any) -> WorkflowGraph:
    """Validate ``data`` against the workflow schema.

    Args:
        data: Decoded JSON (or an existing WorkflowGraph)

    Returns:
        The validated WorkflowGraph

    Raises:
        WorkflowValidationError: listing every failing path and why
    """
    if isinstance(data, WorkflowGraph):
        return data
    try:
        return WorkflowGraph.model_validate(data)
    except ValidationError as exc:
        raise WorkflowValidationError(_issues_from(exc)) from exc


def workflow_json_schema() -> dict:
    """JSON schema of the workflow graph (camelCase keys)."""
    return WorkflowGraph.model_json_schema(by_alias=True)


def draft_json_schema() -> dict:
    """JSON schema of the shape requested from the model."""
    return WorkflowDraft.model_json_schema(by_alias=True)


# --- Referential integrity ---


DUPLICATE_NODE_ID = "duplicate_node_id"
DANGLING_EDGE_SOURCE = "dangling_edge_source"
DANGLING_EDGE_TARGET = "dangling_edge_target"
ORPHAN_STEP_DETAIL = "orphan_step_detail"


@dataclass(frozen=True)
class IntegrityIssue:
    """A referential problem in an otherwise well-formed graph."""

    code: str
    message: str


def check_integrity(graph: WorkflowGraph) -> list[IntegrityIssue]:
    """Report referential problems in ``graph``. Never raises."""
    issues: list[IntegrityIssue] = []

    seen: set[str] = set()
    for node in graph.nodes:
        if node.id in seen:
            issues.append(IntegrityIssue(DUPLICATE_NODE_ID, f"node id {node.id!r} is used more than once"))
        seen.add(node.id)

    for edge in graph.edges:
        if edge.source not in seen:
            issues.append(IntegrityIssue(
                DANGLING_EDGE_SOURCE,
                f"edge {edge.id!r} starts at unknown node {edge.source!r}",
            ))
        if edge.target not in seen:
            issues.append(IntegrityIssue(
                DANGLING_EDGE_TARGET,
                f"edge {edge.id!r} ends at unknown node {edge.target!r}",
            ))

    for node_id in graph.step_details:
        if node_id not in seen:
            issues.append(IntegrityIssue(
                ORPHAN_STEP_DETAIL,
                f"step detail for unknown node {node_id!r}",
            ))

    return issues
