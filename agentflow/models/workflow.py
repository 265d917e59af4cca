"""Data models for the workflow graph exchanged with the optimizer.

A workflow graph is the structured redesign the model returns for a prompt:
typed steps laid out as a top-to-bottom DAG, labeled edges between them,
a prose description and a detailed explanation for each step.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt


class NodeType(str, Enum):
    """Role a step plays in an agentic pipeline."""

    trigger = "trigger"
    agent = "agent"
    tool = "tool"
    decision = "decision"
    output = "output"


class NodePosition(BaseModel):
    """Pixel-space layout coordinates.

    Nodes on the same level share ``y``; siblings are spaced along ``x``.
    Only JSON numbers are accepted (no numeric strings or booleans), and
    integers stay integers on output.
    """

    model_config = ConfigDict(frozen=True)

    x: StrictInt | StrictFloat
    y: StrictInt | StrictFloat


class WorkflowNode(BaseModel):
    """A single step in the workflow."""

    model_config = ConfigDict(frozen=True)

    id: str
    type: NodeType
    label: str
    position: NodePosition


class WorkflowEdge(BaseModel):
    """A directed connection between two steps.

    ``label`` is always serialized, even when there is nothing to say
    about the transition (``None``).
    """

    model_config = ConfigDict(frozen=True)

    id: str
    source: str
    target: str
    label: str | None = None


class WorkflowGraph(BaseModel):
    """The full optimized workflow returned for one prompt.

    Graphs are never edited in place: a refinement produces a new graph,
    and the old one is only carried forward as context for the next call.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    description: str
    nodes: list[WorkflowNode]
    edges: list[WorkflowEdge]
    step_details: dict[str, str] = Field(alias="stepDetails")

    def node(self, node_id: str) -> WorkflowNode | None:
        """Return the node with the given id, if present."""
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def to_payload(self) -> dict:
        """Dump to the JSON wire shape (camelCase keys)."""
        return self.model_dump(mode="json", by_alias=True)


class StepDetail(BaseModel):
    """Explanation for one step, keyed by node id."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    node_id: str = Field(alias="nodeId")
    detail: str


class WorkflowDraft(BaseModel):
    """Workflow shape requested from the model.

    Strict structured output cannot describe open-ended string maps, so the
    per-step details travel as a list and are folded into a mapping by
    :meth:`to_workflow`.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    description: str
    nodes: list[WorkflowNode]
    edges: list[WorkflowEdge]
    step_details: list[StepDetail] = Field(alias="stepDetails")

    def to_workflow(self) -> WorkflowGraph:
        # later entries for the same node win
        details = {item.node_id: item.detail for item in self.step_details}
        return WorkflowGraph(
            description=self.description,
            nodes=self.nodes,
            edges=self.edges,
            step_details=details,
        )
