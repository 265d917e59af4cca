"""View model for drawing a workflow graph.

Maps workflow nodes and edges to the shape a flow-diagram renderer
consumes, tracks which node is selected, and looks up the selected
step's explanation. Also renders a plain-text layered view for terminals.
"""

from __future__ import annotations

from itertools import groupby

from agentflow.models.workflow import NodeType, WorkflowGraph, WorkflowNode

RENDER_NODE_TYPE = "workflowNode"
NO_DETAIL = "No details available for this step."

TYPE_LABELS = {
    NodeType.trigger: "Trigger",
    NodeType.agent: "AI Agent",
    NodeType.tool: "Tool",
    NodeType.decision: "Decision",
    NodeType.output: "Output",
}

TYPE_COLORS = {
    NodeType.trigger: "#3b82f6",
    NodeType.agent: "#8b5cf6",
    NodeType.tool: "#10b981",
    NodeType.decision: "#f59e0b",
    NodeType.output: "#6b7280",
}

EDGE_DEFAULTS = {
    "animated": True,
    "style": {"stroke": "#555", "strokeDasharray": "5 5"},
    "markerEnd": {"type": "arrowclosed", "color": "#555"},
}


def to_render_nodes(graph: WorkflowGraph) -> list[dict]:
    """Renderable nodes: position plus label/type data for the node widget."""
    return [
        {
            "id": node.id,
            "type": RENDER_NODE_TYPE,
            "position": {"x": node.position.x, "y": node.position.y},
            "data": {"label": node.label, "type": node.type.value},
        }
        for node in graph.nodes
    ]


def to_render_edges(graph: WorkflowGraph) -> list[dict]:
    return [
        {
            "id": edge.id,
            "source": edge.source,
            "target": edge.target,
            "label": edge.label,
            **EDGE_DEFAULTS,
        }
        for edge in graph.edges
    ]


class DiagramSelection:
    """Which node the user clicked, if any."""

    def __init__(self) -> None:
        self.selected_id: str | None = None

    def click(self, node_id: str) -> str | None:
        """Toggle selection; clicking the selected node clears it."""
        self.selected_id = None if self.selected_id == node_id else node_id
        return self.selected_id

    def clear(self) -> None:
        self.selected_id = None

    def selected_node(self, graph: WorkflowGraph) -> WorkflowNode | None:
        if self.selected_id is None:
            return None
        return graph.node(self.selected_id)

    def detail(self, graph: WorkflowGraph) -> str | None:
        """Explanation for the selected step (None if nothing is selected)."""
        node = self.selected_node(graph)
        if node is None:
            return None
        return graph.step_details.get(node.id) or NO_DETAIL


def layer_nodes(graph: WorkflowGraph) -> list[list[WorkflowNode]]:
    """Group nodes into levels: same y is one level, ordered by x."""
    ordered = sorted(graph.nodes, key=lambda n: (n.position.y, n.position.x))
    return [list(level) for _, level in groupby(ordered, key=lambda n: n.position.y)]


def render_text(graph: WorkflowGraph) -> str:
    """Layered text rendering of the graph, top to bottom."""
    lines = []
    for depth, level in enumerate(layer_nodes(graph), start=1):
        cells = "   ".join(f"[{TYPE_LABELS[n.type]}] {n.label} ({n.id})" for n in level)
        lines.append(f"{depth:>2}. {cells}")

    if graph.edges:
        lines.append("")
        for edge in graph.edges:
            arrow = f" --{edge.label}-->" if edge.label else " -->"
            lines.append(f"    {edge.source}{arrow} {edge.target}")
    return "\n".join(lines)
