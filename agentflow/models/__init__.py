"""Core data models for the workflow optimizer."""

from agentflow.models.conversation import ConversationTurn
from agentflow.models.workflow import (
    NodePosition,
    NodeType,
    StepDetail,
    WorkflowDraft,
    WorkflowEdge,
    WorkflowGraph,
    WorkflowNode,
)

__all__ = [
    # Workflow graph
    "NodePosition",
    "NodeType",
    "WorkflowEdge",
    "WorkflowGraph",
    "WorkflowNode",
    # Model-facing shape
    "StepDetail",
    "WorkflowDraft",
    # Conversation
    "ConversationTurn",
]
