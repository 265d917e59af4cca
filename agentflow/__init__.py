"""Agentic workflow optimizer - redesign business workflows as agentic AI pipelines."""

from agentflow.client import OptimizeRequestError, WorkflowClient
from agentflow.conversation import ConversationSession
from agentflow.errors import (
    InvalidInputError,
    OptimizeError,
    SchemaRefusalError,
    UpstreamError,
)
from agentflow.models import (
    ConversationTurn,
    NodePosition,
    NodeType,
    WorkflowDraft,
    WorkflowEdge,
    WorkflowGraph,
    WorkflowNode,
)
from agentflow.optimizer import WorkflowOptimizer
from agentflow.validation import (
    WorkflowValidationError,
    check_integrity,
    validate_workflow,
)

__all__ = [
    # Models
    "ConversationTurn",
    "NodePosition",
    "NodeType",
    "WorkflowDraft",
    "WorkflowEdge",
    "WorkflowGraph",
    "WorkflowNode",
    # Validation
    "WorkflowValidationError",
    "check_integrity",
    "validate_workflow",
    # Errors
    "InvalidInputError",
    "OptimizeError",
    "SchemaRefusalError",
    "UpstreamError",
    # High-level APIs
    "ConversationSession",
    "OptimizeRequestError",
    "WorkflowClient",
    "WorkflowOptimizer",
]
