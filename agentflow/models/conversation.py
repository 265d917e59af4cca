"""Conversation history model for iterative workflow refinement."""

from pydantic import BaseModel, ConfigDict

from agentflow.models.workflow import WorkflowGraph


class ConversationTurn(BaseModel):
    """One successful prompt and the workflow it produced."""

    model_config = ConfigDict(frozen=True)

    prompt: str
    workflow: WorkflowGraph
