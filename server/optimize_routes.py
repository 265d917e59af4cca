"""API routes for workflow optimization."""

from typing import Any

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, ConfigDict, Field

from agentflow.models.workflow import WorkflowGraph
from agentflow.optimizer import WorkflowOptimizer

router = APIRouter()


class OptimizeRequest(BaseModel):
    """Request body for ``POST /api/optimize``.

    Both fields are loosely typed here; the optimizer rejects a missing or
    blank prompt with INVALID_INPUT rather than a generic validation error.
    """

    model_config = ConfigDict(populate_by_name=True)

    prompt: Any = None
    previous_workflow: Any = Field(default=None, alias="previousWorkflow")


def get_optimizer(request: Request) -> WorkflowOptimizer:
    """The optimizer owned by the running app."""
    return request.app.state.optimizer


@router.post("/optimize", response_model=WorkflowGraph)
async def optimize_workflow(
    request: OptimizeRequest,
    optimizer: WorkflowOptimizer = Depends(get_optimizer),
) -> WorkflowGraph:
    """Redesign the described workflow as an agentic AI pipeline.

    Returns 400 INVALID_INPUT, 422 SCHEMA_REFUSAL or 502 OPENAI_ERROR on
    failure (rendered by the app's OptimizeError handler).
    """
    return await optimizer.optimize(request.prompt, request.previous_workflow)
