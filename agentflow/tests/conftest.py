"""Shared fixtures for workflow optimizer tests."""

import copy
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from agentflow.models.workflow import WorkflowDraft, WorkflowGraph

SAMPLE_WORKFLOW = {
    "description": "An optimized agentic workflow.",
    "nodes": [
        {"id": "1", "type": "trigger", "label": "Start", "position": {"x": 0, "y": 0}},
        {"id": "2", "type": "agent", "label": "Research Agent", "position": {"x": 0, "y": 120}},
    ],
    "edges": [
        {"id": "e1-2", "source": "1", "target": "2", "label": "triggers"},
    ],
    "stepDetails": {
        "1": "Entry point triggered by the user.",
        "2": "Performs research using web search tools.",
    },
}


def draft_from(workflow: dict) -> WorkflowDraft:
    """The model-facing draft equivalent of a workflow payload."""
    data = dict(workflow)
    data["stepDetails"] = [
        {"nodeId": node_id, "detail": detail}
        for node_id, detail in workflow["stepDetails"].items()
    ]
    return WorkflowDraft.model_validate(data)


def parsed_completion(parsed, refusal: str | None = None) -> SimpleNamespace:
    """Shape of an OpenAI ``chat.completions.parse`` result."""
    message = SimpleNamespace(parsed=parsed, refusal=refusal)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


@pytest.fixture
def sample_payload() -> dict:
    return copy.deepcopy(SAMPLE_WORKFLOW)


@pytest.fixture
def sample_workflow() -> WorkflowGraph:
    return WorkflowGraph.model_validate(SAMPLE_WORKFLOW)


@pytest.fixture
def openai_client() -> MagicMock:
    """Stand-in AsyncOpenAI client whose parse returns the sample workflow."""
    client = MagicMock()
    client.chat.completions.parse = AsyncMock(
        return_value=parsed_completion(draft_from(SAMPLE_WORKFLOW))
    )
    return client
