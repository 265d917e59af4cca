"""Tests for the optimizer HTTP API."""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from agentflow.llm import OpenAIWorkflowModel
from agentflow.optimizer import WorkflowOptimizer
from conftest import SAMPLE_WORKFLOW, parsed_completion
from server.app import create_app
from server.settings import Settings


@pytest.fixture
def client(openai_client) -> TestClient:
    optimizer = WorkflowOptimizer(OpenAIWorkflowModel(client=openai_client))
    app = create_app(settings=Settings(), optimizer=optimizer)
    return TestClient(app)


class TestOptimizeEndpoint:
    """Test POST /api/optimize."""

    def test_returns_workflow_for_valid_prompt(self, client):
        res = client.post("/api/optimize", json={"prompt": "Optimize my email triage process"})

        assert res.status_code == 200
        body = res.json()
        assert isinstance(body["description"], str)
        assert isinstance(body["nodes"], list)
        assert isinstance(body["edges"], list)
        assert isinstance(body["stepDetails"], dict)

    def test_passes_model_workflow_through_unchanged(self, client):
        res = client.post("/api/optimize", json={"prompt": "Optimize my email triage process"})

        assert res.json() == SAMPLE_WORKFLOW

    @pytest.mark.parametrize("body", [{}, {"prompt": ""}, {"prompt": "   "}, {"prompt": 7}])
    def test_returns_400_for_missing_or_blank_prompt(self, client, openai_client, body):
        res = client.post("/api/optimize", json=body)

        assert res.status_code == 400
        assert res.json() == {"error": "prompt is required", "code": "INVALID_INPUT"}
        openai_client.chat.completions.parse.assert_not_called()

    def test_returns_400_for_non_object_body(self, client, openai_client):
        res = client.post("/api/optimize", json=["not", "an", "object"])

        assert res.status_code == 400
        assert res.json()["code"] == "INVALID_INPUT"
        openai_client.chat.completions.parse.assert_not_called()

    def test_passes_previous_workflow_in_user_message(self, client, openai_client):
        client.post(
            "/api/optimize",
            json={"prompt": "Add a memory step", "previousWorkflow": SAMPLE_WORKFLOW},
        )

        call_args = openai_client.chat.completions.parse.call_args.kwargs
        user_msg = next(m for m in call_args["messages"] if m["role"] == "user")
        assert "Previous workflow:" in user_msg["content"]
        assert '"Research Agent"' in user_msg["content"]
        assert user_msg["content"].endswith("Add a memory step")

    def test_null_previous_workflow_is_a_fresh_request(self, client, openai_client):
        client.post("/api/optimize", json={"prompt": "Start over", "previousWorkflow": None})

        call_args = openai_client.chat.completions.parse.call_args.kwargs
        user_msg = next(m for m in call_args["messages"] if m["role"] == "user")
        assert user_msg["content"] == "Workflow to optimize:\nStart over"

    def test_empty_object_previous_workflow_is_a_refinement(self, client, openai_client):
        client.post("/api/optimize", json={"prompt": "Fill it in", "previousWorkflow": {}})

        call_args = openai_client.chat.completions.parse.call_args.kwargs
        user_msg = next(m for m in call_args["messages"] if m["role"] == "user")
        assert user_msg["content"].startswith("Previous workflow:\n{}")

    def test_returns_422_when_parsed_is_null(self, client, openai_client):
        openai_client.chat.completions.parse = AsyncMock(return_value=parsed_completion(None))

        res = client.post("/api/optimize", json={"prompt": "Some prompt"})

        assert res.status_code == 422
        assert res.json()["code"] == "SCHEMA_REFUSAL"
        assert "rephrasing" in res.json()["error"]

    def test_returns_502_when_model_call_fails(self, client, openai_client):
        openai_client.chat.completions.parse = AsyncMock(side_effect=Exception("rate limited"))

        res = client.post("/api/optimize", json={"prompt": "Some prompt"})

        assert res.status_code == 502
        assert res.json() == {
            "error": "Failed to reach the AI service. Please try again.",
            "code": "OPENAI_ERROR",
        }

    def test_failure_does_not_affect_next_request(self, client, openai_client):
        good = openai_client.chat.completions.parse.return_value
        openai_client.chat.completions.parse = AsyncMock(side_effect=[Exception("boom"), good])

        assert client.post("/api/optimize", json={"prompt": "one"}).status_code == 502
        assert client.post("/api/optimize", json={"prompt": "two"}).status_code == 200


class TestHealthEndpoint:
    """Test GET /health."""

    def test_health(self, client):
        res = client.get("/health")

        assert res.status_code == 200
        assert res.json() == {"status": "ok"}


class TestAppLifecycle:
    """Test app construction from settings."""

    def test_builds_optimizer_from_settings(self):
        app = create_app(settings=Settings(llm_provider="anthropic", anthropic_model="claude-test"))

        optimizer = app.state.optimizer
        assert optimizer.model.provider == "anthropic"
        assert optimizer.model.model == "claude-test"

    def test_missing_key_returns_502(self):
        app = create_app(settings=Settings(openai_api_key=None))

        with TestClient(app) as client:
            res = client.post("/api/optimize", json={"prompt": "Some prompt"})

        assert res.status_code == 502
        assert res.json()["code"] == "OPENAI_ERROR"

    def test_cors_allows_configured_origin(self, openai_client):
        optimizer = WorkflowOptimizer(OpenAIWorkflowModel(client=openai_client))
        app = create_app(settings=Settings(cors_origins=["http://localhost:5173"]), optimizer=optimizer)
        client = TestClient(app)

        res = client.options(
            "/api/optimize",
            headers={
                "Origin": "http://localhost:5173",
                "Access-Control-Request-Method": "POST",
            },
        )

        assert res.headers["access-control-allow-origin"] == "http://localhost:5173"
