"""Structured-output model adapters.

Each adapter turns chat messages into a WorkflowGraph, or ``None`` when
the model answered without producing a schema-conformant workflow.
Transport, auth and quota failures propagate as exceptions.
Supports OpenAI (``chat.completions.parse``) and Anthropic (forced tool use).
"""

from __future__ import annotations

import logging
from typing import Any

import anthropic
import openai
from pydantic import ValidationError

from agentflow.models.workflow import WorkflowDraft, WorkflowGraph
from agentflow.validation import draft_json_schema

logger = logging.getLogger(__name__)

DEFAULT_OPENAI_MODEL = "gpt-4o"
DEFAULT_ANTHROPIC_MODEL = "claude-sonnet-4-5"

WORKFLOW_TOOL_NAME = "record_workflow"


class WorkflowModel:
    """Protocol for a model that can produce workflow graphs."""

    provider: str = "base"
    model: str = ""

    async def generate(self, messages: list[dict[str, str]]) -> WorkflowGraph | None:
        """Generate a workflow from chat messages."""
        raise NotImplementedError

    async def aclose(self) -> None:
        """Release any client this adapter created itself."""
        return None


class OpenAIWorkflowModel(WorkflowModel):
    """OpenAI structured output via ``response_format``.

    The client can be injected; otherwise it is created on first use from
    ``api_key`` and closed by :meth:`aclose`.
    """

    provider = "openai"

    def __init__(
        self,
        client: openai.AsyncOpenAI | None = None,
        api_key: str | None = None,
        model: str = DEFAULT_OPENAI_MODEL,
    ) -> None:
        self.model = model
        self._client = client
        self._api_key = api_key
        self._owns_client = False

    def _get_client(self) -> openai.AsyncOpenAI:
        """Get or create the OpenAI client."""
        if self._client is None:
            if not self._api_key:
                raise RuntimeError("OPENAI_API_KEY environment variable not set")
            self._client = openai.AsyncOpenAI(api_key=self._api_key)
            self._owns_client = True
        return self._client

    async def generate(self, messages: list[dict[str, str]]) -> WorkflowGraph | None:
        client = self._get_client()
        try:
            completion = await client.chat.completions.parse(
                model=self.model,
                messages=messages,
                response_format=WorkflowDraft,
            )
        except (openai.LengthFinishReasonError, openai.ContentFilterFinishReasonError) as e:
            logger.warning("OpenAI stopped before finishing the workflow: %s", e)
            return None
        except ValidationError as e:
            logger.warning("OpenAI output did not match the workflow schema: %s", e)
            return None

        if not completion.choices:
            return None
        message = completion.choices[0].message
        draft = getattr(message, "parsed", None)
        if draft is None:
            refusal = getattr(message, "refusal", None)
            if refusal:
                logger.warning("OpenAI refused to produce a workflow: %s", refusal)
            return None
        return draft.to_workflow()

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.close()
            self._client = None
            self._owns_client = False


def build_workflow_tool() -> dict[str, Any]:
    """Tool definition whose input schema is the workflow draft."""
    return {
        "name": WORKFLOW_TOOL_NAME,
        "description": "Record the optimized agentic workflow.",
        "input_schema": draft_json_schema(),
    }


def extract_tool_input(content: list[Any]) -> dict | None:
    """Pull the workflow arguments out of Anthropic response content blocks."""
    for block in content or []:
        if getattr(block, "type", None) == "tool_use" and getattr(block, "name", None) == WORKFLOW_TOOL_NAME:
            payload = getattr(block, "input", None)
            if isinstance(payload, dict):
                return payload
    return None


class AnthropicWorkflowModel(WorkflowModel):
    """Anthropic structured output via a forced tool call."""

    provider = "anthropic"

    def __init__(
        self,
        client: anthropic.AsyncAnthropic | None = None,
        api_key: str | None = None,
        model: str = DEFAULT_ANTHROPIC_MODEL,
        max_tokens: int = 8192,
    ) -> None:
        self.model = model
        self.max_tokens = max_tokens
        self._client = client
        self._api_key = api_key
        self._owns_client = False

    def _get_client(self) -> anthropic.AsyncAnthropic:
        """Get or create the Anthropic client."""
        if self._client is None:
            if not self._api_key:
                raise RuntimeError("ANTHROPIC_API_KEY environment variable not set")
            self._client = anthropic.AsyncAnthropic(api_key=self._api_key)
            self._owns_client = True
        return self._client

    async def generate(self, messages: list[dict[str, str]]) -> WorkflowGraph | None:
        client = self._get_client()

        # anthropic takes the system prompt separately from the turns
        system = "\n\n".join(m["content"] for m in messages if m["role"] == "system")
        turns = [m for m in messages if m["role"] != "system"]

        response = await client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            system=system,
            messages=turns,
            tools=[build_workflow_tool()],
            tool_choice={"type": "tool", "name": WORKFLOW_TOOL_NAME},
        )

        payload = extract_tool_input(response.content)
        if payload is None:
            logger.warning("Anthropic response had no %s tool call", WORKFLOW_TOOL_NAME)
            return None
        try:
            draft = WorkflowDraft.model_validate(payload)
        except ValidationError as e:
            logger.warning("Anthropic output did not match the workflow schema: %s", e)
            return None
        return draft.to_workflow()

    async def aclose(self) -> None:
        if self._owns_client and self._client is not None:
            await self._client.close()
            self._client = None
            self._owns_client = False


def build_workflow_model(
    provider: str,
    api_key: str | None = None,
    model: str | None = None,
) -> WorkflowModel:
    """Create the adapter for ``provider`` ("openai" or "anthropic")."""
    provider_lower = provider.lower()

    if provider_lower == "openai":
        return OpenAIWorkflowModel(api_key=api_key, model=model or DEFAULT_OPENAI_MODEL)
    elif provider_lower == "anthropic":
        return AnthropicWorkflowModel(api_key=api_key, model=model or DEFAULT_ANTHROPIC_MODEL)
    else:
        raise ValueError(f"Unsupported provider: {provider}. Supported: openai, anthropic")
