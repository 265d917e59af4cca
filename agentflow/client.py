"""HTTP client for the workflow optimizer API.

Sends a prompt (and the previous workflow, for refinements) to
``POST /api/optimize`` and returns the validated WorkflowGraph.
"""

from __future__ import annotations

from typing import Any

import httpx

from agentflow.models.workflow import WorkflowGraph
from agentflow.validation import WorkflowValidationError, validate_workflow

DEFAULT_SERVER_URL = "http://localhost:3001"
FALLBACK_ERROR = "An unexpected error occurred"


class OptimizeRequestError(Exception):
    """Exception raised when an optimize request fails.

    The message is the server's ``error`` string, suitable for showing
    to the user as-is.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.status_code = status_code


class WorkflowClient:
    """Talk to the optimizer server."""

    def __init__(
        self,
        base_url: str = DEFAULT_SERVER_URL,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Args:
            base_url: Base URL of the optimizer server
            timeout: HTTP timeout in seconds; None waits for the model
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    def optimize(self, prompt: str, previous_workflow: WorkflowGraph | dict | None = None) -> WorkflowGraph:
        """Request an optimized workflow.

        Args:
            prompt: Workflow description or adjustment request
            previous_workflow: The workflow to refine, if any

        Returns:
            The WorkflowGraph returned by the server

        Raises:
            OptimizeRequestError: on a non-2xx response or transport failure
        """
        body: dict[str, Any] = {"prompt": prompt}
        # absent rather than null when there is nothing to refine
        if previous_workflow is not None:
            if isinstance(previous_workflow, WorkflowGraph):
                previous_workflow = previous_workflow.to_payload()
            body["previousWorkflow"] = previous_workflow

        try:
            with httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport,
            ) as client:
                response = client.post("/api/optimize", json=body)
        except httpx.RequestError as e:
            raise OptimizeRequestError(
                f"Failed to connect to server at {self.base_url}: {e}"
            ) from e

        data = _decode(response)

        if not response.is_success:
            error = data.get("error") if isinstance(data, dict) else None
            code = data.get("code") if isinstance(data, dict) else None
            raise OptimizeRequestError(
                error or FALLBACK_ERROR,
                code=code,
                status_code=response.status_code,
            )

        try:
            return validate_workflow(data)
        except WorkflowValidationError as e:
            raise OptimizeRequestError(
                f"Server returned an invalid workflow: {e}",
                status_code=response.status_code,
            ) from e


def _decode(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None
