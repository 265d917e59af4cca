"""Workflow optimization service.

Turns a natural-language workflow description (optionally plus the
previously returned workflow) into a validated WorkflowGraph using an
injected structured-output model. The service keeps no state between
calls; refinement context is whatever the caller passes back in.
"""

from __future__ import annotations

import logging
from typing import Any

from agentflow.errors import SchemaRefusalError, UpstreamError
from agentflow.llm import WorkflowModel
from agentflow.models.workflow import WorkflowGraph
from agentflow.prompts import build_messages, clean_prompt, has_previous_workflow
from agentflow.validation import check_integrity

logger = logging.getLogger(__name__)


class WorkflowOptimizer:
    """Optimize workflows with a structured-output model."""

    def __init__(self, model: WorkflowModel, strict_integrity: bool = False) -> None:
        """
        Args:
            model: Adapter that produces workflows from chat messages
            strict_integrity: Reject graphs with dangling references instead
                of only logging them
        """
        self.model = model
        self.strict_integrity = strict_integrity

    async def optimize(self, prompt: Any, previous_workflow: Any = None) -> WorkflowGraph:
        """Produce an optimized workflow for ``prompt``.

        Args:
            prompt: The user's workflow description or adjustment request
            previous_workflow: Workflow returned by an earlier call, sent
                back as context for a refinement

        Returns:
            The validated WorkflowGraph, unchanged from what the model produced

        Raises:
            InvalidInputError: prompt missing or blank (no model call made)
            SchemaRefusalError: the model produced no conformant workflow
            UpstreamError: the model call itself failed
        """
        cleaned = clean_prompt(prompt)
        messages = build_messages(cleaned, previous_workflow)

        logger.info(
            "Optimizing workflow via %s/%s (prompt_chars=%d, refinement=%s)",
            self.model.provider,
            self.model.model,
            len(cleaned),
            has_previous_workflow(previous_workflow),
        )

        try:
            workflow = await self.model.generate(messages)
        except Exception as e:
            logger.exception("%s error: %s", self.model.provider, e)
            raise UpstreamError() from e

        if workflow is None:
            logger.warning("Model returned no schema-conformant workflow")
            raise SchemaRefusalError()

        issues = check_integrity(workflow)
        for issue in issues:
            logger.warning("Workflow integrity: %s", issue.message)
        if issues and self.strict_integrity:
            raise SchemaRefusalError()

        logger.info(
            "Optimized workflow has %d nodes and %d edges",
            len(workflow.nodes),
            len(workflow.edges),
        )
        return workflow

    async def aclose(self) -> None:
        """Release the model's client."""
        await self.model.aclose()
