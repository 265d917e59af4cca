"""Client-side conversation state for iterative workflow refinement.

A session sequences optimize calls: each successful answer becomes the
context for the next prompt, and only successful turns enter history.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable

from agentflow.models.conversation import ConversationTurn
from agentflow.models.workflow import WorkflowEdge, WorkflowGraph, WorkflowNode

logger = logging.getLogger(__name__)

OptimizeFn = Callable[[str, "WorkflowGraph | None"], WorkflowGraph]


class ConversationSession:
    """State machine around one refinable conversation.

    Only one request may be in flight, across threads too: submitting while
    ``loading`` is a no-op rather than a queued or parallel call.
    """

    def __init__(self, optimize: OptimizeFn) -> None:
        """
        Args:
            optimize: Callable taking (prompt, previous_workflow) and
                returning a WorkflowGraph, e.g. ``WorkflowClient.optimize``
        """
        self._optimize = optimize
        self._in_flight = threading.Lock()
        self.reset()

    def reset(self) -> None:
        """Return to the empty initial state."""
        self.nodes: list[WorkflowNode] = []
        self.edges: list[WorkflowEdge] = []
        self.description: str = ""
        self.step_details: dict[str, str] = {}
        self.history: list[ConversationTurn] = []
        self.current_workflow: WorkflowGraph | None = None
        self.loading: bool = False
        self.error: str | None = None

    @property
    def latest_turn(self) -> ConversationTurn | None:
        return self.history[-1] if self.history else None

    @property
    def has_workflow(self) -> bool:
        return len(self.nodes) > 0

    def submit(self, prompt: str) -> WorkflowGraph | None:
        """Send ``prompt`` with the current workflow as context.

        Returns:
            The new workflow, or None if the request was ignored or failed
            (see ``error`` for the failure message)
        """
        if not self._in_flight.acquire(blocking=False):
            logger.debug("Ignoring submit while a request is in flight")
            return None

        self.loading = True
        self.error = None
        try:
            workflow = self._optimize(prompt, self.current_workflow)
        except Exception as e:
            self.error = str(e)
            logger.info("Optimize request failed: %s", self.error)
            return None
        else:
            self._show(workflow)
            self.current_workflow = workflow
            self.history.append(ConversationTurn(prompt=prompt, workflow=workflow))
            return workflow
        finally:
            self.loading = False
            self._in_flight.release()

    def _show(self, workflow: WorkflowGraph) -> None:
        self.nodes = list(workflow.nodes)
        self.edges = list(workflow.edges)
        self.description = workflow.description
        self.step_details = dict(workflow.step_details)
