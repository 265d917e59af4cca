"""Tests for prompt construction."""

import json

import pytest

from agentflow.errors import INVALID_INPUT, InvalidInputError
from agentflow.prompts import SYSTEM_PROMPT, build_messages, build_user_content, clean_prompt


class TestCleanPrompt:
    """Only non-blank strings are accepted."""

    @pytest.mark.parametrize("prompt", [None, "", "   ", "\n\t ", 42, ["list"]])
    def test_rejects_missing_or_blank(self, prompt):
        with pytest.raises(InvalidInputError) as exc_info:
            clean_prompt(prompt)
        assert exc_info.value.code == INVALID_INPUT
        assert exc_info.value.status_code == 400

    def test_trims_whitespace(self):
        assert clean_prompt("  Optimize my hiring process \n") == "Optimize my hiring process"


class TestBuildMessages:
    """Test system and user turn construction."""

    def test_first_request_has_system_and_user_turns(self):
        messages = build_messages("Optimize my email triage process")

        assert messages[0] == {"role": "system", "content": SYSTEM_PROMPT}
        assert messages[1]["role"] == "user"
        assert messages[1]["content"] == "Workflow to optimize:\nOptimize my email triage process"

    def test_refinement_includes_previous_workflow(self, sample_payload):
        content = build_user_content("Add a memory step", sample_payload)

        assert content.startswith("Previous workflow:\n")
        assert json.dumps(sample_payload, indent=2) in content
        assert content.endswith("\n\nUser adjustment request:\nAdd a memory step")

    def test_refinement_accepts_graph_models(self, sample_workflow, sample_payload):
        """A WorkflowGraph serializes the same way as its JSON payload."""
        from_model = build_user_content("Add a memory step", sample_workflow)
        from_dict = build_user_content("Add a memory step", sample_payload)

        assert json.loads(from_model.split("\n", 1)[1].split("\n\nUser adjustment")[0]) == \
            json.loads(from_dict.split("\n", 1)[1].split("\n\nUser adjustment")[0])

    @pytest.mark.parametrize("previous", [None, "", 0, False])
    def test_empty_previous_workflow_is_ignored(self, previous):
        assert build_user_content("Do it", previous) == "Workflow to optimize:\nDo it"

    @pytest.mark.parametrize("previous, rendered", [({}, "{}"), ([], "[]")])
    def test_empty_containers_are_still_context(self, previous, rendered):
        """An empty object or list is sent along, like any other JSON value."""
        content = build_user_content("Do it", previous)

        assert content == f"Previous workflow:\n{rendered}\n\nUser adjustment request:\nDo it"

    def test_system_prompt_describes_output(self):
        for phrase in ("trigger, agent, tool, decision, output", "stepDetails", "120px", "200px"):
            assert phrase in SYSTEM_PROMPT
