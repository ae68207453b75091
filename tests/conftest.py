"""
Shared fixtures: a scripted oracle standing in for the language model and
tool registries with extra test tools.
"""
import pytest

from promptlab.prompts.react_agent import FINAL_ANSWER_SYSTEM_PROMPT
from promptlab.services.react_agent.tools import DEFAULT_TOOLS, Tool, ToolRegistry, build_default_registry

KEEP_SEARCHING = "Thought: I need more information.\nAction: search\nAction Input: more details"


def reply(thought: str, action: str, action_input: str) -> str:
    return f"Thought: {thought}\nAction: {action}\nAction Input: {action_input}"


class ScriptedOracle:
    """Returns canned step responses in order; exceptions in the script are raised."""

    model = "scripted-model"

    def __init__(self, responses=(), synthesis="Synthesized answer"):
        self.responses = list(responses)
        self.synthesis = synthesis
        self.calls = []
        self.synthesis_calls = []

    async def generate(self, system_prompt, prompt, *, temperature=None, max_tokens=None):
        call = {
            "system_prompt": system_prompt,
            "prompt": prompt,
            "temperature": temperature,
            "max_tokens": max_tokens,
        }
        if system_prompt == FINAL_ANSWER_SYSTEM_PROMPT:
            self.synthesis_calls.append(call)
            if isinstance(self.synthesis, Exception):
                raise self.synthesis
            return self.synthesis

        self.calls.append(call)
        response = self.responses.pop(0) if self.responses else KEEP_SEARCHING
        if isinstance(response, Exception):
            raise response
        return response


async def broken_tool(query: str) -> str:
    raise RuntimeError("boom")


@pytest.fixture
def make_reply():
    return reply


@pytest.fixture
def make_oracle():
    return ScriptedOracle


@pytest.fixture
def registry() -> ToolRegistry:
    return build_default_registry()


@pytest.fixture
def registry_with_broken_tool() -> ToolRegistry:
    broken = Tool(
        name="broken",
        description="Always fails",
        usage="broken[anything]",
        invoke=broken_tool,
    )
    return ToolRegistry(DEFAULT_TOOLS + (broken,))
