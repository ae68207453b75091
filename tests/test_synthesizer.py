from unittest.mock import AsyncMock

import pytest

from promptlab.config import get_settings
from promptlab.prompts.react_agent import FINAL_ANSWER_SYSTEM_PROMPT
from promptlab.services.react_agent.errors import OracleError, SynthesisError
from promptlab.services.react_agent.models import Step
from promptlab.services.react_agent.synthesizer import (
    format_steps_for_synthesis,
    summarize_reasoning,
    synthesize_final_answer,
)


@pytest.fixture
def steps():
    return [
        Step(1, "Search the plains", "search", "high plains", "High Plains refers to...", 0.0),
        Step(2, "Check elevation", "knowledge", "elevation", "Elevation is usually...", 1.0),
    ]


@pytest.fixture
def oracle():
    mock = AsyncMock()
    mock.generate.return_value = "  The High Plains rise from 1,800 to 7,000 ft.  "
    return mock


def test_format_includes_every_step(steps):
    text = format_steps_for_synthesis(steps)
    assert "Step 1: Search the plains\nAction: search(high plains)\nObservation: High Plains refers to..." in text
    assert "Step 2: Check elevation" in text


@pytest.mark.asyncio
async def test_synthesize_uses_reduced_temperature(steps, oracle):
    answer = await synthesize_final_answer("How high?", steps, oracle=oracle)

    assert answer == "The High Plains rise from 1,800 to 7,000 ft."
    oracle.generate.assert_awaited_once()
    args, kwargs = oracle.generate.call_args
    assert args[0] == FINAL_ANSWER_SYSTEM_PROMPT
    assert "Original question: How high?" in args[1]
    assert "Step 2: Check elevation" in args[1]
    assert kwargs["temperature"] == get_settings().react_synthesis_temperature
    assert kwargs["max_tokens"] == get_settings().react_synthesis_max_tokens


@pytest.mark.asyncio
async def test_synthesize_propagates_oracle_failure(steps, oracle):
    oracle.generate.side_effect = ConnectionError("offline")
    with pytest.raises(SynthesisError, match="offline") as exc_info:
        await synthesize_final_answer("How high?", steps, oracle=oracle)
    assert isinstance(exc_info.value, OracleError)


@pytest.mark.asyncio
async def test_synthesize_rejects_blank_answer(steps, oracle):
    oracle.generate.return_value = "   "
    with pytest.raises(SynthesisError, match="empty"):
        await synthesize_final_answer("How high?", steps, oracle=oracle)


def test_summarize_reasoning(steps):
    assert summarize_reasoning(steps) == "Reasoning path: 1. Search the plains → 2. Check elevation"
    assert summarize_reasoning([]) == "No reasoning performed"


def test_summarize_reasoning_truncates_long_thoughts():
    step = Step(1, "x" * 150, "search", "q", "o", 0.0)
    assert summarize_reasoning([step]) == "Reasoning path: 1. " + "x" * 100 + "..."
