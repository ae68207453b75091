"""
Fallback answer synthesis for runs that hit the step budget without finishing.
"""
import logging

from promptlab.config import get_settings
from promptlab.prompts.react_agent import (
    FINAL_ANSWER_SYSTEM_PROMPT,
    FINAL_ANSWER_PROMPT,
    FINAL_ANSWER_STEP,
)
from .errors import SynthesisError
from .models import Step

logger = logging.getLogger(__name__)
settings = get_settings()

SUMMARY_THOUGHT_CHARS = 100


def format_steps_for_synthesis(steps: list[Step]) -> str:
    return "\n\n".join(
        FINAL_ANSWER_STEP.format(
            n=step.step_number,
            thought=step.thought,
            action=step.action,
            action_input=step.action_input,
            observation=step.observation,
        )
        for step in steps
    )


async def synthesize_final_answer(
    question: str,
    steps: list[Step],
    *,
    oracle,
    temperature: float | None = None,
    max_tokens: int | None = None,
) -> str:
    """
    Ask the model for a best-effort answer from the whole transcript.

    There is no further fallback: an oracle failure or an empty answer raises
    SynthesisError.
    """
    prompt = FINAL_ANSWER_PROMPT.format(
        question=question,
        steps=format_steps_for_synthesis(steps),
    )

    logger.info(f"[ReAct] Synthesizing final answer from {len(steps)} steps")

    try:
        answer = await oracle.generate(
            FINAL_ANSWER_SYSTEM_PROMPT,
            prompt,
            temperature=settings.react_synthesis_temperature if temperature is None else temperature,
            max_tokens=max_tokens or settings.react_synthesis_max_tokens,
        )
    except Exception as e:
        raise SynthesisError(f"Final answer synthesis failed: {e}") from e

    answer = (answer or "").strip()
    if not answer:
        raise SynthesisError("Final answer synthesis returned an empty answer")
    return answer


def summarize_reasoning(steps: list[Step]) -> str:
    """One-line reasoning path: '1. first thought → 2. second thought'."""
    if not steps:
        return "No reasoning performed"

    parts = []
    for step in steps:
        thought = step.thought
        if len(thought) > SUMMARY_THOUGHT_CHARS:
            thought = thought[:SUMMARY_THOUGHT_CHARS] + "..."
        parts.append(f"{step.step_number}. {thought}")
    return "Reasoning path: " + " → ".join(parts)
