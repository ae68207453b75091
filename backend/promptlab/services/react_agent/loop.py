"""
ReAct Loop Engine - Implements the Thought/Action/Observation reasoning loop.

Each iteration sends the question plus every previous step to the model,
parses one Thought/Action/Action Input triple and either finishes (action
`finish`) or runs the tool and records its output as the observation. If the
step budget runs out first, the final answer is synthesized from the
transcript.
"""
import asyncio
import logging
import time

from promptlab.config import get_settings
from promptlab.prompts.react_agent import (
    REACT_SYSTEM_PROMPT,
    REACT_STEP_PROMPT,
    REACT_TRANSCRIPT_HEADER,
    REACT_TRANSCRIPT_STEP,
    REACT_TASK_COMPLETE,
)
from .dispatcher import ActionDispatcher
from .errors import OracleError, ReactAgentError, RunCancelled
from .events import ProgressReporter
from .models import FINISH_ACTION, AgentRun, ReactResult, RunState, Step, TaskType
from .parser import ParseDefaults, parse_step
from .synthesizer import summarize_reasoning, synthesize_final_answer
from .tools import ToolRegistry, format_tools_for_prompt, get_task_profile

logger = logging.getLogger(__name__)
settings = get_settings()


def build_system_prompt(registry: ToolRegistry, task_type: TaskType, available_tools) -> str:
    profile = get_task_profile(task_type)
    return REACT_SYSTEM_PROMPT.format(
        task_label=profile.label,
        task_description=profile.description,
        typical_thoughts=profile.typical_thoughts,
        tool_descriptions=format_tools_for_prompt(registry, available_tools),
    )


def format_transcript(steps: list[Step]) -> str:
    if not steps:
        return ""
    return REACT_TRANSCRIPT_HEADER + "".join(
        REACT_TRANSCRIPT_STEP.format(
            n=step.step_number,
            thought=step.thought,
            action=step.action,
            action_input=step.action_input,
            observation=step.observation,
        )
        for step in steps
    )


def build_step_prompt(question: str, steps: list[Step]) -> str:
    return REACT_STEP_PROMPT.format(
        question=question,
        transcript=format_transcript(steps),
        step_number=len(steps) + 1,
    )


def _check_cancelled(cancel_event: asyncio.Event | None, run: AgentRun) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise RunCancelled(f"Run cancelled after {len(run.steps)} steps")


async def run_react_agent(
    question: str,
    task_type: TaskType | str,
    max_steps: int,
    available_tools,
    *,
    oracle,
    registry: ToolRegistry,
    reporter: ProgressReporter | None = None,
    cancel_event: asyncio.Event | None = None,
    temperature: float | None = None,
    parse_defaults: ParseDefaults | None = None,
) -> ReactResult:
    """
    Run the ReAct agent loop.

    Args:
        question: The user's question
        task_type: Kind of task; picks the prompt profile
        max_steps: Maximum thought/action cycles
        available_tools: Tool names the model may use this run
        oracle: Text generation backend (see services.llm.Oracle)
        registry: Tool catalog
        reporter: Receives progress events; a private one is used if omitted
        cancel_event: Checked between steps; when set the run stops
        temperature: Sampling temperature for step generation
        parse_defaults: Values used when the model output is malformed

    Returns:
        ReactResult with the finished AgentRun

    Raises:
        ReactAgentError: OracleError, SynthesisError or RunCancelled. An
            `error` event has been emitted by the time it propagates.
    """
    start_time = time.time()
    reporter = reporter or ProgressReporter()
    parse_defaults = parse_defaults or ParseDefaults.from_settings()

    unknown = [name for name in available_tools if name not in registry]
    if unknown:
        raise ValueError(f"Unknown tools requested: {unknown}")

    run = AgentRun(
        question=question,
        task_type=task_type,
        max_steps=max_steps,
        available_tools=tuple(available_tools),
    )
    dispatcher = ActionDispatcher(registry, run.available_tools)
    system_prompt = build_system_prompt(registry, run.task_type, run.available_tools)

    logger.info(f"[ReAct] Starting agent ({run.task_type.value}, max {max_steps} steps): {question[:80]}...")
    reporter.start(run)

    try:
        while run.state == RunState.RUNNING and len(run.steps) < run.max_steps:
            _check_cancelled(cancel_event, run)

            step_number = run.next_step_number
            logger.info(f"[ReAct] Step {step_number}/{run.max_steps}")

            try:
                text = await oracle.generate(
                    system_prompt,
                    build_step_prompt(run.question, run.steps),
                    temperature=temperature,
                )
            except Exception as e:
                raise OracleError(f"LLM call failed at step {step_number}: {e}") from e

            parsed = parse_step(text, parse_defaults)
            logger.debug(f"[ReAct] Thought: {parsed.thought[:200]}")
            logger.info(f"[ReAct] Action: {parsed.action}[{parsed.action_input[:100]}]")

            if parsed.action == FINISH_ACTION:
                step = Step(
                    step_number=step_number,
                    thought=parsed.thought,
                    action=parsed.action,
                    action_input=parsed.action_input,
                    observation=REACT_TASK_COMPLETE,
                    timestamp=time.time(),
                )
                run.record_step(step)
                run.finish(parsed.action_input)
                reporter.step_complete(step)
                logger.info(f"[ReAct] Agent finished at step {step_number}")
                break

            tool_call = await dispatcher.dispatch(parsed.action, parsed.action_input)
            step = Step(
                step_number=step_number,
                thought=parsed.thought,
                action=parsed.action,
                action_input=parsed.action_input,
                observation=tool_call.output,
                timestamp=time.time(),
            )
            run.record_step(step, tool_call)
            reporter.step_complete(step)
            reporter.tool_call(tool_call)

        if not run.finished:
            run.state = RunState.EXHAUSTED
            logger.info(f"[ReAct] Step budget of {run.max_steps} exhausted, synthesizing answer")
            _check_cancelled(cancel_event, run)
            answer = await synthesize_final_answer(run.question, run.steps, oracle=oracle)
            run.finish(answer, RunState.EXHAUSTED)

    except ReactAgentError as e:
        logger.error(f"[ReAct] Run failed: {e}")
        reporter.error(str(e))
        raise

    total_duration_ms = int((time.time() - start_time) * 1000)
    result = ReactResult(
        run=run,
        model=getattr(oracle, "model", settings.model_react),
        reasoning=summarize_reasoning(run.steps),
        total_duration_ms=total_duration_ms,
    )

    logger.info(f"[ReAct] Completed in {total_duration_ms}ms, {len(run.steps)} steps, "
                f"tools used: {run.used_tools}")

    reporter.final_result(result)
    reporter.done()
    return result
