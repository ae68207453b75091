"""
ReAct Agent API routes - Reasoning + Acting question answering.

`POST /run` either streams progress as server-sent events (default) or
returns the finished run as one JSON body.
"""
import asyncio
import json
import logging
from typing import AsyncIterator, Callable

from fastapi import APIRouter, Depends, HTTPException
from sse_starlette.sse import EventSourceResponse

from promptlab.config import get_settings
from promptlab.schemas import (
    ReactRequest,
    ReactResponse,
    StepInfo,
    TaskTypeInfo,
    ToolCallInfo,
    ToolInfo,
)
from promptlab.services.llm import ChatOracle, Oracle
from promptlab.services.react_agent import (
    TASK_PROFILES,
    AgentEvent,
    EventType,
    OracleError,
    ProgressReporter,
    RunCancelled,
    ToolRegistry,
    get_tool_registry,
    run_react_agent,
)

logger = logging.getLogger(__name__)
router = APIRouter()
settings = get_settings()


def get_oracle_factory() -> Callable[[str | None], Oracle]:
    """Builds the oracle for a request; overridden in tests."""
    return lambda model_name: ChatOracle(model=model_name)


def resolve_tools(request: ReactRequest, registry: ToolRegistry) -> list[str]:
    """Validate requested tools, falling back to the task type's preferred tools."""
    if not request.available_tools:
        return list(TASK_PROFILES[request.task_type].preferred_tools)

    unknown = [name for name in request.available_tools if name not in registry]
    if unknown:
        raise HTTPException(
            status_code=400,
            detail=f"Unknown tools: {', '.join(unknown)}. Available: {', '.join(registry.names())}"
        )
    return list(dict.fromkeys(request.available_tools))


def event_to_message(event: AgentEvent) -> dict:
    """Convert a progress event into the JSON sent to the client."""
    payload = event.payload
    message = {"type": event.type.value}

    if event.type == EventType.START:
        message.update({
            "message": "Starting ReAct reasoning...",
            "question": payload["question"],
            "taskType": payload["task_type"].value,
            "maxSteps": payload["max_steps"],
        })
    elif event.type == EventType.STEP_COMPLETE:
        message["step"] = StepInfo.from_step(payload["step"]).model_dump(by_alias=True)
    elif event.type == EventType.TOOL_CALL:
        message["toolCall"] = ToolCallInfo.from_tool_call(payload["tool_call"]).model_dump(by_alias=True)
    elif event.type == EventType.FINAL_RESULT:
        message["result"] = ReactResponse.from_result(payload["result"]).model_dump(mode="json", by_alias=True)
    elif event.type == EventType.ERROR:
        message["error"] = payload["error"]

    return message


async def stream_react_events(
    request: ReactRequest,
    tools: list[str],
    oracle: Oracle,
    registry: ToolRegistry,
) -> AsyncIterator[dict]:
    """
    Run the agent in a background task and yield its events as SSE messages.

    Stops after the terminal event. If the client goes away first, the run is
    cancelled at its next step boundary.
    """
    queue: asyncio.Queue[AgentEvent] = asyncio.Queue()
    cancel_event = asyncio.Event()
    reporter = ProgressReporter(sink=queue.put_nowait)

    def on_done(task: asyncio.Task) -> None:
        # Guarantee a terminal event even if the run died without reporting one
        if task.cancelled():
            if not reporter.closed:
                reporter.error("ReAct run was cancelled")
            return
        exc = task.exception()
        if exc is not None and not reporter.closed:
            logger.error(f"[ReAct] Unexpected run failure: {exc}")
            reporter.error(f"ReAct processing failed: {exc}")

    task = asyncio.create_task(
        run_react_agent(
            question=request.question,
            task_type=request.task_type,
            max_steps=request.max_steps,
            available_tools=tools,
            oracle=oracle,
            registry=registry,
            reporter=reporter,
            cancel_event=cancel_event,
            temperature=request.temperature,
        )
    )
    task.add_done_callback(on_done)

    try:
        while True:
            event = await queue.get()
            yield {"event": event.type.value, "data": json.dumps(event_to_message(event), ensure_ascii=False)}
            if event.terminal:
                break
    finally:
        if not task.done():
            logger.info("[ReAct] Client disconnected, cancelling run")
            cancel_event.set()


@router.post("/run", response_model=ReactResponse)
async def react_run(
    request: ReactRequest,
    oracle_factory: Callable[[str | None], Oracle] = Depends(get_oracle_factory),
    registry: ToolRegistry = Depends(get_tool_registry),
):
    """
    Answer a question with the ReAct loop.

    The model alternates Thought / Action / Action Input; each action runs a
    (simulated) tool whose output becomes the next Observation. The loop ends
    on the `finish` action or when maxSteps is reached, in which case the
    answer is synthesized from the steps taken.

    With stream=true (default) progress arrives as SSE messages:
    start, step_complete, tool_call, final_result, done (or error).
    """
    logger.info(f"[ReAct] Request: task_type={request.task_type.value}, max_steps={request.max_steps}, "
                f"question={request.question[:50]}...")

    tools = resolve_tools(request, registry)
    oracle = oracle_factory(request.model_name)

    if request.stream:
        return EventSourceResponse(stream_react_events(request, tools, oracle, registry))

    try:
        result = await run_react_agent(
            question=request.question,
            task_type=request.task_type,
            max_steps=request.max_steps,
            available_tools=tools,
            oracle=oracle,
            registry=registry,
            temperature=request.temperature,
        )
    except OracleError as e:
        raise HTTPException(
            status_code=502,
            detail=f"ReAct agent could not reach the language model: {e}"
        )
    except RunCancelled as e:
        raise HTTPException(status_code=503, detail=str(e))
    except Exception as e:
        logger.error(f"[ReAct] Error: {e}")
        import traceback
        logger.debug(f"[ReAct] Traceback: {traceback.format_exc()}")
        raise HTTPException(
            status_code=500,
            detail=f"ReAct agent execution failed: {str(e)}"
        )

    return ReactResponse.from_result(result)


@router.get("/tools", response_model=list[ToolInfo])
async def list_tools(registry: ToolRegistry = Depends(get_tool_registry)) -> list[ToolInfo]:
    """Tools the agent can be offered."""
    return [
        ToolInfo(
            name=tool.name,
            description=tool.description,
            usage=tool.usage,
            examples=list(tool.examples)
        )
        for tool in registry
    ]


@router.get("/task-types", response_model=list[TaskTypeInfo])
async def list_task_types() -> list[TaskTypeInfo]:
    """Task types with their preferred tools."""
    return [
        TaskTypeInfo(
            task_type=task_type,
            label=profile.label,
            description=profile.description,
            preferred_tools=list(profile.preferred_tools),
            typical_thoughts=profile.typical_thoughts
        )
        for task_type, profile in TASK_PROFILES.items()
    ]
