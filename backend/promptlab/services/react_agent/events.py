"""
Progress events for a ReAct run.

The loop reports every transition to a ProgressReporter. The reporter keeps
the events in order and hands each one to an optional sink (usually
`asyncio.Queue.put_nowait` feeding the SSE response). The loop behaves the
same whether or not anybody consumes the events.
"""
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from .models import AgentRun, Step, ToolCall

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    START = "start"
    STEP_COMPLETE = "step_complete"
    TOOL_CALL = "tool_call"
    FINAL_RESULT = "final_result"
    DONE = "done"
    ERROR = "error"


TERMINAL_EVENTS = frozenset({EventType.DONE, EventType.ERROR})


@dataclass(frozen=True)
class AgentEvent:
    type: EventType
    payload: dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)

    @property
    def terminal(self) -> bool:
        return self.type in TERMINAL_EVENTS


class ProgressReporter:
    """Ordered, append-only event log with an optional non-blocking sink."""

    def __init__(self, sink: Callable[[AgentEvent], Any] | None = None):
        self.sink = sink
        self.events: list[AgentEvent] = []

    @property
    def closed(self) -> bool:
        return bool(self.events) and self.events[-1].terminal

    def emit(self, event_type: EventType, **payload) -> None:
        if self.closed:
            logger.warning(f"[ReAct] Dropping {event_type.value} event after terminal event")
            return

        event = AgentEvent(type=event_type, payload=payload)
        self.events.append(event)

        if self.sink is not None:
            try:
                self.sink(event)
            except Exception as e:
                logger.error(f"[ReAct] Progress sink failed on {event_type.value}: {e}")

    def start(self, run: AgentRun) -> None:
        self.emit(
            EventType.START,
            question=run.question,
            task_type=run.task_type,
            max_steps=run.max_steps,
        )

    def step_complete(self, step: Step) -> None:
        self.emit(EventType.STEP_COMPLETE, step=step)

    def tool_call(self, tool_call: ToolCall) -> None:
        self.emit(EventType.TOOL_CALL, tool_call=tool_call)

    def final_result(self, result) -> None:
        self.emit(EventType.FINAL_RESULT, result=result)

    def done(self) -> None:
        self.emit(EventType.DONE)

    def error(self, message: str) -> None:
        self.emit(EventType.ERROR, error=message)

    def types(self) -> list[EventType]:
        return [event.type for event in self.events]
