import asyncio

import pytest

from promptlab.services.react_agent.events import EventType, ProgressReporter
from promptlab.services.react_agent.models import AgentRun, Step, ToolCall


def make_run():
    return AgentRun(question="Q", task_type="general", max_steps=3, available_tools=("search",))


def test_reporter_records_events_in_order():
    reporter = ProgressReporter()
    step = Step(1, "t", "search", "q", "o", 0.0)
    call = ToolCall("search", "q", "o", True, 3)

    reporter.start(make_run())
    reporter.step_complete(step)
    reporter.tool_call(call)
    reporter.done()

    assert reporter.types() == [EventType.START, EventType.STEP_COMPLETE, EventType.TOOL_CALL, EventType.DONE]
    assert reporter.events[0].payload["max_steps"] == 3
    assert reporter.events[1].payload["step"] is step
    assert reporter.events[2].payload["tool_call"] is call
    assert reporter.closed


def test_nothing_is_emitted_after_terminal_event():
    reporter = ProgressReporter()
    reporter.start(make_run())
    reporter.error("oracle down")
    reporter.done()
    reporter.error("again")

    assert reporter.types() == [EventType.START, EventType.ERROR]
    assert reporter.events[-1].payload == {"error": "oracle down"}


def test_sink_receives_events():
    received = []
    reporter = ProgressReporter(sink=received.append)
    reporter.start(make_run())
    reporter.done()
    assert [event.type for event in received] == [EventType.START, EventType.DONE]


def test_failing_sink_does_not_break_reporting():
    def sink(event):
        raise RuntimeError("consumer gone")

    reporter = ProgressReporter(sink=sink)
    reporter.start(make_run())
    reporter.done()
    assert reporter.types() == [EventType.START, EventType.DONE]


@pytest.mark.asyncio
async def test_queue_sink_never_blocks():
    queue = asyncio.Queue()
    reporter = ProgressReporter(sink=queue.put_nowait)
    reporter.start(make_run())
    reporter.error("boom")

    assert queue.qsize() == 2
    assert (await queue.get()).type == EventType.START
    last = await queue.get()
    assert last.terminal
    assert last.type == EventType.ERROR
