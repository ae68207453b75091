"""
ReAct Agent - Reasoning and Acting loop over simulated tools.

This approach uses a thought/action/observation loop where the LLM:
1. Thinks about what to do next
2. Selects a tool and its input
3. Observes the result
4. Repeats until it calls `finish` or runs out of steps
"""

from .errors import OracleError, ReactAgentError, RunCancelled, SynthesisError
from .events import AgentEvent, EventType, ProgressReporter
from .loop import run_react_agent
from .models import FINISH_ACTION, AgentRun, ReactResult, RunState, Step, TaskType, ToolCall
from .tools import TASK_PROFILES, ToolRegistry, get_tool_registry

__all__ = [
    "run_react_agent",
    "AgentRun",
    "ReactResult",
    "RunState",
    "Step",
    "TaskType",
    "ToolCall",
    "FINISH_ACTION",
    "AgentEvent",
    "EventType",
    "ProgressReporter",
    "ToolRegistry",
    "get_tool_registry",
    "TASK_PROFILES",
    "ReactAgentError",
    "OracleError",
    "SynthesisError",
    "RunCancelled",
]
