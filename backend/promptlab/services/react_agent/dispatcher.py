"""
Action dispatcher - runs the tool named by the model and records the call.

A failing or unknown tool never aborts the run: the failure becomes the
observation for the next step so the model can correct itself.
"""
import logging
import time

from .models import ToolCall
from .tools import ToolRegistry

logger = logging.getLogger(__name__)


class ActionDispatcher:
    """Routes actions to the tools offered for one run."""

    def __init__(self, registry: ToolRegistry, available_tools):
        self.registry = registry
        self.available_tools = frozenset(available_tools)

    async def dispatch(self, action: str, action_input: str) -> ToolCall:
        start = time.perf_counter()

        tool = self.registry.lookup(action) if action in self.available_tools else None
        if tool is None or not tool.invokable:
            logger.warning(f"[ReAct] Unknown action: {action}")
            return ToolCall(
                tool_name=action,
                input=action_input,
                output=f"Unknown action: {action}",
                success=False,
                duration_ms=_elapsed_ms(start),
            )

        try:
            output = await tool.invoke(action_input)
        except Exception as e:
            logger.warning(f"[ReAct] Tool {action} failed: {e}")
            return ToolCall(
                tool_name=action,
                input=action_input,
                output=f"Tool execution error: {e}",
                success=False,
                duration_ms=_elapsed_ms(start),
            )

        output = "" if output is None else str(output)
        logger.debug(f"[ReAct] Observation from {action}: {output[:200]}")
        return ToolCall(
            tool_name=action,
            input=action_input,
            output=output,
            success=True,
            duration_ms=_elapsed_ms(start),
        )


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)
