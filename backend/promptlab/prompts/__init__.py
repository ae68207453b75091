"""
Centralized prompts for promptlab.

All prompts are organized by component:
- react_agent: ReAct loop step prompts and fallback answer synthesis
"""

from promptlab.prompts.react_agent import (
    REACT_SYSTEM_PROMPT,
    REACT_STEP_PROMPT,
    REACT_TRANSCRIPT_HEADER,
    REACT_TRANSCRIPT_STEP,
    REACT_TASK_COMPLETE,
    FINAL_ANSWER_SYSTEM_PROMPT,
    FINAL_ANSWER_PROMPT,
    FINAL_ANSWER_STEP,
)

__all__ = [
    # ReAct Agent
    "REACT_SYSTEM_PROMPT",
    "REACT_STEP_PROMPT",
    "REACT_TRANSCRIPT_HEADER",
    "REACT_TRANSCRIPT_STEP",
    "REACT_TASK_COMPLETE",
    # Fallback synthesis
    "FINAL_ANSWER_SYSTEM_PROMPT",
    "FINAL_ANSWER_PROMPT",
    "FINAL_ANSWER_STEP",
]
