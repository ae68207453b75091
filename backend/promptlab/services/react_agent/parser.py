"""
Step parser - pulls Thought / Action / Action Input out of the model's text.

The model is asked to answer in the form

    Thought: <reasoning>
    Action: <tool name>
    Action Input: <argument>

Anything that cannot be read falls back to a fixed default so the loop always
gets a usable step. `ParsedStep.outcome` tells callers whether that happened.
"""
import logging
import re
from dataclasses import dataclass
from enum import Enum

from promptlab.config import get_settings

logger = logging.getLogger(__name__)

_THOUGHT_RE = re.compile(
    r"^[ \t*#]*Thought\s*\d*\s*:\**\s*(.*?)(?=^[ \t*#]*Action\s*\d*\s*:|^[ \t*#]*Action\s+Input\s*\d*\s*:|\Z)",
    re.IGNORECASE | re.DOTALL | re.MULTILINE,
)
_ACTION_RE = re.compile(
    r"^[ \t*#]*Action\s*\d*\s*:\**\s*(.*?)(?=^[ \t*#]*Action\s+Input\s*\d*\s*:|^[ \t*#]*Observation\s*\d*\s*:|\Z)",
    re.IGNORECASE | re.DOTALL | re.MULTILINE,
)
_ACTION_INPUT_RE = re.compile(
    r"^[ \t*#]*Action\s+Input\s*\d*\s*:\**\s*(.*?)(?=^[ \t*#]*Observation\s*\d*\s*:|\Z)",
    re.IGNORECASE | re.DOTALL | re.MULTILINE,
)
# Usage syntax: search[query]
_CALL_SYNTAX_RE = re.compile(r"^([A-Za-z_][\w-]*)\s*\[(.*)\]$", re.DOTALL)


class ParseOutcome(str, Enum):
    PARSED = "parsed"          # Every field came from the model output
    DEFAULTED = "defaulted"    # At least one field used its default


@dataclass(frozen=True)
class ParseDefaults:
    thought: str = "Continue analyzing the problem."
    action: str = "search"
    action_input: str = ""

    @classmethod
    def from_settings(cls) -> "ParseDefaults":
        settings = get_settings()
        return cls(
            thought=settings.react_default_thought,
            action=settings.react_default_action,
            action_input=settings.react_default_action_input,
        )


@dataclass(frozen=True)
class ParsedStep:
    thought: str
    action: str
    action_input: str
    defaulted: frozenset[str] = frozenset()

    @property
    def outcome(self) -> ParseOutcome:
        return ParseOutcome.DEFAULTED if self.defaulted else ParseOutcome.PARSED


def _clean_action(raw: str) -> str:
    """First line only, lower case, without surrounding quotes, brackets or markdown."""
    lines = raw.strip().splitlines()
    first_line = lines[0] if lines else ""
    return first_line.strip().strip("`'\"*.[]").strip().lower()


def _strip_wrapping(text: str) -> str:
    text = text.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "\"'`":
        text = text[1:-1].strip()
    return text


def parse_step(text: str | None, defaults: ParseDefaults | None = None) -> ParsedStep:
    """
    Parse one model response into thought, action and action input.

    Never raises: missing or empty fields take the values in `defaults`.
    """
    defaults = defaults or ParseDefaults()
    text = (text or "").replace("\r\n", "\n")

    thought_match = _THOUGHT_RE.search(text)
    action_match = _ACTION_RE.search(text)
    input_match = _ACTION_INPUT_RE.search(text)

    thought = thought_match.group(1).strip() if thought_match else ""
    raw_action = action_match.group(1).strip() if action_match else ""
    action_input = _strip_wrapping(input_match.group(1)) if input_match else None

    # "Action: search[query]" with no separate Action Input label
    action = _clean_action(raw_action)
    call = _CALL_SYNTAX_RE.match(raw_action.splitlines()[0].strip().strip("`")) if raw_action else None
    if call:
        action = call.group(1).lower()
        if action_input is None:
            action_input = call.group(2).strip()

    defaulted = set()
    if not thought:
        thought = defaults.thought
        defaulted.add("thought")
    if not action:
        action = defaults.action
        defaulted.add("action")
    if action_input is None:
        action_input = defaults.action_input
        defaulted.add("action_input")

    if defaulted:
        logger.debug(f"[ReAct] Parse used defaults for {sorted(defaulted)}: {text[:120]!r}")

    return ParsedStep(
        thought=thought,
        action=action,
        action_input=action_input,
        defaulted=frozenset(defaulted),
    )
