"""
ReAct Agent Tools - Available actions the agent can take.

Each tool has:
- name: Unique identifier (what the model writes after "Action:")
- description: What the tool does (shown to LLM)
- usage: Call syntax, e.g. search[query]
- examples: Sample calls shown to the LLM
- invoke: Async function (input) -> output, may raise

The tools are simulated; there is no search engine or knowledge base
behind them. The registry is built once at startup and is read-only.
"""
import ast
import logging
import math
import operator
import re
from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import Awaitable, Callable, Iterator, Mapping

from .models import FINISH_ACTION, TaskType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Tool:
    """Definition of a ReAct tool."""
    name: str
    description: str
    usage: str
    examples: tuple[str, ...] = ()
    invoke: Callable[[str], Awaitable[str]] | None = field(default=None, compare=False)

    @property
    def invokable(self) -> bool:
        return self.invoke is not None


# =============================================================================
# TOOL IMPLEMENTATIONS
# =============================================================================

SEARCH_RESULTS = {
    "olivia wilde boyfriend": (
        "Olivia Wilde was engaged to Jason Sudeikis for years. After they split, "
        "she started dating Harry Styles."
    ),
    "harry styles age": "29 years old",
    "colorado orogeny": (
        "The Colorado orogeny was an episode of mountain building in Colorado "
        "and surrounding areas."
    ),
    "eastern sector": "The eastern sector extends into the High Plains and is called the Central Plains orogeny.",
    "high plains": "High Plains refers to one of two distinct land regions.",
    "high plains (united states)": (
        "The High Plains are a subregion of the Great Plains. From east to west, "
        "the High Plains rise in elevation from around 1,800 to 7,000 ft (550 to 2,130 m)."
    ),
}

KNOWLEDGE_BASE = {
    "elevation": "Elevation is usually given in meters above sea level and varies widely between regions.",
    "historical events": "Historical events need a specific time, place and people to be looked up accurately.",
    "people": "Looking up a person requires their full name and what you want to know about them.",
}


def _normalize_query(query: str) -> str:
    return " ".join(query.lower().split())


async def search(query: str) -> str:
    """Simulated web search over a small fixed result set."""
    query = query.strip()
    if not query:
        raise ValueError("search needs a query")
    hit = SEARCH_RESULTS.get(_normalize_query(query))
    if hit:
        return hit
    return f"Results for '{query}': found related information, but more specific queries are needed for details."


async def knowledge(query: str) -> str:
    """Simulated knowledge-base lookup."""
    query = query.strip()
    if not query:
        raise ValueError("knowledge needs a query")
    hit = KNOWLEDGE_BASE.get(_normalize_query(query))
    if hit:
        return hit
    return f"Knowledge base entry for '{query}': a related entry exists, search further for details."


async def lookup(query: str) -> str:
    """Simulated lookup inside the current document."""
    query = query.strip()
    if not query:
        raise ValueError("lookup needs a term to find")
    return f"Lookup '{query}': found matching text in the current document, continue analyzing with that context."


_BINARY_OPS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
    ast.FloorDiv: operator.floordiv,
    ast.Mod: operator.mod,
    ast.Pow: operator.pow,
}

_UNARY_OPS = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}

_FUNCTIONS = {
    "sqrt": math.sqrt,
    "abs": abs,
    "round": round,
    "log": math.log,
    "exp": math.exp,
}

_CONSTANTS = {
    "pi": math.pi,
    "e": math.e,
}

# Keep exponentiation from producing enormous integers
_MAX_EXPONENT = 1000
_MAX_RESULT_DIGITS = 4000  # below the interpreter's int-to-str digit limit


def _check_power(base, exponent) -> None:
    if abs(exponent) > _MAX_EXPONENT:
        raise ValueError(f"Exponent too large: {exponent}")
    if exponent > 0 and abs(base) > 1 and exponent * math.log10(abs(base)) > _MAX_RESULT_DIGITS:
        raise ValueError(f"Result too large: more than {_MAX_RESULT_DIGITS} digits")


def _evaluate(node: ast.AST) -> float:
    if isinstance(node, ast.Expression):
        return _evaluate(node.body)
    if isinstance(node, ast.Constant) and isinstance(node.value, (int, float)) and not isinstance(node.value, bool):
        return node.value
    if isinstance(node, ast.Name) and node.id in _CONSTANTS:
        return _CONSTANTS[node.id]
    if isinstance(node, ast.BinOp) and type(node.op) in _BINARY_OPS:
        left = _evaluate(node.left)
        right = _evaluate(node.right)
        if isinstance(node.op, ast.Pow):
            _check_power(left, right)
        return _BINARY_OPS[type(node.op)](left, right)
    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
        return _UNARY_OPS[type(node.op)](_evaluate(node.operand))
    if (
        isinstance(node, ast.Call)
        and isinstance(node.func, ast.Name)
        and node.func.id in _FUNCTIONS
        and not node.keywords
    ):
        args = [_evaluate(arg) for arg in node.args]
        return _FUNCTIONS[node.func.id](*args)
    raise ValueError(f"Unsupported expression element: {ast.dump(node)[:60]}")


def evaluate_expression(expression: str) -> float:
    """
    Evaluate an arithmetic expression without eval().

    Accepts + - * / // % ^ (as power), parentheses, sqrt/abs/round/log/exp
    and the constants pi and e. Raises ValueError for anything else.
    """
    cleaned = expression.strip().strip("`").replace("^", "**").replace("×", "*").replace("÷", "/")
    cleaned = re.sub(r"(?<=\d),(?=\d{3}\b)", "", cleaned)  # 1,000 -> 1000
    if not cleaned:
        raise ValueError("Empty expression")
    try:
        tree = ast.parse(cleaned, mode="eval")
    except SyntaxError as e:
        raise ValueError(f"Cannot parse expression '{expression}'") from e
    try:
        return _evaluate(tree)
    except (ArithmeticError, TypeError) as e:
        raise ValueError(f"Cannot evaluate expression '{expression}': {e}") from e


async def calculator(expression: str) -> str:
    result = evaluate_expression(expression)
    if isinstance(result, float) and result.is_integer() and abs(result) < 1e15:
        result = int(result)
    return f"Result: {result}"


# =============================================================================
# TOOL REGISTRY
# =============================================================================

DEFAULT_TOOLS = (
    Tool(
        name="search",
        description="Search for related information and knowledge.",
        usage="search[query]",
        examples=("search[Olivia Wilde boyfriend]", "search[Colorado orogeny]"),
        invoke=search,
    ),
    Tool(
        name="calculator",
        description="Evaluate a mathematical expression.",
        usage="calculator[expression]",
        examples=("calculator[29^0.23]", "calculator[sqrt(16) + 5]"),
        invoke=calculator,
    ),
    Tool(
        name="knowledge",
        description="Query the knowledge base for domain facts.",
        usage="knowledge[topic]",
        examples=("knowledge[elevation]", "knowledge[historical events]"),
        invoke=knowledge,
    ),
    Tool(
        name="lookup",
        description="Find a specific term in the current document or data.",
        usage="lookup[term]",
        examples=("lookup[eastern sector]", "lookup[elevation]"),
        invoke=lookup,
    ),
    Tool(
        name=FINISH_ACTION,
        description="Give the final answer and stop.",
        usage="finish[final answer]",
        examples=("finish[1,800 to 7,000 ft]", "finish[Harry Styles, 29]"),
    ),
)


class ToolRegistry:
    """Read-only name -> Tool catalog."""

    def __init__(self, tools):
        catalog = {}
        for tool in tools:
            if tool.name in catalog:
                raise ValueError(f"Duplicate tool name: {tool.name}")
            catalog[tool.name] = tool
        self._tools: Mapping[str, Tool] = MappingProxyType(catalog)

    def lookup(self, name: str) -> Tool | None:
        """Find a tool by name."""
        return self._tools.get(name)

    def names(self) -> tuple[str, ...]:
        return tuple(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __iter__(self) -> Iterator[Tool]:
        return iter(self._tools.values())

    def __len__(self) -> int:
        return len(self._tools)


def build_default_registry() -> ToolRegistry:
    return ToolRegistry(DEFAULT_TOOLS)


@lru_cache
def get_tool_registry() -> ToolRegistry:
    return build_default_registry()


# =============================================================================
# TASK PROFILES
# =============================================================================

@dataclass(frozen=True)
class TaskProfile:
    """How a kind of task is usually approached."""
    label: str
    description: str
    preferred_tools: tuple[str, ...]
    typical_thoughts: int


TASK_PROFILES: Mapping[TaskType, TaskProfile] = MappingProxyType({
    TaskType.KNOWLEDGE: TaskProfile(
        label="Knowledge-intensive",
        description="Question answering and fact verification that needs outside knowledge",
        preferred_tools=("search", "knowledge", "lookup", FINISH_ACTION),
        typical_thoughts=3,
    ),
    TaskType.DECISION: TaskProfile(
        label="Decision making",
        description="Complex tasks that need planning and choosing between options",
        preferred_tools=("search", "calculator", "lookup", FINISH_ACTION),
        typical_thoughts=2,
    ),
    TaskType.REASONING: TaskProfile(
        label="Reasoning",
        description="Problems that need logical reasoning and calculation",
        preferred_tools=("calculator", "knowledge", "search", FINISH_ACTION),
        typical_thoughts=4,
    ),
    TaskType.GENERAL: TaskProfile(
        label="General",
        description="Mixed questions of any kind",
        preferred_tools=("search", "calculator", "knowledge", "lookup", FINISH_ACTION),
        typical_thoughts=3,
    ),
})


def get_task_profile(task_type: TaskType | str) -> TaskProfile:
    return TASK_PROFILES[TaskType(task_type)]


def format_tools_for_prompt(registry: ToolRegistry, tool_names) -> str:
    """Format the offered tools for the system prompt. The finish tool is always listed."""
    names = list(dict.fromkeys(tool_names))
    if FINISH_ACTION not in names:
        names.append(FINISH_ACTION)

    lines = []
    for name in names:
        tool = registry.lookup(name)
        if tool is None:
            logger.warning(f"[ReAct] Skipping unknown tool in prompt: {name}")
            continue
        lines.append(f"- {tool.name}: {tool.description} (usage: {tool.usage})")
        if tool.examples:
            lines.append(f"  examples: {', '.join(tool.examples)}")
    return "\n".join(lines)
