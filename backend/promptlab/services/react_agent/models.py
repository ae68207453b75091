"""
State of a single ReAct run: the steps, the tool calls and the final answer.
"""
from dataclasses import dataclass, field
from enum import Enum

FINISH_ACTION = "finish"


class TaskType(str, Enum):
    """Kind of question being asked. Selects preferred tools; advisory only."""
    KNOWLEDGE = "knowledge"    # Fact lookup and verification
    DECISION = "decision"      # Planning / choosing between options
    REASONING = "reasoning"    # Logic and arithmetic
    GENERAL = "general"


class RunState(str, Enum):
    RUNNING = "running"
    FINISHED = "finished"      # Model emitted the finish action
    EXHAUSTED = "exhausted"    # Step budget spent without finishing


@dataclass
class Step:
    """A single thought/action/observation iteration."""
    step_number: int
    thought: str
    action: str
    action_input: str
    observation: str
    timestamp: float   # epoch seconds when the step completed


@dataclass
class ToolCall:
    """Record of one dispatched action."""
    tool_name: str
    input: str
    output: str
    success: bool
    duration_ms: int = 0


@dataclass
class AgentRun:
    """One invocation of the agent. Created per request, never shared."""
    question: str
    task_type: TaskType
    max_steps: int
    available_tools: tuple[str, ...]
    steps: list[Step] = field(default_factory=list)
    tool_calls: list[ToolCall] = field(default_factory=list)
    final_answer: str | None = None
    state: RunState = RunState.RUNNING

    def __post_init__(self):
        if self.max_steps < 1:
            raise ValueError(f"max_steps must be positive, got {self.max_steps}")
        self.task_type = TaskType(self.task_type)
        self.available_tools = tuple(dict.fromkeys(self.available_tools))

    @property
    def finished(self) -> bool:
        return self.final_answer is not None

    @property
    def next_step_number(self) -> int:
        return len(self.steps) + 1

    @property
    def used_tools(self) -> list[str]:
        """Distinct tool names across tool calls, in first-use order."""
        return list(dict.fromkeys(call.tool_name for call in self.tool_calls))

    def record_step(self, step: Step, tool_call: ToolCall | None = None) -> None:
        if self.state != RunState.RUNNING:
            raise ValueError(f"Cannot append a step to a {self.state.value} run")
        if step.step_number != self.next_step_number:
            raise ValueError(f"Expected step {self.next_step_number}, got {step.step_number}")
        if len(self.steps) >= self.max_steps:
            raise ValueError(f"Step budget of {self.max_steps} exceeded")
        self.steps.append(step)
        if tool_call is not None:
            self.tool_calls.append(tool_call)

    def finish(self, answer: str, state: RunState = RunState.FINISHED) -> None:
        """Set the final answer. Allowed exactly once."""
        if self.finished:
            raise ValueError("final_answer is already set")
        self.final_answer = answer
        self.state = state


@dataclass
class ReactResult:
    """Result of the ReAct agent execution."""
    run: AgentRun
    model: str
    reasoning: str
    total_duration_ms: int

    @property
    def final_answer(self) -> str:
        return self.run.final_answer or ""
