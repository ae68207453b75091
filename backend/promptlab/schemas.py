from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from promptlab.config import get_settings
from promptlab.services.react_agent import ReactResult, Step, TaskType, ToolCall

settings = get_settings()


class CamelModel(BaseModel):
    """JSON uses camelCase (taskType, maxSteps...); snake_case is accepted too."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, protected_namespaces=())


class ReactRequest(CamelModel):
    """Request to run the ReAct agent on a question."""
    question: str = Field(
        ...,
        description="The question the agent should answer",
        min_length=1,
        max_length=4000
    )
    task_type: TaskType = Field(default=TaskType.GENERAL, description="Kind of task; selects preferred tools")
    max_steps: int = Field(default=settings.react_default_max_steps, ge=1, description="Step budget")
    available_tools: list[str] = Field(
        default_factory=list,
        description="Tool names offered to the model. Empty means the task type's preferred tools."
    )
    temperature: float | None = Field(default=None, ge=0.0, le=2.0)
    model_name: str | None = Field(default=None, description="Overrides MODEL_REACT for this run")
    stream: bool = Field(default=True, description="Stream progress as server-sent events")

    @field_validator("question")
    @classmethod
    def question_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("question must not be blank")
        return value

    @field_validator("max_steps")
    @classmethod
    def max_steps_within_limit(cls, value: int) -> int:
        if value > settings.react_max_steps_limit:
            raise ValueError(f"max_steps must be at most {settings.react_max_steps_limit}")
        return value


class StepInfo(CamelModel):
    """A single thought/action/observation step."""
    step_number: int
    thought: str
    action: str
    action_input: str
    observation: str
    timestamp: int = Field(..., description="Completion time, epoch milliseconds")

    @classmethod
    def from_step(cls, step: Step) -> "StepInfo":
        return cls(
            step_number=step.step_number,
            thought=step.thought,
            action=step.action,
            action_input=step.action_input,
            observation=step.observation,
            timestamp=int(step.timestamp * 1000)
        )


class ToolCallInfo(CamelModel):
    """A dispatched tool call."""
    tool_name: str
    input: str
    output: str
    success: bool
    duration: int = Field(..., description="Duration in milliseconds")

    @classmethod
    def from_tool_call(cls, call: ToolCall) -> "ToolCallInfo":
        return cls(
            tool_name=call.tool_name,
            input=call.input,
            output=call.output,
            success=call.success,
            duration=call.duration_ms
        )


class ReactResponse(CamelModel):
    """Summary of a completed ReAct run."""
    question: str
    task_type: TaskType
    steps: list[StepInfo] = Field(default_factory=list)
    tool_calls: list[ToolCallInfo] = Field(default_factory=list)
    final_answer: str
    total_steps: int
    total_time: int = Field(..., description="Total execution time in ms")
    used_tools: list[str] = Field(default_factory=list)
    reasoning: str = ""
    model: str = ""
    finished_by: str = Field(..., description="'finished' or 'exhausted'")

    @classmethod
    def from_result(cls, result: ReactResult) -> "ReactResponse":
        run = result.run
        return cls(
            question=run.question,
            task_type=run.task_type,
            steps=[StepInfo.from_step(step) for step in run.steps],
            tool_calls=[ToolCallInfo.from_tool_call(call) for call in run.tool_calls],
            final_answer=result.final_answer,
            total_steps=len(run.steps),
            total_time=result.total_duration_ms,
            used_tools=run.used_tools,
            reasoning=result.reasoning,
            model=result.model,
            finished_by=run.state.value
        )


class ToolInfo(CamelModel):
    name: str
    description: str
    usage: str
    examples: list[str] = Field(default_factory=list)


class TaskTypeInfo(CamelModel):
    task_type: TaskType
    label: str
    description: str
    preferred_tools: list[str] = Field(default_factory=list)
    typical_thoughts: int
