"""Core data models for the code question-answering agent."""

from datetime import datetime
from enum import Enum
from typing import Optional, List
from pydantic import BaseModel, Field


class OutlineSymbol(BaseModel):
    """A structural declaration extracted from a source file, without its body."""

    line: int  # 1-based
    depth: int  # 0 = file scope
    signature: str


class SearchMatch(BaseModel):
    """A single search hit, kept around for ranking before formatting."""

    absolute_path: str
    relative_path: str
    line_number: int = 0
    line_text: str = ""
    modified: datetime = Field(default_factory=lambda: datetime.min)


class ToolCallRequest(BaseModel):
    """A tool invocation requested by the model.

    ``call_id`` is only present for native function calling; calls parsed out
    of ReAct text carry ``None``.
    """

    call_id: Optional[str] = None
    function_name: str
    arguments_json: str = "{}"


class ToolCallRecord(BaseModel):
    """Audit entry for a single tool call made during an agent run."""

    tool_name: str
    arguments: str
    result_summary: str = ""
    duration_ms: int = 0
    iteration: int = 0


class AgentRunResult(BaseModel):
    """Accumulated outcome of one agent run."""

    answer: str = ""
    iteration_count: int = 0
    tool_calls: List[ToolCallRecord] = Field(default_factory=list)
    input_tokens: int = 0
    output_tokens: int = 0
    relevant_files: List[str] = Field(default_factory=list)
    processing_time_ms: int = 0

    failed: bool = False
    exhausted: bool = False
    cancelled: bool = False
    error: Optional[str] = None

    @property
    def total_tool_calls(self) -> int:
        return len(self.tool_calls)

    def add_file(self, rel_path: str) -> None:
        """Record a touched file once, keeping first-seen order."""
        if rel_path and rel_path not in self.relevant_files:
            self.relevant_files.append(rel_path)


class AgentEventType(str, Enum):
    """Lifecycle events emitted while an agent run progresses."""

    STARTED = "started"
    TOOL_CALL_START = "tool_call_start"
    TOOL_CALL_END = "tool_call_end"
    ANSWER = "answer"
    ERROR = "error"


class AgentEvent(BaseModel):
    """An event emitted during agent execution for a presentation layer."""

    type: AgentEventType
    tool_name: Optional[str] = None
    tool_args: Optional[str] = None
    summary: Optional[str] = None
    iteration: Optional[int] = None
    duration_ms: Optional[int] = None
    total_tool_calls: Optional[int] = None

    # tool_call_end only
    result_summary: Optional[str] = None
    detail_items: Optional[List[str]] = None
    detail_label: Optional[str] = None

    # answer / error only
    result: Optional[AgentRunResult] = None
