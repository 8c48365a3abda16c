"""Agentic CodeQA - answer questions about a codebase with an exploring LLM agent."""

__version__ = "0.1.0"

from .config import Config
from .models import (
    AgentEvent,
    AgentEventType,
    AgentRunResult,
    ToolCallRecord,
    ToolCallRequest,
)
from .agent import AgentOrchestrator
from .tools import ToolContext, ToolRegistry, create_default_registry

__all__ = [
    "Config",
    "AgentEvent",
    "AgentEventType",
    "AgentRunResult",
    "ToolCallRecord",
    "ToolCallRequest",
    "AgentOrchestrator",
    "ToolContext",
    "ToolRegistry",
    "create_default_registry",
]
