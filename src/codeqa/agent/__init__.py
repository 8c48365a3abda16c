"""Agent loop and its turn protocols."""

from .orchestrator import (
    CANCELLED_ANSWER,
    EXHAUSTED_ANSWER,
    AgentOrchestrator,
)
from .overview import ProjectOverviewBuilder, build_project_overview
from .turns import NativeTurnExecutor, ReActTurnExecutor, Turn, TurnExecutor, create_turn_executor

__all__ = [
    "AgentOrchestrator",
    "CANCELLED_ANSWER",
    "EXHAUSTED_ANSWER",
    "NativeTurnExecutor",
    "ProjectOverviewBuilder",
    "ReActTurnExecutor",
    "Turn",
    "TurnExecutor",
    "build_project_overview",
    "create_turn_executor",
]
