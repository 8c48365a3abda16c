"""Agent loop: ask the model, run the tools it requests, repeat until it answers."""

import asyncio
import logging
import threading
import time
from pathlib import Path
from typing import Callable, Optional

from ..llm.prompts import build_user_message
from ..llm.provider import ChatProvider
from ..models import AgentEvent, AgentEventType, AgentRunResult, ToolCallRecord, ToolCallRequest
from ..observability import trace_function
from ..tools.base import ToolContext
from ..tools.registry import ToolRegistry, create_default_registry
from .overview import build_project_overview
from .summaries import (
    extract_relevant_files,
    format_tool_call_summary,
    summarize_tool_result,
    truncate_for_record,
)
from .turns import TurnExecutor, create_turn_executor

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 50

EXHAUSTED_ANSWER = (
    "I was unable to complete my analysis within the allowed number of iterations. "
    "Please try asking a more specific question."
)
CANCELLED_ANSWER = "Agent run was cancelled."

EventSink = Callable[[AgentEvent], None]


class RunCancelled(Exception):
    """Raised inside a run when its cancellation event is set."""


class AgentOrchestrator:
    """Drives one question through the explore-then-answer loop.

    The orchestrator holds no per-run state: every call to :meth:`run` builds
    its own message history and result, so a single instance can serve
    concurrent runs. The registry is shared read-only.
    """

    def __init__(
        self,
        provider: ChatProvider,
        registry: Optional[ToolRegistry] = None,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        use_ripgrep: bool = True,
    ):
        """Initialize the orchestrator.

        Args:
            provider: Chat provider used for every model turn
            registry: Tools offered to the model (default: all seven tools)
            max_iterations: Upper bound on model calls per run
            use_ripgrep: Allow tools to shell out to ripgrep when installed
        """
        if max_iterations < 1:
            raise ValueError("max_iterations must be at least 1")
        self.provider = provider
        self.registry = registry if registry is not None else create_default_registry()
        self.max_iterations = max_iterations
        self.use_ripgrep = use_ripgrep

    @trace_function(name="codeqa_agent_run")
    def run(
        self,
        question: str,
        root_path: str | Path,
        on_event: Optional[EventSink] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> AgentRunResult:
        """Answer ``question`` about the project at ``root_path``.

        Args:
            question: Natural-language question
            root_path: Project root the tools operate on
            on_event: Optional progress sink; exceptions it raises are logged and ignored
            cancel_event: Optional run-scoped cancellation signal

        Returns:
            The run result. Provider failures, exhaustion and cancellation are
            reported through its flags rather than raised.
        """
        start_time = time.monotonic()
        root = str(Path(root_path).resolve())
        context = ToolContext(root_path=root, use_ripgrep=self.use_ripgrep)
        result = AgentRunResult()
        executor = create_turn_executor(self.provider, self.registry)

        logger.info("Starting %s agent run in %s: %s", executor.mode, root, question)
        self._emit(on_event, AgentEvent(type=AgentEventType.STARTED, summary=question))

        messages = executor.start(build_user_message(build_project_overview(root), question))

        try:
            finished = self._loop(executor, messages, context, result, on_event, cancel_event)
        except RunCancelled:
            logger.info("Agent run cancelled after %d iterations", result.iteration_count)
            result.answer = CANCELLED_ANSWER
            result.cancelled = True
            result.error = CANCELLED_ANSWER
            return self._finish(result, start_time, on_event, AgentEventType.ERROR)

        if result.failed:
            return self._finish(result, start_time, on_event, AgentEventType.ERROR)

        if not finished:
            logger.warning("Agent reached the iteration limit (%d)", self.max_iterations)
            result.answer = EXHAUSTED_ANSWER
            result.exhausted = True

        return self._finish(result, start_time, on_event, AgentEventType.ANSWER)

    async def arun(
        self,
        question: str,
        root_path: str | Path,
        on_event: Optional[EventSink] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> AgentRunResult:
        """Run in a worker thread so the event loop stays free."""
        return await asyncio.to_thread(self.run, question, root_path, on_event, cancel_event)

    def _loop(
        self,
        executor: TurnExecutor,
        messages: list,
        context: ToolContext,
        result: AgentRunResult,
        on_event: Optional[EventSink],
        cancel_event: Optional[threading.Event],
    ) -> bool:
        """Iterate until a final answer. Returns False when the cap is hit."""
        for iteration in range(1, self.max_iterations + 1):
            self._check_cancelled(cancel_event)
            result.iteration_count = iteration
            logger.info("Iteration %d/%d", iteration, self.max_iterations)

            try:
                turn = executor.request(messages)
            except Exception as e:
                logger.error("LLM call failed on iteration %d: %s", iteration, e)
                result.answer = f"Error communicating with LLM: {e}"
                result.failed = True
                result.error = str(e)
                return True

            result.input_tokens += turn.input_tokens
            result.output_tokens += turn.output_tokens

            if turn.is_final:
                result.answer = executor.final_answer(turn)
                return True

            results = []
            for call in turn.tool_calls:
                self._check_cancelled(cancel_event)
                output = self._run_tool(call, context, result, iteration, on_event)
                results.append((call, output))
            executor.append_results(messages, results)

        return False

    def _run_tool(
        self,
        call: ToolCallRequest,
        context: ToolContext,
        result: AgentRunResult,
        iteration: int,
        on_event: Optional[EventSink],
    ) -> str:
        """Dispatch one tool call and record it."""
        tool_name = call.function_name
        args_summary = format_tool_call_summary(tool_name, call.arguments_json)
        self._emit(on_event, AgentEvent(
            type=AgentEventType.TOOL_CALL_START,
            tool_name=tool_name,
            tool_args=args_summary,
            iteration=iteration,
        ))

        started = time.monotonic()
        tool = self.registry.get(tool_name)
        if tool is None:
            output = f"Error: Unknown tool '{tool_name}'. Available tools: {', '.join(self.registry.names)}"
        else:
            try:
                output = tool.execute(call.arguments_json, context)
            except Exception as e:
                logger.exception("Tool %s raised", tool_name)
                output = f"Error executing {tool_name}: {e}"
        duration_ms = int((time.monotonic() - started) * 1000)

        result.tool_calls.append(ToolCallRecord(
            tool_name=tool_name,
            arguments=call.arguments_json,
            result_summary=truncate_for_record(output),
            duration_ms=duration_ms,
            iteration=iteration,
        ))
        for rel_path in extract_relevant_files(tool_name, call.arguments_json, output, context.root_path):
            result.add_file(rel_path)

        summary = summarize_tool_result(tool_name, output)
        self._emit(on_event, AgentEvent(
            type=AgentEventType.TOOL_CALL_END,
            tool_name=tool_name,
            tool_args=args_summary,
            iteration=iteration,
            duration_ms=duration_ms,
            total_tool_calls=result.total_tool_calls,
            result_summary=summary.summary,
            detail_items=summary.detail_items,
            detail_label=summary.detail_label,
        ))
        logger.info("Tool %s completed in %dms (%d chars)", tool_name, duration_ms, len(output))
        return output

    @staticmethod
    def _check_cancelled(cancel_event: Optional[threading.Event]) -> None:
        if cancel_event is not None and cancel_event.is_set():
            raise RunCancelled()

    def _finish(
        self,
        result: AgentRunResult,
        start_time: float,
        on_event: Optional[EventSink],
        event_type: AgentEventType,
    ) -> AgentRunResult:
        result.processing_time_ms = int((time.monotonic() - start_time) * 1000)
        logger.info(
            "Agent run finished: %d iterations, %d tool calls, %dms",
            result.iteration_count,
            result.total_tool_calls,
            result.processing_time_ms,
        )
        self._emit(on_event, AgentEvent(
            type=event_type,
            summary=result.error if event_type == AgentEventType.ERROR else None,
            iteration=result.iteration_count,
            duration_ms=result.processing_time_ms,
            total_tool_calls=result.total_tool_calls,
            result=result,
        ))
        return result

    @staticmethod
    def _emit(on_event: Optional[EventSink], event: AgentEvent) -> None:
        if on_event is None:
            return
        try:
            on_event(event)
        except Exception:
            logger.exception("Progress sink failed on %s event", event.type.value)
