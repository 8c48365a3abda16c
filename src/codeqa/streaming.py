"""Console rendering of agent progress events."""

import json
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax

from .models import AgentEvent, AgentEventType

MAX_DETAIL_ITEMS = 10


class ConsoleEventPrinter:
    """Progress sink that prints agent events with rich.

    Pass an instance as ``on_event`` to :meth:`AgentOrchestrator.run`.

    Args:
        console: Rich console for output (default: a new stdout console)
        verbose: Whether to show detail items and token usage
    """

    def __init__(self, console: Optional[Console] = None, verbose: bool = False):
        self.console = console or Console()
        self.verbose = verbose

    def __call__(self, event: AgentEvent) -> None:
        if event.type == AgentEventType.STARTED:
            self.console.print(f"[bold green]Exploring:[/bold green] {escape(event.summary or '')}")
        elif event.type == AgentEventType.TOOL_CALL_START:
            self._display_tool_call(event)
        elif event.type == AgentEventType.TOOL_CALL_END:
            self._display_tool_response(event)
        elif event.type == AgentEventType.ANSWER:
            self._display_finished(event)
        elif event.type == AgentEventType.ERROR:
            self.console.print(f"\n[bold red]✗ Agent run failed: {escape(event.summary or '')}[/bold red]")

    def _display_tool_call(self, event: AgentEvent) -> None:
        prefix = f"[dim]#{event.iteration}[/dim] " if self.verbose and event.iteration else ""
        self.console.print(f"  {prefix}[cyan]→ {event.tool_name}[/cyan] {escape(event.tool_args or '')}")

    def _display_tool_response(self, event: AgentEvent) -> None:
        summary = event.result_summary or "completed"
        if summary.startswith("Error"):
            self.console.print(f"  [red]✗ {event.tool_name} failed:[/red] {escape(summary)}")
            return

        timing = f" [dim]({event.duration_ms}ms)[/dim]" if event.duration_ms is not None else ""
        self.console.print(f"  [green]✓ {event.tool_name}:[/green] {escape(summary)}{timing}")

        if self.verbose and event.detail_items:
            self.console.print(f"    [dim]{event.detail_label or 'Details'}:[/dim]")
            for item in event.detail_items[:MAX_DETAIL_ITEMS]:
                self.console.print(f"      • {escape(item)}")
            hidden = len(event.detail_items) - MAX_DETAIL_ITEMS
            if hidden > 0:
                self.console.print(f"      [dim]... and {hidden} more[/dim]")

    def _display_finished(self, event: AgentEvent) -> None:
        self.console.print(
            f"\n[bold green]✓ Exploration complete[/bold green] "
            f"({event.iteration} iterations, {event.total_tool_calls} tool calls)"
        )
        if self.verbose and event.result is not None:
            usage = {
                "input_tokens": event.result.input_tokens,
                "output_tokens": event.result.output_tokens,
                "processing_time_ms": event.result.processing_time_ms,
            }
            self.console.print(
                Panel(
                    Syntax(json.dumps(usage, indent=2), "json", theme="monokai"),
                    title="Usage",
                    border_style="cyan",
                )
            )
