"""Main CLI entry point for Agentic CodeQA."""

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel

from .agent.orchestrator import AgentOrchestrator
from .config import Config
from .llm.chat_model_factory import create_chat_provider
from .observability import configure_tracing, is_tracing_enabled
from .streaming import ConsoleEventPrinter
from .tools.base import ToolContext
from .tools.registry import create_default_registry

console = Console()


def _configure_logging(level: str, debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else getattr(logging, level, logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=debug)],
    )


@click.group()
def cli():
    """Agentic CodeQA - answer questions about a codebase with an exploring LLM agent."""
    pass


@cli.command()
@click.argument("root", type=click.Path(exists=True, file_okay=False))
@click.argument("question")
@click.option("--model", "-m", default=None, help="Model name (default: MODEL_NAME from the environment)")
@click.option("--react", is_flag=True, help="Use the text-based tool protocol instead of native tool calling")
@click.option("--max-iterations", type=int, default=None, help="Maximum model calls for this run")
@click.option("--verbose", "-v", is_flag=True, help="Show result details and token usage")
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option("--no-ripgrep", is_flag=True, help="Always use the in-process search strategy")
def ask(
    root: str,
    question: str,
    model: str | None,
    react: bool,
    max_iterations: int | None,
    verbose: bool,
    debug: bool,
    no_ripgrep: bool,
):
    """Answer QUESTION about the project at ROOT.

    Examples:
        codeqa ask ./my-service "Where are orders validated?"

        # Models without native function calling
        codeqa ask ./my-service "How is auth configured?" --react --verbose
    """
    config = Config.from_env()
    _configure_logging(config.log_level, debug)
    configure_tracing()

    if react:
        config = config.model_copy(update={"native_tool_calling": False})

    provider = create_chat_provider(config, model_name=model, debug=debug)
    orchestrator = AgentOrchestrator(
        provider,
        max_iterations=max_iterations or config.max_iterations,
        use_ripgrep=config.use_ripgrep and not no_ripgrep,
    )

    if is_tracing_enabled():
        console.print("[dim]Tracing: Enabled[/dim]")

    try:
        result = orchestrator.run(question, Path(root), on_event=ConsoleEventPrinter(console, verbose))
    except KeyboardInterrupt:
        console.print("\n[bold yellow]⚠ Agent run interrupted by user[/bold yellow]")
        sys.exit(130)

    border = "red" if result.failed else "yellow" if result.exhausted else "green"
    console.print(Panel(Markdown(result.answer), title="Answer", border_style=border))

    if result.relevant_files:
        console.print("[bold]Relevant files:[/bold]")
        for rel_path in result.relevant_files:
            console.print(f"  {escape(rel_path)}")

    console.print(
        f"[dim]{result.iteration_count} iterations, {result.total_tool_calls} tool calls, "
        f"{result.input_tokens} input / {result.output_tokens} output tokens, "
        f"{result.processing_time_ms}ms[/dim]"
    )

    if result.failed:
        sys.exit(1)


@cli.command()
def tools():
    """Print the tool catalogue offered to the model."""
    click.echo(create_default_registry().render_catalogue())


@cli.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
def outline(file: str):
    """Print the structural outline of FILE."""
    path = Path(file).resolve()
    tool = create_default_registry().get("get_file_outline")
    context = ToolContext(root_path=str(path.parent), use_ripgrep=False)
    click.echo(tool.execute(json.dumps({"file_path": path.name}), context))


@cli.command()
@click.argument("root", type=click.Path(exists=True, file_okay=False))
@click.argument("symbol")
@click.option("--include", "-i", default="", help='File pattern filter (e.g. "*.cs")')
@click.option("--no-ripgrep", is_flag=True, help="Always use the in-process search strategy")
def definition(root: str, symbol: str, include: str, no_ripgrep: bool):
    """Find where SYMBOL is declared under ROOT."""
    tool = create_default_registry().get("find_definition")
    context = ToolContext(root_path=str(Path(root).resolve()), use_ripgrep=not no_ripgrep)
    click.echo(tool.execute(json.dumps({"symbol": symbol, "include": include}), context))


if __name__ == "__main__":
    cli()
