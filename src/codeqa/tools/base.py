"""Tool contract shared by every exploration tool."""

import json
from abc import abstractmethod
from dataclasses import dataclass
from functools import cached_property
from typing import Any

from langchain_core.runnables import RunnableConfig
from langchain_core.tools import BaseTool, ToolException
from langchain_core.utils.function_calling import convert_to_openai_tool
from pydantic import ValidationError

from .filesystem import LocalFileBackend, PathOutsideRootError
from .schemas import ToolArgs

CONTEXT_CONFIG_KEY = "tool_context"


@dataclass(frozen=True)
class ToolContext:
    """Execution context shared read-only by all tool calls of one agent run."""

    root_path: str
    use_ripgrep: bool = True

    @cached_property
    def files(self) -> LocalFileBackend:
        return LocalFileBackend(self.root_path)

    def as_config(self) -> RunnableConfig:
        """Runnable config carrying this context, for ``Tool.invoke``."""
        return {"configurable": {CONTEXT_CONFIG_KEY: self}}


def format_validation_error(tool_name: str, error: ValidationError) -> str:
    """Render the first validation problem as a model-readable error line."""
    first = error.errors()[0]
    field = ".".join(str(part) for part in first.get("loc", ())) or "arguments"

    if first.get("type") == "missing":
        return f"Error: {field} is required"

    if first.get("type") == "value_error":
        message = str(first.get("ctx", {}).get("error", first.get("msg", "")))
        if message.endswith("is required"):
            return f"Error: {message}"
        return f"Error: Invalid arguments for {tool_name}: {field}: {message}"

    return f"Error: Invalid arguments for {tool_name}: {field}: {first.get('msg', 'invalid value')}"


class Tool(BaseTool):
    """A named, schema-described exploration operation.

    Subclasses declare ``name``, ``description`` and ``args_schema`` and
    implement :meth:`_explore`. :meth:`execute` is the dispatch entry point used
    by the agent loop: it never raises for ordinary failures, returning
    ``Error: ...`` text instead. The usual LangChain ``invoke`` also works when
    the config carries a :class:`ToolContext` (see :meth:`ToolContext.as_config`).
    """

    args_schema: type[ToolArgs]

    def to_openai_tool(self) -> dict[str, Any]:
        """Native function-calling definition."""
        definition = convert_to_openai_tool(self)
        definition["function"]["parameters"].setdefault("required", [])
        return definition

    def parameters_schema(self) -> dict[str, Any]:
        """Object-typed JSON schema with per-property type and description."""
        return self.to_openai_tool()["function"]["parameters"]

    def parse_arguments(self, arguments_json: str | None) -> ToolArgs | str:
        """Validate raw JSON arguments, returning the model or an error string."""
        try:
            payload = json.loads(arguments_json) if arguments_json and arguments_json.strip() else {}
        except json.JSONDecodeError as e:
            return f"Error: Invalid JSON arguments for {self.name}: {e.msg}"

        if not isinstance(payload, dict):
            return f"Error: Arguments for {self.name} must be a JSON object"

        try:
            return self.args_schema.model_validate(payload)
        except ValidationError as e:
            return format_validation_error(self.name, e)

    def execute(self, arguments_json: str | None, context: ToolContext) -> str:
        """Validate arguments and run the tool against ``context``."""
        args = self.parse_arguments(arguments_json)
        if isinstance(args, str):
            return args

        try:
            return self._explore(args, context)
        except PathOutsideRootError as e:
            return f"Error: {e}"
        except (OSError, UnicodeDecodeError) as e:
            return f"Error: {e}"

    def _run(self, config: RunnableConfig, **kwargs: Any) -> str:
        context = (config.get("configurable") or {}).get(CONTEXT_CONFIG_KEY)
        if not isinstance(context, ToolContext):
            raise ToolException(f"{self.name} needs a ToolContext in config['configurable']['{CONTEXT_CONFIG_KEY}']")
        return self.execute(json.dumps(kwargs), context)

    @abstractmethod
    def _explore(self, args: Any, context: ToolContext) -> str:
        """Execute with validated arguments."""
