"""Turn executors: how one model turn is requested and how tool results return.

The orchestrator drives both protocols through the same interface:

* :class:`NativeTurnExecutor` sends tool schemas and reads structured tool
  calls; each result goes back as a ``ToolMessage`` bound to its call id.
* :class:`ReActTurnExecutor` embeds a tool catalogue in the system prompt,
  parses ``<tool_call>`` blocks from plain text, and returns all results of
  a turn as one user message.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage, SystemMessage, ToolMessage

from ..llm.prompts import AGENT_SYSTEM_PROMPT, build_react_system_prompt
from ..llm.provider import ChatProvider
from ..models import ToolCallRequest
from ..tools.registry import ToolRegistry
from .react import extract_thinking_text, format_tool_results, parse_tool_calls


@dataclass
class Turn:
    """Outcome of one model call."""

    text: str = ""
    tool_calls: list[ToolCallRequest] = field(default_factory=list)
    input_tokens: int = 0
    output_tokens: int = 0

    @property
    def is_final(self) -> bool:
        return not self.tool_calls


class TurnExecutor(ABC):
    """One protocol for requesting a turn and feeding tool results back."""

    mode: str = ""

    def __init__(self, provider: ChatProvider, registry: ToolRegistry):
        self.provider = provider
        self.registry = registry

    @abstractmethod
    def system_prompt(self) -> str:
        pass

    def start(self, user_message: str) -> list[BaseMessage]:
        """Fresh conversation for a run."""
        return [SystemMessage(content=self.system_prompt()), HumanMessage(content=user_message)]

    @abstractmethod
    def request(self, messages: list[BaseMessage]) -> Turn:
        """Call the provider and append the assistant turn to ``messages``."""

    @abstractmethod
    def append_results(
        self, messages: list[BaseMessage], results: list[tuple[ToolCallRequest, str]]
    ) -> None:
        """Append the tool results of one turn to ``messages``."""

    def final_answer(self, turn: Turn) -> str:
        return turn.text


class NativeTurnExecutor(TurnExecutor):
    mode = "native"

    def system_prompt(self) -> str:
        return AGENT_SYSTEM_PROMPT

    def request(self, messages: list[BaseMessage]) -> Turn:
        response = self.provider.chat_with_tools(messages, self.registry.get_tool_definitions())
        messages.append(response.as_message())
        return Turn(
            text=response.text,
            tool_calls=list(response.tool_calls),
            input_tokens=response.input_tokens,
            output_tokens=response.output_tokens,
        )

    def append_results(
        self, messages: list[BaseMessage], results: list[tuple[ToolCallRequest, str]]
    ) -> None:
        for call, result in results:
            messages.append(ToolMessage(content=result, tool_call_id=call.call_id or call.function_name))


class ReActTurnExecutor(TurnExecutor):
    mode = "react"

    def system_prompt(self) -> str:
        return build_react_system_prompt(self.registry.render_catalogue())

    def request(self, messages: list[BaseMessage]) -> Turn:
        response = self.provider.chat(messages)
        messages.append(AIMessage(content=response.text))
        return Turn(
            text=response.text,
            tool_calls=parse_tool_calls(response.text),
            input_tokens=response.input_tokens,
            output_tokens=response.output_tokens,
        )

    def append_results(
        self, messages: list[BaseMessage], results: list[tuple[ToolCallRequest, str]]
    ) -> None:
        if results:
            messages.append(
                HumanMessage(content=format_tool_results((call.function_name, result) for call, result in results))
            )

    def final_answer(self, turn: Turn) -> str:
        return extract_thinking_text(turn.text) or turn.text


def create_turn_executor(provider: ChatProvider, registry: ToolRegistry) -> TurnExecutor:
    """Pick the protocol once per run from the provider's declared capability."""
    if provider.supports_tool_calling:
        return NativeTurnExecutor(provider, registry)
    return ReActTurnExecutor(provider, registry)
