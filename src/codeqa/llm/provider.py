"""Chat provider interface used by the agent loop."""

import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage
from pydantic import BaseModel, ConfigDict, Field

from ..models import ToolCallRequest

logger = logging.getLogger(__name__)


class ChatProviderError(RuntimeError):
    """Raised when a chat request to the model fails."""


class ChatResponse(BaseModel):
    """One assistant turn returned by a provider."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    text: str = ""
    tool_calls: list[ToolCallRequest] = Field(default_factory=list)
    message: Optional[AIMessage] = None
    input_tokens: int = 0
    output_tokens: int = 0

    def as_message(self) -> AIMessage:
        """The assistant message to append to the conversation."""
        return self.message if self.message is not None else AIMessage(content=self.text)


class ChatProvider(ABC):
    """Abstract chat capability.

    ``chat_with_tools`` sends tool schemas and may return structured tool calls;
    ``chat`` sends the history only and returns plain text.
    """

    name: str = "provider"
    supports_tool_calling: bool = True

    @abstractmethod
    def chat_with_tools(
        self, messages: Sequence[BaseMessage], tools: list[dict[str, Any]]
    ) -> ChatResponse:
        """Request a completion that may contain native tool calls."""
        pass

    @abstractmethod
    def chat(self, messages: Sequence[BaseMessage]) -> ChatResponse:
        """Request a plain-text completion."""
        pass


def coerce_content(content: Any) -> str:
    """Ensure LangChain responses are flattened into plain text."""
    if isinstance(content, str):
        return content

    if isinstance(content, list):
        parts: list[str] = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
                continue

            text = getattr(block, "text", None)
            if text:
                parts.append(text)
                continue

            if isinstance(block, dict):
                text = block.get("text")
                if text:
                    parts.append(text)
        return "".join(parts).strip()

    return str(content) if content is not None else ""


def response_from_message(message: AIMessage) -> ChatResponse:
    """Convert a LangChain ``AIMessage`` into a :class:`ChatResponse`."""
    tool_calls = [
        ToolCallRequest(
            call_id=call.get("id"),
            function_name=call.get("name", ""),
            arguments_json=json.dumps(call.get("args") or {}),
        )
        for call in (message.tool_calls or [])
    ]
    # Malformed calls still need a tool response so the conversation stays valid
    tool_calls.extend(
        ToolCallRequest(
            call_id=call.get("id"),
            function_name=call.get("name") or "",
            arguments_json=call.get("args") or "{}",
        )
        for call in (getattr(message, "invalid_tool_calls", None) or [])
    )

    usage = message.usage_metadata or {}
    return ChatResponse(
        text=coerce_content(message.content),
        tool_calls=tool_calls,
        message=message,
        input_tokens=usage.get("input_tokens", 0) or 0,
        output_tokens=usage.get("output_tokens", 0) or 0,
    )


class LangChainChatProvider(ChatProvider):
    """Provider backed by any LangChain chat model."""

    def __init__(
        self,
        model: BaseChatModel,
        name: Optional[str] = None,
        supports_tool_calling: bool = True,
    ):
        """Wrap a chat model.

        Args:
            model: LangChain chat model (ChatLiteLLM, init_chat_model result, ...)
            name: Display name, defaults to the model's class name
            supports_tool_calling: Whether native function calling may be used
        """
        self.model = model
        self.name = name or type(model).__name__
        self.supports_tool_calling = supports_tool_calling

    def chat_with_tools(
        self, messages: Sequence[BaseMessage], tools: list[dict[str, Any]]
    ) -> ChatResponse:
        try:
            bound = self.model.bind_tools(tools)
            message = bound.invoke(list(messages))
        except Exception as e:
            raise ChatProviderError(str(e)) from e
        return response_from_message(message)

    def chat(self, messages: Sequence[BaseMessage]) -> ChatResponse:
        try:
            message = self.model.invoke(list(messages))
        except Exception as e:
            raise ChatProviderError(str(e)) from e

        response = response_from_message(message)
        # Text protocol: any native calls the model emitted anyway are ignored
        response.tool_calls = []
        return response
