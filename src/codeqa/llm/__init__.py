"""Chat provider layer."""

from .provider import (
    ChatProvider,
    ChatProviderError,
    ChatResponse,
    LangChainChatProvider,
)
from .chat_model_factory import build_chat_model, create_chat_provider

__all__ = [
    "ChatProvider",
    "ChatProviderError",
    "ChatResponse",
    "LangChainChatProvider",
    "build_chat_model",
    "create_chat_provider",
]
