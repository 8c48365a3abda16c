"""Chat model construction from configuration."""

import logging
import warnings

from langchain.chat_models import init_chat_model
from langchain_core.language_models import BaseChatModel

from ..config import Config
from .provider import ChatProvider, LangChainChatProvider

logger = logging.getLogger(__name__)


def _format_model_name_for_langchain(model_name: str) -> str:
    """Format model name for LangChain's init_chat_model.

    LangChain expects format: "provider:model"
    """
    if ":" in model_name:
        return model_name

    if model_name.startswith("gpt-") or model_name.startswith("o1") or model_name.startswith("o3"):
        return f"openai:{model_name}"
    elif model_name.startswith("claude"):
        return f"anthropic:{model_name}"
    elif model_name.startswith("gemini"):
        return f"google-genai:{model_name}"
    else:
        return f"openai:{model_name}"


def build_chat_model(
    config: Config,
    model_name: str | None = None,
    debug: bool = False,
) -> BaseChatModel:
    """Build a chat model instance from config.

    ChatLiteLLM is used when ``llm_provider`` is ``litellm`` or a custom
    ``base_url`` is configured; otherwise ``init_chat_model`` picks the
    provider integration from the model name.

    Args:
        config: Application configuration
        model_name: Overrides ``config.model_name``
        debug: Enable verbose logging

    Returns:
        Configured BaseChatModel instance
    """
    model_name = model_name or config.model_name
    use_litellm = config.llm_provider == "litellm" or config.base_url is not None

    logger.debug(
        "Creating chat model %s (litellm=%s, base_url=%s, api_key=%s)",
        model_name,
        use_litellm,
        config.base_url or "None",
        "set" if config.api_key else "None",
    )

    if use_litellm:
        return _build_litellm_model(config, model_name, debug)
    return _build_standard_model(config, model_name)


def _model_kwargs(config: Config, timeout_key: str) -> dict:
    """Keyword arguments shared by both chat model flavours; unset values are omitted."""
    optional = {
        "api_key": config.api_key,
        "max_retries": config.max_retries,
        timeout_key: config.timeout,
        "max_tokens": config.max_output_tokens,
    }
    kwargs: dict = {"temperature": config.temperature}
    kwargs.update((key, value) for key, value in optional.items() if value)
    return kwargs


def _build_litellm_model(config: Config, model_name: str, debug: bool) -> BaseChatModel:
    """ChatLiteLLM instance; provider routing comes from the model name prefix."""
    from langchain_litellm import ChatLiteLLM

    # ChatLiteLLM attaches provider metadata that pydantic warns about when serializing
    warnings.filterwarnings(
        "ignore",
        message=r"Pydantic serializer warnings",
        category=UserWarning,
        module=r"pydantic\.main",
    )

    if debug:
        import litellm
        litellm.set_verbose = True

    kwargs = _model_kwargs(config, timeout_key="request_timeout")
    if config.base_url:
        kwargs["api_base"] = config.base_url
    return ChatLiteLLM(model=model_name, **kwargs)


def _build_standard_model(config: Config, model_name: str) -> BaseChatModel:
    """Provider-native chat model via init_chat_model."""
    qualified_name = _format_model_name_for_langchain(model_name)
    try:
        return init_chat_model(qualified_name, **_model_kwargs(config, timeout_key="timeout"))
    except Exception as e:
        if "404" in str(e) or "401" in str(e):
            raise RuntimeError(
                f"Could not initialize chat model '{qualified_name}'. "
                f"For an OpenAI-compatible gateway set LLM_PROVIDER=litellm and LLM_BASE_URL. "
                f"Cause: {e}"
            ) from e
        raise


def create_chat_provider(
    config: Config,
    model_name: str | None = None,
    debug: bool = False,
) -> ChatProvider:
    """Chat provider for the agent, honouring ``config.native_tool_calling``."""
    model = build_chat_model(config, model_name, debug=debug)
    return LangChainChatProvider(
        model,
        name=model_name or config.model_name,
        supports_tool_calling=config.native_tool_calling,
    )
