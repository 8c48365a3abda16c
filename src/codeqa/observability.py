"""Optional LangSmith tracing of agent runs."""

import logging
import os
from functools import wraps
from typing import Optional

from langsmith import traceable

logger = logging.getLogger(__name__)

DEFAULT_PROJECT = "agentic-codeqa"


def configure_tracing(
    project_name: str = DEFAULT_PROJECT,
    api_key: Optional[str] = None,
    enabled: Optional[bool] = None,
) -> bool:
    """Switch LangSmith tracing on or off for this process.

    Tracing needs ``LANGSMITH_API_KEY``; without it tracing is forced off.
    With a key, an explicit ``enabled`` wins, then a pre-set
    ``LANGSMITH_TRACING``, and otherwise tracing is turned on.

    Args:
        project_name: Used when ``LANGSMITH_PROJECT`` is unset
        api_key: Overrides ``LANGSMITH_API_KEY``
        enabled: Force tracing on or off

    Returns:
        Whether runs will be traced
    """
    if api_key:
        os.environ["LANGSMITH_API_KEY"] = api_key

    if not os.getenv("LANGSMITH_API_KEY"):
        logger.debug("No LangSmith API key; agent runs are not traced")
        os.environ["LANGSMITH_TRACING"] = "false"
        return False

    os.environ.setdefault("LANGSMITH_PROJECT", project_name)
    if enabled is not None:
        os.environ["LANGSMITH_TRACING"] = str(enabled).lower()
    else:
        os.environ.setdefault("LANGSMITH_TRACING", "true")

    traced = is_tracing_enabled()
    if traced:
        logger.info("Tracing agent runs to LangSmith project %s", os.environ["LANGSMITH_PROJECT"])
    return traced


def is_tracing_enabled() -> bool:
    return os.getenv("LANGSMITH_TRACING", "").lower() == "true"


def trace_function(name: Optional[str] = None, **trace_kwargs):
    """Decorate a function so each call becomes a LangSmith run while tracing is on.

    The check happens per call, so enabling tracing after import still works.

    Args:
        name: Run name shown in LangSmith (default: the function name)
        **trace_kwargs: Forwarded to ``langsmith.traceable``
    """

    def decorator(func):
        traced = traceable(name=name or func.__name__, **trace_kwargs)(func)

        @wraps(func)
        def wrapper(*args, **kwargs):
            target = traced if is_tracing_enabled() else func
            return target(*args, **kwargs)

        return wrapper

    return decorator
