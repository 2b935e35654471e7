"""Error boundary shared by the tool handlers"""

import functools
import logging
from typing import Awaitable, Callable

from errors import InvalidArgument, NotFound, UpstreamError
from .results import ToolResult, error_result, text_result

logger = logging.getLogger(__name__)


def upstream_boundary(failure_text: str) -> Callable:
    """Convert gateway errors raised by a tool body into tool results

    Upstream failures are logged with the provider response body and
    surfaced as ``failure_text`` only. ``NotFound`` / ``InvalidArgument``
    carry caller-safe messages and are returned verbatim.

    Args:
        failure_text: Message shown to the client on upstream failure
    """

    def decorator(func: Callable[..., Awaitable[ToolResult]]) -> Callable[..., Awaitable[ToolResult]]:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs) -> ToolResult:
            try:
                return await func(*args, **kwargs)
            except (NotFound, InvalidArgument) as e:
                return text_result(f"❌ {e.message}")
            except UpstreamError as e:
                logger.error(f"{func.__name__} failed: {e} - upstream body: {e.body}")
                if e.retryable:
                    return error_result(f"{failure_text} The service timed out, please try again.")
                return error_result(failure_text)

        return wrapper

    return decorator
