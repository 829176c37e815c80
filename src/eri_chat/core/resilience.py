"""Resilience patterns and provider error classification.

Completion failures are never retried blindly here: the model fallback
cascade in ``core.orchestrator`` decides what happens after each classified
failure. Weather lookups are plain idempotent GETs and get an exponential
backoff retry for transient transport errors.

Usage:
    from eri_chat.core.resilience import weather_retry, wrap_weather_errors

    @weather_retry
    @wrap_weather_errors
    async def get_json(...):
        ...
"""

from functools import wraps
from typing import Any, Callable, TypeVar

import httpx
from hyx.retry.api import retry
from hyx.retry.backoffs import expo

from eri_chat.core.exceptions import (
    CapabilityMissing,
    CapacityExceeded,
    CompletionError,
    LookupFailed,
    ProviderError,
    SchemaRejected,
)

__all__ = [
    "TransientError",
    "ResilienceConfig",
    "weather_retry",
    "classify_http_error",
    "classify_anthropic_error",
    "wrap_completion_errors",
    "wrap_anthropic_errors",
    "wrap_weather_errors",
]


class TransientError(Exception):
    """Error that is likely to succeed on retry (network issues, timeouts)."""
    pass


class ResilienceConfig:
    """Centralized configuration for resilience patterns."""

    WEATHER_RETRY_ATTEMPTS: int = 3
    WEATHER_RETRY_BACKOFF_BASE: float = 0.5  # seconds
    WEATHER_RETRY_BACKOFF_MAX: float = 5.0  # seconds


# Retry for weather provider calls with exponential backoff
weather_retry = retry(
    on=(TransientError,),
    attempts=ResilienceConfig.WEATHER_RETRY_ATTEMPTS,
    backoff=expo(
        min_delay_secs=ResilienceConfig.WEATHER_RETRY_BACKOFF_BASE,
        max_delay_secs=ResilienceConfig.WEATHER_RETRY_BACKOFF_MAX,
    ),
)

F = TypeVar("F", bound=Callable[..., Any])


def classify_http_error(
    status_code: int,
    detail: str = "",
    model: str | None = None,
) -> CompletionError:
    """
    Classify a completion provider HTTP status into a domain exception.

    Args:
        status_code: HTTP status code
        detail: Provider error body, kept for logs only
        model: Model the request targeted

    Returns:
        CapacityExceeded for 429/503/529, SchemaRejected for 400,
        CapabilityMissing for 404, ProviderError otherwise
    """
    message = f"Completion failed (HTTP {status_code})"
    if detail:
        message = f"{message}: {detail[:300]}"

    if status_code in (429, 503, 529):
        return CapacityExceeded(message, model=model, status_code=status_code)
    if status_code == 400:
        return SchemaRejected(message, model=model, status_code=status_code)
    if status_code == 404:
        return CapabilityMissing(message, model=model, status_code=status_code)
    return ProviderError(message, model=model, status_code=status_code)


def classify_anthropic_error(error: Exception, model: str | None = None) -> Exception:
    """Map an Anthropic SDK exception onto the completion error taxonomy."""
    import anthropic

    if isinstance(error, anthropic.APIStatusError):
        return classify_http_error(error.status_code, str(error), model)
    if isinstance(error, anthropic.APIError):
        return ProviderError(f"Anthropic error: {error}", model=model)
    return error


def wrap_completion_errors(func: F) -> F:
    """
    Decorator to convert httpx exceptions raised by an OpenAI-compatible
    completion call into the completion error taxonomy.

    The wrapped method must accept ``model`` as a keyword argument.
    """
    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        model = kwargs.get("model")
        try:
            return await func(*args, **kwargs)
        except httpx.HTTPStatusError as e:
            raise classify_http_error(
                e.response.status_code, e.response.text, model
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError(f"Transport error: {e}", model=model) from e

    return wrapper  # type: ignore


def wrap_anthropic_errors(func: F) -> F:
    """
    Decorator to convert Anthropic API exceptions into the completion error
    taxonomy.
    """
    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        import anthropic

        try:
            return await func(*args, **kwargs)
        except anthropic.APIError as e:
            raise classify_anthropic_error(e, kwargs.get("model")) from e

    return wrapper  # type: ignore


def wrap_weather_errors(func: F) -> F:
    """
    Decorator to convert httpx exceptions from the weather provider.

    Timeouts, connection failures and 5xx responses become TransientError
    so that ``weather_retry`` can retry them; other HTTP errors become
    LookupFailed.
    """
    @wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)
        except httpx.TimeoutException as e:
            raise TransientError(f"Weather request timeout: {e}") from e
        except httpx.TransportError as e:
            raise TransientError(f"Weather connection error: {e}") from e
        except httpx.HTTPStatusError as e:
            if e.response.status_code >= 500:
                raise TransientError(
                    f"Weather server error (HTTP {e.response.status_code})"
                ) from e
            raise LookupFailed(
                f"Weather request rejected (HTTP {e.response.status_code})"
            ) from e

    return wrapper  # type: ignore
