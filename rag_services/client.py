"""
Shared OpenAI-compatible client construction and error classification
"""
from typing import Optional, Type

import openai
from openai import OpenAI

from core.config import settings
from core.errors import RemoteCallError, RemoteTimeoutError


def build_client(base_url: str, api_key: Optional[str] = None, timeout: Optional[float] = None) -> OpenAI:
    """Create a client for a hosted OpenAI-compatible endpoint.

    Retries are disabled; a failed call surfaces immediately.
    """
    return OpenAI(
        api_key=api_key or settings.HUGGINGFACE_API_KEY,
        base_url=base_url,
        timeout=timeout or settings.REQUEST_TIMEOUT_SECONDS,
        max_retries=0,
    )


def classify_error(exc: Exception, error_cls: Type[RemoteCallError], action: str) -> RemoteCallError:
    """Map a client exception onto ``error_cls`` with a kind for logging."""
    if isinstance(exc, openai.APITimeoutError):
        return RemoteTimeoutError(f"{action} timed out: {exc}")
    if isinstance(exc, (openai.AuthenticationError, openai.PermissionDeniedError)):
        kind = "auth"
    elif isinstance(exc, openai.RateLimitError):
        kind = "rate_limit"
    elif isinstance(exc, openai.APIConnectionError):
        kind = "network"
    elif isinstance(exc, (openai.APIResponseValidationError, KeyError, IndexError, TypeError, AttributeError)):
        kind = "malformed_response"
    else:
        kind = "upstream"
    return error_cls(f"{action} failed: {exc}", kind=kind)
