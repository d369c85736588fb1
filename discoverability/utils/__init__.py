"""Utility modules for the discoverability engine."""

from .config import Settings, get_settings, parse_model_list
from .retry import RetryConfig, retry_async, poll_until, is_retryable
from .cancellation import CancellationToken, run_bounded

__all__ = [
    "Settings",
    "get_settings",
    "parse_model_list",
    # Retry / polling
    "RetryConfig",
    "retry_async",
    "poll_until",
    "is_retryable",
    # Cancellation
    "CancellationToken",
    "run_bounded",
]
