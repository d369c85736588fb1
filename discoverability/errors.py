"""
Error Taxonomy

Exceptions raised inside provider calls and orchestration.

Per-call errors (everything below ProviderError) are caught by the provider
client and recorded on a failed ProviderResponse. Only ConfigurationError is
allowed to abort a run, and it is raised before any network call.
"""

from typing import Optional


RETRYABLE_STATUS_CODES = (429, 500, 502, 503, 504)
AUTH_STATUS_CODES = (401, 403)


class ProviderError(Exception):
    """Base exception for a failed provider call."""

    retryable = False

    def __init__(
        self,
        message: str,
        provider: Optional[str] = None,
        status_code: Optional[int] = None,
        response: Optional[dict] = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.response = response


class NetworkError(ProviderError):
    """Connection failure or transport-level timeout."""

    retryable = True


class HTTPError(ProviderError):
    """Non-2xx response. Only 429 and 5xx are worth retrying."""

    @property
    def retryable(self) -> bool:
        return self.status_code in RETRYABLE_STATUS_CODES


class AuthError(HTTPError):
    """Rejected credentials. Permanent, never retried."""

    @property
    def retryable(self) -> bool:
        return False


class ParseError(ProviderError):
    """Provider returned a payload we could not interpret."""


class ProviderTimeoutError(ProviderError):
    """Poll budget or per-call time bound exhausted."""


class RunCancelledError(ProviderError):
    """The run was cancelled or its deadline passed while the call was in flight."""


class ConfigurationError(Exception):
    """No usable provider configuration. Aborts the run before any call."""


class PromptGenerationError(Exception):
    """The prompt-generation call did not produce a usable answer."""


def error_for_status(
    status_code: int,
    message: str,
    provider: Optional[str] = None,
    response: Optional[dict] = None,
) -> HTTPError:
    """Map an HTTP status code to the matching error class."""
    error_class = AuthError if status_code in AUTH_STATUS_CODES else HTTPError
    return error_class(message, provider=provider, status_code=status_code, response=response)
