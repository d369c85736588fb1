"""
Base Provider Client

Shared HTTP plumbing for the provider clients:
- httpx.AsyncClient with base URL, auth headers and timeout
- Mapping of transport/HTTP/JSON failures onto the error taxonomy
- Retry with exponential backoff via the shared retry utility
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from ..errors import NetworkError, ParseError, error_for_status
from ..utils.retry import RetryConfig, retry_async

logger = logging.getLogger(__name__)


NOT_AVAILABLE_ANSWER = "Information not available in provided content."

CONTEXT_PROMPT_TEMPLATE = (
    "Based on the following context, answer the question. "
    f'If the information is not available, say "{NOT_AVAILABLE_ANSWER}"\n\n'
    "Context: {context}\n\n"
    "Question: {question}\n\n"
    "Answer:"
)

MAX_OUTPUT_TOKENS = 1000
TEMPERATURE = 0.1


def build_prompt(question: str, context: str) -> str:
    """Frame a question with its context; empty context sends the question alone."""
    if not context:
        return question
    return CONTEXT_PROMPT_TEMPLATE.format(context=context, question=question)


@dataclass(frozen=True)
class Completion:
    """Raw answer from a provider before evaluation."""
    id: str
    text: str
    input_tokens: int = 0
    output_tokens: int = 0


class BaseProviderClient(ABC):
    """
    Async client for one provider's completion endpoint.

    Subclasses implement `complete()`; it raises ProviderError subclasses on
    failure. Turning failures into ProviderResponse values is done by the
    unified ProviderClient.
    """

    provider: str = ""
    BASE_URL: str = ""

    def __init__(
        self,
        api_key: str,
        retry_config: Optional[RetryConfig] = None,
        timeout: float = 60.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize provider client.

        Args:
            api_key: Provider API key
            retry_config: Retry configuration (optional)
            timeout: Request timeout in seconds
            http_client: Pre-built client (tests inject a MockTransport here)
        """
        self.api_key = api_key
        self.retry_config = retry_config or RetryConfig()
        self.timeout = timeout

        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            headers=self._default_headers(),
            timeout=httpx.Timeout(timeout),
        )
        self._closed = False

    def _default_headers(self) -> Dict[str, str]:
        return {"Content-Type": "application/json"}

    @abstractmethod
    async def complete(self, model: str, prompt: str, context: str) -> Completion:
        """Send one prompt and return the raw completion."""

    async def _request(
        self,
        method: str,
        url: str,
        payload: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """Make a single HTTP request and decode the JSON body."""
        logger.debug(f"{self.provider}: {method} {url}")

        try:
            response = await self._client.request(
                method,
                f"{self.BASE_URL}{url}",
                json=payload,
                params=params,
                headers=self._default_headers(),
            )
        except httpx.TimeoutException as e:
            raise NetworkError(f"Request timed out: {e}", provider=self.provider)
        except httpx.RequestError as e:
            raise NetworkError(f"Request failed: {e}", provider=self.provider)

        if response.status_code >= 400:
            error_data = self._safe_json(response)
            raise error_for_status(
                response.status_code,
                f"{self.provider} API error: {response.status_code} {response.reason_phrase}",
                provider=self.provider,
                response=error_data,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ParseError(f"Invalid JSON from {self.provider}: {e}", provider=self.provider)

    async def _request_with_retry(
        self,
        method: str,
        url: str,
        payload: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        """Make request with retry logic."""
        return await retry_async(
            lambda: self._request(method, url, payload, params),
            self.retry_config,
            description=f"{self.provider} {method} {url}",
        )

    def _parse_error(self, e: Exception) -> ParseError:
        return ParseError(f"Unexpected {self.provider} response shape: {e!r}", provider=self.provider)

    @staticmethod
    def _safe_json(response: httpx.Response) -> Optional[dict]:
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None

    async def close(self):
        """Close the HTTP client."""
        if not self._closed:
            if self._owns_client:
                await self._client.aclose()
            self._closed = True

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
