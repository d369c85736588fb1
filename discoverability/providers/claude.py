"""
Anthropic Claude client.

Uses the official SDK with its own retries disabled so that backoff follows
the shared retry policy like every other provider. The SDK owns its HTTP
transport; a pre-built SDK client can be injected instead.
"""

import logging
from typing import Optional

import anthropic

from ..errors import AuthError, NetworkError, ProviderError, error_for_status
from ..utils.retry import RetryConfig, retry_async
from .base import BaseProviderClient, Completion, MAX_OUTPUT_TOKENS, build_prompt

logger = logging.getLogger(__name__)


class ClaudeClient(BaseProviderClient):
    """
    Async client for the Claude Messages API.

    Features:
    - Token usage from the API response
    - SDK exceptions mapped onto the shared error taxonomy
    """

    provider = "anthropic"

    def __init__(
        self,
        api_key: str,
        retry_config: Optional[RetryConfig] = None,
        timeout: float = 60.0,
        sdk_client: Optional[anthropic.AsyncAnthropic] = None,
    ):
        self.api_key = api_key
        self.retry_config = retry_config or RetryConfig()
        self.timeout = timeout

        self._owns_client = sdk_client is None
        self._client = sdk_client or anthropic.AsyncAnthropic(
            api_key=api_key,
            max_retries=0,
            timeout=timeout,
        )
        self._closed = False

    async def complete(self, model: str, prompt: str, context: str) -> Completion:
        return await retry_async(
            lambda: self._create_message(model, build_prompt(prompt, context)),
            self.retry_config,
            description=f"anthropic messages.create ({model})",
        )

    async def _create_message(self, model: str, content: str) -> Completion:
        try:
            response = await self._client.messages.create(
                model=model,
                max_tokens=MAX_OUTPUT_TOKENS,
                messages=[{"role": "user", "content": content}],
            )
        except (anthropic.AuthenticationError, anthropic.PermissionDeniedError) as e:
            raise AuthError(
                f"Claude API error: {e.status_code} {e.message}",
                provider=self.provider,
                status_code=e.status_code,
            )
        except anthropic.APIStatusError as e:
            raise error_for_status(
                e.status_code,
                f"Claude API error: {e.status_code} {e.message}",
                provider=self.provider,
            )
        except anthropic.APIConnectionError as e:
            raise NetworkError(f"Claude request failed: {e}", provider=self.provider)
        except anthropic.APIError as e:
            raise ProviderError(f"Claude API error: {e}", provider=self.provider)

        text = "".join(
            block.text for block in response.content if getattr(block, "type", "") == "text"
        )
        return Completion(
            id=response.id,
            text=text,
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
        )

    async def close(self):
        if not self._closed:
            if self._owns_client:
                await self._client.close()
            self._closed = True
