"""
Unified Provider Client

`query(provider, model, prompt, context)` over every supported vendor. The
call never raises: any failure comes back as a failed ProviderResponse with
the error message and the latency up to the failure.
"""

import logging
import time
from typing import Dict, Optional

import httpx

from ..errors import ProviderError
from ..evaluation import evaluate_response
from ..utils.cancellation import CancellationToken, run_bounded
from ..utils.config import Settings
from ..utils.retry import RetryConfig
from .base import BaseProviderClient
from .claude import ClaudeClient
from .config import LLMConfig
from .gemini import GeminiClient
from .models import Provider, ProviderResponse, TokenUsage, resolve_provider
from .openai import OpenAIClient
from .pricing import calculate_cost
from .replicate import ReplicateClient
from .together import TogetherClient

logger = logging.getLogger(__name__)


class ProviderClient:
    """
    Factory and dispatcher for the per-provider clients.

    Usage:
        config = LLMConfig.from_settings(get_settings())

        async with ProviderClient(config) as client:
            response = await client.query("openai", "gpt-4", "What does X cost?", content)

    Underlying HTTP clients are created on first use and reused; no other
    state is kept between calls.
    """

    def __init__(
        self,
        config: LLMConfig,
        retry_config: Optional[RetryConfig] = None,
        timeout: float = 60.0,
        poll_interval: float = 5.0,
        max_polls: int = 60,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize provider client.

        Args:
            config: Enabled providers and credentials
            retry_config: Backoff policy shared by all providers
            timeout: Per-request timeout in seconds
            poll_interval: Seconds between polls for job-style providers
            max_polls: Poll budget for job-style providers
            http_client: Shared transport for the httpx-based providers (used in tests)
        """
        self.config = config
        self.retry_config = retry_config or RetryConfig()
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.max_polls = max_polls
        self._http_client = http_client
        self._clients: Dict[Provider, BaseProviderClient] = {}

    @classmethod
    def from_settings(
        cls,
        config: LLMConfig,
        settings: Settings,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> "ProviderClient":
        return cls(
            config,
            retry_config=RetryConfig(
                max_retries=settings.MAX_RETRIES,
                initial_delay=settings.RETRY_INITIAL_DELAY,
                max_delay=settings.RETRY_MAX_DELAY,
            ),
            timeout=settings.REQUEST_TIMEOUT,
            poll_interval=settings.REPLICATE_POLL_INTERVAL,
            max_polls=settings.REPLICATE_MAX_POLLS,
            http_client=http_client,
        )

    def call_timeout(self, provider: Provider) -> float:
        """Upper bound for one call, including polling for job-style providers."""
        retries = self.retry_config.max_retries
        bound = self.timeout * (retries + 1) + self.retry_config.max_delay * retries
        if provider is Provider.REPLICATE:
            bound += self.poll_interval * self.max_polls
        return bound

    def _client_for(self, provider: Provider) -> BaseProviderClient:
        """Get or create the client for a provider."""
        if provider in self._clients:
            return self._clients[provider]

        provider_config = self.config.get(provider.value)
        if provider_config is None or not provider_config.is_configured:
            raise ProviderError(f"Provider not configured: {provider.value}", provider=provider.value)

        common = {
            "retry_config": self.retry_config,
            "timeout": self.timeout,
            "http_client": self._http_client,
        }

        if provider is Provider.OPENAI:
            client = OpenAIClient(provider_config.api_key, organization=provider_config.organization, **common)
        elif provider is Provider.ANTHROPIC:
            # the SDK brings its own transport, the shared httpx client is not forwarded
            client = ClaudeClient(
                provider_config.api_key,
                retry_config=self.retry_config,
                timeout=self.timeout,
            )
        elif provider is Provider.GOOGLE:
            client = GeminiClient(provider_config.api_key, project_id=provider_config.project_id, **common)
        elif provider is Provider.REPLICATE:
            client = ReplicateClient(
                provider_config.api_key,
                poll_interval=self.poll_interval,
                max_polls=self.max_polls,
                **common,
            )
        else:
            client = TogetherClient(provider_config.api_key, **common)

        self._clients[provider] = client
        logger.info(f"Initialized {provider.value} client")
        return client

    async def query(
        self,
        provider: str,
        model: str,
        prompt: str,
        context: str,
        cancel_token: Optional[CancellationToken] = None,
    ) -> ProviderResponse:
        """
        Query one (provider, model) with a prompt and its context.

        Args:
            provider: Provider name or alias (claude, gemini, llama)
            model: Model id
            prompt: User question
            context: Content the answer should come from ("" for none)
            cancel_token: Run-scoped cancellation token

        Returns:
            ProviderResponse (failed variant on any error)
        """
        start = time.monotonic()
        resolved = resolve_provider(provider)
        provider_name = resolved.value if resolved else (provider or "").lower()

        try:
            if resolved is None:
                raise ProviderError(f"Unsupported provider: {provider}", provider=provider_name)

            client = self._client_for(resolved)
            completion = await run_bounded(
                client.complete(model, prompt, context),
                timeout=self.call_timeout(resolved),
                token=cancel_token,
            )
        except ProviderError as e:
            return self._failed(provider_name, model, prompt, str(e), start)
        except Exception as e:
            logger.error(f"Unexpected error querying {provider_name}/{model}: {e!r}")
            return self._failed(provider_name, model, prompt, str(e) or type(e).__name__, start)

        latency_ms = (time.monotonic() - start) * 1000
        evaluation = evaluate_response(completion.text)
        usage = TokenUsage(
            input=completion.input_tokens,
            output=completion.output_tokens,
            cost=calculate_cost(model, completion.input_tokens, completion.output_tokens),
        )

        logger.info(
            f"{provider_name}/{model}: {usage.input} in, {usage.output} out, "
            f"${usage.cost:.4f}, {latency_ms:.0f}ms, success={evaluation.success}"
        )

        return ProviderResponse.completed(
            id=completion.id,
            provider=provider_name,
            model=model,
            query=prompt,
            response=completion.text,
            success=evaluation.success,
            confidence=evaluation.confidence,
            latency_ms=latency_ms,
            token_usage=usage,
        )

    def _failed(
        self,
        provider: str,
        model: str,
        prompt: str,
        message: str,
        start: float,
    ) -> ProviderResponse:
        latency_ms = (time.monotonic() - start) * 1000
        logger.warning(f"{provider}/{model} failed after {latency_ms:.0f}ms: {message}")
        return ProviderResponse.failed(
            provider=provider,
            model=model,
            query=prompt,
            error_message=message,
            latency_ms=latency_ms,
        )

    async def close(self):
        """Close all clients."""
        for client in self._clients.values():
            await client.close()
        self._clients = {}
        logger.info("Closed provider clients")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
