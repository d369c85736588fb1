"""
OpenAI Chat Completions client.

API: https://platform.openai.com/docs/api-reference/chat
"""

from typing import Dict, Optional

from .base import (
    BaseProviderClient,
    Completion,
    MAX_OUTPUT_TOKENS,
    NOT_AVAILABLE_ANSWER,
    TEMPERATURE,
)

SYSTEM_PROMPT = (
    "Answer the question based only on the provided context. "
    "If the information is not available in the context, "
    f'respond with "{NOT_AVAILABLE_ANSWER}"'
)


class OpenAIClient(BaseProviderClient):
    """Bearer-token client for /v1/chat/completions."""

    provider = "openai"
    BASE_URL = "https://api.openai.com"

    def __init__(self, api_key: str, organization: Optional[str] = None, **kwargs):
        self.organization = organization
        super().__init__(api_key, **kwargs)

    def _default_headers(self) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        if self.organization:
            headers["OpenAI-Organization"] = self.organization
        return headers

    async def complete(self, model: str, prompt: str, context: str) -> Completion:
        if context:
            messages = [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": f"Context: {context}\n\nQuestion: {prompt}"},
            ]
        else:
            messages = [{"role": "user", "content": prompt}]

        data = await self._request_with_retry(
            "POST",
            "/v1/chat/completions",
            {
                "model": model,
                "messages": messages,
                "temperature": TEMPERATURE,
                "max_tokens": MAX_OUTPUT_TOKENS,
            },
        )

        try:
            usage = data.get("usage") or {}
            return Completion(
                id=data.get("id", ""),
                text=data["choices"][0]["message"]["content"] or "",
                input_tokens=usage.get("prompt_tokens", 0),
                output_tokens=usage.get("completion_tokens", 0),
            )
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise self._parse_error(e)
