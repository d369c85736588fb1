"""
Google Gemini client (Generative Language API).
"""

import time
from typing import Optional

from .base import BaseProviderClient, Completion, MAX_OUTPUT_TOKENS, TEMPERATURE, build_prompt


class GeminiClient(BaseProviderClient):
    """API-key client for models/{model}:generateContent."""

    provider = "google"
    BASE_URL = "https://generativelanguage.googleapis.com"

    def __init__(self, api_key: str, project_id: Optional[str] = None, **kwargs):
        self.project_id = project_id
        super().__init__(api_key, **kwargs)

    async def complete(self, model: str, prompt: str, context: str) -> Completion:
        data = await self._request_with_retry(
            "POST",
            f"/v1beta/models/{model}:generateContent",
            {
                "contents": [{"parts": [{"text": build_prompt(prompt, context)}]}],
                "generationConfig": {
                    "temperature": TEMPERATURE,
                    "maxOutputTokens": MAX_OUTPUT_TOKENS,
                    "topP": 0.8,
                    "topK": 10,
                },
            },
            params={"key": self.api_key},
        )

        try:
            usage = data.get("usageMetadata") or {}
            return Completion(
                id=f"gemini-{int(time.time() * 1000)}",
                text=data["candidates"][0]["content"]["parts"][0]["text"],
                input_tokens=usage.get("promptTokenCount", 0) or 0,
                output_tokens=usage.get("candidatesTokenCount", 0) or 0,
            )
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise self._parse_error(e)
