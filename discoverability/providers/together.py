"""
Together AI inference client (hosted Llama models).
"""

import time

from .base import BaseProviderClient, Completion, MAX_OUTPUT_TOKENS, TEMPERATURE, build_prompt


class TogetherClient(BaseProviderClient):
    """Bearer-token client for /inference."""

    provider = "together"
    BASE_URL = "https://api.together.xyz"

    def _default_headers(self):
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    async def complete(self, model: str, prompt: str, context: str) -> Completion:
        data = await self._request_with_retry(
            "POST",
            "/inference",
            {
                "model": model,
                "prompt": build_prompt(prompt, context),
                "max_tokens": MAX_OUTPUT_TOKENS,
                "temperature": TEMPERATURE,
                "top_p": 0.9,
                "stop": ["</s>", "[INST]"],
            },
        )

        try:
            output = data["output"]
            usage = output.get("usage") or {}
            return Completion(
                id=f"together-{int(time.time() * 1000)}",
                text=output["choices"][0]["text"],
                input_tokens=usage.get("prompt_tokens", 0) or 0,
                output_tokens=usage.get("completion_tokens", 0) or 0,
            )
        except (KeyError, IndexError, TypeError, AttributeError) as e:
            raise self._parse_error(e)
