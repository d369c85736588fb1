"""
Model Pricing

Static per-model pricing in USD per 1K tokens. Models missing from the table
cost 0 rather than failing the call.
"""

from typing import Dict, Optional


# Pricing per 1K tokens
MODEL_PRICING: Dict[str, Dict[str, float]] = {
    "gpt-4": {"input": 0.03, "output": 0.06},
    "gpt-4-turbo": {"input": 0.01, "output": 0.03},
    "gpt-3.5-turbo": {"input": 0.001, "output": 0.002},
    "claude-3-opus": {"input": 0.015, "output": 0.075},
    "claude-3-sonnet": {"input": 0.003, "output": 0.015},
    "claude-3-haiku": {"input": 0.00025, "output": 0.00125},
    "gemini-pro": {"input": 0.001, "output": 0.002},
    "gemini-pro-vision": {"input": 0.002, "output": 0.004},
    "llama-2-70b": {"input": 0.0007, "output": 0.0009},
    "llama-2-13b": {"input": 0.0002, "output": 0.0003},
    "codellama-34b": {"input": 0.0008, "output": 0.0008},
}


def get_model_pricing(model: str) -> Optional[Dict[str, float]]:
    """
    Find the pricing entry for a model id.

    Exact ids win; otherwise the longest table key that prefixes the id is
    used, so dated ids ("claude-3-opus-20240229") resolve to their family.
    """
    if model in MODEL_PRICING:
        return MODEL_PRICING[model]

    candidates = [key for key in MODEL_PRICING if model.startswith(f"{key}-")]
    if not candidates:
        return None
    return MODEL_PRICING[max(candidates, key=len)]


def calculate_cost(model: str, input_tokens: int, output_tokens: int) -> float:
    """Cost in USD for one call, 0 for unpriced models."""
    pricing = get_model_pricing(model)
    if not pricing:
        return 0.0
    return (input_tokens * pricing["input"] + output_tokens * pricing["output"]) / 1000
