"""
AI Content Discoverability Engine

Tests whether a body of content can be found and used by AI assistants:
1. Sends content + prompts to several LLM providers
2. Scores each answer with heuristic evaluators
3. Aggregates results into a report (success rates, cost, gaps, recommendations)
4. Runs competitive analysis of brand vs competitor mentions
"""

__version__ = "0.1.0"
