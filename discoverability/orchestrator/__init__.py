"""
Test Orchestration

- TestOrchestrator: content discoverability runs -> ContentAnalysisReport
- CompetitiveTestOrchestrator: visibility vs competitors per prompt
- ProviderDispatcher: per-provider bounded pool with call spacing
"""

from .dispatch import ProviderDispatcher, ProviderThrottle, ThrottleLimits
from .content import BaseOrchestrator, TestOrchestrator, limits_from_settings, resolve_selections
from .competitive import CompetitiveTestOrchestrator

__all__ = [
    "ProviderDispatcher",
    "ProviderThrottle",
    "ThrottleLimits",
    "BaseOrchestrator",
    "TestOrchestrator",
    "limits_from_settings",
    "resolve_selections",
    "CompetitiveTestOrchestrator",
]
