"""AI services for post analysis."""

from instasight.services.ai.analyzer import AnalysisResult, InsightsAnalyzer
from instasight.services.ai.openai_client import AnalysisError, OpenAIClient

__all__ = [
    "AnalysisError",
    "AnalysisResult",
    "InsightsAnalyzer",
    "OpenAIClient",
]
