"""
AI review of parcel lists: collaborator contract, OpenAI client and overlay.
"""

from .analyzer import FALLBACK_RECOMMENDATIONS, FALLBACK_SUMMARY, ParcelAnalyzer, analyze_safely, fallback_result
from .openai_analyzer import OpenAIParcelAnalyzer
from .overlay import DEFAULT_AI_ISSUE, apply_corrections

__all__ = [
    "ParcelAnalyzer",
    "OpenAIParcelAnalyzer",
    "analyze_safely",
    "apply_corrections",
    "fallback_result",
    "FALLBACK_SUMMARY",
    "FALLBACK_RECOMMENDATIONS",
    "DEFAULT_AI_ISSUE",
]
