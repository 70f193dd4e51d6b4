"""
AI review collaborator contract and failure fallback.
"""

from typing import Protocol, Sequence

from parcel_intake.core.models import AIAnalysisResult, Parcel
from parcel_intake.observability import metrics
from parcel_intake.observability.logger import get_logger

logger = get_logger(__name__)

FALLBACK_SUMMARY = "Could not complete AI analysis at this time."
FALLBACK_RECOMMENDATIONS = ("Manually verify all addresses", "Check weight constraints")


class ParcelAnalyzer(Protocol):
    """Anything that can review a parcel list and report per-parcel issues."""

    def analyze(self, parcels: Sequence[Parcel]) -> AIAnalysisResult:
        ...


def fallback_result() -> AIAnalysisResult:
    """Static report used whenever the analyzer fails."""
    return AIAnalysisResult(
        summary=FALLBACK_SUMMARY,
        recommendations=list(FALLBACK_RECOMMENDATIONS),
        corrected_parcels=[],
    )


def analyze_safely(analyzer: ParcelAnalyzer, parcels: Sequence[Parcel]) -> AIAnalysisResult:
    """
    Run the analyzer, substituting the fallback report on any failure.

    The analyzer receives a copy of the list; it cannot alter the caller's
    parcels. Failures are logged and counted, never raised.
    """
    try:
        result = analyzer.analyze(tuple(parcels))
        if not isinstance(result, AIAnalysisResult):
            result = AIAnalysisResult.model_validate(result)
    except Exception as e:
        logger.error(
            f"AI analysis failed: {e}",
            extra={"error_type": type(e).__name__, "parcel_count": len(parcels)},
            exc_info=True,
        )
        metrics.increment_counter(metrics.ai_analysis_total, status="fallback")
        metrics.record_error(type(e).__name__, "analysis")
        return fallback_result()

    metrics.increment_counter(metrics.ai_analysis_total, status="success")
    logger.info(
        "AI analysis complete",
        extra={"parcel_count": len(parcels), "corrections": len(result.corrected_parcels)},
    )
    return result
