"""
Applies an AI review report onto the parcel list.

This is the one place outside the rule engine that writes parcel status.
A corrected parcel is forced to WARNING even if the engine would rate it
ERROR, and the overlay does not re-check duplicates or phone numbers. The
masking is logged so operators can re-run validation before confirming.
"""

from typing import List, Sequence

from parcel_intake.core.models import AIAnalysisResult, Parcel, ParcelStatus
from parcel_intake.core.rules import RuleEngine
from parcel_intake.observability import metrics
from parcel_intake.observability.logger import get_logger

logger = get_logger(__name__)

ISSUE_SEPARATOR = " & "
DEFAULT_AI_ISSUE = "AI review flagged this parcel"


def apply_corrections(
    parcels: Sequence[Parcel],
    result: AIAnalysisResult,
    engine: RuleEngine | None = None,
) -> List[Parcel]:
    """
    Overlay AI corrections onto ``parcels``.

    - Corrected parcel: address replaced when a suggestion is given, status
      set to WARNING, issue appended to any existing message with " & ".
    - Uncorrected parcel: PENDING becomes VALID, anything else is kept.

    Args:
        parcels: Current parcel list
        result: Report returned by the analyzer
        engine: When given, used to detect ERROR parcels the overlay masks

    Returns:
        New parcel list in the same order
    """
    updated: List[Parcel] = []
    corrected = 0

    for parcel in parcels:
        correction = result.correction_for(parcel.id)
        if correction is None:
            if parcel.status == ParcelStatus.PENDING:
                parcel = parcel.model_copy(update={"status": ParcelStatus.VALID, "status_message": None})
            updated.append(parcel)
            continue

        issue = correction.issue.strip() or DEFAULT_AI_ISSUE
        message = (
            f"{parcel.status_message}{ISSUE_SEPARATOR}{issue}"
            if parcel.status_message
            else issue
        )
        updated.append(parcel.model_copy(update={
            "status": ParcelStatus.WARNING,
            "status_message": message,
            "address": correction.suggested_address or parcel.address,
        }))
        corrected += 1

    if engine is not None:
        _warn_masked_errors(parcels, updated, engine)

    metrics.increment_counter(metrics.ai_corrections_total, corrected)
    logger.info("Applied AI corrections", extra={"corrected_parcels": corrected})
    return updated


def _warn_masked_errors(before: Sequence[Parcel], after: Sequence[Parcel], engine: RuleEngine) -> None:
    expected = {r.record_id: r for r in engine.validate_batch(after)}
    masked = [
        p.id for p, prev in zip(after, before)
        if p.status == ParcelStatus.WARNING
        and prev.status != ParcelStatus.WARNING
        and expected[p.id].status == ParcelStatus.ERROR
    ]
    if masked:
        logger.warning(
            "AI overlay downgraded parcels the rule engine rates as ERROR",
            extra={"parcel_ids": masked},
        )
