"""
Batch assembly: freezes a reviewed parcel list into a BulkUploadBatch.
"""

from collections import Counter
from pathlib import Path
from typing import List, Sequence

from parcel_intake.core.models import BulkUploadBatch, Parcel, ParcelStatus
from parcel_intake.observability import metrics
from parcel_intake.observability.logger import get_logger

logger = get_logger(__name__)


class BatchBlockedError(Exception):
    """Raised when a parcel list is not ready to be confirmed."""

    def __init__(self, reasons: List[str]):
        self.reasons = reasons
        super().__init__("Batch cannot be confirmed: " + "; ".join(reasons))


def duplicate_invoice_ids(parcels: Sequence[Parcel]) -> List[str]:
    """Non-empty trimmed invoice ids that occur more than once."""
    counts = Counter(p.invoice_id.strip() for p in parcels if p.invoice_id.strip())
    return sorted(inv for inv, n in counts.items() if n > 1)


def has_errors(parcels: Sequence[Parcel]) -> bool:
    return any(p.status == ParcelStatus.ERROR for p in parcels)


def blocking_reasons(parcels: Sequence[Parcel]) -> List[str]:
    """
    Explain why ``parcels`` cannot be confirmed; empty when it can.

    Duplicates are found from the invoice ids themselves, not from statuses,
    so a duplicate stays blocking even after an AI overlay rewrote its status.
    """
    reasons = []
    if not parcels:
        reasons.append("no parcels loaded")
    duplicates = duplicate_invoice_ids(parcels)
    if duplicates:
        reasons.append(f"duplicate invoice ids: {', '.join(duplicates)}")
    error_count = sum(1 for p in parcels if p.status == ParcelStatus.ERROR)
    if error_count:
        reasons.append(f"{error_count} parcel(s) with errors")
    return reasons


class BatchAssembler:
    """
    Bundles a confirmed parcel list into an immutable batch.
    """

    def assemble(self, parcels: Sequence[Parcel]) -> BulkUploadBatch:
        """
        Freeze ``parcels`` into a batch with snapshot counts.

        Raises:
            BatchBlockedError: If the list is empty, has duplicate invoice
                ids, or contains ERROR parcels
        """
        reasons = blocking_reasons(parcels)
        if reasons:
            metrics.increment_counter(metrics.batches_confirmed_total, status="blocked")
            logger.warning("Batch confirmation blocked", extra={"reasons": reasons})
            raise BatchBlockedError(reasons)

        frozen = tuple(parcels)
        batch = BulkUploadBatch(
            total_parcels=len(frozen),
            valid_parcels=sum(1 for p in frozen if p.status == ParcelStatus.VALID),
            error_parcels=sum(1 for p in frozen if p.status == ParcelStatus.ERROR),
            parcels=frozen,
        )

        metrics.increment_counter(metrics.batches_confirmed_total, status="confirmed")
        metrics.observe_histogram(metrics.batch_size, batch.total_parcels)
        logger.info(
            "Batch assembled",
            extra={"batch_id": batch.id, "total_parcels": batch.total_parcels, "valid_parcels": batch.valid_parcels},
        )
        return batch


class BatchJsonWriter:
    """
    Writes a confirmed batch as JSON for the downstream consumer.
    """

    def __init__(self, indent: int = 2):
        self.indent = indent

    def write(self, batch: BulkUploadBatch, output_path: str | Path) -> Path:
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(batch.model_dump_json(indent=self.indent), encoding="utf-8")
        logger.info("Batch written", extra={"batch_id": batch.id, "path": str(path)})
        return path
