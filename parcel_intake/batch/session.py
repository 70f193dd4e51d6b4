"""
Interactive review session over one uploaded parcel file.

The session owns the parcel list. Every load, edit and removal replaces the
list wholesale with a fresh rule-engine evaluation, so statuses always match
the current contents. It is single-threaded; a later load or AI review
simply overwrites the state left by an earlier one.
"""

from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence

from parcel_intake.analysis import ParcelAnalyzer, analyze_safely, apply_corrections
from parcel_intake.batch.pipeline import IngestionError, IngestionPipeline, IngestionReport
from parcel_intake.batch.record_builder import normalize_phone, parse_amount, parse_weight
from parcel_intake.batch.writers import BatchAssembler, blocking_reasons, duplicate_invoice_ids, has_errors
from parcel_intake.core.models import AIAnalysisResult, BulkUploadBatch, Parcel
from parcel_intake.core.rules import count_statuses
from parcel_intake.observability import metrics
from parcel_intake.observability.logger import get_logger

logger = get_logger(__name__)

BatchCallback = Callable[[BulkUploadBatch], None]

EDITABLE_FIELDS = (
    "invoice_id",
    "recipient_name",
    "phone",
    "address",
    "cod_amount",
    "weight",
    "note",
    "service_type",
)


class ParcelNotFoundError(LookupError):
    """Raised when an edit or removal names a parcel that is not loaded."""

    def __init__(self, parcel_id: str):
        self.parcel_id = parcel_id
        super().__init__(f"No parcel with id '{parcel_id}'")


class ReviewSession:
    """
    Upload → review → confirm workflow for one merchant file.

    Usage:
        session = ReviewSession(on_batch_complete=publish)
        session.load_file("orders.csv")
        session.update_parcel(parcel_id, phone="+880 1712-345678")
        session.remove_parcel(other_id)
        batch = session.confirm()
    """

    def __init__(
        self,
        pipeline: Optional[IngestionPipeline] = None,
        on_batch_complete: Optional[BatchCallback] = None,
        assembler: Optional[BatchAssembler] = None,
    ):
        self.pipeline = pipeline or IngestionPipeline()
        self.rule_engine = self.pipeline.rule_engine
        self.on_batch_complete = on_batch_complete
        self.assembler = assembler or BatchAssembler()
        self._parcels: List[Parcel] = []
        self.report: Optional[IngestionReport] = None
        self.ai_result: Optional[AIAnalysisResult] = None
        self.batch: Optional[BulkUploadBatch] = None
        self.upload_error: Optional[str] = None

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def parcels(self) -> tuple[Parcel, ...]:
        return tuple(self._parcels)

    @property
    def has_duplicates(self) -> bool:
        return bool(duplicate_invoice_ids(self._parcels))

    @property
    def has_errors(self) -> bool:
        return has_errors(self._parcels)

    @property
    def can_confirm(self) -> bool:
        return self.batch is None and not blocking_reasons(self._parcels)

    def status_counts(self) -> dict[str, int]:
        return count_statuses(self._parcels)

    def get_parcel(self, parcel_id: str) -> Parcel:
        for parcel in self._parcels:
            if parcel.id == parcel_id:
                return parcel
        raise ParcelNotFoundError(parcel_id)

    def _replace(self, parcels: Sequence[Parcel]) -> None:
        self._parcels = list(parcels)
        metrics.record_status_counts(count_statuses(self._parcels))

    def _ensure_open(self) -> None:
        if self.batch is not None:
            raise RuntimeError("Batch already confirmed; reset the session to start a new upload")

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_file(self, file_path: str | Path) -> IngestionReport:
        return self._load(lambda: self.pipeline.process_file(file_path))

    def load_bytes(self, data: bytes, source: str = "upload") -> IngestionReport:
        return self._load(lambda: self.pipeline.process_bytes(data, source=source))

    def load_text(self, text: str, source: str = "text") -> IngestionReport:
        return self._load(lambda: self.pipeline.process_text(text, source=source))

    def _load(self, ingest: Callable[[], IngestionReport]) -> IngestionReport:
        """
        Replace the session contents with a freshly ingested file.

        On IngestionError the session is reset to "no data loaded", the
        operator message is kept in ``upload_error`` and the error re-raised.
        """
        self.reset()
        try:
            report = ingest()
        except IngestionError as e:
            self.upload_error = e.message
            logger.warning("Upload rejected", extra={"reason": e.message})
            raise
        self.report = report
        self._replace(report.parcels)
        return report

    def reset(self) -> None:
        """Discard all parcels, AI results and any confirmed batch."""
        self._parcels = []
        self.report = None
        self.ai_result = None
        self.batch = None
        self.upload_error = None
        metrics.record_status_counts(count_statuses(self._parcels))

    # ------------------------------------------------------------------
    # Review
    # ------------------------------------------------------------------

    def revalidate(self) -> List[Parcel]:
        """Re-run the rule engine over the current list."""
        self._replace(self.rule_engine.evaluate(self._parcels))
        return list(self._parcels)

    def update_parcel(self, parcel_id: str, **changes: Any) -> Parcel:
        """
        Edit fields of one parcel and re-validate the whole list.

        Phone values are normalized; numeric fields accept text the same way
        the CSV import does.

        Raises:
            ParcelNotFoundError: If no parcel has ``parcel_id``
            ValueError: If a non-editable field is named
            pydantic.ValidationError: If a value fails model validation
        """
        self._ensure_open()
        unknown = sorted(set(changes) - set(EDITABLE_FIELDS))
        if unknown:
            raise ValueError(f"Fields not editable: {unknown}")

        current = self.get_parcel(parcel_id)
        updates = dict(changes)
        if "phone" in updates:
            updates["phone"] = normalize_phone(str(updates["phone"] or ""))
        if isinstance(updates.get("weight"), str):
            updates["weight"] = parse_weight(updates["weight"])
        if isinstance(updates.get("cod_amount"), str):
            updates["cod_amount"] = parse_amount(updates["cod_amount"])

        # Re-validate field values through the model, statuses are recomputed below
        edited = Parcel.model_validate({
            **current.model_dump(),
            **updates,
            "status_message": None,
            "status": "PENDING",
        })

        self._replace(self.rule_engine.evaluate(
            [edited if p.id == parcel_id else p for p in self._parcels]
        ))
        logger.debug("Parcel updated", extra={"parcel_id": parcel_id, "fields": sorted(changes)})
        return self.get_parcel(parcel_id)

    def remove_parcel(self, parcel_id: str) -> None:
        """
        Remove one parcel and re-validate the rest.

        A sibling that was a duplicate only because of the removed parcel is
        re-checked against the phone and field rules rather than promoted
        straight to VALID.

        Raises:
            ParcelNotFoundError: If no parcel has ``parcel_id``
        """
        self._ensure_open()
        self.get_parcel(parcel_id)
        remaining = [p for p in self._parcels if p.id != parcel_id]
        self._replace(self.rule_engine.evaluate(remaining))
        logger.debug("Parcel removed", extra={"parcel_id": parcel_id, "remaining": len(remaining)})

    def run_ai_review(self, analyzer: ParcelAnalyzer) -> Optional[AIAnalysisResult]:
        """
        Ask the analyzer to review the list and overlay its corrections.

        Analyzer failures yield the static fallback report, which carries no
        corrections and so leaves every parcel untouched. Returns None when
        no parcels are loaded.
        """
        self._ensure_open()
        if not self._parcels:
            return None
        result = analyze_safely(analyzer, self._parcels)
        self._replace(apply_corrections(self._parcels, result, engine=self.rule_engine))
        self.ai_result = result
        return result

    # ------------------------------------------------------------------
    # Confirmation
    # ------------------------------------------------------------------

    def confirm(self) -> BulkUploadBatch:
        """
        Freeze the parcel list into a batch and notify the consumer once.

        Raises:
            BatchBlockedError: While any parcel is ERROR, any invoice id is
                duplicated, or no parcels are loaded
            RuntimeError: If this session already confirmed a batch
        """
        self._ensure_open()
        batch = self.assembler.assemble(self._parcels)
        self.batch = batch
        if self.on_batch_complete is not None:
            self.on_batch_complete(batch)
        return batch
