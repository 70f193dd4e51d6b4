"""
Ingestion pipeline orchestration.

Coordinates the flow: decode → sniff delimiter → tokenize → infer header →
build records → validate
"""

import time
from pathlib import Path
from typing import Dict, List, NoReturn, Optional

from pydantic import BaseModel

from parcel_intake.batch.readers import CSVReader, FileReader, FileReadError, clean_text, sniff_delimiter
from parcel_intake.batch.record_builder import RecordBuilder
from parcel_intake.core.models import ColumnMapping, Parcel
from parcel_intake.core.rules import RuleConfigLoader, RuleEngine, count_statuses
from parcel_intake.core.schema import HeaderInferrer
from parcel_intake.observability import metrics
from parcel_intake.observability.logger import get_logger, log_operation

logger = get_logger(__name__)

NO_DATA_MESSAGE = "No valid data found. Please use the official template."
UNREADABLE_MESSAGE = "Error processing file. Please check the CSV format."


class IngestionError(Exception):
    """
    Raised when a file yields no usable parcels.

    ``message`` is safe to show to the operator as-is.
    """

    def __init__(self, message: str, cause: Exception | None = None):
        self.message = message
        self.cause = cause
        super().__init__(message)


class IngestionReport(BaseModel):
    """
    Outcome of ingesting one file.

    Attributes:
        parcels: Validated parcels in file order
        mapping: Column mapping inferred from the header row
        delimiter: Delimiter the file was split on
        data_rows: Number of rows after the header
        dropped_rows: Rows skipped because they carried no shipment
        status_counts: Parcels per status after validation
    """

    parcels: List[Parcel]
    mapping: ColumnMapping
    delimiter: str
    data_rows: int
    dropped_rows: int
    status_counts: Dict[str, int]


class IngestionPipeline:
    """
    Turns raw CSV text into validated parcels.

    Flow:
    1. Strip BOM and surrounding whitespace
    2. Sniff the delimiter from the header line
    3. Tokenize into rows
    4. Infer the column mapping from row 0
    5. Build parcels from rows 1..n, dropping empty rows
    6. Run the rule engine over the full list
    """

    def __init__(
        self,
        rule_engine: Optional[RuleEngine] = None,
        validation_rules_path: Optional[str | Path] = None,
        header_inferrer: Optional[HeaderInferrer] = None,
    ):
        """
        Initialize ingestion pipeline.

        Args:
            rule_engine: Engine to validate with (built from rules otherwise)
            validation_rules_path: YAML rules file; built-in rules when None
            header_inferrer: Header inferrer (default keywords when None)
        """
        if rule_engine is None:
            if validation_rules_path is not None:
                rules = RuleConfigLoader(validation_rules_path).load_rules()
                rule_engine = RuleEngine(rules)
            else:
                rule_engine = RuleEngine()
        self.rule_engine = rule_engine
        self.header_inferrer = header_inferrer or HeaderInferrer()
        self.csv_reader = CSVReader()
        self.file_reader = FileReader()
        self.record_builder = RecordBuilder(self.header_inferrer)

    def process_file(self, file_path: str | Path) -> IngestionReport:
        """
        Read and ingest a CSV file from disk.

        Raises:
            IngestionError: If the file cannot be read or yields no parcels
        """
        try:
            text = self.file_reader.read(file_path)
        except FileReadError as e:
            self._fail("unreadable", e)
        return self.process_text(text, source=str(file_path))

    def process_bytes(self, data: bytes, source: str = "upload") -> IngestionReport:
        try:
            text = self.file_reader.decode(data)
        except FileReadError as e:
            self._fail("unreadable", e)
        return self.process_text(text, source=source)

    def process_text(self, text: str, source: str = "text") -> IngestionReport:
        """
        Ingest already-decoded CSV text.

        Raises:
            IngestionError: If no parcels survive the empty-row filter
        """
        start = time.perf_counter()
        with log_operation("Ingesting parcels", logger=logger, source=source):
            text = clean_text(text)
            delimiter = sniff_delimiter(text)
            try:
                rows = self.csv_reader.read_text(text, delimiter)
            except Exception as e:
                self._fail("unreadable", e)

            if len(rows) < 2:
                self._fail("empty")

            mapping = self.header_inferrer.infer(rows[0])
            for field_name in mapping.fallback_fields:
                metrics.increment_counter(metrics.header_fallback_total, field_name=field_name)

            data_rows = rows[1:]
            built = self.record_builder.build_records(data_rows, mapping)
            if not built:
                self._fail("empty")

            parcels = self.rule_engine.evaluate(built)
            status_counts = count_statuses(parcels)

        metrics.increment_counter(metrics.files_ingested_total, status="success")
        metrics.increment_counter(metrics.records_built_total, len(built))
        metrics.increment_counter(metrics.rows_dropped_total, len(data_rows) - len(built))
        metrics.observe_histogram(metrics.ingestion_duration_seconds, time.perf_counter() - start)
        logger.info(
            "Ingestion complete",
            extra={
                "source": source,
                "delimiter": delimiter,
                "parcel_count": len(parcels),
                "mapping_confidence": mapping.confidence,
                "status_counts": status_counts,
            },
        )

        return IngestionReport(
            parcels=parcels,
            mapping=mapping,
            delimiter=delimiter,
            data_rows=len(data_rows),
            dropped_rows=len(data_rows) - len(built),
            status_counts=status_counts,
        )

    def _fail(self, reason: str, cause: Exception | None = None) -> NoReturn:
        metrics.increment_counter(metrics.files_ingested_total, status=reason)
        if cause is not None:
            metrics.record_error(type(cause).__name__, "ingestion")
            raise IngestionError(UNREADABLE_MESSAGE, cause) from cause
        raise IngestionError(NO_DATA_MESSAGE)
