"""
Parcel file ingestion, interactive review and batch confirmation.
"""

from .pipeline import IngestionError, IngestionPipeline, IngestionReport
from .readers import CSVReader, FileReader
from .record_builder import RecordBuilder, normalize_phone
from .session import ParcelNotFoundError, ReviewSession
from .writers import BatchAssembler, BatchBlockedError, BatchJsonWriter

__all__ = [
    "IngestionPipeline",
    "IngestionReport",
    "IngestionError",
    "ReviewSession",
    "ParcelNotFoundError",
    "CSVReader",
    "FileReader",
    "RecordBuilder",
    "normalize_phone",
    "BatchAssembler",
    "BatchBlockedError",
    "BatchJsonWriter",
]
