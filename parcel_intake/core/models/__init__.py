"""
Core data models for the parcel intake pipeline.

All models use Pydantic for runtime validation and type safety.
"""

from .analysis_result import AIAnalysisResult, ParcelCorrection
from .column_mapping import CANONICAL_FIELDS, ColumnMapping
from .parcel import Parcel, ParcelStatus, ServiceType
from .upload_batch import BulkUploadBatch
from .validation_result import ValidationResult

__all__ = [
    "Parcel",
    "ParcelStatus",
    "ServiceType",
    "BulkUploadBatch",
    "AIAnalysisResult",
    "ParcelCorrection",
    "ColumnMapping",
    "CANONICAL_FIELDS",
    "ValidationResult",
]
