"""
BulkUploadBatch model representing a confirmed, frozen set of parcels.
"""

from datetime import datetime
from uuid import uuid4

from pydantic import BaseModel, Field

from .parcel import Parcel


class BulkUploadBatch(BaseModel):
    """
    Immutable snapshot of a confirmed parcel list.

    The aggregate counts are computed once at assembly time and are not
    re-derived from ``parcels`` afterwards.

    Attributes:
        id: Opaque unique identifier (uuid4)
        timestamp: When the batch was confirmed
        total_parcels: Number of parcels in the batch
        valid_parcels: Parcels with VALID status at confirmation
        error_parcels: Parcels with ERROR status at confirmation
        parcels: The frozen parcel list
    """

    id: str = Field(default_factory=lambda: str(uuid4()), min_length=1)
    timestamp: datetime = Field(default_factory=datetime.now)
    total_parcels: int = Field(..., ge=0)
    valid_parcels: int = Field(..., ge=0)
    error_parcels: int = Field(..., ge=0)
    parcels: tuple[Parcel, ...]

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "id": "5a0d6a44-0f5e-4a8e-b8a4-2e0d1f2b9c31",
                "timestamp": "2026-10-16T10:15:00",
                "total_parcels": 2,
                "valid_parcels": 2,
                "error_parcels": 0,
                "parcels": [],
            }
        }
