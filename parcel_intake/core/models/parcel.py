"""
Parcel model representing one shipment row imported from a merchant CSV.
"""

from enum import Enum
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator


class ParcelStatus(str, Enum):
    """Review status assigned by the validation engine."""

    VALID = "VALID"
    WARNING = "WARNING"
    ERROR = "ERROR"
    PENDING = "PENDING"


ServiceType = Literal["Standard", "Express", "Overnight"]


class Parcel(BaseModel):
    """
    A single parcel shipment under review.

    Parcels are immutable: edits, re-validation and AI corrections all
    produce a new instance via ``model_copy``. The ``id`` is generated once
    at build time and carried through every copy.

    Attributes:
        id: Opaque unique identifier (uuid4)
        invoice_id: Merchant invoice reference, may be empty
        recipient_name: Recipient full name
        phone: Normalized digit-only phone number
        address: Delivery address
        cod_amount: Cash-on-delivery amount to collect
        weight: Weight in kilograms
        note: Free-form delivery note
        service_type: Delivery tier
        status: Derived review status
        status_message: Reason for a non-VALID status
    """

    id: str = Field(default_factory=lambda: str(uuid4()), min_length=1)
    invoice_id: str = ""
    recipient_name: str = ""
    phone: str = ""
    address: str = ""
    cod_amount: float = Field(0.0, ge=0.0)
    weight: float = Field(0.0, ge=0.0)
    note: str = ""
    service_type: ServiceType = "Standard"
    status: ParcelStatus = ParcelStatus.PENDING
    status_message: str | None = None

    @field_validator("status_message")
    @classmethod
    def check_status_consistency(cls, v, info):
        """Validate that VALID/PENDING parcels carry no status message."""
        status = info.data.get("status")
        if v and status in (ParcelStatus.VALID, ParcelStatus.PENDING):
            raise ValueError(f"status={status.value} must not carry a status_message")
        return v

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "id": "0b6f7c1e-5d7e-4bb3-9d8e-0c8a1c7f2a10",
                "invoice_id": "INV-1001",
                "recipient_name": "Abdur Rahman",
                "phone": "01712345678",
                "address": "House 12, Road 5, Dhanmondi, Dhaka",
                "cod_amount": 1500.0,
                "weight": 1.5,
                "note": "Handle with care",
                "service_type": "Standard",
                "status": "VALID",
                "status_message": None,
            }
        }
