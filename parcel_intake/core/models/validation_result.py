"""
ValidationResult model representing the outcome of validating a parcel (ephemeral).
"""

from typing import List

from pydantic import BaseModel, Field, field_validator

from .parcel import ParcelStatus


class ValidationResult(BaseModel):
    """
    Outcome of validating one parcel against the current parcel list.

    Note: ValidationResult is ephemeral; the engine folds it back into the
    parcel's ``status`` and ``status_message``.

    Attributes:
        record_id: Which parcel was validated
        status: Derived status (VALID, WARNING or ERROR)
        status_message: Reason for a non-VALID status
        failed_rules: Rules that failed, first one decides the status
    """

    record_id: str
    status: ParcelStatus
    status_message: str | None = None
    failed_rules: List[str] = Field(default_factory=list)

    @field_validator("failed_rules")
    @classmethod
    def check_status_consistency(cls, v, info):
        """Validate that status=VALID implies failed_rules is empty."""
        if info.data.get("status") == ParcelStatus.VALID and len(v) > 0:
            raise ValueError("status=VALID but failed_rules is not empty")
        return v

    @property
    def passed(self) -> bool:
        return self.status == ParcelStatus.VALID

    class Config:
        json_schema_extra = {
            "example": {
                "record_id": "0b6f7c1e-5d7e-4bb3-9d8e-0c8a1c7f2a10",
                "status": "ERROR",
                "status_message": "Invalid Operator/Length",
                "failed_rules": ["phone_operator_length"],
            }
        }
