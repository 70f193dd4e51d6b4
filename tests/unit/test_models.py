"""
Unit tests for Pydantic data models.
"""

import pytest
from pydantic import ValidationError

from parcel_intake.core.models import (
    AIAnalysisResult,
    BulkUploadBatch,
    ColumnMapping,
    Parcel,
    ParcelStatus,
    ValidationResult,
)


class TestParcel:
    """Tests for Parcel model"""

    def test_defaults(self):
        parcel = Parcel(invoice_id="INV-1")
        assert parcel.status == ParcelStatus.PENDING
        assert parcel.status_message is None
        assert parcel.service_type == "Standard"
        assert parcel.weight == 0.0
        assert parcel.cod_amount == 0.0
        assert parcel.id

    def test_ids_are_unique(self):
        assert Parcel().id != Parcel().id

    def test_parcel_is_frozen(self):
        parcel = Parcel(invoice_id="INV-1")
        with pytest.raises(ValidationError):
            parcel.invoice_id = "INV-2"

    def test_copy_keeps_id(self):
        parcel = Parcel(invoice_id="INV-1")
        edited = parcel.model_copy(update={"invoice_id": "INV-2"})
        assert edited.id == parcel.id
        assert parcel.invoice_id == "INV-1"

    def test_negative_weight_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            Parcel(weight=-1)
        assert "weight" in str(exc_info.value)

    def test_unknown_service_type_rejected(self):
        with pytest.raises(ValidationError):
            Parcel(service_type="Teleport")

    def test_valid_parcel_cannot_carry_message(self):
        with pytest.raises(ValidationError):
            Parcel(status=ParcelStatus.VALID, status_message="Duplicate Invoice ID")

    def test_error_parcel_carries_message(self):
        parcel = Parcel(status=ParcelStatus.ERROR, status_message="Missing Required Fields")
        assert parcel.status_message == "Missing Required Fields"


class TestBulkUploadBatch:
    """Tests for BulkUploadBatch model"""

    def test_batch_is_frozen(self):
        batch = BulkUploadBatch(total_parcels=0, valid_parcels=0, error_parcels=0, parcels=())
        with pytest.raises(ValidationError):
            batch.total_parcels = 5

    def test_parcels_stored_as_tuple(self):
        parcels = [Parcel(invoice_id="INV-1")]
        batch = BulkUploadBatch(total_parcels=1, valid_parcels=0, error_parcels=0, parcels=parcels)
        assert isinstance(batch.parcels, tuple)
        assert batch.id and batch.timestamp


class TestAIAnalysisResult:
    """Tests for AIAnalysisResult model"""

    def test_accepts_camel_case_keys(self):
        result = AIAnalysisResult.model_validate({
            "summary": "1 issue",
            "recommendations": ["Check addresses"],
            "correctedParcels": [{"id": "p1", "issue": "Vague address", "suggestedAddress": "Road 5, Dhaka"}],
        })
        correction = result.correction_for("p1")
        assert correction.suggested_address == "Road 5, Dhaka"
        assert result.correction_for("missing") is None

    def test_accepts_snake_case_keys(self):
        result = AIAnalysisResult(
            summary="ok",
            corrected_parcels=[{"id": "p1", "issue": "Vague"}],
        )
        assert result.corrected_parcels[0].suggested_address is None

    def test_summary_required(self):
        with pytest.raises(ValidationError):
            AIAnalysisResult.model_validate({"recommendations": []})


class TestColumnMapping:
    """Tests for ColumnMapping model"""

    def test_confidence_and_fallback_fields(self):
        mapping = ColumnMapping(
            indices={"invoice_id": 0, "recipient_name": 1, "phone": 2, "address": 3,
                     "cod_amount": 4, "weight": 5, "note": 6},
            matched_fields=["invoice_id", "recipient_name"],
        )
        assert mapping.confidence == round(2 / 7, 2)
        assert mapping.fallback_fields == ["phone", "address", "cod_amount", "weight", "note"]
        assert mapping.index_of("note") == 6


class TestValidationResult:
    """Tests for ValidationResult model"""

    def test_valid_result_with_failed_rules_rejected(self):
        with pytest.raises(ValidationError):
            ValidationResult(record_id="p1", status=ParcelStatus.VALID, failed_rules=["phone_phone_number"])

    def test_passed_property(self):
        assert ValidationResult(record_id="p1", status=ParcelStatus.VALID).passed is True
        assert ValidationResult(
            record_id="p1", status=ParcelStatus.ERROR, status_message="x", failed_rules=["r"]
        ).passed is False
