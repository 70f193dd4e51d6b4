"""
Unit tests for building parcels from tokenized rows.
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from parcel_intake.batch.record_builder import (
    RecordBuilder,
    cell,
    normalize_phone,
    parse_amount,
    parse_number,
    parse_weight,
)
from parcel_intake.core.models import ParcelStatus
from parcel_intake.core.schema import HeaderInferrer

HEADER = ["Invoice ID", "Recipient Name", "Phone Number", "Full Address", "COD Amount", "Weight (kg)", "Note"]


class TestNormalizePhone:
    """Tests for normalize_phone"""

    @pytest.mark.parametrize("raw, expected", [
        ("+880 1712-345678", "01712345678"),
        ("8801712345678", "01712345678"),
        ("880 1712345678", "01712345678"),
        ("8817123456789", "17123456789"),
        ("1712345678", "01712345678"),
        ("017-1234-5678", "01712345678"),
        ("01712345678", "01712345678"),
        ("(017) 123", "017123"),
        ("", ""),
        ("n/a", ""),
    ])
    def test_examples(self, raw, expected):
        assert normalize_phone(raw) == expected

    def test_country_code_requires_thirteen_digits(self):
        assert normalize_phone("88017123456789") == "88017123456789"

    def test_ten_digits_not_starting_with_one_untouched(self):
        assert normalize_phone("2712345678") == "2712345678"

    @given(st.text())
    def test_property_output_is_digits_only(self, raw):
        assert normalize_phone(raw).isdigit() or normalize_phone(raw) == ""

    @given(st.text(alphabet="0123456789 +-()", max_size=20))
    def test_property_idempotent(self, raw):
        once = normalize_phone(raw)
        assert normalize_phone(once) == once


class TestNumberParsing:
    """Tests for lenient weight and COD parsing"""

    @pytest.mark.parametrize("text, expected", [
        ("1.5", 1.5),
        ("1.5kg", 1.5),
        ("  2 ", 2.0),
        (".5", 0.5),
        ("abc", 0.0),
        ("", 0.0),
        ("-3", 0.0),
        ("1e2", 100.0),
    ])
    def test_parse_number(self, text, expected):
        assert parse_number(text) == expected

    @pytest.mark.parametrize("text, expected", [
        ("1,5", 1.5),
        ("1.5", 1.5),
        ("1,5,0", 1.5),
        ("heavy", 0.0),
    ])
    def test_parse_weight(self, text, expected):
        assert parse_weight(text) == expected

    @pytest.mark.parametrize("text, expected", [
        ("1,500", 1500.0),
        ("Tk 550", 550.0),
        ("৳1,200.50", 1200.5),
        ("free", 0.0),
        ("-200", 200.0),
    ])
    def test_parse_amount(self, text, expected):
        assert parse_amount(text) == expected


class TestCell:
    """Tests for cell"""

    def test_out_of_range_is_empty(self):
        assert cell(["a"], 3) == ""

    def test_value_is_trimmed(self):
        assert cell([" a "], 0) == "a"


class TestRecordBuilder:
    """Tests for RecordBuilder"""

    def test_builds_pending_parcels(self):
        rows = [HEADER, ["INV-1", "Rahim", "+8801712345678", "Dhaka", "1,500", "1,5", "Fragile"]]
        [parcel] = RecordBuilder().build(rows)

        assert parcel.invoice_id == "INV-1"
        assert parcel.recipient_name == "Rahim"
        assert parcel.phone == "01712345678"
        assert parcel.address == "Dhaka"
        assert parcel.cod_amount == 1500.0
        assert parcel.weight == 1.5
        assert parcel.note == "Fragile"
        assert parcel.service_type == "Standard"
        assert parcel.status == ParcelStatus.PENDING

    def test_each_parcel_gets_fresh_id(self):
        rows = [HEADER, ["INV-1", "A", "", "", "", "", ""], ["INV-1", "A", "", "", "", "", ""]]
        parcels = RecordBuilder().build(rows)
        assert parcels[0].id != parcels[1].id

    def test_short_row_reads_missing_columns_as_empty(self):
        [parcel] = RecordBuilder().build([HEADER, ["INV-1", "Rahim"]])
        assert parcel.phone == ""
        assert parcel.weight == 0.0
        assert parcel.note == ""

    def test_row_without_identifying_fields_dropped(self):
        rows = [HEADER, ["", "", "", "", "500", "2", "note only"], ["INV-2", "", "", "", "", "", ""]]
        parcels = RecordBuilder().build(rows)
        assert [p.invoice_id for p in parcels] == ["INV-2"]

    def test_row_with_only_phone_kept(self):
        [parcel] = RecordBuilder().build([HEADER, ["", "", "01712345678"]])
        assert parcel.phone == "01712345678"

    def test_header_only(self):
        assert RecordBuilder().build([HEADER]) == []

    def test_no_rows(self):
        assert RecordBuilder().build([]) == []

    def test_uses_inferred_mapping(self):
        header = ["Mobile", "Client", "Order No"]
        [parcel] = RecordBuilder(HeaderInferrer()).build([header, ["01812345678", "Karim", "INV-9"]])
        assert parcel.invoice_id == "INV-9"
        assert parcel.recipient_name == "Karim"
        assert parcel.phone == "01812345678"
