"""
Builds candidate parcels from tokenized CSV rows.

Parsing here is lenient: out-of-range columns read as empty
strings and unparseable numbers read as zero. Nothing in this module raises
for bad row content; problems surface later as validation statuses.
"""

import re
from typing import List, Sequence

from parcel_intake.core.models import ColumnMapping, Parcel, ParcelStatus
from parcel_intake.core.schema import HeaderInferrer
from parcel_intake.observability.logger import get_logger

logger = get_logger(__name__)

COUNTRY_CODE = "880"
COUNTRY_PREFIX = "88"
INTERNATIONAL_LENGTH = 13
SUBSCRIBER_LENGTH = 10
SUBSCRIBER_LEAD_DIGIT = "1"
TRUNK_PREFIX = "0"

_NON_DIGITS = re.compile(r"\D")
_NON_AMOUNT_CHARS = re.compile(r"[^0-9.]")
_LEADING_FLOAT = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

# Rows where all of these are empty carry no shipment and are skipped
IDENTIFYING_FIELDS = ("invoice_id", "recipient_name", "phone", "address")


def normalize_phone(phone: str) -> str:
    """
    Normalize a Bangladeshi phone number to its 11-digit national form.

    >>> normalize_phone("+880 1712-345678")
    '01712345678'
    >>> normalize_phone("1712345678")
    '01712345678'
    """
    cleaned = _NON_DIGITS.sub("", phone)
    if cleaned.startswith(COUNTRY_CODE) and len(cleaned) == INTERNATIONAL_LENGTH:
        cleaned = cleaned[2:]
    elif cleaned.startswith(COUNTRY_PREFIX) and len(cleaned) == INTERNATIONAL_LENGTH:
        cleaned = cleaned[2:]
    elif len(cleaned) == SUBSCRIBER_LENGTH and cleaned.startswith(SUBSCRIBER_LEAD_DIGIT):
        cleaned = TRUNK_PREFIX + cleaned
    return cleaned


def parse_number(text: str) -> float:
    """
    Parse the leading numeric part of ``text``; 0.0 when there is none.

    Trailing garbage is ignored ("1.5kg" -> 1.5). Negative values are
    clamped to 0.0 since weights and amounts cannot be negative.
    """
    match = _LEADING_FLOAT.match(text.strip())
    if not match:
        return 0.0
    try:
        value = float(match.group(0))
    except (ValueError, OverflowError):
        return 0.0
    if value != value or value in (float("inf"), float("-inf")) or value <= 0:
        return 0.0
    return value


def parse_weight(text: str) -> float:
    """Parse a weight, accepting a decimal comma ("1,5" -> 1.5)."""
    return parse_number(text.replace(",", ".", 1))


def parse_amount(text: str) -> float:
    """Parse a COD amount, dropping currency symbols and thousands separators."""
    return parse_number(_NON_AMOUNT_CHARS.sub("", text))


def cell(row: Sequence[str], index: int) -> str:
    """Return the trimmed value at ``index``, or "" when out of range."""
    if 0 <= index < len(row):
        value = row[index]
        return "" if value is None else str(value).strip()
    return ""


class RecordBuilder:
    """
    Turns a header row plus data rows into PENDING parcels.

    Each parcel gets a fresh id; statuses are assigned afterwards by the
    rule engine.
    """

    def __init__(self, inferrer: HeaderInferrer | None = None):
        self.inferrer = inferrer or HeaderInferrer()

    def build(self, rows: Sequence[Sequence[str]]) -> List[Parcel]:
        """
        Build parcels from a full tokenized file.

        Args:
            rows: Tokenized rows, header first

        Returns:
            Parcels for every data row that carries a shipment
        """
        if not rows:
            return []
        mapping = self.inferrer.infer(rows[0])
        return self.build_records(rows[1:], mapping)

    def build_records(self, rows: Sequence[Sequence[str]], mapping: ColumnMapping) -> List[Parcel]:
        parcels = []
        for row in rows:
            parcel = self.build_record(row, mapping)
            if parcel is not None:
                parcels.append(parcel)

        dropped = len(rows) - len(parcels)
        if dropped:
            logger.info("Dropped empty rows", extra={"dropped_rows": dropped})
        return parcels

    def build_record(self, row: Sequence[str], mapping: ColumnMapping) -> Parcel | None:
        """
        Build one parcel from a data row.

        Returns:
            The parcel, or None when invoice id, name, phone and address are
            all empty
        """
        values = {
            "invoice_id": cell(row, mapping.index_of("invoice_id")),
            "recipient_name": cell(row, mapping.index_of("recipient_name")),
            "phone": normalize_phone(cell(row, mapping.index_of("phone"))),
            "address": cell(row, mapping.index_of("address")),
        }
        if not any(values[f] for f in IDENTIFYING_FIELDS):
            return None

        return Parcel(
            **values,
            cod_amount=parse_amount(cell(row, mapping.index_of("cod_amount"))),
            weight=parse_weight(cell(row, mapping.index_of("weight"))),
            note=cell(row, mapping.index_of("note")),
            service_type="Standard",
            status=ParcelStatus.PENDING,
        )
