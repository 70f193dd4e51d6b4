"""
Header inference for merchant parcel CSVs.

Maps each canonical parcel field onto a column of the header row by
case-insensitive keyword substring matching. Fields with no matching column
fall back to a fixed position, so a file with an unrecognized header still
imports positionally.
"""

from types import MappingProxyType
from typing import Mapping, Sequence

from parcel_intake.core.models import CANONICAL_FIELDS, ColumnMapping
from parcel_intake.observability.logger import get_logger

logger = get_logger(__name__)

# Keyword order matters only for readability; the leftmost matching column wins.
HEADER_KEYWORDS: Mapping[str, tuple[str, ...]] = MappingProxyType({
    "invoice_id": ("invoice", "inv", "id", "sl", "no"),
    "recipient_name": ("name", "recipient", "customer", "receiver", "client"),
    "phone": ("phone", "mobile", "contact", "number", "tel", "cell"),
    "address": ("address", "location", "dest", "place", "area", "full"),
    "cod_amount": ("cod", "cash", "amount", "collect"),
    "weight": ("weight", "kg", "mass", "gm", "gram"),
    "note": ("note", "comment", "instruction", "remarks", "msg"),
})

# Column order of the official template
FALLBACK_INDICES: Mapping[str, int] = MappingProxyType({
    "invoice_id": 0,
    "recipient_name": 1,
    "phone": 2,
    "address": 3,
    "cod_amount": 4,
    "weight": 5,
    "note": 6,
})


def find_column(header_row: Sequence[str], keywords: Sequence[str]) -> int | None:
    """
    Return the index of the first column containing any keyword, else None.

    Args:
        header_row: Tokenized header cells
        keywords: Substrings to look for (compared lower-cased)
    """
    lowered = [k.lower() for k in keywords]
    for idx, cell in enumerate(header_row):
        text = cell.lower().strip()
        if any(k in text for k in lowered):
            return idx
    return None


class HeaderInferrer:
    """
    Infers the column mapping from a header row.

    Never fails: every canonical field always resolves to some index, though
    the index may lie beyond the row's width (the record builder then reads
    an empty string).
    """

    def __init__(
        self,
        keywords: Mapping[str, Sequence[str]] = HEADER_KEYWORDS,
        fallback_indices: Mapping[str, int] = FALLBACK_INDICES,
    ):
        missing = [f for f in CANONICAL_FIELDS if f not in keywords or f not in fallback_indices]
        if missing:
            raise ValueError(f"Keywords and fallback indices required for fields: {missing}")
        self.keywords = keywords
        self.fallback_indices = fallback_indices

    def infer(self, header_row: Sequence[str]) -> ColumnMapping:
        """
        Resolve a column index for every canonical field.

        Args:
            header_row: First tokenized row of the file

        Returns:
            ColumnMapping with indices and the fields matched by keyword
        """
        indices: dict[str, int] = {}
        matched: list[str] = []

        for field_name in CANONICAL_FIELDS:
            found = find_column(header_row, self.keywords[field_name])
            if found is None:
                indices[field_name] = self.fallback_indices[field_name]
            else:
                indices[field_name] = found
                matched.append(field_name)

        mapping = ColumnMapping(indices=indices, matched_fields=matched)

        if mapping.fallback_fields:
            logger.info(
                "Header keywords not found, using positional fallback",
                extra={"fallback_fields": mapping.fallback_fields, "confidence": mapping.confidence},
            )
        else:
            logger.debug("All header fields matched", extra={"indices": indices})

        return mapping
