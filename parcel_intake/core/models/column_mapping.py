"""
ColumnMapping model describing how CSV columns map onto canonical parcel fields.
"""

from typing import Dict, List

from pydantic import BaseModel, Field

CANONICAL_FIELDS = (
    "invoice_id",
    "recipient_name",
    "phone",
    "address",
    "cod_amount",
    "weight",
    "note",
)


class ColumnMapping(BaseModel):
    """
    Resolved column index per canonical field.

    Attributes:
        indices: Column index for each canonical field
        matched_fields: Fields resolved by header keyword (rest used fallback)
    """

    indices: Dict[str, int]
    matched_fields: List[str] = Field(default_factory=list)

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "indices": {
                    "invoice_id": 0,
                    "recipient_name": 1,
                    "phone": 2,
                    "address": 3,
                    "cod_amount": 4,
                    "weight": 5,
                    "note": 6,
                },
                "matched_fields": ["invoice_id", "recipient_name", "phone"],
            }
        }

    def index_of(self, field_name: str) -> int:
        return self.indices[field_name]

    @property
    def fallback_fields(self) -> List[str]:
        return [f for f in CANONICAL_FIELDS if f not in self.matched_fields]

    @property
    def confidence(self) -> float:
        """Share of canonical fields matched by keyword (0.0-1.0)."""
        return round(len(self.matched_fields) / len(CANONICAL_FIELDS), 2)
