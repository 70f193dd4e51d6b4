"""
UniqueValueValidator - flags values that occur more than once across the record list.
"""

from collections import Counter
from typing import Any

from .base_validator import BaseValidator, ValidationError


def _census_key(value: Any) -> str:
    return "" if value is None else str(value).strip()


class UniqueValueValidator(BaseValidator):
    """
    Validates that a field value is unique within the current record list.

    Values are compared after trimming. Empty values are excluded from the
    census and never count as duplicates.

    The census is rebuilt from scratch by ``prepare()`` on every validation
    run, so removing or editing one record can clear or raise the flag on
    its siblings.
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)
        self.counts: Counter[str] = Counter()

    def prepare(self, records: list[dict[str, Any]]) -> None:
        self.counts = Counter(
            key for key in (_census_key(r.get(self.field_name)) for r in records) if key
        )

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        key = _census_key(value)
        if key and self.counts[key] > 1:
            raise ValidationError(
                rule_name="unique",
                field_name=self.field_name,
                message=f"Value '{key}' appears {self.counts[key]} times"
            )

    @property
    def rule_type(self) -> str:
        return "unique"
