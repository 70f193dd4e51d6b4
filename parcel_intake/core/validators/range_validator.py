"""
RangeValidator - validates numeric parcel values (weight, COD amount) are within bounds.
"""

from typing import Any

from .base_validator import BaseValidator, ValidationError


class RangeValidator(BaseValidator):
    """
    Validates that a numeric field is within a specified range.

    Parameters:
    - min: Minimum value (inclusive)
    - max: Maximum value (inclusive)
    - min_exclusive: Minimum value (exclusive), e.g. 0 for "weight must be positive"
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.min_value = self.parameters.get("min")
        self.max_value = self.parameters.get("max")
        self.min_exclusive = self.parameters.get("min_exclusive")

        if all(v is None for v in [self.min_value, self.max_value, self.min_exclusive]):
            raise ValueError("RangeValidator requires at least one of: min, max, min_exclusive")

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        """
        Validate that the value is within the specified range.

        A missing value is treated as zero, matching the record builder's
        default for unparseable numbers.

        Raises:
            ValidationError: If value is outside the range
        """
        if value is None:
            value = 0.0

        if isinstance(value, bool) or not isinstance(value, int | float):
            raise ValidationError(
                rule_name="range",
                field_name=self.field_name,
                message=f"Value must be numeric, got {type(value).__name__}"
            )

        if self.min_value is not None and value < self.min_value:
            raise ValidationError(
                rule_name="range",
                field_name=self.field_name,
                message=f"Value {value} is below minimum {self.min_value}"
            )

        if self.min_exclusive is not None and value <= self.min_exclusive:
            raise ValidationError(
                rule_name="range",
                field_name=self.field_name,
                message=f"Value {value} must be greater than {self.min_exclusive}"
            )

        if self.max_value is not None and value > self.max_value:
            raise ValidationError(
                rule_name="range",
                field_name=self.field_name,
                message=f"Value {value} exceeds maximum {self.max_value}"
            )

    @property
    def rule_type(self) -> str:
        return "range"
