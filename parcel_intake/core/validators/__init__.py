"""
Validation rule implementations.

Provides validators for required fields, numeric ranges, phone numbers
and cross-record uniqueness.
"""

from .base_validator import BaseValidator, ValidationError
from .phone_validator import DEFAULT_ALLOWED_PREFIXES, PhoneNumberValidator, is_valid_phone
from .range_validator import RangeValidator
from .required_field_validator import RequiredFieldValidator
from .unique_validator import UniqueValueValidator

__all__ = [
    "BaseValidator",
    "ValidationError",
    "RequiredFieldValidator",
    "RangeValidator",
    "PhoneNumberValidator",
    "UniqueValueValidator",
    "DEFAULT_ALLOWED_PREFIXES",
    "is_valid_phone",
]
