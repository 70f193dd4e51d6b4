"""
PhoneNumberValidator - validates normalized mobile numbers against length and operator prefixes.
"""

from typing import Any

from .base_validator import BaseValidator, ValidationError

# Bangladeshi mobile operator prefixes (Grameenphone, Banglalink, Robi, Airtel, Teletalk)
DEFAULT_ALLOWED_PREFIXES = ("017", "013", "016", "018", "019", "014", "015")
DEFAULT_LENGTH = 11


def is_valid_phone(
    phone: str,
    allowed_prefixes: tuple[str, ...] = DEFAULT_ALLOWED_PREFIXES,
    length: int = DEFAULT_LENGTH,
) -> bool:
    """Return True when ``phone`` has the national length and an allowed prefix."""
    if len(phone) != length:
        return False
    return any(phone.startswith(prefix) for prefix in allowed_prefixes)


class PhoneNumberValidator(BaseValidator):
    """
    Validates that a normalized phone number is dialable.

    Parameters:
    - length: Required number of digits (default 11)
    - allowed_prefixes: Operator prefixes the number must start with
    """

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.length = int(self.parameters.get("length", DEFAULT_LENGTH))
        prefixes = self.parameters.get("allowed_prefixes", DEFAULT_ALLOWED_PREFIXES)
        if isinstance(prefixes, str) or not prefixes:
            raise ValueError("PhoneNumberValidator requires a non-empty list for 'allowed_prefixes'")
        self.allowed_prefixes = tuple(str(p) for p in prefixes)

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        phone = "" if value is None else str(value)

        if not is_valid_phone(phone, self.allowed_prefixes, self.length):
            raise ValidationError(
                rule_name="phone_number",
                field_name=self.field_name,
                message=f"Value '{phone}' is not a {self.length}-digit number with an allowed operator prefix"
            )

    @property
    def rule_type(self) -> str:
        return "phone_number"
