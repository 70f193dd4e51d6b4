"""
Rule configuration management.

Loads parcel validation rules from YAML files and provides the built-in
rule set used when no file is given.
"""

from pathlib import Path
from typing import Any

import yaml

from parcel_intake.core.models import ParcelStatus
from parcel_intake.core.validators import DEFAULT_ALLOWED_PREFIXES

DUPLICATE_INVOICE_REASON = "Duplicate Invoice ID"
INVALID_PHONE_REASON = "Invalid Operator/Length"
MISSING_FIELDS_REASON = "Missing Required Fields"

RULE_STATUSES = (ParcelStatus.WARNING.value, ParcelStatus.ERROR.value)


class RuleConfigLoader:
    """
    Loads validation rules from YAML configuration files.

    Checks are evaluated in file order and the first failing rule decides a
    parcel's status, so the file is a list rather than a per-field mapping.

    Expected YAML format:
    ```yaml
    checks:
      - reason: Duplicate Invoice ID
        status: WARNING
        rules:
          - field: invoice_id
            type: unique

      - reason: Invalid Operator/Length
        status: ERROR
        rules:
          - field: phone
            type: phone_number
            params:
              length: 11
              allowed_prefixes: ["017", "013", "016", "018", "019", "014", "015"]
    ```
    """

    def __init__(self, config_path: str | Path):
        """
        Initialize the rule config loader.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Rule configuration file not found: {config_path}")

    def load_rules(self) -> list[dict[str, Any]]:
        """
        Load and parse validation rules from YAML file.

        Returns:
            Ordered list of rule dictionaries suitable for RuleEngine

        Raises:
            ValueError: If YAML is invalid or missing required fields
        """
        with open(self.config_path, encoding="utf-8") as f:
            config = yaml.safe_load(f)

        if not config or "checks" not in config:
            raise ValueError("Configuration file must contain 'checks' section")

        checks = config["checks"]
        if not isinstance(checks, list):
            raise ValueError("'checks' must be a list")

        rules = []
        for check_idx, check in enumerate(checks):
            rules.extend(self._parse_check(check, check_idx))

        return rules

    def _parse_check(self, check: dict[str, Any], check_idx: int) -> list[dict[str, Any]]:
        """
        Parse one check (a reason shared by one or more rules).

        Raises:
            ValueError: If check definition is invalid
        """
        reason = check.get("reason")
        if not reason:
            raise ValueError(f"Check #{check_idx} is missing 'reason'")

        status = str(check.get("status", ParcelStatus.ERROR.value)).upper()
        if status not in RULE_STATUSES:
            raise ValueError(f"Invalid status '{status}' for check '{reason}'. Must be one of {RULE_STATUSES}")

        rule_defs = check.get("rules")
        if not isinstance(rule_defs, list) or not rule_defs:
            raise ValueError(f"Check '{reason}' must define a non-empty 'rules' list")

        return [self._parse_rule(rule_def, reason, status, idx) for idx, rule_def in enumerate(rule_defs)]

    def _parse_rule(self, rule_def: dict[str, Any], reason: str, status: str, idx: int) -> dict[str, Any]:
        if "field" not in rule_def:
            raise ValueError(f"Rule #{idx} of check '{reason}' is missing 'field'")
        if "type" not in rule_def:
            raise ValueError(f"Rule for field '{rule_def['field']}' is missing 'type'")

        field_name = rule_def["field"]
        rule_type = rule_def["type"]

        return {
            "rule_name": rule_def.get("name", f"{field_name}_{rule_type}"),
            "rule_type": rule_type,
            "field_name": field_name,
            "parameters": rule_def.get("params", rule_def.get("parameters", {})) or {},
            "status": status,
            "reason": reason,
            "enabled": rule_def.get("enabled", True),
        }


class RuleConfigBuilder:
    """
    Programmatically build rule configurations (built-in defaults and tests).
    """

    def __init__(self):
        """Initialize empty rule configuration."""
        self.rules: list[dict[str, Any]] = []

    def _add(
        self,
        rule_name: str,
        rule_type: str,
        field_name: str,
        parameters: dict[str, Any],
        reason: str,
        status: str,
    ) -> "RuleConfigBuilder":
        self.rules.append({
            "rule_name": rule_name,
            "rule_type": rule_type,
            "field_name": field_name,
            "parameters": parameters,
            "status": status,
            "reason": reason,
            "enabled": True,
        })
        return self

    def add_unique(
        self,
        field_name: str,
        reason: str = DUPLICATE_INVOICE_REASON,
        status: str = ParcelStatus.WARNING.value,
    ) -> "RuleConfigBuilder":
        """Add a cross-record uniqueness rule."""
        return self._add(f"{field_name}_unique", "unique", field_name, {}, reason, status)

    def add_phone_number(
        self,
        field_name: str,
        allowed_prefixes: tuple[str, ...] = DEFAULT_ALLOWED_PREFIXES,
        length: int = 11,
        reason: str = INVALID_PHONE_REASON,
        status: str = ParcelStatus.ERROR.value,
    ) -> "RuleConfigBuilder":
        """Add a phone length/operator rule."""
        params = {"allowed_prefixes": list(allowed_prefixes), "length": length}
        return self._add(f"{field_name}_phone_number", "phone_number", field_name, params, reason, status)

    def add_required_field(
        self,
        field_name: str,
        reason: str = MISSING_FIELDS_REASON,
        status: str = ParcelStatus.ERROR.value,
    ) -> "RuleConfigBuilder":
        """Add a required field rule."""
        return self._add(f"{field_name}_required", "required_field", field_name, {}, reason, status)

    def add_range(
        self,
        field_name: str,
        min_value: float | None = None,
        max_value: float | None = None,
        min_exclusive: float | None = None,
        reason: str = MISSING_FIELDS_REASON,
        status: str = ParcelStatus.ERROR.value,
    ) -> "RuleConfigBuilder":
        """Add a range validation rule."""
        params = {}
        if min_value is not None:
            params["min"] = min_value
        if max_value is not None:
            params["max"] = max_value
        if min_exclusive is not None:
            params["min_exclusive"] = min_exclusive
        return self._add(f"{field_name}_range", "range", field_name, params, reason, status)

    def build(self) -> list[dict[str, Any]]:
        """Build and return the rule configuration."""
        return self.rules


def build_default_rules() -> list[dict[str, Any]]:
    """
    Built-in parcel rules in priority order.

    1. duplicate invoice id (WARNING)
    2. phone length/operator (ERROR)
    3. invoice id, recipient, address present and weight > 0 (ERROR)
    """
    return (
        RuleConfigBuilder()
        .add_unique("invoice_id")
        .add_phone_number("phone")
        .add_required_field("invoice_id")
        .add_required_field("recipient_name")
        .add_required_field("address")
        .add_range("weight", min_exclusive=0)
        .build()
    )
