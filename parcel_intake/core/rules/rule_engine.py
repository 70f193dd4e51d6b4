"""
Rule engine deriving parcel review status from the full parcel list.

The engine is re-run over the whole list after every load, edit and
removal. Duplicate detection depends on the census of every sibling, so
recomputing from scratch is what lets a removal clear a stale duplicate
flag and an edit raise one on a record nobody touched.
"""

from typing import Any, Sequence

from parcel_intake.core.models import Parcel, ParcelStatus, ValidationResult
from parcel_intake.core.rules.rule_config import build_default_rules
from parcel_intake.core.validators import (
    BaseValidator,
    PhoneNumberValidator,
    RangeValidator,
    RequiredFieldValidator,
    UniqueValueValidator,
    ValidationError,
)
from parcel_intake.observability.logger import get_logger

logger = get_logger(__name__)


class RuleEngine:
    """
    Orchestrates validation rules on parcels.

    Rules are evaluated in configuration order; the first failing rule
    decides the parcel's status and status message, later rules are skipped.
    A parcel that passes every rule is VALID.
    """

    VALIDATOR_REGISTRY = {
        "required_field": RequiredFieldValidator,
        "range": RangeValidator,
        "phone_number": PhoneNumberValidator,
        "unique": UniqueValueValidator,
    }

    def __init__(self, rules: list[dict[str, Any]] | None = None):
        """
        Initialize the rule engine with validation rules.

        Args:
            rules: List of rule configurations (defaults to the built-in set),
                   each containing:
                   - rule_name: str
                   - rule_type: str (required_field, range, phone_number, unique)
                   - field_name: str
                   - parameters: Dict[str, Any] (optional)
                   - status: str (WARNING or ERROR)
                   - reason: str (status message shown to the operator)
                   - enabled: bool (default True)
        """
        self.rules = rules if rules is not None else build_default_rules()
        self.validators: list[tuple[str, ParcelStatus, str, BaseValidator]] = []
        self._build_validators()

    def _build_validators(self) -> None:
        """Build validator instances from rule configurations."""
        for rule in self.rules:
            if not rule.get("enabled", True):
                continue

            rule_name = rule["rule_name"]
            rule_type = rule["rule_type"]
            field_name = rule["field_name"]
            parameters = rule.get("parameters", {})
            reason = rule["reason"]

            try:
                status = ParcelStatus(rule.get("status", ParcelStatus.ERROR.value))
            except ValueError:
                raise ValueError(f"Invalid status for rule '{rule_name}': {rule.get('status')}")
            if status not in (ParcelStatus.WARNING, ParcelStatus.ERROR):
                raise ValueError(f"Rule '{rule_name}' must yield WARNING or ERROR, got {status.value}")

            validator_class = self.VALIDATOR_REGISTRY.get(rule_type)
            if not validator_class:
                raise ValueError(f"Unknown rule type: {rule_type}")

            try:
                validator = validator_class(field_name, parameters)
            except Exception as e:
                raise ValueError(f"Failed to create validator for rule '{rule_name}': {e}")
            self.validators.append((rule_name, status, reason, validator))

    def _prepare(self, payloads: list[dict[str, Any]]) -> None:
        for _, _, _, validator in self.validators:
            validator.prepare(payloads)

    def _check(self, record_id: str, payload: dict[str, Any]) -> ValidationResult:
        for rule_name, status, reason, validator in self.validators:
            try:
                validator.validate(payload.get(validator.field_name), payload)
            except ValidationError as e:
                logger.debug(
                    f"Rule '{rule_name}' failed: {e.message}",
                    extra={"record_id": record_id, "rule_name": rule_name},
                )
                return ValidationResult(
                    record_id=record_id,
                    status=status,
                    status_message=reason,
                    failed_rules=[rule_name],
                )

        return ValidationResult(record_id=record_id, status=ParcelStatus.VALID)

    def validate_record(self, parcel: Parcel, parcels: Sequence[Parcel] | None = None) -> ValidationResult:
        """
        Validate one parcel.

        Args:
            parcel: The parcel to validate
            parcels: Full parcel list for cross-record rules (defaults to
                     just ``parcel``)

        Returns:
            ValidationResult with the derived status
        """
        context = list(parcels) if parcels is not None else [parcel]
        self._prepare([p.model_dump() for p in context])
        return self._check(parcel.id, parcel.model_dump())

    def validate_batch(self, parcels: Sequence[Parcel]) -> list[ValidationResult]:
        """
        Validate every parcel against the full list.

        Returns:
            List of ValidationResult objects, one per parcel, in input order
        """
        payloads = [p.model_dump() for p in parcels]
        self._prepare(payloads)
        return [self._check(p.id, payload) for p, payload in zip(parcels, payloads)]

    def evaluate(self, parcels: Sequence[Parcel]) -> list[Parcel]:
        """
        Recompute status and status message for every parcel.

        Pure with respect to its input: returns a new list of new parcel
        instances and leaves ``parcels`` untouched. Running it twice yields
        the same assignments.
        """
        results = self.validate_batch(parcels)
        evaluated = [
            p.model_copy(update={"status": r.status, "status_message": r.status_message})
            for p, r in zip(parcels, results)
        ]

        logger.debug(
            "Validation run complete",
            extra={"parcel_count": len(evaluated), "status_counts": count_statuses(evaluated)},
        )
        return evaluated

    def get_rule_summary(self) -> dict[str, Any]:
        """
        Get summary of loaded rules.

        Returns:
            Dictionary with rule counts and types
        """
        return {
            "total_rules": len(self.validators),
            "rules_by_type": self._count_by_type(),
            "rules_by_status": self._count_by_status(),
        }

    def _count_by_type(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for _, _, _, validator in self.validators:
            rule_type = validator.rule_type
            counts[rule_type] = counts.get(rule_type, 0) + 1
        return counts

    def _count_by_status(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for _, status, _, _ in self.validators:
            counts[status.value] = counts.get(status.value, 0) + 1
        return counts


def count_statuses(parcels: Sequence[Parcel]) -> dict[str, int]:
    """Count parcels per status value."""
    counts = {status.value: 0 for status in ParcelStatus}
    for parcel in parcels:
        counts[parcel.status.value] += 1
    return counts
