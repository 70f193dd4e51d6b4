"""
Validation rule engine and configuration management.
"""

from .rule_config import (
    DUPLICATE_INVOICE_REASON,
    INVALID_PHONE_REASON,
    MISSING_FIELDS_REASON,
    RuleConfigBuilder,
    RuleConfigLoader,
    build_default_rules,
)
from .rule_engine import RuleEngine, count_statuses

__all__ = [
    "RuleEngine",
    "RuleConfigLoader",
    "RuleConfigBuilder",
    "build_default_rules",
    "count_statuses",
    "DUPLICATE_INVOICE_REASON",
    "INVALID_PHONE_REASON",
    "MISSING_FIELDS_REASON",
]
