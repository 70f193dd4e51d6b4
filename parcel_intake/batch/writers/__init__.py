"""
Batch writers: batch assembly, JSON export and the upload template.
"""

from .batch_writer import (
    BatchAssembler,
    BatchBlockedError,
    BatchJsonWriter,
    blocking_reasons,
    duplicate_invoice_ids,
    has_errors,
)
from .template_writer import TEMPLATE_HEADERS, build_template, write_template

__all__ = [
    "BatchAssembler",
    "BatchBlockedError",
    "BatchJsonWriter",
    "blocking_reasons",
    "duplicate_invoice_ids",
    "has_errors",
    "TEMPLATE_HEADERS",
    "build_template",
    "write_template",
]
