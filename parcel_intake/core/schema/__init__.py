"""
Header inference for mapping CSV columns onto parcel fields.
"""

from .inference import FALLBACK_INDICES, HEADER_KEYWORDS, HeaderInferrer, find_column

__all__ = [
    "HeaderInferrer",
    "HEADER_KEYWORDS",
    "FALLBACK_INDICES",
    "find_column",
]
