"""
ユースケース群。
"""

from .etag import (
    EtagComputation,
    EtagService,
    EtagServiceError,
    EtagSourceNotFoundError,
    EtagSourceReadError,
    EtagVerification,
    normalize_etag,
)

__all__ = [
    "EtagComputation",
    "EtagService",
    "EtagServiceError",
    "EtagSourceNotFoundError",
    "EtagSourceReadError",
    "EtagVerification",
    "normalize_etag",
]
