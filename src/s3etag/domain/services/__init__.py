"""
ドメインサービス群。
"""

from .chunked_digest import (
    DEFAULT_CHUNK_SIZE,
    ChunkedDigestContext,
    DigestFinalizedError,
    InvalidChunkSizeError,
    compute,
    compute_with_chunk_size,
)

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "ChunkedDigestContext",
    "DigestFinalizedError",
    "InvalidChunkSizeError",
    "compute",
    "compute_with_chunk_size",
]
