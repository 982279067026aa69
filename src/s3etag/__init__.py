"""
S3 マルチパートアップロード互換 ETag の計算ライブラリ。
"""

from .domain.services.chunked_digest import (
    DEFAULT_CHUNK_SIZE,
    ChunkedDigestContext,
    compute,
    compute_with_chunk_size,
)
from .domain.value_objects.digest import Digest

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "ChunkedDigestContext",
    "Digest",
    "compute",
    "compute_with_chunk_size",
]
