"""
runtime パッケージ公開 API。
"""

from .dependencies import DEFAULT_CONFIG_ROOT, build_etag_service

__all__ = [
    "DEFAULT_CONFIG_ROOT",
    "build_etag_service",
]
