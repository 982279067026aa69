"""
値オブジェクト群。
"""

from .digest import Digest, InvalidDigestFormatError

__all__ = ["Digest", "InvalidDigestFormatError"]
