"""
ストレージ関連の公開API。
"""

from .checksum import DEFAULT_READ_SIZE, EtagCalculator

__all__ = ["DEFAULT_READ_SIZE", "EtagCalculator"]
