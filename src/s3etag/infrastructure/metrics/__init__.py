"""
メトリクス関連の公開API。
"""

from .recorder import MetricsRecorder

__all__ = ["MetricsRecorder"]
