"""
ETag 計算のメトリクス記録ユーティリティ。
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from prometheus_client import CollectorRegistry, Counter, Histogram, write_to_textfile

_PARTS_BUCKETS = (1.0, 2.0, 5.0, 10.0, 50.0, 100.0, 500.0, 1000.0, 10000.0)


@dataclass
class _MetricHandles:
    digest_duration_seconds: Histogram
    digest_bytes_total: Counter
    digest_parts: Histogram
    verifications_total: Counter


class MetricsRecorder:
    """
    グローバルなメトリクス記録を担当するヘルパ。
    CollectorRegistry が未設定の場合はすべての更新を無視する。

    CLI は短命なプロセスのため、``flush`` で node-exporter の textfile collector
    向けファイルへ書き出す。
    """

    _registry: CollectorRegistry | None = None
    _handles: _MetricHandles | None = None
    _default_labels: Mapping[str, str] = {}
    _textfile: Path | None = None

    @classmethod
    def configure(
        cls,
        registry: CollectorRegistry,
        *,
        default_labels: Mapping[str, str] | None = None,
        textfile: Path | None = None,
    ) -> None:
        cls._registry = registry
        cls._default_labels = dict(default_labels or {})
        cls._textfile = textfile
        base_label_names = tuple(sorted(cls._default_labels))

        cls._handles = _MetricHandles(
            digest_duration_seconds=Histogram(
                "s3etag_digest_duration_seconds",
                "Duration of ETag computations in seconds",
                labelnames=base_label_names,
                registry=registry,
            ),
            digest_bytes_total=Counter(
                "s3etag_digest_bytes",
                "Number of bytes hashed",
                labelnames=base_label_names,
                registry=registry,
            ),
            digest_parts=Histogram(
                "s3etag_digest_parts",
                "Number of chunks per computed ETag",
                labelnames=base_label_names,
                buckets=_PARTS_BUCKETS,
                registry=registry,
            ),
            verifications_total=Counter(
                "s3etag_verifications",
                "Number of ETag verifications by result",
                labelnames=base_label_names + ("result",),
                registry=registry,
            ),
        )

    @classmethod
    def observe_digest(cls, duration_seconds: float, size_bytes: int, parts: int) -> None:
        if not cls._handles:
            return
        labels = cls._merge_labels(None)
        cls._labelled(cls._handles.digest_duration_seconds, labels).observe(duration_seconds)
        if size_bytes > 0:
            cls._labelled(cls._handles.digest_bytes_total, labels).inc(size_bytes)
        cls._labelled(cls._handles.digest_parts, labels).observe(parts)

    @classmethod
    def increment_verification(cls, result: str) -> None:
        if not cls._handles:
            return
        labels = cls._merge_labels({"result": result})
        cls._labelled(cls._handles.verifications_total, labels).inc()

    @classmethod
    def flush(cls) -> None:
        if cls._registry is None or cls._textfile is None:
            return
        cls._textfile.parent.mkdir(parents=True, exist_ok=True)
        write_to_textfile(str(cls._textfile), cls._registry)

    @classmethod
    def reset(cls) -> None:
        cls._registry = None
        cls._handles = None
        cls._default_labels = {}
        cls._textfile = None

    @classmethod
    def _merge_labels(cls, extra: Mapping[str, str] | None) -> Mapping[str, str]:
        if not extra:
            return cls._default_labels
        merged = dict(cls._default_labels)
        merged.update(extra)
        return merged

    @staticmethod
    def _labelled(metric: Counter | Histogram, labels: Mapping[str, str]) -> Counter | Histogram:
        if labels:
            return metric.labels(**labels)
        return metric
