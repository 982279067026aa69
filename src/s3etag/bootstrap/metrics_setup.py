"""
メトリクス初期化ロジック。
"""

from __future__ import annotations

from typing import Callable

from prometheus_client import CollectorRegistry

from s3etag.application.observability import reset_observability, use_metrics_recorder
from s3etag.infrastructure.metrics import MetricsRecorder

from .settings import MetricsSettings


def configure_metrics(
    settings: MetricsSettings,
    *,
    registry_factory: Callable[[], CollectorRegistry] = CollectorRegistry,
) -> None:
    """
    provider に応じて MetricsRecorder を登録する。

    noop の場合はアプリケーション層の recorder を no-op に戻す。
    """

    MetricsRecorder.reset()
    if settings.provider == "noop":
        reset_observability()
        return

    MetricsRecorder.configure(
        registry_factory(),
        default_labels=settings.default_labels,
        textfile=settings.textfile,
    )
    use_metrics_recorder(MetricsRecorder)
