"""
CLI 起動時の初期化処理。

設定ロード、ロギング初期化、メトリクス初期化を順に行い、
利用側には検証済みの設定を保持するコンテキストを返す。
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from prometheus_client import CollectorRegistry

from .logging_setup import configure_logging
from .metrics_setup import configure_metrics
from .settings import AppSettings, EtagSettings, load_settings


@dataclass(frozen=True)
class BootstrapContext:
    """初期化済みの設定。"""

    settings: AppSettings

    @property
    def etag(self) -> EtagSettings:
        return self.settings.etag


def initialize(
    config_root: Path,
    *,
    environment: str | None = None,
    log_level: str | None = None,
    registry_factory: Callable[[], CollectorRegistry] = CollectorRegistry,
) -> BootstrapContext:
    """
    Raises:
        BootstrapError: 設定の読み込み・適用に失敗した場合。
    """

    settings = load_settings(config_root, environment=environment)
    configure_logging(settings.logging, level=log_level)
    configure_metrics(settings.metrics, registry_factory=registry_factory)
    return BootstrapContext(settings=settings)
