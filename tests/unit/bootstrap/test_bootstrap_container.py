from __future__ import annotations

import logging
from pathlib import Path

import pytest
from prometheus_client import CollectorRegistry

from s3etag.application import observability
from s3etag.bootstrap import (
    InvalidConfigurationError,
    LoggingSettings,
    MetricsSettings,
    configure_logging,
    configure_metrics,
    initialize,
)
from s3etag.infrastructure.metrics import MetricsRecorder
from s3etag.runtime import DEFAULT_CONFIG_ROOT


@pytest.fixture(autouse=True)
def _reset_metrics():
    yield
    configure_metrics(MetricsSettings(provider="noop"))


def test_initialize_returns_etag_settings() -> None:
    context = initialize(DEFAULT_CONFIG_ROOT, environment="test")

    assert context.etag.chunk_size_bytes == 8 * 1024 * 1024
    assert context.etag.workers == 1
    assert observability.get_metrics_recorder() is not MetricsRecorder


def test_initialize_applies_log_level_override() -> None:
    initialize(DEFAULT_CONFIG_ROOT, environment="test", log_level="debug")

    assert logging.getLogger("s3etag").level == logging.DEBUG


def test_initialize_rejects_unknown_log_level() -> None:
    with pytest.raises(InvalidConfigurationError):
        initialize(DEFAULT_CONFIG_ROOT, environment="test", log_level="loud")


def test_configure_logging_applies_dict_config() -> None:
    configure_logging(
        LoggingSettings(
            version=1,
            disable_existing_loggers=False,
            loggers={"s3etag.test": {"level": "DEBUG"}},
        )
    )

    assert logging.getLogger("s3etag.test").level == logging.DEBUG

    with pytest.raises(InvalidConfigurationError):
        configure_logging(
            LoggingSettings(version=1, disable_existing_loggers=False, root={"level": "LOUD"})
        )


def test_prometheus_metrics_register_recorder(tmp_path: Path) -> None:
    registry = CollectorRegistry()
    textfile = tmp_path / "s3etag.prom"

    configure_metrics(
        MetricsSettings(provider="prometheus", textfile=textfile, default_labels={"environment": "ci"}),
        registry_factory=lambda: registry,
    )
    recorder = observability.get_metrics_recorder()
    recorder.increment_verification("match")
    recorder.flush()

    assert recorder is MetricsRecorder
    assert registry.get_sample_value(
        "s3etag_verifications_total", labels={"environment": "ci", "result": "match"}
    ) == 1.0
    assert textfile.exists()


def test_noop_metrics_restore_noop_recorder() -> None:
    configure_metrics(MetricsSettings(provider="prometheus"), registry_factory=CollectorRegistry)
    configure_metrics(MetricsSettings(provider="noop"))

    assert observability.get_metrics_recorder() is not MetricsRecorder
