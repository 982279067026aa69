"""
アプリケーション層から利用する観測性ユーティリティ。

Infrastructure 層で実際のメトリクス実装を登録するまでは全て no-op として動作する。
"""

from __future__ import annotations

from typing import Protocol


class MetricsRecorderProtocol(Protocol):
    def observe_digest(self, duration_seconds: float, size_bytes: int, parts: int) -> None: ...

    def increment_verification(self, result: str) -> None: ...

    def flush(self) -> None: ...

    def reset(self) -> None: ...


class _NoopMetricsRecorder(MetricsRecorderProtocol):
    def observe_digest(self, duration_seconds: float, size_bytes: int, parts: int) -> None:  # noqa: D401
        pass

    def increment_verification(self, result: str) -> None:
        pass

    def flush(self) -> None:
        pass

    def reset(self) -> None:
        pass


metrics_recorder: MetricsRecorderProtocol = _NoopMetricsRecorder()


def use_metrics_recorder(recorder: MetricsRecorderProtocol) -> None:
    global metrics_recorder
    metrics_recorder = recorder


def get_metrics_recorder() -> MetricsRecorderProtocol:
    return metrics_recorder


def reset_observability() -> None:
    use_metrics_recorder(_NoopMetricsRecorder())
