from __future__ import annotations

from pathlib import Path

import pytest

from s3etag.application.observability import reset_observability, use_metrics_recorder
from s3etag.application.usecases.etag import (
    EtagService,
    EtagSourceNotFoundError,
    EtagSourceReadError,
    normalize_etag,
)
from s3etag.domain.value_objects.digest import Digest
from s3etag.infrastructure.storage import EtagCalculator

HELLO_ETAG = "62109206880d38a4010a98e11243924a-1"


class _RecordingMetrics:
    def __init__(self) -> None:
        self.digests: list[tuple[float, int, int]] = []
        self.verifications: list[str] = []

    def observe_digest(self, duration_seconds: float, size_bytes: int, parts: int) -> None:
        self.digests.append((duration_seconds, size_bytes, parts))

    def increment_verification(self, result: str) -> None:
        self.verifications.append(result)

    def flush(self) -> None:
        pass

    def reset(self) -> None:
        self.digests.clear()
        self.verifications.clear()


class _FailingCalculator:
    def from_path(self, path: Path) -> Digest:
        raise PermissionError(13, "Permission denied", str(path))


@pytest.fixture()
def hello_file(tmp_path: Path) -> Path:
    target = tmp_path / "hello.txt"
    target.write_bytes(b"hello")
    return target


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (HELLO_ETAG, HELLO_ETAG),
        (f'"{HELLO_ETAG}"', HELLO_ETAG),
        (f'  "{HELLO_ETAG}"\n', HELLO_ETAG),
        ('""', ""),
    ],
)
def test_normalize_etag(raw: str, expected: str) -> None:
    assert normalize_etag(raw) == expected


def test_compute_returns_digest_and_records_metrics(hello_file: Path) -> None:
    metrics = _RecordingMetrics()
    service = EtagService(EtagCalculator(), metrics=metrics)

    computation = service.compute(hello_file)

    assert computation.etag == HELLO_ETAG
    assert computation.size_bytes == 5
    assert computation.path == hello_file
    assert computation.elapsed_seconds >= 0
    assert len(metrics.digests) == 1
    assert metrics.digests[0][1:] == (5, 1)


def test_verify_accepts_quoted_etag(hello_file: Path) -> None:
    metrics = _RecordingMetrics()
    service = EtagService(EtagCalculator(), metrics=metrics)

    verification = service.verify(hello_file, f'"{HELLO_ETAG}"')

    assert verification.matched
    assert verification.expected == HELLO_ETAG
    assert metrics.verifications == ["match"]


def test_verify_reports_mismatch(hello_file: Path) -> None:
    metrics = _RecordingMetrics()
    service = EtagService(EtagCalculator(chunk_size=2), metrics=metrics)

    verification = service.verify(hello_file, HELLO_ETAG)

    assert not verification.matched
    assert verification.computation.digest.parts == 3
    assert metrics.verifications == ["mismatch"]


def test_verify_is_case_sensitive(hello_file: Path) -> None:
    service = EtagService(EtagCalculator(), metrics=_RecordingMetrics())

    assert not service.verify(hello_file, HELLO_ETAG.upper()).matched


def test_missing_file_raises_not_found(tmp_path: Path) -> None:
    service = EtagService(EtagCalculator(), metrics=_RecordingMetrics())

    with pytest.raises(EtagSourceNotFoundError):
        service.compute(tmp_path / "missing.bin")


def test_directory_is_read_error_not_missing(tmp_path: Path) -> None:
    service = EtagService(EtagCalculator(), metrics=_RecordingMetrics())

    with pytest.raises(EtagSourceReadError) as excinfo:
        service.compute(tmp_path)

    assert isinstance(excinfo.value.__cause__, OSError)


def test_read_failure_is_wrapped(hello_file: Path) -> None:
    metrics = _RecordingMetrics()
    service = EtagService(_FailingCalculator(), metrics=metrics)

    with pytest.raises(EtagSourceReadError) as excinfo:
        service.compute(hello_file)

    assert isinstance(excinfo.value.__cause__, PermissionError)
    assert metrics.digests == []


def test_service_uses_registered_recorder_by_default(hello_file: Path) -> None:
    metrics = _RecordingMetrics()
    use_metrics_recorder(metrics)
    try:
        EtagService(EtagCalculator()).verify(hello_file, HELLO_ETAG)
    finally:
        reset_observability()

    assert len(metrics.digests) == 1
    assert metrics.verifications == ["match"]
