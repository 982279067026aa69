"""
ETag の計算・照合ユースケース。
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from s3etag.application.observability import MetricsRecorderProtocol, get_metrics_recorder
from s3etag.domain.value_objects.digest import Digest

LOGGER = logging.getLogger("s3etag.usecases.etag")


class DigestCalculator(Protocol):
    """ファイルからダイジェストを計算するインターフェース。"""

    def from_path(self, path: Path) -> Digest:
        ...


class EtagServiceError(RuntimeError):
    """ETag ユースケースが発生させる基底例外。"""


class EtagSourceNotFoundError(EtagServiceError):
    """対象ファイルが存在しない。"""


class EtagSourceReadError(EtagServiceError):
    """対象ファイルの読み込みに失敗した。"""


@dataclass(frozen=True)
class EtagComputation:
    """
    単一ファイルに対する ETag 計算結果。
    """

    path: Path
    digest: Digest
    size_bytes: int
    elapsed_seconds: float

    @property
    def etag(self) -> str:
        return str(self.digest)


@dataclass(frozen=True)
class EtagVerification:
    """
    期待値との照合結果。
    """

    computation: EtagComputation
    expected: str
    matched: bool


def normalize_etag(text: str) -> str:
    """
    外部から与えられた ETag の前後の空白とダブルクォートを取り除く。

    S3 の API は ETag を ``"..."`` で囲んで返すため、比較前に正規化する。
    """

    return text.strip().strip('"')


class EtagService:
    """
    DigestCalculator を用いてファイルの ETag を計算・照合する。
    """

    def __init__(
        self,
        calculator: DigestCalculator,
        *,
        metrics: MetricsRecorderProtocol | None = None,
    ) -> None:
        self._calculator = calculator
        self._metrics = metrics

    def compute(self, path: Path) -> EtagComputation:
        """
        ファイルの ETag を計算する。

        Raises:
            EtagSourceNotFoundError: ファイルが存在しない場合。
            EtagSourceReadError: 読み込みに失敗した場合。
        """

        if not path.exists():
            raise EtagSourceNotFoundError(f"ファイルが見つかりません: {path}")

        LOGGER.debug("Computing ETag for %s", path)
        start = time.perf_counter()
        try:
            size_bytes = path.stat().st_size
            digest = self._calculator.from_path(path)
        except FileNotFoundError as exc:
            raise EtagSourceNotFoundError(f"ファイルが見つかりません: {path}") from exc
        except OSError as exc:
            raise EtagSourceReadError(f"ファイルの読み込みに失敗しました: {path}") from exc
        elapsed = time.perf_counter() - start

        self._recorder().observe_digest(elapsed, size_bytes, digest.parts)
        LOGGER.info(
            "Computed ETag for %s: %s (%d bytes, %d parts, %.3fs)",
            path,
            digest,
            size_bytes,
            digest.parts,
            elapsed,
        )
        return EtagComputation(path=path, digest=digest, size_bytes=size_bytes, elapsed_seconds=elapsed)

    def verify(self, path: Path, expected: str) -> EtagVerification:
        """
        ファイルの ETag を計算し、期待値と完全一致するか判定する。
        """

        computation = self.compute(path)
        normalized = normalize_etag(expected)
        matched = computation.etag == normalized

        self._recorder().increment_verification("match" if matched else "mismatch")
        if matched:
            LOGGER.info("ETag matched for %s", path)
        else:
            LOGGER.warning(
                "ETag mismatch for %s: expected=%s actual=%s", path, normalized, computation.etag
            )
        return EtagVerification(computation=computation, expected=normalized, matched=matched)

    def _recorder(self) -> MetricsRecorderProtocol:
        return self._metrics if self._metrics is not None else get_metrics_recorder()
