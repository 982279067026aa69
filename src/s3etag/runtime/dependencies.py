"""
CLI などの入口から利用する依存関係の組み立て。
"""

from __future__ import annotations

from pathlib import Path

from s3etag.application.usecases import EtagService
from s3etag.bootstrap import EtagSettings
from s3etag.infrastructure.storage import EtagCalculator

DEFAULT_CONFIG_ROOT = Path(__file__).resolve().parents[1]


def build_etag_service(
    settings: EtagSettings,
    *,
    chunk_size_bytes: int | None = None,
    workers: int | None = None,
) -> EtagService:
    """
    設定値 (CLI 引数による上書きを含む) から EtagService を構築する。
    """

    calculator = EtagCalculator(
        chunk_size_bytes if chunk_size_bytes is not None else settings.chunk_size_bytes,
        read_size=settings.read_size_bytes,
        workers=workers if workers is not None else settings.workers,
    )
    return EtagService(calculator)
