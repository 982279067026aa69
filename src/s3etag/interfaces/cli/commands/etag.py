"""
ETag 関連 CLI コマンド。

終了コード:
    0: 計算成功、または期待値と一致。
    1: 期待値と不一致。
    2: ファイルが存在しない (または引数不正)。
    3: ファイルの読み込みに失敗。
    4: 設定の読み込み・検証に失敗。
"""

from __future__ import annotations

import logging
from pathlib import Path

import typer

from s3etag.application.observability import get_metrics_recorder
from s3etag.application.usecases import (
    EtagSourceNotFoundError,
    EtagSourceReadError,
    normalize_etag,
)
from s3etag.bootstrap import BootstrapContext, BootstrapError, initialize
from s3etag.domain.value_objects.digest import Digest, InvalidDigestFormatError
from s3etag.runtime import DEFAULT_CONFIG_ROOT, build_etag_service

LOGGER = logging.getLogger("s3etag.cli")

EXIT_MISMATCH = 1
EXIT_NOT_FOUND = 2
EXIT_READ_ERROR = 3
EXIT_CONFIG_ERROR = 4

MIB = 1024 * 1024


def compute(
    file: Path = typer.Argument(..., help="ETag を計算するファイル"),
    chunk_size: int | None = typer.Option(
        None, "--chunk-size", "-c", min=1, help="チャンクサイズ (MiB)。省略時は設定値 (既定 8)"
    ),
    expected: str | None = typer.Option(None, "--etag", "-e", help="照合する期待 ETag"),
    upper: bool = typer.Option(False, "--upper", help="16進を大文字で出力"),
    workers: int | None = typer.Option(None, "--workers", min=1, help="チャンクハッシュの並列数"),
    env: str = typer.Option("dev", "--env", envvar="S3ETAG_ENV", help="設定環境名"),
    config_root: Path | None = typer.Option(
        None, "--config-root", help="configs ディレクトリを含むパスを明示的に指定 (テスト用)"
    ),
    log_level: str | None = typer.Option(None, "--log-level", help="s3etag ロガーのレベルを上書き (例: DEBUG)"),
) -> None:
    """
    ファイルの S3 マルチパート ETag を計算する。--etag 指定時は照合結果を TRUE/FALSE で出力する。
    """

    context = _bootstrap(env=env, config_root=config_root, log_level=log_level)
    service = build_etag_service(
        context.etag,
        chunk_size_bytes=chunk_size * MIB if chunk_size is not None else None,
        workers=workers,
    )

    try:
        if expected is None:
            computation = service.compute(file)
            typer.echo(format(computation.digest, "X" if upper else "x"))
            return

        verification = service.verify(file, expected)
        if verification.matched:
            typer.echo("TRUE")
            return
        typer.echo("FALSE")
        raise typer.Exit(code=EXIT_MISMATCH)
    except EtagSourceNotFoundError:
        typer.secho(f"ファイルが見つかりません: {file}", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=EXIT_NOT_FOUND)
    except EtagSourceReadError as exc:
        typer.secho(f"{exc} ({exc.__cause__})", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=EXIT_READ_ERROR)
    finally:
        _flush_metrics()


def parse(
    etag: str = typer.Argument(..., help="正規形式の ETag (前後のダブルクォートは無視)"),
) -> None:
    """
    ETag 文字列をハッシュとパート数に分解して表示する。
    """

    try:
        digest = Digest.parse(normalize_etag(etag))
    except InvalidDigestFormatError as exc:
        raise typer.BadParameter(str(exc), param_hint="ETAG") from exc

    typer.echo(f"hash: {digest.hexdigest()}")
    typer.echo(f"parts: {digest.parts}")


def _bootstrap(*, env: str, config_root: Path | None, log_level: str | None) -> BootstrapContext:
    try:
        return initialize(config_root or DEFAULT_CONFIG_ROOT, environment=env, log_level=log_level)
    except BootstrapError as exc:
        typer.secho(f"設定の初期化に失敗しました: {exc}", err=True, fg=typer.colors.RED)
        raise typer.Exit(code=EXIT_CONFIG_ERROR) from exc


def _flush_metrics() -> None:
    # メトリクスの書き出し失敗で計算結果・終了コードを変えない
    try:
        get_metrics_recorder().flush()
    except OSError as exc:
        LOGGER.warning("Failed to write metrics: %s", exc)
