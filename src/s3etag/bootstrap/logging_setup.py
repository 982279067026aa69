"""
ロギング初期化ロジック。
"""

from __future__ import annotations

import logging
import logging.config

from .exceptions import InvalidConfigurationError
from .settings import LoggingSettings

PACKAGE_LOGGER = "s3etag"


def configure_logging(settings: LoggingSettings, *, level: str | None = None) -> None:
    """
    logging 設定を適用する。

    CLI の標準出力は計算結果専用のため、設定側のハンドラは標準エラー出力へ向けること。
    ``level`` を指定した場合は ``s3etag`` ロガーのレベルのみを上書きする。
    """

    try:
        logging.config.dictConfig(settings.model_dump())
        if level is not None:
            logging.getLogger(PACKAGE_LOGGER).setLevel(level.upper())
    except (ValueError, TypeError, AttributeError) as exc:
        raise InvalidConfigurationError(f"logging 設定の適用に失敗しました: {exc}") from exc
