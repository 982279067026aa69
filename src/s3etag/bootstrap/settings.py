"""
s3etag の設定モデルと YAML ローダ。

``configs/base.yaml`` に ``configs/envs/<env>.yaml`` を重ねた結果を pydantic で検証する。
環境差分で上書きできるのは base に定義済みのキーのみ。
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import InvalidConfigurationError, MissingConfigurationError

ENVIRONMENT_VARIABLE = "S3ETAG_ENV"


class LoggingSettings(BaseModel):
    """``logging.config.dictConfig`` にそのまま渡す設定。"""

    model_config = ConfigDict(extra="allow")

    version: int


class MetricsSettings(BaseModel):
    """
    メトリクス出力先の設定。

    Attributes:
        provider: ``noop`` または ``prometheus``。
        textfile: prometheus 時に node-exporter textfile collector 向けに書き出すパス。
        default_labels: 全メトリクスに付与するラベル。
    """

    provider: Literal["noop", "prometheus"]
    textfile: Path | None = None
    default_labels: dict[str, str] = Field(default_factory=dict)


class EtagSettings(BaseModel):
    """ETag 計算の実行設定。"""

    model_config = ConfigDict(frozen=True)

    chunk_size_mb: int = Field(gt=0)
    read_size_kb: int = Field(gt=0)
    workers: int = Field(ge=1)

    @property
    def chunk_size_bytes(self) -> int:
        return self.chunk_size_mb * 1024 * 1024

    @property
    def read_size_bytes(self) -> int:
        return self.read_size_kb * 1024


class AppSettings(BaseModel):
    logging: LoggingSettings
    metrics: MetricsSettings
    etag: EtagSettings


def load_settings(config_root: Path, *, environment: str | None = None) -> AppSettings:
    """
    設定ファイルを読み込み、検証済みの AppSettings を返す。

    Args:
        config_root: ``configs`` ディレクトリを含むパス。
        environment: 環境名。省略時は環境変数 ``S3ETAG_ENV`` を参照する。

    Raises:
        MissingConfigurationError: 環境名または設定ファイルが存在しない場合。
        InvalidConfigurationError: YAML の解析・検証に失敗した場合。
    """

    env = environment or os.getenv(ENVIRONMENT_VARIABLE)
    if not env:
        raise MissingConfigurationError(
            f"環境変数 '{ENVIRONMENT_VARIABLE}' が未設定のため、設定をロードできません。"
        )

    configs_dir = config_root.resolve() / "configs"
    base = _read_yaml(configs_dir / "base.yaml")
    overlay = _read_yaml(configs_dir / "envs" / f"{env}.yaml", allow_empty=True)

    try:
        return AppSettings.model_validate(_apply_overlay(base, overlay))
    except ValidationError as exc:
        raise InvalidConfigurationError(f"設定値の検証に失敗しました ({env}):\n{exc}") from exc


def _read_yaml(file_path: Path, *, allow_empty: bool = False) -> Mapping[str, Any]:
    if not file_path.is_file():
        raise MissingConfigurationError(f"設定ファイル ({file_path}) が存在しません。")

    try:
        with file_path.open("r", encoding="utf-8") as fh:
            content = yaml.safe_load(fh)
    except yaml.YAMLError as exc:
        raise InvalidConfigurationError(f"YAML の解析に失敗しました: {file_path}") from exc

    if content is None and allow_empty:
        return {}
    if not isinstance(content, Mapping):
        raise InvalidConfigurationError(
            f"YAML ファイルのトップレベルは Mapping である必要があります: {file_path}"
        )
    return content


def _apply_overlay(base: Mapping[str, Any], overlay: Mapping[str, Any], *, path: str = "") -> dict[str, Any]:
    result: dict[str, Any] = dict(base)
    for key, value in overlay.items():
        if key not in base:
            raise InvalidConfigurationError(
                f"環境差分で未定義の設定キー '{path}{key}' が検出されました。"
                " 先に configs/base.yaml へ定義を追加してください。"
            )
        if isinstance(value, Mapping):
            if not isinstance(base[key], Mapping):
                raise InvalidConfigurationError(
                    f"設定キー '{path}{key}' は base では非マッピング型です。"
                )
            result[key] = _apply_overlay(base[key], value, path=f"{path}{key}.")
        else:
            result[key] = value
    return result
