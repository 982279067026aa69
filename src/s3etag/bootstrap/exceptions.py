"""
ブートストラップ関連の例外定義。
"""

from __future__ import annotations


class BootstrapError(RuntimeError):
    """設定ロード・初期化処理が発生させる基底例外。"""


class MissingConfigurationError(BootstrapError):
    """環境名や設定ファイルが見つからない。"""


class InvalidConfigurationError(BootstrapError):
    """設定ファイルの内容が不正。"""
