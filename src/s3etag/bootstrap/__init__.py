"""
ブートストラップ関連の公開API。
"""

from .container import BootstrapContext, initialize
from .exceptions import BootstrapError, InvalidConfigurationError, MissingConfigurationError
from .logging_setup import configure_logging
from .metrics_setup import configure_metrics
from .settings import AppSettings, EtagSettings, LoggingSettings, MetricsSettings, load_settings

__all__ = [
    "AppSettings",
    "BootstrapContext",
    "BootstrapError",
    "EtagSettings",
    "InvalidConfigurationError",
    "LoggingSettings",
    "MetricsSettings",
    "MissingConfigurationError",
    "configure_logging",
    "configure_metrics",
    "initialize",
    "load_settings",
]
